#!/usr/bin/env python3
#
# Copyright (c)  2023  Xiaomi Corporation (author: Wei Kang)

import re

import setuptools


def get_package_version():
    with open("seqsearch/python/seqsearch/__init__.py") as f:
        content = f.read()

    latest_version = re.search(r"__version__ = (.*)", content).group(1)
    latest_version = latest_version.strip("\"'")
    return latest_version


setuptools.setup(
    name="seqsearch",
    version=get_package_version(),
    description="Exact substring search in genetic sequences with suffix arrays",
    python_requires=">=3.7",
    package_dir={
        "seqsearch": "seqsearch/python/seqsearch",
    },
    packages=["seqsearch"],
    install_requires=["numpy"],
    extras_require={
        "test": ["pytest"],
        "doc": ["sphinx", "sphinx_rtd_theme", "sphinx-autodoc-typehints"],
    },
    entry_points={
        "console_scripts": [
            "seqsearch = seqsearch.cli:main",
        ],
    },
)
