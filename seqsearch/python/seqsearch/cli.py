#!/usr/bin/env python3
# Copyright    2024  Xiaomi Corp.        (authors: Wei Kang)
#
# See ../../../LICENSE for clarification regarding multiple authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Index a sequence file and search it for a pattern.

Usage:

  seqsearch ./genome.fa AGATAGAGA
  seqsearch ./genome.fa --print-suffixes true
"""

import argparse
import logging
import time
from pathlib import Path
from typing import List, Optional

from .datatypes import LoadError, Sequence
from .suffix_array import SUFFIX_ARRAY_METHODS
from .suffix_index import SuffixIndex, naive_search
from .utils import (
    LOG_FORMAT,
    AttributeDict,
    get_log_level,
    setup_logger,
    str2bool,
)


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Exact pattern search in a sequence file "
        "using a suffix array."
    )

    parser.add_argument(
        "filename",
        type=Path,
        help="Path to the FASTA file containing the sequence to index.",
    )

    parser.add_argument(
        "pattern",
        type=str,
        nargs="?",
        default=None,
        help="""The pattern to search for. If not given, the index is only
        built (and printed if --print-suffixes is true).
        """,
    )

    parser.add_argument(
        "--method",
        type=str,
        default="sort",
        choices=SUFFIX_ARRAY_METHODS,
        help="How to build the suffix array.",
    )

    parser.add_argument(
        "--print-suffixes",
        type=str2bool,
        default=False,
        help="True to print all the sorted suffixes with their offsets.",
    )

    parser.add_argument(
        "--preview-length",
        type=int,
        default=50,
        help="Maximum number of bytes of each suffix shown by --print-suffixes.",
    )

    parser.add_argument(
        "--naive",
        type=str2bool,
        default=False,
        help="""True to also run a brute-force search and log its duration
        for comparison.
        """,
    )

    parser.add_argument(
        "--log-level",
        type=str,
        default="info",
        help="The log level, e.g., debug, info, warning, error, critical.",
    )

    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="""If given, logs are also written to this file (with a
        timestamp appended to its name).
        """,
    )

    return parser


def get_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    return get_parser().parse_args(argv)


def get_params() -> AttributeDict:
    """Default values of the parameters that are not given on the
    command line."""
    return AttributeDict(
        {
            "not_found_message": "Could not find {pattern} anywhere.",
            "found_message": "Found {pattern} at {offset}",
        }
    )


def run(params: AttributeDict) -> int:
    """Load, index and search as described by ``params``.

    Returns:
      Return the exit status of the process.
    """
    start = time.perf_counter()
    try:
        sequence = Sequence.from_file(params.filename)
    except LoadError as e:
        logging.error(f"{e}")
        return 1
    logging.info(
        f"Loaded {len(sequence)} bytes from {params.filename} in "
        f"{time.perf_counter() - start:.3f} seconds"
    )

    build_start = time.perf_counter()
    index = SuffixIndex(sequence, method=params.method)
    logging.info(
        f"Sorted {len(index)} suffixes in "
        f"{time.perf_counter() - build_start:.3f} seconds"
    )

    if params.print_suffixes:
        try:
            index.print_suffixes(preview_length=params.preview_length)
        except ValueError as e:
            logging.error(f"{e}")
            return 2

    if params.pattern is None:
        return 0

    search_start = time.perf_counter()
    try:
        hits = index.search(params.pattern)
    except ValueError as e:
        logging.error(f"{e}")
        return 2
    logging.info(
        f"Searched for {params.pattern} in "
        f"{time.perf_counter() - search_start:.6f} seconds"
    )

    if params.naive:
        naive_start = time.perf_counter()
        naive_hits = naive_search(sequence, params.pattern)
        logging.info(
            f"Brute-force search for {params.pattern} took "
            f"{time.perf_counter() - naive_start:.6f} seconds"
        )
        if set(naive_hits) != hits:
            logging.warning(
                f"Brute-force search found {len(naive_hits)} occurrences, "
                f"the suffix array found {len(hits)}"
            )

    if hits:
        for offset in sorted(hits):
            print(
                params.found_message.format(
                    pattern=params.pattern, offset=offset
                )
            )
    else:
        print(params.not_found_message.format(pattern=params.pattern))

    logging.info(f"Total time: {time.perf_counter() - start:.3f} seconds")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = get_args(argv)

    if args.log_file is not None:
        setup_logger(args.log_file, log_level=args.log_level)
    else:
        logging.basicConfig(
            format=LOG_FORMAT, level=get_log_level(args.log_level)
        )

    params = get_params()
    params.update(vars(args))
    logging.debug(params)

    return run(params)


if __name__ == "__main__":
    raise SystemExit(main())
