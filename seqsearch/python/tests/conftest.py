import os
import sys

# Make `import seqsearch` resolve to seqsearch/python/seqsearch, also when
# the package is not installed.
sys.path.insert(
    0, os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
)
