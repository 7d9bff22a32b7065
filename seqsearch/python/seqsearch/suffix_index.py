# Copyright      2023   Xiaomi Corp.       (author: Wei Kang)
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

import logging
import sys
import time
from typing import List, Optional, Set, TextIO, Union

import numpy as np

from .datatypes import Sequence
from .suffix_array import create_suffix_array

Pattern = Union[bytes, bytearray, memoryview, str, np.ndarray]

SEPARATOR = "-" * 73


def _pattern_to_bytes(pattern: Pattern) -> bytes:
    """Convert a pattern to bytes and reject empty ones.

    Strings are encoded with utf-8. Numpy arrays must be 1-D np.uint8.
    """
    if isinstance(pattern, str):
        pattern = pattern.encode("utf-8")
    elif isinstance(pattern, np.ndarray):
        assert pattern.ndim == 1, pattern.ndim
        assert pattern.dtype == np.uint8, pattern.dtype
        pattern = pattern.tobytes()
    elif isinstance(pattern, (bytes, bytearray, memoryview)):
        pattern = bytes(pattern)
    else:
        raise TypeError(
            f"Unsupported pattern type: {type(pattern)}. Expected str, bytes, "
            "bytearray, memoryview or a 1-D np.uint8 array."
        )

    if len(pattern) == 0:
        raise ValueError("The pattern to search for must not be empty.")
    return pattern


def _match_length(
    data: memoryview, valid_length: int, pattern: bytes, pos: int
) -> int:
    """Return the number of leading bytes of ``pattern`` that equal the bytes
    of the suffix starting at ``pos``. Stops at ``valid_length``."""
    m = len(pattern)
    k = 0
    while k < m and pos + k < valid_length and pattern[k] == data[pos + k]:
        k += 1
    return k


def naive_search(sequence: Sequence, pattern: Pattern) -> List[int]:
    """Find all occurrences of ``pattern`` by comparing it at every offset.

    This is the brute-force counterpart of :meth:`SuffixIndex.search`. It needs
    no index and takes O(n * m) time.

    Args:
      sequence:
        The sequence to search in.
      pattern:
        A non-empty pattern.
    Returns:
      Return the start offsets of all occurrences in ascending order.
    """
    pattern = _pattern_to_bytes(pattern)
    data = sequence.view()
    n = sequence.valid_length
    m = len(pattern)
    return [
        pos
        for pos in range(n - m + 1)
        if _match_length(data, n, pattern, pos) == m
    ]


class SuffixIndex:
    """
    A suffix array over a :class:`Sequence` supporting exact substring search.

    The index is built once in the constructor and never modified afterwards,
    so it can be shared between threads without locking. It keeps a reference
    to the sequence; the sequence data is not copied.

    **Usage examples**::

        sequence = Sequence.from_str("test", "AGATAGAGA")
        index = SuffixIndex(sequence)
        assert index.search("GA") == {1, 5, 7}
    """

    def __init__(self, sequence: Sequence, method: str = "sort"):
        """
        Args:
          sequence:
            The sequence to index.
          method:
            How to build the suffix array, see :func:`create_suffix_array`.
        """
        self._sequence = sequence
        self._data = sequence.view()

        start = time.perf_counter()
        self._offsets = create_suffix_array(sequence, method=method)
        logging.debug(
            f"Built suffix array of {sequence.name} ({len(self._offsets)} "
            f"suffixes) with method {method} in "
            f"{time.perf_counter() - start:.3f} seconds"
        )

    @property
    def sequence(self) -> Sequence:
        return self._sequence

    @property
    def offsets(self) -> np.ndarray:
        """The sorted suffix start offsets (a read-only np.int32 array)."""
        return self._offsets

    def __len__(self) -> int:
        return self._offsets.size

    def _matches(self, pattern: bytes, index: int) -> bool:
        pos = int(self._offsets[index])
        return (
            _match_length(self._data, self._sequence.valid_length, pattern, pos)
            == len(pattern)
        )

    def search(self, pattern: Pattern) -> Set[int]:
        """Find all occurrences of ``pattern`` in the sequence.

        A binary search over the suffix array finds one suffix that starts with
        the pattern. All suffixes starting with the pattern are adjacent in the
        suffix array, so the remaining occurrences are found by walking down
        and up from that position until a suffix does not match.

        Args:
          pattern:
            The pattern to search for. A ``str`` is encoded with utf-8.
        Returns:
          Return the set of start offsets ``p`` such that
          ``sequence[p:p + len(pattern)] == pattern``. An empty set is
          returned if there are no occurrences.
        Raises:
          ValueError: if the pattern is empty.
        """
        pattern = _pattern_to_bytes(pattern)
        m = len(pattern)
        n = self._sequence.valid_length
        data = self._data
        offsets = self._offsets

        hits = set()
        lo = 0
        hi = len(offsets) - 1
        while lo <= hi:
            mid = lo + (hi - lo) // 2
            pos = int(offsets[mid])
            k = _match_length(data, n, pattern, pos)

            if k == m:
                hits.add(pos)

                below = mid - 1
                while below >= 0 and self._matches(pattern, below):
                    hits.add(int(offsets[below]))
                    below -= 1

                above = mid + 1
                while above < len(offsets) and self._matches(pattern, above):
                    hits.add(int(offsets[above]))
                    above += 1
                break

            if pos + k == n:
                # The suffix is a proper prefix of the pattern, so it is
                # smaller than every suffix starting with the pattern.
                lo = mid + 1
            elif pattern[k] < data[pos + k]:
                hi = mid - 1
            else:
                lo = mid + 1

        return hits

    def format_suffixes(self, preview_length: int = 50) -> List[str]:
        """Return one line ``"<offset> | <preview>"`` per suffix, in sorted
        order. The preview holds at most ``preview_length`` bytes of the
        suffix.

        Raises:
          ValueError: if ``preview_length`` is negative.
        """
        if preview_length < 0:
            raise ValueError(
                f"preview_length must be non-negative, given {preview_length}"
            )
        lines = []
        for pos in self._offsets:
            pos = int(pos)
            preview = self._sequence.subsequence(pos, preview_length)
            preview = preview.decode("utf-8", errors="replace")
            lines.append(f"{pos:5d} | {preview}")
        return lines

    def print_suffixes(
        self, file: Optional[TextIO] = None, preview_length: int = 50
    ) -> None:
        """Print all suffixes and their offsets, framed by a header.

        Args:
          file:
            Where to print to. Defaults to sys.stdout.
          preview_length:
            Maximum number of bytes of each suffix to show.
        """
        lines = self.format_suffixes(preview_length=preview_length)
        if file is None:
            file = sys.stdout
        print(SEPARATOR, file=file)
        print("Index | Sequence", file=file)
        print(SEPARATOR, file=file)
        for line in lines:
            print(line, file=file)
        print(SEPARATOR, file=file)
