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

from functools import cmp_to_key
from typing import Callable, Sequence as SequenceLike

import numpy as np

from .datatypes import Sequence

SUFFIX_ARRAY_METHODS = ("sort", "doubling")


def compare_suffixes(
    data: SequenceLike[int], valid_length: int, a: int, b: int
) -> int:
    """Compare the suffixes of ``data`` starting at ``a`` and ``b``.

    The comparison is byte by byte and never looks at ``data[valid_length:]``.
    If one suffix runs out of bytes before a mismatch is found, the shorter
    one is the smaller one.

    Args:
      data:
        Anything indexable returning integers, e.g., a memoryview of bytes.
      valid_length:
        Number of meaningful entries in ``data``.
      a:
        Start of the first suffix, in ``[0, valid_length)``.
      b:
        Start of the second suffix, in ``[0, valid_length)``.
    Returns:
      Return a negative number if suffix ``a`` sorts before suffix ``b``,
      a positive number if it sorts after it, and 0 only if ``a == b``.
    """
    i, j = a, b
    while i < valid_length and j < valid_length:
        x = data[i]
        y = data[j]
        if x != y:
            return -1 if x < y else 1
        i += 1
        j += 1

    if i < valid_length:
        # suffix b ran out first
        return 1
    if j < valid_length:
        return -1
    # Both ran out at the same time, which only happens for a == b.
    # Fall back to the offsets so the order is still deterministic.
    return a - b


def _make_suffix_comparator(
    data: SequenceLike[int], valid_length: int
) -> Callable[[int, int], int]:
    def compare(a: int, b: int) -> int:
        return compare_suffixes(data, valid_length, a, b)

    return compare


def _create_suffix_array_by_sorting(sequence: Sequence) -> np.ndarray:
    n = sequence.valid_length
    compare = _make_suffix_comparator(sequence.view(), n)
    offsets = sorted(range(n), key=cmp_to_key(compare))
    return np.array(offsets, dtype=np.int32)


def _create_suffix_array_by_doubling(sequence: Sequence) -> np.ndarray:
    """Prefix doubling (Manber & Myers) using numpy.

    After the round with step ``k``, ``rank[i]`` is the rank of the first
    ``2 * k`` bytes of suffix ``i``. Positions past the end of the valid
    data get rank -1, which makes a shorter suffix sort before any longer
    suffix it is a prefix of.
    """
    n = sequence.valid_length
    if n == 0:
        return np.zeros(0, dtype=np.int32)

    rank = sequence.binary_text[:n].astype(np.int64)
    k = 1
    while True:
        second = np.full(n, -1, dtype=np.int64)
        if k < n:
            second[: n - k] = rank[k:]

        # np.lexsort uses the last key as the primary key
        order = np.lexsort((second, rank))

        sorted_rank = rank[order]
        sorted_second = second[order]
        is_new_group = np.zeros(n, dtype=np.int64)
        is_new_group[1:] = (sorted_rank[1:] != sorted_rank[:-1]) | (
            sorted_second[1:] != sorted_second[:-1]
        )

        rank = np.empty(n, dtype=np.int64)
        rank[order] = np.cumsum(is_new_group)

        if rank[order[-1]] == n - 1:
            # All ranks are distinct, the order is final
            return order.astype(np.int32)
        k *= 2


def create_suffix_array(sequence: Sequence, method: str = "sort") -> np.ndarray:
    """Create a suffix array from a sequence.

    hint:
      Please refer to https://en.wikipedia.org/wiki/Suffix_array
      for what suffix array is. Different from the above Wikipedia
      article, no sentinel is appended: when a suffix is a prefix of
      another suffix, the shorter one sorts first.

    Args:
      sequence:
        The sequence to index. Only its first ``valid_length`` bytes are used.
      method:
        Either "sort" or "doubling". "sort" sorts all offsets with a
        comparison function that scans the two suffixes byte by byte.
        "doubling" uses numpy prefix doubling, which is much faster on long
        sequences. Both return the same array.
    Returns:
      Returns a read-only suffix array of type ``np.int32``, of shape
      ``(sequence.valid_length,)``. This will consist of some permutation
      of the elements ``0 .. valid_length - 1``.

    **Usage examples**:

        .. literalinclude:: python-api/code/suffix-array.py
    """
    assert sequence.valid_length < np.iinfo(np.int32).max, sequence.valid_length

    if method == "sort":
        suffix_array = _create_suffix_array_by_sorting(sequence)
    elif method == "doubling":
        suffix_array = _create_suffix_array_by_doubling(sequence)
    else:
        raise ValueError(
            f"Unsupported method: {method}. "
            f"Valid values are: {', '.join(SUFFIX_ARRAY_METHODS)}"
        )

    suffix_array.flags.writeable = False
    return suffix_array
