#!/usr/bin/env python3
#
# Copyright      2024  Xiaomi Corp.       (authors: Wei Kang)
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

# To run this single test, use
#
#  python3 ./test_suffix_index.py

import io
import random
import unittest

import numpy as np

from seqsearch import Sequence, SuffixIndex, naive_search


def build_index(s: str, method: str = "sort") -> SuffixIndex:
    return SuffixIndex(Sequence.from_str(name="test", s=s), method=method)


class TestSearch(unittest.TestCase):
    def test_agatagaga(self):
        index = build_index("AGATAGAGA")
        # G is followed by A at offsets 1, 5 and 7
        assert index.search("GA") == {1, 5, 7}, index.search("GA")
        assert index.search(b"GA") == set(naive_search(index.sequence, "GA"))
        assert index.search("AGA") == {0, 4, 6}, index.search("AGA")
        assert index.search("AGATAGAGA") == {0}

    def test_overlapping_occurrences(self):
        index = build_index("AAAA")
        assert index.search("AA") == {0, 1, 2}, index.search("AA")
        assert index.search("A") == {0, 1, 2, 3}
        assert index.search("AAAA") == {0}

    def test_not_found(self):
        index = build_index("ACGT")
        assert index.search("TT") == set()
        # Smaller and larger than every suffix
        assert index.search("AA") == set()
        assert index.search("Z") == set()
        assert index.search("0") == set()

    def test_pattern_longer_than_sequence(self):
        for s in ["A", "ACGT", "AGATAGAGA"]:
            index = build_index(s)
            assert index.search(s + "A") == set(), s
            assert index.search("A" * 20) == set(), s

    def test_single_byte(self):
        index = build_index("A")
        assert index.search("A") == {0}
        assert index.search("C") == set()

    def test_empty_sequence(self):
        index = build_index("")
        assert len(index) == 0
        assert index.search("A") == set()

    def test_empty_pattern(self):
        index = build_index("ACGT")
        with self.assertRaises(ValueError):
            index.search("")
        with self.assertRaises(ValueError):
            index.search(b"")
        with self.assertRaises(ValueError):
            naive_search(index.sequence, "")

    def test_pattern_types(self):
        index = build_index("AGATAGAGA")
        expected = {1, 5, 7}
        assert index.search("GA") == expected
        assert index.search(b"GA") == expected
        assert index.search(bytearray(b"GA")) == expected
        assert index.search(memoryview(b"GA")) == expected
        assert index.search(np.frombuffer(b"GA", dtype=np.uint8)) == expected

    def test_unsupported_pattern_type(self):
        index = build_index("ACGT")
        for pattern in [3, None, ["A", "C"]]:
            with self.assertRaises(TypeError):
                index.search(pattern)
        with self.assertRaises(TypeError):
            naive_search(index.sequence, 3)

    def test_match_may_not_run_into_padding(self):
        buffer = np.frombuffer(b"ACGTACxxxx", dtype=np.uint8)
        sequence = Sequence(name="padded", binary_text=buffer, valid_length=6)
        index = SuffixIndex(sequence)
        assert len(index) == 6
        assert index.search("AC") == {0, 4}
        assert index.search("ACx") == set()
        assert index.search("x") == set()
        assert naive_search(sequence, "ACx") == []

    def test_idempotent(self):
        index = build_index("GATTACAGATTACA")
        first = index.search("ATTA")
        assert first == {1, 8}, first
        for _ in range(3):
            assert index.search("ATTA") == first

    def test_index_does_not_copy_sequence(self):
        sequence = Sequence.from_str(name="test", s="ACGT")
        index = SuffixIndex(sequence)
        assert index.sequence is sequence
        assert not index.offsets.flags.writeable

    def test_random_against_naive_search(self):
        random.seed(1234)
        for method in ["sort", "doubling"]:
            for _ in range(20):
                alphabet = random.choice(["AC", "ACGT"])
                length = random.randint(1, 150)
                s = "".join(random.choice(alphabet) for _ in range(length))
                index = build_index(s, method=method)
                for _ in range(20):
                    m = random.randint(1, 6)
                    if random.random() < 0.5 and m <= length:
                        start = random.randint(0, length - m)
                        pattern = s[start : start + m]
                    else:
                        pattern = "".join(
                            random.choice(alphabet) for _ in range(m)
                        )
                    expected = set(naive_search(index.sequence, pattern))
                    assert index.search(pattern) == expected, (s, pattern)


class TestNaiveSearch(unittest.TestCase):
    def test_naive_search(self):
        sequence = Sequence.from_str(name="test", s="AGATAGAGA")
        assert naive_search(sequence, "GA") == [1, 5, 7]
        assert naive_search(sequence, "AGATAGAGAA") == []
        assert naive_search(sequence, "A") == [0, 2, 4, 6, 8]


class TestListSuffixes(unittest.TestCase):
    def test_format_suffixes(self):
        index = build_index("AGATAGAGA")
        lines = index.format_suffixes()
        assert len(lines) == 9, lines

        offsets = [int(line.split("|")[0]) for line in lines]
        assert offsets == [8, 6, 4, 0, 2, 7, 5, 1, 3], offsets

        previews = [line.split("|")[1].strip() for line in lines]
        assert previews[0] == "A", previews
        assert previews[3] == "AGATAGAGA", previews

    def test_preview_length(self):
        index = build_index("ACGT" * 20)
        for line in index.format_suffixes():
            offset, preview = line.split(" | ")
            assert len(preview) == min(50, 80 - int(offset)), line

        for line in index.format_suffixes(preview_length=3):
            offset, preview = line.split(" | ")
            assert len(preview) == min(3, 80 - int(offset)), line

    def test_negative_preview_length(self):
        index = build_index("GATTACA")
        with self.assertRaises(ValueError):
            index.format_suffixes(preview_length=-1)

        f = io.StringIO()
        with self.assertRaises(ValueError):
            index.print_suffixes(file=f, preview_length=-1)
        assert f.getvalue() == "", f.getvalue()

    def test_print_suffixes(self):
        index = build_index("GATTACA")
        f = io.StringIO()
        index.print_suffixes(file=f)
        lines = f.getvalue().splitlines()
        # 3 header lines, one line per suffix and a trailing separator
        assert len(lines) == 3 + 7 + 1, lines
        assert lines[1] == "Index | Sequence", lines
        assert lines[3].split(" | ")[1] == "A", lines


if __name__ == "__main__":
    unittest.main()
