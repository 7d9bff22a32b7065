#!/usr/bin/env python3

import seqsearch

sequence = seqsearch.Sequence.from_str("example", "banana")
print(sequence.binary_text)

suffix_array = seqsearch.create_suffix_array(sequence)
print(suffix_array)

for i in suffix_array:
    print(sequence.subsequence(int(i), len(sequence)).decode("utf-8"))

index = seqsearch.SuffixIndex(sequence)
print(sorted(index.search("ana")))

"""
The output is:

[ 98  97 110  97 110  97]
[5 3 1 0 4 2]
a
ana
anana
banana
na
nana
[1, 3]
"""
