# Copyright      2024   Xiaomi Corp.       (author: Wei Kang)
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
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from .utils import Pathlike

# Lines starting with one of these are not part of the sequence data.
# ">" starts a FASTA header, ";" is the legacy FASTA comment marker.
_HEADER_PREFIX = b">"
_COMMENT_PREFIX = b";"


class LoadError(OSError):
    """Raised when a sequence file cannot be read."""


@dataclass
class Sequence:
    """
    Represents a genetic sequence held in memory as raw bytes.

    The bytes live in a buffer that may be larger than the data it holds:
    only the first ``valid_length`` bytes are meaningful, the rest is
    padding that must never be read.
    """

    # filename or ID
    name: str

    # A 1-D np.uint8 array. binary_text.size is the capacity of the buffer.
    # Only binary_text[:valid_length] contains sequence data.
    binary_text: np.ndarray

    # Number of leading bytes of binary_text that are meaningful.
    valid_length: int

    def __post_init__(self):
        assert isinstance(self.binary_text, np.ndarray), type(self.binary_text)
        assert self.binary_text.ndim == 1, self.binary_text.ndim
        assert self.binary_text.dtype == np.uint8, self.binary_text.dtype
        # A non-contiguous array could only be stored by copying it
        assert self.binary_text.flags.c_contiguous, self.binary_text.strides
        assert 0 <= self.valid_length <= self.binary_text.size, (
            self.valid_length,
            self.binary_text.size,
        )
        # Keep a read-only view so that nobody can modify the data through
        # this object. The memory is shared with the caller's array.
        binary_text = self.binary_text.view()
        binary_text.flags.writeable = False
        self.binary_text = binary_text
        self.valid_length = int(self.valid_length)

    def __len__(self) -> int:
        return self.valid_length

    @property
    def capacity(self) -> int:
        return self.binary_text.size

    @property
    def text(self) -> str:
        """Return Python string representation of the valid bytes decoded as
        UTF-8. Bytes that are not valid UTF-8 are replaced."""
        return bytes(self.view()).decode("utf-8", errors="replace")

    def view(self) -> memoryview:
        """Return a memoryview over the valid bytes.

        No data is copied. Indexing the returned memoryview gives Python
        ints, which is much faster than indexing the numpy array element by
        element.
        """
        return memoryview(self.binary_text)[: self.valid_length]

    def subsequence(self, offset: int, length: int) -> bytes:
        """Return at most ``length`` bytes starting at ``offset``.

        The result is truncated at ``valid_length``, so it is shorter than
        ``length`` near the end of the sequence.

        Args:
          offset:
            Start position, in the range ``[0, valid_length]``.
          length:
            Maximum number of bytes to return. Must be non-negative.
        """
        if not 0 <= offset <= self.valid_length:
            raise IndexError(
                f"offset {offset} is out of range [0, {self.valid_length}]"
            )
        if length < 0:
            raise ValueError(f"length must be non-negative, given {length}")
        end = min(offset + length, self.valid_length)
        return self.binary_text[offset:end].tobytes()

    @staticmethod
    def from_bytes(name: str, b: bytes) -> "Sequence":
        """Construct a Sequence whose capacity equals its valid length."""
        binary_text = np.frombuffer(bytes(b), dtype=np.uint8)
        return Sequence(
            name=name, binary_text=binary_text, valid_length=binary_text.size
        )

    @staticmethod
    def from_str(name: str, s: str) -> "Sequence":
        """Construct a Sequence from a string, encoded with utf-8.

        Args:
          name:
            Name of the returned instance. It can be either a filename or an ID.
          s:
            It contains the sequence, e.g., "AGATAGAGA".
        """
        return Sequence.from_bytes(name, s.encode("utf-8"))

    @staticmethod
    def from_file(filename: Pathlike) -> "Sequence":
        """Load a sequence from a FASTA (or plain) sequence file.

        A buffer as large as the file is allocated and every line of sequence
        data is copied into it with its line terminator and surrounding
        whitespace removed. Header (``>``) and comment (``;``) lines are
        skipped; the first header gives the name of the sequence, otherwise
        the file stem is used.

        Only the first record of a multi-record FASTA file is loaded.

        Raises:
          LoadError: if the file does not exist or cannot be read.
        """
        filename = Path(filename)
        if not filename.is_file():
            raise LoadError(f"No such file: {filename}")

        try:
            raw = filename.read_bytes()
        except OSError as e:
            raise LoadError(f"Failed to read {filename}: {e}") from e

        name = filename.stem
        buffer = np.zeros(len(raw), dtype=np.uint8)
        valid_length = 0
        num_headers = 0
        for line in raw.splitlines():
            if line.startswith(_HEADER_PREFIX):
                num_headers += 1
                if num_headers > 1 or valid_length > 0:
                    logging.warning(
                        f"{filename} contains more than one record, "
                        f"only the first one ({name}) is loaded."
                    )
                    break
                header = line[1:].strip().decode("utf-8", errors="replace")
                if header:
                    name = header.split()[0]
                continue
            if line.startswith(_COMMENT_PREFIX):
                continue
            line = line.strip()
            if not line:
                continue
            buffer[valid_length : valid_length + len(line)] = np.frombuffer(
                line, dtype=np.uint8
            )
            valid_length += len(line)

        logging.debug(
            f"Loaded {valid_length} bytes of sequence {name} from {filename} "
            f"(buffer capacity: {buffer.size})"
        )
        return Sequence(name=name, binary_text=buffer, valid_length=valid_length)
