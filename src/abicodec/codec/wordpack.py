"""Word-level packing and bounded reading utilities.

This module provides the low-level 32-byte word handling for the ABI layout.
All numeric values are big-endian within their word.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..exceptions import OutOfBounds
from .types import WORD_BITS, WORD_SIZE

WORD_MAX = (1 << WORD_BITS) - 1


def padded_length(num_bytes: int) -> int:
    """Round ``num_bytes`` up to the next word boundary."""
    return -(-num_bytes // WORD_SIZE) * WORD_SIZE


class WordPacker:
    """Packs values word by word into a byte buffer.

    Example:
        >>> packer = WordPacker()
        >>> packer.write_uint(42)
        >>> packer.write_bool(True)
        >>> packer.write_fixed_bytes(b"abc")
        >>> len(packer.to_bytes())
        96
    """

    def __init__(self) -> None:
        """Initialize an empty word packer."""
        self._buffer = bytearray()

    def write_uint(self, value: int, num_bits: int = WORD_BITS) -> None:
        """Write an unsigned integer right-aligned and zero-extended in one word.

        Args:
            value: Unsigned integer value to write (must be >= 0)
            num_bits: Logical width the value must fit in (8-256)

        Raises:
            ValueError: If value is negative or doesn't fit in num_bits
        """
        if value < 0:
            raise ValueError(f"write_uint requires non-negative value, got {value}")
        if num_bits < 1 or num_bits > WORD_BITS:
            raise ValueError(f"num_bits must be 1-256, got {num_bits}")

        max_value = (1 << num_bits) - 1
        if value > max_value:
            raise ValueError(f"Value {value} requires more than {num_bits} bits (max: {max_value})")

        self._buffer += value.to_bytes(WORD_SIZE, "big")

    def write_int(self, value: int, num_bits: int = WORD_BITS) -> None:
        """Write a signed integer, sign-extended to the full word.

        Raises:
            ValueError: If value doesn't fit in num_bits using two's complement
        """
        if num_bits < 8 or num_bits > WORD_BITS:
            raise ValueError(f"num_bits must be 8-256 for signed integers, got {num_bits}")

        min_value = -(1 << (num_bits - 1))
        max_value = (1 << (num_bits - 1)) - 1

        if value < min_value or value > max_value:
            raise ValueError(
                f"Value {value} doesn't fit in {num_bits} bits (range: {min_value} to {max_value})"
            )

        self._buffer += value.to_bytes(WORD_SIZE, "big", signed=True)

    def write_bool(self, value: bool) -> None:
        """Write a boolean as the word 0 or 1."""
        self.write_uint(1 if value else 0)

    def write_fixed_bytes(self, data: bytes) -> None:
        """Write up to 32 bytes left-aligned, zero-padded on the right."""
        if len(data) > WORD_SIZE:
            raise ValueError(f"Fixed bytes must be at most {WORD_SIZE} bytes, got {len(data)}")
        self._buffer += bytes(data).ljust(WORD_SIZE, b"\x00")

    def write_padded_bytes(self, data: bytes) -> None:
        """Write raw bytes zero-padded on the right to a word boundary."""
        self._buffer += data
        self._buffer += b"\x00" * (padded_length(len(data)) - len(data))

    def write_raw(self, data: bytes) -> None:
        """Append already-encoded words."""
        if len(data) % WORD_SIZE:
            raise ValueError(f"Raw data must be word aligned, got {len(data)} bytes")
        self._buffer += data

    def byte_length(self) -> int:
        """Return the number of bytes written so far."""
        return len(self._buffer)

    def to_bytes(self) -> bytes:
        """Return the packed bytes."""
        return bytes(self._buffer)


@dataclass(frozen=True)
class WordRegion:
    """A bounded window ``[start, end)`` over an immutable buffer.

    Regions are never mutated; narrowing returns a new region. Every read is
    checked against ``end``, which can never exceed the buffer length.

    Example:
        >>> region = WordRegion.over(data)
        >>> length = region.read_word(0)
        >>> payload = region.narrow(32, 32 + length)
    """

    data: bytes
    start: int
    end: int

    def __post_init__(self) -> None:
        if not 0 <= self.start <= self.end <= len(self.data):
            raise OutOfBounds(
                f"Region [{self.start}, {self.end}) outside buffer of {len(self.data)} bytes",
                position=self.start,
            )

    @classmethod
    def over(cls, data: bytes) -> WordRegion:
        """Region spanning the whole buffer."""
        return cls(bytes(data), 0, len(data))

    def remaining(self, position: int) -> int:
        """Bytes available from ``position`` to the region end."""
        return max(0, self.end - position)

    def require(self, position: int, num_bytes: int) -> None:
        """Check that ``num_bytes`` starting at ``position`` lie within the region.

        Raises:
            OutOfBounds: If any of the bytes would fall outside the region
        """
        if position < self.start or num_bytes > self.end - position:
            raise OutOfBounds(
                f"Need {num_bytes} bytes at {position}, region is [{self.start}, {self.end})",
                position=position,
            )

    def read_word(self, position: int) -> int:
        """Read one big-endian unsigned word.

        Raises:
            OutOfBounds: If the word is not entirely within the region
        """
        self.require(position, WORD_SIZE)
        return int.from_bytes(self.data[position : position + WORD_SIZE], "big")

    def read_bytes(self, position: int, num_bytes: int) -> bytes:
        """Read raw bytes.

        Raises:
            OutOfBounds: If the bytes are not entirely within the region
        """
        self.require(position, num_bytes)
        return self.data[position : position + num_bytes]

    def narrow(self, start: int, end: int) -> WordRegion:
        """Sub-region ``[start, end)``, which must lie inside this region.

        Raises:
            OutOfBounds: If the sub-region is not contained in this one
        """
        if not self.start <= start <= end <= self.end:
            raise OutOfBounds(
                f"Region [{start}, {end}) escapes [{self.start}, {self.end})",
                position=start,
            )
        return WordRegion(self.data, start, end)
