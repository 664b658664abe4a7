"""Decoding policies.

A DecodingPolicy is the set of rules the decoder enforces. It is passed to
every decode call as an ordinary argument, so strict and legacy decoding can
run side by side in the same process.

Two policies are built in:

- ``STRICT`` rejects dirty padding, booleans other than 0/1, enum ordinals
  out of range and tails that point backwards or into the head.
- ``LEGACY`` masks every value to its logical width and never checks tail
  order. Callers choosing it accept the looser semantics of older decoders:
  ``bool`` words of 2 read as True, ``uint16`` words of 0xffffff read as 0xffff.

Bounds and resource limits are enforced by both.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Optional

from ..exceptions import InvalidEncoding, SchemaError
from .types import WORD_BITS, WORD_SIZE, ValueKind, ValueType


@dataclass(frozen=True)
class DecoderLimits:
    """Safety ceilings applied while decoding untrusted input.

    Attributes:
        max_depth: Maximum nesting of arrays and tuples (default 64)
        max_array_length: Maximum length word accepted for a dynamic array (default 2**20)
        max_elements: Maximum number of array elements decoded in one call,
            across all arrays (default 2**22). Bounds the work done when
            several offsets alias the same tail.
        max_decoded_bytes: Maximum total length of byte strings decoded in one
            call (default 2**25). Aliased byte string tails are charged once
            per reference.
    """

    max_depth: int = 64
    max_array_length: int = 1 << 20
    max_elements: int = 1 << 22
    max_decoded_bytes: int = 1 << 25

    def __post_init__(self) -> None:
        """Validate limit values."""
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be >= 1, got {self.max_depth}")
        if self.max_array_length < 0:
            raise ValueError(f"max_array_length must be >= 0, got {self.max_array_length}")
        if self.max_elements < 0:
            raise ValueError(f"max_elements must be >= 0, got {self.max_elements}")
        if self.max_decoded_bytes < 0:
            raise ValueError(f"max_decoded_bytes must be >= 0, got {self.max_decoded_bytes}")


@dataclass(frozen=True)
class DecodingPolicy:
    """Rules applied by the decoder.

    Attributes:
        name: Label used in log and error messages
        check_cleanup: Reject dirty bits outside the logical width of integers,
            addresses and fixed bytes, and non-zero padding after byte strings
        check_booleans: Reject boolean words other than 0 and 1
        check_enum_range: Reject enum ordinals >= the number of members
        check_tail_order: Reject tails starting inside the head or before the
            end of the previous tail of the same sequence
        exact_length: Reject bytes left over after the last consumed region
        limits: Resource ceilings

    Examples:
        ```python
        from abicodec import STRICT, DecodingPolicy, decode

        decode("uint16[]", data, STRICT)
        decode("uint16[]", data, DecodingPolicy.legacy())
        decode("uint16[]", data, STRICT.replace(exact_length=True))
        ```
    """

    name: str
    check_cleanup: bool = True
    check_booleans: bool = True
    check_enum_range: bool = True
    check_tail_order: bool = True
    exact_length: bool = False
    limits: DecoderLimits = field(default_factory=DecoderLimits)

    @classmethod
    def strict(cls, **overrides: Any) -> DecodingPolicy:
        return cls(name="strict", **overrides)

    @classmethod
    def legacy(cls, **overrides: Any) -> DecodingPolicy:
        options: dict[str, Any] = {
            "check_cleanup": False,
            "check_booleans": False,
            "check_enum_range": False,
            "check_tail_order": False,
        }
        options.update(overrides)
        return cls(name="legacy", **options)

    def replace(self, **changes: Any) -> DecodingPolicy:
        """Copy of this policy with some rules changed."""
        return dataclasses.replace(self, **changes)

    def interpret(self, value_type: ValueType, word: int, position: Optional[int] = None) -> Any:
        """Turn one raw word into a Python value according to this policy.

        Args:
            value_type: Type the word encodes
            word: Unsigned 256-bit word value
            position: Byte position of the word, for error reporting

        Returns:
            int for integers and enums, bool for booleans, bytes for fixed
            bytes and addresses

        Raises:
            InvalidEncoding: If a check enabled on this policy fails
        """
        kind = value_type.kind
        width = value_type.width_bits
        mask = (1 << width) - 1

        if kind is ValueKind.INTEGER:
            if not value_type.signed:
                if self.check_cleanup and word > mask:
                    raise InvalidEncoding(
                        f"Dirty high-order bits in {value_type.canonical} word {word:#x}",
                        position=position,
                    )
                return word & mask
            value = _sign_extend(word & mask, width)
            if self.check_cleanup and value != _sign_extend(word, WORD_BITS):
                raise InvalidEncoding(
                    f"{value_type.canonical} word {word:#x} is not sign-extended",
                    position=position,
                )
            return value

        if kind is ValueKind.BOOLEAN:
            if self.check_booleans and word > 1:
                raise InvalidEncoding(f"Invalid boolean word {word:#x}", position=position)
            return word != 0

        if kind is ValueKind.ENUM:
            if self.check_enum_range and word >= value_type.members:
                raise InvalidEncoding(
                    f"Enum ordinal {word:#x} out of range (only {value_type.members} members)",
                    position=position,
                )
            return word & mask

        if kind is ValueKind.FIXED_BYTES:
            raw = word.to_bytes(WORD_SIZE, "big")
            size = value_type.size
            if self.check_cleanup and any(raw[size:]):
                raise InvalidEncoding(
                    f"Non-zero padding after {value_type.canonical} value",
                    position=position,
                )
            return raw[:size]

        if kind is ValueKind.ADDRESS:
            if self.check_cleanup and word > mask:
                raise InvalidEncoding(
                    f"Dirty high-order bits in {value_type.canonical} word {word:#x}",
                    position=position,
                )
            return (word & mask).to_bytes(width // 8, "big")

        raise SchemaError(f"Unknown value kind: {kind}")

    def check_padding(self, padding: bytes, position: int) -> None:
        """Validate the zero padding that follows a byte string payload.

        Raises:
            InvalidEncoding: If cleanup checks are on and a padding byte is non-zero
        """
        if self.check_cleanup and any(padding):
            raise InvalidEncoding("Non-zero padding after byte string", position=position)

    def check_tail(self, tail_start: int, floor: int) -> None:
        """Validate that a tail does not start before ``floor``.

        ``floor`` is the end of the enclosing head or of the previous tail in
        the same sequence, whichever is later.

        Raises:
            InvalidEncoding: If tail order checks are on and the tail overlaps
        """
        if self.check_tail_order and tail_start < floor:
            raise InvalidEncoding(
                f"Tail at {tail_start} overlaps data ending at {floor}",
                position=tail_start,
            )

    def check_length(self, consumed: int, total: int) -> None:
        """Validate that a decode call consumed the whole buffer.

        Raises:
            InvalidEncoding: If exact length matching is on and bytes are left over
        """
        if self.exact_length and consumed != total:
            raise InvalidEncoding(
                f"{total - consumed} trailing bytes after decoded data",
                position=consumed,
            )


def _sign_extend(value: int, bits: int) -> int:
    """Interpret the low ``bits`` of ``value`` as two's complement."""
    sign_bit = 1 << (bits - 1)
    return (value & (sign_bit - 1)) - (value & sign_bit)


STRICT = DecodingPolicy.strict()
LEGACY = DecodingPolicy.legacy()
