"""Exception hierarchy for abicodec.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from AbiCodecError for easy catching of any abicodec-specific error.
"""

from __future__ import annotations

from typing import Optional


class AbiCodecError(Exception):
    """Base exception for all abicodec errors."""

    pass


class SchemaError(AbiCodecError):
    """Raised when a type descriptor or struct model is malformed.

    Examples:
        - Integer width that is not a multiple of 8 in [8, 256]
        - Fixed-bytes size outside [1, 32]
        - Unparseable type string such as ``uint16[``
        - Struct field without an ABI type
    """

    pass


class EncodeError(AbiCodecError):
    """Raised when encoding a value fails.

    Examples:
        - Integer value out of range for its width
        - Enum ordinal outside the declared members
        - Address that does not fit its width
    """

    pass


class TypeMismatch(EncodeError):
    """Raised when a value's shape does not match its type tree.

    This is a programming error on the caller's side, e.g. passing a str where
    bytes are expected or a list of the wrong length for a fixed-size array.
    """

    pass


class DecodeError(AbiCodecError):
    """Raised when decoding binary data fails.

    Attributes:
        position: Byte position in the buffer where the problem was detected,
            or None when it is not tied to a position.
    """

    def __init__(self, message: str, position: Optional[int] = None) -> None:
        super().__init__(message)
        self.position = position


class OutOfBounds(DecodeError):
    """Raised when a read, offset or length would leave the buffer.

    Raised under every decoding policy.
    """

    pass


class InvalidEncoding(DecodeError):
    """Raised by the strict policy on a structural or value violation.

    Examples:
        - Dirty high-order bits in a narrow integer or address
        - Boolean word other than 0 or 1
        - Enum ordinal out of range
        - Tail region pointing backwards or into the head
        - Trailing bytes when exact-length matching was requested
    """

    pass


class ResourceLimitExceeded(DecodeError):
    """Raised when nesting depth, array length or element count exceeds its ceiling.

    Raised under every decoding policy, before anything sized by the input is allocated.
    """

    pass
