"""abicodec: Contract ABI Codec

A Python library for encoding typed argument lists into the word-aligned
contract ABI head/tail layout, and for decoding untrusted ABI data back into
Python values under an explicit strict or legacy validation policy.

Key Features:
- Immutable type descriptors, or canonical type strings such as "uint16[][]"
- Bounds-checked decoding with resource limits
- Strict and legacy decoding policies usable side by side
- Pydantic-based struct modeling

Quick Start:
    >>> from abicodec import LEGACY, STRICT, decode, encode
    >>>
    >>> data = encode("uint16[][]", [[1], [2, 3]])
    >>> decode("uint16[][]", data)
    [[1], [2, 3]]
    >>> decode("bool", (2).to_bytes(32, "big"), LEGACY)
    True
"""

from __future__ import annotations

__version__ = "0.1.0"

from .codec import (
    LEGACY,
    STRICT,
    AbiType,
    DecoderLimits,
    DecodingPolicy,
    DynamicArray,
    DynamicBytes,
    FixedArray,
    TupleType,
    ValueKind,
    ValueType,
    decode,
    decode_sequence,
    encode,
    encode_sequence,
    encode_values,
    head_size,
    head_words,
    is_dynamic,
    parse_type,
    parse_types,
    static_size,
)
from .codec.types import address, boolean, enum_, fixed_bytes, int_, tuple_of, uint
from .exceptions import (
    AbiCodecError,
    DecodeError,
    EncodeError,
    InvalidEncoding,
    OutOfBounds,
    ResourceLimitExceeded,
    SchemaError,
    TypeMismatch,
)
from .models import (
    AbiField,
    AbiStruct,
    Address,
    Bytes,
    FixedBytes,
    Int,
    Uint,
    decode_struct,
    encode_struct,
)
from .utils import encoded_size, field_offsets, static_size_of

__all__ = [
    # Core API
    "encode",
    "encode_sequence",
    "encode_values",
    "decode",
    "decode_sequence",
    # Policies
    "DecodingPolicy",
    "DecoderLimits",
    "STRICT",
    "LEGACY",
    # Types
    "AbiType",
    "ValueKind",
    "ValueType",
    "FixedArray",
    "DynamicArray",
    "DynamicBytes",
    "TupleType",
    "uint",
    "int_",
    "boolean",
    "fixed_bytes",
    "enum_",
    "address",
    "tuple_of",
    "parse_type",
    "parse_types",
    # Layout
    "is_dynamic",
    "head_words",
    "head_size",
    "static_size",
    # Structs
    "AbiStruct",
    "AbiField",
    "Address",
    "Bytes",
    "FixedBytes",
    "Int",
    "Uint",
    "encode_struct",
    "decode_struct",
    # Sizing
    "encoded_size",
    "static_size_of",
    "field_offsets",
    # Exceptions
    "AbiCodecError",
    "SchemaError",
    "EncodeError",
    "TypeMismatch",
    "DecodeError",
    "OutOfBounds",
    "InvalidEncoding",
    "ResourceLimitExceeded",
    # Version
    "__version__",
]
