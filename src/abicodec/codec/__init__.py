"""Word-aligned contract ABI codec.

This module provides the type model, layout calculation, encoding and
policy-driven decoding of the head/tail ABI layout.
"""

from __future__ import annotations

from .decoder import decode, decode_sequence
from .encoder import encode, encode_sequence, encode_values
from .layout import head_size, head_words, is_dynamic, sequence_head_words, static_size
from .policy import LEGACY, STRICT, DecoderLimits, DecodingPolicy
from .schema import FieldLayout, StructSchema
from .types import (
    AbiType,
    DynamicArray,
    DynamicBytes,
    FixedArray,
    TupleType,
    ValueKind,
    ValueType,
    parse_type,
    parse_types,
)

__all__ = [
    "encode",
    "encode_sequence",
    "encode_values",
    "decode",
    "decode_sequence",
    "DecodingPolicy",
    "DecoderLimits",
    "STRICT",
    "LEGACY",
    "is_dynamic",
    "head_words",
    "head_size",
    "sequence_head_words",
    "static_size",
    "StructSchema",
    "FieldLayout",
    "AbiType",
    "ValueKind",
    "ValueType",
    "FixedArray",
    "DynamicArray",
    "DynamicBytes",
    "TupleType",
    "parse_type",
    "parse_types",
]
