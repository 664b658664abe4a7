"""Head/tail encoder.

This module provides the encode functions that turn Python values into the
word-aligned contract ABI layout. A sequence of values (the arguments of a
call, the fields of a tuple, the elements of an array) is encoded as a head
region followed by the tails of its dynamic members, in order. Each dynamic
member's head slot holds the byte offset of its tail, measured from the first
byte of the sequence's head.
"""

from __future__ import annotations

import enum
from typing import Any, Iterable, Sequence, Tuple

from pydantic import BaseModel

from ..exceptions import EncodeError, SchemaError, TypeMismatch
from .layout import sequence_head_words
from .types import (
    WORD_SIZE,
    AbiType,
    DynamicArray,
    DynamicBytes,
    FixedArray,
    TupleType,
    ValueKind,
    ValueType,
    as_type,
    as_types,
)
from .wordpack import WordPacker

_BYTES_LIKE = (bytes, bytearray, memoryview)


def encode(abi_type: AbiType | str, value: Any) -> bytes:
    """Encode a single value as a one-element argument sequence.

    Args:
        abi_type: Type descriptor or canonical type string
        value: Python value matching the type

    Returns:
        Encoded bytes (a multiple of 32)

    Raises:
        TypeMismatch: If the value's shape doesn't match the type
        EncodeError: If a numeric value is out of range for its type

    Examples:
        ```python
        from abicodec import encode

        encode("uint16[3]", [1, 2, 3])      # 3 words, no offset
        encode("uint16[]", [1, 2, 3])       # offset, length, 3 words
        encode("(bool,bytes)", (True, b"hi"))
        ```
    """
    return encode_sequence([(as_type(abi_type), value)])


def encode_values(types: Iterable[AbiType | str] | str, values: Sequence[Any]) -> bytes:
    """Encode call arguments given as parallel type and value lists.

    Raises:
        TypeMismatch: If the number of values doesn't match the number of types
    """
    resolved = as_types(types)
    if len(resolved) != len(values):
        raise TypeMismatch(f"Expected {len(resolved)} values, got {len(values)}")
    return encode_sequence(list(zip(resolved, values)))


def encode_sequence(items: Sequence[Tuple[AbiType, Any]]) -> bytes:
    """Encode ``(type, value)`` pairs as an implicit top-level tuple.

    Args:
        items: Typed values in argument order

    Returns:
        Head region followed by the concatenated tails
    """
    packer = WordPacker()
    _encode_sequence(packer, [(as_type(t), v) for t, v in items])
    return packer.to_bytes()


def _encode_sequence(packer: WordPacker, items: Sequence[Tuple[AbiType, Any]]) -> None:
    """Write the head of ``items`` to ``packer``, followed by their tails."""
    head_bytes = sequence_head_words(t for t, _ in items) * WORD_SIZE
    tails = WordPacker()

    for abi_type, value in items:
        if abi_type.is_dynamic:
            packer.write_uint(head_bytes + tails.byte_length())
            _encode_value(tails, abi_type, value)
        else:
            _encode_value(packer, abi_type, value)

    packer.write_raw(tails.to_bytes())


def _encode_value(packer: WordPacker, abi_type: AbiType, value: Any) -> None:
    """Encode one value in place (static types) or as tail content (dynamic types).

    Raises:
        TypeMismatch: If value shape is wrong
        EncodeError: If value is out of range
    """
    if isinstance(abi_type, ValueType):
        _encode_word(packer, abi_type, value)
        return

    if isinstance(abi_type, DynamicBytes):
        if not isinstance(value, _BYTES_LIKE):
            raise TypeMismatch(f"bytes: expected bytes, got {type(value).__name__}")
        data = bytes(value)
        packer.write_uint(len(data))
        packer.write_padded_bytes(data)
        return

    if isinstance(abi_type, FixedArray):
        elements = _as_list(abi_type, value)
        if len(elements) != abi_type.length:
            raise TypeMismatch(
                f"{abi_type.canonical}: expected {abi_type.length} elements, got {len(elements)}"
            )
        _encode_sequence(packer, [(abi_type.element, e) for e in elements])
        return

    if isinstance(abi_type, DynamicArray):
        elements = _as_list(abi_type, value)
        packer.write_uint(len(elements))
        _encode_sequence(packer, [(abi_type.element, e) for e in elements])
        return

    if isinstance(abi_type, TupleType):
        if isinstance(value, BaseModel):
            # Field order of the model is the declaration order
            value = tuple(getattr(value, name) for name in type(value).model_fields)
        members = _as_list(abi_type, value)
        if len(members) != len(abi_type.fields):
            raise TypeMismatch(
                f"{abi_type.canonical}: expected {len(abi_type.fields)} fields, got {len(members)}"
            )
        _encode_sequence(packer, list(zip(abi_type.fields, members)))
        return

    raise SchemaError(f"Unknown ABI type: {abi_type!r}")


def _as_list(abi_type: AbiType, value: Any) -> list[Any]:
    if isinstance(value, (str, dict, set) + _BYTES_LIKE) or not isinstance(value, Iterable):
        raise TypeMismatch(f"{abi_type.canonical}: expected a sequence, got {type(value).__name__}")
    return list(value)


def _encode_word(packer: WordPacker, value_type: ValueType, value: Any) -> None:
    """Encode a single value type into one word."""
    name = value_type.canonical
    kind = value_type.kind

    if kind is ValueKind.BOOLEAN:
        if not isinstance(value, (bool, int)) or value not in (0, 1):
            raise TypeMismatch(f"{name}: expected bool, got {value!r}")
        packer.write_bool(bool(value))
        return

    if kind is ValueKind.ENUM:
        if isinstance(value, enum.Enum):
            # Encode enum as its ordinal (0-indexed position in enum)
            value = list(type(value)).index(value)
        elif isinstance(value, bool) or not isinstance(value, int):
            raise TypeMismatch(f"enum: expected enum member or ordinal, got {type(value).__name__}")
        if not 0 <= value < value_type.members:
            raise EncodeError(
                f"enum: ordinal {value} out of range (only {value_type.members} members)"
            )
        packer.write_uint(value, value_type.width_bits)
        return

    if kind is ValueKind.INTEGER:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeMismatch(f"{name}: expected int, got {type(value).__name__}")
        try:
            if value_type.signed:
                packer.write_int(value, value_type.width_bits)
            else:
                packer.write_uint(value, value_type.width_bits)
        except ValueError as err:
            raise EncodeError(f"{name}: value {value} out of bounds") from err
        return

    if kind is ValueKind.FIXED_BYTES:
        if not isinstance(value, _BYTES_LIKE):
            raise TypeMismatch(f"{name}: expected bytes, got {type(value).__name__}")
        if len(value) != value_type.size:
            raise TypeMismatch(f"{name}: expected {value_type.size} bytes, got {len(value)} bytes")
        packer.write_fixed_bytes(bytes(value))
        return

    if kind is ValueKind.ADDRESS:
        num_bytes = value_type.width_bits // 8
        if isinstance(value, _BYTES_LIKE):
            if len(value) != num_bytes:
                raise TypeMismatch(f"{name}: expected {num_bytes} bytes, got {len(value)} bytes")
            value = int.from_bytes(bytes(value), "big")
        elif isinstance(value, bool) or not isinstance(value, int):
            raise TypeMismatch(f"{name}: expected bytes or int, got {type(value).__name__}")
        try:
            packer.write_uint(value, value_type.width_bits)
        except ValueError as err:
            raise EncodeError(f"{name}: value {value} out of bounds") from err
        return

    raise SchemaError(f"Unknown value kind: {kind}")
