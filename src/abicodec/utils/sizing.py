"""Encoded size calculation utilities.

This module provides functions to calculate the size and head layout of
encoded data without actually encoding it.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from pydantic import BaseModel

from ..codec.layout import head_size, sequence_head_words
from ..codec.schema import StructSchema
from ..codec.types import (
    WORD_SIZE,
    AbiType,
    DynamicArray,
    DynamicBytes,
    FixedArray,
    TupleType,
    ValueType,
    as_type,
    as_types,
)
from ..codec.wordpack import padded_length
from ..exceptions import SchemaError, TypeMismatch


def encoded_size(abi_type: AbiType | str, value: Any) -> int:
    """Calculate the size in bytes of ``encode(abi_type, value)``.

    Args:
        abi_type: Type descriptor or canonical type string
        value: Value that would be encoded

    Returns:
        Size in bytes (a multiple of 32)

    Raises:
        TypeMismatch: If the value's shape doesn't match the type

    Example:
        >>> encoded_size("uint16[]", [1, 2, 3])
        160  # offset + length + 3 elements
    """
    abi_type = as_type(abi_type)
    return head_size(abi_type) + _tail_size(abi_type, value)


def _tail_size(abi_type: AbiType, value: Any) -> int:
    """Bytes ``value`` adds to the tail of its enclosing sequence."""
    if not abi_type.is_dynamic:
        return 0
    return _content_size(abi_type, value)


def _content_size(abi_type: AbiType, value: Any) -> int:
    """Bytes of a dynamic value's own encoding (length word, head and tails)."""
    if isinstance(abi_type, DynamicBytes):
        return WORD_SIZE + padded_length(len(value))
    if isinstance(abi_type, DynamicArray):
        elements = list(value)
        return WORD_SIZE + _sequence_size([abi_type.element] * len(elements), elements)
    if isinstance(abi_type, FixedArray):
        return _sequence_size([abi_type.element] * abi_type.length, list(value))
    if isinstance(abi_type, TupleType):
        if isinstance(value, BaseModel):
            value = [getattr(value, name) for name in type(value).model_fields]
        return _sequence_size(abi_type.fields, list(value))
    if isinstance(abi_type, ValueType):
        return WORD_SIZE
    raise SchemaError(f"Unknown ABI type: {abi_type!r}")


def _sequence_size(types: Sequence[AbiType], values: Sequence[Any]) -> int:
    if len(types) != len(values):
        raise TypeMismatch(f"Expected {len(types)} values, got {len(values)}")
    return sequence_head_words(types) * WORD_SIZE + sum(
        _tail_size(t, v) for t, v in zip(types, values)
    )


def static_size_of(types: Iterable[AbiType | str] | str) -> int | None:
    """Encoded size of an argument list made only of static types.

    Returns:
        Size in bytes, or None if any type is dynamic
    """
    resolved = as_types(types)
    if any(t.is_dynamic for t in resolved):
        return None
    return sequence_head_words(resolved) * WORD_SIZE


def field_offsets(
    types_or_struct: Iterable[AbiType | str] | str | type[BaseModel],
) -> dict[str, int]:
    """Get the head byte offset of each argument or struct field.

    Args:
        types_or_struct: Argument types, a type string, or a struct model class

    Returns:
        Dictionary mapping field names (or argument indices as strings) to
        their byte offset in the head

    Example:
        >>> field_offsets("uint16[3],bytes,bool")
        {'0': 0, '1': 96, '2': 128}
    """
    if isinstance(types_or_struct, type) and issubclass(types_or_struct, BaseModel):
        schema = StructSchema.from_model(types_or_struct)
        named = [(f.name, f.abi_type) for f in schema.fields]
    else:
        named = [(str(i), t) for i, t in enumerate(as_types(types_or_struct))]

    offsets: dict[str, int] = {}
    position = 0
    for name, abi_type in named:
        offsets[name] = position
        position += head_size(abi_type)
    return offsets


def describe(abi_type: AbiType) -> str:
    """Short human-readable description of a type's kind."""
    if isinstance(abi_type, ValueType):
        if abi_type.members:
            return f"enum ({abi_type.members} members)"
        return abi_type.kind.value
    kind = type(abi_type).__name__
    return f"{kind}, {'dynamic' if abi_type.is_dynamic else 'static'}"

