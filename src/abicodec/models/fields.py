"""Field type helpers and utilities.

This module provides convenience functions for declaring the ABI type of
struct fields. Each helper returns a Pydantic FieldInfo carrying the ABI type
string in ``json_schema_extra`` plus the Pydantic constraints that keep values
encodable (integer ranges, byte lengths).
"""

from __future__ import annotations

from typing import Any, cast

from pydantic import Field
from pydantic.fields import FieldInfo

from ..codec.types import ValueKind, ValueType, parse_type


def AbiField(abi_type: str | None = None, *, dims: str = "", **kwargs: Any) -> FieldInfo:
    """Create a field with an explicit ABI type.

    Integer types get matching ``ge=``/``le=`` bounds unless given explicitly.

    Args:
        abi_type: Canonical type string such as ``"uint16[]"``. Leave out for
            fields annotated with a struct, enum or bool.
        dims: Array suffix applied to a struct or enum annotation, e.g. ``"[]"``
            for ``list[Point]`` or ``"[2][]"`` for ``list[list[Point]]``
        **kwargs: Additional Field() arguments (description, default, etc.)

    Returns:
        Pydantic FieldInfo suitable for use as a field default/metadata.

    Example:
        >>> class Order(AbiStruct):
        ...     amounts: list[int] = AbiField("uint128[]")
        ...     legs: list[Leg] = AbiField(dims="[]")
    """
    if abi_type is not None:
        parsed = parse_type(abi_type)
        if isinstance(parsed, ValueType) and parsed.kind is ValueKind.INTEGER:
            if parsed.signed:
                bound = 1 << (parsed.width_bits - 1)
                kwargs.setdefault("ge", -bound)
                kwargs.setdefault("le", bound - 1)
            else:
                kwargs.setdefault("ge", 0)
                kwargs.setdefault("le", (1 << parsed.width_bits) - 1)
    extra = {"abi_type": abi_type, "abi_dims": dims}
    return cast(FieldInfo, Field(json_schema_extra=extra, **kwargs))


def Uint(bits: int = 256, **kwargs: Any) -> FieldInfo:
    """Unsigned integer field, e.g. ``amount: int = Uint(128)``."""
    return AbiField(f"uint{bits}", **kwargs)


def Int(bits: int = 256, **kwargs: Any) -> FieldInfo:
    """Signed integer field, e.g. ``delta: int = Int(24)``."""
    return AbiField(f"int{bits}", **kwargs)


def Address(**kwargs: Any) -> FieldInfo:
    """20-byte address field, annotated as ``bytes``."""
    return AbiField("address", min_length=20, max_length=20, **kwargs)


def FixedBytes(*, length: int, **kwargs: Any) -> FieldInfo:
    """Fixed-length ``bytesN`` field.

    Example:
        >>> class Message(AbiStruct):
        ...     tag: bytes = FixedBytes(length=4)
    """
    return AbiField(f"bytes{length}", min_length=length, max_length=length, **kwargs)


def Bytes(**kwargs: Any) -> FieldInfo:
    """Dynamic ``bytes`` field."""
    return AbiField("bytes", **kwargs)
