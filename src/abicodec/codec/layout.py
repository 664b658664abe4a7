"""Head/tail layout calculation.

Every type contributes a fixed number of words to the head of the sequence
that contains it: its full static encoding when the type is static, or a
single offset word pointing into the tail when it is dynamic.
"""

from __future__ import annotations

from typing import Iterable, Optional

from ..exceptions import SchemaError
from .types import (
    WORD_SIZE,
    AbiType,
    DynamicArray,
    DynamicBytes,
    FixedArray,
    TupleType,
    ValueType,
)


def is_dynamic(abi_type: AbiType) -> bool:
    """Return True if the encoded size of ``abi_type`` depends on its value."""
    return abi_type.is_dynamic


def head_words(abi_type: AbiType) -> int:
    """Number of words ``abi_type`` occupies in the head of its enclosing sequence.

    Raises:
        SchemaError: If ``abi_type`` is not an ABI type descriptor
    """
    if isinstance(abi_type, ValueType):
        return 1
    if isinstance(abi_type, (DynamicArray, DynamicBytes)):
        return 1
    if isinstance(abi_type, FixedArray):
        if abi_type.is_dynamic:
            return 1
        return abi_type.length * head_words(abi_type.element)
    if isinstance(abi_type, TupleType):
        if abi_type.is_dynamic:
            return 1
        return sequence_head_words(abi_type.fields)
    raise SchemaError(f"Unknown ABI type: {abi_type!r}")


def head_size(abi_type: AbiType) -> int:
    """Head contribution in bytes."""
    return head_words(abi_type) * WORD_SIZE


def sequence_head_words(types: Iterable[AbiType]) -> int:
    """Total head words of a sequence of types laid out side by side."""
    return sum(head_words(t) for t in types)


def static_size(abi_type: AbiType) -> Optional[int]:
    """Encoded size in bytes of a static type, or None for a dynamic one."""
    if abi_type.is_dynamic:
        return None
    return head_size(abi_type)


def element_stride(abi_type: AbiType) -> int:
    """Bytes per element slot when ``abi_type`` is the element of an array.

    This is the minimum number of payload bytes each element needs, used to
    bound untrusted lengths before anything is allocated. It may be 0 for
    zero-sized static elements such as ``uint8[0]``.
    """
    return head_size(abi_type)
