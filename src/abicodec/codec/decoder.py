"""Bounded head/tail decoder.

This module provides the decode functions that turn untrusted ABI-encoded
bytes back into Python values. Decoding mirrors encoding: a sequence's head
is read slot by slot, and each offset slot is followed into the tail region of
the same sequence.

Every read goes through a WordRegion, an immutable ``[start, end)`` window
over the buffer that is narrowed by copy on each recursive step, so no read
can leave the bytes its enclosing value may legitimately occupy. Lengths read
from the buffer are compared against the bytes actually remaining before
anything sized by them is allocated.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Sequence, Tuple

from ..exceptions import DecodeError, OutOfBounds, ResourceLimitExceeded, SchemaError
from .layout import element_stride, head_size, sequence_head_words
from .policy import STRICT, DecodingPolicy
from .types import (
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
from .wordpack import WordRegion, padded_length

logger = logging.getLogger(__name__)


@dataclass
class _DecodeContext:
    """State of one decode call."""

    policy: DecodingPolicy
    elements_left: int
    bytes_left: int

    def enter(self, depth: int, position: int) -> None:
        if depth > self.policy.limits.max_depth:
            raise ResourceLimitExceeded(
                f"Nesting depth exceeds {self.policy.limits.max_depth}", position=position
            )

    def take_elements(self, count: int, position: int) -> None:
        if count > self.policy.limits.max_array_length:
            raise ResourceLimitExceeded(
                f"Array length {count} exceeds {self.policy.limits.max_array_length}",
                position=position,
            )
        if count > self.elements_left:
            raise ResourceLimitExceeded(
                f"Decoding {count} more elements exceeds the budget of "
                f"{self.policy.limits.max_elements}",
                position=position,
            )
        self.elements_left -= count

    def take_bytes(self, count: int, position: int) -> None:
        if count > self.bytes_left:
            raise ResourceLimitExceeded(
                f"Decoding {count} more bytes exceeds the budget of "
                f"{self.policy.limits.max_decoded_bytes}",
                position=position,
            )
        self.bytes_left -= count


def decode(abi_type: AbiType | str, data: bytes, policy: DecodingPolicy = STRICT) -> Any:
    """Decode a single value encoded as a one-element argument sequence.

    Args:
        abi_type: Type descriptor or canonical type string
        data: Encoded bytes; the buffer length is the usable length
        policy: Decoding rules (STRICT by default)

    Returns:
        Decoded value: int, bool, bytes, list (arrays) or tuple (tuples)

    Raises:
        OutOfBounds: If any read, offset or length leaves the buffer
        InvalidEncoding: If a check enabled on the policy fails
        ResourceLimitExceeded: If a limit of the policy is exceeded

    Examples:
        ```python
        from abicodec import LEGACY, STRICT, decode, encode

        data = encode("uint16[][]", [[1], [2, 3]])
        decode("uint16[][]", data)            # [[1], [2, 3]]
        decode("bool", (2).to_bytes(32, "big"), LEGACY)   # True
        ```
    """
    return decode_sequence([as_type(abi_type)], data, policy)[0]


def decode_sequence(
    types: Iterable[AbiType | str] | str, data: bytes, policy: DecodingPolicy = STRICT
) -> Tuple[Any, ...]:
    """Decode call arguments or return values laid out as an implicit tuple.

    Args:
        types: Argument types in order, or a comma-separated type string
        data: Encoded bytes
        policy: Decoding rules (STRICT by default)

    Returns:
        Tuple of decoded values, one per type

    Raises:
        DecodeError: Any of its subclasses, see decode()
    """
    resolved = as_types(types)
    region = WordRegion.over(data)
    limits = policy.limits
    context = _DecodeContext(policy, limits.max_elements, limits.max_decoded_bytes)

    try:
        values, consumed = _decode_sequence(context, region, region.start, resolved, 0)
        policy.check_length(consumed, region.end)
    except DecodeError as err:
        logger.debug(
            "%s decode of %d bytes rejected: %s at %s: %s",
            policy.name,
            len(region.data),
            type(err).__name__,
            err.position,
            err,
        )
        raise

    return tuple(values)


def _decode_sequence(
    context: _DecodeContext,
    region: WordRegion,
    start: int,
    types: Sequence[AbiType],
    depth: int,
) -> Tuple[List[Any], int]:
    """Decode values laid out head-then-tails starting at ``start``.

    Offsets in the head are relative to ``start``; tails may extend to the
    end of ``region``.

    Returns:
        Decoded values and the position just past the last byte consumed
    """
    context.enter(depth, start)
    head_end = start + sequence_head_words(types) * WORD_SIZE
    region.require(start, head_end - start)

    values: List[Any] = []
    cursor = start
    floor = head_end
    consumed = head_end

    for abi_type in types:
        if not abi_type.is_dynamic:
            values.append(_decode_in_place(context, region, cursor, abi_type, depth + 1))
            cursor += head_size(abi_type)
            continue

        offset = region.read_word(cursor)
        if offset > region.end - start:
            raise OutOfBounds(
                f"Offset {offset:#x} at {cursor} points past region end {region.end}",
                position=cursor,
            )
        tail_start = start + offset
        context.policy.check_tail(tail_start, floor)

        value, tail_end = _decode_tail(
            context, region.narrow(tail_start, region.end), abi_type, depth + 1
        )
        values.append(value)
        floor = max(floor, tail_end)
        consumed = max(consumed, tail_end)
        cursor += WORD_SIZE

    return values, consumed


def _decode_in_place(
    context: _DecodeContext, region: WordRegion, position: int, abi_type: AbiType, depth: int
) -> Any:
    """Decode a static type whose encoding lies entirely at ``position``."""
    if isinstance(abi_type, ValueType):
        return context.policy.interpret(abi_type, region.read_word(position), position)

    if isinstance(abi_type, FixedArray):
        values, _ = _decode_sequence(
            context, region, position, [abi_type.element] * abi_type.length, depth
        )
        return values

    if isinstance(abi_type, TupleType):
        values, _ = _decode_sequence(context, region, position, abi_type.fields, depth)
        return tuple(values)

    raise SchemaError(f"Type {abi_type!r} cannot be decoded in place")


def _decode_tail(
    context: _DecodeContext, region: WordRegion, abi_type: AbiType, depth: int
) -> Tuple[Any, int]:
    """Decode a dynamic type whose tail starts at ``region.start``.

    Returns:
        The decoded value and the position just past its last byte
    """
    start = region.start

    if isinstance(abi_type, DynamicBytes):
        length = region.read_word(start)
        payload = start + WORD_SIZE
        if length > region.remaining(payload):
            raise OutOfBounds(
                f"Byte string length {length:#x} at {start} exceeds "
                f"{region.remaining(payload)} remaining bytes",
                position=start,
            )
        context.take_bytes(length, start)
        data = region.read_bytes(payload, length)
        end = payload + length
        padded_end = payload + padded_length(length)
        if context.policy.check_cleanup:
            context.policy.check_padding(region.read_bytes(end, padded_end - end), end)
        return data, min(padded_end, region.end)

    if isinstance(abi_type, DynamicArray):
        length = region.read_word(start)
        payload = start + WORD_SIZE
        stride = element_stride(abi_type.element)
        # Compare before multiplying so a huge length never sizes anything
        if stride and length > region.remaining(payload) // stride:
            raise OutOfBounds(
                f"Array length {length:#x} at {start} needs more than the "
                f"{region.remaining(payload)} remaining bytes",
                position=start,
            )
        context.take_elements(length, start)

        if abi_type.element.is_dynamic:
            elements = region.narrow(payload, region.end)
        else:
            elements = region.narrow(payload, payload + length * stride)
        values, end = _decode_sequence(
            context, elements, payload, [abi_type.element] * length, depth
        )
        return values, end

    if isinstance(abi_type, FixedArray):
        values, end = _decode_sequence(
            context, region, start, [abi_type.element] * abi_type.length, depth
        )
        return values, end

    if isinstance(abi_type, TupleType):
        values, end = _decode_sequence(context, region, start, abi_type.fields, depth)
        return tuple(values), end

    raise SchemaError(f"Type {abi_type!r} is not dynamic")
