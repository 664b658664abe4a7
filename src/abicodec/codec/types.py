"""Type descriptors for the word-aligned contract ABI.

Types form an immutable tree built from five node kinds: ValueType,
FixedArray, DynamicArray, DynamicBytes and TupleType. Whether a type is
dynamic is a pure structural property, computed once when the node is built.

Type trees can be constructed directly or parsed from canonical signature
strings:

    >>> parse_type("uint16[][]") == DynamicArray(DynamicArray(uint(16)))
    True
    >>> [t.canonical for t in parse_types("uint,(bool,bytes)")]
    ['uint256', '(bool,bytes)']
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Iterable, Tuple, Union

from ..exceptions import SchemaError

WORD_SIZE = 32
WORD_BITS = WORD_SIZE * 8

# Deepest array/tuple nesting a type tree may have
MAX_TYPE_DEPTH = 128


class ValueKind(enum.Enum):
    """Kinds of single-word value types."""

    INTEGER = "integer"
    BOOLEAN = "boolean"
    FIXED_BYTES = "fixed-bytes"
    ENUM = "enum"
    ADDRESS = "address"


def _nested_depth(depth: int) -> int:
    if depth > MAX_TYPE_DEPTH:
        raise SchemaError(f"Type nesting exceeds {MAX_TYPE_DEPTH} levels")
    return depth


@dataclass(frozen=True)
class ValueType:
    """A value type occupying exactly one word.

    Attributes:
        kind: What the word holds
        width_bits: Logically significant bits (8 * size for fixed bytes)
        signed: Two's complement integer (INTEGER only)
        size: Byte count for FIXED_BYTES, 0 otherwise
        members: Number of valid ordinals for ENUM, 0 otherwise
    """

    kind: ValueKind
    width_bits: int
    signed: bool = False
    size: int = 0
    members: int = 0
    is_dynamic: bool = field(default=False, init=False, repr=False, compare=False)
    depth: int = field(default=0, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.width_bits % 8 != 0 or not 8 <= self.width_bits <= WORD_BITS:
            raise SchemaError(f"Invalid width {self.width_bits}: must be a multiple of 8 in [8, 256]")
        if self.signed and self.kind is not ValueKind.INTEGER:
            raise SchemaError(f"Only integers can be signed, got {self.kind.value}")
        if self.kind is ValueKind.FIXED_BYTES:
            if not 1 <= self.size <= WORD_SIZE:
                raise SchemaError(f"Invalid fixed-bytes size {self.size}: must be in [1, 32]")
            if self.width_bits != self.size * 8:
                raise SchemaError(f"bytes{self.size} must be {self.size * 8} bits wide")
        elif self.size:
            raise SchemaError(f"size only applies to fixed bytes, got {self.kind.value}")
        if self.kind is ValueKind.ENUM:
            if not 1 <= self.members <= 256:
                raise SchemaError(f"Enum must have 1 to 256 members, got {self.members}")
            if self.width_bits != 8:
                raise SchemaError("Enums are encoded as uint8")
        elif self.members:
            raise SchemaError(f"members only applies to enums, got {self.kind.value}")
        if self.kind is ValueKind.BOOLEAN and self.width_bits != 8:
            raise SchemaError("Booleans are encoded as uint8")

    @property
    def canonical(self) -> str:
        if self.kind is ValueKind.INTEGER:
            return f"{'int' if self.signed else 'uint'}{self.width_bits}"
        if self.kind is ValueKind.BOOLEAN:
            return "bool"
        if self.kind is ValueKind.FIXED_BYTES:
            return f"bytes{self.size}"
        if self.kind is ValueKind.ENUM:
            return "uint8"
        if self.width_bits == 160:
            return "address"
        return f"address{self.width_bits}"


@dataclass(frozen=True)
class FixedArray:
    """An array whose length is part of the type."""

    element: AbiType
    length: int
    is_dynamic: bool = field(default=False, init=False, repr=False, compare=False)
    depth: int = field(default=0, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.length < 0:
            raise SchemaError(f"Fixed array length must be >= 0, got {self.length}")
        object.__setattr__(self, "is_dynamic", self.element.is_dynamic)
        object.__setattr__(self, "depth", _nested_depth(self.element.depth + 1))

    @property
    def canonical(self) -> str:
        return f"{self.element.canonical}[{self.length}]"


@dataclass(frozen=True)
class DynamicArray:
    """An array with a runtime length prefix."""

    element: AbiType
    is_dynamic: bool = field(default=True, init=False, repr=False, compare=False)
    depth: int = field(default=0, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "depth", _nested_depth(self.element.depth + 1))

    @property
    def canonical(self) -> str:
        return f"{self.element.canonical}[]"


@dataclass(frozen=True)
class DynamicBytes:
    """A raw byte string with a runtime length prefix."""

    is_dynamic: bool = field(default=True, init=False, repr=False, compare=False)
    depth: int = field(default=0, init=False, repr=False, compare=False)

    @property
    def canonical(self) -> str:
        return "bytes"


@dataclass(frozen=True)
class TupleType:
    """A heterogeneous aggregate with fields in declaration order."""

    fields: Tuple[AbiType, ...]
    is_dynamic: bool = field(default=False, init=False, repr=False, compare=False)
    depth: int = field(default=0, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # Accept any iterable but store an immutable tuple
        object.__setattr__(self, "fields", tuple(self.fields))
        object.__setattr__(self, "is_dynamic", any(f.is_dynamic for f in self.fields))
        object.__setattr__(
            self, "depth", _nested_depth(1 + max((f.depth for f in self.fields), default=0))
        )

    @property
    def canonical(self) -> str:
        return "(" + ",".join(f.canonical for f in self.fields) + ")"


AbiType = Union[ValueType, FixedArray, DynamicArray, DynamicBytes, TupleType]

ABI_TYPES = (ValueType, FixedArray, DynamicArray, DynamicBytes, TupleType)


# Constructors for value types


def uint(bits: int = 256) -> ValueType:
    return ValueType(ValueKind.INTEGER, bits)


def int_(bits: int = 256) -> ValueType:
    return ValueType(ValueKind.INTEGER, bits, signed=True)


def boolean() -> ValueType:
    return ValueType(ValueKind.BOOLEAN, 8)


def fixed_bytes(size: int) -> ValueType:
    return ValueType(ValueKind.FIXED_BYTES, size * 8, size=size)


def enum_(members: int) -> ValueType:
    """Enum with ``members`` valid ordinals, encoded as uint8."""
    return ValueType(ValueKind.ENUM, 8, members=members)


def address(bits: int = 160) -> ValueType:
    return ValueType(ValueKind.ADDRESS, bits)


def tuple_of(*fields: AbiType) -> TupleType:
    return TupleType(fields)


# Type-string parsing

_TOKEN_RE = re.compile(r"\s*(?:(?P<name>[a-z]+\d*)|(?P<punct>[(),\[\]])|(?P<num>\d+))")


def _tokenize(text: str) -> list[str]:
    tokens: list[str] = []
    pos = 0
    stripped = text.rstrip()
    while pos < len(stripped):
        match = _TOKEN_RE.match(stripped, pos)
        if match is None or match.end() == pos:
            raise SchemaError(f"Unexpected character {stripped[pos]!r} at {pos} in {text!r}")
        tokens.append(match.group(match.lastgroup or "name"))
        pos = match.end()
    return tokens


_ELEMENTARY_RE = re.compile(r"^(uint|int|bytes|address)(\d*)$")


def _elementary(name: str) -> AbiType:
    if name == "bool":
        return boolean()
    if name == "bytes":
        return DynamicBytes()
    match = _ELEMENTARY_RE.match(name)
    if match is None:
        raise SchemaError(f"Unknown type name {name!r}")
    base, digits = match.groups()
    if digits.startswith("0"):
        raise SchemaError(f"Invalid type name {name!r}")
    if base == "bytes":
        return fixed_bytes(int(digits))
    if base == "address":
        return address(int(digits)) if digits else address()
    bits = int(digits) if digits else 256
    return int_(bits) if base == "int" else uint(bits)


class _Parser:
    """Recursive-descent parser over signature tokens."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = _tokenize(text)
        self.pos = 0
        self.depth = 0

    def peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def take(self, expected: str | None = None) -> str:
        token = self.peek()
        if token is None:
            raise SchemaError(f"Unexpected end of type string {self.text!r}")
        if expected is not None and token != expected:
            raise SchemaError(f"Expected {expected!r} but found {token!r} in {self.text!r}")
        self.pos += 1
        return token

    def parse_list(self, closing: str | None) -> list[AbiType]:
        items: list[AbiType] = []
        if self.peek() == closing:
            return items
        items.append(self.parse_type())
        while self.peek() == ",":
            self.take(",")
            items.append(self.parse_type())
        return items

    def parse_type(self) -> AbiType:
        token = self.take()
        if token == "(":
            self.depth += 1
            if self.depth > MAX_TYPE_DEPTH:
                raise SchemaError(f"Tuple nesting exceeds {MAX_TYPE_DEPTH} levels in {self.text!r}")
            base: AbiType = TupleType(self.parse_list(")"))
            self.take(")")
            self.depth -= 1
        elif token[0].isalpha():
            base = _elementary(token)
        else:
            raise SchemaError(f"Unexpected {token!r} in {self.text!r}")

        while self.peek() == "[":
            self.take("[")
            if self.peek() == "]":
                self.take("]")
                base = DynamicArray(base)
                continue
            length = self.take()
            if not length.isdigit() or (length.startswith("0") and length != "0"):
                raise SchemaError(f"Invalid array length {length!r} in {self.text!r}")
            self.take("]")
            base = FixedArray(base, int(length))
        return base


def parse_type(text: str) -> AbiType:
    """Parse one canonical type string, e.g. ``"(uint256,bytes)[2]"``.

    Raises:
        SchemaError: If the string is not a well-formed type
    """
    parser = _Parser(text)
    result = parser.parse_type()
    if parser.peek() is not None:
        raise SchemaError(f"Trailing input {parser.peek()!r} in {text!r}")
    return result


def parse_types(text: str) -> Tuple[AbiType, ...]:
    """Parse a comma-separated argument list such as ``"uint256,uint16[],bool"``.

    An outer pair of parentheses is not required; the empty string is the
    empty list.
    """
    parser = _Parser(text)
    items = parser.parse_list(None)
    if parser.peek() is not None:
        raise SchemaError(f"Trailing input {parser.peek()!r} in {text!r}")
    return tuple(items)


def as_type(value: AbiType | str) -> AbiType:
    """Accept either a type descriptor or a type string."""
    if isinstance(value, str):
        return parse_type(value)
    if not isinstance(value, ABI_TYPES):
        raise SchemaError(f"Not an ABI type: {value!r}")
    return value


def as_types(types: Iterable[AbiType | str] | str) -> Tuple[AbiType, ...]:
    if isinstance(types, str):
        return parse_types(types)
    return tuple(as_type(s) for s in types)
