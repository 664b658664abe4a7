"""Unit tests for type descriptors and type-string parsing."""

from __future__ import annotations

import pytest

from abicodec import (
    DynamicArray,
    DynamicBytes,
    FixedArray,
    SchemaError,
    TupleType,
    ValueKind,
    ValueType,
    address,
    boolean,
    decode,
    enum_,
    fixed_bytes,
    int_,
    parse_type,
    parse_types,
    tuple_of,
    uint,
)
from abicodec.codec.types import MAX_TYPE_DEPTH


class TestValueTypes:
    """Test value type construction."""

    def test_constructors(self) -> None:
        """Test value type helper constructors."""
        assert uint(16) == ValueType(ValueKind.INTEGER, 16)
        assert int_(24).signed is True
        assert boolean().kind is ValueKind.BOOLEAN
        assert fixed_bytes(3).size == 3
        assert fixed_bytes(3).width_bits == 24
        assert enum_(2).members == 2
        assert address().width_bits == 160

    @pytest.mark.parametrize("bits", [0, 7, 12, 264])
    def test_invalid_integer_width(self, bits: int) -> None:
        """Test integer width validation."""
        with pytest.raises(SchemaError, match="Invalid width"):
            uint(bits)

    @pytest.mark.parametrize("size", [0, 33])
    def test_invalid_fixed_bytes_size(self, size: int) -> None:
        """Test fixed-bytes size validation."""
        with pytest.raises(SchemaError):
            fixed_bytes(size)

    @pytest.mark.parametrize("members", [0, 257])
    def test_invalid_enum_members(self, members: int) -> None:
        """Test enum member count validation."""
        with pytest.raises(SchemaError, match="1 to 256"):
            enum_(members)

    def test_only_integers_signed(self) -> None:
        """Test that only integer kinds accept the signed flag."""
        with pytest.raises(SchemaError, match="Only integers"):
            ValueType(ValueKind.ADDRESS, 160, signed=True)


class TestDynamicProperty:
    """Test the cached is_dynamic property."""

    def test_value_types_static(self) -> None:
        """Test that value types are static."""
        assert not uint().is_dynamic
        assert not fixed_bytes(32).is_dynamic

    def test_dynamic_kinds(self) -> None:
        """Test always-dynamic kinds."""
        assert DynamicBytes().is_dynamic
        assert DynamicArray(uint(8)).is_dynamic

    def test_fixed_array_follows_element(self) -> None:
        """Test fixed arrays are dynamic iff their element is."""
        assert not FixedArray(uint(16), 3).is_dynamic
        assert FixedArray(DynamicBytes(), 3).is_dynamic

    def test_tuple_dynamic_if_any_field(self) -> None:
        """Test tuples are dynamic iff any field is."""
        assert not tuple_of(uint(), boolean()).is_dynamic
        assert tuple_of(uint(), DynamicBytes()).is_dynamic
        assert not TupleType(()).is_dynamic

    def test_is_dynamic_ignored_by_equality(self) -> None:
        """Test structural equality and hashing."""
        a = TupleType([uint(16), DynamicArray(boolean())])
        b = tuple_of(uint(16), DynamicArray(boolean()))
        assert a == b
        assert hash(a) == hash(b)
        assert isinstance(a.fields, tuple)

    def test_negative_fixed_length(self) -> None:
        """Test fixed array length validation."""
        with pytest.raises(SchemaError):
            FixedArray(uint(), -1)


class TestParseType:
    """Test canonical type-string parsing."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("uint", uint(256)),
            ("int", int_(256)),
            ("uint16", uint(16)),
            ("int24", int_(24)),
            ("bool", boolean()),
            ("address", address()),
            ("bytes3", fixed_bytes(3)),
            ("bytes", DynamicBytes()),
            ("uint16[]", DynamicArray(uint(16))),
            ("uint16[3]", FixedArray(uint(16), 3)),
            ("(uint256,bytes)", tuple_of(uint(), DynamicBytes())),
            ("()", TupleType(())),
        ],
    )
    def test_parse(self, text: str, expected: object) -> None:
        """Test parsing of each type form."""
        assert parse_type(text) == expected

    def test_suffixes_apply_left_to_right(self) -> None:
        """Test that uint16[2][3] is three arrays of two elements."""
        assert parse_type("uint16[2][3]") == FixedArray(FixedArray(uint(16), 2), 3)
        assert parse_type("uint[][3]") == FixedArray(DynamicArray(uint()), 3)

    def test_nested_tuples_with_whitespace(self) -> None:
        """Test nested tuples and insignificant whitespace."""
        parsed = parse_type(" ( uint8 , (bool, bytes)[] ) [2] ")
        expected = FixedArray(
            tuple_of(uint(8), DynamicArray(tuple_of(boolean(), DynamicBytes()))), 2
        )
        assert parsed == expected

    def test_parse_types(self) -> None:
        """Test argument list parsing."""
        assert parse_types("uint256,uint16[],uint256") == (uint(), DynamicArray(uint(16)), uint())
        assert parse_types("") == ()

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "uint7",
            "uint08",
            "bytes0",
            "bytes33",
            "float",
            "uint16[",
            "uint16[x]",
            "uint8[01]",
            "(uint,",
            "uint)",
            "uint$",
        ],
    )
    def test_malformed(self, text: str) -> None:
        """Test malformed type strings."""
        with pytest.raises(SchemaError):
            parse_type(text)

    @pytest.mark.parametrize(
        "text",
        ["uint16", "int24", "bool", "address", "bytes3", "bytes", "uint16[2][3]", "(uint256,(bool,bytes)[])[2]"],
    )
    def test_canonical_roundtrip(self, text: str) -> None:
        """Test that canonical names parse back to the same type."""
        parsed = parse_type(text)
        assert parsed.canonical == text
        assert parse_type(parsed.canonical) == parsed

    def test_enum_canonical_is_uint8(self) -> None:
        """Test that enums present as uint8 in signatures."""
        assert enum_(3).canonical == "uint8"


class TestNestingLimit:
    """Test the ceiling on type tree depth."""

    def test_depth_recorded(self) -> None:
        """Test depth of value, array and tuple types."""
        assert uint().depth == 0
        assert DynamicBytes().depth == 0
        assert parse_type("uint8[2][]").depth == 2
        assert parse_type("(uint8,(bool[]))").depth == 3
        assert TupleType(()).depth == 1

    def test_deep_array_construction(self) -> None:
        """Test building arrays past the ceiling fails without recursing."""
        abi_type = uint(8)
        for _ in range(MAX_TYPE_DEPTH):
            abi_type = FixedArray(abi_type, 1)
        with pytest.raises(SchemaError, match="nesting exceeds"):
            DynamicArray(abi_type)

    def test_deep_array_suffixes(self) -> None:
        """Test a long chain of array suffixes in a type string."""
        with pytest.raises(SchemaError, match="nesting exceeds"):
            parse_type("uint8" + "[1]" * 3000)

    def test_deep_parentheses(self) -> None:
        """Test deeply nested tuples in a type string."""
        depth = MAX_TYPE_DEPTH + 1
        with pytest.raises(SchemaError, match="nesting exceeds"):
            parse_type("(" * 600 + "uint8" + ")" * 600)
        with pytest.raises(SchemaError, match="nesting exceeds"):
            parse_type("(" * depth + "uint8" + ")" * depth)
        assert parse_type("(" * MAX_TYPE_DEPTH + "uint8" + ")" * MAX_TYPE_DEPTH).depth == MAX_TYPE_DEPTH

    def test_decode_deep_type(self) -> None:
        """Test decoding against a too-deep type string fails cleanly."""
        with pytest.raises(SchemaError):
            decode("uint8" + "[1]" * 3000, b"\x00" * 32)
