"""Unit tests for size calculation utilities."""

from __future__ import annotations

import pytest

from abicodec import (
    AbiStruct,
    Bytes,
    TypeMismatch,
    Uint,
    encode,
    encoded_size,
    field_offsets,
    parse_type,
    static_size_of,
)
from abicodec.utils import describe


class Payment(AbiStruct):
    """Struct for offset tests."""

    amount: int = Uint(128)
    memo: bytes = Bytes()
    fee: int = Uint(16)


class TestEncodedSize:
    """Test size prediction without encoding."""

    @pytest.mark.parametrize(
        ("abi_type", "value"),
        [
            ("uint256", 1),
            ("uint16[3]", [1, 2, 3]),
            ("uint16[]", [1, 2, 3]),
            ("bytes", b""),
            ("bytes", b"x" * 33),
            ("uint16[][]", [[1], [2, 3], []]),
            ("(uint8,bytes)[2]", [(1, b"a"), (2, b"b" * 64)]),
            ("bytes[0]", []),
        ],
    )
    def test_matches_encoding(self, abi_type: str, value: object) -> None:
        """Test predicted sizes equal actual encoded sizes."""
        assert encoded_size(abi_type, value) == len(encode(abi_type, value))

    def test_struct_value(self) -> None:
        """Test sizing a struct instance as a tuple value."""
        payment = Payment(amount=5, memo=b"rent", fee=1)
        assert encoded_size(Payment.abi_type(), payment) == len(encode(Payment.abi_type(), payment))

    def test_shape_mismatch(self) -> None:
        """Test sizing values of the wrong shape."""
        with pytest.raises(TypeMismatch):
            encoded_size("(uint8,bytes)", (1,))


class TestStaticSize:
    """Test static argument list sizes."""

    def test_static(self) -> None:
        """Test all-static argument lists."""
        assert static_size_of("uint16[3],bool") == 128
        assert static_size_of([parse_type("(uint8,uint8)")]) == 64
        assert static_size_of("") == 0

    def test_dynamic(self) -> None:
        """Test argument lists with a dynamic member."""
        assert static_size_of("uint256,bytes") is None


class TestFieldOffsets:
    """Test head offsets of arguments and fields."""

    def test_argument_offsets(self) -> None:
        """Test offsets of positional arguments."""
        assert field_offsets("uint16[3],bytes,bool") == {"0": 0, "1": 96, "2": 128}

    def test_struct_offsets(self) -> None:
        """Test offsets of struct fields."""
        assert field_offsets(Payment) == {"amount": 0, "memo": 32, "fee": 64}


class TestDescribe:
    """Test type descriptions."""

    def test_describe(self) -> None:
        """Test kind descriptions."""
        assert describe(parse_type("uint8")) == "integer"
        assert describe(parse_type("bytes")) == "DynamicBytes, dynamic"
        assert describe(parse_type("uint8[2]")) == "FixedArray, static"
