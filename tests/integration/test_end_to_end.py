"""End-to-end integration tests."""

from __future__ import annotations

import enum
from typing import Callable, ClassVar, Optional

import pytest

from abicodec import (
    LEGACY,
    STRICT,
    AbiField,
    AbiStruct,
    Address,
    Bytes,
    InvalidEncoding,
    Uint,
    decode,
    decode_sequence,
    encode,
    encode_values,
    encoded_size,
    enum_,
    field_offsets,
    parse_types,
)

Words = Callable[..., bytes]

MAX_WORD = (1 << 256) - 1


class ActionChoices(enum.Enum):
    """Two-member enum."""

    GO_LEFT = 0
    GO_STRAIGHT = 1


class Transfer(AbiStruct):
    """Token transfer batch."""

    sender: bytes = Address()
    recipients: list[bytes] = AbiField("address[]")
    amounts: list[int] = AbiField("uint128[]")
    action: ActionChoices
    note: bytes = Bytes()
    nonce: int = Uint(64)

    abi_name: ClassVar[Optional[str]] = "transfer"


class TestCallDataScenarios:
    """Decode call data the way a contract receives it."""

    def test_value_types(self, words: Words) -> None:
        """Test a mix of value type arguments."""
        data = words(1, 2, 3, -4, b"abc", 1, 0xABC)
        values = decode_sequence("uint256,uint16,uint24,int24,bytes3,bool,address", data)
        assert values == (1, 2, 3, -4, b"abc", True, (0xABC).to_bytes(20, "big"))

    def test_enums(self, words: Words) -> None:
        """Test enum arguments under both policies."""
        action = enum_(len(ActionChoices))
        assert decode(action, words(1)) == ActionChoices.GO_STRAIGHT.value

        with pytest.raises(InvalidEncoding):
            decode(action, words(2), STRICT)
        assert decode(action, words(2), LEGACY) == 2
        assert decode(action, words(MAX_WORD), LEGACY) == 0xFF

    def test_cleanup(self, words: Words) -> None:
        """Test dirty value words are cleaned by legacy and rejected by strict."""
        signature = "uint16,int16,address,bytes3,bool"
        data = words(0xFFFFFF, 0x1FFFF, MAX_WORD, b"abcd", 4)

        assert decode_sequence(signature, data, LEGACY) == (0xFFFF, -1, b"\xff" * 20, b"abc", True)
        with pytest.raises(InvalidEncoding):
            decode_sequence(signature, data, STRICT)

    def test_fixed_arrays(self, words: Words) -> None:
        """Test fixed arrays, nested fixed arrays and trailing scalars in the head."""
        data = words(1, 2, 3, 11, 12, 21, 22, 31, 32, 1, 2, 3)
        a, b, c, d, e = decode_sequence("uint16[3],uint16[2][3],uint256,uint256,uint256", data)
        assert a == [1, 2, 3]
        assert b == [[11, 12], [21, 22], [31, 32]]
        assert (c, d, e) == (1, 2, 3)

    def test_dynamic_arrays(self, words: Words) -> None:
        """Test f(uint256,uint16[],uint256) call data."""
        data = words(6, 0x60, 9, 7, 11, 12, 13, 14, 15, 16, 17)
        assert decode_sequence("uint256,uint16[],uint256", data) == (6, list(range(11, 18)), 9)
        assert encode_values("uint256,uint16[],uint256", [6, list(range(11, 18)), 9]) == data

    def test_nested_dynamic_arrays(self) -> None:
        """Test arrays of arrays, dynamic outside and fixed outside."""
        types = parse_types("uint16[][],uint256[][3]")
        values = ([[1, 2], [], [3]], [[10], [], [20, 30, 40]])
        data = encode_values(types, values)

        exact = STRICT.replace(exact_length=True)
        assert decode_sequence(types, data, exact) == values
        assert decode_sequence(types, data, LEGACY) == values


class TestStructWorkflow:
    """Test complete struct workflows."""

    def test_transfer_workflow(self, sample_address: bytes) -> None:
        """Test building, sizing, encoding and decoding a struct."""
        # 1. Create message
        transfer = Transfer(
            sender=sample_address,
            recipients=[b"\x01" * 20, b"\x02" * 20],
            amounts=[10**18, 5],
            action=ActionChoices.GO_LEFT,
            note=b"payroll",
            nonce=42,
        )

        # 2. Inspect the layout
        assert Transfer.abi_type().canonical == "(address,address[],uint128[],uint8,bytes,uint64)"
        assert field_offsets(Transfer) == {
            "sender": 0,
            "recipients": 32,
            "amounts": 64,
            "action": 96,
            "note": 128,
            "nonce": 160,
        }

        # 3. Encode
        data = transfer.encode()
        assert len(data) == encoded_size(Transfer.abi_type(), transfer) - 32

        # 4. Decode with both policies
        assert Transfer.decode(data) == transfer
        assert Transfer.decode(data, LEGACY) == transfer

        # 5. Wrapped as a single tuple argument
        wrapped = encode(Transfer.abi_type(), transfer)
        assert wrapped[32:] == data
