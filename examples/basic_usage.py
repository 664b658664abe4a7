#!/usr/bin/env python3
"""Basic usage example for abicodec.

This example demonstrates:
1. Defining a struct with Pydantic
2. Encoding to ABI call data
3. Decoding back to a Pydantic model
4. Decoding untrusted data with the strict and legacy policies
"""

from __future__ import annotations

from abicodec import (
    LEGACY,
    STRICT,
    AbiField,
    AbiStruct,
    Address,
    Bytes,
    DecodeError,
    Uint,
    decode_sequence,
    field_offsets,
)


class Payout(AbiStruct):
    """Batch payout to several accounts."""

    payer: bytes = Address()
    amounts: list[int] = AbiField("uint128[]")
    memo: bytes = Bytes()
    round_id: int = Uint(32)


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("abicodec Basic Usage Example")
    print("=" * 60)
    print()

    print("1. Creating a payout struct...")
    payout = Payout(payer=bytes(range(20)), amounts=[100, 250], memo=b"june", round_id=7)
    print(f"   Signature: {Payout.abi_type().canonical}")
    print()

    print("2. Head layout...")
    for name, offset in field_offsets(Payout).items():
        print(f"   {name}: @{offset:#06x}")
    print()

    print("3. Encoding...")
    data = payout.encode()
    print(f"   Encoded size: {len(data)} bytes ({len(data) // 32} words)")
    for i in range(0, len(data), 32):
        print(f"   {i:#06x}: {data[i:i + 32].hex()}")
    print()

    print("4. Decoding...")
    decoded = Payout.decode(data)
    print(f"   Round trip OK: {decoded == payout}")
    print()

    print("5. Dirty data under both policies...")
    dirty = (2).to_bytes(32, "big")
    print(f"   legacy: {decode_sequence('bool', dirty, LEGACY)}")
    try:
        decode_sequence("bool", dirty, STRICT)
    except DecodeError as e:
        print(f"   strict: {type(e).__name__}: {e}")


if __name__ == "__main__":
    main()
