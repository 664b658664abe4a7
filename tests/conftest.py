"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import Callable, Union

import pytest

Word = Union[int, bytes]


def pack_words(*values: Word) -> bytes:
    """Build raw call data word by word.

    ints are written big-endian (negative ones sign-extended), bytes are
    left-aligned and zero-padded to 32 bytes.
    """
    out = bytearray()
    for value in values:
        if isinstance(value, bytes):
            out += value.ljust(32, b"\x00")
        else:
            out += value.to_bytes(32, "big", signed=value < 0)
    return bytes(out)


@pytest.fixture
def words() -> Callable[..., bytes]:
    """Helper that builds call data from words."""
    return pack_words


@pytest.fixture
def sample_address() -> bytes:
    """Sample 20-byte address for testing."""
    return bytes.fromhex("00112233445566778899aabbccddeeff01234567")
