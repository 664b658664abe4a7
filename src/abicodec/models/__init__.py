"""Pydantic struct modeling for abicodec.

This module provides the AbiStruct class and field utilities for declaring
ABI tuples as Pydantic models.
"""

from __future__ import annotations

from .base import AbiStruct, decode_struct, encode_struct
from .fields import AbiField, Address, Bytes, FixedBytes, Int, Uint

__all__ = [
    "AbiStruct",
    "encode_struct",
    "decode_struct",
    "AbiField",
    "Address",
    "Bytes",
    "FixedBytes",
    "Int",
    "Uint",
]
