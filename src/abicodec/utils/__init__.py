"""Utility functions for abicodec.

This module provides size and layout calculation helpers.
"""

from __future__ import annotations

from .sizing import describe, encoded_size, field_offsets, static_size_of

__all__ = [
    "encoded_size",
    "static_size_of",
    "field_offsets",
    "describe",
]
