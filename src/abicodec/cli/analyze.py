"""Layout report CLI command."""

from __future__ import annotations

from typing import Sequence

from ..codec.layout import head_words, sequence_head_words
from ..codec.types import WORD_SIZE, AbiType
from ..utils.sizing import describe, field_offsets, static_size_of


def print_layout(signature: str, types: Sequence[AbiType]) -> None:
    """Print the head layout of an argument list.

    Args:
        signature: Signature text as given on the command line
        types: Parsed argument types
    """
    offsets = field_offsets(types)
    total_words = sequence_head_words(types)
    static = static_size_of(types)

    print(f"{'=' * 19} ({signature}) {'=' * 19}")
    print(f"{len(types)} argument{'s' if len(types) != 1 else ''}.")
    print(f"Head size: {total_words} words / {total_words * WORD_SIZE} bytes")
    if static is None:
        print("Encoded size: head + dynamic tails")
    else:
        print(f"Encoded size: {static} bytes (all static)")
    print()

    print(f"{'-' * 28} Head {'-' * 28}")
    for index, abi_type in enumerate(types):
        words = head_words(abi_type)
        offset = offsets[str(index)]
        slot = "offset" if abi_type.is_dynamic else f"{words} word{'s' if words != 1 else ''}"
        field_desc = f"{index}. {abi_type.canonical}"
        info = f"@{offset:#06x} {slot} ({describe(abi_type)})"
        dots = "." * max(1, 62 - len(field_desc) - len(info))
        print(f"        {field_desc}{dots}{info}")
    print()
