"""Main CLI entry point for abicodec."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

from .. import __version__
from ..codec.decoder import decode_sequence
from ..codec.encoder import encode_sequence
from ..codec.policy import LEGACY, STRICT
from ..codec.types import parse_types
from ..exceptions import AbiCodecError
from .analyze import print_layout


def _parse_hex(text: str) -> bytes:
    text = text.strip()
    if text[:2].lower() == "0x":
        text = text[2:]
    return bytes.fromhex(text)


def _from_json(value: Any) -> Any:
    """Map JSON input to codec values: ``0x`` strings become bytes."""
    if isinstance(value, str):
        return _parse_hex(value)
    if isinstance(value, list):
        return [_from_json(v) for v in value]
    return value


def _to_display(value: Any) -> Any:
    if isinstance(value, bytes):
        return "0x" + value.hex()
    if isinstance(value, (list, tuple)):
        return [_to_display(v) for v in value]
    return value


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the abicodec CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        prog="abicodec",
        description="abicodec: contract ABI codec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  abicodec --layout "uint256,uint16[],bool"           Show head layout
  abicodec --decode "uint16[]" 0x0000...0020...      Decode call data
  abicodec --decode "bool" 0x...02 --legacy          Decode leniently
  abicodec --encode "uint16[],bytes" '[[1,2],"0xff"]' Encode JSON values
        """,
    )

    parser.add_argument(
        "--layout",
        metavar="TYPES",
        type=str,
        help="Show the head layout of a comma-separated argument list",
    )
    parser.add_argument(
        "--decode",
        nargs=2,
        metavar=("TYPES", "HEX"),
        help="Decode hex data against a comma-separated argument list",
    )
    parser.add_argument(
        "--encode",
        nargs=2,
        metavar=("TYPES", "JSON"),
        help="Encode a JSON array of argument values ('0x..' strings are bytes)",
    )
    parser.add_argument(
        "--legacy",
        action="store_true",
        help="Decode with the lenient legacy policy instead of the strict one",
    )
    parser.add_argument(
        "--exact",
        action="store_true",
        help="Reject trailing bytes after the decoded data",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"abicodec {__version__}",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.layout is not None:
            print_layout(args.layout, parse_types(args.layout))
            return 0

        if args.decode:
            signature, hex_data = args.decode
            policy = LEGACY if args.legacy else STRICT
            if args.exact:
                policy = policy.replace(exact_length=True)
            values = decode_sequence(parse_types(signature), _parse_hex(hex_data), policy)
            for value in values:
                print(json.dumps(_to_display(value)))
            return 0

        if args.encode:
            signature, raw_values = args.encode
            types = parse_types(signature)
            values = _from_json(json.loads(raw_values))
            if not isinstance(values, list) or len(values) != len(types):
                print(f"Error: expected a JSON array of {len(types)} values", file=sys.stderr)
                return 1
            print("0x" + encode_sequence(list(zip(types, values))).hex())
            return 0
    except AbiCodecError as e:
        print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: invalid input: {e}", file=sys.stderr)
        return 1

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
