"""Command-line tools for abicodec."""
