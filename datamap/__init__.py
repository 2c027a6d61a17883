"""Reshard directories of JSON Lines files into zstd shards, with file and config helpers."""

__version__ = "0.1.0"

__all__ = ["__version__"]