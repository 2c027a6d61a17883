"""Reading, writing and locating JSONL data files, compressed or not."""

from __future__ import annotations

import gzip
import io
import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import zstandard

DEFAULT_EXTENSIONS = (
    ".jsonl",
    ".jsonl.gz",
    ".jsonl.zst",
    ".jsonl.zstd",
    ".json.gz",
    ".json.zst",
)

_ZSTD_SUFFIXES = (".zst", ".zstd")
_GZIP_SUFFIXES = (".gz",)
_ZSTD_LEVEL = 3


def expand_dirs(paths: Iterable[str | Path], extensions: Iterable[str] | None = None) -> list[Path]:
    """Return every data file found under ``paths``, searched recursively, in sorted order.

    A file is kept when its name ends in one of ``extensions`` (by default the
    usual JSONL suffixes, compressed or plain).
    """
    suffixes = tuple(extensions) if extensions is not None else DEFAULT_EXTENSIONS
    found: list[Path] = []
    for root in map(Path, paths):
        candidates = [root] if root.is_file() else root.rglob("*")
        found.extend(p for p in candidates if p.is_file() and p.name.endswith(suffixes))
    return sorted(found)


def get_output_filename(input_file: str | Path, input_dir: str | Path, output_dir: str | Path) -> Path:
    """Map ``input_file`` under ``input_dir`` to the same relative place under ``output_dir``."""
    return Path(output_dir) / Path(input_file).relative_to(Path(input_dir))


def read_file(path: str | Path) -> bytes:
    """Read a file into memory, decompressing it according to its suffix."""
    path = Path(path)
    raw = path.read_bytes()
    if path.name.endswith(_ZSTD_SUFFIXES):
        decompressor = zstandard.ZstdDecompressor()
        with decompressor.stream_reader(io.BytesIO(raw), read_across_frames=True) as reader:
            return reader.readall()
    if path.name.endswith(_GZIP_SUFFIXES):
        return gzip.decompress(raw)
    return raw


def write_file(data: bytes, path: str | Path) -> None:
    """Write ``data`` to ``path``, compressing according to its suffix and creating parent dirs."""
    path = Path(path)
    if path.name.endswith(_ZSTD_SUFFIXES):
        data = zstandard.ZstdCompressor(level=_ZSTD_LEVEL).compress(data)
    elif path.name.endswith(_GZIP_SUFFIXES):
        data = gzip.compress(data)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


def write_output_lines(values: Iterable[Any], path: str | Path) -> bool:
    """Write each value as one compact JSON line; nothing is written when there are no values.

    Returns whether a file was written.
    """
    lines = [json.dumps(v, separators=(",", ":"), ensure_ascii=False) for v in values]
    if not lines:
        return False
    payload = "".join(line + "\n" for line in lines).encode("utf-8")
    write_file(payload, path)
    return True