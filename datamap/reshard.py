"""Regrouping JSONL files into zstd-compressed shards of bounded size."""

from __future__ import annotations

import math
import os
import random
import threading
from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import zstandard

from datamap.fileio import expand_dirs, get_output_filename, read_file

_ZSTD_LEVEL = 3


class ShardWriter:
    """Appends newline-terminated lines to a zstd-compressed shard file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, 0o644)
        self._file = os.fdopen(fd, "ab")
        self._stream = zstandard.ZstdCompressor(level=_ZSTD_LEVEL).stream_writer(self._file)
        self.lines = 0
        self.size = 0
        self.closed = False

    def write_line(self, line: bytes | str) -> None:
        """Write one line; ``size`` counts the line's bytes without the newline."""
        if self.closed:
            raise ValueError("write to a closed shard")
        if isinstance(line, str):
            line = line.encode("utf-8")
        self._stream.write(line)
        self._stream.write(b"\n")
        self.lines += 1
        self.size += len(line)

    def close(self) -> None:
        """Finish the compressed frame and close the file."""
        if self.closed:
            return
        self._stream.flush(zstandard.FLUSH_FRAME)
        self._file.close()
        self.closed = True

    def __enter__(self) -> ShardWriter:
        return self

    def __exit__(self, *args) -> None:
        self.close()


def get_reshard_name(output_dir: str | Path, shard_id: int) -> Path:
    """Return the path of shard number ``shard_id`` inside ``output_dir``."""
    return Path(output_dir) / f"shard_{shard_id:08d}.jsonl.zst"


def _split(items: Sequence[Path], size: int) -> list[list[Path]]:
    return [list(items[start:start + size]) for start in range(0, len(items), size)]


def group_chunks(files: Sequence[Path], num_workers: int, keep_dirs: bool) -> list[list[Path]]:
    """Split ``files`` into work chunks of at most ceil(len(files) / num_workers) files.

    With ``keep_dirs`` every chunk holds files from a single parent directory.
    """
    files = [Path(f) for f in files]
    if not files:
        return []
    if num_workers < 1:
        raise ValueError("num_workers must be positive")
    chunk_size = -(-len(files) // num_workers)
    if not keep_dirs:
        return _split(files, chunk_size)

    by_dir: dict[Path, list[Path]] = {}
    for f in files:
        by_dir.setdefault(f.parent, []).append(f)
    chunks: list[list[Path]] = []
    for group in by_dir.values():
        chunks.extend([group] if len(group) <= chunk_size else _split(group, chunk_size))
    return chunks


def _iter_lines(data: bytes) -> Iterator[bytes]:
    text = data.decode("utf-8")
    parts = text.split("\n")
    if parts and parts[-1] == "":
        parts.pop()
    for part in parts:
        if part.endswith("\r"):
            part = part[:-1]
        yield part.encode("utf-8")


class _ShardCounter:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._next = 0

    def take(self) -> int:
        with self._lock:
            value = self._next
            self._next += 1
            return value

    @property
    def issued(self) -> int:
        with self._lock:
            return self._next


def _reshard_chunk(
    chunk: list[Path],
    input_dir: Path,
    output_dir: Path,
    counter: _ShardCounter,
    max_lines: float,
    max_size: float,
    subsample: float,
    keep_dirs: bool,
) -> None:
    if keep_dirs:
        parent = chunk[0].parent
        if any(f.parent != parent for f in chunk):
            raise ValueError("chunk mixes files from different directories")
        output_dir = get_output_filename(parent, input_dir, output_dir)

    rng = random.Random()

    def new_writer() -> ShardWriter:
        return ShardWriter(get_reshard_name(output_dir, counter.take()))

    def is_full(w: ShardWriter) -> bool:
        return w.lines >= max_lines or w.size >= max_size

    writer = new_writer()
    try:
        for path in chunk:
            for line in _iter_lines(read_file(path)):
                if subsample == 0.0 or (subsample > 0.0 and rng.random() < subsample):
                    writer.write_line(line)
                    if is_full(writer):
                        writer.close()
                        writer = new_writer()
            if is_full(writer):
                writer.close()
                writer = new_writer()
    finally:
        writer.close()


def reshard(
    input_dir: str | Path,
    output_dir: str | Path,
    max_lines: int = 0,
    max_size: int = 0,
    subsample: float = 0.0,
    keep_dirs: bool = False,
    threads: int = 0,
) -> int:
    """Rewrite every data file under ``input_dir`` into shards under ``output_dir``.

    A shard is closed once it holds ``max_lines`` lines or ``max_size`` bytes of
    line content (0 means unbounded, but at least one bound must be set). A
    positive ``subsample`` keeps each line with that probability; a negative one
    keeps none. Returns the number of shards written.
    """
    if max(max_lines, max_size) <= 0:
        raise ValueError("Either max_lines or max_size must be provided!")
    line_bound: float = max_lines if max_lines > 0 else math.inf
    size_bound: float = max_size if max_size > 0 else math.inf

    input_dir = Path(input_dir)
    output_dir = Path(output_dir)
    workers = threads if threads > 0 else (os.cpu_count() or 1)
    files = expand_dirs([input_dir])
    chunks = group_chunks(files, workers, keep_dirs)

    counter = _ShardCounter()
    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [
            pool.submit(
                _reshard_chunk,
                chunk,
                input_dir,
                output_dir,
                counter,
                line_bound,
                size_bound,
                subsample,
                keep_dirs,
            )
            for chunk in chunks
        ]
        for future in futures:
            future.result()
    return counter.issued