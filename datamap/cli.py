"""Command-line entry point."""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from datamap.reshard import reshard


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the ``datamap`` command."""
    parser = argparse.ArgumentParser(prog="datamap", description="Process JSONL data files.")
    parser.add_argument("--threads", type=int, default=0, help="worker threads (0: one per CPU)")
    commands = parser.add_subparsers(dest="command", required=True)

    resh = commands.add_parser("reshard", help="regroup data files into zstd shards")
    resh.add_argument("--input-dir", type=Path, required=True)
    resh.add_argument("--output-dir", type=Path, required=True)
    resh.add_argument("--max-lines", type=int, default=0)
    resh.add_argument("--max-size", type=int, default=0)
    resh.add_argument("--subsample", type=float, default=0.0)
    resh.add_argument("--keep-dirs", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the command line; returns the process exit status."""
    args = build_parser().parse_args(argv)
    start = time.monotonic()
    try:
        shards = reshard(
            args.input_dir,
            args.output_dir,
            max_lines=args.max_lines,
            max_size=args.max_size,
            subsample=args.subsample,
            keep_dirs=args.keep_dirs,
            threads=args.threads,
        )
    except (ValueError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    elapsed = int(time.monotonic() - start)
    print(f"Finished reshard in {elapsed} seconds | Wrote {shards} new shards")
    return 0


if __name__ == "__main__":
    sys.exit(main())