# datamap

A command-line tool and a small library for working with directories of JSON
Lines files, plain or compressed with zstd or gzip.

## Installation

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## Resharding

`datamap reshard` finds every data file under an input directory, searching
recursively, and rewrites its lines into zstd-compressed shards named
`shard_00000000.jsonl.zst`, `shard_00000001.jsonl.zst`, and so on.

```
datamap reshard --input-dir data/raw --output-dir data/sharded --max-lines 100000
```

The files that count as data files are those whose names end in `.jsonl`,
`.jsonl.gz`, `.jsonl.zst`, `.jsonl.zstd`, `.json.gz` or `.json.zst`.

Options of `reshard`:

- `--input-dir DIR` (required): where to look for data files.
- `--output-dir DIR` (required): where to write the shards. It is created if
  needed.
- `--max-lines N`: close a shard once it holds N lines.
- `--max-size BYTES`: close a shard once the lines in it add up to this many
  bytes, not counting newlines or compression.
- `--subsample P`: keep each line with probability P. 0 (the default) keeps
  every line; a negative value keeps none.
- `--keep-dirs`: keep the input's directory layout, so shards for files in
  `data/raw/a/` are written to `data/sharded/a/`.

At least one of `--max-lines` or `--max-size` must be given; a value of 0 means
no bound.

`--threads N` is an option of the command itself and goes before `reshard`:

```
datamap --threads 4 reshard --input-dir data/raw --output-dir data/sharded --max-size 100000000
```

With 0 (the default) one worker thread per CPU is used. The files are divided
into as many chunks as there are workers; each chunk is written by one worker
into its own shards. With `--keep-dirs` a chunk never mixes files from
different directories. Shard numbers are handed out across all workers and
directories, so each shard name is unique within the run.

A shard is also closed at the end of each input file once it has reached a
bound, and each worker starts a fresh shard whenever it closes one, so a run
can leave some empty shards behind.

When done, the command prints how long it took and how many shards it wrote.
On a bad argument or a file error it prints `error: ...` to standard error and
exits with status 1.

## Configuration files

`datamap.config.parse_config(path)` loads a `.json` or `.yaml` file and returns
its contents as plain Python data. Any other extension raises `ConfigError`, a
subclass of `ValueError`.

```python
from datamap.config import parse_config

config = parse_config("pipeline.yaml")
```

## Library helpers

`datamap.fileio`:

- `expand_dirs(paths, extensions=None)` returns, sorted, every file under the
  given paths (a path may also be a single file) whose name ends in one of
  `extensions`, by default the data-file suffixes listed above.
- `get_output_filename(input_file, input_dir, output_dir)` maps a path under
  `input_dir` to the same relative path under `output_dir`.
- `read_file(path)` reads a file into bytes, decompressing `.zst`, `.zstd` and
  `.gz` files.
- `write_file(data, path)` writes bytes, compressing for `.zst`, `.zstd`
  (level 3) and `.gz` names, and creates parent directories.
- `write_output_lines(values, path)` writes each value as one compact JSON line.
  With no values it writes nothing and returns `False`; otherwise `True`.

`datamap.reshard`:

- `ShardWriter(path)` opens a zstd shard for appending, creating parent
  directories. `write_line(line)` takes `str` or `bytes` and adds a newline;
  the `lines` and `size` attributes count lines and their bytes. `close()`
  finishes the file. It works as a context manager.
- `get_reshard_name(output_dir, shard_id)` returns
  `output_dir/shard_XXXXXXXX.jsonl.zst`.
- `group_chunks(files, num_workers, keep_dirs)` splits a list of files into
  chunks of at most `ceil(len(files) / num_workers)` files, grouped by parent
  directory when `keep_dirs` is true.
- `reshard(input_dir, output_dir, max_lines=0, max_size=0, subsample=0.0,
  keep_dirs=False, threads=0)` does what the command does and returns the
  number of shards written. It raises `ValueError` when neither bound is set.

## What this package does not do

There is no command that runs a processing pipeline over documents: no
mapping, filtering or per-step statistics. `parse_config` will read a pipeline
configuration file, but the package has no processors to apply it to; the only
command is `reshard`.