from collections import Counter
from pathlib import Path

import pytest

from datamap.fileio import read_file, write_file
from datamap.reshard import ShardWriter, get_reshard_name, group_chunks, reshard


def _shard_lines(path):
    data = read_file(path)
    return [line for line in data.split(b"\n")[:-1]] if data else []


def _all_shards(root):
    return sorted(Path(root).rglob("shard_*.jsonl.zst"))


def _make_input(root, files):
    for rel, lines in files.items():
        write_file("".join(line + "\n" for line in lines).encode("utf-8"), Path(root) / rel)


def test_get_reshard_name(tmp_path):
    assert get_reshard_name(tmp_path, 3) == tmp_path / "shard_00000003.jsonl.zst"


def test_shard_writer_round_trip(tmp_path):
    target = tmp_path / "sub" / "s.jsonl.zst"
    with ShardWriter(target) as writer:
        writer.write_line(b'{"a":1}')
        writer.write_line('{"b":2}')
        assert writer.lines == 2
        assert writer.size == len(b'{"a":1}') + len(b'{"b":2}')
    assert read_file(target) == b'{"a":1}\n{"b":2}\n'
    with pytest.raises(ValueError):
        writer.write_line("late")


def test_group_chunks_flat_preserves_order_and_bounds_size():
    files = [Path(f"d/f{i}.jsonl") for i in range(5)]
    chunks = group_chunks(files, 2, keep_dirs=False)
    assert [f for c in chunks for f in c] == files
    assert max(len(c) for c in chunks) <= 3


def test_group_chunks_keep_dirs_groups_by_parent():
    files = [Path("a/1.jsonl"), Path("b/1.jsonl"), Path("a/2.jsonl"), Path("a/3.jsonl")]
    chunks = group_chunks(files, 1, keep_dirs=True)
    assert all(len({f.parent for f in c}) == 1 for c in chunks)
    assert sorted(f for c in chunks for f in c) == sorted(files)


def test_group_chunks_empty():
    assert group_chunks([], 4, keep_dirs=True) == []


def test_reshard_requires_a_bound(tmp_path):
    with pytest.raises(ValueError, match="max_lines or max_size"):
        reshard(tmp_path, tmp_path / "out", 0, 0)


def test_reshard_max_lines_keeps_every_line(tmp_path):
    inp = tmp_path / "in"
    files = {"a.jsonl": ["l1", "l2", "l3"], "b.jsonl.zst": ["l4", "l5"]}
    _make_input(inp, files)
    out = tmp_path / "out"
    count = reshard(inp, out, max_lines=2, threads=2)
    shards = _all_shards(out)
    assert count == len(shards)
    written = [line for s in shards for line in _shard_lines(s)]
    expected = [line.encode() for lines in files.values() for line in lines]
    assert Counter(written) == Counter(expected)
    assert all(len(_shard_lines(s)) <= 2 for s in shards)


def test_reshard_max_size_closes_after_each_line(tmp_path):
    inp = tmp_path / "in"
    _make_input(inp, {"a.jsonl": ["abcde", "fghij", "klmno"]})
    out = tmp_path / "out"
    reshard(inp, out, max_size=5, threads=1)
    shards = _all_shards(out)
    assert all(len(_shard_lines(s)) <= 1 for s in shards)
    assert sorted(line for s in shards for line in _shard_lines(s)) == [b"abcde", b"fghij", b"klmno"]


def test_reshard_keep_dirs_mirrors_layout(tmp_path):
    inp = tmp_path / "in"
    _make_input(inp, {"sub1/a.jsonl": ["x"], "sub2/b.jsonl": ["y"]})
    out = tmp_path / "out"
    reshard(inp, out, max_lines=10, keep_dirs=True, threads=2)
    sub1 = [line for s in _all_shards(out / "sub1") for line in _shard_lines(s)]
    sub2 = [line for s in _all_shards(out / "sub2") for line in _shard_lines(s)]
    assert sub1 == [b"x"]
    assert sub2 == [b"y"]


def test_reshard_negative_subsample_drops_everything(tmp_path):
    inp = tmp_path / "in"
    _make_input(inp, {"a.jsonl": ["x", "y", "z"]})
    out = tmp_path / "out"
    reshard(inp, out, max_lines=1, subsample=-1.0, threads=1)
    shards = _all_shards(out)
    assert shards
    assert all(_shard_lines(s) == [] for s in shards)


def test_reshard_subsample_one_keeps_everything(tmp_path):
    inp = tmp_path / "in"
    _make_input(inp, {"a.jsonl": ["x", "y", "z"]})
    out = tmp_path / "out"
    reshard(inp, out, max_lines=100, subsample=1.0, threads=1)
    written = sorted(line for s in _all_shards(out) for line in _shard_lines(s))
    assert written == [b"x", b"y", b"z"]