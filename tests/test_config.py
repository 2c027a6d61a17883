import json

import pytest

from datamap.config import ConfigError, parse_config

PIPELINE = {
    "pipeline": [
        {"name": "text_len_filter", "kwargs": {"text_field": "content", "lower_bound": 5}},
        {"name": "word_count_adder", "kwargs": {}},
    ]
}


def test_parse_json_config(tmp_path):
    path = tmp_path / "cfg.json"
    path.write_text(json.dumps(PIPELINE))
    assert parse_config(path) == PIPELINE


def test_parse_yaml_config(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text(
        "pipeline:\n"
        "  - name: text_len_filter\n"
        "    kwargs:\n"
        "      text_field: content\n"
        "      lower_bound: 5\n"
        "  - name: word_count_adder\n"
        "    kwargs: {}\n"
    )
    assert parse_config(path) == PIPELINE


def test_unknown_extension_rejected(tmp_path):
    path = tmp_path / "cfg.toml"
    path.write_text("x = 1")
    with pytest.raises(ConfigError, match="Weird config format"):
        parse_config(path)


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_config(tmp_path / "absent.json")