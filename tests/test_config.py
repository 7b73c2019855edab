from __future__ import annotations

import pytest

from ndjson_stream.config import DecodeOptions, load_decode_options
from ndjson_stream.paths import find_config_file


def test_defaults_when_file_missing(tmp_path) -> None:
    opts = load_decode_options(tmp_path / "missing.yaml")

    assert opts == DecodeOptions()
    assert opts.batch_size == 25
    assert opts.errors == "replace"
    assert opts.max_record_chars is None


def test_load_from_yaml(tmp_path) -> None:
    p = tmp_path / "ndjson-stream.yaml"
    p.write_text(
        "\n".join(
            [
                "encoding: latin-1",
                "errors: strict",
                "max_record_chars: 4096",
                "chunk_size: 1024",
                "batch_size: 100",
                "unknown_key: ignored",
                "",
            ]
        ),
        encoding="utf-8",
    )

    opts = load_decode_options(p)

    assert opts == DecodeOptions(
        encoding="latin-1", errors="strict", max_record_chars=4096, chunk_size=1024, batch_size=100
    )


def test_wrong_types_fall_back_to_defaults(tmp_path) -> None:
    p = tmp_path / "ndjson-stream.yaml"
    p.write_text("batch_size: true\nchunk_size: big\nencoding: 7\n", encoding="utf-8")

    assert load_decode_options(p) == DecodeOptions()


def test_non_mapping_yaml_is_ignored(tmp_path) -> None:
    p = tmp_path / "ndjson-stream.yaml"
    p.write_text("- just\n- a list\n", encoding="utf-8")

    assert load_decode_options(p) == DecodeOptions()


def test_invalid_values_rejected() -> None:
    with pytest.raises(ValueError):
        DecodeOptions(batch_size=0)
    with pytest.raises(ValueError):
        DecodeOptions(max_record_chars=0)
    with pytest.raises(ValueError):
        DecodeOptions(chunk_size=-1)
    with pytest.raises(LookupError):
        DecodeOptions(encoding="no-such-codec")


def test_with_overrides_skips_none() -> None:
    opts = DecodeOptions(batch_size=10).with_overrides(batch_size=None, max_record_chars=64)

    assert opts.batch_size == 10
    assert opts.max_record_chars == 64


def test_find_config_file_walks_up(tmp_path) -> None:
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    cfg = tmp_path / "ndjson-stream.yaml"
    cfg.write_text("batch_size: 5\n", encoding="utf-8")

    assert find_config_file(nested) == cfg.resolve()


@pytest.mark.parametrize("line", ["batch_size: 0", "chunk_size: 0", "max_record_chars: -5"])
def test_out_of_range_yaml_values_rejected(tmp_path, line) -> None:
    p = tmp_path / "ndjson-stream.yaml"
    p.write_text(line + "\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_decode_options(p)


def test_unknown_yaml_encoding_rejected(tmp_path) -> None:
    p = tmp_path / "ndjson-stream.yaml"
    p.write_text("encoding: no-such-codec\n", encoding="utf-8")

    with pytest.raises(LookupError):
        load_decode_options(p)
