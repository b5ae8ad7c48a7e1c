from __future__ import annotations

from pathlib import Path

from augsuggest.config import (
    DEFAULT_CONFIG_NAME,
    SuggestConfig,
    build_config,
    load_config,
    merge_payload,
    suggest_defaults,
)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_load_config_missing_file_is_empty(tmp_path: Path) -> None:
    assert load_config(root=tmp_path) == {}


def test_load_config_invalid_toml_is_empty(tmp_path: Path) -> None:
    _write(tmp_path / DEFAULT_CONFIG_NAME, "[suggest\npretty = ")
    assert load_config(root=tmp_path) == {}


def test_suggest_defaults_reads_section(tmp_path: Path) -> None:
    _write(
        tmp_path / DEFAULT_CONFIG_NAME,
        "[suggest]\npretty = true\nregexp_width = 12\n",
    )
    assert suggest_defaults(root=tmp_path) == {"pretty": True, "regexp_width": 12}


def test_suggest_defaults_explicit_path(tmp_path: Path) -> None:
    config = _write(tmp_path / "other.toml", "[suggest]\nnoseq = true\n")
    assert suggest_defaults(config_path=config) == {"noseq": True}


def test_suggest_defaults_ignores_non_table_section(tmp_path: Path) -> None:
    _write(tmp_path / DEFAULT_CONFIG_NAME, 'suggest = "pretty"\n')
    assert suggest_defaults(root=tmp_path) == {}


def test_merge_payload_skips_unset_values() -> None:
    merged = merge_payload(
        {"pretty": None, "regexp": True},
        {"pretty": True, "regexp": False, "noseq": True},
    )
    assert merged == {"pretty": True, "regexp": True, "noseq": True}


def test_build_config_defaults() -> None:
    assert build_config() == SuggestConfig()
    assert build_config().seq_wildcard == "seq::*"


def test_build_config_coerces_values() -> None:
    config = build_config(
        {
            "pretty": "yes",
            "regexp": 1,
            "regexp_width": "5",
            "noseq": True,
            "all_nodes": "off",
        }
    )
    assert config.pretty is True
    assert config.use_regexp is True
    assert config.regexp_width == 5
    assert config.noseq is True
    assert config.seq_wildcard == "*"
    assert config.all_nodes is False


def test_build_config_rejects_bad_width() -> None:
    assert build_config({"regexp_width": 0}).regexp_width == 8
    assert build_config({"regexp_width": True}).regexp_width == 8
    assert build_config({"regexp_width": "wide"}).regexp_width == 8
