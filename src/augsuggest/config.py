from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from pathlib import Path
from typing import TypeAlias
import tomllib

DEFAULT_CONFIG_NAME = "augsuggest.toml"
DEFAULT_REGEXP_WIDTH = 8

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


@dataclass(frozen=True)
class SuggestConfig:
    """Switches for one run of the rewriting engine."""

    pretty: bool = False
    use_regexp: bool = False
    regexp_width: int = DEFAULT_REGEXP_WIDTH
    noseq: bool = False
    all_nodes: bool = False
    verbose: bool = False
    debug: bool = False

    @property
    def seq_wildcard(self) -> str:
        return "*" if self.noseq else "seq::*"


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def suggest_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("suggest", {})
    return section if isinstance(section, dict) else {}


def _as_bool(value: TomlValue) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return False


def _as_width(value: TomlValue, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int) and value > 0:
        return value
    if isinstance(value, str) and value.strip().isdigit() and int(value) > 0:
        return int(value)
    return default


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged


def build_config(section: TomlTable | None = None) -> SuggestConfig:
    section = section or {}
    return SuggestConfig(
        pretty=_as_bool(section.get("pretty")),
        use_regexp=_as_bool(section.get("regexp")),
        regexp_width=_as_width(section.get("regexp_width"), DEFAULT_REGEXP_WIDTH),
        noseq=_as_bool(section.get("noseq")),
        all_nodes=_as_bool(section.get("all_nodes")),
        verbose=_as_bool(section.get("verbose")),
        debug=_as_bool(section.get("debug")),
    )
