"""Tree providers: where the pre-order (path, value) leaves come from.

Loading a file through a lens is left to augeas itself; this module reads
what ``augtool print`` writes::

    /files/etc/hosts/1
    /files/etc/hosts/1/ipaddr = "127.0.0.1"

or a JSON array of ``[path, value]`` pairs.
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from augsuggest.exceptions import DumpFormatError, InvalidTarget
from augsuggest.model import Leaf
from augsuggest.values import unquote

DUMP_FORMATS = ("print", "json")
STDIN_ALIAS = "-"
_VALUE_SEPARATOR = ' = "'


class TreeProvider(Protocol):
    def leaves(self) -> list[Leaf]: ...


def _parse_print_line(line: str, lineno: int) -> Leaf:
    path, sep, rest = line.partition(_VALUE_SEPARATOR)
    value: str | None = None
    if sep:
        if not rest.endswith('"'):
            raise DumpFormatError("unterminated value", line=lineno)
        try:
            value = unquote('"' + rest)
        except ValueError as exc:
            raise DumpFormatError(str(exc), line=lineno) from exc
    path = path.strip()
    if not path.startswith("/"):
        raise DumpFormatError(f"expected an absolute path, got {path!r}", line=lineno)
    return Leaf(path=path, value=value)


def parse_print_dump(text: str) -> list[Leaf]:
    leaves: list[Leaf] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.rstrip("\r")
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        leaves.append(_parse_print_line(line, lineno))
    return leaves


def _leaf_from_json(item: object, idx: int) -> Leaf:
    if isinstance(item, dict):
        path = item.get("path")
        value = item.get("value")
    elif isinstance(item, list) and len(item) in (1, 2):
        path = item[0]
        value = item[1] if len(item) == 2 else None
    else:
        raise DumpFormatError(f"entry {idx} must be a [path, value] pair or an object")
    if not isinstance(path, str) or not path.startswith("/"):
        raise DumpFormatError(f"entry {idx} has no absolute path")
    if value is not None and not isinstance(value, str):
        raise DumpFormatError(f"entry {idx} value must be a string or null")
    return Leaf(path=path, value=value)


def parse_json_dump(text: str) -> list[Leaf]:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DumpFormatError(f"invalid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise DumpFormatError("JSON dump must be an array")
    return [_leaf_from_json(item, idx) for idx, item in enumerate(payload)]


def retarget(leaves: list[Leaf], source: str, target: str) -> list[Leaf]:
    """Move the tree of ``/files<source>`` to ``/files<target>``."""
    if not target.startswith("/"):
        raise InvalidTarget(
            f'target "{target}" must be an absolute path, eg. /etc/{target}'
        )
    old_prefix = "/files" + source.rstrip("/")
    new_prefix = "/files" + target.rstrip("/")
    moved: list[Leaf] = []
    for leaf in leaves:
        if leaf.path == old_prefix or leaf.path.startswith(old_prefix + "/"):
            leaf = Leaf(path=new_prefix + leaf.path[len(old_prefix):], value=leaf.value)
        moved.append(leaf)
    return moved


@dataclass(frozen=True)
class DumpTreeProvider:
    text: str
    format: str = "print"

    @classmethod
    def from_source(cls, source: str, format: str = "print") -> "DumpTreeProvider":
        try:
            if source == STDIN_ALIAS:
                text = sys.stdin.read()
            else:
                text = Path(source).read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise DumpFormatError("dump is not valid UTF-8") from exc
        return cls(text, format)

    def leaves(self) -> list[Leaf]:
        if self.format == "json":
            return parse_json_dump(self.text)
        if self.format == "print":
            return parse_print_dump(self.text)
        raise DumpFormatError(f"unknown dump format {self.format!r}")
