from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


import pytest

from augsuggest.logs import configure_logging
from augsuggest.model import Leaf


@pytest.fixture(autouse=True)
def _quiet_logging():
    configure_logging()
    yield


@pytest.fixture
def make_leaves():
    def _make(*pairs: tuple[str, str | None]) -> list[Leaf]:
        return [Leaf(path=path, value=value) for path, value in pairs]

    return _make


@pytest.fixture
def hosts_dump() -> str:
    return "\n".join(
        [
            "/files",
            "/files/etc",
            "/files/etc/hosts",
            "/files/etc/hosts/1",
            '/files/etc/hosts/1/ipaddr = "127.0.0.1"',
            '/files/etc/hosts/1/canonical = "localhost"',
            "/files/etc/hosts/2",
            '/files/etc/hosts/2/ipaddr = "127.0.0.1"',
            '/files/etc/hosts/2/canonical = "other"',
            "",
        ]
    )
