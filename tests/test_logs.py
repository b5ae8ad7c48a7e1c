from __future__ import annotations

import logging

import structlog

from augsuggest import suggest
from augsuggest.logs import configure_logging


def test_unconfigured_logging_keeps_stdout_clean(monkeypatch, capsys, make_leaves) -> None:
    structlog.reset_defaults()
    monkeypatch.setattr(logging.root, "handlers", [])
    logging.root.setLevel(logging.WARNING)

    result = suggest(make_leaves(("/r/e[2]/a", "1"), ("/r/e[3]/a", "2")))

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "missing_predicate" in captured.err
    assert "segmented" not in captured.err
    assert result.lines == ["set /r/e[a='1']/a '1'", "set /r/e[a='2']/a '2'"]


def test_debug_events_go_to_stderr(capsys, make_leaves) -> None:
    configure_logging(debug=True)
    suggest(make_leaves(("/r/e[1]/a", "1")))
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "tier_first_tail" in captured.err
