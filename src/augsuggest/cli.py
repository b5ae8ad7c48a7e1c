from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import typer

from augsuggest.config import build_config, merge_payload, suggest_defaults
from augsuggest.engine import build_report, suggest
from augsuggest.exceptions import DumpFormatError, InvalidTarget, OutOfMemory
from augsuggest.logs import configure_logging, get_logger
from augsuggest.provider import DUMP_FORMATS, DumpTreeProvider, retarget

app = typer.Typer(add_completion=False)
logger = get_logger(__name__)

_STDOUT_ALIAS = "-"


def _write_text_to_target(target: Path | None, text: str) -> None:
    if target is None or str(target) == _STDOUT_ALIAS:
        typer.echo(text, nl=False)
        return
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text, encoding="utf-8")


def _flag(value: bool) -> bool | None:
    # Unset flags must not override the config file.
    return True if value else None


@app.command()
def main(
    dump: str = typer.Argument(
        ...,
        help="File holding the tree dump (augtool print output), or - for stdin.",
    ),
    pretty: Optional[bool] = typer.Option(
        None, "--pretty/--no-pretty", help="Align predicates and separate entries."
    ),
    regexp: Optional[bool] = typer.Option(
        None,
        "--regexp/--no-regexp",
        help="Use regexp() in path-expressions instead of absolute values.",
    ),
    regexp_width: Optional[int] = typer.Option(
        None,
        "--regexp-width",
        min=1,
        help="Minimum literal length of each regexp (default 8).",
    ),
    noseq: Optional[bool] = typer.Option(
        None,
        "--noseq/--seq",
        help="Use * instead of seq::* (augeas < 1.13.0).",
    ),
    all_nodes: bool = typer.Option(
        False,
        "--all-nodes",
        help="Also emit valueless nodes that a later line would create.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
    debug: bool = typer.Option(False, "--debug", "-d"),
    dump_format: str = typer.Option("print", "--format", help="Dump format: print or json."),
    source: Optional[str] = typer.Option(
        None, "--source", help="File name the dump was loaded from."
    ),
    target: Optional[str] = typer.Option(
        None, "--target", help="Use this file name in the set-commands instead of --source."
    ),
    config: Optional[Path] = typer.Option(None, "--config"),
    json_report: bool = typer.Option(
        False, "--json", help="Emit a JSON report instead of the script."
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o"),
) -> None:
    """Generate augtool set-commands that rebuild a tree without positions."""
    if dump_format not in DUMP_FORMATS:
        raise typer.BadParameter(
            f"--format must be one of {', '.join(DUMP_FORMATS)}", param_hint="--format"
        )
    if target is not None and source is None:
        raise typer.BadParameter("--target requires --source", param_hint="--target")

    payload = {
        "pretty": pretty,
        "regexp": True if regexp is None and regexp_width is not None else regexp,
        "regexp_width": regexp_width,
        "noseq": noseq,
        "all_nodes": _flag(all_nodes),
        "verbose": _flag(verbose),
        "debug": _flag(debug),
    }
    settings = build_config(merge_payload(payload, suggest_defaults(config_path=config)))
    configure_logging(verbose=settings.verbose, debug=settings.debug)
    logger.debug("config", **asdict(settings))

    try:
        leaves = DumpTreeProvider.from_source(dump, dump_format).leaves()
        if target is not None and source is not None:
            leaves = retarget(leaves, source, target)
        result = suggest(leaves, settings)
    except OutOfMemory as exc:
        typer.secho(f"Out of memory {exc.context}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1) from exc
    except (DumpFormatError, InvalidTarget, OSError) as exc:
        typer.secho(f"Error: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=2) from exc

    if json_report:
        report = build_report(result).model_dump()
        _write_text_to_target(output, json.dumps(report, indent=2, sort_keys=True) + "\n")
    else:
        _write_text_to_target(output, result.script())
