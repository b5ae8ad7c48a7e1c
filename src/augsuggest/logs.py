from __future__ import annotations

import logging
import sys

import structlog

_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
    structlog.dev.ConsoleRenderer(colors=False),
]


def configure_logging(*, verbose: bool = False, debug: bool = False) -> None:
    """Route log events to stderr at the requested verbosity.

    Diagnostics never go to stdout, which carries the generated script.
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(message)s",
        force=True,
    )


def get_logger(name: str):
    """structlog logger bound to the stdlib logger ``name``.

    Events always go through stdlib logging, so a caller that never calls
    :func:`configure_logging` only sees warnings, on stderr.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
    )
