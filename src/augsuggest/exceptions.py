"""Exception types raised by augsuggest."""

from __future__ import annotations


class AugsuggestError(RuntimeError):
    """Base class for errors reported to the command line."""


class OutOfMemory(AugsuggestError):
    """A run could not allocate its working state.

    The run is abandoned as a whole; no partial script is produced.
    """

    def __init__(self, context: str):
        super().__init__(context)
        self.context = context


class DumpFormatError(AugsuggestError):
    def __init__(self, message: str, *, line: int | None = None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class InvalidTarget(AugsuggestError):
    pass
