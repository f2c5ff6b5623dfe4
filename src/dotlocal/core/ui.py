"""Diagnostic output for dotlocal.

Core functions are wrapped by callers that capture their return values, so
every human-readable message goes to a separate stream (stderr by default).
Nothing in this module ever writes to stdout.

Style:
- Header: bold-free title line used for major sections
- Info: ``›`` prefix for general information
- Success: ``✓`` prefix for completed operations
- Warning: ``!`` prefix
- Error: ``✗`` prefix
- Progress: ``⟳`` prefix for ongoing operations

Streams that cannot encode those symbols get the plain ASCII prefixes
(``>``, ``[OK]``, ``[!]``, ``[FAIL]``, ``...``).
"""
from __future__ import annotations

import codecs
import sys
from typing import Dict, Optional, TextIO

_UNICODE_SYMBOLS: Dict[str, str] = {
    "info": "›",
    "success": "✓",
    "warning": "!",
    "error": "✗",
    "progress": "⟳",
    "bullet": "•",
    "arrow": "→",
}

_ASCII_SYMBOLS: Dict[str, str] = {
    "info": ">",
    "success": "[OK]",
    "warning": "[!]",
    "error": "[FAIL]",
    "progress": "...",
    "bullet": "*",
    "arrow": "->",
}


def _supports_unicode(stream: TextIO) -> bool:
    encoding = getattr(stream, "encoding", None)
    if not encoding:
        return False
    try:
        return codecs.lookup(encoding).name in {"utf-8", "utf-16", "utf-32"}
    except LookupError:
        return False


class Reporter:
    """Formatted diagnostics written to a non-result stream."""

    def __init__(self, stream: Optional[TextIO] = None, *, ascii_only: Optional[bool] = None) -> None:
        self._stream = stream
        self._ascii_only = ascii_only

    @property
    def stream(self) -> TextIO:
        # Resolved lazily so pytest's capsys replacement of sys.stderr is honoured.
        return self._stream if self._stream is not None else sys.stderr

    @property
    def symbols(self) -> Dict[str, str]:
        ascii_only = self._ascii_only
        if ascii_only is None:
            ascii_only = not _supports_unicode(self.stream)
        return _ASCII_SYMBOLS if ascii_only else _UNICODE_SYMBOLS

    @property
    def arrow(self) -> str:
        return self.symbols["arrow"]

    def _emit(self, line: str) -> None:
        print(line, file=self.stream)

    def header(self, text: str) -> None:
        self._emit("")
        self._emit(text)
        self._emit("=" * len(text))

    def info(self, message: str) -> None:
        self._emit(f"{self.symbols['info']} {message}")

    def success(self, message: str) -> None:
        self._emit(f"{self.symbols['success']} {message}")

    def warning(self, message: str) -> None:
        self._emit(f"{self.symbols['warning']} {message}")

    def error(self, message: str) -> None:
        self._emit(f"{self.symbols['error']} {message}")

    def progress(self, message: str) -> None:
        self._emit(f"{self.symbols['progress']} {message}")

    def item(self, message: str, indent: int = 2) -> None:
        self._emit(f"{' ' * indent}{self.symbols['bullet']} {message}")

    def summary(self, title: str, counts: Dict[str, int]) -> None:
        """Print a titled block of ``label: count`` lines."""
        self._emit("")
        self.info(title)
        for label, value in counts.items():
            self._emit(f"    {label}: {value}")


class NullReporter(Reporter):
    """Reporter that discards everything (non-verbose mode)."""

    def _emit(self, line: str) -> None:
        return None


def get_reporter(verbose: bool, reporter: Optional[Reporter] = None) -> Reporter:
    """Return ``reporter`` when verbose, else a NullReporter.

    Errors are never silenced by this helper: callers that must surface a
    failure regardless of verbosity hold on to their own reporter.
    """
    if not verbose:
        return NullReporter()
    return reporter if reporter is not None else Reporter()


__all__ = ["Reporter", "NullReporter", "get_reporter"]
