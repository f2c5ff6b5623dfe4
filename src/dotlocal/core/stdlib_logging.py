from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from dotlocal.core.utils.io import ensure_directory

_DOTLOCAL_HANDLERS: list[logging.Handler] = []

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _level_from_name(name: str) -> int:
    try:
        return int(getattr(logging, name.upper()))
    except (AttributeError, TypeError, ValueError):
        return logging.INFO


def configure_logging(*, level: str = "WARNING", log_path: Optional[Path] = None) -> None:
    """Configure stdlib logging for one CLI invocation.

    Records go to stderr and, when ``log_path`` is given, to that file as
    well. Stdout is never used: it carries command results only.

    Calling this again replaces the handlers installed by the previous call.
    """
    root = logging.getLogger()
    root.setLevel(_level_from_name(level))

    _remove_dotlocal_handlers(root)

    # Drop any stdout handler somebody else installed; stdout is a result channel.
    for h in list(root.handlers):
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stdout:
            root.removeHandler(h)

    fmt = logging.Formatter(_FORMAT)

    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(_level_from_name(level))
    sh.setFormatter(fmt)
    root.addHandler(sh)
    _DOTLOCAL_HANDLERS.append(sh)

    if log_path is not None:
        resolved = Path(log_path).expanduser().resolve()
        ensure_directory(resolved.parent)
        fh = logging.FileHandler(str(resolved), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)
        _DOTLOCAL_HANDLERS.append(fh)
        # The file gets everything; stderr stays at the requested level.
        root.setLevel(logging.DEBUG)


def _remove_dotlocal_handlers(root: logging.Logger) -> None:
    while _DOTLOCAL_HANDLERS:
        h = _DOTLOCAL_HANDLERS.pop()
        root.removeHandler(h)
        try:
            h.close()
        except OSError:
            pass


def reset_logging_for_tests() -> None:
    """Test-only: remove handlers installed by :func:`configure_logging`."""
    _remove_dotlocal_handlers(logging.getLogger())


__all__ = ["configure_logging", "reset_logging_for_tests"]
