"""Filesystem probes shared by discovery, linking and infrastructure code.

Every helper here re-reads the filesystem; none of them caches.
"""
from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional, Union

_HOME_VAR_RE = re.compile(r"\$\{HOME\}|\$HOME(?![A-Za-z0-9_])")


def expand_path(raw: Union[str, Path], home: Path) -> Path:
    """Expand a leading ``~`` and ``$HOME`` against ``home``, then other variables.

    ``home`` is explicit (rather than ``Path.expanduser``) so that callers
    can point the whole system at a temporary home directory.
    """
    text = _HOME_VAR_RE.sub(lambda _m: str(home), str(raw))
    text = os.path.expandvars(text).strip()
    if text == "~":
        return Path(home)
    if text.startswith("~/"):
        return Path(home) / text[2:]
    return Path(text)


def lexists(path: Path) -> bool:
    """True if ``path`` exists as anything, including a dangling symlink."""
    return os.path.lexists(path)


def read_link(link: Path) -> Optional[Path]:
    """Return the absolute target text of ``link`` or None if it is not a symlink.

    Relative targets are anchored at the link's parent directory; the result
    is normalized but further symlinks are not followed.
    """
    try:
        raw = os.readlink(link)
    except (OSError, ValueError):
        return None
    target = Path(raw)
    if not target.is_absolute():
        target = Path(link).parent / target
    return Path(os.path.normpath(target))


def same_path(a: Path, b: Path) -> bool:
    """Compare two paths textually after making them absolute and normalized."""
    return os.path.normpath(os.path.abspath(a)) == os.path.normpath(os.path.abspath(b))


def is_readable(path: Path) -> bool:
    return os.access(path, os.R_OK)


def is_usable_root(path: Optional[Path]) -> bool:
    """True when ``path`` is a readable and writable directory."""
    if path is None or not str(path):
        return False
    p = Path(path)
    if not p.is_dir():
        return False
    return os.access(p, os.R_OK) and os.access(p, os.W_OK)


__all__ = [
    "expand_path",
    "lexists",
    "read_link",
    "same_path",
    "is_readable",
    "is_usable_root",
]
