"""Shared utilities for dotlocal core."""
from __future__ import annotations

from .io import (
    PathLike,
    atomic_write,
    ensure_directory,
    ensure_parent_dir,
    write_text,
)
from .merge import deep_merge, merge_arrays
from .paths import (
    expand_path,
    is_readable,
    is_usable_root,
    lexists,
    read_link,
    same_path,
)
from .time import backup_suffix, utc_now

__all__ = [
    "PathLike",
    "atomic_write",
    "ensure_directory",
    "ensure_parent_dir",
    "write_text",
    "deep_merge",
    "merge_arrays",
    "expand_path",
    "is_readable",
    "is_usable_root",
    "lexists",
    "read_link",
    "same_path",
    "backup_suffix",
    "utc_now",
]
