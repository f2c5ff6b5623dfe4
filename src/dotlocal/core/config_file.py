"""Reader and writer for ``dotfiles.conf``.

The file is a user-owned list of ``KEY=VALUE`` lines. Only lines that look
like an upper-case shell assignment are honoured; everything else (comments,
blank lines, stray commands) is preserved verbatim on rewrite but otherwise
ignored. Values follow shell quoting rules, so a trailing ``# comment`` is
not part of the value. The last assignment of a key wins, as in a shell.

Recognized keys:
- ``DOTLOCAL``: explicit private root (tier 1 of discovery)
- ``LOCAL_DOTS``: legacy spelling of ``DOTLOCAL``; used only when ``DOTLOCAL`` is absent
- ``BACKUP_PATH`` / ``AUTO_SNAPSHOT``: owned by other tools, never modified here
"""
from __future__ import annotations

import logging
import re
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from dotlocal.core.exceptions import ConfigFileError
from dotlocal.core.utils.io import write_text
from dotlocal.core.utils.paths import expand_path

logger = logging.getLogger(__name__)

ROOT_KEY = "DOTLOCAL"
LEGACY_ROOT_KEY = "LOCAL_DOTS"
BACKUP_KEY = "BACKUP_PATH"
SNAPSHOT_KEY = "AUTO_SNAPSHOT"

_ASSIGNMENT_RE = re.compile(r"^([A-Z_][A-Z0-9_]*)=(.*)$")
_LOCAL_LINK_RE = re.compile(r"^ln -s.*local")


def _unquote(raw: str) -> str:
    value = raw.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    return value


def _parse_value(raw: str) -> str:
    """Read an assignment's value the way a shell would.

    Quotes are removed and a trailing ``# comment`` is dropped. Only the
    first word counts; anything after it is not part of the assignment.
    """
    try:
        words = shlex.split(raw, comments=True)
    except ValueError:
        # Unbalanced quotes: keep the text rather than dropping the line.
        return _unquote(raw.split(" #", 1)[0])
    return words[0] if words else ""


def parse_assignments(text: str) -> List[Tuple[int, str, str]]:
    """Return ``(line_number, key, value)`` for every honoured assignment line."""
    found: List[Tuple[int, str, str]] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        m = _ASSIGNMENT_RE.match(line)
        if m:
            found.append((lineno, m.group(1), _parse_value(m.group(2))))
    return found


@dataclass(frozen=True)
class ConfigIssue:
    """A problem found by :meth:`ConfigFile.validate`."""

    severity: str  # "error" | "warning"
    message: str
    line: Optional[int] = None

    def to_dict(self) -> Dict[str, object]:
        return {"severity": self.severity, "message": self.message, "line": self.line}


class ConfigFile:
    """Access to one ``dotfiles.conf`` file.

    Reads always go to disk; the only state kept is whether the last
    :meth:`load` found a file, which discovery reports alongside its cache.
    """

    def __init__(self, path: Path, home: Path) -> None:
        self.path = Path(path)
        self.home = Path(home)
        self.loaded: Optional[bool] = None

    def _read(self) -> Optional[str]:
        if not self.path.exists():
            return None
        if self.path.is_dir():
            raise ConfigFileError(
                f"Config path is a directory: {self.path}", context={"path": str(self.path)}
            )
        try:
            # newline="" keeps CRLF endings intact for rewrites.
            with self.path.open(encoding="utf-8", newline="") as f:
                return f.read()
        except OSError as exc:
            raise ConfigFileError(
                f"Cannot read {self.path}: {exc}", context={"path": str(self.path)}
            ) from exc

    def load(self) -> Dict[str, str]:
        """Parse the file into ``{KEY: value}`` (last assignment wins).

        A missing file yields an empty mapping and sets ``loaded`` to False.
        """
        text = self._read()
        if text is None:
            self.loaded = False
            return {}
        values: Dict[str, str] = {}
        for _, key, value in parse_assignments(text):
            values[key] = value
        self.loaded = True
        return values

    def root_hint(self) -> Optional[Path]:
        """Return the configured private root (expanded), or None."""
        values = self.load()
        raw = values.get(ROOT_KEY) or values.get(LEGACY_ROOT_KEY)
        if not raw:
            return None
        return expand_path(raw, self.home)

    def raw_root_hint(self) -> Optional[str]:
        values = self.load()
        return values.get(ROOT_KEY) or values.get(LEGACY_ROOT_KEY) or None

    def set_value(self, key: str, value: str, *, header: Optional[str] = None) -> None:
        """Set ``key`` to ``value``, preserving every other line.

        The last existing assignment of ``key`` is rewritten in place; if
        there is none the assignment is appended. A new file starts with
        ``header`` (comment lines) when given.
        """
        if not _ASSIGNMENT_RE.match(f"{key}="):
            raise ConfigFileError(f"Invalid config key: {key!r}", context={"key": key})
        text = self._read()
        new_line = f'{key}="{value}"'

        if text is None:
            lines: List[str] = list(header.splitlines()) if header else []
            lines.append(new_line)
            write_text(self.path, "\n".join(lines) + "\n")
            return

        lines = text.splitlines(keepends=True)
        eol = "\r\n" if "\r\n" in text else "\n"
        target_index: Optional[int] = None
        for lineno, existing_key, _ in parse_assignments(text):
            if existing_key == key:
                target_index = lineno - 1
        if target_index is None:
            if lines and not lines[-1].endswith(("\n", "\r")):
                lines[-1] += eol
            lines.append(new_line + eol)
        else:
            old = lines[target_index]
            lines[target_index] = new_line + old[len(old.rstrip("\r\n")):]
        write_text(self.path, "".join(lines))

    def persist_root_hint(self, root: Path, *, reason: str) -> bool:
        """Record ``root`` as the explicit private root.

        An existing ``DOTLOCAL`` assignment is never replaced: the user's
        explicit choice wins over anything found automatically.

        Returns:
            True if the file was written.
        """
        values = self.load()
        if values.get(ROOT_KEY):
            logger.info("Not persisting %s: %s already set in %s", root, ROOT_KEY, self.path)
            return False
        header = (
            "# Dotfiles Configuration\n"
            "# Auto-generated by dotlocal\n"
            "\n"
            f"# Local configuration directory ({reason})"
        )
        self.set_value(ROOT_KEY, str(root), header=header)
        return True

    def validate(self) -> List[ConfigIssue]:
        """Check the file for common mistakes. A missing file is valid."""
        text = self._read()
        if text is None:
            return []

        issues: List[ConfigIssue] = []
        assignments = parse_assignments(text)
        root_lines = [a for a in assignments if a[1] == ROOT_KEY]
        legacy_lines = [a for a in assignments if a[1] == LEGACY_ROOT_KEY]
        backup_lines = [a for a in assignments if a[1] == BACKUP_KEY]

        if len(root_lines) > 1 or len(legacy_lines) > 1:
            dupes = root_lines if len(root_lines) > 1 else legacy_lines
            issues.append(
                ConfigIssue(
                    "error",
                    f"Multiple {dupes[0][1]} definitions (lines "
                    f"{', '.join(str(a[0]) for a in dupes)}); the last one takes precedence",
                    dupes[-1][0],
                )
            )

        if root_lines and legacy_lines:
            issues.append(
                ConfigIssue(
                    "warning",
                    f"Both {LEGACY_ROOT_KEY} and {ROOT_KEY} are defined; {ROOT_KEY} takes precedence",
                    legacy_lines[0][0],
                )
            )

        for lineno, line in enumerate(text.splitlines(), start=1):
            if line.startswith("ln -s"):
                issues.append(
                    ConfigIssue("error", f"Uncommented 'ln -s' command: {line.strip()}", lineno)
                )

        hint_lines = root_lines or legacy_lines
        link_lines = [n for n, line in enumerate(text.splitlines(), start=1) if _LOCAL_LINK_RE.match(line)]
        if hint_lines and link_lines:
            issues.append(
                ConfigIssue(
                    "warning",
                    f"Both {ROOT_KEY}/{LEGACY_ROOT_KEY} and symlink creation are active; use only one method",
                    link_lines[0],
                )
            )

        if hint_lines:
            lineno, key, raw = hint_lines[-1]
            if raw and not expand_path(raw, self.home).is_dir():
                issues.append(
                    ConfigIssue("warning", f"{key} points to a missing directory: {raw}", lineno)
                )

        if len(backup_lines) > 1:
            issues.append(
                ConfigIssue(
                    "warning",
                    f"Multiple {BACKUP_KEY} definitions; only the last one is used",
                    backup_lines[-1][0],
                )
            )

        # The file lives at the top of the public tree.
        local_dir = self.path.parent / ".local"
        if local_dir.is_symlink() and (local_dir / ".dotlocal").is_dir():
            issues.append(
                ConfigIssue(
                    "warning",
                    f"{local_dir} is a symlink but contains .dotlocal; this may cause circular references",
                )
            )

        return issues


__all__ = [
    "ConfigFile",
    "ConfigIssue",
    "parse_assignments",
    "ROOT_KEY",
    "LEGACY_ROOT_KEY",
    "BACKUP_KEY",
    "SNAPSHOT_KEY",
]
