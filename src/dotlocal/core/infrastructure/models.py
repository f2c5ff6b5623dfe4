"""Infrastructure link models."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional


class EntryHealth(str, Enum):
    HEALTHY = "healthy"
    ABSENT = "absent"
    NOT_SYMLINK = "not_symlink"
    BROKEN = "broken"
    MISMATCHED = "mismatched"


@dataclass(frozen=True, slots=True)
class InfrastructureEntry:
    """One required link inside the private root.

    Attributes:
        name: Link name relative to the private root
        target: Absolute path the link must point at
    """

    name: str
    target: Path


@dataclass(frozen=True, slots=True)
class EntryReport:
    entry: InfrastructureEntry
    link: Path
    health: EntryHealth
    actual_target: Optional[Path] = None

    @property
    def healthy(self) -> bool:
        return self.health is EntryHealth.HEALTHY

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.entry.name,
            "link": str(self.link),
            "expected": str(self.entry.target),
            "actual": str(self.actual_target) if self.actual_target is not None else None,
            "health": self.health.value,
        }


@dataclass
class EnsureResult:
    """Names of entries per outcome from one ``ensure`` pass."""

    created: List[str] = field(default_factory=list)
    unchanged: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "created": list(self.created),
            "unchanged": list(self.unchanged),
            "skipped": list(self.skipped),
            "failed": list(self.failed),
        }


@dataclass
class RepairResult:
    baseline_issues: int = 0
    removed: List[str] = field(default_factory=list)
    backed_up: List[Path] = field(default_factory=list)
    remaining_issues: int = 0
    reports: List[EntryReport] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "baseline_issues": self.baseline_issues,
            "removed": list(self.removed),
            "backed_up": [str(p) for p in self.backed_up],
            "remaining_issues": self.remaining_issues,
            "entries": [r.to_dict() for r in self.reports],
        }


__all__ = [
    "EntryHealth",
    "InfrastructureEntry",
    "EntryReport",
    "EnsureResult",
    "RepairResult",
]
