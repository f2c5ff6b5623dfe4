"""Link data models.

Provides immutable dataclasses for planned links and reconcile results.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional


class LinkOrigin(str, Enum):
    PUBLIC = "public"
    LOCAL = "local"


class LinkOutcome(str, Enum):
    """Result of materializing one LinkSpec."""

    CREATED = "created"
    ALREADY_LINKED = "already_linked"
    DRY_RUN = "dry_run"
    # Target exists and was not force-overwritten: needs manual resolution.
    CONFLICT = "conflict"
    FAILED = "failed"

    @property
    def ok(self) -> bool:
        return self in (LinkOutcome.CREATED, LinkOutcome.ALREADY_LINKED, LinkOutcome.DRY_RUN)


@dataclass(frozen=True, slots=True)
class LinkSpec:
    """A planned home-directory symlink.

    Attributes:
        source: Marker file inside the public tree or private root
        target: Symlink path in the home directory
        display_name: Short ``target → parent/source`` text for reports
        origin: Which population produced the spec
    """

    source: Path
    target: Path
    display_name: str
    origin: LinkOrigin = LinkOrigin.PUBLIC


@dataclass(frozen=True, slots=True)
class LinkResult:
    spec: LinkSpec
    outcome: LinkOutcome
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": str(self.spec.source),
            "target": str(self.spec.target),
            "origin": self.spec.origin.value,
            "outcome": self.outcome.value,
            "error": self.error,
        }


@dataclass
class ReconcileResult:
    """Aggregate counts from a two-phase reconcile run."""

    public_count: int = 0
    local_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0
    conflict_count: int = 0
    dry_run: bool = False
    results: List[LinkResult] = field(default_factory=list)

    @property
    def conflicts(self) -> List[LinkResult]:
        return [r for r in self.results if r.outcome is LinkOutcome.CONFLICT]

    def to_dict(self) -> dict[str, Any]:
        return {
            "public_count": self.public_count,
            "local_count": self.local_count,
            "skipped_count": self.skipped_count,
            "failed_count": self.failed_count,
            "conflict_count": self.conflict_count,
            "dry_run": self.dry_run,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass(frozen=True, slots=True)
class ManagedLink:
    """A home symlink that points into the public tree or private root."""

    link: Path
    target: Path
    origin: LinkOrigin


__all__ = [
    "LinkOrigin",
    "LinkOutcome",
    "LinkSpec",
    "LinkResult",
    "ReconcileResult",
    "ManagedLink",
]
