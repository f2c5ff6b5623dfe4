"""Infrastructure links exposed inside the private root."""
from __future__ import annotations

from dotlocal.core.infrastructure.manager import InfrastructureManager
from dotlocal.core.infrastructure.models import (
    EnsureResult,
    EntryHealth,
    EntryReport,
    InfrastructureEntry,
    RepairResult,
)

__all__ = [
    "InfrastructureManager",
    "EnsureResult",
    "EntryHealth",
    "EntryReport",
    "InfrastructureEntry",
    "RepairResult",
]
