"""Home-directory link management (marker scan and two-phase precedence)."""
from __future__ import annotations

from dotlocal.core.links.manager import LinkPrecedenceManager
from dotlocal.core.links.models import (
    LinkOrigin,
    LinkOutcome,
    LinkResult,
    LinkSpec,
    ManagedLink,
    ReconcileResult,
)
from dotlocal.core.links.scanner import classify, iter_link_specs, target_name

__all__ = [
    "LinkPrecedenceManager",
    "LinkOrigin",
    "LinkOutcome",
    "LinkResult",
    "LinkSpec",
    "ManagedLink",
    "ReconcileResult",
    "classify",
    "iter_link_specs",
    "target_name",
]
