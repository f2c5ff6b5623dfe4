"""Private root discovery."""
from __future__ import annotations

from .engine import DiscoveryEngine
from .models import CloudProvider, DiscoveryMethod, ResolvedRoot, RootStatus, RootType

__all__ = [
    "DiscoveryEngine",
    "DiscoveryMethod",
    "CloudProvider",
    "ResolvedRoot",
    "RootStatus",
    "RootType",
]
