"""Discovery data models.

Provides the discovery method enum, cloud provider tags and the immutable
result records.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional


class DiscoveryMethod(Enum):
    """How the private root was found, highest priority first."""

    EXPLICIT_CONFIG = ("explicit_config", 1, "dotfiles.conf (explicit configuration)")
    EXISTING_SYMLINK = ("existing_symlink", 2, "existing .dotlocal symlink")
    EXISTING_DIRECTORY = ("existing_directory", 3, "existing .dotlocal directory")
    STANDARD_LOCATION = ("standard_location", 4, "standard ~/.dotlocal directory")
    CLOUD_AUTO_DISCOVERY = ("cloud_auto_discovery", 5, "cloud storage auto-discovery")
    CREATED_DEFAULT = ("created_default", 6, "created default directory")
    NONE = ("none", 7, "not found")

    def __init__(self, key: str, priority: int, label: str) -> None:
        self.key = key
        self.priority = priority
        self.label = label


class CloudProvider(Enum):
    ICLOUD = ("icloud", "iCloud Drive")
    DROPBOX = ("dropbox", "Dropbox")
    GOOGLE_DRIVE = ("google_drive", "Google Drive")
    ONEDRIVE = ("onedrive", "OneDrive")
    NETWORK_STORAGE = ("network_storage", "Network Storage")
    UNKNOWN = ("unknown", "unknown")

    def __init__(self, key: str, display_name: str) -> None:
        self.key = key
        self.display_name = display_name

    @classmethod
    def from_key(cls, key: Optional[str]) -> "CloudProvider":
        for member in cls:
            if member.key == key:
                return member
        return cls.UNKNOWN


class RootType(str, Enum):
    """Shape of the current configuration, independent of discovery."""

    EXPLICIT = "explicit"
    SYMLINK = "symlink"
    DIRECTORY = "directory"
    STANDARD = "standard"
    NONE = "none"


@dataclass(frozen=True, slots=True)
class ResolvedRoot:
    """Outcome of discovery.

    Attributes:
        path: Absolute private root, or None when nothing was found
        method: Tier that produced ``path``
        provider: Cloud provider when ``method`` is CLOUD_AUTO_DISCOVERY
        cached: True when served from the per-process cache
    """

    path: Optional[Path]
    method: DiscoveryMethod
    provider: Optional[CloudProvider] = None
    cached: bool = False

    @classmethod
    def empty(cls) -> "ResolvedRoot":
        return cls(path=None, method=DiscoveryMethod.NONE)

    @property
    def found(self) -> bool:
        return self.path is not None

    def describe(self) -> str:
        """Human-readable method text, e.g. ``cloud storage auto-discovery (Dropbox)``."""
        if self.method is DiscoveryMethod.CLOUD_AUTO_DISCOVERY and self.provider is not None:
            return f"{self.method.label} ({self.provider.display_name})"
        return self.method.label


@dataclass(frozen=True, slots=True)
class RootStatus:
    """Status record exposed to the CLI layer."""

    path: Optional[Path]
    method: DiscoveryMethod
    type: RootType
    exists: bool
    provider: Optional[CloudProvider] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path) if self.path is not None else "",
            "method": self.method.key,
            "method_label": ResolvedRoot(self.path, self.method, self.provider).describe()
            if self.path is not None
            else "",
            "type": self.type.value,
            "exists": self.exists,
        }


__all__ = [
    "DiscoveryMethod",
    "CloudProvider",
    "RootType",
    "ResolvedRoot",
    "RootStatus",
]
