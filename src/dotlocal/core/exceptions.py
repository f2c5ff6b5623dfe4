from __future__ import annotations

from typing import Any, Dict, Mapping


class DotlocalError(Exception):
    """Base exception for dotlocal."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class SettingsError(DotlocalError, ValueError):
    """Raised when tool settings cannot be loaded or fail schema validation."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        DotlocalError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class ConfigFileError(DotlocalError):
    """Raised when dotfiles.conf cannot be read or rewritten."""


class LinkError(DotlocalError):
    """Raised when a link operation receives unusable input."""


class InfrastructureError(DotlocalError):
    """Raised when infrastructure operations receive unusable input."""


__all__ = [
    "DotlocalError",
    "SettingsError",
    "ConfigFileError",
    "LinkError",
    "InfrastructureError",
]
