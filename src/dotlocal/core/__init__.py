"""Core library for dotlocal.

Nothing in this package writes to stdout: results are returned to callers
and diagnostics go to the reporter (stderr) or stdlib logging.
"""
from __future__ import annotations

from .exceptions import (
    ConfigFileError,
    DotlocalError,
    InfrastructureError,
    LinkError,
    SettingsError,
)

__all__ = [
    "DotlocalError",
    "SettingsError",
    "ConfigFileError",
    "LinkError",
    "InfrastructureError",
]
