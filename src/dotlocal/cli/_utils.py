"""Shared CLI utility functions.

Every command builds its Settings and Resolver the same way, so flags such
as ``--public-root`` and ``--home`` behave identically everywhere.
"""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Mapping, Optional

from dotlocal.core.exceptions import InfrastructureError
from dotlocal.core.resolver import Resolver
from dotlocal.core.settings import Settings, load_settings
from dotlocal.core.ui import Reporter


def _path_arg(args: argparse.Namespace, name: str) -> Optional[Path]:
    value = getattr(args, name, None)
    if not value:
        return None
    return Path(value).expanduser().absolute()


def load_cli_settings(
    args: argparse.Namespace,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Load settings honouring ``--public-root`` and ``--home``.

    Raises:
        SettingsError: If a settings layer is invalid
    """
    return load_settings(
        public_root=_path_arg(args, "public_root"),
        home=_path_arg(args, "home"),
        environ=environ,
    )


def build_resolver(args: argparse.Namespace, settings: Optional[Settings] = None) -> Resolver:
    """Return the single Resolver used for this invocation."""
    return Resolver(settings or load_cli_settings(args), reporter=Reporter())


def require_private_root(resolver: Resolver, *, verbose: bool = False) -> Path:
    """Discover the private root without creating or linking anything.

    Raises:
        InfrastructureError: If discovery finds no private root
    """
    root = resolver.discover(verbose=verbose).path
    if root is None:
        raise InfrastructureError(
            "No private root found (run 'dotlocal resolve' to create the default)",
            context={"public_root": str(resolver.settings.public_root)},
        )
    return root


__all__ = [
    "load_cli_settings",
    "build_resolver",
    "require_private_root",
]
