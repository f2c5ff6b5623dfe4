"""Resolver facade: discover, create, persist, ensure.

One :class:`Resolver` is built per process; it owns the discovery cache, so
every caller in the same invocation sees the same private root.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from dotlocal.core.config_file import ConfigFile
from dotlocal.core.exceptions import ConfigFileError, InfrastructureError
from dotlocal.core.discovery import (
    DiscoveryEngine,
    DiscoveryMethod,
    ResolvedRoot,
    RootStatus,
)
from dotlocal.core.infrastructure import InfrastructureManager
from dotlocal.core.links import LinkPrecedenceManager, ReconcileResult
from dotlocal.core.settings import Settings
from dotlocal.core.ui import Reporter, get_reporter
from dotlocal.core.utils.io import ensure_directory
from dotlocal.core.utils.paths import is_usable_root

logger = logging.getLogger(__name__)


class Resolver:
    """Composes discovery, infrastructure setup and config persistence."""

    def __init__(self, settings: Settings, *, reporter: Optional[Reporter] = None) -> None:
        self.settings = settings
        self._reporter = reporter
        self.engine = DiscoveryEngine(settings, reporter=reporter)
        self.infrastructure = InfrastructureManager(settings, reporter=reporter)

    @property
    def config_file(self) -> ConfigFile:
        return self.engine.config_file

    def discover(self, verbose: bool = False) -> ResolvedRoot:
        return self.engine.discover(verbose)

    def resolve_root(self, create_if_missing: bool = True, verbose: bool = False) -> ResolvedRoot:
        """Like :meth:`resolve` but returns the full ResolvedRoot."""
        ui = get_reporter(verbose, self._reporter)
        result = self.engine.discover(verbose)

        if not result.found and create_if_missing:
            default = self.settings.standard_location
            ui.info(f"No existing dotlocal directory found, creating default: {default}")
            try:
                ensure_directory(default)
            except OSError as exc:
                raise InfrastructureError(
                    f"Cannot create default private root {default}: {exc}",
                    context={"path": str(default)},
                ) from exc
            result = self.engine.record(ResolvedRoot(path=default, method=DiscoveryMethod.CREATED_DEFAULT))

        if result.path is not None:
            self.infrastructure.ensure(result.path, self.settings.public_root, verbose=verbose)
            if result.method is DiscoveryMethod.CLOUD_AUTO_DISCOVERY:
                self._persist(result.path, ui)
        return result

    def _persist(self, root: Path, ui: Reporter) -> None:
        try:
            written = self.config_file.persist_root_hint(root, reason="discovered via cloud auto-discovery")
        except (OSError, ConfigFileError) as exc:
            logger.warning("Cannot record %s in %s: %s", root, self.config_file.path, exc)
            ui.warning(f"Could not update {self.config_file.path}: {exc}")
            return
        if written:
            ui.success(f"Recorded auto-discovered location in {self.config_file.path.name}")

    def resolve(self, create_if_missing: bool = True, verbose: bool = False) -> Optional[Path]:
        """Return the private root, or None when nothing exists and creation is off.

        A cloud-discovered root is written to ``dotfiles.conf`` so later runs
        resolve it explicitly. Infrastructure links are always ensured before
        a path is returned.
        """
        return self.resolve_root(create_if_missing, verbose).path

    def status(self) -> RootStatus:
        """Structured ``{path, method, type, exists}`` for the current state."""
        result = self.engine.discover(False)
        return RootStatus(
            path=result.path,
            method=result.method,
            type=self.engine.classify_root_type(),
            exists=is_usable_root(result.path),
            provider=result.provider,
        )

    def link_manager(self) -> LinkPrecedenceManager:
        return LinkPrecedenceManager(self.settings, reporter=self._reporter)

    def reconcile(self, *, dry_run: bool = False, force: bool = False) -> ReconcileResult:
        """Resolve the private root (without creating one) and link both trees."""
        private = self.resolve(create_if_missing=False) if not dry_run else self.discover().path
        return self.link_manager().reconcile(
            self.settings.public_root, private, dry_run=dry_run, force=force
        )


__all__ = ["Resolver"]
