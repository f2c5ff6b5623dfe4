"""Private root discovery.

Resolution priority (first success wins, later tiers are never probed):
1. ``DOTLOCAL`` in ``dotfiles.conf`` when it names an existing directory
2. ``<public>/.dotlocal`` as a symlink whose target is a directory
3. ``<public>/.dotlocal`` as a real directory
4. The standard location (``~/.dotlocal``)
5. Well-known cloud-sync folders, in configured order

Nothing found is not an error: the result is ``ResolvedRoot.empty()``.

The first result is cached on the engine for the rest of the process and
returned on every later call without re-checking the filesystem. Build one
engine per invocation; :meth:`DiscoveryEngine.clear_cache` exists for tests.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Optional

from dotlocal.core.config_file import ConfigFile
from dotlocal.core.exceptions import ConfigFileError
from dotlocal.core.discovery.models import (
    CloudProvider,
    DiscoveryMethod,
    ResolvedRoot,
    RootType,
)
from dotlocal.core.settings import Settings
from dotlocal.core.ui import Reporter, get_reporter
from dotlocal.core.utils.paths import read_link

logger = logging.getLogger(__name__)

Probe = Callable[[Reporter], Optional[ResolvedRoot]]


class DiscoveryEngine:
    """Runs the five-tier search and memoizes its outcome."""

    def __init__(self, settings: Settings, *, reporter: Optional[Reporter] = None) -> None:
        self.settings = settings
        self.config_file = ConfigFile(settings.config_file, settings.home)
        self._reporter = reporter
        self._cached: Optional[ResolvedRoot] = None
        self._config_loaded: Optional[bool] = None

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    @property
    def cached_result(self) -> Optional[ResolvedRoot]:
        return self._cached

    @property
    def config_loaded(self) -> Optional[bool]:
        """Whether tier 1 found a config file (None until discovery ran)."""
        return self._config_loaded

    def record(self, result: ResolvedRoot) -> ResolvedRoot:
        """Replace the cached result (used by the resolver after creating a default)."""
        self._cached = replace(result, cached=False)
        return self._cached

    def clear_cache(self) -> None:
        """Forget the cached path, method and config-loaded flag."""
        self._cached = None
        self._config_loaded = None
        self.config_file.loaded = None

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def discover(self, verbose: bool = False) -> ResolvedRoot:
        """Return the private root, computing it on first call only."""
        if self._cached is not None:
            return replace(self._cached, cached=True)

        ui = get_reporter(verbose, self._reporter)
        ui.info("Starting 5-level dotlocal auto-discovery...")

        result = ResolvedRoot.empty()
        for probe in self._probes():
            found = probe(ui)
            if found is not None:
                result = found
                break

        if not result.found:
            logger.debug("No private root found under %s", self.settings.public_root)

        self._cached = result
        return result

    def _probes(self) -> list[Probe]:
        return [
            self._probe_explicit_config,
            self._probe_existing_symlink,
            self._probe_existing_directory,
            self._probe_standard_location,
            self._probe_cloud_locations,
        ]

    def _probe_explicit_config(self, ui: Reporter) -> Optional[ResolvedRoot]:
        try:
            hint = self.config_file.root_hint()
        except ConfigFileError as exc:
            # An unreadable config file is a tier miss, not a discovery failure.
            logger.warning("Ignoring unreadable %s: %s", self.config_file.path, exc)
            self._config_loaded = False
            ui.warning(f"Level 1: cannot read {self.config_file.path}: {exc}")
            return None
        self._config_loaded = bool(self.config_file.loaded)
        if hint is None:
            return None
        if hint.is_dir():
            ui.success(f"Level 1: Found via {self.settings.config_filename}: {hint}")
            return ResolvedRoot(path=hint, method=DiscoveryMethod.EXPLICIT_CONFIG)
        ui.warning(
            f"Level 1: {self.settings.config_filename} specifies DOTLOCAL='{hint}' "
            "but directory doesn't exist"
        )
        return None

    def _probe_existing_symlink(self, ui: Reporter) -> Optional[ResolvedRoot]:
        marker = self.settings.marker_path
        if not marker.is_symlink():
            return None
        target = read_link(marker)
        if target is not None and target.is_dir():
            ui.success(f"Level 2: Found via existing symlink: {target}")
            return ResolvedRoot(path=target, method=DiscoveryMethod.EXISTING_SYMLINK)
        ui.warning(f"Level 2: Existing {marker.name} symlink points to non-existent directory: {target}")
        return None

    def _probe_existing_directory(self, ui: Reporter) -> Optional[ResolvedRoot]:
        marker = self.settings.marker_path
        if marker.is_dir() and not marker.is_symlink():
            ui.success(f"Level 3: Found existing directory: {marker}")
            return ResolvedRoot(path=marker, method=DiscoveryMethod.EXISTING_DIRECTORY)
        return None

    def _probe_standard_location(self, ui: Reporter) -> Optional[ResolvedRoot]:
        standard = self.settings.standard_location
        if standard.is_dir():
            ui.success(f"Level 4: Found standard directory: {standard}")
            return ResolvedRoot(path=standard, method=DiscoveryMethod.STANDARD_LOCATION)
        return None

    def _probe_cloud_locations(self, ui: Reporter) -> Optional[ResolvedRoot]:
        ui.info("Level 5: Scanning for cloud storage locations...")
        for location in self.settings.cloud_locations:
            if location.path.is_dir():
                provider = CloudProvider.from_key(location.provider)
                ui.success(f"Level 5: Found via {provider.display_name}: {location.path}")
                return ResolvedRoot(
                    path=location.path,
                    method=DiscoveryMethod.CLOUD_AUTO_DISCOVERY,
                    provider=provider,
                )
        return None

    # ------------------------------------------------------------------
    # Status helpers
    # ------------------------------------------------------------------

    def classify_root_type(self) -> RootType:
        """Describe how the private root is configured, without the cache."""
        try:
            if self.config_file.raw_root_hint():
                return RootType.EXPLICIT
        except ConfigFileError as exc:
            logger.warning("Ignoring unreadable %s: %s", self.config_file.path, exc)
        marker = self.settings.marker_path
        if marker.is_symlink():
            return RootType.SYMLINK
        if marker.is_dir():
            return RootType.DIRECTORY
        if self.settings.standard_location.is_dir():
            return RootType.STANDARD
        return RootType.NONE


__all__ = ["DiscoveryEngine"]
