"""Infrastructure links inside the private root.

The private root exposes a fixed table of shared assets from the public tree
(``core``, ``docs`` and a few documents) as symlinks. This module creates
that table, classifies each slot, and repairs damaged slots.

Only :meth:`InfrastructureManager.repair` removes or renames anything, and
it never deletes real files: a non-symlink occupying a slot is moved aside
to ``<name>.backup.<timestamp>``.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional

from dotlocal.core.exceptions import InfrastructureError
from dotlocal.core.infrastructure.models import (
    EnsureResult,
    EntryHealth,
    EntryReport,
    InfrastructureEntry,
    RepairResult,
)
from dotlocal.core.settings import Settings
from dotlocal.core.ui import Reporter, get_reporter
from dotlocal.core.utils.io import ensure_directory
from dotlocal.core.utils.paths import is_readable, lexists, read_link, same_path
from dotlocal.core.utils.time import backup_suffix

logger = logging.getLogger(__name__)

_CREATED = "created"
_UNCHANGED = "unchanged"
_SKIPPED = "skipped"
_FAILED = "failed"


def _backup_path(path: Path) -> Path:
    base = path.with_name(f"{path.name}.backup.{backup_suffix()}")
    candidate = base
    n = 1
    while lexists(candidate):
        candidate = base.with_name(f"{base.name}.{n}")
        n += 1
    return candidate


class InfrastructureManager:
    """Creates, validates and repairs the infrastructure table."""

    def __init__(self, settings: Settings, *, reporter: Optional[Reporter] = None) -> None:
        self.settings = settings
        self._reporter = reporter

    def entries(self, public_root: Optional[Path] = None) -> List[InfrastructureEntry]:
        """Return the table with targets made absolute against ``public_root``."""
        public = Path(public_root) if public_root is not None else self.settings.public_root
        return [
            InfrastructureEntry(name=spec.name, target=public / spec.target)
            for spec in self.settings.infrastructure
        ]

    # ------------------------------------------------------------------
    # ensure
    # ------------------------------------------------------------------

    def _place(self, link: Path, target: Path, *, force: bool, ui: Reporter) -> str:
        """Make ``link`` point at ``target``; returns one of the EnsureResult buckets."""
        current = read_link(link)
        if current is not None:
            if same_path(current, target):
                return _UNCHANGED
            if not force:
                ui.warning(f"{link.name} points to {current}, expected {target} (use --force)")
                return _SKIPPED
            try:
                link.unlink()
            except FileNotFoundError:
                pass
            except OSError as exc:
                ui.error(f"Cannot replace {link}: {exc}")
                logger.warning("Cannot replace %s: %s", link, exc)
                return _FAILED
        elif lexists(link):
            ui.warning(f"{link.name} exists and is not a symlink; run repair to move it aside")
            return _SKIPPED

        try:
            link.symlink_to(target, target_is_directory=target.is_dir())
        except FileExistsError:
            # Tolerate a concurrent ensure that got there first.
            current = read_link(link)
            if current is not None and same_path(current, target):
                return _UNCHANGED
            ui.error(f"Cannot create {link}: created concurrently")
            return _FAILED
        except OSError as exc:
            ui.error(f"Cannot create {link}: {exc}")
            logger.warning("Cannot create %s -> %s: %s", link, target, exc)
            return _FAILED
        return _CREATED

    def _link_marker(self, private_root: Path, public_root: Path, *, ui: Reporter) -> None:
        marker = public_root / self.settings.local_marker
        # A marker symlink always follows the private root; a real directory is never touched.
        if not public_root.is_dir():
            ui.warning(f"Public tree not found, not linking {marker.name}: {public_root}")
            return
        if marker.is_symlink() or not lexists(marker):
            outcome = self._place(marker, private_root, force=True, ui=ui)
            if outcome == _CREATED:
                ui.success(f"Linked {marker} {ui.arrow} {private_root}")
            return
        if marker.is_dir():
            if os.path.realpath(marker) != os.path.realpath(private_root):
                ui.warning(f"{marker.name} exists as directory but doesn't match target path")
            return
        ui.warning(f"{marker.name} exists but is neither symlink nor directory")

    def ensure(
        self,
        private_root: Path,
        public_root: Optional[Path] = None,
        *,
        force: bool = False,
        verbose: bool = False,
    ) -> EnsureResult:
        """Create the private root, its marker link and every infrastructure link.

        Entries whose public target is missing or unreadable are skipped with a
        warning. With ``force`` a symlink pointing elsewhere is replaced; real
        files and directories in a slot are always left alone.

        Raises:
            InfrastructureError: If the private root cannot be created
        """
        ui = get_reporter(verbose, self._reporter)
        private = Path(private_root)
        public = Path(public_root) if public_root is not None else self.settings.public_root

        if not private.is_dir():
            try:
                ensure_directory(private)
            except OSError as exc:
                raise InfrastructureError(
                    f"Cannot create private root {private}: {exc}",
                    context={"private_root": str(private)},
                ) from exc
            ui.success(f"Created dotlocal directory: {private}")

        self._link_marker(private, public, ui=ui)

        result = EnsureResult()
        for entry in self.entries(public):
            if not entry.target.exists():
                ui.warning(f"Infrastructure target missing: {entry.target}")
                result.skipped.append(entry.name)
                continue
            if not is_readable(entry.target):
                ui.warning(f"Infrastructure target not readable: {entry.target}")
                result.skipped.append(entry.name)
                continue
            outcome = self._place(private / entry.name, entry.target, force=force, ui=ui)
            getattr(result, outcome).append(entry.name)
            if outcome == _CREATED:
                ui.success(f"Infrastructure link: {entry.name} {ui.arrow} {entry.target}")

        logger.debug("ensure %s: %s", private, result.to_dict())
        return result

    # ------------------------------------------------------------------
    # validate
    # ------------------------------------------------------------------

    def inspect(self, private_root: Path, public_root: Optional[Path] = None) -> List[EntryReport]:
        """Classify every slot of the table. Never modifies anything."""
        private = Path(private_root)
        reports: List[EntryReport] = []
        for entry in self.entries(public_root):
            link = private / entry.name
            if link.is_symlink():
                actual = read_link(link)
                if not link.exists():
                    health = EntryHealth.BROKEN
                elif actual is None or not same_path(actual, entry.target):
                    health = EntryHealth.MISMATCHED
                else:
                    health = EntryHealth.HEALTHY
                reports.append(EntryReport(entry, link, health, actual))
            elif lexists(link):
                reports.append(EntryReport(entry, link, EntryHealth.NOT_SYMLINK))
            else:
                reports.append(EntryReport(entry, link, EntryHealth.ABSENT))
        return reports

    def validate(
        self,
        private_root: Optional[Path],
        public_root: Optional[Path] = None,
        *,
        verbose: bool = False,
    ) -> int:
        """Return the number of unhealthy infrastructure entries (0 means healthy)."""
        if private_root is None or not str(private_root):
            raise InfrastructureError("No private root provided for validation")
        ui = get_reporter(verbose, self._reporter)
        ui.info(f"Validating infrastructure symlinks in: {private_root}")

        issues = 0
        for report in self.inspect(private_root, public_root):
            if report.healthy:
                continue
            issues += 1
            name = report.entry.name
            if report.health is EntryHealth.ABSENT:
                ui.warning(f"Missing infrastructure symlink: {name}")
            elif report.health is EntryHealth.NOT_SYMLINK:
                ui.warning(f"Not a symlink: {name}")
            elif report.health is EntryHealth.BROKEN:
                ui.error(f"Broken symlink: {name}")
            else:
                ui.warning(
                    f"Wrong symlink target for {name}: {report.actual_target} "
                    f"(expected: {report.entry.target})"
                )

        if issues:
            ui.warning(f"Found {issues} infrastructure symlink issue(s)")
        else:
            ui.success("All infrastructure symlinks are healthy")
        return issues

    # ------------------------------------------------------------------
    # repair
    # ------------------------------------------------------------------

    def repair(
        self,
        private_root: Optional[Path],
        public_root: Optional[Path] = None,
        *,
        verbose: bool = False,
    ) -> RepairResult:
        """Remove broken or mismatched links, move real files aside, then rebuild.

        Returns a RepairResult whose ``remaining_issues`` comes from a fresh
        validation after rebuilding; permission problems and missing public
        targets are not self-healing and show up there.
        """
        if private_root is None or not str(private_root):
            raise InfrastructureError("Cannot repair: no private root provided")
        ui = get_reporter(verbose, self._reporter)
        private = Path(private_root)
        ui.header("Infrastructure Repair")
        ui.info(f"Repairing infrastructure in: {private}")

        baseline = self.inspect(private, public_root)
        result = RepairResult(baseline_issues=sum(1 for r in baseline if not r.healthy))
        if result.baseline_issues == 0:
            ui.success("No infrastructure issues found - system healthy")
            result.reports = baseline
            return result

        ui.warning(f"Found {result.baseline_issues} issue(s) - starting repair...")
        for report in baseline:
            name = report.entry.name
            if report.health in (EntryHealth.BROKEN, EntryHealth.MISMATCHED):
                label = "broken" if report.health is EntryHealth.BROKEN else "incorrect"
                try:
                    report.link.unlink()
                except FileNotFoundError:
                    pass
                except OSError as exc:
                    ui.error(f"Cannot remove {label} symlink {name}: {exc}")
                    continue
                ui.info(f"Removed {label} symlink: {name}")
                result.removed.append(name)
            elif report.health is EntryHealth.NOT_SYMLINK:
                backup = _backup_path(report.link)
                try:
                    report.link.rename(backup)
                except FileNotFoundError:
                    continue
                except OSError as exc:
                    ui.error(f"Cannot move {name} aside: {exc}")
                    continue
                ui.warning(f"Backed up non-symlink: {name} to {backup.name}")
                result.backed_up.append(backup)

        ui.progress("Recreating infrastructure symlinks...")
        self.ensure(private, public_root, force=True, verbose=verbose)

        result.reports = self.inspect(private, public_root)
        result.remaining_issues = sum(1 for r in result.reports if not r.healthy)
        if result.remaining_issues:
            ui.error(f"Repair incomplete - {result.remaining_issues} issue(s) remain")
        else:
            ui.success("Infrastructure repair complete - all symlinks healthy")
        return result


__all__ = ["InfrastructureManager"]
