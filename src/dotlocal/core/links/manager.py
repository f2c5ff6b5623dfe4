"""Two-phase link precedence.

Phase 1 links markers from the public tree, skipping every target that the
private root also provides. Phase 2 links the private root's markers with
force, so private entries always win and no target is linked twice in one
run.
"""
from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Iterable, List, Optional, Set

from dotlocal.core.exceptions import LinkError
from dotlocal.core.links.models import (
    LinkOrigin,
    LinkOutcome,
    LinkResult,
    LinkSpec,
    ManagedLink,
    ReconcileResult,
)
from dotlocal.core.links.scanner import iter_link_specs
from dotlocal.core.settings import Settings
from dotlocal.core.ui import Reporter
from dotlocal.core.utils.io import ensure_directory
from dotlocal.core.utils.paths import lexists, read_link, same_path

logger = logging.getLogger(__name__)


def _key(path: Path) -> str:
    return os.path.normpath(os.path.abspath(path))


def _remove_existing(target: Path) -> None:
    """Remove whatever occupies ``target``; a concurrent removal is fine."""
    try:
        if target.is_symlink() or not target.is_dir():
            target.unlink()
        else:
            shutil.rmtree(target)
    except FileNotFoundError:
        pass


def _is_within(path: Path, root: Path) -> bool:
    p = Path(_key(path))
    r = Path(_key(root))
    return p == r or p.is_relative_to(r)


class LinkPrecedenceManager:
    """Creates home-directory links from the public tree and private root."""

    def __init__(self, settings: Settings, *, reporter: Optional[Reporter] = None) -> None:
        self.settings = settings
        self.ui = reporter if reporter is not None else Reporter()

    # ------------------------------------------------------------------
    # Single link
    # ------------------------------------------------------------------

    def create_link(self, spec: LinkSpec, *, dry_run: bool = False, force: bool = False) -> LinkResult:
        """Materialize one LinkSpec.

        Args:
            spec: Planned link
            dry_run: Report intent only; never touches the filesystem
            force: Replace an existing target instead of reporting a conflict

        Returns:
            LinkResult; CONFLICT means the target needs manual resolution.
        """
        source, target = spec.source, spec.target
        arrow = self.ui.arrow

        if dry_run:
            self.ui.info(f"[dry-run] Would link {target} {arrow} {source}")
            return LinkResult(spec, LinkOutcome.DRY_RUN)

        current = read_link(target)
        if current is not None and same_path(current, source):
            logger.debug("Already linked: %s -> %s", target, source)
            return LinkResult(spec, LinkOutcome.ALREADY_LINKED)

        if lexists(target) and not force:
            self.ui.warning(f"Exists, needs manual resolution: {target}")
            return LinkResult(spec, LinkOutcome.CONFLICT, error=f"Target already exists: {target}")

        try:
            if lexists(target):
                _remove_existing(target)
            ensure_directory(target.parent)
            target.symlink_to(source, target_is_directory=source.is_dir())
        except FileExistsError:
            # Another process created the target between our check and symlink().
            current = read_link(target)
            if current is not None and same_path(current, source):
                return LinkResult(spec, LinkOutcome.ALREADY_LINKED)
            self.ui.error(f"Failed to link: {target} (created concurrently)")
            return LinkResult(spec, LinkOutcome.FAILED, error=f"Target created concurrently: {target}")
        except OSError as exc:
            logger.debug("symlink %s -> %s failed", target, source, exc_info=True)
            self.ui.error(f"Failed to link: {target} ({exc})")
            return LinkResult(spec, LinkOutcome.FAILED, error=str(exc))

        self.ui.success(f"Linked: {spec.display_name}")
        return LinkResult(spec, LinkOutcome.CREATED)

    # ------------------------------------------------------------------
    # Two-phase reconcile
    # ------------------------------------------------------------------

    def _dedupe(self, specs: Iterable[LinkSpec], result: ReconcileResult) -> List[LinkSpec]:
        seen: Set[str] = set()
        unique: List[LinkSpec] = []
        for spec in specs:
            key = _key(spec.target)
            if key in seen:
                self.ui.warning(f"Duplicate marker for {spec.target.name} ignored: {spec.source}")
                result.skipped_count += 1
                continue
            seen.add(key)
            unique.append(spec)
        return unique

    @staticmethod
    def _tally(result: ReconcileResult, link: LinkResult) -> None:
        result.results.append(link)
        if link.outcome.ok:
            if link.spec.origin is LinkOrigin.LOCAL:
                result.local_count += 1
            else:
                result.public_count += 1
        elif link.outcome is LinkOutcome.CONFLICT:
            result.conflict_count += 1
        else:
            result.failed_count += 1

    def reconcile(
        self,
        public_root: Path,
        private_root: Optional[Path] = None,
        *,
        dry_run: bool = False,
        force: bool = False,
    ) -> ReconcileResult:
        """Link public markers, then private markers over them.

        Per-link failures and conflicts are counted, never raised; the run
        always processes every candidate.

        Raises:
            LinkError: If the public tree does not exist
        """
        result = ReconcileResult(dry_run=dry_run)
        mode = " (dry-run)" if dry_run else ""
        public_root = Path(public_root)
        has_local = private_root is not None and Path(private_root).is_dir()

        local_specs: List[LinkSpec] = []
        if has_local:
            local_specs = self._dedupe(
                iter_link_specs(Path(private_root), settings=self.settings, origin=LinkOrigin.LOCAL),
                result,
            )
        local_targets = {_key(s.target) for s in local_specs}

        if not public_root.is_dir():
            raise LinkError(f"Public tree not found: {public_root}", context={"public_root": str(public_root)})

        # Phase 1: public configs, deferring anything the private root overrides.
        self.ui.progress(f"Processing public configurations{mode}...")
        public_specs = self._dedupe(
            iter_link_specs(public_root, settings=self.settings, origin=LinkOrigin.PUBLIC),
            result,
        )
        for spec in public_specs:
            if _key(spec.target) in local_targets:
                result.skipped_count += 1
                logger.debug("Deferring %s to local override", spec.target)
                continue
            self._tally(result, self.create_link(spec, dry_run=dry_run, force=force))

        # Phase 2: local overrides always replace existing targets.
        if has_local:
            self.ui.progress(f"Processing local overrides{mode}...")
            for spec in local_specs:
                self._tally(result, self.create_link(spec, dry_run=dry_run, force=True))
        elif not dry_run:
            self.ui.info("No local folder found - using public configs only")

        counts = {
            "Public configs": result.public_count,
            "Local overrides": result.local_count,
        }
        if result.skipped_count:
            counts["Skipped (have local)"] = result.skipped_count
        if result.conflict_count:
            counts["Needs manual resolution"] = result.conflict_count
        if result.failed_count:
            counts["Failed"] = result.failed_count
        title = "Dry-run complete. Would create:" if dry_run else "Symlink creation complete!"
        self.ui.summary(title, counts)
        return result

    # ------------------------------------------------------------------
    # Home directory maintenance
    # ------------------------------------------------------------------

    def _home_dot_entries(self) -> List[Path]:
        home = Path(self.settings.home)
        if not home.is_dir():
            return []
        return sorted(p for p in home.iterdir() if p.name.startswith("."))

    def clean_broken(self, *, dry_run: bool = False) -> int:
        """Remove dangling dot-symlinks at the top level of the home directory."""
        self.ui.progress("Cleaning broken symlinks in home directory...")
        count = 0
        for entry in self._home_dot_entries():
            if not entry.is_symlink() or entry.exists():
                continue
            count += 1
            if dry_run:
                self.ui.info(f"[dry-run] Would remove broken symlink: {entry}")
                continue
            try:
                entry.unlink()
            except FileNotFoundError:
                pass
            except OSError as exc:
                self.ui.error(f"Failed to remove {entry}: {exc}")
                count -= 1
                continue
            self.ui.success(f"Removed broken symlink: {entry.name}")

        if count:
            self.ui.info(f"Cleaned {count} broken symlinks")
        else:
            self.ui.info("No broken symlinks found")
        return count

    def list_managed(self, public_root: Path, private_root: Optional[Path] = None) -> List[ManagedLink]:
        """Home dot-symlinks pointing into the private root or public tree."""
        managed: List[ManagedLink] = []
        for entry in self._home_dot_entries():
            target = read_link(entry)
            if target is None:
                continue
            if private_root is not None and _is_within(target, Path(private_root)):
                managed.append(ManagedLink(entry, target, LinkOrigin.LOCAL))
            elif _is_within(target, Path(public_root)):
                managed.append(ManagedLink(entry, target, LinkOrigin.PUBLIC))
        return managed


__all__ = ["LinkPrecedenceManager"]
