"""Link-marker naming convention.

A file named ``<name><suffix>`` (``tool.symlink``) anywhere in a scanned
tree asks to be linked into the home directory as ``<prefix><name>``
(``~/.tool``). Names already starting with the prefix are used as-is.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator, Optional

from dotlocal.core.links.models import LinkOrigin, LinkSpec
from dotlocal.core.settings import Settings


def _is_excluded(rel: Path, exclude_dirs: Iterable[str], exclude_suffixes: Iterable[str]) -> bool:
    dirs = set(exclude_dirs)
    if any(part in dirs for part in rel.parts[:-1]):
        return True
    return any(rel.name.endswith(sfx) for sfx in exclude_suffixes)


def target_name(filename: str, *, marker_suffix: str, private_prefix: str) -> Optional[str]:
    """Return the home entry name for a marker filename, or None if not a marker."""
    if not filename.endswith(marker_suffix):
        return None
    base = filename[: -len(marker_suffix)]
    if not base or base == private_prefix:
        return None
    if private_prefix and not base.startswith(private_prefix):
        base = f"{private_prefix}{base}"
    return base


def classify(
    path: Path,
    *,
    root: Path,
    settings: Settings,
    origin: LinkOrigin = LinkOrigin.PUBLIC,
) -> Optional[LinkSpec]:
    """Map one file under ``root`` to a LinkSpec, or None if it is not a candidate.

    Exclusions are matched against the path relative to ``root`` so that the
    location of the tree itself never excludes anything.
    """
    try:
        rel = Path(path).relative_to(root)
    except ValueError:
        return None

    exclude_dirs = list(settings.exclude_dirs)
    if origin is LinkOrigin.PUBLIC:
        exclude_dirs.extend(settings.public_exclude_dirs)

    name = target_name(rel.name, marker_suffix=settings.marker_suffix, private_prefix=settings.private_prefix)
    if name is None:
        return None
    stem = rel.name[: -len(settings.marker_suffix)]
    if _is_excluded(rel, exclude_dirs, settings.exclude_suffixes) or any(
        stem.endswith(sfx) for sfx in settings.exclude_suffixes
    ):
        return None

    source = Path(root) / rel
    target = Path(settings.home) / name
    display = f"{name} → {source.parent.name}/{source.name}"
    return LinkSpec(source=source, target=target, display_name=display, origin=origin)


def iter_link_specs(root: Path, *, settings: Settings, origin: LinkOrigin) -> Iterator[LinkSpec]:
    """Walk ``root`` (without following directory symlinks) in sorted order."""
    root = Path(root)
    if not root.is_dir():
        return
    exclude_dirs = set(settings.exclude_dirs)
    if origin is LinkOrigin.PUBLIC:
        exclude_dirs.update(settings.public_exclude_dirs)

    for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
        current = Path(dirpath)
        # Prune in place so excluded subtrees are never entered. A directory
        # carrying the marker suffix is itself a link source.
        kept = []
        marked = []
        for d in sorted(dirnames):
            if d in exclude_dirs:
                continue
            if d.endswith(settings.marker_suffix):
                marked.append(d)
            else:
                kept.append(d)
        dirnames[:] = kept
        for filename in sorted(filenames + marked):
            spec = classify(current / filename, root=root, settings=settings, origin=origin)
            if spec is not None:
                yield spec


__all__ = ["classify", "iter_link_specs", "target_name"]
