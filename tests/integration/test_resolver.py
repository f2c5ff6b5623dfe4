"""End-to-end resolution: discovery, default creation, persistence, infrastructure."""
from __future__ import annotations

from pathlib import Path

import pytest

from dotlocal.core.discovery import DiscoveryMethod
from dotlocal.core.resolver import Resolver
from dotlocal.core.utils.paths import read_link


@pytest.fixture
def resolver(settings) -> Resolver:
    return Resolver(settings)


def test_fresh_machine_creates_standard_location(resolver, fake_home: Path, public_root: Path) -> None:
    assert resolver.discover().path is None

    resolver.engine.clear_cache()
    path = resolver.resolve()

    assert path == fake_home / ".dotlocal"
    assert path.is_dir()
    assert read_link(public_root / ".dotlocal") == path
    assert resolver.infrastructure.validate(path, public_root) == 0
    assert resolver.discover().method is DiscoveryMethod.CREATED_DEFAULT


def test_no_create_returns_none(resolver, fake_home: Path) -> None:
    assert resolver.resolve(create_if_missing=False) is None
    assert not (fake_home / ".dotlocal").exists()


def test_cloud_root_is_persisted(settings, fake_home: Path, public_root: Path) -> None:
    cloud = fake_home / "Dropbox" / "Dotlocal"
    cloud.mkdir(parents=True)

    first = Resolver(settings).resolve_root()
    assert first.path == cloud
    assert first.method is DiscoveryMethod.CLOUD_AUTO_DISCOVERY

    conf = public_root / "dotfiles.conf"
    text = conf.read_text(encoding="utf-8")
    assert text.startswith("# Dotfiles Configuration\n")
    assert f'DOTLOCAL="{cloud}"' in text

    # The marker link now exists, so clear it to prove the config file is used.
    (public_root / ".dotlocal").unlink()
    second = Resolver(settings).discover()
    assert second.path == cloud
    assert second.method is DiscoveryMethod.EXPLICIT_CONFIG


def test_existing_setting_is_never_overwritten(settings, fake_home: Path, public_root: Path) -> None:
    conf = public_root / "dotfiles.conf"
    conf.write_text('DOTLOCAL="/nowhere/at/all"\n', encoding="utf-8")
    (fake_home / "Dropbox" / "Dotlocal").mkdir(parents=True)

    result = Resolver(settings).resolve_root()

    assert result.method is DiscoveryMethod.CLOUD_AUTO_DISCOVERY
    assert conf.read_text(encoding="utf-8") == 'DOTLOCAL="/nowhere/at/all"\n'


def test_resolve_is_memoized(resolver, fake_home: Path) -> None:
    first = resolver.resolve()
    (fake_home / "Dropbox" / "Dotlocal").mkdir(parents=True)
    assert resolver.resolve() == first


def test_status_dict(resolver, fake_home: Path) -> None:
    (fake_home / ".dotlocal").mkdir()

    status = resolver.status().to_dict()

    assert status == {
        "path": str(fake_home / ".dotlocal"),
        "method": "standard_location",
        "method_label": "standard ~/.dotlocal directory",
        "type": "standard",
        "exists": True,
    }


def test_status_when_nothing_exists(resolver) -> None:
    status = resolver.status().to_dict()
    assert status["path"] == ""
    assert status["method"] == "none"
    assert status["type"] == "none"
    assert status["exists"] is False


def test_reconcile_uses_resolved_root(resolver, fake_home: Path, public_root: Path, marker) -> None:
    private = fake_home / ".dotlocal"
    marker(public_root, "git/gitconfig.symlink", "public\n")
    marker(private, "git/gitconfig.symlink", "private\n")

    result = resolver.reconcile()

    assert result.local_count == 1
    assert result.public_count == 0
    assert (fake_home / ".gitconfig").read_text(encoding="utf-8") == "private\n"
