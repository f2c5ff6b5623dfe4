"""Tests for the five-tier private root discovery."""
from __future__ import annotations

from pathlib import Path

import pytest

from dotlocal.core.discovery import DiscoveryEngine, DiscoveryMethod, ResolvedRoot, RootType
from dotlocal.core.discovery.models import CloudProvider
from dotlocal.core.ui import Reporter

TIER_PROBES = [
    "_probe_explicit_config",
    "_probe_existing_symlink",
    "_probe_existing_directory",
    "_probe_standard_location",
    "_probe_cloud_locations",
]


def _spy_on_probes(engine: DiscoveryEngine, monkeypatch) -> list[str]:
    calls: list[str] = []
    for name in TIER_PROBES:
        original = getattr(engine, name)

        def spy(ui, _name=name, _original=original):
            calls.append(_name)
            return _original(ui)

        monkeypatch.setattr(engine, name, spy)
    return calls


class TestTiers:
    def test_nothing_found_returns_empty_result(self, settings) -> None:
        result = DiscoveryEngine(settings).discover()
        assert result == ResolvedRoot(path=None, method=DiscoveryMethod.NONE)
        assert not result.found

    def test_explicit_config(self, settings, tmp_path: Path) -> None:
        private = tmp_path / "explicit"
        private.mkdir()
        settings.config_file.write_text(f'DOTLOCAL="{private}"\n', encoding="utf-8")

        result = DiscoveryEngine(settings).discover()
        assert result.path == private
        assert result.method is DiscoveryMethod.EXPLICIT_CONFIG
        assert result.describe() == "dotfiles.conf (explicit configuration)"

    def test_explicit_config_with_trailing_comment(self, settings, tmp_path: Path) -> None:
        private = tmp_path / "explicit"
        private.mkdir()
        settings.config_file.write_text(f'DOTLOCAL="{private}"  # my private root\n', encoding="utf-8")

        result = DiscoveryEngine(settings).discover()
        assert result.path == private
        assert result.method is DiscoveryMethod.EXPLICIT_CONFIG

    def test_explicit_config_home_variable(self, settings, fake_home: Path, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.setenv("HOME", str(tmp_path / "somebody-else"))
        (fake_home / "priv").mkdir()
        settings.config_file.write_text('DOTLOCAL="$HOME/priv"\n', encoding="utf-8")

        result = DiscoveryEngine(settings).discover()
        assert result.path == fake_home / "priv"
        assert result.method is DiscoveryMethod.EXPLICIT_CONFIG

    def test_explicit_config_to_missing_dir_falls_through(self, settings) -> None:
        settings.config_file.write_text('DOTLOCAL="/definitely/missing"\n', encoding="utf-8")
        settings.standard_location.mkdir()
        result = DiscoveryEngine(settings).discover()
        assert result.method is DiscoveryMethod.STANDARD_LOCATION

    def test_unreadable_config_is_a_tier_miss(self, settings) -> None:
        settings.config_file.mkdir()
        settings.standard_location.mkdir()
        engine = DiscoveryEngine(settings)
        assert engine.discover().method is DiscoveryMethod.STANDARD_LOCATION
        assert engine.config_loaded is False

    def test_existing_symlink(self, settings, tmp_path: Path) -> None:
        private = tmp_path / "elsewhere"
        private.mkdir()
        settings.marker_path.symlink_to(private)

        result = DiscoveryEngine(settings).discover()
        assert result.path == private
        assert result.method is DiscoveryMethod.EXISTING_SYMLINK

    def test_broken_symlink_falls_through(self, settings, tmp_path: Path) -> None:
        settings.marker_path.symlink_to(tmp_path / "gone")
        settings.standard_location.mkdir()

        result = DiscoveryEngine(settings).discover()
        assert result.method is DiscoveryMethod.STANDARD_LOCATION

    def test_existing_directory(self, settings) -> None:
        settings.marker_path.mkdir()
        result = DiscoveryEngine(settings).discover()
        assert result.path == settings.marker_path
        assert result.method is DiscoveryMethod.EXISTING_DIRECTORY

    def test_standard_location(self, settings) -> None:
        settings.standard_location.mkdir()
        result = DiscoveryEngine(settings).discover()
        assert result.path == settings.standard_location
        assert result.method is DiscoveryMethod.STANDARD_LOCATION

    def test_cloud_location_tags_provider(self, settings, fake_home: Path) -> None:
        dropbox = fake_home / "Dropbox" / "Dotlocal"
        onedrive = fake_home / "OneDrive" / "Dotlocal"
        dropbox.mkdir(parents=True)
        onedrive.mkdir(parents=True)

        result = DiscoveryEngine(settings).discover()
        assert result.path == dropbox
        assert result.method is DiscoveryMethod.CLOUD_AUTO_DISCOVERY
        assert result.provider is CloudProvider.DROPBOX
        assert result.describe() == "cloud storage auto-discovery (Dropbox)"


class TestTierOrder:
    @pytest.mark.parametrize("winning_tier", range(5))
    def test_later_tiers_are_never_evaluated(self, settings, fake_home, tmp_path, monkeypatch, winning_tier) -> None:
        private = tmp_path / "private"
        private.mkdir()
        # Make every tier able to succeed; only the first must run.
        settings.config_file.write_text(f'DOTLOCAL="{private}"\n', encoding="utf-8")
        if winning_tier == 2:
            settings.marker_path.mkdir()
        else:
            settings.marker_path.symlink_to(private)
        settings.standard_location.mkdir()
        (fake_home / "Dropbox" / "Dotlocal").mkdir(parents=True)

        engine = DiscoveryEngine(settings)
        calls = _spy_on_probes(engine, monkeypatch)
        for name in TIER_PROBES[:winning_tier]:
            monkeypatch.setattr(engine, name, lambda ui, _n=name: calls.append(_n))

        result = engine.discover()

        assert result.found
        assert result.method.priority == winning_tier + 1
        assert calls == TIER_PROBES[: winning_tier + 1]


class TestMemoization:
    def test_second_call_is_cached_and_identical(self, settings) -> None:
        settings.standard_location.mkdir()
        engine = DiscoveryEngine(settings)

        first = engine.discover(verbose=True)
        second = engine.discover(verbose=False)

        assert (second.path, second.method) == (first.path, first.method)
        assert first.cached is False
        assert second.cached is True

    def test_cache_survives_filesystem_changes(self, settings) -> None:
        settings.standard_location.mkdir()
        engine = DiscoveryEngine(settings)
        first = engine.discover()

        settings.standard_location.rmdir()
        assert engine.discover().path == first.path

    def test_clear_cache_resets_all_state(self, settings) -> None:
        settings.config_file.write_text("BACKUP_PATH=/b\n", encoding="utf-8")
        engine = DiscoveryEngine(settings)
        engine.discover()
        assert engine.cached_result is not None
        assert engine.config_loaded is True

        engine.clear_cache()

        assert engine.cached_result is None
        assert engine.config_loaded is None
        assert engine.config_file.loaded is None

        settings.standard_location.mkdir()
        assert engine.discover().method is DiscoveryMethod.STANDARD_LOCATION


class TestDiagnostics:
    def test_verbose_output_never_touches_stdout(self, settings, capsys) -> None:
        settings.standard_location.mkdir()
        DiscoveryEngine(settings, reporter=Reporter()).discover(verbose=True)

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Level 4" in captured.err

    def test_quiet_discovery_is_silent(self, settings, capsys) -> None:
        DiscoveryEngine(settings).discover(verbose=False)
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""


class TestRootType:
    def test_classification(self, settings, tmp_path: Path) -> None:
        engine = DiscoveryEngine(settings)
        assert engine.classify_root_type() is RootType.NONE

        settings.standard_location.mkdir()
        assert engine.classify_root_type() is RootType.STANDARD

        settings.marker_path.mkdir()
        assert engine.classify_root_type() is RootType.DIRECTORY

        settings.marker_path.rmdir()
        settings.marker_path.symlink_to(tmp_path / "gone")
        assert engine.classify_root_type() is RootType.SYMLINK

        settings.config_file.write_text("DOTLOCAL=/x\n", encoding="utf-8")
        assert engine.classify_root_type() is RootType.EXPLICIT
