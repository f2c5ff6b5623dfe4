"""Tests for the link-marker naming convention and tree walk."""
from __future__ import annotations

from pathlib import Path

import pytest

from dotlocal.core.links import LinkOrigin, classify, iter_link_specs, target_name


@pytest.mark.parametrize(
    "filename,expected",
    [
        ("gitconfig.symlink", ".gitconfig"),
        (".zshrc.symlink", ".zshrc"),
        ("vimrc", None),
        ("notes.symlink.bak", None),
        (".symlink", None),
        ("..symlink", None),
    ],
)
def test_target_name(filename: str, expected) -> None:
    assert target_name(filename, marker_suffix=".symlink", private_prefix=".") == expected


class TestClassify:
    def test_maps_marker_into_home(self, settings, public_root, marker) -> None:
        src = marker(public_root, "git/gitconfig.symlink")
        spec = classify(src, root=public_root, settings=settings)

        assert spec is not None
        assert spec.source == src
        assert spec.target == settings.home / ".gitconfig"
        assert spec.origin is LinkOrigin.PUBLIC
        assert spec.display_name == ".gitconfig → git/gitconfig.symlink"

    @pytest.mark.parametrize(
        "rel",
        [
            ".git/hooks.symlink",
            "backups/zshrc.symlink",
            "vscode-backup/settings.symlink",
            "tests/fixture.symlink",
            "zsh/secrets.example.symlink",
        ],
    )
    def test_exclusions(self, settings, public_root, marker, rel: str) -> None:
        src = marker(public_root, rel)
        assert classify(src, root=public_root, settings=settings) is None

    def test_private_tree_inside_public_is_excluded_only_for_public_scan(self, settings, public_root, marker) -> None:
        src = marker(public_root, ".dotlocal/tool.symlink")
        assert classify(src, root=public_root, settings=settings, origin=LinkOrigin.PUBLIC) is None
        private_root = public_root / ".dotlocal"
        spec = classify(src, root=private_root, settings=settings, origin=LinkOrigin.LOCAL)
        assert spec is not None and spec.target == settings.home / ".tool"

    def test_tree_location_never_excludes(self, settings, tmp_path, marker) -> None:
        root = tmp_path / "tests" / "backups" / "tree"
        src = marker(root, "tool.symlink")
        assert classify(src, root=root, settings=settings) is not None

    def test_path_outside_root(self, settings, public_root, tmp_path) -> None:
        assert classify(tmp_path / "x.symlink", root=public_root, settings=settings) is None


class TestWalk:
    def test_sorted_walk_with_pruning(self, settings, public_root, marker) -> None:
        marker(public_root, "zsh/zshrc.symlink")
        marker(public_root, "git/gitconfig.symlink")
        marker(public_root, "git/.git/config.symlink")
        marker(public_root, "backups/old.symlink")
        marker(public_root, "README.md")

        specs = list(iter_link_specs(public_root, settings=settings, origin=LinkOrigin.PUBLIC))

        assert [s.target.name for s in specs] == [".gitconfig", ".zshrc"]

    def test_marker_suffixed_directory_is_a_source(self, settings, public_root, marker) -> None:
        marker(public_root, "vim/vim.symlink/colors/theme.vim")

        specs = list(iter_link_specs(public_root, settings=settings, origin=LinkOrigin.PUBLIC))

        assert [(s.source, s.target) for s in specs] == [
            (public_root / "vim" / "vim.symlink", settings.home / ".vim")
        ]

    def test_missing_root_yields_nothing(self, settings, tmp_path) -> None:
        assert list(iter_link_specs(tmp_path / "missing", settings=settings, origin=LinkOrigin.LOCAL)) == []
