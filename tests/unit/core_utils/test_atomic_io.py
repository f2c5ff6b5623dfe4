from __future__ import annotations

from pathlib import Path

from dotlocal.core.utils.io import ensure_directory, write_text


def test_write_text_creates_parent_and_leaves_no_temp_files(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "dotfiles.conf"
    write_text(target, 'DOTLOCAL="/x"\n')

    assert target.read_text(encoding="utf-8") == 'DOTLOCAL="/x"\n'
    assert [p.name for p in target.parent.iterdir()] == ["dotfiles.conf"]


def test_write_text_replaces_existing_content(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("old", encoding="utf-8")
    write_text(target, "new")
    assert target.read_text(encoding="utf-8") == "new"


def test_ensure_directory_is_idempotent(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b"
    assert ensure_directory(target) == target
    assert ensure_directory(target) == target
    assert target.is_dir()
