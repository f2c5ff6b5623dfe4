"""CLI behaviour through the dispatcher entry point."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from dotlocal.cli._dispatcher import main


@pytest.fixture
def roots(fake_home: Path, public_root: Path) -> list[str]:
    return ["--public-root", str(public_root), "--home", str(fake_home)]


def test_no_arguments_prints_help(capsys) -> None:
    assert main([]) == 0
    assert "dotlocal" in capsys.readouterr().out


def test_domain_without_command_returns_1(capsys) -> None:
    assert main(["infra"]) == 1
    assert "validate" in capsys.readouterr().out


def test_resolve_prints_only_the_path(roots, fake_home: Path, capsys) -> None:
    assert main(["resolve", *roots]) == 0
    captured = capsys.readouterr()
    assert captured.out == f"{fake_home / '.dotlocal'}\n"


def test_resolve_verbose_keeps_stdout_clean(roots, fake_home: Path, capsys) -> None:
    assert main(["resolve", "--verbose", *roots]) == 0
    captured = capsys.readouterr()
    assert captured.out == f"{fake_home / '.dotlocal'}\n"
    assert "Level 5" in captured.err


def test_resolve_no_create(roots, fake_home: Path, capsys) -> None:
    assert main(["resolve", "--no-create", *roots]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert not (fake_home / ".dotlocal").exists()


def test_status_json(roots, fake_home: Path, capsys) -> None:
    (fake_home / ".dotlocal").mkdir()

    assert main(["status", "--json", *roots]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["path"] == str(fake_home / ".dotlocal")
    assert data["method"] == "standard_location"
    assert data["type"] == "standard"
    assert data["exists"] is True


def test_link_reports_conflicts_with_exit_2(roots, fake_home: Path, public_root: Path, marker, capsys) -> None:
    marker(public_root, "zsh/zshrc.symlink")
    (fake_home / ".zshrc").write_text("hand-written\n", encoding="utf-8")

    assert main(["link", *roots]) == 2

    captured = capsys.readouterr()
    assert captured.out == f"needs manual resolution: {fake_home / '.zshrc'}\n"
    assert (fake_home / ".zshrc").read_text(encoding="utf-8") == "hand-written\n"


def test_link_json(roots, fake_home: Path, public_root: Path, marker, capsys) -> None:
    marker(public_root, "git/gitconfig.symlink")

    assert main(["link", "--json", *roots]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["public_count"] == 1
    assert (fake_home / ".gitconfig").is_symlink()


def test_infra_validate_ensure_cycle(roots, fake_home: Path, capsys) -> None:
    (fake_home / ".dotlocal").mkdir()

    assert main(["infra", "validate", *roots]) == 1
    assert main(["infra", "ensure", *roots]) == 0
    assert main(["infra", "validate", *roots]) == 0
    capsys.readouterr()


def test_infra_repair_json(roots, fake_home: Path, public_root: Path, capsys) -> None:
    private = fake_home / ".dotlocal"
    private.mkdir()
    (private / "CLAUDE.md").write_text("mine\n", encoding="utf-8")

    assert main(["infra", "repair", "--json", *roots]) == 0

    data = json.loads(capsys.readouterr().out)
    assert data["remaining_issues"] == 0
    assert len(data["backed_up"]) == 1


def test_infra_validate_without_root_reports_json_error(roots, capsys) -> None:
    assert main(["infra", "validate", "--json", *roots]) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    payload = json.loads(captured.err)
    assert payload["code"] == "InfrastructureError"


def test_config_validate_flags_ln_commands(roots, public_root: Path, capsys) -> None:
    (public_root / "dotfiles.conf").write_text("ln -s a b\n", encoding="utf-8")

    assert main(["config", "validate", *roots]) == 1
    assert "ln -s" in capsys.readouterr().err


def test_config_validate_clean(roots, capsys) -> None:
    assert main(["config", "validate", "--json", *roots]) == 0
    assert json.loads(capsys.readouterr().out)["valid"] is True


def test_config_show_yaml(roots, public_root: Path, capsys) -> None:
    assert main(["config", "show", *roots]) == 0
    assert str(public_root) in capsys.readouterr().out
