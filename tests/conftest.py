import os
import sys
from dataclasses import replace
from pathlib import Path

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'dotlocal'
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


INFRASTRUCTURE_FILES = ("MICRODOTS.md", "CLAUDE.md", "TASKS.md", "docs/architecture/COMPLIANCE.md")


@pytest.fixture(autouse=True)
def _reset_dotlocal_state(monkeypatch):
    """Keep developer shells from leaking settings into tests."""
    for key in list(os.environ):
        if key.startswith("DOTLOCAL_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("DOTFILES_DIR", raising=False)

    from dotlocal.core.stdlib_logging import reset_logging_for_tests

    yield
    reset_logging_for_tests()


@pytest.fixture
def fake_home(tmp_path: Path, monkeypatch) -> Path:
    """An empty home directory; HOME and XDG_CONFIG_HOME point into it."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    return home


@pytest.fixture
def public_root(tmp_path: Path) -> Path:
    """A public tree holding every infrastructure target."""
    root = tmp_path / "dotfiles"
    (root / "core").mkdir(parents=True)
    (root / "core" / "ui.sh").write_text("# ui\n", encoding="utf-8")
    (root / "docs" / "architecture").mkdir(parents=True)
    for rel in INFRASTRUCTURE_FILES:
        (root / rel).write_text(f"# {rel}\n", encoding="utf-8")
    return root


@pytest.fixture
def settings(fake_home: Path, public_root: Path):
    """Settings rooted at the fake home, probing only home-relative cloud folders."""
    from dotlocal.core.settings import load_settings

    loaded = load_settings(home=fake_home, public_root=public_root, environ={})
    clouds = tuple(c for c in loaded.cloud_locations if str(c.path).startswith(str(fake_home)))
    return replace(loaded, cloud_locations=clouds)


def write_marker(root: Path, rel: str, content: str = "x\n") -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def marker():
    """Factory writing a marker file under a tree: ``marker(root, "git/gitconfig.symlink")``."""
    return write_marker
