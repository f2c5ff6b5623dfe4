"""Common CLI argument registration utilities.

Commands register their own arguments; these helpers keep flag names and
help text identical across commands.
"""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_roots_flags(parser: argparse.ArgumentParser) -> None:
    """Add --public-root and --home overrides.

    Args:
        parser: ArgumentParser to add the flags to
    """
    parser.add_argument(
        "--public-root",
        type=str,
        help="Public dotfiles tree (default: $DOTFILES_DIR or ~/.dotfiles)",
    )
    parser.add_argument(
        "--home",
        type=str,
        help="Home directory that receives the links (default: current user's home)",
    )


def add_force_flag(parser: argparse.ArgumentParser, help_text: str = "Replace existing symlinks") -> None:
    parser.add_argument(
        "--force",
        "-f",
        action="store_true",
        help=help_text,
    )


def add_dry_run_flag(parser: argparse.ArgumentParser) -> None:
    """Add --dry-run flag."""
    parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        help="Show what would be done without making changes",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    """Add --verbose flag (diagnostics always go to stderr)."""
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Report each discovery step and link operation on stderr",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Add standard flags that most commands use.

    Adds: --json, --public-root, --home, --verbose
    """
    add_json_flag(parser)
    add_roots_flags(parser)
    add_verbose_flag(parser)


__all__ = [
    "add_json_flag",
    "add_roots_flags",
    "add_force_flag",
    "add_dry_run_flag",
    "add_verbose_flag",
    "add_standard_flags",
]
