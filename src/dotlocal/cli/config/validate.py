"""
dotlocal config validate command.

SUMMARY: Validate settings and dotfiles.conf

Settings are checked against the bundled JSON schema when they are loaded;
``dotfiles.conf`` is checked for duplicate or conflicting root assignments,
stray ``ln -s`` lines and a root hint pointing at a missing directory.
"""

from __future__ import annotations

import argparse
import sys

from dotlocal.cli import OutputFormatter, add_json_flag, add_roots_flags, load_cli_settings
from dotlocal.core.config_file import ConfigFile

SUMMARY = "Validate settings and dotfiles.conf"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Treat warnings as errors",
    )
    add_json_flag(parser)
    add_roots_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)
    # Raises SettingsError (reported by the dispatcher) when the schema check fails.
    settings = load_cli_settings(args)
    conf = ConfigFile(settings.config_file, settings.home)
    issues = conf.validate()

    errors = [i for i in issues if i.severity == "error"]
    warnings = [i for i in issues if i.severity == "warning"]
    failed = bool(errors) or (args.strict and bool(warnings))

    if formatter.json_mode:
        formatter.json_output(
            {
                "valid": not failed,
                "config_file": str(conf.path),
                "issues": [i.to_dict() for i in issues],
            }
        )
        return 1 if failed else 0

    for issue in issues:
        where = f" (line {issue.line})" if issue.line else ""
        print(f"{issue.severity.upper()}: {issue.message}{where}", file=sys.stderr)

    if failed:
        formatter.text(f"{conf.path}: {len(errors)} error(s), {len(warnings)} warning(s)")
        return 1
    formatter.text(f"Settings valid; {conf.path}: {len(warnings)} warning(s)")
    return 0
