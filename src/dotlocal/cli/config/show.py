"""
dotlocal config show command.

SUMMARY: Show effective settings and dotfiles.conf values

Displays the merged settings (bundled defaults, user config file and
``DOTLOCAL_*`` environment overrides) plus the values read from the public
tree's ``dotfiles.conf``.
"""

from __future__ import annotations

import argparse
from typing import Any

import yaml

from dotlocal.cli import OutputFormatter, add_json_flag, add_roots_flags, load_cli_settings
from dotlocal.core.config_file import ConfigFile
from dotlocal.core.settings import user_config_path

SUMMARY = "Show effective settings and dotfiles.conf values"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--format",
        choices=["json", "yaml"],
        default="yaml",
        help="Output format (default: yaml)",
    )
    add_json_flag(parser)
    add_roots_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)
    settings = load_cli_settings(args)
    conf = ConfigFile(settings.config_file, settings.home)

    data: dict[str, Any] = {
        "settings": settings.to_dict(),
        "user_config": str(user_config_path(settings.home)),
        "dotfiles_conf": {
            "path": str(conf.path),
            "values": conf.load(),
        },
    }

    if formatter.json_mode or args.format == "json":
        formatter.json_output(data)
    else:
        formatter.text(
            yaml.safe_dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True).rstrip()
        )
    return 0
