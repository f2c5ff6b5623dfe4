"""
dotlocal links clean command.

SUMMARY: Remove broken dot-symlinks from the home directory
"""

from __future__ import annotations

import argparse

from dotlocal.cli import OutputFormatter, add_dry_run_flag, add_json_flag, add_roots_flags, build_resolver

SUMMARY = "Remove broken dot-symlinks from the home directory"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_dry_run_flag(parser)
    add_json_flag(parser)
    add_roots_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)
    resolver = build_resolver(args)
    count = resolver.link_manager().clean_broken(dry_run=args.dry_run)
    if formatter.json_mode:
        formatter.json_output({"removed": count, "dry_run": args.dry_run})
    return 0
