"""
dotlocal link command.

SUMMARY: Link public and private dotfiles into the home directory

Phase 1 links markers from the public tree; phase 2 links the private
root's markers over them. Exit code: 0 on success, 1 when any link failed,
2 when the only problems are existing targets that need manual resolution.
"""

from __future__ import annotations

import argparse

from dotlocal.cli import (
    OutputFormatter,
    add_dry_run_flag,
    add_force_flag,
    add_json_flag,
    add_roots_flags,
    build_resolver,
)

SUMMARY = "Link public and private dotfiles into the home directory"

EXIT_CONFLICTS = 2


def register_args(parser: argparse.ArgumentParser) -> None:
    add_dry_run_flag(parser)
    add_force_flag(parser, help_text="Replace existing targets from the public tree too")
    add_json_flag(parser)
    add_roots_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)
    resolver = build_resolver(args)
    result = resolver.reconcile(dry_run=args.dry_run, force=args.force)

    if formatter.json_mode:
        formatter.json_output(result.to_dict())
    else:
        for conflict in result.conflicts:
            formatter.text(f"needs manual resolution: {conflict.spec.target}")

    if result.failed_count:
        return 1
    if result.conflict_count:
        return EXIT_CONFLICTS
    return 0
