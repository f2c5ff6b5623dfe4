"""
dotlocal infra repair command.

SUMMARY: Repair broken or misplaced infrastructure links

Broken and mismatched symlinks are removed, real files in a link slot are
moved aside with a timestamped ``.backup`` suffix, and the table is
rebuilt. Exit code is 0 when nothing remains to fix.
"""

from __future__ import annotations

import argparse

from dotlocal.cli import OutputFormatter, add_json_flag, add_roots_flags, build_resolver, require_private_root

SUMMARY = "Repair broken or misplaced infrastructure links"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_json_flag(parser)
    add_roots_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)
    resolver = build_resolver(args)
    root = require_private_root(resolver)
    result = resolver.infrastructure.repair(root, resolver.settings.public_root, verbose=not args.json)
    if formatter.json_mode:
        formatter.json_output({"private_root": str(root), **result.to_dict()})
    return min(result.remaining_issues, 1)
