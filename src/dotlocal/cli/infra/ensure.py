"""
dotlocal infra ensure command.

SUMMARY: Create missing infrastructure links in the private root
"""

from __future__ import annotations

import argparse

from dotlocal.cli import (
    OutputFormatter,
    add_force_flag,
    add_standard_flags,
    build_resolver,
    require_private_root,
)

SUMMARY = "Create missing infrastructure links in the private root"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_force_flag(parser, help_text="Replace infrastructure symlinks that point elsewhere")
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)
    resolver = build_resolver(args)
    root = require_private_root(resolver, verbose=args.verbose)
    result = resolver.infrastructure.ensure(
        root, resolver.settings.public_root, force=args.force, verbose=args.verbose
    )
    formatter.success(
        {"private_root": str(root), **result.to_dict()},
        f"{len(result.created)} created, {len(result.unchanged)} unchanged, "
        f"{len(result.skipped)} skipped, {len(result.failed)} failed",
    )
    return 1 if result.failed else 0
