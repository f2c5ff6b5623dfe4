"""
dotlocal infra validate command.

SUMMARY: Check infrastructure links in the private root

Exit code is 0 when every link is healthy and 1 otherwise.
"""

from __future__ import annotations

import argparse

from dotlocal.cli import OutputFormatter, add_standard_flags, build_resolver, require_private_root

SUMMARY = "Check infrastructure links in the private root"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)
    resolver = build_resolver(args)
    root = require_private_root(resolver, verbose=args.verbose)
    public = resolver.settings.public_root
    manager = resolver.infrastructure

    if formatter.json_mode:
        reports = manager.inspect(root, public)
        issues = sum(1 for r in reports if not r.healthy)
        formatter.json_output(
            {"private_root": str(root), "issues": issues, "entries": [r.to_dict() for r in reports]}
        )
    else:
        issues = manager.validate(root, public, verbose=True)
    return min(issues, 1)
