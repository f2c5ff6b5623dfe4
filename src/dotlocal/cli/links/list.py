"""
dotlocal links list command.

SUMMARY: List home symlinks managed from the public tree or private root
"""

from __future__ import annotations

import argparse

from dotlocal.cli import OutputFormatter, add_standard_flags, build_resolver

SUMMARY = "List home symlinks managed from the public tree or private root"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)
    resolver = build_resolver(args)
    private = resolver.discover(verbose=args.verbose).path
    links = resolver.link_manager().list_managed(resolver.settings.public_root, private)

    if formatter.json_mode:
        formatter.json_output(
            [{"link": str(m.link), "target": str(m.target), "origin": m.origin.value} for m in links]
        )
        return 0

    for m in links:
        formatter.text(f"{m.link} -> {m.target} ({m.origin.value})")
    return 0
