"""
dotlocal status command.

SUMMARY: Show how the private root is resolved

Reports ``{path, method, type, exists}`` without creating anything.
"""

from __future__ import annotations

import argparse

from dotlocal.cli import OutputFormatter, add_standard_flags, build_resolver

SUMMARY = "Show how the private root is resolved"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_standard_flags(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=args.json)
    resolver = build_resolver(args)
    if args.verbose:
        resolver.discover(verbose=True)
    status = resolver.status()
    data = status.to_dict()

    if formatter.json_mode:
        formatter.json_output(data)
        return 0

    formatter.text(f"Private root: {data['path'] or '(none)'}")
    formatter.text_kv("Method", data["method_label"] or status.method.label)
    formatter.text_kv("Type", data["type"])
    formatter.text_kv("Usable", "yes" if data["exists"] else "no")
    formatter.text_kv("Public tree", resolver.settings.public_root)
    return 0
