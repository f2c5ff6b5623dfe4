"""
dotlocal resolve command.

SUMMARY: Print the private root path

Runs discovery, creates the standard location when nothing is found (unless
``--no-create``), ensures infrastructure links and prints the path. Stdout
carries the path and nothing else, so ``$(dotlocal resolve)`` is safe.
"""

from __future__ import annotations

import argparse
import sys

from dotlocal.cli import add_roots_flags, add_verbose_flag, build_resolver

SUMMARY = "Print the private root path"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--no-create",
        action="store_true",
        help="Do not create the standard location when nothing is found",
    )
    add_roots_flags(parser)
    add_verbose_flag(parser)


def main(args: argparse.Namespace) -> int:
    resolver = build_resolver(args)
    path = resolver.resolve(create_if_missing=not args.no_create, verbose=args.verbose)
    if path is None:
        print("No private root found", file=sys.stderr)
        return 1
    print(path)
    return 0
