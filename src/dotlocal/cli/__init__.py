"""
dotlocal CLI package.

Provides the command-line interface with auto-discovery of commands from
subfolders (links/, infra/, config/) and top-level commands in commands/.

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Settings and resolver construction from parsed arguments
"""
from ._output import OutputFormatter
from ._args import (
    add_json_flag,
    add_roots_flags,
    add_force_flag,
    add_dry_run_flag,
    add_verbose_flag,
    add_standard_flags,
)
from ._utils import load_cli_settings, build_resolver, require_private_root

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_json_flag",
    "add_roots_flags",
    "add_force_flag",
    "add_dry_run_flag",
    "add_verbose_flag",
    "add_standard_flags",
    # Utilities
    "load_cli_settings",
    "build_resolver",
    "require_private_root",
]
