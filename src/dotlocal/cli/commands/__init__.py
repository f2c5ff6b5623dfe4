"""Top-level dotlocal commands."""
