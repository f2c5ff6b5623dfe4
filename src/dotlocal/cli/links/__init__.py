"""Inspect and clean home-directory dotfile links."""
