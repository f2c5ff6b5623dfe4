"""
dotlocal - private configuration roots for dotfiles

Discovers the per-machine private configuration root, keeps its
infrastructure links healthy and links public and private dotfiles into
the home directory so that private entries always win.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
