"""Show and validate dotlocal settings and dotfiles.conf."""
