"""Create, validate and repair infrastructure links in the private root."""
