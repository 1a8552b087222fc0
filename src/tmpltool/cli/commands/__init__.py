"""Top-level tmpltool commands."""
