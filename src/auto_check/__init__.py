"""Watch a directory tree and re-run check commands when files change."""

__version__ = "0.1.0"
