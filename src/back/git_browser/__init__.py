"""git-browser: read-only HTTP browsing of local Git repositories."""

__version__ = '0.1.0'
