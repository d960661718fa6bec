"""Feature modules for git-browser API."""
