"""Git module for git-browser API.

Provides read-only repository queries: log, tree, blob, branches, commit
diffs, and file history across renames.
"""
from .errors import GitCommandError, GitError, NotARepositoryError
from .history import resolve_diff_with_fallback, resolve_file_history
from .models import FileDiff, FileHistoryEntry, LogEntry, TreeEntry
from .router import create_repo_router
from .service import GitService, validate_repository

__all__ = [
    'create_repo_router',
    'FileDiff',
    'FileHistoryEntry',
    'GitCommandError',
    'GitError',
    'GitService',
    'LogEntry',
    'NotARepositoryError',
    'resolve_diff_with_fallback',
    'resolve_file_history',
    'TreeEntry',
    'validate_repository',
]
