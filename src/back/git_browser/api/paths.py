"""Request path normalization."""
import posixpath
from pathlib import Path


def normalize_repo_relative_path(repo_path: str | Path, requested: str) -> str | None:
    """Turn a requested file path into a clean path relative to the repo root.

    Accepts paths that carry the repository's own absolute location (with
    or without the leading slash) and strips it.

    Returns:
        The normalized relative path, or None if the path is empty or
        escapes the repository root
    """
    path = requested.strip().lstrip('/')
    if not path:
        return None

    repo = posixpath.normpath(Path(repo_path).as_posix())
    with_leading_slash = '/' + path
    if with_leading_slash.startswith(repo + '/'):
        path = with_leading_slash[len(repo) + 1:]
    else:
        repo_no_slash = repo.lstrip('/')
        if repo_no_slash and path.startswith(repo_no_slash + '/'):
            path = path[len(repo_no_slash) + 1:]

    path = posixpath.normpath(path).lstrip('/')
    if path.startswith('./'):
        path = path[2:]
    if path in ('.', '', '..') or path.startswith('../'):
        return None
    return path
