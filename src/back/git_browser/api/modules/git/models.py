"""Value types produced by git queries."""
from dataclasses import dataclass


@dataclass(frozen=True)
class LogEntry:
    """A single commit log entry. ``date`` is YYYY-MM-DD."""
    hash: str
    author: str
    date: str
    subject: str


@dataclass(frozen=True)
class FileHistoryEntry(LogEntry):
    """One history item for a file; ``path`` is the name it had at that commit."""
    path: str


@dataclass(frozen=True)
class TreeEntry:
    """A file or directory in a tree listing."""
    mode: str
    type: str
    hash: str
    name: str
    path: str


@dataclass(frozen=True)
class FileDiff:
    """Diff text for one file in one commit, with the path it was fetched by."""
    diff: str
    path: str
