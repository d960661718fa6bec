"""Pydantic response schemas for repository browsing."""
from dataclasses import asdict

from pydantic import BaseModel

from .models import LogEntry, TreeEntry


class LogEntryModel(BaseModel):
    """A commit in a log listing."""
    hash: str
    author: str
    date: str
    subject: str

    @classmethod
    def from_entry(cls, entry: LogEntry) -> 'LogEntryModel':
        return cls(**asdict(entry))


class FileHistoryEntryModel(LogEntryModel):
    """A commit in a file history, with the file's path at that commit."""
    path: str


class TreeEntryModel(BaseModel):
    mode: str
    type: str
    hash: str
    name: str
    path: str

    @classmethod
    def from_entry(cls, entry: TreeEntry) -> 'TreeEntryModel':
        return cls(**asdict(entry))


class RepoList(BaseModel):
    repos: list[str]
    default: str


class BaseView(BaseModel):
    """Fields shared by every repository view."""
    repo: str
    repos: list[str]
    rev: str
    branches: list[str]


class TreeView(BaseView):
    path: str
    entries: list[TreeEntryModel]


class BlobView(BaseView):
    path: str
    content: str
    lines: list[str]


class CommitsView(BaseView):
    commits: list[LogEntryModel]


class CommitView(BaseView):
    """A commit diff. ``path`` is empty for whole-commit diffs and holds the
    resolved (possibly historical) file path for single-file diffs."""
    hash: str
    diff: str
    path: str


class FileHistoryView(BaseView):
    path: str
    commits: list[FileHistoryEntryModel]
