"""Git read operations for one repository."""
from pathlib import Path

from .errors import GitCommandError, NotARepositoryError
from .history import (
    DEFAULT_HISTORY_LIMIT,
    commit_file_diff_args,
    resolve_diff_with_fallback,
    resolve_file_history,
)
from .models import FileDiff, FileHistoryEntry, LogEntry, TreeEntry
from .runner import DEFAULT_TIMEOUT_SECONDS, run_git

DEFAULT_LOG_LIMIT = 20


def validate_repository(repo_path: str | Path, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
    """Check that repo_path points into a git working tree.

    Raises:
        NotARepositoryError: If git does not report a working tree
    """
    try:
        out = run_git(repo_path, ['rev-parse', '--is-inside-work-tree'], timeout=timeout)
    except GitCommandError as e:
        raise NotARepositoryError(str(e), repo_path=str(repo_path)) from e
    if out != 'true':
        raise NotARepositoryError(
            f'{repo_path} is not a git repository', repo_path=str(repo_path)
        )


def parse_log(output: str) -> list[LogEntry]:
    """Parse ``hash|author|date|subject`` lines, skipping malformed ones."""
    entries = []
    for line in output.splitlines():
        parts = line.split('|', 3)
        if len(parts) == 4:
            hash_, author, date, subject = parts
            entries.append(LogEntry(hash=hash_, author=author, date=date, subject=subject))
    return entries


def parse_tree(output: str, prefix: str) -> list[TreeEntry]:
    """Parse ``git ls-tree`` output.

    Each line is ``<mode> <type> <hash>\\t<path>``; ``name`` is the path
    with the listed directory prefix removed. The path is taken verbatim
    after the tab, so names with leading spaces survive.
    """
    entries = []
    for line in output.splitlines():
        meta, sep, entry_path = line.partition('\t')
        fields = meta.split()
        if not sep or len(fields) != 3 or not entry_path:
            continue
        mode, type_, hash_ = fields
        name = entry_path[len(prefix):] if prefix and entry_path.startswith(prefix) else entry_path
        entries.append(TreeEntry(mode=mode, type=type_, hash=hash_, name=name, path=entry_path))
    return entries


class GitService:
    """Service class for read-only git queries against one repository.

    Every method runs one or more synchronous git subprocesses. Empty
    revisions mean HEAD.
    """

    def __init__(
        self,
        repo_path: str | Path,
        log_limit: int = DEFAULT_LOG_LIMIT,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self.repo_path = Path(repo_path)
        self.log_limit = log_limit
        self.history_limit = history_limit
        self.timeout = timeout

    def run_git(self, args: list[str]) -> str:
        """Run git in this repository; raises GitCommandError on failure."""
        return run_git(self.repo_path, args, timeout=self.timeout)

    def get_log(self, rev: str = '') -> list[LogEntry]:
        """Return the most recent commits reachable from rev."""
        out = self.run_git([
            'log',
            '--pretty=format:%H|%an|%ad|%s',
            '--date=short',
            '-n', str(self.log_limit),
            '--end-of-options',
            rev or 'HEAD',
        ])
        return parse_log(out)

    def list_tree(self, rev: str = '', path: str = '') -> list[TreeEntry]:
        """List the children of directory ``path`` at ``rev``."""
        path = path.lstrip('/')
        if path and not path.endswith('/'):
            path += '/'
        out = self.run_git(['ls-tree', '--end-of-options', rev or 'HEAD', path or '.'])
        return parse_tree(out, path)

    def get_file_content(self, rev: str, path: str) -> str:
        return self.run_git(['show', '--end-of-options', f"{rev or 'HEAD'}:{path.lstrip('/')}"])

    def get_branches(self) -> list[str]:
        out = self.run_git(['branch', '--format=%(refname:short)'])
        return out.split('\n') if out else []

    def get_current_branch(self) -> str:
        return self.run_git(['rev-parse', '--abbrev-ref', 'HEAD'])

    def get_commit_diff(self, commit: str) -> str:
        return self.run_git(['show', '--end-of-options', commit])

    def get_commit_file_diff(self, commit: str, path: str) -> str:
        """Diff of one file in one commit; blank if the path is not in it."""
        return self.run_git(commit_file_diff_args(commit, path))

    def get_file_history(self, rev: str, path: str) -> list[FileHistoryEntry]:
        """Commits touching path, newest first, with the path at each commit."""
        return resolve_file_history(
            self.repo_path, rev, path, limit=self.history_limit, runner=self.run_git,
        )

    def get_file_diff(self, commit: str, path: str) -> FileDiff:
        """Diff of path in commit, resolving the file's earlier name if needed."""
        return resolve_diff_with_fallback(
            self.repo_path, commit, path, history_limit=self.history_limit, runner=self.run_git,
        )
