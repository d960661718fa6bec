"""File history across renames, and diff lookup by historical path.

``git log --follow --name-status`` interleaves commit markers with the
status lines of the tracked file. Reading newest to oldest, a rename line
``R100<TAB>old<TAB>new`` means every older commit knows the file as ``old``.
The parser is a fold over the output lines: ``step`` takes the accumulated
``HistoryState`` and one line and returns the next state, ``finish`` flushes
the last pending entry.
"""
from dataclasses import dataclass, replace
from functools import reduce
from pathlib import Path
from typing import Callable, Iterable, Optional

from ....observability import get_logger
from .errors import GitCommandError
from .models import FileDiff, FileHistoryEntry
from .runner import DEFAULT_TIMEOUT_SECONDS, run_git

logger = get_logger(__name__)

COMMIT_MARKER = '__GB__'
HISTORY_FORMAT = f'--pretty=format:{COMMIT_MARKER}%H|%an|%ad|%s'
DEFAULT_HISTORY_LIMIT = 50

GitRunner = Callable[[list[str]], str]


@dataclass(frozen=True)
class HistoryState:
    """Accumulator for the history fold.

    Attributes:
        entries: Finished entries, newest first
        pending: Entry whose status lines are being read, if any
        cursor: Name of the tracked file for the pending commit
        next_cursor: Name to track from the next (older) commit on, set by a rename
    """
    cursor: str
    entries: tuple[FileHistoryEntry, ...] = ()
    pending: Optional[FileHistoryEntry] = None
    next_cursor: Optional[str] = None


def parse_marker(line: str, path: str) -> Optional[FileHistoryEntry]:
    """Parse ``hash|author|date|subject`` (marker prefix removed).

    The subject keeps any further ``|`` characters. Returns None when the
    line has fewer than four fields.
    """
    parts = line.split('|', 3)
    if len(parts) != 4:
        return None
    hash_, author, date, subject = parts
    return FileHistoryEntry(hash=hash_, author=author, date=date, subject=subject, path=path)


def flush(state: HistoryState) -> HistoryState:
    """Move the pending entry into ``entries`` and apply a pending rename."""
    if state.pending is None:
        return state
    return HistoryState(
        cursor=state.next_cursor or state.cursor,
        entries=state.entries + (state.pending,),
    )


def step(state: HistoryState, line: str) -> HistoryState:
    """Consume one line of ``git log --name-status`` output."""
    if line.startswith(COMMIT_MARKER):
        state = flush(state)
        entry = parse_marker(line[len(COMMIT_MARKER):], state.cursor)
        return replace(state, pending=entry)

    if state.pending is None or not line.strip():
        return state

    parts = line.split('\t')
    if len(parts) < 2:
        return state

    status = parts[0]
    if status.startswith('R') and len(parts) >= 3:
        old_path, new_path = parts[1], parts[2]
        if new_path == state.cursor:
            return replace(
                state,
                pending=replace(state.pending, path=new_path),
                next_cursor=old_path,
            )
        return state

    if parts[1] == state.cursor:
        return replace(state, pending=replace(state.pending, path=parts[1]))
    return state


def finish(state: HistoryState) -> list[FileHistoryEntry]:
    """Flush the last pending entry and return the ordered entries."""
    return list(flush(state).entries)


def parse_file_history(output: str, path: str) -> list[FileHistoryEntry]:
    """Parse ``git log --follow --name-status`` output for ``path``."""
    if not output:
        return []
    return fold_lines(output.split('\n'), path)


def fold_lines(lines: Iterable[str], path: str) -> list[FileHistoryEntry]:
    return finish(reduce(step, lines, HistoryState(cursor=path)))


def _runner_for(repo_path: str | Path, timeout: float) -> GitRunner:
    return lambda args: run_git(repo_path, args, timeout=timeout)


def history_args(revision: str, path: str, limit: int) -> list[str]:
    """Arguments for the rename-following log; the revision is never read as an option."""
    return [
        'log',
        HISTORY_FORMAT,
        '--date=short',
        '-n', str(limit),
        '--follow',
        '--name-status',
        '--end-of-options',
        revision,
        '--',
        path,
    ]


def resolve_file_history(
    repo_path: str | Path,
    revision: str,
    path: str,
    limit: int = DEFAULT_HISTORY_LIMIT,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    runner: GitRunner | None = None,
) -> list[FileHistoryEntry]:
    """Return commits that touched ``path``, newest first, following renames.

    Each entry's ``path`` is the name the file had at that commit.

    Args:
        repo_path: Repository working tree
        revision: Branch, tag or hash to start from (empty means HEAD)
        path: Path relative to the repository root
        limit: Maximum number of commits to read

    Raises:
        GitCommandError: If git fails (bad revision, not a repository)
    """
    run = runner or _runner_for(repo_path, timeout)
    revision = revision or 'HEAD'
    path = path.lstrip('/')

    output = run(history_args(revision, path, limit))
    return parse_file_history(output, path)


def commit_file_diff_args(commit: str, path: str) -> list[str]:
    return ['show', '--end-of-options', commit, '--', path.lstrip('/')]


def _same_commit(full_hash: str, requested: str) -> bool:
    return bool(requested) and full_hash.startswith(requested)


def resolve_diff_with_fallback(
    repo_path: str | Path,
    commit: str,
    path: str,
    history_limit: int = DEFAULT_HISTORY_LIMIT,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    runner: GitRunner | None = None,
) -> FileDiff:
    """Diff ``path`` in ``commit``, using the file's name at that commit if needed.

    A blank diff means the file was not called ``path`` in that commit. In
    that case the history of ``path`` from HEAD is searched for ``commit``
    and the diff is retried with the recorded name. Failures during that
    fallback are logged and the blank result is returned.

    Raises:
        GitCommandError: If the direct diff fails
    """
    run = runner or _runner_for(repo_path, timeout)
    path = path.lstrip('/')

    diff = run(commit_file_diff_args(commit, path))
    if diff.strip():
        return FileDiff(diff=diff, path=path)

    try:
        history = resolve_file_history(
            repo_path, 'HEAD', path, limit=history_limit, runner=run,
        )
        for entry in history:
            if not _same_commit(entry.hash, commit):
                continue
            if entry.path != path:
                retry = run(commit_file_diff_args(commit, entry.path))
                logger.debug(
                    'file_diff_resolved_historical_path',
                    commit=commit,
                    path=path,
                    resolved_path=entry.path,
                )
                return FileDiff(diff=retry, path=entry.path)
            break
    except GitCommandError as e:
        logger.warning(
            'file_diff_fallback_failed',
            commit=commit,
            path=path,
            error=str(e),
        )

    return FileDiff(diff=diff, path=path)
