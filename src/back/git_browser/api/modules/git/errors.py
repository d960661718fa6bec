"""Typed error hierarchy for git operations.

Empty results (no history, blank diff) are values, not errors. These
exceptions cover the cases where git itself could not answer.
"""


class GitError(Exception):
    """Base error for all git operations."""

    def __init__(self, message: str, *, repo_path: str | None = None):
        self.repo_path = repo_path
        super().__init__(message)


class GitCommandError(GitError):
    """git exited non-zero, timed out, or could not be started."""

    def __init__(
        self,
        message: str,
        *,
        args: list[str] | None = None,
        returncode: int | None = None,
        stderr: str = '',
        repo_path: str | None = None,
    ):
        self.git_args = list(args or [])
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message, repo_path=repo_path)

    def __repr__(self) -> str:
        parts = [f"{type(self).__name__}({self.args[0]!r}"]
        if self.git_args:
            parts.append(f"args={self.git_args!r}")
        if self.returncode is not None:
            parts.append(f"returncode={self.returncode!r}")
        return ", ".join(parts) + ")"


class NotARepositoryError(GitError):
    """The path is not inside a git working tree."""

    pass
