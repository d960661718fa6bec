"""Subprocess wrapper around the git binary."""
import subprocess
import time
from pathlib import Path

from ....observability import get_logger
from ....observability.metrics import GIT_COMMAND_DURATION_SECONDS, GIT_COMMANDS_TOTAL
from .errors import GitCommandError

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0

# Paths in --name-status and ls-tree output come back as raw UTF-8 instead
# of C-quoted octal escapes.
GIT_CONFIG_OPTIONS = ['-c', 'core.quotePath=false']


def run_git(
    repo_path: str | Path,
    args: list[str],
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> str:
    """Run a git command in the target repository.

    Args:
        repo_path: Working directory for the command
        args: Subcommand and its arguments (without 'git' or global options)
        timeout: Seconds before the process is killed

    Returns:
        stdout with surrounding whitespace trimmed

    Raises:
        GitCommandError: If git exits non-zero, times out, or is missing
    """
    command = args[0] if args else ''
    start = time.perf_counter()
    try:
        result = subprocess.run(
            ['git', *GIT_CONFIG_OPTIONS, *args],
            cwd=repo_path,
            capture_output=True,
            text=True,
            encoding='utf-8',
            errors='replace',
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        GIT_COMMANDS_TOTAL.labels(command=command, outcome='timeout').inc()
        logger.warning('git_command_timeout', command=command, timeout=timeout)
        raise GitCommandError(
            f'git {command} timed out after {timeout}s',
            args=args,
            repo_path=str(repo_path),
        ) from e
    except OSError as e:
        # Missing binary or unusable working directory.
        GIT_COMMANDS_TOTAL.labels(command=command, outcome='error').inc()
        raise GitCommandError(
            f'git {command} could not be started: {e}',
            args=args,
            repo_path=str(repo_path),
        ) from e
    finally:
        GIT_COMMAND_DURATION_SECONDS.labels(command=command).observe(
            time.perf_counter() - start
        )

    duration_ms = round((time.perf_counter() - start) * 1000, 2)
    if result.returncode != 0:
        stderr = result.stderr.strip()
        GIT_COMMANDS_TOTAL.labels(command=command, outcome='error').inc()
        logger.debug(
            'git_command_failed',
            command=command,
            returncode=result.returncode,
            duration_ms=duration_ms,
            stderr=stderr,
        )
        message = f'git {command} failed'
        if stderr:
            message = f'{message}: {stderr}'
        raise GitCommandError(
            message,
            args=args,
            returncode=result.returncode,
            stderr=stderr,
            repo_path=str(repo_path),
        )

    GIT_COMMANDS_TOTAL.labels(command=command, outcome='ok').inc()
    logger.debug('git_command', command=command, duration_ms=duration_ms)
    return result.stdout.strip()
