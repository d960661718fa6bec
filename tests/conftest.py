"""Pytest configuration for git_browser tests."""
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

# Add src/back to path for src-layout imports
_PROJECT_ROOT = Path(__file__).parent.parent
_SRC_BACK = _PROJECT_ROOT / 'src' / 'back'
if str(_SRC_BACK) not in sys.path:
    sys.path.insert(0, str(_SRC_BACK))

import pytest


def git(repo: Path, *args: str) -> str:
    """Run git in repo for test setup and return trimmed stdout."""
    result = subprocess.run(
        ['git', *args], cwd=repo, capture_output=True, text=True, check=True,
    )
    return result.stdout.strip()


def commit_file(repo: Path, rel_path: str, content: str, message: str) -> str:
    """Write a file, commit it, and return the new commit hash."""
    target = repo / rel_path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content)
    git(repo, 'add', '.')
    git(repo, 'commit', '-q', '-m', message)
    return git(repo, 'rev-parse', 'HEAD')


def init_repo(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    git(path, 'init', '-q')
    git(path, 'symbolic-ref', 'HEAD', 'refs/heads/main')
    git(path, 'config', 'user.email', 'test@test.com')
    git(path, 'config', 'user.name', 'Test User')
    git(path, 'config', 'commit.gpgsign', 'false')
    return path


@dataclass
class RenamedRepo:
    """a/f.kt committed (v1), modified (v2), then moved to b/a/f.kt (v3)."""
    path: Path
    h1: str
    h2: str
    h3: str
    old_path: str = 'a/f.kt'
    new_path: str = 'b/a/f.kt'


@pytest.fixture
def git_repo(tmp_path):
    """Create an empty git repository on branch main."""
    return init_repo(tmp_path / 'repo')


@pytest.fixture
def renamed_repo(git_repo):
    """Repository whose only file moved into a new directory."""
    h1 = commit_file(git_repo, 'a/f.kt', 'fun main() {\n    println("v1")\n}\n', 'v1')
    h2 = commit_file(git_repo, 'a/f.kt', 'fun main() {\n    println("v2")\n}\n', 'v2')
    (git_repo / 'b').mkdir()
    git(git_repo, 'mv', 'a', 'b/a')
    git(git_repo, 'commit', '-q', '-m', 'v3')
    h3 = git(git_repo, 'rev-parse', 'HEAD')
    return RenamedRepo(path=git_repo, h1=h1, h2=h2, h3=h3)
