"""Configuration for git-browser API."""
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from .modules.git.errors import GitError
from .modules.git.service import validate_repository

CONFIG_ENV_VAR = 'GITBROWSER_CONFIG'
DEFAULT_CONFIG_PATH = 'repos.json'


class ConfigValidationError(ValueError):
    """Raised when the repository configuration cannot be used."""


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, '').strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigValidationError(f"Invalid {name}='{raw}'. Must be an integer.")
    if value <= 0:
        raise ConfigValidationError(f"Invalid {name}='{raw}'. Must be positive.")
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, '').strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigValidationError(f"Invalid {name}='{raw}'. Must be a number.")
    if value <= 0:
        raise ConfigValidationError(f"Invalid {name}='{raw}'. Must be positive.")
    return value


def _default_cors_origins() -> list[str]:
    """Get CORS origins from CORS_ORIGINS (comma separated); none by default."""
    env_origins = os.environ.get('CORS_ORIGINS', '')
    return [o.strip() for o in env_origins.split(',') if o.strip()]


@dataclass(frozen=True)
class RepoConfig:
    """One browsable repository: URL name and absolute working tree path."""
    name: str
    path: Path


@dataclass(frozen=True)
class APIConfig:
    """Central configuration for all API routers.

    Passed to create_app() and the router factories. The repository mapping
    is read-only once constructed.

    Environment variables:
        GITBROWSER_LOG_LIMIT: commits per log page (default 20)
        GITBROWSER_HISTORY_LIMIT: commits per file history (default 50)
        GITBROWSER_GIT_TIMEOUT: seconds before a git call is killed (default 30)
        CORS_ORIGINS: comma separated allowed origins
    """
    repos: Mapping[str, Path]
    log_limit: int = field(default_factory=lambda: _env_int('GITBROWSER_LOG_LIMIT', 20))
    history_limit: int = field(default_factory=lambda: _env_int('GITBROWSER_HISTORY_LIMIT', 50))
    git_timeout_seconds: float = field(
        default_factory=lambda: _env_float('GITBROWSER_GIT_TIMEOUT', 30.0)
    )
    cors_origins: list[str] = field(default_factory=_default_cors_origins)

    def __post_init__(self):
        if not self.repos:
            raise ConfigValidationError('config must include at least one repo')
        # dict preserves insertion order; the first repo is the default.
        object.__setattr__(self, 'repos', MappingProxyType(dict(self.repos)))

    @property
    def repo_names(self) -> list[str]:
        return list(self.repos)

    @property
    def default_repo(self) -> str:
        return next(iter(self.repos))

    def repo_path(self, name: str) -> Path | None:
        return self.repos.get(name)


def _validate_repo(index: int, raw: object) -> RepoConfig:
    if not isinstance(raw, dict):
        raise ConfigValidationError(f'repo entry #{index} must be an object')

    name = str(raw.get('name') or '').strip()
    if not name:
        raise ConfigValidationError('all repos must have a non-empty name')
    if '/' in name:
        raise ConfigValidationError(f"repo name '{name}' cannot contain '/'")

    path_str = str(raw.get('path') or '').strip()
    if not path_str:
        raise ConfigValidationError(f"repo '{name}' must have a non-empty path")

    abs_path = Path(path_str).expanduser().absolute()
    if not abs_path.exists():
        raise ConfigValidationError(f"repo '{name}' path '{abs_path}' does not exist")
    if not abs_path.is_dir():
        raise ConfigValidationError(f"repo '{name}' path '{abs_path}' is not a directory")
    try:
        validate_repository(abs_path)
    except GitError as e:
        raise ConfigValidationError(
            f"repo '{name}' path '{abs_path}' is not a valid git working tree: {e}"
        ) from e

    return RepoConfig(name=name, path=abs_path)


def build_config(repo_entries: list, **overrides) -> APIConfig:
    """Validate raw ``{"name", "path"}`` entries and build an APIConfig.

    Raises:
        ConfigValidationError: On the first invalid entry
    """
    repos: dict[str, Path] = {}
    for index, raw in enumerate(repo_entries):
        repo = _validate_repo(index, raw)
        if repo.name in repos:
            raise ConfigValidationError(f"repo name '{repo.name}' is duplicated")
        repos[repo.name] = repo.path

    if not repos:
        raise ConfigValidationError('config must include at least one repo')
    return APIConfig(repos=repos, **overrides)


def load_config(path: str | Path | None = None, **overrides) -> APIConfig:
    """Load the JSON repository config.

    Args:
        path: Config file. Defaults to GITBROWSER_CONFIG env var or repos.json.
        overrides: Extra APIConfig fields (limits, timeout, cors_origins)

    The file looks like ``{"repos": [{"name": "app", "path": "/src/app"}]}``.

    Raises:
        ConfigValidationError: If the file is unreadable, unparsable or invalid
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
    path = Path(path)

    try:
        content = path.read_text(encoding='utf-8')
    except OSError as e:
        raise ConfigValidationError(f"read config '{path}': {e}") from e
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigValidationError(f"parse config '{path}': {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get('repos', []), list):
        raise ConfigValidationError(f"parse config '{path}': expected {{\"repos\": [...]}}")

    return build_config(data.get('repos', []), **overrides)
