"""Unit tests for git_browser.api.config module."""
import json

import pytest

from conftest import init_repo
from git_browser.api.config import (
    APIConfig,
    ConfigValidationError,
    build_config,
    load_config,
)


def write_config(path, repos):
    path.write_text(json.dumps({'repos': repos}))
    return path


class TestAPIConfig:
    """Tests for APIConfig dataclass."""

    def test_default_values(self, git_repo, monkeypatch):
        for var in ('GITBROWSER_LOG_LIMIT', 'GITBROWSER_HISTORY_LIMIT',
                    'GITBROWSER_GIT_TIMEOUT', 'CORS_ORIGINS'):
            monkeypatch.delenv(var, raising=False)
        config = APIConfig(repos={'repo': git_repo})
        assert config.log_limit == 20
        assert config.history_limit == 50
        assert config.git_timeout_seconds == 30.0
        assert config.cors_origins == []

    def test_limits_from_env(self, git_repo, monkeypatch):
        monkeypatch.setenv('GITBROWSER_LOG_LIMIT', '5')
        monkeypatch.setenv('GITBROWSER_HISTORY_LIMIT', '7')
        monkeypatch.setenv('GITBROWSER_GIT_TIMEOUT', '2.5')
        config = APIConfig(repos={'repo': git_repo})
        assert config.log_limit == 5
        assert config.history_limit == 7
        assert config.git_timeout_seconds == 2.5

    @pytest.mark.parametrize('value', ['abc', '0', '-3'])
    def test_invalid_limit_env(self, git_repo, monkeypatch, value):
        monkeypatch.setenv('GITBROWSER_LOG_LIMIT', value)
        with pytest.raises(ConfigValidationError, match='GITBROWSER_LOG_LIMIT'):
            APIConfig(repos={'repo': git_repo})

    def test_cors_origins_from_env(self, git_repo, monkeypatch):
        monkeypatch.setenv('CORS_ORIGINS', 'http://a.test, http://b.test,')
        config = APIConfig(repos={'repo': git_repo})
        assert config.cors_origins == ['http://a.test', 'http://b.test']

    def test_repos_are_read_only(self, git_repo):
        source = {'repo': git_repo}
        config = APIConfig(repos=source)
        source['other'] = git_repo
        assert config.repo_names == ['repo']
        with pytest.raises(TypeError):
            config.repos['other'] = git_repo

    def test_default_repo_is_first(self, tmp_path):
        first = init_repo(tmp_path / 'first')
        second = init_repo(tmp_path / 'second')
        config = APIConfig(repos={'zeta': first, 'alpha': second})
        assert config.default_repo == 'zeta'
        assert config.repo_path('alpha') == second
        assert config.repo_path('missing') is None

    def test_empty_repos_rejected(self):
        with pytest.raises(ConfigValidationError):
            APIConfig(repos={})


class TestBuildConfig:
    """Tests for build_config validation."""

    def test_valid_entries(self, git_repo):
        config = build_config([{'name': ' app ', 'path': str(git_repo)}], log_limit=3)
        assert config.repo_names == ['app']
        assert config.repos['app'].resolve() == git_repo.resolve()
        assert config.log_limit == 3

    def test_relative_path_made_absolute(self, git_repo, monkeypatch):
        monkeypatch.chdir(git_repo.parent)
        config = build_config([{'name': 'app', 'path': git_repo.name}])
        assert config.repos['app'].is_absolute()
        assert config.repos['app'].resolve() == git_repo.resolve()

    @pytest.mark.parametrize('entry,message', [
        ({'name': '', 'path': '.'}, 'non-empty name'),
        ({'path': '.'}, 'non-empty name'),
        ({'name': 'a/b', 'path': '.'}, "cannot contain '/'"),
        ({'name': 'app', 'path': ''}, 'non-empty path'),
        ('not-an-object', 'must be an object'),
    ])
    def test_invalid_entries(self, entry, message):
        with pytest.raises(ConfigValidationError, match=message):
            build_config([entry])

    def test_duplicate_names(self, git_repo):
        entry = {'name': 'app', 'path': str(git_repo)}
        with pytest.raises(ConfigValidationError, match='duplicated'):
            build_config([entry, entry])

    def test_missing_path(self, tmp_path):
        with pytest.raises(ConfigValidationError, match='does not exist'):
            build_config([{'name': 'app', 'path': str(tmp_path / 'missing')}])

    def test_file_path(self, tmp_path):
        file_path = tmp_path / 'file.txt'
        file_path.write_text('x')
        with pytest.raises(ConfigValidationError, match='not a directory'):
            build_config([{'name': 'app', 'path': str(file_path)}])

    def test_not_a_git_repository(self, tmp_path):
        plain = tmp_path / 'plain'
        plain.mkdir()
        with pytest.raises(ConfigValidationError, match='not a valid git working tree'):
            build_config([{'name': 'app', 'path': str(plain)}])

    def test_no_repos(self):
        with pytest.raises(ConfigValidationError, match='at least one repo'):
            build_config([])


class TestLoadConfig:
    """Tests for load_config."""

    def test_load_from_path(self, git_repo, tmp_path):
        path = write_config(tmp_path / 'repos.json', [{'name': 'app', 'path': str(git_repo)}])
        config = load_config(path)
        assert config.default_repo == 'app'

    def test_load_from_env(self, git_repo, tmp_path, monkeypatch):
        path = write_config(tmp_path / 'custom.json', [{'name': 'env', 'path': str(git_repo)}])
        monkeypatch.setenv('GITBROWSER_CONFIG', str(path))
        assert load_config().repo_names == ['env']

    def test_defaults_to_repos_json(self, git_repo, tmp_path, monkeypatch):
        write_config(tmp_path / 'repos.json', [{'name': 'cwd', 'path': str(git_repo)}])
        monkeypatch.delenv('GITBROWSER_CONFIG', raising=False)
        monkeypatch.chdir(tmp_path)
        assert load_config().repo_names == ['cwd']

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigValidationError, match='read config'):
            load_config(tmp_path / 'missing.json')

    def test_invalid_json(self, tmp_path):
        path = tmp_path / 'repos.json'
        path.write_text('{not json')
        with pytest.raises(ConfigValidationError, match='parse config'):
            load_config(path)

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / 'repos.json'
        path.write_text(json.dumps({'repos': {'name': 'app'}}))
        with pytest.raises(ConfigValidationError, match='parse config'):
            load_config(path)

    def test_empty_repo_list(self, tmp_path):
        path = write_config(tmp_path / 'repos.json', [])
        with pytest.raises(ConfigValidationError, match='at least one repo'):
            load_config(path)
