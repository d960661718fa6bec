"""FastAPI application and routers for git-browser.

Example:
    from git_browser.api import create_app, load_config
    app = create_app(load_config('repos.json'))

    # Compose the router manually
    from fastapi import FastAPI
    from git_browser.api import build_config, create_repo_router
    config = build_config([{'name': 'app', 'path': '/src/app'}])
    app = FastAPI()
    app.include_router(create_repo_router(config), prefix='/api')
"""

# Configuration
from .config import (
    APIConfig,
    ConfigValidationError,
    RepoConfig,
    build_config,
    load_config,
)

# Router factories
from .modules.git import create_repo_router

# App factory
from .app import create_app

__all__ = [
    'APIConfig',
    'ConfigValidationError',
    'RepoConfig',
    'build_config',
    'create_app',
    'create_repo_router',
    'load_config',
]
