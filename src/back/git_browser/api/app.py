"""Application factory for git-browser API."""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse, Response

from .. import __version__
from ..observability import configure_logging, get_logger, metrics_text
from ..observability.middleware import MetricsMiddleware, RequestContextMiddleware
from .config import APIConfig, load_config
from .modules.git import GitCommandError, create_repo_router

logger = get_logger(__name__)


def create_app(config: APIConfig | None = None) -> FastAPI:
    """Create a pre-wired FastAPI application.

    Args:
        config: API configuration. Defaults to load_config(), which reads
            the file named by GITBROWSER_CONFIG (or repos.json).

    Returns:
        Configured FastAPI application with all routes mounted.

    Raises:
        ConfigValidationError: If no config is given and loading it fails
    """
    configure_logging()
    if config is None:
        config = load_config()

    app = FastAPI(
        title='git-browser API',
        description='Read-only browsing of local Git repositories',
        version=__version__,
    )
    app.state.config = config

    # Last added runs first: the request id is bound before anything logs.
    app.add_middleware(MetricsMiddleware)
    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_methods=['GET'],
            allow_headers=['*'],
        )
    app.add_middleware(RequestContextMiddleware)

    @app.exception_handler(GitCommandError)
    async def git_command_error_handler(request: Request, exc: GitCommandError):
        logger.error(
            'git_command_error',
            path=request.url.path,
            git_args=exc.git_args,
            returncode=exc.returncode,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content={'detail': str(exc), 'code': 'git_command_failed'},
        )

    app.include_router(create_repo_router(config), prefix='/api')

    @app.get('/', include_in_schema=False)
    def root():
        """Redirect to the default repository."""
        return RedirectResponse(f'/api/repos/{config.default_repo}', status_code=302)

    @app.get('/health')
    def health():
        """Basic health check for readiness/liveness probes."""
        return {'status': 'ok', 'repos': config.repo_names}

    @app.get('/metrics', include_in_schema=False)
    def metrics():
        body, content_type = metrics_text()
        return Response(content=body, media_type=content_type)

    logger.info('app_created', repos=config.repo_names, default_repo=config.default_repo)
    return app
