"""Repository browsing routes for git-browser API."""
from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException
from fastapi.responses import RedirectResponse
from structlog.contextvars import bind_contextvars

from ....observability import get_logger
from ...paths import normalize_repo_relative_path
from .errors import GitCommandError
from .schemas import (
    BlobView,
    CommitsView,
    CommitView,
    FileHistoryEntryModel,
    FileHistoryView,
    LogEntryModel,
    RepoList,
    TreeEntryModel,
    TreeView,
)
from .service import GitService

if TYPE_CHECKING:
    from ...config import APIConfig

logger = get_logger(__name__)


def create_repo_router(config: 'APIConfig') -> APIRouter:
    """Create repository browsing router.

    Handlers are plain functions so FastAPI runs them in its threadpool;
    each git call blocks only its own worker thread.

    Args:
        config: API configuration with the repository mapping

    Returns:
        FastAPI router with tree, blob, log, commit and file history endpoints
    """
    router = APIRouter(tags=['repos'])
    services = {
        name: GitService(
            config.repo_path(name),
            log_limit=config.log_limit,
            history_limit=config.history_limit,
            timeout=config.git_timeout_seconds,
        )
        for name in config.repo_names
    }

    def get_service(repo: str) -> GitService:
        service = services.get(repo)
        if service is None:
            raise HTTPException(status_code=404, detail=f'Unknown repository: {repo}')
        bind_contextvars(repo=repo)
        return service

    def revision(rev: str) -> str:
        # Revisions and hashes never start with a dash.
        if rev.startswith('-'):
            raise HTTPException(status_code=404, detail=f'Invalid revision: {rev}')
        bind_contextvars(rev=rev)
        return rev

    def file_path(service: GitService, requested: str) -> str:
        normalized = normalize_repo_relative_path(service.repo_path, requested)
        if normalized is None:
            raise HTTPException(status_code=404, detail=f'Invalid path: {requested}')
        return normalized

    def base_data(repo: str, service: GitService, rev: str) -> dict:
        try:
            branches = service.get_branches()
        except GitCommandError as e:
            logger.debug('branch_listing_failed', repo=repo, error=str(e))
            branches = []
        return {
            'repo': repo,
            'repos': config.repo_names,
            'rev': rev,
            'branches': branches,
        }

    def current_branch(service: GitService) -> str:
        try:
            return service.get_current_branch() or 'HEAD'
        except GitCommandError:
            return 'HEAD'

    @router.get('/repos', response_model=RepoList)
    def list_repos():
        """List configured repositories and the default one."""
        return RepoList(repos=config.repo_names, default=config.default_repo)

    @router.get('/repos/{repo}')
    @router.get('/repos/{repo}/', include_in_schema=False)
    def repo_index(repo: str):
        """Redirect to the tree of the currently checked out branch."""
        service = get_service(repo)
        return RedirectResponse(
            f'/api/repos/{repo}/tree/{current_branch(service)}/', status_code=302,
        )

    @router.get('/repos/{repo}/tree/{rev}', response_model=TreeView)
    @router.get('/repos/{repo}/tree/{rev}/{path:path}', response_model=TreeView)
    def get_tree(repo: str, rev: str, path: str = ''):
        """List a directory at a revision."""
        service = get_service(repo)
        rev = revision(rev)
        entries = service.list_tree(rev, path)
        return TreeView(
            **base_data(repo, service, rev),
            path=path,
            entries=[TreeEntryModel.from_entry(e) for e in entries],
        )

    @router.get('/repos/{repo}/blob/{rev}/{path:path}', response_model=BlobView)
    def get_blob(repo: str, rev: str, path: str):
        """Raw file content at a revision."""
        service = get_service(repo)
        rev = revision(rev)
        normalized = file_path(service, path)
        content = service.get_file_content(rev, normalized)
        return BlobView(
            **base_data(repo, service, rev),
            path=normalized,
            content=content,
            lines=content.split('\n'),
        )

    @router.get('/repos/{repo}/commits', response_model=CommitsView)
    @router.get('/repos/{repo}/commits/{rev}', response_model=CommitsView)
    def get_commits(repo: str, rev: str = ''):
        """Recent commits, starting at rev or the current branch."""
        service = get_service(repo)
        if not rev:
            rev = current_branch(service)
        rev = revision(rev)
        commits = service.get_log(rev)
        return CommitsView(
            **base_data(repo, service, rev),
            commits=[LogEntryModel.from_entry(c) for c in commits],
        )

    @router.get('/repos/{repo}/commit/{hash}', response_model=CommitView)
    def get_commit(repo: str, hash: str):
        """Full diff of one commit."""
        service = get_service(repo)
        hash = revision(hash)
        diff = service.get_commit_diff(hash)
        return CommitView(
            **base_data(repo, service, current_branch(service)),
            hash=hash,
            diff=diff,
            path='',
        )

    @router.get('/repos/{repo}/file-history/{rev}/{path:path}', response_model=FileHistoryView)
    def get_file_history(repo: str, rev: str, path: str):
        """Commits that touched a file, following renames."""
        service = get_service(repo)
        rev = revision(rev)
        normalized = file_path(service, path)
        commits = service.get_file_history(rev, normalized)
        return FileHistoryView(
            **base_data(repo, service, rev),
            path=normalized,
            commits=[FileHistoryEntryModel.from_entry(c) for c in commits],
        )

    @router.get('/repos/{repo}/file-diff/{hash}/{path:path}', response_model=CommitView)
    def get_file_diff(repo: str, hash: str, path: str):
        """Diff of one file in one commit.

        The path may be the file's current name; if the file was called
        something else in that commit, ``path`` in the response holds the
        name it had then.
        """
        service = get_service(repo)
        hash = revision(hash)
        normalized = file_path(service, path)
        result = service.get_file_diff(hash, normalized)
        return CommitView(
            **base_data(repo, service, current_branch(service)),
            hash=hash,
            diff=result.diff,
            path=result.path,
        )

    return router
