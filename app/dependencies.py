from fastapi import Depends, Request

from app.db.postgres.base import get_db
from app.repos.posts_repo import SqlPostsRepo
from app.security import get_settings
from app.services.posts_service import PostsService
from app.services.sync_service import SyncService


def get_render_cache(request: Request):
    return request.app.state.render_cache


def get_content_client(request: Request):
    return request.app.state.content_client


def get_posts_repo(db=Depends(get_db)):
    return SqlPostsRepo(db)


def get_posts_service(
    repo=Depends(get_posts_repo),
    content_client=Depends(get_content_client),
    render_cache=Depends(get_render_cache),
    current_settings=Depends(get_settings),
):
    return PostsService(
        repo=repo,
        content_client=content_client,
        render_cache=render_cache,
        posts_dir=current_settings.POSTS_DIR,
        redirect_unlisted=current_settings.REDIRECT_UNLISTED,
    )


def get_sync_service(
    repo=Depends(get_posts_repo),
    content_client=Depends(get_content_client),
    render_cache=Depends(get_render_cache),
    current_settings=Depends(get_settings),
):
    return SyncService(
        content_client=content_client,
        repo=repo,
        config=current_settings.content_repo_config,
        render_cache=render_cache,
    )
