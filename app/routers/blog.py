import logging
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import RedirectResponse

from app import dependencies as deps
from app.schemas.blog import PostDetail, PostSummary
from app.services.posts_service import PostsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/blog", tags=["blog"])


@router.get("", response_model=List[PostSummary])
def list_posts(
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    service: PostsService = Depends(deps.get_posts_service),
):
    """Published posts, newest first."""
    try:
        return service.list_posts(limit=limit)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get("/tags", response_model=List[str])
def list_tags(service: PostsService = Depends(deps.get_posts_service)):
    try:
        return service.list_tags()
    except Exception as e:
        logger.error(f"Unexpected error listing tags: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve tags")


@router.get("/tags/{tag}", response_model=List[PostSummary])
def list_posts_by_tag(
    tag: str, service: PostsService = Depends(deps.get_posts_service)
):
    try:
        return service.list_posts(tag=tag)
    except Exception as e:
        logger.error(f"Unexpected error listing posts tagged {tag}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get("/{slug}", response_model=PostDetail)
def get_post(
    slug: str,
    response: Response,
    service: PostsService = Depends(deps.get_posts_service),
):
    """A single post, or a permanent redirect when the slug was renamed."""
    try:
        lookup = service.get_post(slug)
        if lookup.redirect_slug:
            return RedirectResponse(
                url=f"{router.prefix}/{quote(lookup.redirect_slug)}", status_code=301
            )
        if not lookup.post:
            raise HTTPException(status_code=404, detail="Post not found")
        response.headers["Cache-Control"] = "public, max-age=30"
        return service.to_detail(lookup.post)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error retrieving post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve post")
