import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from app import dependencies as deps
from app.security import get_settings
from app.services.feeds import build_rss, build_sitemap
from app.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/blog/rss.xml")
def rss_feed(
    repo=Depends(deps.get_posts_repo),
    current_settings: Settings = Depends(get_settings),
):
    try:
        posts = repo.list_published()
    except Exception as e:
        logger.error(f"Failed to build RSS feed: {e}")
        raise HTTPException(status_code=500, detail="Failed to build feed")

    body = build_rss(
        posts,
        site_url=current_settings.SITE_URL,
        title=current_settings.BLOG_TITLE,
        description=current_settings.BLOG_DESCRIPTION,
    )
    return Response(content=body, media_type="application/xml")


@router.get("/sitemap.txt")
def sitemap(
    repo=Depends(deps.get_posts_repo),
    current_settings: Settings = Depends(get_settings),
):
    try:
        posts = repo.list_published()
        tags = repo.list_distinct_tags()
    except Exception as e:
        logger.error(f"Failed to build sitemap: {e}")
        raise HTTPException(status_code=500, detail="Failed to build sitemap")

    body = build_sitemap(posts, tags, site_url=current_settings.SITE_URL)
    return Response(content=body, media_type="text/plain")
