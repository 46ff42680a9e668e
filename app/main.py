import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from app.db.postgres.base import Base, engine
from app.models.blog_post import BlogPost  # noqa: F401  registers the table
from app.routers import blog, feeds, sync, webhook
from app.security import get_api_key
from app.services.github_client import GitHubContentClient
from app.services.render_cache import RenderCache
from app.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Blog Sync API", description="Blog posts synced from GitHub")
app.state.render_cache = RenderCache(max_size=settings.RENDER_CACHE_SIZE)
app.state.content_client = GitHubContentClient(settings.content_repo_config)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(engine)
    if app.state.content_client.http.is_closed:
        app.state.content_client = GitHubContentClient(settings.content_repo_config)
    logger.info(
        f"Serving posts from {settings.content_repo_config.full_name} ({settings.POSTS_DIR}/)"
    )
    try:
        yield
    finally:
        app.state.content_client.close()
        logger.info("GitHub content client closed")


app.router.lifespan_context = lifespan

# feeds first: /blog/rss.xml must win over /blog/{slug}
app.include_router(feeds.router)
app.include_router(blog.router)
app.include_router(webhook.router)
app.include_router(sync.router, dependencies=[Depends(get_api_key)])


@app.get("/")
async def root():
    return {"message": "Blog Sync API is running"}
