import logging
import math
from typing import List, NamedTuple, Optional

import markdown

from app.exceptions import ContentNotFoundError
from app.schemas.blog import PostDetail, PostRecord, PostSummary
from app.services.render_cache import RenderCache

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS = ["fenced_code", "codehilite", "tables", "toc"]


class PostLookup(NamedTuple):
    """Result of a slug lookup: a post to show, or a slug to redirect to."""

    post: Optional[PostRecord] = None
    redirect_slug: Optional[str] = None


class PostsService:
    def __init__(
        self,
        repo,
        content_client,
        render_cache: RenderCache,
        *,
        posts_dir: str = "posts",
        redirect_unlisted: bool = True,
    ):
        self.repo = repo
        self.content_client = content_client
        self.render_cache = render_cache
        self.posts_dir = posts_dir.strip("/")
        self.redirect_unlisted = redirect_unlisted

    def list_posts(
        self, limit: Optional[int] = None, tag: Optional[str] = None
    ) -> List[PostSummary]:
        return [to_summary(p) for p in self.repo.list_published(limit=limit, tag=tag)]

    def list_tags(self) -> List[str]:
        return self.repo.list_distinct_tags()

    def get_post(self, slug: str) -> PostLookup:
        post = self.repo.get_by_slug(slug)
        if post:
            return PostLookup(post=post)
        return self._resolve_from_content_repo(slug)

    def _resolve_from_content_repo(self, slug: str) -> PostLookup:
        """
        The store may lag behind a push, or the post was renamed: look the
        slug up as a file path and report the slug it declares today.
        """
        for path in (f"{self.posts_dir}/{slug}", f"{self.posts_dir}/{slug}.md"):
            try:
                post = self.content_client.get_post_by_path(path)
            except ContentNotFoundError:
                logger.debug(f"No content file at {path}")
                continue

            if post.status == "unlisted" and not self.redirect_unlisted:
                logger.info(f"Not resolving unlisted post {path} for slug {slug}")
                return PostLookup()
            if post.slug == slug:
                # store lag: the file is there under the same slug
                return PostLookup(post=post)
            logger.info(f"Resolved stale slug {slug} to {post.slug} via {path}")
            return PostLookup(redirect_slug=post.slug)

        return PostLookup()

    def to_detail(self, post: PostRecord) -> PostDetail:
        html = self.render_cache.get_or_render(post.path, post.content, render_markdown)
        return PostDetail(**to_summary(post).model_dump(), content=post.content, html=html)


def render_markdown(text: str) -> str:
    return markdown.markdown(text, extensions=MARKDOWN_EXTENSIONS)


def to_summary(post: PostRecord) -> PostSummary:
    return PostSummary(
        slug=post.slug,
        title=post.title,
        description=post.description,
        createdAt=post.createdAt,
        lastModifiedAt=post.lastModifiedAt,
        tags=post.tags,
        readingTime=calculate_reading_time(post.content),
    )


def calculate_reading_time(text: str) -> str:
    words = text.split()
    minutes = math.ceil(len(words) / 200) or 1
    return f"{minutes} min"
