import json
import logging
from contextlib import contextmanager
from typing import Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import StoreError
from app.models.blog_post import BlogPost
from app.schemas.blog import PostRecord

logger = logging.getLogger(__name__)

PUBLISHED = "published"


class SqlPostsRepo:
    """
    The BlogPosts table. ``path`` is the key; every mutation runs in a single
    transaction that is rolled back as a whole on failure.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, action: str, *, commit: bool = False):
        try:
            yield
            if commit:
                self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Post store failed to {action}: {e}")
            raise StoreError(f"Failed to {action}") from e

    # --- reads ---

    def get_by_slug(self, slug: str) -> Optional[PostRecord]:
        with self._guard(f"get post by slug {slug}"):
            row = self.db.query(BlogPost).filter(BlogPost.slug == slug).first()
        return _to_record(row) if row else None

    def get_by_path(self, path: str) -> Optional[PostRecord]:
        with self._guard(f"get post by path {path}"):
            row = self.db.get(BlogPost, path)
        return _to_record(row) if row else None

    def list_published(
        self, limit: Optional[int] = None, tag: Optional[str] = None
    ) -> List[PostRecord]:
        with self._guard("list published posts"):
            query = (
                self.db.query(BlogPost)
                .filter(BlogPost.status == PUBLISHED)
                .order_by(BlogPost.created_at.desc(), BlogPost.path)
            )
            if tag is not None:
                # narrow in SQL, then match the decoded tag list exactly
                query = query.filter(
                    BlogPost.tags.like(f"%{_escape_like(json.dumps(tag))}%", escape="\\")
                )
            elif limit is not None:
                query = query.limit(limit)
            rows = query.all()

        records = [_to_record(row) for row in rows]
        if tag is not None:
            records = [r for r in records if tag in r.tags]
            if limit is not None:
                records = records[:limit]
        return records

    def list_distinct_tags(self) -> List[str]:
        with self._guard("list tags"):
            rows = (
                self.db.query(BlogPost.tags).filter(BlogPost.status == PUBLISHED).all()
            )
        tags = set()
        for (raw_tags,) in rows:
            tags.update(json.loads(raw_tags))
        return sorted(tags)

    def count(self) -> int:
        with self._guard("count posts"):
            return self.db.query(BlogPost).count()

    # --- mutations ---

    def upsert(self, records: Iterable[PostRecord]) -> None:
        """Replace the rows sharing each record's path (delete, then insert)."""
        by_path: Dict[str, PostRecord] = {}
        for record in records:
            by_path[record.path] = record  # last occurrence wins
        if not by_path:
            return

        with self._guard(f"upsert {len(by_path)} posts", commit=True):
            self.db.query(BlogPost).filter(BlogPost.path.in_(list(by_path))).delete(
                synchronize_session="fetch"
            )
            self.db.add_all([_to_row(r) for r in by_path.values()])
        logger.info(f"Upserted {len(by_path)} posts")

    def delete_by_path(self, paths: Iterable[str]) -> None:
        paths = list(dict.fromkeys(paths))
        if not paths:
            return

        with self._guard(f"delete {len(paths)} posts", commit=True):
            deleted = (
                self.db.query(BlogPost)
                .filter(BlogPost.path.in_(paths))
                .delete(synchronize_session="fetch")
            )
        logger.info(f"Deleted {deleted} posts for {len(paths)} paths")

    def replace_all(self, records: Iterable[PostRecord]) -> None:
        """Swap the whole table for ``records`` in one transaction."""
        by_path = {record.path: record for record in records}

        with self._guard("replace all posts", commit=True):
            self.db.query(BlogPost).delete(synchronize_session="fetch")
            self.db.add_all([_to_row(r) for r in by_path.values()])
        logger.info(f"Replaced post store contents with {len(by_path)} posts")


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _to_row(record: PostRecord) -> BlogPost:
    return BlogPost(
        path=record.path,
        slug=record.slug,
        title=record.title,
        content=record.content,
        created_at=record.createdAt,
        last_modified_at=record.lastModifiedAt,
        status=record.status,
        tags=json.dumps(record.tags),
        description=record.description,
    )


def _to_record(row: BlogPost) -> PostRecord:
    return PostRecord(
        path=row.path,
        slug=row.slug,
        title=row.title,
        content=row.content,
        createdAt=row.created_at,
        lastModifiedAt=row.last_modified_at,
        status=row.status,
        tags=json.loads(row.tags),
        description=row.description,
    )
