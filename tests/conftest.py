import os

# the app engine is created at import time; keep it off Postgres in tests
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.db.postgres.base import Base  # noqa: E402
from app.exceptions import ContentNotFoundError  # noqa: E402
from app.models.blog_post import BlogPost  # noqa: E402,F401
from app.schemas.blog import PostRecord  # noqa: E402


@pytest.fixture
def db_session():
    """Fresh in-memory SQLite database shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = Session()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


def make_post(path: str = "posts/hello.md", **overrides) -> PostRecord:
    fields = {
        "path": path,
        "slug": path.rsplit("/", 1)[-1].removesuffix(".md"),
        "title": "Hello",
        "createdAt": "2024-01-01",
        "tags": [],
        "status": "published",
        "content": "Some words.",
        "description": None,
        "lastModifiedAt": None,
    }
    fields.update(overrides)
    return PostRecord(**fields)


class FakeContentClient:
    """
    Minimal content repository stand-in.
    ``posts`` maps path -> PostRecord or an exception to raise for that path.
    ``log`` is shared with RecordingRepo to check call ordering.
    """

    def __init__(self, posts=None, log=None):
        self.posts = dict(posts or {})
        self.log = log if log is not None else []
        self.requested = []

    def list_post_files(self):
        self.log.append(("list",))
        return list(self.posts)

    def get_post_by_path(self, path):
        self.requested.append(path)
        self.log.append(("fetch", path))
        value = self.posts.get(path)
        if value is None:
            raise ContentNotFoundError(f"GitHub returned 404 for {path}")
        if isinstance(value, Exception):
            raise value
        return value

    def get_posts_by_path(self, paths):
        return [self.get_post_by_path(p) for p in paths]


class RecordingRepo:
    """Wraps a real repo and records mutations into a shared log."""

    def __init__(self, repo, log):
        self.repo = repo
        self.log = log

    def delete_by_path(self, paths):
        self.log.append(("delete", tuple(paths)))
        return self.repo.delete_by_path(paths)

    def upsert(self, records):
        records = list(records)
        self.log.append(("upsert", tuple(r.path for r in records)))
        return self.repo.upsert(records)

    def replace_all(self, records):
        records = list(records)
        self.log.append(("replace_all", tuple(r.path for r in records)))
        return self.repo.replace_all(records)

    def __getattr__(self, name):
        return getattr(self.repo, name)
