import logging

from app.db.postgres.base import Base, SessionLocal, engine
from app.models.blog_post import BlogPost  # noqa: F401  registers the table
from app.repos.posts_repo import SqlPostsRepo
from app.services.github_client import GitHubContentClient
from app.services.sync_service import SyncService
from app.settings import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

if __name__ == "__main__":
    Base.metadata.create_all(engine)
    session = SessionLocal()
    client = GitHubContentClient(settings.content_repo_config)
    try:
        service = SyncService(
            content_client=client,
            repo=SqlPostsRepo(session),
            config=settings.content_repo_config,
        )
        result = service.full_resync()
        logger.info(f"Full resync completed: {len(result.upserted)} posts.")
    except Exception as e:
        logger.error(f"Full resync failed: {e}", exc_info=True)
        raise SystemExit(1)
    finally:
        client.close()
        session.close()
