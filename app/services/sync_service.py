import logging
import threading
from functools import reduce
from typing import Dict, List, Optional, Sequence, Tuple

from app.schemas.content_repo import ContentRepoConfig
from app.schemas.webhook import ChangeSet, PushCommit, PushEvent, SyncResult
from app.services.render_cache import RenderCache

logger = logging.getLogger(__name__)

# One lock per content repository: syncs in this process never interleave.
# Deliveries handled by other processes can still race.
_SYNC_LOCKS: Dict[str, threading.Lock] = {}
_SYNC_LOCKS_GUARD = threading.Lock()


def _lock_for(repo_name: str) -> threading.Lock:
    with _SYNC_LOCKS_GUARD:
        return _SYNC_LOCKS.setdefault(repo_name, threading.Lock())


def _apply_commit(changes: ChangeSet, commit: PushCommit) -> ChangeSet:
    to_upsert = dict.fromkeys(changes.to_upsert)
    to_remove = dict.fromkeys(changes.to_remove)

    for path in [*commit.added, *commit.modified]:
        to_remove.pop(path, None)
        to_upsert[path] = None
    for path in commit.removed:
        to_upsert.pop(path, None)
        to_remove[path] = None

    return ChangeSet(to_upsert=tuple(to_upsert), to_remove=tuple(to_remove))


def flatten_push_event(event: PushEvent) -> ChangeSet:
    """
    Reduce the commits of a push, in order, to the net set of paths to
    (re)fetch and to delete. The last change to a path wins, so a file added
    and then removed within one push ends up only in ``to_remove``.
    """
    return reduce(_apply_commit, event.commits, ChangeSet())


class SyncService:
    def __init__(
        self,
        content_client,
        repo,
        config: ContentRepoConfig,
        render_cache: Optional[RenderCache] = None,
    ):
        self.content_client = content_client
        self.repo = repo
        self.config = config
        self.render_cache = render_cache

    def is_post_path(self, path: str) -> bool:
        prefix = self.config.posts_prefix
        return path.startswith(prefix) and "/" not in path[len(prefix):]

    def _partition(self, paths: Sequence[str]) -> Tuple[List[str], List[str]]:
        kept, ignored = [], []
        for path in paths:
            (kept if self.is_post_path(path) else ignored).append(path)
        return kept, ignored

    def sync_push_event(self, event: PushEvent) -> SyncResult:
        """
        Apply one push: delete removed posts, then fetch and upsert the
        added/modified ones as a single batch. A failed fetch or parse raises
        before anything is upserted.
        """
        changes = flatten_push_event(event)
        to_upsert, ignored_upserts = self._partition(changes.to_upsert)
        to_remove, ignored_removals = self._partition(changes.to_remove)
        ignored = ignored_upserts + ignored_removals
        if ignored:
            logger.debug(f"Ignoring {len(ignored)} paths outside {self.config.posts_dir}: {ignored}")

        logger.info(
            f"Syncing push to {event.ref}: {len(to_upsert)} to upsert, {len(to_remove)} to remove"
        )
        with _lock_for(self.config.full_name):
            self.repo.delete_by_path(to_remove)
            self._invalidate(to_remove)

            records = self.content_client.get_posts_by_path(to_upsert)
            self.repo.upsert(records)
            self._invalidate(to_upsert)

        return SyncResult(
            upserted=to_upsert, removed=to_remove, ignored=ignored, ref=event.ref
        )

    def full_resync(self) -> SyncResult:
        """Rebuild the whole store from the posts directory."""
        with _lock_for(self.config.full_name):
            paths = self.content_client.list_post_files()
            logger.info(f"Full resync of {self.config.full_name}: {len(paths)} post files")
            records = self.content_client.get_posts_by_path(paths)
            self.repo.replace_all(records)

        if self.render_cache is not None:
            self.render_cache.clear()
        return SyncResult(upserted=[r.path for r in records])

    def _invalidate(self, paths: Sequence[str]) -> None:
        if self.render_cache is not None and paths:
            self.render_cache.invalidate(paths)
