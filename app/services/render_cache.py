"""LRU cache of rendered post HTML, keyed by path and content hash."""

import hashlib
import threading
from collections import OrderedDict
from typing import Callable, Iterable, Optional, Tuple


class RenderCache:
    """
    Owned by the application (``app.state.render_cache``). Entries are keyed
    by ``(path, sha256(markdown))`` so an edited post never hits a stale
    entry; the sync service also drops paths explicitly when it writes them.

    Usage::

        cache = RenderCache(max_size=256)
        html = cache.get_or_render(post.path, post.content, render_markdown)
    """

    def __init__(self, max_size: int = 256) -> None:
        self._max_size = max_size
        self._store: "OrderedDict[Tuple[str, str], str]" = OrderedDict()
        self._lock = threading.Lock()

    @staticmethod
    def key_for(path: str, markdown: str) -> Tuple[str, str]:
        return path, hashlib.sha256(markdown.encode("utf-8")).hexdigest()

    def get(self, path: str, markdown: str) -> Optional[str]:
        key = self.key_for(path, markdown)
        with self._lock:
            html = self._store.get(key)
            if html is not None:
                self._store.move_to_end(key)
            return html

    def set(self, path: str, markdown: str, html: str) -> None:
        key = self.key_for(path, markdown)
        with self._lock:
            self._store[key] = html
            self._store.move_to_end(key)
            while len(self._store) > self._max_size:
                self._store.popitem(last=False)

    def get_or_render(
        self, path: str, markdown: str, render: Callable[[str], str]
    ) -> str:
        html = self.get(path, markdown)
        if html is None:
            html = render(markdown)
            self.set(path, markdown, html)
        return html

    def invalidate(self, paths: Iterable[str]) -> None:
        targets = set(paths)
        with self._lock:
            for key in [k for k in self._store if k[0] in targets]:
                del self._store[key]

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        return len(self._store)
