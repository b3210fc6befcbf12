"""
app/services/page_cache.py

Purpose: Rendered page cache

- Keeps rendered HTML per (path, user) for a short TTL
- revalidate_path() drops every cached render of a path, so the next
  request renders fresh data (e.g. after a bank account is linked)
"""

import time
from typing import Dict, Optional, Tuple

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class PageCache:
    """In-memory cache of rendered pages."""

    def __init__(self, ttl_seconds: Optional[int] = None):
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.PAGE_CACHE_TTL_SECONDS
        self._pages: Dict[Tuple[str, str], Tuple[float, str]] = {}

    def get(self, path: str, user_id: str) -> Optional[str]:
        """Cached HTML, or None on a miss or expired entry."""
        entry = self._pages.get((path, user_id))
        if not entry:
            return None

        stored_at, html = entry
        if time.monotonic() - stored_at > self.ttl_seconds:
            del self._pages[(path, user_id)]
            return None

        return html

    def set(self, path: str, user_id: str, html: str):
        if self.ttl_seconds <= 0:
            return
        self._pages[(path, user_id)] = (time.monotonic(), html)

    def revalidate_path(self, path: str) -> int:
        """
        Invalidates all cached renders of a path.

        Returns:
            Number of entries dropped
        """
        stale = [key for key in self._pages if key[0] == path]
        for key in stale:
            del self._pages[key]

        logger.debug(f"Revalidated {path}: dropped {len(stale)} cached page(s)")
        return len(stale)

    def clear(self):
        self._pages.clear()


# Global page cache instance
_page_cache: Optional[PageCache] = None


def get_page_cache() -> PageCache:
    """Get or create the global page cache."""
    global _page_cache
    if _page_cache is None:
        _page_cache = PageCache()
    return _page_cache


def revalidate_path(path: str) -> int:
    """Drops cached renders of `path` from the global page cache."""
    return get_page_cache().revalidate_path(path)
