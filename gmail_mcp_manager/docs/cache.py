"""TTL cache for advisory documentation lookups.

Each (operation, context) pair is fetched at most once per TTL window.
Expired entries are evicted lazily when their key is looked up; there is no
background sweep. Fetch failures are logged and reported as ``None`` so a
documentation problem never fails the mail operation it accompanies.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from gmail_mcp_manager.docs.provider import (
    DocumentationFetcher,
    DocumentationResult,
    StaticDocumentationProvider,
    build_search_term,
)

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = 30 * 60


@dataclass
class CacheEntry:
    """Cached documentation and its expiry on the cache clock."""

    value: DocumentationResult
    expires_at: float

    def is_live(self, now: float) -> bool:
        return now < self.expires_at


def cache_key(operation: str, context: str | None = None) -> str:
    """Key for an (operation, context) pair."""
    return f"{operation}-{context or 'default'}"


class DocumentationCache:
    """Per-key TTL memoization of documentation lookups.

    Lookups of the same key are serialized by a per-key lock, so concurrent
    callers trigger a single fetch. Lookups of different keys do not
    contend.
    """

    def __init__(
        self,
        fetcher: DocumentationFetcher | None = None,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cache.

        Args:
            fetcher: Search term -> documentation strategy. Defaults to
                StaticDocumentationProvider.
            ttl_seconds: Lifetime of each entry (default 30 minutes).
            enabled: Whether lookups are performed at all.
            clock: Monotonic clock, injectable for tests.
        """
        self._fetcher = fetcher or StaticDocumentationProvider()
        self._ttl = ttl_seconds
        self._enabled = enabled
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._key_locks: dict[str, threading.Lock] = {}

    def _get_or_create_key_lock(self, key: str) -> threading.Lock:
        with self._lock:
            if key not in self._key_locks:
                self._key_locks[key] = threading.Lock()
            return self._key_locks[key]

    def _lookup(self, key: str) -> DocumentationResult | None:
        """Return a live entry, evicting it if it has expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_live(self._clock()):
                return entry.value
            del self._entries[key]
            logger.debug("Evicted expired documentation for %s", key)
            return None

    def get_or_fetch(
        self, operation: str, context: str | None = None
    ) -> DocumentationResult | None:
        """Return cached documentation, fetching it on a miss.

        Args:
            operation: Manager operation name (e.g. "listMessages").
            context: Optional extra context for the lookup.

        Returns:
            Documentation, or None if the cache is disabled or the fetch
            failed or found nothing.
        """
        if not self._enabled:
            return None

        key = cache_key(operation, context)
        with self._get_or_create_key_lock(key):
            cached = self._lookup(key)
            if cached is not None:
                logger.info("Using cached documentation for: %s", operation)
                return cached

            logger.info("Fetching documentation for: %s", operation)
            try:
                result = self._fetcher(build_search_term(operation, context))
            except Exception as e:
                logger.warning(
                    "Failed to fetch documentation for %s: %s", operation, e
                )
                return None

            if result is None:
                logger.debug("No documentation found for: %s", operation)
                return None

            with self._lock:
                self._entries[key] = CacheEntry(
                    value=result, expires_at=self._clock() + self._ttl
                )
            logger.debug("Documentation fetched and cached for: %s", operation)
            return result

    def clear(self) -> None:
        """Remove every entry."""
        with self._lock:
            self._entries.clear()
            self._key_locks.clear()
        logger.info("Documentation cache cleared")

    def stats(self) -> dict[str, object]:
        """Number and keys of live entries."""
        now = self._clock()
        with self._lock:
            keys = [k for k, entry in self._entries.items() if entry.is_live(now)]
        return {"size": len(keys), "keys": keys}

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled
        logger.info("Context7 integration %s", "enabled" if enabled else "disabled")

    def is_enabled(self) -> bool:
        return self._enabled


__all__ = [
    "DocumentationCache",
    "CacheEntry",
    "cache_key",
    "CACHE_TTL_SECONDS",
]
