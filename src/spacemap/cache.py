"""In-memory cache of directory scan results."""

import logging
import threading

from spacemap.models import ScanResult

logger = logging.getLogger(__name__)


class SizeCache:
    """
    Thread-safe memo of scan results keyed by path key.

    Entries live until they are cleared; there is no expiry because nothing
    watches the filesystem for changes. Every read and write copies the
    result, so callers never share a live mapping with the cache.
    """

    def __init__(self) -> None:
        self._entries: dict[str, ScanResult] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._entries

    def get(self, key: str) -> ScanResult | None:
        """Return an independent copy of the entry for key, or None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            return entry.model_copy(deep=True)

    def put(self, key: str, result: ScanResult) -> None:
        """Store a copy of result under key, replacing any previous entry."""
        stored = result.model_copy(deep=True)
        with self._lock:
            self._entries[key] = stored
        logger.debug("Cached %d directories under %s", stored.directory_count, key)

    def evict(self, key: str) -> bool:
        """Remove one entry. Returns True if something was removed."""
        with self._lock:
            removed = self._entries.pop(key, None) is not None
        if removed:
            logger.debug("Evicted cache entry %s", key)
        return removed

    def clear(self) -> None:
        """Remove every entry."""
        with self._lock:
            self._entries.clear()
        logger.debug("Cleared size cache")
