"""In-memory translation cache with time-based expiry.

One instance is kept per translation direction (JA->EN and EN->JA) so the
same source string never shares a slot across directions.
"""
import logging
import threading
import time

logger = logging.getLogger(__name__)

# 24 hours
DEFAULT_EXPIRY_SECONDS = 24 * 60 * 60
# Expired entries are swept at most once an hour, on write
DEFAULT_CLEANUP_INTERVAL = 60 * 60


class CacheEntry:
    """A cached translation and the time it was stored."""

    __slots__ = ('translated_text', 'timestamp')

    def __init__(self, translated_text: str, timestamp: float):
        self.translated_text = translated_text
        self.timestamp = timestamp

    def is_expired(self, now: float, expiry_seconds: float) -> bool:
        return now - self.timestamp >= expiry_seconds

    def __repr__(self):
        return f'<CacheEntry {self.translated_text!r} @ {self.timestamp}>'


class TranslationCache:
    """
    Expiring key-value store for translations.

    Entries are keyed by the exact source text. There is no size bound and no
    LRU eviction. Expired entries are never returned; they are physically
    removed by cleanup_expired(), which set() also runs at most once per
    cleanup_interval. Reads and writes are guarded by a lock so worker threads
    can share one instance; concurrent writes to the same key are
    last-writer-wins.
    """

    def __init__(self, expiry_seconds: float = DEFAULT_EXPIRY_SECONDS,
                 cleanup_interval: float | None = DEFAULT_CLEANUP_INTERVAL,
                 clock=time.time, name: str = ''):
        self.expiry_seconds = expiry_seconds
        self.cleanup_interval = cleanup_interval
        self.name = name
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._last_cleanup = clock()

    def get(self, text: str) -> str | None:
        """Return the cached translation, or None if absent or expired."""
        with self._lock:
            entry = self._entries.get(text)
        if entry is None:
            return None
        if entry.is_expired(self._clock(), self.expiry_seconds):
            return None
        return entry.translated_text

    def set(self, text: str, translated_text: str):
        """Store (or overwrite) a translation stamped with the current time."""
        now = self._clock()
        with self._lock:
            self._entries[text] = CacheEntry(translated_text, now)

        if self.cleanup_interval is not None and now - self._last_cleanup >= self.cleanup_interval:
            self.cleanup_expired()

    def cleanup_expired(self) -> int:
        """Remove expired entries. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [
                key for key, entry in self._entries.items()
                if entry.is_expired(now, self.expiry_seconds)
            ]
            for key in expired:
                del self._entries[key]
            self._last_cleanup = now

        if expired:
            logger.info(f"Removed {len(expired)} expired entries from {self.name or 'translation'} cache")
        return len(expired)

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self):
        with self._lock:
            return len(self._entries)

    def __contains__(self, text):
        return self.get(text) is not None
