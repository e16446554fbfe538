"""Keyed TTL cache with request coalescing and bounded waits."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Generic, TypeVar

T = TypeVar("T")

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def normalize_key(key: str) -> str:
    """Normalize a cache key the same way queries are normalized."""
    return key.strip().lower()


@dataclass
class CacheEntry(Generic[T]):
    """Cached data for one key plus the fetch currently refreshing it."""

    data: T | None
    expires_at: datetime
    inflight: "asyncio.Task[T | None] | None" = None


@dataclass(frozen=True)
class CachedValue(Generic[T]):
    """Result of a non-blocking cache peek."""

    value: T
    is_stale: bool


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Outcome of a bounded fetch.

    ``timed_out`` is set when the caller stopped waiting and ``value`` is
    whatever was cached at that moment.
    """

    value: T | None
    timed_out: bool = False


class CoalescingCache(Generic[T]):
    """In-memory cache that runs at most one fetch per key.

    Concurrent callers for the same key share one in-flight fetch. Callers
    wait at most ``timeout_seconds`` for it; when the budget runs out they get
    whatever is cached (possibly stale, possibly ``None``) while the fetch
    keeps running and fills the cache for the next call. Keys are evicted in
    insertion order once the cache grows past ``max_entries``. A fetch that
    returns ``None`` is not stored.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float,
        max_entries: int,
        timeout_seconds: float | None = None,
        clock: Callable[[], datetime] = _utcnow,
        name: str = "cache",
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self.timeout_seconds = timeout_seconds
        self.name = name
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize_key(key) in self._entries

    def keys(self) -> list[str]:
        """Return cached keys, oldest first."""
        return list(self._entries)

    def get(self, key: str, *, allow_stale: bool = False) -> CachedValue[T] | None:
        """Peek at cached data without fetching.

        Expired entries that are not being refreshed are dropped unless
        ``allow_stale`` is set.
        """
        normalized = normalize_key(key)
        entry = self._entries.get(normalized)
        if entry is None:
            return None
        expired = entry.expires_at <= self._clock()
        if expired and entry.inflight is None and not allow_stale:
            self._entries.pop(normalized, None)
            return None
        if entry.data is None:
            return None
        return CachedValue(value=entry.data, is_stale=expired)

    def set(self, key: str, value: T, ttl_seconds: float | None = None) -> None:
        """Store a value directly."""
        normalized = normalize_key(key)
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        expires_at = self._clock() + timedelta(seconds=ttl)
        entry = self._entries.get(normalized)
        if entry is None:
            self._entries[normalized] = CacheEntry(data=value, expires_at=expires_at)
            self._trim()
            return
        entry.data = value
        entry.expires_at = expires_at

    def clear(self) -> None:
        """Drop every entry. In-flight fetches finish without being stored."""
        self._entries.clear()

    async def get_or_fetch(
        self,
        key: str,
        fetcher: Callable[[], Awaitable[T | None]],
        *,
        ttl_seconds: float | None = None,
        timeout_seconds: float | None = None,
        force_refresh: bool = False,
    ) -> T | None:
        """Return cached data for a key, fetching it when missing or expired.

        Raises whatever the fetch raised when the caller was still waiting for
        it and it failed.
        """
        result = await self.get_or_fetch_result(
            key,
            fetcher,
            ttl_seconds=ttl_seconds,
            timeout_seconds=timeout_seconds,
            force_refresh=force_refresh,
        )
        return result.value

    async def get_or_fetch_result(
        self,
        key: str,
        fetcher: Callable[[], Awaitable[T | None]],
        *,
        ttl_seconds: float | None = None,
        timeout_seconds: float | None = None,
        force_refresh: bool = False,
    ) -> FetchResult[T]:
        """Like ``get_or_fetch`` but reports whether the wait timed out."""
        normalized = normalize_key(key)
        if not normalized:
            return FetchResult(await fetcher())
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        timeout = self.timeout_seconds if timeout_seconds is None else timeout_seconds

        now = self._clock()
        entry = self._entries.get(normalized)
        if entry is None:
            entry = self._start_fetch(normalized, fetcher, ttl)
        elif entry.inflight is None and (force_refresh or entry.expires_at <= now):
            entry = self._start_fetch(normalized, fetcher, ttl, entry)

        task = entry.inflight
        if task is None:
            return FetchResult(entry.data)
        if entry.data is not None and not force_refresh:
            return FetchResult(entry.data)
        return await self._wait_bounded(entry, task, timeout)

    def _start_fetch(
        self,
        key: str,
        fetcher: Callable[[], Awaitable[T | None]],
        ttl: float,
        entry: CacheEntry[T] | None = None,
    ) -> CacheEntry[T]:
        is_new = entry is None
        if entry is None:
            entry = CacheEntry(
                data=None, expires_at=self._clock() + timedelta(seconds=ttl)
            )
        task = asyncio.get_running_loop().create_task(
            self._run_fetch(key, entry, fetcher, ttl)
        )
        task.add_done_callback(self._log_failure)
        entry.inflight = task
        self._entries[key] = entry
        if is_new:
            self._trim()
        return entry

    async def _run_fetch(
        self,
        key: str,
        entry: CacheEntry[T],
        fetcher: Callable[[], Awaitable[T | None]],
        ttl: float,
    ) -> T | None:
        try:
            value = await fetcher()
            if value is None:
                self._discard_if_empty(key, entry)
                return None
            entry.data = value
            entry.expires_at = self._clock() + timedelta(seconds=ttl)
            return value
        except Exception:
            self._discard_if_empty(key, entry)
            raise
        finally:
            entry.inflight = None

    def _discard_if_empty(self, key: str, entry: CacheEntry[T]) -> None:
        if entry.data is None and self._entries.get(key) is entry:
            del self._entries[key]

    async def _wait_bounded(
        self,
        entry: CacheEntry[T],
        task: "asyncio.Task[T | None]",
        timeout: float | None,
    ) -> FetchResult[T]:
        if timeout is not None and timeout <= 0:
            timeout = None
        done, _ = await asyncio.wait({task}, timeout=timeout)
        if not done:
            _logger.debug("%s: fetch still running after %ss", self.name, timeout)
            return FetchResult(entry.data, timed_out=True)
        return FetchResult(task.result())

    def _log_failure(self, task: "asyncio.Task[T | None]") -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.debug("%s: fetch failed: %s", self.name, exc)

    def _trim(self) -> None:
        if self.max_entries <= 0:
            return
        while len(self._entries) > self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
