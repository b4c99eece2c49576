"""
Time-bounded snapshot cache for record store data.

Each SnapshotCache is one namespace (services, members, favorites).
Values are whole snapshots: they are replaced or marked stale, never
edited in place.

Failure policy is availability over freshness: when a refresh fails
the previous snapshot is served, even if expired; with no previous
snapshot an empty default is returned. get() never raises.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_KEY = "all"


@dataclass
class _Snapshot(Generic[T]):
    value: T
    fetched_at: float
    stale: bool = False


class SnapshotCache(Generic[T]):
    """
    Per-key snapshot cache with a TTL and single-flight refresh.

    Concurrent misses on the same key share one in-flight loader call.
    invalidate() bumps a per-key generation so that a fetch started
    before the invalidation cannot store its (possibly outdated) result.
    """

    def __init__(
        self,
        namespace: str,
        loader: Callable[[str], Awaitable[T]],
        ttl_seconds: float,
        default_factory: Callable[[], T] = list,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.namespace = namespace
        self.ttl_seconds = ttl_seconds
        self._loader = loader
        self._default_factory = default_factory
        self._clock = clock
        self._snapshots: dict[str, _Snapshot[T]] = {}
        self._inflight: dict[str, asyncio.Task] = {}
        self._generations: dict[str, int] = {}

    def _is_fresh(self, snapshot: _Snapshot[T]) -> bool:
        if snapshot.stale:
            return False
        return (self._clock() - snapshot.fetched_at) < self.ttl_seconds

    async def get(self, key: str = DEFAULT_KEY) -> T:
        """
        Return the snapshot for key, refreshing it if absent or expired.
        """
        snapshot = self._snapshots.get(key)
        if snapshot is not None and self._is_fresh(snapshot):
            logger.debug(f"[{self.namespace}] cache hit for '{key}'")
            return snapshot.value

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.create_task(self._refresh(key, self._generations.get(key, 0)))
            self._inflight[key] = task
        # A cancelled waiter must not cancel the shared fetch
        return await asyncio.shield(task)

    async def _refresh(self, key: str, generation: int) -> T:
        try:
            value = await self._loader(key)
        except Exception as e:
            return self._fallback(key, e)
        finally:
            if self._inflight.get(key) is asyncio.current_task():
                del self._inflight[key]

        if self._generations.get(key, 0) == generation:
            self._snapshots[key] = _Snapshot(value=value, fetched_at=self._clock())
        return value

    def _fallback(self, key: str, error: Exception) -> T:
        previous = self._snapshots.get(key)
        if previous is not None:
            logger.warning(
                f"[{self.namespace}] refresh of '{key}' failed ({error}); serving previous snapshot"
            )
            return previous.value
        logger.error(f"[{self.namespace}] refresh of '{key}' failed with no snapshot to fall back on: {error}")
        return self._default_factory()

    def invalidate(self, key: Optional[str] = None) -> None:
        """
        Force the next get() for key (or for every key) to refetch.

        The old value is kept only as fallback material.
        """
        keys = [key] if key is not None else list(set(self._snapshots) | set(self._inflight))
        for k in keys:
            self._generations[k] = self._generations.get(k, 0) + 1
            self._inflight.pop(k, None)
            snapshot = self._snapshots.get(k)
            if snapshot is not None:
                snapshot.stale = True

    def peek(self, key: str = DEFAULT_KEY) -> Optional[T]:
        """Current value without triggering a fetch."""
        snapshot = self._snapshots.get(key)
        return snapshot.value if snapshot is not None else None

    def stats(self) -> dict[str, Any]:
        return {
            "namespace": self.namespace,
            "keys": len(self._snapshots),
            "inflight": len(self._inflight),
            "ttl_seconds": self.ttl_seconds,
        }
