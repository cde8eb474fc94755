"""
Animation Cache
===============

Bounded in-memory cache of precomputed animations, keyed by name.

Admission Policy:
    An animation is stored only if its total payload size is below the
    admission budget (50 MiB by default). Larger animations are computed
    fresh on every request and never stored. There is no eviction; entries
    live until the cache is cleared or the process exits.

Concurrency:
    - Every read and write of the map happens under one lock, so no
      caller ever observes a partial entry
    - Concurrent misses for the same name share one in-flight computation
      (optional, does not change observable results)
    - Cached values are immutable and shared without copying

Failures (NotFound, LoadError, exceptions) are never stored.
"""

import asyncio
import logging
import threading
from typing import Awaitable, Callable, Dict, Optional

from printnet.config import DEFAULT_MAX_ENTRY_BYTES
from printnet.models.animation import PrecomputedAnimation
from printnet.models.outcome import Found, Outcome


logger = logging.getLogger(__name__)


ComputeFn = Callable[[], Awaitable[Outcome[PrecomputedAnimation]]]


class AnimationCache:
    """
    Name -> PrecomputedAnimation cache with a size-based admission gate.

    Attributes:
        max_entry_bytes: Entries at or above this size are not admitted
        dedupe_inflight: Share one computation between concurrent misses

    Example:
        cache = AnimationCache(max_entry_bytes=50 * 1024 * 1024)

        async def compute():
            return Found(precompute(name, normalize(definition)))

        outcome = await cache.get_or_compute("spinner", compute)
    """

    def __init__(
        self,
        max_entry_bytes: int = DEFAULT_MAX_ENTRY_BYTES,
        dedupe_inflight: bool = True,
    ) -> None:
        """
        Initialize animation cache.

        Args:
            max_entry_bytes: Admission budget per entry. Must be > 0.
            dedupe_inflight: Whether concurrent misses share a computation
        """
        if max_entry_bytes <= 0:
            raise ValueError("max_entry_bytes must be > 0")

        self.max_entry_bytes = max_entry_bytes
        self.dedupe_inflight = dedupe_inflight

        self._lock = threading.Lock()
        self._entries: Dict[str, PrecomputedAnimation] = {}
        self._inflight: Dict[str, asyncio.Task] = {}

        self._hits: int = 0
        self._misses: int = 0
        self._rejected: int = 0

        logger.info(
            f"AnimationCache initialized: budget={max_entry_bytes / (1024 * 1024):.1f} MiB "
            f"per entry, dedupe_inflight={dedupe_inflight}"
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._entries

    def get(self, name: str) -> Optional[PrecomputedAnimation]:
        """Return the cached animation for a name, or None."""
        with self._lock:
            return self._entries.get(name)

    def admits(self, animation: PrecomputedAnimation) -> bool:
        """Whether an animation is small enough to be stored."""
        return animation.total_bytes < self.max_entry_bytes

    async def get_or_compute(
        self,
        name: str,
        compute: ComputeFn,
    ) -> Outcome[PrecomputedAnimation]:
        """
        Return the cached animation or compute (and maybe admit) it.

        Args:
            name: Animation name (opaque cache key)
            compute: Coroutine factory producing the animation outcome

        Returns:
            Found(PrecomputedAnimation), NotFound, or LoadError
        """
        with self._lock:
            cached = self._entries.get(name)
            if cached is not None:
                self._hits += 1
                return Found(cached)
            self._misses += 1

            if not self.dedupe_inflight:
                task = None
            else:
                task = self._inflight.get(name)
                if task is None:
                    task = asyncio.ensure_future(self._compute_and_admit(name, compute))
                    self._inflight[name] = task
                    task.add_done_callback(lambda _: self._forget_inflight(name, task))

        if task is None:
            return await self._compute_and_admit(name, compute)

        # Shielded so one caller's cancellation does not abort the others
        return await asyncio.shield(task)

    async def _compute_and_admit(
        self,
        name: str,
        compute: ComputeFn,
    ) -> Outcome[PrecomputedAnimation]:
        outcome = await compute()

        if not isinstance(outcome, Found):
            return outcome

        animation = outcome.value
        if not self.admits(animation):
            with self._lock:
                self._rejected += 1
            logger.warning(
                f"Animation '{name}' not cached: {animation.total_bytes} bytes "
                f">= budget {self.max_entry_bytes} bytes"
            )
            return outcome

        with self._lock:
            self._entries[name] = animation
            entry_count = len(self._entries)

        logger.info(
            f"Cached '{name}' ({animation.frame_count} frames, "
            f"{animation.total_bytes} bytes). Entries: {entry_count}"
        )
        return outcome

    def _forget_inflight(self, name: str, task: asyncio.Task) -> None:
        with self._lock:
            if self._inflight.get(name) is task:
                del self._inflight[name]

    def clear(self) -> int:
        """
        Drop all cached entries.

        Returns:
            Number of entries cleared.
        """
        with self._lock:
            cleared = len(self._entries)
            self._entries.clear()
        logger.info(f"AnimationCache cleared ({cleared} entries)")
        return cleared

    def metrics(self) -> dict:
        """
        Get cache metrics for observability.

        Returns:
            Dict with entries, total_bytes, hits, misses, rejected, inflight
        """
        with self._lock:
            return {
                "entries": len(self._entries),
                "total_bytes": sum(a.total_bytes for a in self._entries.values()),
                "max_entry_bytes": self.max_entry_bytes,
                "hits": self._hits,
                "misses": self._misses,
                "rejected": self._rejected,
                "inflight": len(self._inflight),
            }
