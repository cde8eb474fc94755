"""
Animation Service
=================

Composes the core pipeline behind a single call.

    name -> cache lookup
         -> (miss) load -> normalize -> precompute -> cache admission
         -> Found(PrecomputedAnimation) | NotFound | LoadError

Loading and CPU-bound normalization run in a worker thread so a large
definition never stalls the event loop that is pacing other sessions.

The service also keeps track of live streaming sessions so they can be
counted and cancelled together at shutdown.
"""

import asyncio
import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Set

from printnet.cache import AnimationCache
from printnet.library import DefinitionLoader
from printnet.models.animation import AnimationDefinition, PrecomputedAnimation
from printnet.models.outcome import Found, LoadError, Outcome
from printnet.render import normalize, precompute
from printnet.stream.session import StreamingSession


logger = logging.getLogger(__name__)


def build_animation(name: str, definition: AnimationDefinition) -> PrecomputedAnimation:
    """Normalize and precompute a loaded definition."""
    return precompute(name, normalize(definition))


class AnimationService:
    """
    Entry point for the transport layer.

    Attributes:
        loader: Definition loader
        cache: Precomputed animation cache

    Example:
        service = AnimationService(
            loader=DefinitionLoader(DirectorySource("./anims")),
            cache=AnimationCache(),
        )

        outcome = await service.prepare("spinner")
    """

    def __init__(self, loader: DefinitionLoader, cache: AnimationCache) -> None:
        self.loader = loader
        self.cache = cache
        self._sessions: Set[StreamingSession] = set()
        self._closing = False

    @property
    def active_sessions(self) -> int:
        return len(self._sessions)

    @property
    def closing(self) -> bool:
        return self._closing

    async def prepare(self, name: str) -> Outcome[PrecomputedAnimation]:
        """
        Resolve a name to a ready-to-stream animation.

        Args:
            name: Animation name (already sanitized by the transport)

        Returns:
            Found(PrecomputedAnimation), NotFound, or LoadError
        """
        return await self.cache.get_or_compute(name, lambda: self._compute(name))

    async def _compute(self, name: str) -> Outcome[PrecomputedAnimation]:
        return await asyncio.to_thread(self._compute_sync, name)

    def _compute_sync(self, name: str) -> Outcome[PrecomputedAnimation]:
        outcome = self.loader.load(name)
        if not isinstance(outcome, Found):
            return outcome

        try:
            animation = build_animation(name, outcome.value)
        except (ValueError, TypeError, IndexError) as e:
            logger.error(f"Failed to build animation '{name}': {e}")
            return LoadError(name=name, reason=f"unprocessable: {e}")

        logger.info(
            f"Built animation '{name}': {animation.frame_count} frames, "
            f"{animation.square_size}x{animation.square_size}, "
            f"delay={animation.delay_ms}ms"
        )
        return Found(animation)

    def open_session(
        self,
        animation: PrecomputedAnimation,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> StreamingSession:
        return StreamingSession(animation, cancel_event)

    @contextmanager
    def track(self, session: StreamingSession) -> Iterator[StreamingSession]:
        """Register a session as live for the duration of the block."""
        # Sessions that start after shutdown began stop at their first wait
        if self._closing:
            session.cancel()
        self._sessions.add(session)
        try:
            yield session
        finally:
            self._sessions.discard(session)

    def cancel_all(self) -> int:
        """
        Signal every live session to stop.

        Sessions registered afterwards are cancelled as they start.

        Returns:
            Number of sessions signalled.
        """
        self._closing = True
        sessions = list(self._sessions)
        for session in sessions:
            session.cancel()
        if sessions:
            logger.info(f"Cancelled {len(sessions)} live session(s)")
        return len(sessions)

    def metrics(self) -> dict:
        return {
            "active_sessions": self.active_sessions,
            "loads": self.loader.load_count,
            "load_errors": self.loader.error_count,
            **{f"cache_{key}": value for key, value in self.cache.metrics().items()},
        }
