"""
Streaming Session
=================

Per-connection loop that replays a precomputed animation to a sink.

State Machine:
    RUNNING (default) -> STOPPED (terminal)

Loop:
    1. Check cancellation
    2. Write the next payload to the sink
    3. Wait delay_ms, waking early if cancellation is signalled
    4. Check cancellation, advance to the next payload (wrapping around)

Design Rules:
    - Frames are emitted strictly in order, cyclically, never skipped
    - Cancellation stops the loop within one frame delay at most
    - A failing sink means the peer went away: logged, not raised
    - An animation with no payloads idles until cancelled (no busy loop)
    - Owns no animation data; the PrecomputedAnimation is shared read-only
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional, Tuple, Type

from printnet.models.animation import PrecomputedAnimation


logger = logging.getLogger(__name__)


Sink = Callable[[bytes], Awaitable[None]]

# Exceptions a sink raises when the peer is gone
DISCONNECT_ERRORS: Tuple[Type[BaseException], ...] = (OSError, ConnectionError)


class SessionState(str, Enum):
    """Lifecycle state of a streaming session."""

    RUNNING = "RUNNING"
    STOPPED = "STOPPED"


class StopReason(str, Enum):
    """Why a streaming session ended."""

    CANCELLED = "CANCELLED"
    DISCONNECTED = "DISCONNECTED"


@dataclass(frozen=True, slots=True)
class SessionResult:
    """
    Summary of a finished session.

    Attributes:
        name: Animation name
        frames_sent: Payloads successfully written to the sink
        reason: Why the session ended
    """

    name: str
    frames_sent: int
    reason: StopReason


class StreamingSession:
    """
    Cyclic, cancellable emitter of precomputed payloads.

    Attributes:
        animation: Shared, read-only animation to stream
        cancel_event: Set by the transport when the connection closes
        state: Current lifecycle state
        frames_sent: Payloads written so far

    Example:
        cancel = asyncio.Event()
        session = StreamingSession(animation, cancel)

        task = asyncio.create_task(session.run(sink))

        # Later, when the client disconnects
        cancel.set()
        result = await task
    """

    def __init__(
        self,
        animation: PrecomputedAnimation,
        cancel_event: Optional[asyncio.Event] = None,
        disconnect_errors: Tuple[Type[BaseException], ...] = DISCONNECT_ERRORS,
    ) -> None:
        """
        Initialize streaming session.

        Args:
            animation: Precomputed animation to stream
            cancel_event: Cancellation signal (created if not given)
            disconnect_errors: Sink exceptions treated as a peer disconnect
        """
        self.animation = animation
        self.cancel_event = cancel_event if cancel_event is not None else asyncio.Event()
        self.disconnect_errors = disconnect_errors

        self.state = SessionState.RUNNING
        self.frames_sent: int = 0

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    def cancel(self) -> None:
        """Request the session to stop at the next frame boundary."""
        self.cancel_event.set()

    async def run(self, sink: Sink) -> SessionResult:
        """
        Stream payloads to the sink until cancelled or disconnected.

        Args:
            sink: Async callable delivering one payload to the peer

        Returns:
            SessionResult describing how the session ended
        """
        name = self.animation.name
        payloads = self.animation.payloads
        delay_sec = self.animation.delay_ms / 1000.0

        logger.info(
            f"Session started: '{name}' ({len(payloads)} frames, "
            f"{self.animation.delay_ms}ms delay)"
        )

        try:
            if not payloads:
                logger.warning(f"Animation '{name}' has no frames, idling until cancelled")
                await self.cancel_event.wait()
                return self._finish(StopReason.CANCELLED)

            index = 0
            while not self.cancelled:
                try:
                    await sink(payloads[index])
                except self.disconnect_errors as e:
                    logger.info(f"Client disconnected from '{name}': {e}")
                    return self._finish(StopReason.DISCONNECTED)

                self.frames_sent += 1
                index = (index + 1) % len(payloads)

                if self.cancelled or await self._sleep(delay_sec):
                    break

            return self._finish(StopReason.CANCELLED)

        except asyncio.CancelledError:
            self._finish(StopReason.CANCELLED)
            raise

    async def _sleep(self, delay_sec: float) -> bool:
        """
        Wait for the frame delay, waking early on cancellation.

        Returns:
            True if cancellation was signalled during the wait.
        """
        try:
            await asyncio.wait_for(self.cancel_event.wait(), timeout=delay_sec)
            return True
        except asyncio.TimeoutError:
            return False

    def _finish(self, reason: StopReason) -> SessionResult:
        self.state = SessionState.STOPPED
        logger.info(
            f"Session stopped: '{self.animation.name}' "
            f"reason={reason.value}, frames_sent={self.frames_sent}"
        )
        return SessionResult(
            name=self.animation.name,
            frames_sent=self.frames_sent,
            reason=reason,
        )
