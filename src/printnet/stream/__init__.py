"""
Stream Module
=============

Per-connection streaming of precomputed animations.

This module provides the delivery layer for Printnet:
    - StreamingSession: Cyclic, cancellable payload emitter
    - SessionResult / StopReason / SessionState: Session outcome types
    - AnimationStreamResponse: ASGI response bridging HTTP to a session

Example:
    from printnet.stream import StreamingSession

    cancel = asyncio.Event()
    session = StreamingSession(animation, cancel)

    async def sink(payload: bytes) -> None:
        writer.write(payload)
        await writer.drain()

    result = await session.run(sink)
"""

from printnet.stream.session import (
    DISCONNECT_ERRORS,
    SessionResult,
    SessionState,
    Sink,
    StopReason,
    StreamingSession,
)
from printnet.stream.response import STREAM_HEADERS, AnimationStreamResponse


__all__ = [
    "DISCONNECT_ERRORS",
    "SessionResult",
    "SessionState",
    "Sink",
    "StopReason",
    "StreamingSession",
    "STREAM_HEADERS",
    "AnimationStreamResponse",
]
