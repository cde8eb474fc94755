"""
Animation Stream Response
=========================

ASGI response that hands the HTTP body to a StreamingSession.

The transport owns two things the session needs:
    - A sink: each payload becomes one http.response.body chunk
      with more_body=True, flushed by the server as it is sent
    - A cancellation signal: an http.disconnect message from the
      server sets the session's cancel event

Status and headers are committed before the first frame, so nothing that
happens during streaming is reported back as an HTTP error.
"""

import asyncio
import logging
from contextlib import nullcontext
from typing import Callable, ContextManager, Mapping, Optional

from starlette.requests import ClientDisconnect
from starlette.responses import Response
from starlette.types import Receive, Scope, Send

from printnet.stream.session import DISCONNECT_ERRORS, StreamingSession


logger = logging.getLogger(__name__)


STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


class AnimationStreamResponse(Response):
    """
    Streams an animation until the client disconnects.

    Attributes:
        session: Session driving the body
        tracker: Optional context manager factory wrapping the session run
    """

    def __init__(
        self,
        session: StreamingSession,
        media_type: str = "text/plain; charset=utf-8",
        headers: Optional[Mapping[str, str]] = None,
        tracker: Optional[Callable[[StreamingSession], ContextManager]] = None,
    ) -> None:
        self.session = session
        self.tracker = tracker
        self.status_code = 200
        self.media_type = media_type
        self.background = None
        self.init_headers({**STREAM_HEADERS, **(headers or {})})

        self.session.disconnect_errors = DISCONNECT_ERRORS + (ClientDisconnect,)

    async def _listen_for_disconnect(self, receive: Receive) -> None:
        while True:
            message = await receive()
            if message["type"] == "http.disconnect":
                logger.debug(f"Disconnect received for '{self.session.animation.name}'")
                self.session.cancel()
                break

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await send({
            "type": "http.response.start",
            "status": self.status_code,
            "headers": self.raw_headers,
        })

        async def sink(payload: bytes) -> None:
            await send({
                "type": "http.response.body",
                "body": payload,
                "more_body": True,
            })

        listener = asyncio.create_task(
            self._listen_for_disconnect(receive),
            name="disconnect_listener",
        )
        tracking = self.tracker(self.session) if self.tracker else nullcontext()
        try:
            with tracking:
                await self.session.run(sink)
        finally:
            listener.cancel()
            try:
                await listener
            except asyncio.CancelledError:
                pass

        try:
            await send({"type": "http.response.body", "body": b"", "more_body": False})
        except self.session.disconnect_errors:
            # Peer already gone, nothing left to close
            pass
