"""
Animation Service Tests
=======================

End-to-end pipeline from stored definition to cached animation.
"""

import asyncio
import json

import pytest

from printnet.cache import AnimationCache
from printnet.library import DefinitionLoader, MemorySource
from printnet.models.outcome import Found, LoadError, NotFound
from printnet.service import AnimationService
from printnet.stream.session import StopReason


def _service(source, **cache_kwargs):
    return AnimationService(loader=DefinitionLoader(source), cache=AnimationCache(**cache_kwargs))


class TestAnimationService:
    """Tests for AnimationService.prepare."""

    @pytest.mark.asyncio
    async def test_prepare_example(self, memory_source):
        """The documented example produces the documented payloads."""
        outcome = await _service(memory_source).prepare("sample")

        assert isinstance(outcome, Found)
        assert outcome.value.payloads[0] == b"AB\nCD\n\n"
        assert outcome.value.delay_ms == 16
        assert outcome.value.square_size == 2

    @pytest.mark.asyncio
    async def test_second_prepare_is_cached(self, memory_source):
        """A cached animation is not loaded again."""
        service = _service(memory_source)

        await service.prepare("sample")
        await service.prepare("sample")

        assert memory_source.read_count == 1

    @pytest.mark.asyncio
    async def test_not_found(self, memory_source):
        """Unknown names surface as NotFound."""
        assert await _service(memory_source).prepare("ghost") == NotFound(name="ghost")

    @pytest.mark.asyncio
    async def test_load_error_is_not_cached(self, memory_source):
        """Malformed definitions are LoadErrors and are retried."""
        service = _service(memory_source)

        first = await service.prepare("broken")
        await service.prepare("broken")

        assert isinstance(first, LoadError)
        assert memory_source.read_count == 2
        assert service.metrics()["load_errors"] == 2

    @pytest.mark.asyncio
    async def test_oversized_animation_reloads(self, memory_source):
        """An animation over the budget invokes the loader on every request."""
        service = _service(memory_source, max_entry_bytes=10)

        first = await service.prepare("sample")
        second = await service.prepare("sample")

        assert isinstance(first, Found) and isinstance(second, Found)
        assert first.value.payloads == second.value.payloads
        assert memory_source.read_count == 2

    @pytest.mark.asyncio
    async def test_empty_animation_is_found(self):
        """A definition with no frames is a valid zero-frame animation."""
        source = MemorySource({"empty": json.dumps({"frames": [], "framerate": 30})})

        outcome = await _service(source).prepare("empty")

        assert isinstance(outcome, Found)
        assert outcome.value.frame_count == 0
        assert outcome.value.delay_ms == 30


class TestSessionTracking:
    """Tests for live session bookkeeping."""

    @pytest.mark.asyncio
    async def test_track_and_cancel_all(self, memory_source, recording_sink):
        """cancel_all() stops every tracked session."""
        service = _service(memory_source)
        animation = (await service.prepare("sample")).value

        sessions = [service.open_session(animation) for _ in range(2)]

        async def run(session):
            with service.track(session):
                return await session.run(recording_sink())

        tasks = [asyncio.create_task(run(s)) for s in sessions]
        await asyncio.sleep(0.05)
        assert service.active_sessions == 2

        assert service.cancel_all() == 2
        await asyncio.wait_for(asyncio.gather(*tasks), timeout=1.0)

        assert service.active_sessions == 0

    @pytest.mark.asyncio
    async def test_session_started_after_cancel_all_stops(self, memory_source, recording_sink):
        """A session that begins while the server is closing never streams."""
        service = _service(memory_source)
        animation = (await service.prepare("sample")).value
        service.cancel_all()

        sink = recording_sink()
        session = service.open_session(animation)
        with service.track(session):
            result = await asyncio.wait_for(session.run(sink), timeout=1.0)

        assert service.closing
        assert result.frames_sent == 0
        assert result.reason == StopReason.CANCELLED
