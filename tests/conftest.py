"""
Test Configuration
==================

Pytest fixtures and test configuration for Printnet.
"""

import asyncio
import json

import pytest


@pytest.fixture
def sample_definition_data():
    """Provide the two-frame definition used throughout the docs."""
    return {
        "frames": [["AB", "CD"], ["EF", "GH"]],
        "framerate": 10,
    }


@pytest.fixture
def sample_definition(sample_definition_data):
    """Provide a validated AnimationDefinition."""
    from printnet.models.animation import AnimationDefinition

    return AnimationDefinition.model_validate(sample_definition_data)


@pytest.fixture
def memory_source(sample_definition_data):
    """Provide a MemorySource holding a valid and a malformed definition."""
    from printnet.library import MemorySource

    return MemorySource({
        "sample": json.dumps(sample_definition_data),
        "broken": "{ not json",
    })


@pytest.fixture
def make_animation():
    """Factory for PrecomputedAnimation instances with given payloads."""
    from printnet.models.animation import PrecomputedAnimation

    def _make(payloads, delay_ms=1, name="test"):
        return PrecomputedAnimation(
            name=name,
            payloads=tuple(payloads),
            delay_ms=delay_ms,
            square_size=2,
        )

    return _make


class RecordingSink:
    """Sink that records payloads and can cancel or fail after N writes."""

    def __init__(self, cancel_event=None, cancel_after=None, fail_on=None):
        self.payloads = []
        self.cancel_event = cancel_event
        self.cancel_after = cancel_after
        self.fail_on = fail_on

    async def __call__(self, payload: bytes) -> None:
        if self.fail_on is not None and len(self.payloads) + 1 == self.fail_on:
            raise ConnectionResetError("peer closed connection")
        self.payloads.append(payload)
        if self.cancel_after is not None and len(self.payloads) >= self.cancel_after:
            self.cancel_event.set()


@pytest.fixture
def recording_sink():
    """Factory for RecordingSink instances."""
    return RecordingSink


@pytest.fixture
def cancel_event():
    """Provide a fresh cancellation event."""
    return asyncio.Event()
