"""
Data Models
===========

Data models for Printnet.

This module re-exports all data models for convenient access.

Models:
    Animation:
        - AnimationDefinition: Raw definition schema from storage
        - NormalizedAnimation: Square frames with clamped framerate
        - PrecomputedAnimation: Wire-ready payloads plus adaptive delay

    Outcome:
        - Found, NotFound, LoadError: Explicit results of loading
"""

from printnet.models.animation import (
    AnimationDefinition,
    NormalizedAnimation,
    PrecomputedAnimation,
)
from printnet.models.outcome import Found, LoadError, NotFound, Outcome

__all__ = [
    # Animation
    "AnimationDefinition",
    "NormalizedAnimation",
    "PrecomputedAnimation",
    # Outcome
    "Found",
    "NotFound",
    "LoadError",
    "Outcome",
]
