"""
Animation Models
================

Data models for the three shapes an animation takes on its way to the wire.

Lifecycle:
    AnimationDefinition  -> raw, as loaded from storage (pydantic, validated)
    NormalizedAnimation  -> square frames, clamped framerate (transient)
    PrecomputedAnimation -> wire-ready payloads, cached and shared read-only

Input Contract (from storage):
    {
        "frames": [["line", "line", ...], ...],
        "framerate": 100
    }

    Unknown fields are ignored. A null line is treated as an empty line.

Example:
    from printnet.models.animation import AnimationDefinition

    definition = AnimationDefinition.model_validate_json(raw)
    print(f"Loaded {len(definition.frames)} frames")
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator


class AnimationDefinition(BaseModel):
    """
    Raw animation definition as stored.

    Constructed once per cache miss and discarded after normalization.

    Attributes:
        frames: Ordered frames, each an ordered list of text lines
        frame_rate_ms: Declared delay between frames in milliseconds
    """

    frames: List[List[Optional[str]]] = Field(
        default_factory=list,
        description="Ordered frames, each a list of text lines",
    )

    frame_rate_ms: int = Field(
        default=0,
        alias="framerate",
        description="Declared delay between frames in milliseconds",
    )

    @field_validator("frames", mode="before")
    @classmethod
    def _absent_frames_are_empty(cls, value):
        if value is None:
            return []
        if isinstance(value, list):
            return [[] if frame is None else frame for frame in value]
        return value

    class Config:
        """Pydantic model configuration."""

        populate_by_name = True
        extra = "ignore"
        json_schema_extra = {
            "example": {
                "frames": [["AB", "CD"], ["EF", "GH"]],
                "framerate": 100,
            }
        }


@dataclass(frozen=True, slots=True)
class NormalizedAnimation:
    """
    Animation cropped/padded to a square and with a clamped framerate.

    Every line of every frame is exactly square_size characters wide.
    A frame has square_size lines unless its source frame was shorter.

    Attributes:
        frames: Normalized frames
        frame_rate_ms: Framerate, never below the minimum
        square_size: Common width/height of all frames
    """

    frames: Tuple[Tuple[str, ...], ...]
    frame_rate_ms: int
    square_size: int

    @property
    def frame_count(self) -> int:
        return len(self.frames)


@dataclass(frozen=True, slots=True)
class PrecomputedAnimation:
    """
    Wire-ready animation, computed once and reused for every emission.

    Immutable (frozen, tuple of bytes) so a single instance can be shared
    across any number of concurrent streaming sessions without copying.

    Attributes:
        name: Animation name (cache key)
        payloads: One UTF-8 payload per frame, each ending in a blank line
        delay_ms: Adaptive delay applied between every pair of frames
        square_size: Common width/height of all frames
    """

    name: str
    payloads: Tuple[bytes, ...]
    delay_ms: int
    square_size: int

    @property
    def frame_count(self) -> int:
        return len(self.payloads)

    @property
    def total_bytes(self) -> int:
        """Estimated memory footprint, used for cache admission."""
        return sum(len(payload) for payload in self.payloads)

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the payloads."""
        return (
            f"PrecomputedAnimation(name={self.name!r}, "
            f"frames={self.frame_count}, "
            f"delay_ms={self.delay_ms}, "
            f"bytes={self.total_bytes})"
        )
