"""
Frame Normalizer
================

Crops and pads every frame of an animation to one square dimension.

Square Size:
    Derived from the FIRST frame only and applied uniformly:

        square_size = min(max_line_width, line_count)   capped at MAX_SQUARE_SIZE

    Each frame keeps its first square_size lines. Each kept line is
    truncated or right-padded with spaces to square_size characters.
    Frames shorter than square_size lines are NOT padded with extra lines.

Framerate:
    Clamped to at least MIN_FRAME_RATE_MS.

An animation with no frames passes through with square_size = 0.
"""

import logging
from typing import Optional, Sequence, Tuple

from printnet.models.animation import AnimationDefinition, NormalizedAnimation


logger = logging.getLogger(__name__)


MAX_SQUARE_SIZE = 200
MIN_FRAME_RATE_MS = 16


def fit_line(line: Optional[str], width: int) -> str:
    """Truncate or space-pad a line to exactly `width` characters."""
    if line is None:
        return " " * width
    if len(line) > width:
        return line[:width]
    return line.ljust(width)


def compute_square_size(first_frame: Sequence[Optional[str]]) -> int:
    """
    Compute the uncapped square size from the first frame.

    Args:
        first_frame: Lines of the first frame (None counts as width 0)

    Returns:
        min(widest line, number of lines)
    """
    max_width = max((len(line) if line else 0 for line in first_frame), default=0)
    max_height = len(first_frame)
    return min(max_width, max_height)


def normalize_frame(frame: Sequence[Optional[str]], square_size: int) -> Tuple[str, ...]:
    return tuple(fit_line(line, square_size) for line in frame[:square_size])


def normalize(
    definition: AnimationDefinition,
    max_square_size: int = MAX_SQUARE_SIZE,
    min_frame_rate_ms: int = MIN_FRAME_RATE_MS,
) -> NormalizedAnimation:
    """
    Normalize a raw definition into square frames.

    Args:
        definition: Raw animation definition
        max_square_size: Upper bound on the square size
        min_frame_rate_ms: Lower bound on the framerate

    Returns:
        NormalizedAnimation with identical frame dimensions
    """
    frame_rate_ms = max(definition.frame_rate_ms, min_frame_rate_ms)
    if frame_rate_ms != definition.frame_rate_ms:
        logger.info(
            f"Framerate clamped: {definition.frame_rate_ms}ms -> {frame_rate_ms}ms"
        )

    if not definition.frames:
        return NormalizedAnimation(frames=(), frame_rate_ms=frame_rate_ms, square_size=0)

    square_size = compute_square_size(definition.frames[0])
    if square_size > max_square_size:
        logger.info(
            f"Square size clamped: {square_size} -> {max_square_size} "
            f"(frames will be cropped)"
        )
        square_size = max_square_size

    frames = tuple(normalize_frame(frame, square_size) for frame in definition.frames)

    return NormalizedAnimation(
        frames=frames,
        frame_rate_ms=frame_rate_ms,
        square_size=square_size,
    )
