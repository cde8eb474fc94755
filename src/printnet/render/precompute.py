"""
Frame Precomputer
=================

Turns normalized frames into wire-ready byte payloads.

Payload Format:
    line_1 \\n line_2 \\n ... line_n \\n \\n

    The trailing blank line is the frame boundary a client watches for.
    Payloads are encoded once and replayed verbatim on every emission.

Adaptive Delay:
    Larger payloads take longer to flush over a connection. The delay
    between frames is stretched by the size of the FIRST frame so the
    perceived frame rate stays roughly constant:

        size > 50000  ->  max(base * 3,   100)
        size > 20000  ->  max(base * 2,    50)
        size > 5000   ->  max(base * 1.5,  30)
        otherwise     ->  max(base,        16)

    The delay is computed once and applies to every frame transition.
"""

import logging
from typing import Sequence, Tuple

from printnet.models.animation import NormalizedAnimation, PrecomputedAnimation


logger = logging.getLogger(__name__)


WIRE_ENCODING = "utf-8"
FRAME_SEPARATOR = "\n"
FRAME_TERMINATOR = "\n\n"

# (size threshold, base multiplier, floor in ms), checked largest first
DELAY_TIERS: Tuple[Tuple[int, float, int], ...] = (
    (50_000, 3.0, 100),
    (20_000, 2.0, 50),
    (5_000, 1.5, 30),
)
MIN_DELAY_MS = 16


def compute_adaptive_delay(size: int, base_delay: int) -> int:
    """
    Compute the inter-frame delay from the first frame's size.

    Args:
        size: Total character count of the first frame
        base_delay: Normalized framerate in milliseconds

    Returns:
        Delay in milliseconds
    """
    for threshold, multiplier, floor in DELAY_TIERS:
        if size > threshold:
            return max(int(base_delay * multiplier), floor)
    return max(base_delay, MIN_DELAY_MS)


def frame_size(frame: Sequence[str]) -> int:
    """Total character count of a frame (sum of line lengths)."""
    return sum(len(line) for line in frame)


def encode_frame(frame: Sequence[str]) -> bytes:
    return (FRAME_SEPARATOR.join(frame) + FRAME_TERMINATOR).encode(WIRE_ENCODING)


def precompute(name: str, animation: NormalizedAnimation) -> PrecomputedAnimation:
    """
    Encode every frame and compute the adaptive delay.

    Pure: the same input always produces byte-identical payloads.

    Args:
        name: Animation name
        animation: Normalized animation

    Returns:
        Immutable PrecomputedAnimation
    """
    payloads = tuple(encode_frame(frame) for frame in animation.frames)

    first_size = frame_size(animation.frames[0]) if animation.frames else 0
    delay_ms = compute_adaptive_delay(first_size, animation.frame_rate_ms)

    if delay_ms != animation.frame_rate_ms:
        logger.debug(
            f"Adaptive delay for '{name}': {animation.frame_rate_ms}ms -> {delay_ms}ms "
            f"(first frame {first_size} chars)"
        )

    return PrecomputedAnimation(
        name=name,
        payloads=payloads,
        delay_ms=delay_ms,
        square_size=animation.square_size,
    )
