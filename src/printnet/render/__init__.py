"""
Render Module
=============

Frame normalization and payload precomputation.

    - normalize: Crop/pad frames to a square, clamp framerate
    - precompute: Encode payloads and compute the adaptive delay
"""

from printnet.render.normalizer import (
    MAX_SQUARE_SIZE,
    MIN_FRAME_RATE_MS,
    compute_square_size,
    normalize,
)
from printnet.render.precompute import (
    compute_adaptive_delay,
    encode_frame,
    frame_size,
    precompute,
)


__all__ = [
    "MAX_SQUARE_SIZE",
    "MIN_FRAME_RATE_MS",
    "compute_square_size",
    "normalize",
    "compute_adaptive_delay",
    "encode_frame",
    "frame_size",
    "precompute",
]
