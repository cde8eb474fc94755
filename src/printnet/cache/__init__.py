"""
Cache Module
============

In-memory cache of precomputed animations.

    - AnimationCache: Lock-guarded map with a size-based admission gate
"""

from printnet.cache.animation_cache import AnimationCache, ComputeFn


__all__ = [
    "AnimationCache",
    "ComputeFn",
]
