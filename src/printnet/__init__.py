"""
Printnet
========

Looping ASCII-art animations streamed over long-lived HTTP connections.

A client requests an animation by name and receives an endless stream of
text frames separated by blank lines, paced by a per-frame delay, until the
connection closes.

Components:
    - library: Definition loading from a collaborator-supplied source
    - render: Frame normalization and payload precomputation
    - cache: Bounded in-memory cache of precomputed animations
    - stream: Per-connection streaming session and ASGI response
    - service: Orchestration of the above behind a single call

Example:
    from printnet.config import settings

    # Server is started via the FastAPI application
    # See main.py for entry point
"""

__version__ = "0.1.0"
__author__ = "Printnet Project"

__all__ = [
    "__version__",
]
