"""Shared utilities for animerge."""

from animerge.core.utils.math import clamp, clamp01, lerp, ping_pong, repeat

# Note: logging helpers are not re-exported here to keep the name `logging`
# unambiguous. Import directly: from animerge.core.utils.logging import ...

__all__ = [
    "clamp",
    "clamp01",
    "lerp",
    "ping_pong",
    "repeat",
]
