"""Frame-grid sampling infrastructure.

Maps seconds onto the integer frame grid of a sample rate and back. Frame
indices are computed once and every grid time is derived as
``frame / frame_rate``, so sample times never depend on the order in which
intervals were accumulated.
"""

from __future__ import annotations

import math

import numpy as np

# Times this close (in frames) to a grid line are treated as lying on it.
FRAME_EPSILON = 1e-6


def snap_frame_down(time: float, frame_rate: float) -> int:
    """Index of the last grid frame at or before time.

    A time within FRAME_EPSILON below a grid line only snaps onto it when
    that grid time is still at or before time.

    Args:
        time: Time in seconds.
        frame_rate: Samples per second. Must be > 0.

    Returns:
        Frame index.

    Raises:
        ValueError: If frame_rate <= 0.

    Example:
        >>> snap_frame_down(0.01, 30.0)
        0
        >>> snap_frame_down(0.1, 30.0)
        3
    """
    if frame_rate <= 0:
        raise ValueError("frame_rate must be > 0")
    frames = time * frame_rate
    nearest = round(frames)
    if abs(frames - nearest) <= FRAME_EPSILON and nearest / frame_rate <= time:
        return nearest
    return math.floor(frames)


def snap_frame_up(time: float, frame_rate: float) -> int:
    """Index of the first grid frame at or after time.

    Example:
        >>> snap_frame_up(0.99, 30.0)
        30
        >>> snap_frame_up(0.1, 30.0)
        3
    """
    if frame_rate <= 0:
        raise ValueError("frame_rate must be > 0")
    frames = time * frame_rate
    nearest = round(frames)
    if abs(frames - nearest) <= FRAME_EPSILON and nearest / frame_rate >= time:
        return nearest
    return math.ceil(frames)


def frame_times(start_frame: int, end_frame: int, frame_rate: float) -> np.ndarray:
    """Grid times for every frame in [start_frame, end_frame].

    Args:
        start_frame: First frame index.
        end_frame: Last frame index (inclusive).
        frame_rate: Samples per second. Must be > 0.

    Returns:
        Array of ``end_frame - start_frame + 1`` times; empty when
        end_frame < start_frame.

    Example:
        >>> frame_times(0, 2, 4.0).tolist()
        [0.0, 0.25, 0.5]
    """
    if frame_rate <= 0:
        raise ValueError("frame_rate must be > 0")
    if end_frame < start_frame:
        return np.empty(0, dtype=np.float64)
    frames = np.arange(start_frame, end_frame + 1, dtype=np.float64)
    return frames / frame_rate
