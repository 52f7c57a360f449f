"""Math utilities for common operations."""

from __future__ import annotations

import math
from typing import TypeVar

import numpy as np

Number = TypeVar("Number", int, float, np.number)


def clamp(value: Number, min_val: Number, max_val: Number) -> Number:
    """Clamp value to range [min_val, max_val].

    Args:
        value: Value to clamp
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        Clamped value
    """
    return max(min_val, min(max_val, value))


def clamp01(value: float) -> float:
    """Clamp value to [0, 1]."""
    return float(clamp(float(value), 0.0, 1.0))


def lerp(a: Number, b: Number, t: float) -> float:
    """Linear interpolation between a and b.

    Args:
        a: Start value
        b: End value
        t: Interpolation factor [0, 1]

    Returns:
        Interpolated value
    """
    return float(a) + (float(b) - float(a)) * t


def repeat(t: float | np.ndarray, length: float) -> float | np.ndarray:
    """Wrap t into [0, length), also for negative t.

    Args:
        t: Value (or array of values) to wrap
        length: Period length (must be > 0)

    Returns:
        Wrapped value, an array when t is an array

    Example:
        >>> repeat(2.5, 2.0)
        0.5
        >>> repeat(-0.5, 2.0)
        1.5
    """
    wrapped = np.clip(t - np.floor(t / length) * length, 0.0, length)
    return wrapped if isinstance(wrapped, np.ndarray) else float(wrapped)


def ping_pong(t: float | np.ndarray, length: float) -> float | np.ndarray:
    """Bounce t back and forth between 0 and length.

    Example:
        >>> ping_pong(3.0, 2.0)
        1.0
    """
    t = repeat(t, length * 2.0)
    return length - abs(t - length)


def hermite(
    t0: float, v0: float, out_tangent: float, t1: float, v1: float, in_tangent: float, t: float
) -> float:
    """Evaluate a cubic Hermite segment between two keys.

    Tangents are slopes in value-per-second. An infinite tangent on either
    side makes the segment stepped (holds v0 until t1).

    Args:
        t0: Segment start time
        v0: Value at t0
        out_tangent: Outgoing slope at t0
        t1: Segment end time
        v1: Value at t1
        in_tangent: Incoming slope at t1
        t: Evaluation time in [t0, t1]

    Returns:
        Interpolated value
    """
    dt = t1 - t0
    if dt <= 0.0:
        return v0
    if math.isinf(out_tangent) or math.isinf(in_tangent):
        return v0 if t < t1 else v1

    s = (t - t0) / dt
    s2 = s * s
    s3 = s2 * s
    h00 = 2.0 * s3 - 3.0 * s2 + 1.0
    h10 = s3 - 2.0 * s2 + s
    h01 = -2.0 * s3 + 3.0 * s2
    h11 = s3 - s2
    return h00 * v0 + h10 * dt * out_tangent + h01 * v1 + h11 * dt * in_tangent
