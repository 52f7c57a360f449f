"""Tests for math utility functions."""

from __future__ import annotations

import math

import pytest

from animerge.core.utils.math import clamp, clamp01, hermite, lerp, ping_pong, repeat


def test_clamp_within_range():
    """Test clamping values within range."""
    assert clamp(5, 0, 10) == 5
    assert clamp(0, 0, 10) == 0
    assert clamp(10, 0, 10) == 10


def test_clamp_outside_range():
    """Test clamping values outside the range."""
    assert clamp(-5, 0, 10) == 0
    assert clamp(11.5, 0.0, 10.0) == 10.0


def test_clamp01():
    assert clamp01(-0.25) == 0.0
    assert clamp01(0.25) == 0.25
    assert clamp01(3) == 1.0


def test_lerp():
    """Test linear interpolation, including extrapolation."""
    assert lerp(0.0, 10.0, 0.0) == 0.0
    assert lerp(0.0, 10.0, 0.5) == 5.0
    assert lerp(-10.0, 10.0, 0.5) == 0.0
    assert lerp(0.0, 10.0, 1.5) == 15.0


@pytest.mark.parametrize(
    ("t", "length", "expected"),
    [(0.0, 2.0, 0.0), (2.5, 2.0, 0.5), (-0.5, 2.0, 1.5), (4.0, 2.0, 0.0)],
)
def test_repeat(t, length, expected):
    assert repeat(t, length) == pytest.approx(expected)


@pytest.mark.parametrize(
    ("t", "length", "expected"),
    [(0.5, 2.0, 0.5), (2.0, 2.0, 2.0), (3.0, 2.0, 1.0), (4.5, 2.0, 0.5)],
)
def test_ping_pong(t, length, expected):
    assert ping_pong(t, length) == pytest.approx(expected)


class TestHermite:
    """Tests for cubic Hermite segment evaluation."""

    def test_endpoints(self):
        assert hermite(0.0, 1.0, 0.0, 2.0, 5.0, 0.0, 0.0) == 1.0
        assert hermite(0.0, 1.0, 0.0, 2.0, 5.0, 0.0, 2.0) == 5.0

    def test_linear_tangents_give_straight_line(self):
        assert hermite(0.0, 0.0, 5.0, 2.0, 10.0, 5.0, 0.5) == pytest.approx(2.5)

    def test_flat_tangents_give_smoothstep(self):
        assert hermite(0.0, 0.0, 0.0, 1.0, 1.0, 0.0, 0.25) == pytest.approx(0.15625)

    def test_infinite_tangent_steps(self):
        assert hermite(0.0, 1.0, math.inf, 1.0, 3.0, 0.0, 0.99) == 1.0
        assert hermite(0.0, 1.0, 0.0, 1.0, 3.0, -math.inf, 1.0) == 3.0

    def test_degenerate_segment(self):
        assert hermite(1.0, 4.0, 0.0, 1.0, 8.0, 0.0, 1.0) == 4.0
