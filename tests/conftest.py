"""Shared pytest fixtures for animerge tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from animerge.core.curves.models import (
    AnimationCurve,
    CurveBinding,
    CurveBindingPair,
    SourceClip,
    TargetKind,
)
from animerge.core.timeline.models import ClipInfo, ClipPlacement, TargetRig

# ============================================================================
# Path Fixtures
# ============================================================================


@pytest.fixture
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def fixtures_dir() -> Path:
    """Get test fixtures directory."""
    return Path(__file__).parent / "fixtures"


# ============================================================================
# Rig / Clip Fixtures
# ============================================================================


@pytest.fixture
def hero_rig() -> TargetRig:
    """Humanoid rig most tests merge into."""
    return TargetRig(name="Hero", humanoid=True)


@pytest.fixture
def position_binding() -> CurveBinding:
    """Ordinary transform channel on a child bone."""
    return CurveBinding(
        path="Hips", target_kind=TargetKind.TRANSFORM, property_name="localPosition.x"
    )


@pytest.fixture
def make_clip() -> Callable[..., ClipInfo]:
    """Factory for single-curve clips.

    ``make_clip(binding, points, start=0.0, duration=None, **placement)``
    builds a linear curve from points and places it on the timeline. The
    duration defaults to the curve's key extent.
    """

    def _make(
        binding: CurveBinding,
        points: list[tuple[float, float]],
        start: float = 0.0,
        duration: float | None = None,
        name: str = "clip",
        **placement: object,
    ) -> ClipInfo:
        curve = AnimationCurve.linear(points)
        source = SourceClip(name=name, pairs=[CurveBindingPair(binding=binding, curve=curve)])
        if duration is None:
            duration = curve.end_time
        return ClipInfo(
            placement=ClipPlacement(start=start, duration=duration, **placement),
            source=source,
            name=name,
        )

    return _make
