"""Shared pytest fixtures for curve tests."""

from __future__ import annotations

import pytest

from animerge.core.curves.models import (
    AnimationCurve,
    CurveBinding,
    CurveBindingPair,
    SourceClip,
    TargetKind,
)


@pytest.fixture
def ramp_60fps() -> AnimationCurve:
    """Linear 0 -> 10 over [0, 1], keyed at 60 samples per second."""
    return AnimationCurve.linear([(i / 60.0, 10.0 * i / 60.0) for i in range(61)])


@pytest.fixture
def smile_binding() -> CurveBinding:
    """Shape-weight binding on a face mesh."""
    return CurveBinding(
        path="Face",
        target_kind=TargetKind.SKINNED_MESH_RENDERER,
        property_name="blendShape.Smile",
    )


@pytest.fixture
def spine_binding() -> CurveBinding:
    """Muscle-axis binding on the rig root."""
    return CurveBinding(
        path="", target_kind=TargetKind.ANIMATOR, property_name="Spine Front-Back"
    )


@pytest.fixture
def root_motion_binding() -> CurveBinding:
    """Root-motion position channel (never a muscle)."""
    return CurveBinding(path="", target_kind=TargetKind.ANIMATOR, property_name="RootT.x")


@pytest.fixture
def mixed_clip(
    smile_binding: CurveBinding,
    spine_binding: CurveBinding,
    root_motion_binding: CurveBinding,
) -> SourceClip:
    """Clip carrying one curve of every class plus a curveless binding."""
    transform = CurveBinding(path="Hips", property_name="localPosition.y")
    curve = AnimationCurve.linear([(0.0, 0.0), (1.0, 1.0)])
    return SourceClip(
        name="Mixed",
        pairs=[
            CurveBindingPair(binding=transform, curve=curve),
            CurveBindingPair(binding=smile_binding, curve=curve),
            CurveBindingPair(binding=spine_binding, curve=curve),
            CurveBindingPair(binding=root_motion_binding, curve=curve),
            CurveBindingPair(
                binding=CurveBinding(
                    path="Face",
                    target_kind=TargetKind.SKINNED_MESH_RENDERER,
                    property_name="blendShape.Blink",
                ),
                curve=None,
            ),
        ],
    )
