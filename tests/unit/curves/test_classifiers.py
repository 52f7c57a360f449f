"""Tests for curve classification and the detectors."""

from __future__ import annotations

import pytest

from animerge.core.curves.classifiers import (
    BLEND_SHAPE_PREFIX,
    BlendShapeDetector,
    CurveClass,
    MuscleDetector,
    RootMotionDetector,
    classify,
)
from animerge.core.curves.models import CurveBinding, SourceClip, TargetKind
from animerge.core.curves.muscles import MUSCLE_AXIS_NAMES


def _binding(path: str, kind: TargetKind, prop: str) -> CurveBinding:
    return CurveBinding(path=path, target_kind=kind, property_name=prop)


class TestClassify:
    """Tests for classify()."""

    def test_prefix_constant(self) -> None:
        assert BLEND_SHAPE_PREFIX == "blendShape."

    @pytest.mark.parametrize("path", ["", "Body", "Root/Face"])
    def test_shape_weight_ignores_path(self, path: str) -> None:
        binding = _binding(path, TargetKind.SKINNED_MESH_RENDERER, "blendShape.Smile")
        assert classify(binding) == CurveClass.SHAPE_WEIGHT

    @pytest.mark.parametrize(
        "prop",
        ["blendshape.Smile", "BlendShape.Smile", "blendShape.", "Smile", ""],
    )
    def test_shape_weight_requires_exact_prefix_and_suffix(self, prop: str) -> None:
        binding = _binding("Body", TargetKind.SKINNED_MESH_RENDERER, prop)
        assert classify(binding) == CurveClass.ORDINARY

    def test_shape_weight_requires_skinned_mesh(self) -> None:
        binding = _binding("Body", TargetKind.TRANSFORM, "blendShape.Smile")
        assert classify(binding) == CurveClass.ORDINARY

    @pytest.mark.parametrize(
        "prop",
        ["Spine Front-Back", "Chest Left-Right", "Head Nod Down-Up", "LeftHand.Thumb.1 Stretched"],
    )
    def test_muscle_axis_on_root(self, prop: str) -> None:
        assert classify(_binding("", TargetKind.ANIMATOR, prop)) == CurveClass.MUSCLE_AXIS

    def test_muscle_axis_never_on_child_path(self) -> None:
        binding = _binding("Hips", TargetKind.ANIMATOR, "Spine Front-Back")
        assert classify(binding) == CurveClass.ORDINARY

    def test_muscle_axis_requires_humanoid_rig(self, spine_binding: CurveBinding) -> None:
        assert classify(spine_binding, humanoid=False) == CurveClass.ORDINARY
        assert classify(spine_binding, humanoid=True) == CurveClass.MUSCLE_AXIS

    def test_shape_weight_on_any_rig(self, smile_binding: CurveBinding) -> None:
        assert classify(smile_binding, humanoid=False) == CurveClass.SHAPE_WEIGHT

    def test_muscle_axis_requires_animator(self) -> None:
        binding = _binding("", TargetKind.TRANSFORM, "Spine Front-Back")
        assert classify(binding) == CurveClass.ORDINARY

    @pytest.mark.parametrize("prop", ["RootT.x", "RootT.y", "RootQ.w", "MotionT.x", ""])
    def test_root_motion_is_ordinary(self, prop: str) -> None:
        assert classify(_binding("", TargetKind.ANIMATOR, prop)) == CurveClass.ORDINARY


class TestBlendShapeDetector:
    """Tests for BlendShapeDetector."""

    def test_detects_only_keyed_shape_curves(self, mixed_clip: SourceClip) -> None:
        detector = BlendShapeDetector()
        found = detector.detect_blend_shape_curves(mixed_clip)
        assert [p.binding.property_name for p in found] == ["blendShape.Smile"]
        assert detector.has_blend_shape_curves(mixed_clip) is True

    def test_none_clip(self) -> None:
        detector = BlendShapeDetector()
        assert detector.detect_blend_shape_curves(None) == []
        assert detector.has_blend_shape_curves(None) is False

    def test_shape_name(self, smile_binding: CurveBinding) -> None:
        detector = BlendShapeDetector()
        assert detector.get_blend_shape_name(smile_binding) == "Smile"
        assert detector.get_blend_shape_name(CurveBinding(property_name="x")) is None


class TestMuscleDetector:
    """Tests for MuscleDetector."""

    def test_detects_muscle_curves(self, mixed_clip: SourceClip) -> None:
        detector = MuscleDetector()
        found = detector.detect_muscle_curves(mixed_clip)
        assert [p.binding.property_name for p in found] == ["Spine Front-Back"]
        assert detector.has_muscle_curves(mixed_clip) is True

    def test_none_clip(self) -> None:
        assert MuscleDetector().detect_muscle_curves(None) == []
        assert MuscleDetector().has_muscle_curves(None) is False

    def test_axis_table(self) -> None:
        names = MuscleDetector.get_all_muscle_axis_names()
        assert len(names) == 95
        assert len(set(names)) == 95
        assert names[0] == "Spine Front-Back"
        assert "Right Upper Leg In-Out" in names
        assert "RightHand.Little.3 Stretched" in names

    def test_axis_table_is_a_copy(self) -> None:
        names = MuscleDetector.get_all_muscle_axis_names()
        names.clear()
        assert len(MuscleDetector.get_all_muscle_axis_names()) == len(MUSCLE_AXIS_NAMES)


class TestRootMotionDetector:
    """Tests for RootMotionDetector."""

    def test_detects_root_motion(self, mixed_clip: SourceClip) -> None:
        detector = RootMotionDetector()
        found = detector.detect_root_motion_curves(mixed_clip)
        assert [p.binding.property_name for p in found] == ["RootT.x"]

    def test_position_and_rotation(self) -> None:
        detector = RootMotionDetector()
        assert detector.is_root_position_property(CurveBinding(property_name="RootT.z"))
        assert detector.is_root_rotation_property(CurveBinding(property_name="RootQ.w"))
        assert not detector.is_root_motion_property(
            CurveBinding(path="Hips", property_name="RootT.z")
        )
        assert detector.detect_root_motion_curves(None) == []
