"""Curve classification.

Decides, per binding, whether a curve may be cross-faded like an ordinary
transform channel or whether it carries an absolute semantic magnitude
(shape weights, humanoid muscle axes) that must be passed through from a
single clip instead.
"""

from __future__ import annotations

from enum import Enum

from animerge.core.curves.models import CurveBinding, CurveBindingPair, SourceClip, TargetKind
from animerge.core.curves.muscles import MUSCLE_AXIS_NAME_SET, MUSCLE_AXIS_NAMES

BLEND_SHAPE_PREFIX = "blendShape."

ROOT_POSITION_PREFIX = "RootT."
ROOT_ROTATION_PREFIX = "RootQ."


class CurveClass(str, Enum):
    """Merge policy class of a curve binding."""

    ORDINARY = "ordinary"
    SHAPE_WEIGHT = "shape_weight"
    MUSCLE_AXIS = "muscle_axis"


def is_shape_weight(binding: CurveBinding) -> bool:
    """Skinned-mesh property named "blendShape.<name>". Path is irrelevant."""
    name = binding.property_name
    if not name or binding.target_kind != TargetKind.SKINNED_MESH_RENDERER:
        return False
    return name.startswith(BLEND_SHAPE_PREFIX) and len(name) > len(BLEND_SHAPE_PREFIX)


def is_muscle_axis(binding: CurveBinding) -> bool:
    """Animator property on the rig root whose name is a muscle axis."""
    if not binding.property_name or binding.path:
        return False
    if binding.target_kind != TargetKind.ANIMATOR:
        return False
    return binding.property_name in MUSCLE_AXIS_NAME_SET


def classify(binding: CurveBinding, humanoid: bool = True) -> CurveClass:
    """Classify a binding.

    Muscle axes only exist on humanoid rigs. With humanoid=False an animator
    curve named like a muscle axis is an ordinary channel.

    Args:
        binding: Curve binding to classify
        humanoid: Whether the target rig is humanoid

    Returns:
        SHAPE_WEIGHT or MUSCLE_AXIS when the binding matches every condition
        of that class, ORDINARY otherwise.

    Example:
        >>> classify(CurveBinding(path="Body", target_kind=TargetKind.SKINNED_MESH_RENDERER,
        ...                       property_name="blendShape.Smile"))
        <CurveClass.SHAPE_WEIGHT: 'shape_weight'>
    """
    if is_shape_weight(binding):
        return CurveClass.SHAPE_WEIGHT
    if humanoid and is_muscle_axis(binding):
        return CurveClass.MUSCLE_AXIS
    return CurveClass.ORDINARY


def _detect(clip: SourceClip | None, wanted: CurveClass) -> list[CurveBindingPair]:
    if clip is None:
        return []
    return [
        pair for pair in clip.pairs if pair.curve is not None and classify(pair.binding) == wanted
    ]


class BlendShapeDetector:
    """Finds shape-weight (morph target) curves."""

    def is_blend_shape_property(self, binding: CurveBinding) -> bool:
        return is_shape_weight(binding)

    def detect_blend_shape_curves(self, clip: SourceClip | None) -> list[CurveBindingPair]:
        """Return the shape-weight pairs of a clip; empty for None."""
        return _detect(clip, CurveClass.SHAPE_WEIGHT)

    def has_blend_shape_curves(self, clip: SourceClip | None) -> bool:
        return bool(self.detect_blend_shape_curves(clip))

    def get_blend_shape_name(self, binding: CurveBinding) -> str | None:
        """Shape name without the "blendShape." prefix, or None."""
        if not self.is_blend_shape_property(binding):
            return None
        return binding.property_name[len(BLEND_SHAPE_PREFIX) :]


class MuscleDetector:
    """Finds humanoid muscle-axis curves."""

    def is_muscle_property(self, binding: CurveBinding) -> bool:
        return is_muscle_axis(binding)

    def detect_muscle_curves(self, clip: SourceClip | None) -> list[CurveBindingPair]:
        """Return the muscle-axis pairs of a clip; empty for None."""
        return _detect(clip, CurveClass.MUSCLE_AXIS)

    def has_muscle_curves(self, clip: SourceClip | None) -> bool:
        return bool(self.detect_muscle_curves(clip))

    @staticmethod
    def get_all_muscle_axis_names() -> list[str]:
        """Full ordered muscle table (a fresh list each call)."""
        return list(MUSCLE_AXIS_NAMES)


class RootMotionDetector:
    """Finds root-motion curves (RootT.* position, RootQ.* rotation).

    Root motion shares the animator target kind with muscle curves but is
    always classified ORDINARY.
    """

    def is_root_position_property(self, binding: CurveBinding) -> bool:
        return not binding.path and binding.property_name.startswith(ROOT_POSITION_PREFIX)

    def is_root_rotation_property(self, binding: CurveBinding) -> bool:
        return not binding.path and binding.property_name.startswith(ROOT_ROTATION_PREFIX)

    def is_root_motion_property(self, binding: CurveBinding) -> bool:
        if not binding.property_name:
            return False
        return self.is_root_position_property(binding) or self.is_root_rotation_property(binding)

    def detect_root_motion_curves(self, clip: SourceClip | None) -> list[CurveBindingPair]:
        if clip is None:
            return []
        return [
            pair
            for pair in clip.pairs
            if pair.curve is not None and self.is_root_motion_property(pair.binding)
        ]
