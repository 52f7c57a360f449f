"""Curve models, classification and resampling."""

from animerge.core.curves.classifiers import (
    BLEND_SHAPE_PREFIX,
    BlendShapeDetector,
    CurveClass,
    MuscleDetector,
    RootMotionDetector,
    classify,
)
from animerge.core.curves.models import (
    AnimationCurve,
    CurveBinding,
    CurveBindingPair,
    Keyframe,
    SourceClip,
    TargetKind,
)
from animerge.core.curves.offsets import SceneOffsetApplier
from animerge.core.curves.resampler import CurveResampler, resample

__all__ = [
    "AnimationCurve",
    "BLEND_SHAPE_PREFIX",
    "BlendShapeDetector",
    "CurveBinding",
    "CurveBindingPair",
    "CurveClass",
    "CurveResampler",
    "Keyframe",
    "MuscleDetector",
    "RootMotionDetector",
    "SceneOffsetApplier",
    "SourceClip",
    "TargetKind",
    "classify",
    "resample",
]
