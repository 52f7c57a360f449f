"""Track/clip model, extrapolation, blend weights and timeline documents."""

from animerge.core.timeline.blending import BlendInfo, BlendProcessor, blend_info_for
from animerge.core.timeline.extrapolation import ExtrapolationProcessor
from animerge.core.timeline.loader import Timeline, load_timeline, parse_timeline
from animerge.core.timeline.models import (
    ClipInfo,
    ClipPlacement,
    Extrapolation,
    TargetRig,
    TrackArena,
    TrackInfo,
)

__all__ = [
    "BlendInfo",
    "BlendProcessor",
    "ClipInfo",
    "ClipPlacement",
    "Extrapolation",
    "ExtrapolationProcessor",
    "TargetRig",
    "Timeline",
    "TrackArena",
    "TrackInfo",
    "blend_info_for",
    "load_timeline",
    "parse_timeline",
]
