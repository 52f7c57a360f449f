"""Timeline document loading.

Reads a JSON or YAML timeline document into a ``TrackArena``. The document
stands in for the authoring timeline: it lists tracks (with nested override
tracks), each track's bound rig, and each clip's placement and curves.

Example document (YAML):

    name: Intro
    tracks:
      - name: Body
        target: {name: Hero, humanoid: true}
        clips:
          - name: Walk
            start: 0.0
            duration: 2.0
            ease_in: 0.25
            post_extrapolation: hold
            position_offset: [0.0, 0.0, 1.5]
            curves:
              - path: Hips
                property: localPosition.x
                interpolation: linear
                keys: [[0.0, 0.0], [2.0, 4.0]]
        overrides:
          - name: Body Fix
            clips: [...]
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from animerge.core.curves.models import (
    AnimationCurve,
    CurveBinding,
    CurveBindingPair,
    Keyframe,
    SourceClip,
    TargetKind,
)
from animerge.core.timeline.models import (
    ClipInfo,
    ClipPlacement,
    Extrapolation,
    TargetRig,
    TrackArena,
    TrackInfo,
)

logger = logging.getLogger(__name__)


class KeyDocument(BaseModel):
    """One key, written as ``[t, v]`` or as a mapping."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    time: float
    value: float
    in_tangent: float = 0.0
    out_tangent: float = 0.0


class CurveDocument(BaseModel):
    """A bound curve inside a clip."""

    model_config = ConfigDict(extra="forbid")

    path: str = ""
    type: TargetKind = TargetKind.TRANSFORM
    property: str = ""
    interpolation: str = Field(default="hermite", pattern="^(hermite|linear)$")
    keys: list[KeyDocument] | None = None

    @field_validator("keys", mode="before")
    @classmethod
    def _coerce_pairs(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        return [_coerce_key(item) for item in value]


class ClipDocument(BaseModel):
    """A placed clip.

    ``mix_in``/``mix_out`` are weight keys over normalized ease time and are
    interpolated linearly. Eased clips without them get the host default
    ease-in-out curve. ``position_offset`` (x, y, z) and ``rotation_offset``
    (quaternion x, y, z, w) move the clip's root motion into scene space.
    """

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    name: str = ""
    start: float = 0.0
    duration: float | None = Field(default=None, ge=0.0)
    clip_in: float = 0.0
    time_scale: float = 1.0
    pre_extrapolation: Extrapolation = Extrapolation.NONE
    post_extrapolation: Extrapolation = Extrapolation.NONE
    ease_in: float = Field(default=0.0, ge=0.0)
    ease_out: float = Field(default=0.0, ge=0.0)
    mix_in: list[KeyDocument] | None = None
    mix_out: list[KeyDocument] | None = None
    position_offset: tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation_offset: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)
    curves: list[CurveDocument] = Field(default_factory=list)

    @field_validator("mix_in", "mix_out", mode="before")
    @classmethod
    def _coerce_mix_pairs(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        return [_coerce_key(item) for item in value]


class TargetDocument(BaseModel):
    """The rig a track is bound to."""

    model_config = ConfigDict(extra="forbid")

    name: str
    humanoid: bool = False


class TrackDocument(BaseModel):
    """A track and its override tracks."""

    model_config = ConfigDict(extra="forbid")

    name: str = ""
    priority: int | None = None
    target: TargetDocument | None = None
    muted: bool = False
    clips: list[ClipDocument] = Field(default_factory=list)
    overrides: list[TrackDocument] = Field(default_factory=list)

    @field_validator("target", mode="before")
    @classmethod
    def _coerce_target(cls, value: Any) -> Any:
        if isinstance(value, str):
            return {"name": value}
        return value


class TimelineDocument(BaseModel):
    """Root of a timeline document."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    name: str = "Timeline"
    frame_rate: float | None = Field(default=None, gt=0.0)
    tracks: list[TrackDocument] = Field(default_factory=list)


class Timeline(BaseModel):
    """A loaded timeline.

    Attributes:
        name: Timeline name, used for output naming.
        frame_rate: Frame rate the document asks for, if any.
        arena: All tracks of the timeline.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    frame_rate: float | None = None
    arena: TrackArena


def _coerce_key(item: Any) -> Any:
    if isinstance(item, list | tuple):
        if len(item) != 2:
            raise ValueError(f"key pairs must be [time, value], got {item!r}")
        return {"time": item[0], "value": item[1]}
    return item


def _build_curve(keys: list[KeyDocument], interpolation: str = "hermite") -> AnimationCurve:
    if interpolation == "linear":
        return AnimationCurve.linear((k.time, k.value) for k in keys)
    return AnimationCurve(
        keys=[
            Keyframe(
                time=k.time, value=k.value, in_tangent=k.in_tangent, out_tangent=k.out_tangent
            )
            for k in keys
        ]
    )


def _build_clip(doc: ClipDocument) -> ClipInfo:
    pairs: list[CurveBindingPair] = []
    for curve_doc in doc.curves:
        binding = CurveBinding(
            path=curve_doc.path,
            target_kind=curve_doc.type,
            property_name=curve_doc.property,
        )
        curve = None
        if curve_doc.keys is not None:
            curve = _build_curve(curve_doc.keys, curve_doc.interpolation)
        pairs.append(CurveBindingPair(binding=binding, curve=curve))
    source = SourceClip(name=doc.name, pairs=pairs)

    duration = doc.duration if doc.duration is not None else _source_span(source, doc)

    # The host keeps an ease-in-out mix curve for every eased clip.
    mix_in = _build_curve(doc.mix_in, "linear") if doc.mix_in else None
    if mix_in is None and doc.ease_in > 0:
        mix_in = AnimationCurve.ease_in_out(0.0, 0.0, 1.0, 1.0)
    mix_out = _build_curve(doc.mix_out, "linear") if doc.mix_out else None
    if mix_out is None and doc.ease_out > 0:
        mix_out = AnimationCurve.ease_in_out(0.0, 1.0, 1.0, 0.0)

    placement = ClipPlacement(
        start=doc.start,
        duration=duration,
        clip_in=doc.clip_in,
        time_scale=doc.time_scale,
        pre_extrapolation=doc.pre_extrapolation,
        post_extrapolation=doc.post_extrapolation,
        ease_in_duration=doc.ease_in,
        ease_out_duration=doc.ease_out,
        mix_in_curve=mix_in,
        mix_out_curve=mix_out,
        position_offset=doc.position_offset,
        rotation_offset=doc.rotation_offset,
    )
    return ClipInfo(placement=placement, source=source, name=doc.name)


def _source_span(source: SourceClip, doc: ClipDocument) -> float:
    scale = doc.time_scale if doc.time_scale > 0 else 1.0
    return max(source.duration - doc.clip_in, 0.0) / scale


def build_arena(document: TimelineDocument) -> TrackArena:
    """Build a TrackArena from a validated document.

    Tracks without an explicit priority are numbered in document order
    (depth-first, parents before their overrides). Override tracks that do
    not name a target inherit their parent's.
    """
    arena = TrackArena()
    order = 0

    def add(track_doc: TrackDocument, parent: int | None, inherited: TargetRig | None) -> None:
        nonlocal order
        target = inherited
        if track_doc.target is not None:
            target = TargetRig(name=track_doc.target.name, humanoid=track_doc.target.humanoid)
        priority = track_doc.priority if track_doc.priority is not None else order
        order += 1

        track = TrackInfo(
            name=track_doc.name,
            priority=priority,
            bound_target=target,
            muted=track_doc.muted,
            clips=[_build_clip(c) for c in track_doc.clips],
        )
        if parent is None:
            index: int | None = arena.add_track(track)
        else:
            index = arena.add_override_track(parent, track)
        if index is None:
            raise ValueError(f"Override track '{track_doc.name}' could not be added")
        for child in track_doc.overrides:
            add(child, index, target)

    for root in document.tracks:
        add(root, None, None)
    return arena


def parse_timeline(data: dict[str, Any], source: str = "<memory>") -> Timeline:
    """Validate a raw timeline mapping.

    Args:
        data: Parsed document content.
        source: Name used in error messages.

    Returns:
        Loaded Timeline

    Raises:
        ValueError: If the document is invalid.
    """
    try:
        document = TimelineDocument.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid timeline document {source}: {e}") from e

    arena = build_arena(document)
    logger.debug("Loaded timeline %r with %d tracks from %s", document.name, len(arena), source)
    return Timeline(name=document.name, frame_rate=document.frame_rate, arena=arena)


def load_timeline(path: str | Path) -> Timeline:
    """Load a timeline document from a JSON or YAML file.

    Args:
        path: Path to a .json, .yaml or .yml file.

    Returns:
        Loaded Timeline

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the format is unsupported or the content is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Timeline file does not exist: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    elif suffix in (".yaml", ".yml"):
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
    else:
        raise ValueError(f"Unsupported timeline format: {suffix}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Timeline document {path} must be a mapping")
    return parse_timeline(data, source=str(path))
