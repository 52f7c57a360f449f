"""Track and clip models for layered timeline animation.

``ClipInfo`` and ``TrackInfo`` are read-only views over what the timeline
host authored. Tracks live in a ``TrackArena`` and reference their override
tracks by index, so the tree has no parent/child back-references.
"""

from __future__ import annotations

from collections.abc import Iterator
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from animerge.core.curves.models import AnimationCurve, SourceClip
from animerge.core.curves.offsets import IDENTITY_ROTATION, ZERO_POSITION


class Extrapolation(str, Enum):
    """How a clip contributes before its start or after its end."""

    NONE = "none"
    HOLD = "hold"
    LOOP = "loop"
    PING_PONG = "ping_pong"
    CONTINUE = "continue"


class TargetRig(BaseModel):
    """Reference to the rig a track animates.

    Attributes:
        name: Rig name, used for output naming and grouping.
        humanoid: Whether the rig drives humanoid muscle curves.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    humanoid: bool = False


class ClipPlacement(BaseModel):
    """Placement of a clip on a track, as authored in the timeline host.

    Attributes:
        start: Timeline start time in seconds.
        duration: Timeline duration in seconds.
        clip_in: Offset into the source clip in seconds.
        time_scale: Playback speed multiplier.
        pre_extrapolation: Behaviour before start.
        post_extrapolation: Behaviour after end.
        ease_in_duration: Blend-in length in seconds.
        ease_out_duration: Blend-out length in seconds.
        mix_in_curve: Host-maintained blend-in weight curve over [0, 1].
        mix_out_curve: Host-maintained blend-out weight curve over [0, 1].
        position_offset: Scene offset added to root position curves (x, y, z).
        rotation_offset: Scene rotation applied to root rotation curves, as a
            quaternion (x, y, z, w).
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    start: float = 0.0
    duration: float = Field(default=0.0, ge=0.0)
    clip_in: float = 0.0
    time_scale: float = 1.0
    pre_extrapolation: Extrapolation = Extrapolation.NONE
    post_extrapolation: Extrapolation = Extrapolation.NONE
    ease_in_duration: float = Field(default=0.0, ge=0.0)
    ease_out_duration: float = Field(default=0.0, ge=0.0)
    mix_in_curve: AnimationCurve | None = None
    mix_out_curve: AnimationCurve | None = None
    position_offset: tuple[float, float, float] = ZERO_POSITION
    rotation_offset: tuple[float, float, float, float] = IDENTITY_ROTATION

    @property
    def end(self) -> float:
        return self.start + self.duration


class ClipInfo:
    """One placed clip: its placement plus the curves it plays.

    Every timing accessor falls back to a neutral default when the
    placement is absent (time scale defaults to 1, everything else to 0
    or NONE).

    Args:
        placement: Placement on the track, or None.
        source: Curve data the clip plays, or None.
        name: Display name used in diagnostics.
    """

    def __init__(
        self,
        placement: ClipPlacement | None,
        source: SourceClip | None,
        name: str | None = None,
    ) -> None:
        self.placement = placement
        self.source = source
        self.name = name or (source.name if source is not None else "")

    @property
    def start_time(self) -> float:
        return self.placement.start if self.placement is not None else 0.0

    @property
    def duration(self) -> float:
        return self.placement.duration if self.placement is not None else 0.0

    @property
    def end_time(self) -> float:
        return self.start_time + self.duration

    @property
    def clip_in(self) -> float:
        return self.placement.clip_in if self.placement is not None else 0.0

    @property
    def time_scale(self) -> float:
        return self.placement.time_scale if self.placement is not None else 1.0

    @property
    def pre_extrapolation(self) -> Extrapolation:
        if self.placement is None:
            return Extrapolation.NONE
        return self.placement.pre_extrapolation

    @property
    def post_extrapolation(self) -> Extrapolation:
        if self.placement is None:
            return Extrapolation.NONE
        return self.placement.post_extrapolation

    @property
    def ease_in_duration(self) -> float:
        return self.placement.ease_in_duration if self.placement is not None else 0.0

    @property
    def ease_out_duration(self) -> float:
        return self.placement.ease_out_duration if self.placement is not None else 0.0

    @property
    def blend_in_curve(self) -> AnimationCurve | None:
        return self.placement.mix_in_curve if self.placement is not None else None

    @property
    def blend_out_curve(self) -> AnimationCurve | None:
        return self.placement.mix_out_curve if self.placement is not None else None

    @property
    def scene_offset_position(self) -> tuple[float, float, float]:
        return self.placement.position_offset if self.placement is not None else ZERO_POSITION

    @property
    def scene_offset_rotation(self) -> tuple[float, float, float, float]:
        if self.placement is None:
            return IDENTITY_ROTATION
        return self.placement.rotation_offset

    @property
    def has_scene_offset(self) -> bool:
        """True when either offset differs from the identity."""
        return (
            self.scene_offset_position != ZERO_POSITION
            or self.scene_offset_rotation != IDENTITY_ROTATION
        )

    @property
    def is_valid(self) -> bool:
        """Placement and source curves are both present."""
        return self.placement is not None and self.source is not None

    @property
    def effective_time_scale(self) -> float:
        """Time scale with non-positive values treated as 1."""
        scale = self.time_scale
        return scale if scale > 0 else 1.0

    def local_time(self, time: float) -> float:
        """Map a timeline time to source-clip time."""
        return (time - self.start_time) * self.effective_time_scale + self.clip_in

    def contains(self, time: float) -> bool:
        """True when time lies in [start, end]."""
        return self.start_time <= time <= self.end_time

    def __repr__(self) -> str:
        return (
            f"ClipInfo(name={self.name!r}, start={self.start_time}, end={self.end_time}, "
            f"valid={self.is_valid})"
        )


class TrackInfo(BaseModel):
    """An animation track.

    Attributes:
        name: Track name, used in diagnostics.
        priority: Merge order; higher overrides lower.
        bound_target: Rig the track outputs to. None makes the track
            ineligible for merging.
        muted: Muted tracks (and their override tracks) are skipped.
        clips: Clips on the track.
        override_indices: Arena indices of override tracks layered on top.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = ""
    priority: int = 0
    bound_target: TargetRig | None = None
    muted: bool = False
    clips: list[ClipInfo] = Field(default_factory=list)
    override_indices: list[int] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Eligible for merging: not muted and bound to a rig."""
        return not self.muted and self.bound_target is not None

    @property
    def valid_clips(self) -> list[ClipInfo]:
        return [clip for clip in self.clips if clip.is_valid]

    @property
    def time_range(self) -> tuple[float, float] | None:
        """(earliest start, latest end) over valid clips, or None."""
        clips = self.valid_clips
        if not clips:
            return None
        return min(c.start_time for c in clips), max(c.end_time for c in clips)


class TrackArena:
    """Owns every track of one timeline, addressed by integer index."""

    def __init__(self) -> None:
        self._tracks: list[TrackInfo] = []
        self._parents: list[int | None] = []

    def __len__(self) -> int:
        return len(self._tracks)

    def __getitem__(self, index: int) -> TrackInfo:
        return self._tracks[index]

    def add_track(self, track: TrackInfo) -> int:
        """Add a root-level track and return its index."""
        self._tracks.append(track)
        self._parents.append(None)
        return len(self._tracks) - 1

    def add_override_track(self, parent_index: int, track: TrackInfo | None) -> int | None:
        """Layer an override track on top of a parent.

        Args:
            parent_index: Index of the parent track.
            track: Override track. None is ignored.

        Returns:
            Index of the new track, or None when track is None.

        Raises:
            IndexError: If parent_index does not exist.
        """
        if track is None:
            return None
        parent = self._tracks[parent_index]
        self._tracks.append(track)
        self._parents.append(parent_index)
        index = len(self._tracks) - 1
        parent.override_indices.append(index)
        return index

    def overrides_of(self, index: int) -> list[TrackInfo]:
        return [self._tracks[i] for i in self._tracks[index].override_indices]

    def parent_of(self, index: int) -> int | None:
        return self._parents[index]

    def roots(self) -> list[int]:
        return [i for i, parent in enumerate(self._parents) if parent is None]

    def depth_of(self, index: int) -> int:
        depth = 0
        parent = self._parents[index]
        while parent is not None:
            depth += 1
            parent = self._parents[parent]
        return depth

    def walk(self) -> Iterator[tuple[int, int]]:
        """Yield (index, depth) depth-first, parents before overrides."""
        stack = [(i, 0) for i in reversed(self.roots())]
        while stack:
            index, depth = stack.pop()
            yield index, depth
            for child in reversed(self._tracks[index].override_indices):
                stack.append((child, depth + 1))
