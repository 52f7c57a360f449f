"""Tests for track and clip models."""

from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from animerge.core.curves.models import SourceClip
from animerge.core.timeline.models import (
    ClipInfo,
    ClipPlacement,
    Extrapolation,
    TargetRig,
    TrackArena,
    TrackInfo,
)


class TestClipInfo:
    """Tests for ClipInfo accessors."""

    def test_defaults_without_placement(self) -> None:
        """A missing placement yields neutral defaults; time scale defaults to 1."""
        clip = ClipInfo(placement=None, source=SourceClip(name="Idle"))
        assert clip.start_time == 0.0
        assert clip.duration == 0.0
        assert clip.end_time == 0.0
        assert clip.clip_in == 0.0
        assert clip.time_scale == 1.0
        assert clip.pre_extrapolation == Extrapolation.NONE
        assert clip.post_extrapolation == Extrapolation.NONE
        assert clip.ease_in_duration == 0.0
        assert clip.ease_out_duration == 0.0
        assert clip.blend_in_curve is None
        assert clip.blend_out_curve is None
        assert clip.is_valid is False
        assert clip.name == "Idle"

    def test_is_valid_requires_source(self) -> None:
        clip = ClipInfo(placement=ClipPlacement(start=1.0, duration=2.0), source=None)
        assert clip.is_valid is False
        assert clip.end_time == 3.0

    def test_local_time(self) -> None:
        placement = ClipPlacement(start=2.0, duration=4.0, clip_in=0.5, time_scale=2.0)
        clip = ClipInfo(placement=placement, source=SourceClip())
        assert clip.local_time(3.0) == pytest.approx(2.5)

    def test_non_positive_time_scale_treated_as_one(self) -> None:
        placement = ClipPlacement(start=0.0, duration=1.0, time_scale=0.0)
        clip = ClipInfo(placement=placement, source=SourceClip())
        assert clip.time_scale == 0.0
        assert clip.effective_time_scale == 1.0
        assert clip.local_time(0.5) == 0.5

    def test_contains_is_inclusive(self) -> None:
        clip = ClipInfo(placement=ClipPlacement(start=1.0, duration=1.0), source=SourceClip())
        assert clip.contains(1.0)
        assert clip.contains(2.0)
        assert not clip.contains(2.01)

    def test_negative_ease_rejected(self) -> None:
        with pytest.raises(ValueError):
            ClipPlacement(ease_in_duration=-1.0)

    @pytest.mark.parametrize(
        "field", ["start", "duration", "clip_in", "time_scale", "ease_out_duration"]
    )
    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_timing_rejected(self, field: str, value: float) -> None:
        with pytest.raises(ValidationError):
            ClipPlacement(**{field: value})

    def test_scene_offset_defaults(self) -> None:
        """Without a placement or offsets the clip has no scene offset."""
        for clip in (
            ClipInfo(placement=None, source=SourceClip()),
            ClipInfo(placement=ClipPlacement(duration=1.0), source=SourceClip()),
        ):
            assert clip.scene_offset_position == (0.0, 0.0, 0.0)
            assert clip.scene_offset_rotation == (0.0, 0.0, 0.0, 1.0)
            assert clip.has_scene_offset is False

    def test_non_finite_offset_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ClipPlacement(position_offset=(0.0, math.nan, 0.0))


class TestTrackInfo:
    """Tests for TrackInfo eligibility."""

    def test_eligible_when_bound_and_unmuted(self) -> None:
        assert TrackInfo(bound_target=TargetRig(name="Hero")).is_valid is True

    def test_unbound_is_not_eligible(self) -> None:
        assert TrackInfo().is_valid is False

    def test_muted_is_not_eligible(self) -> None:
        assert TrackInfo(bound_target=TargetRig(name="Hero"), muted=True).is_valid is False

    def test_time_range(self) -> None:
        track = TrackInfo(
            clips=[
                ClipInfo(ClipPlacement(start=1.0, duration=1.0), SourceClip()),
                ClipInfo(ClipPlacement(start=3.0, duration=2.0), SourceClip()),
                ClipInfo(ClipPlacement(start=-5.0, duration=1.0), None),
            ]
        )
        assert len(track.valid_clips) == 2
        assert track.time_range == (1.0, 5.0)
        assert TrackInfo().time_range is None


class TestTrackArena:
    """Tests for the track arena."""

    def test_overrides_are_index_lists(self) -> None:
        arena = TrackArena()
        base = arena.add_track(TrackInfo(name="Base"))
        over = arena.add_override_track(base, TrackInfo(name="Override"))

        assert over == 1
        assert arena[base].override_indices == [1]
        assert [t.name for t in arena.overrides_of(base)] == ["Override"]
        assert arena.parent_of(over) == base
        assert arena.depth_of(over) == 1
        assert arena.roots() == [0]
        assert len(arena) == 2

    def test_none_override_ignored(self) -> None:
        arena = TrackArena()
        base = arena.add_track(TrackInfo(name="Base"))
        assert arena.add_override_track(base, None) is None
        assert len(arena) == 1

    def test_missing_parent_raises(self) -> None:
        with pytest.raises(IndexError):
            TrackArena().add_override_track(3, TrackInfo())

    def test_walk_is_depth_first(self) -> None:
        arena = TrackArena()
        a = arena.add_track(TrackInfo(name="A"))
        b = arena.add_track(TrackInfo(name="B"))
        a1 = arena.add_override_track(a, TrackInfo(name="A1"))
        assert a1 is not None
        arena.add_override_track(a1, TrackInfo(name="A1x"))
        arena.add_override_track(b, TrackInfo(name="B1"))

        walked = [(arena[i].name, depth) for i, depth in arena.walk()]
        assert walked == [("A", 0), ("A1", 1), ("A1x", 2), ("B", 0), ("B1", 1)]
