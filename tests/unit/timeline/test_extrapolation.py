"""Tests for clip extrapolation."""

from __future__ import annotations

import pytest

from animerge.core.curves.models import AnimationCurve, SourceClip
from animerge.core.timeline.extrapolation import ExtrapolationProcessor
from animerge.core.timeline.models import ClipInfo, ClipPlacement, Extrapolation

# Source curve 0 -> 2 over [0, 2]; placed at [1, 3].
CURVE = AnimationCurve.linear([(0.0, 0.0), (2.0, 2.0)])


def _clip(mode: Extrapolation, **placement: object) -> ClipInfo:
    return ClipInfo(
        placement=ClipPlacement(
            start=1.0,
            duration=2.0,
            pre_extrapolation=mode,
            post_extrapolation=mode,
            **placement,
        ),
        source=SourceClip(),
    )


@pytest.fixture
def processor() -> ExtrapolationProcessor:
    return ExtrapolationProcessor()


class TestTryGetValue:
    """Tests for ExtrapolationProcessor.try_get_value."""

    def test_inside_clip(self, processor: ExtrapolationProcessor) -> None:
        assert processor.try_get_value(CURVE, _clip(Extrapolation.NONE), 1.5) == pytest.approx(0.5)

    def test_empty_curve(self, processor: ExtrapolationProcessor) -> None:
        assert processor.try_get_value(AnimationCurve(), _clip(Extrapolation.HOLD), 1.5) is None
        assert processor.try_get_value(None, _clip(Extrapolation.HOLD), 1.5) is None

    def test_none_outside(self, processor: ExtrapolationProcessor) -> None:
        clip = _clip(Extrapolation.NONE)
        assert processor.try_get_value(CURVE, clip, 0.5) is None
        assert processor.try_get_value(CURVE, clip, 3.5) is None

    def test_hold(self, processor: ExtrapolationProcessor) -> None:
        clip = _clip(Extrapolation.HOLD)
        assert processor.try_get_value(CURVE, clip, 0.0) == pytest.approx(0.0)
        assert processor.try_get_value(CURVE, clip, 10.0) == pytest.approx(2.0)

    def test_loop(self, processor: ExtrapolationProcessor) -> None:
        clip = _clip(Extrapolation.LOOP)
        assert processor.try_get_value(CURVE, clip, 3.5) == pytest.approx(0.5)
        assert processor.try_get_value(CURVE, clip, 0.5) == pytest.approx(1.5)

    def test_ping_pong(self, processor: ExtrapolationProcessor) -> None:
        clip = _clip(Extrapolation.PING_PONG)
        assert processor.try_get_value(CURVE, clip, 3.5) == pytest.approx(1.5)
        assert processor.try_get_value(CURVE, clip, 0.5) == pytest.approx(0.5)

    def test_continue_uses_boundary_tangent(self, processor: ExtrapolationProcessor) -> None:
        clip = _clip(Extrapolation.CONTINUE)
        assert processor.try_get_value(CURVE, clip, 4.0) == pytest.approx(3.0)
        assert processor.try_get_value(CURVE, clip, 0.0) == pytest.approx(-1.0)

    def test_time_scale_applies_to_span(self, processor: ExtrapolationProcessor) -> None:
        """With time scale 0.5 the clip plays [0, 1] of the source."""
        clip = _clip(Extrapolation.HOLD, time_scale=0.5)
        assert processor.try_get_value(CURVE, clip, 5.0) == pytest.approx(1.0)


class TestSample:
    """Tests for the batched ExtrapolationProcessor.sample."""

    def test_matches_try_get_value(self, processor: ExtrapolationProcessor) -> None:
        """Each region of one batch uses its own mode."""
        clip = ClipInfo(
            placement=ClipPlacement(
                start=1.0,
                duration=2.0,
                pre_extrapolation=Extrapolation.CONTINUE,
                post_extrapolation=Extrapolation.PING_PONG,
            ),
            source=SourceClip(),
        )
        times = [-1.0, 0.5, 1.0, 2.25, 3.0, 3.5, 5.75, 8.0]

        values, valid = processor.sample(CURVE, clip, times)

        assert valid.all()
        expected = [processor.try_get_value(CURVE, clip, t) for t in times]
        assert values.tolist() == pytest.approx(expected)
        assert values.tolist() == pytest.approx([-2.0, -0.5, 0.0, 1.25, 2.0, 1.5, 0.75, 1.0])

    def test_invalid_regions_are_masked(self, processor: ExtrapolationProcessor) -> None:
        clip = ClipInfo(
            placement=ClipPlacement(start=1.0, duration=2.0, post_extrapolation=Extrapolation.HOLD),
            source=SourceClip(),
        )
        values, valid = processor.sample(CURVE, clip, [0.0, 2.0, 9.0])
        assert valid.tolist() == [False, True, True]
        assert values.tolist() == pytest.approx([0.0, 1.0, 2.0])

    def test_empty_curve_is_never_valid(self, processor: ExtrapolationProcessor) -> None:
        values, valid = processor.sample(None, _clip(Extrapolation.HOLD), [0.0, 2.0])
        assert not valid.any()
        assert values.tolist() == [0.0, 0.0]

class TestCovers:
    """Tests for covers()/has_value()."""

    def test_has_value(self) -> None:
        assert ExtrapolationProcessor.has_value(Extrapolation.NONE) is False
        assert ExtrapolationProcessor.has_value(Extrapolation.HOLD) is True

    def test_covers(self, processor: ExtrapolationProcessor) -> None:
        clip = ClipInfo(
            placement=ClipPlacement(
                start=1.0, duration=1.0, post_extrapolation=Extrapolation.LOOP
            ),
            source=SourceClip(),
        )
        assert processor.covers(clip, 1.5)
        assert processor.covers(clip, 5.0)
        assert not processor.covers(clip, 0.5)
