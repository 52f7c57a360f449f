"""Curve resampling onto a fixed frame grid.

Makes key spacing independent of the source clips' own sample rates: every
resampled curve has one key per frame of the target rate, covering the
original key extent snapped outward to whole frames.
"""

from __future__ import annotations

import logging

from animerge.core.curves.models import AnimationCurve, CurveBindingPair, Keyframe
from animerge.core.curves.sampling import frame_times, snap_frame_down, snap_frame_up

logger = logging.getLogger(__name__)


def resample_curve(curve: AnimationCurve, frame_rate: float) -> AnimationCurve:
    """Resample one non-empty curve at frame_rate (> 0).

    The first key time is floored and the last key time ceiled to the grid.
    A time already on a grid line snaps to itself. Values are the source
    curve evaluated at each grid time.

    Args:
        curve: Curve with at least one key.
        frame_rate: Target samples per second.

    Returns:
        New curve with keys exactly on the grid.
    """
    start_frame = snap_frame_down(curve.start_time, frame_rate)
    end_frame = snap_frame_up(curve.end_time, frame_rate)
    times = frame_times(start_frame, end_frame, frame_rate)
    values = curve.evaluate_many(times)

    # Tangents follow the sampled slopes; only sampled values are contractual.
    points = list(zip(times.tolist(), values.tolist(), strict=True))
    if len(points) == 1:
        t, v = points[0]
        return AnimationCurve(keys=[Keyframe(time=t, value=v)])
    return AnimationCurve.linear(points)


class CurveResampler:
    """Resamples (binding, curve) pairs to a target frame rate."""

    def resample(
        self, pairs: list[CurveBindingPair] | None, frame_rate: float
    ) -> list[CurveBindingPair] | None:
        """Resample every pair's curve onto the frame grid.

        Args:
            pairs: Pairs to resample. None is returned unchanged.
            frame_rate: Target samples per second. A non-positive rate is a
                no-op and returns ``pairs`` itself.

        Returns:
            New list of pairs. Pairs without a curve or without keys are
            passed through as-is; bindings are never altered.
        """
        if pairs is None or frame_rate <= 0:
            return pairs

        result: list[CurveBindingPair] = []
        for pair in pairs:
            if pair.curve is None or len(pair.curve) == 0:
                result.append(pair)
                continue
            resampled = resample_curve(pair.curve, frame_rate)
            result.append(CurveBindingPair(binding=pair.binding, curve=resampled))

        logger.debug("Resampled %d curves at %.3f fps", len(result), frame_rate)
        return result


def resample(
    pairs: list[CurveBindingPair] | None, frame_rate: float
) -> list[CurveBindingPair] | None:
    """Module-level shortcut for ``CurveResampler().resample``."""
    return CurveResampler().resample(pairs, frame_rate)
