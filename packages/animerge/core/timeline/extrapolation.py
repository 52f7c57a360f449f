"""Clip extrapolation.

Evaluates a clip's curve at any timeline time, applying the clip's pre- or
post-extrapolation mode outside its [start, end] window.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from animerge.core.curves.models import AnimationCurve
from animerge.core.timeline.models import ClipInfo, Extrapolation
from animerge.core.utils.math import ping_pong, repeat


class ExtrapolationProcessor:
    """Evaluates clip curves with extrapolation applied."""

    @staticmethod
    def has_value(mode: Extrapolation) -> bool:
        """Whether a mode produces values outside the clip."""
        return mode != Extrapolation.NONE

    def covers(self, clip: ClipInfo, time: float) -> bool:
        """Whether the clip yields a value at time."""
        if clip.contains(time):
            return True
        if time < clip.start_time:
            return self.has_value(clip.pre_extrapolation)
        return self.has_value(clip.post_extrapolation)

    def try_get_value(
        self, curve: AnimationCurve | None, clip: ClipInfo, time: float
    ) -> float | None:
        """Evaluate curve for clip at timeline time.

        Args:
            curve: Source curve of the clip.
            clip: Clip placement info.
            time: Absolute timeline time in seconds.

        Returns:
            The value, or None when the curve is empty or the time falls in
            a region whose extrapolation mode is NONE.
        """
        values, valid = self.sample(curve, clip, [time])
        if not valid[0]:
            return None
        return float(values[0])

    def sample(
        self,
        curve: AnimationCurve | None,
        clip: ClipInfo,
        times: Sequence[float] | np.ndarray,
    ) -> tuple[np.ndarray, np.ndarray]:
        """Evaluate curve for clip at many timeline times at once.

        Args:
            curve: Source curve of the clip.
            clip: Clip placement info.
            times: Absolute timeline times in seconds.

        Returns:
            (values, valid) arrays. ``valid`` is False where try_get_value
            would return None; the matching values are 0.
        """
        t = np.asarray(times, dtype=np.float64)
        values = np.zeros_like(t)
        valid = np.zeros(t.shape, dtype=bool)
        if curve is None or len(curve) == 0:
            return values, valid

        start = clip.start_time
        end = clip.end_time
        scale = clip.effective_time_scale
        span = clip.duration * scale
        first_local = clip.clip_in
        last_local = clip.clip_in + span

        local = np.zeros_like(t)
        offset = np.zeros_like(t)
        inside = (t >= start) & (t <= end)
        local[inside] = (t[inside] - start) * scale + first_local
        valid |= inside

        for before, mode in ((True, clip.pre_extrapolation), (False, clip.post_extrapolation)):
            region = t < start if before else t > end
            if mode == Extrapolation.NONE or not region.any():
                continue
            valid |= region
            rt = t[region]

            if mode == Extrapolation.HOLD:
                local[region] = first_local if before else last_local
            elif mode in (Extrapolation.LOOP, Extrapolation.PING_PONG):
                if span <= 0:
                    local[region] = first_local
                    continue
                elapsed = (rt - start) * scale
                if mode == Extrapolation.LOOP:
                    local[region] = first_local + repeat(elapsed, span)
                else:
                    local[region] = first_local + ping_pong(np.abs(elapsed), span)
            elif before:
                # CONTINUE: extend along the boundary key tangent.
                local[region] = first_local
                offset[region] = curve.keys[0].in_tangent * (rt - start)
            else:
                local[region] = last_local
                offset[region] = curve.keys[-1].out_tangent * (rt - end)

        if valid.any():
            values[valid] = curve.evaluate_many(local[valid]) + offset[valid]
        return values, valid
