"""Ease-in / ease-out blend weights.

A clip's contribution ramps up over its ease-in window and down over its
ease-out window following the mix curves the timeline host maintains for
the placement. This module only reads those curves; it never invents one.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from pydantic import BaseModel, ConfigDict

from animerge.core.curves.models import AnimationCurve
from animerge.core.curves.sampling import frame_times, snap_frame_down, snap_frame_up
from animerge.core.timeline.models import ClipInfo, ClipPlacement

DEFAULT_FRAME_RATE = 60.0


class BlendInfo(BaseModel):
    """Blend settings derived from one clip placement.

    Attributes:
        blend_in_curve: Weight curve over normalized ease-in time.
        blend_out_curve: Weight curve over normalized ease-out time.
        ease_in_duration: Ease-in length in seconds.
        ease_out_duration: Ease-out length in seconds.
    """

    model_config = ConfigDict(frozen=True)

    blend_in_curve: AnimationCurve | None = None
    blend_out_curve: AnimationCurve | None = None
    ease_in_duration: float = 0.0
    ease_out_duration: float = 0.0

    @property
    def has_ease_in(self) -> bool:
        return self.ease_in_duration > 0 and self.blend_in_curve is not None

    @property
    def has_ease_out(self) -> bool:
        return self.ease_out_duration > 0 and self.blend_out_curve is not None

    @property
    def is_valid(self) -> bool:
        return self.blend_in_curve is not None or self.blend_out_curve is not None


def blend_info_from_placement(placement: ClipPlacement | None) -> BlendInfo:
    """Copy ease durations and mix curves verbatim from a placement."""
    if placement is None:
        return BlendInfo()
    return BlendInfo(
        blend_in_curve=placement.mix_in_curve,
        blend_out_curve=placement.mix_out_curve,
        ease_in_duration=placement.ease_in_duration,
        ease_out_duration=placement.ease_out_duration,
    )


def blend_info_for(
    clip: ClipPlacement | ClipInfo | None, frame_rate: float = DEFAULT_FRAME_RATE
) -> BlendInfo:
    """Derive blend info with the evaluation frame rate passed explicitly.

    Args:
        clip: Raw placement or ClipInfo. None yields the default BlendInfo.
        frame_rate: Evaluation rate. Does not affect the derived curves.

    Returns:
        BlendInfo for the clip.
    """
    return BlendProcessor(frame_rate).get_blend_info(clip)


class BlendProcessor:
    """Derives BlendInfo and evaluates blend weights at a frame rate.

    Args:
        frame_rate: Rate used when sampling weights. Non-positive values
            fall back to 60.
    """

    def __init__(self, frame_rate: float = DEFAULT_FRAME_RATE) -> None:
        self._frame_rate = frame_rate if frame_rate > 0 else DEFAULT_FRAME_RATE

    @property
    def frame_rate(self) -> float:
        return self._frame_rate

    def set_frame_rate(self, frame_rate: float) -> None:
        """Set the evaluation frame rate. Values <= 0 are ignored."""
        if frame_rate > 0:
            self._frame_rate = frame_rate

    def get_blend_info(self, clip: ClipPlacement | ClipInfo | None) -> BlendInfo:
        """Derive blend info from a placement or a ClipInfo.

        Returns the default BlendInfo for None or for a ClipInfo without a
        placement.
        """
        if isinstance(clip, ClipInfo):
            return blend_info_from_placement(clip.placement)
        return blend_info_from_placement(clip)

    def weight_at(self, clip: ClipInfo, time: float, info: BlendInfo | None = None) -> float:
        """Blend weight of a clip at a timeline time.

        Args:
            clip: Clip to evaluate.
            time: Absolute timeline time in seconds.
            info: Precomputed BlendInfo for the clip (derived if omitted).

        Returns:
            Weight in [0, 1]; 0 outside [start, end], 1 between the ease
            windows.
        """
        _, weights = self.sample_weights(clip, [time], info)
        return float(weights[0])

    def sample_weights(
        self,
        clip: ClipInfo,
        times: Sequence[float] | np.ndarray | None = None,
        info: BlendInfo | None = None,
    ) -> tuple[np.ndarray, np.ndarray]:
        """Blend weights of a clip at many times.

        Args:
            clip: Clip to evaluate.
            times: Absolute timeline times. When None, the clip's
                [start, end] snapped inward to this processor's frame grid.
            info: Precomputed BlendInfo for the clip (derived if omitted).

        Returns:
            (times, weights). On the frame grid both arrays are empty for a
            clip without a placement.
        """
        if times is None:
            if clip.placement is None:
                empty = np.empty(0, dtype=np.float64)
                return empty, empty
            start_frame = snap_frame_up(clip.start_time, self._frame_rate)
            end_frame = snap_frame_down(clip.end_time, self._frame_rate)
            t = frame_times(start_frame, end_frame, self._frame_rate)
        else:
            t = np.asarray(times, dtype=np.float64)
        if info is None:
            info = self.get_blend_info(clip)

        inside = (t >= clip.start_time) & (t <= clip.end_time)
        weights = np.where(inside, 1.0, 0.0)

        if info.has_ease_in and info.blend_in_curve is not None:
            since_start = t - clip.start_time
            ramp = inside & (since_start < info.ease_in_duration)
            if ramp.any():
                ramp_in = info.blend_in_curve.evaluate_many(
                    since_start[ramp] / info.ease_in_duration
                )
                weights[ramp] *= np.clip(ramp_in, 0.0, 1.0)

        ease_out_start = clip.end_time - info.ease_out_duration
        if info.has_ease_out and info.blend_out_curve is not None:
            ramp = inside & (t > ease_out_start)
            if ramp.any():
                ramp_out = info.blend_out_curve.evaluate_many(
                    (t[ramp] - ease_out_start) / info.ease_out_duration
                )
                weights[ramp] *= np.clip(ramp_out, 0.0, 1.0)
        return t, weights
