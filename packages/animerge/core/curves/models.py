"""Curve data models.

Keyframed float curves, the bindings that attach a curve to a property on
a rig, and the per-clip curve provider.
"""

from __future__ import annotations

import bisect
from collections.abc import Iterable, Sequence
from enum import Enum

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from animerge.core.utils.math import hermite


class Keyframe(BaseModel):
    """A single key on an AnimationCurve.

    Attributes:
        time: Key time in seconds.
        value: Key value.
        in_tangent: Incoming slope (value per second).
        out_tangent: Outgoing slope (value per second). Infinite tangents
            make the segment stepped.
    """

    model_config = ConfigDict(frozen=True)

    time: float
    value: float
    in_tangent: float = 0.0
    out_tangent: float = 0.0


class AnimationCurve(BaseModel):
    """Keyframed float curve with cubic Hermite evaluation.

    Keys are kept sorted by time. Evaluation before the first key or after
    the last key clamps to the boundary value.

    Example:
        >>> curve = AnimationCurve.linear([(0.0, 0.0), (1.0, 10.0)])
        >>> curve.evaluate(0.25)
        2.5
    """

    keys: list[Keyframe] = Field(default_factory=list)

    _times: list[float] = PrivateAttr(default_factory=list)

    def model_post_init(self, context: object) -> None:
        self.keys = sorted(self.keys, key=lambda k: k.time)
        self._times = [k.time for k in self.keys]

    @classmethod
    def linear(cls, points: Iterable[tuple[float, float]]) -> AnimationCurve:
        """Build a curve whose tangents follow the segment slopes.

        Evaluation of the result is exactly piecewise linear.

        Args:
            points: (time, value) pairs in any order.

        Returns:
            New AnimationCurve
        """
        pts = sorted((float(t), float(v)) for t, v in points)
        keys: list[Keyframe] = []
        for i, (t, v) in enumerate(pts):
            in_slope = _slope(pts[i - 1], pts[i]) if i > 0 else 0.0
            out_slope = _slope(pts[i], pts[i + 1]) if i < len(pts) - 1 else 0.0
            if i == 0:
                in_slope = out_slope
            if i == len(pts) - 1:
                out_slope = in_slope
            keys.append(Keyframe(time=t, value=v, in_tangent=in_slope, out_tangent=out_slope))
        return cls(keys=keys)

    @classmethod
    def ease_in_out(
        cls, time_start: float, value_start: float, time_end: float, value_end: float
    ) -> AnimationCurve:
        """Smooth S-shaped curve with flat tangents at both ends."""
        if time_start == time_end:
            return cls(keys=[Keyframe(time=time_start, value=value_start)])
        return cls(
            keys=[
                Keyframe(time=time_start, value=value_start),
                Keyframe(time=time_end, value=value_end),
            ]
        )

    @classmethod
    def constant(cls, time_start: float, time_end: float, value: float) -> AnimationCurve:
        """Flat curve holding value between two keys."""
        return cls.ease_in_out(time_start, value, time_end, value)

    def __len__(self) -> int:
        return len(self.keys)

    @property
    def start_time(self) -> float:
        """Time of the first key (0.0 for an empty curve)."""
        return self.keys[0].time if self.keys else 0.0

    @property
    def end_time(self) -> float:
        """Time of the last key (0.0 for an empty curve)."""
        return self.keys[-1].time if self.keys else 0.0

    @property
    def length(self) -> float:
        """Span between first and last key in seconds."""
        return self.end_time - self.start_time

    def add_key(self, key: Keyframe) -> None:
        """Insert a key, replacing any key at exactly the same time."""
        idx = bisect.bisect_left(self._times, key.time)
        if idx < len(self._times) and self._times[idx] == key.time:
            self.keys[idx] = key
            return
        self.keys.insert(idx, key)
        self._times.insert(idx, key.time)

    def evaluate(self, t: float) -> float:
        """Evaluate the curve at time t.

        Args:
            t: Time in seconds

        Returns:
            Curve value. An empty curve evaluates to 0.0.
        """
        if not self.keys:
            return 0.0
        if t <= self._times[0]:
            return self.keys[0].value
        if t >= self._times[-1]:
            return self.keys[-1].value

        idx = bisect.bisect_right(self._times, t)
        k0 = self.keys[idx - 1]
        k1 = self.keys[idx]
        return hermite(k0.time, k0.value, k0.out_tangent, k1.time, k1.value, k1.in_tangent, t)

    def evaluate_many(self, times: Sequence[float] | np.ndarray) -> np.ndarray:
        """Evaluate the curve at each of the given times.

        Vectorized form of ``evaluate``: same segment lookup, same Hermite
        basis, same clamping outside the key range.

        Args:
            times: Times in seconds, in any order.

        Returns:
            Float array with one value per time.
        """
        t = np.asarray(times, dtype=np.float64)
        if not self.keys:
            return np.zeros_like(t)
        values = np.array([k.value for k in self.keys], dtype=np.float64)
        if len(self.keys) == 1:
            return np.full_like(t, values[0])

        key_times = np.array(self._times, dtype=np.float64)
        out_tangents = np.array([k.out_tangent for k in self.keys[:-1]], dtype=np.float64)
        in_tangents = np.array([k.in_tangent for k in self.keys[1:]], dtype=np.float64)

        idx = np.clip(np.searchsorted(key_times, t, side="right"), 1, len(key_times) - 1)
        t0, t1 = key_times[idx - 1], key_times[idx]
        v0, v1 = values[idx - 1], values[idx]
        m0, m1 = out_tangents[idx - 1], in_tangents[idx - 1]

        stepped = np.isinf(m0) | np.isinf(m1)
        m0 = np.where(stepped, 0.0, m0)
        m1 = np.where(stepped, 0.0, m1)
        dt = t1 - t0
        s = (t - t0) / np.where(dt > 0.0, dt, 1.0)
        s2 = s * s
        s3 = s2 * s
        h00 = 2.0 * s3 - 3.0 * s2 + 1.0
        h10 = s3 - 2.0 * s2 + s
        h01 = -2.0 * s3 + 3.0 * s2
        h11 = s3 - s2
        with np.errstate(invalid="ignore"):
            result = h00 * v0 + h10 * dt * m0 + h01 * v1 + h11 * dt * m1
        result = np.where(stepped, np.where(t < t1, v0, v1), result)
        result = np.where(dt <= 0.0, v0, result)
        result = np.where(t <= key_times[0], values[0], result)
        return np.where(t >= key_times[-1], values[-1], result)


def _slope(a: tuple[float, float], b: tuple[float, float]) -> float:
    dt = b[0] - a[0]
    if dt <= 0.0:
        return 0.0
    return (b[1] - a[1]) / dt


class TargetKind(str, Enum):
    """Component kind a curve binding animates."""

    TRANSFORM = "transform"
    SKINNED_MESH_RENDERER = "skinned_mesh_renderer"
    ANIMATOR = "animator"
    GAME_OBJECT = "game_object"
    OTHER = "other"


class CurveBinding(BaseModel):
    """Identifies one animated property on a rig.

    Attributes:
        path: Transform path relative to the rig root ("" is the root).
        target_kind: Component kind that owns the property.
        property_name: Property name, e.g. "localPosition.x".
    """

    model_config = ConfigDict(frozen=True)

    path: str = ""
    target_kind: TargetKind = TargetKind.TRANSFORM
    property_name: str = ""

    @property
    def key(self) -> str:
        """Stable identity string used to group curves across clips."""
        return f"{self.path}|{self.target_kind.value}|{self.property_name}"

    def with_path(self, path: str) -> CurveBinding:
        """Return a copy bound to a different path."""
        return self.model_copy(update={"path": path})


class CurveBindingPair(BaseModel):
    """A binding with its curve. The curve may legitimately be absent."""

    model_config = ConfigDict(frozen=True)

    binding: CurveBinding
    curve: AnimationCurve | None = None

    @property
    def has_keys(self) -> bool:
        return self.curve is not None and len(self.curve) > 0


class SourceClip(BaseModel):
    """The curve data a placed clip plays back.

    Attributes:
        name: Source clip name.
        pairs: All (binding, curve) pairs of the clip.
    """

    model_config = ConfigDict(frozen=True)

    name: str = ""
    pairs: list[CurveBindingPair] = Field(default_factory=list)

    def get_curve_bindings(self) -> list[CurveBinding]:
        """List bindings in clip order."""
        return [pair.binding for pair in self.pairs]

    def get_curve(self, binding: CurveBinding) -> AnimationCurve | None:
        """Look up the curve for a binding, or None."""
        for pair in self.pairs:
            if pair.binding == binding:
                return pair.curve
        return None

    def curve_map(self) -> dict[CurveBinding, AnimationCurve | None]:
        """Map every binding to its curve. The first pair of a binding wins."""
        curves: dict[CurveBinding, AnimationCurve | None] = {}
        for pair in self.pairs:
            curves.setdefault(pair.binding, pair.curve)
        return curves

    @property
    def duration(self) -> float:
        """Longest key extent over all curves (0.0 when empty)."""
        ends = [p.curve.end_time for p in self.pairs if p.curve is not None and len(p.curve)]
        return max(ends) if ends else 0.0


