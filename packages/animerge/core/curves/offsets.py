"""Scene offsets for root curves.

A clip placed with a scene offset plays its root motion relative to a
different origin. The offset is baked into the clip's root position and
root rotation curves before merging, for both the transform channels of
the root bone and the animator root-motion channels.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

import numpy as np

from animerge.core.curves.classifiers import (
    ROOT_POSITION_PREFIX,
    ROOT_ROTATION_PREFIX,
    RootMotionDetector,
)
from animerge.core.curves.models import (
    AnimationCurve,
    CurveBinding,
    CurveBindingPair,
    Keyframe,
    TargetKind,
)

logger = logging.getLogger(__name__)

Position = tuple[float, float, float]
Rotation = tuple[float, float, float, float]

ZERO_POSITION: Position = (0.0, 0.0, 0.0)
IDENTITY_ROTATION: Rotation = (0.0, 0.0, 0.0, 1.0)

POSITION_AXES = ("x", "y", "z")
ROTATION_AXES = ("x", "y", "z", "w")

TRANSFORM_POSITION_PREFIX = "localPosition."
TRANSFORM_ROTATION_PREFIX = "localRotation."

# Offset components below this are ignored.
OFFSET_EPSILON = 1e-6


def multiply_quaternions(a: Rotation, b: np.ndarray) -> np.ndarray:
    """Hamilton product a * b for one quaternion a and an (N, 4) array b.

    Both use (x, y, z, w) component order.
    """
    ax, ay, az, aw = a
    bx, by, bz, bw = b[:, 0], b[:, 1], b[:, 2], b[:, 3]
    return np.stack(
        [
            aw * bx + ax * bw + ay * bz - az * by,
            aw * by - ax * bz + ay * bw + az * bx,
            aw * bz + ax * by - ay * bx + az * bw,
            aw * bw - ax * bx - ay * by - az * bz,
        ],
        axis=1,
    )


class SceneOffsetApplier:
    """Bakes a position and rotation offset into a clip's root curves.

    Position offsets are added to every key of the root position curves
    (tangents are kept). Rotation offsets premultiply the root rotation
    quaternion at the union of the four component curves' key times; a
    rotation channel is only rewritten when all four components are keyed.

    Args:
        root_motion: Detector used to recognise animator root-motion
            channels.
    """

    def __init__(self, root_motion: RootMotionDetector | None = None) -> None:
        self.root_motion = root_motion or RootMotionDetector()

    def apply(
        self,
        pairs: Sequence[CurveBindingPair],
        position: Position = ZERO_POSITION,
        rotation: Rotation = IDENTITY_ROTATION,
    ) -> list[CurveBindingPair]:
        """Return pairs with the offsets baked in.

        Args:
            pairs: Curve pairs of one clip.
            position: Offset added to root positions.
            rotation: Quaternion (x, y, z, w) applied before the root
                rotation.

        Returns:
            A new list in the original order. Pairs that are not root
            curves are passed through unchanged.
        """
        result = list(pairs)
        if not result:
            return result
        has_position = any(abs(c) > OFFSET_EPSILON for c in position)
        has_rotation = tuple(rotation) != IDENTITY_ROTATION
        if not has_position and not has_rotation:
            return result

        channels: list[tuple[TargetKind, str, str, Callable[[CurveBinding], bool]]] = [
            (
                TargetKind.TRANSFORM,
                TRANSFORM_POSITION_PREFIX,
                TRANSFORM_ROTATION_PREFIX,
                lambda _binding: True,
            ),
            (
                TargetKind.ANIMATOR,
                ROOT_POSITION_PREFIX,
                ROOT_ROTATION_PREFIX,
                self.root_motion.is_root_motion_property,
            ),
        ]
        for kind, position_prefix, rotation_prefix, accept in channels:
            if has_position:
                self._offset_position(result, kind, position_prefix, accept, position)
            if has_rotation:
                self._offset_rotation(result, kind, rotation_prefix, accept, rotation)
        return result

    def _offset_position(
        self,
        pairs: list[CurveBindingPair],
        kind: TargetKind,
        prefix: str,
        accept: Callable[[CurveBinding], bool],
        position: Position,
    ) -> None:
        for axis, offset in zip(POSITION_AXES, position, strict=True):
            if abs(offset) <= OFFSET_EPSILON:
                continue
            index = _find_root(pairs, kind, prefix + axis, accept)
            if index is None:
                continue
            pair = pairs[index]
            curve = pair.curve
            if curve is None:
                continue
            keys = [k.model_copy(update={"value": k.value + offset}) for k in curve.keys]
            pairs[index] = CurveBindingPair(binding=pair.binding, curve=AnimationCurve(keys=keys))
            logger.debug("Offset %s by %g", pair.binding.key, offset)

    def _offset_rotation(
        self,
        pairs: list[CurveBindingPair],
        kind: TargetKind,
        prefix: str,
        accept: Callable[[CurveBinding], bool],
        rotation: Rotation,
    ) -> None:
        indices: list[int] = []
        curves: list[AnimationCurve] = []
        for axis in ROTATION_AXES:
            index = _find_root(pairs, kind, prefix + axis, accept)
            if index is None:
                return
            curve = pairs[index].curve
            if curve is None:
                return
            indices.append(index)
            curves.append(curve)

        times = np.unique(np.concatenate([np.array([k.time for k in c.keys]) for c in curves]))
        original = np.stack([curve.evaluate_many(times) for curve in curves], axis=1)
        rotated = multiply_quaternions(rotation, original)

        for column, index in enumerate(indices):
            keys = [
                Keyframe(time=t, value=v)
                for t, v in zip(times.tolist(), rotated[:, column].tolist(), strict=True)
            ]
            pairs[index] = CurveBindingPair(
                binding=pairs[index].binding, curve=AnimationCurve(keys=keys)
            )
        logger.debug("Rotated %s root at %d key times", kind.value, len(times))


def _find_root(
    pairs: Sequence[CurveBindingPair],
    kind: TargetKind,
    property_name: str,
    accept: Callable[[CurveBinding], bool],
) -> int | None:
    """Index of the keyed root curve for a property, or None.

    The rig root (empty path) wins; otherwise the shallowest path, first
    one on ties.
    """
    best: int | None = None
    best_rank: tuple[bool, int] | None = None
    for index, pair in enumerate(pairs):
        binding = pair.binding
        if binding.target_kind != kind or binding.property_name != property_name:
            continue
        if not pair.has_keys or not accept(binding):
            continue
        rank = (binding.path != "", binding.path.count("/"))
        if best_rank is None or rank < best_rank:
            best, best_rank = index, rank
    return best
