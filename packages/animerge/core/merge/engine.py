"""Merge orchestration.

Flattens every eligible track bound to one rig into a single clip sampled
on a uniform frame grid.

Combination rules, per binding and per grid time:

- Contributors of a track are the clips covering the time. When none
  covers it, the closest earlier clip contributes through its
  post-extrapolation, else the closest later clip through its
  pre-extrapolation (weight 1).
- ORDINARY bindings: a track's value is the weight-normalized average of
  its contributors. Tracks are layered in ascending priority; the first
  contributing track sets the base value, every later track blends over
  the accumulated value by its coverage (largest contributor weight).
- Pass-through classes (shape weights and muscle axes by default) take the
  value of the single highest-priority contributor. Muscle axes are only
  recognised on humanoid rigs.

Clips placed with a scene offset have it baked into their root curves
before sampling. Each binding is sampled for the whole frame grid at once.

Override tracks never rank below the track they override: their effective
priority is max(own priority, parent's effective priority), ties broken by
depth and then arena order.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import NamedTuple

import numpy as np
from pydantic import BaseModel, ConfigDict

from animerge.core.config.models import MergeConfig
from animerge.core.curves.classifiers import RootMotionDetector, classify
from animerge.core.curves.models import (
    AnimationCurve,
    CurveBinding,
    CurveBindingPair,
    Keyframe,
    SourceClip,
)
from animerge.core.curves.offsets import SceneOffsetApplier
from animerge.core.curves.resampler import CurveResampler
from animerge.core.curves.sampling import frame_times, snap_frame_down, snap_frame_up
from animerge.core.merge.diagnostics import NullDiagnostics
from animerge.core.merge.errors import MergeError, UnresolvedBindingError
from animerge.core.merge.protocols import BonePathResolver, DiagnosticsSink
from animerge.core.merge.result import MergedClip, MergeResult
from animerge.core.timeline.blending import BlendProcessor
from animerge.core.timeline.extrapolation import ExtrapolationProcessor
from animerge.core.timeline.models import ClipInfo, TargetRig, TrackArena, TrackInfo
from animerge.core.utils.logging import get_logger, log_performance

logger = logging.getLogger(__name__)

CancelCheck = Callable[[], bool]


class EligibleTrack(BaseModel):
    """A track selected for merging, with its resolved ordering.

    Attributes:
        index: Arena index.
        track: The track itself.
        priority: Effective priority (never below the parent's).
        depth: Override depth (0 for root tracks).
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    index: int
    track: TrackInfo
    priority: int
    depth: int

    @property
    def sort_key(self) -> tuple[int, int, int]:
        return (self.priority, self.depth, self.index)


class _TrackSamples(NamedTuple):
    present: np.ndarray
    values: np.ndarray
    coverage: np.ndarray


class _TrackClips(BaseModel):
    """Valid clips of one eligible track, prepared for one frame grid.

    Attributes:
        entry: The eligible track.
        clips: Its valid clips.
        curve_maps: Per clip, binding to curve with scene offsets baked in.
        weights: Per clip, blend weight at every grid time.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    entry: EligibleTrack
    clips: list[ClipInfo]
    curve_maps: list[dict[CurveBinding, AnimationCurve | None]]
    weights: list[np.ndarray]


class MergeEngine:
    """Merges layered tracks into one clip per rig.

    Args:
        config: Merge settings (defaults when None).
        diagnostics: Progress/log sink (silent when None).
        bone_path_resolver: Retargets non-root binding paths to the rig.

    Example:
        >>> engine = MergeEngine(MergeConfig(frame_rate=30))
        >>> results = engine.merge_all(timeline.arena, name=timeline.name)
        >>> [r.is_success for r in results]
        [True]
    """

    def __init__(
        self,
        config: MergeConfig | None = None,
        diagnostics: DiagnosticsSink | None = None,
        bone_path_resolver: BonePathResolver | None = None,
    ) -> None:
        self.config = config or MergeConfig()
        self.diagnostics: DiagnosticsSink = diagnostics or NullDiagnostics()
        self.bone_path_resolver = bone_path_resolver
        self.blend_processor = BlendProcessor(self.config.frame_rate)
        self.extrapolation = ExtrapolationProcessor()
        self.resampler = CurveResampler()
        self.root_motion = RootMotionDetector()
        self.scene_offsets = SceneOffsetApplier(self.root_motion)

    # ------------------------------------------------------------------
    # Track selection
    # ------------------------------------------------------------------

    def collect_eligible(
        self,
        arena: TrackArena,
        target: TargetRig,
        result: MergeResult | None = None,
    ) -> list[EligibleTrack]:
        """Select and order the tracks that merge into target.

        Muted tracks are skipped together with their overrides. Unbound
        tracks are reported as errors on result (when given).

        Args:
            arena: All tracks of the timeline.
            target: Rig to collect tracks for.
            result: Receives error entries for unbound tracks.

        Returns:
            Eligible tracks in ascending merge order.
        """
        eligible: list[EligibleTrack] = []
        priorities: dict[int, int] = {}
        skipped: set[int] = set()

        for index, depth in arena.walk():
            track = arena[index]
            parent = arena.parent_of(index)
            if track.muted or (parent is not None and parent in skipped):
                skipped.add(index)
                continue

            priority = track.priority
            if parent is not None:
                priority = max(priority, priorities[parent])
            priorities[index] = priority

            if track.bound_target is None:
                message = f"Track '{track.name}' is not bound to a rig"
                if result is not None:
                    result.add_error_log(message)
                self.diagnostics.log_warning(message)
                continue
            if track.bound_target != target:
                continue
            eligible.append(EligibleTrack(index=index, track=track, priority=priority, depth=depth))

        eligible.sort(key=lambda e: e.sort_key)
        return eligible

    def targets_of(self, arena: TrackArena) -> list[TargetRig]:
        """Rigs bound by non-muted tracks, in first-seen order."""
        targets: list[TargetRig] = []
        skipped: set[int] = set()
        for index, _depth in arena.walk():
            track = arena[index]
            parent = arena.parent_of(index)
            if track.muted or (parent is not None and parent in skipped):
                skipped.add(index)
                continue
            if track.bound_target is not None and track.bound_target not in targets:
                targets.append(track.bound_target)
        return targets

    # ------------------------------------------------------------------
    # Merging
    # ------------------------------------------------------------------

    def merge_all(
        self,
        arena: TrackArena,
        name: str | None = None,
        frame_rate: float | None = None,
        should_cancel: CancelCheck | None = None,
    ) -> list[MergeResult]:
        """Merge every bound rig of the arena.

        Returns:
            One MergeResult per rig, in first-seen order.
        """
        targets = self.targets_of(arena)
        if not targets:
            self.diagnostics.log_warning("No tracks are bound to a rig")
            logger.warning("Nothing to merge: no bound, unmuted tracks")
            return []

        results: list[MergeResult] = []
        for target in targets:
            if should_cancel is not None and should_cancel():
                logger.info("Merge cancelled before rig '%s'", target.name)
                break
            results.append(self.merge_target(arena, target, name, frame_rate, should_cancel))
        return results

    @log_performance
    def merge_target(
        self,
        arena: TrackArena,
        target: TargetRig,
        name: str | None = None,
        frame_rate: float | None = None,
        should_cancel: CancelCheck | None = None,
    ) -> MergeResult:
        """Merge all eligible tracks bound to one rig.

        Args:
            arena: All tracks of the timeline.
            target: Rig to merge for.
            name: Timeline name used to name the merged clip.
            frame_rate: Output rate (config frame rate when None or <= 0).
            should_cancel: Polled between tracks and bindings. Returning
                True abandons the run without a clip.

        Returns:
            MergeResult for target. Success iff at least one curve was
            produced.
        """
        rate = frame_rate if frame_rate is not None and frame_rate > 0 else self.config.frame_rate
        result = MergeResult(target_rig=target)
        self.diagnostics.begin(f"Merging tracks for '{target.name}'")
        try:
            self._merge_into(result, arena, target, name, rate, should_cancel)
        finally:
            self.diagnostics.end()

        if result.is_success:
            self.diagnostics.log_success(f"Merged clip for '{target.name}'")
        else:
            self.diagnostics.log_error(f"No clip produced for '{target.name}'")
        return result

    def _merge_into(
        self,
        result: MergeResult,
        arena: TrackArena,
        target: TargetRig,
        name: str | None,
        frame_rate: float,
        should_cancel: CancelCheck | None,
    ) -> None:
        log = get_logger(__name__, timeline=name, rig=target.name)
        eligible = self.collect_eligible(arena, target, result)
        if not eligible:
            result.add_error_log(f"No eligible tracks bound to '{target.name}'")
            return

        collected: list[tuple[EligibleTrack, list[ClipInfo]]] = []
        for position, entry in enumerate(eligible):
            if should_cancel is not None and should_cancel():
                result.add_error_log("Merge cancelled")
                return
            self.diagnostics.update(
                f"Collecting clips of '{entry.track.name}'", (position + 1) / len(eligible) * 0.1
            )
            clips = entry.track.valid_clips
            invalid = len(entry.track.clips) - len(clips)
            if invalid:
                result.add_log(
                    f"Track '{entry.track.name}': skipped {invalid} clip(s) without data"
                )
            if clips:
                collected.append((entry, clips))

        if not collected:
            result.add_error_log(f"Tracks bound to '{target.name}' contain no clips")
            return

        start = min(clip.start_time for _, clips in collected for clip in clips)
        end = max(clip.end_time for _, clips in collected for clip in clips)
        times = frame_times(
            snap_frame_down(start, frame_rate), snap_frame_up(end, frame_rate), frame_rate
        )
        self.blend_processor.set_frame_rate(frame_rate)
        layers = [self._prepare_layer(entry, clips, times) for entry, clips in collected]

        bindings = self._bindings_of(layers)
        root_motion = [b for b in bindings if self.root_motion.is_root_motion_property(b)]
        if root_motion:
            result.add_log(f"Root motion channels: {len(root_motion)}")
        log.debug("Merging %d bindings over %d samples", len(bindings), len(times))

        merged: list[CurveBindingPair] = []
        produced: set[CurveBinding] = set()
        for position, binding in enumerate(bindings):
            if should_cancel is not None and should_cancel():
                result.add_error_log("Merge cancelled")
                return
            self.diagnostics.update(
                f"Merging {binding.key}", 0.1 + 0.9 * (position + 1) / len(bindings)
            )
            curve_class = classify(binding, humanoid=target.humanoid)
            pass_through = curve_class in self.config.pass_through_classes
            try:
                output_binding = self._resolve_binding(target, binding)
                if output_binding in produced:
                    raise MergeError(
                        f"Resolved path '{output_binding.path}' is already animated",
                        binding_key=binding.key,
                    )
                curve = self._merge_binding(layers, binding, times, pass_through)
            except (MergeError, ValueError) as e:
                result.add_error_log(str(e))
                self.diagnostics.log_error(str(e))
                log.debug("Skipped binding: %s", e, extra={"binding": binding.key})
                continue

            if curve is None:
                result.add_log(f"Skipped {binding.key}: no keyed samples")
                continue
            if pass_through:
                log.debug(
                    "Pass-through %s merged", curve_class.value, extra={"binding": binding.key}
                )
            produced.add(output_binding)
            merged.append(CurveBindingPair(binding=output_binding, curve=curve))

        curves = self.resampler.resample(merged, frame_rate) or []
        if not curves:
            result.add_error_log(f"No curves produced for '{target.name}'")
            return

        keyed = [pair.curve for pair in curves if pair.curve is not None and len(pair.curve)]
        clip_name = f"{name}_{target.name}_Merged" if name else f"{target.name}_Merged"
        result.generated_clip = MergedClip(
            name=clip_name,
            frame_rate=frame_rate,
            curves=curves,
            start_time=min(c.start_time for c in keyed),
            end_time=max(c.end_time for c in keyed),
        )
        result.add_log(
            f"Merged {len(curves)} curves from {len(layers)} track(s) at {frame_rate:g} fps"
        )
        log.info("Merged %d curves from %d track(s)", len(curves), len(layers))

    def _prepare_layer(
        self, entry: EligibleTrack, clips: list[ClipInfo], times: np.ndarray
    ) -> _TrackClips:
        curve_maps: list[dict[CurveBinding, AnimationCurve | None]] = []
        weights: list[np.ndarray] = []
        for clip in clips:
            source = clip.source or SourceClip()
            if clip.has_scene_offset:
                pairs = self.scene_offsets.apply(
                    source.pairs, clip.scene_offset_position, clip.scene_offset_rotation
                )
                source = source.model_copy(update={"pairs": pairs})
            curve_maps.append(source.curve_map())
            _, clip_weights = self.blend_processor.sample_weights(clip, times)
            weights.append(clip_weights)
        return _TrackClips(entry=entry, clips=clips, curve_maps=curve_maps, weights=weights)

    def _bindings_of(self, layers: list[_TrackClips]) -> list[CurveBinding]:
        seen: dict[CurveBinding, None] = {}
        for layer in layers:
            for curves in layer.curve_maps:
                for binding, curve in curves.items():
                    if curve is not None and len(curve):
                        seen.setdefault(binding, None)
        return list(seen)

    def _resolve_binding(self, target: TargetRig, binding: CurveBinding) -> CurveBinding:
        if self.bone_path_resolver is None or not binding.path:
            return binding
        path = self.bone_path_resolver.resolve(target, binding.path)
        if path is None:
            raise UnresolvedBindingError(
                f"Bone path '{binding.path}' has no counterpart on rig '{target.name}'",
                binding_key=binding.key,
            )
        return binding.with_path(path)

    def _merge_binding(
        self,
        layers: list[_TrackClips],
        binding: CurveBinding,
        times: np.ndarray,
        pass_through: bool,
    ) -> AnimationCurve | None:
        present = np.zeros(times.shape, dtype=bool)
        merged = np.zeros_like(times)
        with np.errstate(invalid="ignore", over="ignore"):
            for layer in layers:
                track = self._sample_track(layer, binding, times, pass_through)
                if track is None:
                    continue
                if pass_through:
                    # Layers ascend in priority, so the last one present wins.
                    merged = np.where(track.present, track.values, merged)
                else:
                    blended = merged + (track.values - merged) * track.coverage
                    merged = np.where(track.present & ~present, track.values, merged)
                    merged = np.where(track.present & present, blended, merged)
                present |= track.present

        if not present.any():
            return None
        point_times = times[present]
        values = merged[present]
        bad = ~np.isfinite(values)
        if bad.any():
            t = float(point_times[np.argmax(bad)])
            raise MergeError(f"Non-finite value at t={t:.6f}", binding_key=binding.key)
        if len(values) == 1:
            key = Keyframe(time=float(point_times[0]), value=float(values[0]))
            return AnimationCurve(keys=[key])
        return AnimationCurve.linear(zip(point_times.tolist(), values.tolist(), strict=True))

    def _sample_track(
        self,
        layer: _TrackClips,
        binding: CurveBinding,
        times: np.ndarray,
        pass_through: bool,
    ) -> _TrackSamples | None:
        """Value of one track for one binding at every grid time.

        Clips covering a time contribute with their blend weight. Where no
        clip covers a time, the nearest earlier clip contributes through its
        post-extrapolation, else the nearest later clip through its
        pre-extrapolation, at full weight.
        """
        covered = np.zeros(times.shape, dtype=bool)
        count = np.zeros_like(times)
        total = np.zeros_like(times)
        weighted = np.zeros_like(times)
        plain = np.zeros_like(times)
        max_weight = np.zeros_like(times)

        best_value = np.zeros_like(times)
        best_weight = np.full_like(times, -np.inf)
        best_start = np.full_like(times, -np.inf)

        before_end = np.full_like(times, -np.inf)
        before_value = np.zeros_like(times)
        before_valid = np.zeros(times.shape, dtype=bool)
        after_start = np.full_like(times, np.inf)
        after_value = np.zeros_like(times)
        after_valid = np.zeros(times.shape, dtype=bool)

        found = False
        for clip, curves, weights in zip(layer.clips, layer.curve_maps, layer.weights, strict=True):
            curve = curves.get(binding)
            if curve is None or len(curve) == 0:
                continue
            found = True
            values, valid = self.extrapolation.sample(curve, clip, times)

            inside = (times >= clip.start_time) & (times <= clip.end_time)
            w = np.where(inside, weights, 0.0)
            v = np.where(inside, values, 0.0)
            covered |= inside
            count += inside
            total += w
            weighted += v * w
            plain += v
            max_weight = np.where(inside, np.maximum(max_weight, w), max_weight)

            # Highest weight wins; later start breaks ties; first clip otherwise.
            better = inside & (
                (w > best_weight) | ((w == best_weight) & (clip.start_time > best_start))
            )
            best_value = np.where(better, values, best_value)
            best_weight = np.where(better, w, best_weight)
            best_start = np.where(better, clip.start_time, best_start)

            closer_before = (times > clip.end_time) & (clip.end_time > before_end)
            before_end = np.where(closer_before, clip.end_time, before_end)
            before_value = np.where(closer_before, values, before_value)
            before_valid = np.where(closer_before, valid, before_valid)

            closer_after = (times < clip.start_time) & (clip.start_time < after_start)
            after_start = np.where(closer_after, clip.start_time, after_start)
            after_value = np.where(closer_after, values, after_value)
            after_valid = np.where(closer_after, valid, after_valid)

        if not found:
            return None

        if pass_through:
            track_values = best_value
        else:
            # Zero total weight falls back to the plain mean of the values.
            normalized = weighted / np.where(total > 0.0, total, 1.0)
            track_values = np.where(total > 0.0, normalized, plain / np.maximum(count, 1.0))

        fallback = ~covered & (before_valid | after_valid)
        fallback_values = np.where(before_valid, before_value, after_value)
        return _TrackSamples(
            present=covered | fallback,
            values=np.where(covered, track_values, fallback_values),
            coverage=np.where(covered, np.clip(max_weight, 0.0, 1.0), 1.0),
        )
