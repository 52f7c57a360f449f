"""Tests for MergeResult and MergedClip."""

from __future__ import annotations

import pytest

from animerge.core.merge.result import MergedClip, MergeResult
from animerge.core.timeline.models import TargetRig


class TestMergeResult:
    """Tests for MergeResult logging and success semantics."""

    def test_new_result_is_not_success(self) -> None:
        result = MergeResult(target_rig=TargetRig(name="Hero"))
        assert result.is_success is False
        assert result.logs == []

    @pytest.mark.parametrize("message", ["", None])
    def test_empty_messages_are_ignored(self, message: str | None) -> None:
        result = MergeResult()
        result.add_log(message)
        result.add_error_log(message)
        assert result.logs == []

    def test_error_prefix(self) -> None:
        result = MergeResult()
        result.add_error_log("bad binding")
        assert result.logs == ["[Error] bad binding"]

    def test_log_order_is_kept(self) -> None:
        result = MergeResult()
        result.add_log("first")
        result.add_error_log("second")
        result.add_log("third")
        assert result.logs == ["first", "[Error] second", "third"]
        assert result.error_logs == ["[Error] second"]

    def test_success_follows_generated_clip(self) -> None:
        result = MergeResult(target_rig=TargetRig(name="Hero"))
        result.generated_clip = MergedClip(name="Hero_Merged", frame_rate=30.0)
        assert result.is_success is True


def test_merged_clip_requires_positive_frame_rate() -> None:
    with pytest.raises(ValueError):
        MergedClip(name="x", frame_rate=0.0)


def test_merged_clip_length() -> None:
    clip = MergedClip(name="x", frame_rate=30.0, start_time=0.5, end_time=2.0)
    assert clip.length == pytest.approx(1.5)
