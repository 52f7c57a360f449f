"""Result types for a merge run.

``MergeResult`` accumulates the outcome for one target rig: the produced
clip (its presence defines success) and an ordered diagnostic log.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from animerge.core.curves.models import CurveBindingPair
from animerge.core.timeline.models import TargetRig

ERROR_PREFIX = "[Error] "


class MergedClip(BaseModel):
    """The flattened clip produced for one rig.

    Attributes:
        name: Clip name.
        frame_rate: Frame rate every curve is sampled at.
        curves: Merged (binding, curve) pairs in first-seen binding order.
        start_time: Earliest key time over all curves.
        end_time: Latest key time over all curves.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    frame_rate: float = Field(gt=0.0)
    curves: list[CurveBindingPair] = Field(default_factory=list)
    start_time: float = 0.0
    end_time: float = 0.0

    @property
    def length(self) -> float:
        return self.end_time - self.start_time


class MergeResult(BaseModel):
    """Outcome of merging every eligible track bound to one rig.

    Mutated only through ``add_log``/``add_error_log``; both ignore
    None or empty messages.

    Attributes:
        target_rig: Rig the result belongs to.
        generated_clip: The merged clip, or None when nothing was produced.
        logs: Ordered diagnostic entries. Errors carry the "[Error] " prefix.

    Example:
        >>> result = MergeResult(target_rig=TargetRig(name="Hero"))
        >>> result.add_error_log("no curves")
        >>> result.logs
        ['[Error] no curves']
        >>> result.is_success
        False
    """

    model_config = ConfigDict(validate_assignment=True)

    target_rig: TargetRig | None = None
    generated_clip: MergedClip | None = None
    logs: list[str] = Field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return self.generated_clip is not None

    @property
    def error_logs(self) -> list[str]:
        return [entry for entry in self.logs if entry.startswith(ERROR_PREFIX)]

    def add_log(self, message: str | None) -> None:
        if not message:
            return
        self.logs.append(message)

    def add_error_log(self, message: str | None) -> None:
        if not message:
            return
        self.logs.append(ERROR_PREFIX + message)
