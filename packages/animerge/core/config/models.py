"""Configuration models for animerge."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from animerge.core.curves.classifiers import CurveClass


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    filename: str | None = Field(default=None, description="Log file (stdout when None)")
    structured: bool = Field(default=False, description="Emit JSON records")


class MergeConfig(BaseModel):
    """Settings for a merge run.

    Attributes:
        frame_rate: Output frame rate (samples per second).
        output_dir: Directory merged clips are written to.
        output_format: "json" or "yaml".
        pass_through_classes: Curve classes taken from the single
            highest-priority contributor instead of being blended.
    """

    model_config = ConfigDict(frozen=True)

    frame_rate: float = Field(default=60.0, gt=0.0, description="Output samples per second")

    output_dir: str = Field(default="Assets", description="Output directory for merged clips")

    output_format: str = Field(default="json", pattern="^(json|yaml)$")

    pass_through_classes: frozenset[CurveClass] = Field(
        default=frozenset({CurveClass.SHAPE_WEIGHT, CurveClass.MUSCLE_AXIS}),
        description="Curve classes merged by priority pass-through",
    )


class AppConfig(BaseModel):
    """Application-level configuration."""

    model_config = ConfigDict(extra="ignore")

    logging: LoggingConfig = LoggingConfig()
    merge: MergeConfig = MergeConfig()

    @classmethod
    def default_path(cls) -> Path:
        """Default path for application config."""
        return Path("animerge.yaml")
