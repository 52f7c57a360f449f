"""Writes merged clips to disk."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from animerge.core.export.checkers import ImportlibPackageChecker, PathFileExistenceChecker
from animerge.core.export.naming import FileNameGenerator
from animerge.core.merge.protocols import PackageChecker
from animerge.core.merge.result import MergedClip, MergeResult

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("json", "yaml")


def clip_document(clip: MergedClip) -> dict[str, Any]:
    """Plain-data form of a merged clip.

    Keys are written as ``[time, value, in_tangent, out_tangent]``.
    """
    curves: list[dict[str, Any]] = []
    for pair in clip.curves:
        keys = [] if pair.curve is None else pair.curve.keys
        curves.append(
            {
                "path": pair.binding.path,
                "type": pair.binding.target_kind.value,
                "property": pair.binding.property_name,
                "keys": [[k.time, k.value, k.in_tangent, k.out_tangent] for k in keys],
            }
        )
    return {
        "name": clip.name,
        "frame_rate": clip.frame_rate,
        "start_time": clip.start_time,
        "end_time": clip.end_time,
        "curves": curves,
    }


class ClipExporter:
    """Serializes a MergeResult's clip into the output directory.

    Args:
        name_generator: Output naming (a filesystem-backed one when None).
        package_checker: Gate for optional formats.
    """

    def __init__(
        self,
        name_generator: FileNameGenerator | None = None,
        package_checker: PackageChecker | None = None,
    ) -> None:
        self.name_generator = name_generator or FileNameGenerator(PathFileExistenceChecker())
        self.package_checker = package_checker or ImportlibPackageChecker()

    def export(
        self,
        result: MergeResult,
        directory: str | Path,
        timeline_name: str | None,
        fmt: str = "json",
    ) -> Path | None:
        """Write the generated clip of result.

        Failures are recorded on result with add_error_log; the path of the
        written file is recorded with add_log.

        Args:
            result: Result holding the clip to write.
            directory: Output directory (created if missing).
            timeline_name: Timeline part of the file name.
            fmt: "json" or "yaml".

        Returns:
            Path of the written file, or None on failure.
        """
        if result.generated_clip is None:
            result.add_error_log("Nothing to export: no clip was generated")
            return None
        if fmt not in SUPPORTED_FORMATS:
            result.add_error_log(f"Unsupported export format: {fmt}")
            return None
        if fmt == "yaml" and not self.package_checker.is_available("yaml"):
            result.add_error_log("YAML export requires the PyYAML package")
            return None

        rig_name = result.target_rig.name if result.target_rig is not None else None
        document = clip_document(result.generated_clip)
        try:
            directory = Path(directory)
            directory.mkdir(parents=True, exist_ok=True)
            unique = self.name_generator.generate_unique_path(directory, timeline_name, rig_name)
            path = Path(unique)
            with path.open("w", encoding="utf-8") as f:
                if fmt == "json":
                    json.dump(document, f, indent=2)
                else:
                    yaml.safe_dump(document, f, sort_keys=False)
        except OSError as e:
            logger.error("Export failed for rig %s: %s", rig_name, e)
            result.add_error_log(f"Failed to write clip: {e}")
            return None

        result.add_log(f"Exported {path}")
        logger.info("Exported merged clip to %s", path)
        return path
