"""Output file naming."""

from __future__ import annotations

import logging
from pathlib import Path

from animerge.core.merge.errors import MissingCollaboratorError
from animerge.core.merge.protocols import FileExistenceChecker

logger = logging.getLogger(__name__)

MERGED_SUFFIX = "_Merged"
CLIP_EXTENSION = ".anim"
UNKNOWN_NAME = "Unknown"


class FileNameGenerator:
    """Builds collision-free output paths for merged clips.

    Args:
        checker: Existence check used by generate_unique_path.

    Example:
        >>> FileNameGenerator().generate_base_name("Intro", "Hero")
        'Intro_Hero_Merged.anim'
    """

    def __init__(self, checker: FileExistenceChecker | None = None) -> None:
        self._checker = checker

    def set_file_existence_checker(self, checker: FileExistenceChecker | None) -> None:
        self._checker = checker

    def generate_base_name(self, timeline_name: str | None, rig_name: str | None) -> str:
        """Base file name; empty parts become "Unknown"."""
        timeline = timeline_name or UNKNOWN_NAME
        rig = rig_name or UNKNOWN_NAME
        return f"{timeline}_{rig}{MERGED_SUFFIX}{CLIP_EXTENSION}"

    def generate_unique_path(
        self, directory: str | Path, timeline_name: str | None, rig_name: str | None
    ) -> str:
        """First unused path for the clip in directory.

        Appends "(N)" before the extension for the first N >= 1 whose path
        does not exist yet.

        Raises:
            MissingCollaboratorError: If no FileExistenceChecker was supplied.
        """
        if self._checker is None:
            raise MissingCollaboratorError(
                "generate_unique_path requires a FileExistenceChecker"
            )

        base = self.generate_base_name(timeline_name, rig_name)
        candidate = str(Path(directory) / base)
        if not self._checker.exists(candidate):
            return candidate

        stem = base[: -len(CLIP_EXTENSION)]
        counter = 1
        while True:
            candidate = str(Path(directory) / f"{stem}({counter}){CLIP_EXTENSION}")
            if not self._checker.exists(candidate):
                logger.debug("Output name taken, using %s", candidate)
                return candidate
            counter += 1
