"""Merge orchestration, results, collaborator protocols and diagnostics."""

from animerge.core.merge.diagnostics import LoggingDiagnostics, NullDiagnostics
from animerge.core.merge.engine import EligibleTrack, MergeEngine
from animerge.core.merge.errors import MergeError, MissingCollaboratorError, UnresolvedBindingError
from animerge.core.merge.protocols import (
    BonePathResolver,
    DiagnosticsSink,
    FileExistenceChecker,
    PackageChecker,
)
from animerge.core.merge.result import MergedClip, MergeResult

__all__ = [
    "BonePathResolver",
    "DiagnosticsSink",
    "EligibleTrack",
    "FileExistenceChecker",
    "LoggingDiagnostics",
    "MergeEngine",
    "MergeError",
    "MergeResult",
    "MergedClip",
    "MissingCollaboratorError",
    "NullDiagnostics",
    "PackageChecker",
    "UnresolvedBindingError",
]
