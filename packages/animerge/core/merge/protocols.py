"""Protocols for the collaborators a merge run consumes."""

from typing import Protocol, runtime_checkable

from animerge.core.timeline.models import TargetRig


@runtime_checkable
class DiagnosticsSink(Protocol):
    """
    Receiver for progress and leveled log lines.

    Every method accepts None or an empty message and treats it as "".
    Progress values are clamped to [0, 1]. Calls are synchronous and must
    not change merge state.
    """

    def begin(self, message: str | None) -> None:
        """Start a progress display."""
        ...

    def update(self, message: str | None, progress: float) -> None:
        """Report progress in [0, 1]."""
        ...

    def end(self) -> None:
        """Close the progress display."""
        ...

    def log_success(self, message: str | None) -> None: ...

    def log_error(self, message: str | None) -> None: ...

    def log_warning(self, message: str | None) -> None: ...


@runtime_checkable
class BonePathResolver(Protocol):
    """Translates a canonical bone identifier into a rig-specific path."""

    def resolve(self, rig: TargetRig, bone: str) -> str | None:
        """
        Resolve a bone for a rig.

        Args:
            rig: Rig the merged clip targets
            bone: Canonical bone path as authored in the source clip

        Returns:
            Path on the rig, or None when the bone has no counterpart
        """
        ...


@runtime_checkable
class FileExistenceChecker(Protocol):
    """Answers whether an output path is taken."""

    def exists(self, path: str) -> bool: ...


@runtime_checkable
class PackageChecker(Protocol):
    """Gate for optional export capabilities."""

    def is_available(self, name: str) -> bool: ...
