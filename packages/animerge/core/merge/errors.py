from __future__ import annotations


class MergeError(Exception):
    """A single property could not be merged.

    Raised inside the engine and recorded on the MergeResult; it never
    aborts the whole run.
    """

    def __init__(self, message: str, *, binding_key: str | None = None) -> None:
        self.message = message
        self.binding_key = binding_key
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.binding_key:
            return f"{self.message} | binding={self.binding_key}"
        return self.message


class UnresolvedBindingError(MergeError):
    """The bone-path resolver returned no path for a binding."""


class MissingCollaboratorError(RuntimeError):
    """An operation needs a collaborator that was never supplied."""
