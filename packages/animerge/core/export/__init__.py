"""Output naming, availability checks and clip export."""

from animerge.core.export.checkers import ImportlibPackageChecker, PathFileExistenceChecker
from animerge.core.export.exporter import ClipExporter, clip_document
from animerge.core.export.naming import FileNameGenerator

__all__ = [
    "ClipExporter",
    "FileNameGenerator",
    "ImportlibPackageChecker",
    "PathFileExistenceChecker",
    "clip_document",
]
