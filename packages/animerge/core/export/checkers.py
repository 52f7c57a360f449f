"""Filesystem and package availability checks."""

from __future__ import annotations

import importlib.util
from pathlib import Path


class PathFileExistenceChecker:
    """FileExistenceChecker backed by the local filesystem."""

    def exists(self, path: str) -> bool:
        return Path(path).exists()


class ImportlibPackageChecker:
    """PackageChecker that looks for an importable top-level module."""

    def is_available(self, name: str) -> bool:
        if not name:
            return False
        try:
            return importlib.util.find_spec(name) is not None
        except (ImportError, ValueError):
            return False
