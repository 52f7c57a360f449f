"""Diagnostics sinks.

``NullDiagnostics`` discards everything. ``LoggingDiagnostics`` keeps the
current progress state and forwards every line to stdlib logging.
"""

from __future__ import annotations

import logging

from animerge.core.utils.math import clamp01

logger = logging.getLogger(__name__)


class NullDiagnostics:
    """Sink that ignores all calls."""

    def begin(self, message: str | None) -> None:
        pass

    def update(self, message: str | None, progress: float) -> None:
        pass

    def end(self) -> None:
        pass

    def log_success(self, message: str | None) -> None:
        pass

    def log_error(self, message: str | None) -> None:
        pass

    def log_warning(self, message: str | None) -> None:
        pass


class LoggingDiagnostics:
    """Sink that routes progress and log lines to a logger.

    Args:
        log: Logger to write to (module logger by default).

    Example:
        >>> sink = LoggingDiagnostics()
        >>> sink.begin("Merging")
        >>> sink.update("Track 1", 1.5)
        >>> sink.current_progress
        1.0
    """

    def __init__(self, log: logging.Logger | logging.LoggerAdapter | None = None) -> None:
        self._log = log or logger
        self.is_displaying = False
        self.current_progress = 0.0
        self.current_message = ""

    def begin(self, message: str | None) -> None:
        self.is_displaying = True
        self.current_progress = 0.0
        self.current_message = message or ""
        self._log.info("%s", self.current_message)

    def update(self, message: str | None, progress: float) -> None:
        self.current_message = message or ""
        self.current_progress = clamp01(progress)
        self._log.debug("[%3.0f%%] %s", self.current_progress * 100, self.current_message)

    def end(self) -> None:
        self.is_displaying = False
        self.current_progress = 0.0
        self.current_message = ""

    def log_success(self, message: str | None) -> None:
        self._log.info("%s", message or "")

    def log_error(self, message: str | None) -> None:
        self._log.error("%s", message or "")

    def log_warning(self, message: str | None) -> None:
        self._log.warning("%s", message or "")
