from animerge.core.config.loader import (
    configure_logging,
    detect_format,
    load_app_config,
    load_config,
)
from animerge.core.config.models import AppConfig, LoggingConfig, MergeConfig

__all__ = [
    "AppConfig",
    "LoggingConfig",
    "MergeConfig",
    "configure_logging",
    "detect_format",
    "load_app_config",
    "load_config",
]
