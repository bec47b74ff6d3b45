"""Config module exports."""

from propmeta.config.loader import load_config
from propmeta.config.models import (
    ClasspathConfig,
    IndexerConfig,
    LoggingConfig,
    PropMetaConfig,
    WatcherConfig,
)

__all__ = [
    "load_config",
    "PropMetaConfig",
    "ClasspathConfig",
    "IndexerConfig",
    "LoggingConfig",
    "WatcherConfig",
]
