"""Core module exports."""

from propmeta.core.errors import (
    ArchiveOpenError,
    ArchiveReadError,
    ConfigError,
    ErrorCode,
    InternalError,
    MetadataParseError,
    PropMetaError,
)
from propmeta.core.logging import bound_generation, configure_logging, get_logger

__all__ = [
    # Errors
    "ArchiveOpenError",
    "ArchiveReadError",
    "ConfigError",
    "ErrorCode",
    "InternalError",
    "MetadataParseError",
    "PropMetaError",
    # Logging
    "bound_generation",
    "configure_logging",
    "get_logger",
]
