"""propmeta error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Archive / metadata
- 9xxx: Internal

Archive and metadata errors are contained where they are raised: the build
pipeline logs them and moves on to the next archive or entry.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Archive / metadata (3xxx)
    ARCHIVE_OPEN_FAILED = 3001
    ARCHIVE_READ_FAILED = 3002
    ARCHIVE_TIMEOUT = 3003
    METADATA_PARSE_FAILED = 3101

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class PropMetaError(Exception):
    """Base error with structured context for logs and CLI output."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'ARCHIVE_OPEN_FAILED')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(PropMetaError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class ArchiveOpenError(PropMetaError):
    """Archive is missing, not a zip container, or corrupt."""

    @classmethod
    def cannot_open(cls, path: str, reason: str) -> "ArchiveOpenError":
        return cls(
            code=ErrorCode.ARCHIVE_OPEN_FAILED,
            message=f"Cannot open archive {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def timed_out(cls, path: str, timeout_sec: float) -> "ArchiveOpenError":
        return cls(
            code=ErrorCode.ARCHIVE_TIMEOUT,
            message=f"Reading archive {path} exceeded {timeout_sec}s",
            details={"path": path, "timeout_sec": timeout_sec},
        )


class ArchiveReadError(PropMetaError):
    """Entry exists inside the archive but cannot be read or decoded."""

    @classmethod
    def cannot_read(cls, path: str, entry: str, reason: str) -> "ArchiveReadError":
        return cls(
            code=ErrorCode.ARCHIVE_READ_FAILED,
            message=f"Cannot read entry {entry} from {path}: {reason}",
            details={"path": path, "entry": entry, "reason": reason},
        )


class MetadataParseError(PropMetaError):
    """Metadata entry content is not valid JSON."""

    @classmethod
    def invalid_json(cls, origin: str | None, reason: str) -> "MetadataParseError":
        return cls(
            code=ErrorCode.METADATA_PARSE_FAILED,
            message=f"Invalid metadata JSON in {origin or '<text>'}: {reason}",
            details={"origin": origin, "reason": reason},
        )


class InternalError(PropMetaError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
