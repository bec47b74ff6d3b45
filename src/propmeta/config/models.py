"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (PROPMETA__SECTION__KEY)
3. Workspace YAML (.propmeta/config.yaml)
4. Global YAML (~/.config/propmeta/config.yaml)
5. Built-in defaults (this file)

Examples:
    PROPMETA__LOGGING__LEVEL=DEBUG
    PROPMETA__INDEXER__MAX_CONCURRENCY=4
    PROPMETA__CLASSPATH__FILE_NAME=build/classpath.txt
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        PROPMETA__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every archive entry read.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ClasspathConfig(BaseModel):
    """Location of the archive path-list file.

    Env vars:
        PROPMETA__CLASSPATH__FILE_NAME: Path-list file, relative to the workspace
    """

    file_name: str = Field(
        default="classpath.txt",
        description="Path-list file relative to the workspace root (or absolute).",
    )

    def resolve(self, workspace: Path) -> Path:
        return (workspace / Path(self.file_name).expanduser()).resolve()


class IndexerConfig(BaseModel):
    """Index build configuration.

    Env vars:
        PROPMETA__INDEXER__MAX_CONCURRENCY: Archives read in parallel
        PROPMETA__INDEXER__ARCHIVE_TIMEOUT_SEC: Per-archive read timeout
        PROPMETA__INDEXER__DEBOUNCE_SEC: Delay before a triggered rebuild starts
    """

    max_concurrency: int = Field(
        default=8,
        description="Archives read concurrently in worker threads.",
    )
    archive_timeout_sec: float | None = Field(
        default=None,
        description="Give up on a single archive after this many seconds. "
        "None waits indefinitely. An abandoned read keeps its worker thread "
        "until it returns; at most max_concurrency reads run at once.",
    )
    debounce_sec: float = Field(
        default=0.0,
        description="Delay between a trigger and the rebuild it starts. "
        "Triggers arriving inside the window collapse into one rebuild.",
    )

    @field_validator("max_concurrency")
    @classmethod
    def validate_max_concurrency(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {v}")
        return v

    @field_validator("archive_timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError(f"archive_timeout_sec must be positive, got {v}")
        return v


class WatcherConfig(BaseModel):
    """Classpath file watcher configuration.

    Env vars:
        PROPMETA__WATCHER__DEBOUNCE_MS: watchfiles debounce window
        PROPMETA__WATCHER__STEP_MS: watchfiles polling step
    """

    debounce_ms: int = Field(
        default=300,
        description="Filesystem events inside this window are reported as one batch.",
    )
    step_ms: int = Field(
        default=100,
        description="How often the watcher checks for new events.",
    )
    force_polling: bool = Field(
        default=False,
        description="Poll instead of using native notifications (network mounts).",
    )


class PropMetaConfig(BaseModel):
    """Root configuration for propmeta."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    classpath: ClasspathConfig = Field(default_factory=ClasspathConfig)
    indexer: IndexerConfig = Field(default_factory=IndexerConfig)
    watcher: WatcherConfig = Field(default_factory=WatcherConfig)
