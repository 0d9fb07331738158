"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (DEPGUESS__SECTION__KEY)
3. Repo YAML (.depguess/config.yaml)
4. Global YAML (~/.config/depguess/config.yaml)
5. Built-in defaults (this file)

Examples:
    DEPGUESS__LOGGING__LEVEL=DEBUG
    DEPGUESS__SCAN__MAX_WORKERS=4
    DEPGUESS__SCAN__TASK_TIMEOUT_SEC=30
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
        DEPGUESS__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every dispatched file.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ScanConfig(BaseModel):
    """Import scan configuration.

    Env vars:
        DEPGUESS__SCAN__BACKEND: Ecosystem backend (default: nodejs)
        DEPGUESS__SCAN__MAX_WORKERS: Extraction worker threads
        DEPGUESS__SCAN__TASK_TIMEOUT_SEC: Per-file extraction timeout
        DEPGUESS__SCAN__STRICT_PARSE: Reject files with syntax errors
        DEPGUESS__SCAN__MAX_FILE_SIZE_MB: Skip files larger than this
    """

    backend: str = Field(
        default="nodejs",
        description="Ecosystem backend used to pick extensions, grammars and built-ins.",
    )
    max_workers: int | None = Field(
        default=None,
        description="Extraction worker threads. None uses the executor default "
        "(min(32, cpu_count + 4)).",
    )
    task_timeout_sec: float | None = Field(
        default=None,
        description="Give up on a single file after this many seconds. "
        "None waits for every file.",
    )
    strict_parse: bool = Field(
        default=True,
        description="Treat files whose syntax tree contains errors as unparseable. "
        "When false, imports are still collected from error-recovered trees.",
    )
    max_file_size_mb: int = Field(
        default=10,
        description="Skip files larger than this (MB). Usually minified bundles.",
    )
    extra_ignored_dirs: list[str] = Field(
        default_factory=list,
        description="Directory base names skipped in addition to the built-in list.",
    )

    @field_validator("max_workers")
    @classmethod
    def validate_max_workers(cls, v: int | None) -> int | None:
        if v is not None and v < 1:
            raise ValueError(f"max_workers must be >= 1, got {v}")
        return v

    @field_validator("task_timeout_sec")
    @classmethod
    def validate_task_timeout(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError(f"task_timeout_sec must be > 0, got {v}")
        return v

    @field_validator("max_file_size_mb")
    @classmethod
    def validate_max_file_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_file_size_mb must be >= 1, got {v}")
        return v

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


class DepGuessConfig(BaseModel):
    """Root configuration for depguess."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
