"""depguess error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Scan
- 9xxx: Internal

Per-file failures (read, parse, empty capture) subclass ExtractionError and
are isolated by the scheduler. Everything else aborts the scan.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_UNKNOWN_BACKEND = 2003

    # Scan (3xxx)
    SCAN_ENUMERATION_FAILED = 3001
    SCAN_READ_FAILED = 3002
    SCAN_PARSE_FAILED = 3003
    SCAN_EMPTY_IMPORT_PATH = 3004
    SCAN_QUERY_INVALID = 3005
    SCAN_GRAMMAR_UNAVAILABLE = 3006

    # Internal (9xxx)
    INTERNAL_TIMEOUT = 9001


@dataclass(frozen=True, slots=True)
class DepGuessError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'SCAN_PARSE_FAILED')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(DepGuessError):
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

    @classmethod
    def unknown_backend(cls, name: str, known: list[str]) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_UNKNOWN_BACKEND,
            message=f"Unknown backend '{name}' (available: {', '.join(known)})",
            details={"backend": name, "available": known},
        )


class EnumerationError(DepGuessError):
    """A directory could not be listed. Fatal to the whole scan."""

    @classmethod
    def from_os_error(cls, path: str, exc: OSError) -> "EnumerationError":
        return cls(
            code=ErrorCode.SCAN_ENUMERATION_FAILED,
            message=f"Cannot list directory {path}: {exc.strerror or exc}",
            details={"path": path, "errno": exc.errno},
        )


class ExtractionError(DepGuessError):
    """Per-file failure. Logged and skipped, never escalated."""


class ReadError(ExtractionError):
    """Source file could not be read."""

    @classmethod
    def from_os_error(cls, path: str, exc: OSError) -> "ReadError":
        return cls(
            code=ErrorCode.SCAN_READ_FAILED,
            message=f"Failed to read file {path}: {exc.strerror or exc}",
            details={"path": path, "errno": exc.errno},
        )


class ParseError(ExtractionError):
    """Source file could not be parsed by its grammar."""

    @classmethod
    def malformed(cls, path: str, grammar: str, line: int | None = None) -> "ParseError":
        where = f" near line {line}" if line is not None else ""
        return cls(
            code=ErrorCode.SCAN_PARSE_FAILED,
            message=f"Failed to parse {path} as {grammar}{where}",
            details={"path": path, "grammar": grammar, "line": line},
        )


class EmptyImportPathError(ExtractionError):
    """A query match had captures but none named ``import``."""

    @classmethod
    def for_match(cls, path: str, captures: list[str]) -> "EmptyImportPathError":
        return cls(
            code=ErrorCode.SCAN_EMPTY_IMPORT_PATH,
            message=f"Empty import path in {path}: match captured {captures} without 'import'",
            details={"path": path, "captures": captures},
        )


class QueryConstructionError(DepGuessError):
    """A backend query failed to compile. Programming defect, never recovered."""

    @classmethod
    def invalid(cls, grammar: str, reason: str) -> "QueryConstructionError":
        return cls(
            code=ErrorCode.SCAN_QUERY_INVALID,
            message=f"Import query for grammar '{grammar}' is malformed: {reason}",
            details={"grammar": grammar, "reason": reason},
        )


class GrammarUnavailableError(DepGuessError):
    """A tree-sitter grammar package is not installed."""

    @classmethod
    def missing(cls, grammar: str, module: str) -> "GrammarUnavailableError":
        return cls(
            code=ErrorCode.SCAN_GRAMMAR_UNAVAILABLE,
            message=f"Grammar not available: {grammar} (install the '{module}' module)",
            details={"grammar": grammar, "module": module},
        )


class InternalError(DepGuessError):
    """Failures of the scan machinery itself."""

    @classmethod
    def timeout(cls, operation: str, seconds: float) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_TIMEOUT,
            message=f"{operation} timed out after {seconds:g}s",
            details={"operation": operation, "seconds": seconds},
        )
