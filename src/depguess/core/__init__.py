"""Core module exports."""

from depguess.core.errors import (
    ConfigError,
    DepGuessError,
    EmptyImportPathError,
    EnumerationError,
    ErrorCode,
    ExtractionError,
    GrammarUnavailableError,
    InternalError,
    ParseError,
    QueryConstructionError,
    ReadError,
)
from depguess.core.excludes import IGNORED_DIRS, is_ignored_dir, make_ignore_predicate
from depguess.core.logging import (
    clear_scan_id,
    configure_logging,
    get_scan_id,
    set_scan_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "DepGuessError",
    "EmptyImportPathError",
    "EnumerationError",
    "ErrorCode",
    "ExtractionError",
    "GrammarUnavailableError",
    "InternalError",
    "ParseError",
    "QueryConstructionError",
    "ReadError",
    # Excludes
    "IGNORED_DIRS",
    "is_ignored_dir",
    "make_ignore_predicate",
    # Logging
    "clear_scan_id",
    "configure_logging",
    "get_scan_id",
    "set_scan_id",
]
