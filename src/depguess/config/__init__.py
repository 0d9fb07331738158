"""Config module exports."""

from depguess.config.loader import load_config
from depguess.config.models import (
    DepGuessConfig,
    LoggingConfig,
    LogOutputConfig,
    ScanConfig,
)

__all__ = [
    "load_config",
    "DepGuessConfig",
    "LoggingConfig",
    "LogOutputConfig",
    "ScanConfig",
]
