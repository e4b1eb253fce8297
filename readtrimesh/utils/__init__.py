"""Utility functions for readtrimesh."""

from readtrimesh.utils.logging import (
    setup_logging,
    get_logger,
    log_performance,
    log_load_result,
    StructuredLogger,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "log_performance",
    "log_load_result",
    "StructuredLogger",
]
