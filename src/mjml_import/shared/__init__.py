"""Shared utilities for MJML import.

This module provides the configuration object, diagnostic types, error kinds
and logging helpers used across all pipeline stages.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ImportConfig,
)
from .errors import (
    InputTooLargeError,
    InternalError,
    MarkupImportError,
    MarkupSyntaxError,
    StructureError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ImportConfig",
    "InputTooLargeError",
    "InternalError",
    "MarkupImportError",
    "MarkupSyntaxError",
    "StructureError",
    "CorrelationLogger",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
]
