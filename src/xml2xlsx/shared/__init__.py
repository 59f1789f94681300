"""Shared utilities for streaming XML to spreadsheet conversion.

This module provides configuration objects, the exception hierarchy, result
types and logging helpers used across all processing layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ConversionConfig,
)
from .errors import (
    ConversionError,
    InputFileError,
    NoColumnsError,
    RepeatingElementNotFoundError,
    SheetError,
    UnknownSheetError,
    WriterClosedError,
    WriterError,
    XMLStructureError,
)
from .logging import (
    CorrelationLogger,
    ProgressReporter,
    configure_logging,
    get_logger,
    new_correlation_id,
)
from .result import ConversionMode, ConversionResult

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ConversionConfig",
    "ConversionError",
    "InputFileError",
    "NoColumnsError",
    "RepeatingElementNotFoundError",
    "SheetError",
    "UnknownSheetError",
    "WriterClosedError",
    "WriterError",
    "XMLStructureError",
    "CorrelationLogger",
    "ProgressReporter",
    "configure_logging",
    "get_logger",
    "new_correlation_id",
    "ConversionMode",
    "ConversionResult",
]
