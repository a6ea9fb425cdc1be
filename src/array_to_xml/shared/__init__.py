"""Shared utilities for array-to-XML conversion.

This module provides configuration objects, exceptions, metrics and logging
used across the naming, tree and API layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ConverterConfig,
    GlobalConfig,
    MappingConfig,
    OutputConfig,
)
from .exceptions import (
    ConversionError,
    InvalidContentError,
    InvalidDocumentError,
    InvalidNameError,
    MaxDepthExceededError,
    RootMustBeAssociativeError,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import ConversionMetrics

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ConverterConfig",
    "GlobalConfig",
    "MappingConfig",
    "OutputConfig",
    "ConversionError",
    "InvalidContentError",
    "InvalidDocumentError",
    "InvalidNameError",
    "MaxDepthExceededError",
    "RootMustBeAssociativeError",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "ConversionMetrics",
]
