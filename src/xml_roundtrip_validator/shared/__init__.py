"""Shared utilities for round-trip validation.

This module provides the error types, configuration objects and logging
helpers used across all validator layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ValidatorConfig,
)
from .errors import (
    EncodeError,
    RoundtripError,
    ValidatorError,
    XMLSyntaxError,
    XMLValidationError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ValidatorConfig",
    "EncodeError",
    "RoundtripError",
    "ValidatorError",
    "XMLSyntaxError",
    "XMLValidationError",
    "CorrelationLogger",
    "get_logger",
]
