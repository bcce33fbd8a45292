"""Configuration for round-trip validation.

This module provides the configuration object shared by the scan driver, the
command-line tool and the benchmarks.
"""

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

DEFAULT_BUFFER_SIZE = 8192


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ValidatorConfig:
    """Configuration for a validation run.

    Thread-safe due to frozen dataclass implementation.

    Attributes:
        strict: Decode the input document strictly, rejecting unquoted and
            valueless attributes and unknown entities as syntax errors. When
            False they are accepted the way lenient consumers accept them.
            Re-decoding of canonical output is always strict.
        buffer_size: Number of bytes read at a time from stream sources
        correlation_id: Optional correlation ID attached to log records
    """

    strict: bool = True
    buffer_size: int = DEFAULT_BUFFER_SIZE
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate validator configuration."""
        if not isinstance(self.strict, bool):
            raise ValueError("strict must be a boolean")
        if isinstance(self.buffer_size, bool) or not isinstance(self.buffer_size, int):
            raise ValueError("buffer_size must be an integer")
        if self.buffer_size <= 0:
            raise ValueError("buffer_size must be > 0")

    @classmethod
    def default(cls) -> "ValidatorConfig":
        """Create the default, strict configuration."""
        return cls()

    @classmethod
    def lenient_mode(cls) -> "ValidatorConfig":
        """Create configuration that accepts lenient markup while decoding."""
        return cls(strict=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a plain dictionary."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to a JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ValidatorConfig":
        """Create configuration from a dictionary.

        Args:
            data: Mapping of field names to values

        Returns:
            New ValidatorConfig instance

        Raises:
            ConfigValidationError: If a key is unknown or a value is invalid
        """
        known = {f.name for f in fields(cls)}
        for key in data:
            if key not in known:
                raise ConfigValidationError(
                    f"Unknown configuration field: {key}",
                    field_name=key,
                    suggestions=sorted(known),
                )
        try:
            return cls(**data)
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    @classmethod
    def from_json(cls, json_str: str) -> "ValidatorConfig":
        """Create configuration from a JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("Configuration JSON must be an object")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "ValidatorConfig":
        """Load configuration from a JSON file."""
        path = Path(config_path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read config file {path}: {e}") from e
        return cls.from_json(text)
