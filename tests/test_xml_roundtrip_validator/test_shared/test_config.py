"""Tests for validator configuration."""

import json

import pytest

from xml_roundtrip_validator.shared.config import (
    DEFAULT_BUFFER_SIZE,
    ConfigError,
    ConfigValidationError,
    ValidatorConfig,
)


class TestValidatorConfig:
    """Test suite for ValidatorConfig."""

    def test_default_configuration(self):
        """Test default configuration values."""
        config = ValidatorConfig()

        assert config.strict is True
        assert config.buffer_size == DEFAULT_BUFFER_SIZE == 8192
        assert config.correlation_id is None

    def test_presets(self):
        """Test preset constructors."""
        assert ValidatorConfig.default() == ValidatorConfig()
        assert ValidatorConfig.lenient_mode().strict is False

    def test_configuration_is_immutable(self):
        """Test that configuration cannot be modified after creation."""
        config = ValidatorConfig()
        with pytest.raises(AttributeError):
            config.strict = False

    @pytest.mark.parametrize("buffer_size", [0, -1])
    def test_non_positive_buffer_size_rejected(self, buffer_size):
        """Test buffer size validation."""
        with pytest.raises(ValueError, match="buffer_size must be > 0"):
            ValidatorConfig(buffer_size=buffer_size)

    @pytest.mark.parametrize("buffer_size", ["1024", 1.5, True])
    def test_non_integer_buffer_size_rejected(self, buffer_size):
        """Test buffer size type validation."""
        with pytest.raises(ValueError, match="buffer_size must be an integer"):
            ValidatorConfig(buffer_size=buffer_size)

    def test_non_boolean_strict_rejected(self):
        """Test strict flag type validation."""
        with pytest.raises(ValueError, match="strict must be a boolean"):
            ValidatorConfig(strict="yes")


class TestConfigSerialization:
    """Test conversion of configuration to and from dictionaries and JSON."""

    def test_to_dict(self):
        config = ValidatorConfig(strict=True, buffer_size=16, correlation_id="abc")

        assert config.to_dict() == {"strict": True, "buffer_size": 16, "correlation_id": "abc"}

    def test_json_round_trip(self):
        config = ValidatorConfig(strict=False, buffer_size=64)

        restored = ValidatorConfig.from_json(config.to_json())

        assert restored == config

    def test_from_dict_partial(self):
        """Test that missing keys fall back to defaults."""
        config = ValidatorConfig.from_dict({"strict": False})

        assert config.strict is False
        assert config.buffer_size == DEFAULT_BUFFER_SIZE

    def test_from_dict_unknown_field(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            ValidatorConfig.from_dict({"stirct": True})

        assert exc_info.value.field_name == "stirct"
        assert "strict" in exc_info.value.suggestions

    def test_from_dict_invalid_value_is_chained(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            ValidatorConfig.from_dict({"buffer_size": 0})

        assert isinstance(exc_info.value.__cause__, ValueError)
        assert "buffer_size must be > 0" in str(exc_info.value)

    def test_from_json_invalid_json(self):
        with pytest.raises(ConfigError, match="Invalid configuration JSON"):
            ValidatorConfig.from_json("{not json")

    def test_from_json_requires_object(self):
        with pytest.raises(ConfigError, match="must be an object"):
            ValidatorConfig.from_json("[1, 2]")

    def test_from_file(self, tmp_path):
        config_path = tmp_path / "validator.json"
        config_path.write_text(json.dumps({"strict": False, "correlation_id": "run-1"}))

        config = ValidatorConfig.from_file(config_path)

        assert config.strict is False
        assert config.correlation_id == "run-1"

    def test_from_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Could not read config file"):
            ValidatorConfig.from_file(tmp_path / "missing.json")

    def test_validation_error_is_config_error(self):
        assert issubclass(ConfigValidationError, ConfigError)
