"""Tests for correlation-aware logging."""

import logging

from xml_roundtrip_validator.shared.logging import CorrelationLogger, get_logger


class TestCorrelationLogger:
    """Test that log records carry component and correlation info."""

    def test_component_defaults_to_module_name(self):
        logger = get_logger("xml_roundtrip_validator.validation.validator")

        assert isinstance(logger, CorrelationLogger)
        assert logger.component == "validator"
        assert logger.correlation_id is None

    def test_records_carry_extra_fields(self, caplog):
        logger = get_logger("xml_roundtrip_validator.test", "req-42", "scanner")

        with caplog.at_level(logging.DEBUG, logger="xml_roundtrip_validator.test"):
            logger.debug("scanning", extra={"tokens": 3})

        record = caplog.records[-1]
        assert record.getMessage() == "scanning"
        assert record.component == "scanner"
        assert record.correlation_id == "req-42"
        assert record.tokens == 3

    def test_is_enabled_for(self):
        logger = get_logger("xml_roundtrip_validator.level_check")
        logger.logger.setLevel(logging.WARNING)

        assert logger.is_enabled_for(logging.ERROR)
        assert not logger.is_enabled_for(logging.DEBUG)
