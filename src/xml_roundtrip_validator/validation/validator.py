"""Scan driver for round-trip validation.

This module walks a document token by token, checks each token with the
round-trip comparator and collects findings. Fail-fast and exhaustive
validation share the same loop and differ only in what happens after the
first finding.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional

from xml_roundtrip_validator.shared.config import ValidatorConfig
from xml_roundtrip_validator.shared.errors import (
    ValidatorError,
    XMLSyntaxError,
    XMLValidationError,
)
from xml_roundtrip_validator.shared.logging import get_logger
from xml_roundtrip_validator.tokenization.reader import InputType
from xml_roundtrip_validator.tokenization.tokenizer import RawTokenizer

from .roundtrip import check_token


class ScanState(Enum):
    """Lifecycle of a single scan."""

    SCANNING = auto()   # Tokens are still being read
    FINISHED = auto()   # End of input reached
    ABORTED = auto()    # Stopped on a syntax error or the first finding


@dataclass
class ScanResult:
    """Outcome of scanning one document."""

    state: ScanState = ScanState.SCANNING
    findings: List[ValidatorError] = field(default_factory=list)
    tokens_scanned: int = 0
    bytes_scanned: int = 0
    processing_time_ms: float = 0.0

    @property
    def success(self) -> bool:
        """True if the whole document was scanned without findings."""
        return self.state == ScanState.FINISHED and not self.findings

    @property
    def finding_count(self) -> int:
        return len(self.findings)


class RoundtripValidator:
    """Validate that every token of a document survives re-encoding.

    The validator holds no per-document state, so one instance may scan any
    number of documents.
    """

    def __init__(self, config: Optional[ValidatorConfig] = None) -> None:
        """Initialize the validator.

        Args:
            config: Validation settings; defaults to ValidatorConfig.default()
        """
        self.config = config or ValidatorConfig.default()
        self.logger = get_logger(__name__, self.config.correlation_id, "roundtrip_validator")

    def scan(self, source: InputType, fail_fast: bool = False) -> ScanResult:
        """Scan a document and collect round-trip findings.

        Args:
            source: Document bytes, text or a readable object
            fail_fast: Stop at the first finding and record it without
                position information

        Returns:
            ScanResult with the terminal state and findings in document order
        """
        tokenizer = RawTokenizer(
            source,
            strict=self.config.strict,
            buffer_size=self.config.buffer_size,
            correlation_id=self.config.correlation_id
        )
        result = ScanResult()
        start_time = time.perf_counter()

        self.logger.debug("Starting round-trip scan", extra={"fail_fast": fail_fast})

        while result.state == ScanState.SCANNING:
            position = tokenizer.position
            try:
                token = tokenizer.next_token()
            except XMLSyntaxError as e:
                self.logger.debug("Aborting scan on syntax error", extra={"error": str(e)})
                result.findings.append(e)
                result.state = ScanState.ABORTED
                break

            if token is None:
                result.state = ScanState.FINISHED
                break

            result.tokens_scanned += 1
            end = tokenizer.input_offset
            if end == position.offset:
                # Implicit end of a self-closing tag; its bytes belong to the start tag.
                continue

            try:
                check_token(token)
            except ValidatorError as e:
                if self.logger.is_enabled_for(logging.DEBUG):
                    self.logger.debug(
                        "Unstable token",
                        extra={
                            "line": position.line,
                            "column": position.column,
                            "start": position.offset,
                            "end": end,
                            "error": str(e)
                        }
                    )
                if fail_fast:
                    result.findings.append(e)
                    result.state = ScanState.ABORTED
                else:
                    result.findings.append(
                        XMLValidationError(position.offset, end, position.line, position.column, e)
                    )

        result.bytes_scanned = tokenizer.input_offset
        result.processing_time_ms = (time.perf_counter() - start_time) * 1000

        self.logger.debug(
            "Round-trip scan completed",
            extra={
                "state": result.state.name,
                "findings": result.finding_count,
                "tokens_scanned": result.tokens_scanned,
                "bytes_scanned": result.bytes_scanned,
                "processing_time_ms": result.processing_time_ms
            }
        )
        return result


def validate(source: InputType, config: Optional[ValidatorConfig] = None) -> None:
    """Validate a document, raising the first finding.

    Args:
        source: Document bytes, text or a readable object
        config: Optional validation settings

    Raises:
        ValidatorError: The first syntax error or unstable token found
    """
    result = RoundtripValidator(config).scan(source, fail_fast=True)
    if result.findings:
        raise result.findings[0]


def validate_all(
    source: InputType,
    config: Optional[ValidatorConfig] = None
) -> List[ValidatorError]:
    """Validate a whole document and return every finding.

    Unstable tokens are reported as XMLValidationError carrying the token's
    position. A syntax error ends the scan and is reported as the last
    element, unwrapped.

    Returns:
        Findings in document order; empty if the document is stable
    """
    return RoundtripValidator(config).scan(source, fail_fast=False).findings
