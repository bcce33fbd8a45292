"""Structured logging utilities for round-trip validation.

Every record emitted while scanning a document carries the component that
produced it and, when the caller supplied one, a correlation ID tying it to a
single validation run.
"""

import logging
from typing import Any, Dict, Optional


class CorrelationLogger:
    """Logger that stamps records with a correlation ID and component."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional ID shared by all records of one run
            component: Component name; defaults to the last part of ``name``
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.rsplit(".", 1)[-1]

    def _extra(self, extra: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        fields = {"component": self.component, "correlation_id": self.correlation_id}
        if extra:
            fields.update(extra)
        return fields

    def is_enabled_for(self, level: int) -> bool:
        """Check whether records at ``level`` would be emitted."""
        return self.logger.isEnabledFor(level)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.debug(message, extra=self._extra(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.info(message, extra=self._extra(extra))


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Return a CorrelationLogger for ``name``."""
    return CorrelationLogger(name, correlation_id, component)
