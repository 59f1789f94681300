"""Correlation-aware logging for conversions.

Every record emitted through ``CorrelationLogger`` carries the component name
and the conversion's correlation id in ``extra`` so that log lines from the
producer and consumer threads of one conversion can be grouped.
"""

import logging
import uuid
from typing import Any, Dict, Optional

LOG_FORMAT = "%(asctime)s %(levelname)s [%(component)s] %(message)s"


class CorrelationLogger:
    """Logger that automatically includes correlation ID and component information."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID of the running conversion
            component: Component name for structured logging
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.split(".")[-1]

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        combined_extra = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        if extra:
            combined_extra.update(extra)
        return combined_extra

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.debug(message, extra=self._get_extra(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.info(message, extra=self._get_extra(extra))

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.warning(message, extra=self._get_extra(extra))

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        self.logger.error(message, extra=self._get_extra(extra), exc_info=exc_info)

    def exception(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log an error with the active exception's traceback."""
        self.logger.exception(message, extra=self._get_extra(extra))


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID of the running conversion
        component: Component name for structured logging

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)


def new_correlation_id() -> str:
    """Short random id used when a conversion was not given one."""
    return uuid.uuid4().hex[:12]


class _ComponentDefaults(logging.Filter):
    """Fill in ``component`` for records not created by CorrelationLogger."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "component"):
            record.component = record.name.split(".")[-1]
        return True


def configure_logging(level: int = logging.INFO) -> None:
    """Attach a stderr handler to the package logger.

    Calling this more than once only updates the level.
    """
    package_logger = logging.getLogger("xml2xlsx")
    package_logger.setLevel(level)
    if not any(getattr(h, "_xml2xlsx", False) for h in package_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.addFilter(_ComponentDefaults())
        handler._xml2xlsx = True  # type: ignore[attr-defined]
        package_logger.addHandler(handler)


class ProgressReporter:
    """Count processed rows and log every ``interval`` rows."""

    def __init__(self, logger: CorrelationLogger, label: str, interval: int) -> None:
        self.logger = logger
        self.label = label
        self.interval = interval
        self.count = 0

    def update(self, increment: int = 1) -> None:
        previous = self.count
        self.count += increment
        if self.count // self.interval > previous // self.interval:
            self.logger.info(
                f"Processed {self.count} {self.label}...",
                extra={"rows": self.count},
            )

    def finish(self) -> int:
        self.logger.info(
            f"{self.label.capitalize()}: {self.count} rows",
            extra={"rows": self.count},
        )
        return self.count
