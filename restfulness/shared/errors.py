"""
Default error reporter.

Maps domain errors raised during a tick or a teardown to log records.
Each error type has its own level so that collaborator contract
violations stand out from transient device hiccups. Never re-raises.
"""

import logging

from restfulness.errors import (
    DataShapeError,
    DeviceError,
    InvalidConfigurationError,
    InvalidStateError,
    RestfulnessError,
)
from restfulness.ports import ErrorReporter

logger = logging.getLogger(__name__)


class LoggingErrorReporter(ErrorReporter):
    """Report errors to a logger, one level per error type."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log or logger
        self._counts: dict[str, int] = {}

    @property
    def counts(self) -> dict[str, int]:
        """Number of reports per error class name."""
        return dict(self._counts)

    def report(self, error: Exception, stage: str) -> None:
        name = type(error).__name__
        self._counts[name] = self._counts.get(name, 0) + 1

        if isinstance(error, DataShapeError):
            self._log.error(
                "Window shape violation during %s: %s", stage, error.message,
                exc_info=error,
            )
        elif isinstance(error, DeviceError):
            self._log.warning("Device failure during %s: %s", stage, error.message)
        elif isinstance(error, (InvalidStateError, InvalidConfigurationError)):
            self._log.warning("Rejected %s: %s", stage, error.message)
        elif isinstance(error, RestfulnessError):
            self._log.error("Unhandled predictor error during %s: %s", stage, error.message)
        else:
            self._log.error(
                "Unexpected %s during %s: %s", name, stage, error,
                exc_info=error,
            )
