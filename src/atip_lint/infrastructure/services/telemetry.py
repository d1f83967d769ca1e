"""LoggingTelemetry: TelemetryPort adapter that forwards progress to stdlib logging."""

import logging

from atip_lint.domain.protocols import TelemetryPort


class LoggingTelemetry(TelemetryPort):
    """Progress steps go to DEBUG; warnings and errors keep their level."""

    def __init__(self, logger_name: str = "atip_lint") -> None:
        self._logger = logging.getLogger(logger_name)

    def step(self, message: str) -> None:
        self._logger.debug(message)

    def error(self, message: str) -> None:
        self._logger.error(message)

    def warning(self, message: str) -> None:
        self._logger.warning(message)
