import logging

import pytest

from atip_lint.infrastructure.services.telemetry import LoggingTelemetry


def test_levels(caplog: pytest.LogCaptureFixture) -> None:
    telemetry = LoggingTelemetry("atip_lint.test")

    with caplog.at_level(logging.DEBUG, logger="atip_lint.test"):
        telemetry.step("working")
        telemetry.warning("careful")
        telemetry.error("broken")

    assert [(r.levelno, r.getMessage()) for r in caplog.records] == [
        (logging.DEBUG, "working"),
        (logging.WARNING, "careful"),
        (logging.ERROR, "broken"),
    ]
