import io
import json
import logging

import pytest

from selfcare.utils.config import get_settings
from selfcare.utils.logger import get_logger
from selfcare.utils.logging_config import (
    PACKAGE_LOGGER,
    CustomJsonFormatter,
    MetricsLogger,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    settings = get_settings()
    setup_logging(settings.service_name, log_level=settings.log_level, json_logs=settings.json_logs)


def _capture(logger: logging.Logger) -> io.StringIO:
    stream = io.StringIO()
    logger.handlers[0].setStream(stream)
    return stream


def test_module_loggers_inherit_json_handler() -> None:
    package_logger = setup_logging("selfcare-api", log_level="INFO", json_logs=True)
    module_logger = get_logger("selfcare.application.activities")

    assert module_logger.handlers == []
    assert module_logger.propagate is True
    assert module_logger.getEffectiveLevel() == logging.INFO
    assert isinstance(package_logger.handlers[0].formatter, CustomJsonFormatter)

    stream = _capture(package_logger)
    module_logger.info("Activity %s completed", "a1")
    module_logger.debug("not emitted at INFO")

    lines = stream.getvalue().splitlines()
    assert len(lines) == 1
    line = json.loads(lines[0])
    assert line["message"] == "Activity a1 completed"
    assert line["logger"] == "selfcare.application.activities"
    assert line["level"] == "INFO"
    assert line["service"] == "selfcare-api"
    assert line["timestamp"]


def test_plain_format_when_json_disabled() -> None:
    package_logger = setup_logging("selfcare-api", json_logs=False)
    formatter = package_logger.handlers[0].formatter
    assert not isinstance(formatter, CustomJsonFormatter)

    stream = _capture(package_logger)
    get_logger("selfcare.realtime.hub").warning("Dropping dead socket")
    assert " - selfcare.realtime.hub - WARNING - Dropping dead socket" in stream.getvalue()


def test_outside_names_are_nested_under_package() -> None:
    assert get_logger("seed_script").name == "selfcare.seed_script"
    assert get_logger("__main__").name == PACKAGE_LOGGER
    assert get_logger() is logging.getLogger(PACKAGE_LOGGER)
    assert get_logger("selfcare.main") is logging.getLogger("selfcare.main")


def test_metrics_events_are_structured() -> None:
    stream = _capture(setup_logging("selfcare-api", json_logs=True))

    MetricsLogger("selfcare-api").log_event("friend_request_sent", {"to": "u2"}, user_id="u1")

    line = json.loads(stream.getvalue())
    assert line["message"] == "EVENT: friend_request_sent"
    assert line["logger"] == "selfcare.metrics"
    assert line["event_data"] == {"to": "u2"}
    assert line["user_id"] == "u1"
