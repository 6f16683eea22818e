from __future__ import annotations

import json
import logging

from vonage_mcp.log import ROOT_LOGGER, JsonFormatter, configure_logging, get_logger


def test_configure_logging_is_idempotent() -> None:
    logger = configure_logging("debug")
    handlers = list(logger.handlers)

    assert configure_logging("warning") is logger
    assert logger.handlers == handlers
    assert logger.level == logging.WARNING
    assert logger.propagate is False


def test_get_logger_stays_in_package_hierarchy() -> None:
    assert get_logger("vonage_mcp.dispatch").name == "vonage_mcp.dispatch"
    assert get_logger("scripts").name == f"{ROOT_LOGGER}.scripts"


def test_json_formatter() -> None:
    record = logging.LogRecord(
        "vonage_mcp.dispatch", logging.INFO, __file__, 1, "dispatch.sent: channel=%s", ("sms",), None
    )
    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "vonage_mcp.dispatch"
    assert payload["message"] == "dispatch.sent: channel=sms"
