import logging

import pytest
from graph_http.core.common.logging_utils import (
    AccessTokenRedactionFilter,
    configure_logging,
    configure_logging_from_config,
    get_logger,
    redact,
    redact_dict,
    redact_text,
)
from graph_http.core.config.app_config import AppConfig, LoggingConfig, LogLevel


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, filters, level = list(root.handlers), list(root.filters), root.level
    yield root
    root.handlers[:] = handlers
    root.filters[:] = filters
    root.setLevel(level)


def test_redact_keeps_edges() -> None:
    assert redact("abcdefghij") == "ab***ij"
    assert redact("short") == "***"
    assert redact("") == ""


def test_redact_dict_masks_access_token() -> None:
    data = {"access_token": "EAAB1234567", "fields": "id", "nested": {"password": 1}}
    assert redact_dict(data) == {
        "access_token": "EA***67",
        "fields": "id",
        "nested": {"password": "***"},
    }


def test_redact_text_masks_query_tokens() -> None:
    text = "GET https://graph.facebook.com/me?access_token=EAAB123&fields=id"
    assert redact_text(text) == (
        "GET https://graph.facebook.com/me?access_token=***&fields=id"
    )
    assert redact_text("Authorization: Bearer abc.def") == "Authorization: Bearer ***"


def test_filter_sanitizes_message_and_args() -> None:
    record = logging.LogRecord(
        "graph_http",
        logging.INFO,
        __file__,
        1,
        "calling %s with %s",
        ("/me?access_token=SECRET", {"access_token": "SECRETSECRET"}),
        None,
    )
    assert AccessTokenRedactionFilter().filter(record) is True
    assert record.getMessage() == (
        "calling /me?access_token=*** with {'access_token': 'SE***ET'}"
    )


def test_configure_logging_installs_redaction(restore_root_logger, tmp_path) -> None:
    log_file = tmp_path / "graph_http.log"
    configure_logging("DEBUG", log_file=str(log_file))

    root = restore_root_logger
    assert root.level == logging.DEBUG
    assert any(isinstance(f, AccessTokenRedactionFilter) for f in root.filters)

    logging.getLogger("graph_http.test").info("GET /me?access_token=%s", "TOKEN")
    for handler in root.handlers:
        handler.flush()
    assert "access_token=***" in log_file.read_text(encoding="utf-8")
    assert "TOKEN" not in log_file.read_text(encoding="utf-8")


def test_configure_from_config_can_disable_redaction(restore_root_logger) -> None:
    config = AppConfig(
        logging=LoggingConfig(level=LogLevel.WARNING, redact_access_tokens=False)
    )
    configure_logging_from_config(config)

    root = restore_root_logger
    assert root.level == logging.WARNING
    assert not any(isinstance(f, AccessTokenRedactionFilter) for f in root.filters)


def test_get_logger_returns_bindable_logger() -> None:
    logger = get_logger("graph_http.test")
    assert logger.bind(request_id="1") is not None
