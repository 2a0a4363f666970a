import logging

import pytest
import structlog

from app.logging_config import redact_relay_fields, setup_logging
from app.middleware.logging_middleware import log_level_for, operation_for_path


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def test_setup_logging_renders_json_lines(restore_root_logger, capsys):
    setup_logging("INFO")

    structlog.stdlib.get_logger("relayer").info("submission_confirmed", nonce=3)

    out = capsys.readouterr().out
    assert '"event": "submission_confirmed"' in out
    assert '"nonce": 3' in out
    assert restore_root_logger.level == logging.INFO


def test_setup_logging_quiets_http_client_loggers(restore_root_logger):
    setup_logging("DEBUG")

    assert restore_root_logger.level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING


def test_setup_logging_never_writes_key_material(restore_root_logger, capsys):
    setup_logging("INFO")

    structlog.stdlib.get_logger("relayer").info("account_loaded", private_key="0xac0974bec39a17e3")

    out = capsys.readouterr().out
    assert "0xac0974bec39a17e3" not in out
    assert '"private_key": "***"' in out


def test_redact_shortens_hex_payloads():
    raw = "0x" + "f8" * 120

    event = redact_relay_fields(None, "info", {"event": "sent", "raw_transaction": raw, "nonce": 4})

    assert event["raw_transaction"].startswith(raw[:18])
    assert event["raw_transaction"].endswith(f"({len(raw)} chars)")
    assert event["nonce"] == 4


def test_redact_keeps_short_values():
    event = redact_relay_fields(None, "info", {"event": "sim", "data": "0x1234"})

    assert event["data"] == "0x1234"


@pytest.mark.parametrize(
    "path, operation",
    [
        ("/integrations/registration-relayer/v1/register", "register"),
        ("/integrations/relayer/v1/create-account", "create_account"),
        ("/healthz", None),
    ],
)
def test_operation_for_path(path, operation):
    assert operation_for_path(path) == operation


def test_health_checks_are_logged_quietly():
    assert log_level_for("/healthz", 200) == "debug"
    assert log_level_for("/healthz", 503) == "error"
    assert log_level_for("/integrations/relayer/v1/create-account", 200) == "info"
    assert log_level_for("/integrations/relayer/v1/create-account", 400) == "warning"
