"""
Structured JSON logging setup.
"""

import json
import logging
import logging.handlers

from sportzchain.core.logging_config import (
    ContractLogFormatter,
    get_logger,
    setup_contract_logging,
    setup_logging,
)

OWNER = "0x" + "a1" * 20
ADDR1 = "0x" + "b2" * 20


def _read_records(path):
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]


def test_formatter_adds_context_fields():
    formatter = ContractLogFormatter(network="testnet", service="sportzchain")
    record = logging.LogRecord(
        name="sportzchain.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="hello %s",
        args=("world",),
        exc_info=None,
    )
    record.event = "test.event"

    payload = json.loads(formatter.format(record))

    assert payload["message"] == "hello world"
    assert payload["level"] == "info"
    assert payload["network"] == "testnet"
    assert payload["service"] == "sportzchain"
    assert payload["event"] == "test.event"
    assert payload["source"]["line"] == 10
    assert payload["timestamp"]


def test_setup_logging_writes_json_file(tmp_path):
    log_file = tmp_path / "logs" / "contracts.json"
    logger = setup_logging(
        name="sportzchain.test_file",
        log_file=str(log_file),
        level="DEBUG",
        console=False,
    )
    logger.info("Token event", extra={"event": "erc20.transfer", "amount": 5})
    for handler in logger.handlers:
        handler.flush()

    records = _read_records(log_file)
    assert records[-1]["event"] == "erc20.transfer"
    assert records[-1]["amount"] == 5
    assert records[-1]["name"] == "sportzchain.test_file"


def test_setup_logging_replaces_handlers():
    first = setup_logging(name="sportzchain.test_dupes", console=True)
    second = setup_logging(name="sportzchain.test_dupes", console=True)
    assert first is second
    assert len(second.handlers) == 1


def test_get_logger_configures_once():
    logger = get_logger("sportzchain.test_once")
    handlers = list(logger.handlers)
    assert get_logger("sportzchain.test_once").handlers == handlers


def test_contract_calls_log_structured_events(token, caplog):
    with caplog.at_level(logging.INFO, logger="sportzchain"):
        token.mint(OWNER, ADDR1, 10)

    records = [r for r in caplog.records if getattr(r, "event", None) == "erc20.mint"]
    assert len(records) == 1
    assert records[0].amount == 10
    assert records[0].token == "SPN"


def test_setup_contract_logging_uses_config_log_dir(tmp_path, monkeypatch):
    from sportzchain.core import config

    monkeypatch.setattr(config.Config, "LOG_DIR", str(tmp_path))
    logger = setup_contract_logging("testnet")
    try:
        file_handlers = [h for h in logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].baseFilename == str(tmp_path / "contracts-testnet.json")
    finally:
        for handler in logger.handlers:
            handler.close()
        logger.handlers = []
