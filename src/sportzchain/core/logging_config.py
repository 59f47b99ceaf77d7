"""
SportZchain - Structured Logging

JSON log output for the contract audit trail. Contract modules log through
``logging.getLogger(__name__)`` with an ``extra={"event": ...}`` payload;
every extra field becomes a top-level key of the JSON line, so Transfer,
role and vesting activity can be filtered by ``event``.

Usage:
    from sportzchain.core.logging_config import setup_logging

    logger = setup_logging(log_file="/var/log/sportzchain/contracts.json")
"""

import logging
import logging.handlers
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

LOG_FORMAT = "%(timestamp)s %(level)s %(name)s %(message)s"
MAX_LOG_BYTES = 10 * 1024 * 1024  # 10MB


class ContractLogFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter tagging each line with network, service and call site.
    """

    def __init__(self, network: str = "testnet", service: str = "sportzchain"):
        super().__init__(fmt=LOG_FORMAT)
        self.network = network
        self.service = service

    def add_fields(
        self,
        log_record: Dict[str, Any],
        record: logging.LogRecord,
        message_dict: Dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record["level"] = record.levelname.lower()
        log_record["network"] = self.network
        log_record["service"] = self.service
        log_record["source"] = {
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }


def _attach(logger: logging.Logger, handler: logging.Handler, formatter: logging.Formatter) -> None:
    handler.setLevel(logger.level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def setup_logging(
    name: str = "sportzchain",
    log_file: Optional[str] = None,
    level: str = "INFO",
    network: str = "testnet",
    console: bool = True,
    max_bytes: int = MAX_LOG_BYTES,
    backup_count: int = 5,
) -> logging.Logger:
    """
    Configure a logger to emit JSON lines.

    Any handlers already on the logger are replaced, so calling this twice
    does not duplicate output.

    Args:
        name: Logger name; ``sportzchain`` covers every contract module
        log_file: Rotating JSON log file, skipped when None
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        network: Network tag written on every line
        console: Also write to stdout
        max_bytes: Size at which the log file rotates
        backup_count: Rotated files to keep

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level.upper())
    logger.handlers = []

    formatter = ContractLogFormatter(network=network, service=name.split(".")[0])

    if console:
        _attach(logger, logging.StreamHandler(sys.stdout), formatter)

    if log_file:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            rotating = logging.handlers.RotatingFileHandler(
                log_file, maxBytes=max_bytes, backupCount=backup_count
            )
        except OSError as e:
            logger.warning("Could not open log file %s: %s", log_file, e)
        else:
            _attach(logger, rotating, formatter)

    return logger


def get_logger(name: str, log_file: Optional[str] = None, level: str = "INFO") -> logging.Logger:
    """Return ``name``'s logger, configuring it on first use only."""
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    return setup_logging(name=name, log_file=log_file, level=level)


def setup_contract_logging(network: Optional[str] = None) -> logging.Logger:
    """Send all contract logs to ``contracts-<network>.json`` under the configured log dir."""
    from .config import Config

    network = network or Config.NETWORK_TYPE.value
    return setup_logging(
        log_file=os.path.join(Config.LOG_DIR, f"contracts-{network}.json"),
        level=Config.LOG_LEVEL,
        network=network,
    )
