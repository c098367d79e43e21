"""
Logging configuration for the API process.

Production emits one JSON object per line; development keeps the plain
`time - logger - level - message` layout.
"""

import logging
import sys
from typing import Any, Dict
from datetime import datetime, timezone
from pythonjsonlogger import jsonlogger

PLAIN_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class ServiceJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter tagging every record with the service and environment.
    """

    def __init__(self, *args, service: str = "", environment: str = "", **kwargs):
        super().__init__(*args, **kwargs)
        self.service = service
        self.environment = environment

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['service'] = self.service
        log_record['environment'] = self.environment

        # Source location only for warnings and up
        if record.levelno >= logging.WARNING:
            log_record['function'] = record.funcName
            log_record['line'] = record.lineno


def setup_logging(
    log_level: str = "INFO",
    json_logs: bool = True,
    service: str = "",
    environment: str = ""
) -> None:
    """
    Configure the root logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Whether to use JSON formatting (True for production, False for development)
        service: Service name added to JSON records
        environment: Deployment environment added to JSON records
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)

    if json_logs:
        formatter = ServiceJsonFormatter(
            '%(timestamp)s %(level)s %(logger)s %(message)s',
            service=service,
            environment=environment
        )
    else:
        formatter = logging.Formatter(PLAIN_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    console_handler.setFormatter(formatter)

    root_logger.setLevel(getattr(logging, log_level.upper()))
    root_logger.addHandler(console_handler)

    # pymongo logs every server heartbeat at DEBUG
    logging.getLogger("pymongo").setLevel(logging.WARNING)
