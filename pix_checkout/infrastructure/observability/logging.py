"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

SERVICE_NAME = "pix-checkout"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = SERVICE_NAME


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_charge(
    request_id: str,
    charge_id: str,
    establishment_id: str,
    amount_cents: int,
    fulfillment: str,
    duration_ms: float,
) -> None:
    """Log structured PIX charge outcome"""
    logging.info(
        "PIX charge created",
        extra={
            "request_id": request_id,
            "charge_id": charge_id,
            "establishment_id": establishment_id,
            "step": "charge_created",
            "amount_cents": amount_cents,
            "fulfillment": fulfillment,
            "duration_ms": duration_ms,
        },
    )
