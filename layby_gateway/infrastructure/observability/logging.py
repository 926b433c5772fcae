"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args, service_name: str = "layby-gateway", **kwargs):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "layby-gateway") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_plan_calculated(
    request_id: str,
    eligible: bool,
    days_until_travel: int,
    installment_count: int | None,
    duration_ms: float,
) -> None:
    """Log structured plan calculation outcome for analysis"""
    logging.info(
        "Payment plan calculated",
        extra={
            "request_id": request_id,
            "step": "plan_calculated",
            "plan_outcome": "eligible" if eligible else "ineligible",
            "days_until_travel": days_until_travel,
            "installment_count": installment_count,
            "duration_ms": duration_ms,
        },
    )


def log_booking_created(
    request_id: str,
    booking_reference: str,
    payment_type: str,
    total_amount: str,
    duration_ms: float,
) -> None:
    """Log structured booking outcome"""
    logging.info(
        "Booking created",
        extra={
            "request_id": request_id,
            "step": "booking_created",
            "booking_reference": booking_reference,
            "payment_type": payment_type,
            "total_amount": total_amount,
            "duration_ms": duration_ms,
        },
    )
