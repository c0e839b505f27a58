"""
Structured JSON logging for production observability.

This package ships no entry point of its own: the host application (the
admin console backend) calls setup_logging() once at startup, before
building a PlanService.
"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from arrangement_gateway.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str | None = None) -> None:
    """Configure structured JSON logging; level defaults to settings.log_level"""
    logger = logging.getLogger()
    logger.setLevel(level or settings.log_level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_submission(
    tenant_id: str,
    plan_type: str,
    accepted: bool,
    duration_ms: float,
    plan_id: str | None = None,
    rejection_reason: str | None = None,
    rejected_field: str | None = None,
) -> None:
    """Log structured plan submission outcome for analysis"""
    logging.getLogger("arrangement_gateway.submissions").info(
        "Plan submission completed",
        extra={
            "tenant_id": tenant_id,
            "step": "plan_submission",
            "plan_type": plan_type,
            "outcome": "accepted" if accepted else "rejected",
            "plan_id": plan_id,
            "rejection_reason": rejection_reason,
            "rejected_field": rejected_field,
            "duration_ms": duration_ms,
        },
    )
