"""Structured JSON logging for analysis runs"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from hamyon_insights.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_analysis(
    anomaly_count: int,
    risk_score: int,
    critical_count: int,
    forecast_amount: int,
    duration_ms: float,
) -> None:
    """Log structured analysis outcome"""
    logging.getLogger("hamyon_insights.analysis").info(
        "Analysis completed",
        extra={
            "step": "analysis_complete",
            "anomaly_count": anomaly_count,
            "risk_score": risk_score,
            "critical_count": critical_count,
            "forecast_amount": forecast_amount,
            "duration_ms": duration_ms,
        },
    )
