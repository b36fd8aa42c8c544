"""Entry points used by the app: analyze a snapshot with logging and metrics"""

import logging
import time
from datetime import datetime
from typing import Any, Mapping, Optional

from hamyon_insights.config import settings
from hamyon_insights.domain.analysis import build_analysis, empty_analysis
from hamyon_insights.domain.exceptions import InvalidTransactionDataError
from hamyon_insights.domain.models import AnalysisResult, Snapshot
from hamyon_insights.infrastructure.observability.logging import log_analysis
from hamyon_insights.infrastructure.observability.metrics import (
    analysis_duration_histogram,
    record_invalid_input,
    record_report,
)
from hamyon_insights.snapshot.loader import load_snapshot

logger = logging.getLogger(__name__)


def run_analysis(
    snapshot: Snapshot,
    now: Optional[datetime] = None,
    horizon_days: Optional[int] = None,
) -> AnalysisResult:
    """
    Analyze a validated snapshot.

    `now` defaults to the wall clock; pass it explicitly for reproducible results.
    """
    start_time = time.perf_counter()
    now = now or datetime.now()
    horizon = settings.forecast_horizon_days if horizon_days is None else horizon_days

    result = build_analysis(snapshot, now, horizon, settings.bill_reminder_days)

    duration = time.perf_counter() - start_time
    analysis_duration_histogram.observe(duration)
    record_report(result.report)
    log_analysis(
        anomaly_count=len(result.report.anomalies),
        risk_score=result.report.risk_score,
        critical_count=result.report.critical_count,
        forecast_amount=result.forecast.amount,
        duration_ms=duration * 1000,
    )
    return result


def analyze_payload(
    payload: Mapping[str, Any],
    now: Optional[datetime] = None,
    horizon_days: Optional[int] = None,
) -> AnalysisResult:
    """
    Validate a raw snapshot payload and analyze it.

    Malformed input never raises: it is logged and an empty result is returned.
    """
    now = now or datetime.now()
    try:
        snapshot = load_snapshot(payload)
    except InvalidTransactionDataError as e:
        record_invalid_input()
        logger.warning(f"Invalid snapshot: {e}", extra={"step": "snapshot_validation"})
        horizon = settings.forecast_horizon_days if horizon_days is None else horizon_days
        return empty_analysis(now, horizon)

    return run_analysis(snapshot, now=now, horizon_days=horizon_days)
