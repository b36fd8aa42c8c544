"""Prometheus metrics for monitoring anomaly volume, risk levels and analysis latency"""

from prometheus_client import Counter, Histogram

from hamyon_insights.domain.models import AnomalyReport

# Analysis metrics
analysis_counter = Counter(
    "hamyon_analysis_total",
    "Total snapshot analyses run",
    ["outcome"],  # analyzed | invalid_input
)

anomaly_counter = Counter(
    "hamyon_anomalies_total",
    "Anomalies reported",
    ["type", "severity"],
)

risk_score_histogram = Histogram(
    "hamyon_risk_score",
    "Overall risk score per report",
    buckets=[0, 20, 40, 70, 100],
)

analysis_duration_histogram = Histogram(
    "hamyon_analysis_duration_seconds",
    "Time spent analyzing one snapshot",
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)


def record_report(report: AnomalyReport) -> None:
    """Record report metrics for monitoring risk distribution"""
    analysis_counter.labels(outcome="analyzed").inc()
    risk_score_histogram.observe(report.risk_score)

    for anomaly in report.anomalies:
        anomaly_counter.labels(type=anomaly.type, severity=anomaly.severity).inc()


def record_invalid_input() -> None:
    analysis_counter.labels(outcome="invalid_input").inc()
