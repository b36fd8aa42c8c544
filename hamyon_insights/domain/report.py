"""Anomaly report aggregation - dedup, ranking and overall risk"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from hamyon_insights.domain.detectors import DETECTORS, Detector, Profiles
from hamyon_insights.domain.ledger import Ledger
from hamyon_insights.domain.models import Anomaly, AnomalyReport
from hamyon_insights.domain import thresholds as th

RISK_SUMMARIES: Dict[str, str] = {
    "high": "High risk: Multiple critical anomalies detected. Review immediately.",
    "medium": "Medium risk: Several unusual patterns detected. Monitor closely.",
    "low": "Low risk: Some minor anomalies. Worth reviewing.",
    "clear": "All clear: No significant anomalies detected.",
}

RECOMMEND_BANK_CHECK = "Check your bank statement for unauthorized charges"
RECOMMEND_REVIEW_CRITICAL = "Review critical alerts immediately"
RECOMMEND_BEHAVIOR_CHANGE = "Your spending behavior has changed significantly - is everything OK?"
RECOMMEND_PURCHASE_LIMITS = "Consider setting purchase limits to prevent impulse buying"


def rank_anomalies(anomalies: Iterable[Anomaly]) -> List[Anomaly]:
    """Drop repeated ids (first occurrence wins), then sort by severity and score"""
    unique: Dict[str, Anomaly] = {}
    for anomaly in anomalies:
        unique.setdefault(anomaly.id, anomaly)
    return sorted(unique.values(), key=lambda a: (-a.severity_rank, -a.score))


def calculate_risk_score(anomalies: Sequence[Anomaly]) -> int:
    """
    Combine anomaly counts into a 0-100 risk score.

    Weights: 30 per critical, 20 per high, 25 per possible fraud, plus 2 per
    anomaly of any kind.
    """
    critical = sum(1 for a in anomalies if a.severity == "critical")
    high = sum(1 for a in anomalies if a.severity == "high")
    fraud = sum(1 for a in anomalies if a.possible_fraud)

    score = (
        critical * th.RISK_WEIGHT_CRITICAL
        + high * th.RISK_WEIGHT_HIGH
        + fraud * th.RISK_WEIGHT_FRAUD
        + len(anomalies) * th.RISK_WEIGHT_ANY
    )
    return min(100, score)


def determine_risk_level(risk_score: int) -> Tuple[str, str]:
    """Map a risk score to (level, summary)"""
    if risk_score >= th.RISK_HIGH:
        level = "high"
    elif risk_score >= th.RISK_MEDIUM:
        level = "medium"
    elif risk_score >= th.RISK_LOW:
        level = "low"
    else:
        level = "clear"
    return level, RISK_SUMMARIES[level]


def build_recommendations(anomalies: Sequence[Anomaly]) -> List[str]:
    recommendations: List[str] = []
    if any(a.possible_fraud for a in anomalies):
        recommendations.append(RECOMMEND_BANK_CHECK)
    if any(a.severity == "critical" for a in anomalies):
        recommendations.append(RECOMMEND_REVIEW_CRITICAL)
    if any(a.type == "behavioral" for a in anomalies):
        recommendations.append(RECOMMEND_BEHAVIOR_CHANGE)
    if any(a.type == "frequency" for a in anomalies):
        recommendations.append(RECOMMEND_PURCHASE_LIMITS)
    return recommendations


def aggregate_report(anomalies: Iterable[Anomaly]) -> AnomalyReport:
    """Turn raw detector output into a ranked, capped report"""
    ranked = rank_anomalies(anomalies)
    risk_score = calculate_risk_score(ranked)
    risk_level, summary = determine_risk_level(risk_score)

    return AnomalyReport(
        anomalies=ranked[: th.REPORT_MAX_ANOMALIES],
        risk_score=risk_score,
        risk_level=risk_level,
        summary=summary,
        critical_count=sum(1 for a in ranked if a.severity == "critical"),
        recommendations=build_recommendations(ranked),
    )


def generate_anomaly_report(
    ledger: Ledger,
    profiles: Profiles,
    detectors: Optional[Sequence[Tuple[str, Detector]]] = None,
) -> AnomalyReport:
    """Main entry point: run every detector over the ledger and aggregate"""
    found: List[Anomaly] = []
    for _, detect in detectors if detectors is not None else DETECTORS:
        found.extend(detect(ledger, profiles))
    return aggregate_report(found)
