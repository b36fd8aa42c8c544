"""Full analysis of one snapshot - pure function of the snapshot and the injected clock"""

from datetime import datetime

from hamyon_insights.domain.alerts import (
    bill_reminders,
    budget_alerts,
    goal_alerts,
    late_night_alerts,
    low_balance_alerts,
    spending_runway_alerts,
    subscription_reminders,
)
from hamyon_insights.domain.forecast import forecast_next_month, project_cash_flow
from hamyon_insights.domain.ledger import Ledger
from hamyon_insights.domain.models import (
    AnalysisResult,
    Forecast,
    ForecastRange,
    HistoricalPattern,
    Snapshot,
)
from hamyon_insights.domain.patterns import analyze_category_patterns, generate_insights, month_over_month, week_over_week
from hamyon_insights.domain.profiles import build_category_profiles
from hamyon_insights.domain.report import aggregate_report, generate_anomaly_report


def build_analysis(snapshot: Snapshot, now: datetime, horizon_days: int, reminder_days: int) -> AnalysisResult:
    """
    Run every stage over a fresh Ledger.

    Flow:
    1. Ledger + category profiles -> detectors -> anomaly report
    2. Ledger -> week/month comparisons, category patterns, insights
    3. Monthly comparison -> spend forecast; balance + schedules -> cash flow
    4. Limits, goals, schedules, cash flow, recent spending -> alerts
    """
    ledger = Ledger.build(snapshot.transactions, now)
    profiles = build_category_profiles(ledger.transactions)

    report = generate_anomaly_report(ledger, profiles)

    weekly = week_over_week(ledger)
    monthly = month_over_month(ledger)
    patterns = analyze_category_patterns(ledger)
    insights = generate_insights(patterns, monthly)

    forecast = forecast_next_month(ledger, monthly)
    cash_flow = project_cash_flow(
        snapshot.balance, snapshot.recurring, snapshot.subscriptions, ledger.today, horizon_days
    )

    alerts = (
        budget_alerts(ledger, snapshot.limits)
        + goal_alerts(snapshot.goals)
        + subscription_reminders(snapshot.subscriptions, ledger.today, reminder_days)
        + bill_reminders(snapshot.recurring, ledger.today, reminder_days)
        + low_balance_alerts(cash_flow)
        + spending_runway_alerts(ledger, snapshot.balance)
        + late_night_alerts(ledger)
    )

    return AnalysisResult(
        generated_at=now,
        report=report,
        week_over_week=weekly,
        month_over_month=monthly,
        category_patterns=patterns,
        insights=insights,
        forecast=forecast,
        cash_flow=cash_flow,
        alerts=alerts,
    )


def empty_analysis(now: datetime, horizon_days: int, balance: float = 0.0) -> AnalysisResult:
    """Zero result returned when a snapshot cannot be analyzed; same shape as a real run"""
    return AnalysisResult(
        generated_at=now,
        report=aggregate_report([]),
        week_over_week=HistoricalPattern("week", 0.0, 0.0, "stable", 0),
        month_over_month=HistoricalPattern("month", 0.0, 0.0, "stable", 0, year_ago=0.0),
        category_patterns=[],
        insights=[],
        forecast=Forecast(amount=0, confidence=0, range=ForecastRange(0, 0)),
        cash_flow=project_cash_flow(balance, (), (), now.date(), horizon_days),
        alerts=[],
    )
