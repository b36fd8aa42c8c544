"""Forecast engine - next-month spend estimate and cash-flow projection"""

from datetime import date, timedelta
from typing import List, Sequence

from hamyon_insights.domain.ledger import Ledger
from hamyon_insights.domain.models import (
    CashFlowDay,
    CashFlowEvent,
    CashFlowProjection,
    Forecast,
    ForecastRange,
    HistoricalPattern,
    RecurringRule,
    Subscription,
)
from hamyon_insights.domain.patterns import monthly_spending
from hamyon_insights.domain import thresholds as th
from hamyon_insights.utils.date_utils import generate_date_range, shift_month
from hamyon_insights.utils.math_utils import coefficient_of_variation, mean, round_half_up

TREND_FACTORS = {
    "increasing": th.FORECAST_INCREASE_FACTOR,
    "decreasing": th.FORECAST_DECREASE_FACTOR,
    "stable": 1.0,
}


def forecast_next_month(ledger: Ledger, monthly: HistoricalPattern) -> Forecast:
    """
    Estimate next month's spend from the current and two previous months.

    - Estimate: 3-month average, x1.1 if the monthly trend is increasing, x0.9 if decreasing
    - Confidence: 100 minus the coefficient of variation of those months, clamped to 0-100
    - Range: fixed +/-15% band around the estimate
    """
    totals = [monthly_spending(ledger, shift_month(ledger.today, -i)) for i in range(th.FORECAST_MONTHS)]
    average = mean(totals)
    estimate = average * TREND_FACTORS[monthly.trend]

    if average == 0:
        confidence = 0.0
    else:
        confidence = max(0.0, min(100.0, 100 - coefficient_of_variation(totals)))

    return Forecast(
        amount=round_half_up(estimate),
        confidence=round_half_up(confidence),
        range=ForecastRange(
            min=round_half_up(estimate * th.FORECAST_RANGE_LOW),
            max=round_half_up(estimate * th.FORECAST_RANGE_HIGH),
        ),
    )


def rule_matches(rule: RecurringRule, day: date) -> bool:
    """Whether a recurring rule fires on `day`, judged against its reference date"""
    ref = rule.reference_date
    if rule.frequency == "daily":
        return True
    if rule.frequency == "weekly":
        return ref.weekday() == day.weekday()
    if rule.frequency == "monthly":
        return ref.day == day.day
    if rule.frequency == "yearly":
        return ref.month == day.month and ref.day == day.day
    return False


def project_cash_flow(
    balance: float,
    recurring: Sequence[RecurringRule],
    subscriptions: Sequence[Subscription],
    start: date,
    horizon_days: int,
) -> CashFlowProjection:
    """
    Roll the balance forward day by day from `start` through `start + horizon_days`.

    Deterministic: only active recurring rules and subscriptions move money.
    Subscriptions fire only on their exact next billing date.
    """
    days: List[CashFlowDay] = []
    running_balance = balance

    for day in generate_date_range(start, start + timedelta(days=max(0, horizon_days))):
        inflows = 0.0
        outflows = 0.0
        events: List[CashFlowEvent] = []

        for rule in recurring:
            if not rule.active or not rule_matches(rule, day):
                continue
            amount = abs(rule.amount)
            if rule.kind == "income":
                inflows += amount
            else:
                outflows += amount
            events.append(
                CashFlowEvent(
                    source_id=rule.id,
                    source="recurring",
                    kind=rule.kind,
                    name=rule.name,
                    amount=amount if rule.kind == "income" else -amount,
                    date=day,
                )
            )

        for sub in subscriptions:
            if not sub.active or sub.next_billing_date != day:
                continue
            amount = abs(sub.amount)
            outflows += amount
            events.append(
                CashFlowEvent(
                    source_id=sub.id,
                    source="subscription",
                    kind="subscription",
                    name=sub.name,
                    amount=-amount,
                    date=day,
                )
            )

        running_balance = running_balance + inflows - outflows
        days.append(
            CashFlowDay(
                date=day,
                projected_balance=running_balance,
                inflows=inflows,
                outflows=outflows,
                events=events,
            )
        )

    return CashFlowProjection(start_balance=balance, days=days)
