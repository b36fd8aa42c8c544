"""Budget, goal, bill, balance and spending-habit alerts for the notification layer"""

import math
from datetime import date, timedelta
from typing import Dict, List, Sequence

from hamyon_insights.domain.ledger import Ledger
from hamyon_insights.domain.models import Alert, CashFlowProjection, CategoryLimit, Goal, RecurringRule, Subscription
from hamyon_insights.domain import thresholds as th
from hamyon_insights.utils.math_utils import round_half_up


def _days_text(days_until: int) -> str:
    if days_until == 0:
        return "today"
    if days_until == 1:
        return "tomorrow"
    return f"in {days_until} days"


def month_spent_by_category(ledger: Ledger) -> Dict[str, float]:
    today = ledger.today
    spent: Dict[str, float] = {}
    for txn in ledger.expenses():
        if txn.date.year == today.year and txn.date.month == today.month:
            spent[txn.category_id] = spent.get(txn.category_id, 0.0) + txn.magnitude
    return spent


def budget_alerts(ledger: Ledger, limits: Sequence[CategoryLimit]) -> List[Alert]:
    """Warn at 80% of a category limit, escalate once it is exceeded"""
    spent_by_category = month_spent_by_category(ledger)
    alerts: List[Alert] = []

    for limit in limits:
        if limit.amount <= 0:
            continue
        spent = spent_by_category.get(limit.category_id, 0.0)
        percentage = spent / limit.amount * 100
        params = {"category_id": limit.category_id, "spent": spent, "limit": limit.amount, "percent": round(percentage)}

        if percentage >= th.BUDGET_EXCEEDED_PERCENT:
            alerts.append(
                Alert(
                    type="budget_alert",
                    severity="critical",
                    code="budget_exceeded",
                    title="Budget Exceeded!",
                    message=f"{limit.category_id}: spent {percentage:.0f}% of limit",
                    subject_id=limit.id,
                    params=params,
                )
            )
        elif percentage >= th.BUDGET_WARNING_PERCENT:
            alerts.append(
                Alert(
                    type="budget_alert",
                    severity="warning",
                    code="budget_approaching",
                    title="Approaching Limit",
                    message=f"{limit.category_id}: {percentage:.0f}% used",
                    subject_id=limit.id,
                    params=params,
                )
            )

    return alerts


def goal_alerts(goals: Sequence[Goal]) -> List[Alert]:
    alerts: List[Alert] = []
    for goal in goals:
        if goal.target <= 0:
            continue
        percentage = goal.current / goal.target * 100
        params = {"goal": goal.name, "current": goal.current, "target": goal.target, "percent": round(percentage)}

        if percentage >= th.GOAL_ACHIEVED_PERCENT:
            alerts.append(
                Alert("goal_progress", "info", "goal_achieved", "Goal Achieved!", goal.name, goal.id, params)
            )
        elif percentage >= th.GOAL_ALMOST_PERCENT:
            alerts.append(
                Alert(
                    "goal_progress",
                    "info",
                    "goal_almost",
                    "Almost There!",
                    f"{goal.name}: {percentage:.0f}% achieved",
                    goal.id,
                    params,
                )
            )
    return alerts


def subscription_reminders(subscriptions: Sequence[Subscription], today: date, default_days: int) -> List[Alert]:
    """Active subscriptions billing within their reminder window"""
    alerts: List[Alert] = []
    for sub in subscriptions:
        if not sub.active:
            continue
        days_until = (sub.next_billing_date - today).days
        window = sub.reminder_days or default_days
        if 0 <= days_until <= window:
            alerts.append(
                Alert(
                    type="subscription_reminder",
                    severity="critical" if days_until == 0 else "warning",
                    code="subscription_due",
                    title="Subscription Reminder",
                    message=f"{sub.name} - payment {_days_text(days_until)}",
                    subject_id=sub.id,
                    params={"name": sub.name, "amount": sub.amount, "days_until": days_until},
                )
            )
    return alerts


def bill_reminders(recurring: Sequence[RecurringRule], today: date, window: int) -> List[Alert]:
    """Active recurring expenses whose next date is within `window` days"""
    alerts: List[Alert] = []
    for rule in recurring:
        if not rule.active or rule.kind != "expense":
            continue
        days_until = (rule.reference_date - today).days
        if 0 <= days_until <= window:
            alerts.append(
                Alert(
                    type="bill_reminder",
                    severity="critical" if days_until == 0 else "warning",
                    code="bill_due",
                    title="Bill Reminder",
                    message=f"{rule.name} - {_days_text(days_until)}",
                    subject_id=rule.id,
                    params={"name": rule.name, "amount": rule.amount, "days_until": days_until},
                )
            )
    return alerts


def low_balance_alerts(projection: CashFlowProjection) -> List[Alert]:
    low_days = projection.low_balance_days
    if not low_days:
        return []
    first = low_days[0]
    return [
        Alert(
            type="low_balance",
            severity="critical",
            code="low_balance",
            title="Low Balance",
            message=f"Projected balance drops below zero on {first.date.isoformat()}",
            params={"date": first.date.isoformat(), "balance": first.projected_balance, "days_below_zero": len(low_days)},
        )
    ]


def average_daily_spending(ledger: Ledger) -> float:
    """Total expenses spread over the days between the oldest and newest expense (at least 1)"""
    expenses = ledger.expenses()
    if not expenses:
        return 0.0
    days = max(1, (expenses[0].date - expenses[-1].date).days)
    return sum(t.magnitude for t in expenses) / days


def spending_runway_alerts(ledger: Ledger, balance: float) -> List[Alert]:
    """Critical when the balance runs out within 3 days at the current daily spend"""
    daily = average_daily_spending(ledger)
    if daily <= 0:
        return []
    days_left = math.floor(balance / daily)
    if not 0 < days_left <= th.RUNWAY_ALERT_DAYS:
        return []
    return [
        Alert(
            type="critical_balance",
            severity="critical",
            code="spending_runway",
            title="Critical: Balance Alert",
            message=(
                f"Your balance will hit zero in {days_left} days at current spending "
                f"({round_half_up(daily):,}/day)"
            ),
            params={"days_left": days_left, "balance": balance, "daily_spending": daily},
        )
    ]


def _is_late_night(hour: int) -> bool:
    return hour >= th.LATE_NIGHT_START_HOUR or hour < th.LATE_NIGHT_END_HOUR


def late_night_alerts(ledger: Ledger) -> List[Alert]:
    """Warn on 3+ timed purchases between 21:00 and 06:00 dated yesterday or today"""
    since = ledger.today - timedelta(days=1)
    late = [
        t
        for t in ledger.expenses()
        if t.time is not None and t.date >= since and _is_late_night(t.time.hour)
    ]
    if len(late) < th.LATE_NIGHT_MIN_PURCHASES:
        return []
    total = sum(t.magnitude for t in late)
    return [
        Alert(
            type="stress_spending",
            severity="warning",
            code="late_night_spending",
            title="Late-Night Spending Detected",
            message=f"{len(late)} purchases after 9pm in the last 24 hours ({total:,.0f})",
            params={"count": len(late), "total": total},
        )
    ]
