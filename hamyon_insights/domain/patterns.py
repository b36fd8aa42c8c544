"""Historical spending patterns - period comparisons, category seasonality and insights"""

import calendar
from datetime import date, timedelta
from typing import Dict, List

from hamyon_insights.domain.ledger import Ledger
from hamyon_insights.domain.models import CategoryPattern, HistoricalPattern, MonthAmount, SpendingInsight, Transaction
from hamyon_insights.domain import thresholds as th
from hamyon_insights.utils.date_utils import month_key, shift_month, week_start
from hamyon_insights.utils.math_utils import coefficient_of_variation, mean, percent_change, round_half_up


def classify_trend(change: float, threshold: float) -> str:
    if change > threshold:
        return "increasing"
    if change < -threshold:
        return "decreasing"
    return "stable"


def monthly_spending(ledger: Ledger, month: date) -> float:
    """Total expenses dated in the calendar month containing `month`"""
    return sum(
        (t.magnitude for t in ledger.transactions if t.is_expense and t.date.year == month.year and t.date.month == month.month),
        0.0,
    )


def week_over_week(ledger: Ledger) -> HistoricalPattern:
    """This week (Sunday through today) against the same days of last week"""
    this_week_start = week_start(ledger.today)
    current = ledger.spending_between(this_week_start, ledger.today)
    previous = ledger.spending_between(
        this_week_start - timedelta(days=7),
        ledger.today - timedelta(days=7),
    )

    change = percent_change(current, previous)
    return HistoricalPattern(
        period="week",
        current=current,
        previous=previous,
        trend=classify_trend(change, th.PERIOD_TREND_PERCENT),
        percent_change=round_half_up(change),
    )


def month_over_month(ledger: Ledger) -> HistoricalPattern:
    """This calendar month against last month, with the same month a year ago"""
    current = monthly_spending(ledger, ledger.today)
    previous = monthly_spending(ledger, shift_month(ledger.today, -1))
    year_ago = monthly_spending(ledger, shift_month(ledger.today, -12))

    change = percent_change(current, previous)
    return HistoricalPattern(
        period="month",
        current=current,
        previous=previous,
        trend=classify_trend(change, th.PERIOD_TREND_PERCENT),
        percent_change=round_half_up(change),
        year_ago=year_ago,
    )


def _seasonality(cv: float) -> str:
    if cv > th.SEASONALITY_HIGH_CV:
        return "high"
    if cv > th.SEASONALITY_LOW_CV:
        return "low"
    return "none"


def analyze_category_patterns(ledger: Ledger) -> List[CategoryPattern]:
    """
    Describe how each category's monthly spend moves over time.

    Requirements per category: 3+ expenses spread over 2+ months.
    - Trend: mean of the last 3 months vs the 3 before (+/-15%)
    - Seasonality: coefficient of variation of monthly totals (>50 high, >25 low)

    Sorted by monthly average, largest first.
    """
    oldest_first = list(reversed(ledger.transactions))
    by_category: Dict[str, List[Transaction]] = {}
    for txn in oldest_first:
        if txn.is_expense:
            by_category.setdefault(txn.category_id, []).append(txn)

    patterns: List[CategoryPattern] = []
    for category_id, txns in by_category.items():
        if len(txns) < th.CATEGORY_MIN_TRANSACTIONS:
            continue

        monthly: Dict[str, float] = {}
        for txn in txns:
            key = month_key(txn.date)
            monthly[key] = monthly.get(key, 0.0) + txn.magnitude

        months = sorted(monthly)
        if len(months) < th.CATEGORY_MIN_MONTHS:
            continue

        amounts = [monthly[m] for m in months]
        average = mean(amounts)

        by_amount = sorted(months, key=lambda m: monthly[m], reverse=True)
        peak, lowest = by_amount[0], by_amount[-1]

        window = th.CATEGORY_TREND_WINDOW
        recent_avg = mean([monthly[m] for m in months[-window:]])
        previous_months = months[-2 * window : -window]
        previous_avg = mean([monthly[m] for m in previous_months]) if previous_months else recent_avg

        patterns.append(
            CategoryPattern(
                category_id=category_id,
                monthly_average=round_half_up(average),
                peak_month=MonthAmount(peak, monthly[peak]),
                lowest_month=MonthAmount(lowest, monthly[lowest]),
                trend=classify_trend(percent_change(recent_avg, previous_avg), th.CATEGORY_TREND_PERCENT),
                seasonality=_seasonality(coefficient_of_variation(amounts)),
            )
        )

    return sorted(patterns, key=lambda p: p.monthly_average, reverse=True)


def _month_name(key: str) -> str:
    return calendar.month_name[int(key[5:7])]


def generate_insights(patterns: List[CategoryPattern], monthly: HistoricalPattern) -> List[SpendingInsight]:
    """Seasonal peaks, year-over-year swings, the fastest-growing category and a steady habit"""
    insights: List[SpendingInsight] = []

    for pattern in patterns:
        if pattern.seasonality != "high":
            continue
        month_name = _month_name(pattern.peak_month.month)
        insights.append(
            SpendingInsight(
                type="seasonal",
                severity="medium",
                code="seasonal_peak",
                title=f"Seasonal pattern: {pattern.category_id}",
                message=(
                    f"You always spend more on {pattern.category_id} in {month_name} "
                    f"({pattern.peak_month.amount:,.0f}). Plan ahead!"
                ),
                params={
                    "category_id": pattern.category_id,
                    "peak_month": pattern.peak_month.month,
                    "peak_amount": pattern.peak_month.amount,
                },
            )
        )

    if monthly.year_ago:
        yoy = percent_change(monthly.current, monthly.year_ago)
        if abs(yoy) > th.YEAR_OVER_YEAR_PERCENT:
            direction = "more" if yoy > 0 else "less"
            insights.append(
                SpendingInsight(
                    type="trend",
                    severity="high" if yoy > 0 else "low",
                    code="year_over_year",
                    title="Year-over-year",
                    message=(
                        f"This month: {abs(yoy):.0f}% {direction} than a year ago "
                        f"({monthly.year_ago:,.0f})"
                    ),
                    params={"yoy_change": yoy, "current": monthly.current, "year_ago": monthly.year_ago},
                )
            )

    increasing = [p for p in patterns if p.trend == "increasing"]
    if increasing:
        top = increasing[0]
        insights.append(
            SpendingInsight(
                type="trend",
                severity="high",
                code="growing_category",
                title=f"Growing expenses: {top.category_id}",
                message=(
                    f"{top.category_id} has been growing for 3 months. "
                    f"Average: {top.monthly_average:,}/mo. Is this a sustainable trend?"
                ),
                params={"category_id": top.category_id, "monthly_average": top.monthly_average},
            )
        )

    habits = [p for p in patterns if p.seasonality == "none" and p.trend == "stable"]
    if habits:
        habit = habits[0]
        insights.append(
            SpendingInsight(
                type="habit",
                severity="low",
                code="steady_habit",
                title=f"Habit: {habit.category_id}",
                message=(
                    f"{habit.category_id} is consistent: ~{habit.monthly_average:,}/mo every month. "
                    "This is a good habit!"
                ),
                params={"category_id": habit.category_id, "monthly_average": habit.monthly_average},
            )
        )

    return insights
