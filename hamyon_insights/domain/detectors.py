"""Anomaly detectors - each scans a bounded window of recent expenses"""

from datetime import timedelta
from typing import Callable, Dict, List, Tuple

from hamyon_insights.domain.ledger import Ledger
from hamyon_insights.domain.models import Anomaly, CategoryProfile, Transaction
from hamyon_insights.domain import thresholds as th
from hamyon_insights.utils.math_utils import round_half_up

Profiles = Dict[str, CategoryProfile]
Detector = Callable[[Ledger, Profiles], List[Anomaly]]


def _fmt(amount: float) -> str:
    return f"{amount:,.0f}"


def _is_night(hour: int) -> bool:
    return hour >= th.NIGHT_START_HOUR or hour < th.NIGHT_END_HOUR


def _is_deep_night(hour: int) -> bool:
    return th.DEEP_NIGHT_START_HOUR <= hour < th.NIGHT_END_HOUR


def detect_amount_outliers(ledger: Ledger, profiles: Profiles) -> List[Anomaly]:
    """
    Flag expenses more than 3 standard deviations above their category mean.

    Severity: z > 5 critical, z > 4 high, otherwise medium.
    Possible fraud: more than 10x the category mean, or more than twice the
    largest amount ever seen in the category.
    """
    anomalies: List[Anomaly] = []

    for txn in ledger.recent_expenses(th.AMOUNT_SCAN_LIMIT):
        profile = profiles.get(txn.category_id)
        if profile is None or profile.count < th.MIN_PROFILE_TRANSACTIONS or profile.std_dev == 0:
            continue

        amount = txn.magnitude
        z_score = (amount - profile.mean) / profile.std_dev
        if z_score <= th.AMOUNT_Z_THRESHOLD:
            continue

        multiplier = amount / profile.mean
        if z_score > th.AMOUNT_Z_CRITICAL:
            severity = "critical"
        elif z_score > th.AMOUNT_Z_HIGH:
            severity = "high"
        else:
            severity = "medium"

        anomalies.append(
            Anomaly(
                id=f"amount_{txn.id}",
                type="amount",
                severity=severity,
                transaction=txn,
                description=(
                    f"This {txn.category_id} purchase ({_fmt(amount)}) is {multiplier:.1f}x "
                    f"your usual amount (avg: {_fmt(profile.mean)})"
                ),
                score=min(100, round_half_up(z_score * th.AMOUNT_SCORE_PER_Z)),
                recommendation=(
                    "Verify this transaction. If unauthorized, report immediately."
                    if multiplier > th.AMOUNT_FRAUD_MULTIPLIER
                    else "Review if this large purchase was planned."
                ),
                possible_fraud=(
                    multiplier > th.AMOUNT_FRAUD_MULTIPLIER
                    or amount > profile.max_amount * th.AMOUNT_FRAUD_MAX_FACTOR
                ),
                code="amount_outlier",
                params={
                    "category_id": txn.category_id,
                    "amount": amount,
                    "average": profile.mean,
                    "multiplier": round(multiplier, 1),
                    "z_score": round(z_score, 2),
                },
            )
        )

    return anomalies


def detect_time_outliers(ledger: Ledger, profiles: Profiles) -> List[Anomaly]:
    """Flag late-night purchases in categories that are rarely bought at night"""
    anomalies: List[Anomaly] = []
    timed = [t for t in ledger.expenses() if t.time is not None][: th.TIME_SCAN_LIMIT]

    for txn in timed:
        hour = txn.hour
        profile = profiles.get(txn.category_id)
        if profile is None or len(profile.hours) < th.TIME_MIN_HOUR_SAMPLES:
            continue
        if not _is_night(hour):
            continue

        night_count = sum(1 for h in profile.hours if _is_night(h))
        percentage = night_count / len(profile.hours) * 100
        if percentage >= th.TIME_USUAL_NIGHT_PERCENT:
            continue

        deep_night = _is_deep_night(hour)
        clock = txn.time.strftime("%H:%M")
        anomalies.append(
            Anomaly(
                id=f"time_{txn.id}",
                type="time",
                severity="high" if deep_night else "medium",
                transaction=txn,
                description=(
                    f"{txn.category_id} purchase at {clock} is unusual. "
                    f"You typically don't buy {txn.category_id} at this hour."
                ),
                score=round_half_up((100 - percentage) * th.TIME_SCORE_FACTOR),
                recommendation=(
                    "Purchases between 2-5 AM are uncommon. Verify this wasn't fraudulent."
                    if deep_night
                    else "Late-night purchases may indicate stress spending. Monitor this pattern."
                ),
                possible_fraud=deep_night and txn.magnitude > profile.mean * th.TIME_FRAUD_MEAN_FACTOR,
                code="time_outlier",
                params={
                    "category_id": txn.category_id,
                    "time": clock,
                    "night_share_percent": round(percentage, 1),
                },
            )
        )

    return anomalies


def detect_frequency_bursts(ledger: Ledger, profiles: Profiles) -> List[Anomaly]:
    """
    Flag categories with an unusual number of purchases in the last 24 hours.

    A category needs at least 5 purchases in the window and more than three
    times its average daily rate over the whole ledger span.
    """
    anomalies: List[Anomaly] = []
    window_start = ledger.now - timedelta(hours=th.FREQUENCY_WINDOW_HOURS)

    by_category: Dict[str, List[Transaction]] = {}
    for txn in ledger.recent_expenses(th.FREQUENCY_SCAN_LIMIT):
        if txn.timestamp() > window_start:
            by_category.setdefault(txn.category_id, []).append(txn)

    for category_id, txns in by_category.items():
        count = len(txns)
        if count < th.FREQUENCY_MIN_COUNT:
            continue

        profile = profiles.get(category_id)
        avg_daily_count = profile.count / ledger.days_span() if profile else 1.0
        if count <= avg_daily_count * th.FREQUENCY_RATE_MULTIPLIER:
            continue

        total = sum(t.magnitude for t in txns)
        ratio = round_half_up(count / avg_daily_count)
        if count > th.FREQUENCY_CRITICAL_COUNT:
            severity = "critical"
        elif count > th.FREQUENCY_HIGH_COUNT:
            severity = "high"
        else:
            severity = "medium"

        representative = txns[0]
        anomalies.append(
            Anomaly(
                id=f"frequency_{category_id}_{representative.id}",
                type="frequency",
                severity=severity,
                transaction=representative,
                description=(
                    f"{count} {category_id} purchases in last 24 hours ({_fmt(total)}). "
                    f"This is {ratio}x your usual frequency."
                ),
                score=min(100, count * th.FREQUENCY_SCORE_PER_TXN),
                recommendation=(
                    "This is highly unusual. Check for duplicate charges or fraudulent activity."
                    if count > th.FREQUENCY_CRITICAL_COUNT
                    else "High frequency may indicate impulse buying. Consider a cooling-off period."
                ),
                possible_fraud=count > th.FREQUENCY_CRITICAL_COUNT,
                code="frequency_burst",
                params={
                    "category_id": category_id,
                    "count": count,
                    "total": total,
                    "usual_daily_count": round(avg_daily_count, 2),
                    "ratio": ratio,
                },
            )
        )

    return anomalies


def detect_duplicates(ledger: Ledger, profiles: Profiles) -> List[Anomaly]:
    """Flag same-category, same-amount expenses charged within 5 minutes of each other"""
    anomalies: List[Anomaly] = []
    recent = ledger.recent_expenses(th.DUPLICATE_SCAN_LIMIT)
    window = timedelta(minutes=th.DUPLICATE_WINDOW_MINUTES)

    for i, first in enumerate(recent):
        for second in recent[i + 1 :]:
            if first.category_id != second.category_id or first.amount != second.amount:
                continue

            gap = abs(first.timestamp() - second.timestamp())
            if gap >= window:
                continue

            minutes = round_half_up(gap.total_seconds() / 60)
            anomalies.append(
                Anomaly(
                    id=f"duplicate_{first.id}_{second.id}",
                    type="duplicate",
                    severity="high",
                    transaction=first,
                    description=(
                        f"Potential duplicate: {first.category_id} - {_fmt(first.magnitude)} "
                        f"charged twice within {minutes} minutes"
                    ),
                    score=th.DUPLICATE_SCORE,
                    recommendation="Check your bank statement. If this is a duplicate charge, request a refund.",
                    possible_fraud=True,
                    code="duplicate_charge",
                    params={
                        "category_id": first.category_id,
                        "amount": first.magnitude,
                        "minutes_apart": minutes,
                        "duplicate_of": second.id,
                    },
                )
            )
            break  # One flag per transaction

    return anomalies


def detect_behavioral_shift(ledger: Ledger, profiles: Profiles) -> List[Anomaly]:
    """
    Compare the last 7 days' daily spend against the 23 days before.

    Needs 5 recent and 10 baseline expenses. A change beyond +/-50% is flagged;
    only a rise of more than 200% counts as possible fraud, a drop never does.
    """
    recent_start = ledger.today - timedelta(days=th.BEHAVIOR_RECENT_DAYS)
    baseline_start = ledger.today - timedelta(days=th.BEHAVIOR_LOOKBACK_DAYS)

    expenses = ledger.expenses()
    recent = [t for t in expenses if t.date >= recent_start]
    baseline = [t for t in expenses if baseline_start <= t.date < recent_start]

    if len(recent) < th.BEHAVIOR_MIN_RECENT or len(baseline) < th.BEHAVIOR_MIN_BASELINE:
        return []

    recent_daily = sum(t.magnitude for t in recent) / th.BEHAVIOR_RECENT_DAYS
    baseline_daily = sum(t.magnitude for t in baseline) / th.BEHAVIOR_BASELINE_DAYS
    if baseline_daily == 0:
        return []

    change = (recent_daily - baseline_daily) / baseline_daily * 100
    if abs(change) <= th.BEHAVIOR_CHANGE_PERCENT:
        return []

    representative = recent[0]
    sign = "+" if change > 0 else ""
    return [
        Anomaly(
            id=f"behavioral_{representative.id}",
            type="behavioral",
            severity="critical" if abs(change) > th.BEHAVIOR_CRITICAL_PERCENT else "high",
            transaction=representative,
            description=(
                f"Your spending pattern changed dramatically: {sign}{round_half_up(change)}% "
                f"in last 7 days vs previous weeks ({_fmt(recent_daily)}/day vs {_fmt(baseline_daily)}/day)"
            ),
            score=min(100, abs(change)),
            recommendation=(
                "Significant increase in spending detected. Review your recent purchases "
                "and consider if this is sustainable."
                if change > 0
                else "Significant decrease detected. Great job if this is intentional savings!"
            ),
            possible_fraud=change > th.BEHAVIOR_FRAUD_PERCENT,
            code="behavioral_shift",
            params={
                "percent_change": round_half_up(change),
                "recent_daily": recent_daily,
                "baseline_daily": baseline_daily,
            },
        )
    ]


DETECTORS: Tuple[Tuple[str, Detector], ...] = (
    ("amount", detect_amount_outliers),
    ("time", detect_time_outliers),
    ("frequency", detect_frequency_bursts),
    ("duplicate", detect_duplicates),
    ("behavioral", detect_behavioral_shift),
)
