"""Unit tests for the anomaly detectors"""

import pytest

from hamyon_insights.domain.detectors import (
    DETECTORS,
    detect_amount_outliers,
    detect_behavioral_shift,
    detect_duplicates,
    detect_frequency_bursts,
    detect_time_outliers,
)
from hamyon_insights.domain.ledger import Ledger
from hamyon_insights.domain.profiles import build_category_profiles


def run(detector, transactions, now):
    ledger = Ledger.build(transactions, now)
    return detector(ledger, build_category_profiles(ledger.transactions))


# Amount outliers


def test_amount_constant_category_not_flagged(make_txn, now):
    """Zero standard deviation is skipped, never divided by"""
    transactions = [make_txn(-10_000, days_ago=d) for d in range(12)]

    assert run(detect_amount_outliers, transactions, now) == []


def test_amount_outlier_with_long_history_is_critical_fraud(make_txn, now):
    """30 normal meals then one at 500,000: z = sqrt(30) > 5, 19x the average"""
    transactions = [make_txn(-10_000, days_ago=d) for d in range(1, 31)]
    outlier = make_txn(-500_000, txn_id="big")
    transactions.append(outlier)

    anomalies = run(detect_amount_outliers, transactions, now)

    assert len(anomalies) == 1
    anomaly = anomalies[0]
    assert anomaly.id == "amount_big"
    assert anomaly.type == "amount"
    assert anomaly.severity == "critical"
    assert anomaly.score == 55
    assert anomaly.possible_fraud is True
    assert anomaly.transaction == outlier
    assert "19.4x" in anomaly.description
    assert anomaly.recommendation.startswith("Verify this transaction")


def test_amount_outlier_short_history(make_txn, now):
    """Ten meals of 10,000 and one of 500,000: the outlier is part of its own baseline"""
    transactions = [make_txn(-10_000, days_ago=d) for d in range(1, 11)]
    transactions.append(make_txn(-500_000, txn_id="big"))

    anomalies = run(detect_amount_outliers, transactions, now)

    # z = sqrt(10) ~ 3.16, mean ~ 54,545 so the multiplier is ~ 9.2x
    assert len(anomalies) == 1
    assert anomalies[0].severity == "medium"
    assert anomalies[0].score == 32
    assert anomalies[0].possible_fraud is False
    assert "9.2x" in anomalies[0].description


def test_amount_outlier_outside_scan_window_ignored(make_txn, now):
    """Only the 50 most recent expenses are scanned"""
    transactions = [make_txn(-500_000, days_ago=70, txn_id="old")]
    transactions += [make_txn(-10_000, days_ago=d) for d in range(60)]

    assert run(detect_amount_outliers, transactions, now) == []


# Time-of-day outliers


def _daytime_groceries(make_txn):
    return [make_txn(-10_000, "groceries", days_ago=d, at=f"{9 + d}:00") for d in range(1, 7)]


def test_time_deep_night_purchase(make_txn, now):
    transactions = _daytime_groceries(make_txn)
    night = make_txn(-50_000, "groceries", at="03:00", txn_id="night")
    transactions.append(night)

    anomalies = run(detect_time_outliers, transactions, now)

    assert len(anomalies) == 1
    anomaly = anomalies[0]
    assert anomaly.id == "time_night"
    assert anomaly.severity == "high"
    assert anomaly.score == 69  # (100 - 1/7 * 100) * 0.8
    assert anomaly.possible_fraud is True  # 50,000 > 2 x mean of ~15,714
    assert "03:00" in anomaly.description


def test_time_late_evening_purchase_is_medium(make_txn, now):
    transactions = _daytime_groceries(make_txn)
    transactions.append(make_txn(-10_000, "groceries", at="23:30"))

    anomalies = run(detect_time_outliers, transactions, now)

    assert len(anomalies) == 1
    assert anomalies[0].severity == "medium"
    assert anomalies[0].possible_fraud is False


def test_time_usual_night_category_not_flagged(make_txn, now):
    hours = ["23:00", "23:30", "00:30", "01:00", "22:00"]
    transactions = [make_txn(-30_000, "bars", days_ago=d + 1, at=h) for d, h in enumerate(hours)]
    transactions.append(make_txn(-30_000, "bars", at="23:45"))

    assert run(detect_time_outliers, transactions, now) == []


def test_time_requires_five_hour_samples(make_txn, now):
    transactions = [make_txn(-10_000, "groceries", days_ago=d, at="12:00") for d in range(1, 4)]
    transactions.append(make_txn(-10_000, "groceries", days_ago=5))  # untimed
    transactions.append(make_txn(-10_000, "groceries", at="03:00"))

    assert run(detect_time_outliers, transactions, now) == []


# Frequency bursts


def test_frequency_burst_against_daily_habit(make_txn, now):
    """Six shopping trips today against roughly one a day"""
    transactions = [make_txn(-15_000, "shopping", days_ago=d) for d in range(2, 32)]
    burst = [make_txn(-15_000, "shopping", at=f"{h:02d}:00", txn_id=f"s{h}") for h in range(9, 15)]
    transactions += burst

    anomalies = run(detect_frequency_bursts, transactions, now)

    assert len(anomalies) == 1
    anomaly = anomalies[0]
    assert anomaly.type == "frequency"
    assert anomaly.severity == "medium"
    assert anomaly.score == 60
    assert anomaly.possible_fraud is False
    assert anomaly.id == "frequency_shopping_s14"
    assert anomaly.transaction.id == "s14"
    assert anomaly.params["count"] == 6


def test_frequency_burst_critical(make_txn, now):
    transactions = [make_txn(-5_000, "shopping", days_ago=d) for d in range(1, 31)]
    transactions += [make_txn(-5_000, "shopping", at=f"{h:02d}:00") for h in range(4, 15)]

    anomalies = run(detect_frequency_bursts, transactions, now)

    assert len(anomalies) == 1
    assert anomalies[0].severity == "critical"
    assert anomalies[0].score == 100
    assert anomalies[0].possible_fraud is True


def test_frequency_normal_rate_not_flagged(make_txn, now):
    """Five coffees a day is this user's normal"""
    transactions = [make_txn(-3_000, "coffee", days_ago=d) for d in range(1, 11) for _ in range(5)]
    transactions += [make_txn(-3_000, "coffee", at=f"{h:02d}:00") for h in range(8, 13)]

    assert run(detect_frequency_bursts, transactions, now) == []


def test_frequency_ignores_older_than_24_hours(make_txn, now):
    transactions = [make_txn(-15_000, "shopping", days_ago=d) for d in range(2, 32)]
    # Yesterday before 15:00 is outside the window
    transactions += [make_txn(-15_000, "shopping", days_ago=1, at=f"{h:02d}:00") for h in range(8, 14)]

    assert run(detect_frequency_bursts, transactions, now) == []


# Duplicate charges


def test_duplicate_taxi_charge(make_txn, now):
    transactions = [
        make_txn(-20_000, "taxi", at="10:00", txn_id="a"),
        make_txn(-20_000, "taxi", at="10:03", txn_id="b"),
    ]

    anomalies = run(detect_duplicates, transactions, now)

    assert len(anomalies) == 1
    anomaly = anomalies[0]
    assert anomaly.id == "duplicate_b_a"
    assert anomaly.severity == "high"
    assert anomaly.score == 90
    assert anomaly.possible_fraud is True
    assert "3 minutes" in anomaly.description


def test_duplicate_flags_each_transaction_once(make_txn, now):
    transactions = [
        make_txn(-20_000, "taxi", at="10:00", txn_id="a"),
        make_txn(-20_000, "taxi", at="10:02", txn_id="b"),
        make_txn(-20_000, "taxi", at="10:04", txn_id="c"),
    ]

    anomalies = run(detect_duplicates, transactions, now)

    assert [a.id for a in anomalies] == ["duplicate_c_b", "duplicate_b_a"]


@pytest.mark.parametrize(
    "second",
    [
        {"amount": -21_000, "category": "taxi", "at": "10:01"},
        {"amount": -20_000, "category": "food", "at": "10:01"},
        {"amount": -20_000, "category": "taxi", "at": "10:05"},
    ],
)
def test_duplicate_requires_same_category_amount_and_timing(make_txn, now, second):
    transactions = [make_txn(-20_000, "taxi", at="10:00"), make_txn(**second)]

    assert run(detect_duplicates, transactions, now) == []


def test_duplicates_never_exceed_scan_window(make_txn, now):
    """150 identical charges a minute apart: only the newest 100 are paired"""
    transactions = [
        make_txn(-1_000, "parking", at=f"{i // 60:02d}:{i % 60:02d}") for i in range(150)
    ]

    anomalies = run(detect_duplicates, transactions, now)

    assert len(anomalies) == 99
    assert len(anomalies) <= 100


# Behavioral shift


def _baseline(make_txn):
    # 10 x 23,000 over days 8-17 back: 10,000 per day across the 23-day window
    return [make_txn(-23_000, "misc", days_ago=d) for d in range(8, 18)]


def test_behavioral_spending_spike(make_txn, now):
    transactions = _baseline(make_txn)
    transactions += [make_txn(-35_000, "misc", days_ago=d) for d in range(5)]

    anomalies = run(detect_behavioral_shift, transactions, now)

    assert len(anomalies) == 1
    anomaly = anomalies[0]
    assert anomaly.type == "behavioral"
    assert anomaly.severity == "critical"  # +150%
    assert anomaly.score == 100
    assert anomaly.possible_fraud is False
    assert anomaly.params["percent_change"] == 150
    assert "+150%" in anomaly.description


def test_behavioral_decrease_is_never_fraud(make_txn, now):
    transactions = _baseline(make_txn)
    transactions += [make_txn(-2_800, "misc", days_ago=d) for d in range(5)]

    anomalies = run(detect_behavioral_shift, transactions, now)

    assert len(anomalies) == 1
    assert anomalies[0].severity == "high"  # -80%
    assert anomalies[0].score == pytest.approx(80)
    assert anomalies[0].possible_fraud is False
    assert "intentional savings" in anomalies[0].recommendation


def test_behavioral_large_increase_is_possible_fraud(make_txn, now):
    transactions = _baseline(make_txn)
    transactions += [make_txn(-50_000, "misc", days_ago=d) for d in range(5)]

    anomalies = run(detect_behavioral_shift, transactions, now)

    assert anomalies[0].possible_fraud is True


def test_behavioral_needs_enough_history(make_txn, now):
    transactions = _baseline(make_txn)
    transactions += [make_txn(-50_000, "misc", days_ago=d) for d in range(4)]

    assert run(detect_behavioral_shift, transactions, now) == []


def test_behavioral_small_change_not_flagged(make_txn, now):
    transactions = _baseline(make_txn)
    transactions += [make_txn(-15_000, "misc", days_ago=d) for d in range(5)]  # +7%

    assert run(detect_behavioral_shift, transactions, now) == []


def test_detector_registry_order():
    assert [name for name, _ in DETECTORS] == ["amount", "time", "frequency", "duplicate", "behavioral"]


def test_detectors_handle_empty_ledger(now):
    for _, detect in DETECTORS:
        assert run(detect, [], now) == []


# Window and hour boundaries


@pytest.mark.parametrize(
    "at,severity",
    [
        ("01:59", "medium"),
        ("02:00", "high"),
        ("04:59", "high"),
        ("05:00", None),
        ("22:59", None),
        ("23:00", "medium"),
    ],
)
def test_time_night_hour_boundaries(make_txn, now, at, severity):
    transactions = _daytime_groceries(make_txn)
    transactions.append(make_txn(-10_000, "groceries", at=at))

    anomalies = run(detect_time_outliers, transactions, now)

    assert [a.severity for a in anomalies] == ([severity] if severity else [])


@pytest.mark.parametrize("edge_day,flagged", [(7, True), (8, False)])
def test_behavioral_recent_window_includes_seventh_day(make_txn, now, edge_day, flagged):
    """Four recent expenses plus one on the edge: only day 7 makes the fifth"""
    transactions = _baseline(make_txn)
    transactions += [make_txn(-35_000, "misc", days_ago=d) for d in range(4)]
    transactions.append(make_txn(-35_000, "misc", days_ago=edge_day))

    anomalies = run(detect_behavioral_shift, transactions, now)

    if flagged:
        assert len(anomalies) == 1
        assert anomalies[0].params["percent_change"] == 150
    else:
        assert anomalies == []


@pytest.mark.parametrize("edge_day,flagged", [(30, True), (31, False)])
def test_behavioral_baseline_window_ends_at_thirtieth_day(make_txn, now, edge_day, flagged):
    """Nine baseline expenses plus one on the edge: only day 30 makes the tenth"""
    transactions = [make_txn(-23_000, "misc", days_ago=d) for d in range(8, 17)]
    transactions.append(make_txn(-23_000, "misc", days_ago=edge_day))
    transactions += [make_txn(-35_000, "misc", days_ago=d) for d in range(5)]

    anomalies = run(detect_behavioral_shift, transactions, now)

    if flagged:
        assert len(anomalies) == 1
        assert anomalies[0].params["percent_change"] == 150
    else:
        assert anomalies == []


@pytest.mark.parametrize("at,count", [("15:00", 5), ("15:01", 6)])
def test_frequency_window_excludes_exactly_24_hours_ago(make_txn, now, at, count):
    transactions = [make_txn(-15_000, "shopping", days_ago=d) for d in range(2, 32)]
    transactions += [make_txn(-15_000, "shopping", at=f"{h:02d}:00") for h in range(9, 14)]
    transactions.append(make_txn(-15_000, "shopping", days_ago=1, at=at))

    anomalies = run(detect_frequency_bursts, transactions, now)

    assert len(anomalies) == 1
    assert anomalies[0].params["count"] == count
