"""Pytest fixtures for testing"""

import itertools
from datetime import date, datetime, time, timedelta
from typing import Callable, Optional

import pytest

from hamyon_insights.domain.models import Transaction

# Wednesday afternoon; the current week started on Sunday 2026-03-15
NOW = datetime(2026, 3, 18, 15, 0)


@pytest.fixture
def now() -> datetime:
    """Fixed analysis instant"""
    return NOW


@pytest.fixture
def make_txn() -> Callable[..., Transaction]:
    """Factory for transactions relative to NOW"""
    ids = itertools.count(1)

    def _make(
        amount: float,
        category: str = "food",
        days_ago: int = 0,
        at: Optional[str] = None,
        on: Optional[date] = None,
        txn_id: Optional[str] = None,
        description: str = "",
    ) -> Transaction:
        return Transaction(
            id=txn_id or f"tx_{next(ids)}",
            amount=amount,
            category_id=category,
            date=on or (NOW.date() - timedelta(days=days_ago)),
            time=time.fromisoformat(at) if at else None,
            description=description,
        )

    return _make


@pytest.fixture
def snapshot_payload() -> dict:
    """Raw snapshot as the transaction store sends it (camelCase keys)"""
    return {
        "balance": 1_500_000,
        "transactions": [
            {"id": "t1", "amount": -45_000, "categoryId": "food", "date": "2026-03-18", "time": "09:30", "description": "Lunch"},
            {"id": "t2", "amount": -20_000, "categoryId": "taxi", "date": "2026-03-17", "time": "18:10"},
            {"id": "t3", "amount": 5_000_000, "categoryId": "salary", "date": "2026-03-01"},
        ],
        "limits": [{"id": "l1", "categoryId": "food", "amount": 50_000}],
        "goals": [{"id": "g1", "name": "Car", "target": 1000, "current": 950, "deadline": "2026-12-31"}],
        "recurring": [
            {"id": "r1", "name": "Salary", "amount": 5_000_000, "type": "income", "frequency": "monthly", "nextDate": "2026-03-25"}
        ],
        "subscriptions": [
            {"id": "s1", "name": "Netflix", "amount": 50_000, "nextBillingDate": "2026-03-20", "reminderDays": 2}
        ],
    }
