"""Per-request view of the transaction snapshot"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Tuple

from hamyon_insights.domain.models import Transaction


@dataclass(frozen=True)
class Ledger:
    """
    Transactions sorted newest first, plus the instant the analysis runs at.

    Built once per analysis and then discarded. `now` is injected so that
    every calendar-relative window ("today", "last 24 hours") is reproducible.
    """

    transactions: Tuple[Transaction, ...]
    now: datetime

    @classmethod
    def build(cls, transactions: Iterable[Transaction], now: datetime) -> "Ledger":
        ordered = sorted(transactions, key=lambda t: t.sort_key(), reverse=True)
        return cls(transactions=tuple(ordered), now=now)

    @property
    def today(self) -> date:
        return self.now.date()

    def expenses(self) -> List[Transaction]:
        return [t for t in self.transactions if t.is_expense]

    def recent_expenses(self, limit: int) -> List[Transaction]:
        """The `limit` most recent expense transactions"""
        return self.expenses()[:limit]

    def days_span(self) -> int:
        """Whole days between the oldest and newest entry, at least 1"""
        if len(self.transactions) < 2:
            return 1
        newest = self.transactions[0].date
        oldest = self.transactions[-1].date
        return max(1, (newest - oldest).days)

    def spending_between(self, start: date, end: date) -> float:
        """Total expense magnitude dated within [start, end]"""
        return sum((t.magnitude for t in self.transactions if t.is_expense and start <= t.date <= end), 0.0)
