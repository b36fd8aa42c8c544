"""Domain models - pure Python dataclasses representing ledger inputs and analysis outputs"""

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

SEVERITY_RANK: Dict[str, int] = {"critical": 4, "high": 3, "medium": 2, "low": 1}

MIDNIGHT = dt.time(0, 0)
NOON = dt.time(12, 0)


@dataclass(frozen=True)
class Transaction:
    """Ledger entry handed in by the transaction store"""

    id: str
    amount: float  # negative = expense, positive = income
    category_id: str
    date: dt.date
    time: Optional[dt.time] = None
    description: str = ""

    @property
    def is_expense(self) -> bool:
        return self.amount < 0

    @property
    def magnitude(self) -> float:
        return abs(self.amount)

    @property
    def hour(self) -> Optional[int]:
        return self.time.hour if self.time is not None else None

    def sort_key(self) -> dt.datetime:
        """Ordering instant; untimed entries sort at the start of their day"""
        return dt.datetime.combine(self.date, self.time or MIDNIGHT)

    def timestamp(self) -> dt.datetime:
        """Instant used for time windows; untimed entries are placed at noon"""
        return dt.datetime.combine(self.date, self.time or NOON)


@dataclass(frozen=True)
class CategoryLimit:
    """Monthly spending limit for a category"""

    id: str
    category_id: str
    amount: float


@dataclass(frozen=True)
class Goal:
    """Savings goal"""

    id: str
    name: str
    target: float
    current: float
    deadline: Optional[dt.date] = None


@dataclass(frozen=True)
class RecurringRule:
    """Recurring income or expense"""

    id: str
    name: str
    amount: float
    kind: str  # "income" or "expense"
    category_id: str
    frequency: str  # "daily" | "weekly" | "monthly" | "yearly"
    reference_date: dt.date
    active: bool = True


@dataclass(frozen=True)
class Subscription:
    """Subscription billed on its next billing date"""

    id: str
    name: str
    amount: float
    next_billing_date: dt.date
    category_id: str = "subscriptions"
    frequency: str = "monthly"
    active: bool = True
    reminder_days: int = 0  # 0 = use the configured default


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of a user's data supplied by the caller"""

    transactions: Tuple[Transaction, ...] = ()
    balance: float = 0.0
    limits: Tuple[CategoryLimit, ...] = ()
    goals: Tuple[Goal, ...] = ()
    recurring: Tuple[RecurringRule, ...] = ()
    subscriptions: Tuple[Subscription, ...] = ()


@dataclass(frozen=True)
class CategoryProfile:
    """Statistical baseline of a category's expenses"""

    category_id: str
    mean: float
    std_dev: float  # population standard deviation
    min_amount: float
    max_amount: float
    count: int
    hours: Tuple[int, ...]


@dataclass
class Anomaly:
    """Single detection event"""

    id: str
    type: str  # "amount" | "time" | "frequency" | "duplicate" | "behavioral"
    severity: str  # "low" | "medium" | "high" | "critical"
    transaction: Transaction
    description: str
    score: float  # 0-100, higher = more anomalous
    recommendation: str
    possible_fraud: bool
    code: str = ""
    params: Dict[str, Any] = field(default_factory=dict)

    @property
    def severity_rank(self) -> int:
        return SEVERITY_RANK[self.severity]


@dataclass
class AnomalyReport:
    """Ranked anomalies with an overall risk assessment"""

    anomalies: List[Anomaly]
    risk_score: int  # 0-100
    risk_level: str  # "high" | "medium" | "low" | "clear"
    summary: str
    critical_count: int
    recommendations: List[str]


@dataclass
class HistoricalPattern:
    """Period-over-period spending comparison"""

    period: str  # "week" or "month"
    current: float
    previous: float
    trend: str  # "increasing" | "decreasing" | "stable"
    percent_change: int
    year_ago: Optional[float] = None


@dataclass(frozen=True)
class MonthAmount:
    month: str  # "YYYY-MM"
    amount: float


@dataclass
class CategoryPattern:
    """Month-by-month behaviour of one category"""

    category_id: str
    monthly_average: int
    peak_month: MonthAmount
    lowest_month: MonthAmount
    trend: str
    seasonality: str  # "none" | "low" | "high"


@dataclass
class SpendingInsight:
    """Descriptive observation derived from historical patterns"""

    type: str  # "seasonal" | "trend" | "habit"
    severity: str  # "low" | "medium" | "high"
    code: str
    title: str
    message: str
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ForecastRange:
    min: int
    max: int


@dataclass
class Forecast:
    """Next-month spend estimate"""

    amount: int
    confidence: int  # 0-100
    range: ForecastRange


@dataclass
class CashFlowEvent:
    """Scheduled money movement on a projected day"""

    source_id: str
    source: str  # "recurring" or "subscription"
    kind: str  # "income" | "expense" | "subscription"
    name: str
    amount: float  # signed: inflows positive, outflows negative
    date: dt.date


@dataclass
class CashFlowDay:
    date: dt.date
    projected_balance: float
    inflows: float
    outflows: float
    events: List[CashFlowEvent] = field(default_factory=list)


@dataclass
class CashFlowProjection:
    """Day-by-day running balance from recurring rules and subscriptions"""

    start_balance: float
    days: List[CashFlowDay]

    @property
    def end_balance(self) -> float:
        return self.days[-1].projected_balance if self.days else self.start_balance

    @property
    def min_balance(self) -> float:
        return min((d.projected_balance for d in self.days), default=self.start_balance)

    @property
    def max_balance(self) -> float:
        return max((d.projected_balance for d in self.days), default=self.start_balance)

    @property
    def balance_change(self) -> float:
        return self.end_balance - self.start_balance

    @property
    def low_balance_days(self) -> List[CashFlowDay]:
        return [d for d in self.days if d.projected_balance < 0]

    def upcoming_events(self, days: int = 7) -> List[CashFlowEvent]:
        """Events from tomorrow through the next `days` days"""
        events: List[CashFlowEvent] = []
        for day in self.days[1 : days + 1]:
            events.extend(day.events)
        return events


@dataclass
class Alert:
    """Budget, goal, bill or balance notice for the notification layer"""

    type: str  # "budget_alert" | "goal_progress" | "subscription_reminder" | "bill_reminder" | "low_balance"
    severity: str  # "info" | "warning" | "critical"
    code: str
    title: str
    message: str
    subject_id: Optional[str] = None
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AnalysisResult:
    """Everything the engine produces for one snapshot"""

    generated_at: dt.datetime
    report: AnomalyReport
    week_over_week: HistoricalPattern
    month_over_month: HistoricalPattern
    category_patterns: List[CategoryPattern]
    insights: List[SpendingInsight]
    forecast: Forecast
    cash_flow: CashFlowProjection
    alerts: List[Alert]
