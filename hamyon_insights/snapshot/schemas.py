"""Pydantic schemas for validating a raw ledger snapshot"""

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SnapshotModel(BaseModel):
    """Accepts both snake_case and the store's camelCase keys; amounts must be finite"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore", allow_inf_nan=False)


class TransactionSchema(SnapshotModel):
    id: str = Field(..., min_length=1)
    amount: float = Field(..., description="Negative for expenses, positive for income")
    category_id: str = Field(..., min_length=1)
    date: dt.date
    time: Optional[dt.time] = None
    description: str = ""


class CategoryLimitSchema(SnapshotModel):
    id: str
    category_id: str
    amount: float


class GoalSchema(SnapshotModel):
    id: str
    name: str
    target: float
    current: float = 0.0
    deadline: Optional[dt.date] = None


class RecurringRuleSchema(SnapshotModel):
    id: str
    name: str = Field(..., description="Shown on projected cash-flow events")
    amount: float
    type: Literal["income", "expense"] = "expense"
    category_id: str = "other"
    frequency: Literal["daily", "weekly", "monthly", "yearly"]
    next_date: dt.date
    active: bool = True


class SubscriptionSchema(SnapshotModel):
    id: str
    name: str
    amount: float
    next_billing_date: dt.date
    category: str = "subscriptions"
    frequency: Literal["weekly", "monthly", "yearly"] = "monthly"
    active: bool = True
    reminder_days: int = Field(0, ge=0)


class SnapshotSchema(SnapshotModel):
    """Everything the engine reads for one user"""

    transactions: List[TransactionSchema] = Field(default_factory=list)
    balance: float = 0.0
    limits: List[CategoryLimitSchema] = Field(default_factory=list)
    goals: List[GoalSchema] = Field(default_factory=list)
    recurring: List[RecurringRuleSchema] = Field(default_factory=list)
    subscriptions: List[SubscriptionSchema] = Field(default_factory=list)
