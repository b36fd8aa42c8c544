"""Convert a raw snapshot payload into domain objects"""

from typing import Any, Mapping

from pydantic import ValidationError

from hamyon_insights.domain.exceptions import InvalidTransactionDataError
from hamyon_insights.domain.models import CategoryLimit, Goal, RecurringRule, Snapshot, Subscription, Transaction
from hamyon_insights.snapshot.schemas import SnapshotSchema


def load_snapshot(payload: Mapping[str, Any]) -> Snapshot:
    """
    Validate a snapshot payload and build the domain Snapshot.

    Raises:
        InvalidTransactionDataError: On missing required fields or malformed values
    """
    try:
        data = SnapshotSchema.model_validate(payload)
    except ValidationError as e:
        raise InvalidTransactionDataError(
            f"Invalid snapshot data: {e.error_count()} validation error(s)"
        ) from e

    return Snapshot(
        transactions=tuple(
            Transaction(
                id=txn.id,
                amount=txn.amount,
                category_id=txn.category_id,
                date=txn.date,
                time=txn.time.replace(second=0, microsecond=0, tzinfo=None) if txn.time else None,
                description=txn.description,
            )
            for txn in data.transactions
        ),
        balance=data.balance,
        limits=tuple(CategoryLimit(id=l.id, category_id=l.category_id, amount=l.amount) for l in data.limits),
        goals=tuple(
            Goal(id=g.id, name=g.name, target=g.target, current=g.current, deadline=g.deadline)
            for g in data.goals
        ),
        recurring=tuple(
            RecurringRule(
                id=r.id,
                name=r.name,
                amount=r.amount,
                kind=r.type,
                category_id=r.category_id,
                frequency=r.frequency,
                reference_date=r.next_date,
                active=r.active,
            )
            for r in data.recurring
        ),
        subscriptions=tuple(
            Subscription(
                id=s.id,
                name=s.name,
                amount=s.amount,
                next_billing_date=s.next_billing_date,
                category_id=s.category,
                frequency=s.frequency,
                active=s.active,
                reminder_days=s.reminder_days,
            )
            for s in data.subscriptions
        ),
    )
