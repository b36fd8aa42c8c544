"""Per-category spending baselines"""

from typing import Dict, Iterable, List

from hamyon_insights.domain.models import CategoryProfile, Transaction
from hamyon_insights.domain.thresholds import MIN_PROFILE_TRANSACTIONS
from hamyon_insights.utils.math_utils import mean, population_std_dev


def build_category_profiles(transactions: Iterable[Transaction]) -> Dict[str, CategoryProfile]:
    """
    Compute expense statistics for every category with enough history.

    - Only expenses (amount < 0) count; statistics use absolute amounts
    - Categories with fewer than 3 expenses are left out, not reported as errors
    - Standard deviation divides by n so z-scores are reproducible
    - Untimed transactions are excluded from the hour list only
    """
    by_category: Dict[str, List[Transaction]] = {}
    for txn in transactions:
        if txn.is_expense:
            by_category.setdefault(txn.category_id, []).append(txn)

    profiles: Dict[str, CategoryProfile] = {}
    for category_id, txns in by_category.items():
        if len(txns) < MIN_PROFILE_TRANSACTIONS:
            continue

        amounts = [t.magnitude for t in txns]
        profiles[category_id] = CategoryProfile(
            category_id=category_id,
            mean=mean(amounts),
            std_dev=population_std_dev(amounts),
            min_amount=min(amounts),
            max_amount=max(amounts),
            count=len(txns),
            hours=tuple(t.hour for t in txns if t.hour is not None),
        )

    return profiles
