"""Numeric helpers shared by the statistics modules"""

import math
import statistics
from typing import Sequence


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +infinity (2.5 -> 3, -2.5 -> -2)"""
    return math.floor(value + 0.5)


def mean(values: Sequence[float]) -> float:
    return statistics.fmean(values) if values else 0.0


def population_std_dev(values: Sequence[float]) -> float:
    """Standard deviation dividing by n, not n - 1"""
    return statistics.pstdev(values) if values else 0.0


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Population std dev as a percentage of the mean; 0 when the mean is 0"""
    avg = mean(values)
    if avg == 0:
        return 0.0
    return population_std_dev(values) / avg * 100


def percent_change(current: float, previous: float) -> float:
    """Relative change in percent; 0 when there is no previous value"""
    if previous == 0:
        return 0.0
    return (current - previous) / previous * 100
