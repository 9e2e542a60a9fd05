#!/usr/bin/env python3
"""
Statistical utilities for the club analytics engine.

Rounding, percentage and trend helpers shared by the aggregation, membership
and distinguished-club modules.
"""

import math
from typing import Sequence, Union

import numpy as np

Number = Union[int, float]


def round_half_up(value: Number, ndigits: int = 0) -> Number:
    """
    Round halves towards positive infinity.

    Python's round() uses banker's rounding; published scores round 2.5 to 3
    and -2.5 to -2.

    Args:
        value: Value to round
        ndigits: Decimal places (default 0)

    Returns:
        int when ndigits is 0, otherwise float
    """
    if ndigits == 0:
        return int(math.floor(value + 0.5))
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def clamp(value: Number, low: Number, high: Number) -> Number:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def safe_ratio(numerator: Number, denominator: Number, default: float = 0.0) -> float:
    """Return numerator / denominator, or default when denominator is not positive."""
    if denominator <= 0:
        return default
    return numerator / denominator


def percentage_change(previous: Number, current: Number) -> float:
    """
    Percentage change from previous to current, one decimal place.

    Growth from zero reports 100; zero to zero reports 0.
    """
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return round_half_up((current - previous) / previous * 100, 1)


def trend_label(current: Number, previous: Number,
                improving_ratio: float = 1.1, declining_ratio: float = 0.9) -> str:
    """
    Label a period-over-period move as improving, declining or stable.

    Args:
        current: Latest period value
        previous: Preceding period value
        improving_ratio: current above previous * ratio counts as improving
        declining_ratio: current below previous * ratio counts as declining

    Returns:
        'improving', 'declining' or 'stable'
    """
    if current > previous * improving_ratio:
        return 'improving'
    if current < previous * declining_ratio:
        return 'declining'
    return 'stable'


def linear_projection(values: Sequence[Number], periods_ahead: int = 2) -> int:
    """
    Project a series forward with an ordinary least squares line.

    The series is indexed 0..n-1 and the line is evaluated at
    n + periods_ahead. Results are rounded half up and floored at 0.

    Args:
        values: Observations in time order
        periods_ahead: How far past the series end to project

    Returns:
        Projected non-negative integer
    """
    n = len(values)
    if n == 0:
        return 0
    if n < 2:
        return int(values[0])

    y = np.asarray(values, dtype=float)
    x = np.arange(n, dtype=float)
    sum_x = x.sum()
    sum_y = y.sum()
    sum_xy = (x * y).sum()
    sum_x2 = (x * x).sum()

    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / n
    projection = slope * (n + periods_ahead) + intercept

    return max(0, round_half_up(float(projection)))
