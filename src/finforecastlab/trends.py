"""
Trend and seasonality analysis over monthly aggregates.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date, datetime
from decimal import Decimal

import numpy as np

from .aggregation import monthly_history
from .core.context import Clock
from .core.errors import ConfigError
from .core.models import Transaction, TransactionType
from .core.results import Trend

logger = logging.getLogger(__name__)

# Multiplicative spending factors for January..December. This is a policy
# constant tuned for UK household spending (January sales, lean February,
# Christmas peak); it is not fitted to data and should be replaced for other
# locales.
SEASONALITY_FACTORS: tuple[float, ...] = (
    1.1,
    0.9,
    1.0,
    1.0,
    1.0,
    1.0,
    1.0,
    1.0,
    1.0,
    1.0,
    1.1,
    1.2,
)

#: Relative change beyond which a trend is no longer "stable"
TREND_THRESHOLD = 0.10

__all__ = [
    "SEASONALITY_FACTORS",
    "TREND_THRESHOLD",
    "Trend",
    "classify_trend",
    "confidence",
    "historical_average",
    "linear_trend",
    "seasonality_factor",
]


def historical_average(
    transactions: Sequence[Transaction],
    kind: TransactionType | str,
    months: int,
    *,
    as_of: date | datetime | None = None,
    clock: Clock | None = None,
) -> Decimal:
    """
    Arithmetic mean of one monthly aggregate over the trailing months.

    One sample is taken per calendar month, from the current month back to
    ``months - 1`` months prior; months without activity count as zero.

    Args:
        transactions: Transactions to aggregate
        kind: ``income`` or ``expense``
        months: Number of calendar months in the window (>= 1)
        as_of: Reference instant; defaults to ``clock.now()``
        clock: Time provider used only when ``as_of`` is omitted

    Raises:
        ConfigError: If ``kind`` is not income/expense or ``months`` < 1
    """
    kind = TransactionType.parse(kind)
    if kind is TransactionType.TRANSFER:
        raise ConfigError("historical_average supports income and expense only")

    history = monthly_history(transactions, months, as_of=as_of, clock=clock)
    if kind is TransactionType.INCOME:
        samples = [m.income for m in history]
    else:
        samples = [m.expenses for m in history]
    return sum(samples, Decimal(0)) / len(samples)


def linear_trend(values: Sequence[float | Decimal]) -> float:
    """
    Extrapolate a series with an ordinary least-squares line.

    The series is indexed 0..n-1 with index 0 the most recent sample; the
    result is the fitted value ``intercept + slope * (n - 1)``.

    Returns:
        The extrapolated value; the single value for ``n == 1`` and ``0.0``
        for an empty series
    """
    y = np.asarray([float(v) for v in values], dtype=float)
    n = len(y)
    if n == 0:
        return 0.0
    if n < 2:
        return float(y[0])

    x = np.arange(n, dtype=float)
    x_sum = x.sum()
    y_sum = y.sum()
    slope = (n * (x * y).sum() - x_sum * y_sum) / (n * (x * x).sum() - x_sum**2)
    intercept = (y_sum - slope * x_sum) / n
    return float(intercept + slope * (n - 1))


def seasonality_factor(month: int | date | datetime) -> float:
    """
    Seasonal spending factor for a calendar month.

    Args:
        month: Month of year (1-12) or any date within that month

    Raises:
        ConfigError: If the month is outside 1-12
    """
    if isinstance(month, (date, datetime)):
        month = month.month
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise ConfigError(f"month of year must be 1-12, got {month!r}")
    return SEASONALITY_FACTORS[month - 1]


def classify_trend(
    recent_avg: float | Decimal, older_avg: float | Decimal
) -> Trend:
    """
    Classify the change of a burn-like quantity.

    An increase of more than 10% relative to ``older_avg`` is WORSENING, a
    decrease of more than 10% is IMPROVING. With no older baseline
    (``older_avg == 0``) the trend is STABLE.
    """
    recent = float(recent_avg)
    older = float(older_avg)
    if older == 0:
        return Trend.STABLE

    change = (recent - older) / abs(older)
    if change > TREND_THRESHOLD:
        return Trend.WORSENING
    if change < -TREND_THRESHOLD:
        return Trend.IMPROVING
    return Trend.STABLE


def confidence(values: Sequence[float | Decimal]) -> float:
    """
    Consistency score (0-100) of a series of monthly samples.

    Computed as ``100 - coefficient_of_variation * 100`` with the population
    standard deviation, clamped to [0, 100]. Fewer than two samples or a zero
    mean yield 0.
    """
    samples = np.asarray([float(v) for v in values], dtype=float)
    if len(samples) < 2:
        logger.debug("confidence: %d sample(s), returning 0", len(samples))
        return 0.0
    mean = samples.mean()
    if mean == 0:
        return 0.0
    score = 100 - samples.std() / abs(mean) * 100
    return float(max(0.0, min(100.0, score)))
