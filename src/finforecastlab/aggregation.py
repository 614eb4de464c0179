"""
Time-bucket aggregation of transactions.

This module reduces raw transaction lists to monthly income/expense totals
and a handful of derived views (category breakdowns, trailing trends,
anomaly detection). All functions are pure: they read the transactions they
are given and never consult a hidden clock. Where a month is optional, "now"
comes from the ``clock`` argument (or the system clock when none is given).

Only ``income`` and ``expense`` transactions are aggregated; transfers are
ignored. Amounts are summed as magnitudes, so a refund booked as a negative
expense still counts as spending of that size.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime
from decimal import Decimal

import pandas as pd

from .core.context import Clock, resolve_as_of
from .core.errors import ConfigError
from .core.models import Account, Transaction, TransactionType
from .core.results import CategorySpend, MonthlyTotals
from .core.utils import (
    end_of_month,
    month_label,
    month_range,
    start_of_month,
    trailing_months,
)

UNCATEGORIZED = "Uncategorized"


def _in_month(
    transactions: Iterable[Transaction],
    kind: TransactionType,
    month: datetime,
) -> list[Transaction]:
    month_start = start_of_month(month)
    month_end = end_of_month(month)
    return [
        t
        for t in transactions
        if t.type is kind and month_start <= t.date <= month_end
    ]


def _sum_magnitudes(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.magnitude for t in transactions), Decimal(0))


def monthly_income(
    transactions: Iterable[Transaction],
    month: date | datetime | None = None,
    *,
    clock: Clock | None = None,
) -> Decimal:
    """
    Total income booked in the calendar month containing ``month``.

    Args:
        transactions: Transactions to scan
        month: Any instant inside the month; defaults to ``clock.now()``
        clock: Time provider used only when ``month`` is omitted

    Returns:
        Sum of absolute income amounts, ``Decimal(0)`` when nothing matches
    """
    target = resolve_as_of(month, clock)
    return _sum_magnitudes(_in_month(transactions, TransactionType.INCOME, target))


def monthly_expenses(
    transactions: Iterable[Transaction],
    month: date | datetime | None = None,
    *,
    clock: Clock | None = None,
) -> Decimal:
    """
    Total expenses booked in the calendar month containing ``month``.

    Args:
        transactions: Transactions to scan
        month: Any instant inside the month; defaults to ``clock.now()``
        clock: Time provider used only when ``month`` is omitted

    Returns:
        Sum of absolute expense amounts, ``Decimal(0)`` when nothing matches
    """
    target = resolve_as_of(month, clock)
    return _sum_magnitudes(_in_month(transactions, TransactionType.EXPENSE, target))


def monthly_totals(
    transactions: Sequence[Transaction],
    month: date | datetime | None = None,
    *,
    clock: Clock | None = None,
) -> MonthlyTotals:
    """Income and expenses for one month in a single record."""
    target = resolve_as_of(month, clock)
    return MonthlyTotals(
        month=start_of_month(target),
        income=monthly_income(transactions, target),
        expenses=monthly_expenses(transactions, target),
    )


def monthly_history(
    transactions: Sequence[Transaction],
    months: int,
    *,
    as_of: date | datetime | None = None,
    clock: Clock | None = None,
) -> list[MonthlyTotals]:
    """
    Monthly totals for ``months`` consecutive months ending at ``as_of``.

    Index 0 is the current month, index ``months - 1`` the oldest.

    Raises:
        ConfigError: If ``months`` is smaller than 1
    """
    if months < 1:
        raise ConfigError(f"months must be >= 1, got {months}")
    now = resolve_as_of(as_of, clock)
    return [monthly_totals(transactions, m) for m in trailing_months(now, months)]


def total_balance(accounts: Iterable[Account]) -> Decimal:
    """Sum of balances over active accounts."""
    return sum((a.balance for a in accounts if a.is_active), Decimal(0))


def average_monthly_expenses(
    transactions: Sequence[Transaction],
    months: int = 6,
    *,
    as_of: date | datetime | None = None,
    clock: Clock | None = None,
) -> Decimal:
    """
    Average monthly expenses over the months that actually had spending.

    Months without any expense are skipped rather than counted as zero, so a
    short history does not drag the average down.
    """
    history = monthly_history(transactions, months, as_of=as_of, clock=clock)
    spent = [m.expenses for m in history if m.expenses > 0]
    if not spent:
        return Decimal(0)
    return sum(spent, Decimal(0)) / len(spent)


def spending_by_category(
    transactions: Sequence[Transaction],
    month: date | datetime | None = None,
    *,
    clock: Clock | None = None,
) -> list[CategorySpend]:
    """
    Expense totals per category for one month, largest first.

    Blank categories are reported as ``"Uncategorized"``. Percentages are
    shares of the month's total expenses (0-100).
    """
    target = resolve_as_of(month, clock)
    expenses = _in_month(transactions, TransactionType.EXPENSE, target)
    total = _sum_magnitudes(expenses)

    by_category: dict[str, Decimal] = {}
    for t in expenses:
        category = t.category.strip() or UNCATEGORIZED
        by_category[category] = by_category.get(category, Decimal(0)) + t.magnitude

    rows = [
        CategorySpend(
            category=category,
            amount=amount,
            percentage=float(amount / total * 100) if total > 0 else 0.0,
        )
        for category, amount in by_category.items()
    ]
    # Stable sort keeps first-seen order for equal amounts
    return sorted(rows, key=lambda r: r.amount, reverse=True)


def monthly_trends(
    transactions: Sequence[Transaction],
    months: int = 12,
    *,
    as_of: date | datetime | None = None,
    clock: Clock | None = None,
) -> pd.DataFrame:
    """
    Income, expenses and net flow per month, oldest month first.

    Returns:
        DataFrame with columns ``month`` (label), ``date`` (month start),
        ``income``, ``expenses`` and ``net_flow`` (floats)
    """
    history = list(
        reversed(monthly_history(transactions, months, as_of=as_of, clock=clock))
    )
    return pd.DataFrame(
        {
            "month": [month_label(m.month) for m in history],
            "date": pd.to_datetime(
                month_range(history[0].month, len(history)).astype("datetime64[ns]")
            ),
            "income": [float(m.income) for m in history],
            "expenses": [float(m.expenses) for m in history],
            "net_flow": [float(m.net_flow) for m in history],
        }
    )


def detect_spending_anomalies(
    transactions: Sequence[Transaction],
    threshold_multiplier: float = 2,
    *,
    as_of: date | datetime | None = None,
    clock: Clock | None = None,
) -> list[Transaction]:
    """
    Flag unusually large expenses in the current month.

    Nothing is flagged unless the month's total spending exceeds
    ``threshold_multiplier`` times the six-month average. When it does, the
    month's expenses larger than one average day of spending
    (``average / 30``) are returned, largest first.
    """
    now = resolve_as_of(as_of, clock)
    current = monthly_expenses(transactions, now)
    average = average_monthly_expenses(transactions, 6, as_of=now)
    threshold = average * Decimal(str(threshold_multiplier))

    if current <= threshold:
        return []

    daily_average = average / 30
    flagged = [
        t
        for t in _in_month(transactions, TransactionType.EXPENSE, now)
        if t.magnitude > daily_average
    ]
    return sorted(flagged, key=lambda t: t.magnitude, reverse=True)
