"""
Shared fixtures: a frozen clock and synthetic transaction histories.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal

import pytest
from finforecastlab import Account, FixedClock, ForecastContext, Transaction
from finforecastlab.core.utils import add_months

AS_OF = datetime(2026, 10, 15, 12, 0)


def build_history(
    as_of: datetime,
    incomes: Sequence[float | int],
    expenses: Sequence[float | int],
) -> list[Transaction]:
    """
    One income (1st) and one expense (5th) per month, index 0 = current month.

    Zero amounts produce no transaction for that month.
    """
    transactions = []
    for i, (income, expense) in enumerate(zip(incomes, expenses)):
        month = add_months(as_of, -i)
        if income:
            transactions.append(
                Transaction(
                    amount=Decimal(str(income)),
                    currency="GBP",
                    date=month.replace(day=1, hour=9),
                    type="income",
                    category="Salary",
                )
            )
        if expense:
            transactions.append(
                Transaction(
                    amount=Decimal(str(expense)),
                    currency="GBP",
                    date=month.replace(day=5, hour=9),
                    type="expense",
                    category="Living",
                )
            )
    return transactions


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(AS_OF)


@pytest.fixture
def context(clock) -> ForecastContext:
    return ForecastContext(clock=clock)


@pytest.fixture
def steady_history() -> list[Transaction]:
    """Twelve months of 3000 income and 3500 expenses: a constant 500 burn."""
    return build_history(AS_OF, [3000] * 12, [3500] * 12)


@pytest.fixture
def accounts() -> list[Account]:
    return [
        Account(balance=Decimal("9000"), name="Current"),
        Account(balance=Decimal("1000"), name="Closed", is_active=False),
    ]


@pytest.fixture
def as_of() -> datetime:
    return AS_OF


@pytest.fixture
def history():
    """Factory building a monthly history ending at ``AS_OF``."""

    def _build(incomes, expenses, as_of: datetime = AS_OF) -> list[Transaction]:
        return build_history(as_of, incomes, expenses)

    return _build
