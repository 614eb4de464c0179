"""
Catalogue of adverse scenarios for stress testing.
"""

from __future__ import annotations

from decimal import Decimal

from .core.currency import to_decimal
from .core.scenario import Scenario

# name, income factor, expense factor, months, variability, extra fields
_CATALOGUE = (
    (
        "Economic Recession",
        "0.6",
        "1.1",
        18,
        0.25,
        {"income_reduction": 0.4, "expense_increase": 0.1},
    ),
    (
        "Job Loss Scenario",
        "0.2",
        "0.8",
        12,
        0.15,
        {"income_reduction": 0.8, "expense_increase": -0.2},
    ),
    (
        "Market Crash",
        "0.95",
        "1.05",
        24,
        0.35,
        {"income_reduction": 0.05, "expense_increase": 0.05},
    ),
    (
        "Healthcare Emergency",
        "1",
        "1.5",
        6,
        0.2,
        {"emergency_fund_months": 3, "expense_increase": 0.5},
    ),
)


def stress_test_scenarios(
    base_income: Decimal | float | int, base_expenses: Decimal | float | int
) -> list[Scenario]:
    """
    Build the fixed stress catalogue from baseline monthly averages.

    Args:
        base_income: Historical average monthly income
        base_expenses: Historical average monthly expenses

    Returns:
        Recession, job loss, market crash and healthcare emergency
        scenarios, in that order
    """
    income = to_decimal(base_income)
    expenses = to_decimal(base_expenses)
    return [
        Scenario(
            name=name,
            monthly_income=income * Decimal(income_factor),
            monthly_expenses=expenses * Decimal(expense_factor),
            projected_months=months,
            variability=variability,
            **extra,
        )
        for name, income_factor, expense_factor, months, variability, extra in _CATALOGUE
    ]
