"""
Deterministic scenario projection.

A scenario is walked forward month by month from the current month. The
running balance is accumulated at full ``Decimal`` precision; only the
reported ``balance`` of each row is rounded to the currency's precision.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from decimal import Decimal

from .core.context import Clock, resolve_as_of
from .core.currency import get_currency, to_decimal
from .core.errors import ConfigError
from .core.results import MonthlyProjection, ProjectionSummary
from .core.scenario import Scenario
from .core.utils import add_months, month_label

logger = logging.getLogger(__name__)


def _resolve_scenario(
    scenario: Scenario,
    fallback_income: Decimal | float | int | None,
    fallback_expenses: Decimal | float | int | None,
) -> Scenario:
    if scenario.is_resolved:
        return scenario
    missing = []
    if scenario.monthly_income is None and fallback_income is None:
        missing.append("monthly_income")
    if scenario.monthly_expenses is None and fallback_expenses is None:
        missing.append("monthly_expenses")
    if missing:
        raise ConfigError(
            f"Scenario '{scenario.name}' has no {' or '.join(missing)} "
            "and no historical fallback was given"
        )
    return scenario.resolve(
        fallback_income if fallback_income is not None else 0,
        fallback_expenses if fallback_expenses is not None else 0,
    )


def project(
    scenario: Scenario,
    start_balance: Decimal | float | int,
    fallback_income: Decimal | float | int | None = None,
    fallback_expenses: Decimal | float | int | None = None,
    *,
    as_of: date | datetime | None = None,
    clock: Clock | None = None,
    currency: str = "GBP",
) -> tuple[list[MonthlyProjection], ProjectionSummary]:
    """
    Walk a scenario forward ``scenario.projected_months`` months.

    Args:
        scenario: Monthly assumptions; missing amounts use the fallbacks
        start_balance: Balance before the first projected month
        fallback_income: Historical average income for a scenario without one
        fallback_expenses: Historical average expenses for a scenario without one
        as_of: First projected month; defaults to ``clock.now()``
        clock: Time provider used only when ``as_of`` is omitted
        currency: Reporting currency whose precision rounds the balances

    Returns:
        The monthly rows in chronological order and their summary

    Raises:
        ConfigError: If an amount is missing from both scenario and fallbacks
    """
    resolved = _resolve_scenario(scenario, fallback_income, fallback_expenses)
    start = resolve_as_of(as_of, clock)
    money = get_currency(currency)

    income = resolved.monthly_income
    expenses = resolved.monthly_expenses
    net_flow = income - expenses

    balance = to_decimal(start_balance)
    cumulative_flow = Decimal(0)
    projections: list[MonthlyProjection] = []

    for i in range(resolved.projected_months):
        moment = add_months(start, i)
        balance += net_flow
        cumulative_flow += net_flow

        runway_months = None
        if balance > 0 and expenses > 0:
            runway_months = balance / expenses

        projections.append(
            MonthlyProjection(
                month_label=month_label(moment),
                date=moment,
                balance=money.quantize(balance),
                income=income,
                expenses=expenses,
                net_flow=net_flow,
                cumulative_flow=cumulative_flow,
                runway_months=runway_months,
            )
        )

    logger.debug(
        "Projected '%s' over %d months from %s",
        resolved.name,
        resolved.projected_months,
        month_label(start),
    )
    return projections, summarize(projections)


def summarize(projections: Sequence[MonthlyProjection]) -> ProjectionSummary:
    """
    Summary statistics over projected months.

    ``months_to_depletion`` is the 1-based position of the first row whose
    reported balance is at or below zero; ``break_even_month`` is the label
    of the first row with a non-negative net flow. Both are None when no row
    qualifies.

    Raises:
        ConfigError: If ``projections`` is empty
    """
    if not projections:
        raise ConfigError("Cannot summarize an empty projection")

    balances = [p.balance for p in projections]
    total_income = sum((p.income for p in projections), Decimal(0))
    total_expenses = sum((p.expenses for p in projections), Decimal(0))

    months_to_depletion = next(
        (i + 1 for i, p in enumerate(projections) if p.balance <= 0), None
    )
    break_even_month = next(
        (p.month_label for p in projections if p.net_flow >= 0), None
    )

    return ProjectionSummary(
        end_balance=balances[-1],
        total_income=total_income,
        total_expenses=total_expenses,
        average_monthly_net_flow=(total_income - total_expenses) / len(projections),
        minimum_balance=min(balances),
        maximum_balance=max(balances),
        months_to_depletion=months_to_depletion,
        break_even_month=break_even_month,
    )


def cash_flow_projections(
    start_balance: Decimal | float | int,
    scenarios: Iterable[Scenario],
    *,
    as_of: date | datetime | None = None,
    clock: Clock | None = None,
    currency: str = "GBP",
) -> dict[str, list[MonthlyProjection]]:
    """
    Project several fully specified scenarios from the same balance.

    Returns:
        Mapping of scenario name to its monthly rows, in input order

    Raises:
        ConfigError: If a scenario lacks income or expenses
    """
    start = resolve_as_of(as_of, clock)
    return {
        s.name: project(s, start_balance, as_of=start, currency=currency)[0]
        for s in scenarios
    }
