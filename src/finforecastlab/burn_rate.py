"""
Burn-rate and runway calculations.

The burn of a month is its net outflow (expenses exceeding income), floored
at zero. Runway is the number of months a balance lasts at a given burn; a
non-positive burn gives the ``INFINITE`` sentinel rather than a float
infinity so results stay JSON-safe.
"""

from __future__ import annotations

import logging
import math
import warnings
from collections.abc import Sequence
from datetime import date, datetime
from decimal import Decimal

from .aggregation import monthly_history, total_balance
from .core.context import Clock, resolve_as_of
from .core.currency import to_decimal
from .core.models import Account, Transaction
from .core.results import (
    INFINITE,
    CriticalThresholds,
    EnhancedBurnRate,
    EnhancedRunway,
    Runway,
    Trend,
    is_infinite,
)
from .core.utils import add_months
from .trends import classify_trend, confidence, linear_trend, seasonality_factor

logger = logging.getLogger(__name__)

CURRENT_RATE_MONTHS = 3
TREND_WINDOW = 3
TRENDING_RATE_MONTHS = 6
CONSERVATIVE_MULTIPLIER = Decimal("1.2")
OPTIMISTIC_MULTIPLIER = Decimal("0.8")

URGENT_RUNWAY = "URGENT: Less than 3 months runway - immediate action required"
EMERGENCY_ACTION = "Consider emergency income sources or major expense reduction"
LOW_RUNWAY = "WARNING: Low runway - focus on increasing income or reducing expenses"
BUILD_RESERVE = "Build emergency fund to cover 6 months of expenses"
REVIEW_EXPENSES = "Spending trend is increasing - review and control expenses"
IRREGULAR_FLOWS = (
    "Income/expense patterns are inconsistent - create more predictable budget"
)
CONSIDER_INVESTING = "Strong financial position - consider investment opportunities"


def _mean(values: Sequence[Decimal]) -> Decimal:
    return sum(values, Decimal(0)) / len(values)


def burn_rate(
    transactions: Sequence[Transaction],
    months: int = CURRENT_RATE_MONTHS,
    *,
    as_of: date | datetime | None = None,
    clock: Clock | None = None,
) -> Decimal:
    """
    Average monthly burn over ``months`` months ending at the current month.

    Each month contributes ``max(0, expenses - income)``; months with a
    surplus count as zero burn.
    """
    history = monthly_history(transactions, months, as_of=as_of, clock=clock)
    return _mean([m.burn for m in history])


def enhanced_burn_rate(
    transactions: Sequence[Transaction],
    months: int = 12,
    *,
    as_of: date | datetime | None = None,
    clock: Clock | None = None,
) -> EnhancedBurnRate:
    """
    Burn-rate analysis with seasonal adjustment and trend classification.

    Args:
        transactions: Transaction history
        months: Number of monthly burn samples analysed (most recent first)
        as_of: Reference instant; defaults to ``clock.now()``
        clock: Time provider used only when ``as_of`` is omitted

    Returns:
        EnhancedBurnRate where ``current_rate`` is the three-month burn,
        ``seasonal_adjusted_rate`` applies this month's seasonality factor,
        ``trend`` compares the three newest with the three oldest samples and
        ``confidence`` scores the consistency of all samples
    """
    now = resolve_as_of(as_of, clock)
    history = monthly_history(transactions, months, as_of=now)
    burns = [m.burn for m in history]

    if len(burns) < 2:
        warnings.warn(
            f"Only {len(burns)} month(s) of history: trend is stable and "
            "confidence is 0",
            UserWarning,
            stacklevel=2,
        )

    current_rate = burn_rate(transactions, CURRENT_RATE_MONTHS, as_of=now)
    factor = seasonality_factor(now.month)
    seasonal_adjusted_rate = current_rate * Decimal(str(factor))

    recent_avg = _mean(burns[:TREND_WINDOW])
    older_avg = _mean(burns[-TREND_WINDOW:])
    trend = classify_trend(recent_avg, older_avg)

    result = EnhancedBurnRate(
        current_rate=current_rate,
        seasonal_adjusted_rate=seasonal_adjusted_rate,
        trend=trend,
        confidence=confidence(burns),
        trending_rate=linear_trend(burns[:TRENDING_RATE_MONTHS]),
    )
    logger.debug(
        "Burn rate over %d months: current=%s adjusted=%s trend=%s confidence=%.1f",
        months,
        result.current_rate,
        result.seasonal_adjusted_rate,
        result.trend.value,
        result.confidence,
    )
    return result


def runway(balance: Decimal | float | int, burn: Decimal | float | int) -> Runway:
    """
    Months a balance lasts at a monthly burn.

    Returns:
        ``INFINITE`` when ``burn <= 0``; otherwise ``balance / burn`` with a
        negative balance floored to 0 months
    """
    balance = to_decimal(balance)
    burn = to_decimal(burn)
    if burn <= 0:
        return INFINITE
    return max(Decimal(0), balance) / burn


def _below(value: Runway, threshold: int) -> bool:
    return not is_infinite(value) and value < threshold


def recommendations(
    baseline_runway: Runway,
    burn: EnhancedBurnRate,
    balance: Decimal,
    emergency_fund: Decimal,
) -> list[str]:
    """
    Prioritised, rule-based advice for a runway analysis.

    Rules are evaluated in a fixed order and every matching rule appends its
    message(s):

    1. runway below 3 months (urgent, two messages), else below 6 months
    2. balance below the emergency fund target
    3. worsening burn trend
    4. confidence below 50
    5. runway above 12 months (an infinite runway qualifies)
    """
    advice: list[str] = []

    if _below(baseline_runway, 3):
        advice.append(URGENT_RUNWAY)
        advice.append(EMERGENCY_ACTION)
    elif _below(baseline_runway, 6):
        advice.append(LOW_RUNWAY)

    if balance < emergency_fund:
        advice.append(BUILD_RESERVE)

    if burn.trend is Trend.WORSENING:
        advice.append(REVIEW_EXPENSES)

    if burn.confidence < 50:
        advice.append(IRREGULAR_FLOWS)

    if is_infinite(baseline_runway) or baseline_runway > 12:
        advice.append(CONSIDER_INVESTING)

    return advice


def enhanced_runway(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    emergency_fund_months: int = 6,
    *,
    burn_rate_months: int = 12,
    as_of: date | datetime | None = None,
    clock: Clock | None = None,
) -> EnhancedRunway:
    """
    Runway estimates that keep an emergency reserve aside.

    The reserve is ``seasonal_adjusted_rate * emergency_fund_months``. The
    baseline runway spends the whole active balance at the current rate;
    conservative and optimistic runways spend only the balance above the
    reserve at 120% and 80% of the adjusted rate. ``critical_date`` is the
    month the conservative runway ends, or None when it is infinite or zero.
    """
    now = resolve_as_of(as_of, clock)
    balance = total_balance(accounts)
    burn = enhanced_burn_rate(transactions, burn_rate_months, as_of=now)
    adjusted = burn.seasonal_adjusted_rate

    emergency_fund = adjusted * emergency_fund_months
    available = max(Decimal(0), balance - emergency_fund)

    baseline = runway(balance, burn.current_rate)
    conservative = runway(available, adjusted * CONSERVATIVE_MULTIPLIER)
    optimistic = runway(available, adjusted * OPTIMISTIC_MULTIPLIER)
    emergency_fund_runway = runway(balance - emergency_fund, adjusted)

    if is_infinite(baseline):
        logger.warning(
            "No net burn over the last %d months; runway is infinite",
            CURRENT_RATE_MONTHS,
        )

    critical_date = None
    if not is_infinite(conservative) and conservative > 0:
        critical_date = add_months(now, math.floor(conservative))

    return EnhancedRunway(
        total_balance=balance,
        emergency_fund=emergency_fund,
        available_balance=available,
        baseline_runway=baseline,
        conservative_runway=conservative,
        optimistic_runway=optimistic,
        emergency_fund_runway=emergency_fund_runway,
        critical_date=critical_date,
        critical_thresholds=CriticalThresholds(
            three_months=add_months(now, 3),
            six_months=add_months(now, 6),
            twelve_months=add_months(now, 12),
        ),
        recommendations=recommendations(baseline, burn, balance, emergency_fund),
        burn_rate=burn,
    )


def project_future_balance(
    balance: Decimal | float | int,
    monthly_income: Decimal | float | int,
    monthly_expenses: Decimal | float | int,
    months_ahead: int,
) -> Decimal:
    """Straight-line balance after ``months_ahead`` months of constant net flow."""
    balance = to_decimal(balance)
    if months_ahead <= 0:
        return balance
    net_flow = to_decimal(monthly_income) - to_decimal(monthly_expenses)
    return balance + net_flow * months_ahead
