"""
Context classes for FinForecastLab computations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Protocol, runtime_checkable

from .errors import ConfigError
from .utils import as_datetime


@runtime_checkable
class Clock(Protocol):
    """Provider of the current time."""

    def now(self) -> datetime: ...


class SystemClock:
    """Clock reading the local wall-clock time."""

    def now(self) -> datetime:
        return datetime.now()

    def __repr__(self) -> str:
        return "SystemClock()"


class FixedClock:
    """Clock frozen at a given instant, used for reproducible forecasts."""

    def __init__(self, moment: date | datetime | str):
        self.moment = as_datetime(moment)

    def now(self) -> datetime:
        return self.moment

    def __repr__(self) -> str:
        return f"FixedClock({self.moment.isoformat()})"


SYSTEM_CLOCK = SystemClock()


def resolve_as_of(
    as_of: date | datetime | None = None, clock: Clock | None = None
) -> datetime:
    """
    Resolve the reference instant for a computation.

    An explicit ``as_of`` wins; otherwise the given clock is asked, and only
    when neither is supplied is the system clock used.
    """
    if as_of is not None:
        return as_datetime(as_of)
    return as_datetime((clock or SYSTEM_CLOCK).now())


@dataclass
class ForecastContext:
    """
    Shared settings passed to the forecasting engine.

    Attributes:
        clock: Time provider defining "now" for every computation
        currency: Reporting currency used for display rounding
        baseline_months: History window for the income/expense averages that
            back scenario fallbacks and stress scenarios
        burn_rate_months: History window for the enhanced burn-rate analysis
        emergency_fund_months: Months of adjusted burn kept as a reserve

    Note:
        The context carries no data; transactions and accounts are passed
        separately so one context can serve many requests.
    """

    clock: Clock = field(default_factory=SystemClock)
    currency: str = "GBP"
    baseline_months: int = 6
    burn_rate_months: int = 12
    emergency_fund_months: int = 6

    def __post_init__(self):
        for name in ("baseline_months", "burn_rate_months"):
            if getattr(self, name) < 1:
                raise ConfigError(f"{name} must be >= 1")
        if self.emergency_fund_months < 0:
            raise ConfigError("emergency_fund_months must be >= 0")

    def now(self) -> datetime:
        return resolve_as_of(clock=self.clock)
