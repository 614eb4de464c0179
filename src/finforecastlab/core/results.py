"""
Result containers produced by the forecasting engine.

Every container is a plain dataclass with a ``to_dict`` method producing
JSON-friendly values (see :class:`ForecastJSONEncoder`). Deterministic money
values are ``Decimal``; simulated values are ``float``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Union

import numpy as np
import pandas as pd


class Sentinel(Enum):
    """Explicit markers for values that have no finite numeric answer."""

    INFINITE = "infinite"

    def __repr__(self) -> str:
        return f"Sentinel.{self.name}"


INFINITE = Sentinel.INFINITE

#: Months of runway: a finite Decimal or the INFINITE sentinel
Runway = Union[Decimal, Sentinel]


def is_infinite(value: Any) -> bool:
    return value is Sentinel.INFINITE


class Trend(Enum):
    """Direction of the burn rate over the analysed window."""

    IMPROVING = "improving"
    WORSENING = "worsening"
    STABLE = "stable"


def _as_dict(obj: Any) -> dict[str, Any]:
    return {f.name: getattr(obj, f.name) for f in fields(obj)}


@dataclass(frozen=True)
class MonthlyTotals:
    """Income and expense totals for one calendar month."""

    month: datetime
    income: Decimal
    expenses: Decimal

    @property
    def net_flow(self) -> Decimal:
        return self.income - self.expenses

    @property
    def burn(self) -> Decimal:
        """Net outflow of the month, floored at zero."""
        return max(Decimal(0), self.expenses - self.income)


@dataclass(frozen=True)
class CategorySpend:
    """Expense total for one category within a month."""

    category: str
    amount: Decimal
    percentage: float

    def to_dict(self) -> dict[str, Any]:
        return _as_dict(self)


@dataclass(frozen=True)
class MonthlyProjection:
    """
    One projected month.

    ``balance`` is rounded to the reporting currency; ``runway_months`` is
    ``None`` when the balance is exhausted or the month has no expenses.
    """

    month_label: str
    date: datetime
    balance: Decimal
    income: Decimal
    expenses: Decimal
    net_flow: Decimal
    cumulative_flow: Decimal
    runway_months: Decimal | None = None

    def to_dict(self) -> dict[str, Any]:
        return _as_dict(self)


@dataclass(frozen=True)
class ProjectionSummary:
    """Summary statistics over a projected balance trajectory."""

    end_balance: Decimal
    total_income: Decimal
    total_expenses: Decimal
    average_monthly_net_flow: Decimal
    minimum_balance: Decimal
    maximum_balance: Decimal
    months_to_depletion: int | None
    break_even_month: str | None

    def to_dict(self) -> dict[str, Any]:
        return _as_dict(self)


@dataclass(frozen=True)
class RiskMetrics:
    """
    Distribution summary of simulated end balances.

    Attributes:
        confidence_lower: Outcome at the lower percentile (5th by default)
        confidence_upper: Outcome at the upper percentile (95th by default)
        probability_of_success: Share of runs ending with a positive balance
        worst_case: Lowest simulated end balance
        best_case: Highest simulated end balance
        volatility_score: Coefficient of variation in percent, capped at 100
        iterations: Number of simulated runs
        confidence_level: Width of the reported interval
    """

    confidence_lower: float
    confidence_upper: float
    probability_of_success: float
    worst_case: float
    best_case: float
    volatility_score: float
    iterations: int
    confidence_level: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "confidence_interval": {
                "lower": self.confidence_lower,
                "upper": self.confidence_upper,
                "level": self.confidence_level,
            },
            "probability_of_success": self.probability_of_success,
            "worst_case": self.worst_case,
            "best_case": self.best_case,
            "volatility_score": self.volatility_score,
            "iterations": self.iterations,
        }


@dataclass(frozen=True)
class ProjectionResult:
    """Projection, summary and risk metrics for one scenario."""

    scenario_name: str
    projections: list[MonthlyProjection]
    summary: ProjectionSummary
    risk: RiskMetrics

    def to_dict(self) -> dict[str, Any]:
        return {
            "scenario": self.scenario_name,
            "projections": [p.to_dict() for p in self.projections],
            "summary": self.summary.to_dict(),
            "risk": self.risk.to_dict(),
        }

    def to_frame(self) -> pd.DataFrame:
        """Monthly rows as a DataFrame indexed by month label."""
        return projections_frame(self.projections)


def projections_frame(projections: list[MonthlyProjection]) -> pd.DataFrame:
    """
    Convert projected months to a DataFrame.

    Money columns are converted to float for analysis; ``runway_months`` is
    NaN where the projection left it undefined.
    """
    columns = [
        "date",
        "balance",
        "income",
        "expenses",
        "net_flow",
        "cumulative_flow",
        "runway_months",
    ]
    rows = []
    for p in projections:
        rows.append(
            {
                "month": p.month_label,
                "date": p.date,
                "balance": float(p.balance),
                "income": float(p.income),
                "expenses": float(p.expenses),
                "net_flow": float(p.net_flow),
                "cumulative_flow": float(p.cumulative_flow),
                "runway_months": (
                    float(p.runway_months) if p.runway_months is not None else np.nan
                ),
            }
        )
    if not rows:
        return pd.DataFrame(columns=columns, index=pd.Index([], name="month"))
    return pd.DataFrame(rows).set_index("month")


@dataclass(frozen=True)
class EnhancedBurnRate:
    """
    Burn-rate analysis over the recent history.

    Attributes:
        current_rate: Average monthly burn over the last three months
        seasonal_adjusted_rate: ``current_rate`` times this month's seasonal factor
        trend: Direction of the burn between the oldest and newest samples
        confidence: 0-100 consistency score of the monthly burn samples
        trending_rate: Linear-trend extrapolation of the recent samples
    """

    current_rate: Decimal
    seasonal_adjusted_rate: Decimal
    trend: Trend
    confidence: float
    trending_rate: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return _as_dict(self)


@dataclass(frozen=True)
class CriticalThresholds:
    """Calendar dates used for runway threshold alerting."""

    three_months: datetime
    six_months: datetime
    twelve_months: datetime

    def to_dict(self) -> dict[str, Any]:
        return _as_dict(self)


@dataclass(frozen=True)
class EnhancedRunway:
    """Runway estimates with reserve-aware variants and recommendations."""

    total_balance: Decimal
    emergency_fund: Decimal
    available_balance: Decimal
    baseline_runway: Runway
    conservative_runway: Runway
    optimistic_runway: Runway
    emergency_fund_runway: Runway
    critical_date: datetime | None
    critical_thresholds: CriticalThresholds
    recommendations: list[str] = field(default_factory=list)
    burn_rate: EnhancedBurnRate | None = None

    def to_dict(self) -> dict[str, Any]:
        data = _as_dict(self)
        data["critical_thresholds"] = self.critical_thresholds.to_dict()
        data["recommendations"] = list(self.recommendations)
        data["burn_rate"] = self.burn_rate.to_dict() if self.burn_rate else None
        return data


@dataclass(frozen=True)
class GoalProbability:
    """
    Likelihood of reaching a goal by its target date.

    ``projected_date`` is ``None`` when the goal is not on track (probability
    at or below one half); callers must treat that as "no date can be
    recommended", not as an unknown.
    """

    probability: float
    projected_date: datetime | None
    required_monthly_contribution: Decimal
    feasibility_score: float
    months_to_goal: int = 0

    @property
    def on_track(self) -> bool:
        return self.projected_date is not None

    def to_dict(self) -> dict[str, Any]:
        return _as_dict(self)


def to_jsonable(obj: Any) -> Any:
    """Recursively convert engine values to JSON-native types."""
    if is_dataclass(obj) and not isinstance(obj, type):
        data = obj.to_dict() if hasattr(obj, "to_dict") else _as_dict(obj)
        return to_jsonable(data)
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, pd.DataFrame):
        return to_jsonable(obj.reset_index().to_dict("records"))
    return obj


class ForecastJSONEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimals, dates, numpy values, enums and results."""

    def default(self, obj):
        converted = to_jsonable(obj)
        if converted is obj:
            return super().default(obj)
        return converted

    def iterencode(self, obj, _one_shot=False):
        return super().iterencode(to_jsonable(obj), _one_shot)
