"""
Scenario definitions for cash-flow projection and stress testing.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from decimal import Decimal
from numbers import Integral, Real
from typing import Any

from .currency import to_decimal
from .exceptions import ScenarioValidationError

DEFAULT_VARIABILITY = 0.15


@dataclass(frozen=True)
class Scenario:
    """
    Declarative set of monthly assumptions walked forward by the projector.

    A scenario is immutable once constructed. Monthly amounts may be left as
    ``None``, in which case the projector substitutes historical averages;
    ``0`` is a real value (e.g. no income at all) and is kept as-is.

    Attributes:
        name: Human-readable scenario name, used as the result key
        monthly_income: Assumed income per month, or None for "use history"
        monthly_expenses: Assumed expenses per month, or None for "use history"
        projected_months: Number of months to project (>= 1)
        variability: Standard deviation of the monthly relative variation
            used when the scenario is simulated
        income_reduction: Informational share by which income was reduced
        expense_increase: Informational share by which expenses were raised
        emergency_fund_months: Reserve months associated with the scenario

    Raises:
        ScenarioValidationError: On non-positive ``projected_months``,
            negative ``variability`` or negative monthly amounts
    """

    name: str
    monthly_income: Decimal | None
    monthly_expenses: Decimal | None
    projected_months: int
    variability: float = DEFAULT_VARIABILITY
    income_reduction: float | None = None
    expense_increase: float | None = None
    emergency_fund_months: int | None = None

    def __post_init__(self):
        bad: list[str] = []

        for name in ("monthly_income", "monthly_expenses"):
            value = getattr(self, name)
            if value is None:
                continue
            try:
                amount = to_decimal(value)
            except ValueError:
                bad.append(name)
                continue
            if amount < 0:
                bad.append(name)
            object.__setattr__(self, name, amount)

        months = self.projected_months
        if (
            isinstance(months, bool)
            or not isinstance(months, Integral)
            or months <= 0
        ):
            bad.append("projected_months")
        else:
            object.__setattr__(self, "projected_months", int(months))

        if (
            isinstance(self.variability, bool)
            or not isinstance(self.variability, Real)
            or self.variability < 0
            or self.variability != self.variability  # NaN
        ):
            bad.append("variability")
        else:
            object.__setattr__(self, "variability", float(self.variability))

        reserve = self.emergency_fund_months
        if reserve is not None and (
            isinstance(reserve, bool) or not isinstance(reserve, Real) or reserve < 0
        ):
            bad.append("emergency_fund_months")

        if bad:
            raise ScenarioValidationError(
                self.name,
                "invalid scenario parameters: projected_months must be a positive "
                "integer, variability and monthly amounts must be non-negative",
                fields=bad,
            )

    @property
    def is_resolved(self) -> bool:
        """True when both monthly amounts are known."""
        return self.monthly_income is not None and self.monthly_expenses is not None

    @property
    def monthly_net_flow(self) -> Decimal:
        """Income minus expenses; missing amounts count as zero."""
        income = self.monthly_income or Decimal(0)
        expenses = self.monthly_expenses or Decimal(0)
        return income - expenses

    def resolve(
        self,
        fallback_income: Decimal | float | int,
        fallback_expenses: Decimal | float | int,
    ) -> Scenario:
        """Return a copy with missing monthly amounts filled from the fallbacks."""
        if self.is_resolved:
            return self
        return replace(
            self,
            monthly_income=(
                self.monthly_income
                if self.monthly_income is not None
                else to_decimal(fallback_income)
            ),
            monthly_expenses=(
                self.monthly_expenses
                if self.monthly_expenses is not None
                else to_decimal(fallback_expenses)
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Scenario:
        """
        Create a Scenario from a mapping.

        Accepts both snake_case keys and the camelCase keys used by the
        dashboard (``monthlyIncome``, ``projectedMonths``...).
        """
        aliases = {
            "monthlyIncome": "monthly_income",
            "monthlyExpenses": "monthly_expenses",
            "projectedMonths": "projected_months",
            "incomeReduction": "income_reduction",
            "expenseIncrease": "expense_increase",
            "emergencyFundMonths": "emergency_fund_months",
        }
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            key = aliases.get(key, key)
            if key in known:
                kwargs[key] = value
        kwargs.setdefault("name", "Unnamed Scenario")
        kwargs.setdefault("monthly_income", None)
        kwargs.setdefault("monthly_expenses", None)
        if "projected_months" not in kwargs:
            raise ScenarioValidationError(
                kwargs["name"], "projected_months is required", ["projected_months"]
            )
        return cls(**kwargs)
