"""
Forecasting engine facade.

``ForecastEngine`` binds a transaction history and a set of accounts to a
``ForecastContext`` and exposes the forecasting operations as methods. It
keeps no state between calls: every method recomputes from its inputs, and
"now" is always read from the context's clock.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import replace
from decimal import Decimal
from typing import Any

from .burn_rate import enhanced_burn_rate as _enhanced_burn_rate
from .burn_rate import enhanced_runway as _enhanced_runway
from . import goals as _goals
from . import montecarlo as _mc
from . import projection as _projection
from . import stress as _stress
from .aggregation import total_balance
from .core.context import ForecastContext
from .core.models import Account, FinancialGoal, Transaction, TransactionType
from .core.results import (
    EnhancedBurnRate,
    EnhancedRunway,
    GoalProbability,
    ProjectionResult,
    RiskMetrics,
)
from .core.scenario import Scenario
from .montecarlo import MonteCarloConfig, NumpyRandomSource, RandomSource
from .trends import historical_average

logger = logging.getLogger(__name__)


class ForecastEngine:
    """
    Forecasting and risk engine over one household's history.

    Args:
        transactions: Transaction history (read-only)
        accounts: Accounts whose active balances form the current balance
        context: Clock, currency and window settings; defaults to
            ``ForecastContext()`` (system clock, GBP)

    Example:
        ```python
        from finforecastlab import FixedClock, ForecastContext, ForecastEngine, Scenario

        engine = ForecastEngine(
            transactions, accounts, ForecastContext(clock=FixedClock("2026-10-15"))
        )
        results = engine.generate_projections(
            [Scenario("Baseline", None, None, projected_months=12)]
        )
        ```
    """

    def __init__(
        self,
        transactions: Iterable[Transaction],
        accounts: Iterable[Account],
        context: ForecastContext | None = None,
    ):
        self.transactions: tuple[Transaction, ...] = tuple(transactions)
        self.accounts: tuple[Account, ...] = tuple(accounts)
        self.context = context or ForecastContext()

    def __repr__(self) -> str:
        return (
            f"ForecastEngine(transactions={len(self.transactions)}, "
            f"accounts={len(self.accounts)}, currency={self.context.currency!r})"
        )

    def current_balance(self) -> Decimal:
        """Sum of balances over active accounts."""
        return total_balance(self.accounts)

    def historical_average(
        self, kind: TransactionType | str, months: int | None = None
    ) -> Decimal:
        """Average monthly income or expenses over the baseline window."""
        return historical_average(
            self.transactions,
            kind,
            months if months is not None else self.context.baseline_months,
            as_of=self.context.now(),
        )

    def _baseline(self, months: int | None = None) -> tuple[Decimal, Decimal]:
        return (
            self.historical_average(TransactionType.INCOME, months),
            self.historical_average(TransactionType.EXPENSE, months),
        )

    def resolve_scenario(self, scenario: Scenario, months: int | None = None) -> Scenario:
        """Fill a scenario's missing amounts from the historical averages."""
        if scenario.is_resolved:
            return scenario
        return scenario.resolve(*self._baseline(months))

    def generate_projections(
        self,
        scenarios: Sequence[Scenario],
        baseline_months: int | None = None,
        config: MonteCarloConfig | None = None,
        source: RandomSource | None = None,
        executor: Any | None = None,
    ) -> list[ProjectionResult]:
        """
        Project and risk-assess each scenario from the current balance.

        Missing scenario amounts fall back to the historical averages over
        ``baseline_months``. Each scenario is simulated with its own
        ``variability`` and its own child random stream; ``config`` supplies
        the iteration count, confidence level and seed.

        Returns:
            One ProjectionResult per scenario, in input order
        """
        config = config or MonteCarloConfig()
        root = source or NumpyRandomSource(config.seed)
        now = self.context.now()
        start_balance = self.current_balance()
        income, expenses = self._baseline(baseline_months)

        logger.debug(
            "Generating %d projection(s) from balance %s (baseline income=%s, expenses=%s)",
            len(scenarios),
            start_balance,
            income,
            expenses,
        )

        results = []
        for scenario, stream in zip(scenarios, root.spawn(len(scenarios))):
            projections, summary = _projection.project(
                scenario,
                start_balance,
                income,
                expenses,
                as_of=now,
                currency=self.context.currency,
            )
            resolved = scenario.resolve(income, expenses)
            risk = _mc.simulate(
                resolved,
                start_balance,
                replace(config, variability_factor=resolved.variability),
                source=stream,
                executor=executor,
            )
            results.append(
                ProjectionResult(
                    scenario_name=scenario.name,
                    projections=projections,
                    summary=summary,
                    risk=risk,
                )
            )
        return results

    def enhanced_burn_rate(self, months: int | None = None) -> EnhancedBurnRate:
        return _enhanced_burn_rate(
            self.transactions,
            months if months is not None else self.context.burn_rate_months,
            as_of=self.context.now(),
        )

    def enhanced_runway(self, emergency_fund_months: int | None = None) -> EnhancedRunway:
        if emergency_fund_months is None:
            emergency_fund_months = self.context.emergency_fund_months
        return _enhanced_runway(
            self.accounts,
            self.transactions,
            emergency_fund_months,
            burn_rate_months=self.context.burn_rate_months,
            as_of=self.context.now(),
        )

    def monte_carlo(
        self,
        scenario: Scenario,
        config: MonteCarloConfig | None = None,
        *,
        source: RandomSource | None = None,
        executor: Any | None = None,
    ) -> RiskMetrics:
        """Simulate a scenario from the current balance using ``config`` as given."""
        return _mc.simulate(
            self.resolve_scenario(scenario),
            self.current_balance(),
            config,
            source=source,
            executor=executor,
        )

    def goal_probability(
        self,
        goal: FinancialGoal,
        scenario: Scenario,
        *,
        simulations: int = _goals.GOAL_SIMULATIONS,
        source: RandomSource | None = None,
    ) -> GoalProbability:
        return _goals.goal_probability(
            goal,
            self.resolve_scenario(scenario),
            simulations=simulations,
            source=source,
            as_of=self.context.now(),
        )

    def stress_test_scenarios(self, baseline_months: int | None = None) -> list[Scenario]:
        """Stress catalogue built from the historical averages."""
        return _stress.stress_test_scenarios(*self._baseline(baseline_months))
