"""
Monte Carlo risk simulation of scenario end balances.

Each trial walks a scenario month by month, perturbing income and expenses
independently with normally distributed relative variations. Trials draw
from their own child random stream, so running them through a worker pool
(any object with a ``map`` method, e.g. ``concurrent.futures`` executors)
yields exactly the same outcomes as running them serially.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from functools import partial
from typing import Any, Protocol, runtime_checkable

import numpy as np

from .core.errors import ConfigError
from .core.results import RiskMetrics
from .core.scenario import Scenario

logger = logging.getLogger(__name__)


@runtime_checkable
class RandomSource(Protocol):
    """Injectable source of uniform random numbers."""

    def uniform(self, size: int) -> np.ndarray:
        """Draw ``size`` values uniformly from [0, 1)."""
        ...

    def spawn(self, n: int) -> list[RandomSource]:
        """Create ``n`` statistically independent child sources."""
        ...


class NumpyRandomSource:
    """
    RandomSource backed by ``numpy.random.default_rng``.

    Child streams are derived with ``SeedSequence.spawn``, so a seeded source
    reproduces the same children (and thus the same trials) on every run.
    """

    def __init__(self, seed: int | np.random.SeedSequence | None = None):
        if isinstance(seed, np.random.SeedSequence):
            self._seed_seq = seed
        else:
            self._seed_seq = np.random.SeedSequence(seed)
        self._rng = np.random.default_rng(self._seed_seq)

    def uniform(self, size: int) -> np.ndarray:
        return self._rng.random(size)

    def spawn(self, n: int) -> list[NumpyRandomSource]:
        return [NumpyRandomSource(child) for child in self._seed_seq.spawn(n)]

    def __repr__(self) -> str:
        return f"NumpyRandomSource(entropy={self._seed_seq.entropy})"


@dataclass(frozen=True)
class MonteCarloConfig:
    """
    Simulation parameters.

    Attributes:
        iterations: Number of independent trials
        confidence_level: Width of the reported interval (0.9 gives the
            5th and 95th percentiles)
        variability_factor: Standard deviation of the monthly relative
            income/expense variation
        seed: Seed for the default random source; None draws fresh entropy
    """

    iterations: int = 1000
    confidence_level: float = 0.9
    variability_factor: float = 0.15
    seed: int | None = None

    def __post_init__(self):
        if isinstance(self.iterations, bool) or not isinstance(self.iterations, int):
            raise ConfigError(f"iterations must be an integer, got {self.iterations!r}")
        if self.iterations < 1:
            raise ConfigError("iterations must be >= 1")
        if not 0 < self.confidence_level < 1:
            raise ConfigError("confidence_level must be in (0, 1)")
        if not self.variability_factor >= 0:
            raise ConfigError("variability_factor must be >= 0")


def normal_variation(source: RandomSource, variability: float, size: int) -> np.ndarray:
    """
    Draw ``size`` relative variations ~ N(0, variability) via Box-Muller.

    Two uniform draws are used per variation; the first is mapped to (0, 1]
    so the logarithm stays finite.
    """
    u1 = 1.0 - source.uniform(size)
    u2 = source.uniform(size)
    z0 = np.sqrt(-2.0 * np.log(u1)) * np.cos(2.0 * np.pi * u2)
    return z0 * variability


def _monthly_amounts(scenario: Scenario) -> tuple[float, float]:
    if not scenario.is_resolved:
        raise ConfigError(
            f"Scenario '{scenario.name}' must define monthly income and expenses "
            "before it can be simulated"
        )
    return float(scenario.monthly_income), float(scenario.monthly_expenses)


def simulate_trial(
    scenario: Scenario,
    start_balance: Decimal | float,
    variability: float,
    source: RandomSource,
) -> float:
    """
    Run one realisation of a scenario and return its end balance.

    Args:
        scenario: Resolved scenario (income and expenses set)
        start_balance: Balance before the first month
        variability: Standard deviation of the monthly variations
        source: Random stream owned by this trial

    Raises:
        ConfigError: If the scenario still has missing amounts
    """
    income, expenses = _monthly_amounts(scenario)
    months = scenario.projected_months

    income_variation = normal_variation(source, variability, months)
    expense_variation = normal_variation(source, variability, months)
    flows = income * (1 + income_variation) - expenses * (1 + expense_variation)

    balance = float(start_balance)
    for flow in flows:
        balance += flow
    return balance


def summarize_outcomes(
    outcomes: np.ndarray | list[float], confidence_level: float = 0.9
) -> RiskMetrics:
    """
    Distribution summary of simulated end balances.

    Interval bounds are read from the sorted outcomes at the truncated
    positions ``floor((1 - level) / 2 * n)`` and ``floor((1 + level) / 2 * n)``
    (clamped to the last index); no interpolation is done. The volatility
    score is the coefficient of variation in percent capped at 100; with a
    zero mean it is 100 for dispersed outcomes and 0 otherwise.

    Raises:
        ConfigError: If there are no outcomes
    """
    values = np.sort(np.asarray(outcomes, dtype=float))
    n = len(values)
    if n == 0:
        raise ConfigError("Cannot summarize an empty set of outcomes")

    lower = min(n - 1, math.floor((1 - confidence_level) / 2 * n))
    upper = min(n - 1, math.floor((1 + confidence_level) / 2 * n))

    mean = values.mean()
    std = values.std()
    if mean == 0:
        volatility = 100.0 if std > 0 else 0.0
    else:
        volatility = min(100.0, float(std / abs(mean) * 100))

    return RiskMetrics(
        confidence_lower=float(values[lower]),
        confidence_upper=float(values[upper]),
        probability_of_success=float(np.count_nonzero(values > 0) / n),
        worst_case=float(values[0]),
        best_case=float(values[-1]),
        volatility_score=volatility,
        iterations=n,
        confidence_level=confidence_level,
    )


def simulate(
    scenario: Scenario,
    start_balance: Decimal | float,
    config: MonteCarloConfig | None = None,
    *,
    source: RandomSource | None = None,
    executor: Any | None = None,
) -> RiskMetrics:
    """
    Estimate the end-balance distribution of a scenario.

    Args:
        scenario: Resolved scenario to simulate
        start_balance: Balance before the first month
        config: Simulation parameters (defaults to ``MonteCarloConfig()``)
        source: Root random source; one child stream is spawned per trial.
            Defaults to ``NumpyRandomSource(config.seed)``
        executor: Optional object with ``map(fn, iterable)`` used to run the
            trials; results do not depend on it

    Returns:
        RiskMetrics over ``config.iterations`` trials
    """
    config = config or MonteCarloConfig()
    source = source or NumpyRandomSource(config.seed)
    _monthly_amounts(scenario)

    streams = source.spawn(config.iterations)
    trial = partial(simulate_trial, scenario, start_balance, config.variability_factor)
    mapper = executor.map if executor is not None else map

    logger.debug(
        "Simulating '%s': %d trials x %d months (variability=%.3f)",
        scenario.name,
        config.iterations,
        scenario.projected_months,
        config.variability_factor,
    )
    outcomes = np.array(list(mapper(trial, streams)), dtype=float)
    return summarize_outcomes(outcomes, config.confidence_level)
