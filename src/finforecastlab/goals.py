"""
Goal achievement estimation.

The required monthly contribution spreads the remaining amount evenly over
the months left until the target date. The probability of reaching the goal
is estimated by simulating that contribution with normally distributed
month-to-month variation.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime
from decimal import Decimal

from .core.context import Clock, resolve_as_of
from .core.errors import ConfigError
from .core.models import FinancialGoal
from .core.results import GoalProbability
from .core.scenario import Scenario
from .core.utils import as_datetime
from .montecarlo import NumpyRandomSource, RandomSource, normal_variation

logger = logging.getLogger(__name__)

#: Average days per month used to convert a date span to months
DAYS_PER_MONTH = 30.44
GOAL_SIMULATIONS = 1000
GOAL_VARIABILITY = 0.1


def months_between(start: date | datetime, end: date | datetime) -> int:
    """Whole months from ``start`` to ``end``, rounded up and at least 1."""
    days = (as_datetime(end) - as_datetime(start)).total_seconds() / 86400
    return max(1, math.ceil(days / DAYS_PER_MONTH))


def simulate_goal_progress(
    start_amount: float,
    monthly_contribution: float,
    months: int,
    variability: float,
    source: RandomSource,
) -> float:
    """Amount accumulated after ``months`` perturbed contributions."""
    variation = normal_variation(source, variability, months)
    amount = float(start_amount)
    for contribution in float(monthly_contribution) * (1 + variation):
        amount += contribution
    return amount


def goal_probability(
    goal: FinancialGoal,
    scenario: Scenario,
    *,
    simulations: int = GOAL_SIMULATIONS,
    variability: float = GOAL_VARIABILITY,
    source: RandomSource | None = None,
    as_of: date | datetime | None = None,
    clock: Clock | None = None,
) -> GoalProbability:
    """
    Estimate how likely a goal is to be reached by its target date.

    Args:
        goal: Goal with current amount, target amount and target date
        scenario: Resolved scenario supplying the monthly net flow
        simulations: Number of simulated contribution paths
        variability: Standard deviation of each month's contribution variation
        source: Root random source; one child stream is spawned per path
        as_of: Reference instant; defaults to ``clock.now()``
        clock: Time provider used only when ``as_of`` is omitted

    Returns:
        GoalProbability. ``projected_date`` is the target date only when the
        probability exceeds one half, and None otherwise.

    Raises:
        ConfigError: If ``simulations`` < 1 or the scenario lacks amounts
    """
    if simulations < 1:
        raise ConfigError("simulations must be >= 1")
    if not scenario.is_resolved:
        raise ConfigError(
            f"Scenario '{scenario.name}' must define monthly income and expenses"
        )

    now = resolve_as_of(as_of, clock)
    months = months_between(now, goal.target_date)
    required = goal.remaining_amount / months

    available = max(Decimal(0), scenario.monthly_net_flow - required)
    if available <= 0:
        feasibility = 0.0
    elif required == 0:
        feasibility = 100.0
    else:
        feasibility = min(100.0, float(available / required * 100))

    source = source or NumpyRandomSource()
    target = float(goal.target_amount)
    successes = sum(
        1
        for stream in source.spawn(simulations)
        if simulate_goal_progress(
            float(goal.current_amount), float(required), months, variability, stream
        )
        >= target
    )
    probability = successes / simulations

    logger.debug(
        "Goal '%s': %d months, required=%s, probability=%.3f",
        goal.name,
        months,
        required,
        probability,
    )
    return GoalProbability(
        probability=probability,
        projected_date=goal.target_date if probability > 0.5 else None,
        required_monthly_contribution=required,
        feasibility_score=feasibility,
        months_to_goal=months,
    )
