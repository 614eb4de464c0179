"""
FinForecastLab - Cash-flow Forecasting and Risk Engine

FinForecastLab turns a history of transactions and account balances into
forward-looking cash-flow projections, burn-rate and runway estimates,
stress-test scenarios and Monte Carlo risk metrics, including the probability
of reaching a savings goal.

Key Features:
- **Pure computation**: Every operation reads in-memory records and returns
  immutable results; nothing is persisted or fetched
- **Injectable time and randomness**: "Now" comes from a Clock and every
  simulation draws from a RandomSource, so forecasts are reproducible
- **Decimal money**: Deterministic paths use Decimal with currency-aware rounding
- **Explicit sentinels**: Infinite runways and undefined values never leak as
  inf/NaN into JSON output

Architecture Overview:
- **Aggregation**: Monthly income/expense buckets and category breakdowns
- **Trends**: Historical averages, linear trend, seasonality, confidence
- **Burn Rate**: Current and seasonal burn, runway variants, recommendations
- **Projection**: Deterministic month-by-month scenario walk
- **Monte Carlo**: Stochastic scenario trials with percentile summaries
- **Goals**: Required contribution, feasibility and achievement probability
- **Stress**: Catalogue of adverse scenarios
- **Engine**: ForecastEngine facade tying the components to a ForecastContext

Quick Start:
    ```python
    from finforecastlab import (
        Account, FixedClock, ForecastContext, ForecastEngine,
        MonteCarloConfig, Scenario, Transaction,
    )

    engine = ForecastEngine(
        transactions=[
            Transaction(3200, "GBP", "2026-10-01", "income", "Salary"),
            Transaction(2850.75, "GBP", "2026-10-03", "expense", "Living"),
        ],
        accounts=[Account(45750.32)],
        context=ForecastContext(clock=FixedClock("2026-10-15")),
    )
    results = engine.generate_projections(
        [Scenario("Steady", 3200, 2850.75, projected_months=12)],
        config=MonteCarloConfig(seed=42),
    )
    print(results[0].summary.end_balance)
    ```
"""

# Version information
__version__ = "0.1.0"
__author__ = "FinForecastLab Team"
__description__ = "Cash-flow Forecasting and Risk Engine"

from .aggregation import (
    average_monthly_expenses,
    detect_spending_anomalies,
    monthly_expenses,
    monthly_income,
    monthly_totals,
    monthly_trends,
    spending_by_category,
    total_balance,
)
from .burn_rate import (
    burn_rate,
    enhanced_burn_rate,
    enhanced_runway,
    project_future_balance,
    recommendations,
    runway,
)
from .core import (
    INFINITE,
    Account,
    ConfigError,
    EnhancedBurnRate,
    EnhancedRunway,
    FinancialGoal,
    FixedClock,
    ForecastContext,
    ForecastJSONEncoder,
    GoalProbability,
    MonthlyProjection,
    ProjectionResult,
    ProjectionSummary,
    RiskMetrics,
    Scenario,
    ScenarioValidationError,
    Sentinel,
    SystemClock,
    Transaction,
    TransactionType,
    Trend,
)
from .engine import ForecastEngine
from .goals import goal_probability, months_between
from .loader import InputBundle, InputError, load_inputs
from .montecarlo import MonteCarloConfig, NumpyRandomSource, RandomSource, simulate
from .projection import cash_flow_projections, project, summarize
from .stress import stress_test_scenarios
from .trends import (
    SEASONALITY_FACTORS,
    classify_trend,
    confidence,
    historical_average,
    linear_trend,
    seasonality_factor,
)

# Define what gets imported with "from finforecastlab import *"
__all__ = [
    # Engine
    "ForecastEngine",
    "ForecastContext",
    "SystemClock",
    "FixedClock",
    # Inputs
    "Transaction",
    "TransactionType",
    "Account",
    "FinancialGoal",
    "Scenario",
    "InputBundle",
    "load_inputs",
    # Results
    "INFINITE",
    "Sentinel",
    "Trend",
    "MonthlyProjection",
    "ProjectionSummary",
    "RiskMetrics",
    "ProjectionResult",
    "EnhancedBurnRate",
    "EnhancedRunway",
    "GoalProbability",
    "ForecastJSONEncoder",
    # Errors
    "ConfigError",
    "ScenarioValidationError",
    "InputError",
    # Aggregation
    "monthly_income",
    "monthly_expenses",
    "monthly_totals",
    "total_balance",
    "average_monthly_expenses",
    "spending_by_category",
    "monthly_trends",
    "detect_spending_anomalies",
    # Trends
    "SEASONALITY_FACTORS",
    "historical_average",
    "linear_trend",
    "seasonality_factor",
    "classify_trend",
    "confidence",
    # Burn rate
    "burn_rate",
    "enhanced_burn_rate",
    "runway",
    "enhanced_runway",
    "recommendations",
    "project_future_balance",
    # Projection
    "project",
    "summarize",
    "cash_flow_projections",
    # Simulation
    "MonteCarloConfig",
    "RandomSource",
    "NumpyRandomSource",
    "simulate",
    "goal_probability",
    "months_between",
    "stress_test_scenarios",
]
