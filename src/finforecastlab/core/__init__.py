"""
Core module for FinForecastLab.

This module contains the input records, scenario definitions, result containers
and calendar/currency helpers shared by every forecasting component.
"""

from .context import Clock, FixedClock, ForecastContext, SystemClock, resolve_as_of
from .currency import Currency, RoundingPolicy, get_currency, to_decimal
from .errors import ConfigError
from .exceptions import ScenarioValidationError
from .models import Account, FinancialGoal, Transaction, TransactionType
from .results import (
    INFINITE,
    CategorySpend,
    CriticalThresholds,
    EnhancedBurnRate,
    EnhancedRunway,
    ForecastJSONEncoder,
    GoalProbability,
    MonthlyProjection,
    MonthlyTotals,
    ProjectionResult,
    ProjectionSummary,
    RiskMetrics,
    Runway,
    Sentinel,
    Trend,
    is_infinite,
    projections_frame,
    to_jsonable,
)
from .scenario import Scenario
from .utils import add_months, end_of_month, month_label, month_range, start_of_month

__all__ = [
    # Errors
    "ConfigError",
    "ScenarioValidationError",
    # Context
    "Clock",
    "SystemClock",
    "FixedClock",
    "ForecastContext",
    "resolve_as_of",
    # Currency
    "Currency",
    "RoundingPolicy",
    "get_currency",
    "to_decimal",
    # Inputs
    "Transaction",
    "TransactionType",
    "Account",
    "FinancialGoal",
    "Scenario",
    # Results
    "INFINITE",
    "Sentinel",
    "Runway",
    "Trend",
    "is_infinite",
    "MonthlyTotals",
    "CategorySpend",
    "MonthlyProjection",
    "ProjectionSummary",
    "RiskMetrics",
    "ProjectionResult",
    "EnhancedBurnRate",
    "CriticalThresholds",
    "EnhancedRunway",
    "GoalProbability",
    "ForecastJSONEncoder",
    "projections_frame",
    "to_jsonable",
    # Utilities
    "add_months",
    "start_of_month",
    "end_of_month",
    "month_label",
    "month_range",
]
