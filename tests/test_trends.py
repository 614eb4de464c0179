"""
Tests for trend, seasonality and confidence analysis.
"""

from datetime import date
from decimal import Decimal

import pytest
from finforecastlab.core.errors import ConfigError
from finforecastlab.trends import (
    SEASONALITY_FACTORS,
    Trend,
    classify_trend,
    confidence,
    historical_average,
    linear_trend,
    seasonality_factor,
)


class TestHistoricalAverage:
    def test_months_without_activity_count_as_zero(self, as_of, history):
        transactions = history([600, 0, 0], [0, 0, 0])
        assert historical_average(transactions, "income", 3, as_of=as_of) == Decimal("200")

    def test_expense_average(self, as_of, steady_history):
        assert historical_average(steady_history, "expense", 6, as_of=as_of) == Decimal(
            "3500"
        )

    def test_window_excludes_older_months(self, as_of, history):
        transactions = history([100, 100, 10000], [0, 0, 0])
        assert historical_average(transactions, "income", 2, as_of=as_of) == Decimal("100")

    def test_transfer_kind_rejected(self, as_of):
        with pytest.raises(ConfigError):
            historical_average([], "transfer", 3, as_of=as_of)


class TestLinearTrend:
    def test_degenerate_series(self):
        assert linear_trend([]) == 0.0
        assert linear_trend([42]) == 42.0

    def test_extrapolates_fitted_line(self):
        """Index 0 is the most recent sample; the fit is read at index n - 1."""
        assert linear_trend([1, 2, 3]) == pytest.approx(3.0)
        assert linear_trend([300, 300, 300, 300]) == pytest.approx(300.0)

    def test_noisy_series(self):
        # Least squares over (0, 10), (1, 30), (2, 20): slope 5, intercept 15
        assert linear_trend([Decimal(10), Decimal(30), Decimal(20)]) == pytest.approx(25.0)


class TestSeasonality:
    def test_table_shape(self):
        assert len(SEASONALITY_FACTORS) == 12
        assert SEASONALITY_FACTORS == (1.1, 0.9, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.1, 1.2)

    def test_lookup_by_month_and_date(self):
        assert seasonality_factor(12) == 1.2
        assert seasonality_factor(2) == 0.9
        assert seasonality_factor(date(2026, 1, 20)) == 1.1

    @pytest.mark.parametrize("month", [0, 13, -1, True, "12"])
    def test_invalid_month(self, month):
        with pytest.raises(ConfigError):
            seasonality_factor(month)


class TestClassifyTrend:
    @pytest.mark.parametrize(
        "recent, older, expected",
        [
            (115, 100, Trend.WORSENING),
            (85, 100, Trend.IMPROVING),
            (105, 100, Trend.STABLE),
            (110, 100, Trend.STABLE),
            (50, 0, Trend.STABLE),
            (Decimal("1200"), Decimal("1000"), Trend.WORSENING),
        ],
    )
    def test_classification(self, recent, older, expected):
        assert classify_trend(recent, older) is expected


class TestConfidence:
    def test_insufficient_samples(self):
        assert confidence([]) == 0.0
        assert confidence([500]) == 0.0

    def test_zero_mean(self):
        assert confidence([0, 0, 0]) == 0.0

    def test_constant_series_is_fully_confident(self):
        assert confidence([100, 100, 100]) == 100.0

    def test_population_stddev(self):
        # mean 100, population stddev 50
        assert confidence([50, 150]) == pytest.approx(50.0)

    def test_clamped_at_zero(self):
        assert confidence([0, 0, 300]) == 0.0
