"""
Tests for deterministic scenario projection.
"""

from datetime import datetime
from decimal import Decimal

import pytest
from finforecastlab import Scenario
from finforecastlab.core.errors import ConfigError
from finforecastlab.projection import cash_flow_projections, project, summarize


def _scenario(income, expenses, months=12, name="Base"):
    return Scenario(name, income, expenses, months)


class TestProject:
    def test_first_month_and_summary(self, as_of):
        scenario = _scenario(Decimal("3200.00"), Decimal("2850.75"))
        rows, summary = project(scenario, Decimal("45750.32"), as_of=as_of)

        assert len(rows) == 12
        assert rows[0].month_label == "Oct 2026"
        assert rows[0].date == as_of
        assert rows[0].balance == Decimal("46099.57")
        assert rows[0].net_flow == Decimal("349.25")
        assert rows[-1].month_label == "Sep 2027"
        assert rows[-1].cumulative_flow == Decimal("4191.00")

        assert summary.end_balance == Decimal("49941.32")
        assert summary.months_to_depletion is None
        assert summary.break_even_month == "Oct 2026"
        assert summary.total_income == Decimal("38400.00")

    def test_depletion(self, as_of):
        rows, summary = project(_scenario(0, 400, months=5), 1000, as_of=as_of)

        assert [r.balance for r in rows] == [
            Decimal("600.00"),
            Decimal("200.00"),
            Decimal("-200.00"),
            Decimal("-600.00"),
            Decimal("-1000.00"),
        ]
        assert summary.months_to_depletion == 3
        assert summary.minimum_balance == Decimal("-1000")
        assert summary.maximum_balance == Decimal("600")
        assert summary.break_even_month is None
        assert summary.average_monthly_net_flow == Decimal("-400")

    def test_runway_months(self, as_of):
        rows, _ = project(_scenario(0, 400, months=3), 1000, as_of=as_of)

        assert rows[0].runway_months == Decimal("1.5")
        assert rows[2].runway_months is None

    def test_no_expenses_means_no_runway(self, as_of):
        rows, _ = project(_scenario(100, 0, months=2), 1000, as_of=as_of)
        assert all(r.runway_months is None for r in rows)

    def test_rounding_does_not_compound(self, as_of):
        """Only the reported balance is rounded (half up)."""
        rows, _ = project(_scenario(Decimal("0.005"), 0, months=3), 0, as_of=as_of)
        assert [r.balance for r in rows] == [
            Decimal("0.01"),
            Decimal("0.01"),
            Decimal("0.02"),
        ]

    def test_zero_decimal_currency(self, as_of):
        rows, _ = project(
            _scenario(Decimal("100.5"), 0, months=1), 1000, as_of=as_of, currency="JPY"
        )
        assert rows[0].balance == Decimal("1101")

    def test_end_of_month_dates_are_clamped(self):
        rows, _ = project(_scenario(1, 1, months=2), 0, as_of=datetime(2027, 1, 31))

        assert rows[1].date == datetime(2027, 2, 28)
        assert [r.month_label for r in rows] == ["Jan 2027", "Feb 2027"]

    def test_uses_clock(self, clock):
        rows, _ = project(_scenario(1, 1, months=1), 0, clock=clock)
        assert rows[0].month_label == "Oct 2026"


class TestFallbacks:
    def test_missing_amount_uses_fallback(self, as_of):
        scenario = Scenario("Partial", None, 500, 3)
        rows, _ = project(scenario, 0, 1000, 9999, as_of=as_of)

        assert rows[0].income == Decimal("1000")
        assert rows[0].expenses == Decimal("500")

    def test_zero_is_not_missing(self, as_of):
        scenario = Scenario("No income", 0, None, 2)
        rows, _ = project(scenario, 0, 1000, 300, as_of=as_of)

        assert rows[0].income == Decimal(0)
        assert rows[0].expenses == Decimal("300")

    def test_missing_without_fallback_raises(self, as_of):
        with pytest.raises(ConfigError, match="monthly_income"):
            project(Scenario("Partial", None, 100, 3), 0, as_of=as_of)


class TestSummarize:
    def test_empty_projection(self):
        with pytest.raises(ConfigError):
            summarize([])


class TestCashFlowProjections:
    def test_projects_each_scenario(self, as_of):
        scenarios = [_scenario(1000, 500, 3, "Up"), _scenario(0, 500, 6, "Down")]
        result = cash_flow_projections(Decimal("1000"), scenarios, as_of=as_of)

        assert list(result) == ["Up", "Down"]
        assert len(result["Up"]) == 3
        assert len(result["Down"]) == 6
        assert result["Up"][-1].balance == Decimal("2500.00")
        assert result["Down"][-1].balance == Decimal("-2000.00")

    def test_requires_resolved_scenarios(self, as_of):
        with pytest.raises(ConfigError):
            cash_flow_projections(0, [Scenario("Open", None, None, 3)], as_of=as_of)
