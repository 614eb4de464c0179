"""
Tests for monthly aggregation of transactions.
"""

from datetime import date, datetime
from decimal import Decimal

import pandas as pd
import pytest
from finforecastlab import Account, FixedClock, Transaction
from finforecastlab.aggregation import (
    UNCATEGORIZED,
    average_monthly_expenses,
    detect_spending_anomalies,
    monthly_expenses,
    monthly_history,
    monthly_income,
    monthly_totals,
    monthly_trends,
    spending_by_category,
    total_balance,
)
from finforecastlab.core.errors import ConfigError


def _tx(amount, when, kind="expense", category=""):
    return Transaction(amount, "GBP", when, kind, category)


class TestMonthlyBuckets:
    """Test the month window used by income/expense totals."""

    def test_months_do_not_contaminate_each_other(self):
        transactions = [
            _tx(1000, datetime(2026, 9, 20), "income"),
            _tx(250, datetime(2026, 10, 3), "income"),
            _tx(400, datetime(2026, 10, 10)),
            _tx(80, datetime(2026, 11, 2)),
        ]

        assert monthly_income(transactions, datetime(2026, 9, 1)) == Decimal("1000")
        assert monthly_income(transactions, datetime(2026, 10, 31)) == Decimal("250")
        assert monthly_expenses(transactions, datetime(2026, 10, 1)) == Decimal("400")
        assert monthly_expenses(transactions, datetime(2026, 11, 15)) == Decimal("80")

    def test_last_microsecond_belongs_to_its_month(self):
        boundary = datetime(2026, 10, 31, 23, 59, 59, 999999)
        next_month = datetime(2026, 11, 1)
        transactions = [_tx(100, boundary, "income"), _tx(50, next_month, "income")]

        assert monthly_income(transactions, datetime(2026, 10, 15)) == Decimal("100")
        assert monthly_income(transactions, datetime(2026, 11, 15)) == Decimal("50")

    def test_magnitudes_and_type_filter(self):
        transactions = [
            _tx(-40, datetime(2026, 10, 2)),
            _tx(60, datetime(2026, 10, 3)),
            _tx(500, datetime(2026, 10, 4), "transfer"),
        ]

        assert monthly_expenses(transactions, datetime(2026, 10, 1)) == Decimal("100")
        assert monthly_income(transactions, datetime(2026, 10, 1)) == Decimal(0)

    def test_empty_input(self):
        assert monthly_income([], datetime(2026, 10, 1)) == Decimal(0)
        assert monthly_expenses([], datetime(2026, 10, 1)) == Decimal(0)

    def test_default_month_comes_from_clock(self, clock):
        transactions = [_tx(70, datetime(2026, 10, 1), "income")]
        assert monthly_income(transactions, clock=clock) == Decimal("70")

    def test_monthly_totals(self, as_of, history):
        totals = monthly_totals(history([3000], [3500]), as_of)

        assert totals.month == datetime(2026, 10, 1)
        assert totals.net_flow == Decimal("-500")
        assert totals.burn == Decimal("500")

    def test_monthly_history_order_and_validation(self, as_of, history):
        rows = monthly_history(history([1, 2, 3], [0, 0, 0]), 3, as_of=as_of)
        assert [r.income for r in rows] == [Decimal(1), Decimal(2), Decimal(3)]

        with pytest.raises(ConfigError):
            monthly_history([], 0, as_of=as_of)


class TestBalancesAndAverages:
    def test_total_balance_counts_active_accounts(self, accounts):
        assert total_balance(accounts) == Decimal("9000")
        assert total_balance([]) == Decimal(0)

    def test_total_balance_keeps_negative_balances(self):
        accounts = [Account(500), Account(-200)]
        assert total_balance(accounts) == Decimal("300")

    def test_average_skips_months_without_spending(self, as_of, history):
        transactions = history([0] * 6, [300, 0, 600, 0, 0, 0])
        assert average_monthly_expenses(transactions, 6, as_of=as_of) == Decimal("450")

    def test_average_without_spending_is_zero(self, as_of):
        assert average_monthly_expenses([], as_of=as_of) == Decimal(0)


class TestSpendingByCategory:
    def test_sorted_with_percentages(self, as_of):
        transactions = [
            _tx(100, datetime(2026, 10, 2), category="Groceries"),
            _tx(300, datetime(2026, 10, 3), category="Rent"),
            _tx(50, datetime(2026, 10, 4), category="Groceries"),
            _tx(50, datetime(2026, 10, 5), category="  "),
            _tx(999, datetime(2026, 9, 5), category="Rent"),
        ]

        rows = spending_by_category(transactions, as_of)

        assert [r.category for r in rows] == ["Rent", "Groceries", UNCATEGORIZED]
        assert [r.amount for r in rows] == [Decimal("300"), Decimal("150"), Decimal("50")]
        assert rows[0].percentage == pytest.approx(60.0)
        assert sum(r.percentage for r in rows) == pytest.approx(100.0)

    def test_no_spending(self, as_of):
        assert spending_by_category([], as_of) == []


class TestMonthlyTrends:
    def test_frame_is_oldest_first(self, as_of, history):
        frame = monthly_trends(history([3000, 2000, 1000], [500, 500, 500]), 3, as_of=as_of)

        assert isinstance(frame, pd.DataFrame)
        assert list(frame.columns) == ["month", "date", "income", "expenses", "net_flow"]
        assert list(frame["month"]) == ["Aug 2026", "Sep 2026", "Oct 2026"]
        assert list(frame["net_flow"]) == [500.0, 1500.0, 2500.0]

    def test_date_column_holds_month_starts(self, as_of, history):
        frame = monthly_trends(history([1, 1, 1], [0, 0, 0]), 3, as_of=as_of)

        assert list(frame["date"]) == [
            pd.Timestamp("2026-08-01"),
            pd.Timestamp("2026-09-01"),
            pd.Timestamp("2026-10-01"),
        ]


class TestOffsetStampedTransactions:
    """Timestamps carrying a UTC offset are bucketed by their UTC month."""

    @pytest.fixture
    def transactions(self):
        return [
            _tx(3000, "2026-10-01T09:00:00Z", "income"),
            _tx(100, "2026-10-10T12:00:00+01:00"),
            # 01:30 UTC on 1 November
            _tx(200, "2026-10-31T23:30:00-02:00"),
        ]

    def test_date_only_reference(self, transactions):
        assert monthly_income(transactions, date(2026, 10, 15)) == Decimal("3000")
        assert monthly_expenses(transactions, date(2026, 10, 15)) == Decimal("100")
        assert monthly_expenses(transactions, date(2026, 11, 2)) == Decimal("200")

    def test_clock_reference(self, transactions):
        [current, previous] = monthly_history(
            transactions, 2, clock=FixedClock("2026-11-02")
        )

        assert current.expenses == Decimal("200")
        assert previous.income == Decimal("3000")
        assert previous.expenses == Decimal("100")


class TestSpendingAnomalies:
    def test_flags_large_current_month_expenses(self, as_of, history):
        transactions = history([0] * 6, [0, 1000, 1000, 1000, 1000, 1000])
        transactions += [
            _tx(1000, datetime(2026, 10, 6)),
            _tx(4000, datetime(2026, 10, 7)),
            _tx(20, datetime(2026, 10, 8)),
        ]

        flagged = detect_spending_anomalies(transactions, as_of=as_of)

        assert [t.amount for t in flagged] == [Decimal("4000"), Decimal("1000")]

    def test_nothing_flagged_for_steady_spending(self, as_of, steady_history):
        assert detect_spending_anomalies(steady_history, as_of=as_of) == []
