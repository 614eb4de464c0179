"""
Property-based tests using Hypothesis for projection, runway and simulation
invariants.
"""

from datetime import datetime
from decimal import Decimal

from finforecastlab import INFINITE, FinancialGoal, Scenario, Transaction
from finforecastlab.burn_rate import burn_rate, runway
from finforecastlab.core.currency import GBP
from finforecastlab.core.utils import add_months
from finforecastlab.goals import goal_probability
from finforecastlab.montecarlo import NumpyRandomSource, summarize_outcomes
from finforecastlab.projection import project
from hypothesis import given, settings
from hypothesis import strategies as st


AS_OF = datetime(2026, 10, 15, 12, 0)


def _history(incomes, expenses):
    """One income and one expense per month, index 0 = current month."""
    transactions = []
    for i, (income, expense) in enumerate(zip(incomes, expenses)):
        month = add_months(AS_OF, -i).replace(day=2)
        transactions.append(Transaction(income, "GBP", month, "income"))
        transactions.append(Transaction(expense, "GBP", month, "expense"))
    return transactions


amounts = st.decimals(
    min_value=0, max_value=100000, places=2, allow_nan=False, allow_infinity=False
)
balances = st.decimals(
    min_value=-100000, max_value=100000, places=2, allow_nan=False, allow_infinity=False
)


class TestProjectionProperties:
    """Projected balances follow the straight-line identity."""

    @given(
        start=balances,
        income=amounts,
        expenses=amounts,
        months=st.integers(min_value=1, max_value=36),
    )
    @settings(max_examples=50, deadline=None)
    def test_end_balance_identity(self, start, income, expenses, months):
        rows, summary = project(
            Scenario("Any", income, expenses, months), start, as_of=AS_OF
        )
        net = income - expenses

        assert len(rows) == months
        assert rows[-1].cumulative_flow == net * months
        assert summary.end_balance == GBP.quantize(start + net * months)
        assert summary.minimum_balance <= summary.end_balance <= summary.maximum_balance

    @given(start=balances, income=amounts, expenses=amounts)
    @settings(max_examples=50, deadline=None)
    def test_depletion_is_first_non_positive_month(self, start, income, expenses):
        rows, summary = project(Scenario("Any", income, expenses, 12), start, as_of=AS_OF)
        depletion = summary.months_to_depletion

        if depletion is None:
            assert all(r.balance > 0 for r in rows)
        else:
            assert rows[depletion - 1].balance <= 0
            assert all(r.balance > 0 for r in rows[: depletion - 1])


class TestRunwayProperties:
    @given(balance=st.decimals(min_value=0, max_value=10**9, places=2))
    def test_no_burn_is_infinite(self, balance):
        assert runway(balance, Decimal(0)) is INFINITE

    @given(
        balance=balances,
        burn=st.decimals(min_value="0.01", max_value=100000, places=2),
    )
    def test_finite_runway_is_non_negative(self, balance, burn):
        assert runway(balance, burn) >= 0

    @given(
        expenses=st.lists(
            st.integers(min_value=0, max_value=10000), min_size=3, max_size=3
        ),
        incomes=st.lists(
            st.integers(min_value=0, max_value=10000), min_size=3, max_size=3
        ),
    )
    @settings(max_examples=30, deadline=None)
    def test_burn_rate_is_non_negative(self, incomes, expenses):
        transactions = _history(incomes, expenses)
        assert burn_rate(transactions, 3, as_of=AS_OF) >= 0


class TestSimulationProperties:
    @given(
        outcomes=st.lists(
            st.floats(min_value=-1e6, max_value=1e6, allow_nan=False),
            min_size=1,
            max_size=200,
        ),
        level=st.floats(min_value=0.5, max_value=0.99),
    )
    def test_summary_ordering(self, outcomes, level):
        risk = summarize_outcomes(outcomes, level)

        assert risk.worst_case <= risk.confidence_lower <= risk.confidence_upper
        assert risk.confidence_upper <= risk.best_case
        assert 0.0 <= risk.probability_of_success <= 1.0
        assert 0.0 <= risk.volatility_score <= 100.0

    @given(
        current=st.integers(min_value=0, max_value=50000),
        target=st.integers(min_value=1, max_value=50000),
        seed=st.integers(min_value=0, max_value=2**32 - 1),
    )
    @settings(max_examples=30, deadline=None)
    def test_goal_probability_bounds(self, current, target, seed):
        goal = FinancialGoal(current, target, datetime(2027, 10, 15, 12, 0))
        estimate = goal_probability(
            goal,
            Scenario("Savings", 4000, 2500, 12),
            simulations=50,
            source=NumpyRandomSource(seed),
            as_of=AS_OF,
        )

        assert 0.0 <= estimate.probability <= 1.0
        assert 0.0 <= estimate.feasibility_score <= 100.0
        assert estimate.on_track == (estimate.probability > 0.5)
        if current >= target:
            assert estimate.probability == 1.0

    @given(
        current=st.integers(min_value=0, max_value=20000),
        targets=st.tuples(
            st.integers(min_value=1, max_value=40000),
            st.integers(min_value=1, max_value=40000),
        ),
        seed=st.integers(min_value=0, max_value=2**32 - 1),
    )
    @settings(max_examples=30, deadline=None)
    def test_lower_target_is_never_harder(self, current, targets, seed):
        low, high = sorted(targets)
        scenario = Scenario("Savings", 4000, 2500, 12)

        def probability(target):
            goal = FinancialGoal(current, target, datetime(2027, 10, 15, 12, 0))
            return goal_probability(
                goal,
                scenario,
                simulations=50,
                source=NumpyRandomSource(seed),
                as_of=AS_OF,
            ).probability

        assert probability(low) >= probability(high)
