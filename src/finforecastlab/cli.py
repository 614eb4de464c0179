"""
Command-line interface for FinForecastLab.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

import yaml

from finforecastlab import __version__
from finforecastlab.core.currency import get_currency
from finforecastlab.core.errors import ConfigError
from finforecastlab.core.results import ForecastJSONEncoder, Runway, is_infinite
from finforecastlab.core.scenario import Scenario
from finforecastlab.loader import InputBundle, load_inputs
from finforecastlab.montecarlo import MonteCarloConfig, NumpyRandomSource

logger = logging.getLogger("finforecastlab.cli")

#: Errors reported as a one-line message and exit code 1 (InputError and
#: JSONDecodeError are ValueErrors)
_USER_ERRORS = (ConfigError, OSError, ValueError, TypeError, yaml.YAMLError)


def _save_json(path: str | None, data: Any) -> None:
    """Write data as JSON to a file, or to stdout when no path is given."""
    if path is None:
        json.dump(data, sys.stdout, indent=2, cls=ForecastJSONEncoder)
        sys.stdout.write("\n")
        return
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, cls=ForecastJSONEncoder)


def _format_runway(value: Runway) -> str:
    if is_infinite(value):
        return "infinite"
    return f"{value:.1f} months"


def _baseline_scenario(months: int = 12) -> Scenario:
    """Scenario that projects the historical averages unchanged."""
    return Scenario(
        name="Baseline", monthly_income=None, monthly_expenses=None, projected_months=months
    )


def _pick_scenario(bundle: InputBundle, name: str | None) -> Scenario:
    if name:
        return bundle.scenario(name)
    if bundle.scenarios:
        return bundle.scenarios[0]
    return _baseline_scenario()


def cmd_example(_) -> int:
    """Print a minimal input bundle as YAML."""
    example = {
        "as_of": "2026-10-15",
        "currency": "GBP",
        "accounts": [
            {"name": "Current Account", "balance": 12500.00},
            {"name": "Savings", "balance": 33250.32},
            {"name": "Old ISA", "balance": 900.00, "is_active": False},
        ],
        "transactions": [
            {"date": "2026-10-01", "type": "income", "amount": 3200.00, "category": "Salary"},
            {"date": "2026-10-02", "type": "expense", "amount": 1450.00, "category": "Rent"},
            {"date": "2026-10-09", "type": "expense", "amount": 420.75, "category": "Groceries"},
            {"date": "2026-09-01", "type": "income", "amount": 3200.00, "category": "Salary"},
            {"date": "2026-09-02", "type": "expense", "amount": 1450.00, "category": "Rent"},
            {"date": "2026-09-18", "type": "expense", "amount": 980.00, "category": "Travel"},
        ],
        "goals": [
            {
                "name": "House deposit",
                "current_amount": 8000,
                "target_amount": 20000,
                "target_date": "2028-10-01",
            }
        ],
        "scenarios": [
            {"name": "Baseline", "projected_months": 12},
            {
                "name": "Pay rise",
                "monthly_income": 3600,
                "monthly_expenses": 2850.75,
                "projected_months": 24,
                "variability": 0.1,
            },
        ],
    }
    yaml.safe_dump(example, sys.stdout, sort_keys=False)
    return 0


def cmd_project(args) -> int:
    """Project every scenario of an input bundle and export a JSON report."""
    try:
        bundle = load_inputs(args.input)
        engine = bundle.engine()

        scenarios = list(bundle.scenarios) or [_baseline_scenario()]
        if args.stress:
            scenarios.extend(engine.stress_test_scenarios())

        config = MonteCarloConfig(iterations=args.iterations, seed=args.seed)
        results = engine.generate_projections(scenarios, config=config)

        report = {
            "as_of": engine.context.now(),
            "currency": engine.context.currency,
            "current_balance": engine.current_balance(),
            "results": [r.to_dict() for r in results],
        }
        _save_json(args.output, report)

        if args.output:
            money = get_currency(engine.context.currency)
            for r in results:
                depletion = r.summary.months_to_depletion
                print(
                    f"{r.scenario_name}: end balance {money.format(r.summary.end_balance)}, "
                    f"success {r.risk.probability_of_success:.0%}"
                    + (f", depleted in month {depletion}" if depletion else "")
                )
            print(f"Results saved to {args.output}")
        return 0

    except _USER_ERRORS as e:
        print(f"Error projecting scenarios: {e}", file=sys.stderr)
        return 1


def cmd_runway(args) -> int:
    """Show burn rate, runway and recommendations."""
    try:
        engine = load_inputs(args.input).engine()
        runway = engine.enhanced_runway()
    except _USER_ERRORS as e:
        print(f"Error computing runway: {e}", file=sys.stderr)
        return 1

    if args.json:
        _save_json(None, runway)
        return 0

    burn = runway.burn_rate
    money = get_currency(engine.context.currency)
    print(f"Balance:            {money.format(runway.total_balance)}")
    print(f"Burn rate:          {money.format(burn.current_rate)}/month")
    print(f"Seasonal burn rate: {money.format(burn.seasonal_adjusted_rate)}/month")
    print(f"Trend:              {burn.trend.value} (confidence {burn.confidence:.0f})")
    print(f"Emergency fund:     {money.format(runway.emergency_fund)}")
    print(f"Baseline runway:    {_format_runway(runway.baseline_runway)}")
    print(f"Conservative:       {_format_runway(runway.conservative_runway)}")
    print(f"Optimistic:         {_format_runway(runway.optimistic_runway)}")
    if runway.critical_date is not None:
        print(f"Critical date:      {runway.critical_date.date().isoformat()}")
    for line in runway.recommendations:
        print(f"  - {line}")
    return 0


def cmd_goals(args) -> int:
    """Estimate the probability of reaching each goal."""
    try:
        bundle = load_inputs(args.input)
        engine = bundle.engine()
        scenario = _pick_scenario(bundle, args.scenario)
        if not bundle.goals:
            print("No goals defined in input")
            return 0
        source = NumpyRandomSource(args.seed)
        estimates = [
            (goal, engine.goal_probability(goal, scenario, source=source))
            for goal in bundle.goals
        ]
    except _USER_ERRORS as e:
        print(f"Error estimating goals: {e}", file=sys.stderr)
        return 1

    print(f"Scenario: {scenario.name}")
    for goal, estimate in estimates:
        status = (
            f"on track for {estimate.projected_date.date().isoformat()}"
            if estimate.on_track
            else "not on track"
        )
        print(
            f"{goal.name or 'Goal'}: {estimate.probability:.0%} ({status}), "
            f"needs {estimate.required_monthly_contribution:.2f}/month over "
            f"{estimate.months_to_goal} months, feasibility {estimate.feasibility_score:.0f}"
        )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="finforecast", description="FinForecastLab - Cash-flow forecasting and risk engine"
    )

    # Version argument
    parser.add_argument(
        "--version", action="version", version=f"FinForecastLab {__version__}"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(
        dest="cmd", required=True, help="Available commands"
    )

    # Example command
    example_parser = subparsers.add_parser(
        "example", help="Print a minimal input bundle as YAML"
    )
    example_parser.set_defaults(func=cmd_example)

    # Project command
    project_parser = subparsers.add_parser(
        "project", help="Project scenarios and export a JSON report"
    )
    project_parser.add_argument(
        "-i", "--input", required=True, help="Input bundle (YAML or JSON)"
    )
    project_parser.add_argument(
        "-o", "--output", help="Output JSON file (default: stdout)"
    )
    project_parser.add_argument(
        "--seed", type=int, default=None, help="Seed for reproducible simulations"
    )
    project_parser.add_argument(
        "--iterations", type=int, default=1000, help="Monte Carlo iterations per scenario"
    )
    project_parser.add_argument(
        "--stress", action="store_true", help="Also run the stress test catalogue"
    )
    project_parser.set_defaults(func=cmd_project)

    # Runway command
    runway_parser = subparsers.add_parser(
        "runway", help="Show burn rate, runway and recommendations"
    )
    runway_parser.add_argument(
        "-i", "--input", required=True, help="Input bundle (YAML or JSON)"
    )
    runway_parser.add_argument(
        "--json", action="store_true", help="Output in JSON format"
    )
    runway_parser.set_defaults(func=cmd_runway)

    # Goals command
    goals_parser = subparsers.add_parser(
        "goals", help="Estimate goal achievement probabilities"
    )
    goals_parser.add_argument(
        "-i", "--input", required=True, help="Input bundle (YAML or JSON)"
    )
    goals_parser.add_argument(
        "--scenario", help="Scenario name to evaluate against (default: first)"
    )
    goals_parser.add_argument(
        "--seed", type=int, default=None, help="Seed for reproducible simulations"
    )
    goals_parser.set_defaults(func=cmd_goals)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logger.debug("Running command %s", args.cmd)
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
