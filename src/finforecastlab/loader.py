"""Utilities for loading forecast input bundles from YAML/JSON sources."""

from __future__ import annotations

import json
from copy import deepcopy
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, TypeVar

import yaml

from .core.context import FixedClock, ForecastContext, SystemClock
from .core.errors import ConfigError
from .core.models import Account, FinancialGoal, Transaction
from .core.scenario import Scenario
from .core.utils import as_datetime
from .engine import ForecastEngine

__all__ = [
    "InputError",
    "InputBundle",
    "load_inputs",
]

T = TypeVar("T")


class InputError(ValueError):
    """Raised when an input bundle cannot be parsed or validated."""


@dataclass(slots=True)
class InputBundle:
    """Structured representation of everything a forecast run reads."""

    accounts: list[Account]
    transactions: list[Transaction]
    goals: list[FinancialGoal] = field(default_factory=list)
    scenarios: list[Scenario] = field(default_factory=list)
    as_of: datetime | None = None
    currency: str = "GBP"
    source: str = "<memory>"

    def context(self, **overrides: Any) -> ForecastContext:
        """Forecast context pinned to ``as_of`` when the bundle sets one."""
        clock = FixedClock(self.as_of) if self.as_of is not None else SystemClock()
        overrides.setdefault("clock", clock)
        overrides.setdefault("currency", self.currency)
        return ForecastContext(**overrides)

    def engine(self, **overrides: Any) -> ForecastEngine:
        """Engine over the bundle's transactions and accounts."""
        return ForecastEngine(self.transactions, self.accounts, self.context(**overrides))

    def scenario(self, name: str) -> Scenario:
        for scenario in self.scenarios:
            if scenario.name == name:
                return scenario
        known = ", ".join(s.name for s in self.scenarios) or "none"
        raise InputError(f"{self.source}: unknown scenario '{name}' (known: {known})")


def load_inputs(
    source: str | Path | dict[str, Any], *, format: str | None = None
) -> InputBundle:
    """Parse an input bundle from YAML/JSON/dict into validated records."""

    mapping, label = _read_source(source, format=format)
    as_of = mapping.get("as_of")
    if as_of is not None:
        try:
            as_of = as_datetime(as_of)
        except ValueError as exc:
            raise InputError(f"{label}::as_of: invalid date '{as_of}'") from exc

    currency = mapping.get("currency", "GBP")
    if not isinstance(currency, str) or not currency.strip():
        raise InputError(f"{label}::currency: expected non-empty string")

    return InputBundle(
        accounts=_parse_entries(mapping.get("accounts"), Account.from_dict, f"{label}::accounts"),
        transactions=_parse_entries(
            mapping.get("transactions"), Transaction.from_dict, f"{label}::transactions"
        ),
        goals=_parse_entries(
            mapping.get("goals"), FinancialGoal.from_dict, f"{label}::goals", allow_none=True
        ),
        scenarios=_parse_entries(
            mapping.get("scenarios"), Scenario.from_dict, f"{label}::scenarios", allow_none=True
        ),
        as_of=as_of,
        currency=currency.upper(),
        source=label,
    )


def _read_source(
    source: str | Path | dict[str, Any], *, format: str | None
) -> tuple[dict[str, Any], str]:
    if isinstance(source, dict):
        return deepcopy(source), "<mapping>"

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(path)

    fmt = (format or path.suffix.lstrip(".")).lower()
    text = path.read_text(encoding="utf-8")
    if fmt in {"yaml", "yml", ""}:
        data = yaml.safe_load(text)
    elif fmt == "json":
        data = json.loads(text)
    else:
        raise InputError(f"Unsupported input format '{fmt}' for {path}")

    if not isinstance(data, dict):
        raise InputError(f"Input root must be a mapping (source={path})")
    return data, str(path)


def _parse_entries(
    raw: Any,
    parse: Callable[[dict[str, Any]], T],
    ctx: str,
    *,
    allow_none: bool = False,
) -> list[T]:
    if raw is None:
        if allow_none:
            return []
        raise InputError(f"{ctx}: expected a list")
    if not isinstance(raw, list):
        raise InputError(f"{ctx}: expected a list")

    out: list[T] = []
    for idx, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise InputError(f"{ctx}[{idx}]: expected a mapping")
        try:
            out.append(parse(entry))
        except KeyError as exc:
            raise InputError(f"{ctx}[{idx}]: missing required key {exc}") from exc
        except ConfigError as exc:
            raise InputError(f"{ctx}[{idx}]: {exc}") from exc
    return out
