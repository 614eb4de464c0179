"""
Input records consumed by the forecasting engine.

Transactions, accounts and goals are created and mutated by the surrounding
application; the engine only reads them. The records are frozen and coerce
their monetary fields to ``Decimal`` and their dates to ``datetime`` once,
at construction time.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from .currency import to_decimal
from .errors import ConfigError
from .utils import as_datetime


class TransactionType(Enum):
    """Direction of a transaction. Only income and expense feed aggregation."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"

    @classmethod
    def parse(cls, value: str | TransactionType) -> TransactionType:
        """Parse a type name case-insensitively (``'Income'``, ``'expense'``...)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise ConfigError(f"Unknown transaction type: {value!r}") from e


def _coerce_amount(obj: Any, name: str) -> None:
    try:
        object.__setattr__(obj, name, to_decimal(getattr(obj, name)))
    except ValueError as e:
        raise ConfigError(f"{type(obj).__name__}.{name}: {e}") from e


def _coerce_date(obj: Any, name: str) -> None:
    try:
        object.__setattr__(obj, name, as_datetime(getattr(obj, name)))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{type(obj).__name__}.{name}: {e}") from e


@dataclass(frozen=True)
class Transaction:
    """
    A single booked transaction.

    Attributes:
        amount: Signed or unsigned amount; aggregation uses its magnitude
        currency: ISO currency code
        date: Booking instant (plain dates are promoted to midnight)
        type: Income, expense or transfer
        category: Spending category ('' means uncategorized)
        description: Free text, informational only
    """

    amount: Decimal
    currency: str
    date: datetime
    type: TransactionType
    category: str = ""
    description: str = ""

    def __post_init__(self):
        _coerce_amount(self, "amount")
        _coerce_date(self, "date")
        object.__setattr__(self, "type", TransactionType.parse(self.type))

    @property
    def magnitude(self) -> Decimal:
        return abs(self.amount)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Transaction:
        return cls(
            amount=data["amount"],
            currency=data.get("currency", "GBP"),
            date=data["date"],
            type=data["type"],
            category=data.get("category") or "",
            description=data.get("description") or "",
        )


@dataclass(frozen=True)
class Account:
    """
    A balance-holding account. Only active accounts count toward the
    current balance.
    """

    balance: Decimal
    currency: str = "GBP"
    is_active: bool = True
    name: str = ""

    def __post_init__(self):
        _coerce_amount(self, "balance")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Account:
        return cls(
            balance=data["balance"],
            currency=data.get("currency", "GBP"),
            is_active=bool(data.get("is_active", True)),
            name=data.get("name") or data.get("account_name") or "",
        )


@dataclass(frozen=True)
class FinancialGoal:
    """A savings or target goal to be reached by ``target_date``."""

    current_amount: Decimal
    target_amount: Decimal
    target_date: datetime
    name: str = ""

    def __post_init__(self):
        _coerce_amount(self, "current_amount")
        _coerce_amount(self, "target_amount")
        _coerce_date(self, "target_date")

    @property
    def remaining_amount(self) -> Decimal:
        """Amount still to be saved; never negative."""
        return max(Decimal(0), self.target_amount - self.current_amount)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FinancialGoal:
        return cls(
            current_amount=data.get("current_amount", 0),
            target_amount=data["target_amount"],
            target_date=data["target_date"],
            name=data.get("name") or "",
        )
