"""
Reporting currencies and monetary coercion.

Balances are accumulated at full ``Decimal`` precision; a ``Currency`` only
decides how a value is rounded and printed for display.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum


class RoundingPolicy(Enum):
    """Decimal rounding modes available for display rounding."""

    BANKERS = ROUND_HALF_EVEN
    HALF_UP = ROUND_HALF_UP


@dataclass(frozen=True)
class Currency:
    """
    Reporting currency.

    Attributes:
        code: ISO currency code, stored upper-case
        decimals: Minor-unit digits shown for this currency (0 for JPY)
        rounding: Policy applied when a balance is rounded for display
    """

    code: str
    decimals: int = 2
    rounding: RoundingPolicy = RoundingPolicy.HALF_UP

    def __post_init__(self):
        object.__setattr__(self, "code", self.code.upper())

    @property
    def minor_unit(self) -> Decimal:
        return Decimal(1).scaleb(-self.decimals)

    def quantize(self, amount: Decimal) -> Decimal:
        """Round ``amount`` to the currency's minor unit."""
        return amount.quantize(self.minor_unit, rounding=self.rounding.value)

    def format(self, amount: Decimal) -> str:
        """Display string such as ``'46,099.57 GBP'``."""
        return f"{self.quantize(amount):,} {self.code}"

    def __str__(self) -> str:
        return self.code


GBP = Currency("GBP")
EUR = Currency("EUR")
USD = Currency("USD")
JPY = Currency("JPY", decimals=0)

CURRENCIES: dict[str, Currency] = {c.code: c for c in (GBP, EUR, USD, JPY)}


def get_currency(code: str) -> Currency:
    """Look up a currency; unregistered codes get two decimals."""
    code = code.upper()
    return CURRENCIES.get(code) or Currency(code)


def to_decimal(value: Decimal | float | int | str) -> Decimal:
    """
    Convert a monetary input to Decimal without binary float artefacts.

    Floats go through ``str`` so that ``0.1`` becomes ``Decimal("0.1")``.

    Raises:
        ValueError: If the value cannot be interpreted as a finite number
    """
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, bool):
        raise ValueError(f"Boolean is not a monetary amount: {value!r}")
    elif isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise ValueError(f"Not a monetary amount: {value!r}") from e
    else:
        raise ValueError(f"Not a monetary amount: {value!r}")

    if not result.is_finite():
        raise ValueError(f"Monetary amount must be finite: {value!r}")
    return result
