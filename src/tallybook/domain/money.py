"""Dual-channel money amounts.

Every amount in tallybook is a pair of an *official* (declared) and an
*unofficial* (undeclared, cash) component. The two components never mix:
arithmetic works per component and the total is always derived.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Union

from tallybook.domain.errors import ValidationError

CENT = Decimal("0.01")

# Amount columns are NUMERIC(12, 2): ten integer digits.
MAX_AMOUNT = Decimal("9999999999.99")

AmountLike = Union[Decimal, int, str]


def _to_decimal(value: AmountLike) -> Decimal:
    if isinstance(value, float):
        # Binary floats would reintroduce cent drift.
        raise TypeError("MoneyPair components must not be float; use Decimal or str")
    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValidationError(f"Invalid amount '{value}'") from e
    if not result.is_finite():
        raise ValidationError(f"Invalid amount '{value}'")
    return result


@dataclass(frozen=True)
class MoneyPair:
    """Official and unofficial sub-amounts."""

    official: Decimal = Decimal("0")
    unofficial: Decimal = Decimal("0")

    def __post_init__(self):
        object.__setattr__(self, "official", _to_decimal(self.official))
        object.__setattr__(self, "unofficial", _to_decimal(self.unofficial))

    @property
    def total(self) -> Decimal:
        return self.official + self.unofficial

    def __add__(self, other: "MoneyPair") -> "MoneyPair":
        if not isinstance(other, MoneyPair):
            return NotImplemented
        return add(self, other)

    def __sub__(self, other: "MoneyPair") -> "MoneyPair":
        if not isinstance(other, MoneyPair):
            return NotImplemented
        return subtract(self, other)

    def is_non_negative(self) -> bool:
        return self.official >= 0 and self.unofficial >= 0

    def quantized(self) -> "MoneyPair":
        """Return the pair rounded to whole cents."""
        return MoneyPair(self.official.quantize(CENT), self.unofficial.quantize(CENT))


def zero() -> MoneyPair:
    return MoneyPair(Decimal("0"), Decimal("0"))


def add(a: MoneyPair, b: MoneyPair) -> MoneyPair:
    return MoneyPair(a.official + b.official, a.unofficial + b.unofficial)


def subtract(a: MoneyPair, b: MoneyPair) -> MoneyPair:
    return MoneyPair(a.official - b.official, a.unofficial - b.unofficial)


@dataclass(frozen=True)
class FormattedMoneyPair:
    """Currency strings for each component and the total."""

    official: str
    unofficial: str
    total: str


# (thousands separator, decimal separator, pattern); pattern uses {symbol} and {number}
_LOCALES = {
    "pt_PT": (" ", ",", "{number} {symbol}"),
    "pt_BR": (".", ",", "{symbol} {number}"),
    "en_US": (",", ".", "{symbol}{number}"),
    "en_GB": (",", ".", "{symbol}{number}"),
    "de_DE": (".", ",", "{number} {symbol}"),
}

_CURRENCY_SYMBOLS = {
    "EUR": "€",
    "USD": "$",
    "BRL": "R$",
    "GBP": "£",
}


def format_amount(value: Decimal, locale: str = "pt_PT", currency: str = "EUR") -> str:
    """Render an amount as a currency string.

    Args:
        value: Amount to render
        locale: Locale name (pt_PT, pt_BR, en_US, en_GB, de_DE)
        currency: ISO currency code

    Returns:
        Formatted string, e.g. ``1 234,56 €`` for pt_PT

    Raises:
        ValidationError: If the locale is not supported
    """
    normalized = locale.replace("-", "_")
    if normalized not in _LOCALES:
        raise ValidationError(f"Unsupported locale '{locale}'")
    group_sep, decimal_sep, pattern = _LOCALES[normalized]
    symbol = _CURRENCY_SYMBOLS.get(currency.upper(), currency.upper())

    amount = Decimal(value).quantize(CENT)
    sign = "-" if amount < 0 else ""
    integral, fraction = f"{abs(amount):,.2f}".split(".")
    number = integral.replace(",", group_sep) + decimal_sep + fraction
    return sign + pattern.format(symbol=symbol, number=number)


def format_money_pair(
    pair: MoneyPair, locale: str = "pt_PT", currency: str = "EUR"
) -> FormattedMoneyPair:
    """Render both components and the total of a pair."""
    return FormattedMoneyPair(
        official=format_amount(pair.official, locale, currency),
        unofficial=format_amount(pair.unofficial, locale, currency),
        total=format_amount(pair.total, locale, currency),
    )
