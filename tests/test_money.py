"""Tests for dual-channel money amounts and formatting."""

import pytest
from decimal import Decimal

from tallybook.domain.errors import ValidationError
from tallybook.domain.money import (
    MoneyPair,
    add,
    format_amount,
    format_money_pair,
    subtract,
    zero,
)


def test_total_is_sum_of_components():
    pair = MoneyPair(Decimal("100.00"), Decimal("50.00"))
    assert pair.total == Decimal("150.00")


def test_components_accept_strings_and_ints():
    pair = MoneyPair("12.30", 4)
    assert pair.official == Decimal("12.30")
    assert pair.unofficial == Decimal("4")


def test_float_components_rejected():
    with pytest.raises(TypeError):
        MoneyPair(0.1, Decimal("0"))


def test_invalid_component_rejected():
    with pytest.raises(ValidationError):
        MoneyPair("abc", "0")


def test_non_finite_component_rejected():
    with pytest.raises(ValidationError):
        MoneyPair("Infinity", "0")


def test_add_and_subtract_are_per_component():
    a = MoneyPair("100.00", "50.00")
    b = MoneyPair("30.00", "0.00")

    assert add(a, b) == MoneyPair("130.00", "50.00")
    assert subtract(a, b) == MoneyPair("70.00", "50.00")
    assert a + b == add(a, b)
    assert a - b == subtract(a, b)


def test_zero_is_identity():
    pair = MoneyPair("1.23", "4.56")
    assert pair + zero() == pair


def test_subtract_may_go_negative():
    result = MoneyPair("10.00", "0.00") - MoneyPair("30.00", "5.00")
    assert result == MoneyPair("-20.00", "-5.00")
    assert not result.is_non_negative()


def test_quantized_rounds_to_cents():
    assert MoneyPair("1.5", "2").quantized().official == Decimal("1.50")
    assert str(MoneyPair("1.5", "2").quantized().unofficial) == "2.00"


def test_repeated_cent_addition_is_exact():
    """Adding one cent ten thousand times gives exactly 100.00."""
    total = zero()
    cent = MoneyPair("0.01", "0.01")
    for _ in range(10_000):
        total = total + cent
    assert total.official == Decimal("100.00")
    assert total.unofficial == Decimal("100.00")


@pytest.mark.parametrize(
    "locale,expected",
    [
        ("pt_PT", "1 234,56 €"),
        ("pt_BR", "€ 1.234,56"),
        ("en_US", "€1,234.56"),
        ("de_DE", "1.234,56 €"),
    ],
)
def test_format_amount_locales(locale, expected):
    assert format_amount(Decimal("1234.56"), locale, "EUR") == expected


def test_format_amount_negative_and_currency_symbol():
    assert format_amount(Decimal("-5"), "en_US", "USD") == "-$5.00"
    assert format_amount(Decimal("10"), "pt_BR", "BRL") == "R$ 10,00"


def test_format_amount_accepts_dash_locale():
    assert format_amount(Decimal("1"), "en-US", "USD") == "$1.00"


def test_format_amount_unknown_locale():
    with pytest.raises(ValidationError):
        format_amount(Decimal("1"), "xx_XX")


def test_format_money_pair():
    formatted = format_money_pair(MoneyPair("100.00", "50.00"), "en_US", "USD")
    assert formatted.official == "$100.00"
    assert formatted.unofficial == "$50.00"
    assert formatted.total == "$150.00"


def test_format_amount_groups_with_plain_spaces():
    formatted = format_amount(Decimal("1234567.8"), "pt_PT", "EUR")
    assert formatted == "1 234 567,80 €"
    assert "\u00a0" not in formatted
