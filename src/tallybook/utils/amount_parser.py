"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

from tallybook.domain.money import MAX_AMOUNT

_CSV_AMOUNT = re.compile(r"^[+-]?\d+(\.\d+)?$")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a user-typed amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "€123.45" / "123.45 €"
    - "1,234.56"
    - "123,45" (comma as decimal separator when it is the only separator)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = re.sub(r"[$€£¥\s]", "", amount_str.strip())

    if "," in amount_str and "." not in amount_str and amount_str.count(",") == 1:
        amount_str = amount_str.replace(",", ".")
    else:
        amount_str = amount_str.replace(",", "")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return amount


def parse_csv_amount(amount_str: str) -> Decimal:
    """Parse an amount cell from the CSV exchange format.

    Only plain decimals with ``.`` as separator are accepted. A blank cell is
    zero. Negative values parse successfully; callers decide whether they are
    allowed.

    Raises:
        ValueError: If the cell is not a plain decimal, has more than two
            fraction digits or does not fit ten integer digits
    """
    amount_str = (amount_str or "").strip()
    if amount_str == "":
        return Decimal("0.00")
    if not _CSV_AMOUNT.match(amount_str):
        raise ValueError(f"Amount '{amount_str}' is not a plain decimal number")
    amount = Decimal(amount_str)
    if amount.as_tuple().exponent < -2:
        raise ValueError(f"Amount '{amount_str}' has more than two decimal places")
    if abs(amount) > MAX_AMOUNT:
        raise ValueError(f"Amount '{amount_str}' exceeds the largest storable amount {MAX_AMOUNT}")
    return amount
