"""Domain model entities for tallybook.

These are pure data classes representing business concepts, independent of
database schema. Every persisted entity carries the ``owner_id`` of the user
account it belongs to.
"""

import calendar
from dataclasses import dataclass, field
from datetime import datetime, date
from enum import Enum
from typing import Any, Mapping, Optional

from tallybook.domain.errors import ValidationError
from tallybook.domain.money import MoneyPair, zero


class TransactionKind(str, Enum):
    """Income or expense. Categories carry a kind too."""

    INCOME = "income"
    EXPENSE = "expense"

    @classmethod
    def parse(cls, value: "str | TransactionKind") -> "TransactionKind":
        """Parse a kind from its value or its CSV label (receita/despesa)."""
        if isinstance(value, TransactionKind):
            return value
        normalized = (value or "").strip().lower()
        if normalized in ("income", "receita"):
            return cls.INCOME
        if normalized in ("expense", "despesa"):
            return cls.EXPENSE
        raise ValidationError(f"Invalid transaction type '{value}'", field="kind")


class GroupBy(str, Enum):
    """Aggregation dimension."""

    NONE = "none"
    COMPANY = "company"
    COUNTERPARTY = "counterparty"
    MONTH = "month"


@dataclass(frozen=True)
class Company:
    """Company domain entity."""

    id: int
    owner_id: str
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Counterparty:
    """Client or supplier domain entity."""

    id: int
    owner_id: str
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity; income-only or expense-only."""

    id: int
    owner_id: str
    name: str
    kind: TransactionKind
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    owner_id: str
    kind: TransactionKind
    amount: MoneyPair
    occurred_on: date
    description: Optional[str] = None
    company_id: Optional[int] = None
    counterparty_id: Optional[int] = None
    category_id: Optional[int] = None
    receipt_ref: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class TransactionDraft:
    """Transaction fields before the store assigns an id."""

    kind: TransactionKind
    amount: MoneyPair
    occurred_on: date
    description: Optional[str] = None
    company_id: Optional[int] = None
    counterparty_id: Optional[int] = None
    category_id: Optional[int] = None


@dataclass(frozen=True)
class DateRange:
    """Inclusive date window. A missing bound is unbounded."""

    start: Optional[date] = None
    end: Optional[date] = None

    def __post_init__(self):
        if self.start is not None and self.end is not None and self.start > self.end:
            raise ValidationError(
                f"Start date {self.start.isoformat()} is after end date {self.end.isoformat()}"
            )

    def contains(self, day: date) -> bool:
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True

    @classmethod
    def for_month(cls, year: int, month: int) -> "DateRange":
        last_day = calendar.monthrange(year, month)[1]
        return cls(date(year, month, 1), date(year, month, last_day))

    @classmethod
    def for_year(cls, year: int) -> "DateRange":
        return cls(date(year, 1, 1), date(year, 12, 31))


def _optional_id(params: Mapping[str, Any], key: str) -> Optional[int]:
    value = params.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {key} '{value}'", field=key)


@dataclass(frozen=True)
class TransactionFilter:
    """Optional equality filters on a transaction's references.

    ``None`` means the filter is skipped. There is no way to express
    "reference is unset" through this filter.
    """

    company_id: Optional[int] = None
    counterparty_id: Optional[int] = None
    category_id: Optional[int] = None
    kind: Optional[TransactionKind] = None

    def matches(self, txn: Transaction) -> bool:
        if self.company_id is not None and txn.company_id != self.company_id:
            return False
        if self.counterparty_id is not None and txn.counterparty_id != self.counterparty_id:
            return False
        if self.category_id is not None and txn.category_id != self.category_id:
            return False
        if self.kind is not None and txn.kind != self.kind:
            return False
        return True

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "TransactionFilter":
        """Build a filter from loosely typed query parameters.

        Empty strings are treated exactly like absent keys.
        """
        kind_value = params.get("kind")
        kind = None
        if kind_value is not None and str(kind_value).strip() != "":
            kind = TransactionKind.parse(str(kind_value))
        return cls(
            company_id=_optional_id(params, "company_id"),
            counterparty_id=_optional_id(params, "counterparty_id"),
            category_id=_optional_id(params, "category_id"),
            kind=kind,
        )


@dataclass(frozen=True)
class Summary:
    """Income, expense and balance over a set of transactions."""

    income: MoneyPair = field(default_factory=zero)
    expense: MoneyPair = field(default_factory=zero)
    balance: MoneyPair = field(default_factory=zero)
    count: int = 0

    @classmethod
    def from_totals(cls, income: MoneyPair, expense: MoneyPair, count: int = 0) -> "Summary":
        """Build a summary, deriving balance from income and expense."""
        return cls(income=income, expense=expense, balance=income - expense, count=count)


@dataclass(frozen=True)
class TransactionPage:
    """One page of a transaction listing."""

    items: tuple[Transaction, ...]
    total: int
    page: int
    per_page: int

    @property
    def total_pages(self) -> int:
        if self.total == 0:
            return 0
        return -(-self.total // self.per_page)


@dataclass(frozen=True)
class ReceiptUpload:
    """Receipt image bytes submitted with a transaction."""

    data: bytes
    content_type: str
    filename: Optional[str] = None


@dataclass(frozen=True)
class RowError:
    """A rejected CSV row."""

    row_number: int
    reason: str
    message: str
    field: Optional[str] = None


@dataclass(frozen=True)
class ImportResult:
    """Outcome of a CSV import."""

    created: tuple[Transaction, ...] = ()
    rejected: tuple[RowError, ...] = ()
