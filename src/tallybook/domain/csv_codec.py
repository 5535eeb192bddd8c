"""CSV exchange format for transactions.

Column order is fixed::

    data,tipo,empresa,cliente,categoria,valor_oficial,valor_nao_oficial,descricao

Dates are ISO-8601, amounts are plain decimals with two fraction digits and
``.`` as separator, and references are written by name so the file can be
edited by hand. ``encode`` and ``decode`` are pure; name resolution goes
through a ``ReferenceBook`` built from the importing user's own entities.
"""

import csv
import io
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional, Sequence

from tallybook.domain.entities import (
    Category,
    Company,
    Counterparty,
    RowError,
    Transaction,
    TransactionDraft,
    TransactionKind,
)
from tallybook.domain.errors import ImportFileError, ValidationError
from tallybook.domain.money import MoneyPair
from tallybook.utils.amount_parser import parse_csv_amount
from tallybook.utils.date_parser import parse_iso_date

HEADER = (
    "data",
    "tipo",
    "empresa",
    "cliente",
    "categoria",
    "valor_oficial",
    "valor_nao_oficial",
    "descricao",
)

KIND_LABELS = {
    TransactionKind.INCOME: "receita",
    TransactionKind.EXPENSE: "despesa",
}

CONTENT_TYPE = "text/csv; charset=utf-8"

# Row rejection reasons
MALFORMED_ROW = "malformed_row"
INVALID_TYPE = "invalid_type"
INVALID_DATE = "invalid_date"
INVALID_AMOUNT = "invalid_amount"
NEGATIVE_AMOUNT = "negative_amount"
UNKNOWN_COMPANY = "unknown_company"
UNKNOWN_COUNTERPARTY = "unknown_counterparty"
UNKNOWN_CATEGORY = "unknown_category"
CATEGORY_KIND_MISMATCH = "category_kind_mismatch"
STORE_ERROR = "store_error"


@dataclass
class ReferenceBook:
    """Two-way name/id lookup over one user's companies, clients and categories."""

    companies: dict[int, str] = field(default_factory=dict)
    counterparties: dict[int, str] = field(default_factory=dict)
    categories: dict[int, tuple[str, TransactionKind]] = field(default_factory=dict)

    @classmethod
    def from_entities(
        cls,
        companies: Iterable[Company] = (),
        counterparties: Iterable[Counterparty] = (),
        categories: Iterable[Category] = (),
    ) -> "ReferenceBook":
        return cls(
            companies={c.id: c.name for c in companies},
            counterparties={c.id: c.name for c in counterparties},
            categories={c.id: (c.name, c.kind) for c in categories},
        )

    def company_name(self, company_id: Optional[int]) -> str:
        if company_id is None:
            return ""
        return self.companies.get(company_id, "")

    def counterparty_name(self, counterparty_id: Optional[int]) -> str:
        if counterparty_id is None:
            return ""
        return self.counterparties.get(counterparty_id, "")

    def category_name(self, category_id: Optional[int]) -> str:
        if category_id is None:
            return ""
        entry = self.categories.get(category_id)
        return entry[0] if entry else ""

    def company_id(self, name: str) -> Optional[int]:
        for company_id, company_name in self.companies.items():
            if company_name == name:
                return company_id
        return None

    def counterparty_id(self, name: str) -> Optional[int]:
        for counterparty_id, counterparty_name in self.counterparties.items():
            if counterparty_name == name:
                return counterparty_id
        return None

    def category_ids(self, name: str) -> dict[TransactionKind, int]:
        """Return the ids of categories with this exact name, keyed by kind."""
        return {
            kind: category_id
            for category_id, (category_name, kind) in self.categories.items()
            if category_name == name
        }


def _format_amount(value) -> str:
    return f"{value:.2f}"


def encode_rows(records: Iterable[Transaction], references: ReferenceBook) -> str:
    """Serialize transactions into CSV text, header first."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\r\n")
    writer.writerow(HEADER)
    for txn in records:
        writer.writerow(
            [
                txn.occurred_on.isoformat(),
                KIND_LABELS[txn.kind],
                references.company_name(txn.company_id),
                references.counterparty_name(txn.counterparty_id),
                references.category_name(txn.category_id),
                _format_amount(txn.amount.official),
                _format_amount(txn.amount.unofficial),
                txn.description or "",
            ]
        )
    return buffer.getvalue()


def encode(records: Iterable[Transaction], references: ReferenceBook) -> bytes:
    """Serialize transactions into UTF-8 CSV bytes."""
    return encode_rows(records, references).encode("utf-8")


@dataclass(frozen=True)
class DecodeResult:
    """Parsed rows ready for insertion plus rejected rows."""

    drafts: tuple[tuple[int, TransactionDraft], ...] = ()
    rejected: tuple[RowError, ...] = ()


class _RowRejected(Exception):
    def __init__(self, reason: str, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.reason = reason
        self.message = message
        self.field = field


def _read_text(stream) -> str:
    if isinstance(stream, str):
        return stream
    data = stream if isinstance(stream, (bytes, bytearray)) else stream.read()
    if isinstance(data, str):
        return data
    try:
        return bytes(data).decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ImportFileError(f"CSV file is not valid UTF-8: {e}")


def _is_header(row: Sequence[str]) -> bool:
    return tuple(cell.strip().lower() for cell in row) == HEADER


def _parse_kind(value: str) -> TransactionKind:
    try:
        return TransactionKind.parse(value)
    except ValidationError:
        raise _RowRejected(INVALID_TYPE, f"Invalid type '{value}'", "tipo")


def _parse_date(value: str) -> date:
    try:
        return parse_iso_date(value)
    except ValueError as e:
        raise _RowRejected(INVALID_DATE, str(e), "data")


def _parse_amount(value: str, column: str):
    try:
        amount = parse_csv_amount(value)
    except ValueError as e:
        raise _RowRejected(INVALID_AMOUNT, str(e), column)
    if amount < 0:
        raise _RowRejected(NEGATIVE_AMOUNT, f"Amount '{value.strip()}' is negative", column)
    return amount


def _resolve_category(name: str, kind: TransactionKind, references: ReferenceBook) -> int:
    matches = references.category_ids(name)
    if kind in matches:
        return matches[kind]
    if matches:
        raise _RowRejected(
            CATEGORY_KIND_MISMATCH,
            f"Category '{name}' is not an {kind.value} category",
            "categoria",
        )
    raise _RowRejected(UNKNOWN_CATEGORY, f"Category '{name}' not found", "categoria")


def _decode_row(
    row: Sequence[str], references: ReferenceBook, default_company_id: Optional[int]
) -> TransactionDraft:
    if len(row) != len(HEADER):
        raise _RowRejected(
            MALFORMED_ROW, f"Expected {len(HEADER)} columns, found {len(row)}"
        )

    (
        date_cell,
        kind_cell,
        company_cell,
        counterparty_cell,
        category_cell,
        official_cell,
        unofficial_cell,
        description_cell,
    ) = row

    kind = _parse_kind(kind_cell)
    occurred_on = _parse_date(date_cell)
    amount = MoneyPair(
        _parse_amount(official_cell, "valor_oficial"),
        _parse_amount(unofficial_cell, "valor_nao_oficial"),
    )

    # A default company replaces the column outright, whatever it contains.
    if default_company_id is not None:
        company_id = default_company_id
    elif company_cell.strip():
        company_id = references.company_id(company_cell.strip())
        if company_id is None:
            raise _RowRejected(
                UNKNOWN_COMPANY, f"Company '{company_cell.strip()}' not found", "empresa"
            )
    else:
        company_id = None

    counterparty_id = None
    if counterparty_cell.strip():
        counterparty_id = references.counterparty_id(counterparty_cell.strip())
        if counterparty_id is None:
            raise _RowRejected(
                UNKNOWN_COUNTERPARTY,
                f"Client '{counterparty_cell.strip()}' not found",
                "cliente",
            )

    category_id = None
    if category_cell.strip():
        category_id = _resolve_category(category_cell.strip(), kind, references)

    return TransactionDraft(
        kind=kind,
        amount=amount,
        occurred_on=occurred_on,
        description=description_cell.strip() or None,
        company_id=company_id,
        counterparty_id=counterparty_id,
        category_id=category_id,
    )


def decode(
    stream,
    references: ReferenceBook,
    default_company_id: Optional[int] = None,
) -> DecodeResult:
    """Parse CSV content into transaction drafts.

    Rows are handled independently: a bad row is reported in ``rejected``
    with its 1-based data row number and never stops the remaining rows.
    Blank lines are skipped but still counted, so row numbers follow the
    file after the header.

    Args:
        stream: CSV content as bytes, str or a readable file object
        references: Name lookup over the importing user's entities
        default_company_id: When set, every draft gets this company and the
            company column is ignored

    Returns:
        DecodeResult with (row number, draft) pairs and row errors

    Raises:
        ImportFileError: If the content cannot be decoded as UTF-8 text
    """
    text = _read_text(stream)
    reader = csv.reader(io.StringIO(text, newline=""))

    drafts: list[tuple[int, TransactionDraft]] = []
    rejected: list[RowError] = []
    row_number = 0
    first = True

    try:
        for row in reader:
            if first:
                first = False
                if _is_header(row):
                    continue
            row_number += 1
            if not row or all(not cell.strip() for cell in row):
                continue
            try:
                drafts.append((row_number, _decode_row(row, references, default_company_id)))
            except _RowRejected as rejection:
                rejected.append(
                    RowError(
                        row_number=row_number,
                        reason=rejection.reason,
                        message=rejection.message,
                        field=rejection.field,
                    )
                )
    except csv.Error as e:
        raise ImportFileError(f"CSV file could not be parsed: {e}")

    return DecodeResult(drafts=tuple(drafts), rejected=tuple(rejected))


def attachment_headers(filename: str) -> dict[str, str]:
    """HTTP headers for serving an exported CSV as a download."""
    return {
        "Content-Type": CONTENT_TYPE,
        "Content-Disposition": f'attachment; filename="{filename}"',
    }


def export_filename(today: date) -> str:
    return f"transacoes_{today.isoformat()}.csv"
