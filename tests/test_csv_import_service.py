"""Domain tests for CSV import and export services."""

import pytest
from datetime import date
from decimal import Decimal

from tallybook.domain.csv_export import CSVExportService
from tallybook.domain.csv_import import CSVImportService
from tallybook.domain.entities import DateRange, TransactionFilter
from tallybook.domain.errors import ImportFileError, NotFoundError, StoreError
from tallybook.domain.money import MoneyPair

from conftest import OTHER_OWNER

HEADER_LINE = "data,tipo,empresa,cliente,categoria,valor_oficial,valor_nao_oficial,descricao"


def test_import_creates_transactions(csv_import_service, transaction_service, sample_references):
    content = (
        HEADER_LINE
        + "\n2024-03-01,receita,Acme,Maria,Sales,100.00,50.00,Invoice 1"
        + "\n2024-03-02,despesa,Globex,,Fuel,30.00,0.00,\n"
    )
    result = csv_import_service.import_csv(content.encode("utf-8"))

    assert len(result.created) == 2
    assert result.rejected == ()
    first = transaction_service.require_transaction(result.created[0].id)
    assert first.company_id == sample_references["Acme"]
    assert first.counterparty_id == sample_references["Maria"]
    assert first.category_id == sample_references["Sales"]
    assert first.amount.total == Decimal("150.00")


def test_import_reports_rejected_rows(csv_import_service, sample_references):
    content = (
        HEADER_LINE
        + "\n2024-03-01,receita,,,,1.00,0.00,"
        + "\n2024-13-45,receita,,,,1.00,0.00,"
        + "\n2024-03-03,despesa,,,Sales,1.00,0.00,"
        + "\n2024-03-04,despesa,,,,1.00,0.00,\n"
    )
    result = csv_import_service.import_csv(content)

    assert len(result.created) == 2
    assert [(e.row_number, e.reason) for e in result.rejected] == [
        (2, "invalid_date"),
        (3, "category_kind_mismatch"),
    ]


def test_import_names_resolve_only_for_owner(temp_db, sample_references):
    other = CSVImportService(temp_db, OTHER_OWNER)
    result = other.import_csv("2024-03-01,receita,Acme,,,1.00,0.00,\n")

    assert result.created == ()
    assert result.rejected[0].reason == "unknown_company"


def test_import_with_default_company(csv_import_service, sample_references):
    acme = sample_references["Acme"]
    result = csv_import_service.import_csv(
        "2024-03-01,receita,Globex,,,1.00,0.00,\n2024-03-02,receita,Nope,,,2.00,0.00,\n",
        default_company_id=acme,
    )
    assert [txn.company_id for txn in result.created] == [acme, acme]


def test_import_with_foreign_default_company(temp_db, sample_references):
    other = CSVImportService(temp_db, OTHER_OWNER)
    with pytest.raises(NotFoundError):
        other.import_csv("2024-03-01,receita,,,,1.00,0.00,\n", sample_references["Acme"])


def test_import_store_error_is_row_error(csv_import_service, monkeypatch):
    original = csv_import_service.db.create_transaction
    calls = {"n": 0}

    def flaky_insert(owner_id, draft, receipt_ref=None):
        calls["n"] += 1
        if calls["n"] == 2:
            raise StoreError("database is locked")
        return original(owner_id, draft, receipt_ref)

    monkeypatch.setattr(csv_import_service.db, "create_transaction", flaky_insert)

    content = "\n".join(f"2024-03-0{day},receita,,,,1.00,0.00," for day in range(1, 4))
    result = csv_import_service.import_csv(content)

    assert len(result.created) == 2
    assert [(e.row_number, e.reason) for e in result.rejected] == [(2, "store_error")]


def test_import_file(csv_import_service, tmp_path):
    csv_path = tmp_path / "import.csv"
    csv_path.write_text(HEADER_LINE + "\n2024-03-01,receita,,,,1.00,0.00,\n", encoding="utf-8")

    result = csv_import_service.import_file(csv_path)
    assert len(result.created) == 1


def test_import_missing_file(csv_import_service, tmp_path):
    with pytest.raises(ImportFileError):
        csv_import_service.import_file(tmp_path / "missing.csv")


def test_import_undecodable_file(csv_import_service):
    with pytest.raises(ImportFileError):
        csv_import_service.import_csv(b"\xff\xfe\xfa")


def test_export_oldest_first(csv_export_service, transaction_service, sample_references):
    transaction_service.create_transaction(
        "expense", MoneyPair("30", "0"), date(2024, 3, 20), company_id=sample_references["Globex"]
    )
    transaction_service.create_transaction(
        "income",
        MoneyPair("100", "50"),
        date(2024, 3, 1),
        "Invoice 1",
        company_id=sample_references["Acme"],
        counterparty_id=sample_references["Maria"],
        category_id=sample_references["Sales"],
    )

    export = csv_export_service.export(DateRange.for_month(2024, 3), today=date(2024, 4, 1))
    lines = export.content.decode("utf-8").split("\r\n")

    assert export.filename == "transacoes_2024-04-01.csv"
    assert export.row_count == 2
    assert lines[0] == HEADER_LINE
    assert lines[1] == "2024-03-01,receita,Acme,Maria,Sales,100.00,50.00,Invoice 1"
    assert lines[2] == "2024-03-20,despesa,Globex,,,30.00,0.00,"
    assert export.headers["Content-Disposition"] == 'attachment; filename="transacoes_2024-04-01.csv"'


def test_export_with_filters(csv_export_service, transaction_service, sample_references):
    transaction_service.create_transaction(
        "income", MoneyPair("1", "0"), date(2024, 3, 1), company_id=sample_references["Acme"]
    )
    transaction_service.create_transaction("income", MoneyPair("2", "0"), date(2024, 3, 1))

    export = csv_export_service.export(filters=TransactionFilter(company_id=sample_references["Acme"]))
    assert export.row_count == 1


def test_export_then_import_round_trip(
    temp_db, csv_export_service, transaction_service, sample_references
):
    transaction_service.create_transaction(
        "income",
        MoneyPair("100", "50"),
        date(2024, 3, 1),
        "Invoice, urgent",
        company_id=sample_references["Acme"],
        counterparty_id=sample_references["João"],
        category_id=sample_references["Other income"],
    )
    transaction_service.create_transaction(
        "expense", MoneyPair("0.01", "0"), date(2024, 3, 2), category_id=sample_references["Other expense"]
    )
    export = csv_export_service.export()

    result = CSVImportService(temp_db, "alice").import_csv(export.content)

    assert result.rejected == ()
    assert len(result.created) == 2
    imported = sorted(result.created, key=lambda txn: txn.occurred_on)
    assert imported[0].description == "Invoice, urgent"
    assert imported[0].counterparty_id == sample_references["João"]
    assert imported[0].category_id == sample_references["Other income"]
    assert imported[1].category_id == sample_references["Other expense"]


def test_import_stores_descriptions_like_create(csv_import_service, transaction_service):
    created = transaction_service.create_transaction(
        "income", MoneyPair("1.00", "0"), date(2024, 3, 1), "  padded  "
    )
    result = csv_import_service.import_csv(
        '2024-03-01,receita,,,,1.00,0.00,"  padded  "\n2024-03-02,receita,,,,1.00,0.00,"   "\n'
    )

    imported = [transaction_service.require_transaction(txn.id) for txn in result.created]
    assert [txn.description for txn in imported] == [created.description, None]
    assert created.description == "padded"


def test_import_rejects_amount_too_large_to_store(csv_import_service, transaction_service):
    result = csv_import_service.import_csv(
        "2024-03-01,receita,,,,123456789012345678.99,0.00,\n"
        "2024-03-02,receita,,,,9999999999.99,0.00,\n"
    )

    assert [(e.row_number, e.reason) for e in result.rejected] == [(1, "invalid_amount")]
    stored = transaction_service.require_transaction(result.created[0].id)
    assert stored.amount.official == Decimal("9999999999.99")
