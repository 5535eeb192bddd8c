"""Shared pytest fixtures for tallybook tests."""

import os
import tempfile
from datetime import date, datetime
from decimal import Decimal

import pytest

from tallybook.database.factories import create_sqlite_database
from tallybook.domain.category import CategoryService
from tallybook.domain.company import CompanyService
from tallybook.domain.counterparty import CounterpartyService
from tallybook.domain.csv_export import CSVExportService
from tallybook.domain.csv_import import CSVImportService
from tallybook.domain.entities import Transaction, TransactionKind
from tallybook.domain.money import MoneyPair
from tallybook.domain.summary import SummaryService
from tallybook.domain.transaction import TransactionService
from tallybook.storage.local import LocalObjectStore

OWNER = "alice"
OTHER_OWNER = "bob"


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def object_store(tmp_path):
    """Create a LocalObjectStore in a temporary directory."""
    return LocalObjectStore(tmp_path / "receipts")


@pytest.fixture
def company_service(temp_db):
    return CompanyService(temp_db, OWNER)


@pytest.fixture
def counterparty_service(temp_db):
    return CounterpartyService(temp_db, OWNER)


@pytest.fixture
def category_service(temp_db):
    return CategoryService(temp_db, OWNER)


@pytest.fixture
def transaction_service(temp_db, object_store):
    """Create a TransactionService with a temporary database and store."""
    return TransactionService(temp_db, OWNER, store=object_store)


@pytest.fixture
def summary_service(temp_db):
    return SummaryService(temp_db, OWNER)


@pytest.fixture
def csv_import_service(temp_db):
    return CSVImportService(temp_db, OWNER)


@pytest.fixture
def csv_export_service(temp_db):
    return CSVExportService(temp_db, OWNER)


@pytest.fixture
def sample_references(company_service, counterparty_service, category_service):
    """Create a small set of companies, clients and categories.

    Returns a dict of name -> ID.
    """
    return {
        "Acme": company_service.create_company("Acme"),
        "Globex": company_service.create_company("Globex"),
        "Maria": counterparty_service.create_counterparty("Maria"),
        "João": counterparty_service.create_counterparty("João"),
        "Sales": category_service.create_category("Sales", TransactionKind.INCOME),
        "Fuel": category_service.create_category("Fuel", TransactionKind.EXPENSE),
        "Other income": category_service.create_category("Other", TransactionKind.INCOME),
        "Other expense": category_service.create_category("Other", TransactionKind.EXPENSE),
    }


def make_transaction(
    txn_id: int,
    kind: TransactionKind,
    official: str,
    unofficial: str = "0",
    occurred_on: date = date(2024, 3, 15),
    company_id=None,
    counterparty_id=None,
    category_id=None,
    owner_id: str = OWNER,
) -> Transaction:
    """Build an in-memory transaction for pure aggregation tests."""
    return Transaction(
        id=txn_id,
        owner_id=owner_id,
        kind=kind,
        amount=MoneyPair(Decimal(official), Decimal(unofficial)),
        occurred_on=occurred_on,
        description=None,
        company_id=company_id,
        counterparty_id=counterparty_id,
        category_id=category_id,
        receipt_ref=None,
        created_at=datetime(2024, 1, 1),
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def cli_env(temp_db, tmp_path):
    """Common CLI arguments pointing at the temporary database and store."""
    return [
        "--db-path",
        temp_db.database_path,
        "--user",
        OWNER,
        "--storage-dir",
        str(tmp_path / "cli-receipts"),
    ]
