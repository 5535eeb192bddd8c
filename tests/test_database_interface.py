"""Tests for the Database interface returning owner-scoped domain models."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.exc import OperationalError

from tallybook.database.factories import create_sqlite_database
from tallybook.domain import entities
from tallybook.domain.entities import (
    DateRange,
    TransactionDraft,
    TransactionFilter,
    TransactionKind,
)
from tallybook.domain.errors import StoreError
from tallybook.domain.money import MoneyPair


def _draft(day: int = 1, kind=TransactionKind.INCOME, official="10.00", **refs):
    return TransactionDraft(
        kind=kind,
        amount=MoneyPair(official, "0.00"),
        occurred_on=date(2024, 3, day),
        **refs,
    )


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_company_returns_domain_model(self, temp_db):
        company_id = temp_db.create_company("alice", "Acme")
        company = temp_db.get_company("alice", company_id)

        assert isinstance(company, entities.Company)
        assert company.name == "Acme"
        assert isinstance(company.created_at, datetime)

    def test_reference_rows_are_owner_scoped(self, temp_db):
        company_id = temp_db.create_company("alice", "Acme")
        category_id = temp_db.create_category("alice", "Fuel", TransactionKind.EXPENSE)

        assert temp_db.get_company("bob", company_id) is None
        assert temp_db.get_category("bob", category_id) is None
        assert temp_db.update_company("bob", company_id, "Mine") is False
        assert temp_db.delete_category("bob", category_id) is False
        assert temp_db.get_company("alice", company_id).name == "Acme"

    def test_list_categories_by_kind(self, temp_db):
        temp_db.create_category("alice", "Sales", TransactionKind.INCOME)
        temp_db.create_category("alice", "Fuel", TransactionKind.EXPENSE)

        categories = temp_db.list_categories("alice", TransactionKind.INCOME)
        assert [c.name for c in categories] == ["Sales"]
        assert all(isinstance(c, entities.Category) for c in categories)

    def test_duplicate_company_raises_store_error(self, temp_db):
        temp_db.create_company("alice", "Acme")
        with pytest.raises(StoreError):
            temp_db.create_company("alice", "Acme")
        # The session is usable again after the rollback
        assert len(temp_db.list_companies("alice")) == 1

    def test_create_and_get_transaction(self, temp_db):
        txn_id = temp_db.create_transaction("alice", _draft(), receipt_ref="alice/x.png")
        txn = temp_db.get_transaction("alice", txn_id)

        assert isinstance(txn, entities.Transaction)
        assert txn.amount.official == Decimal("10.00")
        assert isinstance(txn.amount.official, Decimal)
        assert txn.receipt_ref == "alice/x.png"
        assert temp_db.get_transaction("bob", txn_id) is None

    def test_list_count_window_filters_and_paging(self, temp_db):
        company_id = temp_db.create_company("alice", "Acme")
        for day in range(1, 6):
            temp_db.create_transaction("alice", _draft(day, company_id=company_id if day % 2 else None))
        temp_db.create_transaction("bob", _draft(3))

        window = DateRange(date(2024, 3, 2), date(2024, 3, 4))
        assert temp_db.count_transactions("alice", window) == 3
        assert temp_db.count_transactions("alice", filters=TransactionFilter(company_id=company_id)) == 3

        listed = temp_db.list_transactions("alice", offset=1, limit=2)
        assert [txn.occurred_on.day for txn in listed] == [4, 3]

    def test_update_transaction_and_receipt(self, temp_db):
        txn_id = temp_db.create_transaction("alice", _draft())

        assert temp_db.update_transaction("alice", txn_id, _draft(9, TransactionKind.EXPENSE, "2.50"))
        assert temp_db.update_transaction_receipt("alice", txn_id, "alice/y.jpg")
        txn = temp_db.get_transaction("alice", txn_id)

        assert txn.kind == TransactionKind.EXPENSE
        assert txn.amount.official == Decimal("2.50")
        assert txn.occurred_on == date(2024, 3, 9)
        assert txn.receipt_ref == "alice/y.jpg"
        assert temp_db.update_transaction_receipt("bob", txn_id, None) is False

    def test_delete_transaction(self, temp_db):
        txn_id = temp_db.create_transaction("alice", _draft())
        assert temp_db.delete_transaction("bob", txn_id) is False
        assert temp_db.delete_transaction("alice", txn_id) is True
        assert temp_db.get_transaction("alice", txn_id) is None

    def test_store_failure_is_wrapped(self, temp_db, monkeypatch):
        session = temp_db._get_session()

        def broken_query(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("disk I/O error"))

        monkeypatch.setattr(session, "query", broken_query)
        with pytest.raises(StoreError):
            temp_db.list_transactions("alice")


def test_create_sqlite_database_creates_parent_dir(tmp_path):
    db_path = tmp_path / "nested" / "dir" / "books.db"
    db = create_sqlite_database(str(db_path))
    db.create_company("alice", "Acme")
    db.disconnect()
    assert db_path.exists()


def test_create_sqlite_database_uses_env(tmp_path, monkeypatch):
    db_path = tmp_path / "env.db"
    monkeypatch.setenv("TALLYBOOK_DB_PATH", str(db_path))
    db = create_sqlite_database()
    assert db.database_url == f"sqlite:///{db_path}"


def test_create_sqlite_database_reports_unusable_path(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")
    with pytest.raises(StoreError):
        create_sqlite_database(str(blocker / "books.db"))
    with pytest.raises(StoreError):
        create_sqlite_database(str(tmp_path))
