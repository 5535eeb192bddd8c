"""Tests for the summary service."""

import pytest
from datetime import date
from decimal import Decimal

from tallybook.domain.entities import DateRange, GroupBy, Summary, TransactionFilter
from tallybook.domain.errors import ValidationError
from tallybook.domain.money import MoneyPair
from tallybook.domain.summary import NO_CLIENT_LABEL, NO_COMPANY_LABEL, SummaryService
from tallybook.domain.transaction import TransactionService

from conftest import OTHER_OWNER


@pytest.fixture
def march_transactions(transaction_service, sample_references):
    """Income 100+50 for Acme/Maria and expense 30+0 for Globex in March 2024."""
    transaction_service.create_transaction(
        "income",
        MoneyPair("100.00", "50.00"),
        date(2024, 3, 1),
        company_id=sample_references["Acme"],
        counterparty_id=sample_references["Maria"],
    )
    transaction_service.create_transaction(
        "expense",
        MoneyPair("30.00", "0.00"),
        date(2024, 3, 20),
        company_id=sample_references["Globex"],
    )
    transaction_service.create_transaction(
        "income", MoneyPair("5.00", "0.00"), date(2024, 7, 4)
    )
    return sample_references


def test_summarize_month(summary_service, march_transactions):
    summary = summary_service.summarize(DateRange.for_month(2024, 3))

    assert summary.income.total == Decimal("150.00")
    assert summary.expense.total == Decimal("30.00")
    assert summary.balance.total == Decimal("120.00")
    assert summary.count == 2


def test_summarize_is_owner_scoped(temp_db, march_transactions):
    other = SummaryService(temp_db, OTHER_OWNER)
    assert other.summarize() == Summary()


def test_summarize_with_filter(summary_service, march_transactions):
    summary = summary_service.summarize(
        filters=TransactionFilter(company_id=march_transactions["Acme"])
    )
    assert summary.income == MoneyPair("100.00", "50.00")
    assert summary.expense.total == Decimal("0")


def test_summarize_by_company(summary_service, march_transactions):
    grouped = summary_service.summarize_by(GroupBy.COMPANY, DateRange.for_year(2024))

    acme = march_transactions["Acme"]
    globex = march_transactions["Globex"]
    assert list(grouped) == [acme, globex, None]
    assert grouped[globex].balance.total == Decimal("-30.00")
    assert grouped[None].income.total == Decimal("5.00")


def test_summarize_by_none_rejected(summary_service):
    with pytest.raises(ValidationError):
        summary_service.summarize_by(GroupBy.NONE)


def test_monthly(summary_service, march_transactions):
    monthly = summary_service.monthly(2024)

    assert list(monthly) == list(range(1, 13))
    assert monthly[3].balance.total == Decimal("120.00")
    assert monthly[7].income.total == Decimal("5.00")
    assert monthly[1] == Summary()


def test_monthly_other_year_is_empty(summary_service, march_transactions):
    monthly = summary_service.monthly(2023)
    assert all(summary.count == 0 for summary in monthly.values())


def test_labelled_by_company(summary_service, march_transactions):
    rows = summary_service.labelled(GroupBy.COMPANY, DateRange.for_year(2024))
    assert [label for label, _ in rows] == ["Acme", "Globex", NO_COMPANY_LABEL]


def test_labelled_by_client(summary_service, march_transactions):
    rows = summary_service.labelled(GroupBy.COUNTERPARTY)
    assert [label for label, _ in rows] == ["Maria", NO_CLIENT_LABEL]


def test_labelled_by_month(summary_service, march_transactions):
    rows = summary_service.labelled(GroupBy.MONTH, DateRange.for_year(2024))
    assert len(rows) == 12
    assert rows[2][0] == "March"
    assert rows[2][1].count == 2


def test_labelled_total(summary_service, march_transactions):
    rows = summary_service.labelled(GroupBy.NONE)
    assert rows[0][0] == "Total"
    assert rows[0][1].count == 3
