"""Mapper functions to convert SQLAlchemy models into domain entities."""

from tallybook.domain import entities as domain
from tallybook.domain.money import MoneyPair
from tallybook.database.models import (
    Company as ORMCompany,
    Counterparty as ORMCounterparty,
    Category as ORMCategory,
    Transaction as ORMTransaction,
)


def company_to_domain(orm_company: ORMCompany) -> domain.Company:
    """Convert SQLAlchemy Company model to domain Company entity."""
    return domain.Company(
        id=orm_company.id,
        owner_id=orm_company.owner_id,
        name=orm_company.name,
        created_at=orm_company.created_at,
    )


def counterparty_to_domain(orm_counterparty: ORMCounterparty) -> domain.Counterparty:
    """Convert SQLAlchemy Counterparty model to domain Counterparty entity."""
    return domain.Counterparty(
        id=orm_counterparty.id,
        owner_id=orm_counterparty.owner_id,
        name=orm_counterparty.name,
        created_at=orm_counterparty.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        owner_id=orm_category.owner_id,
        name=orm_category.name,
        kind=domain.TransactionKind(orm_category.kind),
        created_at=orm_category.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        owner_id=orm_transaction.owner_id,
        kind=domain.TransactionKind(orm_transaction.kind),
        amount=MoneyPair(orm_transaction.official_amount, orm_transaction.unofficial_amount),
        occurred_on=orm_transaction.occurred_on,
        description=orm_transaction.description,
        company_id=orm_transaction.company_id,
        counterparty_id=orm_transaction.counterparty_id,
        category_id=orm_transaction.category_id,
        receipt_ref=orm_transaction.receipt_ref,
        created_at=orm_transaction.created_at,
    )
