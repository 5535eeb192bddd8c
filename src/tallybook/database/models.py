"""SQLAlchemy models for tallybook database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    UniqueConstraint,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Company(Base):
    """Company model."""

    __tablename__ = "companies"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("owner_id", "name", name="uq_company_owner_name"),)

    transactions = relationship("Transaction", back_populates="company")


class Counterparty(Base):
    """Client or supplier model."""

    __tablename__ = "counterparties"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        UniqueConstraint("owner_id", "name", name="uq_counterparty_owner_name"),
    )

    transactions = relationship("Transaction", back_populates="counterparty")


class Category(Base):
    """Category model; kind is 'income' or 'expense'."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    kind = Column(String(16), nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (
        UniqueConstraint("owner_id", "name", "kind", name="uq_category_owner_name_kind"),
    )

    transactions = relationship("Transaction", back_populates="category")


class Transaction(Base):
    """Transaction model with official and unofficial amounts."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=False)
    kind = Column(String(16), nullable=False)
    official_amount = Column(Numeric(12, 2), nullable=False)
    unofficial_amount = Column(Numeric(12, 2), nullable=False)
    occurred_on = Column(Date, nullable=False)
    description = Column(String, nullable=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=True)
    counterparty_id = Column(Integer, ForeignKey("counterparties.id"), nullable=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    receipt_ref = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (Index("ix_transactions_owner_date", "owner_id", "occurred_on"),)

    company = relationship("Company", back_populates="transactions")
    counterparty = relationship("Counterparty", back_populates="transactions")
    category = relationship("Category", back_populates="transactions")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
