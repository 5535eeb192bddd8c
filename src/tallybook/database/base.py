"""Abstract database interface.

Every operation takes the ``owner_id`` of the authenticated user and only
sees or touches rows owned by that user. Implementations raise
``StoreError`` when the backing store fails.
"""

from abc import ABC, abstractmethod
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from tallybook.domain.entities import (
    Category,
    Company,
    Counterparty,
    DateRange,
    Transaction,
    TransactionDraft,
    TransactionFilter,
    TransactionKind,
)


class Database(ABC):
    """Abstract database interface for tallybook."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Company operations
    @abstractmethod
    def create_company(self, owner_id: str, name: str) -> int:
        """Create a company. Returns company ID."""
        pass

    @abstractmethod
    def get_company(self, owner_id: str, company_id: int) -> Optional[Company]:
        """Get company by ID."""
        pass

    @abstractmethod
    def list_companies(self, owner_id: str) -> list[Company]:
        """List companies ordered by name."""
        pass

    @abstractmethod
    def update_company(self, owner_id: str, company_id: int, name: str) -> bool:
        """Rename a company. Returns False if no such row."""
        pass

    @abstractmethod
    def delete_company(self, owner_id: str, company_id: int) -> bool:
        """Delete a company. Returns False if no such row."""
        pass

    # Counterparty operations
    @abstractmethod
    def create_counterparty(self, owner_id: str, name: str) -> int:
        """Create a client or supplier. Returns counterparty ID."""
        pass

    @abstractmethod
    def get_counterparty(self, owner_id: str, counterparty_id: int) -> Optional[Counterparty]:
        """Get counterparty by ID."""
        pass

    @abstractmethod
    def list_counterparties(self, owner_id: str) -> list[Counterparty]:
        """List counterparties ordered by name."""
        pass

    @abstractmethod
    def update_counterparty(self, owner_id: str, counterparty_id: int, name: str) -> bool:
        """Rename a counterparty. Returns False if no such row."""
        pass

    @abstractmethod
    def delete_counterparty(self, owner_id: str, counterparty_id: int) -> bool:
        """Delete a counterparty. Returns False if no such row."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, owner_id: str, name: str, kind: TransactionKind) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, owner_id: str, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def list_categories(
        self, owner_id: str, kind: Optional[TransactionKind] = None
    ) -> list[Category]:
        """List categories ordered by name, optionally of one kind."""
        pass

    @abstractmethod
    def update_category(self, owner_id: str, category_id: int, name: str) -> bool:
        """Rename a category. Returns False if no such row."""
        pass

    @abstractmethod
    def delete_category(self, owner_id: str, category_id: int) -> bool:
        """Delete a category. Returns False if no such row."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self, owner_id: str, draft: TransactionDraft, receipt_ref: Optional[str] = None
    ) -> int:
        """Insert a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, owner_id: str, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        owner_id: str,
        window: Optional[DateRange] = None,
        filters: Optional[TransactionFilter] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> list[Transaction]:
        """Filtered select, newest first.

        Args:
            owner_id: Owner identity
            window: Optional inclusive date window
            filters: Optional equality filters; unset fields are skipped
            offset: Rows to skip
            limit: Maximum rows to return, or None for all
        """
        pass

    @abstractmethod
    def count_transactions(
        self,
        owner_id: str,
        window: Optional[DateRange] = None,
        filters: Optional[TransactionFilter] = None,
    ) -> int:
        """Count transactions matching the same criteria as list_transactions."""
        pass

    @abstractmethod
    def update_transaction(
        self, owner_id: str, transaction_id: int, draft: TransactionDraft
    ) -> bool:
        """Replace amount, date, description and associations. Returns False if no such row."""
        pass

    @abstractmethod
    def update_transaction_receipt(
        self, owner_id: str, transaction_id: int, receipt_ref: Optional[str]
    ) -> bool:
        """Set the receipt handle. Returns False if no such row."""
        pass

    @abstractmethod
    def delete_transaction(self, owner_id: str, transaction_id: int) -> bool:
        """Delete a transaction. Returns False if no such row."""
        pass
