"""Counterparty (client or supplier) domain service."""

from typing import Optional
from tallybook.database.base import Database
from tallybook.domain.entities import Counterparty as CounterpartyEntity, TransactionFilter
from tallybook.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    duplicate_reference_name,
    reference_delete_blocked,
    reference_not_found,
)


class CounterpartyService:
    """Service for managing clients and suppliers."""

    def __init__(self, db: Database, owner_id: str):
        self.db = db
        self.owner_id = owner_id

    def _check_name(self, name: str, counterparty_id: Optional[int] = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Client name must not be empty", field="name")
        for counterparty in self.db.list_counterparties(self.owner_id):
            if counterparty.name == name and counterparty.id != counterparty_id:
                raise ConflictError(duplicate_reference_name("Client", name), field="name")
        return name

    def create_counterparty(self, name: str) -> int:
        """Create a client or supplier. Returns its ID."""
        name = self._check_name(name)
        return self.db.create_counterparty(self.owner_id, name)

    def get_counterparty(self, counterparty_id: int) -> Optional[CounterpartyEntity]:
        return self.db.get_counterparty(self.owner_id, counterparty_id)

    def list_counterparties(self) -> list[CounterpartyEntity]:
        return self.db.list_counterparties(self.owner_id)

    def rename_counterparty(self, counterparty_id: int, name: str) -> None:
        """Rename a client or supplier.

        Raises:
            NotFoundError: If it does not exist
            ConflictError: If the name is already used
        """
        if self.db.get_counterparty(self.owner_id, counterparty_id) is None:
            raise NotFoundError(reference_not_found("Client", counterparty_id))
        name = self._check_name(name, counterparty_id)
        self.db.update_counterparty(self.owner_id, counterparty_id, name)

    def delete_counterparty(self, counterparty_id: int) -> None:
        """Delete a client or supplier that no transaction references.

        Raises:
            NotFoundError: If it does not exist
            DependencyError: If transactions still reference it
        """
        if self.db.get_counterparty(self.owner_id, counterparty_id) is None:
            raise NotFoundError(reference_not_found("Client", counterparty_id))

        count = self.db.count_transactions(
            self.owner_id, filters=TransactionFilter(counterparty_id=counterparty_id)
        )
        if count > 0:
            raise DependencyError(reference_delete_blocked("Client", counterparty_id, count))

        self.db.delete_counterparty(self.owner_id, counterparty_id)
