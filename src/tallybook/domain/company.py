"""Company domain service."""

from typing import Optional
from tallybook.database.base import Database
from tallybook.domain.entities import Company as CompanyEntity, TransactionFilter
from tallybook.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    duplicate_reference_name,
    reference_delete_blocked,
    reference_not_found,
)


class CompanyService:
    """Service for managing companies."""

    def __init__(self, db: Database, owner_id: str):
        """Initialize company service.

        Args:
            db: Database instance
            owner_id: Identity of the user whose companies are managed
        """
        self.db = db
        self.owner_id = owner_id

    def _check_name(self, name: str, company_id: Optional[int] = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Company name must not be empty", field="name")
        for company in self.db.list_companies(self.owner_id):
            if company.name == name and company.id != company_id:
                raise ConflictError(duplicate_reference_name("Company", name), field="name")
        return name

    def create_company(self, name: str) -> int:
        """Create a new company.

        Args:
            name: Company name

        Returns:
            Company ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If the name is already used
        """
        name = self._check_name(name)
        return self.db.create_company(self.owner_id, name)

    def get_company(self, company_id: int) -> Optional[CompanyEntity]:
        """Get company by ID, or None if it does not exist or is not owned."""
        return self.db.get_company(self.owner_id, company_id)

    def list_companies(self) -> list[CompanyEntity]:
        """List all companies of the owner."""
        return self.db.list_companies(self.owner_id)

    def rename_company(self, company_id: int, name: str) -> None:
        """Rename a company.

        Raises:
            NotFoundError: If the company does not exist
            ConflictError: If the name is already used
        """
        if self.db.get_company(self.owner_id, company_id) is None:
            raise NotFoundError(reference_not_found("Company", company_id))
        name = self._check_name(name, company_id)
        self.db.update_company(self.owner_id, company_id, name)

    def delete_company(self, company_id: int) -> None:
        """Delete a company that no transaction references.

        Raises:
            NotFoundError: If the company does not exist
            DependencyError: If transactions still reference it
        """
        if self.db.get_company(self.owner_id, company_id) is None:
            raise NotFoundError(reference_not_found("Company", company_id))

        count = self.db.count_transactions(
            self.owner_id, filters=TransactionFilter(company_id=company_id)
        )
        if count > 0:
            raise DependencyError(reference_delete_blocked("Company", company_id, count))

        self.db.delete_company(self.owner_id, company_id)
