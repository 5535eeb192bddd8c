"""Category domain service."""

from typing import Optional
from tallybook.database.base import Database
from tallybook.domain.entities import (
    Category as CategoryEntity,
    TransactionFilter,
    TransactionKind,
)
from tallybook.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    ValidationError,
    duplicate_reference_name,
    reference_delete_blocked,
    reference_not_found,
)


class CategoryService:
    """Service for managing income and expense categories.

    A category belongs to exactly one kind. The same name may exist once per
    kind (e.g. an income "Other" and an expense "Other").
    """

    def __init__(self, db: Database, owner_id: str):
        """Initialize category service.

        Args:
            db: Database instance
            owner_id: Identity of the user whose categories are managed
        """
        self.db = db
        self.owner_id = owner_id

    def _check_name(
        self, name: str, kind: TransactionKind, category_id: Optional[int] = None
    ) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name must not be empty", field="name")
        for category in self.db.list_categories(self.owner_id, kind=kind):
            if category.name == name and category.id != category_id:
                raise ConflictError(
                    duplicate_reference_name(f"{kind.value.capitalize()} category", name),
                    field="name",
                )
        return name

    def create_category(self, name: str, kind: TransactionKind | str) -> int:
        """Create a category.

        Args:
            name: Category name
            kind: income or expense

        Returns:
            Category ID

        Raises:
            ValidationError: If the name is empty or the kind invalid
            ConflictError: If the name is already used for this kind
        """
        kind = TransactionKind.parse(kind)
        name = self._check_name(name, kind)
        return self.db.create_category(self.owner_id, name, kind)

    def get_category(self, category_id: int) -> Optional[CategoryEntity]:
        """Get category by ID.

        Args:
            category_id: Category ID

        Returns:
            Category entity or None if not found
        """
        return self.db.get_category(self.owner_id, category_id)

    def list_categories(self, kind: Optional[TransactionKind | str] = None) -> list[CategoryEntity]:
        """List categories, optionally only those of one kind."""
        if kind is not None:
            kind = TransactionKind.parse(kind)
        return self.db.list_categories(self.owner_id, kind=kind)

    def rename_category(self, category_id: int, name: str) -> None:
        """Rename a category, keeping its kind.

        Raises:
            NotFoundError: If the category does not exist
            ConflictError: If the name is already used for this kind
        """
        category = self.db.get_category(self.owner_id, category_id)
        if category is None:
            raise NotFoundError(reference_not_found("Category", category_id))
        name = self._check_name(name, category.kind, category_id)
        self.db.update_category(self.owner_id, category_id, name)

    def delete_category(self, category_id: int) -> None:
        """Delete a category no transaction uses.

        Raises:
            NotFoundError: If the category does not exist
            DependencyError: If transactions still use it
        """
        if self.db.get_category(self.owner_id, category_id) is None:
            raise NotFoundError(reference_not_found("Category", category_id))

        count = self.db.count_transactions(
            self.owner_id, filters=TransactionFilter(category_id=category_id)
        )
        if count > 0:
            raise DependencyError(reference_delete_blocked("Category", category_id, count))

        self.db.delete_category(self.owner_id, category_id)
