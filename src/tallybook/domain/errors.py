"""Shared domain error messages and error types."""

from dataclasses import dataclass, asdict
from typing import Any, Optional


@dataclass(frozen=True)
class ErrorReport:
    """Structured error description handed to callers instead of exceptions."""

    kind: str
    message: str
    row: Optional[int] = None
    field: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """

    kind = "domain_error"

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def report(self, row: Optional[int] = None) -> ErrorReport:
        """Return a structured report for this error."""
        return ErrorReport(kind=self.kind, message=self.message, row=row, field=self.field)


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""

    kind = "validation_error"


class NotFoundError(DomainError):
    """Requested entity does not exist or is not owned by the caller."""

    kind = "not_found"


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""

    kind = "conflict"


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""

    kind = "dependency_error"


class StoreError(DomainError):
    """Backing store unavailable or rejected the query. Never retried here."""

    kind = "store_error"


class AttachmentError(DomainError):
    """Upload to or deletion from the object store failed."""

    kind = "attachment_error"


class ImportFileError(DomainError):
    """CSV file missing, unreadable or undecodable; aborts the whole import."""

    kind = "import_file_error"


def error_report(error: Exception) -> ErrorReport:
    """Convert any exception into an ErrorReport."""
    if isinstance(error, DomainError):
        return error.report()
    return ErrorReport(kind="internal_error", message=str(error))


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def reference_not_found(label: str, reference_id: int) -> str:
    """Return message for a missing company, client or category."""
    return f"{label} {reference_id} not found"


def duplicate_reference_name(label: str, name: str) -> str:
    """Return message for a reference name that is already taken."""
    return f"{label} with name '{name}' already exists"


def reference_delete_blocked(label: str, reference_id: int, transaction_count: int) -> str:
    """Return message when a reference entity still has transactions."""
    return (
        f"Cannot delete {label.lower()} {reference_id}: it has "
        f"{transaction_count} transaction{'s' if transaction_count != 1 else ''}. "
        "Please reassign or delete them first."
    )


def category_kind_mismatch(category_id: int, category_kind: str, kind: str) -> str:
    """Return message when a category is used with a transaction of the other kind."""
    return (
        f"Category {category_id} is an {category_kind} category and cannot be "
        f"used on an {kind} transaction"
    )
