"""CSV import domain service."""

from pathlib import Path
from typing import BinaryIO, Optional, Union

from tallybook.database.base import Database
from tallybook.domain.csv_codec import STORE_ERROR, ReferenceBook, decode
from tallybook.domain.entities import ImportResult, RowError
from tallybook.domain.errors import (
    ImportFileError,
    NotFoundError,
    StoreError,
    reference_not_found,
)
from tallybook.domain.transaction import TransactionService
from tallybook.logging_setup import get_logger

logger = get_logger("tallybook.domain.csv_import")


class CSVImportService:
    """Service for importing transactions from the CSV exchange format."""

    def __init__(self, db: Database, owner_id: str):
        """Initialize CSV import service.

        Args:
            db: Database instance
            owner_id: Identity of the importing user
        """
        self.db = db
        self.owner_id = owner_id
        self.transaction_service = TransactionService(db, owner_id)

    def load_references(self) -> ReferenceBook:
        """Build the name lookup from the owner's companies, clients and categories."""
        return ReferenceBook.from_entities(
            companies=self.db.list_companies(self.owner_id),
            counterparties=self.db.list_counterparties(self.owner_id),
            categories=self.db.list_categories(self.owner_id),
        )

    def import_file(
        self, csv_file_path: Union[str, Path], default_company_id: Optional[int] = None
    ) -> ImportResult:
        """Import transactions from a CSV file on disk.

        Raises:
            ImportFileError: If the file is missing or unreadable
        """
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise ImportFileError(f"CSV file not found: {csv_file_path}")
        try:
            data = csv_path.read_bytes()
        except OSError as e:
            raise ImportFileError(f"CSV file could not be read: {e}") from e
        return self.import_csv(data, default_company_id=default_company_id)

    def import_csv(
        self,
        source: Union[bytes, str, BinaryIO],
        default_company_id: Optional[int] = None,
    ) -> ImportResult:
        """Import transactions from CSV content.

        The whole file is parsed before anything is inserted. Each accepted
        row is then inserted on its own; rows inserted before a later failure
        stay in place.

        Args:
            source: CSV content as bytes, text or a binary file object
            default_company_id: When set, every created transaction gets this
                company and the company column is ignored

        Returns:
            ImportResult with created transactions and rejected rows (ordered
            by row number)

        Raises:
            NotFoundError: If default_company_id is not one of the owner's companies
            ImportFileError: If the content cannot be decoded
            StoreError: If reference entities cannot be read
        """
        if default_company_id is not None:
            if self.db.get_company(self.owner_id, default_company_id) is None:
                raise NotFoundError(reference_not_found("Company", default_company_id))

        references = self.load_references()
        decoded = decode(source, references, default_company_id=default_company_id)

        created = []
        rejected = list(decoded.rejected)
        for row_number, draft in decoded.drafts:
            try:
                created.append(self.transaction_service.insert_draft(draft))
            except StoreError as e:
                rejected.append(
                    RowError(row_number=row_number, reason=STORE_ERROR, message=str(e))
                )

        rejected.sort(key=lambda error: error.row_number)
        logger.info(
            "Imported %d transactions for %s, rejected %d rows",
            len(created),
            self.owner_id,
            len(rejected),
        )
        return ImportResult(created=tuple(created), rejected=tuple(rejected))
