"""CSV export domain service."""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from tallybook.database.base import Database
from tallybook.domain.csv_codec import ReferenceBook, attachment_headers, encode, export_filename
from tallybook.domain.entities import DateRange, TransactionFilter


@dataclass(frozen=True)
class CSVExport:
    """An encoded export ready to be written or served."""

    filename: str
    content: bytes
    row_count: int

    @property
    def headers(self) -> dict[str, str]:
        return attachment_headers(self.filename)


class CSVExportService:
    """Service for exporting transactions to the CSV exchange format."""

    def __init__(self, db: Database, owner_id: str):
        self.db = db
        self.owner_id = owner_id

    def export(
        self,
        window: Optional[DateRange] = None,
        filters: Optional[TransactionFilter] = None,
        today: Optional[date] = None,
    ) -> CSVExport:
        """Encode the owner's matching transactions, oldest first."""
        records = self.db.list_transactions(self.owner_id, window, filters)
        records.sort(key=lambda txn: (txn.occurred_on, txn.id))
        references = ReferenceBook.from_entities(
            companies=self.db.list_companies(self.owner_id),
            counterparties=self.db.list_counterparties(self.owner_id),
            categories=self.db.list_categories(self.owner_id),
        )
        return CSVExport(
            filename=export_filename(today or date.today()),
            content=encode(records, references),
            row_count=len(records),
        )
