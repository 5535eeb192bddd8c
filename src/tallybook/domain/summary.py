"""Summary (statistics) domain service."""

import calendar
from typing import Optional

from tallybook.database.base import Database
from tallybook.domain.aggregation import GroupKey, aggregate, aggregate_by_month
from tallybook.domain.entities import DateRange, GroupBy, Summary, TransactionFilter
from tallybook.domain.errors import ValidationError

NO_COMPANY_LABEL = "No company"
NO_CLIENT_LABEL = "No client"


class SummaryService:
    """Reads one user's transactions and aggregates them."""

    def __init__(self, db: Database, owner_id: str):
        """Initialize summary service.

        Args:
            db: Database instance
            owner_id: Identity of the user whose transactions are summarized
        """
        self.db = db
        self.owner_id = owner_id

    def _records(self, window: Optional[DateRange], filters: Optional[TransactionFilter]):
        # The store applies the same window and filters; aggregate() re-checks them.
        return self.db.list_transactions(self.owner_id, window, filters)

    def summarize(
        self,
        window: Optional[DateRange] = None,
        filters: Optional[TransactionFilter] = None,
    ) -> Summary:
        """Income, expense and balance over the window."""
        return aggregate(self._records(window, filters), GroupBy.NONE, window, filters)

    def summarize_by(
        self,
        group_by: GroupBy,
        window: Optional[DateRange] = None,
        filters: Optional[TransactionFilter] = None,
    ) -> dict[GroupKey, Summary]:
        """Summaries per company, per client or per month.

        Raises:
            ValidationError: If group_by is NONE (use summarize)
        """
        group_by = GroupBy(group_by)
        if group_by == GroupBy.NONE:
            raise ValidationError("summarize_by needs a grouping dimension")
        return aggregate(self._records(window, filters), group_by, window, filters)

    def monthly(self, year: int, filters: Optional[TransactionFilter] = None) -> dict[int, Summary]:
        """Twelve monthly Summaries for a calendar year."""
        window = DateRange.for_year(year)
        return aggregate_by_month(self._records(window, filters), year, filters)

    def labelled(
        self,
        group_by: GroupBy,
        window: Optional[DateRange] = None,
        filters: Optional[TransactionFilter] = None,
    ) -> list[tuple[str, Summary]]:
        """Grouped Summaries with display labels instead of ids."""
        group_by = GroupBy(group_by)
        if group_by == GroupBy.NONE:
            return [("Total", self.summarize(window, filters))]

        grouped = self.summarize_by(group_by, window, filters)

        if group_by == GroupBy.MONTH:
            return [(calendar.month_name[month], summary) for month, summary in grouped.items()]

        if group_by == GroupBy.COMPANY:
            names = {c.id: c.name for c in self.db.list_companies(self.owner_id)}
            missing = NO_COMPANY_LABEL
        else:
            names = {c.id: c.name for c in self.db.list_counterparties(self.owner_id)}
            missing = NO_CLIENT_LABEL

        rows = []
        for key, summary in grouped.items():
            if key is None:
                label = missing
            else:
                label = names.get(key, f"#{key}")
            rows.append((label, summary))
        return rows
