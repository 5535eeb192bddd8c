"""Transaction aggregation.

Pure functions folding transaction records into ``Summary`` values. They take
every parameter explicitly and never touch the store, so callers can feed
them any record set.
"""

from collections import defaultdict
from typing import Iterable, Optional, Sequence, Union

from tallybook.domain.entities import (
    DateRange,
    GroupBy,
    Summary,
    Transaction,
    TransactionFilter,
    TransactionKind,
)
from tallybook.domain.money import zero
from tallybook.logging_setup import get_logger

logger = get_logger("tallybook.domain.aggregation")

GroupKey = Optional[int]


def filter_transactions(
    records: Iterable[Transaction],
    window: Optional[DateRange] = None,
    filters: Optional[TransactionFilter] = None,
) -> list[Transaction]:
    """Keep records inside the window that match every supplied filter."""
    window = window or DateRange()
    filters = filters or TransactionFilter()
    return [
        txn for txn in records if window.contains(txn.occurred_on) and filters.matches(txn)
    ]


def fold(records: Iterable[Transaction]) -> Summary:
    """Fold records into a single Summary.

    Income and expense are accumulated per component; balance is derived
    once at the end.
    """
    income = zero()
    expense = zero()
    count = 0
    for txn in records:
        if txn.kind == TransactionKind.INCOME:
            income = income + txn.amount
        else:
            expense = expense + txn.amount
        count += 1
    return Summary.from_totals(income, expense, count)


def _group_key(txn: Transaction, group_by: GroupBy) -> GroupKey:
    if group_by == GroupBy.COMPANY:
        return txn.company_id
    if group_by == GroupBy.COUNTERPARTY:
        return txn.counterparty_id
    if group_by == GroupBy.MONTH:
        return txn.occurred_on.month
    raise ValueError(f"Cannot derive a group key for {group_by}")


def _sort_key(key: GroupKey) -> tuple[int, int]:
    # Ungrouped (None) sorts last
    return (1, 0) if key is None else (0, key)


def group_transactions(
    records: Iterable[Transaction], group_by: GroupBy
) -> dict[GroupKey, list[Transaction]]:
    """Bucket records by the id of the group dimension (None when unset)."""
    grouped: dict[GroupKey, list[Transaction]] = defaultdict(list)
    for txn in records:
        grouped[_group_key(txn, group_by)].append(txn)
    return dict(grouped)


def _month_window(
    records: Sequence[Transaction], window: Optional[DateRange]
) -> Optional[DateRange]:
    start = window.start if window is not None else None
    end = window.end if window is not None else None
    if start is not None:
        year = start.year
    elif end is not None:
        year = end.year
    elif records:
        year = max(record.occurred_on for record in records).year
    else:
        return None

    year_window = DateRange.for_year(year)
    return DateRange(
        max(start or year_window.start, year_window.start),
        min(end or year_window.end, year_window.end),
    )


def aggregate(
    records: Sequence[Transaction],
    group_by: GroupBy = GroupBy.NONE,
    window: Optional[DateRange] = None,
    filters: Optional[TransactionFilter] = None,
) -> Union[Summary, dict[GroupKey, Summary]]:
    """Aggregate records into a Summary or a mapping of Summaries.

    Month grouping reports on one calendar year: the year of the window's
    start, else of its end, else of the latest record. The window is clipped
    to that year.

    Args:
        records: Transaction records, in any order
        group_by: Grouping dimension
        window: Inclusive date window; unbounded when omitted
        filters: Optional reference filters

    Returns:
        A single Summary for ``GroupBy.NONE``. Otherwise a dict keyed by the
        group id (``None`` collects records without that reference), or by
        month number 1-12 for ``GroupBy.MONTH``.
    """
    group_by = GroupBy(group_by)
    if group_by == GroupBy.MONTH:
        window = _month_window(records, window)

    included = filter_transactions(records, window, filters)
    logger.debug(
        "Aggregating %d of %d records grouped by %s", len(included), len(records), group_by.value
    )

    if group_by == GroupBy.NONE:
        return fold(included)

    grouped = group_transactions(included, group_by)
    if group_by == GroupBy.MONTH:
        return {month: fold(grouped.get(month, ())) for month in range(1, 13)}

    return {key: fold(grouped[key]) for key in sorted(grouped, key=_sort_key)}


def aggregate_by_month(
    records: Sequence[Transaction],
    year: int,
    filters: Optional[TransactionFilter] = None,
) -> dict[int, Summary]:
    """Aggregate a calendar year into exactly twelve monthly Summaries."""
    return aggregate(records, GroupBy.MONTH, DateRange.for_year(year), filters)


def total(summaries: Iterable[Summary]) -> Summary:
    """Combine several Summaries into one."""
    income = zero()
    expense = zero()
    count = 0
    for summary in summaries:
        income = income + summary.income
        expense = expense + summary.expense
        count += summary.count
    return Summary.from_totals(income, expense, count)

