from typing import Iterable, List, Optional

from ledger.dates import safe_parse_date, to_datetime
from ledger.domain import RecurringTransaction
from ledger.filters import fail_open


def due_in_period(
    definitions: Iterable[RecurringTransaction],
    period,
    acc_id: Optional[str] = None,
    active_only: bool = False,
) -> List[RecurringTransaction]:
    """Recurring items whose next occurrence falls inside ``period``."""
    start, end = period.range()

    @fail_open
    def in_range(item: RecurringTransaction) -> bool:
        return start <= to_datetime(item.next_occurrence) <= end

    def matches_account(item: RecurringTransaction) -> bool:
        return not acc_id or item.account_id == acc_id or item.to_account_id == acc_id

    return [
        item for item in definitions
        if (item.is_active or not active_only) and matches_account(item) and in_range(item)
    ]


def next_due(definitions: Iterable[RecurringTransaction]) -> Optional[RecurringTransaction]:
    dated = [(safe_parse_date(item.next_occurrence), item) for item in definitions]
    dated = [(when, item) for when, item in dated if when is not None]
    if not dated:
        return None
    return sorted(dated, key=lambda pair: pair[0])[0][1]
