from datetime import date
from functools import lru_cache
from typing import Optional, Sequence, Tuple

from ledger.domain import FilterCriteria, LedgerSnapshot, PeriodOverview, Transaction
from ledger.periods import DEFAULT_MONTHS_TO_DISPLAY, Period, build_monthly_periods
from ledger.services import build_period_overview


@lru_cache(maxsize=64)
def monthly_periods(
    transactions: Tuple[Transaction, ...], today: date, months: int = DEFAULT_MONTHS_TO_DISPLAY
) -> Tuple[Period, ...]:
    return tuple(build_monthly_periods(transactions, months=months, today=today))


@lru_cache(maxsize=64)
def _period_overview(
    snapshot: LedgerSnapshot,
    criteria: FilterCriteria,
    today: date,
    periods: Optional[Tuple[Period, ...]],
) -> PeriodOverview:
    periods = periods or monthly_periods(snapshot.transactions, today)
    return build_period_overview(snapshot, criteria, periods=list(periods), today=today)


def cached_period_overview(
    snapshot: LedgerSnapshot,
    criteria: Optional[FilterCriteria] = None,
    today: Optional[date] = None,
    periods: Optional[Sequence[Period]] = None,
) -> PeriodOverview:
    """Overview memoized on the (hashable) snapshot, criteria, day and periods."""
    return _period_overview(
        snapshot,
        criteria or FilterCriteria(),
        today or date.today(),
        tuple(periods) if periods else None,
    )


def clear_caches() -> None:
    monthly_periods.cache_clear()
    _period_overview.cache_clear()
