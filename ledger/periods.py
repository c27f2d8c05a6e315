import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional, Tuple

from ledger.dates import DateLike, safe_parse_date

logger = logging.getLogger(__name__)

DEFAULT_MONTHS_TO_DISPLAY = 12
FUTURE_KEY = "future"
FUTURE_LABEL = "Future"
FUTURE_YEARS = 100


@dataclass(frozen=True)
class Period:
    """A calendar month, or the synthetic Future bucket.

    ``anchor`` is the first day of the month, or the day the Future bucket was
    built. ``range()`` only looks at the frozen fields so it is pure.
    """
    key: str
    label: str
    anchor: date
    is_future: bool = False

    def range(self) -> Tuple[datetime, datetime]:
        if self.is_future:
            start = datetime.combine(self.anchor + timedelta(days=1), time.min)
            end = datetime.combine(date(self.anchor.year + FUTURE_YEARS, 12, 31), time.max)
            return start, end
        return (
            datetime.combine(self.anchor, time.min),
            datetime.combine(last_day_of_month(self.anchor), time.max),
        )


def add_months(month: date, count: int) -> date:
    index = month.year * 12 + month.month - 1 + count
    return date(index // 12, index % 12 + 1, 1)


def last_day_of_month(month: date) -> date:
    return add_months(month, 1) - timedelta(days=1)


def month_key(value: date) -> str:
    return f"{value:%Y-%m}"


def month_label(value: date) -> str:
    return f"{value:%b %Y}"


def monthly_period(month: date) -> Period:
    first = month.replace(day=1)
    return Period(key=month_key(first), label=month_label(first), anchor=first)


def future_period(today: date) -> Period:
    return Period(key=FUTURE_KEY, label=FUTURE_LABEL, anchor=today, is_future=True)


def _as_day(value: DateLike) -> Optional[date]:
    parsed = safe_parse_date(value)
    return parsed.date() if parsed else None


def _oldest_day(transactions: Iterable) -> Optional[date]:
    oldest = None
    for item in transactions:
        raw = getattr(item, "date", item)
        day = _as_day(raw)
        if day is None:
            logger.debug("Ignoring unparsable date %r while building periods", raw)
            continue
        if oldest is None or day < oldest:
            oldest = day
    return oldest


def build_monthly_periods(
    transactions: Optional[Iterable] = None,
    months: int = DEFAULT_MONTHS_TO_DISPLAY,
    today: Optional[date] = None,
    start_from: Optional[DateLike] = None,
) -> List[Period]:
    """Months to offer in the period picker, oldest first, plus Future.

    The window is the trailing ``months`` months ending with the current one,
    or every month since ``start_from`` when a baseline is configured. Every
    month between the oldest transaction and now is added as well so no
    transaction is ever out of reach. Future sits right after the current
    month.
    """
    today = today or date.today()
    current = today.replace(day=1)

    baseline = _as_day(start_from) if start_from is not None else None
    if start_from is not None and baseline is None:
        logger.warning("Ignoring unparsable baseline start date %r", start_from)

    keys = set()
    if baseline is not None:
        cursor = min(baseline.replace(day=1), current)
        while cursor <= current:
            keys.add(month_key(cursor))
            cursor = add_months(cursor, 1)
    else:
        for offset in range(max(months, 0)):
            keys.add(month_key(add_months(current, -offset)))

    if transactions:
        oldest = _oldest_day(transactions)
        if oldest is not None and oldest < current:
            cursor = oldest.replace(day=1)
            while cursor <= current:
                keys.add(month_key(cursor))
                cursor = add_months(cursor, 1)

    periods = [
        monthly_period(datetime.strptime(key, "%Y-%m").date()) for key in sorted(keys)
    ]

    current_key = month_key(current)
    position = next((i for i, p in enumerate(periods) if p.key == current_key), None)
    if position is None:
        periods.append(future_period(today))
    else:
        periods.insert(position + 1, future_period(today))
    return periods


def resolve_period(
    periods: List[Period], key: Optional[str], today: Optional[date] = None
) -> Optional[Period]:
    """Period for ``key``; the current month (or latest month) when unknown."""
    if not periods:
        return None
    if key:
        for period in periods:
            if period.key == key:
                return period

    current_key = month_key((today or date.today()).replace(day=1))
    for period in periods:
        if period.key == current_key:
            return period
    months = [p for p in periods if not p.is_future]
    return months[-1] if months else periods[-1]
