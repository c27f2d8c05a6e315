import functools
import logging
from typing import Callable, Iterable, List, Optional, Tuple

from ledger.amounts import is_valid_amount
from ledger.currency import format_currency
from ledger.dates import end_of_day, safe_parse_date, start_of_day, to_datetime
from ledger.domain import Account, FilterCriteria, Transaction
from ledger.functional import pipe
from ledger.transforms import touches_account

logger = logging.getLogger(__name__)

Predicate = Callable[[Transaction], bool]


def fail_open(predicate: Predicate) -> Predicate:
    """Keep the record when ``predicate`` cannot judge it.

    A malformed date or a missing field must never hide a transaction from a
    list or a balance, so evaluation errors count as a match.
    """
    @functools.wraps(predicate)
    def _safe(t):
        try:
            return predicate(t)
        except (ValueError, TypeError, AttributeError) as exc:
            logger.debug(
                "Keeping %s: %s could not evaluate it (%s)",
                getattr(t, "id", t), predicate.__qualname__, exc,
            )
            return True
    return _safe


def by_account(acc_id: str) -> Predicate:
    @fail_open
    def _filter(t: Transaction) -> bool:
        return touches_account(t, acc_id)
    return _filter


def by_visible_accounts(acc_ids: Iterable[str]) -> Predicate:
    allowed = frozenset(acc_ids)

    @fail_open
    def _filter(t: Transaction) -> bool:
        if not allowed:
            return True
        return t.account_id in allowed or t.to_account_id in allowed
    return _filter


def by_period(start, end) -> Predicate:
    """Inclusive on both ends; either end may be None."""
    @fail_open
    def _filter(t: Transaction) -> bool:
        when = to_datetime(t.date)
        if start is not None and when < start:
            return False
        if end is not None and when > end:
            return False
        return True
    return _filter


def by_date_range(start: Optional[str], end: Optional[str]) -> Predicate:
    """Explicit start/end override, whole days, inclusive."""
    lower = safe_parse_date(start) if start else None
    upper = safe_parse_date(end) if end else None
    if start and lower is None:
        logger.warning("Ignoring unparsable start date %r", start)
    if end and upper is None:
        logger.warning("Ignoring unparsable end date %r", end)
    return by_period(
        start_of_day(lower) if lower else None,
        end_of_day(upper) if upper else None,
    )


def by_amount_range(min_amount: Optional[float], max_amount: Optional[float]) -> Predicate:
    lower = min_amount if is_valid_amount(min_amount) else None
    upper = max_amount if is_valid_amount(max_amount) else None

    @fail_open
    def _filter(t: Transaction) -> bool:
        if lower is not None and t.amount < lower:
            return False
        if upper is not None and t.amount > upper:
            return False
        return True
    return _filter


def by_categories(categories: Iterable[str]) -> Predicate:
    wanted = frozenset(categories)

    @fail_open
    def _filter(t: Transaction) -> bool:
        return not wanted or t.category in wanted
    return _filter


def _searchable(t: Transaction) -> List[str]:
    participants = t.participants or ()
    if not isinstance(participants, (tuple, list)):
        participants = (participants,)
    values = [t.note, t.category, t.location, *participants]
    return [str(v).lower() for v in values if v is not None]


def by_search(term: str) -> Predicate:
    """Case-insensitive match on note, category, location and participants.

    Missing fields are skipped and other values are compared as text, so a
    malformed record only matches what it actually contains.
    """
    query = (term or "").strip().lower()

    def _filter(t: Transaction) -> bool:
        if not query:
            return True
        return any(query in field for field in _searchable(t))
    return _filter


def visible_accounts(accs: Iterable[Account], reporting_currency: str) -> Tuple[Account, ...]:
    """Accounts that make up the "all accounts" view."""
    return tuple(
        a for a in accs
        if not a.is_archived
        and not a.exclude_from_total
        and (a.currency or reporting_currency) == reporting_currency
    )


def visible_account_ids(accs: Iterable[Account], reporting_currency: str) -> Tuple[str, ...]:
    return tuple(a.id for a in visible_accounts(accs, reporting_currency))


def account_scope(acc_id: Optional[str], visible_ids: Iterable[str] = ()) -> Predicate:
    if acc_id:
        return by_account(acc_id)
    return by_visible_accounts(visible_ids)


def _keep(predicate: Predicate):
    return lambda items: tuple(filter(predicate, items))


def scope_transactions(
    trans: Iterable[Transaction], acc_id: Optional[str], visible_ids: Iterable[str] = ()
) -> Tuple[Transaction, ...]:
    return _keep(account_scope(acc_id, visible_ids))(trans)


def filter_transactions(
    trans: Iterable[Transaction],
    criteria: FilterCriteria,
    period=None,
    visible_ids: Iterable[str] = (),
) -> Tuple[Transaction, ...]:
    """Account scope, period, amount bounds, categories, then search.

    All stages are conjunctive; the order is fixed so a trace of what was
    dropped reads the same every time.
    """
    stages: List[Predicate] = [account_scope(criteria.account_id, visible_ids)]
    if period is not None:
        stages.append(by_period(*period.range()))
    if criteria.date_range:
        stages.append(by_date_range(*criteria.date_range))
    stages.append(by_amount_range(criteria.min_amount, criteria.max_amount))
    stages.append(by_categories(criteria.categories))
    stages.append(by_search(criteria.search))
    return pipe(tuple(trans), *(_keep(p) for p in stages))


def normalize_category_params(values) -> List[str]:
    """Category names from a deep link: trimmed, blanks dropped, first wins."""
    if values is None:
        return []
    if isinstance(values, str):
        values = [values]
    seen: List[str] = []
    for value in values:
        name = value.strip() if isinstance(value, str) else ""
        if name and name not in seen:
            seen.append(name)
    return seen


def _short_date(value: Optional[str]) -> Optional[str]:
    parsed = safe_parse_date(value) if value else None
    return f"{parsed:%b} {parsed.day}" if parsed else None


def describe_active_filters(criteria: FilterCriteria, currency: str = "USD") -> List[dict]:
    """Chips for the filters currently narrowing the list."""
    chips: List[dict] = []
    if criteria.search:
        chips.append({"key": f"search-{criteria.search}", "label": criteria.search, "type": "search"})
    if is_valid_amount(criteria.min_amount):
        chips.append({"key": "min", "label": f"Min {format_currency(criteria.min_amount, currency)}", "type": "min"})
    if is_valid_amount(criteria.max_amount):
        chips.append({"key": "max", "label": f"Max {format_currency(criteria.max_amount, currency)}", "type": "max"})
    start, end = criteria.date_range or (None, None)
    if _short_date(start):
        chips.append({"key": "start", "label": _short_date(start), "type": "start"})
    if _short_date(end):
        chips.append({"key": "end", "label": _short_date(end), "type": "end"})
    for category in sorted(criteria.categories):
        chips.append({"key": f"cat-{category}", "label": category, "type": "category", "value": category})
    return chips
