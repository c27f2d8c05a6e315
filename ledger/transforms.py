import re
from datetime import datetime
from functools import reduce
from typing import Collection, Dict, Iterable, List, Optional, Tuple, Union

from ledger.dates import day_key, day_title, safe_parse_date
from ledger.domain import EXPENSE, INCOME, TRANSFER, Account, DayGroup, Transaction
from ledger.functional import safe_account

UNASSIGNED_ACCOUNT = "Unassigned account"
UNKNOWN_ACCOUNT = "Unknown account"

# an account id, a set of ids standing for "all visible accounts", or nobody
PointOfView = Union[None, str, Collection[str]]

_ID_SUFFIX = re.compile(r"(\d+)$")


def _members(point_of_view: PointOfView) -> frozenset:
    if point_of_view is None:
        return frozenset()
    if isinstance(point_of_view, str):
        return frozenset((point_of_view,))
    return frozenset(point_of_view)


def transaction_delta(t: Transaction, point_of_view: PointOfView = None) -> float:
    """Signed effect of ``t`` on the balance seen from ``point_of_view``.

    A transfer only moves money when exactly one side belongs to the point of
    view, so a transfer between two visible accounts nets to zero.
    """
    if t.type == INCOME:
        return t.amount
    if t.type == EXPENSE:
        return -t.amount
    if t.type == TRANSFER:
        members = _members(point_of_view)
        leaves = t.account_id in members
        arrives = t.to_account_id in members
        if leaves and not arrives:
            return -t.amount
        if arrives and not leaves:
            return t.amount
    return 0.0


def touches_account(t: Transaction, acc_id: str) -> bool:
    return t.account_id == acc_id or t.to_account_id == acc_id


def account_balance(trans: Iterable[Transaction], acc_id: str) -> float:
    return reduce(
        lambda acc, t: acc + transaction_delta(t, acc_id) if touches_account(t, acc_id) else acc,
        trans,
        0.0,
    )


def reportable(trans: Iterable[Transaction]) -> Tuple[Transaction, ...]:
    return tuple(t for t in trans if not t.exclude_from_reports)


def creation_rank(t: Transaction) -> Optional[int]:
    """Explicit sequence, else the numeric suffix of the id ("tx-42" -> 42)."""
    if t.sequence is not None:
        return t.sequence
    match = _ID_SUFFIX.search(t.id or "")
    return int(match.group(1)) if match else None


def _creation_key(t: Transaction) -> Tuple[bool, int]:
    rank = creation_rank(t)
    return rank is not None, rank or 0


def _date_key(t: Transaction) -> datetime:
    return safe_parse_date(t.date) or datetime.min


def sort_by_recency(trans: Iterable[Transaction]) -> List[Transaction]:
    """Newest first; same instant -> newest created first; unranked and undated last."""
    by_creation = sorted(trans, key=_creation_key, reverse=True)
    return sorted(by_creation, key=_date_key, reverse=True)


def group_by_day(trans: Iterable[Transaction], point_of_view: PointOfView = None) -> List[DayGroup]:
    buckets: Dict[str, dict] = {}
    for t in sort_by_recency(trans):
        bucket = buckets.setdefault(
            day_key(t.date),
            {"transactions": [], "income": 0.0, "expense": 0.0, "net": 0.0},
        )
        bucket["transactions"].append(t)
        if t.type == INCOME:
            bucket["income"] += t.amount
            bucket["net"] += t.amount
        elif t.type == EXPENSE:
            bucket["expense"] += t.amount
            bucket["net"] -= t.amount
        else:
            bucket["net"] += transaction_delta(t, point_of_view)

    return [
        DayGroup(
            key=key,
            title=day_title(key),
            transactions=tuple(bucket["transactions"]),
            daily_income=bucket["income"],
            daily_expense=bucket["expense"],
            daily_net=bucket["net"],
        )
        for key, bucket in buckets.items()
    ]


def visual_state(t: Transaction, point_of_view: PointOfView = None) -> Tuple[str, str]:
    """(prefix, variant) hint for showing an amount: ("+", "income") etc."""
    if t.type == INCOME:
        return "+", "income"
    if t.type == EXPENSE:
        return "−", "expense"

    delta = transaction_delta(t, point_of_view)
    if not point_of_view or delta == 0:
        return "", "neutral"
    return ("+", "income") if delta > 0 else ("−", "expense")


def resolve_account_name(accs: Iterable[Account], acc_id: Optional[str]) -> str:
    if not acc_id:
        return UNASSIGNED_ACCOUNT
    return safe_account(accs, acc_id).map(lambda a: a.name).get_or_else(UNKNOWN_ACCOUNT)
