import math
from datetime import datetime
from typing import Iterable, Optional

from ledger.dates import safe_parse_date
from ledger.domain import EXPENSE, INCOME, Account, MonthlySummary, PeriodSummary, Transaction
from ledger.transforms import PointOfView, reportable, transaction_delta

NO_CHANGE = "—"


def format_percentage_change(current: float, previous: float) -> str:
    if previous == 0:
        return NO_CHANGE
    change = (current - previous) / abs(previous) * 100
    return f"{change:+.1f}%"


def summarize(
    scoped: Iterable[Transaction], period, point_of_view: PointOfView = None
) -> PeriodSummary:
    """Opening/closing balance and totals for one period.

    ``scoped`` is the account scoped history, not only the period, since the
    opening balance is everything reportable dated before the period starts.
    A transaction whose date cannot be read is counted inside the period and
    never in the opening balance.
    """
    start, end = period.range()
    opening = net = income = expense = 0.0

    for t in reportable(scoped):
        when = safe_parse_date(t.date)
        delta = transaction_delta(t, point_of_view)
        if when is not None and when < start:
            opening += delta
            continue
        if when is not None and when > end:
            continue
        net += delta
        if t.type == INCOME:
            income += t.amount
        elif t.type == EXPENSE:
            expense += t.amount

    closing = opening + net
    return PeriodSummary(
        opening_balance=opening,
        closing_balance=closing,
        net=net,
        income=income,
        expense=expense,
        percentage_change=format_percentage_change(closing, opening),
    )


def _initial_balance(value) -> float:
    try:
        return float(value) if math.isfinite(value) else 0.0
    except TypeError:
        return 0.0


def opening_seed(
    accs: Iterable[Account], visible_ids: Iterable[str], selected_id: Optional[str]
) -> float:
    """Initial balance of the selected account, or of every visible one."""
    accs = tuple(accs)
    if selected_id:
        return next((_initial_balance(a.initial_balance) for a in accs if a.id == selected_id), 0.0)
    visible = frozenset(visible_ids)
    return sum(_initial_balance(a.initial_balance) for a in accs if a.id in visible)


def calculate_monthly_summary(
    trans: Iterable[Transaction],
    accs: Iterable[Account],
    visible_ids: Iterable[str],
    selected_id: Optional[str],
    start: datetime,
    end: datetime,
) -> MonthlySummary:
    """Month totals with the balance carried past the month end.

    Unlike ``summarize`` this seeds the opening balance with the accounts'
    initial balances and also reports what happened after the month, so the
    ending balance matches the account balance today.
    """
    visible_ids = tuple(visible_ids)
    point_of_view = selected_id or (frozenset(visible_ids) or None)
    opening = opening_seed(accs, visible_ids, selected_id)
    income = expense = month_net = post_month_net = 0.0

    for t in trans:
        when = safe_parse_date(t.date)
        delta = transaction_delta(t, point_of_view)
        if when is not None and when < start:
            opening += delta
        elif when is None or when <= end:
            if t.type == INCOME:
                income += t.amount
            elif t.type == EXPENSE:
                expense += t.amount
            month_net += delta
        else:
            post_month_net += delta

    return MonthlySummary(
        income=income,
        expense=expense,
        opening_balance=opening,
        month_net=month_net,
        post_month_net=post_month_net,
        ending_balance=opening + month_net + post_month_net,
    )
