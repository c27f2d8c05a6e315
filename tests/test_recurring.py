from datetime import date

from ledger.domain import RecurringTransaction
from ledger.periods import monthly_period
from ledger.recurring import due_in_period, next_due


def make_rec(id, next_occurrence, account_id="a1", type="expense", **extra):
    return RecurringTransaction(
        id=id, amount=10, category="Bills", type=type, frequency="monthly",
        next_occurrence=next_occurrence, account_id=account_id, **extra,
    )


def make_sample():
    return (
        make_rec("r1", "2025-01-31T20:00:00"),
        make_rec("r2", "2025-02-01"),
        make_rec("r3", "2025-01-15", account_id="a2"),
        make_rec("r4", "2025-01-20", is_active=False),
        make_rec("r5", "soon"),
    )


def test_due_in_period_includes_month_end_and_undated():
    due = due_in_period(make_sample(), monthly_period(date(2025, 1, 1)))
    assert [r.id for r in due] == ["r1", "r3", "r4", "r5"]


def test_due_in_period_for_account_and_active_only():
    due = due_in_period(make_sample(), monthly_period(date(2025, 1, 1)), acc_id="a1", active_only=True)
    assert [r.id for r in due] == ["r1", "r5"]


def test_due_in_period_matches_transfer_destination():
    transfer = make_rec("r6", "2025-01-10", type="transfer", to_account_id="a2")
    due = due_in_period((transfer,), monthly_period(date(2025, 1, 1)), acc_id="a2")
    assert [r.id for r in due] == ["r6"]


def test_next_due():
    assert next_due(make_sample()).id == "r3"
    assert next_due((make_rec("r5", "soon"),)) is None
    assert next_due(()) is None
