from ledger.domain import Account, Transaction
from ledger.transforms import (
    UNASSIGNED_ACCOUNT,
    UNKNOWN_ACCOUNT,
    account_balance,
    creation_rank,
    group_by_day,
    reportable,
    resolve_account_name,
    sort_by_recency,
    transaction_delta,
    visual_state,
)


def make_tx(id, amount, type, date, account_id="A", to_account_id=None, **extra):
    return Transaction(
        id=id, amount=amount, note="", type=type, category="Misc",
        date=date, account_id=account_id, to_account_id=to_account_id, **extra,
    )


def test_transfer_delta_depends_on_point_of_view():
    t = make_tx("t1", 50, "transfer", "2025-01-05", "A", "B")
    assert transaction_delta(t, "A") == -50
    assert transaction_delta(t, "B") == 50
    assert transaction_delta(t, "C") == 0
    assert transaction_delta(t, None) == 0


def test_transfer_inside_aggregate_nets_to_zero():
    t = make_tx("t1", 50, "transfer", "2025-01-05", "A", "B")
    assert transaction_delta(t, frozenset({"A", "B"})) == 0
    assert transaction_delta(t, frozenset({"A", "C"})) == -50


def test_income_and_expense_ignore_point_of_view():
    assert transaction_delta(make_tx("t1", 100, "income", "2025-01-05"), "Z") == 100
    assert transaction_delta(make_tx("t2", 40, "expense", "2025-01-05")) == -40
    assert transaction_delta(make_tx("t3", 40, "refund", "2025-01-05"), "A") == 0


def test_account_balance():
    trans = (
        make_tx("t1", 100, "income", "2025-01-01"),
        make_tx("t2", 30, "expense", "2025-01-02"),
        make_tx("t3", 20, "transfer", "2025-01-03", "A", "B"),
        make_tx("t4", 70, "income", "2025-01-04", "B"),
    )
    assert account_balance(trans, "A") == 50
    assert account_balance(trans, "B") == 90


def test_reportable_drops_excluded():
    trans = (
        make_tx("t1", 100, "income", "2025-01-01"),
        make_tx("t2", 30, "expense", "2025-01-02", exclude_from_reports=True),
    )
    assert [t.id for t in reportable(trans)] == ["t1"]


def test_creation_rank():
    assert creation_rank(make_tx("tx-42", 1, "income", "2025-01-01")) == 42
    assert creation_rank(make_tx("tx-1", 1, "income", "2025-01-01", sequence=7)) == 7
    assert creation_rank(make_tx("abc", 1, "income", "2025-01-01")) is None


def test_sort_by_recency_breaks_ties_by_creation():
    trans = (
        make_tx("t-2", 1, "expense", "2025-01-05T10:00:00"),
        make_tx("t-10", 1, "expense", "2025-01-05T10:00:00"),
        make_tx("legacy", 1, "expense", "2025-01-05T10:00:00"),
        make_tx("t-3", 1, "expense", "2025-01-06"),
        make_tx("t-4", 1, "expense", "broken"),
    )
    assert [t.id for t in sort_by_recency(trans)] == ["t-3", "t-10", "t-2", "legacy", "t-4"]


def test_group_by_day():
    trans = (
        make_tx("t1", 100, "income", "2025-01-05T09:00:00"),
        make_tx("t2", 40, "expense", "2025-01-05T18:00:00"),
        make_tx("t3", 25, "transfer", "2025-01-04", "A", "B"),
        make_tx("t4", 5, "expense", "whenever"),
    )
    groups = group_by_day(trans, "A")

    assert [g.key for g in groups] == ["2025-01-05", "2025-01-04", "undated"]
    first = groups[0]
    assert first.title == "Sunday, Jan 5"
    assert [t.id for t in first.transactions] == ["t2", "t1"]
    assert (first.daily_income, first.daily_expense, first.daily_net) == (100, 40, 60)
    assert groups[1].daily_net == -25
    assert groups[1].daily_expense == 0
    assert groups[2].title == "Undated"


def test_visual_state():
    transfer = make_tx("t1", 50, "transfer", "2025-01-05", "A", "B")
    assert visual_state(make_tx("t2", 1, "income", "2025-01-05")) == ("+", "income")
    assert visual_state(make_tx("t3", 1, "expense", "2025-01-05")) == ("−", "expense")
    assert visual_state(transfer) == ("", "neutral")
    assert visual_state(transfer, "B") == ("+", "income")
    assert visual_state(transfer, "A") == ("−", "expense")


def test_resolve_account_name():
    accs = (Account("A", "Checking", "USD"),)
    assert resolve_account_name(accs, "A") == "Checking"
    assert resolve_account_name(accs, "Z") == UNKNOWN_ACCOUNT
    assert resolve_account_name(accs, None) == UNASSIGNED_ACCOUNT
