from datetime import date

from ledger.domain import FilterCriteria, LedgerSnapshot, Transaction
from ledger.memo import cached_period_overview, clear_caches, monthly_periods


def make_snapshot():
    trans = (
        Transaction("t1", 100, "Pay", "income", "Salary", "2025-01-05", account_id="a1"),
        Transaction("t2", 40, "Food", "expense", "Groceries", "2025-01-10", account_id="a1"),
    )
    return LedgerSnapshot(transactions=trans)


def test_monthly_periods_cached_on_inputs():
    clear_caches()
    snap = make_snapshot()
    first = monthly_periods(snap.transactions, date(2025, 1, 20))
    second = monthly_periods(snap.transactions, date(2025, 1, 20))
    assert first is second
    assert monthly_periods.cache_info().hits == 1


def test_cached_overview_reused_for_equal_inputs():
    clear_caches()
    today = date(2025, 1, 20)
    first = cached_period_overview(make_snapshot(), FilterCriteria(), today)
    second = cached_period_overview(make_snapshot(), None, today)
    assert first is second
    assert first.summary.net == 60


def test_cached_overview_changes_with_criteria():
    clear_caches()
    today = date(2025, 1, 20)
    all_items = cached_period_overview(make_snapshot(), today=today)
    food = cached_period_overview(make_snapshot(), FilterCriteria(search="food"), today)
    assert all_items is not food
    assert [t.id for t in food.filtered_transactions] == ["t2"]


def test_cached_overview_accepts_plain_set_of_categories():
    clear_caches()
    overview = cached_period_overview(make_snapshot(), FilterCriteria(categories={"Groceries"}), date(2025, 1, 20))
    assert [t.id for t in overview.filtered_transactions] == ["t2"]


def test_monthly_periods_cache_is_bounded():
    assert monthly_periods.cache_info().maxsize == 64
