from datetime import date, datetime, time

from ledger.dates import UNDATED_KEY, day_key, day_title, safe_parse_date, to_datetime
from ledger.domain import Transaction
from ledger.periods import (
    FUTURE_KEY,
    add_months,
    build_monthly_periods,
    future_period,
    monthly_period,
    resolve_period,
)


def make_tx(id, date, amount=10, type="expense"):
    return Transaction(id=id, amount=amount, note="", type=type, category="Misc", date=date, account_id="a1")


def test_to_datetime_and_safe_parse():
    assert to_datetime("2025-01-05") == datetime(2025, 1, 5)
    assert to_datetime(date(2025, 1, 5)) == datetime(2025, 1, 5)
    assert safe_parse_date("not-a-date") is None
    assert safe_parse_date(None) is None
    assert safe_parse_date("2025-01-05T10:30:00") == datetime(2025, 1, 5, 10, 30)


def test_day_key_and_title():
    assert day_key("2025-01-05T23:59:00") == "2025-01-05"
    assert day_key("garbage") == UNDATED_KEY
    assert day_title("2025-01-05") == "Sunday, Jan 5"
    assert day_title(UNDATED_KEY) == "Undated"


def test_add_months_crosses_years():
    assert add_months(date(2025, 11, 1), 3) == date(2026, 2, 1)
    assert add_months(date(2025, 1, 1), -1) == date(2024, 12, 1)


def test_monthly_period_range_is_inclusive_month():
    period = monthly_period(date(2024, 2, 17))
    start, end = period.range()
    assert period.key == "2024-02"
    assert period.label == "Feb 2024"
    assert start == datetime(2024, 2, 1)
    assert end == datetime.combine(date(2024, 2, 29), time.max)


def test_period_range_is_pure():
    period = monthly_period(date(2025, 3, 1))
    assert period.range() == period.range()


def test_future_period_starts_tomorrow():
    start, end = future_period(date(2025, 11, 15)).range()
    assert start == datetime(2025, 11, 16)
    assert end.date() == date(2125, 12, 31)


def test_build_monthly_periods_reaches_oldest_transaction():
    periods = build_monthly_periods([make_tx("t1", "2024-01-10")], today=date(2025, 11, 15))
    keys = [p.key for p in periods]

    assert keys[0] == "2024-01"
    assert keys.index(FUTURE_KEY) == keys.index("2025-11") + 1
    assert "2024-07" in keys


def test_build_monthly_periods_default_window():
    periods = build_monthly_periods(today=date(2025, 11, 15))
    keys = [p.key for p in periods if not p.is_future]
    assert len(keys) == 12
    assert keys[0] == "2024-12"
    assert keys[-1] == "2025-11"
    assert periods[-1].is_future


def test_build_monthly_periods_ignores_bad_dates():
    periods = build_monthly_periods([make_tx("t1", "oops")], months=1, today=date(2025, 11, 15))
    assert [p.key for p in periods] == ["2025-11", FUTURE_KEY]


def test_build_monthly_periods_with_baseline():
    periods = build_monthly_periods(today=date(2025, 11, 15), start_from="2025-08-20")
    assert [p.key for p in periods] == ["2025-08", "2025-09", "2025-10", "2025-11", FUTURE_KEY]


def test_resolve_period_falls_back_to_current_month():
    periods = build_monthly_periods(today=date(2025, 11, 15))
    assert resolve_period(periods, "2025-05").key == "2025-05"
    assert resolve_period(periods, "1999-01", today=date(2025, 11, 15)).key == "2025-11"
    assert resolve_period(periods, None, today=date(2025, 11, 15)).key == "2025-11"
    assert resolve_period(periods, FUTURE_KEY).is_future
    assert resolve_period([], "2025-05") is None
