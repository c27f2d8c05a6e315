from datetime import date, datetime, time
from pathlib import Path

import pytest

from ledger.budgets import budget_spending, budget_window, category_matches, check_budget
from ledger.domain import BudgetGoal, Category, Transaction
from ledger.settings import load_seed

SEED = Path(__file__).resolve().parent.parent / "data" / "seed.json"

CATEGORIES = (
    Category("food", "Food"),
    Category("groceries", "Groceries", parent_id="food"),
    Category("dining", "Dining", parent_id="food"),
    Category("fun", "Entertainment"),
)


def make_tx(id, amount, category, date, type="expense", **extra):
    return Transaction(id=id, amount=amount, note="", type=type, category=category, date=date, **extra)


def make_sample():
    return (
        make_tx("t1", 30, "Groceries", "2025-01-13T09:00:00"),
        make_tx("t2", 20, "Dining", "2025-01-19T22:00:00"),
        make_tx("t3", 10, "Food", "2025-01-12"),
        make_tx("t4", 99, "Groceries", "2025-01-14", exclude_from_reports=True),
        make_tx("t5", 500, "Groceries", "2025-01-14", type="income"),
        make_tx("t6", 15, "Entertainment", "2025-01-15"),
        make_tx("t7", 7, "Groceries", "garbage"),
    )


TODAY = date(2025, 1, 15)


def test_budget_window_week_runs_monday_to_sunday():
    start, end = budget_window("week", TODAY)
    assert start == datetime(2025, 1, 13)
    assert end == datetime.combine(date(2025, 1, 19), time.max)
    assert budget_window("week", date(2025, 1, 19))[0] == datetime(2025, 1, 13)


def test_budget_window_month():
    start, end = budget_window("month", TODAY)
    assert start == datetime(2025, 1, 1)
    assert end.date() == date(2025, 1, 31)


def test_category_matches_parent_and_children():
    assert category_matches("Groceries", "food", CATEGORIES)
    assert category_matches("Food", "Food", CATEGORIES)
    assert not category_matches("Food", "Groceries", CATEGORIES)
    assert not category_matches("Entertainment", "food", CATEGORIES)
    assert category_matches("Travel", "Travel", CATEGORIES)
    assert category_matches("Travel", None, CATEGORIES)
    assert not category_matches("", "food", CATEGORIES)


def test_weekly_spending_counts_category_tree():
    goal = BudgetGoal("b1", "Food", target=100, period="week", category="food")
    assert budget_spending(goal, make_sample(), CATEGORIES, TODAY) == 50


def test_monthly_spending_without_category_covers_all_expenses():
    goal = BudgetGoal("b1", "Everything", target=100, period="month")
    assert budget_spending(goal, make_sample(), CATEGORIES, TODAY) == 75


def test_goal_created_after_window_has_spent_nothing():
    goal = BudgetGoal("b1", "Food", target=100, period="week", category="food", created_at="2025-02-01")
    assert budget_spending(goal, make_sample(), CATEGORIES, TODAY) == 0


def test_check_budget():
    under = BudgetGoal("b1", "Food", target=100, period="week", category="food")
    assert check_budget(under, make_sample(), CATEGORIES, TODAY).is_right()

    over = BudgetGoal("b2", "Food", target=40, period="week", category="food")
    error = check_budget(over, make_sample(), CATEGORIES, TODAY).get_error()
    assert error["error"] == "budget_exceeded"
    assert error["spent"] == 50
    assert error["over_budget"] == 10


def test_seed_budgets():
    _, snapshot = load_seed(str(SEED))
    today = date(2026, 10, 17)
    food, fun = snapshot.budgets
    assert budget_spending(food, snapshot.transactions, snapshot.categories, today) == pytest.approx(141.8)
    assert check_budget(food, snapshot.transactions, snapshot.categories, today).is_right()
    assert check_budget(fun, snapshot.transactions, snapshot.categories, today).get_error()["over_budget"] == pytest.approx(3.75)
