import logging
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional, Tuple

from ledger.dates import safe_parse_date
from ledger.domain import EXPENSE, WEEK, BudgetGoal, Category, Transaction
from ledger.functional import Either, Left, Right
from ledger.periods import last_day_of_month

logger = logging.getLogger(__name__)


def budget_window(period: str, today: Optional[date] = None) -> Tuple[datetime, datetime]:
    """Current window of a goal: Monday to Sunday for weekly ones, else the calendar month."""
    today = today or date.today()
    if period == WEEK:
        first = today - timedelta(days=today.weekday())
        last = first + timedelta(days=6)
    else:
        first = today.replace(day=1)
        last = last_day_of_month(first)
    return datetime.combine(first, time.min), datetime.combine(last, time.max)


def _find_category(categories: Iterable[Category], key: str) -> Optional[Category]:
    return next((c for c in categories if c.id == key or c.name == key), None)


def category_matches(
    tx_category: Optional[str], budget_category: Optional[str], categories: Iterable[Category] = ()
) -> bool:
    """Same category as the budget, or one of its direct children.

    Categories are looked up by id or name. When either side is not a known
    category the labels are compared as they are.
    """
    if not budget_category:
        return True
    if not tx_category:
        return False
    categories = tuple(categories)
    budget_cat = _find_category(categories, budget_category)
    tx_cat = _find_category(categories, tx_category)
    if budget_cat is None or tx_cat is None:
        return tx_category == budget_category
    return tx_cat.id == budget_cat.id or tx_cat.parent_id == budget_cat.id


def budget_spending(
    goal: BudgetGoal,
    trans: Iterable[Transaction],
    categories: Iterable[Category] = (),
    today: Optional[date] = None,
) -> float:
    """Reportable expenses counted against ``goal`` in its current window.

    A goal created after the window ends has spent nothing yet. Expenses with
    an unreadable date belong to no window and are left out.
    """
    start, end = budget_window(goal.period, today)
    created = safe_parse_date(goal.created_at) if goal.created_at else None
    if created is not None and created > end:
        return 0.0

    categories = tuple(categories)
    total = 0.0
    for t in trans:
        if t.type != EXPENSE or t.exclude_from_reports:
            continue
        when = safe_parse_date(t.date)
        if when is None:
            logger.debug("Leaving %s out of budget %s: unreadable date %r", t.id, goal.id, t.date)
            continue
        if start <= when <= end and category_matches(t.category, goal.category, categories):
            total += t.amount
    return total


def check_budget(
    goal: BudgetGoal,
    trans: Iterable[Transaction],
    categories: Iterable[Category] = (),
    today: Optional[date] = None,
) -> Either[dict, BudgetGoal]:
    spent = budget_spending(goal, trans, categories, today)
    if spent > goal.target:
        return Left({
            "error": "budget_exceeded",
            "message": f"Budget {goal.name} exceeded",
            "budget_id": goal.id,
            "target": goal.target,
            "spent": spent,
            "over_budget": spent - goal.target,
        })
    return Right(goal)
