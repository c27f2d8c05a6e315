from dataclasses import dataclass, field
from typing import Optional, Tuple

INCOME = "income"
EXPENSE = "expense"
TRANSFER = "transfer"
TRANSACTION_TYPES = (INCOME, EXPENSE, TRANSFER)

FREQUENCIES = ("weekly", "biweekly", "monthly")

WEEK = "week"
MONTH = "month"


@dataclass(frozen=True)
class Account:
    id: str
    name: str
    currency: str
    balance: float = 0.0          # maintained by the store, never recomputed here
    initial_balance: float = 0.0
    is_archived: bool = False
    exclude_from_total: bool = False


@dataclass(frozen=True)
class Transaction:
    id: str
    amount: float                 # always positive, sign comes from type
    note: str
    type: str                     # income | expense | transfer
    category: str
    date: str                     # ISO date or timestamp, e.g. "2025-01-05T10:00:00"
    account_id: Optional[str] = None
    to_account_id: Optional[str] = None
    participants: Tuple[str, ...] = ()
    location: Optional[str] = None
    exclude_from_reports: bool = False
    currency: Optional[str] = None
    sequence: Optional[int] = None  # creation order, newer is higher


@dataclass(frozen=True)
class RecurringTransaction:
    id: str
    amount: float
    category: str
    type: str
    frequency: str                # weekly | biweekly | monthly
    next_occurrence: str
    account_id: Optional[str] = None
    to_account_id: Optional[str] = None
    is_active: bool = True
    note: str = ""


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    parent_id: Optional[str] = None


@dataclass(frozen=True)
class BudgetGoal:
    id: str
    name: str
    target: float
    period: str = "month"         # week | month
    category: Optional[str] = None  # category id or name, None covers every expense
    created_at: Optional[str] = None


@dataclass(frozen=True)
class PeriodSummary:
    opening_balance: float
    closing_balance: float
    net: float
    income: float
    expense: float
    percentage_change: str


@dataclass(frozen=True)
class MonthlySummary:
    income: float
    expense: float
    opening_balance: float
    month_net: float
    post_month_net: float
    ending_balance: float


@dataclass(frozen=True)
class CategoryBreakdownEntry:
    category: str
    amount: float
    percentage: int


@dataclass(frozen=True)
class DayGroup:
    key: str                      # YYYY-MM-DD, or "undated"
    title: str
    transactions: Tuple[Transaction, ...]
    daily_income: float
    daily_expense: float
    daily_net: float


@dataclass(frozen=True)
class FilterCriteria:
    """Every filter the transaction list understands, with its neutral default.

    Amount bounds are already parsed; use ``FilterCriteria.from_params`` to
    build one from raw text coming out of inputs or deep-link parameters.
    """
    search: str = ""
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None
    categories: frozenset = field(default_factory=frozenset)
    account_id: Optional[str] = None
    date_range: Optional[Tuple[Optional[str], Optional[str]]] = None
    period_key: Optional[str] = None

    def __post_init__(self):
        # sets and lists from callers become hashable so criteria can key a cache
        categories = self.categories or ()
        if isinstance(categories, str):
            categories = (categories,)
        object.__setattr__(self, "categories", frozenset(categories))
        if self.date_range is not None:
            object.__setattr__(self, "date_range", tuple(self.date_range))

    @classmethod
    def from_params(
        cls,
        search: str = "",
        min_amount: str = "",
        max_amount: str = "",
        categories=(),
        account_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        period_key: Optional[str] = None,
        separators=None,
    ) -> "FilterCriteria":
        # local imports keep domain free of module cycles
        from ledger.amounts import parse_amount_filter
        from ledger.filters import normalize_category_params

        date_range = (start_date, end_date) if (start_date or end_date) else None
        return cls(
            search=(search or "").strip(),
            min_amount=parse_amount_filter(min_amount or "", separators),
            max_amount=parse_amount_filter(max_amount or "", separators),
            categories=frozenset(normalize_category_params(categories)),
            account_id=account_id or None,
            date_range=date_range,
            period_key=period_key or None,
        )


@dataclass(frozen=True)
class LedgerSnapshot:
    transactions: Tuple[Transaction, ...] = ()
    accounts: Tuple[Account, ...] = ()
    recurring: Tuple[RecurringTransaction, ...] = ()
    reporting_currency: str = "USD"
    categories: Tuple[Category, ...] = ()
    budgets: Tuple[BudgetGoal, ...] = ()


@dataclass(frozen=True)
class PeriodOverview:
    period: object                # ledger.periods.Period
    sections: Tuple[DayGroup, ...]
    summary: PeriodSummary
    expense_breakdown: Tuple[CategoryBreakdownEntry, ...]
    income_breakdown: Tuple[CategoryBreakdownEntry, ...]
    due_recurring: Tuple[RecurringTransaction, ...]
    filtered_transactions: Tuple[Transaction, ...]
    skipped: Tuple[str, ...] = ()  # ids of malformed records left out
    errors: Tuple[str, ...] = ()
