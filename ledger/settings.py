import json
from dataclasses import dataclass, field
from typing import Optional, Tuple

from ledger.amounts import LocaleSeparators, US_SEPARATORS, system_separators
from ledger.domain import Account, BudgetGoal, Category, LedgerSnapshot, RecurringTransaction, Transaction
from ledger.periods import DEFAULT_MONTHS_TO_DISPLAY


@dataclass(frozen=True)
class LedgerSettings:
    reporting_currency: str = "USD"
    months_to_display: int = DEFAULT_MONTHS_TO_DISPLAY
    baseline_start: Optional[str] = None   # "YYYY-MM-DD", replaces the trailing window
    separators: LocaleSeparators = field(default=US_SEPARATORS)


def _frozen_row(row: dict) -> dict:
    # lists become tuples so records stay hashable
    return {k: tuple(v) if isinstance(v, list) else v for k, v in row.items()}


def _separators(value) -> LocaleSeparators:
    # "system" follows the process locale
    if value == "system":
        return system_separators()
    value = value or {}
    return LocaleSeparators(
        decimal=value.get("decimal", US_SEPARATORS.decimal),
        group=value.get("group", US_SEPARATORS.group),
    )


def settings_from_profile(profile: dict) -> LedgerSettings:
    return LedgerSettings(
        reporting_currency=(profile.get("currency") or "USD").upper(),
        months_to_display=int(profile.get("months_to_display", DEFAULT_MONTHS_TO_DISPLAY)),
        baseline_start=profile.get("baseline_start"),
        separators=_separators(profile.get("separators")),
    )


def load_seed(path: str) -> Tuple[LedgerSettings, LedgerSnapshot]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    settings = settings_from_profile(data.get("profile") or {})
    snapshot = LedgerSnapshot(
        transactions=tuple(Transaction(**_frozen_row(t)) for t in data.get("transactions", [])),
        accounts=tuple(Account(**a) for a in data.get("accounts", [])),
        recurring=tuple(RecurringTransaction(**r) for r in data.get("recurring", [])),
        reporting_currency=settings.reporting_currency,
        categories=tuple(Category(**c) for c in data.get("categories", [])),
        budgets=tuple(BudgetGoal(**b) for b in data.get("budgets", [])),
    )
    return settings, snapshot
