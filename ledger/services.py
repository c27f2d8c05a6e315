import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Sequence, Tuple

from ledger.breakdown import category_breakdown
from ledger.domain import (
    EXPENSE,
    INCOME,
    FilterCriteria,
    LedgerSnapshot,
    PeriodOverview,
    PeriodSummary,
    RecurringTransaction,
    Transaction,
)
from ledger.filters import by_period, filter_transactions, scope_transactions, visible_account_ids
from ledger.functional import partition_valid, validate_recurring, validate_transaction
from ledger.periods import Period, build_monthly_periods, resolve_period
from ledger.recurring import due_in_period
from ledger.summary import NO_CHANGE, summarize
from ledger.transforms import PointOfView, group_by_day, reportable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportContext:
    """Everything a calculator may read, computed once per overview."""
    period: Period
    account_id: Optional[str]
    point_of_view: PointOfView
    scoped: Tuple[Transaction, ...]        # account scope, whole history
    in_period: Tuple[Transaction, ...]     # scoped and inside the period
    reportable: Tuple[Transaction, ...]    # in_period minus excluded ones
    filtered: Tuple[Transaction, ...]      # in_period narrowed by the user criteria
    recurring: Tuple[RecurringTransaction, ...]


def day_sections(ctx: ReportContext) -> Dict[str, Any]:
    return {"sections": tuple(group_by_day(ctx.filtered, ctx.point_of_view))}


def period_summary(ctx: ReportContext) -> Dict[str, Any]:
    return {"summary": summarize(ctx.scoped, ctx.period, ctx.point_of_view)}


def expense_breakdown(ctx: ReportContext) -> Dict[str, Any]:
    return {"expense_breakdown": tuple(category_breakdown(ctx.reportable, EXPENSE))}


def income_breakdown(ctx: ReportContext) -> Dict[str, Any]:
    return {"income_breakdown": tuple(category_breakdown(ctx.reportable, INCOME))}


def due_recurring(ctx: ReportContext) -> Dict[str, Any]:
    return {"due_recurring": tuple(due_in_period(ctx.recurring, ctx.period, ctx.account_id))}


DEFAULT_CALCULATORS = (day_sections, period_summary, expense_breakdown, income_breakdown, due_recurring)

EMPTY_SUMMARY = PeriodSummary(
    opening_balance=0.0,
    closing_balance=0.0,
    net=0.0,
    income=0.0,
    expense=0.0,
    percentage_change=NO_CHANGE,
)


class ReportService:
    """Facade building a period overview out of injected calculators.

    calculators: sequence of functions taking a ReportContext and returning a
    dict of partial results. A calculator that fails is recorded in
    ``errors`` and its part of the overview keeps its empty default.
    """

    def __init__(self, calculators: Sequence[Callable[[ReportContext], Dict[str, Any]]] = DEFAULT_CALCULATORS):
        self.calculators = calculators

    def build_context(
        self,
        snapshot: LedgerSnapshot,
        criteria: FilterCriteria,
        periods: Optional[List[Period]] = None,
        today: Optional[date] = None,
    ) -> Tuple[ReportContext, Tuple[str, ...]]:
        transactions, tx_errors = partition_valid(snapshot.transactions, validate_transaction)
        recurring, rec_errors = partition_valid(snapshot.recurring, validate_recurring)
        skipped = []
        for error in tx_errors + rec_errors:
            logger.warning("Skipping malformed record: %s", error["message"])
            record_id = error.get("transaction_id") or error.get("recurring_id")
            if record_id:
                skipped.append(record_id)

        periods = periods or build_monthly_periods(transactions, today=today)
        period = resolve_period(periods, criteria.period_key, today)

        visible_ids = visible_account_ids(snapshot.accounts, snapshot.reporting_currency)
        visible: FrozenSet[str] = frozenset(visible_ids)
        point_of_view = criteria.account_id or (visible or None)

        scoped = scope_transactions(transactions, criteria.account_id, visible_ids)
        in_period = tuple(filter(by_period(*period.range()), scoped))
        ctx = ReportContext(
            period=period,
            account_id=criteria.account_id,
            point_of_view=point_of_view,
            scoped=scoped,
            in_period=in_period,
            reportable=reportable(in_period),
            filtered=filter_transactions(transactions, criteria, period, visible_ids),
            recurring=recurring,
        )
        return ctx, tuple(skipped)

    def period_overview(
        self,
        snapshot: LedgerSnapshot,
        criteria: Optional[FilterCriteria] = None,
        periods: Optional[List[Period]] = None,
        today: Optional[date] = None,
    ) -> PeriodOverview:
        ctx, skipped = self.build_context(snapshot, criteria or FilterCriteria(), periods, today)

        results: Dict[str, Any] = {
            "sections": (),
            "summary": EMPTY_SUMMARY,
            "expense_breakdown": (),
            "income_breakdown": (),
            "due_recurring": (),
        }
        errors = []
        for calc in self.calculators:
            name = getattr(calc, "__name__", str(calc))
            try:
                out = calc(ctx)
            except Exception as e:
                logger.exception("Calculator %s failed for period %s", name, ctx.period.key)
                errors.append(f"{name}: {e}")
                continue
            if isinstance(out, dict):
                results.update({k: v for k, v in out.items() if k in results})

        return PeriodOverview(
            period=ctx.period,
            filtered_transactions=ctx.filtered,
            skipped=skipped,
            errors=tuple(errors),
            **results,
        )


def build_period_overview(
    snapshot: LedgerSnapshot,
    criteria: Optional[FilterCriteria] = None,
    periods: Optional[List[Period]] = None,
    today: Optional[date] = None,
) -> PeriodOverview:
    return ReportService().period_overview(snapshot, criteria, periods, today)
