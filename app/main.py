import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import logging
from datetime import date

import streamlit as st

from app.views import breakdown_figure, sections_frame, transactions_frame, trend_figure, trend_frame
from ledger.amounts import reformat_while_typing
from ledger.budgets import budget_spending, check_budget
from ledger.currency import format_currency, format_currency_compact
from ledger.domain import FilterCriteria
from ledger.filters import describe_active_filters, scope_transactions, visible_account_ids
from ledger.memo import cached_period_overview, monthly_periods
from ledger.periods import build_monthly_periods
from ledger.recurring import next_due
from ledger.settings import load_seed
from ledger.transforms import account_balance, resolve_account_name

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(name)s: %(message)s")

st.set_page_config(page_title="Ledger", layout="wide")

settings, snapshot = load_seed("data/seed.json")
currency = settings.reporting_currency
accounts = snapshot.accounts


def money(value: float) -> str:
    return format_currency(value, currency)


def _mask(key: str) -> None:
    st.session_state[key] = reformat_while_typing(st.session_state.get(key, ""), settings.separators)


if settings.baseline_start:
    periods = build_monthly_periods(
        snapshot.transactions, start_from=settings.baseline_start
    )
else:
    periods = list(monthly_periods(snapshot.transactions, date.today(), settings.months_to_display))

st.sidebar.markdown("### Filters")
period_labels = {p.key: p.label for p in periods}
current_index = next(
    (i for i, p in enumerate(periods) if p.is_future), len(periods)
) - 1
period_key = st.sidebar.selectbox(
    "Period",
    options=list(period_labels),
    index=max(current_index, 0),
    format_func=lambda key: period_labels[key],
)

account_options = [None] + [a.id for a in accounts if not a.is_archived]
account_id = st.sidebar.selectbox(
    "Account",
    options=account_options,
    format_func=lambda acc_id: "All accounts" if acc_id is None else resolve_account_name(accounts, acc_id),
)
if account_id:
    st.sidebar.caption(f"Recorded history: {money(account_balance(snapshot.transactions, account_id))}")

search = st.sidebar.text_input("Search")
min_text = st.sidebar.text_input("Min amount", key="min_amount", on_change=_mask, args=("min_amount",))
max_text = st.sidebar.text_input("Max amount", key="max_amount", on_change=_mask, args=("max_amount",))
all_categories = sorted({t.category for t in snapshot.transactions if t.category})
categories = st.sidebar.multiselect("Categories", options=all_categories)

criteria = FilterCriteria.from_params(
    search=search,
    min_amount=min_text,
    max_amount=max_text,
    categories=categories,
    account_id=account_id,
    period_key=period_key,
    separators=settings.separators,
)
overview = cached_period_overview(snapshot, criteria, periods=periods)

st.title(f"{overview.period.label}")
chips = describe_active_filters(criteria, currency)
if chips:
    st.caption(" · ".join(chip["label"] for chip in chips))
if overview.skipped:
    st.warning(f"{len(overview.skipped)} malformed record(s) were left out.")
for error in overview.errors:
    st.error(error)

summary = overview.summary
k1, k2, k3, k4 = st.columns(4)
with k1:
    st.metric("Opening balance", money(summary.opening_balance))
with k2:
    st.metric("Closing balance", money(summary.closing_balance), delta=summary.percentage_change)
with k3:
    st.metric("Income", money(summary.income))
with k4:
    st.metric("Expense", money(summary.expense))
st.caption(f"Net for the period: {format_currency_compact(summary.net, show_symbol=True, currency=currency)}")

visible_ids = visible_account_ids(accounts, currency)
point_of_view = account_id or (frozenset(visible_ids) or None)
scoped = scope_transactions(snapshot.transactions, account_id, visible_ids)
st.plotly_chart(trend_figure(trend_frame(scoped, periods, point_of_view)), use_container_width=True)

left, right = st.columns(2)
with left:
    if overview.expense_breakdown:
        st.plotly_chart(breakdown_figure(overview.expense_breakdown, "Expenses by category"), use_container_width=True)
    else:
        st.info("No expenses in this period.")
with right:
    if overview.income_breakdown:
        st.plotly_chart(breakdown_figure(overview.income_breakdown, "Income by category"), use_container_width=True)
    else:
        st.info("No income in this period.")

st.header("Days")
if overview.sections:
    st.dataframe(sections_frame(overview.sections), use_container_width=True)
    for section in overview.sections:
        with st.expander(f"{section.title} · {money(section.daily_net)}"):
            st.table(transactions_frame(section.transactions, accounts, point_of_view))
else:
    st.info("No transactions match the selected filters")

st.header("Upcoming")
upcoming = next_due(overview.due_recurring)
if upcoming is not None:
    st.caption(f"Next: {upcoming.note or upcoming.category} on {upcoming.next_occurrence[:10]}")
for item in overview.due_recurring:
    st.markdown(f"- {item.note or item.category}: {money(item.amount)} ({item.frequency})")

if snapshot.budgets:
    st.header("Budgets")
    for goal in snapshot.budgets:
        spent = budget_spending(goal, snapshot.transactions, snapshot.categories)
        share = spent / goal.target if goal.target else 1.0
        st.progress(min(share, 1.0), text=f"{goal.name} ({goal.period}): {money(spent)} of {money(goal.target)}")
        result = check_budget(goal, snapshot.transactions, snapshot.categories)
        if result.is_left():
            st.warning(f"{goal.name} is over by {money(result.get_error()['over_budget'])}")
