"""DataFrames and figures for the dashboard, built from ledger results."""
from typing import Iterable, List, Sequence

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from ledger.domain import Account, CategoryBreakdownEntry, DayGroup, Transaction
from ledger.periods import Period
from ledger.summary import summarize
from ledger.transforms import PointOfView, resolve_account_name, transaction_delta, visual_state

TRANSACTION_COLUMNS = ["date", "note", "category", "type", "account", "amount", "signed", "state"]


def transactions_frame(
    trans: Iterable[Transaction], accounts: Sequence[Account], point_of_view: PointOfView = None
) -> pd.DataFrame:
    rows = [
        {
            "date": t.date,
            "note": t.note,
            "category": t.category,
            "type": t.type,
            "account": resolve_account_name(accounts, t.account_id),
            "amount": t.amount,
            "signed": transaction_delta(t, point_of_view),
            "state": visual_state(t, point_of_view)[1],
        }
        for t in trans
    ]
    df = pd.DataFrame(rows, columns=TRANSACTION_COLUMNS)
    df["date"] = pd.to_datetime(df["date"], errors="coerce")
    return df


def sections_frame(sections: Iterable[DayGroup]) -> pd.DataFrame:
    df = pd.DataFrame(
        [
            {
                "day": s.title,
                "count": len(s.transactions),
                "income": s.daily_income,
                "expense": s.daily_expense,
                "net": s.daily_net,
            }
            for s in sections
        ],
        columns=["day", "count", "income", "expense", "net"],
    )
    df["direction"] = np.where(df["net"] >= 0, "up", "down")
    return df


def breakdown_frame(entries: Iterable[CategoryBreakdownEntry]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"category": e.category, "amount": e.amount, "percentage": e.percentage} for e in entries],
        columns=["category", "amount", "percentage"],
    )


def breakdown_figure(entries: Iterable[CategoryBreakdownEntry], title: str) -> go.Figure:
    df = breakdown_frame(entries)
    fig = px.pie(df, values="amount", names="category", title=title)
    fig.update_layout(height=300, margin=dict(t=40, b=10, l=10, r=10))
    return fig


def trend_frame(
    scoped: Sequence[Transaction], periods: Iterable[Period], point_of_view: PointOfView = None
) -> pd.DataFrame:
    """One row per month: income, expense and closing balance."""
    rows: List[dict] = []
    for period in periods:
        if period.is_future:
            continue
        summary = summarize(scoped, period, point_of_view)
        rows.append({
            "period": period.label,
            "income": summary.income,
            "expense": summary.expense,
            "closing": summary.closing_balance,
        })
    return pd.DataFrame(rows, columns=["period", "income", "expense", "closing"])


def trend_figure(df: pd.DataFrame) -> go.Figure:
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=df["period"], y=df["income"], mode="lines+markers", name="Income"))
    fig.add_trace(go.Scatter(x=df["period"], y=df["expense"], mode="lines+markers", name="Expense"))
    fig.add_trace(go.Bar(x=df["period"], y=df["closing"], name="Closing balance", opacity=0.35))
    fig.update_layout(template="plotly_dark", margin=dict(t=30, b=10, l=10, r=10))
    return fig
