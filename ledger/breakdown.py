import math
from collections import defaultdict
from typing import Dict, Iterable, Iterator, List, Tuple

from ledger.domain import EXPENSE, INCOME, CategoryBreakdownEntry, Transaction

TOP_CATEGORIES = 5

_FALLBACK_LABELS = {INCOME: "Income", EXPENSE: "Expense"}
GENERAL_CATEGORY = "General"


def resolve_category_label(label, tx_type: str) -> str:
    if isinstance(label, str) and label.strip():
        return label
    return _FALLBACK_LABELS.get(tx_type, GENERAL_CATEGORY)


def category_totals(trans: Iterable[Transaction], tx_type: str) -> Dict[str, float]:
    totals: Dict[str, float] = defaultdict(float)
    for t in trans:
        if t.type == tx_type:
            totals[resolve_category_label(t.category, tx_type)] += t.amount
    return dict(totals)


def _ranked(totals: Dict[str, float]) -> List[Tuple[str, float]]:
    # equal totals fall back to the label so the order never flips
    return sorted(totals.items(), key=lambda item: (-item[1], item[0]))


def _percentages(ranked: List[Tuple[str, float]], total: float) -> List[int]:
    """Half-up rounded shares, lowered where rounding pushed the sum past 100."""
    if not total:
        return [0] * len(ranked)

    exact = [amount * 100 / total for _, amount in ranked]
    rounded = [int(math.floor(share + 0.5)) for share in exact]
    excess = sum(rounded) - 100
    if excess > 0:
        rounded_up = sorted(
            (i for i, share in enumerate(exact) if rounded[i] > share),
            key=lambda i: (exact[i] - math.floor(exact[i]), -i),
        )
        for i in rounded_up[:excess]:
            rounded[i] -= 1
    return [min(100, max(0, p)) for p in rounded]


def iter_top_categories(
    trans: Iterable[Transaction], tx_type: str, k: int = TOP_CATEGORIES
) -> Iterator[CategoryBreakdownEntry]:
    totals = category_totals(trans, tx_type)
    ranked = _ranked(totals)
    shares = _percentages(ranked, sum(totals.values()))

    for (name, amount), share in list(zip(ranked, shares))[: max(0, k)]:
        yield CategoryBreakdownEntry(category=name, amount=amount, percentage=share)


def category_breakdown(
    trans: Iterable[Transaction], tx_type: str, limit: int = TOP_CATEGORIES
) -> List[CategoryBreakdownEntry]:
    """Top categories of one type by amount, with their share of the type total."""
    return list(iter_top_categories(trans, tx_type, limit))
