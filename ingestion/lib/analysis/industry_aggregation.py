"""Rank monetary records by free-text category.

Labels are grouped exactly as given ("Tech" and "Technology" stay
separate buckets). A missing or blank label is counted under
``UNKNOWN_CATEGORY``. Totals are conserved: the bucket totals always sum
to the input amounts.
"""

import logging
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import pandas as pd
from pydantic import BaseModel

logger = logging.getLogger(__name__)

UNKNOWN_CATEGORY = "Unknown"
TOP_INDUSTRIES = 10
TOP_INVESTMENT_TYPES = 5


class CategoryTotal(BaseModel):
    category: str
    total: float
    count: int


class FinancialSummary(BaseModel):
    """Dashboard view of one politician's money."""

    total_contributions: float = 0.0
    total_expenditures: float = 0.0
    total_investments: float = 0.0
    contributions_by_industry: List[CategoryTotal] = []
    expenditures_by_industry: List[CategoryTotal] = []
    investments_by_type: List[CategoryTotal] = []


def _label(value: Any) -> str:
    if value is None:
        return UNKNOWN_CATEGORY
    text = str(value)
    return text if text.strip() else UNKNOWN_CATEGORY


def aggregate_totals(
    pairs: Iterable[Tuple[Any, Any]],
    top_n: Optional[int] = None,
) -> List[CategoryTotal]:
    """Sum ``(label, amount)`` pairs per label, largest total first.

    Ties keep the order in which labels were first seen.

    Example:
        >>> [t.category for t in aggregate_totals([("Tech", 5), ("Oil", 9), ("Tech", 5)])]
        ['Tech', 'Oil']
    """
    rows = [(_label(label), float(amount or 0)) for label, amount in pairs]
    if not rows:
        return []

    df = pd.DataFrame(rows, columns=["category", "amount"])
    grouped = (
        df.groupby("category", sort=False)["amount"]
        .agg(total="sum", records="count")
        .reset_index()
        .sort_values("total", ascending=False, kind="mergesort")
    )
    if top_n is not None:
        grouped = grouped.head(top_n)

    return [
        CategoryTotal(category=row.category, total=float(row.total), count=int(row.records))
        for row in grouped.itertuples(index=False)
    ]


def contributions_by_industry(contributions: Sequence[Any], top_n: Optional[int] = TOP_INDUSTRIES) -> List[CategoryTotal]:
    return aggregate_totals(((c.industry, c.amount) for c in contributions), top_n=top_n)


def expenditures_by_industry(expenditures: Sequence[Any], top_n: Optional[int] = TOP_INDUSTRIES) -> List[CategoryTotal]:
    return aggregate_totals(((e.industry, e.amount) for e in expenditures), top_n=top_n)


def investments_by_type(investments: Sequence[Any], top_n: Optional[int] = TOP_INVESTMENT_TYPES) -> List[CategoryTotal]:
    return aggregate_totals(((i.type, i.value) for i in investments), top_n=top_n)


def build_financial_summary(
    contributions: Sequence[Any],
    expenditures: Sequence[Any],
    investments: Sequence[Any],
) -> FinancialSummary:
    """Totals plus top industries and investment types for one politician."""
    return FinancialSummary(
        total_contributions=float(sum(c.amount for c in contributions)),
        total_expenditures=float(sum(e.amount for e in expenditures)),
        total_investments=float(sum(i.value for i in investments)),
        contributions_by_industry=contributions_by_industry(contributions),
        expenditures_by_industry=expenditures_by_industry(expenditures),
        investments_by_type=investments_by_type(investments),
    )
