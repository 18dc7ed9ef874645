"""
Keyword-overlap conflict-of-interest heuristics.

A contribution is "related" to a bill when any whitespace-separated token
of its industry label appears (case-insensitively) in the bill's title
or summary. Investments are matched the same way on their asset
description. The matched dollars decide the severity tier:

    >= 100,000  HIGH
    >=  10,000  MEDIUM
    otherwise   LOW

These flags are advisory. They are keyword hits, not findings, and both
false positives and false negatives are expected.

The vote helpers compare a politician's recorded votes with the same
financial records:
    - analyze_vote_conflicts: bills whose title names an investment asset
      or a contribution source
    - vote_correlations: mean vote direction (YEA = +1, else -1) on bills
      whose title names a contribution industry
    - significant_investments: investments by value with the number of
      votes on bills that name the asset
"""

import logging
from enum import Enum
from typing import Dict, List, Optional, Sequence

from pydantic import BaseModel

from ingestion.lib.models import Bill, Contribution, Investment, Vote

logger = logging.getLogger(__name__)

HIGH_THRESHOLD = 100_000
MEDIUM_THRESHOLD = 10_000
MAX_FLAGGED_BILLS = 20

NO_FINANCIAL_DATA = "No financial data available for analysis"
NO_CONFLICTS = "No potential conflicts detected"


class Severity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


def severity_for_amount(amount: float) -> Severity:
    """Map a matched-dollar total to its tier (boundaries are inclusive)."""
    if amount >= HIGH_THRESHOLD:
        return Severity.HIGH
    if amount >= MEDIUM_THRESHOLD:
        return Severity.MEDIUM
    return Severity.LOW


class ConflictAnalysis(BaseModel):
    has_conflict: bool = False
    severity: Severity = Severity.LOW
    description: str = NO_CONFLICTS
    matched_total: float = 0.0
    related_contributions: List[Contribution] = []
    related_investments: List[Investment] = []


class FlaggedBill(BaseModel):
    """A bill paired with its conflict analysis."""

    bill: Bill
    analysis: ConflictAnalysis


class VoteConflict(BaseModel):
    type: str = "direct_interest"
    description: str
    severity: Severity = Severity.MEDIUM
    related_votes: List[Vote] = []


class VoteCorrelation(BaseModel):
    industry: str
    correlation: float
    contribution_total: float


class SignificantInvestment(BaseModel):
    investment: Investment
    related_votes: int


def _keywords(label: Optional[str]) -> List[str]:
    return (label or "").lower().split()


def label_matches(label: Optional[str], text: str) -> bool:
    """True when any token of ``label`` occurs in the already lower-cased ``text``.

    An empty label never matches.
    """
    return any(token in text for token in _keywords(label))


def score_bill(
    title: Optional[str],
    summary: Optional[str],
    contributions: Sequence[Contribution],
    investments: Sequence[Investment] = (),
) -> ConflictAnalysis:
    """Flag a bill against one politician's contributions and investments.

    Example:
        >>> c = Contribution(amount=50_000, industry="Technology")
        >>> result = score_bill("Tech Regulation Act", "Regulates technology firms", [c])
        >>> result.has_conflict, result.severity
        (True, <Severity.MEDIUM: 'MEDIUM'>)
    """
    if not contributions and not investments:
        return ConflictAnalysis(description=NO_FINANCIAL_DATA)

    title_text = (title or "").lower()
    summary_text = (summary or "").lower()

    def related(label: Optional[str]) -> bool:
        return label_matches(label, title_text) or label_matches(label, summary_text)

    related_contributions = [c for c in contributions if related(c.industry)]
    related_investments = [i for i in investments if related(i.asset)]

    if not related_contributions and not related_investments:
        return ConflictAnalysis()

    matched_total = sum(c.amount for c in related_contributions) + sum(
        i.value for i in related_investments
    )
    return ConflictAnalysis(
        has_conflict=True,
        severity=severity_for_amount(matched_total),
        description=(
            f"Found {len(related_contributions)} related contributions and "
            f"{len(related_investments)} related investments that may indicate "
            f"a conflict of interest."
        ),
        matched_total=matched_total,
        related_contributions=related_contributions,
        related_investments=related_investments,
    )


def scan_bills(
    bills: Sequence[Bill],
    contributions: Sequence[Contribution],
    investments: Sequence[Investment] = (),
    limit: int = MAX_FLAGGED_BILLS,
) -> List[FlaggedBill]:
    """Score bills in order and keep the first ``limit`` that are flagged."""
    flagged = []
    for bill in bills:
        analysis = score_bill(bill.title, bill.summary, contributions, investments)
        if analysis.has_conflict:
            flagged.append(FlaggedBill(bill=bill, analysis=analysis))
            if len(flagged) >= limit:
                break
    return flagged


def _title_contains(vote: Vote, needle: Optional[str]) -> bool:
    needle = (needle or "").strip().lower()
    if not needle:
        return False
    return needle in (vote.bill_title or "").lower()


def analyze_vote_conflicts(
    votes: Sequence[Vote],
    contributions: Sequence[Contribution],
    investments: Sequence[Investment],
) -> List[VoteConflict]:
    conflicts = []
    for vote in votes:
        has_investment = any(_title_contains(vote, i.asset) for i in investments)
        has_contribution = any(_title_contains(vote, c.source) for c in contributions)
        if has_investment or has_contribution:
            conflicts.append(
                VoteConflict(
                    description=f"Conflict of interest detected for bill {vote.bill_title}",
                    related_votes=[vote],
                )
            )
    return conflicts


def vote_correlations(
    votes: Sequence[Vote],
    contributions: Sequence[Contribution],
) -> List[VoteCorrelation]:
    """Mean vote direction per contributing industry, largest donors first.

    Only industries named in at least one voted bill title are reported.
    """
    totals: Dict[str, float] = {}
    for contribution in contributions:
        industry = contribution.industry
        totals[industry] = totals.get(industry, 0.0) + contribution.amount

    results = []
    for industry, total in totals.items():
        related = [v for v in votes if _title_contains(v, industry)]
        if not related:
            continue
        direction = sum(1 if v.vote == "YEA" else -1 for v in related) / len(related)
        results.append(
            VoteCorrelation(industry=industry, correlation=direction, contribution_total=total)
        )

    results.sort(key=lambda r: r.contribution_total, reverse=True)
    return results


def significant_investments(
    investments: Sequence[Investment],
    votes: Sequence[Vote],
) -> List[SignificantInvestment]:
    ranked = sorted(investments, key=lambda i: i.value, reverse=True)
    return [
        SignificantInvestment(
            investment=investment,
            related_votes=sum(1 for v in votes if _title_contains(v, investment.asset)),
        )
        for investment in ranked
    ]
