"""Financial/legislative cross-referencing heuristics."""

from .name_matching import NameMatch, NormalizedName, PoliticianResolver, match_politician, normalize_name
from .industry_aggregation import (
    CategoryTotal,
    FinancialSummary,
    aggregate_totals,
    build_financial_summary,
)
from .conflict_scoring import (
    ConflictAnalysis,
    Severity,
    analyze_vote_conflicts,
    scan_bills,
    score_bill,
    severity_for_amount,
    significant_investments,
    vote_correlations,
)

__all__ = [
    "NameMatch",
    "NormalizedName",
    "PoliticianResolver",
    "match_politician",
    "normalize_name",
    "CategoryTotal",
    "FinancialSummary",
    "aggregate_totals",
    "build_financial_summary",
    "ConflictAnalysis",
    "Severity",
    "analyze_vote_conflicts",
    "scan_bills",
    "score_bill",
    "severity_for_amount",
    "significant_investments",
    "vote_correlations",
]
