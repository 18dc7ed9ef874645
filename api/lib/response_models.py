"""
Pydantic request/response models for the conflict tracker API

Entity models live in ``ingestion.lib.models``; this module holds the
shapes that only exist at the HTTP boundary: the report submission body,
the per-politician conflict report and the financial summary.

Usage:
    from api.lib.response_models import ReportCreateRequest

    request = ReportCreateRequest.model_validate(parse_json_body(event))
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from ingestion.lib.analysis.conflict_scoring import (
    FlaggedBill,
    SignificantInvestment,
    VoteConflict,
    VoteCorrelation,
)
from ingestion.lib.analysis.industry_aggregation import FinancialSummary


# ============================================================================
# Requests
# ============================================================================


class ReportCreateRequest(BaseModel):
    """Body of POST /api/reports (camelCase ``politicianId`` also accepted)."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    title: str = Field(..., min_length=1, description="Short headline for the report")
    description: str = Field(..., min_length=1, description="What the submitter observed")
    evidence: str = Field("", description="Links or citations, free text")
    politician_id: Optional[str] = Field(None, alias="politicianId")


# ============================================================================
# Analysis responses
# ============================================================================


class ConflictReport(BaseModel):
    """Everything the conflict view shows for one politician."""

    politician_id: str
    bills_scanned: int = 0
    flagged_bills: List[FlaggedBill] = []
    vote_conflicts: List[VoteConflict] = []
    vote_correlations: List[VoteCorrelation] = []
    significant_investments: List[SignificantInvestment] = []


class FinancialSummaryResponse(FinancialSummary):
    politician_id: str
