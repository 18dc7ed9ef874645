"""OpenFEC API client.

Wraps the campaign-finance endpoints used by the ingest jobs:
candidate search and lookup, candidate committees, itemized receipts
(schedule A) and independent expenditures (schedule E). The API key is
sent as the ``api_key`` query parameter.

Example usage:
    from ingestion.lib.fec_api_client import FECClient

    client = FECClient(api_key="your_key_here")
    candidates = client.search_candidates("Ted Cruz")
    committees = client.get_candidate_committees(candidates[0]["candidate_id"])
"""

import logging
import os
import re
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel

from ingestion.lib.analysis.industry_aggregation import CategoryTotal, aggregate_totals
from ingestion.lib.config import DEFAULT_FEC_API_BASE_URL
from ingestion.lib.http_client import RateLimitedClient

logger = logging.getLogger(__name__)

LARGE_CONTRIBUTION_THRESHOLD = 10_000
TOP_INDUSTRIES_LIMIT = 20
RESULTS_PER_PAGE = 100


def build_candidate_query(name: str) -> str:
    """Turn "First [Middle] Last" into the "Last, First" form FEC indexes on.

    Punctuation is stripped first; single-word names pass through.

    Example:
        >>> build_candidate_query("Ted Cruz")
        'Cruz, Ted'
        >>> build_candidate_query("Cruz")
        'Cruz'
    """
    clean = re.sub(r"[^\w\s]", "", name or "").strip()
    parts = clean.split()
    if len(parts) > 1:
        return f"{parts[-1]}, {parts[0]}"
    return clean


class LargeContributionFlag(BaseModel):
    """Itemized receipt at or above the large-contribution threshold."""

    type: Literal["large_contribution"] = "large_contribution"
    amount: float
    date: Optional[str] = None
    contributor: Optional[str] = None
    employer: Optional[str] = None
    occupation: Optional[str] = None


class IndependentExpenditureFlag(BaseModel):
    """Outside spending for or against the candidate."""

    type: Literal["independent_expenditure"] = "independent_expenditure"
    amount: float
    date: Optional[str] = None
    spender: Optional[str] = None
    purpose: Optional[str] = None
    support_oppose: Optional[str] = None


FinanceFlag = Union[LargeContributionFlag, IndependentExpenditureFlag]


class FECClient(RateLimitedClient):
    """Client for the OpenFEC API (https://api.open.fec.gov/developers/)."""

    provider_name = "FEC"

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, **kwargs):
        api_key = api_key or os.environ.get("FEC_API_KEY")
        if not api_key:
            raise ValueError(
                "FEC API key required. Provide via api_key parameter or "
                "FEC_API_KEY environment variable."
            )
        base_url = base_url or os.environ.get("FEC_API_BASE_URL", DEFAULT_FEC_API_BASE_URL)
        super().__init__(base_url, api_key=api_key, **kwargs)

    def _auth_params(self) -> Dict[str, Any]:
        return {"api_key": self.api_key}

    def _results(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        response = self.get_json(endpoint, params)
        return response.get("results") or []

    # ==========================================================================
    # Candidates and committees
    # ==========================================================================

    def search_candidates(self, name: str) -> List[Dict[str, Any]]:
        """Search active candidates by name, highest receipts first."""
        params = {
            "q": build_candidate_query(name),
            "sort": "-receipts",
            "per_page": 5,
            "election_full": "true",
            "is_active_candidate": "true",
        }
        return self._results("/candidates/search", params)

    def get_candidate(self, candidate_id: str) -> Optional[Dict[str, Any]]:
        results = self._results(f"/candidate/{candidate_id}")
        return results[0] if results else None

    def get_candidate_committees(self, candidate_id: str) -> List[Dict[str, Any]]:
        return self._results(f"/candidate/{candidate_id}/committees")

    # ==========================================================================
    # Schedules
    # ==========================================================================

    def get_committee_contributions(
        self,
        committee_id: str,
        min_date: Optional[str] = None,
        max_date: Optional[str] = None,
        min_amount: Optional[float] = None,
        contributor_name: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """Itemized receipts (schedule A) for a committee, largest first."""
        params: Dict[str, Any] = {
            "committee_id": committee_id,
            "sort": "-contribution_receipt_amount",
            "per_page": RESULTS_PER_PAGE,
        }
        if min_date:
            params["min_date"] = min_date
        if max_date:
            params["max_date"] = max_date
        if min_amount is not None:
            params["min_amount"] = min_amount
        if contributor_name:
            params["contributor_name"] = contributor_name
        return self._results("/schedules/schedule_a", params)

    def get_independent_expenditures(
        self,
        candidate_id: Optional[str] = None,
        committee_id: Optional[str] = None,
        min_date: Optional[str] = None,
        max_date: Optional[str] = None,
        min_amount: Optional[float] = None,
    ) -> List[Dict[str, Any]]:
        """Independent expenditures (schedule E), newest first."""
        params: Dict[str, Any] = {
            "sort": "-expenditure_date",
            "per_page": RESULTS_PER_PAGE,
            "is_notice": "false",
        }
        optional = {
            "candidate_id": candidate_id,
            "committee_id": committee_id,
            "min_date": min_date,
            "max_date": max_date,
            "min_amount": min_amount,
        }
        params.update({k: v for k, v in optional.items() if v is not None})
        return self._results("/schedules/schedule_e", params)

    # ==========================================================================
    # Derived views
    # ==========================================================================

    def get_top_industries(self, candidate_id: str) -> List[CategoryTotal]:
        """Total receipts by contributor employer across all candidate committees.

        FEC has no industry codes, so employer stands in for industry.
        """
        pairs = []
        for committee in self.get_candidate_committees(candidate_id):
            for contribution in self.get_committee_contributions(committee["committee_id"]):
                pairs.append(
                    (
                        contribution.get("contributor_employer"),
                        contribution.get("contribution_receipt_amount") or 0,
                    )
                )
        return aggregate_totals(pairs, top_n=TOP_INDUSTRIES_LIMIT)

    def analyze_potential_conflicts(self, candidate_id: str) -> List[FinanceFlag]:
        """Flag large contributions and all independent expenditures for a candidate."""
        flags: List[FinanceFlag] = []

        for committee in self.get_candidate_committees(candidate_id):
            contributions = self.get_committee_contributions(
                committee["committee_id"], min_amount=LARGE_CONTRIBUTION_THRESHOLD
            )
            for contribution in contributions:
                amount = contribution.get("contribution_receipt_amount") or 0
                if amount >= LARGE_CONTRIBUTION_THRESHOLD:
                    flags.append(
                        LargeContributionFlag(
                            amount=amount,
                            date=contribution.get("contribution_receipt_date"),
                            contributor=contribution.get("contributor_name"),
                            employer=contribution.get("contributor_employer"),
                            occupation=contribution.get("contributor_occupation"),
                        )
                    )

        for expenditure in self.get_independent_expenditures(candidate_id=candidate_id):
            flags.append(
                IndependentExpenditureFlag(
                    amount=expenditure.get("expenditure_amount") or 0,
                    date=expenditure.get("expenditure_date"),
                    spender=expenditure.get("committee_name"),
                    purpose=expenditure.get("purpose_description"),
                    support_oppose=expenditure.get("support_oppose_indicator"),
                )
            )

        logger.info(f"Found {len(flags)} potential conflict flags for {candidate_id}")
        return flags
