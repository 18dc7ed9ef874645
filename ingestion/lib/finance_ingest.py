"""Campaign-finance ingest jobs.

- ``update_fec_ids``: backfill FEC candidate ids for politicians that lack one
- ``sync_politician_financials``: full committee receipts and independent
  expenditures for one named politician, optionally with OpenSecrets
  industry totals
- ``scrape_financial_data``: independent expenditures and committee
  receipts for every politician with an FEC id, upserted as contributions

All jobs are sequential and best-effort: a failing politician or record
is logged, counted and skipped.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from ingestion.lib.analysis.industry_aggregation import CategoryTotal, aggregate_totals
from ingestion.lib.analysis.name_matching import EXACT, match_politician, normalize_name
from ingestion.lib.fec_api_client import FECClient
from ingestion.lib.models import Contribution, Expenditure, Politician, parse_date
from ingestion.lib.opensecrets_api_client import OpenSecretsClient
from ingestion.lib.store import PoliticsStore

logger = logging.getLogger(__name__)

POLITICAL_COMMITTEE_INDUSTRY = "Political Committee"


@dataclass
class FecIdUpdateResult:
    updated: int = 0
    not_found: int = 0
    ambiguous: int = 0
    errors: int = 0


@dataclass
class FinancialSyncResult:
    politician_id: Optional[str] = None
    candidate_id: Optional[str] = None
    created_politician: bool = False
    committees: int = 0
    contributions: int = 0
    expenditures: int = 0
    errors: int = 0
    opensecrets_industries: List[CategoryTotal] = field(default_factory=list)


@dataclass
class FinancialScrapeResult:
    politicians: int = 0
    contributions: int = 0
    errors: int = 0


# ==========================================================================
# Payload mappers
# ==========================================================================


def contribution_from_receipt(receipt: Dict[str, Any], politician_id: str) -> Contribution:
    """Schedule A itemized receipt -> Contribution (occupation stands in for industry)."""
    return Contribution(
        politician_id=politician_id,
        amount=receipt.get("contribution_receipt_amount") or 0,
        date=parse_date(receipt.get("contribution_receipt_date")),
        source=receipt.get("contributor_name") or "Unknown",
        industry=receipt.get("contributor_occupation") or "Unknown",
        type=receipt.get("entity_type") or "Individual",
    )


def expenditure_from_schedule_e(item: Dict[str, Any], politician_id: str) -> Expenditure:
    committee = item.get("committee") or {}
    return Expenditure(
        politician_id=politician_id,
        amount=item.get("expenditure_amount") or 0,
        date=parse_date(item.get("expenditure_date") or item.get("disbursement_dt")),
        industry=item.get("purpose") or item.get("purpose_description") or "Independent Expenditure",
        type=committee.get("committee_type_full") or "PAC",
        source=committee.get("name") or item.get("committee_name") or item.get("payee_name") or "Unknown",
    )


def _record_id(committee_id: Any, date_value: Any, sub_id: Any = None) -> str:
    record_id = f"fec-{committee_id}-{date_value}"
    if sub_id:
        record_id = f"{record_id}-{sub_id}"
    return record_id


def contribution_from_independent_expenditure(item: Dict[str, Any], politician_id: str) -> Contribution:
    """Schedule E item -> Contribution tagged Support/Oppose."""
    return Contribution(
        id=_record_id(item.get("committee_id"), item.get("expenditure_date"), item.get("sub_id")),
        politician_id=politician_id,
        amount=item.get("expenditure_amount") or 0,
        date=parse_date(item.get("expenditure_date")),
        source=item.get("committee_name") or "Unknown",
        type="Support" if item.get("support_oppose_indicator") == "S" else "Oppose",
        industry=POLITICAL_COMMITTEE_INDUSTRY,
    )


def contribution_from_committee_receipt(receipt: Dict[str, Any], politician_id: str) -> Contribution:
    committee = receipt.get("committee") or {}
    return Contribution(
        id=_record_id(
            receipt.get("committee_id"), receipt.get("contribution_receipt_date"), receipt.get("sub_id")
        ),
        politician_id=politician_id,
        amount=receipt.get("contribution_receipt_amount") or 0,
        date=parse_date(receipt.get("contribution_receipt_date")),
        source=receipt.get("committee_name") or committee.get("name") or "Unknown",
        type=receipt.get("entity_type") or "Individual",
        industry=receipt.get("entity_type_desc") or "Unknown",
    )


# ==========================================================================
# Jobs
# ==========================================================================


def update_fec_ids(store: PoliticsStore, fec: FECClient) -> FecIdUpdateResult:
    """Give every politician without an FEC id the top search result's id."""
    result = FecIdUpdateResult()
    politicians = store.list_politicians_without_fec_id()
    logger.info(f"Found {len(politicians)} politicians without FEC IDs")

    for politician in politicians:
        name = politician.full_name
        try:
            candidates = fec.search_candidates(name)
            if not candidates:
                logger.info(f"No FEC data found for {name}")
                result.not_found += 1
                continue

            if len(candidates) > 1:
                # Search results are ordered by receipts, not by name similarity
                logger.warning(
                    f"{len(candidates)} FEC candidates for {name}; using {candidates[0].get('candidate_id')}"
                )
                result.ambiguous += 1

            store.update_politician(politician.id, fec_candidate_id=candidates[0]["candidate_id"])
            result.updated += 1
            logger.info(f"Updated FEC ID for {name}")
        except Exception as e:
            logger.error(f"Error processing {name}: {e}")
            result.errors += 1

    logger.info(
        f"Finished updating FEC IDs: {result.updated} updated, {result.not_found} not found, "
        f"{result.errors} errors"
    )
    return result


def _find_or_create_politician(
    store: PoliticsStore, name: str, candidate: Dict[str, Any]
) -> Tuple[Politician, bool]:
    normalized = normalize_name(name)
    match = match_politician(normalized, store.list_politicians()) if normalized else None
    if match is not None and match.method == EXACT:
        return match.politician, False

    politician = Politician(
        first_name=normalized.first_name if normalized else name,
        last_name=normalized.last_name if normalized else "",
        party=candidate.get("party"),
        state=candidate.get("state"),
        district=candidate.get("district"),
        office=candidate.get("office"),
        fec_candidate_id=candidate.get("candidate_id"),
    )
    return store.upsert_politician(politician)


def _resolve_opensecrets_id(
    store: PoliticsStore, opensecrets: OpenSecretsClient, politician: Politician
) -> Optional[str]:
    if politician.opensecrets_id:
        return politician.opensecrets_id
    if not politician.state:
        return None

    legislators = opensecrets.get_legislators_by_state(politician.state)
    candidates = []
    for legislator in legislators:
        parsed = normalize_name(legislator.get("firstlast"))
        if parsed is None:
            continue
        candidates.append(
            {"first_name": parsed.first_name, "last_name": parsed.last_name, "cid": legislator.get("cid")}
        )

    match = match_politician(politician.full_name, candidates)
    if match is None or not match.politician.get("cid"):
        return None

    cid = match.politician["cid"]
    store.update_politician(politician.id, opensecrets_id=cid)
    return cid


def sync_politician_financials(
    store: PoliticsStore,
    fec: FECClient,
    name: str,
    opensecrets: Optional[OpenSecretsClient] = None,
) -> FinancialSyncResult:
    """Sync one politician's FEC money by name (e.g. "Ted Cruz")."""
    result = FinancialSyncResult()
    logger.info(f"Syncing data for {name}...")

    candidates = fec.search_candidates(name)
    if not candidates:
        logger.info("No candidates found")
        return result

    candidate = candidates[0]
    result.candidate_id = candidate.get("candidate_id")
    logger.info(f"Selected candidate: {result.candidate_id} ({candidate.get('name')})")

    politician, created = _find_or_create_politician(store, name, candidate)
    result.politician_id = politician.id
    result.created_politician = created
    if not politician.fec_candidate_id and result.candidate_id:
        politician = store.update_politician(politician.id, fec_candidate_id=result.candidate_id)

    committees = fec.get_candidate_committees(result.candidate_id)
    result.committees = len(committees)
    logger.info(f"Found {len(committees)} committees")

    for committee in committees:
        logger.info(f"Processing committee: {committee.get('name')}")
        try:
            receipts = fec.get_committee_contributions(committee["committee_id"])
        except Exception as e:
            logger.error(f"Error fetching contributions for {committee.get('committee_id')}: {e}")
            result.errors += 1
            continue

        for receipt in receipts:
            try:
                store.add_contribution(contribution_from_receipt(receipt, politician.id))
                result.contributions += 1
            except Exception as e:
                logger.error(f"Error creating contribution: {e}")
                result.errors += 1

    try:
        expenditures = fec.get_independent_expenditures(candidate_id=result.candidate_id)
    except Exception as e:
        logger.error(f"Error fetching independent expenditures: {e}")
        result.errors += 1
        expenditures = []

    for item in expenditures:
        try:
            store.add_expenditure(expenditure_from_schedule_e(item, politician.id))
            result.expenditures += 1
        except Exception as e:
            logger.error(f"Error creating expenditure: {e}")
            result.errors += 1

    if opensecrets is not None:
        try:
            cid = _resolve_opensecrets_id(store, opensecrets, politician)
            if cid:
                industries = opensecrets.get_industry_contributions(cid)
                result.opensecrets_industries = aggregate_totals(
                    (i.get("industry_name"), i.get("total")) for i in industries
                )
            else:
                logger.info(f"No OpenSecrets id found for {politician.full_name}")
        except Exception as e:
            logger.error(f"Error fetching OpenSecrets industries: {e}")
            result.errors += 1

    logger.info(
        f"Sync complete: {result.contributions} contributions, {result.expenditures} expenditures, "
        f"{result.errors} errors"
    )
    return result


def _upsert_contributions(
    store: PoliticsStore,
    items: List[Dict[str, Any]],
    to_contribution: Callable[[Dict[str, Any], str], Contribution],
    politician: Politician,
    result: FinancialScrapeResult,
) -> None:
    for item in items:
        try:
            store.upsert_contribution(to_contribution(item, politician.id))
            result.contributions += 1
        except Exception as e:
            logger.error(f"Error storing contribution for {politician.full_name}: {e}")
            result.errors += 1


def scrape_financial_data(store: PoliticsStore, fec: FECClient) -> FinancialScrapeResult:
    """Upsert independent expenditures and committee receipts for every FEC-linked politician.

    A politician whose expenditures or committees cannot be fetched is
    skipped; a bad committee or record is skipped on its own.
    """
    result = FinancialScrapeResult()
    politicians = store.list_politicians_with_fec_id()
    logger.info(f"Found {len(politicians)} politicians with FEC IDs")

    for politician in politicians:
        logger.info(f"Processing {politician.full_name}...")
        try:
            expenditures = fec.get_independent_expenditures(candidate_id=politician.fec_candidate_id)
            committees = fec.get_candidate_committees(politician.fec_candidate_id)
        except Exception as e:
            logger.error(f"Error processing {politician.full_name}: {e}")
            result.errors += 1
            continue

        _upsert_contributions(store, expenditures, contribution_from_independent_expenditure, politician, result)

        for committee in committees:
            try:
                receipts = fec.get_committee_contributions(committee["committee_id"])
            except Exception as e:
                logger.error(f"Error fetching contributions for {committee.get('committee_id')}: {e}")
                result.errors += 1
                continue
            _upsert_contributions(store, receipts, contribution_from_committee_receipt, politician, result)

        result.politicians += 1
        logger.info(f"Processed financial data for {politician.full_name}")

    logger.info(f"Finished scraping financial data: {result.politicians} politicians, {result.errors} errors")
    return result
