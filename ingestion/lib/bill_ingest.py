"""Bill ingest: list a Congress's bills, fetch details, resolve sponsors, upsert.

Each bill is handled on its own. A failed detail fetch or save is logged
and counted, then the next bill is processed.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ingestion.lib.analysis.name_matching import PoliticianResolver
from ingestion.lib.congress_api_client import DEFAULT_CONGRESS, CongressAPIClient
from ingestion.lib.models import Bill, parse_date
from ingestion.lib.store import PoliticsStore

logger = logging.getLogger(__name__)

BILL_LIST_LIMIT = 250
LOW_CONFIDENCE = 0.8


@dataclass
class BillIngestResult:
    saved: int = 0
    errors: int = 0
    unresolved_sponsors: int = 0


def bill_from_detail(detail: Dict[str, Any], congress: int, sponsor_id: Optional[str] = None) -> Bill:
    """Map a Congress.gov bill detail payload to a Bill.

    Missing fields fall back to empty values; a payload without type or
    number cannot be keyed and raises ValueError.
    """
    bill_type = (detail.get("type") or "").lower()
    number = str(detail.get("number") or "")
    summary = detail.get("summary") or {}
    latest_action = detail.get("latestAction") or {}

    if not bill_type or not number:
        raise ValueError("Bill payload has no type or number")

    return Bill(
        bill_number=f"{bill_type}{number}",
        congress=detail.get("congress") or congress,
        bill_type=bill_type,
        number=number,
        title=detail.get("title") or "",
        summary=(summary.get("text") or "") if isinstance(summary, dict) else "",
        introduced_date=parse_date(detail.get("introducedDate")),
        status=latest_action.get("text") or "",
        sponsor_id=sponsor_id,
    )


def resolve_sponsor(resolver: PoliticianResolver, detail: Dict[str, Any]) -> Optional[str]:
    sponsors = detail.get("sponsors") or []
    if not sponsors:
        return None
    sponsor = sponsors[0]

    match = resolver.resolve(
        bioguide_id=sponsor.get("bioguideId"),
        name=sponsor.get("fullName") or sponsor.get("name"),
        state=sponsor.get("state"),
    )
    if match is None:
        return None
    if match.ambiguous or match.confidence < LOW_CONFIDENCE:
        logger.warning(
            f"Low-confidence sponsor match for {detail.get('type')}{detail.get('number')}: "
            f"method={match.method} candidates={match.candidate_count} "
            f"confidence={match.confidence:.2f}"
        )
    return match.politician.id


def ingest_bills(
    store: PoliticsStore,
    client: CongressAPIClient,
    congress: int = DEFAULT_CONGRESS,
    limit: int = BILL_LIST_LIMIT,
    resolver: Optional[PoliticianResolver] = None,
    subject: Optional[str] = None,
) -> BillIngestResult:
    """Save the listed bills of one Congress, or only those tagged ``subject``."""
    resolver = resolver or PoliticianResolver(store)
    result = BillIngestResult()

    scope = f"Congress {congress}" + (f", subject {subject!r}" if subject else "")
    logger.info(f"Fetching bills for {scope}...")
    try:
        if subject:
            bills = client.get_bills_by_subject(subject, congress=congress, limit=limit)
        else:
            bills = client.list_bills(congress=congress, limit=limit)
    except Exception as e:
        logger.error(f"Failed to list bills for {scope}: {e}")
        result.errors += 1
        return result

    logger.info(f"Found {len(bills)} bills")

    for listed in bills:
        label = f"{listed.get('type')}{listed.get('number')}"
        try:
            payload = client.get_bill(congress, listed.get("type") or "", listed.get("number"))
            detail = payload.get("bill") or {}

            sponsor_id = resolve_sponsor(resolver, detail)
            if sponsor_id is None and detail.get("sponsors"):
                result.unresolved_sponsors += 1

            store.upsert_bill(bill_from_detail(detail, congress, sponsor_id))
            result.saved += 1
        except Exception as e:
            logger.error(f"Error processing bill {label}: {e}")
            result.errors += 1

    logger.info(
        f"Finished processing bills: {result.saved} saved, {result.errors} errors, "
        f"{result.unresolved_sponsors} unresolved sponsors"
    )
    return result
