"""Member vote ingest.

Congress.gov keys members by bioguide id, which the roster pages do not
carry. ``link_bioguide_ids`` copies ids from the member listing onto
stored politicians with an exact name + state match; ``ingest_member_votes``
then upserts the recorded votes of every linked politician.

Both jobs are sequential and best-effort: a failing member or vote is
logged, counted and skipped.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ingestion.lib.analysis.name_matching import EXACT, match_politician, normalize_name
from ingestion.lib.congress_api_client import CongressAPIClient
from ingestion.lib.models import Politician, Vote, VotePosition, normalize_state, parse_date
from ingestion.lib.store import PoliticsStore

logger = logging.getLogger(__name__)

VOTES_PER_MEMBER = 100

POSITIONS = {
    "yea": VotePosition.YEA,
    "aye": VotePosition.YEA,
    "yes": VotePosition.YEA,
    "nay": VotePosition.NAY,
    "no": VotePosition.NAY,
    "present": VotePosition.PRESENT,
}


@dataclass
class BioguideLinkResult:
    linked: int = 0
    unmatched: int = 0
    errors: int = 0


@dataclass
class VoteIngestResult:
    politicians: int = 0
    saved: int = 0
    errors: int = 0


def vote_position(value: Any) -> VotePosition:
    """Map a recorded position (Yea, Aye, Nay, No, Present) to VotePosition; others are NOT_VOTING."""
    return POSITIONS.get(str(value or "").strip().lower(), VotePosition.NOT_VOTING)


def _bill_number(bill: Dict[str, Any]) -> Optional[str]:
    bill_type = str(bill.get("type") or "").lower()
    number = str(bill.get("number") or "")
    return f"{bill_type}{number}" if bill_type and number else None


def vote_from_payload(item: Dict[str, Any], politician: Politician, store: PoliticsStore) -> Vote:
    """Map one member vote payload to a Vote.

    The id is built from the bioguide id and roll call so re-runs update
    rather than duplicate. ``bill_id`` is set when the bill is already stored.
    """
    bill = item.get("bill") or {}
    bill_number = _bill_number(bill)
    stored_bill = store.find_bill_by_number(bill_number) if bill_number else None
    vote_date = parse_date(item.get("date") or item.get("voteDate") or item.get("startDate"))

    roll_call = item.get("rollCallNumber") or item.get("rollNumber")
    key = roll_call or f"{vote_date}-{bill_number or item.get('question') or ''}"
    return Vote(
        id=f"vote-{politician.bioguide_id}-{item.get('congress') or ''}-{item.get('sessionNumber') or ''}-{key}",
        politician_id=politician.id,
        bill_id=stored_bill.id if stored_bill else None,
        bill_title=bill.get("title") or item.get("billTitle") or (stored_bill.title if stored_bill else "") or "",
        vote=vote_position(item.get("memberVote") or item.get("votePosition") or item.get("vote")),
        vote_date=vote_date,
    )


def link_bioguide_ids(store: PoliticsStore, client: CongressAPIClient) -> BioguideLinkResult:
    """Set ``bioguide_id`` on stored politicians from the current member listing."""
    result = BioguideLinkResult()
    unlinked = [p for p in store.list_politicians() if not p.bioguide_id]
    logger.info(f"Found {len(unlinked)} politicians without bioguide IDs")
    if not unlinked:
        return result

    try:
        members = list(client.list_members(current_only=True))
    except Exception as e:
        logger.error(f"Failed to list members: {e}")
        result.errors += 1
        return result

    for member in members:
        try:
            normalized = normalize_name(member.get("name"))
            if normalized is None or not member.get("bioguideId"):
                continue
            match = match_politician(normalized, unlinked, state=normalize_state(member.get("state")))
            if match is None or match.method != EXACT:
                result.unmatched += 1
                continue
            store.update_politician(match.politician.id, bioguide_id=member["bioguideId"])
            unlinked.remove(match.politician)
            result.linked += 1
        except Exception as e:
            logger.error(f"Error linking member {member.get('bioguideId')}: {e}")
            result.errors += 1

    logger.info(f"Linked {result.linked} bioguide IDs, {result.unmatched} members unmatched")
    return result


def ingest_member_votes(
    store: PoliticsStore,
    client: CongressAPIClient,
    limit: int = VOTES_PER_MEMBER,
) -> VoteIngestResult:
    """Upsert up to ``limit`` recent votes for every politician with a bioguide id."""
    result = VoteIngestResult()
    politicians = [p for p in store.list_politicians() if p.bioguide_id]
    logger.info(f"Fetching votes for {len(politicians)} politicians")

    for politician in politicians:
        try:
            items = client.get_member_votes(politician.bioguide_id, limit=limit)
        except Exception as e:
            logger.error(f"Error fetching votes for {politician.full_name}: {e}")
            result.errors += 1
            continue

        for item in items:
            try:
                store.upsert_vote(vote_from_payload(item, politician, store))
                result.saved += 1
            except Exception as e:
                logger.error(f"Error storing vote for {politician.full_name}: {e}")
                result.errors += 1
        result.politicians += 1

    logger.info(f"Finished votes: {result.saved} saved for {result.politicians} politicians, {result.errors} errors")
    return result
