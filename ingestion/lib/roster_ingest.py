"""Roster ingest: scrape both chambers and upsert politicians.

A run is skipped when the newest ``last_scraped_at`` is less than
``SCRAPE_THRESHOLD_HOURS`` old, unless forced. A chamber that fails to
load is logged and the other chamber is still processed; a member that
fails to save is logged and skipped.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import requests

from ingestion.lib.roster_scraper import RosterScraper
from ingestion.lib.store import PoliticsStore

logger = logging.getLogger(__name__)

SCRAPE_THRESHOLD_HOURS = 24


@dataclass
class RosterIngestResult:
    skipped: bool = False
    created: int = 0
    updated: int = 0
    errors: int = 0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def is_recent(latest: Optional[datetime], now: datetime, hours: int = SCRAPE_THRESHOLD_HOURS) -> bool:
    return latest is not None and now - latest < timedelta(hours=hours)


def ingest_rosters(
    store: PoliticsStore,
    scraper: RosterScraper,
    force: bool = False,
    now: Optional[datetime] = None,
) -> RosterIngestResult:
    now = now or _utcnow()
    result = RosterIngestResult()

    latest = store.latest_scrape_time()
    if not force and is_recent(latest, now):
        logger.info(f"Recent scrape found from {latest}. Skipping scrape.")
        result.skipped = True
        return result

    logger.info("No recent scrape found or data is stale. Starting fresh scrape...")

    members = []
    for chamber, scrape in (("House", scraper.scrape_house), ("Senate", scraper.scrape_senate)):
        try:
            members.extend(scrape())
        except requests.exceptions.RequestException as e:
            logger.error(f"Failed to scrape {chamber} roster: {e}")
            result.errors += 1

    logger.info(f"Processing {len(members)} total members...")

    for member in members:
        try:
            member.last_scraped_at = now
            _, created = store.upsert_politician(member)
            if created:
                result.created += 1
            else:
                result.updated += 1
        except Exception as e:
            logger.error(f"Error processing {member.full_name}: {e}")
            result.errors += 1

    logger.info(
        f"Roster scrape complete: {result.created} created, {result.updated} updated, "
        f"{result.errors} errors"
    )
    return result
