#!/usr/bin/env python3
"""
Link stored politicians to Congress.gov bioguide ids, then upsert their recorded votes.

Requires CONGRESS_API_KEY.

Usage:
    python3 scripts/fetch_member_votes.py --limit 100
"""

import sys
import argparse
import logging
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ingestion.lib.vote_ingest import VOTES_PER_MEMBER, ingest_member_votes, link_bioguide_ids
from ingestion.lib.config import (
    CONGRESS_API_KEY_VAR,
    ConfigurationError,
    configure_logging,
    load_settings,
)
from ingestion.lib.congress_api_client import CongressAPIClient
from ingestion.lib.response_cache import ResponseCache
from ingestion.lib.store import PoliticsStore

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Fetch member votes from Congress.gov")
    parser.add_argument("--limit", type=int, default=VOTES_PER_MEMBER, help="Votes per member")
    parser.add_argument("--db", help="DuckDB file (defaults to DATABASE_PATH)")
    args = parser.parse_args()

    try:
        settings = load_settings(required=[CONGRESS_API_KEY_VAR])
    except ConfigurationError as e:
        configure_logging()
        logger.error(str(e))
        return 2
    configure_logging(settings.log_level)

    client = CongressAPIClient(
        api_key=settings.congress_api_key,
        base_url=settings.congress_api_base_url,
        min_interval=settings.request_delay_seconds,
        max_retries=settings.max_retries,
        cache=ResponseCache(),
    )

    with PoliticsStore(args.db or settings.database_path) as store:
        link_bioguide_ids(store, client)
        result = ingest_member_votes(store, client, limit=args.limit)

    return 1 if result.errors and not result.saved else 0


if __name__ == '__main__':
    sys.exit(main())
