#!/usr/bin/env python3
"""
Fetch bills from Congress.gov and upsert them with resolved sponsors.

Requires CONGRESS_API_KEY.

Usage:
    python3 scripts/fetch_bills.py --congress 118 --limit 250
    python3 scripts/fetch_bills.py --subject "Energy"
"""

import sys
import argparse
import logging
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ingestion.lib.bill_ingest import BILL_LIST_LIMIT, ingest_bills
from ingestion.lib.config import (
    CONGRESS_API_KEY_VAR,
    ConfigurationError,
    configure_logging,
    load_settings,
)
from ingestion.lib.congress_api_client import DEFAULT_CONGRESS, CongressAPIClient
from ingestion.lib.response_cache import ResponseCache
from ingestion.lib.store import PoliticsStore

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Fetch bills from Congress.gov")
    parser.add_argument("--congress", type=int, default=DEFAULT_CONGRESS, help="Congress number")
    parser.add_argument("--limit", type=int, default=BILL_LIST_LIMIT, help="Bills to list")
    parser.add_argument("--subject", help="Only bills tagged with this legislative subject")
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
        result = ingest_bills(store, client, congress=args.congress, limit=args.limit, subject=args.subject)

    return 1 if result.errors and not result.saved else 0


if __name__ == '__main__':
    sys.exit(main())
