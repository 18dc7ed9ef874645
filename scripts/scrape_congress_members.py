#!/usr/bin/env python3
"""
Scrape the House and Senate rosters into the politics store.

Skips the scrape when any politician was scraped in the last 24 hours
unless --force is given.

Usage:
    python3 scripts/scrape_congress_members.py
    python3 scripts/scrape_congress_members.py --force --db data/politics.duckdb
"""

import sys
import argparse
import logging
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ingestion.lib.config import configure_logging, load_settings
from ingestion.lib.roster_ingest import ingest_rosters
from ingestion.lib.roster_scraper import RosterScraper
from ingestion.lib.store import PoliticsStore

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Scrape Congress member rosters")
    parser.add_argument("--force", action="store_true", help="Scrape even if a recent scrape exists")
    parser.add_argument("--db", help="DuckDB file (defaults to DATABASE_PATH)")
    args = parser.parse_args()

    settings = load_settings()
    configure_logging(settings.log_level)

    with PoliticsStore(args.db or settings.database_path) as store:
        result = ingest_rosters(store, RosterScraper(), force=args.force)

    if result.skipped:
        logger.info("Roster is fresh, nothing to do")
    return 1 if result.errors and not (result.created or result.updated) else 0


if __name__ == '__main__':
    sys.exit(main())
