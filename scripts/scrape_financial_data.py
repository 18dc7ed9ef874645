#!/usr/bin/env python3
"""
Refresh FEC money for every politician that has an FEC candidate id.

Independent expenditures and committee receipts are upserted by a stable
id, so re-running the scrape does not duplicate records. Requires
FEC_API_KEY.

Usage:
    python3 scripts/scrape_financial_data.py
"""

import sys
import argparse
import logging
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ingestion.lib.config import FEC_API_KEY_VAR, ConfigurationError, configure_logging, load_settings
from ingestion.lib.fec_api_client import FECClient
from ingestion.lib.finance_ingest import scrape_financial_data
from ingestion.lib.response_cache import ResponseCache
from ingestion.lib.store import PoliticsStore

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Scrape FEC financial data for linked politicians")
    parser.add_argument("--db", help="DuckDB file (defaults to DATABASE_PATH)")
    args = parser.parse_args()

    try:
        settings = load_settings(required=[FEC_API_KEY_VAR])
    except ConfigurationError as e:
        configure_logging()
        logger.error(str(e))
        return 2
    configure_logging(settings.log_level)

    fec = FECClient(
        api_key=settings.fec_api_key,
        base_url=settings.fec_api_base_url,
        min_interval=settings.request_delay_seconds,
        max_retries=settings.max_retries,
        cache=ResponseCache(),
    )

    with PoliticsStore(args.db or settings.database_path) as store:
        result = scrape_financial_data(store, fec)

    return 1 if result.errors and not result.politicians else 0


if __name__ == '__main__':
    sys.exit(main())
