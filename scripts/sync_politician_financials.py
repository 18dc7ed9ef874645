#!/usr/bin/env python3
"""
Sync one politician's FEC contributions and independent expenditures.

Creates the politician if no exact name match exists. When
OPENSECRETS_API_KEY is set the politician's OpenSecrets industry totals
are fetched as well. Requires FEC_API_KEY.

Usage:
    python3 scripts/sync_politician_financials.py --name "Ted Cruz"
"""

import sys
import argparse
import logging
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ingestion.lib.config import FEC_API_KEY_VAR, ConfigurationError, configure_logging, load_settings
from ingestion.lib.fec_api_client import FECClient
from ingestion.lib.finance_ingest import sync_politician_financials
from ingestion.lib.opensecrets_api_client import OpenSecretsClient
from ingestion.lib.response_cache import ResponseCache
from ingestion.lib.store import PoliticsStore

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Sync financial data for one politician")
    parser.add_argument("--name", default="Ted Cruz", help="Politician name to search for")
    parser.add_argument("--db", help="DuckDB file (defaults to DATABASE_PATH)")
    args = parser.parse_args()

    try:
        settings = load_settings(required=[FEC_API_KEY_VAR])
    except ConfigurationError as e:
        configure_logging()
        logger.error(str(e))
        return 2
    configure_logging(settings.log_level)

    client_options = dict(
        min_interval=settings.request_delay_seconds,
        max_retries=settings.max_retries,
        cache=ResponseCache(),
    )
    fec = FECClient(api_key=settings.fec_api_key, base_url=settings.fec_api_base_url, **client_options)

    opensecrets = None
    if settings.opensecrets_api_key:
        opensecrets = OpenSecretsClient(
            api_key=settings.opensecrets_api_key,
            base_url=settings.opensecrets_api_base_url,
            **client_options,
        )

    with PoliticsStore(args.db or settings.database_path) as store:
        result = sync_politician_financials(store, fec, args.name, opensecrets=opensecrets)

    if result.politician_id is None:
        logger.error(f"No FEC candidate found for {args.name}")
        return 1

    for industry in result.opensecrets_industries:
        logger.info(f"  {industry.category}: ${industry.total:,.2f}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
