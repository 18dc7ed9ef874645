#!/usr/bin/env python3
"""
Link politicians to their FEC candidate ids.

Searches FEC by name for every politician without an id and stores the
first result. When several candidates come back the choice is logged.
Requires FEC_API_KEY.

Usage:
    python3 scripts/update_fec_ids.py
"""

import sys
import argparse
import logging
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ingestion.lib.config import FEC_API_KEY_VAR, ConfigurationError, configure_logging, load_settings
from ingestion.lib.fec_api_client import FECClient
from ingestion.lib.finance_ingest import update_fec_ids
from ingestion.lib.response_cache import ResponseCache
from ingestion.lib.store import PoliticsStore

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Attach FEC candidate ids to politicians")
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
        result = update_fec_ids(store, fec)

    logger.info(
        f"FEC ids: {result.updated} updated, {result.not_found} not found, "
        f"{result.ambiguous} ambiguous, {result.errors} errors"
    )
    return 0


if __name__ == '__main__':
    sys.exit(main())
