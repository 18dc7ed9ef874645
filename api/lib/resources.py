"""
Shared resources for API handlers.

The store and the Congress proxy client are created on first use and
reused across warm invocations, the same way a Lambda keeps its
connection between calls. Tests and the local server inject their own
instances with ``set_store`` / ``set_congress_client``.

The proxy client keeps a bounded, expiring response cache since it
lives as long as the process.
"""

import logging
import os
from typing import Optional

from ingestion.lib.config import CONGRESS_API_KEY_VAR, load_settings
from ingestion.lib.congress_api_client import CongressAPIClient
from ingestion.lib.response_cache import ResponseCache
from ingestion.lib.store import PoliticsStore

logger = logging.getLogger(__name__)

PROXY_CACHE_MAX_ENTRIES = int(os.environ.get('PROXY_CACHE_MAX_ENTRIES', '512'))
PROXY_CACHE_TTL_SECONDS = float(os.environ.get('PROXY_CACHE_TTL_SECONDS', '300'))

_store: Optional[PoliticsStore] = None
_congress_client: Optional[CongressAPIClient] = None


def get_store() -> PoliticsStore:
    """Get or open the politics store."""
    global _store
    if _store is None:
        settings = load_settings()
        logger.info(f"Opening politics store at {settings.database_path}")
        _store = PoliticsStore(settings.database_path)
    return _store


def set_store(store: Optional[PoliticsStore]) -> None:
    global _store
    _store = store


def get_congress_client() -> CongressAPIClient:
    """Get or create the Congress.gov client used by the proxy route.

    Raises:
        ConfigurationError: CONGRESS_API_KEY is not set
    """
    global _congress_client
    if _congress_client is None:
        settings = load_settings(required=[CONGRESS_API_KEY_VAR])
        _congress_client = CongressAPIClient(
            api_key=settings.congress_api_key,
            base_url=settings.congress_api_base_url,
            min_interval=settings.request_delay_seconds,
            max_retries=settings.max_retries,
            cache=ResponseCache(
                max_entries=PROXY_CACHE_MAX_ENTRIES, ttl_seconds=PROXY_CACHE_TTL_SECONDS
            ),
        )
    return _congress_client


def set_congress_client(client: Optional[CongressAPIClient]) -> None:
    global _congress_client
    _congress_client = client
