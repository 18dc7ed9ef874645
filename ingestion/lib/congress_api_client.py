"""Congress.gov API v3 client.

Throttling, retries and caching come from ``RateLimitedClient``; this
module adds the Congress endpoints and offset paging:

- ``list_bills`` / ``iter_bills`` for one page or every page of a Congress
- ``get_bill`` and ``get_bill_summaries`` for a single measure
- ``list_members`` and ``get_member_votes`` for the roster and voting record
- ``proxy_get`` for the raw passthrough behind ``/api/congress``

Requests are authenticated with the ``X-API-Key`` header.

    from ingestion.lib.congress_api_client import CongressAPIClient

    client = CongressAPIClient(min_interval=1.0)
    recent = client.list_bills(congress=118, limit=20, sort="updateDate+desc")
"""

import logging
import os
from typing import Any, Dict, Generator, List, Optional

from ingestion.lib.config import DEFAULT_CONGRESS_API_BASE_URL
from ingestion.lib.http_client import RateLimitedClient

logger = logging.getLogger(__name__)

DEFAULT_CONGRESS = 118
PAGE_SIZE = 250  # Congress.gov API max
LIST_KEYS = ("bills", "members", "votes", "committees", "amendments")


def extract_bill_list(response: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Pull the bill list out of a listing response.

    Some listing endpoints nest bills under ``congress``; missing keys
    yield an empty list.
    """
    nested = response.get("congress")
    if isinstance(nested, dict) and nested.get("bills"):
        return nested["bills"]
    return response.get("bills") or []


def _page_items(response: Dict[str, Any]) -> Optional[List[Dict[str, Any]]]:
    return next((response[key] for key in LIST_KEYS if key in response), None)


class CongressAPIClient(RateLimitedClient):
    """Congress.gov client; see the module docstring for the endpoint set."""

    provider_name = "Congress"

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, **kwargs):
        """``api_key`` and ``base_url`` fall back to CONGRESS_API_KEY and
        CONGRESS_API_BASE_URL; a missing key raises ValueError. Remaining
        keyword arguments (min_interval, max_retries, cache, ...) go to
        ``RateLimitedClient``.
        """
        api_key = api_key or os.environ.get("CONGRESS_API_KEY")
        if not api_key:
            raise ValueError("Congress API key required (pass api_key or set CONGRESS_API_KEY)")
        base_url = base_url or os.environ.get("CONGRESS_API_BASE_URL", DEFAULT_CONGRESS_API_BASE_URL)
        super().__init__(base_url, api_key=api_key, **kwargs)

        logger.info(f"Congress client ready at {self.base_url} (min_interval={self.min_interval}s)")

    def _auth_headers(self) -> Dict[str, str]:
        return {"X-API-Key": self.api_key}

    def _paginate(
        self,
        path: str,
        extra_params: Optional[Dict[str, Any]] = None,
        max_items: Optional[int] = None,
    ) -> Generator[Dict[str, Any], None, None]:
        """Yield records from every page of ``path``, stopping after ``max_items``."""
        emitted = 0
        offset = 0
        while True:
            query = {"format": "json", **(extra_params or {}), "offset": offset, "limit": PAGE_SIZE}
            response = self.get_json(path, query)

            records = _page_items(response)
            if records is None:
                logger.warning(f"{path}: no list key in response ({sorted(response)})")
                return

            for record in records:
                yield record
                emitted += 1
                if max_items and emitted >= max_items:
                    return

            offset += PAGE_SIZE
            if offset >= (response.get("pagination") or {}).get("count", 0):
                return

    # -- bills ------------------------------------------------------------

    def list_bills(
        self,
        congress: int = DEFAULT_CONGRESS,
        bill_type: Optional[str] = None,
        limit: int = 250,
        offset: int = 0,
        sort: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """One page of bills; ``sort`` takes API expressions like "updateDate+desc"."""
        endpoint = f"/bill/{congress}/{bill_type}" if bill_type else f"/bill/{congress}"
        params: Dict[str, Any] = {"format": "json", "limit": min(limit, PAGE_SIZE), "offset": offset}
        if sort:
            params["sort"] = sort
        return extract_bill_list(self.get_json(endpoint, params))

    def iter_bills(
        self,
        congress: int = DEFAULT_CONGRESS,
        bill_type: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Generator[Dict[str, Any], None, None]:
        """Walk every page of a Congress's bills (optionally one bill type)."""
        endpoint = f"/bill/{congress}/{bill_type}" if bill_type else f"/bill/{congress}"
        yield from self._paginate(endpoint, max_items=limit)

    def search_bills(self, query: str, congress: int = DEFAULT_CONGRESS, limit: int = 50) -> List[Dict[str, Any]]:
        """Keyword search across bills of one Congress."""
        params = {
            "congress": congress,
            "query": query,
            "format": "json",
            "limit": limit,
            "sort": "updateDate",
            "offset": 0,
        }
        return extract_bill_list(self.get_json("/bill", params))

    def get_bills_by_subject(self, subject: str, congress: int = DEFAULT_CONGRESS, limit: int = 50) -> List[Dict[str, Any]]:
        """List bills tagged with a legislative subject."""
        endpoint = f"/bill/{congress}/subject/{subject}"
        return extract_bill_list(self.get_json(endpoint, {"format": "json", "limit": limit}))

    def get_bill(self, congress: int, bill_type: str, bill_number: Any) -> Dict[str, Any]:
        """Full record for one bill, as ``{"bill": {...}}``; bill_type is case-insensitive."""
        endpoint = f"/bill/{congress}/{str(bill_type).lower()}/{bill_number}"
        return self.get_json(endpoint, {"format": "json"})

    def get_bill_summaries(self, congress: int, bill_type: str, bill_number: Any) -> Dict[str, Any]:
        """Get CRS summaries for a bill."""
        endpoint = f"/bill/{congress}/{str(bill_type).lower()}/{bill_number}/summaries"
        return self.get_json(endpoint, {"format": "json"})

    # -- members ----------------------------------------------------------

    def list_members(self, current_only: bool = True, limit: Optional[int] = None) -> Generator[Dict[str, Any], None, None]:
        """Yield member summaries; ``name`` comes back as "Last, First"."""
        params = {"currentMember": "true"} if current_only else {}
        yield from self._paginate("/member", params, limit)

    def get_member_votes(self, bioguide_id: str, limit: int = 100) -> List[Dict[str, Any]]:
        """Get a member's recorded votes."""
        response = self.get_json(f"/member/{bioguide_id}/votes", {"format": "json", "limit": limit})
        return response.get("votes") or []

    # -- passthrough ------------------------------------------------------

    def proxy_get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """Forward an arbitrary GET to the API (used by the /api/congress route)."""
        if not endpoint.startswith("/"):
            endpoint = f"/{endpoint}"
        return self.get_json(endpoint, params)
