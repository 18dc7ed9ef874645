"""OpenSecrets API client.

All OpenSecrets calls go to a single endpoint and select the operation
with the ``method`` parameter. The key is sent as ``apikey`` and
``output=json`` is always requested.

Records in the JSON output wrap their fields in an ``@attributes``
object; the helpers below unwrap it and coerce dollar strings to floats.
"""

import logging
import os
from typing import Any, Dict, List, Optional

from ingestion.lib.config import DEFAULT_OPENSECRETS_API_BASE_URL
from ingestion.lib.http_client import RateLimitedClient

logger = logging.getLogger(__name__)

MONEY_FIELDS = ("total", "pacs", "indivs")


def _unwrap_records(container: Any, key: str) -> List[Dict[str, Any]]:
    """Return ``container[key]`` as a list of flat dicts.

    OpenSecrets returns a bare object instead of a one-element list when
    there is a single record.
    """
    if not isinstance(container, dict):
        return []
    records = container.get(key) or []
    if isinstance(records, dict):
        records = [records]

    flat = []
    for record in records:
        fields = dict(record.get("@attributes", record))
        for money in MONEY_FIELDS:
            if money in fields:
                try:
                    fields[money] = float(fields[money] or 0)
                except (TypeError, ValueError):
                    fields[money] = 0.0
        flat.append(fields)
    return flat


class OpenSecretsClient(RateLimitedClient):
    """Client for the OpenSecrets API (candContrib, candIndustry, getLegislators)."""

    provider_name = "OpenSecrets"

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None, **kwargs):
        api_key = api_key or os.environ.get("OPENSECRETS_API_KEY")
        if not api_key:
            raise ValueError(
                "OpenSecrets API key required. Provide via api_key parameter or "
                "OPENSECRETS_API_KEY environment variable."
            )
        base_url = base_url or os.environ.get(
            "OPENSECRETS_API_BASE_URL", DEFAULT_OPENSECRETS_API_BASE_URL
        )
        super().__init__(base_url, api_key=api_key, **kwargs)

    def _auth_params(self) -> Dict[str, Any]:
        return {"apikey": self.api_key, "output": "json"}

    def _call(self, method: str, **params) -> Dict[str, Any]:
        data = self.get_json("/", {"method": method, **params})
        return (data or {}).get("response") or {}

    def get_top_contributors(self, cid: str) -> List[Dict[str, Any]]:
        """Top contributing organizations for a candidate (CRP id)."""
        response = self._call("candContrib", cid=cid)
        return _unwrap_records(response.get("contributors"), "contributor")

    def get_industry_contributions(self, cid: str) -> List[Dict[str, Any]]:
        """Industry totals for a candidate.

        Returns:
            Dicts with ``industry_name``, ``industry_code``, ``total``,
            ``pacs`` and ``indivs``
        """
        response = self._call("candIndustry", cid=cid)
        return _unwrap_records(response.get("industries"), "industry")

    def get_legislators_by_state(self, state: str) -> List[Dict[str, Any]]:
        response = self._call("getLegislators", id=state)
        return _unwrap_records(response.get("legislators"), "legislator")
