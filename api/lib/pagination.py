"""
Limit/offset paging for list endpoints.

List handlers load rows from the store, slice them with ``paginate`` and
attach ``build_pagination_metadata`` so clients can follow next/prev links.
"""

from typing import Dict, List, Any, Optional, Sequence, Tuple
from urllib.parse import urlencode

DEFAULT_LIMIT = 50
MAX_LIMIT = 500


def _clamp(limit: int, offset: int) -> Tuple[int, int]:
    return max(1, min(limit, MAX_LIMIT)), max(0, offset)


def paginate(items: Sequence[Any], limit: int = DEFAULT_LIMIT, offset: int = 0) -> List[Any]:
    """Return one page of ``items``; limit is clamped to 1..500, offset to >= 0."""
    limit, offset = _clamp(limit, offset)
    return list(items[offset:offset + limit])


def _page_link(base_url: str, params: Dict[str, Any], limit: int, offset: int) -> str:
    return f"{base_url}?{urlencode({**params, 'limit': limit, 'offset': offset})}"


def build_pagination_metadata(
    count: int,
    total_count: int,
    limit: int,
    offset: int,
    base_url: str,
    query_params: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Describe the current page and link its neighbours.

    ``query_params`` other than limit/offset are carried into the links,
    so ``/api/politicians?state=TX`` pages stay filtered by state.

    Example output for the first page of 535 members:
        {"total": 535, "count": 50, "limit": 50, "offset": 0,
         "has_next": true, "has_prev": false,
         "next": "/api/politicians?limit=50&offset=50", "prev": null}
    """
    carried = {k: v for k, v in (query_params or {}).items() if k not in ('limit', 'offset')}
    has_next = offset + count < total_count
    has_prev = offset > 0

    return {
        "total": total_count,
        "count": count,
        "limit": limit,
        "offset": offset,
        "has_next": has_next,
        "has_prev": has_prev,
        "next": _page_link(base_url, carried, limit, offset + limit) if has_next else None,
        "prev": _page_link(base_url, carried, limit, max(0, offset - limit)) if has_prev else None,
    }


def _as_int(value: Any, fallback: int) -> int:
    try:
        return int(value)
    except (ValueError, TypeError):
        return fallback


def parse_pagination_params(query_params: Dict[str, Any]) -> Tuple[int, int]:
    """Read limit/offset from the query string; junk values fall back to defaults."""
    return _clamp(
        _as_int(query_params.get('limit', DEFAULT_LIMIT), DEFAULT_LIMIT),
        _as_int(query_params.get('offset', 0), 0),
    )
