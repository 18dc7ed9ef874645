"""
Lambda handler: GET /api/politicians

Search politicians by name and/or state.
"""

import os
import logging
from api.lib import (
    success_response,
    error_response,
    parse_pagination_params,
    paginate,
    build_pagination_metadata,
    parse_query_params,
)
from api.lib.resources import get_store
from ingestion.lib.models import normalize_state

logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))


def handler(event, context):
    """
    GET /api/politicians

    Query parameters:
    - query: Case-insensitive substring of first or last name
    - state: State code or name ('TX', 'tx' and 'Texas' are equivalent)
    - limit: Records per page (default 50, max 500)
    - offset: Records to skip (default 0)

    Each politician carries counts of its votes, contributions,
    investments and expenditures.
    """
    try:
        query_params = parse_query_params(event)
        limit, offset = parse_pagination_params(query_params)

        query = query_params.get('query')
        state = normalize_state(query_params.get('state'))

        logger.info(f"Fetching politicians: query={query}, state={state}, limit={limit}, offset={offset}")

        politicians = get_store().find_politicians(query=query, state=state)
        page = paginate(politicians, limit, offset)

        pagination = build_pagination_metadata(
            count=len(page),
            total_count=len(politicians),
            limit=limit,
            offset=offset,
            base_url='/api/politicians',
            query_params=query_params,
        )
        return success_response(page, metadata={'pagination': pagination})

    except Exception as e:
        logger.error(f"Error fetching politicians: {e}", exc_info=True)
        return error_response("Failed to fetch politicians", 500)
