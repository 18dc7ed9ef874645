"""
Lambda handler: GET /api/bills

Most recently introduced bills, optionally filtered.
"""

import os
import logging
from api.lib import success_response, error_response, parse_pagination_params, parse_query_params
from api.lib.resources import get_store

logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))


def handler(event, context):
    """
    GET /api/bills

    Query parameters:
    - status: Exact latest-action text
    - type: Bill number prefix (e.g., 'hr', 's')
    - limit: Max bills (default 50, max 500)
    """
    try:
        query_params = parse_query_params(event)
        limit, _ = parse_pagination_params(query_params)
        status = query_params.get('status')
        bill_type = query_params.get('type')
        if bill_type:
            bill_type = bill_type.lower()

        logger.info(f"Fetching bills: status={status}, type={bill_type}, limit={limit}")

        bills = get_store().list_bills(status=status, bill_type=bill_type, limit=limit)
        return success_response(bills, metadata={'count': len(bills)})

    except Exception as e:
        logger.error(f"Error fetching bills: {e}", exc_info=True)
        return error_response("Failed to fetch bills", 500)
