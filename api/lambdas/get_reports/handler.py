"""
Lambda handler: GET /api/reports

Most recent ethics reports with their linked politician.
"""

import os
import logging
from api.lib import success_response, error_response, parse_pagination_params, parse_query_params
from api.lib.resources import get_store
from ingestion.lib.models import ReportStatus

logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))

VALID_STATUSES = [s.value for s in ReportStatus]


def handler(event, context):
    """
    GET /api/reports

    Query parameters:
    - status: 'pending', 'reviewed' or 'dismissed'
    - limit: Max reports (default 50, max 500)
    """
    try:
        query_params = parse_query_params(event)
        limit, _ = parse_pagination_params(query_params)

        status = query_params.get('status')
        if status:
            status = status.lower()
            if status not in VALID_STATUSES:
                return error_response(
                    "Invalid report status", 400, details={'allowed': VALID_STATUSES}
                )

        reports = get_store().list_reports(status=status, limit=limit)
        return success_response(reports, metadata={'count': len(reports)})

    except Exception as e:
        logger.error(f"Error fetching reports: {e}", exc_info=True)
        return error_response("Failed to fetch reports", 500)
