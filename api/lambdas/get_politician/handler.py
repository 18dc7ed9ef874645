"""
Lambda handler: GET /api/politicians/{id}

Politician with votes, contributions, investments, expenditures and
reports, each newest first.
"""

import os
import logging
from api.lib import success_response, error_response, get_path_param
from api.lib.resources import get_store

logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))


def handler(event, context):
    try:
        politician_id = get_path_param(event, 'id')
        if not politician_id:
            return error_response("Missing politician ID", 400)

        politician = get_store().get_politician_detail(politician_id)
        if politician is None:
            return error_response("Politician not found", 404, details={'id': politician_id})

        return success_response(politician)

    except Exception as e:
        logger.error(f"Error fetching politician details: {e}", exc_info=True)
        return error_response("Failed to fetch politician details", 500)
