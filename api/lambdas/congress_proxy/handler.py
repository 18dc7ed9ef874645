"""
Lambda handler: GET /api/congress?endpoint=/bill/118&limit=20

Proxy to the Congress.gov API. Every query parameter except 'endpoint'
is forwarded and the server-side API key is added as X-API-Key. The
upstream JSON is returned as-is; upstream errors keep their status.
"""

import os
import logging
from api.lib import json_response, error_response, split_proxy_params
from api.lib.resources import get_congress_client
from ingestion.lib.config import ConfigurationError
from ingestion.lib.http_client import UpstreamAPIError

logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO'))


def handler(event, context):
    try:
        query_params = event.get('queryStringParameters') or {}
        endpoint, forwarded = split_proxy_params(query_params)
        if not endpoint:
            return error_response("No endpoint provided", 400)

        logger.info(f"Proxying Congress API request: endpoint={endpoint}, params={forwarded}")

        data = get_congress_client().proxy_get(endpoint, forwarded)
        return json_response(data)

    except ConfigurationError as e:
        logger.error(f"Congress proxy not configured: {e}")
        return error_response("Congress API is not configured", 500)
    except UpstreamAPIError as e:
        status = e.status_code or 502
        logger.error(f"Congress API error for {event.get('queryStringParameters')}: {e}")
        return error_response(f"Congress API error: HTTP {status}", status)
    except Exception as e:
        logger.error(f"Error fetching from Congress API: {e}", exc_info=True)
        return error_response("Failed to fetch from Congress API", 500)
