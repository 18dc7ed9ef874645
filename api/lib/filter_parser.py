"""
Request parsing for the conflict tracker API

Turns Lambda-style events into plain filter dicts, path parameters and
JSON bodies.
"""

from typing import Dict, Any, Optional, Tuple
import base64
import json
import logging

logger = logging.getLogger(__name__)

PROXY_DIRECTIVE = 'endpoint'


class RequestParseError(ValueError):
    """Raised when a request body or parameter cannot be parsed."""


def parse_query_params(event: Dict[str, Any]) -> Dict[str, str]:
    """
    Extract query parameters from a Lambda-style event.

    Blank values are dropped so ``?state=`` behaves like no filter.

    Args:
        event: Event dict with optional 'queryStringParameters'

    Returns:
        Dict of query parameters
    """
    query_params = event.get('queryStringParameters') or {}
    return {
        k: v for k, v in query_params.items()
        if v is not None and str(v).strip() != ''
    }


def get_path_param(event: Dict[str, Any], name: str) -> Optional[str]:
    """Return a path parameter, or None when missing or blank."""
    value = (event.get('pathParameters') or {}).get(name)
    if value is None or not str(value).strip():
        return None
    return str(value).strip()


def parse_json_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Decode the JSON object in the request body.

    Raises:
        RequestParseError: Missing body, invalid JSON, or not an object
    """
    body = event.get('body')
    if body is None or body == '':
        raise RequestParseError("Request body is required")

    if event.get('isBase64Encoded'):
        try:
            body = base64.b64decode(body).decode('utf-8')
        except (ValueError, UnicodeDecodeError) as e:
            raise RequestParseError("Request body is not valid base64") from e

    if isinstance(body, (bytes, bytearray)):
        body = body.decode('utf-8')

    if isinstance(body, dict):
        return body

    try:
        parsed = json.loads(body)
    except json.JSONDecodeError as e:
        raise RequestParseError("Request body is not valid JSON") from e

    if not isinstance(parsed, dict):
        raise RequestParseError("Request body must be a JSON object")
    return parsed


def split_proxy_params(query_params: Dict[str, Any]) -> Tuple[Optional[str], Dict[str, Any]]:
    """
    Separate the proxy directive from the parameters to forward.

    Example:
        >>> split_proxy_params({'endpoint': '/bill/118', 'limit': '20'})
        ('/bill/118', {'limit': '20'})
    """
    forwarded = {k: v for k, v in query_params.items() if k != PROXY_DIRECTIVE}
    return query_params.get(PROXY_DIRECTIVE), forwarded
