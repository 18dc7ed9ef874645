"""
Response envelopes for the conflict tracker API

Every handler returns a Lambda-style dict. Successful calls wrap their
payload as ``{"success": true, "data": ..., "metadata": ...}``; failures
carry ``{"success": false, "error": {"message", "code", "details"}}``.
The Congress proxy is the one exception and passes upstream JSON
through untouched (``json_response``).
"""

from typing import Dict, Any, Optional, List, Union
import json
import math
import logging

from pydantic import BaseModel

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Content-Type": "application/json",
}


def clean_nan_values(data: Union[Dict, List, Any]) -> Union[Dict, List, Any]:
    """
    Replace NaN and +/-Inf floats with None, recursing into dicts and lists.

    pandas sums over empty groups can produce NaN, which strict JSON
    cannot encode.
    """
    if isinstance(data, dict):
        return {k: clean_nan_values(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [clean_nan_values(item) for item in data]
    if isinstance(data, float) and (math.isnan(data) or math.isinf(data)):
        return None
    return data


class NaNToNoneEncoder(json.JSONEncoder):
    """JSON encoder that writes NaN/Inf as null."""

    def encode(self, obj):
        return super().encode(clean_nan_values(obj))


def _to_jsonable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if isinstance(data, list):
        return [_to_jsonable(item) for item in data]
    if isinstance(data, dict):
        return {k: _to_jsonable(v) for k, v in data.items()}
    return data


def _build_response(status_code: int, body: Any) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": dict(CORS_HEADERS),
        "body": json.dumps(body, cls=NaNToNoneEncoder, default=str, allow_nan=False),
    }


def success_response(
    data: Any, status_code: int = 200, metadata: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Wrap ``data`` in the success envelope.

    Pydantic models (alone, in lists or in dicts) are dumped in JSON mode,
    so dates and enums come out as strings.

    Example:
        bills = store.list_bills(limit=20)
        return success_response(bills, metadata={'count': len(bills)})
    """
    body = {"success": True, "data": _to_jsonable(data)}
    if metadata:
        body["metadata"] = metadata
    return _build_response(status_code, body)


def error_response(
    message: str, status_code: int = 400, details: Optional[Any] = None
) -> Dict[str, Any]:
    """
    Wrap a one-line message in the error envelope.

    ``details`` is for client-facing context only (an id, a list of
    invalid fields); exception text never goes here.

    Example:
        return error_response("Politician not found", 404, details={'id': politician_id})
    """
    error = {"message": message, "code": status_code}
    if details:
        error["details"] = details
    return _build_response(status_code, {"success": False, "error": error})


def json_response(payload: Any, status_code: int = 200) -> Dict[str, Any]:
    """Return ``payload`` as the body, without an envelope."""
    return _build_response(status_code, payload)


def add_cors_headers(response: Dict[str, Any]) -> Dict[str, Any]:
    """Merge the CORS headers into an existing response dict."""
    response.setdefault("headers", {}).update(CORS_HEADERS)
    return response
