"""
Method + path routing for the API handlers.

Maps requests like ``GET /api/politicians/abc123/financials`` to the
matching handler and builds the Lambda-style event it expects
(``pathParameters``, ``queryStringParameters``, ``body``).
"""

import logging
import re
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import parse_qsl

from api.lib.response_formatter import add_cors_headers, error_response

from api.lambdas.congress_proxy.handler import handler as congress_proxy
from api.lambdas.create_report.handler import handler as create_report
from api.lambdas.get_bills.handler import handler as get_bills
from api.lambdas.get_conflict_analysis.handler import handler as get_conflict_analysis
from api.lambdas.get_financial_summary.handler import handler as get_financial_summary
from api.lambdas.get_politician.handler import handler as get_politician
from api.lambdas.get_politicians.handler import handler as get_politicians
from api.lambdas.get_reports.handler import handler as get_reports

logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any], Any], Dict[str, Any]]

ROUTES: List[Tuple[str, str, Handler]] = [
    ("GET", "/api/politicians", get_politicians),
    ("GET", "/api/politicians/{id}", get_politician),
    ("GET", "/api/politicians/{id}/financials", get_financial_summary),
    ("GET", "/api/politicians/{id}/conflicts", get_conflict_analysis),
    ("GET", "/api/bills", get_bills),
    ("GET", "/api/reports", get_reports),
    ("POST", "/api/reports", create_report),
    ("GET", "/api/congress", congress_proxy),
]


def _compile(template: str) -> "re.Pattern":
    pattern = re.sub(r"\{(\w+)\}", r"(?P<\1>[^/]+)", template.rstrip("/"))
    return re.compile(f"^{pattern}/?$")


_COMPILED = [(method, _compile(path), handler) for method, path, handler in ROUTES]


def match_route(method: str, path: str) -> Tuple[Optional[Handler], Dict[str, str], bool]:
    """
    Find the handler for a request.

    Returns:
        (handler or None, path parameters, whether the path exists for another method)
    """
    path_known = False
    for route_method, pattern, handler in _COMPILED:
        match = pattern.match(path)
        if not match:
            continue
        if route_method == method.upper():
            return handler, match.groupdict(), True
        path_known = True
    return None, {}, path_known


def build_event(
    method: str,
    path: str,
    query_string: str = "",
    body: Optional[str] = None,
    path_parameters: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Build a Lambda-style event; repeated query keys keep their last value."""
    return {
        "httpMethod": method.upper(),
        "path": path,
        "pathParameters": path_parameters or {},
        "queryStringParameters": dict(parse_qsl(query_string, keep_blank_values=True)) or None,
        "body": body,
    }


def dispatch(method: str, path: str, query_string: str = "", body: Optional[str] = None) -> Dict[str, Any]:
    """Route one request and return the handler's response dict."""
    if method.upper() == "OPTIONS":
        return add_cors_headers({"statusCode": 204, "body": ""})

    handler, path_parameters, path_known = match_route(method, path)
    if handler is None:
        if path_known:
            return error_response("Method not allowed", 405)
        return error_response("Not found", 404)

    event = build_event(method, path, query_string, body, path_parameters)
    logger.info(f"{method.upper()} {path}")
    return handler(event, None)
