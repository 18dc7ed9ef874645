"""Shared API library initialization."""

from .pagination import paginate, build_pagination_metadata, parse_pagination_params
from .response_formatter import (
    success_response,
    json_response,
    error_response,
    add_cors_headers,
    clean_nan_values,
)
from .filter_parser import (
    RequestParseError,
    parse_query_params,
    get_path_param,
    parse_json_body,
    split_proxy_params,
)

__all__ = [
    "paginate",
    "build_pagination_metadata",
    "parse_pagination_params",
    "success_response",
    "json_response",
    "error_response",
    "add_cors_headers",
    "clean_nan_values",
    "RequestParseError",
    "parse_query_params",
    "get_path_param",
    "parse_json_body",
    "split_proxy_params",
]
