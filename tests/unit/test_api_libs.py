"""
Unit tests for API shared libraries

Tests for pagination, response_formatter and filter_parser.
"""

import base64
import json
from datetime import date

import pytest

from api.lib.filter_parser import (
    RequestParseError,
    get_path_param,
    parse_json_body,
    parse_query_params,
    split_proxy_params,
)
from api.lib.pagination import build_pagination_metadata, paginate, parse_pagination_params
from api.lib.response_formatter import add_cors_headers, error_response, success_response
from ingestion.lib.models import Bill


# ============================================================================
# Pagination Tests
# ============================================================================

class TestPagination:
    """Tests for pagination utilities."""

    def test_paginate_first_page(self):
        assert paginate(list(range(100)), limit=10, offset=0) == list(range(10))

    def test_paginate_past_end(self):
        assert paginate(list(range(5)), limit=10, offset=10) == []

    def test_paginate_clamps_limit(self):
        assert len(paginate(list(range(1000)), limit=10_000)) == 500

    def test_metadata_links(self):
        meta = build_pagination_metadata(
            count=10, total_count=25, limit=10, offset=10,
            base_url='/api/politicians', query_params={'state': 'TX', 'limit': '10'},
        )
        assert meta['has_next'] and meta['has_prev']
        assert meta['next'] == '/api/politicians?state=TX&limit=10&offset=20'
        assert meta['prev'] == '/api/politicians?state=TX&limit=10&offset=0'

    def test_metadata_last_page(self):
        meta = build_pagination_metadata(count=5, total_count=25, limit=10, offset=20, base_url='/x')
        assert not meta['has_next']
        assert meta['next'] is None

    @pytest.mark.parametrize(
        "params, expected",
        [
            ({}, (50, 0)),
            ({'limit': '20', 'offset': '40'}, (20, 40)),
            ({'limit': '9999'}, (500, 0)),
            ({'limit': '0', 'offset': '-5'}, (1, 0)),
            ({'limit': 'abc', 'offset': 'xyz'}, (50, 0)),
        ],
    )
    def test_parse_pagination_params(self, params, expected):
        assert parse_pagination_params(params) == expected


# ============================================================================
# Response Formatter Tests
# ============================================================================

class TestResponseFormatter:
    """Tests for response formatting."""

    def test_success_response(self):
        response = success_response({'key': 'value'}, metadata={'count': 1})
        body = json.loads(response['body'])
        assert response['statusCode'] == 200
        assert body == {'success': True, 'data': {'key': 'value'}, 'metadata': {'count': 1}}
        assert response['headers']['Access-Control-Allow-Origin'] == '*'

    def test_success_response_serializes_models(self):
        bill = Bill(bill_number='hr1', introduced_date=date(2024, 1, 2))
        body = json.loads(success_response([bill], status_code=201)['body'])
        assert body['data'][0]['bill_number'] == 'hr1'
        assert body['data'][0]['introduced_date'] == '2024-01-02'

    def test_error_response(self):
        response = error_response("Politician not found", 404, details={'id': 'abc'})
        body = json.loads(response['body'])
        assert response['statusCode'] == 404
        assert body['success'] is False
        assert body['error'] == {'message': 'Politician not found', 'code': 404, 'details': {'id': 'abc'}}

    def test_add_cors_headers(self):
        response = add_cors_headers({'statusCode': 204, 'body': ''})
        assert response['headers']['Access-Control-Allow-Methods'] == 'GET, POST, OPTIONS'


# ============================================================================
# Filter Parser Tests
# ============================================================================

class TestFilterParser:
    """Tests for request parsing."""

    def test_parse_query_params_drops_blank(self):
        event = {'queryStringParameters': {'state': '', 'query': 'cruz', 'x': None}}
        assert parse_query_params(event) == {'query': 'cruz'}

    def test_parse_query_params_missing(self):
        assert parse_query_params({'queryStringParameters': None}) == {}

    def test_get_path_param(self):
        assert get_path_param({'pathParameters': {'id': ' abc '}}, 'id') == 'abc'
        assert get_path_param({'pathParameters': {'id': ' '}}, 'id') is None
        assert get_path_param({}, 'id') is None

    def test_parse_json_body(self):
        assert parse_json_body({'body': '{"title": "x"}'}) == {'title': 'x'}

    def test_parse_base64_body(self):
        body = base64.b64encode(b'{"title": "x"}').decode()
        assert parse_json_body({'body': body, 'isBase64Encoded': True}) == {'title': 'x'}

    @pytest.mark.parametrize("body", [None, '', '{not json', '[1, 2]'])
    def test_parse_json_body_errors(self, body):
        with pytest.raises(RequestParseError):
            parse_json_body({'body': body})

    def test_split_proxy_params(self):
        endpoint, forwarded = split_proxy_params({'endpoint': '/bill/118', 'limit': '20'})
        assert endpoint == '/bill/118'
        assert forwarded == {'limit': '20'}

    def test_split_proxy_params_without_endpoint(self):
        assert split_proxy_params({'limit': '20'}) == (None, {'limit': '20'})
