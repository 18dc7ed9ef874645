"""Unit tests for the OpenFEC client."""

import os
from unittest.mock import patch

import pytest

from ingestion.lib.fec_api_client import (
    FECClient,
    IndependentExpenditureFlag,
    LargeContributionFlag,
    build_candidate_query,
)


@pytest.fixture
def fec(session, clock):
    return FECClient(
        api_key="fec-key",
        base_url="https://api.test.fec.gov/v1",
        min_interval=0,
        session=session,
        clock=clock,
        sleep=clock.sleep,
    )


def _route(make_response, routes):
    """side_effect that answers by URL suffix."""

    def respond(url, params=None, headers=None, timeout=None):
        for suffix, payload in routes.items():
            if url.endswith(suffix):
                return make_response(payload=payload)
        return make_response(404)

    return respond


class TestBuildCandidateQuery:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Ted Cruz", "Cruz, Ted"),
            ("Alexandria Ocasio-Cortez", "OcasioCortez, Alexandria"),
            ("John Q. Public", "Public, John"),
            ("Cruz", "Cruz"),
            ("", ""),
        ],
    )
    def test_query(self, name, expected):
        assert build_candidate_query(name) == expected


class TestFECClient:
    def test_requires_key(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="FEC API key required"):
                FECClient()

    def test_search_candidates_params(self, fec, session, make_response):
        session.get.return_value = make_response(payload={"results": [{"candidate_id": "S2TX00312"}]})

        results = fec.search_candidates("Ted Cruz")

        assert results[0]["candidate_id"] == "S2TX00312"
        args, kwargs = session.get.call_args
        assert args[0].endswith("/candidates/search")
        assert kwargs["params"]["q"] == "Cruz, Ted"
        assert kwargs["params"]["api_key"] == "fec-key"
        assert kwargs["params"]["sort"] == "-receipts"

    def test_missing_results_is_empty(self, fec, session, make_response):
        session.get.return_value = make_response(payload={})
        assert fec.get_candidate_committees("S2TX00312") == []
        assert fec.get_candidate("S2TX00312") is None

    def test_schedule_e_omits_unset_filters(self, fec, session, make_response):
        session.get.return_value = make_response(payload={"results": []})
        fec.get_independent_expenditures(candidate_id="S2TX00312")
        params = session.get.call_args[1]["params"]
        assert params["candidate_id"] == "S2TX00312"
        assert "committee_id" not in params
        assert params["is_notice"] == "false"

    def test_top_industries_aggregates_employers(self, fec, session, make_response):
        session.get.side_effect = _route(
            make_response,
            {
                "/committees": {"results": [{"committee_id": "C1"}]},
                "/schedule_a": {
                    "results": [
                        {"contributor_employer": "ACME", "contribution_receipt_amount": 100},
                        {"contributor_employer": "Globex", "contribution_receipt_amount": 500},
                        {"contributor_employer": "ACME", "contribution_receipt_amount": 50},
                        {"contributor_employer": None, "contribution_receipt_amount": 10},
                    ]
                },
            },
        )

        top = fec.get_top_industries("S2TX00312")

        assert [(t.category, t.total) for t in top] == [
            ("Globex", 500),
            ("ACME", 150),
            ("Unknown", 10),
        ]

    def test_analyze_potential_conflicts(self, fec, session, make_response):
        session.get.side_effect = _route(
            make_response,
            {
                "/committees": {"results": [{"committee_id": "C1"}]},
                "/schedule_a": {
                    "results": [
                        {"contribution_receipt_amount": 25_000, "contributor_name": "Big Donor"},
                        {"contribution_receipt_amount": 9_999, "contributor_name": "Small Donor"},
                    ]
                },
                "/schedule_e": {
                    "results": [
                        {"expenditure_amount": 3_000, "committee_name": "Super PAC", "support_oppose_indicator": "S"}
                    ]
                },
            },
        )

        flags = fec.analyze_potential_conflicts("S2TX00312")

        assert len(flags) == 2
        assert isinstance(flags[0], LargeContributionFlag)
        assert flags[0].contributor == "Big Donor"
        assert isinstance(flags[1], IndependentExpenditureFlag)
        assert flags[1].spender == "Super PAC"
