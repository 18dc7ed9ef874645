"""Unit tests for the bill ingest job."""

from datetime import date
from unittest.mock import Mock

import pytest

from ingestion.lib.bill_ingest import bill_from_detail, ingest_bills, resolve_sponsor
from ingestion.lib.analysis.name_matching import PoliticianResolver
from ingestion.lib.http_client import UpstreamAPIError, UpstreamNotFoundError
from ingestion.lib.models import Politician

DETAIL = {
    "congress": 118,
    "type": "HR",
    "number": "1234",
    "title": "Tech Regulation Act",
    "introducedDate": "2024-02-01",
    "latestAction": {"text": "Referred to committee"},
    "summary": {"text": "Regulates technology companies"},
    "sponsors": [{"bioguideId": "C001098", "fullName": "Sen. Cruz, Ted [R-TX]", "state": "TX"}],
}


class TestBillFromDetail:
    def test_maps_fields(self):
        bill = bill_from_detail(DETAIL, 118, sponsor_id="p1")
        assert bill.bill_number == "hr1234"
        assert bill.bill_type == "hr"
        assert bill.introduced_date == date(2024, 2, 1)
        assert bill.status == "Referred to committee"
        assert bill.summary == "Regulates technology companies"
        assert bill.sponsor_id == "p1"

    def test_missing_optional_fields(self):
        bill = bill_from_detail({"type": "S", "number": 5}, 117)
        assert bill.bill_number == "s5"
        assert bill.congress == 117
        assert bill.title == ""
        assert bill.introduced_date is None

    def test_unkeyable_payload(self):
        with pytest.raises(ValueError):
            bill_from_detail({}, 118)


class TestResolveSponsor:
    def test_bioguide_match(self, store, ted_cruz):
        politician, _ = store.upsert_politician(ted_cruz)
        assert resolve_sponsor(PoliticianResolver(store), DETAIL) == politician.id

    def test_name_fallback(self, store):
        politician, _ = store.upsert_politician(Politician(first_name="Ted", last_name="Cruz", state="TX"))
        detail = dict(DETAIL, sponsors=[{"fullName": "Sen. Cruz, Ted [R-TX]", "state": "TX"}])
        assert resolve_sponsor(PoliticianResolver(store), detail) == politician.id

    def test_no_sponsors(self, store):
        assert resolve_sponsor(PoliticianResolver(store), {"type": "hr", "number": 1}) is None


class TestIngestBills:
    def test_saves_bills_and_resolves_sponsors(self, store, ted_cruz):
        politician, _ = store.upsert_politician(ted_cruz)
        client = Mock()
        client.list_bills.return_value = [{"type": "HR", "number": "1234"}, {"type": "S", "number": "9"}]
        client.get_bill.side_effect = [
            {"bill": DETAIL},
            {"bill": {"type": "S", "number": "9", "sponsors": [{"bioguideId": "X000000"}]}},
        ]

        result = ingest_bills(store, client, congress=118, limit=2)

        assert result.saved == 2
        assert result.errors == 0
        assert result.unresolved_sponsors == 1
        client.list_bills.assert_called_once_with(congress=118, limit=2)
        bills = {b.bill_number: b for b in store.list_bills()}
        assert bills["hr1234"].sponsor_id == politician.id
        assert bills["s9"].sponsor_id is None

    def test_detail_failure_is_skipped(self, store):
        client = Mock()
        client.list_bills.return_value = [{"type": "HR", "number": "1"}, {"type": "HR", "number": "2"}]
        client.get_bill.side_effect = [UpstreamNotFoundError("gone", status_code=404), {"bill": {"type": "HR", "number": "2"}}]

        result = ingest_bills(store, client)

        assert result.saved == 1
        assert result.errors == 1

    def test_listing_failure(self, store):
        client = Mock()
        client.list_bills.side_effect = UpstreamAPIError("HTTP 500", status_code=500)

        result = ingest_bills(store, client)

        assert result.saved == 0
        assert result.errors == 1

    def test_rerun_updates_in_place(self, store):
        client = Mock()
        client.list_bills.return_value = [{"type": "HR", "number": "1234"}]
        client.get_bill.return_value = {"bill": DETAIL}

        ingest_bills(store, client)
        ingest_bills(store, client)

        assert store.record_counts()["bills"] == 1

    def test_subject_listing(self, store):
        client = Mock()
        client.get_bills_by_subject.return_value = [{"type": "HR", "number": "1234"}]
        client.get_bill.return_value = {"bill": DETAIL}

        result = ingest_bills(store, client, congress=118, limit=10, subject="Science, Technology, Communications")

        assert result.saved == 1
        client.get_bills_by_subject.assert_called_once_with(
            "Science, Technology, Communications", congress=118, limit=10
        )
        client.list_bills.assert_not_called()
