"""Unit tests for the DuckDB politics store."""

from datetime import date, datetime

import pytest

from ingestion.lib.models import (
    Bill,
    Contribution,
    Expenditure,
    Investment,
    Politician,
    ReportStatus,
    Vote,
)
from ingestion.lib.store import InvalidTransitionError, PoliticsStore, RecordNotFoundError


class TestPoliticians:
    def test_upsert_creates_then_updates(self, store, ted_cruz):
        stored, created = store.upsert_politician(ted_cruz)
        assert created

        again, created = store.upsert_politician(
            Politician(first_name="Ted", last_name="Cruz", state="TX", fec_candidate_id="S2TX00312")
        )
        assert not created
        assert again.id == stored.id
        assert again.fec_candidate_id == "S2TX00312"
        # None fields do not clobber stored values
        assert again.bioguide_id == "C001098"
        assert len(store.list_politicians()) == 1

    def test_same_name_different_state_is_new_row(self, store):
        store.upsert_politician(Politician(first_name="John", last_name="Smith", state="CA"))
        _, created = store.upsert_politician(Politician(first_name="John", last_name="Smith", state="NY"))
        assert created

    def test_null_state_matches_null_state(self, store):
        store.upsert_politician(Politician(first_name="Jane", last_name="Doe"))
        _, created = store.upsert_politician(Politician(first_name="Jane", last_name="Doe", party="I"))
        assert not created

    def test_find_by_name_and_state(self, store, ted_cruz):
        store.upsert_politician(ted_cruz)
        store.upsert_politician(Politician(first_name="John", last_name="Cornyn", state="TX"))
        store.upsert_politician(Politician(first_name="Nancy", last_name="Pelosi", state="CA"))

        assert [p.last_name for p in store.find_politicians(query="cru")] == ["Cruz"]
        assert [p.last_name for p in store.find_politicians(state="TX")] == ["Cruz", "Cornyn"]
        assert len(store.find_politicians()) == 3
        assert store.find_politicians(query="nobody") == []

    def test_find_includes_counts(self, store, ted_cruz):
        politician, _ = store.upsert_politician(ted_cruz)
        store.add_contribution(Contribution(politician_id=politician.id, amount=10))
        store.add_contribution(Contribution(politician_id=politician.id, amount=20))
        store.add_vote(Vote(politician_id=politician.id, bill_title="Act", vote="YEA"))

        summary = store.find_politicians(query="Cruz")[0]

        assert summary.counts.contributions == 2
        assert summary.counts.votes == 1
        assert summary.counts.investments == 0

    def test_find_by_bioguide(self, store, ted_cruz):
        store.upsert_politician(ted_cruz)
        assert store.find_politician_by_bioguide("C001098").last_name == "Cruz"
        assert store.find_politician_by_bioguide("X000000") is None

    def test_fec_id_partitions(self, store, ted_cruz):
        politician, _ = store.upsert_politician(ted_cruz)
        store.upsert_politician(Politician(first_name="John", last_name="Cornyn", state="TX"))

        assert len(store.list_politicians_without_fec_id()) == 2
        store.update_politician(politician.id, fec_candidate_id="S2TX00312")
        assert [p.last_name for p in store.list_politicians_with_fec_id()] == ["Cruz"]
        assert [p.last_name for p in store.list_politicians_without_fec_id()] == ["Cornyn"]

    def test_update_unknown_politician(self, store):
        with pytest.raises(RecordNotFoundError):
            store.update_politician("missing", party="D")

    def test_update_unknown_field(self, store, ted_cruz):
        politician, _ = store.upsert_politician(ted_cruz)
        with pytest.raises(ValueError):
            store.update_politician(politician.id, nickname="Teddy")

    def test_latest_scrape_time(self, store):
        assert store.latest_scrape_time() is None
        store.upsert_politician(
            Politician(first_name="A", last_name="B", last_scraped_at=datetime(2024, 1, 1, 12, 0))
        )
        store.upsert_politician(
            Politician(first_name="C", last_name="D", last_scraped_at=datetime(2024, 1, 2, 12, 0))
        )
        assert store.latest_scrape_time() == datetime(2024, 1, 2, 12, 0)


class TestBills:
    def test_upsert_by_bill_number(self, store, tech_bill):
        stored, created = store.upsert_bill(tech_bill)
        assert created

        updated, created = store.upsert_bill(
            Bill(bill_number="hr1234", title="Tech Regulation Act", status="Passed House")
        )
        assert not created
        assert updated.id == stored.id
        assert store.get_bill(stored.id).status == "Passed House"
        assert store.record_counts()["bills"] == 1

    def test_find_by_bill_number(self, store, tech_bill):
        stored, _ = store.upsert_bill(tech_bill)
        assert store.find_bill_by_number("hr1234").id == stored.id
        assert store.find_bill_by_number("s1") is None

    def test_list_filters_and_order(self, store):
        store.upsert_bill(Bill(bill_number="hr1", status="Introduced", introduced_date=date(2023, 1, 1)))
        store.upsert_bill(Bill(bill_number="hres5", status="Introduced", introduced_date=date(2024, 1, 1)))
        store.upsert_bill(Bill(bill_number="s7", status="Passed Senate"))
        store.upsert_bill(Bill(bill_number="s8", status="Introduced", introduced_date=date(2023, 6, 1)))

        assert [b.bill_number for b in store.list_bills()] == ["hres5", "s8", "hr1", "s7"]
        assert [b.bill_number for b in store.list_bills(bill_type="hr")] == ["hres5", "hr1"]
        assert [b.bill_number for b in store.list_bills(status="Passed Senate")] == ["s7"]
        assert len(store.list_bills(limit=2)) == 2


class TestFinancialRecords:
    def test_newest_first_with_undated_last(self, store, ted_cruz):
        politician, _ = store.upsert_politician(ted_cruz)
        store.add_contribution(Contribution(politician_id=politician.id, amount=1, date=date(2023, 1, 1)))
        store.add_contribution(Contribution(politician_id=politician.id, amount=2))
        store.add_contribution(Contribution(politician_id=politician.id, amount=3, date=date(2024, 1, 1)))

        assert [c.amount for c in store.list_contributions(politician.id)] == [3, 1, 2]

    def test_upsert_contribution_is_idempotent(self, store):
        contribution = Contribution(id="fec-C1-2024-01-01", politician_id="p1", amount=100)
        _, created = store.upsert_contribution(contribution)
        assert created
        _, created = store.upsert_contribution(contribution.model_copy(update={"amount": 150}))
        assert not created

        stored = store.list_contributions("p1")
        assert len(stored) == 1
        assert stored[0].amount == 150

    def test_upsert_vote_is_idempotent(self, store):
        vote = Vote(id="vote-C001098-118-1-42", politician_id="p1", bill_title="Energy Act", vote="YEA")
        _, created = store.upsert_vote(vote)
        assert created
        _, created = store.upsert_vote(vote.model_copy(update={"vote": "NAY"}))
        assert not created

        stored = store.list_votes("p1")
        assert len(stored) == 1
        assert stored[0].vote == "NAY"

    def test_other_record_types(self, store):
        store.add_expenditure(Expenditure(politician_id="p1", amount=5, source="Super PAC"))
        store.add_investment(Investment(politician_id="p1", value=1000, asset="Exxon", type="Stock"))
        store.add_vote(Vote(politician_id="p1", bill_title="Energy Act", vote="NAY"))

        assert store.list_expenditures("p1")[0].source == "Super PAC"
        assert store.list_investments("p1")[0].asset == "Exxon"
        assert store.list_votes("p1")[0].vote == "NAY"

    def test_politician_detail(self, store, ted_cruz):
        politician, _ = store.upsert_politician(ted_cruz)
        store.add_contribution(Contribution(politician_id=politician.id, amount=10))
        store.create_report("Title", "Description", politician_id=politician.id)

        detail = store.get_politician_detail(politician.id)

        assert detail.last_name == "Cruz"
        assert len(detail.contributions) == 1
        assert len(detail.reports) == 1
        assert store.get_politician_detail("missing") is None


class TestReports:
    def test_create_is_pending(self, store, ted_cruz):
        politician, _ = store.upsert_politician(ted_cruz)
        report = store.create_report("Stock trade", "Traded before vote", politician_id=politician.id)

        assert report.status == ReportStatus.PENDING
        assert report.politician.last_name == "Cruz"
        assert store.get_report(report.id).title == "Stock trade"

    def test_list_filters(self, store):
        first = store.create_report("A", "a")
        second = store.create_report("B", "b")
        store.update_report_status(first.id, "reviewed")

        assert [r.id for r in store.list_reports()] == [second.id, first.id]
        assert [r.id for r in store.list_reports(status="reviewed")] == [first.id]
        assert [r.id for r in store.list_reports(status="pending")] == [second.id]

    def test_transitions_only_from_pending(self, store):
        report = store.create_report("A", "a")
        dismissed = store.update_report_status(report.id, ReportStatus.DISMISSED)
        assert dismissed.status == ReportStatus.DISMISSED

        with pytest.raises(InvalidTransitionError):
            store.update_report_status(report.id, "reviewed")

    def test_unknown_status(self, store):
        report = store.create_report("A", "a")
        with pytest.raises(InvalidTransitionError):
            store.update_report_status(report.id, "escalated")

    def test_unknown_report(self, store):
        with pytest.raises(RecordNotFoundError):
            store.update_report_status("missing", "reviewed")


def test_file_backed_store_persists(tmp_path):
    path = str(tmp_path / "nested" / "politics.duckdb")
    with PoliticsStore(path) as store:
        store.upsert_politician(Politician(first_name="Ted", last_name="Cruz", state="TX"))

    with PoliticsStore(path) as store:
        assert [p.last_name for p in store.list_politicians()] == ["Cruz"]
