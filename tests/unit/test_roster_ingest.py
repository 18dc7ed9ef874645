"""Unit tests for the roster ingest job."""

from datetime import datetime, timedelta
from unittest.mock import Mock

import requests

from ingestion.lib.models import Politician
from ingestion.lib.roster_ingest import ingest_rosters, is_recent

NOW = datetime(2024, 5, 1, 12, 0)


def _scraper(house=None, senate=None):
    scraper = Mock()
    scraper.scrape_house.return_value = house or []
    scraper.scrape_senate.return_value = senate or []
    return scraper


def test_is_recent():
    assert is_recent(NOW - timedelta(hours=23), NOW)
    assert not is_recent(NOW - timedelta(hours=24), NOW)
    assert not is_recent(None, NOW)


class TestIngestRosters:
    def test_creates_members(self, store):
        scraper = _scraper(
            house=[Politician(first_name="Mary", last_name="Peltola", state="Alaska", office="House")],
            senate=[Politician(first_name="Ted", last_name="Cruz", state="TX", office="Senate")],
        )

        result = ingest_rosters(store, scraper, now=NOW)

        assert (result.created, result.updated, result.errors) == (2, 0, 0)
        assert store.latest_scrape_time() == NOW

    def test_skips_recent_scrape(self, store):
        store.upsert_politician(Politician(first_name="A", last_name="B", last_scraped_at=NOW - timedelta(hours=1)))
        scraper = _scraper()

        result = ingest_rosters(store, scraper, now=NOW)

        assert result.skipped
        scraper.scrape_house.assert_not_called()

    def test_force_ignores_recent_scrape(self, store):
        store.upsert_politician(
            Politician(first_name="Ted", last_name="Cruz", state="TX", last_scraped_at=NOW - timedelta(hours=1))
        )
        scraper = _scraper(senate=[Politician(first_name="Ted", last_name="Cruz", state="TX", party="R")])

        result = ingest_rosters(store, scraper, force=True, now=NOW)

        assert not result.skipped
        assert result.updated == 1
        assert store.list_politicians()[0].party == "R"

    def test_chamber_failure_does_not_stop_other_chamber(self, store):
        scraper = _scraper(senate=[Politician(first_name="Ted", last_name="Cruz", state="TX")])
        scraper.scrape_house.side_effect = requests.exceptions.ConnectionError("down")

        result = ingest_rosters(store, scraper, now=NOW)

        assert result.errors == 1
        assert result.created == 1

    def test_member_failure_is_counted(self, ted_cruz):
        store = Mock()
        store.latest_scrape_time.return_value = None
        store.upsert_politician.side_effect = [RuntimeError("db locked"), (ted_cruz, True)]
        scraper = _scraper(house=[Politician(first_name="A", last_name="B"), ted_cruz])

        result = ingest_rosters(store, scraper, now=NOW)

        assert result.errors == 1
        assert result.created == 1
