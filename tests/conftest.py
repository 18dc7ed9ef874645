"""Shared fixtures for unit and API tests."""

from datetime import date
from unittest.mock import Mock

import pytest

from ingestion.lib.models import Bill, Contribution, Investment, Politician, Vote
from ingestion.lib.store import PoliticsStore


class FakeClock:
    """Monotonic clock whose ``sleep`` advances time instead of blocking."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def _build_response(status_code=200, payload=None, headers=None, json_error=False):
    response = Mock()
    response.status_code = status_code
    response.headers = headers or {}
    if json_error:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = payload if payload is not None else {}
    return response


@pytest.fixture
def make_response():
    """Factory for mock ``requests.Response`` objects."""
    return _build_response


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session():
    """Mock requests session; set ``session.get.side_effect`` / ``return_value``."""
    return Mock()


@pytest.fixture
def store():
    """Fresh in-memory politics store."""
    store = PoliticsStore(":memory:")
    yield store
    store.close()


@pytest.fixture
def ted_cruz():
    return Politician(
        first_name="Ted",
        last_name="Cruz",
        party="R",
        state="TX",
        office="Senate",
        bioguide_id="C001098",
    )


@pytest.fixture
def tech_contribution():
    return Contribution(amount=50_000, date=date(2024, 1, 15), source="Acme PAC", industry="Technology")


@pytest.fixture
def tech_bill():
    return Bill(
        bill_number="hr1234",
        congress=118,
        bill_type="hr",
        number="1234",
        title="Tech Regulation Act",
        summary="Regulates technology companies",
        introduced_date=date(2024, 2, 1),
        status="Introduced in House",
    )


@pytest.fixture
def energy_investment():
    return Investment(value=250_000, asset="Exxon", type="Stock", date=date(2023, 6, 1))


@pytest.fixture
def yea_vote():
    return Vote(bill_title="Exxon Tax Relief Act", vote="YEA", vote_date=date(2024, 3, 1))
