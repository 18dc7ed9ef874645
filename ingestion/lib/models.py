"""Pydantic models for the politics database.

These mirror the duckdb tables in ``ingestion.lib.store``. Monetary
amounts are validated as non-negative; dates that cannot be parsed are
stored as ``None`` and such records are left out of time series.
"""

import logging
import uuid
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M:%SZ")

# Alias so models can have a field called ``date``
OptionalDate = Optional[date]


def new_id() -> str:
    """Generate a surrogate primary key."""
    return uuid.uuid4().hex


def parse_date(value: Any) -> Optional[date]:
    """Parse an upstream date value.

    Accepts ``date``/``datetime`` objects and ISO or US formatted strings,
    including ISO timestamps with a time part. Anything else returns None.

    Example:
        >>> parse_date("2024-03-01T00:00:00")
        datetime.date(2024, 3, 1)
        >>> parse_date("not a date") is None
        True
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    text = str(value).strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    logger.debug(f"Unparseable date value: {text!r}")
    return None


STATE_CODES = {
    "alabama": "AL", "alaska": "AK", "arizona": "AZ", "arkansas": "AR",
    "california": "CA", "colorado": "CO", "connecticut": "CT", "delaware": "DE",
    "florida": "FL", "georgia": "GA", "hawaii": "HI", "idaho": "ID",
    "illinois": "IL", "indiana": "IN", "iowa": "IA", "kansas": "KS",
    "kentucky": "KY", "louisiana": "LA", "maine": "ME", "maryland": "MD",
    "massachusetts": "MA", "michigan": "MI", "minnesota": "MN", "mississippi": "MS",
    "missouri": "MO", "montana": "MT", "nebraska": "NE", "nevada": "NV",
    "new hampshire": "NH", "new jersey": "NJ", "new mexico": "NM", "new york": "NY",
    "north carolina": "NC", "north dakota": "ND", "ohio": "OH", "oklahoma": "OK",
    "oregon": "OR", "pennsylvania": "PA", "rhode island": "RI", "south carolina": "SC",
    "south dakota": "SD", "tennessee": "TN", "texas": "TX", "utah": "UT",
    "vermont": "VT", "virginia": "VA", "washington": "WA", "west virginia": "WV",
    "wisconsin": "WI", "wyoming": "WY",
    "district of columbia": "DC", "puerto rico": "PR", "guam": "GU",
    "american samoa": "AS", "northern mariana islands": "MP",
    "virgin islands": "VI", "u.s. virgin islands": "VI",
}


def normalize_state(value: Any) -> Optional[str]:
    """Two-letter USPS code for a state name or code.

    Politicians are stored with codes, since the Senate roster and FEC
    both report them. Unrecognised values are returned stripped.

    Example:
        >>> normalize_state("California"), normalize_state("tx")
        ('CA', 'TX')
    """
    if value is None:
        return None
    text = " ".join(str(value).split())
    if not text:
        return None
    code = STATE_CODES.get(text.lower())
    if code:
        return code
    if len(text) == 2 and text.isalpha():
        return text.upper()
    return text


class ReportStatus(str, Enum):
    """Lifecycle of a user-submitted ethics report."""

    PENDING = "pending"
    REVIEWED = "reviewed"
    DISMISSED = "dismissed"


class VotePosition(str, Enum):
    YEA = "YEA"
    NAY = "NAY"
    PRESENT = "PRESENT"
    NOT_VOTING = "NOT_VOTING"


class Politician(BaseModel):
    """A legislator known to the system."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(default_factory=new_id)
    first_name: str
    last_name: str
    party: Optional[str] = None
    state: Optional[str] = None
    district: Optional[str] = None
    office: Optional[str] = None
    bioguide_id: Optional[str] = Field(None, description="Congress.gov bioguide id")
    fec_candidate_id: Optional[str] = Field(None, description="FEC candidate id")
    opensecrets_id: Optional[str] = Field(None, description="OpenSecrets CID")
    last_scraped_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Bill(BaseModel):
    """A bill; ``bill_number`` is ``<type><number>`` (e.g. ``hr1234``)."""

    id: str = Field(default_factory=new_id)
    bill_number: str
    congress: Optional[int] = None
    bill_type: Optional[str] = None
    number: Optional[str] = None
    title: str = ""
    summary: str = ""
    introduced_date: Optional[date] = None
    status: str = ""
    sponsor_id: Optional[str] = None


class Contribution(BaseModel):
    id: str = Field(default_factory=new_id)
    politician_id: Optional[str] = None
    amount: float = Field(..., ge=0)
    date: OptionalDate = None
    source: str = "Unknown"
    industry: str = "Unknown"
    type: str = "Individual"


class Investment(BaseModel):
    id: str = Field(default_factory=new_id)
    politician_id: Optional[str] = None
    value: float = Field(..., ge=0)
    asset: str = ""
    type: str = "Other"
    date: OptionalDate = None


class Expenditure(BaseModel):
    id: str = Field(default_factory=new_id)
    politician_id: Optional[str] = None
    amount: float = Field(..., ge=0)
    date: OptionalDate = None
    source: str = "Unknown"
    industry: str = "Independent Expenditure"
    type: str = "PAC"


class Vote(BaseModel):
    id: str = Field(default_factory=new_id)
    politician_id: Optional[str] = None
    bill_id: Optional[str] = None
    bill_title: str = ""
    vote: VotePosition = VotePosition.NOT_VOTING
    vote_date: Optional[date] = None


class Report(BaseModel):
    """User-submitted ethics complaint."""

    id: str = Field(default_factory=new_id)
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    evidence: str = ""
    status: ReportStatus = ReportStatus.PENDING
    politician_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    politician: Optional[Politician] = None


class RecordCounts(BaseModel):
    votes: int = 0
    contributions: int = 0
    investments: int = 0
    expenditures: int = 0


class PoliticianSummary(Politician):
    """Politician row plus related record counts, for list endpoints."""

    counts: RecordCounts = Field(default_factory=RecordCounts)


class PoliticianDetail(Politician):
    """Politician with all related records, newest first."""

    votes: List[Vote] = Field(default_factory=list)
    contributions: List[Contribution] = Field(default_factory=list)
    investments: List[Investment] = Field(default_factory=list)
    expenditures: List[Expenditure] = Field(default_factory=list)
    reports: List[Report] = Field(default_factory=list)
