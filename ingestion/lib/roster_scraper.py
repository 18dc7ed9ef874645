"""Scrape the public House and Senate member listing pages.

Both pages render members as plain HTML table rows, so a GET plus
BeautifulSoup is enough. Parsing is split from fetching so the parsers
can be tested against saved HTML.

House rows:  name | party | state + district | district
Senate rows: name | party | state

States are stored as two-letter codes ("California 11th" -> "CA").
"""

import logging
import re
from typing import List, Optional, Tuple

import requests
from bs4 import BeautifulSoup

from ingestion.lib.models import Politician, normalize_state

logger = logging.getLogger(__name__)

HOUSE_ROSTER_URL = "https://www.house.gov/representatives"
SENATE_ROSTER_URL = "https://www.senate.gov/senators/"
USER_AGENT = "congress-conflict-tracker/1.0 (roster scraper)"

EXTERNAL_LINK_MARKER = "(link is external)"
# "Texas 7th", "Alaska At Large"
_DISTRICT_SUFFIX_RE = re.compile(r"\s+(\d+(st|nd|rd|th)|at[\s-]large)$", re.IGNORECASE)


def split_roster_name(raw: str) -> Tuple[str, str]:
    """Split a roster name into (first, last).

    "Last, First" pages keep everything before the comma as the last
    name; "First Rest Of Name" pages keep the first token as the first
    name and the rest as the last name.
    """
    text = " ".join((raw or "").replace(EXTERNAL_LINK_MARKER, " ").split())
    if "," in text:
        last, _, first = text.partition(",")
        return first.strip(), last.strip()
    first, _, rest = text.partition(" ")
    return first, rest.strip()


def _state_from_cell(text: str) -> Optional[str]:
    return normalize_state(_DISTRICT_SUFFIX_RE.sub("", text.strip()))


def _cells(row) -> List[str]:
    return [cell.get_text(" ", strip=True) for cell in row.find_all("td")]


def parse_house_roster(html: str) -> List[Politician]:
    """Parse the House representatives table into Politician records."""
    soup = BeautifulSoup(html, "html.parser")
    members = []
    for row in soup.select("table tr"):
        cells = _cells(row)
        if len(cells) < 4:
            continue
        first_name, last_name = split_roster_name(cells[0])
        if not first_name or not last_name:
            logger.debug(f"Skipping House row without a usable name: {cells[0]!r}")
            continue
        members.append(
            Politician(
                first_name=first_name,
                last_name=last_name,
                party=cells[1] or None,
                state=_state_from_cell(cells[2]),
                district=cells[3] or None,
                office="House",
            )
        )
    logger.info(f"Parsed {len(members)} House members")
    return members


def parse_senate_roster(html: str) -> List[Politician]:
    """Parse the Senate listing; rows missing name, party or state are dropped."""
    soup = BeautifulSoup(html, "html.parser")
    members = []
    for row in soup.select("table tr"):
        cells = _cells(row)
        if len(cells) < 3:
            continue
        first_name, last_name = split_roster_name(cells[0])
        party, state = cells[1], cells[2]
        if not (first_name and last_name and party and state):
            continue
        members.append(
            Politician(
                first_name=first_name,
                last_name=last_name,
                party=party,
                state=normalize_state(state),
                district=None,
                office="Senate",
            )
        )
    logger.info(f"Parsed {len(members)} Senate members")
    return members


class RosterScraper:
    """Fetch and parse both chamber rosters."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: int = 30,
        house_url: str = HOUSE_ROSTER_URL,
        senate_url: str = SENATE_ROSTER_URL,
    ):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.house_url = house_url
        self.senate_url = senate_url

    def _fetch(self, url: str) -> str:
        logger.info(f"Fetching roster page {url}")
        response = self.session.get(url, headers={"User-Agent": USER_AGENT}, timeout=self.timeout)
        response.raise_for_status()
        return response.text

    def scrape_house(self) -> List[Politician]:
        return parse_house_roster(self._fetch(self.house_url))

    def scrape_senate(self) -> List[Politician]:
        return parse_senate_roster(self._fetch(self.senate_url))
