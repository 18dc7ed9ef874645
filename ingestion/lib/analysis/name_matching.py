"""
Record linkage for legislator names.

Upstream sources spell names many ways: "Cruz, Ted", "Ted Cruz",
"Sen. Cruz, Rafael Edward [R-TX]". ``normalize_name`` reduces all of them
to a (first_name, last_name) pair; ``match_politician`` then looks the
pair up among known politicians.

Matching order:
    1. exact case-insensitive first + last name (and state when given)
    2. case-insensitive containment on the non-empty parts, ignoring state

The first qualifying candidate wins. Every match reports how many
candidates qualified and a fuzzy similarity score so callers can log
likely misattributions instead of trusting them silently.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from fuzzywuzzy import fuzz

logger = logging.getLogger(__name__)

HONORIFICS = {"rep", "sen", "hon", "del", "mr", "mrs", "ms", "dr", "senator", "representative"}
SUFFIXES = {"jr", "sr", "ii", "iii", "iv"}

# Trailing party/state tags such as "[D-CA-11]" or "(R-TX)"
_TAG_RE = re.compile(r"[\[(][^\])]*[\])]")
_PUNCT_RE = re.compile(r"[^\w\s,'-]")

EXACT = "exact"
CONTAINS = "contains"


@dataclass(frozen=True)
class NormalizedName:
    first_name: str
    last_name: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class NameMatch:
    """Outcome of resolving a name to a politician.

    Attributes:
        politician: The chosen candidate (first in result order)
        method: "exact" or "contains"
        candidate_count: Number of candidates that qualified under ``method``
        confidence: fuzzywuzzy token_sort_ratio of the names, 0.0 to 1.0
    """

    politician: Any
    method: str
    candidate_count: int
    confidence: float

    @property
    def ambiguous(self) -> bool:
        return self.candidate_count > 1


def _clean_tokens(text: str) -> list:
    tokens = []
    for token in text.split():
        bare = token.strip(".,'-").lower()
        if not bare or bare in HONORIFICS or bare in SUFFIXES:
            continue
        tokens.append(token.strip(".,"))
    return tokens


def normalize_name(raw: Optional[str]) -> Optional[NormalizedName]:
    """Split a free-text name into first and last name.

    "Last, First [Middle]" takes the part before the comma as the last
    name. Otherwise the last token is the last name. Middle names are
    dropped in both forms so they normalise the same way.

    Example:
        >>> normalize_name("Cruz, Ted") == normalize_name("Ted Cruz")
        True
        >>> normalize_name("Rep. Pelosi, Nancy [D-CA-11]")
        NormalizedName(first_name='Nancy', last_name='Pelosi')

    Returns:
        NormalizedName, or None when nothing usable is left after cleaning
    """
    if not raw:
        return None

    text = _TAG_RE.sub(" ", raw)
    text = _PUNCT_RE.sub(" ", text)

    if "," in text:
        last_part, _, first_part = text.partition(",")
        last_tokens = _clean_tokens(last_part)
        first_tokens = _clean_tokens(first_part.replace(",", " "))
        # "Smith, Jr., John" leaves the suffix out of both sides
        last_name = " ".join(last_tokens)
        first_name = first_tokens[0] if first_tokens else ""
    else:
        tokens = _clean_tokens(text)
        if not tokens:
            return None
        last_name = tokens[-1]
        first_name = tokens[0] if len(tokens) > 1 else ""

    if not first_name and not last_name:
        return None
    return NormalizedName(first_name=first_name, last_name=last_name)


def _field(candidate: Any, name: str) -> str:
    if isinstance(candidate, dict):
        value = candidate.get(name)
    else:
        value = getattr(candidate, name, None)
    return (value or "").strip()


def _similarity(name: NormalizedName, candidate: Any) -> float:
    candidate_name = f"{_field(candidate, 'first_name')} {_field(candidate, 'last_name')}"
    return fuzz.token_sort_ratio(name.full_name, candidate_name) / 100.0


def match_politician(
    name: Any,
    candidates: Sequence[Any],
    state: Optional[str] = None,
) -> Optional[NameMatch]:
    """Find the politician a free-text name refers to.

    Args:
        name: Raw name string or an already normalised NormalizedName
        candidates: Politicians (models or dicts) in result order
        state: Optional two-letter state that the exact match must share

    Returns:
        NameMatch, or None when the name is empty or nothing qualifies
    """
    normalized = name if isinstance(name, NormalizedName) else normalize_name(name)
    if normalized is None:
        return None

    first = normalized.first_name.lower()
    last = normalized.last_name.lower()
    wanted_state = (state or "").strip().upper()

    exact = [
        c for c in candidates
        if _field(c, "first_name").lower() == first
        and _field(c, "last_name").lower() == last
        and (not wanted_state or _field(c, "state").upper() == wanted_state)
    ]
    if exact:
        return NameMatch(
            politician=exact[0],
            method=EXACT,
            candidate_count=len(exact),
            confidence=_similarity(normalized, exact[0]),
        )

    contains = [
        c for c in candidates
        if (not first or first in _field(c, "first_name").lower())
        and (not last or last in _field(c, "last_name").lower())
    ]
    if not contains:
        return None

    match = NameMatch(
        politician=contains[0],
        method=CONTAINS,
        candidate_count=len(contains),
        confidence=_similarity(normalized, contains[0]),
    )
    if match.ambiguous:
        logger.warning(
            f"Ambiguous name '{normalized.full_name}': {match.candidate_count} candidates, "
            f"picked {_field(match.politician, 'first_name')} {_field(match.politician, 'last_name')}"
        )
    return match


class PoliticianResolver:
    """Resolve upstream person references against the store.

    Bioguide id wins when present; otherwise the name is matched against
    every stored politician.
    """

    def __init__(self, store):
        self.store = store
        self._politicians = None

    def _candidates(self):
        if self._politicians is None:
            self._politicians = self.store.list_politicians()
        return self._politicians

    def refresh(self) -> None:
        self._politicians = None

    def resolve(
        self,
        bioguide_id: Optional[str] = None,
        name: Optional[str] = None,
        state: Optional[str] = None,
    ) -> Optional[NameMatch]:
        if bioguide_id:
            politician = self.store.find_politician_by_bioguide(bioguide_id)
            if politician is not None:
                return NameMatch(politician=politician, method="bioguide", candidate_count=1, confidence=1.0)
            # Unknown bioguide ids are left unresolved
            return None
        if name:
            return match_politician(name, self._candidates(), state=state)
        return None
