"""DuckDB-backed store for politicians, bills, money and reports.

One ``PoliticsStore`` wraps one duckdb connection (a file path or
``:memory:``). Tables are created on open. Every write is a single
statement; there are no multi-record transactions, so batch jobs can
skip a failing record and carry on.

Rows keep a ``seq`` column from a sequence so listings without a
natural order come back in insertion order.

Example:
    store = PoliticsStore("data/politics.duckdb")
    politician, created = store.upsert_politician(
        Politician(first_name="Ted", last_name="Cruz", state="TX", office="Senate")
    )
    store.add_contribution(Contribution(politician_id=politician.id, amount=2900))
"""

import logging
import os
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

import duckdb

from ingestion.lib.models import (
    Bill,
    Contribution,
    Expenditure,
    Investment,
    Politician,
    PoliticianDetail,
    PoliticianSummary,
    RecordCounts,
    Report,
    ReportStatus,
    Vote,
)

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 50

SCHEMA = [
    "CREATE SEQUENCE IF NOT EXISTS row_seq START 1",
    """
    CREATE TABLE IF NOT EXISTS politicians (
        id VARCHAR PRIMARY KEY,
        first_name VARCHAR NOT NULL,
        last_name VARCHAR NOT NULL,
        party VARCHAR,
        state VARCHAR,
        district VARCHAR,
        office VARCHAR,
        bioguide_id VARCHAR,
        fec_candidate_id VARCHAR,
        opensecrets_id VARCHAR,
        last_scraped_at TIMESTAMP,
        seq BIGINT DEFAULT nextval('row_seq')
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS bills (
        id VARCHAR PRIMARY KEY,
        bill_number VARCHAR NOT NULL UNIQUE,
        congress INTEGER,
        bill_type VARCHAR,
        number VARCHAR,
        title VARCHAR,
        summary VARCHAR,
        introduced_date DATE,
        status VARCHAR,
        sponsor_id VARCHAR,
        seq BIGINT DEFAULT nextval('row_seq')
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS contributions (
        id VARCHAR PRIMARY KEY,
        politician_id VARCHAR,
        amount DOUBLE NOT NULL,
        date DATE,
        source VARCHAR,
        industry VARCHAR,
        type VARCHAR,
        seq BIGINT DEFAULT nextval('row_seq')
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS expenditures (
        id VARCHAR PRIMARY KEY,
        politician_id VARCHAR,
        amount DOUBLE NOT NULL,
        date DATE,
        source VARCHAR,
        industry VARCHAR,
        type VARCHAR,
        seq BIGINT DEFAULT nextval('row_seq')
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS investments (
        id VARCHAR PRIMARY KEY,
        politician_id VARCHAR,
        value DOUBLE NOT NULL,
        asset VARCHAR,
        type VARCHAR,
        date DATE,
        seq BIGINT DEFAULT nextval('row_seq')
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS votes (
        id VARCHAR PRIMARY KEY,
        politician_id VARCHAR,
        bill_id VARCHAR,
        bill_title VARCHAR,
        vote VARCHAR,
        vote_date DATE,
        seq BIGINT DEFAULT nextval('row_seq')
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS reports (
        id VARCHAR PRIMARY KEY,
        title VARCHAR NOT NULL,
        description VARCHAR NOT NULL,
        evidence VARCHAR,
        status VARCHAR NOT NULL,
        politician_id VARCHAR,
        created_at TIMESTAMP,
        updated_at TIMESTAMP,
        seq BIGINT DEFAULT nextval('row_seq')
    )
    """,
]

POLITICIAN_COLUMNS = (
    "id", "first_name", "last_name", "party", "state", "district", "office",
    "bioguide_id", "fec_candidate_id", "opensecrets_id", "last_scraped_at",
)
BILL_COLUMNS = (
    "id", "bill_number", "congress", "bill_type", "number", "title", "summary",
    "introduced_date", "status", "sponsor_id",
)
CONTRIBUTION_COLUMNS = ("id", "politician_id", "amount", "date", "source", "industry", "type")
EXPENDITURE_COLUMNS = CONTRIBUTION_COLUMNS
INVESTMENT_COLUMNS = ("id", "politician_id", "value", "asset", "type", "date")
VOTE_COLUMNS = ("id", "politician_id", "bill_id", "bill_title", "vote", "vote_date")
REPORT_COLUMNS = (
    "id", "title", "description", "evidence", "status", "politician_id",
    "created_at", "updated_at",
)

# Report lifecycle: operators move pending reports to a final state
REPORT_TRANSITIONS = {
    ReportStatus.PENDING: {ReportStatus.REVIEWED, ReportStatus.DISMISSED},
    ReportStatus.REVIEWED: set(),
    ReportStatus.DISMISSED: set(),
}


class StoreError(Exception):
    """Base exception for store errors."""


class RecordNotFoundError(StoreError, LookupError):
    """Raised when an update targets a record that does not exist."""


class InvalidTransitionError(StoreError, ValueError):
    """Raised for a report status change the lifecycle does not allow."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _dump(model, columns: Sequence[str]) -> List[Any]:
    data = model.model_dump(mode="python")
    values = []
    for column in columns:
        value = data.get(column)
        if isinstance(value, Enum):
            value = value.value
        values.append(value)
    return values


class PoliticsStore:
    """Create / find / update / upsert operations over the duckdb tables."""

    def __init__(self, database_path: str = ":memory:"):
        if database_path != ":memory:":
            directory = os.path.dirname(database_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
        self.database_path = database_path
        self.conn = duckdb.connect(database_path)
        for statement in SCHEMA:
            self.conn.execute(statement)
        logger.debug(f"Opened politics store at {database_path}")

    def close(self) -> None:
        self.conn.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ------------------------------------------------------------------
    # Low-level helpers
    # ------------------------------------------------------------------

    def _rows(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        cursor = self.conn.execute(sql, list(params))
        names = [d[0] for d in cursor.description]
        return [dict(zip(names, row)) for row in cursor.fetchall()]

    def _one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Dict[str, Any]]:
        rows = self._rows(sql, params)
        return rows[0] if rows else None

    def _insert(self, table: str, columns: Sequence[str], values: Sequence[Any]) -> None:
        placeholders = ", ".join("?" for _ in columns)
        self.conn.execute(
            f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})", list(values)
        )

    def _update(self, table: str, record_id: str, fields: Dict[str, Any]) -> None:
        if not fields:
            return
        assignments = ", ".join(f"{name} = ?" for name in fields)
        self.conn.execute(
            f"UPDATE {table} SET {assignments} WHERE id = ?", [*fields.values(), record_id]
        )

    # ------------------------------------------------------------------
    # Politicians
    # ------------------------------------------------------------------

    def upsert_politician(self, politician: Politician) -> Tuple[Politician, bool]:
        """Insert or update by first name + last name + state.

        Returns:
            (stored politician, True if a new row was created)
        """
        existing = self._one(
            f"""
            SELECT {', '.join(POLITICIAN_COLUMNS)} FROM politicians
            WHERE first_name = ? AND last_name = ? AND state IS NOT DISTINCT FROM ?
            ORDER BY seq LIMIT 1
            """,
            [politician.first_name, politician.last_name, politician.state],
        )
        if existing is None:
            self._insert("politicians", POLITICIAN_COLUMNS, _dump(politician, POLITICIAN_COLUMNS))
            return politician, True

        updates = {
            column: value
            for column, value in zip(POLITICIAN_COLUMNS, _dump(politician, POLITICIAN_COLUMNS))
            if column != "id" and value is not None
        }
        self._update("politicians", existing["id"], updates)
        return self.get_politician(existing["id"]), False

    def get_politician(self, politician_id: str) -> Optional[Politician]:
        row = self._one(
            f"SELECT {', '.join(POLITICIAN_COLUMNS)} FROM politicians WHERE id = ?", [politician_id]
        )
        return Politician(**row) if row else None

    def list_politicians(self) -> List[Politician]:
        rows = self._rows(f"SELECT {', '.join(POLITICIAN_COLUMNS)} FROM politicians ORDER BY seq")
        return [Politician(**row) for row in rows]

    def find_politicians(
        self,
        query: Optional[str] = None,
        state: Optional[str] = None,
    ) -> List[PoliticianSummary]:
        """Case-insensitive name search plus optional exact state filter.

        Each result carries counts of its votes, contributions,
        investments and expenditures.
        """
        where_clauses: List[str] = []
        params: List[Any] = []

        if query:
            where_clauses.append("(first_name ILIKE ? OR last_name ILIKE ?)")
            pattern = f"%{query}%"
            params.extend([pattern, pattern])

        if state:
            where_clauses.append("state = ?")
            params.append(state)

        where_sql = " AND ".join(where_clauses) if where_clauses else "1=1"
        columns = ", ".join(f"p.{c}" for c in POLITICIAN_COLUMNS)

        rows = self._rows(
            f"""
            SELECT {columns},
                (SELECT COUNT(*) FROM votes v WHERE v.politician_id = p.id) AS votes,
                (SELECT COUNT(*) FROM contributions c WHERE c.politician_id = p.id) AS contributions,
                (SELECT COUNT(*) FROM investments i WHERE i.politician_id = p.id) AS investments,
                (SELECT COUNT(*) FROM expenditures e WHERE e.politician_id = p.id) AS expenditures
            FROM politicians p
            WHERE {where_sql}
            ORDER BY p.seq
            """,
            params,
        )

        results = []
        for row in rows:
            counts = RecordCounts(
                votes=row.pop("votes"),
                contributions=row.pop("contributions"),
                investments=row.pop("investments"),
                expenditures=row.pop("expenditures"),
            )
            results.append(PoliticianSummary(**row, counts=counts))
        return results

    def find_politician_by_bioguide(self, bioguide_id: str) -> Optional[Politician]:
        row = self._one(
            f"SELECT {', '.join(POLITICIAN_COLUMNS)} FROM politicians "
            f"WHERE bioguide_id = ? ORDER BY seq LIMIT 1",
            [bioguide_id],
        )
        return Politician(**row) if row else None

    def list_politicians_without_fec_id(self) -> List[Politician]:
        rows = self._rows(
            f"SELECT {', '.join(POLITICIAN_COLUMNS)} FROM politicians "
            f"WHERE fec_candidate_id IS NULL ORDER BY seq"
        )
        return [Politician(**row) for row in rows]

    def list_politicians_with_fec_id(self) -> List[Politician]:
        rows = self._rows(
            f"SELECT {', '.join(POLITICIAN_COLUMNS)} FROM politicians "
            f"WHERE fec_candidate_id IS NOT NULL ORDER BY seq"
        )
        return [Politician(**row) for row in rows]

    def update_politician(self, politician_id: str, **fields) -> Politician:
        unknown = set(fields) - set(POLITICIAN_COLUMNS[1:])
        if unknown:
            raise ValueError(f"Unknown politician fields: {sorted(unknown)}")
        if self.get_politician(politician_id) is None:
            raise RecordNotFoundError(f"Politician not found: {politician_id}")
        self._update("politicians", politician_id, fields)
        return self.get_politician(politician_id)

    def latest_scrape_time(self) -> Optional[datetime]:
        row = self._one("SELECT MAX(last_scraped_at) AS latest FROM politicians")
        return row["latest"] if row else None

    def record_counts(self) -> Dict[str, int]:
        """Row count per table."""
        counts = {}
        for table in ("politicians", "bills", "contributions", "expenditures", "investments", "votes", "reports"):
            counts[table] = self.conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
        return counts

    # ------------------------------------------------------------------
    # Bills
    # ------------------------------------------------------------------

    def upsert_bill(self, bill: Bill) -> Tuple[Bill, bool]:
        """Insert or update by ``bill_number``."""
        existing = self._one("SELECT id FROM bills WHERE bill_number = ?", [bill.bill_number])
        if existing is None:
            self._insert("bills", BILL_COLUMNS, _dump(bill, BILL_COLUMNS))
            return bill, True

        updates = dict(zip(BILL_COLUMNS, _dump(bill, BILL_COLUMNS)))
        updates.pop("id")
        updates.pop("bill_number")
        self._update("bills", existing["id"], updates)
        return bill.model_copy(update={"id": existing["id"]}), False

    def get_bill(self, bill_id: str) -> Optional[Bill]:
        row = self._one(f"SELECT {', '.join(BILL_COLUMNS)} FROM bills WHERE id = ?", [bill_id])
        return Bill(**row) if row else None

    def find_bill_by_number(self, bill_number: str) -> Optional[Bill]:
        row = self._one(f"SELECT {', '.join(BILL_COLUMNS)} FROM bills WHERE bill_number = ?", [bill_number])
        return Bill(**row) if row else None

    def list_bills(
        self,
        status: Optional[str] = None,
        bill_type: Optional[str] = None,
        limit: int = DEFAULT_LIST_LIMIT,
    ) -> List[Bill]:
        """Bills newest introduction first.

        Args:
            status: Exact latest-action text
            bill_type: Prefix of ``bill_number`` (e.g. "hr" also matches "hres")
            limit: Maximum rows
        """
        where_clauses: List[str] = []
        params: List[Any] = []

        if status:
            where_clauses.append("status = ?")
            params.append(status)

        if bill_type:
            where_clauses.append("starts_with(bill_number, ?)")
            params.append(bill_type)

        where_sql = " AND ".join(where_clauses) if where_clauses else "1=1"
        params.append(limit)

        rows = self._rows(
            f"""
            SELECT {', '.join(BILL_COLUMNS)} FROM bills
            WHERE {where_sql}
            ORDER BY introduced_date DESC NULLS LAST, seq
            LIMIT ?
            """,
            params,
        )
        return [Bill(**row) for row in rows]

    # ------------------------------------------------------------------
    # Financial records and votes
    # ------------------------------------------------------------------

    def upsert_contribution(self, contribution: Contribution) -> Tuple[Contribution, bool]:
        """Insert or replace a contribution with a caller-chosen id."""
        existing = self._one("SELECT id FROM contributions WHERE id = ?", [contribution.id])
        if existing is None:
            self.add_contribution(contribution)
            return contribution, True

        updates = dict(zip(CONTRIBUTION_COLUMNS, _dump(contribution, CONTRIBUTION_COLUMNS)))
        updates.pop("id")
        self._update("contributions", contribution.id, updates)
        return contribution, False

    def add_contribution(self, contribution: Contribution) -> Contribution:
        self._insert("contributions", CONTRIBUTION_COLUMNS, _dump(contribution, CONTRIBUTION_COLUMNS))
        return contribution

    def add_expenditure(self, expenditure: Expenditure) -> Expenditure:
        self._insert("expenditures", EXPENDITURE_COLUMNS, _dump(expenditure, EXPENDITURE_COLUMNS))
        return expenditure

    def add_investment(self, investment: Investment) -> Investment:
        self._insert("investments", INVESTMENT_COLUMNS, _dump(investment, INVESTMENT_COLUMNS))
        return investment

    def add_vote(self, vote: Vote) -> Vote:
        self._insert("votes", VOTE_COLUMNS, _dump(vote, VOTE_COLUMNS))
        return vote

    def upsert_vote(self, vote: Vote) -> Tuple[Vote, bool]:
        """Insert or replace a vote with a caller-chosen id."""
        existing = self._one("SELECT id FROM votes WHERE id = ?", [vote.id])
        if existing is None:
            return self.add_vote(vote), True

        updates = dict(zip(VOTE_COLUMNS, _dump(vote, VOTE_COLUMNS)))
        updates.pop("id")
        self._update("votes", vote.id, updates)
        return vote, False

    def list_contributions(self, politician_id: str) -> List[Contribution]:
        rows = self._rows(
            f"SELECT {', '.join(CONTRIBUTION_COLUMNS)} FROM contributions "
            f"WHERE politician_id = ? ORDER BY date DESC NULLS LAST, seq DESC",
            [politician_id],
        )
        return [Contribution(**row) for row in rows]

    def list_expenditures(self, politician_id: str) -> List[Expenditure]:
        rows = self._rows(
            f"SELECT {', '.join(EXPENDITURE_COLUMNS)} FROM expenditures "
            f"WHERE politician_id = ? ORDER BY date DESC NULLS LAST, seq DESC",
            [politician_id],
        )
        return [Expenditure(**row) for row in rows]

    def list_investments(self, politician_id: str) -> List[Investment]:
        rows = self._rows(
            f"SELECT {', '.join(INVESTMENT_COLUMNS)} FROM investments "
            f"WHERE politician_id = ? ORDER BY date DESC NULLS LAST, seq DESC",
            [politician_id],
        )
        return [Investment(**row) for row in rows]

    def list_votes(self, politician_id: str) -> List[Vote]:
        rows = self._rows(
            f"SELECT {', '.join(VOTE_COLUMNS)} FROM votes "
            f"WHERE politician_id = ? ORDER BY vote_date DESC NULLS LAST, seq DESC",
            [politician_id],
        )
        return [Vote(**row) for row in rows]

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def create_report(
        self,
        title: str,
        description: str,
        evidence: str = "",
        politician_id: Optional[str] = None,
    ) -> Report:
        """Create a pending report (validation errors propagate as pydantic errors)."""
        now = _utcnow()
        report = Report(
            title=title,
            description=description,
            evidence=evidence or "",
            politician_id=politician_id,
            status=ReportStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        self._insert("reports", REPORT_COLUMNS, _dump(report, REPORT_COLUMNS))
        if politician_id:
            report.politician = self.get_politician(politician_id)
        return report

    def get_report(self, report_id: str) -> Optional[Report]:
        row = self._one(f"SELECT {', '.join(REPORT_COLUMNS)} FROM reports WHERE id = ?", [report_id])
        if row is None:
            return None
        report = Report(**row)
        if report.politician_id:
            report.politician = self.get_politician(report.politician_id)
        return report

    def list_reports(
        self,
        status: Optional[str] = None,
        limit: int = DEFAULT_LIST_LIMIT,
        politician_id: Optional[str] = None,
    ) -> List[Report]:
        """Reports newest first, each with its linked politician."""
        where_clauses: List[str] = []
        params: List[Any] = []

        if status:
            where_clauses.append("status = ?")
            params.append(status)

        if politician_id:
            where_clauses.append("politician_id = ?")
            params.append(politician_id)

        where_sql = " AND ".join(where_clauses) if where_clauses else "1=1"
        params.append(limit)

        rows = self._rows(
            f"""
            SELECT {', '.join(REPORT_COLUMNS)} FROM reports
            WHERE {where_sql}
            ORDER BY created_at DESC, seq DESC
            LIMIT ?
            """,
            params,
        )

        politicians: Dict[str, Optional[Politician]] = {}
        reports = []
        for row in rows:
            report = Report(**row)
            if report.politician_id:
                if report.politician_id not in politicians:
                    politicians[report.politician_id] = self.get_politician(report.politician_id)
                report.politician = politicians[report.politician_id]
            reports.append(report)
        return reports

    def update_report_status(self, report_id: str, status: Any) -> Report:
        """Move a report along its lifecycle.

        Raises:
            RecordNotFoundError: Unknown report id
            InvalidTransitionError: Report is not pending or status is invalid
        """
        report = self.get_report(report_id)
        if report is None:
            raise RecordNotFoundError(f"Report not found: {report_id}")

        try:
            target = ReportStatus(status)
        except ValueError as e:
            raise InvalidTransitionError(f"Unknown report status: {status}") from e

        if target not in REPORT_TRANSITIONS[report.status]:
            raise InvalidTransitionError(
                f"Cannot move report from {report.status.value} to {target.value}"
            )

        now = _utcnow()
        self._update("reports", report_id, {"status": target.value, "updated_at": now})
        logger.info(f"Report {report_id} moved to {target.value}")
        return report.model_copy(update={"status": target, "updated_at": now})

    # ------------------------------------------------------------------
    # Aggregate views
    # ------------------------------------------------------------------

    def get_politician_detail(self, politician_id: str) -> Optional[PoliticianDetail]:
        politician = self.get_politician(politician_id)
        if politician is None:
            return None
        return PoliticianDetail(
            **politician.model_dump(),
            votes=self.list_votes(politician_id),
            contributions=self.list_contributions(politician_id),
            investments=self.list_investments(politician_id),
            expenditures=self.list_expenditures(politician_id),
            reports=self.list_reports(politician_id=politician_id, limit=1000),
        )
