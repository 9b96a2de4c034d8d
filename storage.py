# storage.py
import json
import logging
import sqlite3
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Protocol

from models import Lead, Offer, ResultRow, ScoreResult

logger = logging.getLogger(__name__)


class LeadStore(Protocol):
    """What the scoring run and the API need from persistence."""

    def add_offer(self, offer: Offer) -> Offer: ...

    def add_leads(self, leads: Iterable[Lead]) -> int: ...

    def list_leads(self) -> List[Lead]: ...

    def latest_offer(self) -> Optional[Offer]: ...

    def insert_result(self, lead_id: int, offer_id: int, intent: str, score: int, reasoning: str) -> ScoreResult: ...

    def list_results_joined(self) -> List[ResultRow]: ...

    def close(self) -> None: ...


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryStore:
    """Keeps everything on the instance; gone when the process exits."""

    def __init__(self):
        self.offers: List[Offer] = []
        self.leads: List[Lead] = []
        self.results: List[ScoreResult] = []

    def add_offer(self, offer: Offer) -> Offer:
        stored = offer.model_copy(update={"id": len(self.offers) + 1, "created_at": _now()})
        self.offers.append(stored)
        return stored

    def add_leads(self, leads):
        count = 0
        for lead in leads:
            self.leads.append(lead.model_copy(update={"id": len(self.leads) + 1, "uploaded_at": _now()}))
            count += 1
        return count

    def list_leads(self):
        return list(self.leads)

    def latest_offer(self):
        if not self.offers:
            return None
        return max(self.offers, key=lambda o: o.id)

    def insert_result(self, lead_id, offer_id, intent, score, reasoning):
        if not any(l.id == lead_id for l in self.leads):
            raise ValueError(f"Unknown lead id {lead_id}")
        if not any(o.id == offer_id for o in self.offers):
            raise ValueError(f"Unknown offer id {offer_id}")
        result = ScoreResult(
            id=len(self.results) + 1,
            lead_id=lead_id,
            offer_id=offer_id,
            intent=intent,
            score=score,
            reasoning=reasoning,
            created_at=_now(),
        )
        self.results.append(result)
        return result

    def list_results_joined(self):
        leads = {l.id: l for l in self.leads}
        rows = []
        for r in self.results:
            lead = leads[r.lead_id]
            rows.append(ResultRow(
                id=r.id,
                lead_id=r.lead_id,
                offer_id=r.offer_id,
                name=lead.name,
                role=lead.role,
                company=lead.company,
                industry=lead.industry,
                location=lead.location,
                intent=r.intent,
                score=r.score,
                reasoning=r.reasoning,
                created_at=r.created_at,
            ))
        # stable sort keeps insertion order among equal scores
        rows.sort(key=lambda row: row.score, reverse=True)
        return rows

    def close(self):
        pass


SCHEMA = """
CREATE TABLE IF NOT EXISTS offers (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    value_props TEXT NOT NULL,
    ideal_use_cases TEXT NOT NULL,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS leads (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    role TEXT,
    company TEXT,
    industry TEXT,
    location TEXT,
    linkedin_bio TEXT,
    uploaded_at DATETIME DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS results (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    lead_id INTEGER NOT NULL,
    offer_id INTEGER NOT NULL,
    intent TEXT NOT NULL,
    score INTEGER NOT NULL,
    reasoning TEXT,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (lead_id) REFERENCES leads(id),
    FOREIGN KEY (offer_id) REFERENCES offers(id)
);
"""


class SQLiteStore:
    """SQLite-backed store. The connection is opened here and held until close()."""

    def __init__(self, path: str):
        self.path = path
        # FastAPI runs sync endpoints on a worker thread
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._conn.executescript(SCHEMA)
        logger.info("Database initialized at: %s", path)

    def _offer_from_row(self, row: sqlite3.Row) -> Offer:
        return Offer(
            id=row["id"],
            name=row["name"],
            value_props=json.loads(row["value_props"]),
            ideal_use_cases=json.loads(row["ideal_use_cases"]),
            created_at=row["created_at"],
        )

    def add_offer(self, offer):
        with self._conn:
            cur = self._conn.execute(
                "INSERT INTO offers (name, value_props, ideal_use_cases) VALUES (?, ?, ?)",
                (offer.name, json.dumps(offer.value_props), json.dumps(offer.ideal_use_cases)),
            )
        row = self._conn.execute("SELECT * FROM offers WHERE id = ?", (cur.lastrowid,)).fetchone()
        return self._offer_from_row(row)

    def add_leads(self, leads):
        rows = [
            (l.name, l.role, l.company, l.industry, l.location, l.linkedin_bio)
            for l in leads
        ]
        with self._conn:
            self._conn.executemany(
                "INSERT INTO leads (name, role, company, industry, location, linkedin_bio) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                rows,
            )
        return len(rows)

    def list_leads(self):
        cur = self._conn.execute("SELECT * FROM leads ORDER BY id")
        return [Lead(**dict(row)) for row in cur.fetchall()]

    def latest_offer(self):
        row = self._conn.execute("SELECT * FROM offers ORDER BY id DESC LIMIT 1").fetchone()
        if row is None:
            return None
        return self._offer_from_row(row)

    def insert_result(self, lead_id, offer_id, intent, score, reasoning):
        # committed per row; a failure later in a run leaves earlier rows in place
        with self._conn:
            cur = self._conn.execute(
                "INSERT INTO results (lead_id, offer_id, intent, score, reasoning) VALUES (?, ?, ?, ?, ?)",
                (lead_id, offer_id, intent, score, reasoning),
            )
        row = self._conn.execute("SELECT * FROM results WHERE id = ?", (cur.lastrowid,)).fetchone()
        return ScoreResult(**dict(row))

    def list_results_joined(self):
        cur = self._conn.execute("""
            SELECT
                r.id, r.lead_id, r.offer_id,
                l.name, l.role, l.company, l.industry, l.location,
                r.intent, r.score, r.reasoning, r.created_at
            FROM results r
            JOIN leads l ON r.lead_id = l.id
            ORDER BY r.score DESC, r.id ASC
        """)
        return [ResultRow(**dict(row)) for row in cur.fetchall()]

    def close(self):
        self._conn.close()
