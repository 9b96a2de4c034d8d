import sqlite3

import pytest

from conftest import StubClassifier
from models import Lead, Offer
from scoring import run_scoring
from storage import SQLiteStore


@pytest.fixture
def db(tmp_path):
    s = SQLiteStore(str(tmp_path / "leads.db"))
    yield s
    s.close()


def test_offer_roundtrip_and_latest(db):
    assert db.latest_offer() is None
    first = db.add_offer(Offer(name="X", value_props=["a", "b"], ideal_use_cases=["c"]))
    second = db.add_offer(Offer(name="Y", value_props=["d"], ideal_use_cases=[]))
    assert first.id == 1 and second.id == 2
    latest = db.latest_offer()
    assert latest.name == "Y"
    assert latest.value_props == ["d"]
    assert latest.created_at is not None


def test_leads_keep_import_order(db):
    assert db.add_leads([Lead(name="A", role="CTO"), Lead(name="B")]) == 2
    leads = db.list_leads()
    assert [(l.id, l.name, l.role) for l in leads] == [(1, "A", "CTO"), (2, "B", None)]


def test_results_joined_ordered_by_score(db):
    offer = db.add_offer(Offer(name="X", value_props=["a"], ideal_use_cases=["b"]))
    db.add_leads([Lead(name="A", industry="SaaS"), Lead(name="B", industry="Retail")])
    db.insert_result(2, offer.id, "Low", 10, "meh")
    db.insert_result(1, offer.id, "High", 90, "great")
    rows = db.list_results_joined()
    assert [(r.name, r.score, r.industry) for r in rows] == [("A", 90, "SaaS"), ("B", 10, "Retail")]
    assert rows[0].created_at is not None


def test_result_must_reference_existing_lead(db):
    offer = db.add_offer(Offer(name="X", value_props=[], ideal_use_cases=[]))
    with pytest.raises(sqlite3.IntegrityError):
        db.insert_result(42, offer.id, "High", 50, "ghost")


def test_data_survives_reopen(tmp_path, jane, offer):
    path = str(tmp_path / "leads.db")
    s = SQLiteStore(path)
    s.add_offer(offer)
    s.add_leads([jane])
    run_scoring(s, StubClassifier())
    s.close()

    reopened = SQLiteStore(path)
    try:
        rows = reopened.list_results_joined()
        assert len(rows) == 1
        assert rows[0].intent == "High"
        assert rows[0].score == 100
    finally:
        reopened.close()


def test_in_memory_rejects_unknown_references(store, offer):
    store.add_offer(offer)
    with pytest.raises(ValueError):
        store.insert_result(1, 1, "High", 50, "no such lead")
