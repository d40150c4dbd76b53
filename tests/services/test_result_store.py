import pytest

from evoting.errors import ValidationError
from evoting.models import AuditLog
from evoting.services import ResultStore


def _rows(store, election_id):
    return [(r.candidate_id, r.vote_count) for r in store.get_results(election_id)]


def test_publish_writes_one_row_per_candidate(store):
    store.publish_results(1, {10: 3, 11: 5})

    rows = store.get_results(1)
    assert [(r.candidate_id, r.vote_count) for r in rows] == [(10, 3), (11, 5)]
    assert all(r.calculated_at is not None for r in rows)


def test_publish_accepts_string_keys(store):
    store.publish_results(1, {"10": 3, "11": 0})
    assert _rows(store, 1) == [(10, 3), (11, 0)]


def test_publish_rejects_negative_counts(store):
    with pytest.raises(ValidationError):
        store.publish_results(1, {10: -1})
    assert store.get_results(1) == []


def test_republish_replaces_rows_by_default(store):
    store.publish_results(1, {10: 3, 11: 5})
    store.publish_results(1, {10: 4, 11: 5})

    assert _rows(store, 1) == [(10, 4), (11, 5)]


def test_append_mode_accumulates_rows(app):
    store = ResultStore(replace_on_publish=False)
    store.publish_results(1, {10: 3})
    store.publish_results(1, {10: 3})

    assert _rows(store, 1) == [(10, 3), (10, 3)]


def test_append_mode_from_config(app, store):
    app.config["RESULTS_REPLACE_ON_PUBLISH"] = False
    store.publish_results(1, {10: 1})
    store.publish_results(1, {10: 2})

    assert _rows(store, 1) == [(10, 1), (10, 2)]


def test_results_scoped_to_election(store):
    store.publish_results(1, {10: 3})
    store.publish_results(2, {20: 7})

    assert _rows(store, 1) == [(10, 3)]
    assert _rows(store, 2) == [(20, 7)]
    assert store.get_results(3) == []


def test_publish_is_audited(store, db_session):
    store.publish_results(1, {10: 3, 11: 5})

    entry = db_session.query(AuditLog).filter_by(action="RESULTS_PUBLISHED").one()
    assert entry.entity_id == 1
    assert entry.details == {"mode": "replace", "candidates": 2, "total_votes": 8}
