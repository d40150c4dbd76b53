import threading

import pytest
from sqlalchemy import event

from evoting.errors import DuplicateVoteError
from evoting.extensions import db
from evoting.models import Vote
from evoting.services import VoteLedger


@pytest.fixture()
def serialized_sqlite(app):
    """
    Make SQLite take its write lock at BEGIN so concurrent writers queue on the
    busy timeout instead of failing with "database is locked".
    """
    engine = db.engine

    def _connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    def _begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    event.listen(engine, "connect", _connect)
    event.listen(engine, "begin", _begin)
    db.session.remove()
    engine.dispose()
    yield engine
    db.session.remove()
    event.remove(engine, "begin", _begin)
    event.remove(engine, "connect", _connect)
    engine.dispose()


def _race(app, calls):
    barrier = threading.Barrier(len(calls))
    outcomes = []
    outcomes_lock = threading.Lock()

    def _cast(voter_id, election_id, candidate_id):
        with app.app_context():
            barrier.wait()
            try:
                VoteLedger().cast_vote(voter_id, election_id, candidate_id)
                outcome = "ok"
            except DuplicateVoteError:
                outcome = "duplicate"
            finally:
                db.session.remove()
            with outcomes_lock:
                outcomes.append(outcome)

    threads = [threading.Thread(target=_cast, args=args) for args in calls]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)
    return outcomes


def test_two_concurrent_votes_same_voter(app, serialized_sqlite, open_election):
    election_id = open_election.id
    db.session.remove()

    outcomes = _race(app, [(7, election_id, 10), (7, election_id, 10)])

    assert sorted(outcomes) == ["duplicate", "ok"]
    assert Vote.query.filter_by(election_id=election_id, voter_id=7).count() == 1


def test_many_concurrent_votes_keep_one_per_voter(app, serialized_sqlite, open_election):
    election_id = open_election.id
    db.session.remove()

    calls = [(voter_id, election_id, 10 + (n % 2)) for voter_id in (1, 2, 3) for n in range(4)]
    outcomes = _race(app, calls)

    assert outcomes.count("ok") == 3
    assert outcomes.count("duplicate") == 9
    for voter_id in (1, 2, 3):
        assert Vote.query.filter_by(election_id=election_id, voter_id=voter_id).count() == 1
