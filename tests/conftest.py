from pathlib import Path
import sys

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from flask_jwt_extended import create_access_token

from evoting import create_app
from evoting.config import TestConfig
from evoting.extensions import db
from evoting.models import Election
from evoting.services import ElectionRegistry, ResultStore, VoteLedger


@pytest.fixture()
def app(tmp_path: Path):
    db_file = tmp_path / "test.sqlite3"

    class _Config(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{db_file}"

    app = create_app(_Config)

    with app.app_context():
        driver = db.engine.url.drivername
        if driver != "sqlite":
            raise RuntimeError(
                f"Test database must be SQLite, got '{driver}'. Refusing to run destructive test setup."
            )
        db.drop_all()
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def db_session(app):
    with app.app_context():
        yield db.session


@pytest.fixture()
def registry(app):
    return ElectionRegistry()


@pytest.fixture()
def ledger(app):
    return VoteLedger()


@pytest.fixture()
def store(app):
    return ResultStore()


@pytest.fixture()
def open_election(registry):
    election = registry.create_election(
        title="Board election",
        description="Annual board seat",
        candidate_ids=[10, 11],
    )
    registry.update_status(election.id, Election.STATUS_OPEN)
    return election


def _auth_headers(principal_id: int, role: str) -> dict:
    token = create_access_token(identity=str(principal_id), additional_claims={"role": role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def admin_headers(app):
    return _auth_headers(1, "ADMIN")


@pytest.fixture()
def voter_headers(app):
    def _make(voter_id: int) -> dict:
        return _auth_headers(voter_id, "VOTER")
    return _make
