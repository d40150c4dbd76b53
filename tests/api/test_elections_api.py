from evoting.models import AuditLog, Election


def _create(client, headers, **body):
    body.setdefault("title", "Student council")
    return client.post("/api/elections/", json=body, headers=headers)


def test_create_requires_token(client):
    resp = client.post("/api/elections/", json={"title": "x"})
    assert resp.status_code == 401


def test_create_forbidden_for_voter(client, voter_headers):
    resp = _create(client, voter_headers(5))

    assert resp.status_code == 403
    body = resp.get_json()
    assert body["success"] is False
    assert body["error"]["code"] == "FORBIDDEN"


def test_create_starts_draft_with_sorted_candidates(client, admin_headers):
    resp = _create(client, admin_headers, candidate_ids=[11, 10, 11])

    assert resp.status_code == 201
    election = resp.get_json()["election"]
    assert election["status"] == Election.STATUS_DRAFT
    assert election["candidate_ids"] == [10, 11]


def test_create_validation_envelope(client, admin_headers):
    resp = _create(client, admin_headers, title="", candidate_ids=["ten"])

    assert resp.status_code == 400
    error = resp.get_json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert "title" in error["details"]
    assert "candidate_ids" in error["details"]


def test_create_rejects_end_before_start(client, admin_headers):
    resp = _create(
        client, admin_headers,
        start_at="2026-05-02T10:00:00", end_at="2026-05-01T10:00:00",
    )

    assert resp.status_code == 400
    assert "end_at" in resp.get_json()["error"]["details"]


def test_get_unknown_election_is_not_found(client, admin_headers):
    resp = client.get("/api/elections/999", headers=admin_headers)

    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "NOT_FOUND"


def test_add_candidate_then_open(client, admin_headers):
    election_id = _create(client, admin_headers, candidate_ids=[10]).get_json()["election"]["id"]

    resp = client.post(f"/api/elections/{election_id}/candidates/12", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.get_json()["election"]["candidate_ids"] == [10, 12]

    resp = client.put(f"/api/elections/{election_id}/open", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.get_json()["election"]["status"] == Election.STATUS_OPEN

    resp = client.post(f"/api/elections/{election_id}/candidates/13", headers=admin_headers)
    assert resp.status_code == 409
    assert resp.get_json()["error"]["code"] == "INVALID_STATE"


def test_status_update_rejects_unknown_and_draft(client, admin_headers, open_election):
    resp = client.put(
        f"/api/elections/{open_election.id}/status", json={"status": "PAUSED"}, headers=admin_headers
    )
    assert resp.status_code == 400

    resp = client.put(
        f"/api/elections/{open_election.id}/status", json={"status": "DRAFT"}, headers=admin_headers
    )
    assert resp.status_code == 409
    assert resp.get_json()["error"]["code"] == "INVALID_STATE"


def test_close_endpoint(client, admin_headers, open_election):
    resp = client.put(f"/api/elections/{open_election.id}/close", headers=admin_headers)

    assert resp.status_code == 200
    assert resp.get_json()["election"]["status"] == Election.STATUS_CLOSED


def test_public_lists_only_open(client, admin_headers, voter_headers, open_election):
    _create(client, admin_headers, title="Still drafting")

    resp = client.get("/api/elections/public", headers=voter_headers(5))

    assert resp.status_code == 200
    ids = [e["id"] for e in resp.get_json()["elections"]]
    assert ids == [open_election.id]


def test_list_all_for_admin(client, admin_headers, open_election):
    _create(client, admin_headers, title="Still drafting")

    resp = client.get("/api/elections/", headers=admin_headers)

    assert resp.status_code == 200
    assert len(resp.get_json()["elections"]) == 2


def test_delete_draft_only(client, admin_headers, open_election):
    draft_id = _create(client, admin_headers).get_json()["election"]["id"]

    assert client.delete(f"/api/elections/{draft_id}", headers=admin_headers).status_code == 204
    assert client.get(f"/api/elections/{draft_id}", headers=admin_headers).status_code == 404

    resp = client.delete(f"/api/elections/{open_election.id}", headers=admin_headers)
    assert resp.status_code == 409


def test_create_is_audited(client, admin_headers):
    election_id = _create(client, admin_headers).get_json()["election"]["id"]

    entry = AuditLog.query.filter_by(action="ELECTION_CREATED", entity_id=election_id).one()
    assert entry.actor_id == "1"
    assert entry.actor_role == "ADMIN"
