from evoting.models import Result


def test_results_empty_before_publish(client, voter_headers, open_election):
    resp = client.get(f"/api/results/{open_election.id}", headers=voter_headers(3))

    assert resp.status_code == 200
    assert resp.get_json() == {"election_id": open_election.id, "total_votes": 0, "results": []}


def test_publish_then_read(client, admin_headers, voter_headers, open_election):
    resp = client.post(
        f"/api/results/{open_election.id}/publish",
        json={"counts": {"11": 5, "10": 3}},
        headers=admin_headers,
    )
    assert resp.status_code == 200

    body = client.get(f"/api/results/{open_election.id}", headers=voter_headers(3)).get_json()
    assert body["total_votes"] == 8
    assert [(r["candidate_id"], r["vote_count"]) for r in body["results"]] == [(10, 3), (11, 5)]


def test_publish_rejects_bad_counts(client, admin_headers, open_election):
    for counts in ({"10": -1}, {"abc": 1}, {"10": "3"}):
        resp = client.post(
            f"/api/results/{open_election.id}/publish", json={"counts": counts}, headers=admin_headers
        )
        assert resp.status_code == 400
        assert resp.get_json()["error"]["code"] == "VALIDATION_ERROR"

    assert Result.query.count() == 0


def test_publish_is_admin_only(client, voter_headers, open_election):
    resp = client.post(
        f"/api/results/{open_election.id}/publish", json={"counts": {"10": 1}}, headers=voter_headers(3)
    )
    assert resp.status_code == 403
