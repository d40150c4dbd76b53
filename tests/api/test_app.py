def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}


def test_request_id_is_echoed(client):
    resp = client.get("/health", headers={"X-Request-Id": "abc-123"})
    assert resp.headers["X-Request-Id"] == "abc-123"


def test_request_id_is_generated_and_in_error_envelope(client, admin_headers):
    resp = client.get("/api/elections/404", headers=admin_headers)

    rid = resp.headers["X-Request-Id"]
    assert rid
    assert resp.get_json()["request_id"] == rid


def test_unknown_route_uses_envelope(client):
    resp = client.get("/nope")

    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "NOT_FOUND"
