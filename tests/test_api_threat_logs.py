import pytest


def _create(client, headers, **overrides):
    payload = {
        "headType": "surveillance",
        "threatLevel": "high",
        "description": "Tracking pixel detected",
    }
    payload.update(overrides)
    return client.post("/api/threat-logs", json=payload, headers=headers)


@pytest.fixture
def other_client(app, login_as, make_user, fetch_csrf_token):
    client = login_as(app.test_client(), make_user())
    client.csrf_headers = {"X-CSRF-Token": fetch_csrf_token(client)}
    return client


def test_list_is_empty_without_provisioning(auth_client):
    response = auth_client.get("/api/threat-logs")

    assert response.status_code == 200
    assert response.get_json() == []


def test_create_threat_log_defaults_and_escapes(auth_client, csrf_headers, user_id):
    response = _create(
        auth_client,
        csrf_headers,
        description='<script>alert("x")</script>',
        sourceType="email",
        source="newsletter@example.com",
    )

    assert response.status_code == 201
    body = response.get_json()
    assert body["userId"] == user_id
    assert body["status"] == "detected"
    assert body["sourceType"] == "email"
    assert "<script>" not in body["description"]
    assert body["description"].startswith("&lt;script&gt;")
    assert body["resolvedAt"] is None


def test_create_with_invalid_enum_is_rejected(auth_client, csrf_headers):
    assert _create(auth_client, csrf_headers, headType="unknown").status_code == 400
    assert _create(auth_client, csrf_headers, threatLevel="extreme").status_code == 400
    assert _create(auth_client, csrf_headers, description="").status_code == 400


def test_logs_listed_newest_first(auth_client, csrf_headers):
    first = _create(auth_client, csrf_headers, description="first").get_json()
    second = _create(auth_client, csrf_headers, description="second").get_json()

    ids = [log["id"] for log in auth_client.get("/api/threat-logs").get_json()]

    assert ids.index(second["id"]) < ids.index(first["id"])


def test_resolving_stamps_resolved_at(auth_client, csrf_headers):
    log_id = _create(auth_client, csrf_headers).get_json()["id"]

    resolved = auth_client.patch(
        f"/api/threat-logs/{log_id}", json={"status": "resolved"}, headers=csrf_headers
    )
    assert resolved.status_code == 200
    assert resolved.get_json()["resolvedAt"] is not None

    blocked = auth_client.patch(
        f"/api/threat-logs/{log_id}", json={"status": "blocked"}, headers=csrf_headers
    )
    assert blocked.get_json()["status"] == "blocked"
    assert blocked.get_json()["resolvedAt"] is None


def test_invalid_id_is_rejected(auth_client, csrf_headers, audit_sink):
    response = auth_client.patch(
        "/api/threat-logs/not-a-uuid", json={"status": "resolved"}, headers=csrf_headers
    )

    assert response.status_code == 400
    assert response.get_json()["message"] == "Invalid ID format"
    assert "invalid_id_parameter" in [event.type for event in audit_sink.events()]


def test_invalid_status_is_rejected(auth_client, csrf_headers):
    log_id = _create(auth_client, csrf_headers).get_json()["id"]

    response = auth_client.patch(
        f"/api/threat-logs/{log_id}", json={"status": "deleted"}, headers=csrf_headers
    )

    assert response.status_code == 400


def test_foreign_log_cannot_be_modified(auth_client, csrf_headers, other_client, audit_sink):
    log_id = _create(auth_client, csrf_headers).get_json()["id"]

    response = other_client.patch(
        f"/api/threat-logs/{log_id}",
        json={"status": "resolved"},
        headers=other_client.csrf_headers,
    )

    assert response.status_code == 404
    assert "resource_not_found_or_idor" in [event.type for event in audit_sink.events()]

    own = auth_client.get("/api/threat-logs").get_json()
    assert own[0]["status"] == "detected"
    assert own[0]["resolvedAt"] is None


def test_logs_are_isolated_per_user(auth_client, csrf_headers, other_client):
    _create(auth_client, csrf_headers)

    assert other_client.get("/api/threat-logs").get_json() == []


def test_missing_log_is_not_found(auth_client, csrf_headers):
    response = auth_client.patch(
        "/api/threat-logs/6f1c2d4e-8a9b-4c3d-9e8f-0a1b2c3d4e5f",
        json={"status": "resolved"},
        headers=csrf_headers,
    )

    assert response.status_code == 404
