def _event_types(sink):
    return [event.type for event in sink.events()]


def test_plans_are_public_and_sorted_by_price(client):
    response = client.get("/api/plans")

    assert response.status_code == 200
    plans = response.get_json()
    assert [plan["tier"] for plan in plans] == ["basic", "pro", "enterprise"]
    assert set(plans[0]) == {"id", "name", "tier", "priceMonthly", "priceYearly", "features", "isPopular"}


def test_subscription_requires_authentication(client):
    assert client.get("/api/subscription").status_code == 401


def test_subscription_is_null_before_create(auth_client):
    response = auth_client.get("/api/subscription")

    assert response.status_code == 200
    assert response.get_json() is None


def test_create_subscription(auth_client, csrf_headers, plan_id, user_id, audit_sink):
    response = auth_client.post(
        "/api/subscription",
        json={"planId": plan_id, "billingCycle": "yearly"},
        headers=csrf_headers,
    )

    assert response.status_code == 201
    body = response.get_json()
    assert body["userId"] == user_id
    assert body["planId"] == plan_id
    assert body["status"] == "active"
    assert body["billingCycle"] == "yearly"
    assert body["endDate"] is None
    assert "subscription_created" in _event_types(audit_sink)

    assert auth_client.get("/api/subscription").get_json()["id"] == body["id"]


def test_second_create_is_conflict(auth_client, csrf_headers, plan_id):
    payload = {"planId": plan_id, "billingCycle": "monthly"}
    assert auth_client.post("/api/subscription", json=payload, headers=csrf_headers).status_code == 201

    response = auth_client.post("/api/subscription", json=payload, headers=csrf_headers)

    assert response.status_code == 409
    assert response.get_json()["message"] == "User already has a subscription"


def test_unknown_plan_is_rejected(auth_client, csrf_headers):
    response = auth_client.post(
        "/api/subscription",
        json={"planId": "no-such-plan", "billingCycle": "monthly"},
        headers=csrf_headers,
    )

    assert response.status_code == 400
    assert response.get_json()["field"] == "planId"


def test_invalid_body_is_rejected(auth_client, csrf_headers, plan_id, audit_sink):
    for payload in (
        {"planId": plan_id, "billingCycle": "weekly"},
        {"planId": "bad id!", "billingCycle": "monthly"},
        {"planId": plan_id, "billingCycle": "monthly", "userId": "someone-else"},
        ["not", "an", "object"],
    ):
        response = auth_client.post("/api/subscription", json=payload, headers=csrf_headers)
        assert response.status_code == 400, payload

    assert "invalid_input" in _event_types(audit_sink)
    assert auth_client.get("/api/subscription").get_json() is None


def test_update_without_subscription_is_not_found(auth_client, csrf_headers):
    response = auth_client.patch(
        "/api/subscription", json={"billingCycle": "yearly"}, headers=csrf_headers
    )

    assert response.status_code == 404


def test_update_subscription(auth_client, csrf_headers, plan_id):
    auth_client.post(
        "/api/subscription",
        json={"planId": plan_id, "billingCycle": "monthly"},
        headers=csrf_headers,
    )

    response = auth_client.patch(
        "/api/subscription", json={"billingCycle": "yearly"}, headers=csrf_headers
    )

    assert response.status_code == 200
    assert response.get_json()["billingCycle"] == "yearly"


def test_cancel_subscription_keeps_row(auth_client, csrf_headers, plan_id, audit_sink):
    auth_client.post(
        "/api/subscription",
        json={"planId": plan_id, "billingCycle": "monthly"},
        headers=csrf_headers,
    )

    response = auth_client.delete("/api/subscription", headers=csrf_headers)

    assert response.status_code == 200
    cancelled = response.get_json()
    assert cancelled["status"] == "cancelled"
    assert cancelled["endDate"] is not None
    assert set(cancelled) == set(auth_client.get("/api/subscription").get_json())
    assert auth_client.get("/api/subscription").get_json()["status"] == "cancelled"
    assert "subscription_cancelled" in _event_types(audit_sink)


def test_cancel_without_subscription_is_not_found(auth_client, csrf_headers):
    assert auth_client.delete("/api/subscription", headers=csrf_headers).status_code == 404


def test_subscriptions_are_isolated_per_user(app, auth_client, csrf_headers, plan_id, login_as, make_user):
    auth_client.post(
        "/api/subscription",
        json={"planId": plan_id, "billingCycle": "monthly"},
        headers=csrf_headers,
    )

    other = login_as(app.test_client(), make_user())

    assert other.get("/api/subscription").get_json() is None
