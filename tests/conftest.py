import os
import sys
import uuid
from pathlib import Path

import pytest

os.environ.setdefault("TESTING", "true")

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def audit_sink():
    from webapp.security.audit import InMemoryAuditSink

    return InMemoryAuditSink(capacity=200)


@pytest.fixture
def config_overrides():
    """Per-test config tweaks applied on top of ``TestConfig``."""
    return {}


@pytest.fixture
def app(tmp_path, audit_sink, config_overrides):
    from webapp import create_app
    from webapp.config import TestConfig
    from webapp.extensions import db
    from features.dashboard.infrastructure.repositories import PlanRepository

    overrides = {"SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}"}
    overrides.update(config_overrides)

    app = create_app(overrides, config_object=TestConfig, audit_sink=audit_sink)

    with app.app_context():
        PlanRepository().seed_defaults()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    """Return a factory inserting a user and returning its id."""

    def _make_user(*, email=None):
        from webapp.extensions import db
        from core.models.user import User

        with app.app_context():
            user = User(
                id=f"sub-{uuid.uuid4().hex[:12]}",
                email=email or f"user-{uuid.uuid4().hex[:8]}@example.com",
                first_name="Test",
                last_name="User",
            )
            db.session.add(user)
            db.session.commit()
            return user.id

    return _make_user


@pytest.fixture
def login_as():
    def _login(client, user_id):
        with client.session_transaction() as session:
            session["_user_id"] = str(user_id)
            session["_fresh"] = True
        return client

    return _login


@pytest.fixture
def user_id(make_user):
    return make_user()


@pytest.fixture
def auth_client(client, login_as, user_id):
    """Client signed in as ``user_id``."""
    return login_as(client, user_id)


@pytest.fixture
def fetch_csrf_token():
    def _fetch(client):
        response = client.get("/api/csrf-token")
        assert response.status_code == 200
        return response.get_json()["csrfToken"]

    return _fetch


@pytest.fixture
def csrf_headers(auth_client, fetch_csrf_token):
    return {"X-CSRF-Token": fetch_csrf_token(auth_client)}


@pytest.fixture
def plan_id(app):
    from features.dashboard.infrastructure.repositories import PlanRepository

    with app.app_context():
        return PlanRepository().list_all()[0].id
