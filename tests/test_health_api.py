from sqlalchemy.exc import OperationalError


def test_health_live(client):
    resp = client.get("/api/health/live")
    assert resp.status_code == 200
    assert resp.json["status"] == "ok"


def test_health_ready(client):
    resp = client.get("/api/health/ready")
    assert resp.status_code == 200
    assert resp.json["status"] == "ok"
    assert resp.json["db"] == "ok"
    assert resp.json["server_time"].endswith("Z")


def test_health_ready_reports_database_failure(client, monkeypatch):
    from webapp.extensions import db

    def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is down"))

    monkeypatch.setattr(db.session, "execute", broken_execute)

    resp = client.get("/api/health/ready")

    assert resp.status_code == 503
    assert resp.json["status"] == "error"
    assert resp.json["db"] == "error"


def test_health_requires_no_session(client):
    assert client.get("/api/health/live").status_code == 200
    assert client.get("/api/health/ready").status_code == 200
