import logging
import threading

import pytest

from webapp.security.audit import InMemoryAuditSink, SecurityEvent


def _event(event_type, **details):
    return SecurityEvent(
        type=event_type,
        ip="203.0.113.7",
        path="/api/test",
        method="POST",
        details=details,
    )


def test_sink_keeps_only_most_recent_events():
    sink = InMemoryAuditSink(capacity=3)

    for index in range(5):
        sink.record(_event(f"event_{index}"))

    assert len(sink) == 3
    assert [event.type for event in sink.events()] == ["event_2", "event_3", "event_4"]


def test_sink_rejects_non_positive_capacity():
    with pytest.raises(ValueError):
        InMemoryAuditSink(capacity=0)


def test_sink_forwards_events_to_logger(caplog):
    logger = logging.getLogger("tests.audit")
    sink = InMemoryAuditSink(capacity=10, logger=logger)

    with caplog.at_level(logging.INFO, logger="tests.audit"):
        sink.record(_event("csrf_token_missing"))
        sink.record(
            SecurityEvent(
                type="subscription_created",
                ip="203.0.113.7",
                path="/api/subscription",
                method="POST",
                level=logging.INFO,
            )
        )

    records = [record for record in caplog.records if record.name == "tests.audit"]
    assert [record.levelno for record in records] == [logging.WARNING, logging.INFO]
    assert records[0].event == "security.csrf_token_missing"
    assert "[SECURITY]" in records[0].getMessage()


def test_event_serialisation_uses_camel_case():
    event = SecurityEvent(
        type="invalid_id_parameter",
        ip="198.51.100.1",
        path="/api/threat-logs/x",
        method="PATCH",
        user_id="sub-1",
        request_id="req-1",
        details={"id": "x"},
    )

    payload = event.to_dict()

    assert payload["type"] == "invalid_id_parameter"
    assert payload["userId"] == "sub-1"
    assert payload["requestId"] == "req-1"
    assert payload["details"] == {"id": "x"}
    assert payload["timestamp"].endswith("Z")


def test_concurrent_records_never_exceed_capacity():
    sink = InMemoryAuditSink(capacity=50)

    def worker():
        for _ in range(100):
            sink.record(_event("burst"))

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(sink) == 50


def test_app_uses_injected_sink(app, audit_sink):
    from webapp.security.audit import get_audit_sink

    with app.app_context():
        assert get_audit_sink() is audit_sink


def test_default_sink_capacity_from_config(tmp_path):
    from webapp import create_app
    from webapp.config import TestConfig
    from webapp.security.audit import get_audit_sink

    app = create_app(
        {
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'audit.db'}",
            "AUDIT_LOG_CAPACITY": 7,
        },
        config_object=TestConfig,
    )

    with app.app_context():
        sink = get_audit_sink()
        assert isinstance(sink, InMemoryAuditSink)
        assert sink.capacity == 7
