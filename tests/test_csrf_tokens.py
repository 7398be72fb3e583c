import hashlib
import hmac

import pytest

from webapp.security.csrf import TOKEN_MAX_AGE_MS, CsrfTokenService, TokenCheck

SECRET = "unit-test-secret"
START_MS = 1_700_000_000_000


class FakeClock:
    def __init__(self, now=START_MS):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def service(clock):
    return CsrfTokenService(SECRET, clock=clock)


def test_issued_token_has_timestamp_and_hex_signature(service):
    token = service.issue("session-a")

    timestamp, signature = token.split(":")
    assert timestamp == str(START_MS)
    expected = hmac.new(
        SECRET.encode(), f"session-a:{timestamp}".encode(), hashlib.sha256
    ).hexdigest()
    assert signature == expected


def test_token_validates_for_issuing_session(service):
    token = service.issue("session-a")

    assert service.validate(token, "session-a") is True
    assert service.inspect(token, "session-a") is TokenCheck.OK


def test_token_rejected_for_other_session(service):
    token = service.issue("session-a")

    assert service.validate(token, "session-b") is False
    assert service.inspect(token, "session-b") is TokenCheck.INVALID


def test_token_valid_until_max_age_then_expires(service, clock):
    token = service.issue("session-a")

    clock.now = START_MS + TOKEN_MAX_AGE_MS
    assert service.validate(token, "session-a") is True

    clock.now += 1
    assert service.validate(token, "session-a") is False
    assert service.inspect(token, "session-a") is TokenCheck.EXPIRED


def test_custom_max_age(clock):
    service = CsrfTokenService(SECRET, max_age_ms=1000, clock=clock)
    token = service.issue("session-a")

    clock.now += 1001
    assert service.inspect(token, "session-a") is TokenCheck.EXPIRED


def test_future_token_accepted_only_within_clock_skew(clock):
    issuer = CsrfTokenService(SECRET, clock=FakeClock(START_MS + 30_000))
    far_issuer = CsrfTokenService(SECRET, clock=FakeClock(START_MS + 120_000))
    verifier = CsrfTokenService(SECRET, clock=clock)

    assert verifier.validate(issuer.issue("session-a"), "session-a") is True
    assert verifier.validate(far_issuer.issue("session-a"), "session-a") is False


def test_token_from_other_secret_rejected(service, clock):
    other = CsrfTokenService("another-secret", clock=clock)

    assert service.validate(other.issue("session-a"), "session-a") is False


def test_tampered_signature_rejected(service):
    token = service.issue("session-a")
    timestamp, signature = token.split(":")
    flipped = ("0" if signature[0] != "0" else "1") + signature[1:]

    assert service.validate(f"{timestamp}:{flipped}", "session-a") is False


def test_tampered_timestamp_rejected(service):
    token = service.issue("session-a")
    timestamp, signature = token.split(":")

    assert service.validate(f"{int(timestamp) - 1}:{signature}", "session-a") is False


@pytest.mark.parametrize("token", [None, "", 12345, b"1:ab"])
def test_missing_tokens(service, token):
    assert service.validate(token, "session-a") is False
    assert service.inspect(token, "session-a") is TokenCheck.MISSING


@pytest.mark.parametrize(
    "token",
    [
        "no-colon",
        "1:2:3",
        ":abcdef",
        f"{START_MS}:",
        f"-{START_MS}:abcdef",
        f"{START_MS}.5:abcdef",
        f" {START_MS}:abcdef",
        "１２３:abcdef",
        "99999999999999999999999:abcdef",
    ],
)
def test_malformed_tokens(service, token):
    assert service.validate(token, "session-a") is False
    assert service.inspect(token, "session-a") is TokenCheck.MALFORMED


@pytest.mark.parametrize("signature", ["é" * 64, "\ud800" * 64, "00"])
def test_odd_signatures_do_not_raise(service, signature):
    assert service.validate(f"{START_MS}:{signature}", "session-a") is False


@pytest.mark.parametrize("session_id", [None, "", 42])
def test_validate_without_session_fails_closed(service, session_id):
    token = service.issue("session-a")

    assert service.validate(token, session_id) is False


def test_non_ascii_session_id_round_trips(service):
    token = service.issue("séssion-ü")

    assert service.validate(token, "séssion-ü") is True


@pytest.mark.parametrize("session_id", ["", None])
def test_issue_requires_session_id(service, session_id):
    with pytest.raises(ValueError):
        service.issue(session_id)


def test_empty_secret_rejected():
    with pytest.raises(ValueError):
        CsrfTokenService("")


def test_app_service_uses_configured_secret(app):
    from webapp.security.csrf import get_csrf_service

    with app.app_context():
        app_service = get_csrf_service()
        token = app_service.issue("session-a")

    assert CsrfTokenService("test-csrf-secret").validate(token, "session-a") is True
