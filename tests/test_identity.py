from datetime import UTC, datetime, timedelta

import pytest
from conftest import STAFF_EMAIL, STAFF_PASSWORD

from ticket_portal.core.errors import ConfigurationError, SessionError
from ticket_portal.core.identity import IdentityGate, session_from_payload
from ticket_portal.core.models import Session


def test_session_from_payload_reads_roles_and_expiry():
    now = datetime(2024, 9, 1, tzinfo=UTC)
    payload = {
        "access_token": "tok",
        "expires_in": 60,
        "user": {"id": "u1", "email": "a@b.c", "app_metadata": {"role": "admin", "roles": ["agent"]}},
    }
    session = session_from_payload(payload, now)
    assert session.user_id == "u1"
    assert session.roles == frozenset({"admin", "agent"})
    assert session.expires_at == now + timedelta(seconds=60)


def test_session_roles_ignore_user_metadata():
    payload = {"access_token": "tok", "user": {"user_metadata": {"role": "admin"}}}
    assert session_from_payload(payload).roles == frozenset()


def test_payload_without_token_gives_none():
    assert session_from_payload({"user": {"id": "u1"}}) is None


def test_sign_in_and_out(api):
    gate = IdentityGate(api)
    session = gate.sign_in(STAFF_EMAIL, STAFF_PASSWORD)
    assert gate.require_session() is session
    assert gate.loading is False
    gate.sign_out()
    assert gate.current_session() is None
    assert api.count("sign_out") == 1


def test_bad_credentials_keep_no_session(api):
    gate = IdentityGate(api)
    with pytest.raises(SessionError):
        gate.sign_in(STAFF_EMAIL, "wrong")
    assert gate.session is None
    assert gate.loading is False


def test_require_session_message():
    with pytest.raises(SessionError, match="Please sign in"):
        IdentityGate(None).require_session()


def test_expired_session_is_dropped(api):
    gate = IdentityGate(api)
    gate.session = Session(access_token="t", expires_at=datetime.now(UTC) - timedelta(seconds=1))
    assert gate.current_session() is None


def test_sign_up_without_immediate_session(api):
    gate = IdentityGate(api)
    assert gate.sign_up("new@example.com", "pw") is None
    assert gate.sign_in("new@example.com", "pw").email == "new@example.com"


def test_unconfigured_gate_raises():
    with pytest.raises(ConfigurationError):
        IdentityGate(None).sign_in("a", "b")
