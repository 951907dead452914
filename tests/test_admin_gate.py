from datetime import UTC, datetime, timedelta

import pytest

from ticket_portal.core.admin import AdminGate, AdminSession, has_admin_claim
from ticket_portal.core.errors import AuthorizationError
from ticket_portal.core.models import Session


def test_password_check(admin_gate):
    assert admin_gate.check_password("s3cret")
    assert not admin_gate.check_password("S3CRET")
    assert not admin_gate.check_password("")


def test_reference_hash_computed_once(admin_gate):
    for attempt in ("a", "b", "s3cret", "c"):
        admin_gate.check_password(attempt)
    assert admin_gate.hash_computations == 1


def test_default_password_when_unset():
    assert AdminGate(None, iterations=1000).check_password("admin")


def test_no_lockout_after_failures(admin_gate):
    admin = AdminSession(admin_gate)
    for _ in range(20):
        assert admin.unlock("wrong") is False
    assert admin.unlock("s3cret") is True
    assert admin.is_admin()


def test_lock_clears_flag(admin_gate):
    admin = AdminSession(admin_gate)
    admin.unlock("s3cret")
    admin.lock()
    assert not admin.is_admin()
    with pytest.raises(AuthorizationError):
        admin.require(None)


def test_role_claim_grants_admin(admin_gate):
    admin = AdminSession(admin_gate)
    session = Session(access_token="t", roles=frozenset({"admin"}))
    assert has_admin_claim(session)
    assert admin.is_admin(session)
    admin.require(session)


def test_expired_role_claim_is_ignored():
    expired = Session(
        access_token="t",
        roles=frozenset({"admin"}),
        expires_at=datetime.now(UTC) - timedelta(minutes=1),
    )
    assert not has_admin_claim(expired)
    assert not has_admin_claim(Session(access_token="t"))
