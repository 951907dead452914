"""Identity gate: holds the authenticated session issued by the backend auth service."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

from .backend_client import BackendAPI
from .errors import ConfigurationError, SessionError
from .models import Session

logger = logging.getLogger(__name__)


def session_from_payload(payload: dict[str, Any], now: datetime | None = None) -> Session | None:
    """Build a Session from a token-grant response; None when no access token was issued.

    Role claims are read from ``user.app_metadata`` (``role`` or ``roles``),
    which only the auth service can write.
    """
    token = payload.get("access_token")
    if not token:
        return None
    user = payload.get("user") or {}
    meta = user.get("app_metadata") or {}
    roles: set[str] = set()
    if isinstance(meta.get("role"), str):
        roles.add(meta["role"])
    if isinstance(meta.get("roles"), list):
        roles.update(str(r) for r in meta["roles"])
    expires_at = None
    if payload.get("expires_at"):
        expires_at = datetime.fromtimestamp(int(payload["expires_at"]), tz=UTC)
    elif payload.get("expires_in"):
        expires_at = (now or datetime.now(UTC)) + timedelta(seconds=int(payload["expires_in"]))
    return Session(
        access_token=token,
        refresh_token=payload.get("refresh_token"),
        user_id=user.get("id"),
        email=user.get("email"),
        expires_at=expires_at,
        roles=frozenset(roles),
    )


class IdentityGate:
    def __init__(self, api: BackendAPI | None):
        self.api = api
        self.session: Session | None = None
        self.loading = False

    def current_session(self) -> Session | None:
        if self.session is not None and not self.session.is_valid():
            logger.info("Session for %s expired", self.session.email)
            self.session = None
        return self.session

    def require_session(self) -> Session:
        session = self.current_session()
        if session is None:
            raise SessionError("Could not get user session. Please sign in.")
        return session

    def sign_in(self, email: str, password: str) -> Session:
        api = self._require_api()
        self.loading = True
        try:
            payload = api.sign_in_with_password(email, password)
        finally:
            self.loading = False
        session = session_from_payload(payload)
        if session is None:
            raise SessionError("Sign-in did not return a session")
        self.session = session
        logger.info("Signed in as %s", session.email)
        return session

    def sign_up(self, email: str, password: str) -> Session | None:
        """Register a user; returns a session when the backend signs them in immediately."""
        api = self._require_api()
        self.loading = True
        try:
            payload = api.sign_up(email, password)
        finally:
            self.loading = False
        session = session_from_payload(payload)
        if session is not None:
            self.session = session
        return session

    def sign_out(self) -> None:
        session, self.session = self.session, None
        if session is None or self.api is None:
            return
        self.loading = True
        try:
            self.api.sign_out(session.access_token)
        except SessionError as exc:
            # Local session is already dropped; the remote token will expire on its own.
            logger.warning("Remote sign-out failed: %s", exc)
        finally:
            self.loading = False

    def _require_api(self) -> BackendAPI:
        if self.api is None:
            raise ConfigurationError("Backend URL or key is missing")
        return self.api
