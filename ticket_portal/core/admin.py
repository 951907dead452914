"""Admin gate: shared-secret check plus role-claim authorization.

The reference hash of the configured secret is computed lazily on the first
check and reused for the lifetime of the gate. There is no lockout or delay
on failed attempts.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import os

from .config import ADMIN_HASH_ITERATIONS, ADMIN_ROLE_CLAIM, DEFAULT_ADMIN_PASSWORD
from .errors import AuthorizationError
from .models import Session

logger = logging.getLogger(__name__)


def hash_password(password: str, salt: bytes, iterations: int = ADMIN_HASH_ITERATIONS) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)


def has_admin_claim(session: Session | None) -> bool:
    return bool(session and session.is_valid() and ADMIN_ROLE_CLAIM in session.roles)


class AdminGate:
    def __init__(self, password: str | None = None, *, iterations: int = ADMIN_HASH_ITERATIONS):
        self._password = password or DEFAULT_ADMIN_PASSWORD
        self._iterations = iterations
        self._salt = os.urandom(16)
        self._reference_hash: bytes | None = None
        self.hash_computations = 0

    def _reference(self) -> bytes:
        if self._reference_hash is None:
            self._reference_hash = hash_password(self._password, self._salt, self._iterations)
            self.hash_computations += 1
            logger.debug("Admin reference hash computed")
        return self._reference_hash

    def check_password(self, candidate: str) -> bool:
        reference = self._reference()
        attempt = hash_password(candidate or "", self._salt, self._iterations)
        return hmac.compare_digest(reference, attempt)


class AdminSession:
    """Per-UI-session admin flag; never persisted across reloads."""

    def __init__(self, gate: AdminGate):
        self.gate = gate
        self._unlocked = False

    def unlock(self, password: str) -> bool:
        if self.gate.check_password(password):
            self._unlocked = True
            logger.info("Admin unlocked for this session")
            return True
        logger.info("Admin unlock rejected")
        return False

    def lock(self) -> None:
        self._unlocked = False

    def is_admin(self, session: Session | None = None) -> bool:
        return self._unlocked or has_admin_claim(session)

    def require(self, session: Session | None = None) -> None:
        if not self.is_admin(session):
            raise AuthorizationError("Admin access required")
