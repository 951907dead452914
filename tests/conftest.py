"""Test configuration ensuring local package import when editable install not active.

If users invoke `pytest` outside the project's virtualenv, we still add the project
root to sys.path so `import ticket_portal` works. Also provides an in-memory
backend that stands in for the hosted table and auth service.
"""

from __future__ import annotations

import copy
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from ticket_portal.core.admin import AdminGate, AdminSession  # noqa: E402
from ticket_portal.core.backend_client import BackendAPI  # noqa: E402
from ticket_portal.core.errors import SessionError  # noqa: E402
from ticket_portal.core.identity import IdentityGate  # noqa: E402
from ticket_portal.core.lifecycle import TicketService  # noqa: E402
from ticket_portal.core.local_storage import LocalDraftCache, LocalStorage  # noqa: E402
from ticket_portal.core.repository import TicketRepository  # noqa: E402
from ticket_portal.core.store import TicketStore  # noqa: E402

STAFF_EMAIL = "staff@example.com"
STAFF_PASSWORD = "hunter2"
ADMIN_PASSWORD = "s3cret"


class DummyAPI(BackendAPI):
    """In-memory table + auth backend. ``fail`` maps a method name to an exception to raise."""

    def __init__(self, rows=None):
        self.url = "https://example.supabase.co"
        self.key = "anon-key"
        self.timeout = 1.0
        self.rows: list[dict] = [copy.deepcopy(r) for r in rows or []]
        self.calls: list[tuple[str, dict | None]] = []
        self.fail: dict[str, Exception] = {}
        self.before_update = []  # each update call first pops and runs one of these
        self.users = {STAFF_EMAIL: (STAFF_PASSWORD, {})}
        self._next_id = 100

    @staticmethod
    def _match(row, filters):
        for k, v in (filters or {}).items():
            if v == "is.null":
                if row.get(k) is not None:
                    return False
            elif str(row.get(k)) != str(v).removeprefix("eq."):
                return False
        return True

    def _maybe_fail(self, name):
        if name in self.fail:
            raise self.fail[name]

    def select(self, table, *, filters=None, columns="*", token=None):
        self.calls.append(("select", filters))
        self._maybe_fail("select")
        return [copy.deepcopy(r) for r in self.rows if self._match(r, filters)]

    def insert(self, table, rows, *, token=None):
        self.calls.append(("insert", None))
        self._maybe_fail("insert")
        out = []
        for row in rows:
            self._next_id += 1
            stored = {"id": self._next_id, **copy.deepcopy(row)}
            self.rows.append(stored)
            out.append(copy.deepcopy(stored))
        return out

    def update(self, table, values, *, filters, token=None):
        self.calls.append(("update", filters))
        if self.before_update:
            self.before_update.pop(0)(self)
        self._maybe_fail("update")
        touched = []
        for row in self.rows:
            if self._match(row, filters):
                row.update(copy.deepcopy(values))
                touched.append(copy.deepcopy(row))
        return touched

    def delete(self, table, *, filters, token=None):
        self.calls.append(("delete", filters))
        self._maybe_fail("delete")
        gone = [r for r in self.rows if self._match(r, filters)]
        self.rows = [r for r in self.rows if not self._match(r, filters)]
        return gone

    def sign_in_with_password(self, email, password):
        expected = self.users.get(email)
        if expected is None or expected[0] != password:
            raise SessionError("Auth request /token failed 400: invalid_grant")
        return {
            "access_token": f"token-{email}",
            "refresh_token": "refresh",
            "expires_in": 3600,
            "user": {"id": f"user-{email}", "email": email, "app_metadata": expected[1]},
        }

    def sign_up(self, email, password):
        self.users[email] = (password, {})
        return {"user": {"id": f"user-{email}", "email": email}}

    def sign_out(self, token):
        self.calls.append(("sign_out", None))

    def count(self, name):
        return sum(1 for call, _ in self.calls if call == name)


def backend_row(**overrides):
    row = {
        "id": 1,
        "ticketNumber": "TKT-SEED01",
        "customerName": "Seed Customer",
        "phoneNumber": "555-0000",
        "email": "seed@example.com",
        "issueDescription": "Seed issue",
        "status": "Open",
        "priority": "medium",
        "notified": False,
        "notes": None,
        "representativeName": "S",
        "createdAt": "2024-09-01T10:00:00+00:00",
        "updatedAt": "2024-09-01T10:00:00+00:00",
        "closedAt": None,
        "comments": [],
        "revision": 0,
    }
    row.update(overrides)
    return row


@pytest.fixture
def api():
    return DummyAPI([backend_row()])


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(tmp_path / "local_storage.json")


@pytest.fixture
def admin_gate():
    return AdminGate(ADMIN_PASSWORD, iterations=1000)


@pytest.fixture
def service(api, storage, admin_gate):
    store = TicketStore()
    return TicketService(
        TicketRepository(api),
        store,
        IdentityGate(api),
        admin=AdminSession(admin_gate),
        drafts=LocalDraftCache(storage),
    )


@pytest.fixture
def signed_in(service):
    service.identity.sign_in(STAFF_EMAIL, STAFF_PASSWORD)
    service.refresh()
    return service
