from datetime import UTC, datetime

import pytest
from conftest import DummyAPI, backend_row

from ticket_portal.core.errors import ConcurrencyConflictError, RepositoryError
from ticket_portal.core.lifecycle import build_ticket
from ticket_portal.core.models import Comment
from ticket_portal.core.repository import TicketRepository


@pytest.fixture
def repo(api):
    return TicketRepository(api)


def make_comment(content="hi"):
    return Comment(id="c1", ticket_id="1", user_id="staff", content=content, created_at=datetime.now(UTC))


def test_list_all_maps_rows(repo):
    tickets = repo.list_all()
    assert [t.id for t in tickets] == ["1"]
    assert tickets[0].created_at == datetime(2024, 9, 1, 10, tzinfo=UTC)


def test_insert_omits_local_id(repo, api):
    ticket = build_ticket({"customer_name": "A", "issue_description": "broken"})
    saved = repo.insert(ticket)
    assert saved.id == "101"
    assert saved.ticket_number == ticket.ticket_number
    assert api.rows[-1]["id"] == 101


def test_insert_without_representation_raises():
    class NoRows(DummyAPI):
        def insert(self, table, rows, *, token=None):
            return []

    with pytest.raises(RepositoryError) as info:
        TicketRepository(NoRows()).insert(build_ticket({}))
    assert info.value.stage == "insert"


def test_update_missing_raises_persist(repo):
    with pytest.raises(RepositoryError) as info:
        repo.update_by_id("404", {"status": "Closed"})
    assert info.value.stage == "persist"


def test_update_ignores_id_field(repo, api):
    repo.update_by_id("1", {"id": "999", "status": "Closed"})
    assert api.rows[0]["id"] == 1
    assert api.rows[0]["status"] == "Closed"


def test_delete_missing_raises(repo):
    with pytest.raises(RepositoryError) as info:
        repo.delete_by_id("404")
    assert info.value.stage == "delete"


def test_fetch_by_id_missing_raises_fetch(repo):
    with pytest.raises(RepositoryError) as info:
        repo.fetch_by_id("404")
    assert info.value.stage == "fetch"


def test_append_comment_bumps_revision(repo, api):
    saved = repo.append_comment("1", make_comment())
    assert saved.revision == 1
    assert [c.content for c in saved.comments] == ["hi"]
    assert api.calls[-1] == ("update", {"id": "eq.1", "revision": "eq.0"})


def test_append_comment_retries_then_conflicts():
    api = DummyAPI([backend_row()])

    def bump(backend):
        backend.rows[0]["revision"] += 1

    api.before_update.extend([bump, bump])
    with pytest.raises(ConcurrencyConflictError):
        TicketRepository(api).append_comment("1", make_comment(), max_attempts=2)
    assert api.rows[0]["comments"] == []


def test_append_comment_on_row_without_revision(repo, api):
    api.rows[0]["revision"] = None
    saved = repo.append_comment("1", make_comment())
    assert saved.revision == 1
    assert api.calls[-1] == ("update", {"id": "eq.1", "revision": "is.null"})
    assert api.count("update") == 1
