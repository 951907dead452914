import json
from datetime import UTC, datetime

import pytest

from ticket_portal.core.lifecycle import build_ticket
from ticket_portal.core.local_storage import (
    LocalDraftCache,
    LocalStorage,
    client_storage,
    is_client_id,
    load_theme,
    new_client_id,
    save_theme,
)
from ticket_portal.core.models import Provenance

NOW = datetime(2024, 9, 1, 12, tzinfo=UTC)


def test_slots_are_independent(storage):
    storage.set_item("a", [1])
    storage.set_item("b", {"x": 1})
    storage.remove_item("a")
    assert "a" not in storage
    assert storage.get_item("b") == {"x": 1}


def test_unreadable_file_treated_as_empty(tmp_path):
    path = tmp_path / "local_storage.json"
    path.write_text("{not json")
    storage = LocalStorage(path)
    assert storage.get_item("localTickets", []) == []
    storage.set_item("k", 1)
    assert json.loads(path.read_text()) == {"k": 1}


def test_drafts_survive_reload_in_order(storage):
    drafts = LocalDraftCache(storage)
    first = build_ticket({"customer_name": "A", "issue_description": "one"}, NOW)
    second = build_ticket({"customer_name": "B", "issue_description": "two"}, NOW)
    drafts.add(first)
    drafts.add(second)

    reloaded = LocalDraftCache(storage)
    assert [t.ticket_number for t in reloaded.tickets] == [first.ticket_number, second.ticket_number]
    assert reloaded.tickets[0].customer_name == "A"
    assert reloaded.tickets[0].created_at == NOW
    assert reloaded.provenance_of(first.ticket_number) is Provenance.PENDING


def test_malformed_slot_loads_empty(storage):
    storage.set_item("localTickets", {"oops": True})
    assert len(LocalDraftCache(storage)) == 0


def test_mark_confirmed_by_ticket_number(storage):
    drafts = LocalDraftCache(storage)
    ticket = build_ticket({"customer_name": "A"}, NOW)
    other = build_ticket({"customer_name": "B"}, NOW)
    drafts.add(ticket)
    drafts.add(other)
    assert drafts.mark_confirmed([ticket.ticket_number, "TKT-UNKNOWN"]) == 1
    assert drafts.mark_confirmed([ticket.ticket_number]) == 0
    reloaded = LocalDraftCache(storage)
    assert reloaded.provenance_of(ticket.ticket_number) is Provenance.REMOTE
    assert reloaded.provenance_of(other.ticket_number) is Provenance.PENDING


def test_clear(storage):
    drafts = LocalDraftCache(storage)
    drafts.add(build_ticket({}, NOW))
    drafts.clear()
    assert storage.get_item("localTickets") == []


def test_theme_round_trip(storage):
    assert load_theme(storage) is None
    save_theme(storage, True)
    assert load_theme(storage) is True
    save_theme(storage, False)
    assert storage.get_item("color-theme") == "light"


def test_two_sessions_of_one_client_keep_both_drafts(storage):
    first_tab = LocalDraftCache(storage)
    second_tab = LocalDraftCache(storage)
    first_tab.add(build_ticket({"customer_name": "Alice"}, NOW))
    second_tab.add(build_ticket({"customer_name": "Bob"}, NOW))
    assert [t.customer_name for t in LocalDraftCache(storage).tickets] == ["Alice", "Bob"]
    assert len(first_tab) == 2


def test_client_storages_are_isolated(tmp_path):
    alice_id, bob_id = new_client_id(), new_client_id()
    alice = LocalDraftCache(client_storage(tmp_path, alice_id))
    bob = LocalDraftCache(client_storage(tmp_path, bob_id))
    alice.add(build_ticket({"customer_name": "Alice", "email": "alice@example.com"}, NOW))
    save_theme(client_storage(tmp_path, alice_id), True)

    assert bob.tickets == []
    assert load_theme(client_storage(tmp_path, bob_id)) is None
    assert [t.customer_name for t in LocalDraftCache(client_storage(tmp_path, alice_id)).tickets] == ["Alice"]


@pytest.mark.parametrize("bad", ["", "../../etc/passwd", "ABC", None, "g" * 32])
def test_client_storage_rejects_bad_ids(tmp_path, bad):
    assert not is_client_id(bad)
    with pytest.raises(ValueError):
        client_storage(tmp_path, bad)
