from ticket_portal.core.config import load_settings
from ticket_portal.core.lifecycle import build_ticket
from ticket_portal.core.local_storage import is_client_id, new_client_id
from ticket_portal.runtime import browser_client_id, build_portal


def test_browser_client_id_is_issued_once():
    params = {}
    issued = browser_client_id(params)
    assert is_client_id(issued)
    assert params["client"] == issued
    assert browser_client_id(params) == issued


def test_malformed_client_id_is_replaced():
    params = {"client": "../shared"}
    issued = browser_client_id(params)
    assert issued != "../shared"
    assert is_client_id(params["client"])


def test_portals_for_different_browsers_do_not_share_drafts(tmp_path):
    settings = load_settings({}, {"TICKET_PORTAL_STORAGE_DIR": str(tmp_path)})
    alice = build_portal(settings, new_client_id())
    bob = build_portal(settings, new_client_id())
    alice.drafts.add(build_ticket({"customer_name": "Alice"}))
    assert bob.drafts.tickets == []
    assert len(alice.drafts) == 1
    assert alice.service.repository is None
