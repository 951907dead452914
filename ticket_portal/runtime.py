"""Per-session wiring of settings, backend client, store, and ticket service."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import streamlit as st

from ticket_portal.core.admin import AdminGate, AdminSession
from ticket_portal.core.backend_client import BackendAPI
from ticket_portal.core.config import CLIENT_ID_PARAM, PortalSettings, load_settings
from ticket_portal.core.identity import IdentityGate
from ticket_portal.core.lifecycle import TicketService
from ticket_portal.core.local_storage import (
    LocalDraftCache,
    LocalStorage,
    client_storage,
    is_client_id,
    load_theme,
    new_client_id,
)
from ticket_portal.core.repository import TicketRepository
from ticket_portal.core.store import TicketStore

logger = logging.getLogger(__name__)

PORTAL_KEY = "portal"


@dataclass(slots=True)
class Portal:
    settings: PortalSettings
    storage: LocalStorage
    store: TicketStore
    identity: IdentityGate
    admin: AdminSession
    drafts: LocalDraftCache
    service: TicketService


@st.cache_resource
def _admin_gate(password: str) -> AdminGate:
    # One gate per process so the reference hash is computed once.
    return AdminGate(password)


def browser_client_id(params) -> str:
    """Return the client id carried in the URL, issuing a fresh one when absent or malformed.

    The id is written back into ``params`` (``st.query_params`` in the app), so a
    reload or bookmark in the same browser reopens the same local storage.
    """
    value = params.get(CLIENT_ID_PARAM)
    if not is_client_id(value):
        value = new_client_id()
        params[CLIENT_ID_PARAM] = value
        logger.debug("Issued browser client id %s", value)
    return value


def build_portal(settings: PortalSettings, client_id: str, admin_gate: AdminGate | None = None) -> Portal:
    api = None
    if settings.backend_configured:
        api = BackendAPI(settings.backend_url, settings.backend_key, timeout=settings.request_timeout)
    else:
        logger.error("Backend URL or anon key is missing; ticket operations are disabled")
    storage = client_storage(settings.storage_dir, client_id)
    store = TicketStore(dark_mode=bool(load_theme(storage)))
    identity = IdentityGate(api)
    admin = AdminSession(admin_gate or AdminGate(settings.admin_password))
    drafts = LocalDraftCache(storage)
    service = TicketService(
        TicketRepository(api) if api is not None else None,
        store,
        identity,
        admin=admin,
        drafts=drafts,
    )
    return Portal(settings, storage, store, identity, admin, drafts, service)


def get_portal() -> Portal:
    """Return this browser session's Portal, creating it (and loading tickets) on first use."""
    portal = st.session_state.get(PORTAL_KEY)
    if portal is None:
        try:
            secrets = dict(st.secrets)
        except FileNotFoundError:
            secrets = {}
        settings = load_settings(secrets)
        client_id = browser_client_id(st.query_params)
        portal = build_portal(settings, client_id, _admin_gate(settings.admin_password))
        st.session_state[PORTAL_KEY] = portal
        portal.service.refresh()
    return portal
