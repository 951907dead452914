"""Application entry point: page registry and router."""

from __future__ import annotations

import streamlit as st

from ticket_portal.runtime import get_portal
from ticket_portal.visual.notifications import flush_notification
from ticket_portal.visual.theme import apply_theme

PAGES = {}
NAV_KEY = "nav_page"
NAV_TARGET_KEY = "nav_target"


def register_page(label):
    def decorator(func):
        PAGES[label] = func
        return func

    return decorator


def apply_nav_target(state, pages) -> None:
    """Point the page selector at a pending navigation target before it renders.

    ``state`` is ``st.session_state``; the selector reads its value from
    ``state[NAV_KEY]`` so the choice survives later reruns.
    """
    target = state.pop(NAV_TARGET_KEY, None)
    if target in pages:
        state[NAV_KEY] = target
    elif state.get(NAV_KEY) not in pages:
        state.pop(NAV_KEY, None)


def main():
    st.sidebar.title("Customer Service Portal")
    pages = list(PAGES.keys())
    if not pages:
        st.write("No pages registered yet.")
        return
    preferred_order = [
        "Submit Ticket",  # customer-facing form
        "Dashboard",  # recent tickets and counts
        "All Tickets",  # full searchable list
        "Ticket Details",  # comments and notes
        "Admin",  # gated edit/delete
        "Sign In",  # staff session
    ]

    ordered = [name for name in preferred_order if name in pages]
    trailing = [name for name in pages if name not in preferred_order]
    trailing.sort()
    pages = ordered + trailing

    portal = get_portal()
    apply_theme(portal.store, portal.storage)
    session = portal.identity.current_session()
    if session is not None:
        st.sidebar.success(f"Signed in as {session.email or 'staff'}")
    elif "Sign In" in pages:
        st.sidebar.caption("Not signed in. Staff actions need a session.")

    # Navigation from table rows lands here via session_state
    apply_nav_target(st.session_state, pages)
    page = st.sidebar.selectbox("Page", pages, key=NAV_KEY)
    flush_notification()
    PAGES[page]()


if __name__ == "__main__":
    main()
