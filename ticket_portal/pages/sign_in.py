"""Staff sign-in page: connection status and session management."""

from __future__ import annotations

import streamlit as st

from ticket_portal.app import register_page
from ticket_portal.core.errors import ConfigurationError, SessionError
from ticket_portal.runtime import get_portal


@register_page("Sign In")
def sign_in_page():
    st.title("Staff Sign In")
    portal = get_portal()
    if not portal.settings.backend_configured:
        st.warning("Backend URL or anon key is missing. Add them to secrets; ticket actions are disabled.")
        return
    st.caption(f"Backend: {portal.settings.backend_url}")

    session = portal.identity.current_session()
    if session is not None:
        st.info(f"Signed in as {session.email or session.user_id}.")
        if st.button("Sign Out", type="primary"):
            portal.identity.sign_out()
            portal.admin.lock()
            st.rerun()
        return

    mode = st.radio("Mode", ["Sign in", "Create account"], horizontal=True)
    with st.form("auth_form"):
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Submit", type="primary")

    if not submitted:
        return
    if not (email and password):
        st.error("Email and password are required.")
        return
    try:
        if mode == "Sign in":
            portal.identity.sign_in(email, password)
        elif portal.identity.sign_up(email, password) is None:
            st.success("Account created. Check your email to confirm, then sign in.")
            return
    except (SessionError, ConfigurationError) as exc:
        st.error(f"Authentication failed: {exc}")
        return
    portal.service.refresh()
    st.rerun()
