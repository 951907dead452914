"""Admin page: shared-secret (or role claim) gated edit and delete."""

from __future__ import annotations

from dataclasses import replace

import streamlit as st

from ticket_portal.app import register_page
from ticket_portal.core.config import PRIORITY_LEVELS, STATUS_DISPLAY_ORDER
from ticket_portal.core.mappers import tickets_to_dataframe
from ticket_portal.core.models import Ticket
from ticket_portal.runtime import get_portal
from ticket_portal.visual.notifications import defer_notification
from ticket_portal.visual.tables import render_ticket_table


def _edit_form(portal, ticket: Ticket) -> None:
    with st.form(f"edit_{ticket.id}"):
        c1, c2, c3 = st.columns(3)
        status = c1.selectbox("Status", list(STATUS_DISPLAY_ORDER), index=list(STATUS_DISPLAY_ORDER).index(ticket.status))
        priority = c2.selectbox("Priority", list(PRIORITY_LEVELS), index=list(PRIORITY_LEVELS).index(ticket.priority))
        notified = c3.selectbox("Customer Notified", ["No", "Yes"], index=int(ticket.notified)) == "Yes"
        customer_name = st.text_input("Customer Name", value=ticket.customer_name)
        phone_number = st.text_input("Phone Number", value=ticket.phone_number)
        email = st.text_input("Email", value=ticket.email)
        issue = st.text_area("Issue Description", value=ticket.issue_description)
        notes = st.text_area("Closing Comment / Notes", value=ticket.notes or "")
        rep = st.text_input("Representative Initial", value=ticket.representative_name)
        saved = st.form_submit_button("Save Changes", type="primary")
    if saved:
        edited = replace(
            ticket,
            status=status,
            priority=priority,
            notified=notified,
            customer_name=customer_name,
            phone_number=phone_number,
            email=email,
            issue_description=issue,
            notes=notes or None,
            representative_name=rep,
        )
        defer_notification(portal.service.update_ticket(edited, require_admin=True))
        st.rerun()


def _delete_controls(portal, ticket: Ticket) -> None:
    confirm_key = f"confirm_delete_{ticket.id}"
    if not st.session_state.get(confirm_key):
        if st.button("Delete Ticket", key=f"delete_{ticket.id}"):
            st.session_state[confirm_key] = True
            st.rerun()
        return
    st.warning(f"Delete {ticket.ticket_number}? This action is irreversible.")
    c1, c2 = st.columns(2)
    if c1.button("Confirm Delete", type="primary", key=f"confirm_{ticket.id}"):
        st.session_state.pop(confirm_key, None)
        defer_notification(portal.service.delete_ticket(ticket.id))
        st.rerun()
    if c2.button("Cancel", key=f"cancel_{ticket.id}"):
        st.session_state.pop(confirm_key, None)
        st.rerun()


@register_page("Admin")
def admin_page():
    st.title("Admin Dashboard")
    portal = get_portal()
    session = portal.identity.current_session()

    if not portal.admin.is_admin(session):
        password = st.text_input("Admin Password", type="password")
        if st.button("Unlock", type="primary"):
            if portal.admin.unlock(password):
                st.rerun()
            st.error("Invalid password")
        return

    if st.sidebar.button("Lock Admin"):
        portal.admin.lock()
        st.rerun()

    df = tickets_to_dataframe(portal.store.tickets)
    if df.empty:
        st.info("No tickets loaded.")
        return
    render_ticket_table(df, "admin")

    tickets = portal.store.tickets
    labels = {t.id: f"{t.ticket_number} · {t.customer_name} ({t.status})" for t in tickets}
    ticket_id = st.selectbox("Manage ticket", list(labels), format_func=labels.get)
    ticket = portal.store.get(ticket_id)
    if ticket is None:
        return
    if session is None:
        st.caption("Sign in as staff to save changes.")
    _edit_form(portal, ticket)
    _delete_controls(portal, ticket)
