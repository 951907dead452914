"""Ticket detail page: fields, staff notes, and the comment thread."""

from __future__ import annotations

import pytz
import streamlit as st

from ticket_portal.app import register_page
from ticket_portal.core.config import TIMEZONE
from ticket_portal.core.status import priority_color, priority_label, status_color
from ticket_portal.runtime import get_portal
from ticket_portal.visual.notifications import defer_notification


def _fmt(ts) -> str:
    if ts is None:
        return "—"
    return ts.astimezone(pytz.timezone(TIMEZONE)).strftime("%Y-%m-%d %H:%M")


@register_page("Ticket Details")
def ticket_details_page():
    st.title("Ticket Details")
    portal = get_portal()
    tickets = portal.store.tickets
    if not tickets:
        st.info("No tickets loaded.")
        return
    labels = {t.id: f"{t.ticket_number} · {t.customer_name}" for t in tickets}
    ids = list(labels)
    selected = st.session_state.get("selected_ticket_id")
    index = ids.index(selected) if selected in ids else 0
    ticket_id = st.selectbox("Ticket", ids, index=index, format_func=labels.get)
    st.session_state["selected_ticket_id"] = ticket_id
    ticket = portal.store.get(ticket_id)
    if ticket is None:
        st.warning("Ticket no longer exists.")
        return

    st.subheader(ticket.ticket_number)
    st.markdown(
        f"<span style='color:{status_color(ticket.status)}'>● {ticket.status}</span> &nbsp; "
        f"<span style='color:{priority_color(ticket.priority)}'>▲ {priority_label(ticket.priority)}</span>",
        unsafe_allow_html=True,
    )
    c1, c2 = st.columns(2)
    c1.write(f"**Customer:** {ticket.customer_name}")
    c1.write(f"**Phone:** {ticket.phone_number}")
    c1.write(f"**Email:** {ticket.email}")
    c2.write(f"**Created:** {_fmt(ticket.created_at)}")
    c2.write(f"**Updated:** {_fmt(ticket.updated_at)}")
    if ticket.closed_at:
        c2.write(f"**Closed:** {_fmt(ticket.closed_at)}")
    if ticket.representative_name:
        c2.write(f"**Representative:** {ticket.representative_name}")
    st.write("**Issue**")
    st.write(ticket.issue_description)
    if ticket.notified:
        st.success("Customer notified")

    with st.expander("Staff notes", expanded=bool(ticket.notes)):
        notes = st.text_area("Notes", value=ticket.notes or "", key=f"notes_{ticket.id}")
        c1, c2, c3 = st.columns(3)
        if c1.button("Save Notes", key=f"save_notes_{ticket.id}"):
            defer_notification(portal.service.set_notes(ticket, notes.strip()))
            st.rerun()
        if c2.button("Clear Notes", key=f"clear_notes_{ticket.id}", disabled=not ticket.notes):
            defer_notification(portal.service.clear_notes(ticket))
            st.rerun()
        if c3.button("Close Ticket", key=f"close_{ticket.id}", disabled=ticket.status == "Closed"):
            defer_notification(portal.service.close_ticket(ticket, notes=notes.strip() or None))
            st.rerun()

    st.markdown("---")
    st.subheader(f"Comments ({len(ticket.comments)})")
    for comment in ticket.comments:
        with st.container(border=True):
            st.caption(f"{comment.user_id} · {_fmt(comment.created_at)}")
            st.write(comment.content)

    with st.form("comment_form", clear_on_submit=True):
        content = st.text_area("Add a comment")
        posted = st.form_submit_button("Post Comment")
    if posted:
        if not content.strip():
            st.error("Comment cannot be empty.")
            return
        with st.spinner("Saving comment..."):
            notice = portal.service.add_comment(ticket.id, content.strip())
        defer_notification(notice)
        st.rerun()
