"""Dashboard page: status counts and tickets submitted in the last 24 hours."""

from __future__ import annotations

from datetime import UTC, datetime

import streamlit as st

from ticket_portal.app import NAV_TARGET_KEY, register_page
from ticket_portal.features.dashboard import build_dashboard_context
from ticket_portal.runtime import get_portal
from ticket_portal.visual.charts import status_bar_chart
from ticket_portal.visual.notifications import show_notification
from ticket_portal.visual.tables import render_ticket_table


@register_page("Dashboard")
def dashboard_page():
    st.title("Dashboard")
    portal = get_portal()
    if st.button("Refresh"):
        show_notification(portal.service.refresh())

    term = st.text_input("Search recent tickets", placeholder="Ticket #, name, email, or phone")
    ctx = build_dashboard_context(portal.store.tickets, datetime.now(UTC), term)

    c1, c2, c3 = st.columns(3)
    c1.metric("Open", ctx.open_count)
    c2.metric("In Progress", ctx.in_progress_count)
    c3.metric("Closed", ctx.closed_count)

    chart = status_bar_chart(ctx.status_distribution)
    if chart is not None:
        st.altair_chart(chart, use_container_width=True)

    st.subheader("Recent Tickets")
    st.caption("Submitted in the last 24 hours.")
    if ctx.recent.empty:
        st.info("No tickets submitted in the last 24 hours.")
        return
    render_ticket_table(ctx.recent, "ticket_list")
    choices = {f"{row.ticket_number} · {row.customer_name}": row.id for row in ctx.recent.itertuples()}
    picked = st.selectbox("Ticket", list(choices))
    if st.button("Open Details"):
        st.session_state["selected_ticket_id"] = choices[picked]
        st.session_state[NAV_TARGET_KEY] = "Ticket Details"
        st.rerun()
