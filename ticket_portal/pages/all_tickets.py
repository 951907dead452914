"""All tickets page: full searchable list with intake trend."""

from __future__ import annotations

from datetime import date, timedelta

import streamlit as st

from ticket_portal.app import register_page
from ticket_portal.core.config import STATUS_DISPLAY_ORDER
from ticket_portal.core.mappers import tickets_to_dataframe
from ticket_portal.features.dashboard import search_tickets
from ticket_portal.runtime import get_portal
from ticket_portal.visual.charts import created_trend
from ticket_portal.visual.notifications import defer_notification
from ticket_portal.visual.tables import render_ticket_table


@register_page("All Tickets")
def all_tickets_page():
    st.title("All Tickets")
    portal = get_portal()
    df = tickets_to_dataframe(portal.store.tickets)
    if df.empty:
        st.info("No tickets loaded.")
        return

    col1, col2 = st.columns([3, 2])
    term = col1.text_input("Search", placeholder="Ticket #, name, email, or phone")
    statuses = col2.multiselect("Status", list(STATUS_DISPLAY_ORDER), default=list(STATUS_DISPLAY_ORDER))
    filtered = search_tickets(df, term)
    filtered = filtered[filtered["status"].isin(statuses)]
    filtered = filtered.sort_values(by="created_at", ascending=False, na_position="last")
    st.caption(f"{len(filtered)} of {len(df)} ticket(s)")
    pending = portal.store.pending()
    if pending:
        numbers = ", ".join(t.ticket_number for t in pending)
        st.warning(f"Local changes not yet confirmed by the backend: {numbers}. Refresh to reconcile.")
        if st.button("Refresh"):
            defer_notification(portal.service.refresh())
            st.rerun()
    render_ticket_table(filtered, "core")

    csv = filtered.drop(columns=["id"]).to_csv(index=False).encode("utf-8")
    st.download_button("Download CSV", data=csv, file_name="tickets.csv", mime="text/csv")

    end = date.today()
    chart, _ = created_trend(df, end - timedelta(days=30), end)
    if chart is not None:
        st.subheader("Tickets Submitted (30 days)")
        st.altair_chart(chart, use_container_width=True)
