"""Customer service form: create a ticket and show its number."""

from __future__ import annotations

import streamlit as st

from ticket_portal.app import register_page
from ticket_portal.core.config import STATUS_DISPLAY_ORDER
from ticket_portal.core.mappers import tickets_to_dataframe
from ticket_portal.features.submission import validate_submission
from ticket_portal.runtime import get_portal
from ticket_portal.visual.notifications import show_notification
from ticket_portal.visual.tables import render_ticket_table


@register_page("Submit Ticket")
def submit_page():
    st.title("Customer Service Form")
    portal = get_portal()

    with st.form("ticket_form", clear_on_submit=True):
        customer_name = st.text_input("Customer Name")
        phone_number = st.text_input("Phone Number")
        email = st.text_input("Email")
        issue_description = st.text_area("Issue Description")
        col1, col2, col3 = st.columns(3)
        status = col1.selectbox("Status", list(STATUS_DISPLAY_ORDER), index=0)
        notified = col2.selectbox("Customer Notified", ["No", "Yes"], index=0) == "Yes"
        representative_name = col3.text_input("Representative Initial")
        notes = st.text_area("Notes (optional)")
        submitted = st.form_submit_button("Submit Ticket", type="primary")

    if submitted:
        fields = {
            "customer_name": customer_name,
            "phone_number": phone_number,
            "email": email,
            "issue_description": issue_description,
            "status": status,
            "notified": notified,
            "representative_name": representative_name,
            "notes": notes,
        }
        missing = validate_submission(fields)
        if missing:
            st.error(f"Required: {', '.join(missing)}")
        else:
            with st.spinner("Submitting ticket..."):
                ticket, notice = portal.service.submit_ticket(fields)
            show_notification(notice)
            if ticket is not None:
                st.metric("Your ticket number", ticket.ticket_number)

    drafts = portal.drafts.tickets
    if drafts:
        with st.expander(f"Submitted from this device ({len(drafts)})"):
            df = tickets_to_dataframe(drafts)
            df["sync"] = [portal.drafts.provenance_of(t.ticket_number).value for t in drafts]
            render_ticket_table(df, "ticket_list", extra_columns=["sync"])
