"""Central column metadata and helpers for table rendering."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import streamlit as st

# Mapping of raw column keys to (label, help text, format key)
# format key: "int" -> integer, "bool" -> checkbox, "datetime" -> timestamp, None -> text
COLUMN_METADATA: dict[str, tuple[str, str, str | None]] = {
    "ticket_number": ("Ticket #", "Human-readable ticket number given to the customer.", None),
    "customer_name": ("Customer", "Name of the customer who reported the issue.", None),
    "phone_number": ("Phone", "Customer contact phone number.", None),
    "email": ("Email", "Customer contact email.", None),
    "issue_description": ("Issue", "Customer's description of the problem.", None),
    "status": ("Status", "Open, In Progress, or Closed.", None),
    "priority": ("Priority", "Staff-assigned priority (low to urgent).", None),
    "priority_value": ("Priority Rank", "Numeric priority, 4 = urgent.", "int"),
    "notified": ("Notified", "Whether the customer has been notified.", "bool"),
    "notes": ("Notes", "Staff notes, usually written when closing.", None),
    "representative_name": ("Rep", "Initial of the staff member handling the ticket.", None),
    "comment_count": ("Comments", "Number of staff comments on the ticket.", "int"),
    "created_at": ("Created", "When the ticket was submitted.", "datetime"),
    "updated_at": ("Updated", "Most recent change to the ticket.", "datetime"),
    "closed_at": ("Closed", "When the ticket was closed.", "datetime"),
    "sync": ("Sync", "pending until the ticket shows up in a refresh, then remote.", None),
}


def apply_column_metadata(
    columns: Iterable[str],
    existing: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Return a column_config dictionary with human labels and hover help."""

    config: dict[str, Any] = dict(existing or {})
    for col in columns:
        if col in config:
            continue
        meta = COLUMN_METADATA.get(col)
        if not meta:
            continue
        label, help_text, fmt = meta
        if fmt == "int":
            config[col] = st.column_config.NumberColumn(label, help=help_text, format="%d")
        elif fmt == "bool":
            config[col] = st.column_config.CheckboxColumn(label, help=help_text)
        elif fmt == "datetime":
            config[col] = st.column_config.DatetimeColumn(label, help=help_text, format="YYYY-MM-DD HH:mm")
        else:
            config[col] = st.column_config.Column(label, help=help_text)
    return config
