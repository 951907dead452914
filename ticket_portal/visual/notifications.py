"""Render lifecycle notifications as Streamlit toasts and banners."""

from __future__ import annotations

import streamlit as st

from ticket_portal.core.models import Notification

NOTICE_KEY = "pending_notice"


def show_notification(notice: Notification | None) -> None:
    if notice is None:
        return
    text = f"**{notice.title}**" + (f" {notice.description}" if notice.description else "")
    if notice.variant == "destructive":
        st.error(text)
    elif notice.variant == "success":
        st.success(text)
        st.toast(notice.title)
    else:
        st.info(text)


def defer_notification(notice: Notification | None) -> None:
    """Keep a notification across ``st.rerun`` so it shows on the next pass."""
    if notice is not None:
        st.session_state[NOTICE_KEY] = notice


def flush_notification() -> None:
    show_notification(st.session_state.pop(NOTICE_KEY, None))
