"""Light/dark theme toggle backed by the stored color-theme preference."""

from __future__ import annotations

import streamlit as st

from ticket_portal.core.local_storage import LocalStorage, save_theme
from ticket_portal.core.store import TicketStore

LIGHT_THEME_CSS = """
<style>
    :root {
        --background-color: #FFFFFF;
        --secondary-background-color: #F3F4F6;
        --text-color: #111827;
    }
    .stApp { background-color: var(--background-color); color: var(--text-color); }
    [data-testid="stMetric"] {
        background-color: var(--secondary-background-color);
        padding: 1rem;
        border-radius: 0.5rem;
    }
</style>
"""

DARK_THEME_CSS = """
<style>
    :root {
        --background-color: #111827;
        --secondary-background-color: #1F2937;
        --text-color: #F9FAFB;
    }
    .stApp { background-color: var(--background-color); color: var(--text-color); }
    h1, h2, h3, h4, h5, h6 { color: var(--text-color); }
    .stTextInput input, .stTextArea textarea {
        background-color: var(--secondary-background-color) !important;
        color: var(--text-color) !important;
    }
    [data-testid="stMetric"] {
        background-color: var(--secondary-background-color);
        padding: 1rem;
        border-radius: 0.5rem;
    }
</style>
"""


def apply_theme(store: TicketStore, storage: LocalStorage) -> None:
    """Render the sidebar toggle and inject the CSS for the current mode."""
    with st.sidebar:
        label = "☀️ Light Mode" if store.dark_mode else "🌙 Dark Mode"
        if st.button(label, use_container_width=True):
            store.set_dark_mode(not store.dark_mode)
            save_theme(storage, store.dark_mode)
            st.rerun()
    st.markdown(DARK_THEME_CSS if store.dark_mode else LIGHT_THEME_CSS, unsafe_allow_html=True)
