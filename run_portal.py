"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_portal.py

Automatically imports every module in ``ticket_portal/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
Backend credentials come from ``.streamlit/secrets.toml`` (``[backend]`` URL,
ANON_KEY, ADMIN_PASSWORD) or the TICKET_PORTAL_* environment variables.
"""

import logging
from importlib import import_module
from pathlib import Path

import streamlit as st

from ticket_portal.app import main

st.set_page_config(page_title="Customer Service Portal", page_icon="🎫", layout="wide")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

PAGES_DIR = Path(__file__).parent / "ticket_portal" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"ticket_portal.pages.{py.stem}"
    try:
        import_module(mod_name)
    except Exception as e:  # pragma: no cover
        logger.error("Failed importing page %s: %s", mod_name, e)

if __name__ == "__main__":
    main()
