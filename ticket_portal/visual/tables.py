"""Reusable table helpers for Streamlit rendering."""

from __future__ import annotations

import pandas as pd
import pytz
import streamlit as st

from ticket_portal.core.column_config import get_columns
from ticket_portal.core.config import TIMEZONE
from ticket_portal.core.status import priority_label
from ticket_portal.visual.column_metadata import apply_column_metadata

DATETIME_COLUMNS = ("created_at", "updated_at", "closed_at")


def localize_timestamps(df: pd.DataFrame, tz_name: str = TIMEZONE) -> pd.DataFrame:
    if df.empty:
        return df
    tz = pytz.timezone(tz_name)
    out = df.copy()
    for col in DATETIME_COLUMNS:
        if col in out.columns:
            out[col] = pd.to_datetime(out[col], errors="coerce", utc=True).dt.tz_convert(tz)
    return out


def prepare_ticket_table(
    df: pd.DataFrame,
    set_name: str = "ticket_list",
    *,
    extra_columns: list[str] | None = None,
) -> tuple[pd.DataFrame, list[str]]:
    if df.empty:
        return df, []

    table = localize_timestamps(df)
    if "priority" in table.columns:
        table["priority"] = table["priority"].apply(priority_label)
    canonical = get_columns(set_name) or []
    display_cols: list[str] = [col for col in canonical if col in table.columns]

    if extra_columns:
        for col in extra_columns:
            if col in table.columns and col not in display_cols:
                display_cols.append(col)

    if not display_cols:
        display_cols = [col for col in table.columns if col != "id"]

    return table, display_cols


def render_ticket_table(
    df: pd.DataFrame,
    set_name: str = "ticket_list",
    limit: int = 1000,
    *,
    extra_columns: list[str] | None = None,
):
    prepared, cols = prepare_ticket_table(df, set_name, extra_columns=extra_columns)
    if not cols:
        st.info("No tickets to show.")
        return
    st.dataframe(
        prepared[cols].head(limit),
        hide_index=True,
        column_config=apply_column_metadata(cols),
    )
