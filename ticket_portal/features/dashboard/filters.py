"""Ticket list filtering for the dashboard and all-tickets views."""

from __future__ import annotations

from datetime import datetime, timedelta

import pandas as pd

from ticket_portal.core.config import RECENT_LIMIT, RECENT_WINDOW_HOURS, STATUS_DISPLAY_ORDER

SEARCH_COLUMNS = ("ticket_number", "customer_name", "email", "phone_number")


def search_tickets(df: pd.DataFrame, term: str | None) -> pd.DataFrame:
    """Case-insensitive substring match on ticket number, name, email, and phone.

    Parameters
    ----------
    df : pd.DataFrame
        Ticket DataFrame from ``tickets_to_dataframe``.
    term : str or None
        Search text; empty returns the input unchanged.

    Returns
    -------
    pd.DataFrame
        Matching rows.
    """
    if df.empty or not term or not term.strip():
        return df.copy()
    needle = term.strip().lower()
    mask = pd.Series(False, index=df.index)
    for col in SEARCH_COLUMNS:
        if col in df.columns:
            mask |= df[col].fillna("").astype(str).str.lower().str.contains(needle, regex=False)
    return df[mask].copy()


def recent_tickets(
    df: pd.DataFrame,
    now: datetime,
    *,
    window_hours: int = RECENT_WINDOW_HOURS,
) -> pd.DataFrame:
    """Tickets created within the last ``window_hours`` hours."""
    if df.empty or "created_at" not in df.columns:
        return pd.DataFrame()
    created = pd.to_datetime(df["created_at"], errors="coerce", utc=True)
    cutoff = pd.Timestamp(now - timedelta(hours=window_hours))
    cutoff = cutoff.tz_localize("UTC") if cutoff.tzinfo is None else cutoff.tz_convert("UTC")
    return df[created > cutoff].copy()


def dashboard_tickets(
    df: pd.DataFrame,
    now: datetime,
    term: str | None = None,
    *,
    limit: int = RECENT_LIMIT,
) -> pd.DataFrame:
    """Recent tickets: first ``limit`` without a search term, every match with one."""
    recent = recent_tickets(df, now)
    if recent.empty:
        return recent
    if not term or not term.strip():
        return recent.head(limit)
    return search_tickets(recent, term)


def status_counts(df: pd.DataFrame) -> dict[str, int]:
    counts = {status: 0 for status in STATUS_DISPLAY_ORDER}
    if df.empty or "status" not in df.columns:
        return counts
    for status, count in df["status"].value_counts().items():
        if status in counts:
            counts[status] = int(count)
    return counts
