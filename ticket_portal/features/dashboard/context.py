"""Pure helpers to build dashboard context for testing (no Streamlit)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

import pandas as pd

from ticket_portal.core.config import RECENT_LIMIT
from ticket_portal.core.mappers import tickets_to_dataframe
from ticket_portal.core.models import Ticket
from ticket_portal.features.dashboard import filters as dash


@dataclass(slots=True)
class DashboardContext:
    """Context data for the dashboard page."""

    tickets: pd.DataFrame
    recent: pd.DataFrame
    open_count: int = 0
    in_progress_count: int = 0
    closed_count: int = 0
    notified_count: int = 0
    status_distribution: dict[str, int] = field(default_factory=dict)
    priority_distribution: dict[str, int] = field(default_factory=dict)


def build_dashboard_context(
    tickets: list[Ticket],
    now: datetime,
    term: str | None = None,
    limit: int = RECENT_LIMIT,
) -> DashboardContext:
    """Build context for the dashboard page.

    Parameters
    ----------
    tickets : list[Ticket]
        Current store contents.
    now : datetime
        Reference time for the recency window.
    term : str, optional
        Search text applied to recent tickets.
    limit : int
        Rows shown when no search term is given.

    Returns
    -------
    DashboardContext
        Counts, distributions, and the filtered recent table.
    """
    df = tickets_to_dataframe(tickets)
    if df.empty:
        return DashboardContext(tickets=df, recent=pd.DataFrame())

    counts = dash.status_counts(df)
    priority_distribution = df["priority"].fillna("medium").value_counts().to_dict()
    return DashboardContext(
        tickets=df,
        recent=dash.dashboard_tickets(df, now, term, limit=limit),
        open_count=counts.get("Open", 0),
        in_progress_count=counts.get("In Progress", 0),
        closed_count=counts.get("Closed", 0),
        notified_count=int(df["notified"].fillna(False).astype(bool).sum()),
        status_distribution=counts,
        priority_distribution={str(k): int(v) for k, v in priority_distribution.items()},
    )
