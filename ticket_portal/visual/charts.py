"""Chart builders (Altair) for ticket status and intake."""

from __future__ import annotations

import altair as alt
import pandas as pd
import pytz

from ticket_portal.core.config import STATUS_COLORS, STATUS_DISPLAY_ORDER, TIMEZONE


def status_bar_chart(counts: dict[str, int]):
    if not counts or not any(counts.values()):
        return None
    chart_df = pd.DataFrame(
        {"status": list(STATUS_DISPLAY_ORDER), "count": [int(counts.get(s, 0)) for s in STATUS_DISPLAY_ORDER]}
    )
    return (
        alt.Chart(chart_df)
        .mark_bar()
        .encode(
            x=alt.X("status:N", sort=list(STATUS_DISPLAY_ORDER), title="Status"),
            y=alt.Y("count:Q", title="Tickets"),
            color=alt.Color(
                "status:N",
                scale=alt.Scale(
                    domain=list(STATUS_DISPLAY_ORDER),
                    range=[STATUS_COLORS[s] for s in STATUS_DISPLAY_ORDER],
                ),
                legend=None,
            ),
            tooltip=["status", "count"],
        )
    )


def created_trend(df: pd.DataFrame, start, end):
    """Daily count of submitted tickets between ``start`` and ``end`` (inclusive dates)."""
    if df.empty or "created_at" not in df.columns:
        return None, pd.DataFrame()
    tz = pytz.timezone(TIMEZONE)
    tmp = df.copy()
    tmp["created_dt"] = pd.to_datetime(tmp["created_at"], utc=True, errors="coerce").dt.tz_convert(tz)
    tmp["date"] = tmp["created_dt"].dt.date
    tmp = tmp[(tmp["date"] >= start) & (tmp["date"] <= end)]
    if tmp.empty:
        return None, tmp

    agg = tmp.groupby("date").size().rename("count").reset_index()
    agg["date"] = pd.to_datetime(agg["date"])
    chart_df = pd.DataFrame({"date": pd.date_range(start, end, freq="D")})
    chart_df = chart_df.merge(agg, on="date", how="left")
    chart_df["count"] = chart_df["count"].fillna(0).astype(int)
    chart = (
        alt.Chart(chart_df)
        .mark_line(point=True)
        .encode(
            x=alt.X("date:T", title="Date"),
            y=alt.Y("count:Q", title="Tickets submitted"),
            tooltip=[alt.Tooltip("date:T", title="Date"), alt.Tooltip("count:Q", title="Tickets")],
        )
    )
    return chart, tmp
