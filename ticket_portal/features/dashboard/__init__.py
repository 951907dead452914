"""Dashboard feature module: ticket search, recency, and summary counts."""

from ticket_portal.features.dashboard.context import DashboardContext, build_dashboard_context
from ticket_portal.features.dashboard.filters import (
    dashboard_tickets,
    recent_tickets,
    search_tickets,
    status_counts,
)

__all__ = [
    "DashboardContext",
    "build_dashboard_context",
    "dashboard_tickets",
    "recent_tickets",
    "search_tickets",
    "status_counts",
]
