"""Central configuration, constants, and settings loading."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

# =============================================================================
# Backend Settings
# =============================================================================
TICKETS_TABLE = "tickets"
REST_PATH = "/rest/v1"
AUTH_PATH = "/auth/v1"
DEFAULT_REQUEST_TIMEOUT: float = 10.0  # seconds
TIMEZONE = "America/New_York"  # display timezone; storage is always UTC

# Environment fallbacks when Streamlit secrets are not configured
ENV_BACKEND_URL = "TICKET_PORTAL_URL"
ENV_BACKEND_KEY = "TICKET_PORTAL_ANON_KEY"
ENV_ADMIN_PASSWORD = "TICKET_PORTAL_ADMIN_PASSWORD"
ENV_STORAGE_DIR = "TICKET_PORTAL_STORAGE_DIR"

# =============================================================================
# Admin Gate
# =============================================================================
DEFAULT_ADMIN_PASSWORD = "admin"
ADMIN_ROLE_CLAIM = "admin"
ADMIN_HASH_ITERATIONS = 120_000

# =============================================================================
# Local Storage
# =============================================================================
# One JSON file per browser client: <storage_dir>/<client id>.json
DEFAULT_STORAGE_DIR = Path.home() / ".ticket_portal" / "clients"
CLIENT_ID_PARAM = "client"  # URL query parameter carrying the browser client id
DRAFTS_SLOT = "localTickets"
THEME_SLOT = "color-theme"

# =============================================================================
# Ticket Vocabulary
# =============================================================================
STATUS_OPEN = "Open"
STATUS_IN_PROGRESS = "In Progress"
STATUS_CLOSED = "Closed"

# Canonical display order for status columns/charts
STATUS_DISPLAY_ORDER: Sequence[str] = (STATUS_OPEN, STATUS_IN_PROGRESS, STATUS_CLOSED)

# Keys should be lowercase for case-insensitive matching
STATUS_ALIASES: dict[str, str] = {
    "open": STATUS_OPEN,
    "new": STATUS_OPEN,
    "reopened": STATUS_OPEN,
    "in progress": STATUS_IN_PROGRESS,
    "inprogress": STATUS_IN_PROGRESS,
    "in-progress": STATUS_IN_PROGRESS,
    "in_progress": STATUS_IN_PROGRESS,
    "working": STATUS_IN_PROGRESS,
    "closed": STATUS_CLOSED,
    "done": STATUS_CLOSED,
    "resolved": STATUS_CLOSED,
}

PRIORITY_LEVELS: Sequence[str] = ("low", "medium", "high", "urgent")
DEFAULT_PRIORITY = "medium"

PRIORITY_MAPPING = {
    "urgent": 4,
    "high": 3,
    "medium": 2,
    "low": 1,
}

# Badge colors used by tables and the detail view
STATUS_COLORS: dict[str, str] = {
    STATUS_OPEN: "#EF4444",
    STATUS_IN_PROGRESS: "#F59E0B",
    STATUS_CLOSED: "#22C55E",
}
PRIORITY_COLORS: dict[str, str] = {
    "low": "#22C55E",
    "medium": "#F59E0B",
    "high": "#F97316",
    "urgent": "#EF4444",
}

TICKET_NUMBER_PREFIX = "TKT-"
COMMENT_AUTHOR_PLACEHOLDER = "staff"
COMMENT_APPEND_MAX_ATTEMPTS = 3

# =============================================================================
# UI Default Values
# =============================================================================
RECENT_WINDOW_HOURS: int = 24  # Dashboard only lists tickets created within this window
RECENT_LIMIT: int = 5  # Rows shown on the dashboard when no search term is given

TICKET_CORE_COLUMNS: Sequence[str] = (
    "ticket_number",
    "customer_name",
    "phone_number",
    "email",
    "issue_description",
    "status",
    "priority",
    "notified",
    "representative_name",
    "notes",
    "comment_count",
    "created_at",
    "updated_at",
    "closed_at",
)

DISPLAY_ORDER_TICKET_LIST: Sequence[str] = (
    "ticket_number",
    "customer_name",
    "status",
    "priority",
    "created_at",
    "issue_description",
)

DISPLAY_ORDER_ADMIN: Sequence[str] = (
    "ticket_number",
    "customer_name",
    "phone_number",
    "email",
    "status",
    "priority",
    "notified",
    "representative_name",
    "notes",
    "updated_at",
)


@dataclass(slots=True)
class PortalSettings:
    backend_url: str | None = None
    backend_key: str | None = None
    admin_password: str = DEFAULT_ADMIN_PASSWORD
    storage_dir: Path = DEFAULT_STORAGE_DIR
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    @property
    def backend_configured(self) -> bool:
        return bool(self.backend_url and self.backend_key)


def load_settings(
    secrets: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> PortalSettings:
    """Build settings from Streamlit secrets, falling back to environment variables.

    Secrets may hold a ``[backend]`` section or top-level keys. Missing backend
    credentials are not an error here; callers check ``backend_configured``.
    """
    secrets = secrets or {}
    environ = os.environ if environ is None else environ
    section = secrets.get("backend", {}) or {}

    def pick(name: str, env_name: str) -> str | None:
        value = section.get(name) or secrets.get(name) or environ.get(env_name)
        return str(value).strip() if value else None

    storage = pick("STORAGE_DIR", ENV_STORAGE_DIR)
    timeout = section.get("REQUEST_TIMEOUT") or secrets.get("REQUEST_TIMEOUT")
    return PortalSettings(
        backend_url=pick("URL", ENV_BACKEND_URL),
        backend_key=pick("ANON_KEY", ENV_BACKEND_KEY),
        admin_password=pick("ADMIN_PASSWORD", ENV_ADMIN_PASSWORD) or DEFAULT_ADMIN_PASSWORD,
        storage_dir=Path(storage).expanduser() if storage else DEFAULT_STORAGE_DIR,
        request_timeout=float(timeout) if timeout else DEFAULT_REQUEST_TIMEOUT,
    )
