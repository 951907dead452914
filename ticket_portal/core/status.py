"""Status and priority normalization utilities.

Uses the ticket vocabulary from config.py (STATUS_ALIASES, STATUS_DISPLAY_ORDER,
PRIORITY_LEVELS) so pages, mappers, and the lifecycle engine agree on spelling.
"""

from __future__ import annotations

from .config import (
    PRIORITY_COLORS,
    PRIORITY_LEVELS,
    STATUS_ALIASES,
    STATUS_CLOSED,
    STATUS_COLORS,
    STATUS_DISPLAY_ORDER,
    STATUS_OPEN,
)


def normalize_status(value: str | None) -> str:
    """Map a raw status string to one of Open / In Progress / Closed.

    Unknown or empty values fall back to "Open" so a malformed row never
    disappears from the open-ticket counts.

    Examples
    --------
    >>> normalize_status("in progress")
    'In Progress'
    >>> normalize_status("resolved")
    'Closed'
    >>> normalize_status(None)
    'Open'
    """
    if not value:
        return STATUS_OPEN
    text = str(value).strip().lower()
    if text in STATUS_ALIASES:
        return STATUS_ALIASES[text]
    for status in STATUS_DISPLAY_ORDER:
        if text == status.lower():
            return status
    return STATUS_OPEN


def normalize_priority(value: str | None) -> str | None:
    """Lowercase a priority and return it if it is a known level, else None."""
    if not value:
        return None
    text = str(value).strip().lower()
    return text if text in PRIORITY_LEVELS else None


def is_closed(value: str | None) -> bool:
    return normalize_status(value) == STATUS_CLOSED


def status_color(value: str | None) -> str:
    return STATUS_COLORS.get(normalize_status(value), "")


def priority_color(value: str | None) -> str:
    return PRIORITY_COLORS.get(normalize_priority(value) or "", "")


def priority_label(value: str | None) -> str:
    text = str(value or "").strip()
    return text[:1].upper() + text[1:]
