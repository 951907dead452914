"""Domain data models for tickets, comments, sessions, and notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum

from .config import DEFAULT_PRIORITY, STATUS_OPEN


class Provenance(str, Enum):
    REMOTE = "remote"  # seen in the last successful full fetch
    PENDING = "pending"  # local optimistic change, not yet confirmed


@dataclass(slots=True)
class Comment:
    id: str
    ticket_id: str
    user_id: str
    content: str
    created_at: datetime


@dataclass(slots=True)
class Ticket:
    id: str
    ticket_number: str
    customer_name: str
    phone_number: str
    email: str
    issue_description: str
    created_at: datetime
    updated_at: datetime
    status: str = STATUS_OPEN
    priority: str = DEFAULT_PRIORITY
    notified: bool = False
    notes: str | None = None
    representative_name: str = ""
    closed_at: datetime | None = None
    comments: list[Comment] = field(default_factory=list)
    revision: int = 0


@dataclass(slots=True)
class Session:
    access_token: str
    user_id: str | None = None
    email: str | None = None
    refresh_token: str | None = None
    expires_at: datetime | None = None
    roles: frozenset[str] = frozenset()

    def is_valid(self, now: datetime | None = None) -> bool:
        if not self.access_token:
            return False
        if self.expires_at is None:
            return True
        return self.expires_at > (now or datetime.now(UTC))


@dataclass(slots=True)
class Notification:
    title: str
    description: str = ""
    variant: str = "info"  # "success" | "info" | "destructive"

    @property
    def ok(self) -> bool:
        return self.variant != "destructive"
