"""TicketService: ticket lifecycle rules and the refetch-after-write action boundary.

Every mutating action follows the same shape: check preconditions (backend
configured, session, admin), call the repository, apply an optimistic change
to the store, then refetch the full collection. Failures are logged and
returned as a ``Notification``; nothing propagates out of an action.
"""

from __future__ import annotations

import logging
import secrets
import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

from .admin import AdminSession
from .config import (
    COMMENT_AUTHOR_PLACEHOLDER,
    DEFAULT_PRIORITY,
    STATUS_CLOSED,
    STATUS_OPEN,
    TICKET_NUMBER_PREFIX,
)
from .errors import (
    AuthorizationError,
    ConcurrencyConflictError,
    ConfigurationError,
    RepositoryError,
    SessionError,
)
from .identity import IdentityGate
from .local_storage import LocalDraftCache
from .mappers import ticket_to_row
from .models import Comment, Notification, Ticket
from .repository import TicketRepository
from .status import is_closed, normalize_priority, normalize_status
from .store import TicketStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# Fields staff may change through an edit; comments only change through add_comment.
EDITABLE_FIELDS = (
    "customerName",
    "phoneNumber",
    "email",
    "issueDescription",
    "status",
    "priority",
    "notified",
    "notes",
    "representativeName",
    "updatedAt",
    "closedAt",
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _base36(value: int) -> str:
    if value <= 0:
        return "0"
    out = []
    while value:
        value, rem = divmod(value, 36)
        out.append(_BASE36[rem])
    return "".join(reversed(out))


def generate_ticket_number(now: datetime | None = None) -> str:
    """Human-readable ticket number: prefix + base36 millisecond timestamp + 2 random chars."""
    now = now or _utcnow()
    millis = int(now.timestamp() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(2))
    return f"{TICKET_NUMBER_PREFIX}{_base36(millis)}{suffix}"


def build_ticket(fields: dict[str, Any], now: datetime | None = None) -> Ticket:
    """Apply creation defaults to customer-submitted fields.

    Priority is always medium regardless of input; status defaults to Open and
    notified to False unless explicitly given.
    """
    now = now or _utcnow()
    status = normalize_status(fields.get("status")) if fields.get("status") else STATUS_OPEN
    return Ticket(
        id=str(uuid.uuid4()),
        ticket_number=generate_ticket_number(now),
        customer_name=str(fields.get("customer_name") or "").strip(),
        phone_number=str(fields.get("phone_number") or "").strip(),
        email=str(fields.get("email") or "").strip(),
        issue_description=str(fields.get("issue_description") or "").strip(),
        created_at=now,
        updated_at=now,
        status=status,
        priority=DEFAULT_PRIORITY,
        notified=bool(fields.get("notified", False)),
        notes=fields.get("notes") or None,
        representative_name=str(fields.get("representative_name") or "").strip(),
        closed_at=now if status == STATUS_CLOSED else None,
        comments=[],
    )


def apply_edit(original: Ticket | None, edited: Ticket, now: datetime) -> Ticket:
    """Stamp updated_at and keep closed_at consistent with the edited status."""
    status = normalize_status(edited.status)
    priority = normalize_priority(edited.priority) or DEFAULT_PRIORITY
    if status == STATUS_CLOSED:
        was_closed = original is not None and is_closed(original.status)
        closed_at = edited.closed_at or (original.closed_at if was_closed and original else None) or now
    else:
        closed_at = None
    return replace(edited, status=status, priority=priority, updated_at=now, closed_at=closed_at)


class TicketService:
    def __init__(
        self,
        repository: TicketRepository | None,
        store: TicketStore,
        identity: IdentityGate,
        *,
        admin: AdminSession | None = None,
        drafts: LocalDraftCache | None = None,
        clock: Clock = _utcnow,
    ):
        self.repository = repository
        self.store = store
        self.identity = identity
        self.admin = admin
        self.drafts = drafts
        self.clock = clock

    # ------------------ Read ------------------
    def refresh(self) -> Notification | None:
        """Replace the store with a full fetch; returns a notification only on failure."""
        try:
            repo = self._require_repository()
            session = self.identity.current_session()
            tickets = repo.list_all(token=session.access_token if session else None)
        except ConfigurationError as exc:
            logger.error("Cannot fetch tickets: %s", exc)
            return Notification("Backend not configured", str(exc), "info")
        except RepositoryError as exc:
            logger.error("Error fetching tickets: %s", exc)
            return Notification("Error fetching tickets", "Could not load tickets. Please try again.", "destructive")
        self.store.replace_all(tickets)
        if self.drafts is not None:
            self.drafts.mark_confirmed(t.ticket_number for t in tickets)
        logger.debug("Refreshed %s tickets", len(tickets))
        return None

    # ------------------ Create ------------------
    def submit_ticket(self, fields: dict[str, Any]) -> tuple[Ticket | None, Notification]:
        ticket = build_ticket(fields, self.clock())
        try:
            repo = self._require_repository()
            session = self.identity.require_session()
            saved = repo.insert(ticket, token=session.access_token)
        except ConfigurationError as exc:
            logger.error("Cannot submit ticket: %s", exc)
            return None, Notification("Error submitting ticket", "Backend is not configured. Please try again later.", "destructive")
        except SessionError as exc:
            logger.warning("Ticket submission without session: %s", exc)
            return None, Notification("Error submitting ticket", str(exc), "destructive")
        except RepositoryError as exc:
            logger.error("Error inserting ticket: %s", exc)
            return None, Notification("Error submitting ticket", "Please try again.", "destructive")

        self.store.append(saved)
        if self.drafts is not None:
            self.drafts.add(saved)
        self.refresh()
        return saved, Notification(
            "Ticket submitted successfully", f"Your ticket number is: {saved.ticket_number}", "success"
        )

    # ------------------ Update ------------------
    def update_ticket(self, edited: Ticket, *, require_admin: bool = False) -> Notification:
        """Persist a full edited record. The optimistic store update is not rolled back on failure."""
        now = self.clock()
        try:
            repo = self._require_repository()
            session = self.identity.require_session()
            if require_admin:
                self._require_admin(session)
            updated = apply_edit(self.store.get(edited.id), edited, now)
            self.store.update_one(updated)
            row = ticket_to_row(updated)
            repo.update_by_id(updated.id, {k: row[k] for k in EDITABLE_FIELDS}, token=session.access_token)
        except ConfigurationError as exc:
            logger.error("Cannot update ticket: %s", exc)
            return Notification("Error updating ticket", "Backend is not configured.", "destructive")
        except (SessionError, AuthorizationError) as exc:
            logger.warning("Update of %s rejected: %s", edited.id, exc)
            return Notification("Error updating ticket", str(exc), "destructive")
        except RepositoryError as exc:
            logger.error("Error updating ticket %s: %s", edited.id, exc)
            return Notification("Error updating ticket", "Could not save changes. Please try again.", "destructive")
        self.refresh()
        return Notification("Ticket updated", f"{updated.ticket_number} saved.", "success")

    def close_ticket(
        self,
        ticket: Ticket,
        *,
        notes: str | None = None,
        representative_name: str | None = None,
        require_admin: bool = False,
    ) -> Notification:
        closed = replace(
            ticket,
            status=STATUS_CLOSED,
            notes=notes if notes is not None else ticket.notes,
            representative_name=representative_name if representative_name is not None else ticket.representative_name,
        )
        return self.update_ticket(closed, require_admin=require_admin)

    def set_notes(self, ticket: Ticket, notes: str, *, require_admin: bool = False) -> Notification:
        return self.update_ticket(replace(ticket, notes=notes), require_admin=require_admin)

    def clear_notes(self, ticket: Ticket, *, require_admin: bool = False) -> Notification:
        return self.update_ticket(replace(ticket, notes=None), require_admin=require_admin)

    # ------------------ Comments ------------------
    def add_comment(self, ticket_id: str, content: str) -> Notification:
        try:
            repo = self._require_repository()
            session = self.identity.require_session()
        except ConfigurationError as exc:
            logger.error("Cannot add comment: %s", exc)
            return Notification("Error adding comment", "Backend is not configured.", "destructive")
        except SessionError as exc:
            logger.warning("Comment rejected, no session: %s", exc)
            return Notification("Error adding comment", "Could not get user session. Please sign in.", "destructive")

        comment = Comment(
            id=str(uuid.uuid4()),
            ticket_id=ticket_id,
            user_id=COMMENT_AUTHOR_PLACEHOLDER,
            content=content,
            created_at=self.clock(),
        )
        try:
            saved = repo.append_comment(ticket_id, comment, token=session.access_token)
        except ConcurrencyConflictError as exc:
            logger.warning("Comment on %s abandoned after conflicts: %s", ticket_id, exc)
            return Notification("Error adding comment", "The ticket kept changing. Please try again.", "destructive")
        except RepositoryError as exc:
            logger.error("Error adding comment to %s (%s): %s", ticket_id, exc.stage, exc)
            if exc.stage == "fetch":
                return Notification("Error adding comment", "Could not fetch ticket data. Please try again.", "destructive")
            return Notification("Error adding comment", "Could not add comment. Please try again.", "destructive")

        cached = self.store.get(ticket_id)
        if cached is not None:
            self.store.update_one(replace(cached, comments=[*cached.comments, comment], revision=saved.revision))
        self.refresh()
        return Notification("Comment added", "", "success")

    # ------------------ Delete ------------------
    def delete_ticket(self, ticket_id: str) -> Notification:
        try:
            repo = self._require_repository()
            session = self.identity.require_session()
            self._require_admin(session)
            repo.delete_by_id(ticket_id, token=session.access_token)
        except ConfigurationError as exc:
            logger.error("Cannot delete ticket: %s", exc)
            return Notification("Error deleting ticket", "Backend is not configured.", "destructive")
        except (SessionError, AuthorizationError) as exc:
            logger.warning("Delete of %s rejected: %s", ticket_id, exc)
            return Notification("Error deleting ticket", str(exc), "destructive")
        except RepositoryError as exc:
            logger.error("Error deleting ticket %s: %s", ticket_id, exc)
            return Notification("Error deleting ticket", "Could not delete ticket. Please try again.", "destructive")
        self.store.remove_one(ticket_id)
        self.refresh()
        return Notification("Ticket deleted", "This action is irreversible.", "success")

    # ------------------ Internal Helpers ------------------
    def _require_repository(self) -> TicketRepository:
        if self.repository is None:
            raise ConfigurationError("Backend URL or key is missing")
        return self.repository

    def _require_admin(self, session) -> None:
        if self.admin is None:
            raise AuthorizationError("Admin access required")
        self.admin.require(session)
