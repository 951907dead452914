"""TicketRepository: CRUD over the hosted ``tickets`` table.

The backend is the system of record. Every method raises ``RepositoryError``
on transport or backend-side failure; callers never assume partial success.
Session presence is a caller-side precondition checked by the lifecycle
engine, not here.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from .backend_client import BackendAPI, eq_filters
from .config import COMMENT_APPEND_MAX_ATTEMPTS, TICKETS_TABLE
from .errors import ConcurrencyConflictError, RepositoryError
from .mappers import comment_to_row, format_dt, map_ticket, ticket_to_row
from .models import Comment, Ticket

logger = logging.getLogger(__name__)


class TicketRepository:
    def __init__(self, api: BackendAPI, table: str = TICKETS_TABLE):
        self.api = api
        self.table = table

    def list_all(self, *, token: str | None = None) -> list[Ticket]:
        rows = self.api.select(self.table, token=token)
        return [map_ticket(r) for r in rows if isinstance(r, dict)]

    def fetch_by_id(self, ticket_id: str, *, token: str | None = None) -> Ticket:
        return map_ticket(self._fetch_row(ticket_id, token=token))

    def insert(self, ticket: Ticket, *, token: str | None = None) -> Ticket:
        """Insert a ticket without its local id; the backend assigns the persistent one."""
        row = ticket_to_row(ticket, include_id=False)
        rows = self.api.insert(self.table, [row], token=token)
        if not rows:
            raise RepositoryError("Insert returned no row", stage="insert")
        return map_ticket(rows[0])

    def update_by_id(self, ticket_id: str, fields: dict[str, Any], *, token: str | None = None) -> None:
        values = {k: v for k, v in fields.items() if k != "id"}
        rows = self.api.update(self.table, values, filters=eq_filters(id=ticket_id), token=token)
        if not rows:
            raise RepositoryError(f"Ticket {ticket_id} not found or not authorized", stage="persist")

    def delete_by_id(self, ticket_id: str, *, token: str | None = None) -> None:
        rows = self.api.delete(self.table, filters=eq_filters(id=ticket_id), token=token)
        if not rows:
            raise RepositoryError(f"Ticket {ticket_id} not found or not authorized", stage="delete")

    def append_comment(
        self,
        ticket_id: str,
        comment: Comment,
        *,
        token: str | None = None,
        max_attempts: int = COMMENT_APPEND_MAX_ATTEMPTS,
    ) -> Ticket:
        """Append one comment with a revision check, retrying when another writer wins.

        Each attempt reads the current comment list and revision, then writes
        ``comments + [comment]`` only where ``revision`` is unchanged. An empty
        write result means the row moved on underneath us.
        """
        new_row = comment_to_row(comment)
        for attempt in range(1, max_attempts + 1):
            current = self._fetch_row(ticket_id, token=token)
            raw_revision = current.get("revision")
            revision = int(raw_revision or 0)
            filters = eq_filters(id=ticket_id)
            # PostgREST never matches NULL with eq.
            filters["revision"] = "is.null" if raw_revision is None else f"eq.{revision}"
            comments = [c for c in (current.get("comments") or []) if isinstance(c, dict)]
            values = {
                "comments": [*comments, new_row],
                "revision": revision + 1,
                "updatedAt": format_dt(datetime.now(UTC)),
            }
            rows = self.api.update(
                self.table,
                values,
                filters=filters,
                token=token,
            )
            if rows:
                return map_ticket(rows[0])
            logger.info("Comment append on %s lost revision %s (attempt %s/%s)", ticket_id, revision, attempt, max_attempts)
        raise ConcurrencyConflictError(
            f"Ticket {ticket_id} kept changing; comment not saved after {max_attempts} attempts",
            stage="persist",
        )

    def _fetch_row(self, ticket_id: str, *, token: str | None = None) -> dict[str, Any]:
        rows = self.api.select(self.table, filters=eq_filters(id=ticket_id), token=token)
        if not rows:
            raise RepositoryError(f"Ticket {ticket_id} not found", stage="fetch")
        return rows[0]
