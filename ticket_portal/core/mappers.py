"""Mapping backend ticket rows (camelCase JSON) to and from Ticket instances."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any

import pandas as pd

from .config import DEFAULT_PRIORITY, PRIORITY_MAPPING
from .models import Comment, Ticket
from .status import normalize_priority, normalize_status


def parse_dt(val: Any) -> datetime | None:
    if not val:
        return None
    if isinstance(val, datetime):
        ts = pd.Timestamp(val)
        ts = ts.tz_localize("UTC") if ts.tzinfo is None else ts.tz_convert("UTC")
        return ts.to_pydatetime()
    ts = pd.to_datetime(val, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def format_dt(val: datetime | None) -> str | None:
    if val is None:
        return None
    return val.isoformat()


def map_priority(p: str | None) -> int:
    if not p:
        return -99
    return PRIORITY_MAPPING.get(str(p).strip().lower(), -99)


def map_comment(raw: dict[str, Any], ticket_id: str | None = None) -> Comment:
    return Comment(
        id=str(raw.get("id") or ""),
        ticket_id=str(raw.get("ticketId") or ticket_id or ""),
        user_id=str(raw.get("userId") or ""),
        content=str(raw.get("content") or ""),
        created_at=parse_dt(raw.get("createdAt")),
    )


def comment_to_row(comment: Comment) -> dict[str, Any]:
    return {
        "id": comment.id,
        "ticketId": comment.ticket_id,
        "userId": comment.user_id,
        "content": comment.content,
        "createdAt": format_dt(comment.created_at),
    }


def map_ticket(raw: dict[str, Any]) -> Ticket:
    ticket_id = str(raw.get("id")) if raw.get("id") is not None else ""
    comments_raw = raw.get("comments") or []
    comments = [map_comment(c, ticket_id) for c in comments_raw if isinstance(c, dict)]
    created = parse_dt(raw.get("createdAt"))
    return Ticket(
        id=ticket_id,
        ticket_number=str(raw.get("ticketNumber") or ""),
        customer_name=raw.get("customerName") or "",
        phone_number=raw.get("phoneNumber") or "",
        email=raw.get("email") or "",
        issue_description=raw.get("issueDescription") or "",
        created_at=created,
        updated_at=parse_dt(raw.get("updatedAt")) or created,
        status=normalize_status(raw.get("status")),
        priority=normalize_priority(raw.get("priority")) or DEFAULT_PRIORITY,
        notified=bool(raw.get("notified")),
        notes=raw.get("notes"),
        representative_name=raw.get("representativeName") or "",
        closed_at=parse_dt(raw.get("closedAt")),
        comments=comments,
        revision=int(raw.get("revision") or 0),
    )


def ticket_to_row(ticket: Ticket, *, include_id: bool = True) -> dict[str, Any]:
    row = {
        "ticketNumber": ticket.ticket_number,
        "customerName": ticket.customer_name,
        "phoneNumber": ticket.phone_number,
        "email": ticket.email,
        "issueDescription": ticket.issue_description,
        "status": ticket.status,
        "priority": ticket.priority,
        "notified": ticket.notified,
        "notes": ticket.notes,
        "representativeName": ticket.representative_name,
        "createdAt": format_dt(ticket.created_at),
        "updatedAt": format_dt(ticket.updated_at),
        "closedAt": format_dt(ticket.closed_at),
        "comments": [comment_to_row(c) for c in ticket.comments],
        "revision": ticket.revision,
    }
    if include_id:
        row = {"id": ticket.id, **row}
    return row


def tickets_to_dataframe(tickets: Iterable[Ticket]) -> pd.DataFrame:
    rows = []
    for t in tickets:
        rows.append(
            {
                "id": t.id,
                "ticket_number": t.ticket_number,
                "customer_name": t.customer_name,
                "phone_number": t.phone_number,
                "email": t.email,
                "issue_description": t.issue_description,
                "status": t.status,
                "priority": t.priority,
                "priority_value": map_priority(t.priority),
                "notified": t.notified,
                "notes": t.notes or "",
                "representative_name": t.representative_name,
                "comment_count": len(t.comments),
                "created_at": t.created_at,
                "updated_at": t.updated_at,
                "closed_at": t.closed_at,
            }
        )
    df = pd.DataFrame(rows)
    for col in ("created_at", "updated_at", "closed_at"):
        if col in df.columns:
            df[col] = pd.to_datetime(df[col], errors="coerce", utc=True)
    return df
