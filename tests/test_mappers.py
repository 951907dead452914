from datetime import UTC, datetime

import pandas as pd
from conftest import backend_row

from ticket_portal.core.mappers import map_priority, map_ticket, parse_dt, ticket_to_row, tickets_to_dataframe


def test_map_ticket_normalizes_values():
    ticket = map_ticket(backend_row(id=7, status="in-progress", priority="URGENT", comments=None))
    assert ticket.id == "7"
    assert ticket.status == "In Progress"
    assert ticket.priority == "urgent"
    assert ticket.comments == []


def test_map_ticket_unknown_values_fall_back():
    ticket = map_ticket(backend_row(status="weird", priority="p0", updatedAt=None))
    assert ticket.status == "Open"
    assert ticket.priority == "medium"
    assert ticket.updated_at == ticket.created_at


def test_comments_keep_order_and_ticket_id():
    raw = backend_row(comments=[{"id": "a", "content": "first"}, {"id": "b", "content": "second"}, "junk"])
    ticket = map_ticket(raw)
    assert [c.content for c in ticket.comments] == ["first", "second"]
    assert {c.ticket_id for c in ticket.comments} == {"1"}


def test_ticket_to_row_without_id():
    row = ticket_to_row(map_ticket(backend_row()), include_id=False)
    assert "id" not in row
    assert row["ticketNumber"] == "TKT-SEED01"
    assert row["createdAt"].startswith("2024-09-01T10:00:00")


def test_parse_dt_variants():
    assert parse_dt(None) is None
    assert parse_dt("not a date") is None
    naive = parse_dt(datetime(2024, 1, 1, 8))
    assert naive == datetime(2024, 1, 1, 8, tzinfo=UTC)


def test_map_priority():
    assert map_priority("Urgent") == 4
    assert map_priority("low") == 1
    assert map_priority(None) == -99


def test_tickets_to_dataframe_columns():
    df = tickets_to_dataframe([map_ticket(backend_row(comments=[{"id": "a"}]))])
    assert df.loc[0, "comment_count"] == 1
    assert df.loc[0, "priority_value"] == 2
    assert isinstance(df.loc[0, "created_at"], pd.Timestamp)
    assert pd.isna(df.loc[0, "closed_at"])
