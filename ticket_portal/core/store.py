"""Client-side ticket store: the cached mirror of the last full fetch.

One instance per UI session, passed to the lifecycle engine and pages. The
collection is replaced wholesale on every refresh and never merged; the
optimistic operations only bridge the gap until the next refetch.
"""

from __future__ import annotations

from collections.abc import Sequence

from .models import Provenance, Ticket


class TicketStore:
    def __init__(self, tickets: Sequence[Ticket] | None = None, *, dark_mode: bool = False):
        self._tickets: list[Ticket] = []
        self._provenance: dict[str, Provenance] = {}
        self.dark_mode = dark_mode
        if tickets is not None:
            self.replace_all(tickets)

    @property
    def tickets(self) -> list[Ticket]:
        return list(self._tickets)

    def __len__(self) -> int:
        return len(self._tickets)

    def get(self, ticket_id: str) -> Ticket | None:
        for ticket in self._tickets:
            if ticket.id == ticket_id:
                return ticket
        return None

    def provenance_of(self, ticket_id: str) -> Provenance | None:
        return self._provenance.get(ticket_id)

    def pending(self) -> list[Ticket]:
        return [t for t in self._tickets if self._provenance.get(t.id) is Provenance.PENDING]

    # ------------------ Mutations ------------------
    def replace_all(self, tickets) -> None:
        """Overwrite the collection; anything that is not a sequence of tickets stores []."""
        if isinstance(tickets, (str, bytes)) or not isinstance(tickets, Sequence):
            tickets = []
        self._tickets = [t for t in tickets if isinstance(t, Ticket)]
        self._provenance = {t.id: Provenance.REMOTE for t in self._tickets}

    def append(self, ticket: Ticket) -> None:
        self._tickets.append(ticket)
        self._provenance[ticket.id] = Provenance.PENDING

    def update_one(self, ticket: Ticket) -> None:
        for idx, existing in enumerate(self._tickets):
            if existing.id == ticket.id:
                self._tickets[idx] = ticket
                self._provenance[ticket.id] = Provenance.PENDING
                return

    def remove_one(self, ticket_id: str) -> None:
        self._tickets = [t for t in self._tickets if t.id != ticket_id]
        self._provenance.pop(ticket_id, None)

    def set_dark_mode(self, dark_mode: bool) -> None:
        self.dark_mode = bool(dark_mode)
