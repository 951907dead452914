"""Per-browser file-backed slot storage, the local draft cache, and the theme preference.

Each browser client gets its own JSON file under the configured storage
directory, keyed by an opaque client id. Nothing written for one client is
visible to another.
"""

from __future__ import annotations

import json
import logging
import re
import threading
import uuid
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from .config import DRAFTS_SLOT, THEME_SLOT
from .mappers import map_ticket, ticket_to_row
from .models import Provenance, Ticket

logger = logging.getLogger(__name__)

_CLIENT_ID_RE = re.compile(r"^[0-9a-f]{32}$")
# Streamlit serves every browser session from threads of one process.
_WRITE_LOCK = threading.RLock()


def new_client_id() -> str:
    return uuid.uuid4().hex


def is_client_id(value: Any) -> bool:
    return isinstance(value, str) and bool(_CLIENT_ID_RE.match(value))


def client_storage(base_dir: str | Path, client_id: str) -> LocalStorage:
    """Storage private to one browser client; rejects ids that are not plain hex tokens."""
    if not is_client_id(client_id):
        raise ValueError(f"Invalid client id: {client_id!r}")
    return LocalStorage(Path(base_dir) / f"{client_id}.json")


class LocalStorage:
    """A JSON file holding independent named slots; every write rewrites the file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable local storage %s: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")

    def get_item(self, key: str, default: Any = None) -> Any:
        return self._read_all().get(key, default)

    def set_item(self, key: str, value: Any) -> None:
        self.update_item(key, lambda _current: value)

    def update_item(self, key: str, func: Callable[[Any], Any], default: Any = None) -> Any:
        """Read, transform and write one slot as a single step; returns the stored value."""
        with _WRITE_LOCK:
            data = self._read_all()
            value = func(data.get(key, default))
            data[key] = value
            self._write_all(data)
        return value

    def remove_item(self, key: str) -> None:
        with _WRITE_LOCK:
            data = self._read_all()
            if key in data:
                del data[key]
                self._write_all(data)

    def __contains__(self, key: str) -> bool:
        return key in self._read_all()


def _decode_drafts(raw: Any, slot: str) -> list[tuple[Ticket, Provenance]]:
    if not isinstance(raw, list):
        logger.warning("Draft slot %r is not a list; treating it as empty", slot)
        return []
    entries = []
    for row in raw:
        if not isinstance(row, dict):
            continue
        try:
            provenance = Provenance(row.get("provenance", Provenance.PENDING.value))
        except ValueError:
            provenance = Provenance.PENDING
        entries.append((map_ticket(row), provenance))
    return entries


def _encode_drafts(entries: Iterable[tuple[Ticket, Provenance]]) -> list[dict[str, Any]]:
    return [{**ticket_to_row(t), "provenance": p.value} for t, p in entries]


class LocalDraftCache:
    """Tickets submitted from this client, persisted as one JSON list.

    Each entry carries a provenance tag: ``PENDING`` until a refresh shows the
    same ticket number in the remote collection, then ``REMOTE``. Reads go to
    the file every time and writes are read-modify-write, so two sessions of
    the same client never drop each other's drafts.
    """

    def __init__(self, storage: LocalStorage, slot: str = DRAFTS_SLOT):
        self.storage = storage
        self.slot = slot

    def _entries(self) -> list[tuple[Ticket, Provenance]]:
        return _decode_drafts(self.storage.get_item(self.slot, []), self.slot)

    @property
    def tickets(self) -> list[Ticket]:
        return [t for t, _ in self._entries()]

    def provenance_of(self, ticket_number: str) -> Provenance | None:
        for ticket, provenance in self._entries():
            if ticket.ticket_number == ticket_number:
                return provenance
        return None

    def __len__(self) -> int:
        return len(self._entries())

    def add(self, ticket: Ticket, provenance: Provenance = Provenance.PENDING) -> None:
        def append(raw):
            return _encode_drafts([*_decode_drafts(raw, self.slot), (ticket, provenance)])

        self.storage.update_item(self.slot, append, [])

    def mark_confirmed(self, ticket_numbers: Iterable[str]) -> int:
        """Tag drafts whose ticket number appears remotely; returns how many changed."""
        known = set(ticket_numbers)
        changed = 0

        def confirm(raw):
            nonlocal changed
            entries = _decode_drafts(raw, self.slot)
            for idx, (ticket, provenance) in enumerate(entries):
                if provenance is Provenance.PENDING and ticket.ticket_number in known:
                    entries[idx] = (ticket, Provenance.REMOTE)
                    changed += 1
            return _encode_drafts(entries)

        if any(p is Provenance.PENDING and t.ticket_number in known for t, p in self._entries()):
            self.storage.update_item(self.slot, confirm, [])
        return changed

    def clear(self) -> None:
        self.storage.set_item(self.slot, [])


def load_theme(storage: LocalStorage) -> bool | None:
    """Return True for dark, False for light, None when no preference is stored."""
    value = storage.get_item(THEME_SLOT)
    if value == "dark":
        return True
    if value == "light":
        return False
    return None


def save_theme(storage: LocalStorage, dark_mode: bool) -> None:
    storage.set_item(THEME_SLOT, "dark" if dark_mode else "light")
