"""Abgeleitete Listen für die Betriebsansicht: Verifikationen, Ausleihen, Mindestbestand, Suche."""

from typing import Iterable, Optional, Union

from pydantic import BaseModel

from analysis.statistics import ActivityEntry, InventoryStats
from models.item import Item
from models.item_log import USAGE_ACTIONS, ItemLog, LogAction
from models.item_state import ItemStatus
from models.room import Room


class ItemContext(BaseModel):
    """Item mit seinem Fundort."""

    room_id: str
    room_name: str
    container_id: str
    container_name: str
    item: Item


class PendingVerification(BaseModel):
    """TRANSFER-Eintrag, dessen Zielprüfung noch aussteht."""

    room_id: str
    room_name: str
    container_id: str
    item_id: str
    item_name: str
    log: ItemLog

    @property
    def destination(self) -> str:
        return self.log.details.destination


def _walk(rooms: Iterable[Room]):
    for room in rooms:
        for container in room.containers:
            for item in container.items:
                yield room, container, item


def find_pending_verifications(rooms: Iterable[Room]) -> list[PendingVerification]:
    """Alle offenen Transfer-Verifikationen, neueste zuerst."""
    pending = [
        PendingVerification(
            room_id=room.id,
            room_name=room.name,
            container_id=container.id,
            item_id=item.id,
            item_name=item.name,
            log=log,
        )
        for room, container, item in _walk(rooms)
        for log in item.logs
        if log.is_pending_transfer
    ]
    pending.sort(key=lambda p: p.log.date, reverse=True)
    return pending


def _contexts(rooms: Iterable[Room], predicate) -> list[ItemContext]:
    return [
        ItemContext(
            room_id=room.id,
            room_name=room.name,
            container_id=container.id,
            container_name=container.name,
            item=item,
        )
        for room, container, item in _walk(rooms)
        if predicate(item)
    ]


def find_active_loans(rooms: Iterable[Room]) -> list[ItemContext]:
    """Items, die gerade ausgeliehen sind (status ``in_use``)."""
    return _contexts(rooms, lambda i: i.status == ItemStatus.IN_USE)


def find_low_stock(rooms: Iterable[Room]) -> list[ItemContext]:
    """Verbrauchsmaterial auf oder unter Mindestbestand."""
    return _contexts(rooms, lambda i: i.is_low_stock)


def search_items(rooms: Iterable[Room], term: str) -> list[ItemContext]:
    """Items, deren Name oder ID den Suchbegriff enthält (ohne Groß-/Kleinschreibung).

    Ein leerer Suchbegriff liefert alle Items.
    """
    needle = (term or "").strip().lower()
    return _contexts(rooms, lambda i: needle in i.name.lower() or needle in i.id.lower())


# Filter für den Aktivitäts-Feed: Art → zugehörige Aktionen
ACTIVITY_KINDS: dict[str, frozenset[str]] = {
    "TRANSFER": frozenset({LogAction.TRANSFER.value}),
    "USAGE": USAGE_ACTIONS,
}


def filter_activity(
    activity: Union[InventoryStats, Iterable[ActivityEntry]],
    kind: Optional[str] = None,
) -> list[ActivityEntry]:
    """Schränkt den Aktivitäts-Feed auf Transfers oder Ausleihen ein.

    ``kind`` ist ``"TRANSFER"``, ``"USAGE"`` oder ``"ALL"``/``None`` (kein Filter).
    Die Reihenfolge des Feeds bleibt erhalten.
    """
    entries = activity.activity if isinstance(activity, InventoryStats) else list(activity)
    key = (kind or "ALL").upper()
    if key == "ALL":
        return list(entries)
    if key not in ACTIVITY_KINDS:
        raise ValueError(f"Unbekannte Aktivitätsart '{kind}' (erlaubt: ALL, TRANSFER, USAGE)")
    actions = ACTIVITY_KINDS[key]
    return [e for e in entries if e.log.action in actions]
