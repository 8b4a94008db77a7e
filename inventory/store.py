"""InventoryStore: verwaltet die Raum-Sammlung (inkl. Container und Items).

Jede Änderung arbeitet auf einer tiefen Kopie des Bestands und wird mit
``commit`` in einem Schritt übernommen. Danach wird die komplette Sammlung
über den Persistenz-Port gespeichert.

Persistenz ist "best effort": Der In-Memory-Zustand ist für die Sitzung
maßgeblich. Ein fehlgeschlagenes Speichern wird protokolliert und macht die
Änderung NICHT rückgängig.
"""

import logging
import random
import string
from typing import Iterable, NamedTuple, Optional, Union

from models.base import utcnow
from models.container import Container, ContainerType, GridPosition
from models.item import Item
from models.item_state import CONDITION_VALUES, ItemCondition, ItemStatus
from models.room import Room
from inventory.errors import (
    DuplicateIdError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from inventory.log_recorder import new_id
from inventory.persistence import ROOMS_KEY, PersistencePort

logger = logging.getLogger(__name__)


class ItemLocation(NamedTuple):
    """Fundort eines Items im Raum-Baum."""

    room: Room
    container: Container
    item: Item


# ─── Migration ────────────────────────────────────────────────────────────────

def _migrate_item(raw: dict) -> dict:
    if raw.get("condition"):
        return raw
    item = dict(raw)
    legacy = item.get("status")
    # Alte Snapshots hielten den Zustand im Feld "status"
    item["condition"] = legacy if legacy in CONDITION_VALUES else ItemCondition.GOOD.value
    item["status"] = ItemStatus.AVAILABLE.value
    return item


def migrate_rooms(raw_rooms: Optional[Iterable[dict]]) -> list[dict]:
    """Hebt einen gespeicherten Raum-Snapshot auf das aktuelle Schema.

    Items ohne ``condition``: Ist der alte ``status`` ein Zustandswert, wird er
    zur ``condition`` und ``status`` wird ``available``. Sonst ``condition=good``.
    Fehlende Container-/Item-Listen werden zu leeren Listen.

    Idempotent: bereits migrierte Daten kommen unverändert zurück.
    """
    migrated: list[dict] = []
    for raw_room in raw_rooms or []:
        room = dict(raw_room)
        containers = []
        for raw_container in room.get("containers") or []:
            container = dict(raw_container)
            container["items"] = [_migrate_item(i) for i in container.get("items") or []]
            containers.append(container)
        room["containers"] = containers
        migrated.append(room)
    return migrated


# ─── Suche im Baum ────────────────────────────────────────────────────────────

def find_room(rooms: Iterable[Room], room_id: str) -> Optional[Room]:
    return next((r for r in rooms if r.id == room_id), None)


def locate_item(rooms: Iterable[Room], item_id: str) -> Optional[ItemLocation]:
    """Sucht ein Item im gesamten Baum (erster Treffer)."""
    for room in rooms:
        for container in room.containers:
            for item in container.items:
                if item.id == item_id:
                    return ItemLocation(room, container, item)
    return None


def _item_ids_outside(
    rooms: Iterable[Room],
    room_id: Optional[str] = None,
    container_id: Optional[str] = None,
) -> set[str]:
    """Item-IDs des Baums ohne den Bereich, der gerade ersetzt wird.

    Nur ``room_id``: der ganze Raum fällt weg. Mit ``container_id``: nur
    dieser Container.
    """
    ids: set[str] = set()
    for room in rooms:
        if room.id == room_id and container_id is None:
            continue
        for container in room.containers:
            if room.id == room_id and container.id == container_id:
                continue
            ids.update(item.id for item in container.items)
    return ids


def _check_item_ids(existing: set[str], incoming: Iterable[Item]) -> None:
    """Jedes Item liegt in genau einem Container: keine ID darf doppelt vorkommen."""
    seen: set[str] = set()
    duplicates = []
    for item in incoming:
        if item.id in existing or item.id in seen:
            duplicates.append(item.id)
        seen.add(item.id)
    if duplicates:
        raise DuplicateIdError(
            f"Item-ID(s) bereits im Bestand vorhanden: {', '.join(dict.fromkeys(duplicates))}"
        )


def generate_sku() -> str:
    """Inventarnummer der Form ``INV-YYYYMMDD-XXXX``."""
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=4))
    return f"INV-{utcnow().strftime('%Y%m%d')}-{suffix}"


# ─── Store ────────────────────────────────────────────────────────────────────

class InventoryStore:
    """Autoritative Raum-Sammlung mit injiziertem Persistenz-Port."""

    def __init__(
        self,
        persistence: PersistencePort,
        key: str = ROOMS_KEY,
        initial_rooms: Optional[list[Room]] = None,
        raise_on_persistence_error: bool = False,
        grid_columns: int = 4,
        default_unit: str = "Pcs",
    ) -> None:
        self._persistence = persistence
        self.key = key
        self._initial_rooms = list(initial_rooms or [])
        self.raise_on_persistence_error = raise_on_persistence_error
        self.grid_columns = grid_columns
        self.default_unit = default_unit
        self._rooms: list[Room] = []
        self.last_persistence_error: Optional[Exception] = None

    # ─── Laden / Speichern ───

    def load(self) -> None:
        """Lädt den Snapshot; migriert Alt-Daten, bevor irgendetwas gelesen wird."""
        raw = self._persistence.load(self.key)
        if raw is None:
            self._rooms = [r.model_copy(deep=True) for r in self._initial_rooms]
            logger.info(f"Kein Snapshot '{self.key}' gefunden – starte mit {len(self._rooms)} Standard-Räumen")
            return
        self._rooms = [Room.model_validate(r) for r in migrate_rooms(raw)]
        logger.info(f"{len(self._rooms)} Räume geladen ('{self.key}')")

    def snapshot(self) -> list[Room]:
        """Tiefe Kopie des Bestands als Arbeitskopie für eine Transaktion."""
        return [r.model_copy(deep=True) for r in self._rooms]

    def commit(self, rooms: list[Room]) -> None:
        """Übernimmt eine Arbeitskopie in einem Schritt und speichert einmal.

        Raises:
            PersistenceError: nur bei ``raise_on_persistence_error``; die
                Änderung ist zu diesem Zeitpunkt bereits übernommen.
        """
        self._rooms = rooms
        self._persist()

    def _persist(self) -> None:
        data = [r.to_json_dict() for r in self._rooms]
        try:
            self._persistence.save(self.key, data)
        except Exception as e:
            self.last_persistence_error = e
            logger.error(f"Speichern von '{self.key}' fehlgeschlagen (In-Memory-Zustand bleibt gültig): {e}")
            if self.raise_on_persistence_error:
                raise PersistenceError(f"Speichern von '{self.key}' fehlgeschlagen: {e}") from e
        else:
            self.last_persistence_error = None

    # ─── Lesen ───

    @property
    def rooms(self) -> list[Room]:
        return self.snapshot()

    def get_room(self, room_id: str) -> Optional[Room]:
        room = find_room(self._rooms, room_id)
        return room.model_copy(deep=True) if room else None

    def find_item(self, item_id: str) -> Optional[ItemLocation]:
        loc = locate_item(self._rooms, item_id)
        if loc is None:
            return None
        return ItemLocation(*(part.model_copy(deep=True) for part in loc))

    def compute_stats(self):
        """Kennzahlen über den aktuellen Bestand (siehe analysis.statistics)."""
        from analysis.statistics import compute_stats
        return compute_stats(self._rooms)

    # ─── Räume ───

    def add_room(self, room: Room) -> Room:
        if not room.id.strip() or not room.name.strip():
            raise ValidationError("Raum benötigt ID und Namen.")
        if find_room(self._rooms, room.id):
            raise DuplicateIdError(f"Raum-ID '{room.id}' existiert bereits.")
        _check_item_ids(
            _item_ids_outside(self._rooms),
            (item for c in room.containers for item in c.items),
        )
        rooms = self.snapshot()
        rooms.append(room.model_copy(deep=True))
        self.commit(rooms)
        logger.info(f"Raum angelegt: {room.id}")
        return room.model_copy(deep=True)

    def update_room(self, room: Room) -> Room:
        """Ersetzt den Raum mit gleicher ID vollständig."""
        rooms = self.snapshot()
        self._room_in(rooms, room.id)
        _check_item_ids(
            _item_ids_outside(rooms, room.id),
            (item for c in room.containers for item in c.items),
        )
        rooms = [room.model_copy(deep=True) if r.id == room.id else r for r in rooms]
        self.commit(rooms)
        return room.model_copy(deep=True)

    def delete_room(self, room_id: str) -> bool:
        """Löscht Raum samt Containern und Items. Gibt True zurück wenn etwas gelöscht wurde."""
        rooms = [r for r in self.snapshot() if r.id != room_id]
        if len(rooms) == len(self._rooms):
            return False
        self.commit(rooms)
        logger.info(f"Raum gelöscht: {room_id}")
        return True

    # ─── Container ───

    def _room_in(self, rooms: list[Room], room_id: str) -> Room:
        room = find_room(rooms, room_id)
        if room is None:
            raise NotFoundError(f"Raum '{room_id}' nicht gefunden.")
        return room

    def _container_in(self, room: Room, container_id: str) -> Container:
        container = room.find_container(container_id)
        if container is None:
            raise NotFoundError(f"Container '{container_id}' in Raum '{room.id}' nicht gefunden.")
        return container

    def update_container(self, room_id: str, container: Container) -> Container:
        """Ersetzt den Container mit gleicher ID innerhalb des Raums."""
        rooms = self.snapshot()
        room = self._room_in(rooms, room_id)
        self._container_in(room, container.id)
        _check_item_ids(_item_ids_outside(rooms, room_id, container.id), container.items)
        room.containers = [
            container.model_copy(deep=True) if c.id == container.id else c
            for c in room.containers
        ]
        self.commit(rooms)
        return container.model_copy(deep=True)

    def add_containers(
        self,
        room_id: str,
        container_type: Union[ContainerType, str],
        quantity: int = 1,
    ) -> list[Container]:
        """Legt ``quantity`` leere Container an (Name "Table 3", Rasterposition fortlaufend)."""
        if quantity < 1:
            raise ValidationError("Anzahl muss mindestens 1 sein.")
        container_type = ContainerType(container_type)
        rooms = self.snapshot()
        room = self._room_in(rooms, room_id)
        start = len(room.containers)
        created = []
        for i in range(quantity):
            n = start + i
            created.append(Container(
                id=new_id("cont"),
                name=f"{container_type.value.capitalize()} {n + 1}",
                container_type=container_type,
                position=GridPosition(x=n % self.grid_columns, y=n // self.grid_columns),
            ))
        room.containers.extend(created)
        self.commit(rooms)
        return [c.model_copy(deep=True) for c in created]

    def delete_container(self, room_id: str, container_id: str) -> bool:
        """Entfernt Container samt Items. Gibt True zurück wenn etwas gelöscht wurde."""
        rooms = self.snapshot()
        room = self._room_in(rooms, room_id)
        remaining = [c for c in room.containers if c.id != container_id]
        if len(remaining) == len(room.containers):
            return False
        room.containers = remaining
        self.commit(rooms)
        return True

    def move_container(self, room_id: str, container_id: str, new_index: int) -> list[str]:
        """Verschiebt einen Container in der Reihenfolge. Gibt die neue ID-Reihenfolge zurück."""
        rooms = self.snapshot()
        room = self._room_in(rooms, room_id)
        container = self._container_in(room, container_id)
        room.containers.remove(container)
        new_index = max(0, min(new_index, len(room.containers)))
        room.containers.insert(new_index, container)
        self.commit(rooms)
        return [c.id for c in room.containers]

    # ─── Items ───

    def add_item(self, room_id: str, container_id: str, item: Item) -> Item:
        """Fügt ein neues Item hinzu. Neue Items sind immer ``available`` und ohne Historie."""
        if not item.name.strip():
            raise ValidationError("Item benötigt einen Namen.")
        if item.id and locate_item(self._rooms, item.id):
            raise DuplicateIdError(f"Item-ID '{item.id}' existiert bereits.")
        rooms = self.snapshot()
        container = self._container_in(self._room_in(rooms, room_id), container_id)
        new_item = item.model_copy(deep=True, update={
            "id": item.id or new_id("item"),
            "status": ItemStatus.AVAILABLE,
            "logs": [],
        })
        if new_item.is_consumable and not new_item.unit:
            new_item.unit = self.default_unit
        container.items.append(new_item)
        self.commit(rooms)
        return new_item.model_copy(deep=True)

    def update_item(self, room_id: str, container_id: str, item: Item) -> Item:
        """Ersetzt die Stammdaten eines Items. Verfügbarkeit und Historie bleiben erhalten."""
        rooms = self.snapshot()
        container = self._container_in(self._room_in(rooms, room_id), container_id)
        for idx, existing in enumerate(container.items):
            if existing.id == item.id:
                container.items[idx] = item.model_copy(deep=True, update={
                    "status": existing.status,
                    "logs": existing.logs,
                })
                self.commit(rooms)
                return container.items[idx].model_copy(deep=True)
        raise NotFoundError(f"Item '{item.id}' in Container '{container_id}' nicht gefunden.")

    def delete_item(self, room_id: str, container_id: str, item_id: str) -> bool:
        rooms = self.snapshot()
        container = self._container_in(self._room_in(rooms, room_id), container_id)
        remaining = [i for i in container.items if i.id != item_id]
        if len(remaining) == len(container.items):
            return False
        container.items = remaining
        self.commit(rooms)
        return True
