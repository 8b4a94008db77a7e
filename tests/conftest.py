"""Gemeinsame Fixtures: kleiner Bestand mit zwei Räumen im Speicher."""

from typing import Optional

import pytest

from inventory.ledger import ServiceRequestLedger
from inventory.operations import OperationsEngine
from inventory.persistence import MemoryPersistence
from inventory.store import InventoryStore
from models import Container, ContainerType, Item, Room, RoomType


class FailingPersistence:
    """Persistenz-Port, dessen save immer fehlschlägt (Quota, Datenträger voll, ...)."""

    def __init__(self) -> None:
        self.attempts = 0

    def load(self, key: str) -> Optional[list]:
        return None

    def save(self, key: str, data: list) -> None:
        self.attempts += 1
        raise OSError("Speicherplatz erschöpft")


def make_rooms() -> list[Room]:
    """Lab A: Table 1 (Monitor, Keyboard) + Cupboard 1 (leer); Lab B: Shelf 1 (Microscope)."""
    return [
        Room(id="lab-a", name="Lab A", room_type=RoomType.COMPUTER, capacity=20, containers=[
            Container(id="c-a1", name="Table 1", container_type=ContainerType.TABLE, items=[
                Item(id="i-1", name="Monitor", item_type="Monitor", category="Monitor"),
                Item(id="i-2", name="Keyboard", item_type="Keyboard", category="Keyboard"),
            ]),
            Container(id="c-a2", name="Cupboard 1", container_type=ContainerType.CUPBOARD),
        ]),
        Room(id="lab-b", name="Lab B", room_type=RoomType.BIOLOGY, containers=[
            Container(id="c-b1", name="Shelf 1", container_type=ContainerType.SHELF, items=[
                Item(id="i-3", name="Microscope", category="Optics"),
            ]),
        ]),
    ]


def item_ids_in(rooms: list[Room], container_id: str) -> list[str]:
    for room in rooms:
        for container in room.containers:
            if container.id == container_id:
                return [i.id for i in container.items]
    raise KeyError(container_id)


@pytest.fixture
def memory() -> MemoryPersistence:
    return MemoryPersistence()


@pytest.fixture
def store(memory: MemoryPersistence) -> InventoryStore:
    s = InventoryStore(memory, initial_rooms=make_rooms())
    s.load()
    return s


@pytest.fixture
def ledger(memory: MemoryPersistence) -> ServiceRequestLedger:
    led = ServiceRequestLedger(memory)
    led.load()
    return led


@pytest.fixture
def engine(store: InventoryStore, ledger: ServiceRequestLedger) -> OperationsEngine:
    return OperationsEngine(store, ledger, current_user_display_name="Test User")
