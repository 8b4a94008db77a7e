"""Demo-Daten-Generator für die Inventarverwaltung.

Füllt die Start-Räume mit Arbeitsplätzen, Schränken und Regalen. Zustände
werden gewichtet zufällig verteilt, damit Übersicht und Bewertung etwas zu
zeigen haben. Gleicher Seed → gleiche Daten (auch gleiche IDs).
"""

import random
import re
from typing import Optional

from config.defaults import LAB_EQUIPMENT, STATION_COMPONENTS, build_initial_rooms
from config.schema import InventoryConfig
from models.container import Container, ContainerType, GridPosition
from models.item import Item, ItemParameter
from models.item_state import ItemCondition
from models.room import Room, RoomType

# Gewichtung der Zustände (good überwiegt deutlich)
_CONDITION_WEIGHTS: list[tuple[ItemCondition, int]] = [
    (ItemCondition.GOOD, 80),
    (ItemCondition.SERVICE, 8),
    (ItemCondition.DAMAGED, 7),
    (ItemCondition.BROKEN, 5),
]

_BRANDS = ["Dell", "HP", "Lenovo", "Logitech", "Acer", "Zeiss", "Keysight", "Fluke"]


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


class SeedDataGenerator:
    """Erzeugt einen vollständigen Demo-Bestand auf Basis der InventoryConfig."""

    def __init__(self, config: InventoryConfig, seed: Optional[int] = None,
                 stations_per_room: int = 6) -> None:
        self.config = config
        self.rng = random.Random(seed)
        self.stations_per_room = stations_per_room

    def _condition(self) -> ItemCondition:
        conditions = [c for c, _ in _CONDITION_WEIGHTS]
        weights = [w for _, w in _CONDITION_WEIGHTS]
        return self.rng.choices(conditions, weights=weights, k=1)[0]

    def _position(self, n: int) -> GridPosition:
        cols = self.config.layout.grid_columns
        return GridPosition(x=n % cols, y=n // cols)

    # ─── Arbeitsplätze ────────────────────────────────────────────────────────

    def _make_station(self, room: Room, n: int) -> Container:
        """Tisch mit allen fünf Komponenten (Monitor, Tastatur, Maus, PC, Tisch)."""
        station = Container(
            id=f"{room.id}-table-{n + 1}",
            name=f"Table {n + 1}",
            container_type=ContainerType.TABLE,
            position=self._position(n),
        )
        for item_type, name, specs in STATION_COMPONENTS:
            station.items.append(Item(
                id=f"{station.id}-{_slug(item_type)}",
                name=name,
                item_type=item_type,
                category=item_type,
                condition=self._condition(),
                specs=specs,
                parameters=[ItemParameter(label="Brand", value=self.rng.choice(_BRANDS))],
            ))
        return station

    # ─── Schränke / Regale ────────────────────────────────────────────────────

    def _make_storage(self, room: Room, n: int, container_type: ContainerType) -> Container:
        """Schrank oder Regal mit der Laborausstattung des Raumtyps."""
        container = Container(
            id=f"{room.id}-{container_type.value}-{n + 1}",
            name=f"{container_type.value.capitalize()} {n + 1}",
            container_type=container_type,
            position=self._position(n),
        )
        catalog = LAB_EQUIPMENT.get(room.room_type, LAB_EQUIPMENT[RoomType.OTHER])
        for name, category, consumable, qty, unit, min_stock in catalog:
            if consumable:
                # Bestand streut um den Katalogwert, manchmal unter Mindestbestand
                qty = max(0, qty + self.rng.randint(-qty // 2, qty // 2))
            container.items.append(Item(
                id=f"{container.id}-{_slug(name)}",
                name=name,
                item_type=category,
                category=category,
                condition=ItemCondition.GOOD if consumable else self._condition(),
                is_consumable=consumable,
                quantity=qty if consumable else None,
                unit=unit if consumable else None,
                min_stock=min_stock if consumable else None,
            ))
        return container

    # ─── Gesamt ───────────────────────────────────────────────────────────────

    def generate(self) -> list[Room]:
        """Erzeugt alle Start-Räume samt Containern und Items."""
        rooms = build_initial_rooms(self.config)
        for room in rooms:
            n = 0
            if room.room_type == RoomType.COMPUTER:
                for _ in range(self.stations_per_room):
                    room.containers.append(self._make_station(room, n))
                    n += 1
                room.containers.append(self._make_storage(room, n, ContainerType.CUPBOARD))
            else:
                room.containers.append(self._make_storage(room, n, ContainerType.CUPBOARD))
                room.containers.append(self._make_storage(room, n + 1, ContainerType.SHELF))
        return rooms

    def print_summary(self, rooms: list[Room]) -> None:
        """Gibt eine Rich-Tabelle mit Übersicht der erzeugten Daten aus."""
        from rich.console import Console
        from rich.table import Table
        from rich import box

        console = Console()
        table = Table(title="Erzeugte Demo-Daten", box=box.ROUNDED)
        table.add_column("Raum", style="bold cyan")
        table.add_column("Typ")
        table.add_column("Container", justify="right")
        table.add_column("Items", justify="right")

        for room in rooms:
            table.add_row(room.name, room.display_type,
                          str(len(room.containers)), str(room.item_count))
        console.print(table)
