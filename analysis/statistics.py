"""Kennzahlen über den Inventarbestand.

Reine Funktion des aktuellen Snapshots: wird bei jedem Lesen neu berechnet,
es gibt keinen Cache und keine eigene Persistenz.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from pydantic import BaseModel

from models.item import Item
from models.item_log import ItemLog
from models.item_state import CONDITION_VALUES, ItemCondition
from models.room import Room


# ─── Modelle ──────────────────────────────────────────────────────────────────

class HealthTally(BaseModel):
    """Anzahl Items pro Zustand."""

    good: int = 0
    service: int = 0
    damaged: int = 0
    broken: int = 0

    @property
    def total(self) -> int:
        return self.good + self.service + self.damaged + self.broken

    def add(self, condition: ItemCondition) -> None:
        setattr(self, condition.value, getattr(self, condition.value) + 1)


class ActivityEntry(BaseModel):
    """Ein Historien-Eintrag mit Raum- und Item-Kontext."""

    room_id: str
    room_name: str
    item_id: str
    item_name: str
    log: ItemLog


class RoomHealth(BaseModel):
    room_id: str
    room_name: str
    total_assets: int
    health: HealthTally
    grading: int


class InventoryStats(BaseModel):
    """Gesamtkennzahlen und vollständiger Aktivitäts-Feed (neueste zuerst)."""

    total_rooms: int
    total_assets: int
    health: HealthTally
    grading: int                  # 0–100, 100 bei leerem Bestand
    activity: list[ActivityEntry]

    def recent(self, limit: int = 10) -> list[ActivityEntry]:
        """Die ``limit`` neuesten Einträge; das Kürzen ist Sache des Aufrufers."""
        return self.activity[:limit]

    def print_rich(self, feed_limit: int = 10) -> None:
        """Gibt die Kennzahlen formatiert über Rich aus."""
        from rich.console import Console
        from rich.panel import Panel
        from rich.table import Table
        from rich import box

        console = Console()
        if self.grading >= 80:
            color = "green"
        elif self.grading >= 50:
            color = "yellow"
        else:
            color = "red"
        h = self.health
        lines = [
            f"Räume: [bold]{self.total_rooms}[/bold]   Assets: [bold]{self.total_assets}[/bold]",
            f"Bewertung: [bold {color}]{self.grading}/100[/bold {color}]",
            f"[green]good {h.good}[/green] · [yellow]service {h.service}[/yellow] · "
            f"[magenta]damaged {h.damaged}[/magenta] · [red]broken {h.broken}[/red]",
        ]
        console.print(Panel("\n".join(lines), title="Inventar-Übersicht", border_style="cyan"))

        entries = self.recent(feed_limit)
        if not entries:
            console.print("[dim]Noch keine Aktivität.[/dim]")
            return
        table = Table(title="Letzte Aktivität", box=box.ROUNDED)
        table.add_column("Datum")
        table.add_column("Aktion", style="bold")
        table.add_column("Item")
        table.add_column("Raum")
        for e in entries:
            table.add_row(e.log.date.strftime("%Y-%m-%d %H:%M"), e.log.action, e.item_name, e.room_name)
        console.print(table)


# ─── Berechnung ───────────────────────────────────────────────────────────────

def _condition_of(item: Item) -> Optional[ItemCondition]:
    """Zustand eines Items; Rückfall auf den Alt-Status, falls condition fehlt."""
    if item.condition:
        return item.condition
    legacy = getattr(item, "status", None)
    legacy = getattr(legacy, "value", legacy)
    if legacy in CONDITION_VALUES:
        return ItemCondition(legacy)
    return None


def grading_score(good: int, total: int) -> int:
    """``round(good / total * 100)`` kaufmännisch gerundet; 100 bei leerem Bestand."""
    if total == 0:
        return 100
    score = Decimal(good) * 100 / Decimal(total)
    return int(score.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _tally(items: Iterable[Item]) -> HealthTally:
    tally = HealthTally()
    for item in items:
        condition = _condition_of(item)
        if condition is not None:
            tally.add(condition)
    return tally


def compute_stats(rooms: Iterable[Room]) -> InventoryStats:
    """Berechnet Kennzahlen und Aktivitäts-Feed aus dem Raum-Snapshot.

    Args:
        rooms: Aktueller Bestand (wird nicht verändert).

    Returns:
        InventoryStats; ``activity`` enthält ALLE Einträge, nach Datum absteigend.
    """
    rooms = list(rooms)
    total_assets = 0
    health = HealthTally()
    activity: list[ActivityEntry] = []

    for room in rooms:
        for container in room.containers:
            for item in container.items:
                total_assets += 1
                condition = _condition_of(item)
                if condition is not None:
                    health.add(condition)
                for log in item.logs:
                    activity.append(ActivityEntry(
                        room_id=room.id,
                        room_name=room.name,
                        item_id=item.id,
                        item_name=item.name,
                        log=log,
                    ))

    # sort ist stabil: bei gleichem Datum bleibt die Baum-Reihenfolge erhalten
    activity.sort(key=lambda e: e.log.date, reverse=True)

    return InventoryStats(
        total_rooms=len(rooms),
        total_assets=total_assets,
        health=health,
        grading=grading_score(health.good, total_assets),
        activity=activity,
    )


def room_health(rooms: Iterable[Room]) -> list[RoomHealth]:
    """Zustands-Verteilung und Bewertung pro Raum."""
    result = []
    for room in rooms:
        items = [i for c in room.containers for i in c.items]
        tally = _tally(items)
        result.append(RoomHealth(
            room_id=room.id,
            room_name=room.name,
            total_assets=len(items),
            health=tally,
            grading=grading_score(tally.good, len(items)),
        ))
    return result
