"""Zuordnung von Item-Typen zu den festen Komponenten-Plätzen eines Arbeitsplatzes.

Ein Tisch (``ContainerType.TABLE``) hat fünf feste Plätze. Die Zuordnung
erfolgt über eine explizite Tabelle (exakter Vergleich, Kleinschreibung).
Für Alt-Daten gibt es zusätzlich die alte Teilstring-Suche.
"""

from enum import Enum
from typing import Optional


class ComponentSlot(str, Enum):
    MONITOR = "monitor"
    KEYBOARD = "keyboard"
    MOUSE = "mouse"
    PC = "pc"
    DESK = "desk"


# Exakte Zuordnung: normalisierter Typ → Platz. Alles andere → kein Platz.
SLOT_TABLE: dict[str, ComponentSlot] = {
    "monitor": ComponentSlot.MONITOR,
    "screen": ComponentSlot.MONITOR,
    "display": ComponentSlot.MONITOR,
    "keyboard": ComponentSlot.KEYBOARD,
    "keypad": ComponentSlot.KEYBOARD,
    "mouse": ComponentSlot.MOUSE,
    "trackpad": ComponentSlot.MOUSE,
    "pc": ComponentSlot.PC,
    "computer": ComponentSlot.PC,
    "desktop": ComponentSlot.PC,
    "tower": ComponentSlot.PC,
    "pc unit": ComponentSlot.PC,
    "desk": ComponentSlot.DESK,
    "table": ComponentSlot.DESK,
    "physical desk": ComponentSlot.DESK,
    "workstation": ComponentSlot.DESK,
}

# Reihenfolge der Teilstring-Prüfung im Altbestand (erster Treffer gewinnt).
_LEGACY_ORDER: list[tuple[ComponentSlot, tuple[str, ...]]] = [
    (ComponentSlot.MONITOR, ("monitor", "screen", "display")),
    (ComponentSlot.KEYBOARD, ("keyboard", "keypad")),
    (ComponentSlot.MOUSE, ("mouse", "trackpad")),
    (ComponentSlot.PC, ("pc", "computer", "desktop", "tower", "pc unit")),
    (ComponentSlot.DESK, ("desk", "table", "physical desk", "workstation")),
]


def _normalize(item_type: Optional[str]) -> str:
    return (item_type or "").strip().lower()


def classify_component(item_type: Optional[str]) -> Optional[ComponentSlot]:
    """Platz für einen Item-Typ laut ``SLOT_TABLE`` oder None."""
    return SLOT_TABLE.get(_normalize(item_type))


def classify_component_legacy(item_type: Optional[str]) -> Optional[ComponentSlot]:
    """Kompatibilitäts-Zuordnung für Alt-Daten per Teilstring-Suche.

    Achtung: "Touchscreen Kiosk" landet hier auf MONITOR, "Laptop" auf keinem
    Platz, "Epcot" auf PC. Neue Daten sollten ``classify_component`` nutzen.
    """
    t = _normalize(item_type)
    if not t:
        return None
    for slot, needles in _LEGACY_ORDER:
        if any(n in t for n in needles):
            return slot
    return None


def canonical_type_name(slot: ComponentSlot) -> str:
    """Typ-Bezeichnung, mit der neue Komponenten angelegt werden ("PC Unit", "Monitor")."""
    if slot == ComponentSlot.PC:
        return "PC Unit"
    return slot.value.capitalize()
