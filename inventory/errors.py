"""Fehlerklassen der Inventar-Engine.

Alle Fehler sind synchron und lokal erkennbar; die Engine wiederholt nichts
selbst. Die aufrufende Schicht entscheidet, ob neu gefragt wird.
"""

from typing import Iterable


class InventoryError(Exception):
    """Basisklasse aller Engine-Fehler."""


class ValidationError(InventoryError):
    """Pflichtfeld fehlt oder Auswahl ist leer."""


class NotFoundError(InventoryError):
    """Referenzierte ID existiert nicht."""


class DuplicateIdError(InventoryError):
    """ID-Kollision beim Anlegen."""


class InvalidStateError(InventoryError):
    """Vorbedingung einer Operation verletzt (z.B. Ausleihe eines belegten Items)."""

    def __init__(self, message: str, offending: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.offending: list[str] = list(offending)


class InvalidDestinationError(InventoryError):
    """Transfer-Ziel (Raum oder Container) existiert nicht."""


class PersistenceError(InventoryError):
    """Speichern fehlgeschlagen. Der In-Memory-Zustand bleibt trotzdem gültig."""
