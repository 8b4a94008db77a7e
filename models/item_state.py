"""Zustands-Enums eines Items: physischer Zustand und Verfügbarkeit."""

from enum import Enum


class ItemCondition(str, Enum):
    """Physischer Zustand (wird nur über Meldung, Transfer, Rückgabe, Verifikation geändert)."""

    GOOD = "good"
    SERVICE = "service"
    DAMAGED = "damaged"
    BROKEN = "broken"


class ItemStatus(str, Enum):
    """Verfügbarkeit (wird über Ausleihe/Rückgabe geändert)."""

    AVAILABLE = "available"
    IN_USE = "in_use"
    MAINTENANCE = "maintenance"
    MISSING = "missing"


CONDITION_VALUES = frozenset(c.value for c in ItemCondition)
