"""Inventar-Engine: Store, Service-Ledger und Betriebsabläufe."""

from .errors import (
    DuplicateIdError,
    InvalidDestinationError,
    InvalidStateError,
    InventoryError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from .persistence import JsonFilePersistence, MemoryPersistence, PersistencePort
from .store import InventoryStore, ItemLocation, migrate_rooms
from .ledger import ServiceRequestLedger
from .operations import OperationsEngine, RepairOutcome, TransferResult, UsageResult
from .session import InventorySession

__all__ = [
    "DuplicateIdError",
    "InvalidDestinationError",
    "InvalidStateError",
    "InventoryError",
    "NotFoundError",
    "PersistenceError",
    "ValidationError",
    "JsonFilePersistence",
    "MemoryPersistence",
    "PersistencePort",
    "InventoryStore",
    "ItemLocation",
    "migrate_rooms",
    "ServiceRequestLedger",
    "OperationsEngine",
    "RepairOutcome",
    "TransferResult",
    "UsageResult",
    "InventorySession",
]
