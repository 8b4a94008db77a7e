"""InventorySession: baut Store, Ledger und OperationsEngine einmal pro Prozess zusammen."""

import logging
from typing import Optional

from config.defaults import build_initial_rooms
from config.schema import InventoryConfig
from inventory.ledger import ServiceRequestLedger
from inventory.operations import OperationsEngine
from inventory.persistence import JsonFilePersistence, PersistencePort
from inventory.store import InventoryStore

logger = logging.getLogger(__name__)


class InventorySession:
    """Hält die Komponenten einer Sitzung; keine versteckten Singletons."""

    def __init__(
        self,
        store: InventoryStore,
        ledger: ServiceRequestLedger,
        operations: OperationsEngine,
        config: InventoryConfig,
    ) -> None:
        self.store = store
        self.ledger = ledger
        self.operations = operations
        self.config = config

    @property
    def current_user_display_name(self) -> str:
        return self.operations.current_user_display_name

    @classmethod
    def open(
        cls,
        config: InventoryConfig,
        persistence: Optional[PersistencePort] = None,
    ) -> "InventorySession":
        """Erzeugt alle Komponenten und lädt beide Dokumente.

        Args:
            config: Gesamtkonfiguration.
            persistence: Alternativer Port (z.B. MemoryPersistence in Tests);
                Standard ist ein JSON-Verzeichnis laut ``config.persistence``.
        """
        pc = config.persistence
        persistence = persistence or JsonFilePersistence(pc.data_path)
        store = InventoryStore(
            persistence,
            key=pc.rooms_key,
            initial_rooms=build_initial_rooms(config),
            raise_on_persistence_error=pc.raise_on_error,
            grid_columns=config.layout.grid_columns,
            default_unit=config.layout.default_unit,
        )
        ledger = ServiceRequestLedger(
            persistence,
            key=pc.requests_key,
            raise_on_persistence_error=pc.raise_on_error,
        )
        store.load()
        ledger.load()
        operations = OperationsEngine(
            store, ledger,
            current_user_display_name=config.session.current_user_display_name,
        )
        logger.info(f"Sitzung geöffnet für {config.session.current_user_display_name}")
        return cls(store, ledger, operations, config)
