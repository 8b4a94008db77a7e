"""Persistenz-Port: ein JSON-Dokument pro Ledger unter einem festen Schlüssel.

Die Engine kennt nur ``load(key)`` und ``save(key, data)``; welche Technik
dahinter steckt, ist Sache des Aufrufers.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

ROOMS_KEY = "inventory_rooms"
REQUESTS_KEY = "serviceRequests"


class PersistencePort(Protocol):
    def load(self, key: str) -> Optional[list]:
        """Gibt das gespeicherte Dokument zurück oder None, wenn keins existiert."""
        ...

    def save(self, key: str, data: list) -> None:
        ...


class MemoryPersistence:
    """Hält die Dokumente als JSON-Strings im Speicher (für Tests und Demos)."""

    def __init__(self, initial: Optional[dict[str, list]] = None) -> None:
        self._docs: dict[str, str] = {
            key: json.dumps(data, ensure_ascii=False) for key, data in (initial or {}).items()
        }
        self.save_count = 0

    def load(self, key: str) -> Optional[list]:
        raw = self._docs.get(key)
        return json.loads(raw) if raw is not None else None

    def save(self, key: str, data: list) -> None:
        self._docs[key] = json.dumps(data, ensure_ascii=False)
        self.save_count += 1


class JsonFilePersistence:
    """Speichert jedes Dokument als ``<verzeichnis>/<key>.json``."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key: str) -> Optional[list]:
        path = self.path_for(key)
        if not path.exists():
            return None
        with open(path, "r", encoding="utf-8") as f:
            try:
                return json.load(f)
            except ValueError as e:
                raise ValueError(f"Datei ist kein gültiges JSON: {path} ({e})") from e

    def save(self, key: str, data: list) -> None:
        """Schreibt atomar (temporäre Datei + replace), damit nie ein halbes Dokument liegt."""
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug(f"Dokument '{key}' gespeichert: {path}")
