from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from models.room import RoomType


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


# ─── PERSISTENZ ───

class PersistenceConfig(BaseModel):
    """Ablage der JSON-Dokumente (ein Dokument pro Ledger)."""
    # Verzeichnis für die Dokumente
    data_dir: str = Field("inventory_data",
        description="Verzeichnis für die JSON-Dokumente")
    # Fester Schlüssel des Raum-Dokuments
    rooms_key: str = Field("inventory_rooms",
        description="Schlüssel des Raum-Dokuments")
    # Fester Schlüssel des Anfragen-Dokuments
    requests_key: str = Field("serviceRequests",
        description="Schlüssel des Service-Anfragen-Dokuments")
    # Speicherfehler an den Aufrufer weiterreichen (Änderung bleibt trotzdem bestehen)
    raise_on_error: bool = Field(False,
        description="PersistenceError nach fehlgeschlagenem Speichern auslösen")

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir)


# ─── SITZUNG ───

class SessionConfig(BaseModel):
    """Angaben zur aktuellen Sitzung (Anmeldung selbst ist nicht Teil der Engine)."""
    # Anzeigename für requesterName / personResponsible
    current_user_display_name: str = Field("Unknown User",
        description="Anzeigename des angemeldeten Benutzers")


# ─── RAUM-LAYOUT ───

class LayoutConfig(BaseModel):
    """Raster und Vorgaben beim Anlegen von Containern und Items."""
    # Spalten im Raum-Raster (Position neuer Container)
    grid_columns: int = Field(4, ge=1, le=12,
        description="Spalten im Raum-Raster")
    # Einheit für neues Verbrauchsmaterial ohne Angabe
    default_unit: str = Field("Pcs",
        description="Standard-Einheit für Verbrauchsmaterial")


class ActivityConfig(BaseModel):
    """Aktivitäts-Feed der Übersicht."""
    # Anzahl Einträge, die die Übersicht anzeigt
    feed_limit: int = Field(10, ge=1, le=500,
        description="Einträge im Aktivitäts-Feed")


class LoggingConfig(BaseModel):
    level: LogLevel = Field(LogLevel.INFO, description="Log-Level")


# ─── START-RÄUME ───

class InitialRoomDef(BaseModel):
    """Raum, der beim allerersten Start (kein Snapshot vorhanden) angelegt wird."""
    # Eindeutige ID, z.B. "lab-comp"
    id: str
    # Anzeigename, z.B. "Computer Lab 1"
    name: str
    # Raumtyp
    room_type: RoomType = RoomType.OTHER
    # Freitext-Typ bei room_type == other
    custom_type: str = ""
    # Plätze (nur informativ)
    capacity: int = Field(0, ge=0)


# ─── GESAMT-CONFIG ───

class InventoryConfig(BaseModel):
    """Gesamtkonfiguration der Inventarverwaltung."""
    # Name der Einrichtung
    institution_name: str = Field("Muster-Schule",
        description="Name der Einrichtung")
    persistence: PersistenceConfig = Field(default_factory=PersistenceConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    activity: ActivityConfig = Field(default_factory=ActivityConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    # Räume für den Erststart
    initial_rooms: list[InitialRoomDef] = Field(default_factory=list,
        description="Räume für den Erststart")

    @model_validator(mode='after')
    def validate_initial_rooms(self):
        """Start-Raum-IDs müssen eindeutig sein."""
        seen: set[str] = set()
        for r in self.initial_rooms:
            if r.id in seen:
                raise ValueError(f"Start-Raum-ID '{r.id}' ist doppelt")
            seen.add(r.id)
        return self
