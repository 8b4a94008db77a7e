"""Datenmodell für einen Raum (Pydantic v2)."""

from enum import Enum
from typing import Optional

from pydantic import Field

from models.base import InventoryModel
from models.container import Container


class RoomType(str, Enum):
    COMPUTER = "computer"
    PHYSICS = "physics"
    BIOLOGY = "biology"
    OTHER = "other"


class Room(InventoryModel):
    """Repräsentiert einen Laborraum. Wurzel-Aggregat für Container und Items."""

    id: str                                   # "lab-comp", nach Anlage unveränderlich
    name: str                                 # "Computer Lab 1"
    room_type: RoomType = Field(RoomType.OTHER, alias="type")
    custom_type: Optional[str] = None         # Freitext, nur bei room_type == other
    capacity: int = Field(0, ge=0)            # informativ
    containers: list[Container] = []          # Reihenfolge ist relevant (Drag & Drop)

    @property
    def display_type(self) -> str:
        if self.room_type == RoomType.OTHER and self.custom_type:
            return self.custom_type
        return self.room_type.value

    def find_container(self, container_id: str) -> Optional[Container]:
        return next((c for c in self.containers if c.id == container_id), None)

    @property
    def item_count(self) -> int:
        return sum(len(c.items) for c in self.containers)
