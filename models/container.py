"""Datenmodell für einen Container (Tisch, Schrank, Regal) in einem Raum."""

from enum import Enum
from typing import Optional

from pydantic import Field

from models.base import InventoryModel
from models.item import Item


class ContainerType(str, Enum):
    TABLE = "table"
    CUPBOARD = "cupboard"
    SHELF = "shelf"


class ContainerStatus(str, Enum):
    """Nur informativ, wird nicht aus den Items abgeleitet."""

    GOOD = "good"
    WARNING = "warning"
    ERROR = "error"


class GridPosition(InventoryModel):
    x: int = 0
    y: int = 0


class Container(InventoryModel):
    """Container mit geordneter Item-Liste. Gehört genau einem Raum."""

    id: str
    name: str
    container_type: ContainerType = Field(ContainerType.CUPBOARD, alias="type")
    status: ContainerStatus = ContainerStatus.GOOD
    items: list[Item] = []
    position: GridPosition = Field(default_factory=GridPosition)

    @property
    def is_station(self) -> bool:
        """Tische werden in der Oberfläche als Arbeitsplatz ("Station") dargestellt."""
        return self.container_type == ContainerType.TABLE

    def find_item(self, item_id: str) -> Optional[Item]:
        return next((i for i in self.items if i.id == item_id), None)
