"""Datenmodell für ein Inventar-Item (Gerät oder Verbrauchsmaterial, Pydantic v2)."""

from typing import Optional

from pydantic import Field

from models.base import InventoryModel
from models.item_log import ItemLog
from models.item_state import ItemCondition, ItemStatus


class ItemParameter(InventoryModel):
    """Freies Spezifikations-Paar (z.B. Marke, Seriennummer)."""

    label: str
    value: str = ""


class Item(InventoryModel):
    """Ein verfolgbares Asset mit Zustand, Verfügbarkeit und Historie."""

    id: str
    name: str
    item_type: str = Field("Standard", alias="type")   # Alt-Feld, von category abgelöst
    condition: ItemCondition = ItemCondition.GOOD
    status: ItemStatus = ItemStatus.AVAILABLE
    specs: str = ""
    image_layer: Optional[str] = Field(None, alias="image_layer")
    sku: Optional[str] = None
    category: Optional[str] = None
    is_consumable: bool = False
    quantity: Optional[int] = Field(None, ge=0)
    unit: Optional[str] = None
    min_stock: Optional[int] = Field(None, ge=0)
    parameters: list[ItemParameter] = []
    logs: list[ItemLog] = []   # neueste zuerst

    @property
    def effective_category(self) -> str:
        """Kategorie hat Vorrang vor dem Alt-Feld ``type``."""
        return self.category or self.item_type

    @property
    def is_low_stock(self) -> bool:
        """Verbrauchsmaterial mit Bestand ≤ Mindestbestand."""
        return self.is_consumable and (self.quantity or 0) <= (self.min_stock or 0)

    def find_log(self, log_id: str) -> Optional[ItemLog]:
        return next((log for log in self.logs if log.id == log_id), None)
