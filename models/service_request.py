"""Datenmodell für eine Service-Anfrage (Pydantic v2)."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from models.base import InventoryModel, ensure_aware, utcnow


class RequestStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DENIED = "denied"
    COMPLETED = "completed"


TERMINAL_STATUSES = frozenset({RequestStatus.COMPLETED, RequestStatus.DENIED})


class ServiceRequest(InventoryModel):
    """Ticket zu einem gemeldeten Problem an einem Item.

    Referenziert Item/Container/Raum nur über IDs; verwaiste Referenzen
    (z.B. nach dem Löschen eines Raums) sind erlaubt.
    """

    id: str
    component_id: str
    component_name: str = ""
    station_id: str
    station_name: str = ""
    room_id: str = ""
    description: str
    requester_name: Optional[str] = None
    component_sku: Optional[str] = None
    component_category: Optional[str] = None
    status: RequestStatus = RequestStatus.PENDING
    request_date: datetime = Field(default_factory=utcnow)
    resolution_date: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    resolution_note: Optional[str] = None   # Ergebnis bei Abschluss ("Outcome: repaired")

    @field_validator("request_date", "resolution_date")
    @classmethod
    def _aware(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_aware(v) if v is not None else v

    @property
    def is_open(self) -> bool:
        return self.status not in TERMINAL_STATUSES
