"""Historien-Einträge eines Items (ItemLog) und ihre typisierten Detail-Payloads.

Die Details hängen von der Aktion ab:

- ``TRANSFER``              → :class:`TransferDetails`
- ``CHECK_OUT``/``RETURNED`` → :class:`UsageDetails`
- alles andere (``Reported``, Alt-Aktionen) → :class:`NoteDetails`

Alte Snapshots speichern ``details`` als JSON-String (oder Freitext); beim Laden
wird der String anhand der Aktion dekodiert.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from models.base import InventoryModel, ensure_aware, utcnow
from models.item_state import ItemCondition


class LogAction(str, Enum):
    """Geschlossene Menge der Aktionen, die die Engine selbst schreibt."""

    REPORTED = "Reported"
    TRANSFER = "TRANSFER"
    CHECK_OUT = "CHECK_OUT"
    RETURNED = "RETURNED"


USAGE_ACTIONS = frozenset({LogAction.CHECK_OUT.value, LogAction.RETURNED.value})


class VerificationStatus(str, Enum):
    PENDING = "pending"
    VERIFIED = "verified"


class TransferDetails(InventoryModel):
    """Payload eines TRANSFER-Eintrags."""

    source: str = Field(alias="from")        # "Computer Lab 1 - Table 1"
    destination: str = Field(alias="to")     # "Physics Lab - Cupboard 2"
    mover: str = ""                          # Verantwortliche Person (Abgabe)
    receiver: str = ""                       # Neue verantwortliche Person
    condition: ItemCondition                 # Zustand vor dem Transfer (Angabe des Bedieners)
    verification_status: VerificationStatus = VerificationStatus.PENDING
    verified_at: Optional[datetime] = None
    condition_after: Optional[ItemCondition] = None

    @property
    def is_pending(self) -> bool:
        return self.verification_status == VerificationStatus.PENDING


class UsageDetails(InventoryModel):
    """Payload eines CHECK_OUT- oder RETURNED-Eintrags."""

    borrower: str
    purpose: str = ""
    condition: ItemCondition


class NoteDetails(InventoryModel):
    """Freitext-Details (z.B. ``Issue reported: ...``)."""

    text: str = ""


LogDetails = Union[TransferDetails, UsageDetails, NoteDetails]


def decode_details(action: Optional[str], raw: Any) -> LogDetails:
    """Dekodiert einen Detail-Payload anhand der Aktion.

    ``raw`` darf ein Modell, ein Dict, ein JSON-String oder Freitext sein.
    Für TRANSFER- und Nutzungs-Aktionen muss der Payload zur Aktion passen,
    sonst schlägt die Pydantic-Validierung fehl.
    """
    if isinstance(raw, BaseModel):
        return raw

    payload: Any = raw
    if isinstance(raw, str):
        try:
            payload = json.loads(raw)
        except ValueError:
            payload = raw
    if payload is None:
        payload = {}

    if action == LogAction.TRANSFER.value:
        return TransferDetails.model_validate(payload)
    if action in USAGE_ACTIONS:
        return UsageDetails.model_validate(payload)

    if isinstance(payload, dict):
        if set(payload) <= {"text"}:
            return NoteDetails.model_validate(payload)
        return NoteDetails(text=json.dumps(payload, ensure_ascii=False))
    return NoteDetails(text=str(payload))


class ItemLog(InventoryModel):
    """Unveränderlicher Historien-Eintrag (Ausnahme: Verifikation eines Transfers)."""

    id: str
    date: datetime = Field(default_factory=utcnow)
    action: str
    details: LogDetails = Field(default_factory=NoteDetails)

    @model_validator(mode="before")
    @classmethod
    def _decode_details(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "details" not in data:
            return data
        data = dict(data)
        data["details"] = decode_details(data.get("action"), data["details"])
        return data

    @field_validator("date")
    @classmethod
    def _aware_date(cls, v: datetime) -> datetime:
        return ensure_aware(v)

    @model_validator(mode="after")
    def _check_details_match_action(self):
        if self.action == LogAction.TRANSFER.value and not isinstance(self.details, TransferDetails):
            raise ValueError(f"Log {self.id}: TRANSFER erwartet TransferDetails")
        if self.action in USAGE_ACTIONS and not isinstance(self.details, UsageDetails):
            raise ValueError(f"Log {self.id}: {self.action} erwartet UsageDetails")
        return self

    @property
    def is_pending_transfer(self) -> bool:
        """True für einen TRANSFER-Eintrag, dessen Zielprüfung noch aussteht."""
        return isinstance(self.details, TransferDetails) and self.details.is_pending
