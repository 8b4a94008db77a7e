"""Gemeinsame Basisklasse für alle persistierten Inventar-Modelle (Pydantic v2)."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class InventoryModel(BaseModel):
    """Basismodell: Python-Attribute in snake_case, JSON-Schlüssel in camelCase.

    Ältere Snapshots benutzen camelCase (``isConsumable``, ``minStock``, ...),
    neuer Code darf beide Schreibweisen übergeben.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json_dict(self) -> dict:
        """Serialisiert das Modell so, wie es im Persistenz-Dokument steht."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def utcnow() -> datetime:
    """Aktueller Zeitpunkt (UTC, timezone-aware)."""
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    """Naive Zeitstempel aus Alt-Daten werden als UTC interpretiert."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
