"""ServiceRequestLedger: Liste der Service-Anfragen mit Status-Übergängen.

Zustandsautomat::

    pending ──accept──▶ accepted ──complete──▶ completed
       │                   │
       └──────deny─────────┴──────deny──────▶ denied

``completed`` und ``denied`` sind Endzustände. Ein direkter Sprung
``pending → completed`` ist nicht erlaubt.
"""

import logging
from typing import Any, Mapping, Optional, Union

from models.base import utcnow
from models.service_request import TERMINAL_STATUSES, RequestStatus, ServiceRequest
from inventory.errors import (
    InvalidStateError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from inventory.log_recorder import new_id
from inventory.persistence import REQUESTS_KEY, PersistencePort

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[RequestStatus, frozenset[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({RequestStatus.ACCEPTED, RequestStatus.DENIED}),
    RequestStatus.ACCEPTED: frozenset({RequestStatus.COMPLETED, RequestStatus.DENIED}),
    RequestStatus.COMPLETED: frozenset(),
    RequestStatus.DENIED: frozenset(),
}

# Felder, die der Aufrufer beim Anlegen liefert
REQUEST_INPUT_FIELDS = (
    "component_id", "station_id", "description", "component_name", "station_name",
    "room_id", "requester_name", "component_sku", "component_category",
)


class ServiceRequestLedger:
    """Verwaltet Service-Anfragen (neueste zuerst) und speichert bei jeder Änderung."""

    def __init__(
        self,
        persistence: PersistencePort,
        key: str = REQUESTS_KEY,
        raise_on_persistence_error: bool = False,
    ) -> None:
        self._persistence = persistence
        self.key = key
        self.raise_on_persistence_error = raise_on_persistence_error
        self._requests: list[ServiceRequest] = []
        self.last_persistence_error: Optional[Exception] = None

    # ─── Laden / Speichern ───

    def load(self) -> None:
        raw = self._persistence.load(self.key) or []
        self._requests = [ServiceRequest.model_validate(r) for r in raw]
        logger.info(f"{len(self._requests)} Service-Anfragen geladen ('{self.key}')")

    def _commit(self, requests: list[ServiceRequest]) -> None:
        self._requests = requests
        data = [r.to_json_dict() for r in self._requests]
        try:
            self._persistence.save(self.key, data)
        except Exception as e:
            self.last_persistence_error = e
            logger.error(f"Speichern von '{self.key}' fehlgeschlagen (In-Memory-Zustand bleibt gültig): {e}")
            if self.raise_on_persistence_error:
                raise PersistenceError(f"Speichern von '{self.key}' fehlgeschlagen: {e}") from e
        else:
            self.last_persistence_error = None

    # ─── Lesen ───

    @property
    def requests(self) -> list[ServiceRequest]:
        return [r.model_copy(deep=True) for r in self._requests]

    def _find(self, request_id: str) -> ServiceRequest:
        for req in self._requests:
            if req.id == request_id:
                return req
        raise NotFoundError(f"Service-Anfrage '{request_id}' nicht gefunden.")

    def get_request(self, request_id: str) -> Optional[ServiceRequest]:
        req = next((r for r in self._requests if r.id == request_id), None)
        return req.model_copy(deep=True) if req else None

    def get_requests_by_room(self, room_id: str) -> list[ServiceRequest]:
        return [r.model_copy(deep=True) for r in self._requests if r.room_id == room_id]

    def active_request_for(self, item_id: str) -> Optional[ServiceRequest]:
        """Erste offene Anfrage (pending/accepted) zu einem Item."""
        req = next((r for r in self._requests if r.component_id == item_id and r.is_open), None)
        return req.model_copy(deep=True) if req else None

    def filter_requests(
        self,
        status: Optional[Union[RequestStatus, str]] = None,
        search: str = "",
    ) -> list[ServiceRequest]:
        """Filter nach Status und Suchbegriff (Komponente, Beschreibung, Station)."""
        status = RequestStatus(status) if status else None
        needle = search.strip().lower()
        result = []
        for req in self._requests:
            if status and req.status != status:
                continue
            if needle and not any(
                needle in field.lower()
                for field in (req.component_name, req.description, req.station_name)
            ):
                continue
            result.append(req.model_copy(deep=True))
        return result

    # ─── Anlegen ───

    def prepare_request(
        self,
        component_id: str,
        station_id: str,
        description: str,
        component_name: str = "",
        station_name: str = "",
        room_id: str = "",
        requester_name: Optional[str] = None,
        component_sku: Optional[str] = None,
        component_category: Optional[str] = None,
    ) -> ServiceRequest:
        """Validiert und baut eine neue Anfrage (Status pending), ohne sie einzutragen."""
        missing = [
            name for name, value in (
                ("component_id", component_id),
                ("station_id", station_id),
                ("description", description),
            )
            if not (value or "").strip()
        ]
        if missing:
            raise ValidationError(f"Pflichtfelder fehlen: {', '.join(missing)}")
        now = utcnow()
        return ServiceRequest(
            id=new_id("req", now),
            component_id=component_id,
            component_name=component_name,
            station_id=station_id,
            station_name=station_name,
            room_id=room_id,
            description=description.strip(),
            requester_name=requester_name,
            component_sku=component_sku,
            component_category=component_category,
            status=RequestStatus.PENDING,
            request_date=now,
        )

    def commit_request(self, request: ServiceRequest) -> ServiceRequest:
        """Trägt eine vorbereitete Anfrage vorne in die Liste ein."""
        if any(r.id == request.id for r in self._requests):
            raise InvalidStateError(f"Anfrage '{request.id}' ist bereits eingetragen.", [request.id])
        self._commit([request.model_copy(deep=True)] + [r.model_copy(deep=True) for r in self._requests])
        logger.info(f"Service-Anfrage {request.id} für '{request.component_name}' angelegt")
        return request.model_copy(deep=True)

    def add_request(
        self,
        request_data: Union[ServiceRequest, Mapping[str, Any], None] = None,
        **fields,
    ) -> ServiceRequest:
        """Legt eine neue Anfrage an (siehe ``prepare_request`` für die Felder).

        Die Eingabefelder kommen als Keyword-Argumente, als Mapping oder als
        fertige ``ServiceRequest``. Von einer ``ServiceRequest`` werden nur die
        Eingabefelder übernommen; ID, Status und Datum vergibt der Ledger neu.
        Keyword-Argumente überschreiben Werte aus ``request_data``.
        """
        if isinstance(request_data, ServiceRequest):
            data = {name: getattr(request_data, name) for name in REQUEST_INPUT_FIELDS}
        else:
            data = dict(request_data or {})
        data.update(fields)
        for name in REQUEST_INPUT_FIELDS[:3]:
            data.setdefault(name, "")
        return self.commit_request(self.prepare_request(**data))

    # ─── Status-Übergänge ───

    def update_status(
        self,
        request_id: str,
        status: Union[RequestStatus, str],
        reason: Optional[str] = None,
    ) -> ServiceRequest:
        """Führt einen Status-Übergang aus.

        Args:
            request_id: ID der Anfrage.
            status: Zielstatus.
            reason: Ablehnungsgrund (bei ``denied``) bzw. Ergebnisnotiz
                (bei ``completed``); in beiden Fällen Pflicht.

        Raises:
            NotFoundError: unbekannte ID.
            InvalidStateError: Übergang laut Automat nicht erlaubt.
            ValidationError: Grund/Notiz fehlt.
        """
        new_status = RequestStatus(status)
        current = self._find(request_id)
        if new_status not in ALLOWED_TRANSITIONS[current.status]:
            raise InvalidStateError(
                f"Übergang {current.status.value} → {new_status.value} "
                f"für Anfrage '{request_id}' nicht erlaubt.",
                [request_id],
            )
        reason = (reason or "").strip()
        if new_status == RequestStatus.DENIED and not reason:
            raise ValidationError("Ablehnung benötigt eine Begründung.")
        if new_status == RequestStatus.COMPLETED and not reason:
            raise ValidationError("Abschluss benötigt eine Ergebnisnotiz.")

        terminal = new_status in TERMINAL_STATUSES
        updated = current.model_copy(deep=True, update={
            "status": new_status,
            "resolution_date": utcnow() if terminal else None,
            "rejection_reason": reason if new_status == RequestStatus.DENIED else None,
            "resolution_note": reason if new_status == RequestStatus.COMPLETED else None,
        })
        self._commit([
            updated if r.id == request_id else r.model_copy(deep=True)
            for r in self._requests
        ])
        logger.info(f"Service-Anfrage {request_id}: {current.status.value} → {new_status.value}")
        return updated.model_copy(deep=True)

    def accept(self, request_id: str) -> ServiceRequest:
        return self.update_status(request_id, RequestStatus.ACCEPTED)

    def deny(self, request_id: str, reason: str) -> ServiceRequest:
        return self.update_status(request_id, RequestStatus.DENIED, reason)

    def complete(self, request_id: str, note: str) -> ServiceRequest:
        return self.update_status(request_id, RequestStatus.COMPLETED, note)
