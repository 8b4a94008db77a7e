"""OperationsEngine: Transfer, Verifikation, Ausleihe/Rückgabe und Schadensmeldung.

Alle Mehrfach-Operationen folgen demselben Ablauf:

1. Arbeitskopie des gesamten Bestands ziehen (``store.snapshot()``)
2. ALLE Vorbedingungen prüfen – bei einem Fehler bleibt der Bestand unberührt
3. Jedes Item auf der Arbeitskopie ändern; spätere Items sehen frühere Änderungen
4. Ein einziges ``store.commit()``

Damit gibt es keine Teil-Anwendung und keine verlorenen Einfügungen, wenn
mehrere Items in denselben Container wandern.
"""

import logging
from enum import Enum
from typing import Iterable, Optional, Union

from pydantic import BaseModel

from models.base import utcnow
from models.item_log import (
    ItemLog,
    LogAction,
    NoteDetails,
    TransferDetails,
    UsageDetails,
    VerificationStatus,
)
from models.item_state import ItemCondition, ItemStatus
from models.room import Room
from models.service_request import ServiceRequest
from analysis.activity import (
    ItemContext,
    PendingVerification,
    find_active_loans,
    find_pending_verifications,
)
from inventory.errors import (
    InvalidDestinationError,
    InvalidStateError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from inventory.ledger import ServiceRequestLedger
from inventory.log_recorder import record
from inventory.store import InventoryStore, ItemLocation, find_room, locate_item

logger = logging.getLogger(__name__)


class RepairOutcome(str, Enum):
    """Ergebnis einer abgeschlossenen Reparatur."""

    REPAIRED = "repaired"
    BROKEN = "broken"


_OUTCOME_CONDITION = {
    RepairOutcome.REPAIRED: ItemCondition.GOOD,
    RepairOutcome.BROKEN: ItemCondition.BROKEN,
}


class TransferResult(BaseModel):
    item_ids: list[str]
    log_ids: list[str]
    target_room_id: str
    target_container_id: str
    destination: str


class UsageResult(BaseModel):
    action: str             # CHECK_OUT oder RETURNED
    item_ids: list[str]
    log_ids: list[str]


def _normalize_selection(item_ids: Iterable[str]) -> list[str]:
    """Entfernt Duplikate (Reihenfolge bleibt). Leere Auswahl → ValidationError."""
    selection = list(dict.fromkeys(i for i in item_ids if i))
    if not selection:
        raise ValidationError("Bitte mindestens ein Item auswählen.")
    return selection


def _require_text(value: Optional[str], label: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationError(f"Pflichtfeld fehlt: {label}")
    return value


class OperationsEngine:
    """Bereichsübergreifende Abläufe über Store und Ledger."""

    def __init__(
        self,
        store: InventoryStore,
        ledger: ServiceRequestLedger,
        current_user_display_name: str = "Unknown User",
    ) -> None:
        self.store = store
        self.ledger = ledger
        self.current_user_display_name = current_user_display_name

    # ─── Hilfen ───

    @staticmethod
    def _locate_all(rooms: list[Room], selection: list[str]) -> list[ItemLocation]:
        locations = []
        missing = []
        for item_id in selection:
            loc = locate_item(rooms, item_id)
            if loc is None:
                missing.append(item_id)
            else:
                locations.append(loc)
        if missing:
            raise NotFoundError(f"Items nicht gefunden: {', '.join(missing)}")
        return locations

    # ─── Transfer ───

    def transfer(
        self,
        item_ids: Iterable[str],
        target_room_id: str,
        target_container_id: str,
        mover: str = "",
        receiver: str = "",
        condition_before: Union[ItemCondition, str] = ItemCondition.GOOD,
    ) -> TransferResult:
        """Verschiebt Items in einen Ziel-Container und markiert sie als "zu prüfen".

        Pro Item: TRANSFER-Eintrag (``verificationStatus: pending``), aus dem
        Quell-Container entfernen, am Ende des Ziel-Containers einfügen,
        ``condition`` auf den angegebenen Zustand vor dem Transfer setzen.
        ``status`` bleibt unverändert. Quelle und Ziel dürfen identisch sein.

        Raises:
            ValidationError: leere Auswahl.
            InvalidDestinationError: Ziel-Raum oder -Container existiert nicht.
            NotFoundError: ein ausgewähltes Item existiert nicht.
        """
        selection = _normalize_selection(item_ids)
        condition_before = ItemCondition(condition_before)

        rooms = self.store.snapshot()
        target_room = find_room(rooms, target_room_id)
        target = target_room.find_container(target_container_id) if target_room else None
        if target is None:
            raise InvalidDestinationError(
                f"Ungültiges Ziel: Raum '{target_room_id}' / Container '{target_container_id}'."
            )
        self._locate_all(rooms, selection)

        destination = f"{target_room.name} - {target.name}"
        now = utcnow()
        log_ids = []
        for item_id in selection:
            # Frisch auf der Arbeitskopie suchen: frühere Items sind schon verschoben
            source_room, source, item = locate_item(rooms, item_id)
            log = record(item, LogAction.TRANSFER, TransferDetails(
                source=f"{source_room.name} - {source.name}",
                destination=destination,
                mover=mover,
                receiver=receiver,
                condition=condition_before,
                verification_status=VerificationStatus.PENDING,
            ), when=now)
            item.condition = condition_before
            # Erst entfernen, dann einfügen: nie in zwei Containern gleichzeitig
            source.items = [i for i in source.items if i.id != item_id]
            target.items.append(item)
            log_ids.append(log.id)

        self.store.commit(rooms)
        logger.info(f"Transfer: {len(selection)} Item(s) nach {destination}")
        return TransferResult(
            item_ids=selection,
            log_ids=log_ids,
            target_room_id=target_room.id,
            target_container_id=target.id,
            destination=destination,
        )

    # ─── Verifikation ───

    def verify_transfer(
        self,
        log_id: str,
        condition_after: Union[ItemCondition, str],
    ) -> ItemLog:
        """Schließt einen offenen Transfer ab und übernimmt den geprüften Zustand.

        Sucht im gesamten Baum, da das Item inzwischen im Ziel-Container liegt.
        Ein bereits verifizierter Eintrag gilt als nicht (mehr) offen und wird
        wie eine unbekannte ID behandelt.

        Raises:
            NotFoundError: kein offener TRANSFER-Eintrag mit dieser ID.
        """
        condition_after = ItemCondition(condition_after)
        rooms = self.store.snapshot()
        for room in rooms:
            for container in room.containers:
                for item in container.items:
                    log = item.find_log(log_id)
                    if log is None:
                        continue
                    if not log.is_pending_transfer:
                        raise NotFoundError(
                            f"Kein offener Transfer-Eintrag mit ID '{log_id}' "
                            f"(Aktion {log.action}, bereits abgeschlossen oder kein Transfer)."
                        )
                    log.details.verification_status = VerificationStatus.VERIFIED
                    log.details.verified_at = utcnow()
                    log.details.condition_after = condition_after
                    item.condition = condition_after
                    self.store.commit(rooms)
                    logger.info(f"Transfer {log_id} verifiziert: {item.id} → {condition_after.value}")
                    return log.model_copy(deep=True)
        raise NotFoundError(f"Kein Transfer-Eintrag mit ID '{log_id}' gefunden.")

    def pending_verifications(self) -> list[PendingVerification]:
        return find_pending_verifications(self.store.rooms)

    # ─── Ausleihe / Rückgabe ───

    def _apply_usage(
        self,
        item_ids: Iterable[str],
        action: LogAction,
        required: ItemStatus,
        new_status: ItemStatus,
        borrower: str,
        purpose: str,
        condition: Union[ItemCondition, str],
        overwrite_condition: bool,
    ) -> UsageResult:
        selection = _normalize_selection(item_ids)
        borrower = _require_text(borrower, "borrower")
        condition = ItemCondition(condition)

        rooms = self.store.snapshot()
        locations = self._locate_all(rooms, selection)
        offending = [loc.item for loc in locations if loc.item.status != required]
        if offending:
            raise InvalidStateError(
                "Folgende Items können nicht verarbeitet werden "
                f"(Status muss '{required.value}' sein): "
                + ", ".join(f"{i.name} [{i.status.value}]" for i in offending),
                [i.id for i in offending],
            )

        now = utcnow()
        log_ids = []
        for loc in locations:
            log = record(loc.item, action, UsageDetails(
                borrower=borrower,
                purpose=purpose or "",
                condition=condition,
            ), when=now)
            loc.item.status = new_status
            if overwrite_condition:
                loc.item.condition = condition
            log_ids.append(log.id)

        self.store.commit(rooms)
        logger.info(f"{action.value}: {len(selection)} Item(s) für {borrower}")
        return UsageResult(action=action.value, item_ids=selection, log_ids=log_ids)

    def checkout(
        self,
        item_ids: Iterable[str],
        borrower: str,
        purpose: str = "",
        condition: Union[ItemCondition, str] = ItemCondition.GOOD,
    ) -> UsageResult:
        """Leiht Items aus. Alle müssen ``available`` sein, sonst wird nichts geändert.

        Der Zustand wird nur im Eintrag festgehalten, nicht am Item geändert.
        """
        return self._apply_usage(
            item_ids, LogAction.CHECK_OUT, ItemStatus.AVAILABLE, ItemStatus.IN_USE,
            borrower, purpose, condition, overwrite_condition=False,
        )

    def checkin(
        self,
        item_ids: Iterable[str],
        borrower: str,
        purpose: str = "",
        condition: Union[ItemCondition, str] = ItemCondition.GOOD,
    ) -> UsageResult:
        """Nimmt Items zurück. Alle müssen ``in_use`` sein; der beobachtete Zustand wird übernommen."""
        return self._apply_usage(
            item_ids, LogAction.RETURNED, ItemStatus.IN_USE, ItemStatus.AVAILABLE,
            borrower, purpose, condition, overwrite_condition=True,
        )

    def active_loans(self) -> list[ItemContext]:
        return find_active_loans(self.store.rooms)

    # ─── Schadensmeldung ───

    def report_issue(
        self,
        item_id: str,
        description: str,
        requester_name: Optional[str] = None,
    ) -> ServiceRequest:
        """Legt eine pending-Anfrage an UND setzt das Item auf ``service``.

        Beides gehört zu einem Vorgang: Erst wird alles validiert, dann der
        Bestand übernommen, dann die Anfrage eingetragen. Schlägt nur das
        Speichern des Bestands fehl, wird die Anfrage trotzdem eingetragen
        und der Persistenz-Fehler danach weitergereicht.
        """
        description = _require_text(description, "description")
        rooms = self.store.snapshot()
        loc = locate_item(rooms, item_id)
        if loc is None:
            raise NotFoundError(f"Item '{item_id}' nicht gefunden.")
        room, container, item = loc

        request = self.ledger.prepare_request(
            component_id=item.id,
            component_name=item.name,
            station_id=container.id,
            station_name=container.name,
            room_id=room.id,
            description=description,
            requester_name=requester_name or self.current_user_display_name,
            component_sku=item.sku,
            component_category=item.category,
        )
        record(item, LogAction.REPORTED, NoteDetails(text=f"Issue reported: {description}"))
        item.condition = ItemCondition.SERVICE

        persistence_error: Optional[PersistenceError] = None
        try:
            self.store.commit(rooms)
        except PersistenceError as e:
            persistence_error = e
        stored = self.ledger.commit_request(request)
        if persistence_error is not None:
            raise persistence_error
        return stored

    def resolve_request(
        self,
        request_id: str,
        outcome: Union[RepairOutcome, str],
    ) -> ServiceRequest:
        """Schließt eine angenommene Anfrage ab und setzt den Item-Zustand passend.

        ``repaired`` → ``good``, ``broken`` → ``broken``. Existiert das Item nicht
        mehr (z.B. Raum gelöscht), wird nur die Anfrage abgeschlossen.
        """
        outcome = RepairOutcome(outcome)
        request = self.ledger.complete(request_id, f"Outcome: {outcome.value}")

        rooms = self.store.snapshot()
        loc = locate_item(rooms, request.component_id)
        if loc is None:
            logger.warning(
                f"Anfrage {request_id}: Item '{request.component_id}' existiert nicht mehr – "
                f"nur die Anfrage wurde abgeschlossen"
            )
            return request
        loc.item.condition = _OUTCOME_CONDITION[outcome]
        self.store.commit(rooms)
        return request
