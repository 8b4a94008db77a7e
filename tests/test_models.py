"""Tests für die Datenmodelle: Aliase, Detail-Dekodierung, Komponenten-Plätze."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from models import (
    ComponentSlot,
    Container,
    ContainerType,
    Item,
    ItemCondition,
    ItemLog,
    ItemStatus,
    NoteDetails,
    RequestStatus,
    Room,
    RoomType,
    ServiceRequest,
    TransferDetails,
    UsageDetails,
    classify_component,
    classify_component_legacy,
)
from models.component_slot import canonical_type_name


# ─── ITEM / CONTAINER / ROOM ──────────────────────────────────────────────────

class TestItemModel:
    def test_defaults(self):
        """Neues Item: good, available, Typ 'Standard', keine Historie."""
        item = Item(id="i-1", name="Monitor")
        assert item.condition == ItemCondition.GOOD
        assert item.status == ItemStatus.AVAILABLE
        assert item.item_type == "Standard"
        assert item.logs == []

    def test_camel_case_aliases_on_load(self):
        """Gespeicherte camelCase-Schlüssel werden gelesen."""
        item = Item.model_validate({
            "id": "i-1", "name": "Paper", "type": "Consumable",
            "isConsumable": True, "minStock": 4, "quantity": 3, "image_layer": "paper.png",
        })
        assert item.is_consumable is True
        assert item.min_stock == 4
        assert item.item_type == "Consumable"
        assert item.image_layer == "paper.png"

    def test_json_dict_uses_stored_keys(self):
        """to_json_dict schreibt die Schlüssel des Persistenz-Dokuments."""
        item = Item(id="i-1", name="Paper", item_type="Consumable", is_consumable=True, min_stock=2)
        data = item.to_json_dict()
        assert data["type"] == "Consumable"
        assert data["isConsumable"] is True
        assert data["minStock"] == 2
        assert "sku" not in data  # None-Felder werden weggelassen

    def test_low_stock(self):
        """Niedriger Bestand nur bei Verbrauchsmaterial mit quantity <= minStock."""
        assert Item(id="a", name="A", is_consumable=True, quantity=3, min_stock=4).is_low_stock
        assert Item(id="b", name="B", is_consumable=True, quantity=4, min_stock=4).is_low_stock
        assert not Item(id="c", name="C", is_consumable=True, quantity=5, min_stock=4).is_low_stock
        assert not Item(id="d", name="D", quantity=0, min_stock=4).is_low_stock

    def test_category_supersedes_type(self):
        assert Item(id="a", name="A", item_type="Old", category="New").effective_category == "New"
        assert Item(id="b", name="B", item_type="Old").effective_category == "Old"

    def test_negative_quantity_rejected(self):
        with pytest.raises(PydanticValidationError):
            Item(id="a", name="A", quantity=-1)


class TestRoomModel:
    def test_display_type_custom(self):
        """Bei room_type 'other' wird der Freitext-Typ angezeigt."""
        room = Room(id="r", name="Werkraum", room_type=RoomType.OTHER, custom_type="Werkstatt")
        assert room.display_type == "Werkstatt"
        assert Room(id="p", name="Physik", room_type=RoomType.PHYSICS).display_type == "physics"

    def test_item_count_and_find(self):
        room = Room(id="r", name="R", containers=[
            Container(id="c1", name="Table 1", container_type=ContainerType.TABLE,
                      items=[Item(id="i1", name="A"), Item(id="i2", name="B")]),
            Container(id="c2", name="Cupboard 1"),
        ])
        assert room.item_count == 2
        assert room.find_container("c1").is_station
        assert not room.find_container("c2").is_station
        assert room.find_container("missing") is None
        assert room.find_container("c1").find_item("i2").name == "B"

    def test_room_type_alias(self):
        room = Room.model_validate({"id": "r", "name": "R", "type": "biology", "customType": None})
        assert room.room_type == RoomType.BIOLOGY
        assert room.to_json_dict()["type"] == "biology"


# ─── ITEM-LOG ─────────────────────────────────────────────────────────────────

class TestItemLogDetails:
    def test_transfer_details_from_json_string(self):
        """Alt-Daten: details als JSON-String werden anhand der Aktion dekodiert."""
        log = ItemLog.model_validate({
            "id": "log-1",
            "date": "2024-03-01T10:00:00",
            "action": "TRANSFER",
            "details": '{"from": "Lab A - Table 1", "to": "Lab B - Shelf 1", '
                       '"condition": "good", "verificationStatus": "pending"}',
        })
        assert isinstance(log.details, TransferDetails)
        assert log.details.source == "Lab A - Table 1"
        assert log.details.destination == "Lab B - Shelf 1"
        assert log.is_pending_transfer

    def test_naive_date_is_utc(self):
        log = ItemLog.model_validate({"id": "l", "date": "2024-03-01T10:00:00", "action": "Reported"})
        assert log.date == datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)

    def test_usage_details(self):
        log = ItemLog.model_validate({
            "id": "l", "action": "CHECK_OUT",
            "details": {"borrower": "Kim", "purpose": "Projekt", "condition": "good"},
        })
        assert isinstance(log.details, UsageDetails)
        assert log.details.borrower == "Kim"
        assert not log.is_pending_transfer

    def test_free_text_details_become_note(self):
        """Freitext ohne JSON bleibt als Notiz erhalten."""
        log = ItemLog.model_validate({"id": "l", "action": "Maintenance", "details": "Lüfter getauscht"})
        assert isinstance(log.details, NoteDetails)
        assert log.details.text == "Lüfter getauscht"

    def test_unknown_action_with_dict_kept_as_text(self):
        log = ItemLog.model_validate({"id": "l", "action": "Audit", "details": {"room": "Lab A"}})
        assert isinstance(log.details, NoteDetails)
        assert "Lab A" in log.details.text

    def test_transfer_with_wrong_payload_rejected(self):
        """TRANSFER ohne Quelle/Ziel ist ungültig."""
        with pytest.raises(PydanticValidationError):
            ItemLog.model_validate({"id": "l", "action": "TRANSFER", "details": "irgendwas"})

    def test_transfer_details_serialized_with_from_to(self):
        log = ItemLog(id="l", action="TRANSFER", details=TransferDetails(
            source="A", destination="B", condition=ItemCondition.GOOD,
        ))
        data = log.to_json_dict()
        assert data["details"]["from"] == "A"
        assert data["details"]["to"] == "B"
        assert data["details"]["verificationStatus"] == "pending"
        assert ItemLog.model_validate(data).details.source == "A"


class TestServiceRequestModel:
    def test_open_and_terminal(self):
        req = ServiceRequest(id="r", component_id="i", station_id="s", description="defekt")
        assert req.is_open
        closed = req.model_copy(update={"status": RequestStatus.DENIED})
        assert not closed.is_open

    def test_json_keys(self):
        req = ServiceRequest(id="r", component_id="i", station_id="s", description="defekt")
        data = req.to_json_dict()
        assert data["componentId"] == "i"
        assert data["stationId"] == "s"
        assert data["status"] == "pending"
        assert "requestDate" in data


# ─── KOMPONENTEN-PLÄTZE ───────────────────────────────────────────────────────

class TestComponentSlots:
    @pytest.mark.parametrize("item_type,slot", [
        ("Monitor", ComponentSlot.MONITOR),
        ("Screen", ComponentSlot.MONITOR),
        ("keypad", ComponentSlot.KEYBOARD),
        ("Trackpad", ComponentSlot.MOUSE),
        ("PC Unit", ComponentSlot.PC),
        ("Tower", ComponentSlot.PC),
        ("Physical Desk", ComponentSlot.DESK),
        ("  workstation ", ComponentSlot.DESK),
    ])
    def test_exact_table(self, item_type, slot):
        assert classify_component(item_type) == slot

    def test_exact_table_rejects_substrings(self):
        """Die Tabelle vergleicht exakt: keine Teilstring-Treffer."""
        assert classify_component("Touchscreen Kiosk") is None
        assert classify_component("Epcot") is None
        assert classify_component("Laptop") is None
        assert classify_component(None) is None

    def test_legacy_substring_behavior(self):
        """Alt-Zuordnung per Teilstring, erster Treffer in fester Reihenfolge."""
        assert classify_component_legacy("Touchscreen Kiosk") == ComponentSlot.MONITOR
        assert classify_component_legacy("Epcot") == ComponentSlot.PC
        assert classify_component_legacy("Laptop") is None
        assert classify_component_legacy("") is None

    def test_canonical_names(self):
        assert canonical_type_name(ComponentSlot.PC) == "PC Unit"
        assert canonical_type_name(ComponentSlot.MONITOR) == "Monitor"
