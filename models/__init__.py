from models.item_state import ItemCondition, ItemStatus
from models.item_log import (
    ItemLog,
    LogAction,
    NoteDetails,
    TransferDetails,
    UsageDetails,
    VerificationStatus,
)
from models.item import Item, ItemParameter
from models.container import Container, ContainerStatus, ContainerType, GridPosition
from models.room import Room, RoomType
from models.service_request import RequestStatus, ServiceRequest
from models.component_slot import ComponentSlot, classify_component, classify_component_legacy

__all__ = [
    "ItemCondition",
    "ItemStatus",
    "ItemLog",
    "LogAction",
    "NoteDetails",
    "TransferDetails",
    "UsageDetails",
    "VerificationStatus",
    "Item",
    "ItemParameter",
    "Container",
    "ContainerStatus",
    "ContainerType",
    "GridPosition",
    "Room",
    "RoomType",
    "RequestStatus",
    "ServiceRequest",
    "ComponentSlot",
    "classify_component",
    "classify_component_legacy",
]
