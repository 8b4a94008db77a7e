from config.schema import InitialRoomDef, InventoryConfig
from models.room import Room, RoomType


def default_initial_rooms() -> list[InitialRoomDef]:
    """Die vier Labore einer typischen Schule (ohne Container)."""
    return [
        InitialRoomDef(id="lab-comp", name="Computer Lab 1",
                       room_type=RoomType.COMPUTER, capacity=30),
        InitialRoomDef(id="lab-phy", name="Physics Lab",
                       room_type=RoomType.PHYSICS, capacity=24),
        InitialRoomDef(id="lab-bio", name="Biology Lab",
                       room_type=RoomType.BIOLOGY, capacity=20),
        InitialRoomDef(id="lab-comp-2", name="Computer Lab 2",
                       room_type=RoomType.COMPUTER, capacity=35),
    ]


def default_config() -> InventoryConfig:
    return InventoryConfig(initial_rooms=default_initial_rooms())


def build_initial_rooms(config: InventoryConfig) -> list[Room]:
    """Wandelt die Start-Raum-Definitionen in leere Räume um."""
    return [
        Room(
            id=r.id,
            name=r.name,
            room_type=r.room_type,
            custom_type=r.custom_type or None,
            capacity=r.capacity,
        )
        for r in config.initial_rooms
    ]


# ─── Demo-Katalog (für data.seed_data) ───────────────────────────────────────
# Typ → (Anzeigename, Spezifikation)

STATION_COMPONENTS: list[tuple[str, str, str]] = [
    ("Monitor", "Monitor 24\"", "24 inch, 1080p"),
    ("Keyboard", "Keyboard", "US Layout"),
    ("Mouse", "Mouse", "Optical, USB"),
    ("PC Unit", "PC Unit", "i5, 16GB RAM, 512GB SSD"),
    ("Desk", "Desk", "120x60 cm"),
]

# Raumtyp → Liste (Name, Kategorie, Verbrauchsmaterial?, Menge, Einheit, Mindestbestand)
LAB_EQUIPMENT: dict[RoomType, list[tuple[str, str, bool, int, str, int]]] = {
    RoomType.COMPUTER: [
        ("HDMI Cable", "Cable", True, 12, "Pcs", 5),
        ("Network Switch", "Network", False, 1, "Pcs", 0),
        ("Printer Paper", "Consumable", True, 3, "Pack", 4),
    ],
    RoomType.PHYSICS: [
        ("Oscilloscope", "Measurement", False, 1, "Pcs", 0),
        ("Multimeter", "Measurement", False, 1, "Pcs", 0),
        ("Resistor Kit", "Electronics", True, 40, "Pcs", 20),
        ("Power Supply 30V", "Electronics", False, 1, "Pcs", 0),
    ],
    RoomType.BIOLOGY: [
        ("Microscope B-20", "Optics", False, 1, "Pcs", 0),
        ("Erlenmeyer Flask", "Glassware", True, 8, "Pcs", 10),
        ("Petri Dish", "Glassware", True, 50, "Pcs", 20),
        ("Ethanol 70%", "Chemical", True, 2, "l", 1),
    ],
    RoomType.OTHER: [
        ("Projector", "AV", False, 1, "Pcs", 0),
    ],
}
