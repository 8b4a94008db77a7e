"""Tests für den Demo-Daten-Generator."""

from collections import Counter
from pathlib import Path

from config.defaults import STATION_COMPONENTS, default_config
from data.seed_data import SeedDataGenerator
from inventory.persistence import JsonFilePersistence
from inventory.store import InventoryStore
from models import ComponentSlot, ContainerType, RoomType, classify_component


class TestSeedDataGenerator:
    def test_rooms_from_config(self):
        rooms = SeedDataGenerator(default_config(), seed=42).generate()
        assert [r.id for r in rooms] == ["lab-comp", "lab-phy", "lab-bio", "lab-comp-2"]

    def test_computer_rooms_have_full_stations(self):
        """Jeder Arbeitsplatz belegt alle fünf Komponenten-Plätze genau einmal."""
        rooms = SeedDataGenerator(default_config(), seed=1, stations_per_room=3).generate()
        for room in (r for r in rooms if r.room_type == RoomType.COMPUTER):
            stations = [c for c in room.containers if c.is_station]
            assert len(stations) == 3
            for station in stations:
                slots = [classify_component(i.item_type) for i in station.items]
                assert sorted(slots) == sorted(ComponentSlot)
                assert len(station.items) == len(STATION_COMPONENTS)

    def test_lab_rooms_have_storage(self):
        rooms = SeedDataGenerator(default_config(), seed=1).generate()
        physics = next(r for r in rooms if r.room_type == RoomType.PHYSICS)
        assert [c.container_type for c in physics.containers] == [ContainerType.CUPBOARD, ContainerType.SHELF]
        assert physics.item_count > 0

    def test_item_ids_unique(self):
        rooms = SeedDataGenerator(default_config(), seed=7).generate()
        counts = Counter(i.id for r in rooms for c in r.containers for i in c.items)
        assert all(n == 1 for n in counts.values())

    def test_same_seed_same_data(self):
        """Gleicher Seed → identischer Bestand."""
        a = SeedDataGenerator(default_config(), seed=42).generate()
        b = SeedDataGenerator(default_config(), seed=42).generate()
        assert [r.to_json_dict() for r in a] == [r.to_json_dict() for r in b]

    def test_grid_positions(self):
        rooms = SeedDataGenerator(default_config(), seed=42, stations_per_room=6).generate()
        comp = rooms[0]
        positions = [(c.position.x, c.position.y) for c in comp.containers]
        assert positions[:6] == [(0, 0), (1, 0), (2, 0), (3, 0), (0, 1), (1, 1)]

    def test_store_roundtrip(self, tmp_path: Path):
        """Erzeugter Bestand lässt sich speichern und wieder laden."""
        rooms = SeedDataGenerator(default_config(), seed=42).generate()
        persistence = JsonFilePersistence(tmp_path)
        store = InventoryStore(persistence)
        store.commit(rooms)

        reloaded = InventoryStore(persistence)
        reloaded.load()
        assert reloaded.compute_stats().total_assets == store.compute_stats().total_assets
        assert reloaded.compute_stats().grading == store.compute_stats().grading
