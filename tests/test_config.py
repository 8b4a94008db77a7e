"""Tests für das Konfigurationssystem und den Sitzungsaufbau."""

from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from config.defaults import build_initial_rooms, default_config, default_initial_rooms
from config.manager import ConfigManager
from config.schema import InitialRoomDef, InventoryConfig, LayoutConfig, LogLevel
from inventory.persistence import MemoryPersistence
from inventory.session import InventorySession
from models import RoomType


# ─── DEFAULT-KONFIGURATION ────────────────────────────────────────────────────

class TestDefaultConfig:
    def test_default_rooms(self):
        """Vier Standard-Labore mit festen IDs."""
        rooms = default_initial_rooms()
        assert [r.id for r in rooms] == ["lab-comp", "lab-phy", "lab-bio", "lab-comp-2"]
        assert rooms[0].room_type == RoomType.COMPUTER
        assert rooms[0].capacity == 30

    def test_default_config_valid(self):
        config = default_config()
        assert config.institution_name == "Muster-Schule"
        assert config.persistence.rooms_key == "inventory_rooms"
        assert config.persistence.requests_key == "serviceRequests"
        assert config.persistence.raise_on_error is False
        assert config.layout.grid_columns == 4
        assert config.logging.level == LogLevel.INFO

    def test_build_initial_rooms_empty(self):
        rooms = build_initial_rooms(default_config())
        assert len(rooms) == 4
        assert all(r.containers == [] for r in rooms)
        assert rooms[2].room_type == RoomType.BIOLOGY

    def test_duplicate_initial_room_ids(self):
        with pytest.raises(PydanticValidationError):
            InventoryConfig(initial_rooms=[
                InitialRoomDef(id="lab", name="A"),
                InitialRoomDef(id="lab", name="B"),
            ])

    def test_grid_columns_range(self):
        with pytest.raises(PydanticValidationError):
            LayoutConfig(grid_columns=0)


# ─── CONFIG-MANAGER ───────────────────────────────────────────────────────────

class TestConfigManager:
    def test_save_and_load_roundtrip(self, tmp_path: Path):
        """Speichern und Laden ergibt dieselbe Konfiguration."""
        mgr = ConfigManager()
        mgr.CONFIG_DIR = tmp_path
        mgr.DEFAULT_CONFIG = tmp_path / "inventory_config.yaml"

        config = default_config()
        config.institution_name = "Gesamtschule Nord"
        config.session.current_user_display_name = "Frau Schmidt"
        mgr.save(config)

        loaded = mgr.load()
        assert loaded == config
        text = mgr.DEFAULT_CONFIG.read_text(encoding="utf-8")
        assert "Labor-Inventar" in text
        assert "Start-Räume" in text

    def test_first_run_check_no_file(self, tmp_path: Path):
        mgr = ConfigManager()
        mgr.DEFAULT_CONFIG = tmp_path / "nonexistent.yaml"
        assert mgr.first_run_check() is True

    def test_first_run_check_with_file(self, tmp_path: Path):
        mgr = ConfigManager()
        mgr.DEFAULT_CONFIG = tmp_path / "inventory_config.yaml"
        mgr.save(default_config())
        assert mgr.first_run_check() is False

    def test_load_missing_raises(self, tmp_path: Path):
        mgr = ConfigManager()
        with pytest.raises(FileNotFoundError):
            mgr.load(tmp_path / "fehlt.yaml")

    def test_load_invalid_raises_value_error(self, tmp_path: Path):
        path = tmp_path / "kaputt.yaml"
        path.write_text("layout:\n  grid_columns: 99\n", encoding="utf-8")
        with pytest.raises(ValueError):
            ConfigManager().load(path)

    def test_load_or_default(self, tmp_path: Path):
        config = ConfigManager().load_or_default(tmp_path / "fehlt.yaml")
        assert len(config.initial_rooms) == 4


# ─── SITZUNG ──────────────────────────────────────────────────────────────────

class TestSession:
    def test_open_with_memory_persistence(self):
        config = default_config()
        config.session.current_user_display_name = "Herr Weber"
        session = InventorySession.open(config, persistence=MemoryPersistence())

        assert [r.id for r in session.store.rooms] == [r.id for r in config.initial_rooms]
        assert session.ledger.requests == []
        assert session.current_user_display_name == "Herr Weber"
        assert session.operations.store is session.store

    def test_open_uses_data_dir(self, tmp_path: Path):
        config = default_config()
        config.persistence.data_dir = str(tmp_path / "daten")
        session = InventorySession.open(config)
        session.store.add_containers("lab-phy", "cupboard")
        assert (tmp_path / "daten" / "inventory_rooms.json").exists()
