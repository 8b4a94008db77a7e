"""Konfigurationsmanager: Laden, Speichern und Validieren der Inventar-Konfiguration.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.schema import InventoryConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

_YAML_HEADER = f"""\
# ============================================
# Labor-Inventar: Konfiguration
# Version: 1.0
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "persistence": (
        "Persistenz",
        "Ein JSON-Dokument pro Ledger. raise_on_error: Speicherfehler melden\n"
        "(die Änderung im Speicher bleibt in jedem Fall bestehen).",
    ),
    "session": (
        "Sitzung",
        None,
    ),
    "layout": (
        "Raum-Layout",
        None,
    ),
    "activity": (
        "Aktivitäts-Feed",
        None,
    ),
    "logging": (
        "Logging",
        None,
    ),
    "initial_rooms": (
        "Start-Räume",
        "Werden nur angelegt, wenn noch kein Raum-Dokument existiert.",
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "inventory_config.yaml"

    def first_run_check(self) -> bool:
        """Gibt True zurück wenn noch keine Config existiert (Erstaufruf)."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> InventoryConfig:
        """Lade Config aus YAML. Validiert automatisch via Pydantic."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py init' aus, um die Konfiguration anzulegen."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return InventoryConfig.model_validate(dict(raw or {}))
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    def load_or_default(self, path: Optional[Path] = None) -> InventoryConfig:
        """Wie ``load``, aber mit Standard-Config wenn die Datei fehlt."""
        from config.defaults import default_config
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            return default_config()
        return self.load(target)

    # ─── Speichern ───

    def save(self, config: InventoryConfig, path: Optional[Path] = None) -> None:
        """Speichere Config als YAML mit deutschen Kommentaren."""
        target = path or self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")

    def _build_commented_yaml(self, config: InventoryConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            if field not in cm:
                continue
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )

        # Inline-Kommentar für den Anzeigenamen
        if "session" in cm:
            session_map = CommentedMap(cm["session"])
            session_map.yaml_add_eol_comment(
                "wird als requesterName eingetragen", "current_user_display_name"
            )
            cm["session"] = session_map

        return cm
