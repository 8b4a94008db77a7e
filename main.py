"""Labor-Inventar: Haupt-CLI.

Verwendung:
  python main.py init                          Konfiguration anlegen
  python main.py seed                          Demo-Bestand erzeugen
  python main.py rooms                         Räume auflisten
  python main.py show <raum-id>                Container und Items eines Raums
  python main.py stats                         Übersicht + Aktivitäts-Feed
  python main.py transfer <ziel-raum> <ziel-container> <item-id>...
  python main.py pending                       Offene Transfer-Verifikationen
  python main.py verify <log-id> <zustand>     Transfer verifizieren
  python main.py checkout <item-id>... --borrower NAME
  python main.py checkin <item-id>... --borrower NAME
  python main.py loans                         Aktuelle Ausleihen
  python main.py report <item-id> <beschreibung>
  python main.py requests list                 Service-Anfragen
  python main.py requests accept <id>
  python main.py requests deny <id> <grund>
  python main.py requests complete <id> repaired|broken
"""

import logging
import sys
from functools import wraps

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

from models.item_state import ItemCondition
from models.service_request import RequestStatus

console = Console()

_CONDITION_CHOICE = click.Choice([c.value for c in ItemCondition])

_CONDITION_STYLE = {
    ItemCondition.GOOD: "green",
    ItemCondition.SERVICE: "yellow",
    ItemCondition.DAMAGED: "magenta",
    ItemCondition.BROKEN: "red",
}

_STATUS_STYLE = {
    RequestStatus.PENDING: "yellow",
    RequestStatus.ACCEPTED: "cyan",
    RequestStatus.COMPLETED: "green",
    RequestStatus.DENIED: "red",
}


def _setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _load_config_or_abort():
    """Lädt die Konfiguration oder bricht mit Fehlermeldung ab."""
    from config.manager import ConfigManager
    mgr = ConfigManager()
    if mgr.first_run_check():
        console.print(
            "[red]Keine Konfiguration gefunden.[/red]\n"
            "Führen Sie zunächst [bold]python main.py init[/bold] aus."
        )
        sys.exit(1)
    try:
        config = mgr.load()
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    _setup_logging(config.logging.level.value)
    return mgr, config


def _open_session():
    from inventory.session import InventorySession
    _, config = _load_config_or_abort()
    try:
        return InventorySession.open(config)
    except ValueError as e:
        # Beschädigte Datendateien (ungültiges JSON, nicht lesbare Log-Details)
        console.print(f"[red]Bestand konnte nicht geladen werden:[/red] {e}")
        sys.exit(1)


def _handle_inventory_errors(func):
    """Fachliche Fehler als rote Meldung ausgeben und mit Code 1 beenden."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        from inventory.errors import InventoryError
        try:
            return func(*args, **kwargs)
        except InventoryError as e:
            console.print(f"[red]✗ {type(e).__name__}:[/red] {e}")
            sys.exit(1)
    return wrapper


def _condition_cell(condition: ItemCondition) -> str:
    style = _CONDITION_STYLE.get(condition, "white")
    return f"[{style}]{condition.value}[/{style}]"


# ─── INIT / SEED ──────────────────────────────────────────────────────────────

@click.command("init")
@click.option("--name", "institution_name", default=None, help="Name der Einrichtung")
@click.option("--user", "user_name", default=None, help="Anzeigename des Bedieners")
def cmd_init(institution_name, user_name):
    """Legt die Konfiguration mit den Standard-Laboren an."""
    from config.defaults import default_config
    from config.manager import ConfigManager

    mgr = ConfigManager()
    if not mgr.first_run_check():
        console.print("[yellow]Eine Konfiguration existiert bereits.[/yellow]")
        if not click.confirm("Überschreiben?", default=False):
            return

    config = default_config()
    if institution_name:
        config.institution_name = institution_name
    if user_name:
        config.session.current_user_display_name = user_name
    mgr.save(config)
    console.print("Führen Sie jetzt [bold]python main.py seed[/bold] aus, um Demo-Daten zu erzeugen.")


@click.command("seed")
@click.option("--seed", default=42, show_default=True, help="Zufalls-Seed")
@click.option("--stations", default=6, show_default=True, help="Arbeitsplätze pro Computerraum")
@click.option("--force", is_flag=True, help="Vorhandenen Bestand überschreiben")
def cmd_seed(seed: int, stations: int, force: bool):
    """Erzeugt einen Demo-Bestand und speichert ihn als Raum-Dokument."""
    from data.seed_data import SeedDataGenerator

    session = _open_session()
    if session.store.rooms and any(r.containers for r in session.store.rooms) and not force:
        console.print(
            "[yellow]Es existiert bereits ein Bestand.[/yellow] "
            "Mit [bold]--force[/bold] überschreiben."
        )
        return

    gen = SeedDataGenerator(session.config, seed=seed, stations_per_room=stations)
    rooms = gen.generate()
    session.store.commit(rooms)
    gen.print_summary(rooms)
    console.print(f"[green]✓[/green] Demo-Bestand gespeichert ({len(rooms)} Räume)")


# ─── LESEN ────────────────────────────────────────────────────────────────────

@click.command("rooms")
def cmd_rooms():
    """Listet alle Räume mit Bewertung auf."""
    from analysis.statistics import room_health

    session = _open_session()
    table = Table(title=session.config.institution_name, box=box.ROUNDED)
    table.add_column("ID", style="bold cyan")
    table.add_column("Name")
    table.add_column("Typ")
    table.add_column("Plätze", justify="right")
    table.add_column("Container", justify="right")
    table.add_column("Items", justify="right")
    table.add_column("Bewertung", justify="right")

    rooms = session.store.rooms
    health = {h.room_id: h for h in room_health(rooms)}
    for room in rooms:
        table.add_row(
            room.id, room.name, room.display_type, str(room.capacity),
            str(len(room.containers)), str(room.item_count),
            f"{health[room.id].grading}/100",
        )
    console.print(table)


@click.command("show")
@click.argument("room_id")
@_handle_inventory_errors
def cmd_show(room_id: str):
    """Zeigt Container und Items eines Raums."""
    from inventory.errors import NotFoundError

    session = _open_session()
    room = session.store.get_room(room_id)
    if room is None:
        raise NotFoundError(f"Raum '{room_id}' nicht gefunden.")

    console.print(Panel(
        f"[bold]{room.name}[/bold]  |  {room.display_type}  |  {room.capacity} Plätze",
        title=room.id,
        border_style="cyan",
    ))
    for container in room.containers:
        label = "Station" if container.is_station else container.container_type.value
        table = Table(
            title=f"{container.name} ({label}, {container.position.x}/{container.position.y})",
            box=box.SIMPLE,
        )
        table.add_column("ID", style="dim")
        table.add_column("Name")
        table.add_column("Kategorie")
        table.add_column("Zustand")
        table.add_column("Status")
        table.add_column("Bestand", justify="right")
        for item in container.items:
            stock = ""
            if item.is_consumable:
                stock = f"{item.quantity or 0} {item.unit or ''}".strip()
                if item.is_low_stock:
                    stock = f"[red]{stock}[/red]"
            table.add_row(
                item.id, item.name, item.effective_category,
                _condition_cell(item.condition), item.status.value, stock,
            )
        console.print(table)


@click.command("stats")
@click.option("--limit", default=None, type=int, help="Einträge im Aktivitäts-Feed")
def cmd_stats(limit):
    """Übersicht: Räume, Assets, Zustände, Bewertung und letzte Aktivität."""
    from analysis.activity import find_low_stock

    session = _open_session()
    stats = session.store.compute_stats()
    stats.print_rich(feed_limit=limit or session.config.activity.feed_limit)

    low = find_low_stock(session.store.rooms)
    if low:
        console.print(f"\n[bold red]{len(low)} Verbrauchsmaterial(ien) unter Mindestbestand:[/bold red]")
        for ctx in low:
            console.print(
                f"  • {ctx.item.name} ({ctx.room_name} - {ctx.container_name}): "
                f"{ctx.item.quantity or 0}/{ctx.item.min_stock} {ctx.item.unit or ''}"
            )


# ─── TRANSFER / VERIFIKATION ──────────────────────────────────────────────────

@click.command("transfer")
@click.argument("target_room_id")
@click.argument("target_container_id")
@click.argument("item_ids", nargs=-1, required=True)
@click.option("--mover", default="", help="Abgebende Person")
@click.option("--receiver", default="", help="Neue verantwortliche Person")
@click.option("--condition", type=_CONDITION_CHOICE, default="good", show_default=True,
              help="Zustand vor dem Transfer")
@_handle_inventory_errors
def cmd_transfer(target_room_id, target_container_id, item_ids, mover, receiver, condition):
    """Verschiebt Items in einen anderen Container (Verifikation folgt)."""
    session = _open_session()
    result = session.operations.transfer(
        item_ids, target_room_id, target_container_id,
        mover=mover or session.current_user_display_name,
        receiver=receiver,
        condition_before=condition,
    )
    console.print(f"[green]✓[/green] {len(result.item_ids)} Item(s) nach {result.destination} verschoben")
    for log_id in result.log_ids:
        console.print(f"  Verifikation ausstehend: [bold]{log_id}[/bold]")


@click.command("pending")
def cmd_pending():
    """Offene Transfer-Verifikationen."""
    session = _open_session()
    pending = session.operations.pending_verifications()
    if not pending:
        console.print("[green]Keine offenen Verifikationen.[/green]")
        return
    table = Table(title="Offene Verifikationen", box=box.ROUNDED)
    table.add_column("Log-ID", style="bold")
    table.add_column("Item")
    table.add_column("Von")
    table.add_column("Nach")
    table.add_column("Datum")
    for p in pending:
        table.add_row(
            p.log.id, p.item_name, p.log.details.source, p.destination,
            p.log.date.strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


@click.command("verify")
@click.argument("log_id")
@click.argument("condition", type=_CONDITION_CHOICE)
@_handle_inventory_errors
def cmd_verify(log_id, condition):
    """Bestätigt einen Transfer mit dem am Ziel geprüften Zustand."""
    session = _open_session()
    log = session.operations.verify_transfer(log_id, condition)
    console.print(f"[green]✓[/green] Transfer {log.id} verifiziert ({condition})")


# ─── AUSLEIHE ─────────────────────────────────────────────────────────────────

@click.command("checkout")
@click.argument("item_ids", nargs=-1, required=True)
@click.option("--borrower", required=True, help="Ausleihende Person")
@click.option("--purpose", default="", help="Zweck")
@click.option("--condition", type=_CONDITION_CHOICE, default="good", show_default=True)
@_handle_inventory_errors
def cmd_checkout(item_ids, borrower, purpose, condition):
    """Leiht Items aus (alle müssen verfügbar sein)."""
    session = _open_session()
    result = session.operations.checkout(item_ids, borrower, purpose, condition)
    console.print(f"[green]✓[/green] {len(result.item_ids)} Item(s) an {borrower} ausgeliehen")


@click.command("checkin")
@click.argument("item_ids", nargs=-1, required=True)
@click.option("--borrower", required=True, help="Zurückgebende Person")
@click.option("--purpose", default="", help="Bemerkung")
@click.option("--condition", type=_CONDITION_CHOICE, default="good", show_default=True,
              help="Zustand bei Rückgabe")
@_handle_inventory_errors
def cmd_checkin(item_ids, borrower, purpose, condition):
    """Nimmt ausgeliehene Items zurück."""
    session = _open_session()
    result = session.operations.checkin(item_ids, borrower, purpose, condition)
    console.print(f"[green]✓[/green] {len(result.item_ids)} Item(s) zurückgenommen")


@click.command("loans")
def cmd_loans():
    """Aktuell ausgeliehene Items."""
    session = _open_session()
    loans = session.operations.active_loans()
    if not loans:
        console.print("[green]Keine aktiven Ausleihen.[/green]")
        return
    table = Table(title="Aktive Ausleihen", box=box.ROUNDED)
    table.add_column("Item")
    table.add_column("Ort")
    table.add_column("Ausgeliehen an")
    for ctx in loans:
        last = next((l for l in ctx.item.logs if l.action == "CHECK_OUT"), None)
        borrower = last.details.borrower if last else "?"
        table.add_row(ctx.item.name, f"{ctx.room_name} - {ctx.container_name}", borrower)
    console.print(table)


# ─── SERVICE-ANFRAGEN ─────────────────────────────────────────────────────────

@click.command("report")
@click.argument("item_id")
@click.argument("description")
@_handle_inventory_errors
def cmd_report(item_id, description):
    """Meldet ein Problem an einem Item (Anfrage + Zustand 'service')."""
    session = _open_session()
    request = session.operations.report_issue(item_id, description)
    console.print(f"[green]✓[/green] Service-Anfrage [bold]{request.id}[/bold] angelegt")


@click.group("requests")
def cmd_requests():
    """Service-Anfragen anzeigen und bearbeiten."""


@cmd_requests.command("list")
@click.option("--status", type=click.Choice([s.value for s in RequestStatus]), default=None)
@click.option("--search", default="", help="Suchbegriff")
def requests_list(status, search):
    """Listet Service-Anfragen (neueste zuerst)."""
    session = _open_session()
    requests = session.ledger.filter_requests(status, search)
    if not requests:
        console.print("[dim]Keine Anfragen.[/dim]")
        return
    table = Table(title="Service-Anfragen", box=box.ROUNDED)
    table.add_column("ID", style="bold")
    table.add_column("Status")
    table.add_column("Komponente")
    table.add_column("Station")
    table.add_column("Beschreibung")
    table.add_column("Datum")
    for req in requests:
        style = _STATUS_STYLE[req.status]
        table.add_row(
            req.id, f"[{style}]{req.status.value}[/{style}]",
            req.component_name, req.station_name, req.description,
            req.request_date.strftime("%Y-%m-%d"),
        )
    console.print(table)


@cmd_requests.command("accept")
@click.argument("request_id")
@_handle_inventory_errors
def requests_accept(request_id):
    """Nimmt eine Anfrage an."""
    session = _open_session()
    session.ledger.accept(request_id)
    console.print(f"[green]✓[/green] Anfrage {request_id} angenommen")


@cmd_requests.command("deny")
@click.argument("request_id")
@click.argument("reason")
@_handle_inventory_errors
def requests_deny(request_id, reason):
    """Lehnt eine Anfrage mit Begründung ab."""
    session = _open_session()
    session.ledger.deny(request_id, reason)
    console.print(f"[green]✓[/green] Anfrage {request_id} abgelehnt")


@cmd_requests.command("complete")
@click.argument("request_id")
@click.argument("outcome", type=click.Choice(["repaired", "broken"]))
@_handle_inventory_errors
def requests_complete(request_id, outcome):
    """Schließt eine angenommene Anfrage ab und setzt den Item-Zustand."""
    session = _open_session()
    session.operations.resolve_request(request_id, outcome)
    console.print(f"[green]✓[/green] Anfrage {request_id} abgeschlossen ({outcome})")


# ─── CLI ──────────────────────────────────────────────────────────────────────

@click.group()
def cli():
    """Inventarverwaltung für Schul-Labore.

    Starten Sie mit: python main.py init
    """


def main():
    """Einstiegspunkt. Legt beim ersten Aufruf ohne Argumente die Konfiguration an."""
    from config.manager import ConfigManager
    mgr = ConfigManager()

    if len(sys.argv) == 1 and mgr.first_run_check():
        console.print(Panel(
            "[bold]Willkommen beim Labor-Inventar![/bold]\n\n"
            "Keine Konfiguration gefunden.\n"
            "Die Standard-Konfiguration wird jetzt angelegt...",
            border_style="cyan",
        ))
        sys.argv.append("init")

    cli()


# Befehle registrieren
cli.add_command(cmd_init)
cli.add_command(cmd_seed)
cli.add_command(cmd_rooms)
cli.add_command(cmd_show)
cli.add_command(cmd_stats)
cli.add_command(cmd_transfer)
cli.add_command(cmd_pending)
cli.add_command(cmd_verify)
cli.add_command(cmd_checkout)
cli.add_command(cmd_checkin)
cli.add_command(cmd_loans)
cli.add_command(cmd_report)
cli.add_command(cmd_requests)


if __name__ == "__main__":
    main()
