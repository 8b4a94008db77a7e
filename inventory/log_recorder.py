"""Erzeugt Historien-Einträge und stellt sie der Log-Liste eines Items voran.

Jede schreibende Operation nutzt diese Helfer, damit IDs, Zeitstempel und
Reihenfolge (neueste zuerst) überall gleich aussehen.
"""

import itertools
from datetime import datetime
from typing import Optional, Union

from models.base import utcnow
from models.item import Item
from models.item_log import ItemLog, LogAction, LogDetails

# Laufender Diskriminator gegen ID-Kollisionen innerhalb derselben Millisekunde
_sequence = itertools.count(1)


def _epoch_ms(when: datetime) -> int:
    return int(when.timestamp() * 1000)


def new_id(prefix: str, when: Optional[datetime] = None) -> str:
    """Eindeutige ID der Form ``<prefix>-<epoch-ms>-<seq>`` (z.B. ``req-1737370000000-4``)."""
    when = when or utcnow()
    return f"{prefix}-{_epoch_ms(when)}-{next(_sequence)}"


def new_log_id(item_id: str, when: Optional[datetime] = None) -> str:
    """Log-ID der Form ``log-<epoch-ms>-<item_id>-<seq>``."""
    when = when or utcnow()
    return f"log-{_epoch_ms(when)}-{item_id}-{next(_sequence)}"


def record(
    item: Item,
    action: Union[LogAction, str],
    details: LogDetails,
    when: Optional[datetime] = None,
) -> ItemLog:
    """Legt einen Eintrag an und stellt ihn ``item.logs`` voran.

    Args:
        item: Item, dessen Historie erweitert wird (wird in-place verändert).
        action: Aktions-Tag, z.B. ``LogAction.TRANSFER``.
        details: Zur Aktion passender Payload.
        when: Zeitstempel; Standard ist jetzt (UTC).

    Returns:
        Der neu angelegte Eintrag.
    """
    when = when or utcnow()
    action_tag = action.value if isinstance(action, LogAction) else action
    log = ItemLog(id=new_log_id(item.id, when), date=when, action=action_tag, details=details)
    item.logs.insert(0, log)
    return log
