"""Auswertungen: Kennzahlen, Aktivitäts-Feed und abgeleitete Listen (nur lesend)."""

from analysis.statistics import (
    ActivityEntry,
    HealthTally,
    InventoryStats,
    RoomHealth,
    compute_stats,
    grading_score,
    room_health,
)
from analysis.activity import (
    ItemContext,
    PendingVerification,
    filter_activity,
    find_active_loans,
    find_low_stock,
    find_pending_verifications,
    search_items,
)

__all__ = [
    "ActivityEntry",
    "HealthTally",
    "InventoryStats",
    "RoomHealth",
    "compute_stats",
    "grading_score",
    "room_health",
    "ItemContext",
    "PendingVerification",
    "filter_activity",
    "find_active_loans",
    "find_low_stock",
    "find_pending_verifications",
    "search_items",
]
