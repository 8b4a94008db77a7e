"""Tests für Kennzahlen, Bewertung und abgeleitete Listen."""

from datetime import datetime, timedelta, timezone

import pytest

from analysis import (
    compute_stats,
    filter_activity,
    find_low_stock,
    find_pending_verifications,
    grading_score,
    room_health,
    search_items,
)
from models import (
    Container,
    Item,
    ItemCondition,
    ItemLog,
    NoteDetails,
    Room,
    TransferDetails,
    UsageDetails,
    VerificationStatus,
)

T0 = datetime(2025, 1, 10, 8, 0, tzinfo=timezone.utc)


def _log(log_id: str, minutes: int, action: str = "Reported") -> ItemLog:
    return ItemLog(id=log_id, date=T0 + timedelta(minutes=minutes), action=action,
                   details=NoteDetails(text=log_id))


def _rooms() -> list[Room]:
    return [
        Room(id="r1", name="Lab 1", containers=[
            Container(id="c1", name="Table 1", items=[
                Item(id="a", name="A", condition=ItemCondition.GOOD, logs=[_log("a2", 20), _log("a1", 5)]),
                Item(id="b", name="B", condition=ItemCondition.BROKEN, logs=[_log("b1", 10)]),
            ]),
        ]),
        Room(id="r2", name="Lab 2", containers=[
            Container(id="c2", name="Shelf 1", items=[
                Item(id="c", name="C", condition=ItemCondition.SERVICE),
                Item(id="d", name="D", condition=ItemCondition.GOOD, logs=[_log("d1", 15, "Maintenance")]),
            ]),
        ]),
        Room(id="r3", name="Leer"),
    ]


# ─── BEWERTUNG ────────────────────────────────────────────────────────────────

class TestGradingScore:
    def test_empty_inventory_scores_100(self):
        assert grading_score(0, 0) == 100

    @pytest.mark.parametrize("good,total,expected", [
        (1, 2, 50),
        (1, 3, 33),
        (2, 3, 67),
        (1, 8, 13),    # 12.5 → 13
        (5, 8, 63),    # 62.5 → 63
        (0, 4, 0),
        (4, 4, 100),
    ])
    def test_half_up_rounding(self, good, total, expected):
        assert grading_score(good, total) == expected


# ─── KENNZAHLEN ───────────────────────────────────────────────────────────────

class TestComputeStats:
    def test_empty(self):
        stats = compute_stats([])
        assert stats.total_rooms == 0
        assert stats.total_assets == 0
        assert stats.grading == 100
        assert stats.activity == []

    def test_counts(self):
        stats = compute_stats(_rooms())
        assert stats.total_rooms == 3
        assert stats.total_assets == 4
        assert stats.health.good == 2
        assert stats.health.service == 1
        assert stats.health.damaged == 0
        assert stats.health.broken == 1
        assert stats.health.total == 4
        assert stats.grading == 50

    def test_activity_newest_first(self):
        """Feed über alle Räume, nach Datum absteigend, mit Raum- und Item-Kontext."""
        stats = compute_stats(_rooms())
        assert [e.log.id for e in stats.activity] == ["a2", "d1", "b1", "a1"]
        assert stats.activity[1].room_name == "Lab 2"
        assert stats.activity[1].item_name == "D"
        assert [e.log.id for e in stats.recent(2)] == ["a2", "d1"]

    def test_input_not_modified(self):
        rooms = _rooms()
        before = [r.to_json_dict() for r in rooms]
        compute_stats(rooms)
        assert [r.to_json_dict() for r in rooms] == before

    def test_room_health(self):
        health = {h.room_id: h for h in room_health(_rooms())}
        assert health["r1"].grading == 50
        assert health["r2"].health.service == 1
        assert health["r3"].total_assets == 0
        assert health["r3"].grading == 100


# ─── ABGELEITETE LISTEN ───────────────────────────────────────────────────────

class TestDerivedLists:
    def test_low_stock(self):
        rooms = [Room(id="r", name="R", containers=[Container(id="c", name="C", items=[
            Item(id="low", name="Papier", is_consumable=True, quantity=3, min_stock=4),
            Item(id="ok", name="Kabel", is_consumable=True, quantity=12, min_stock=5),
            Item(id="tool", name="Multimeter", quantity=0, min_stock=1),
        ])])]
        assert [ctx.item.id for ctx in find_low_stock(rooms)] == ["low"]

    def test_pending_verifications_sorted(self):
        def transfer_log(log_id: str, minutes: int, status: VerificationStatus) -> ItemLog:
            return ItemLog(id=log_id, date=T0 + timedelta(minutes=minutes), action="TRANSFER",
                           details=TransferDetails(source="A", destination="B",
                                                   condition=ItemCondition.GOOD,
                                                   verification_status=status))

        rooms = [Room(id="r", name="R", containers=[Container(id="c", name="C", items=[
            Item(id="x", name="X", logs=[transfer_log("t1", 1, VerificationStatus.PENDING)]),
            Item(id="y", name="Y", logs=[
                transfer_log("t3", 3, VerificationStatus.PENDING),
                transfer_log("t2", 2, VerificationStatus.VERIFIED),
            ]),
        ])])]
        assert [p.log.id for p in find_pending_verifications(rooms)] == ["t3", "t1"]

    def test_search_items_by_name_or_id(self):
        rooms = _rooms()
        assert [ctx.item.id for ctx in search_items(rooms, "b")] == ["b"]
        assert [ctx.item.id for ctx in search_items(rooms, "C")] == ["c"]
        found = search_items(rooms, "d")[0]
        assert (found.room_id, found.container_id) == ("r2", "c2")

    def test_search_items_empty_term_returns_all(self):
        assert [ctx.item.id for ctx in search_items(_rooms(), "  ")] == ["a", "b", "c", "d"]


# ─── AKTIVITÄTS-FILTER ────────────────────────────────────────────────────────

class TestFilterActivity:
    @pytest.fixture
    def stats(self):
        usage = UsageDetails(borrower="Kim", condition=ItemCondition.GOOD)
        transfer = TransferDetails(source="A", destination="B", condition=ItemCondition.GOOD)
        rooms = [Room(id="r", name="R", containers=[Container(id="c", name="C", items=[
            Item(id="x", name="X", logs=[
                ItemLog(id="ret", date=T0 + timedelta(minutes=4), action="RETURNED", details=usage),
                ItemLog(id="out", date=T0 + timedelta(minutes=3), action="CHECK_OUT", details=usage),
                ItemLog(id="mv", date=T0 + timedelta(minutes=2), action="TRANSFER", details=transfer),
                _log("note", 1),
            ]),
        ])])]
        return compute_stats(rooms)

    def test_transfer(self, stats):
        assert [e.log.id for e in filter_activity(stats, "TRANSFER")] == ["mv"]

    def test_usage_keeps_order(self, stats):
        assert [e.log.id for e in filter_activity(stats, "usage")] == ["ret", "out"]

    @pytest.mark.parametrize("kind", [None, "ALL"])
    def test_all(self, stats, kind):
        assert [e.log.id for e in filter_activity(stats.activity, kind)] == ["ret", "out", "mv", "note"]

    def test_unknown_kind(self, stats):
        with pytest.raises(ValueError):
            filter_activity(stats, "REPAIR")
