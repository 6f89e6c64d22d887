"""Tests for the in-memory comparative store."""

from __future__ import annotations

import threading

import pytest

from src.comparison import editing
from src.comparison.models import Comparative
from src.comparison.store import ComparativeStore, VersionConflictError


def _make_comparative() -> Comparative:
    return Comparative(
        id="cmp",
        criteria=[{"id": "q", "type": "numeric", "weight": 100}],
        items=[
            {"id": "a", "name": "A", "order": 0, "values": {"q": {"value": 1}}},
            {"id": "b", "name": "B", "order": 1, "values": {"q": {"value": 2}}},
        ],
    )


class TestComparativeStore:
    def test_create_recomputes(self):
        store = ComparativeStore()
        stored = store.create(_make_comparative())
        assert stored.version == 1
        assert stored.winner_id == "b"
        assert "cmp" in store

    def test_create_twice_rejected(self):
        store = ComparativeStore()
        store.create(_make_comparative())
        with pytest.raises(ValueError):
            store.create(_make_comparative())

    def test_get_returns_copy(self):
        store = ComparativeStore()
        store.create(_make_comparative())
        snapshot = store.get("cmp")
        snapshot.items[0].name = "Changed"
        assert store.get("cmp").items[0].name != "Changed"

    def test_unknown_id(self):
        with pytest.raises(KeyError):
            ComparativeStore().get("missing")

    def test_mutate_bumps_version(self):
        store = ComparativeStore()
        store.create(_make_comparative())
        stored = store.mutate("cmp", lambda c: editing.set_item_value(c, "a", "q", 5))
        assert stored.version == 2
        assert stored.winner_id == "a"

    def test_stale_write_rejected(self):
        store = ComparativeStore()
        store.create(_make_comparative())
        store.mutate("cmp", editing.distribute_weights, expected_version=1)
        with pytest.raises(VersionConflictError) as excinfo:
            store.mutate("cmp", editing.distribute_weights, expected_version=1)
        assert excinfo.value.actual == 2
        assert store.get("cmp").version == 2

    def test_edit_cannot_change_id(self):
        store = ComparativeStore()
        store.create(_make_comparative())
        with pytest.raises(ValueError):
            store.mutate("cmp", lambda c: c.model_copy(update={"id": "other"}))

    def test_concurrent_mutations_serialized(self):
        store = ComparativeStore()
        store.create(_make_comparative())
        threads = [
            threading.Thread(
                target=store.mutate,
                args=("cmp", lambda c, n=n: editing.set_item_value(c, "a", "q", n)),
            )
            for n in range(10)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert store.get("cmp").version == 11

    def test_delete(self):
        store = ComparativeStore()
        store.create(_make_comparative())
        store.delete("cmp")
        assert "cmp" not in store

    def test_recreate_after_delete_shares_lock(self):
        store = ComparativeStore()
        store.create(_make_comparative())
        lock = store._lock_for("cmp")
        store.delete("cmp")
        store.create(_make_comparative())
        assert store._lock_for("cmp") is lock
        assert store.get("cmp").version == 1
