"""
Tests for ShoppingListStore (list + history persistence).
"""

from datetime import timedelta

import pytest

from voice_cart.catalog import get_inventory_item
from voice_cart.models import HistoryEntry, ShoppingListItem
from voice_cart.services.shopping_list import make_item_id


class TestAddItem:
    """Adding entries and recording history."""

    def test_newest_first(self, store):
        store.add_item("milk")
        store.add_item("bread")
        assert [item.name for item in store.list_items()] == ["bread", "milk"]

    def test_categorized_when_no_category(self, store):
        item = store.add_item("water", 2, "bottles")
        assert item.category == "beverages"
        assert item.quantity == 2
        assert item.unit == "bottles"

    def test_explicit_category_kept(self, store):
        assert store.add_item("paper towels", category="pantry").category == "pantry"

    def test_non_positive_quantity_defaults_to_one(self, store):
        assert store.add_item("milk", 0).quantity == 1

    def test_blank_name_rejected(self, store):
        with pytest.raises(ValueError):
            store.add_item("   ")
        assert store.list_items() == []

    def test_id_starts_with_name(self, store, clock):
        item = store.add_item("milk")
        assert item.id.startswith("milk-")
        assert item.created_at == clock.now - timedelta(seconds=1)

    def test_ids_unique_for_same_name_and_time(self, clock):
        now = clock()
        assert make_item_id("milk", now) != make_item_id("milk", now)

    def test_history_counts_adds(self, store, db_session, clock):
        store.add_item("milk")
        store.add_item("bread")
        store.add_item("milk")

        entry = db_session.get(HistoryEntry, "milk")
        assert entry.add_count == 2
        assert entry.last_added_at == clock.now - timedelta(seconds=1)
        assert db_session.get(HistoryEntry, "bread").add_count == 1

    def test_history_survives_removal(self, store, db_session):
        item = store.add_item("milk")
        store.remove_item(item.id)
        assert store.list_items() == []
        assert db_session.get(HistoryEntry, "milk").add_count == 1

    def test_history_most_recent_first(self, store):
        store.add_item("milk")
        store.add_item("bread")
        assert [entry.name for entry in store.history()] == ["bread", "milk"]

    def test_add_inventory_item_keeps_catalog_category(self, store):
        # categorize("orange juice") would say produce
        item = store.add_inventory_item(get_inventory_item("inv-15"))
        assert item.name == "orange juice"
        assert item.category == "beverages"
        assert item.quantity == 1


class TestRemoval:
    """Removing entries by id, index and recency."""

    def test_remove_item_by_id(self, store):
        milk = store.add_item("milk")
        store.add_item("bread")
        removed = store.remove_item(milk.id)
        assert removed.name == "milk"
        assert [item.name for item in store.list_items()] == ["bread"]

    def test_remove_unknown_id(self, store):
        assert store.remove_item("nope") is None

    def test_remove_at_index(self, store):
        store.add_item("milk")
        store.add_item("bread")
        store.add_item("eggs")
        removed = store.remove_at(1)
        assert removed.name == "bread"
        assert [item.name for item in store.list_items()] == ["eggs", "milk"]

    def test_remove_at_out_of_range(self, store):
        store.add_item("milk")
        assert store.remove_at(1) is None
        assert store.remove_at(-1) is None
        assert len(store.list_items()) == 1

    def test_remove_newest(self, store):
        store.add_item("milk")
        store.add_item("bread")
        assert store.remove_newest().name == "bread"
        assert [item.name for item in store.list_items()] == ["milk"]

    def test_remove_newest_on_empty_list(self, store):
        assert store.remove_newest() is None

    def test_removed_entry_is_readable(self, store):
        store.add_item("milk", 2, "liters")
        removed = store.remove_newest()
        assert removed.to_dict()["quantity"] == 2
        assert removed.to_dict()["unit"] == "liters"

    def test_remove_group(self, store):
        store.add_item("milk")
        store.add_item("bread")
        store.add_item("milk", 2)
        assert store.remove_group("milk", "dairy") == 2
        assert [item.name for item in store.list_items()] == ["bread"]

    def test_remove_group_needs_matching_category(self, store):
        store.add_item("milk")
        assert store.remove_group("milk", "beverages") == 0
        assert len(store.list_items()) == 1


class TestConsolidated:
    """Grouped display view."""

    def test_groups_by_name_and_category(self, store):
        store.add_item("milk", 1)
        store.add_item("bread", 1)
        store.add_item("milk", 2)

        groups = store.consolidated()
        assert [(g.name, g.quantity, g.count) for g in groups] == [
            ("milk", 3, 2),
            ("bread", 1, 1),
        ]
        assert len(groups[0].ids) == 2

    def test_same_name_different_category_not_merged(self, store):
        store.add_item("milk")
        store.add_item("milk", category="beverages")
        assert len(store.consolidated()) == 2

    def test_projection_does_not_modify_rows(self, store, db_session):
        store.add_item("milk")
        store.add_item("milk")
        store.consolidated()
        assert db_session.query(ShoppingListItem).count() == 2


class TestSuggestions:
    def test_recent_from_list(self, store):
        store.add_item("milk")
        store.add_item("bread")
        assert [(s.name, s.type) for s in store.suggestions()] == [
            ("bread", "recent"),
            ("milk", "recent"),
        ]

    def test_stale_history_uses_store_clock(self, store, clock):
        item = store.add_item("rice")
        store.remove_item(item.id)
        clock.now += timedelta(days=10)
        assert [(s.name, s.type) for s in store.suggestions()] == [("rice", "frequent")]
