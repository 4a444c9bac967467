"""
Shopping List Store for Voice Cart
==================================

This module owns the two mutable collections the interpreter reasons about:
the shopping list (newest first) and the per-name add history. The
interpreter itself is stateless; routes build a ShoppingListStore around the
request's database session and hand it to the command dispatcher.

Key Operations:
---------------
- list_items: Current list, newest first
- add_item / add_inventory_item: Insert a row and bump the name's history
- remove_item / remove_at / remove_newest: Remove one row by id, index or head
- remove_group: Remove every row sharing a name + category (consolidated view)
- consolidated: Read-only grouping with summed quantities and add counts
- suggestions: Follow-up suggestions from the list and history

Concurrency:
------------
Callers serialize mutations: one command is fully applied (and committed)
before the next is parsed. Each mutating method commits its own transaction.
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ..catalog import InventoryItem, categorize
from ..models import HistoryEntry, ShoppingListItem
from ..suggestions import Suggestion, suggestions_from_history


logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (what SQLite stores)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def make_item_id(name: str, created_at: datetime) -> str:
    """Build a list item id from its name and creation time."""
    epoch_ms = int(created_at.replace(tzinfo=timezone.utc).timestamp() * 1000)
    return f"{name}-{epoch_ms}-{uuid.uuid4().hex[:6]}"


@dataclass
class ConsolidatedItem:
    """Display row: every list entry with the same name and category."""
    name: str
    category: str
    quantity: float
    unit: Optional[str]
    count: int
    ids: list = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "category": self.category,
            "quantity": self.quantity,
            "unit": self.unit,
            "count": self.count,
            "ids": list(self.ids),
        }


class ShoppingListStore:
    """
    Shopping list and add history backed by a SQLAlchemy session.

    Args:
        db: Database session (one per request)
        clock: Returns "now"; injectable for tests
    """

    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_items(self) -> list[ShoppingListItem]:
        """All list entries, newest first."""
        return (
            self.db.query(ShoppingListItem)
            .order_by(ShoppingListItem.seq.desc())
            .all()
        )

    def get_item(self, item_id: str) -> Optional[ShoppingListItem]:
        return self.db.query(ShoppingListItem).filter_by(id=item_id).one_or_none()

    def history(self) -> list[HistoryEntry]:
        """History entries, most recently added first."""
        return (
            self.db.query(HistoryEntry)
            .order_by(HistoryEntry.last_added_at.desc())
            .all()
        )

    def consolidated(self) -> list[ConsolidatedItem]:
        """
        Group list entries by name + category for display.

        Quantities are summed and the number of add events counted. This is a
        projection: the underlying rows are not modified.
        """
        groups: dict[tuple, ConsolidatedItem] = {}
        for item in self.list_items():
            key = (item.name, item.category)
            group = groups.get(key)
            if group is None:
                groups[key] = ConsolidatedItem(
                    name=item.name,
                    category=item.category,
                    quantity=item.quantity,
                    unit=item.unit,
                    count=1,
                    ids=[item.id],
                )
            else:
                group.quantity += item.quantity
                group.count += 1
                group.ids.append(item.id)
        return sorted(groups.values(), key=lambda g: g.count, reverse=True)

    def suggestions(self) -> list[Suggestion]:
        return suggestions_from_history(self.history(), self.list_items(), now=self.clock())

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_item(
        self,
        name: str,
        quantity: float = 1,
        unit: Optional[str] = None,
        category: Optional[str] = None,
    ) -> ShoppingListItem:
        """
        Add an entry to the top of the list and record it in the history.

        Args:
            name: Item name (already extracted/trimmed)
            quantity: Positive quantity (default 1)
            unit: Optional unit token
            category: Category; derived with categorize() when omitted

        Returns:
            The new ShoppingListItem
        """
        name = name.strip()
        if not name:
            raise ValueError("Item name must not be empty")
        if quantity is None or quantity <= 0:
            quantity = 1

        now = self.clock()
        item = ShoppingListItem(
            id=make_item_id(name, now),
            name=name,
            quantity=float(quantity),
            unit=unit or None,
            category=category or categorize(name),
            created_at=now,
        )
        self.db.add(item)
        self._record_history(name, now)
        self.db.commit()
        self.db.refresh(item)

        logger.info("Added %s x%s (%s)", item.name, item.quantity, item.category)
        return item

    def add_inventory_item(self, inventory_item: InventoryItem) -> ShoppingListItem:
        """Add one of a catalog product, keeping its catalog category."""
        return self.add_item(inventory_item.name, 1, None, inventory_item.category)

    def remove_item(self, item_id: str) -> Optional[ShoppingListItem]:
        """Remove an entry by id. Returns the removed entry or None."""
        item = self.get_item(item_id)
        if item is None:
            return None
        return self._delete(item)

    def remove_at(self, index: int) -> Optional[ShoppingListItem]:
        """Remove the entry at a 0-based position of the newest-first list."""
        if index is None or index < 0:
            return None
        items = self.list_items()
        if index >= len(items):
            return None
        return self._delete(items[index])

    def remove_newest(self) -> Optional[ShoppingListItem]:
        """Remove the most recently added entry (the list head)."""
        item = (
            self.db.query(ShoppingListItem)
            .order_by(ShoppingListItem.seq.desc())
            .first()
        )
        if item is None:
            return None
        return self._delete(item)

    def remove_group(self, name: str, category: str) -> int:
        """Remove every entry with this name and category. Returns the count removed."""
        removed = (
            self.db.query(ShoppingListItem)
            .filter_by(name=name, category=category)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        logger.info("Removed %d entr%s of %s (%s)", removed, "y" if removed == 1 else "ies", name, category)
        return removed

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _delete(self, item: ShoppingListItem) -> ShoppingListItem:
        # Deleted rows are expired on commit; hand back an unattached copy
        removed = ShoppingListItem(
            seq=item.seq,
            id=item.id,
            name=item.name,
            quantity=item.quantity,
            unit=item.unit,
            category=item.category,
            created_at=item.created_at,
        )
        self.db.delete(item)
        self.db.commit()
        logger.info("Removed %s (%s)", removed.name, removed.id)
        return removed

    def _record_history(self, name: str, when: datetime) -> HistoryEntry:
        entry = self.db.get(HistoryEntry, name)
        if entry is None:
            entry = HistoryEntry(name=name, add_count=1, last_added_at=when)
            self.db.add(entry)
        else:
            entry.add_count = (entry.add_count or 0) + 1
            entry.last_added_at = when
        return entry
