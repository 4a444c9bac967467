"""
Command Dispatcher.

Applies an interpreted Command to the shopping list store and the static
catalog. Misses (empty target, no match, nothing in stock) are reported as
unsuccessful outcomes with a message; they never raise.
"""

import logging

from .catalog import get_category_items, search_inventory
from .interpreter import find_best_removal_match, interpret
from .schemas.commands import ActionKind, Command, CommandOutcome
from .services.shopping_list import ShoppingListStore

logger = logging.getLogger(__name__)

NO_TEXT_MESSAGE = "No text detected. Please try speaking more clearly."
NO_TARGET_MESSAGE = "Didn't catch an item name"


def _format_price(value: float) -> str:
    return f"{value:g}"


def apply_command(command: Command, store: ShoppingListStore) -> CommandOutcome:
    """
    Apply one Command.

    Args:
        command: Interpreter output
        store: Shopping list store for the current request

    Returns:
        CommandOutcome describing what changed (or why nothing did)
    """
    if command.action == ActionKind.SEARCH:
        return _search(command)

    if command.action == ActionKind.INVENTORY:
        return _check_inventory(command)

    if command.action == ActionKind.CATEGORY:
        return _browse_category(command)

    if not command.has_target:
        logger.debug("No target in %r, nothing to apply", command.raw)
        return CommandOutcome(action=command.action, success=False, message=NO_TARGET_MESSAGE)

    if command.action == ActionKind.REMOVE:
        return _remove(command, store)

    return _add(command, store)


def interpret_and_apply(text: str | None, language: str | None, store: ShoppingListStore) -> tuple[Command | None, CommandOutcome]:
    """
    Interpret a transcript and apply it.

    An empty or whitespace-only transcript is not interpreted at all; the
    returned command is None.
    """
    if not text or not text.strip():
        return None, CommandOutcome(success=False, message=NO_TEXT_MESSAGE)

    command = interpret(text, language)
    return command, apply_command(command, store)


# =============================================================================
# Catalog Actions
# =============================================================================

def _search(command: Command) -> CommandOutcome:
    results = search_inventory(command.query, command.max_price)

    message = f"Search: {command.query or ''}"
    if command.max_price is not None:
        message += f" under ${_format_price(command.max_price)}"
    if results:
        message += f" ({len(results)} found)"
    else:
        message += " (no matching items)"

    return CommandOutcome(
        action=ActionKind.SEARCH,
        success=bool(results),
        message=message,
        results=[item.to_dict() for item in results],
    )


def _check_inventory(command: Command) -> CommandOutcome:
    results = search_inventory(command.item)
    if not results:
        return CommandOutcome(
            action=ActionKind.INVENTORY,
            success=False,
            message="Item not found in inventory",
        )

    available = [item.name for item in results if item.available]
    unavailable = [item.name for item in results if not item.available]
    parts = []
    if available:
        parts.append(f"Available: {', '.join(available)}.")
    if unavailable:
        parts.append(f"Out of stock: {', '.join(unavailable)}.")

    return CommandOutcome(
        action=ActionKind.INVENTORY,
        success=True,
        message=" ".join(parts),
        results=[item.to_dict() for item in results],
    )


def _browse_category(command: Command) -> CommandOutcome:
    results = get_category_items(command.item)
    if not results:
        return CommandOutcome(
            action=ActionKind.CATEGORY,
            success=False,
            message="No items found in that category",
        )
    return CommandOutcome(
        action=ActionKind.CATEGORY,
        success=True,
        message=f"Found {len(results)} items in {command.item} category",
        results=[item.to_dict() for item in results],
    )


# =============================================================================
# List Actions
# =============================================================================

def _add(command: Command, store: ShoppingListStore) -> CommandOutcome:
    item = store.add_item(command.item, command.quantity, command.unit)
    return CommandOutcome(
        action=ActionKind.ADD,
        success=True,
        message=f"Added {item.name}",
        item=item.to_dict(),
    )


def _removed(item) -> CommandOutcome:
    return CommandOutcome(
        action=ActionKind.REMOVE,
        success=True,
        message=f"Removed: {item.name}",
        item=item.to_dict(),
    )


def _remove(command: Command, store: ShoppingListStore) -> CommandOutcome:
    # Explicit index first, then "remove last", then fuzzy name match
    if command.remove_index is not None:
        removed = store.remove_at(command.remove_index)
        if removed is None:
            return CommandOutcome(action=ActionKind.REMOVE, success=False, message="No item at that number")
        return _removed(removed)

    if command.remove_last:
        removed = store.remove_newest()
        if removed is None:
            return CommandOutcome(action=ActionKind.REMOVE, success=False, message="List is empty")
        return _removed(removed)

    target = find_best_removal_match(store.list_items(), command.item)
    if target is None:
        logger.debug("No removal match for %r", command.item)
        return CommandOutcome(action=ActionKind.REMOVE, success=False, message="No matching item to remove")
    return _removed(store.remove_item(target.id))
