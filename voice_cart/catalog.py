"""
Catalog: Static Inventory, Category Taxonomy and Categorizer.

The inventory and the eight categories are process-wide constants. This module
answers read-only questions about them (search, category browsing, stock
checks) and assigns a category to free-text item names when they are added to
the shopping list.
"""

import logging
import re
from dataclasses import asdict, dataclass
from typing import Optional

from .interpreter.constants import nfc, normalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InventoryItem:
    """A stocked product."""
    id: str
    name: str
    category: str
    available: bool
    price: float
    location: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Category:
    """A browsable category with example item names."""
    name: str
    description: str
    examples: tuple

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "examples": list(self.examples),
        }


# =============================================================================
# Inventory
# =============================================================================

INVENTORY: tuple[InventoryItem, ...] = (
    InventoryItem("inv-1", "milk", "dairy", True, 2.99, "A1"),
    InventoryItem("inv-2", "bread", "grains", True, 1.49, "B2"),
    InventoryItem("inv-3", "apples", "produce", True, 3.99, "C3"),
    InventoryItem("inv-4", "chicken", "protein", True, 8.99, "D4"),
    InventoryItem("inv-5", "water", "beverages", True, 0.99, "E5"),
    InventoryItem("inv-6", "cheese", "dairy", False, 4.99, "A2"),
    InventoryItem("inv-7", "rice", "grains", True, 5.99, "B3"),
    InventoryItem("inv-8", "bananas", "produce", True, 2.49, "C4"),
    InventoryItem("inv-9", "eggs", "protein", True, 3.49, "D5"),
    InventoryItem("inv-10", "coffee", "beverages", False, 6.99, "E6"),
    InventoryItem("inv-11", "yogurt", "dairy", True, 3.49, "A3"),
    InventoryItem("inv-12", "pasta", "grains", True, 2.99, "B4"),
    InventoryItem("inv-13", "tomatoes", "produce", True, 2.99, "C5"),
    InventoryItem("inv-14", "beef", "protein", True, 12.99, "D6"),
    InventoryItem("inv-15", "orange juice", "beverages", True, 4.49, "E7"),
    InventoryItem("inv-16", "chips", "snacks", True, 3.99, "F1"),
    InventoryItem("inv-17", "cookies", "snacks", True, 2.99, "F2"),
    InventoryItem("inv-18", "frozen pizza", "frozen", True, 8.99, "G1"),
    InventoryItem("inv-19", "olive oil", "pantry", True, 7.99, "H1"),
    InventoryItem("inv-20", "salt", "pantry", True, 1.99, "H2"),
)


# =============================================================================
# Category Taxonomy
# =============================================================================

CATEGORIES: tuple[Category, ...] = (
    Category(
        "dairy", "Milk, cheese, yogurt, butter",
        ("milk", "cheese", "yogurt", "butter", "cream", "ice cream", "paneer"),
    ),
    Category(
        "produce", "Fresh fruits, vegetables, herbs",
        ("apples", "bananas", "tomatoes", "lettuce", "spinach", "onions", "potatoes"),
    ),
    Category(
        "grains", "Bread, rice, pasta, cereals, flour",
        ("bread", "rice", "pasta", "cereal", "flour", "oats", "quinoa"),
    ),
    Category(
        "protein", "Meat, fish, eggs, beans, nuts",
        ("chicken", "beef", "fish", "eggs", "beans", "nuts", "tofu"),
    ),
    Category(
        "beverages", "Drinks, juices, coffee, tea, water",
        ("water", "juice", "coffee", "tea", "soda", "milk", "smoothies"),
    ),
    Category(
        "snacks", "Chips, cookies, candies, nuts",
        ("chips", "cookies", "candy", "popcorn", "nuts", "chocolate", "crackers"),
    ),
    Category(
        "frozen", "Frozen meals, ice cream, frozen vegetables",
        ("frozen pizza", "ice cream", "frozen peas", "frozen fish", "frozen berries"),
    ),
    Category(
        "pantry", "Canned goods, spices, oils, condiments",
        ("canned beans", "olive oil", "salt", "pepper", "ketchup", "mustard", "sauce"),
    ),
)


# =============================================================================
# Hindi Aliases
# =============================================================================
# Exact lookups (after normalize) from Hindi/romanized names to catalog names,
# so "दूध उपलब्ध है" checks stock for "milk". Not a fuzzy fallback.

ITEM_ALIASES = {nfc(k): v for k, v in {
    "दूध": "milk", "doodh": "milk", "dudh": "milk",
    "ब्रेड": "bread", "डबल रोटी": "bread",
    "सेब": "apples", "seb": "apples",
    "मुर्गा": "chicken", "चिकन": "chicken",
    "पानी": "water", "pani": "water", "paani": "water",
    "पनीर": "cheese",
    "चावल": "rice", "chawal": "rice",
    "केला": "bananas", "केले": "bananas", "kela": "bananas", "kele": "bananas",
    "अंडा": "eggs", "अंडे": "eggs", "anda": "eggs", "ande": "eggs",
    "कॉफी": "coffee", "कॉफ़ी": "coffee",
    "दही": "yogurt", "dahi": "yogurt",
    "पास्ता": "pasta",
    "टमाटर": "tomatoes", "tamatar": "tomatoes",
    "संतरे का जूस": "orange juice", "जूस": "orange juice",
    "चिप्स": "chips",
    "बिस्कुट": "cookies", "biscuit": "cookies",
    "जैतून का तेल": "olive oil",
    "नमक": "salt", "namak": "salt",
}.items()}

CATEGORY_ALIASES = {nfc(k): v for k, v in {
    "डेयरी": "dairy", "दुग्ध": "dairy",
    "फल": "produce", "सब्ज़ी": "produce", "सब्जी": "produce", "सब्ज़ियां": "produce",
    "अनाज": "grains",
    "प्रोटीन": "protein",
    "पेय": "beverages", "ड्रिंक्स": "beverages",
    "स्नैक्स": "snacks", "नाश्ता": "snacks",
    "फ्रोजन": "frozen", "फ्रोज़न": "frozen",
    "किराना": "pantry", "पैंट्री": "pantry",
}.items()}


def _resolve_alias(text: str, aliases: dict) -> str:
    normalized = normalize(text)
    return normalize(aliases.get(normalized, normalized))


# =============================================================================
# Search
# =============================================================================

def _availability_then_name(item: InventoryItem):
    return (not item.available, item.name)


def search_inventory(query: str | None, max_price: Optional[float] = None) -> list[InventoryItem]:
    """
    Find inventory entries matching a free-text query.

    An entry matches when its normalized name contains the normalized query or
    the query contains the name ("orange" finds "orange juice"; "fresh milk"
    finds "milk"). An empty query returns nothing rather than the full catalog.

    Args:
        query: Item phrase from the interpreter or the UI
        max_price: Optional ceiling; entries priced above it are dropped

    Returns:
        Matching entries, available first, then by name
    """
    normalized_query = _resolve_alias(query or "", ITEM_ALIASES)
    if not normalized_query:
        return []

    matches = []
    for item in INVENTORY:
        name = normalize(item.name)
        if normalized_query not in name and name not in normalized_query:
            continue
        if max_price is not None and item.price > max_price:
            continue
        matches.append(item)

    logger.debug("Inventory search %r (max_price=%s): %d result(s)", query, max_price, len(matches))
    return sorted(matches, key=_availability_then_name)


def get_category_items(category_name: str | None) -> list[InventoryItem]:
    """
    List inventory entries in a category, sorted by name.

    Category names must match exactly after normalization (or via the Hindi
    category aliases). Unknown categories yield an empty list.
    """
    normalized_category = _resolve_alias(category_name or "", CATEGORY_ALIASES)
    if not normalized_category:
        return []
    return sorted(
        (item for item in INVENTORY if normalize(item.category) == normalized_category),
        key=lambda item: item.name,
    )


def get_inventory_item(item_id: str) -> InventoryItem | None:
    """Look up an inventory entry by id."""
    for item in INVENTORY:
        if item.id == item_id:
            return item
    return None


def find_category_by_name(name: str | None) -> Category | None:
    """Return the category named `name`, or the first whose examples contain it."""
    normalized = _resolve_alias(name or "", CATEGORY_ALIASES)
    if not normalized:
        return None
    for category in CATEGORIES:
        if normalize(category.name) == normalized:
            return category
    for category in CATEGORIES:
        if any(normalized in normalize(example) for example in category.examples):
            return category
    return None


def filter_categories(query: str | None) -> list[Category]:
    """
    Filter the taxonomy for the category browser.

    A category is kept when the query appears in its name, one of its examples
    or its description. A blank query returns every category.
    """
    normalized = normalize(query)
    if not normalized:
        return list(CATEGORIES)
    return [
        category for category in CATEGORIES
        if normalized in normalize(category.name)
        or any(normalized in normalize(example) for example in category.examples)
        or normalized in normalize(category.description)
    ]


# =============================================================================
# Categorizer
# =============================================================================

# Tested in order; the first bucket with a keyword hit wins
CATEGORY_KEYWORDS = (
    ("dairy", re.compile(nfc(
        r"milk|cheese|yogurt|butter|paneer|dahi|doodh|दूध|दही|पनीर|मक्खन|घी"))),
    ("produce", re.compile(nfc(
        r"apple|banana|orange|lettuce|spinach|tomato|onion|potato"
        r"|seb|kela|aloo|pyaz|tamatar|सेब|केला|केले|आलू|प्याज|टमाटर|पालक|सब्ज"))),
    ("grains", re.compile(nfc(
        r"bread|rice|pasta|cereal|chawal|atta|चावल|आटा|रोटी|ब्रेड"))),
    ("protein", re.compile(nfc(
        r"chicken|beef|pork|fish|egg|anda|ande|dal|अंडा|अंडे|मुर्गा|चिकन|मछली|दाल"))),
    ("beverages", re.compile(nfc(
        r"water|juice|soda|coffee|tea|pani|paani|chai|पानी|जूस|चाय|कॉफी|कॉफ़ी"))),
)

DEFAULT_CATEGORY = "other"


def categorize(name: str | None) -> str:
    """Assign a free-text item name to a category bucket ("other" if none match)."""
    lowered = nfc((name or "").lower())
    for category, pattern in CATEGORY_KEYWORDS:
        if pattern.search(lowered):
            return category
    return DEFAULT_CATEGORY
