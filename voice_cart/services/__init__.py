"""
Services Package for Voice Cart
===============================

Business logic that sits between the routes and the database.

- shopping_list.py: ShoppingListStore, the list and add history for one
  database session
"""

from .shopping_list import ConsolidatedItem, ShoppingListStore

__all__ = [
    "ConsolidatedItem",
    "ShoppingListStore",
]
