"""
Catalog Routes for Voice Cart
=============================

Read-only endpoints over the static inventory and category taxonomy, plus
adding a catalog product straight to the list.

Endpoints:
----------
- GET /catalog/inventory: Search inventory (q, max_price)
- GET /catalog/inventory/{item_id}: One inventory entry
- POST /catalog/inventory/{item_id}/add: Add a catalog product to the list
- GET /catalog/categories: Category browser, optionally filtered by q
- GET /catalog/categories/{name}/items: Inventory entries in a category
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..catalog import (
    filter_categories,
    find_category_by_name,
    get_category_items,
    get_inventory_item,
    search_inventory,
)
from ..schemas import CategoryOut, InventoryItemOut, ShoppingListItemOut
from ..services.shopping_list import ShoppingListStore
from .shopping_list import get_store


logger = logging.getLogger(__name__)

catalog_router = APIRouter(prefix="/catalog", tags=["Catalog"])


@catalog_router.get("/inventory", response_model=List[InventoryItemOut])
def search_catalog(
    q: str = Query("", max_length=200, description="Item name or part of one"),
    max_price: Optional[float] = Query(None, ge=0),
):
    """Search inventory; available items first, then by name."""
    return search_inventory(q, max_price)


@catalog_router.get("/inventory/{item_id}", response_model=InventoryItemOut)
def get_catalog_item(item_id: str):
    item = get_inventory_item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    return item


@catalog_router.post(
    "/inventory/{item_id}/add",
    response_model=ShoppingListItemOut,
    status_code=status.HTTP_201_CREATED,
)
def add_catalog_item(item_id: str, store: ShoppingListStore = Depends(get_store)):
    item = get_inventory_item(item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Inventory item not found")
    return store.add_inventory_item(item)


@catalog_router.get("/categories", response_model=List[CategoryOut])
def list_categories(q: str = Query("", max_length=200)):
    return filter_categories(q)


@catalog_router.get("/categories/{name}/items", response_model=List[InventoryItemOut])
def list_category_items(name: str):
    """Inventory entries in a category; 404 when no such category exists."""
    category = find_category_by_name(name)
    if category is None:
        raise HTTPException(status_code=404, detail="Category not found")
    return get_category_items(category.name)
