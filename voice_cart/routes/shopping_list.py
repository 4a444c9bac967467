"""
Shopping List Routes for Voice Cart
===================================

Endpoints for the list panel: the raw list, manual adds, deletes from the
list and from the consolidated view, history and suggestions.

Endpoints:
----------
- GET /list: Shopping list, newest first
- POST /list/items: Add an item typed into the manual form
- DELETE /list/items/{item_id}: Remove one entry
- DELETE /list/groups: Remove every entry with a name + category
- GET /list/consolidated: Entries grouped by name + category
- GET /list/history: Per-name add counts
- GET /list/suggestions: Follow-up suggestions
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import (
    ConsolidatedItemOut,
    HistoryEntryOut,
    ManualAddRequest,
    ShoppingListItemOut,
    SuggestionOut,
)
from ..services.shopping_list import ShoppingListStore


logger = logging.getLogger(__name__)

list_router = APIRouter(prefix="/list", tags=["Shopping List"])


def get_store(db: Session = Depends(get_db)) -> ShoppingListStore:
    """FastAPI dependency wrapping the request's session in a store."""
    return ShoppingListStore(db)


@list_router.get("", response_model=List[ShoppingListItemOut])
def get_list(store: ShoppingListStore = Depends(get_store)):
    return store.list_items()


@list_router.post("/items", response_model=ShoppingListItemOut, status_code=status.HTTP_201_CREATED)
def add_list_item(req: ManualAddRequest, store: ShoppingListStore = Depends(get_store)):
    """Add an item from the manual form (no interpretation)."""
    if not req.name.strip():
        raise HTTPException(status_code=400, detail="Item name must not be blank")
    return store.add_item(req.name, req.quantity, req.unit, req.category)


@list_router.delete("/items/{item_id}", response_model=ShoppingListItemOut)
def delete_list_item(item_id: str, store: ShoppingListStore = Depends(get_store)):
    removed = store.remove_item(item_id)
    if removed is None:
        raise HTTPException(status_code=404, detail="List item not found")
    return removed


@list_router.delete("/groups")
def delete_list_group(
    name: str = Query(..., min_length=1),
    category: str = Query(..., min_length=1),
    store: ShoppingListStore = Depends(get_store),
):
    """Remove a consolidated row, i.e. every entry sharing its name and category."""
    removed = store.remove_group(name, category)
    if removed == 0:
        raise HTTPException(status_code=404, detail="No list items in that group")
    return {"removed": removed}


@list_router.get("/consolidated", response_model=List[ConsolidatedItemOut])
def get_consolidated(store: ShoppingListStore = Depends(get_store)):
    return store.consolidated()


@list_router.get("/history", response_model=List[HistoryEntryOut])
def get_history(store: ShoppingListStore = Depends(get_store)):
    return store.history()


@list_router.get("/suggestions", response_model=List[SuggestionOut])
def get_suggestions(store: ShoppingListStore = Depends(get_store)):
    return store.suggestions()
