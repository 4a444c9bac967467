"""
Routes Package for Voice Cart
=============================

This package contains the API route definitions, one APIRouter per area:

- voice.py: Transcription and voice commands (/voice)
- shopping_list.py: The shopping list, history and suggestions (/list)
- catalog.py: Inventory search and category browsing (/catalog)

Route Dependencies:
-------------------
- get_db: Database session for the request
- get_store: ShoppingListStore wrapping that session
- get_transcriber: Process-wide AssemblyAI client
- limiter.limit(): Rate limiting on the audio endpoints

Error Handling:
---------------
- 400: Invalid audio or blank item name
- 404: Unknown list item, inventory item or category
- 422: Request validation errors (FastAPI)
- 429: Too many requests (rate limited)
- 502/503/504: Transcription failures
"""

from .catalog import catalog_router
from .shopping_list import get_store, list_router
from .voice import limiter, voice_router

__all__ = [
    "catalog_router",
    "list_router",
    "voice_router",
    "get_store",
    "limiter",
]
