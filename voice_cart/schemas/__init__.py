"""
Voice Cart Schemas.

Pydantic models for interpreter output and the HTTP API.
"""

from .commands import ActionKind, Command, CommandOutcome
from .api import (
    AudioCommandRequest,
    CategoryOut,
    ConsolidatedItemOut,
    HistoryEntryOut,
    InventoryItemOut,
    ManualAddRequest,
    ShoppingListItemOut,
    SuggestionOut,
    TextCommandRequest,
    TranscribeRequest,
    TranscribeResponse,
    VoiceCommandResponse,
)

__all__ = [
    # Interpreter
    "ActionKind",
    "Command",
    "CommandOutcome",
    # API
    "AudioCommandRequest",
    "CategoryOut",
    "ConsolidatedItemOut",
    "HistoryEntryOut",
    "InventoryItemOut",
    "ManualAddRequest",
    "ShoppingListItemOut",
    "SuggestionOut",
    "TextCommandRequest",
    "TranscribeRequest",
    "TranscribeResponse",
    "VoiceCommandResponse",
]
