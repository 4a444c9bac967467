"""
API Schemas for Voice Cart
==========================

Pydantic models for the HTTP endpoints: voice commands (text or audio),
transcription, the shopping list and the catalog.

Endpoint Coverage:
------------------
- POST /voice/transcribe: Audio -> transcript text
- POST /voice/command: Transcript text -> interpreted and applied command
- POST /voice/audio: Audio -> transcript -> interpreted and applied command
- /list/*: Shopping list, consolidated view, history and suggestions
- /catalog/*: Inventory search and category browsing

Validation:
-----------
- Command text is capped at MAX_UTTERANCE_LENGTH characters.
- Base64 audio is capped at MAX_AUDIO_BASE64_LENGTH characters.
- Language tags are free-form ("en", "hi", "hi-IN"); unknown tags fall back
  to English when the command is interpreted.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..config import DEFAULT_LANGUAGE, MAX_AUDIO_BASE64_LENGTH, MAX_UTTERANCE_LENGTH
from .commands import Command, CommandOutcome


# =============================================================================
# Voice Requests
# =============================================================================

class TextCommandRequest(BaseModel):
    """A transcript to interpret and apply."""
    text: str = Field(
        ...,
        max_length=MAX_UTTERANCE_LENGTH,
        description="Transcribed utterance"
    )
    language: str = Field(default=DEFAULT_LANGUAGE, max_length=16)


class TranscribeRequest(BaseModel):
    """A base64 recording to transcribe."""
    audio_base64: str = Field(
        ...,
        min_length=1,
        max_length=MAX_AUDIO_BASE64_LENGTH,
        description="Base64-encoded audio (a data: URL prefix is accepted)"
    )
    language: str = Field(default=DEFAULT_LANGUAGE, max_length=16)


class AudioCommandRequest(TranscribeRequest):
    """A base64 recording to transcribe, interpret and apply."""


class TranscribeResponse(BaseModel):
    text: str


class ManualAddRequest(BaseModel):
    """Typed-in item from the manual add form."""
    name: str = Field(..., min_length=1, max_length=MAX_UTTERANCE_LENGTH)
    quantity: float = Field(default=1, gt=0)
    unit: Optional[str] = Field(default=None, max_length=32)
    category: Optional[str] = Field(default=None, max_length=32)


# =============================================================================
# List / Catalog Responses
# =============================================================================

class ShoppingListItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    quantity: float
    unit: Optional[str] = None
    category: str
    created_at: datetime


class HistoryEntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    add_count: int
    last_added_at: datetime


class ConsolidatedItemOut(BaseModel):
    """
    One row of the consolidated list view.

    Attributes:
        quantity: Sum of the grouped entries' quantities
        count: Number of add events grouped into this row
        ids: Ids of the underlying list entries
    """
    model_config = ConfigDict(from_attributes=True)

    name: str
    category: str
    quantity: float
    unit: Optional[str] = None
    count: int
    ids: List[str] = []


class SuggestionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    type: str
    category: Optional[str] = None


class InventoryItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    category: str
    available: bool
    price: float
    location: str


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    description: str
    examples: List[str] = []


# =============================================================================
# Voice Responses
# =============================================================================

class VoiceCommandResponse(BaseModel):
    """
    Result of a voice command.

    Attributes:
        transcript: The text that was interpreted
        command: Interpreter output (None when the transcript was empty)
        outcome: What was applied, with a user-facing message
        items: Shopping list after the command, newest first
        suggestions: Follow-up suggestions after the command
    """
    transcript: str
    command: Optional[Command] = None
    outcome: CommandOutcome
    items: List[ShoppingListItemOut] = []
    suggestions: List[SuggestionOut] = []
