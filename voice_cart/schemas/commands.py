"""
Command Schemas.

This module defines the structured result of interpreting one utterance
(Command) and the result of applying it to the shopping list (CommandOutcome).
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator


class ActionKind(str, Enum):
    """The single action an utterance is classified as."""
    ADD = "add"
    REMOVE = "remove"
    SEARCH = "search"
    INVENTORY = "inventory"
    CATEGORY = "category"


class Command(BaseModel):
    """Interpreter output for one utterance."""
    action: ActionKind = Field(
        default=ActionKind.ADD,
        description="Classified action; ADD when no keyword matched"
    )
    item: str = Field(
        default="",
        description="Residual item phrase after stripping verbs, quantities, units and stopwords"
    )
    quantity: float = Field(
        default=1,
        gt=0,
        description="Spoken quantity (e.g., 'two' -> 2, 'dedh' -> 1.5)"
    )
    unit: str | None = Field(
        default=None,
        description="Unit token from the fixed vocabulary (e.g., 'kg', 'बोतल')"
    )
    max_price: float | None = Field(
        default=None,
        ge=0,
        description="Price ceiling from 'under $N', only set for SEARCH"
    )
    query: str | None = Field(
        default=None,
        description="Search query, same value as item for SEARCH"
    )
    remove_index: int | None = Field(
        default=None,
        ge=0,
        description="0-based list index for 'remove item number N' / ordinal removal"
    )
    remove_last: bool = Field(
        default=False,
        description="Remove the most recently added entry ('remove last', 'take that off')"
    )
    language: str = "en"
    raw: str = ""

    @model_validator(mode="after")
    def _check_removal_target(self) -> "Command":
        if self.remove_index is not None and self.remove_last:
            raise ValueError("remove_index and remove_last are mutually exclusive")
        if self.action != ActionKind.REMOVE and (self.remove_index is not None or self.remove_last):
            raise ValueError("removal targets are only valid for REMOVE commands")
        return self

    @property
    def has_target(self) -> bool:
        """True when the command names an item or a removal shortcut."""
        return bool(self.item) or self.remove_index is not None or self.remove_last


class CommandOutcome(BaseModel):
    """Result of applying a Command to the list and catalog."""
    action: ActionKind | None = None
    success: bool = False
    message: str = ""
    item: dict[str, Any] | None = None
    results: list[dict[str, Any]] = Field(default_factory=list)
