"""
Command Interpreter.

Deterministic, bilingual (English/Hindi) interpretation of shopping-list voice
commands, plus the fuzzy matcher used to resolve spoken removals.
"""

from .constants import LANGUAGE_RULES, normalize, prepare_utterance
from .deterministic import (
    classify_action,
    extract_item_name,
    extract_max_price,
    extract_quantity,
    extract_unit,
    interpret,
    resolve_language,
    resolve_removal,
    strip_action_phrases,
)
from .matching import REMOVAL_MATCH_THRESHOLD, find_best_removal_match, similarity

__all__ = [
    "LANGUAGE_RULES",
    "normalize",
    "prepare_utterance",
    "classify_action",
    "extract_item_name",
    "extract_max_price",
    "extract_quantity",
    "extract_unit",
    "interpret",
    "resolve_language",
    "resolve_removal",
    "strip_action_phrases",
    "REMOVAL_MATCH_THRESHOLD",
    "find_best_removal_match",
    "similarity",
]
