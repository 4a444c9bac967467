"""
Fuzzy name matching for voice removals.

Backs REMOVE commands that name an item ("remove the milk") instead of using an
index or a "remove last" shortcut.
"""

import logging
from typing import Any, Sequence

from .constants import normalize

logger = logging.getLogger(__name__)

# Minimum token-overlap score accepted by find_best_removal_match
REMOVAL_MATCH_THRESHOLD = 0.5


def similarity(a: str, b: str) -> float:
    """
    Token-set overlap between two phrases.

    |tokens(a) & tokens(b)| / max(|tokens(a)|, |tokens(b)|) over normalized,
    space-split tokens. 0 when either side has no tokens.
    """
    tokens_a = set(normalize(a).split())
    tokens_b = set(normalize(b).split())
    if not tokens_a or not tokens_b:
        return 0.0
    return len(tokens_a & tokens_b) / max(len(tokens_a), len(tokens_b))


def _item_name(item: Any) -> str:
    if isinstance(item, dict):
        return item.get("name") or ""
    return getattr(item, "name", "") or ""


def find_best_removal_match(items: Sequence[Any], spoken_name: str) -> Any | None:
    """
    Pick the list entry a spoken name refers to.

    1. Exact normalized-name equality.
    2. Prefix or substring containment in either direction, first in list order.
    3. Highest similarity() score, accepted only at or above the threshold;
       ties go to the entry encountered first.

    Args:
        items: List entries (ORM rows, dataclasses or dicts with a "name")
        spoken_name: Residual item phrase from the interpreter

    Returns:
        The matching entry, or None when nothing is close enough
    """
    spoken = normalize(spoken_name)
    if not spoken:
        return None

    for item in items:
        if normalize(_item_name(item)) == spoken:
            return item

    for item in items:
        name = normalize(_item_name(item))
        if name and (name.startswith(spoken) or spoken in name or name in spoken):
            return item

    best = None
    best_score = 0.0
    for item in items:
        score = similarity(_item_name(item), spoken)
        if score > best_score:
            best, best_score = item, score

    if best is not None and best_score >= REMOVAL_MATCH_THRESHOLD:
        return best

    logger.debug("No removal match for %r (best score %.2f)", spoken_name, best_score)
    return None
