"""
Suggestion Engine.

Builds the short "you might also want" list shown next to the shopping list
from three sources, in priority order:

1. recent   - the newest entries currently on the list
2. popular  - names added more than once to the current list
3. frequent - history entries not added for more than a week, by add count

Suggestions are de-duplicated by name (earlier sources win) and capped.
"""

from collections import Counter
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Optional, Sequence

from .catalog import categorize
from .config import (
    FREQUENT_STALE_DAYS,
    FREQUENT_SUGGESTION_COUNT,
    POPULAR_SUGGESTION_COUNT,
    RECENT_SUGGESTION_COUNT,
    SUGGESTION_LIMIT,
)


@dataclass(frozen=True)
class Suggestion:
    name: str
    type: str  # "recent", "popular" or "frequent"
    category: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


def _field(record: Any, name: str, default=None):
    if isinstance(record, dict):
        return record.get(name, default)
    return getattr(record, name, default)


def _as_naive_utc(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes; callers may pass aware ones
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _recent(items: Sequence[Any]) -> list[Suggestion]:
    return [
        Suggestion(_field(item, "name"), "recent", _field(item, "category"))
        for item in items[:RECENT_SUGGESTION_COUNT]
    ]


def _popular(items: Sequence[Any]) -> list[Suggestion]:
    counts = Counter(_field(item, "name") for item in items)
    categories = {}
    for item in items:
        categories.setdefault(_field(item, "name"), _field(item, "category"))

    # Counter.most_common keeps first-seen order for equal counts
    repeated = [(name, count) for name, count in counts.most_common() if count > 1]
    return [
        Suggestion(name, "popular", categories.get(name))
        for name, _ in repeated[:POPULAR_SUGGESTION_COUNT]
    ]


def _frequent(history: Iterable[Any], now: datetime) -> list[Suggestion]:
    cutoff = now - timedelta(days=FREQUENT_STALE_DAYS)
    stale = [
        entry for entry in history
        if (_as_naive_utc(_field(entry, "last_added_at")) or datetime.min) < cutoff
    ]
    stale.sort(key=lambda entry: _field(entry, "add_count", 0) or 0, reverse=True)
    return [
        Suggestion(_field(entry, "name"), "frequent", categorize(_field(entry, "name")))
        for entry in stale[:FREQUENT_SUGGESTION_COUNT]
    ]


def suggestions_from_history(
    history: Iterable[Any],
    items: Sequence[Any],
    now: Optional[datetime] = None,
) -> list[Suggestion]:
    """
    Derive up to SUGGESTION_LIMIT follow-up suggestions.

    Args:
        history: HistoryEntry rows (or dicts) with name, add_count, last_added_at
        items: Current list entries, newest first, with name and category
        now: Reference time (defaults to the current UTC time)

    Returns:
        Suggestions with unique names, recent before popular before frequent
    """
    now = _as_naive_utc(now) or datetime.now(timezone.utc).replace(tzinfo=None)
    items = list(items)

    seen = set()
    unique = []
    for suggestion in _recent(items) + _popular(items) + _frequent(history, now):
        if suggestion.name in seen:
            continue
        seen.add(suggestion.name)
        unique.append(suggestion)

    return unique[:SUGGESTION_LIMIT]
