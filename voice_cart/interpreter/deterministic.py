"""
Deterministic Command Interpreter (no LLM).

This module turns one transcribed utterance plus a language tag into a
structured Command. Classification, quantity/unit extraction and item-name
extraction each read the prepared text independently; REMOVE commands are then
annotated with an explicit index or a "remove last" shortcut.

Interpretation is total: any input yields exactly one action, and the worst
case is an ADD with an empty item.
"""

import logging
import math

from ..schemas.commands import ActionKind, Command
from .constants import (
    ACTION_PRIORITY,
    DEFAULT_LANGUAGE,
    LANGUAGE_RULES,
    NUMERAL_PATTERN,
    PRICE_CEILING_PATTERNS,
    LanguageRules,
    normalize,
    prepare_utterance,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Language Resolution
# =============================================================================

def resolve_language(language: str | None) -> str:
    """
    Map a caller-supplied tag to a supported language.

    "hi", "hi-IN" and "hi_in" all resolve to "hi". Unknown or missing tags
    resolve to English.
    """
    if not language:
        return DEFAULT_LANGUAGE
    base = str(language).strip().lower().replace("_", "-").split("-")[0]
    return base if base in LANGUAGE_RULES else DEFAULT_LANGUAGE


def rule_chain(language: str | None) -> list[LanguageRules]:
    """Return the rule set for a language followed by its fallbacks."""
    primary = LANGUAGE_RULES[resolve_language(language)]
    chain = [primary]
    for tag in primary.fallbacks:
        rules = LANGUAGE_RULES[tag]
        if rules not in chain:
            chain.append(rules)
    return chain


def _contains_phrase(text: str, phrase: str) -> bool:
    return f" {phrase} " in f" {text} "


# =============================================================================
# Action Classification
# =============================================================================

def classify_action(text: str, language: str | None = DEFAULT_LANGUAGE) -> ActionKind:
    """
    Classify prepared text into exactly one action.

    Actions are tested in fixed priority order (ADD, REMOVE, SEARCH, INVENTORY,
    CATEGORY). For each action the primary language's patterns are tried first,
    then each fallback language's patterns for the same action, so Hinglish
    like "दूध add करो" still classifies. Nothing matching means ADD.
    """
    chain = rule_chain(language)
    for action in ACTION_PRIORITY:
        for rules in chain:
            if any(p.search(text) for p in rules.action_patterns.get(action, ())):
                return action
    return ActionKind.ADD


# =============================================================================
# Price Ceiling
# =============================================================================

def extract_max_price(text: str) -> float | None:
    """Return N from "under $N" (or a supported variant), else None."""
    for pattern in PRICE_CEILING_PATTERNS:
        match = pattern.search(text)
        if match:
            value = float(match.group(1))
            return value if math.isfinite(value) else None
    return None


def strip_price_clause(text: str) -> str:
    """Remove any price-ceiling phrase so its number is not read as a quantity."""
    for pattern in PRICE_CEILING_PATTERNS:
        text = pattern.sub(" ", text)
    return " ".join(text.split())


# =============================================================================
# Quantity / Unit Extraction
# =============================================================================

def _find_number_word(text: str, number_words: dict) -> float | None:
    for word, value in number_words.items():
        if _contains_phrase(text, word):
            return value
    return None


def _find_numeral(text: str) -> float | None:
    for match in NUMERAL_PATTERN.finditer(text):
        value = float(match.group(1))
        # A long digit run overflows to inf
        if value > 0 and math.isfinite(value):
            return value
    return None


def extract_quantity(
    text: str,
    language: str | None = DEFAULT_LANGUAGE,
    action: ActionKind | None = None,
) -> float:
    """
    Extract the spoken quantity, defaulting to 1.

    Action phrases are removed first, so the "दो" in "जोड़ दो" is not read as
    two. Then, in order:
    1. Number words of the primary language when it is marked number-words-first
       (Hindi: "दो", "डेढ़", "sawa"); a hit skips numeral lookup entirely.
    2. A literal numeral ("2", "2.5").
    3. Number words of every language in the chain ("two", "half").
    """
    text = strip_action_phrases(strip_price_clause(text), language, action)
    chain = rule_chain(language)

    if chain[0].number_words_first:
        value = _find_number_word(text, chain[0].number_words)
        if value is not None:
            return value

    value = _find_numeral(text)
    if value is not None:
        return value

    for rules in chain:
        value = _find_number_word(text, rules.number_words)
        if value is not None:
            return value

    return 1


def extract_unit(text: str, language: str | None = DEFAULT_LANGUAGE) -> str | None:
    """
    Return the first vocabulary unit that appears as a token after a space.

    Hindi-tagged text checks Hindi units before English ones. Never invents a
    unit: None when nothing in the vocabulary matches.
    """
    tokens = text.split()[1:]
    for rules in rule_chain(language):
        for unit in rules.units:
            if unit in tokens:
                return unit
    return None


# =============================================================================
# Action Phrase Stripping
# =============================================================================

def _phrase_tokens(phrases) -> list[tuple]:
    return sorted({tuple(p.split()) for p in phrases}, key=len, reverse=True)


def _phrase_at(tokens: list, start: int, phrases: list[tuple]) -> int:
    """Token length of the longest phrase starting at tokens[start], else 0."""
    for phrase in phrases:
        if tuple(tokens[start:start + len(phrase)]) == phrase:
            return len(phrase)
    return 0


def _phrase_before(tokens: list, end: int, phrases: list[tuple]) -> int:
    """Token length of the longest phrase ending just before tokens[end], else 0."""
    for phrase in phrases:
        size = len(phrase)
        if size <= end and tuple(tokens[end - size:end]) == phrase:
            return size
    return 0


def _strip_anywhere(tokens: list, rules: LanguageRules) -> list:
    phrases = _phrase_tokens(p for group in rules.action_phrases.values() for p in group)
    particles = {
        particle
        for verb, verb_particles in rules.particle_verbs.items()
        if verb in tokens
        for particle in verb_particles
    }

    kept = []
    i = 0
    while i < len(tokens):
        size = _phrase_at(tokens, i, phrases)
        if size:
            i += size
            continue
        if tokens[i] not in particles:
            kept.append(tokens[i])
        i += 1
    return kept


def _strip_edges(tokens: list, rules: LanguageRules, action: ActionKind) -> list:
    """
    Remove the action's phrases from the front and back of a verb-first utterance.

    Leading stopwords are skipped while looking for the verb ("can you add",
    "do you have"). Phrases of other actions are left alone, so "add chicken
    stock" keeps "stock" and "add list pads" keeps "list".
    """
    phrases = _phrase_tokens(rules.action_phrases.get(action, ()))

    start = 0
    verbs = []
    while start < len(tokens):
        size = _phrase_at(tokens, start, phrases)
        if size:
            verbs.append(" ".join(tokens[start:start + size]))
            start += size
        elif tokens[start] in rules.stopwords:
            start += 1
        else:
            break
    rest = tokens[start:]

    # "take the milk off the list" -> "milk"
    for verb in verbs:
        particles = rules.particle_verbs.get(verb, ())
        for i, token in enumerate(rest):
            if token in particles:
                rest = rest[:i]
                break

    end = len(rest)
    while end > 0:
        size = _phrase_before(rest, end, phrases)
        if size:
            end -= size
        elif rest[end - 1] in rules.stopwords:
            end -= 1
        else:
            break
    return rest[:end]


def strip_action_phrases(
    text: str,
    language: str | None = DEFAULT_LANGUAGE,
    action: ActionKind | None = None,
) -> str:
    """
    Remove action verbs and keywords from prepared text.

    The primary language's rules decide where verbs may sit. English is
    verb-first, so only the classified action's phrases at the edges go.
    Hindi is verb-final and its phrases (plus any fallback language's, for
    code-mixed speech like "दूध add करो") are removed wherever they occur.
    """
    chain = rule_chain(language)
    if action is None:
        action = classify_action(text, language)

    tokens = text.split()
    for rules in chain:
        if rules.phrases_at_edges and rules is chain[0]:
            tokens = _strip_edges(tokens, rules, action)
        else:
            tokens = _strip_anywhere(tokens, rules)
    return " ".join(tokens)


# =============================================================================
# Item-Name Extraction
# =============================================================================

def extract_item_name(
    text: str,
    language: str | None = DEFAULT_LANGUAGE,
    unit: str | None = None,
    action: ActionKind | None = None,
) -> str:
    """
    Reduce prepared text to the residual item phrase.

    Strips, in order: the price clause, action phrases (see
    strip_action_phrases), stopwords, numerals and number words, and the
    matched unit. The result may be empty, which callers treat as "no named
    target".
    """
    chain = rule_chain(language)
    residual = strip_action_phrases(strip_price_clause(text), language, action)

    stopwords = set().union(*(rules.stopwords for rules in chain))
    number_words = set().union(*(rules.number_words for rules in chain))

    kept = []
    for token in residual.split():
        if token in stopwords or token in number_words:
            continue
        if NUMERAL_PATTERN.fullmatch(token):
            continue
        if unit and token == unit:
            continue
        if not normalize(token):
            continue
        kept.append(token)

    return " ".join(kept)


# =============================================================================
# Removal Resolution
# =============================================================================

def resolve_removal(text: str, language: str | None = DEFAULT_LANGUAGE) -> tuple[int | None, bool]:
    """
    Work out an explicit removal target for a REMOVE command.

    Decision order (first applicable wins):
    1. "item number N" -> index N-1
    2. ordinal word ("second", "दूसरा") -> its 0-based index
    3. "remove this/that/last", "take that off", "आखिरी चीज़ हटाओ" -> remove last
    4. nothing: the caller falls back to fuzzy name matching

    Returns:
        (remove_index, remove_last); at most one is set
    """
    chain = rule_chain(language)

    for rules in chain:
        for pattern in rules.index_patterns:
            match = pattern.search(text)
            if match:
                number = int(match.group(1))
                if number > 0:
                    return number - 1, False

    for rules in chain:
        for word, index in rules.ordinal_words.items():
            if _contains_phrase(text, word):
                return index, False

    for rules in chain:
        if any(p.search(text) for p in rules.remove_last_patterns):
            return None, True

    return None, False


# =============================================================================
# Public Entry Point
# =============================================================================

def interpret(text: str | None, language: str | None = DEFAULT_LANGUAGE) -> Command:
    """
    Interpret one utterance into a Command.

    Args:
        text: Transcribed utterance (English, Hindi or code-mixed)
        language: Caller-supplied tag ("en", "hi", "hi-IN", ...)

    Returns:
        A Command with exactly one action. Never raises for malformed text.
    """
    lang = resolve_language(language)
    raw = text or ""
    prepared = prepare_utterance(raw)
    if not prepared:
        return Command(language=lang, raw=raw)

    action = classify_action(prepared, lang)
    unit = extract_unit(prepared, lang)
    item = extract_item_name(prepared, lang, unit=unit, action=action)

    fields = {
        "action": action,
        "item": item,
        "quantity": extract_quantity(prepared, lang, action),
        "unit": unit,
        "language": lang,
        "raw": raw,
    }

    if action == ActionKind.SEARCH:
        fields["query"] = item
        fields["max_price"] = extract_max_price(prepared)
    elif action == ActionKind.REMOVE:
        remove_index, remove_last = resolve_removal(prepared, lang)
        fields["remove_index"] = remove_index
        fields["remove_last"] = remove_last

    command = Command(**fields)
    logger.debug(
        "Interpreted %r (%s) as %s item=%r qty=%s unit=%s",
        raw, lang, command.action.value, command.item, command.quantity, command.unit,
    )
    return command
