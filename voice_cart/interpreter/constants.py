"""
Interpreter Constants.

This module contains the per-language rule tables used by the deterministic
command interpreter: action keyword patterns, verb phrases to strip, stopwords,
number words, ordinal words, units and removal shortcut patterns. Tables are
keyed by language tag so a new language is a new LANGUAGE_RULES entry, not new
control flow.

Devanagari strings are NFC-normalized when the tables are built, and user text
is NFC-normalized before matching, so nukta forms (e.g. "ड़") compare equal
whichever way the transcriber encodes them.
"""

import re
import unicodedata
from dataclasses import dataclass, field

from ..schemas.commands import ActionKind


# =============================================================================
# Text Normalization
# =============================================================================

_WHITESPACE_RE = re.compile(r"\s+")

# "2kg" -> "2 kg", "3bottles" -> "3 bottles"
_DIGIT_LETTER_RE = re.compile(r"(?<=\d)(?=[^\W\d_])")

# Characters kept by prepare_utterance even though they are not letters/digits
_KEPT_SYMBOLS = {"$", "₹"}

# Dropped outright so "what's" reads as "whats"
_APOSTROPHES = {"'", "’"}


def nfc(s: str) -> str:
    """NFC-normalize a string (composes/decomposes nukta forms consistently)."""
    return unicodedata.normalize("NFC", s)


def normalize(text: str | None) -> str:
    """
    Normalize free text for equality/containment comparisons.

    Lower-cases, drops every character that is not a letter, combining mark,
    digit or whitespace, collapses whitespace and trims. For ASCII input this
    keeps exactly [a-z0-9\\s]; Devanagari letters and vowel signs survive so
    Hindi names remain comparable.

    Args:
        text: Any string (None is treated as empty)

    Returns:
        The normalized string
    """
    if not text:
        return ""
    lowered = nfc(text.lower())
    kept = "".join(
        ch if ch.isspace() or unicodedata.category(ch)[0] in "LMN" else ""
        for ch in lowered
    )
    return _WHITESPACE_RE.sub(" ", kept).strip()


def prepare_utterance(text: str | None) -> str:
    """
    Prepare a transcript for interpretation.

    Like normalize(), but punctuation becomes a space instead of vanishing,
    a decimal point between digits is kept ("2.5") and currency symbols are
    kept for the price-ceiling pattern ("under $5").
    """
    if not text:
        return ""
    lowered = nfc(text.strip().lower())
    chars = []
    last = len(lowered) - 1
    for i, ch in enumerate(lowered):
        if ch == "." and 0 < i < last and lowered[i - 1].isdigit() and lowered[i + 1].isdigit():
            chars.append(ch)
        elif ch in _APOSTROPHES:
            continue
        elif ch in _KEPT_SYMBOLS or ch.isspace():
            chars.append(ch)
        elif unicodedata.category(ch)[0] in "LMN":
            chars.append(ch)
        else:
            chars.append(" ")
    prepared = _DIGIT_LETTER_RE.sub(" ", "".join(chars))
    return _WHITESPACE_RE.sub(" ", prepared).strip()


# =============================================================================
# Shared Patterns
# =============================================================================

# Literal integer/decimal numeral, not part of a longer number
NUMERAL_PATTERN = re.compile(r"(?<![\d.])(\d+(?:\.\d+)?)(?![\d.])")

# Price ceiling: "under $5", "below 20", "less than ₹100", "100 रुपये से कम"
PRICE_CEILING_PATTERNS = (
    re.compile(r"\b(?:under|below|less than)\s*[$₹]?\s*(\d+(?:\.\d+)?)"),
    re.compile(nfc(r"[$₹]?\s*(\d+(?:\.\d+)?)\s*(?:रुपये|रुपए|रुपया|rs|rupees)?\s*से\s+कम")),
)

# Fixed priority: the first action with a hit wins
ACTION_PRIORITY = (
    ActionKind.ADD,
    ActionKind.REMOVE,
    ActionKind.SEARCH,
    ActionKind.INVENTORY,
    ActionKind.CATEGORY,
)


def _phrase_pattern(phrases: list[str]) -> re.Pattern:
    """
    Compile phrases into one space-bounded alternation.

    \\b is unreliable for Devanagari (vowel signs are not word characters), so
    phrases are bounded by whitespace or the ends of the text instead.
    """
    ordered = sorted({nfc(p) for p in phrases}, key=len, reverse=True)
    alternation = "|".join(re.escape(p).replace(r"\ ", r"\s+") for p in ordered)
    return re.compile(rf"(?<!\S)(?:{alternation})(?!\S)")


@dataclass(frozen=True)
class LanguageRules:
    """Rule tables for one language tag."""
    tag: str
    # Classifier patterns, tested in ACTION_PRIORITY order
    action_patterns: dict
    # Literal verb/keyword phrases removed from the item phrase, per action
    action_phrases: dict
    stopwords: frozenset
    number_words: dict
    units: tuple
    ordinal_words: dict
    index_patterns: tuple
    remove_last_patterns: tuple
    # When True, a number word short-circuits numeral lookup
    number_words_first: bool = False
    # When True (verb-first languages), only the classified action's phrases
    # are stripped, and only at the start or end of the utterance
    phrases_at_edges: bool = False
    # Verb -> particles that close it ("take ... off"); the particle and
    # everything after it are dropped
    particle_verbs: dict = field(default_factory=dict)
    # Languages whose rules are also applied (code-mixed speech)
    fallbacks: tuple = field(default_factory=tuple)


# =============================================================================
# English
# =============================================================================

ENGLISH_RULES = LanguageRules(
    tag="en",
    action_patterns={
        ActionKind.ADD: (
            re.compile(r"\b(?:add|buy|put|need|purchase|want to buy|get me)\b"),
        ),
        ActionKind.REMOVE: (
            re.compile(r"\b(?:remove|delete|drop)\b"),
            re.compile(r"\btake\b.*\b(?:off|out)\b"),
        ),
        ActionKind.SEARCH: (
            re.compile(r"\b(?:find|search|look for|looking for)\b"),
        ),
        ActionKind.INVENTORY: (
            re.compile(r"\b(?:check|inventory|stock|available|availability|have)\b"),
        ),
        ActionKind.CATEGORY: (
            re.compile(r"\b(?:category|categories|show|list|browse|aisle)\b"),
            re.compile(r"\bwhats?\b.*\bin\b"),
        ),
    },
    action_phrases={
        ActionKind.ADD: ("want to buy", "get me", "add", "buy", "put", "need", "purchase"),
        ActionKind.REMOVE: ("remove", "delete", "drop", "take"),
        ActionKind.SEARCH: ("look for", "looking for", "search", "find"),
        ActionKind.INVENTORY: (
            "check", "inventory", "in stock", "stock", "available", "availability", "have",
        ),
        ActionKind.CATEGORY: (
            "show me", "show", "categories", "category", "browse", "aisle", "list",
        ),
    },
    stopwords=frozenset({
        "please", "to", "my", "the", "a", "an", "some", "of", "for", "from",
        "is", "are", "in", "on", "me", "i", "we", "you", "do", "does", "if",
        "any", "there", "can", "could", "would", "like", "want", "also", "it",
        "item", "items", "number", "this", "that", "last", "what", "whats",
        "all", "us", "our", "more",
    }),
    number_words={
        "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
        "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10,
        "half": 0.5, "quarter": 0.25,
    },
    units=(
        "kg", "kgs", "kilo", "kilos", "g", "gram", "grams",
        "liter", "liters", "litre", "litres", "ml",
        "pack", "packs", "packet", "packets",
        "bottle", "bottles", "piece", "pieces", "dozen",
        "box", "boxes", "bag", "bags", "loaf", "loaves",
    ),
    ordinal_words={
        "first": 0, "second": 1, "third": 2, "fourth": 3, "fifth": 4,
        "sixth": 5, "seventh": 6, "eighth": 7, "ninth": 8, "tenth": 9,
    },
    index_patterns=(
        re.compile(r"\bitem\s*(?:number\s*|no\s*)?(\d+)"),
        re.compile(r"\bnumber\s*(\d+)"),
    ),
    remove_last_patterns=(
        re.compile(r"\b(?:remove|delete|drop)\s+(?:the\s+)?(?:this|that|last)\b"),
        re.compile(r"\btake\s+(?:this|that|it|(?:the\s+)?last(?:\s+\w+)?)\s+(?:off|out)\b"),
    ),
    phrases_at_edges=True,
    particle_verbs={"take": ("off", "out")},
)


# =============================================================================
# Hindi (Devanagari and common romanized forms)
# =============================================================================

_HINDI_ACTIONS = {
    ActionKind.ADD: [
        "जोड़ो", "जोड़ दो", "खरीदो", "खरीदना है", "रखो", "चाहिए", "लाओ", "ले आओ", "डालो",
        "jodo", "jod do", "kharido", "khareedo", "chahiye", "lao", "le aao", "daalo",
    ],
    ActionKind.REMOVE: [
        "हटाओ", "हटा दो", "मिटाओ", "निकालो", "निकाल दो", "डिलीट करो",
        "hatao", "hata do", "mitao", "nikalo", "nikal do",
    ],
    ActionKind.SEARCH: [
        "ढूंढो", "ढूँढो", "खोजो", "तलाश करो", "तलाशो",
        "dhundo", "dhoondo", "khojo",
    ],
    ActionKind.INVENTORY: [
        "स्टॉक", "उपलब्ध", "क्या मिलेगा", "मिलेगा", "चेक करो",
        "milega", "uplabdh",
    ],
    ActionKind.CATEGORY: [
        "श्रेणी", "कैटेगरी", "दिखाओ", "विभाग", "क्या है", "क्या क्या है",
        "dikhao", "shreni", "kya hai",
    ],
}

_HINDI_LAST_WORDS = r"(?:यह|वह|ये|वो|आखिरी|आख़िरी|yeh|ye|woh|wo|aakhri|akhri)"
_HINDI_REMOVE_VERBS = r"(?:हटाओ|हटा\s+दो|निकालो|मिटाओ|hatao|hata\s+do|nikalo)"

HINDI_RULES = LanguageRules(
    tag="hi",
    action_patterns={
        action: (_phrase_pattern(phrases),) for action, phrases in _HINDI_ACTIONS.items()
    },
    action_phrases={
        action: tuple(nfc(p) for p in phrases) for action, phrases in _HINDI_ACTIONS.items()
    },
    stopwords=frozenset(nfc(w) for w in (
        "में", "का", "की", "के", "है", "हैं", "से", "पर", "को", "कुछ", "थोड़ा", "थोड़े",
        "बहुत", "सब", "सारे", "या", "नहीं", "क्या", "मेरी", "मेरा", "मेरे", "मुझे",
        "हमें", "लिस्ट", "सूची", "भी", "चीज़", "चीज", "आइटम", "नंबर", "नम्बर",
        "यह", "वह", "ये", "वो", "आखिरी", "आख़िरी", "बाहर", "करो", "कर", "दो",
        "mein", "ka", "ki", "ke", "hai", "se", "ko", "kuch", "mujhe", "meri", "mera",
        "aur", "bhi", "yeh", "woh", "aakhri", "karo",
    )),
    number_words={nfc(k): v for k, v in {
        "एक": 1, "दो": 2, "तीन": 3, "चार": 4, "पांच": 5, "पाँच": 5,
        "छह": 6, "छः": 6, "सात": 7, "आठ": 8, "नौ": 9, "दस": 10,
        "आधा": 0.5, "सवा": 1.25, "डेढ़": 1.5, "ढाई": 2.5,
        "ek": 1, "do": 2, "teen": 3, "char": 4, "paanch": 5, "chhe": 6,
        "saat": 7, "aath": 8, "nau": 9, "das": 10,
        "aadha": 0.5, "sawa": 1.25, "dedh": 1.5, "dhai": 2.5,
    }.items()},
    units=tuple(nfc(u) for u in (
        "किलो", "ग्राम", "लीटर", "मिलीलीटर", "पैक", "पैकेट", "बोतल", "बोतलें",
        "टुकड़ा", "टुकड़े", "दर्जन",
        "botal", "darjan", "tukda",
    )),
    ordinal_words={nfc(k): v for k, v in {
        "पहला": 0, "पहली": 0, "पहले": 0,
        "दूसरा": 1, "दूसरी": 1, "दूसरे": 1,
        "तीसरा": 2, "तीसरी": 2, "तीसरे": 2,
        "चौथा": 3, "चौथी": 3, "चौथे": 3,
        "पांचवां": 4, "पांचवीं": 4, "पाँचवाँ": 4,
        "छठा": 5, "छठी": 5, "सातवां": 6, "आठवां": 7, "नौवां": 8, "दसवां": 9,
        "pehla": 0, "pehli": 0, "doosra": 1, "doosri": 1, "teesra": 2, "teesri": 2,
        "chautha": 3, "chauthi": 3,
    }.items()},
    index_patterns=(
        re.compile(nfc(r"(?:आइटम|नंबर|नम्बर)\s*(?:नंबर\s*|नम्बर\s*)?(\d+)")),
    ),
    remove_last_patterns=(
        re.compile(nfc(rf"{_HINDI_REMOVE_VERBS}\s+{_HINDI_LAST_WORDS}(?!\S)")),
        re.compile(nfc(rf"(?<!\S){_HINDI_LAST_WORDS}(?:\s+\S+)?\s+{_HINDI_REMOVE_VERBS}")),
        re.compile(nfc(r"(?:निकालो|nikalo)\s+.*(?:बाहर|bahar)")),
    ),
    number_words_first=True,
    fallbacks=("en",),
)


LANGUAGE_RULES: dict[str, LanguageRules] = {
    "en": ENGLISH_RULES,
    "hi": HINDI_RULES,
}

DEFAULT_LANGUAGE = "en"
