"""
Content Intelligence Pattern Library
====================================

Every regex and word list used by the classifier and the extractors,
kept as data so they can be tuned without touching the scoring logic.
Patterns are matched against the original-case text; families that
are case-insensitive carry re.IGNORECASE.
"""

import re
from typing import Dict, FrozenSet, List, Pattern, Tuple

from .models import ContentType

_I = re.IGNORECASE
_IM = re.IGNORECASE | re.MULTILINE


def count_pattern_matches(text: str, patterns: List[Pattern]) -> int:
    """Number of patterns that hit the text at least once."""
    if not text:
        return 0
    return sum(1 for pattern in patterns if pattern.search(text))


# =============================================================================
# CONTENT TYPE FAMILIES
# =============================================================================
# Each pattern contributes at most 1 point to its family's score.

CONTENT_TYPE_PATTERNS: Dict[ContentType, List[Pattern]] = {
    ContentType.RANKING: [
        re.compile(r"\btop\s+\d+", _I),
        re.compile(r"\bbest\s+\d+", _I),
        re.compile(r"\d+\s+best", _I),
        re.compile(r"ranking", _I),
        re.compile(r"rated\s+\d+", _I),
        re.compile(r"#\d+"),
        re.compile(r"first\s+place|second\s+place|third\s+place", _I),
        re.compile(r"\d+\.\s*[A-Z]"),
    ],
    ContentType.COMPARISON: [
        re.compile(r"\bvs\b|\bversus\b", _I),
        re.compile(r"compare|comparison", _I),
        re.compile(r"\bbetter\s+than\b", _I),
        re.compile(r"\bdifference\s+between\b", _I),
        re.compile(r"pros\s+and\s+cons", _I),
        re.compile(r"which\s+is\s+better", _I),
    ],
    ContentType.PRODUCT_PAGE: [
        re.compile(r"\$\d+|€\d+|£\d+|\d+\s*kr"),
        re.compile(r"price:|cost:|buy\s+now|add\s+to\s+cart", _I),
        re.compile(r"specifications|features|description", _I),
        re.compile(r"in\s+stock|out\s+stock|available", _I),
    ],
    ContentType.REVIEW: [
        re.compile(r"review|rating|stars", _I),
        re.compile(r"\d+/\d+|\d+\s*stars|\d+\.\d+\s*/\s*\d+"),
        re.compile(r"pros:|cons:|verdict", _I),
        re.compile(r"tested|experience|opinion", _I),
    ],
    ContentType.SERVICE: [
        re.compile(r"service|solution|platform|software", _I),
        re.compile(r"plan|subscription|tier", _I),
        re.compile(r"consultation|support|help", _I),
        re.compile(r"enterprise|business|professional", _I),
    ],
    ContentType.TUTORIAL: [
        re.compile(r"how\s+to|guide|tutorial|step", _I),
        re.compile(r"instructions|setup|install", _I),
        re.compile(r"\d+\s*steps|\d+\.\s*[A-Z]"),
    ],
}

# Exact ties resolve to the earliest type in this order.
CONTENT_TYPE_PRIORITY: Tuple[ContentType, ...] = (
    ContentType.RANKING,
    ContentType.COMPARISON,
    ContentType.PRODUCT_PAGE,
    ContentType.REVIEW,
    ContentType.SERVICE,
    ContentType.TUTORIAL,
)


# =============================================================================
# STRUCTURED DATA PATTERNS
# =============================================================================

# group 1 = rank, group 2 = product line
RANKING_PATTERNS: List[Pattern] = [
    re.compile(r"(?:^|\n)\s*(\d+)[.)]\s*([^\n\r]+)", re.MULTILINE),
    re.compile(r"#(\d+)[\s\-:]*([^\n\r]+)", re.MULTILINE),
    re.compile(r"(\d+)(?:st|nd|rd|th)\s*place[\s\-:]*([^\n\r]+)", _IM),
]

# Tried in order; the first pattern with any match names the winner.
WINNER_PATTERNS: List[Pattern] = [
    re.compile(r"(?:our\s+)?(?:top\s+)?(?:pick|choice|recommendation|winner)[\s\-:]*([^\n\r.]+)", _IM),
    re.compile(r"(?:the\s+)?best(?:\s+overall)?[\s\-:]*([^\n\r.]+)", _IM),
    re.compile(r"(?:we\s+)?recommend[\s\-:]*([^\n\r.]+)", _IM),
    re.compile(r"#1(?:\s+choice)?[\s\-:]*([^\n\r.]+)", _IM),
]

# group 1 = name window, group 2 = amount, group 3 = optional unit token
PRICE_PATTERN: Pattern = re.compile(
    r"([^\n\r]{10,50}?)\s*(?:costs?|priced?\s+at|starts?\s+at)?\s*[$€£]?"
    r"(\d+(?:\.\d{2})?)\s*(usd|eur|gbp|kr|dollars?|euros?|pounds?|kroner?)?",
    _IM,
)

# group 1 = name window, group 2 = rating, group 3 = scale
RATING_PATTERN: Pattern = re.compile(
    r"([^\n\r]{10,50}?)\s*(?:rated|scores?|gets)\s*(\d+(?:\.\d+)?)\s*(?:/|out\s+of)\s*(\d+)",
    _IM,
)

RECOMMENDATION_PATTERNS: List[Pattern] = [
    # "For small offices, we recommend the Acme Hub"
    re.compile(
        r"(?:for|if)\s+(?P<context>[^,\n]{10,80})[,\s]+(?:we\s+)?(?:recommend|suggest|choose)\s+"
        r"(?P<product>[^\n\r.]+)",
        _IM,
    ),
    # "The Acme Hub Pro is perfect for small offices"
    re.compile(
        r"(?P<product>[^\n\r]{20,100})\s+(?:is\s+)?(?:perfect|ideal|best)\s+(?:for|if)\s+"
        r"(?P<context>[^\n\r.]+)",
        _IM,
    ),
]

# group 1 = left product, group 2 = right product
COMPARISON_PATTERN: Pattern = re.compile(
    r"([^\n\r]{5,50})\s+(?:vs\.?|versus)\s+([^\n\r]{5,50})",
    _IM,
)

COMPARISON_ASPECT = "general comparison"

# Feature lists
SECTION_SPLIT: Pattern = re.compile(r"\n\s*\n")
FEATURE_SECTION_MARKERS: Tuple[str, ...] = ("features", "specifications")
BULLET_MARKERS: Tuple[str, ...] = ("•", "-", "*")
BULLET_PREFIX: Pattern = re.compile(r"^[\s•\-*]+")


# =============================================================================
# PRODUCT NAME NORMALISATION
# =============================================================================

LEADING_NUMBER: Pattern = re.compile(r"^\d+[.)]\s*")
LEADING_HASH: Pattern = re.compile(r"^#+\s*")
NON_NAME_CHARS: Pattern = re.compile(r"[^\w\s\-]")
WHITESPACE: Pattern = re.compile(r"\s+")


# =============================================================================
# CURRENCIES
# =============================================================================

# Checked in order against the whole price match.
SYMBOL_CURRENCIES: Tuple[Tuple[str, str], ...] = (
    ("$", "USD"),
    ("€", "EUR"),
    ("£", "GBP"),
    ("kr", "NOK"),
)

UNIT_CURRENCIES: Dict[str, str] = {
    "usd": "USD",
    "dollar": "USD",
    "dollars": "USD",
    "eur": "EUR",
    "euro": "EUR",
    "euros": "EUR",
    "gbp": "GBP",
    "pound": "GBP",
    "pounds": "GBP",
    "kr": "NOK",
    "krone": "NOK",
    "kroner": "NOK",
}


# =============================================================================
# KEYWORDS
# =============================================================================

TOKEN_SPLIT: Pattern = re.compile(r"\W+")

STOPWORDS: FrozenSet[str] = frozenset({
    "the", "is", "at", "which", "on", "a", "an", "and", "or", "but",
    "in", "with", "to", "for", "of", "as", "by",
})

# Always added to a document's intent keywords, per content type.
TYPE_KEYWORDS: Dict[ContentType, List[str]] = {
    ContentType.RANKING: ["best", "top", "ranking", "rated", "winner", "choice"],
    ContentType.COMPARISON: ["vs", "versus", "compare", "better", "difference", "choice"],
    ContentType.PRODUCT_PAGE: ["buy", "price", "cost", "features", "specifications"],
    ContentType.REVIEW: ["review", "rating", "opinion", "tested", "verdict"],
    ContentType.SERVICE: ["service", "solution", "plan", "support", "business"],
    ContentType.TUTORIAL: ["how", "guide", "steps", "tutorial", "setup"],
    ContentType.GENERAL: [],
}

# Generic product-name heuristic
CAPITALIZED_START: Pattern = re.compile(r"^[A-Z]")
ARTICLE_START: Pattern = re.compile(r"^(?:the|a|an|this|that|these|those)\s", _I)
