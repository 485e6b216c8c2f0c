"""
Keyword and product extraction.

Intent keywords are what a query has to overlap with for the document
to earn the intent-keyword bonus at query time; primary products feed
the product-matching bonus.
"""

import logging
from typing import Iterable, List, Optional

from .extraction_config import ExtractionConfig
from .extractors import clean_product_name
from .models import ContentType, StructuredData
from .patterns import (
    ARTICLE_START,
    CAPITALIZED_START,
    STOPWORDS,
    TOKEN_SPLIT,
    TYPE_KEYWORDS,
)

logger = logging.getLogger(__name__)


def dedupe(items: Iterable[str]) -> List[str]:
    """Drop repeats, keeping first-seen order."""
    seen = set()
    out = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


class KeywordExtractor:

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or ExtractionConfig()

    def extract_common_keywords(self, text: str) -> List[str]:
        """Lower-cased, stopword-free tokens longer than the minimum, capped."""
        words = TOKEN_SPLIT.split((text or "").lower())
        kept = [
            w for w in words
            if len(w) > self.config.min_keyword_length and w not in STOPWORDS
        ]
        return dedupe(kept)[:self.config.max_common_keywords]

    def extract_intent_keywords(self, text: str, content_type: ContentType) -> List[str]:
        """Common keywords plus the fixed keyword list of the content type."""
        common = self.extract_common_keywords(text)
        return dedupe(common + TYPE_KEYWORDS.get(content_type, []))

    def extract_generic_product_names(self, content: str) -> List[str]:
        """
        Capitalized lines of sensible length that don't open with an
        article are treated as product names.
        """
        cfg = self.config
        names = []
        for line in (content or "").split("\n"):
            trimmed = line.strip()
            if (
                cfg.generic_line_min < len(trimmed) < cfg.generic_line_max
                and CAPITALIZED_START.match(trimmed)
                and not ARTICLE_START.match(trimmed)
            ):
                names.append(clean_product_name(trimmed, cfg.max_name_length))
        return names[:cfg.max_generic_products]

    def extract_primary_products(
        self,
        content: str,
        content_type: ContentType,
        structured_data: Optional[StructuredData] = None,
    ) -> List[str]:
        """
        Products the document is mainly about.

        ranking     -> the first ranked products
        comparison  -> every product named in a comparison
        otherwise   -> generic capitalized-line heuristic
        """
        cfg = self.config
        structured_data = structured_data or StructuredData()
        products: List[str] = []

        if content_type == ContentType.RANKING:
            rankings = structured_data.rankings or []
            products.extend(r.product for r in rankings[:cfg.max_ranked_products])
        elif content_type == ContentType.COMPARISON:
            for comparison in structured_data.comparisons or []:
                products.extend(comparison.products)
        else:
            products.extend(self.extract_generic_product_names(content))

        return dedupe(products)[:cfg.max_primary_products]
