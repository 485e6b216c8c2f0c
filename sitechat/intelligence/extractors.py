"""
Structured Data Extractor (Deterministic)
=========================================

Mines rankings, winners, prices, feature lists, ratings, recommendations
and comparisons out of raw document text with regex heuristics.
Best effort only: no LLM, no NLP model, never raises on odd input.

Which extractors run depends on the content type:

    ranking       -> rankings, winner
    comparison    -> comparisons, winner
    product_page  -> pricing, features
    review        -> ratings, recommendations
    service       -> pricing, recommendations
    tutorial / general -> nothing

Usage:
    extractor = StructuredDataExtractor()
    data = extractor.extract(content, ContentType.RANKING)
"""

import logging
from typing import Dict, List, Optional, Tuple

from .extraction_config import ExtractionConfig
from .models import (
    Comparison,
    ContentType,
    FeatureSet,
    PriceEntry,
    RankingEntry,
    RatingEntry,
    Recommendation,
    StructuredData,
    Winner,
)
from .patterns import (
    BULLET_MARKERS,
    BULLET_PREFIX,
    COMPARISON_ASPECT,
    COMPARISON_PATTERN,
    FEATURE_SECTION_MARKERS,
    LEADING_HASH,
    LEADING_NUMBER,
    NON_NAME_CHARS,
    PRICE_PATTERN,
    RANKING_PATTERNS,
    RATING_PATTERN,
    RECOMMENDATION_PATTERNS,
    SECTION_SPLIT,
    SYMBOL_CURRENCIES,
    UNIT_CURRENCIES,
    WHITESPACE,
    WINNER_PATTERNS,
)

logger = logging.getLogger(__name__)


# Structured fields filled for each content type
EXTRACTION_PLAN: Dict[ContentType, Tuple[str, ...]] = {
    ContentType.RANKING: ("rankings", "winner"),
    ContentType.COMPARISON: ("comparisons", "winner"),
    ContentType.PRODUCT_PAGE: ("pricing", "features"),
    ContentType.REVIEW: ("ratings", "recommendations"),
    ContentType.SERVICE: ("pricing", "recommendations"),
}


def clean_product_name(name: str, max_length: int = 100) -> str:
    """
    Normalize a captured product name:
    1. Strip a leading "1." / "1)" marker
    2. Strip leading hash marks
    3. Replace punctuation with spaces (word chars, spaces and hyphens kept)
    4. Collapse whitespace and trim
    5. Truncate to max_length
    """
    name = LEADING_NUMBER.sub("", name or "")
    name = LEADING_HASH.sub("", name)
    name = NON_NAME_CHARS.sub(" ", name)
    name = WHITESPACE.sub(" ", name)
    return name.strip()[:max_length]


def text_window(content: str, index: int, radius: int) -> str:
    """Text within `radius` characters either side of `index`, trimmed."""
    start = max(0, index - radius)
    end = min(len(content), index + radius)
    return content[start:end].strip()


def currency_from_symbol(text: str) -> Optional[str]:
    for symbol, code in SYMBOL_CURRENCIES:
        if symbol in text:
            return code
    return None


class StructuredDataExtractor:
    """Type-dispatched set of regex extractors."""

    def __init__(self, config: Optional[ExtractionConfig] = None):
        self.config = config or ExtractionConfig()

    def _clean(self, name: str) -> str:
        return clean_product_name(name, self.config.max_name_length)

    def extract(self, content: str, content_type: ContentType) -> StructuredData:
        """
        Run the extractors planned for this content type.

        Fields with no hits stay None so that absence always reads
        as "not detected".
        """
        content = content or ""
        data = StructuredData()

        for field_name in EXTRACTION_PLAN.get(content_type, ()):
            value = getattr(self, f"extract_{field_name}")(content)
            setattr(data, field_name, value or None)

        logger.debug(
            "Extracted %d structured data points for %s content",
            data.data_points, content_type.value,
        )
        return data

    # =========================================================================
    # RANKINGS / WINNER
    # =========================================================================

    def extract_rankings(self, content: str) -> List[RankingEntry]:
        """
        Numbered lines ("1. X", "2) Y"), hash ranks ("#3 Z") and
        ordinal places ("1st place: W").

        Ranks outside 1..max_rank and captures of min_rank_line_length
        characters or fewer are dropped as noise.

        Returns:
            Entries sorted ascending by rank.
        """
        cfg = self.config
        rankings: List[RankingEntry] = []

        for pattern in RANKING_PATTERNS:
            for match in pattern.finditer(content):
                rank = int(match.group(1))
                product_line = match.group(2).strip()

                if 1 <= rank <= cfg.max_rank and len(product_line) > cfg.min_rank_line_length:
                    rankings.append(RankingEntry(
                        product=self._clean(product_line),
                        rank=rank,
                        reason=text_window(content, match.start(), cfg.ranking_reason_radius),
                    ))

        rankings.sort(key=lambda r: r.rank)
        return rankings

    def extract_winner(self, content: str) -> Optional[Winner]:
        """First hit of the first winner pattern that matches at all."""
        for pattern in WINNER_PATTERNS:
            match = pattern.search(content)
            if match:
                return Winner(
                    product=self._clean(match.group(1)),
                    reason=text_window(content, match.start(), self.config.winner_reason_radius),
                )
        return None

    # =========================================================================
    # PRICING / FEATURES
    # =========================================================================

    def extract_pricing(self, content: str) -> List[PriceEntry]:
        """
        Pair a 10-50 character name window with the amount that follows it.

        The name window is lazy, so on dense text a price can land on the
        wrong neighbouring name. Currency comes from an explicit unit token
        when present, otherwise from the symbol in the match.
        """
        pricing: List[PriceEntry] = []

        for match in PRICE_PATTERN.finditer(content):
            product = self._clean(match.group(1))
            unit = match.group(3)
            if unit:
                currency = UNIT_CURRENCIES.get(unit.lower())
            else:
                currency = currency_from_symbol(match.group(0))

            if len(product) > self.config.min_price_name_length:
                pricing.append(PriceEntry(
                    product=product,
                    price=match.group(2),
                    currency=currency,
                ))

        return pricing

    def extract_features(self, content: str) -> List[FeatureSet]:
        """
        Paragraph heuristic: a blank-line-delimited section mentioning
        "features" or "specifications" gives one product (its first line
        of reasonable length) and its bullet lines as the feature list.
        """
        cfg = self.config
        features: List[FeatureSet] = []

        for section in SECTION_SPLIT.split(content):
            if not any(marker in section for marker in FEATURE_SECTION_MARKERS):
                continue

            lines = section.split("\n")
            product_line = next(
                (line for line in lines if cfg.feature_line_min < len(line) < cfg.feature_line_max),
                None,
            )
            feature_lines = [line for line in lines if line.strip().startswith(BULLET_MARKERS)]

            if product_line and feature_lines:
                features.append(FeatureSet(
                    product=self._clean(product_line),
                    features=[BULLET_PREFIX.sub("", line).strip() for line in feature_lines],
                ))

        return features

    # =========================================================================
    # RATINGS / RECOMMENDATIONS / COMPARISONS
    # =========================================================================

    def extract_ratings(self, content: str) -> List[RatingEntry]:
        """'<name> rated/scores/gets X/Y' and 'X out of Y'."""
        return [
            RatingEntry(
                product=self._clean(match.group(1)),
                rating=match.group(2),
                max_rating=match.group(3),
            )
            for match in RATING_PATTERN.finditer(content)
        ]

    def extract_recommendations(self, content: str) -> List[Recommendation]:
        recommendations: List[Recommendation] = []

        for pattern in RECOMMENDATION_PATTERNS:
            for match in pattern.finditer(content):
                recommendations.append(Recommendation(
                    context=match.group("context").strip(),
                    product=self._clean(match.group("product")),
                    reason=text_window(
                        content, match.start(), self.config.recommendation_reason_radius
                    ),
                ))

        return recommendations

    def extract_comparisons(self, content: str) -> List[Comparison]:
        """'A vs B' pairs; the surrounding window stands in for the conclusion."""
        return [
            Comparison(
                products=[self._clean(match.group(1)), self._clean(match.group(2))],
                aspect=COMPARISON_ASPECT,
                conclusion=text_window(content, match.start(), self.config.comparison_radius),
            )
            for match in COMPARISON_PATTERN.finditer(content)
        ]
