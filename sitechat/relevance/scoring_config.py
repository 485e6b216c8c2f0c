"""
Weights, caps and thresholds for query-time relevance scoring.

This file centralizes EVERY tunable constant of the relevance scorer
and the context selection. No magic numbers in scorer.py / selector.py:
adjust here without touching the scoring logic.

SCORE SHAPE:
    total = base_relevance * content_type_boost
          + structured_bonus        (cap 0.5)
          + intent_keyword_bonus    (cap 0.3)
          + product_bonus           (cap 0.4)
          + confidence * 0.2
          + recommendation_bonus    (cap 0.4, recommendation-seeking only)
    capped at 3.0. This is a ranking score, not a probability.
"""

from dataclasses import dataclass, field
from typing import Dict


@dataclass(frozen=True)
class BaseRelevanceWeights:
    """
    Weighted keyword overlap, divided by the number of query keywords
    and capped at 1.0.
    """
    title: float = 0.4
    summary: float = 0.3
    content_preview: float = 0.2     # used only when there is no summary
    key_points: float = 0.3
    content_preview_chars: int = 500
    max_base: float = 1.0


@dataclass(frozen=True)
class StructuredBonusConfig:
    """Bonuses for structured data matching the query's intent."""
    per_ranking: float = 0.1         # intent == best_choice
    winner: float = 0.3              # intent == best_choice, flat
    per_comparison: float = 0.1      # is_comparative
    per_price: float = 0.15          # intent == pricing
    per_recommendation: float = 0.1  # is_looking_for_recommendation
    cap: float = 0.5


@dataclass(frozen=True)
class MatchBonusConfig:
    """Keyword / product overlap bonuses and the confidence factor."""
    per_intent_keyword: float = 0.1
    intent_keyword_cap: float = 0.3
    per_product: float = 0.2         # at most one credit per query product
    product_cap: float = 0.4
    confidence_weight: float = 0.2


@dataclass(frozen=True)
class RecommendationBonusConfig:
    """Extra weight for decision-ready content when the user wants advice."""
    type_bonuses: Dict[str, float] = field(default_factory=lambda: {
        "ranking": 0.3,
        "comparison": 0.25,
        "review": 0.2,
    })
    winner: float = 0.2
    recommendations: float = 0.15
    cap: float = 0.4


@dataclass(frozen=True)
class SelectionConfig:
    """Top-N selection and context item rendering."""
    max_items: int = 7
    min_relevance: float = 0.1       # iteration stops at the first score below this
    max_score: float = 3.0
    raw_content_chars: int = 1000    # fallback when a material has no summary
    ellipsis: str = "…"


@dataclass
class RelevanceConfig:
    """
    Global relevance configuration.

    Aggregates every component configuration; single entry point
    for calibration.
    """
    base: BaseRelevanceWeights = field(default_factory=BaseRelevanceWeights)
    structured: StructuredBonusConfig = field(default_factory=StructuredBonusConfig)
    matching: MatchBonusConfig = field(default_factory=MatchBonusConfig)
    recommendation: RecommendationBonusConfig = field(default_factory=RecommendationBonusConfig)
    selection: SelectionConfig = field(default_factory=SelectionConfig)

    def validate(self) -> bool:
        """Check the configuration is internally consistent."""
        weights = [
            self.base.title, self.base.summary, self.base.content_preview, self.base.key_points,
            self.structured.per_ranking, self.structured.winner, self.structured.per_comparison,
            self.structured.per_price, self.structured.per_recommendation,
            self.matching.per_intent_keyword, self.matching.per_product,
            self.matching.confidence_weight,
            self.recommendation.winner, self.recommendation.recommendations,
            *self.recommendation.type_bonuses.values(),
        ]
        if any(w < 0 for w in weights):
            raise ValueError("Relevance weights cannot be negative")

        caps = [
            self.base.max_base, self.structured.cap, self.matching.intent_keyword_cap,
            self.matching.product_cap, self.recommendation.cap, self.selection.max_score,
        ]
        if any(c <= 0 for c in caps):
            raise ValueError("Relevance caps must be positive")

        if self.selection.max_items <= 0:
            raise ValueError("max_items must be positive")
        if self.selection.min_relevance > self.selection.max_score:
            raise ValueError(
                f"min_relevance ({self.selection.min_relevance}) exceeds "
                f"max_score ({self.selection.max_score})"
            )
        if self.base.content_preview_chars <= 0 or self.selection.raw_content_chars <= 0:
            raise ValueError("Content lengths must be positive")
        return True


DEFAULT_CONFIG = RelevanceConfig()
