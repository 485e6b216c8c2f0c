"""
Sitechat Relevance Scorer - deterministic multi-signal ranking.

Scores one training material against one analyzed query by combining:
- keyword overlap with title / summary (or content preview) / key points
- a content-type multiplier chosen by the query-intent analyzer
- structured data that answers the query's intent (rankings, winner, ...)
- overlap between the material's intent keywords / products and the query
- the material's ingestion-time confidence
- a recommendation bonus when the user is asking for advice

Every score is REPRODUCIBLE with the same inputs and EXPLAINABLE via
RelevanceBreakdown.get_explanation().

USAGE:
    scorer = RelevanceScorer()
    score = scorer.score(query_analysis, material)
    print(scorer.explain(query_analysis, material).get_explanation())
"""

from typing import Iterable, List, Optional

from ..intelligence.models import StructuredData
from .models import QueryAnalysis, QueryIntent, RelevanceBreakdown, TrainingMaterial
from .scoring_config import DEFAULT_CONFIG, RelevanceConfig


def _lowered(values: Iterable[str]) -> List[str]:
    return [v.lower() for v in values if v]


def _overlaps(a: str, b: str) -> bool:
    """Substring match in either direction."""
    return a in b or b in a


class RelevanceScorer:
    """
    Query-time relevance scorer.

    Missing optional fields (no summary, no analysis, no confidence)
    contribute zero instead of raising.
    """

    def __init__(self, config: Optional[RelevanceConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.config.validate()

    # =========================================================================
    # MAIN ENTRY POINTS
    # =========================================================================

    def score(self, query: QueryAnalysis, material: TrainingMaterial) -> float:
        """Final relevance, 0.0 to max_score."""
        return self.explain(query, material).total

    def explain(self, query: QueryAnalysis, material: TrainingMaterial) -> RelevanceBreakdown:
        """Per-component detail of the relevance score."""
        structured = material.structured_data or StructuredData()

        return RelevanceBreakdown(
            base=self.base_relevance(query, material),
            content_boost=max(query.boost_for(material.content_type), 0.0),
            structured_bonus=self.structured_bonus(query, structured),
            intent_keyword_bonus=self.intent_keyword_bonus(query, material),
            product_bonus=self.product_bonus(query, material),
            confidence_bonus=self.confidence_bonus(material),
            recommendation_bonus=self.recommendation_bonus(query, material, structured),
            max_score=self.config.selection.max_score,
        )

    # =========================================================================
    # COMPONENTS
    # =========================================================================

    def base_relevance(self, query: QueryAnalysis, material: TrainingMaterial) -> float:
        """
        Weighted keyword overlap.

        Each query keyword found in the title, the summary (or, without a
        summary, the first characters of the raw content) and any key point
        adds that field's weight. The sum is divided by the number of query
        keywords and capped.
        """
        weights = self.config.base
        keywords = _lowered(query.keywords)
        if not keywords:
            return 0.0

        title = (material.title or "").lower()
        summary = (material.summary or "").strip().lower()
        preview = (material.content or "")[:weights.content_preview_chars].lower()
        key_points = _lowered(material.key_points)

        total = 0.0
        for keyword in keywords:
            if keyword in title:
                total += weights.title
            if summary:
                if keyword in summary:
                    total += weights.summary
            elif keyword in preview:
                total += weights.content_preview
            if any(keyword in point for point in key_points):
                total += weights.key_points

        return min(total / len(keywords), weights.max_base)

    def structured_bonus(self, query: QueryAnalysis, structured: StructuredData) -> float:
        """Reward structured facts that directly answer the query's intent."""
        cfg = self.config.structured
        bonus = 0.0

        if query.intent == QueryIntent.BEST_CHOICE:
            bonus += cfg.per_ranking * len(structured.rankings or [])
            if structured.winner is not None:
                bonus += cfg.winner

        if query.is_comparative:
            bonus += cfg.per_comparison * len(structured.comparisons or [])

        if query.intent == QueryIntent.PRICING:
            bonus += cfg.per_price * len(structured.pricing or [])

        if query.is_looking_for_recommendation:
            bonus += cfg.per_recommendation * len(structured.recommendations or [])

        return min(bonus, cfg.cap)

    def intent_keyword_bonus(self, query: QueryAnalysis, material: TrainingMaterial) -> float:
        """Per material intent keyword overlapping any query keyword."""
        cfg = self.config.matching
        query_keywords = _lowered(query.keywords)
        if not query_keywords:
            return 0.0

        matches = sum(
            1 for doc_keyword in _lowered(material.intent_keywords)
            if any(_overlaps(doc_keyword, q) for q in query_keywords)
        )
        return min(matches * cfg.per_intent_keyword, cfg.intent_keyword_cap)

    def product_bonus(self, query: QueryAnalysis, material: TrainingMaterial) -> float:
        """One credit per query product that overlaps a material product."""
        cfg = self.config.matching
        doc_products = _lowered(material.primary_products)
        if not doc_products:
            return 0.0

        matched = sum(
            1 for query_product in _lowered(query.products)
            if any(_overlaps(doc_product, query_product) for doc_product in doc_products)
        )
        return min(matched * cfg.per_product, cfg.product_cap)

    def confidence_bonus(self, material: TrainingMaterial) -> float:
        confidence = material.confidence_score or 0.0
        return max(confidence, 0.0) * self.config.matching.confidence_weight

    def recommendation_bonus(
        self,
        query: QueryAnalysis,
        material: TrainingMaterial,
        structured: StructuredData,
    ) -> float:
        """Decision-ready content for users asking what to pick."""
        if not query.is_looking_for_recommendation:
            return 0.0

        cfg = self.config.recommendation
        bonus = 0.0
        if material.content_type is not None:
            bonus += cfg.type_bonuses.get(material.content_type.value, 0.0)
        if structured.winner is not None:
            bonus += cfg.winner
        if structured.recommendations:
            bonus += cfg.recommendations

        return min(bonus, cfg.cap)
