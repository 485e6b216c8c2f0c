"""
Tests for the query-time relevance scorer.

Tests every scoring component and its cap:
- Base relevance: weighted keyword overlap, summary vs content preview
- Content type boost from the query analysis (default 1.0)
- Structured bonus per query intent (winner +0.3, cap 0.5)
- Intent keyword, product, confidence and recommendation bonuses
- Final score bounds [0, 3] and configuration validation

Usage:
    pytest tests/test_relevance_scorer.py -v
"""

import pytest

from sitechat.intelligence.models import (
    Comparison,
    ContentType,
    PriceEntry,
    RankingEntry,
    Recommendation,
    StructuredData,
    Winner,
)
from sitechat.relevance.models import QueryAnalysis, QueryIntent, TrainingMaterial
from sitechat.relevance.scorer import RelevanceScorer
from sitechat.relevance.scoring_config import (
    RelevanceConfig,
    SelectionConfig,
    StructuredBonusConfig,
)


# ============================================================================
# TEST DATA
# ============================================================================

def make_material(**overrides) -> TrainingMaterial:
    """Helper to create a training material with sensible defaults."""
    data = {"id": "mat-1", "title": ""}
    data.update(overrides)
    return TrainingMaterial(**data)


def make_rankings(count: int) -> list:
    return [RankingEntry(product=f"Laptop {i}", rank=i) for i in range(1, count + 1)]


WINNER = Winner(product="Laptop 1", reason="Best value for students")


# ============================================================================
# BASE RELEVANCE
# ============================================================================

class TestBaseRelevance:
    """Tests for RelevanceScorer.base_relevance()."""

    def setup_method(self):
        self.scorer = RelevanceScorer()

    def test_weighted_fields(self):
        """laptop: title + summary = 0.7, budget: title + key point = 0.7."""
        query = QueryAnalysis(keywords=["laptop", "budget"])
        material = make_material(
            title="Best Budget Laptop Picks",
            summary="A guide to the cheapest laptop deals",
            key_points=["Budget models under $500"],
        )
        assert self.scorer.base_relevance(query, material) == pytest.approx(0.7)

    def test_content_preview_without_summary(self):
        query = QueryAnalysis(keywords=["laptop"])
        material = make_material(title="Notes", content="Looking for a cheap laptop this year")
        assert self.scorer.base_relevance(query, material) == pytest.approx(0.2)

    def test_summary_shadows_content(self):
        query = QueryAnalysis(keywords=["laptop"])
        material = make_material(
            title="Notes",
            summary="Unrelated summary",
            content="Looking for a cheap laptop this year",
        )
        assert self.scorer.base_relevance(query, material) == 0.0

    def test_preview_is_limited(self):
        query = QueryAnalysis(keywords=["laptop"])
        material = make_material(title="Notes", content="x" * 600 + " laptop")
        assert self.scorer.base_relevance(query, material) == 0.0

    def test_case_insensitive(self):
        query = QueryAnalysis(keywords=["LAPTOP"])
        material = make_material(title="laptop deals")
        assert self.scorer.base_relevance(query, material) == pytest.approx(0.4)

    def test_no_keywords(self):
        material = make_material(title="Best Budget Laptop Picks")
        assert self.scorer.base_relevance(QueryAnalysis(), material) == 0.0

    def test_capped_at_one(self):
        query = QueryAnalysis(keywords=["laptop"])
        material = make_material(title="laptop", summary="laptop", key_points=["laptop"])
        assert self.scorer.base_relevance(query, material) == pytest.approx(1.0)

    def test_blank_summary_uses_content_preview(self):
        """A whitespace-only summary counts as no summary."""
        query = QueryAnalysis(keywords=["laptop"])
        material = make_material(title="Notes", summary="   ", content="laptop guide")
        assert self.scorer.base_relevance(query, material) == pytest.approx(0.2)

    def test_keywords_match_inside_words(self):
        """Matching is substring containment, not whole tokens."""
        query = QueryAnalysis(keywords=["art"])
        material = make_material(title="Smartphone deals")
        assert self.scorer.base_relevance(query, material) == pytest.approx(0.4)


# ============================================================================
# CONTENT TYPE BOOST
# ============================================================================

class TestContentBoost:
    """Tests for the query's context_boosts multiplier."""

    def setup_method(self):
        self.scorer = RelevanceScorer()

    def test_boost_multiplies_base(self):
        query = QueryAnalysis(keywords=["laptop"], context_boosts={"ranking": 2.5})
        material = make_material(title="Laptop", content_type=ContentType.RANKING)
        breakdown = self.scorer.explain(query, material)
        assert breakdown.content_boost == 2.5
        assert breakdown.boosted_base == pytest.approx(1.0)

    def test_missing_type_defaults_to_one(self):
        query = QueryAnalysis(keywords=["laptop"], context_boosts={"ranking": 2.5})
        material = make_material(title="Laptop", content_type=ContentType.COMPARISON)
        assert self.scorer.explain(query, material).content_boost == 1.0

    def test_unanalyzed_material_defaults_to_one(self):
        query = QueryAnalysis(context_boosts={"ranking": 2.5})
        assert query.boost_for(None) == 1.0

    def test_enum_keys_are_normalized(self):
        query = QueryAnalysis(context_boosts={ContentType.RANKING: 2.0})
        assert query.boost_for(ContentType.RANKING) == 2.0


# ============================================================================
# STRUCTURED BONUS
# ============================================================================

class TestStructuredBonus:
    """Tests for RelevanceScorer.structured_bonus()."""

    def setup_method(self):
        self.scorer = RelevanceScorer()
        self.best_choice = QueryAnalysis(intent="best_choice", keywords=["best", "laptop"])

    def test_winner_adds_point_three(self):
        with_winner = make_material(
            content_type=ContentType.RANKING,
            structured_data=StructuredData(rankings=make_rankings(1), winner=WINNER),
        )
        without_winner = make_material(
            content_type=ContentType.RANKING,
            structured_data=StructuredData(rankings=make_rankings(1)),
        )

        assert self.scorer.explain(self.best_choice, with_winner).structured_bonus == pytest.approx(0.4)
        assert self.scorer.explain(self.best_choice, without_winner).structured_bonus == pytest.approx(0.1)

        difference = (
            self.scorer.score(self.best_choice, with_winner)
            - self.scorer.score(self.best_choice, without_winner)
        )
        assert difference == pytest.approx(0.3)

    def test_capped(self):
        structured = StructuredData(rankings=make_rankings(10), winner=WINNER)
        assert self.scorer.structured_bonus(self.best_choice, structured) == pytest.approx(0.5)

    def test_rankings_ignored_for_other_intents(self):
        query = QueryAnalysis(intent="features")
        structured = StructuredData(rankings=make_rankings(3), winner=WINNER)
        assert self.scorer.structured_bonus(query, structured) == 0.0

    def test_comparisons_need_comparative_query(self):
        structured = StructuredData(comparisons=[
            Comparison(products=["A phone", "B phone"], aspect="general comparison", conclusion=""),
            Comparison(products=["C phone", "D phone"], aspect="general comparison", conclusion=""),
        ])
        assert self.scorer.structured_bonus(QueryAnalysis(is_comparative=True), structured) == pytest.approx(0.2)
        assert self.scorer.structured_bonus(QueryAnalysis(), structured) == 0.0

    def test_pricing_intent(self):
        structured = StructuredData(pricing=[
            PriceEntry(product="Basic plan", price="10", currency="USD"),
            PriceEntry(product="Pro plan", price="20", currency="USD"),
        ])
        query = QueryAnalysis(intent=QueryIntent.PRICING)
        assert self.scorer.structured_bonus(query, structured) == pytest.approx(0.3)

    def test_recommendations_for_advice_seekers(self):
        structured = StructuredData(recommendations=[
            Recommendation(context="gamers", product="Laptop 1", reason=""),
            Recommendation(context="students", product="Laptop 2", reason=""),
        ])
        query = QueryAnalysis(is_looking_for_recommendation=True)
        assert self.scorer.structured_bonus(query, structured) == pytest.approx(0.2)


# ============================================================================
# MATCH BONUSES
# ============================================================================

class TestMatchBonuses:
    """Tests for intent keyword, product and confidence bonuses."""

    def setup_method(self):
        self.scorer = RelevanceScorer()

    def test_intent_keywords_overlap_either_way(self):
        query = QueryAnalysis(keywords=["laptop"])
        material = make_material(intent_keywords=["laptops", "best", "budget", "laptop"])
        assert self.scorer.intent_keyword_bonus(query, material) == pytest.approx(0.2)

    def test_intent_keywords_capped(self):
        query = QueryAnalysis(keywords=["lap"])
        material = make_material(
            intent_keywords=["laptop", "laptops", "lapdesk", "overlap", "lapel"]
        )
        assert self.scorer.intent_keyword_bonus(query, material) == pytest.approx(0.3)

    def test_product_match(self):
        query = QueryAnalysis(products=["Dell XPS"])
        material = make_material(primary_products=["Dell XPS 13", "HP Pavilion"])
        assert self.scorer.product_bonus(query, material) == pytest.approx(0.2)

    def test_one_credit_per_query_product(self):
        query = QueryAnalysis(products=["Dell XPS"])
        material = make_material(primary_products=["Dell XPS 13", "Dell XPS 15"])
        assert self.scorer.product_bonus(query, material) == pytest.approx(0.2)

    def test_product_bonus_capped(self):
        query = QueryAnalysis(products=["Dell", "HP", "Lenovo"])
        material = make_material(primary_products=["Dell XPS", "HP Pavilion", "Lenovo ThinkPad"])
        assert self.scorer.product_bonus(query, material) == pytest.approx(0.4)

    def test_no_products(self):
        query = QueryAnalysis(products=["Dell XPS"])
        assert self.scorer.product_bonus(query, make_material()) == 0.0

    def test_confidence_bonus(self):
        assert self.scorer.confidence_bonus(make_material(confidence_score=0.8)) == pytest.approx(0.16)
        assert self.scorer.confidence_bonus(make_material()) == 0.0


class TestRecommendationBonus:
    """Tests for RelevanceScorer.recommendation_bonus()."""

    def setup_method(self):
        self.scorer = RelevanceScorer()
        self.query = QueryAnalysis(is_looking_for_recommendation=True)

    def bonus(self, query, material):
        structured = material.structured_data or StructuredData()
        return self.scorer.recommendation_bonus(query, material, structured)

    def test_ranking_with_winner_capped(self):
        material = make_material(
            content_type=ContentType.RANKING,
            structured_data=StructuredData(winner=WINNER),
        )
        assert self.bonus(self.query, material) == pytest.approx(0.4)

    def test_review_with_recommendations(self):
        material = make_material(
            content_type=ContentType.REVIEW,
            structured_data=StructuredData(recommendations=[
                Recommendation(context="students", product="Laptop 2", reason=""),
            ]),
        )
        assert self.bonus(self.query, material) == pytest.approx(0.35)

    def test_tutorial_gets_nothing(self):
        material = make_material(content_type=ContentType.TUTORIAL)
        assert self.bonus(self.query, material) == 0.0

    def test_only_for_advice_seekers(self):
        material = make_material(
            content_type=ContentType.RANKING,
            structured_data=StructuredData(winner=WINNER),
        )
        assert self.bonus(QueryAnalysis(), material) == 0.0


# ============================================================================
# FINAL SCORE
# ============================================================================

class TestFinalScore:
    """Tests for RelevanceScorer.score() bounds."""

    def setup_method(self):
        self.scorer = RelevanceScorer()

    def test_capped_at_three(self):
        query = QueryAnalysis(
            intent="best_choice",
            keywords=["laptop"],
            products=["Laptop 1"],
            is_looking_for_recommendation=True,
            context_boosts={"ranking": 5.0},
        )
        material = make_material(
            title="laptop",
            summary="laptop",
            key_points=["laptop"],
            content_type=ContentType.RANKING,
            structured_data=StructuredData(rankings=make_rankings(3), winner=WINNER),
            primary_products=["Laptop 1"],
            confidence_score=1.0,
        )
        breakdown = self.scorer.explain(query, material)
        assert breakdown.uncapped > 3.0
        assert self.scorer.score(query, material) == 3.0

    def test_empty_everything(self):
        assert self.scorer.score(QueryAnalysis(), make_material()) == 0.0

    def test_negative_boost_clamped(self):
        query = QueryAnalysis(keywords=["laptop"], context_boosts={"ranking": -2.0})
        material = make_material(title="laptop", content_type=ContentType.RANKING)
        assert self.scorer.explain(query, material).content_boost == 0.0
        assert self.scorer.score(query, material) >= 0.0

    def test_bounds_over_mixed_inputs(self):
        queries = [
            QueryAnalysis(),
            QueryAnalysis(intent="best_choice", keywords=["best", "laptop"], products=["Laptop 1"]),
            QueryAnalysis(intent="pricing", keywords=["price"], is_comparative=True,
                          is_looking_for_recommendation=True, context_boosts={"product_page": 3.0}),
        ]
        materials = [
            make_material(),
            make_material(title="Best laptop prices", content_type=ContentType.PRODUCT_PAGE,
                          structured_data=StructuredData(pricing=[
                              PriceEntry(product="Laptop 1", price="999", currency="USD"),
                          ]),
                          confidence_score=0.9),
            make_material(title="Laptop ranking", content_type=ContentType.RANKING,
                          structured_data=StructuredData(rankings=make_rankings(8), winner=WINNER),
                          intent_keywords=["best", "laptop", "price"],
                          primary_products=["Laptop 1"], confidence_score=1.0),
        ]
        for query in queries:
            for material in materials:
                assert 0.0 <= self.scorer.score(query, material) <= 3.0

    def test_explanation(self):
        query = QueryAnalysis(keywords=["laptop"])
        text = self.scorer.explain(query, make_material(title="laptop")).get_explanation()
        assert "base=0.400" in text
        assert "total=0.400" in text


# ============================================================================
# MODELS / CONFIG
# ============================================================================

class TestQueryAnalysis:
    """Tests for QueryAnalysis normalization."""

    def test_string_intent(self):
        assert QueryAnalysis(intent="comparison").intent == QueryIntent.COMPARISON

    def test_unknown_intent_is_general(self):
        assert QueryAnalysis(intent="shopping").intent == QueryIntent.GENERAL

    def test_empty_keywords_dropped(self):
        query = QueryAnalysis(keywords=["laptop", "", None], products=[None, "Dell"])
        assert query.keywords == ["laptop"]
        assert query.products == ["Dell"]

    def test_null_boosts_default_to_one(self):
        query = QueryAnalysis(
            intent="best_choice",
            keywords=["laptop"],
            context_boosts={"ranking": 1.5, "review": None, "comparison": "high"},
        )
        assert query.context_boosts == {"ranking": 1.5}
        assert query.boost_for(ContentType.REVIEW) == 1.0
        assert query.boost_for(ContentType.COMPARISON) == 1.0

    def test_null_boost_scores_normally(self):
        query = QueryAnalysis(keywords=["laptop"], context_boosts={"review": None})
        material = make_material(title="Laptop", content_type=ContentType.REVIEW)
        assert RelevanceScorer().explain(query, material).content_boost == 1.0


class TestRelevanceConfig:
    """Tests for RelevanceConfig.validate()."""

    def test_default_is_valid(self):
        assert RelevanceConfig().validate() is True

    def test_floor_above_cap_rejected(self):
        with pytest.raises(ValueError):
            RelevanceConfig(selection=SelectionConfig(min_relevance=5.0)).validate()

    def test_negative_weight_rejected(self):
        with pytest.raises(ValueError):
            RelevanceScorer(RelevanceConfig(structured=StructuredBonusConfig(winner=-0.1)))

    def test_zero_items_rejected(self):
        with pytest.raises(ValueError):
            RelevanceConfig(selection=SelectionConfig(max_items=0)).validate()
