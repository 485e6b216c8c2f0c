"""
Tests for context selection and context assembly.

Tests the query-time pipeline:
- Top-N selection with early termination below the relevance floor
- Item body: summary + key points, raw content fallback, title-only fallback
- Source attribution from metadata
- Rendering of the prompt context block
- Full flow: analyzed materials -> selection -> context block

Usage:
    pytest tests/test_context_selection.py -v
"""

from sitechat import ContentType, analyze_content_intelligence, build_optimized_context
from sitechat.intelligence.models import (
    PriceEntry,
    RankingEntry,
    Recommendation,
    StructuredData,
    Winner,
)
from sitechat.relevance.context_builder import extract_source_info, format_structured_data
from sitechat.relevance.models import ContextItem, QueryAnalysis, SourceInfo, TrainingMaterial
from sitechat.relevance.scoring_config import RelevanceConfig, SelectionConfig
from sitechat.relevance.selector import (
    ContextSelector,
    build_item_content,
    select_relevant_context,
)


# ============================================================================
# TEST DATA
# ============================================================================

class FixedScorer:
    """Scorer stub returning a preset score per material id."""

    def __init__(self, scores: dict):
        self.scores = scores

    def score(self, query, material):
        return self.scores.get(material.id, 0.0)


def make_material(material_id: str, **overrides) -> TrainingMaterial:
    """Helper to create a training material."""
    data = {"id": material_id, "title": f"Material {material_id}", "summary": "Summary"}
    data.update(overrides)
    return TrainingMaterial(**data)


def make_selector(scores: dict, **selection) -> ContextSelector:
    config = RelevanceConfig(selection=SelectionConfig(**selection))
    return ContextSelector(config=config, scorer=FixedScorer(scores))


QUERY = QueryAnalysis(intent="best_choice", keywords=["laptop"])


# ============================================================================
# SELECTION
# ============================================================================

class TestContextSelector:
    """Tests for ContextSelector.select()."""

    def test_empty_pool(self):
        assert make_selector({}).select(QUERY, []) == []

    def test_single_relevant_material(self):
        """Ten materials, one scoring 1.2 and nine 0.0: exactly one item."""
        materials = [make_material(f"m{i}") for i in range(10)]
        selector = make_selector({"m3": 1.2})

        items = selector.select(QUERY, materials, max_items=7)
        assert len(items) == 1
        assert items[0].material_id == "m3"
        assert items[0].relevance == 1.2

    def test_sorted_by_score(self):
        materials = [make_material(m) for m in ("a", "b", "c")]
        items = make_selector({"a": 0.5, "b": 0.9, "c": 0.7}).select(QUERY, materials)
        assert [item.material_id for item in items] == ["b", "c", "a"]

    def test_stops_at_floor(self):
        materials = [make_material(m) for m in ("a", "b", "c", "d")]
        selector = make_selector({"a": 0.9, "b": 0.05, "c": 0.8, "d": 0.1})
        items = selector.select(QUERY, materials)
        # 0.1 is not below the floor, 0.05 is
        assert [item.material_id for item in items] == ["a", "c", "d"]

    def test_respects_max_items(self):
        materials = [make_material(f"m{i}") for i in range(10)]
        scores = {f"m{i}": 1.0 - i * 0.05 for i in range(10)}
        items = make_selector(scores).select(QUERY, materials, max_items=3)
        assert [item.material_id for item in items] == ["m0", "m1", "m2"]

    def test_default_limit_is_seven(self):
        materials = [make_material(f"m{i}") for i in range(10)]
        scores = {f"m{i}": 1.0 for i in range(10)}
        assert len(make_selector(scores).select(QUERY, materials)) == 7

    def test_ties_keep_storage_order(self):
        materials = [make_material(m) for m in ("x", "y", "z")]
        items = make_selector({"x": 0.5, "y": 0.5, "z": 0.5}).select(QUERY, materials)
        assert [item.material_id for item in items] == ["x", "y", "z"]

    def test_item_carries_material_fields(self):
        structured = StructuredData(rankings=[RankingEntry(product="Dell XPS", rank=1)])
        material = make_material(
            "a",
            content_type=ContentType.RANKING,
            structured_data=structured,
            metadata={"url": "https://www.acme-tools.com/blog/laptops"},
        )
        item = make_selector({"a": 1.0}).select(QUERY, [material])[0]

        assert item.title == "Material a"
        assert item.content_type == ContentType.RANKING
        assert item.structured_data == structured
        assert item.structured_data is not structured
        assert item.source_info.domain == "acme-tools.com"

    def test_item_does_not_share_structured_data(self):
        structured = StructuredData(rankings=[RankingEntry(product="Dell XPS", rank=1)])
        material = make_material("a", structured_data=structured)
        item = make_selector({"a": 1.0}).select(QUERY, [material])[0]

        item.structured_data.rankings.append(RankingEntry(product="HP Pavilion", rank=2))
        assert [r.product for r in material.structured_data.rankings] == ["Dell XPS"]


# ============================================================================
# ITEM CONTENT
# ============================================================================

class TestItemContent:
    """Tests for build_item_content()."""

    def setup_method(self):
        self.selection = SelectionConfig()

    def test_summary_and_key_points(self):
        material = make_material("a", summary="Short summary", key_points=["First", "  ", "Second"])
        assert build_item_content(material, self.selection) == (
            "Short summary\n\nKey points:\n• First\n• Second"
        )

    def test_summary_only(self):
        material = make_material("a", summary="Short summary")
        assert build_item_content(material, self.selection) == "Short summary"

    def test_raw_content_truncated(self):
        material = make_material("a", summary=None, content="a" * 1200)
        assert build_item_content(material, self.selection) == "a" * 1000 + "…"

    def test_short_raw_content_kept(self):
        material = make_material("a", summary=None, content="  Plain text.  ")
        assert build_item_content(material, self.selection) == "Plain text."

    def test_title_only(self):
        material = make_material("a", title="Empty doc", summary=None, content=None)
        assert build_item_content(material, self.selection) == (
            "Title: Empty doc\n(No detailed content available)"
        )


# ============================================================================
# SOURCE ATTRIBUTION
# ============================================================================

class TestSourceInfo:
    """Tests for extract_source_info()."""

    def test_no_metadata(self):
        assert extract_source_info(None) is None
        assert extract_source_info({}) is None

    def test_company_from_domain(self):
        info = extract_source_info({"url": "https://www.acme-tools.com/blog/post"})
        assert info.url == "https://www.acme-tools.com/blog/post"
        assert info.domain == "acme-tools.com"
        assert info.company == "Acme Tools"

    def test_site_name_wins(self):
        info = extract_source_info({
            "sourceUrl": "https://shop.example.org/item",
            "siteName": "Example Shop",
        })
        assert info.domain == "shop.example.org"
        assert info.company == "Example Shop"

    def test_url_without_scheme(self):
        info = extract_source_info({"url": "example.org/page"})
        assert info.domain == "example.org"
        assert info.company == "Example"

    def test_author_only(self):
        info = extract_source_info({"author": "Jane Doe"})
        assert info.url is None
        assert info.company == "Jane Doe"

    def test_non_string_values_ignored(self):
        assert extract_source_info({"url": 123}) is None


# ============================================================================
# CONTEXT ASSEMBLY
# ============================================================================

class TestBuildOptimizedContext:
    """Tests for build_optimized_context()."""

    def test_no_items(self):
        assert build_optimized_context([]) == ""

    def test_full_item(self):
        item = ContextItem(
            title="Best Budget Laptops",
            content="Our top picks.",
            relevance=0.853,
            content_type=ContentType.RANKING,
            structured_data=StructuredData(
                rankings=[RankingEntry(product="Dell XPS", rank=1)],
                winner=Winner(product="Dell XPS", reason="Great value for money"),
            ),
            source_info=SourceInfo(
                url="https://www.acme-tools.com/x",
                domain="acme-tools.com",
                company="Acme Tools",
            ),
        )
        assert build_optimized_context([item]) == (
            "\n\nTraining Materials:\n"
            "\n1. Best Budget Laptops [Company: Acme Tools | Domain: acme-tools.com]"
            " (Type: ranking, Relevance: 85%):\nOur top picks.\n"
            "\nStructured Information:\n"
            "- Rank #1: Dell XPS\n"
            "- Top pick: Dell XPS\n"
            "  Reason: Great value for money\n"
        )

    def test_plain_items_are_numbered(self):
        items = [
            ContextItem(title="Returns", content="30 day returns.", relevance=1.0),
            ContextItem(title="Shipping", content="Free shipping.", relevance=0.5),
        ]
        context = build_optimized_context(items)
        assert "\n1. Returns (Relevance: 100%):\n30 day returns.\n" in context
        assert "\n2. Shipping (Relevance: 50%):\nFree shipping.\n" in context
        assert "Structured Information" not in context

    def test_empty_structured_data_not_rendered(self):
        item = ContextItem(title="Guide", content="Text.", relevance=0.5,
                           structured_data=StructuredData())
        assert "Structured Information" not in build_optimized_context([item])

    def test_recommendation_and_price_lines(self):
        structured = StructuredData(
            pricing=[
                PriceEntry(product="Premium Widget", price="49.99", currency="USD"),
                PriceEntry(product="Basic Widget", price="9"),
            ],
            recommendations=[
                Recommendation(context="small offices", product="Acme Hub", reason=""),
            ],
        )
        assert format_structured_data(structured) == [
            "- Recommended for small offices: Acme Hub",
            "- Price: Premium Widget - 49.99 USD",
            "- Price: Basic Widget - 9",
        ]


# ============================================================================
# FULL FLOW
# ============================================================================

class TestSelectionFlow:
    """Analyzed materials through selection and assembly."""

    def setup_method(self):
        self.laptops = TrainingMaterial(
            id="laptops",
            title="10 Best Budget Laptops 2024",
            content=(
                "1. Dell XPS - great value\n"
                "2. HP Pavilion - good battery\n"
                "3. Lenovo ThinkPad - durable"
            ),
        )
        self.chair = TrainingMaterial(
            id="chair",
            title="Office Chair Assembly",
            content="How to assemble your chair.\nStep 1. Attach the wheels.",
        )
        self.materials = [
            m.with_analysis(analyze_content_intelligence(m.title, m.content))
            for m in (self.chair, self.laptops)
        ]
        self.query = QueryAnalysis(
            intent="best_choice",
            keywords=["best", "laptops"],
            products=["Dell XPS"],
            is_looking_for_recommendation=True,
            context_boosts={"ranking": 2.5, "review": 2.0},
        )

    def test_analysis_applied(self):
        assert self.materials[0].content_type == ContentType.TUTORIAL
        assert self.materials[1].content_type == ContentType.RANKING

    def test_only_relevant_material_selected(self):
        items = select_relevant_context(self.query, self.materials)
        assert [item.material_id for item in items] == ["laptops"]
        assert 1.0 < items[0].relevance < 3.0

    def test_context_block(self):
        context = build_optimized_context(select_relevant_context(self.query, self.materials))
        assert context.startswith("\n\nTraining Materials:\n")
        assert "1. 10 Best Budget Laptops 2024 (Type: ranking, Relevance: 222%)" in context
        assert "- Rank #1: Dell XPS - great value" in context
        assert "Office Chair Assembly" not in context
