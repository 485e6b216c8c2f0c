"""
Relevance Data Models
=====================

Query-time inputs (QueryAnalysis, TrainingMaterial) and outputs
(RelevanceBreakdown, ContextItem) of the context selection pipeline.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from ..intelligence.models import ContentAnalysisResult, ContentType, StructuredData

logger = logging.getLogger(__name__)


def _normalize_boosts(raw: Optional[Dict[Any, Any]]) -> Dict[str, float]:
    """Content type string -> multiplier. Null or non-numeric boosts are dropped."""
    boosts = {}
    for key, value in (raw or {}).items():
        name = key.value if isinstance(key, Enum) else str(key)
        try:
            boosts[name] = float(value)
        except (TypeError, ValueError):
            logger.debug("Ignoring boost %r for %s, using 1.0", value, name)
    return boosts


class QueryIntent(str, Enum):
    """Intent labels produced by the query-intent analyzer."""
    COMPARISON = "comparison"
    BEST_CHOICE = "best_choice"
    SPECIFIC_PRODUCT = "specific_product"
    PRICING = "pricing"
    FEATURES = "features"
    HOW_TO = "how_to"
    GENERAL = "general"


@dataclass
class QueryAnalysis:
    """
    Externally computed analysis of the current chat query.

    Read-only for this package; only normalised on construction
    (string intent -> QueryIntent, boost keys -> content type strings).
    """
    intent: QueryIntent = QueryIntent.GENERAL
    keywords: List[str] = field(default_factory=list)
    products: List[str] = field(default_factory=list)
    is_comparative: bool = False
    is_looking_for_recommendation: bool = False
    context_boosts: Dict[str, float] = field(default_factory=dict)
    confidence: Optional[float] = None

    def __post_init__(self):
        if not isinstance(self.intent, QueryIntent):
            try:
                self.intent = QueryIntent(self.intent)
            except ValueError:
                logger.debug("Unknown query intent %r, treating as general", self.intent)
                self.intent = QueryIntent.GENERAL

        self.keywords = [k for k in (self.keywords or []) if k]
        self.products = [p for p in (self.products or []) if p]
        self.context_boosts = _normalize_boosts(self.context_boosts)

    def boost_for(self, content_type: Optional[ContentType]) -> float:
        """Boost multiplier for a content type; 1.0 when unknown or missing."""
        if content_type is None:
            return 1.0
        return self.context_boosts.get(content_type.value, 1.0)


@dataclass
class TrainingMaterial:
    """
    A stored document together with its persisted analysis fields.

    Analysis fields are None until the document has been analyzed.
    """
    id: str
    title: str
    content: Optional[str] = None
    summary: Optional[str] = None
    key_points: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    # Content intelligence (persisted at ingestion time)
    content_type: Optional[ContentType] = None
    structured_data: Optional[StructuredData] = None
    intent_keywords: List[str] = field(default_factory=list)
    primary_products: List[str] = field(default_factory=list)
    confidence_score: Optional[float] = None

    def with_analysis(self, analysis: ContentAnalysisResult) -> "TrainingMaterial":
        """Copy of this material carrying a fresh analysis."""
        return replace(
            self,
            content_type=analysis.content_type,
            structured_data=analysis.structured_data,
            intent_keywords=list(analysis.intent_keywords),
            primary_products=list(analysis.primary_products),
            confidence_score=analysis.confidence_score,
        )


@dataclass
class RelevanceBreakdown:
    """
    Component-by-component relevance of one material for one query.

    total = base * content_boost + every bonus, capped at max_score.
    """
    base: float = 0.0
    content_boost: float = 1.0
    structured_bonus: float = 0.0
    intent_keyword_bonus: float = 0.0
    product_bonus: float = 0.0
    confidence_bonus: float = 0.0
    recommendation_bonus: float = 0.0
    max_score: float = 3.0

    @property
    def boosted_base(self) -> float:
        return self.base * self.content_boost

    @property
    def uncapped(self) -> float:
        return (
            self.boosted_base
            + self.structured_bonus
            + self.intent_keyword_bonus
            + self.product_bonus
            + self.confidence_bonus
            + self.recommendation_bonus
        )

    @property
    def total(self) -> float:
        return min(max(self.uncapped, 0.0), self.max_score)

    def get_explanation(self) -> str:
        lines = [
            f"base={self.base:.3f} x boost={self.content_boost:.2f} -> {self.boosted_base:.3f}",
            f"structured=+{self.structured_bonus:.3f}",
            f"intent_keywords=+{self.intent_keyword_bonus:.3f}",
            f"products=+{self.product_bonus:.3f}",
            f"confidence=+{self.confidence_bonus:.3f}",
            f"recommendation=+{self.recommendation_bonus:.3f}",
            f"total={self.total:.3f} (cap {self.max_score})",
        ]
        return "\n".join(lines)


@dataclass
class SourceInfo:
    """Where a training material came from, derived from its metadata."""
    url: Optional[str] = None
    domain: Optional[str] = None
    company: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not (self.url or self.domain or self.company)


@dataclass
class ContextItem:
    """One selected material, rendered for the model-facing context block."""
    title: str
    content: str
    relevance: float
    content_type: Optional[ContentType] = None
    structured_data: Optional[StructuredData] = None
    source_info: Optional[SourceInfo] = None
    material_id: Optional[str] = None
