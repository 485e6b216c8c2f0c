"""
Content Intelligence Data Models
================================

Structured outputs of the ingestion-time analysis pipeline.
These map directly to the training_materials columns added for
content intelligence (content_type, structured_data, intent_keywords,
primary_products, confidence_score).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .extraction_config import DEFAULT_ANALYSIS_CONFIG

logger = logging.getLogger(__name__)


class ContentType(str, Enum):
    """Coarse document categories used for extraction and boosts."""
    RANKING = "ranking"
    COMPARISON = "comparison"
    PRODUCT_PAGE = "product_page"
    REVIEW = "review"
    SERVICE = "service"
    TUTORIAL = "tutorial"
    GENERAL = "general"


@dataclass
class RankingEntry:
    """One ranked product from a top list."""
    product: str
    rank: int                       # 1..20
    reason: Optional[str] = None    # surrounding text window
    score: Optional[str] = None


@dataclass
class Winner:
    """The document's declared best pick."""
    product: str
    reason: str


@dataclass
class PriceEntry:
    product: str
    price: str                      # kept verbatim, e.g. "49.99"
    currency: Optional[str] = None  # ISO-like code: USD, EUR, GBP, NOK


@dataclass
class FeatureSet:
    product: str
    features: List[str] = field(default_factory=list)


@dataclass
class RatingEntry:
    product: str
    rating: str
    max_rating: Optional[str] = None


@dataclass
class Recommendation:
    """A "for <context>, pick <product>" statement."""
    context: str
    product: str
    reason: str


@dataclass
class Comparison:
    products: List[str]             # always [A, B]
    aspect: str
    conclusion: str


def _entries(raw: Any, factory, kind: str) -> Optional[list]:
    """Rebuild a list of records from persisted dicts, skipping bad entries."""
    if raw is None:
        return None
    if not isinstance(raw, list):
        logger.warning("Ignoring non-list structured %s: %r", kind, type(raw).__name__)
        return None

    entries = []
    for item in raw:
        try:
            entries.append(factory(item))
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed %s entry: %s", kind, e)
    return entries or None


def _ranking_entry(d: Dict[str, Any]) -> RankingEntry:
    rank = int(d["rank"])
    if not 1 <= rank <= DEFAULT_ANALYSIS_CONFIG.extraction.max_rank:
        raise ValueError(f"rank {rank} out of range")
    return RankingEntry(
        product=str(d["product"]),
        rank=rank,
        reason=d.get("reason"),
        score=d.get("score"),
    )


@dataclass
class StructuredData:
    """
    Facts mechanically extracted from a document.

    Every sub-collection is Optional and None means "not detected".
    The extractor never stores an empty list.
    """
    rankings: Optional[List[RankingEntry]] = None
    winner: Optional[Winner] = None
    pricing: Optional[List[PriceEntry]] = None
    features: Optional[List[FeatureSet]] = None
    ratings: Optional[List[RatingEntry]] = None
    recommendations: Optional[List[Recommendation]] = None
    comparisons: Optional[List[Comparison]] = None

    @property
    def data_points(self) -> int:
        """Total number of extracted facts; a winner counts as one."""
        total = 0
        for collection in (
            self.rankings, self.pricing, self.features,
            self.ratings, self.recommendations, self.comparisons,
        ):
            if collection:
                total += len(collection)
        if self.winner is not None:
            total += 1
        return total

    @property
    def is_empty(self) -> bool:
        return self.data_points == 0

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe form for the structured_data column (absent keys omitted)."""
        out: Dict[str, Any] = {}
        if self.rankings is not None:
            out["rankings"] = [
                {"product": r.product, "rank": r.rank, "reason": r.reason, "score": r.score}
                for r in self.rankings
            ]
        if self.winner is not None:
            out["winner"] = {"product": self.winner.product, "reason": self.winner.reason}
        if self.pricing is not None:
            out["pricing"] = [
                {"product": p.product, "price": p.price, "currency": p.currency}
                for p in self.pricing
            ]
        if self.features is not None:
            out["features"] = [
                {"product": f.product, "features": list(f.features)} for f in self.features
            ]
        if self.ratings is not None:
            out["ratings"] = [
                {"product": r.product, "rating": r.rating, "maxRating": r.max_rating}
                for r in self.ratings
            ]
        if self.recommendations is not None:
            out["recommendations"] = [
                {"context": r.context, "product": r.product, "reason": r.reason}
                for r in self.recommendations
            ]
        if self.comparisons is not None:
            out["comparisons"] = [
                {"products": list(c.products), "aspect": c.aspect, "conclusion": c.conclusion}
                for c in self.comparisons
            ]
        return out

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "StructuredData":
        """
        Rebuild from the persisted JSON form.

        Unknown keys are ignored and malformed entries skipped, so a
        partially corrupted row still yields whatever is usable.
        """
        if not data or not isinstance(data, dict):
            return cls()

        winner = None
        raw_winner = data.get("winner")
        if isinstance(raw_winner, dict) and raw_winner.get("product"):
            winner = Winner(
                product=str(raw_winner["product"]),
                reason=str(raw_winner.get("reason") or ""),
            )

        rankings = _entries(data.get("rankings"), _ranking_entry, "ranking")
        if rankings is not None:
            rankings.sort(key=lambda r: r.rank)

        return cls(
            rankings=rankings,
            winner=winner,
            pricing=_entries(data.get("pricing"), lambda d: PriceEntry(
                product=str(d["product"]),
                price=str(d["price"]),
                currency=d.get("currency"),
            ), "pricing"),
            features=_entries(data.get("features"), lambda d: FeatureSet(
                product=str(d["product"]),
                features=[str(f) for f in d.get("features") or []],
            ), "features"),
            ratings=_entries(data.get("ratings"), lambda d: RatingEntry(
                product=str(d["product"]),
                rating=str(d["rating"]),
                max_rating=d.get("maxRating"),
            ), "rating"),
            recommendations=_entries(data.get("recommendations"), lambda d: Recommendation(
                context=str(d["context"]),
                product=str(d["product"]),
                reason=str(d.get("reason") or ""),
            ), "recommendation"),
            comparisons=_entries(data.get("comparisons"), lambda d: Comparison(
                products=[str(p) for p in d["products"]],
                aspect=str(d.get("aspect") or "general comparison"),
                conclusion=str(d.get("conclusion") or ""),
            ), "comparison"),
        )


@dataclass
class ContentAnalysisResult:
    """Per-document analysis, recomputed whenever the content changes."""
    content_type: ContentType
    structured_data: StructuredData
    intent_keywords: List[str]
    primary_products: List[str]     # deduplicated, max 10
    confidence_score: float         # 0.0 to 1.0

    def to_record(self) -> Dict[str, Any]:
        """Column values the ingestion side persists next to the document."""
        return {
            "content_type": self.content_type.value,
            "structured_data": self.structured_data.to_dict(),
            "intent_keywords": list(self.intent_keywords),
            "primary_products": list(self.primary_products),
            "confidence_score": self.confidence_score,
        }
