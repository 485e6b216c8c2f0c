"""
Context Selection
=================

Ranks every training material of a site for the current query and keeps
the best ones:

1. Score each candidate with RelevanceScorer
2. Sort descending by score (ties keep the storage order)
3. Accept up to max_items, stopping at the FIRST score below the
   relevance floor, even if max_items has not been reached

An empty result means "no context available" and is not an error.

Usage:
    items = select_relevant_context(query_analysis, materials)
    prompt_context = build_optimized_context(items)
"""

import copy
import logging
import time
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from ..data.config import Settings, get_settings
from .context_builder import extract_source_info
from .models import ContextItem, QueryAnalysis, TrainingMaterial
from .scorer import RelevanceScorer
from .scoring_config import DEFAULT_CONFIG, RelevanceConfig, SelectionConfig

logger = logging.getLogger(__name__)


def relevance_config_from_settings(settings: Optional[Settings] = None) -> RelevanceConfig:
    """DEFAULT_CONFIG with the selection limits taken from the environment."""
    context = (settings or get_settings()).context
    return replace(
        DEFAULT_CONFIG,
        selection=replace(
            DEFAULT_CONFIG.selection,
            max_items=context.max_items,
            min_relevance=context.min_relevance,
            raw_content_chars=context.raw_content_chars,
        ),
    )


def build_item_content(material: TrainingMaterial, selection: SelectionConfig) -> str:
    """
    Body text for a context item.

    Prefers the summary followed by bulleted key points; falls back to the
    raw content truncated to raw_content_chars (with an ellipsis when cut).
    """
    summary = (material.summary or "").strip()
    if summary:
        points = [p.strip() for p in material.key_points if p and p.strip()]
        if not points:
            return summary
        bullets = "\n".join(f"• {point}" for point in points)
        return f"{summary}\n\nKey points:\n{bullets}"

    raw = (material.content or "").strip()
    if raw:
        if len(raw) > selection.raw_content_chars:
            return raw[:selection.raw_content_chars] + selection.ellipsis
        return raw

    return f"Title: {material.title}\n(No detailed content available)"


class ContextSelector:
    """Scores, ranks and selects training materials for one query."""

    def __init__(
        self,
        config: Optional[RelevanceConfig] = None,
        scorer: Optional[RelevanceScorer] = None,
    ):
        self.config = config or relevance_config_from_settings()
        self.config.validate()
        self.scorer = scorer or RelevanceScorer(self.config)

    def rank(
        self,
        query: QueryAnalysis,
        materials: Sequence[TrainingMaterial],
    ) -> List[Tuple[TrainingMaterial, float]]:
        """Every material with its score, best first."""
        scored = [(material, self.scorer.score(query, material)) for material in materials]
        scored.sort(key=lambda pair: pair[1], reverse=True)
        return scored

    def select(
        self,
        query: QueryAnalysis,
        materials: Sequence[TrainingMaterial],
        max_items: Optional[int] = None,
    ) -> List[ContextItem]:
        """
        Top materials as ContextItems.

        Args:
            query: Analysis of the current chat query
            materials: All candidate materials of the site
            max_items: Override for the configured maximum

        Returns:
            At most max_items items, best first; empty when nothing
            clears the relevance floor.
        """
        started = time.perf_counter()
        selection = self.config.selection
        limit = selection.max_items if max_items is None else max_items

        items: List[ContextItem] = []
        cutoff_score = None

        for material, score in self.rank(query, materials):
            if len(items) >= limit:
                break
            if score < selection.min_relevance:
                cutoff_score = score
                break

            items.append(ContextItem(
                title=material.title,
                content=build_item_content(material, selection),
                relevance=score,
                content_type=material.content_type,
                structured_data=copy.deepcopy(material.structured_data),
                source_info=extract_source_info(material.metadata),
                material_id=material.id,
            ))
            logger.debug("Selected material %s (score=%.3f)", material.id, score)

        logger.info(
            "Selected %d of %d materials (intent=%s, limit=%d, cutoff=%s)",
            len(items), len(materials), query.intent.value, limit,
            f"{cutoff_score:.3f}" if cutoff_score is not None else "none",
            extra={
                "query_intent": query.intent.value,
                "duration": round(time.perf_counter() - started, 6),
            },
        )
        return items


def select_relevant_context(
    query: QueryAnalysis,
    materials: Sequence[TrainingMaterial],
    max_items: Optional[int] = None,
    selector: Optional[ContextSelector] = None,
) -> List[ContextItem]:
    """Select with the environment-configured defaults unless a selector is given."""
    selector = selector or ContextSelector()
    return selector.select(query, materials, max_items=max_items)
