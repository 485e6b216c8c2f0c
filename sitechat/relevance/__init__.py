"""
Sitechat Relevance Module
=========================

Query-time ranking of a site's training materials and assembly of the
context block handed to the language model.

Components:
    - RelevanceScorer: multi-signal score per (query, material)
    - ContextSelector: top-N selection with a relevance floor
    - build_optimized_context: prompt-ready rendering

Usage:
    from sitechat.relevance import select_relevant_context, build_optimized_context

    items = select_relevant_context(query_analysis, materials)
    context = build_optimized_context(items)
"""

from .models import (
    QueryIntent,
    QueryAnalysis,
    TrainingMaterial,
    RelevanceBreakdown,
    SourceInfo,
    ContextItem,
)
from .scoring_config import (
    RelevanceConfig,
    DEFAULT_CONFIG,
)
from .scorer import RelevanceScorer
from .context_builder import build_optimized_context, extract_source_info
from .selector import (
    ContextSelector,
    select_relevant_context,
    relevance_config_from_settings,
)

__all__ = [
    "QueryIntent",
    "QueryAnalysis",
    "TrainingMaterial",
    "RelevanceBreakdown",
    "SourceInfo",
    "ContextItem",
    "RelevanceConfig",
    "DEFAULT_CONFIG",
    "RelevanceScorer",
    "build_optimized_context",
    "extract_source_info",
    "ContextSelector",
    "select_relevant_context",
    "relevance_config_from_settings",
]
