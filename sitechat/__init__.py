"""
Sitechat Context Core
=====================

Context selection for a retrieval-augmented site chat assistant.

At ingestion time every training material is classified and mined for
structured facts (intelligence). At query time the materials are ranked
against an analyzed query and the best ones are rendered into a context
block for the language model (relevance).

All computation is pure and synchronous: no I/O, no shared mutable state.
"""

from .intelligence import ContentAnalysisResult, ContentType, analyze_content_intelligence
from .relevance import (
    ContextItem,
    QueryAnalysis,
    TrainingMaterial,
    build_optimized_context,
    select_relevant_context,
)

__version__ = "1.0.0"

__all__ = [
    "ContentAnalysisResult",
    "ContentType",
    "analyze_content_intelligence",
    "ContextItem",
    "QueryAnalysis",
    "TrainingMaterial",
    "build_optimized_context",
    "select_relevant_context",
]
