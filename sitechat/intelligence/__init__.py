"""
Sitechat Content Intelligence
=============================

Deterministic, ingestion-time analysis of training materials.
No LLM, no embeddings: pattern heuristics only.

Modules:
    models            - ContentType, StructuredData records, ContentAnalysisResult
    patterns          - Regex families and word lists (tunable data)
    extraction_config - Numeric thresholds and windows
    classifier        - Content type classification
    extractors        - Structured data extraction + product name normalizer
    keywords          - Intent keywords and primary products
    confidence        - Per-document confidence score
    analyzer          - End-to-end pipeline
"""

from .models import (
    ContentType,
    StructuredData,
    RankingEntry,
    Winner,
    PriceEntry,
    FeatureSet,
    RatingEntry,
    Recommendation,
    Comparison,
    ContentAnalysisResult,
)
from .extraction_config import (
    AnalysisConfig,
    ExtractionConfig,
    ConfidenceConfig,
    DEFAULT_ANALYSIS_CONFIG,
)
from .classifier import ContentTypeClassifier
from .extractors import StructuredDataExtractor, clean_product_name
from .keywords import KeywordExtractor
from .confidence import calculate_confidence_score
from .analyzer import ContentAnalyzer, analyze_content_intelligence

__all__ = [
    "ContentType",
    "StructuredData",
    "RankingEntry",
    "Winner",
    "PriceEntry",
    "FeatureSet",
    "RatingEntry",
    "Recommendation",
    "Comparison",
    "ContentAnalysisResult",
    "AnalysisConfig",
    "ExtractionConfig",
    "ConfidenceConfig",
    "DEFAULT_ANALYSIS_CONFIG",
    "ContentTypeClassifier",
    "StructuredDataExtractor",
    "clean_product_name",
    "KeywordExtractor",
    "calculate_confidence_score",
    "ContentAnalyzer",
    "analyze_content_intelligence",
]
