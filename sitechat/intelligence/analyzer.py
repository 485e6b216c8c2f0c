"""
Content Intelligence Analyzer
=============================

Runs once per (re-)ingested document:

    raw text -> classify -> extract structured data
             -> intent keywords / primary products -> confidence

The result is handed back to the ingestion side, which persists it
next to the training material (see ContentAnalysisResult.to_record()).

Usage:
    from sitechat.intelligence import analyze_content_intelligence

    result = analyze_content_intelligence(title, content)
    row_update = result.to_record()
"""

import logging
import time
from typing import Any, Dict, Optional

from .classifier import ContentTypeClassifier
from .confidence import calculate_confidence_score
from .extraction_config import AnalysisConfig, DEFAULT_ANALYSIS_CONFIG
from .extractors import StructuredDataExtractor
from .keywords import KeywordExtractor
from .models import ContentAnalysisResult

logger = logging.getLogger(__name__)


class ContentAnalyzer:
    """
    Pure, synchronous analysis pipeline.

    Holds only its (immutable) configuration, so one instance can be
    shared across threads and requests.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None):
        self.config = config or DEFAULT_ANALYSIS_CONFIG
        self.config.validate()

        self.classifier = ContentTypeClassifier(config=self.config.extraction)
        self.extractor = StructuredDataExtractor(config=self.config.extraction)
        self.keywords = KeywordExtractor(config=self.config.extraction)

    def analyze(
        self,
        title: str,
        content: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ContentAnalysisResult:
        """
        Analyze one document.

        Args:
            title: Document title (may be empty)
            content: Raw document text (may be empty)
            metadata: Ingestion metadata, only used for log correlation

        Returns:
            ContentAnalysisResult ready to persist.
        """
        started = time.perf_counter()
        title = title or ""
        content = content or ""

        content_type = self.classifier.classify(title, content)
        structured_data = self.extractor.extract(content, content_type)

        combined_text = f"{title} {content}".lower()
        intent_keywords = self.keywords.extract_intent_keywords(combined_text, content_type)
        primary_products = self.keywords.extract_primary_products(
            content, content_type, structured_data
        )

        confidence = calculate_confidence_score(
            content, structured_data, self.config.confidence
        )

        material_id = (metadata or {}).get("id")
        logger.debug(
            "Analyzed '%s': type=%s points=%d products=%d confidence=%.2f",
            title[:50], content_type.value, structured_data.data_points,
            len(primary_products), confidence,
            extra={
                "material_id": material_id,
                "content_type": content_type.value,
                "score": confidence,
                "duration": round(time.perf_counter() - started, 6),
            },
        )

        return ContentAnalysisResult(
            content_type=content_type,
            structured_data=structured_data,
            intent_keywords=intent_keywords,
            primary_products=primary_products,
            confidence_score=confidence,
        )


_default_analyzer: Optional[ContentAnalyzer] = None


def analyze_content_intelligence(
    title: str,
    content: str,
    metadata: Optional[Dict[str, Any]] = None,
) -> ContentAnalysisResult:
    """Analyze with the default configuration."""
    global _default_analyzer
    if _default_analyzer is None:
        _default_analyzer = ContentAnalyzer()
    return _default_analyzer.analyze(title, content, metadata)
