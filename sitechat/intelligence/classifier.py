"""
Content Type Classifier (Deterministic)
=======================================

Scores a document against the six weighted pattern families and picks
the best-fitting content type. Documents that barely match anything
fall back to "general" so that generic text is not forced into a type.

Usage:
    classifier = ContentTypeClassifier()
    content_type = classifier.classify(title, content)
"""

import logging
from typing import Dict, List, Optional, Pattern

from .extraction_config import ExtractionConfig
from .models import ContentType
from .patterns import (
    CONTENT_TYPE_PATTERNS,
    CONTENT_TYPE_PRIORITY,
    count_pattern_matches,
)

logger = logging.getLogger(__name__)


class ContentTypeClassifier:
    """Pattern-count classifier. Same input always yields the same type."""

    def __init__(
        self,
        patterns: Optional[Dict[ContentType, List[Pattern]]] = None,
        config: Optional[ExtractionConfig] = None,
    ):
        self.patterns = patterns or CONTENT_TYPE_PATTERNS
        self.config = config or ExtractionConfig()

    def score_types(self, title: str, content: str) -> Dict[ContentType, int]:
        """Pattern hit count per content type, in priority order."""
        text = f"{title or ''} {content or ''}"
        return {
            content_type: count_pattern_matches(text, self.patterns.get(content_type, []))
            for content_type in CONTENT_TYPE_PRIORITY
        }

    def classify(self, title: str, content: str) -> ContentType:
        scores = self.score_types(title, content)
        best_score = max(scores.values())

        if best_score < self.config.classifier_min_score:
            logger.debug("Classified as general (best score %d)", best_score)
            return ContentType.GENERAL

        # max() keeps the first maximum, so ties follow CONTENT_TYPE_PRIORITY
        best = max(scores, key=lambda t: scores[t])
        logger.debug("Classified as %s (scores=%s)", best.value, {t.value: s for t, s in scores.items()})
        return best
