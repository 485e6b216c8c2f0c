"""
Confidence scoring for a document analysis.

Rewards longer, richer documents without letting any single signal
dominate: base + length factor + structured-data richness, capped at 1.
"""

from typing import Optional

from .extraction_config import ConfidenceConfig
from .models import StructuredData


def calculate_confidence_score(
    content: str,
    structured_data: StructuredData,
    config: Optional[ConfidenceConfig] = None,
) -> float:
    cfg = config or ConfidenceConfig()

    word_count = len((content or "").split())
    length_factor = min(word_count / cfg.words_per_point, cfg.max_length_factor)
    richness_factor = min(structured_data.data_points / cfg.points_divisor, cfg.max_richness_factor)

    score = cfg.base + length_factor + richness_factor
    return round(min(max(score, 0.0), cfg.max_score), 4)
