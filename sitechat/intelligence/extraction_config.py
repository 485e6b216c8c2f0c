"""
Thresholds and windows for ingestion-time content analysis.

All numeric limits used by the classifier, the extractors, the keyword
extraction and the confidence scorer live here. The analysis code reads
them from an injected config instead of inline literals.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ExtractionConfig:
    """Limits for classification and structured-data extraction."""

    # Below this best family score the document is "general"
    classifier_min_score: int = 2

    # Rankings
    max_rank: int = 20
    min_rank_line_length: int = 3        # captured line must be longer than this
    ranking_reason_radius: int = 200

    # Winner / comparisons / recommendations
    winner_reason_radius: int = 300
    comparison_radius: int = 300
    recommendation_reason_radius: int = 200

    # Product names
    max_name_length: int = 100
    min_price_name_length: int = 2       # normalized name must be longer than this

    # Feature sections: the product line length is strictly between these
    feature_line_min: int = 10
    feature_line_max: int = 100

    # Keywords and products
    min_keyword_length: int = 3          # tokens must be longer than this
    max_common_keywords: int = 20
    max_ranked_products: int = 5
    max_primary_products: int = 10
    generic_line_min: int = 5            # strict bounds on trimmed line length
    generic_line_max: int = 100
    max_generic_products: int = 10


@dataclass(frozen=True)
class ConfidenceConfig:
    """
    confidence = base + min(words / words_per_point, max_length_factor)
                      + min(data_points / points_divisor, max_richness_factor)
    capped at max_score.
    """

    base: float = 0.3
    words_per_point: float = 1000.0
    max_length_factor: float = 0.3
    points_divisor: float = 10.0
    max_richness_factor: float = 0.4
    max_score: float = 1.0


@dataclass(frozen=True)
class AnalysisConfig:
    """Single entry point for analysis calibration."""

    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    confidence: ConfidenceConfig = field(default_factory=ConfidenceConfig)

    def validate(self) -> bool:
        """Check the configuration is internally consistent."""
        ext = self.extraction
        if ext.max_rank <= 0:
            raise ValueError("max_rank must be positive")
        if ext.feature_line_min >= ext.feature_line_max:
            raise ValueError("feature_line_min must be below feature_line_max")
        if ext.generic_line_min >= ext.generic_line_max:
            raise ValueError("generic_line_min must be below generic_line_max")
        if ext.max_primary_products <= 0:
            raise ValueError("max_primary_products must be positive")

        conf = self.confidence
        if conf.words_per_point <= 0 or conf.points_divisor <= 0:
            raise ValueError("confidence divisors must be positive")
        if min(conf.base, conf.max_length_factor, conf.max_richness_factor) < 0:
            raise ValueError("confidence factors cannot be negative")
        return True


DEFAULT_ANALYSIS_CONFIG = AnalysisConfig()
