"""
Configuration Management

Uses Pydantic Settings for environment-based configuration.
Loads from .env file automatically; every variable is prefixed SEARCHSHARE_.

Detector thresholds are defaults, not hard truths: override them per
deployment through the environment, or per call by passing a settings object
or keyword arguments to the detector.
"""

from typing import Optional
from functools import lru_cache
from pydantic_settings import BaseSettings


class EngineSettings(BaseSettings):
    """Engine thresholds and limits loaded from environment."""

    # Growth gap classification (percentage points, symmetric)
    growth_gap_threshold: float = 2.0

    # Quick wins
    quick_win_min_volume: int = 100
    quick_win_min_uplift: int = 50
    quick_win_target_position: Optional[int] = None  # None = one band better

    # Hidden gems
    hidden_gem_min_volume: int = 200
    hidden_gem_max_kd: int = 40
    hidden_gem_low_kd: int = 20
    hidden_gem_limit: int = 20

    # Cannibalization
    cannibalization_max_spread: int = 3
    cannibalization_meaningful_share: float = 0.25
    cannibalization_dominance_share: float = 0.6

    # Content gaps
    content_gap_min_keywords: int = 3
    content_gap_high_volume: int = 10000
    content_gap_weak_min_volume: int = 500
    keywords_per_page: int = 3

    # Intent opportunities
    intent_opportunity_min_volume: int = 100
    intent_opportunity_limit: int = 50

    # Classification
    default_category: str = "Uncategorized"
    filter_irrelevant_keywords: bool = True

    # API payload limits
    max_brand_keywords: int = 500
    max_ranked_keywords: int = 10000

    log_level: str = "INFO"

    class Config:
        env_prefix = "SEARCHSHARE_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
        case_sensitive = False


@lru_cache
def get_settings() -> EngineSettings:
    """Get or create cached settings instance."""
    return EngineSettings()
