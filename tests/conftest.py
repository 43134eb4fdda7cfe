"""
Pytest Configuration and Shared Fixtures

Provides common fixtures and configuration for all test modules.
"""

import pytest
from typing import List

from searchshare.models import (
    BrandContext,
    BrandKeyword,
    RankedKeyword,
    SearchIntentInfo,
)
from searchshare.utils.config import EngineSettings


# ============================================================================
# Settings
# ============================================================================

@pytest.fixture
def settings() -> EngineSettings:
    """Engine settings with library defaults (ignores any local .env)."""
    return EngineSettings(_env_file=None)


# ============================================================================
# Mock Data Fixtures
# ============================================================================

@pytest.fixture
def sample_brand_keywords() -> List[BrandKeyword]:
    """Natural-cosmetics brand set: one own brand, four competitors."""
    return [
        BrandKeyword("lavera", 12100, is_own_brand=True),
        BrandKeyword("lavera naturkosmetik", 1300, is_own_brand=True),
        BrandKeyword("lavera lippenstift", 480, is_own_brand=True),
        BrandKeyword("weleda", 18100, is_own_brand=False),
        BrandKeyword("dr hauschka", 14800, is_own_brand=False),
        BrandKeyword("annemarie börlind", 5400, is_own_brand=False),
        BrandKeyword("alverde", 27100, is_own_brand=False),
    ]


@pytest.fixture
def sample_ranked_keywords() -> List[RankedKeyword]:
    """Ranked keywords for the same brand, mixed positions and intents."""
    info = SearchIntentInfo("informational", 0.8)
    commercial = SearchIntentInfo("commercial", 0.7)
    transactional = SearchIntentInfo("transactional", 0.9)
    return [
        RankedKeyword("naturkosmetik", 22200, position=4, url="/naturkosmetik", search_intent=commercial),
        RankedKeyword("bio gesichtscreme", 3600, position=2, url="/gesichtspflege", keyword_difficulty=28),
        RankedKeyword("vegane kosmetik", 4400, position=3, url="/vegan", search_intent=info),
        RankedKeyword("natürliche hautpflege", 2900, position=1, url="/hautpflege"),
        RankedKeyword("bio lippenstift", 1900, position=5, url="/lippen", search_intent=transactional),
        RankedKeyword("naturkosmetik gesicht", 2400, position=6, url="/gesicht", keyword_difficulty=22),
        RankedKeyword("bio shampoo", 5400, position=8, url="/haarpflege", keyword_difficulty=18),
        RankedKeyword("naturkosmetik marken", 1600, position=2, url="/marken"),
        RankedKeyword("zertifizierte naturkosmetik", 880, position=1, url="/zertifiziert"),
        RankedKeyword("bio bodylotion", 1300, position=7, url="/koerperpflege"),
        RankedKeyword("naturkosmetik", 22200, position=11, url="/blog/naturkosmetik-guide"),
        RankedKeyword("serum ohne silikone", 900, position=14, url="/serum", keyword_difficulty=15),
        RankedKeyword("anti falten creme bio", 2600, position=17, url="/anti-aging"),
        RankedKeyword("hyaluron serum vegan", 1200, keyword_difficulty=12, trend=35.0),
        RankedKeyword("lavera jobs", 300, position=9, url="/karriere"),
    ]


@pytest.fixture
def brand_context() -> BrandContext:
    """Profile of the natural-cosmetics brand."""
    return BrandContext(
        brand_name="lavera",
        industry="Beauty",
        vertical="Natural Cosmetics",
        product_categories=["Skincare", "Lipstick"],
        key_strengths=["vegan"],
        seo_focus=["naturkosmetik"],
    )
