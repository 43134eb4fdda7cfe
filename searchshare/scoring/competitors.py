"""
Competitor Strength

Per-competitor view built from the brand-name keywords and the analyzed
domain's own rankings:

- Estimated SOV: the competitor's share of tracked brand-name volume
- Head-to-head: counts over generic (non-branded) keywords where you rank
  strongly (1-5), contested (6-10) or weakly (11-20)
- Dominant categories: categories where your visibility is weak or trailing

Competitor rankings are not part of the input, so head-to-head counts read
only your positions and are the same for every competitor.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from searchshare.models import BrandContext, BrandKeyword, RankedKeyword, active
from searchshare.utils.config import EngineSettings, get_settings
from .brand_context import is_relevant_to_brand
from .classification import get_category
from .coverage import CategoryStatus, calculate_category_sov
from .helpers import round_one, safe_share

logger = logging.getLogger(__name__)


# Position bands for head-to-head counts
WIN_MAX_POSITION = 5
TIE_MAX_POSITION = 10
LOSE_MAX_POSITION = 20

MIN_TERM_LENGTH = 3
MAX_DOMINANT_CATEGORIES = 3


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class HeadToHead:
    """Keyword counts by your position band."""
    you_win: int = 0       # positions 1-5
    they_win: int = 0      # positions 11-20
    ties: int = 0          # positions 6-10


@dataclass
class CompetitorStrength:
    """Strength estimate for one competitor brand."""
    competitor: str
    estimated_sov: float
    brand_volume: int
    keywords_analyzed: int
    head_to_head: HeadToHead
    dominant_categories: List[str] = field(default_factory=list)
    brand_keywords: List[str] = field(default_factory=list)
    brand_terms: List[str] = field(default_factory=list)


# =============================================================================
# HELPERS
# =============================================================================

def brand_root(keyword: str) -> str:
    """Base brand name: the first word, lowercased."""
    words = (keyword or "").lower().split()
    return words[0] if words else ""


def is_branded_keyword(keyword: str, brand_names: Sequence[str]) -> bool:
    """True when the keyword contains any of the brand names."""
    kw_lower = (keyword or "").lower()
    return any(name and name in kw_lower for name in brand_names)


def head_to_head(keywords: Sequence[RankedKeyword]) -> HeadToHead:
    result = HeadToHead()
    for kw in keywords:
        rank = kw.rank
        if rank is None or rank > LOSE_MAX_POSITION:
            continue
        if rank <= WIN_MAX_POSITION:
            result.you_win += 1
        elif rank <= TIE_MAX_POSITION:
            result.ties += 1
        else:
            result.they_win += 1
    return result


# =============================================================================
# MAIN FUNCTION
# =============================================================================

def calculate_competitor_strength(
    brand_keywords: Sequence[BrandKeyword],
    ranked_keywords: Sequence[RankedKeyword],
    brand_context: Optional[BrandContext] = None,
    settings: Optional[EngineSettings] = None,
) -> List[CompetitorStrength]:
    """
    Estimate each competitor's strength.

    Competitors are the competitor brand keywords grouped by their first
    word. Branded ranked keywords (yours or any competitor's) and keywords
    irrelevant to the brand context are left out of the head-to-head.

    Args:
        brand_keywords: Own and competitor brand-name keywords
        ranked_keywords: Ranking results for the analyzed domain
        brand_context: Optional brand profile for the relevance check
        settings: Engine thresholds (defaults from environment)

    Returns:
        Competitors sorted by estimated SOV (strongest first)
    """
    settings = settings or get_settings()
    brands = active(brand_keywords)

    own_names = [brand_root(k.keyword) for k in brands if k.is_own_brand]

    groups: Dict[str, List[BrandKeyword]] = {}
    for k in brands:
        if k.is_own_brand:
            continue
        root = brand_root(k.keyword)
        if not root:
            continue
        groups.setdefault(root, []).append(k)

    if not groups:
        return []

    all_names = [name for name in own_names if name] + list(groups)
    generic = [
        kw for kw in active(ranked_keywords)
        if not is_branded_keyword(kw.keyword, all_names)
        and is_relevant_to_brand(
            kw.keyword,
            get_category(kw.keyword, kw.category, settings.default_category),
            brand_context,
        )
    ]

    counts = head_to_head(generic)
    weak_statuses = {CategoryStatus.WEAK, CategoryStatus.TRAILING}
    weak_categories = [
        c.category for c in calculate_category_sov(generic, settings)
        if c.status in weak_statuses
    ][:MAX_DOMINANT_CATEGORIES]

    total_brand_volume = sum(k.volume for k in brands)
    results: List[CompetitorStrength] = []

    for root, members in groups.items():
        members = sorted(members, key=lambda k: (-k.volume, k.keyword))
        volume = sum(k.volume for k in members)
        terms: List[str] = []
        for k in members:
            terms.extend(t for t in k.keyword.lower().split() if len(t) >= MIN_TERM_LENGTH)

        results.append(CompetitorStrength(
            competitor=root.capitalize(),
            estimated_sov=round_one(safe_share(volume, total_brand_volume)),
            brand_volume=volume,
            keywords_analyzed=len(generic),
            head_to_head=HeadToHead(counts.you_win, counts.they_win, counts.ties),
            dominant_categories=list(weak_categories),
            brand_keywords=[k.keyword for k in members],
            brand_terms=list(dict.fromkeys(terms)),
        ))

    results.sort(key=lambda c: (-c.estimated_sov, -c.brand_volume, c.competitor))

    logger.info(
        f"Competitor strength: {len(results)} competitors, "
        f"{len(generic)} generic keywords in head-to-head"
    )
    return results
