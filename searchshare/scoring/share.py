"""
Share Calculators

Headline metrics of the engine:

1. Share of Search (SOS) - own brand-name volume / all tracked brand volume
2. Share of Voice (SOV) - CTR-weighted visible volume / total organic volume
3. Growth Gap - SOV minus SOS, classified against fixed thresholds

All three are percentage points with one decimal. A zero denominator gives
0.0 together with has_data=False so callers can tell "no market" apart from
"none of the market".
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from searchshare.models import BrandKeyword, RankedKeyword, active
from .helpers import get_ctr_for_position, visible_volume, round_one, safe_share

logger = logging.getLogger(__name__)


# Gap classification thresholds (percentage points)
GROWTH_POTENTIAL_THRESHOLD = 2.0
MISSING_OPPORTUNITIES_THRESHOLD = -2.0


class GapInterpretation(str, Enum):
    """How SEO visibility compares to brand demand."""
    GROWTH_POTENTIAL = "growth_potential"
    MISSING_OPPORTUNITIES = "missing_opportunities"
    BALANCED = "balanced"


@dataclass
class ShareOfSearchResult:
    """Share of Search with the volumes behind it."""
    share_of_search: float
    brand_volume: int
    total_brand_volume: int
    keyword_count: int
    has_data: bool


@dataclass
class KeywordVisibility:
    """Per-keyword audit row of the SOV calculation."""
    keyword: str
    search_volume: int
    position: Optional[int]
    url: Optional[str]
    ctr: float  # percent, one decimal
    visible_volume: int
    is_discarded: bool = False


@dataclass
class ShareOfVoiceResult:
    """Share of Voice with the per-keyword breakdown."""
    share_of_voice: float
    visible_volume: int
    total_market_volume: int
    keyword_count: int
    has_data: bool
    keyword_breakdown: List[KeywordVisibility] = field(default_factory=list)


@dataclass
class GrowthGapResult:
    """Difference between SOV and SOS."""
    gap: float
    interpretation: GapInterpretation


def calculate_sos(brand_keywords: Sequence[BrandKeyword]) -> ShareOfSearchResult:
    """
    Calculate Share of Search.

    Args:
        brand_keywords: Own and competitor brand-name keywords

    Returns:
        ShareOfSearchResult (0-100, one decimal)
    """
    rows = active(brand_keywords)

    brand_volume = sum(kw.volume for kw in rows if kw.is_own_brand)
    total_volume = sum(kw.volume for kw in rows)

    result = ShareOfSearchResult(
        share_of_search=round_one(safe_share(brand_volume, total_volume)),
        brand_volume=brand_volume,
        total_brand_volume=total_volume,
        keyword_count=len(rows),
        has_data=total_volume > 0,
    )
    logger.debug(
        f"SOS: {result.share_of_search}% ({brand_volume}/{total_volume}, "
        f"{len(rows)} keywords)"
    )
    return result


def calculate_sov(ranked_keywords: Sequence[RankedKeyword]) -> ShareOfVoiceResult:
    """
    Calculate Share of Voice.

    Discarded keywords appear in the breakdown with zero visible volume but
    never contribute to the totals.

    Args:
        ranked_keywords: Ranking results for the analyzed domain

    Returns:
        ShareOfVoiceResult (0-100, one decimal)
    """
    breakdown: List[KeywordVisibility] = []
    total_visible = 0
    total_volume = 0
    counted = 0
    clamped = 0

    for kw in ranked_keywords:
        if kw.volume != kw.search_volume or (kw.position is not None and kw.rank is None):
            clamped += 1
        ctr = get_ctr_for_position(kw.rank)
        visible = 0 if kw.is_discarded else visible_volume(kw.volume, kw.rank)

        breakdown.append(KeywordVisibility(
            keyword=kw.keyword,
            search_volume=kw.volume,
            position=kw.rank,
            url=kw.url,
            ctr=round_one(ctr * 100),
            visible_volume=visible,
            is_discarded=kw.is_discarded,
        ))

        if kw.is_discarded:
            continue
        counted += 1
        total_visible += visible
        total_volume += kw.volume

    result = ShareOfVoiceResult(
        share_of_voice=round_one(safe_share(total_visible, total_volume)),
        visible_volume=total_visible,
        total_market_volume=total_volume,
        keyword_count=counted,
        has_data=total_volume > 0,
        keyword_breakdown=breakdown,
    )
    logger.debug(
        f"SOV: {result.share_of_voice}% ({total_visible}/{total_volume}, "
        f"{counted} keywords)"
    )
    if clamped:
        logger.debug(f"SOV: clamped {clamped} rows with negative volume or position below 1")
    return result


def classify_gap(gap: float, threshold: Optional[float] = None) -> GapInterpretation:
    """Classify a gap value; threshold applies symmetrically."""
    upper = GROWTH_POTENTIAL_THRESHOLD if threshold is None else threshold
    lower = MISSING_OPPORTUNITIES_THRESHOLD if threshold is None else -threshold
    if gap > upper:
        return GapInterpretation.GROWTH_POTENTIAL
    if gap < lower:
        return GapInterpretation.MISSING_OPPORTUNITIES
    return GapInterpretation.BALANCED


def calculate_growth_gap(sos: float, sov: float, threshold: Optional[float] = None) -> GrowthGapResult:
    """
    Calculate Growth Gap (SOV - SOS).

    Positive: SEO outperforms brand awareness.
    Negative: brand demand is not converted into organic visibility.
    """
    raw = sov - sos
    # Classified on the rounded value
    gap = round_one(raw) if raw >= 0 else -round_one(-raw)
    return GrowthGapResult(gap=gap, interpretation=classify_gap(gap, threshold))
