"""
Hidden-Gem Detector

Low-difficulty, decent-volume keywords, including ones the domain does not
rank for yet. When the provider has no keyword difficulty, it is estimated
from the current position and the result is flagged kd_is_estimated.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from searchshare.models import BrandContext, RankedKeyword, active
from searchshare.utils.config import EngineSettings, get_settings
from .brand_context import matches_brand_context
from .classification import get_category, keyword_intent
from .helpers import visible_volume, make_item_id, format_number

logger = logging.getLogger(__name__)


class GemType(str, Enum):
    """Why a hidden gem is worth pursuing."""
    FIRST_MOVER = "first-mover"
    EASY_WIN = "easy-win"
    RISING_TREND = "rising-trend"


@dataclass
class HiddenGem:
    """Low-competition keyword with realistic click potential."""
    id: str
    keyword: str
    search_volume: int
    keyword_difficulty: int
    kd_is_estimated: bool
    position: Optional[int]
    target_position: int
    url: Optional[str]
    category: str
    opportunity: GemType
    current_clicks: int
    potential_clicks: int
    click_uplift: int
    reasoning: str
    is_recommended: bool = False
    recommended_reason: Optional[str] = None
    search_intent: Optional[str] = None
    trend: Optional[float] = None


def estimate_keyword_difficulty(position: Optional[int]) -> Optional[int]:
    """
    Fallback KD from current position.

    A domain already ranking for a keyword suggests the keyword is within
    reach. Unranked keywords have nothing to estimate from.
    """
    if position is None:
        return None
    if position <= 5:
        return 25
    if position <= 10:
        return 30
    if position <= 15:
        return 35
    if position <= 20:
        return 40
    return 50


def resolve_difficulty(kw: RankedKeyword) -> Tuple[Optional[int], bool]:
    """Return (kd, is_estimated)."""
    if kw.difficulty is not None:
        return kw.difficulty, False
    return estimate_keyword_difficulty(kw.rank), True


def classify_gem(position: Optional[int], kd: int, trend: Optional[float], low_kd: int) -> GemType:
    """Ordered rules, first match wins."""
    if position is None:
        return GemType.FIRST_MOVER
    if position > 20 and kd <= low_kd:
        return GemType.EASY_WIN
    if trend is not None and trend > 0:
        return GemType.RISING_TREND
    return GemType.EASY_WIN


def achievable_position(kd: int, current_position: Optional[int]) -> int:
    """Realistic target for the difficulty band, always better than today."""
    if kd <= 20:
        target = 1
    elif kd <= 30:
        target = 3
    else:
        target = 5
    if current_position is not None and current_position <= target:
        target = max(1, current_position - 1)
    return target


def _gem_reasoning(kw: RankedKeyword, gem_type: GemType, kd: int, estimated: bool, target: int) -> str:
    kd_note = f"Est. KD: {kd}" if estimated else f"KD: {kd}"
    if gem_type is GemType.RISING_TREND:
        trend = kw.trend if kw.trend is not None else 0
        return f"Trending keyword (+{trend:g}% YoY) with low competition ({kd_note})"
    if gem_type is GemType.FIRST_MOVER:
        return (
            f"You're not ranking yet, but low competition ({kd_note}) makes "
            f"{format_number(kw.volume)} monthly searches achievable"
        )
    return f"Currently #{kw.rank}, realistic to push to #{target} ({kd_note})"


def find_hidden_gems(
    keywords: Sequence[RankedKeyword],
    brand_context: Optional[BrandContext] = None,
    settings: Optional[EngineSettings] = None,
    *,
    min_volume: Optional[int] = None,
    max_kd: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[HiddenGem]:
    """
    Find Hidden Gems - low difficulty, high potential keywords.

    Args:
        keywords: Ranked keywords for the analyzed domain
        brand_context: Optional brand profile; recommended gems sort first
        settings: Engine thresholds (defaults from environment)
        min_volume: Override minimum search volume
        max_kd: Override maximum keyword difficulty
        limit: Override number of gems returned

    Returns:
        Hidden gems, recommended first, then by volume/difficulty ratio
    """
    settings = settings or get_settings()
    min_volume = settings.hidden_gem_min_volume if min_volume is None else min_volume
    max_kd = settings.hidden_gem_max_kd if max_kd is None else max_kd
    limit = settings.hidden_gem_limit if limit is None else limit

    gems: List[HiddenGem] = []
    skipped_no_kd = 0

    for kw in active(keywords):
        if kw.volume < min_volume:
            continue
        rank = kw.rank
        if rank is not None and rank <= 3:
            continue

        kd, estimated = resolve_difficulty(kw)
        if kd is None:
            skipped_no_kd += 1
            continue
        if kd > max_kd:
            continue

        gem_type = classify_gem(rank, kd, kw.trend, settings.hidden_gem_low_kd)
        target = achievable_position(kd, rank)
        current_clicks = visible_volume(kw.volume, rank) if rank is not None else 0
        potential_clicks = visible_volume(kw.volume, target)

        category = get_category(kw.keyword, kw.category, settings.default_category)
        is_recommended, reason = matches_brand_context(kw.keyword, category, brand_context)

        reasoning = _gem_reasoning(kw, gem_type, kd, estimated, target)
        if is_recommended:
            reasoning += f". {reason}"

        gems.append(HiddenGem(
            id=make_item_id("hidden-gem", kw.keyword, kw.url),
            keyword=kw.keyword,
            search_volume=kw.volume,
            keyword_difficulty=kd,
            kd_is_estimated=estimated,
            position=rank,
            target_position=target,
            url=kw.url,
            category=category,
            opportunity=gem_type,
            current_clicks=current_clicks,
            potential_clicks=potential_clicks,
            click_uplift=max(0, potential_clicks - current_clicks),
            reasoning=reasoning,
            is_recommended=is_recommended,
            recommended_reason=reason,
            search_intent=keyword_intent(kw),
            trend=kw.trend,
        ))

    gems.sort(key=lambda g: (
        not g.is_recommended,
        -(g.search_volume / (g.keyword_difficulty + 1)),
        -g.search_volume,
        g.keyword,
        g.url or "",
    ))

    if skipped_no_kd:
        logger.debug(f"Hidden gems: skipped {skipped_no_kd} unranked keywords without difficulty data")
    logger.info(f"Hidden gems: {len(gems)} candidates, returning {min(len(gems), limit)}")
    return gems[:limit]
