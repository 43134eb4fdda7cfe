"""
Quick-Win Detector

Keywords already ranking at positions 4-20 where a modest improvement
yields a large click gain.

    current_clicks   = visible_volume(volume, position)
    potential_clicks = visible_volume(volume, target_position)
    click_uplift     = potential_clicks - current_clicks

Target is either a fixed position from configuration or one band better
than the current band (<=5 -> 3, <=10 -> 5, <=15 -> 8, else 10).
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from searchshare.models import BrandContext, Effort, RankedKeyword, active
from searchshare.utils.config import EngineSettings, get_settings
from .brand_context import matches_brand_context
from .classification import get_category, keyword_intent
from .helpers import visible_volume, round_half_up, make_item_id, format_number

logger = logging.getLogger(__name__)


MIN_POSITION = 4
MAX_POSITION = 20


@dataclass
class QuickWinOpportunity:
    """Ranked keyword close enough to the top to be worth optimizing."""
    id: str
    keyword: str
    current_position: int
    target_position: int
    search_volume: int
    current_clicks: int
    potential_clicks: int
    click_uplift: int
    uplift_percentage: int
    effort: Effort
    url: Optional[str]
    category: str
    reasoning: str
    is_recommended: bool = False
    recommended_reason: Optional[str] = None
    search_intent: Optional[str] = None


def calculate_target_position(current_position: int) -> int:
    """One band better than the current position band."""
    if current_position <= 3:
        return 1
    if current_position <= 5:
        return 3
    if current_position <= 10:
        return 5
    if current_position <= 15:
        return 8
    return 10


def calculate_effort(current_position: int) -> Effort:
    """Effort grows with distance from page-1 top positions."""
    if current_position <= 6:
        return Effort.LOW
    if current_position <= 10:
        return Effort.MEDIUM
    return Effort.HIGH


def _quick_win_reasoning(
    kw: RankedKeyword,
    target_position: int,
    click_uplift: int,
    uplift_percentage: int,
) -> str:
    rank = kw.rank
    reasons = [
        f"Volume {format_number(kw.volume)}, position #{rank}→#{target_position}: "
        f"+{format_number(click_uplift)} clicks ({uplift_percentage}% increase)"
    ]

    if rank <= 6:
        reasons.append(f"Already on page 1 (#{rank}), small optimization could push to top 3")
    elif rank <= 10:
        reasons.append(f"Bottom of page 1 (#{rank}), improving to top 5 dramatically increases visibility")
    elif rank <= 15:
        reasons.append(f"Top of page 2 (#{rank}), pushing to page 1 is crucial for traffic")
    else:
        reasons.append(f"Position #{rank} has room for improvement with focused optimization")

    if kw.volume >= 10000:
        reasons.append(f"High-volume keyword ({format_number(kw.volume)} monthly searches)")
    elif kw.volume >= 1000:
        reasons.append(f"Good search volume with {format_number(kw.volume)} monthly searches")

    return ". ".join(reasons) + "."


def find_quick_wins(
    keywords: Sequence[RankedKeyword],
    brand_context: Optional[BrandContext] = None,
    settings: Optional[EngineSettings] = None,
    *,
    min_volume: Optional[int] = None,
    min_uplift: Optional[int] = None,
    target_position: Optional[int] = None,
) -> List[QuickWinOpportunity]:
    """
    Find Quick Win opportunities.

    Args:
        keywords: Ranked keywords for the analyzed domain
        brand_context: Optional brand profile for recommendation flags
        settings: Engine thresholds (defaults from environment)
        min_volume: Override minimum search volume
        min_uplift: Override minimum click uplift
        target_position: Fixed target position instead of the tiered one

    Returns:
        Quick wins sorted by click uplift (highest first)
    """
    settings = settings or get_settings()
    min_volume = settings.quick_win_min_volume if min_volume is None else min_volume
    min_uplift = settings.quick_win_min_uplift if min_uplift is None else min_uplift
    fixed_target = settings.quick_win_target_position if target_position is None else target_position

    quick_wins: List[QuickWinOpportunity] = []

    for kw in active(keywords):
        rank = kw.rank
        if rank is None or rank < MIN_POSITION or rank > MAX_POSITION:
            continue
        if kw.volume < min_volume:
            continue

        target = fixed_target if fixed_target else calculate_target_position(rank)
        if target >= rank:
            continue

        current_clicks = visible_volume(kw.volume, rank)
        potential_clicks = visible_volume(kw.volume, target)
        click_uplift = potential_clicks - current_clicks
        uplift_percentage = round_half_up(click_uplift / current_clicks * 100) if current_clicks > 0 else 0

        if click_uplift < min_uplift:
            continue

        category = get_category(kw.keyword, kw.category, settings.default_category)
        is_recommended, reason = matches_brand_context(kw.keyword, category, brand_context)

        quick_wins.append(QuickWinOpportunity(
            id=make_item_id("quick-win", kw.keyword, kw.url),
            keyword=kw.keyword,
            current_position=rank,
            target_position=target,
            search_volume=kw.volume,
            current_clicks=current_clicks,
            potential_clicks=potential_clicks,
            click_uplift=click_uplift,
            uplift_percentage=uplift_percentage,
            effort=calculate_effort(rank),
            url=kw.url,
            category=category,
            reasoning=_quick_win_reasoning(kw, target, click_uplift, uplift_percentage),
            is_recommended=is_recommended,
            recommended_reason=reason,
            search_intent=keyword_intent(kw),
        ))

    quick_wins.sort(key=lambda q: (-q.click_uplift, -q.search_volume, q.keyword, q.url or ""))

    logger.info(f"Quick wins: {len(quick_wins)} found, +{sum(q.click_uplift for q in quick_wins)} clicks potential")
    return quick_wins
