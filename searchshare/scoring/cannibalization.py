"""
Cannibalization Detector

Finds keywords for which two or more of the domain's own URLs rank, so the
pages compete with each other instead of with competitors.

impact_score is the visible volume held by every URL except the best-ranked
one: the clicks that consolidation onto the top performer would recover.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

from searchshare.models import RankedKeyword, active
from searchshare.utils.config import EngineSettings, get_settings
from .helpers import visible_volume, make_item_id, normalize_keyword, format_number

logger = logging.getLogger(__name__)


class CannibalizationAction(str, Enum):
    """Recommended fix for competing URLs."""
    DIFFERENTIATE = "differentiate"
    REDIRECT = "redirect"
    CONSOLIDATE = "consolidate"


@dataclass
class CompetingUrl:
    """One of the domain's URLs ranking for the contested keyword."""
    url: str
    position: Optional[int]
    search_volume: int
    visible_volume: int


@dataclass
class CannibalizationIssue:
    """Keyword with multiple competing URLs from the same domain."""
    id: str
    keyword: str
    search_volume: int
    competing_urls: List[CompetingUrl]
    position_spread: Optional[int]  # None when a competing URL is unranked
    recommendation: CannibalizationAction
    impact_score: int
    reasoning: str
    best_url: str = ""
    urls: List[str] = field(default_factory=list)


def _url_sort_key(entry: CompetingUrl):
    return (entry.position is None, entry.position or 0, -entry.visible_volume, entry.url)


def recommend_fix(
    competing: List[CompetingUrl],
    spread: Optional[int],
    max_spread: int = 3,
    meaningful_share: float = 0.25,
    dominance_share: float = 0.6,
) -> CannibalizationAction:
    """
    Ordered recommendation rules, first match wins.

    1. two URLs close together, both with meaningful visibility -> differentiate
    2. large spread with one URL dominating -> redirect
    3. anything else -> consolidate
    """
    best = competing[0]
    close = spread is not None and spread <= max_spread

    if len(competing) == 2 and close:
        floor = max(1, best.visible_volume * meaningful_share)
        if all(c.visible_volume >= floor for c in competing):
            return CannibalizationAction.DIFFERENTIATE

    total_visible = sum(c.visible_volume for c in competing)
    if not close and total_visible > 0 and best.visible_volume / total_visible >= dominance_share:
        return CannibalizationAction.REDIRECT

    return CannibalizationAction.CONSOLIDATE


def _cannibalization_reasoning(
    keyword: str,
    competing: List[CompetingUrl],
    action: CannibalizationAction,
    impact: int,
) -> str:
    positions = ", ".join(f"#{c.position}" if c.position else "unranked" for c in competing)
    base = (
        f'{len(competing)} URLs rank for "{keyword}" ({positions}), '
        f"~{format_number(impact)} clicks split away from the best page"
    )
    if action is CannibalizationAction.DIFFERENTIATE:
        return base + ". Both pages hold real visibility; give each a distinct sub-intent."
    if action is CannibalizationAction.REDIRECT:
        return base + f". {competing[0].url} dominates; 301-redirect the weaker pages to it."
    return base + f". Merge the competing pages into {competing[0].url}."


def detect_cannibalization(
    keywords: Sequence[RankedKeyword],
    settings: Optional[EngineSettings] = None,
) -> List[CannibalizationIssue]:
    """
    Detect keyword cannibalization.

    Args:
        keywords: Ranked keywords for the analyzed domain
        settings: Engine thresholds (defaults from environment)

    Returns:
        Issues sorted by impact score (highest loss first); every issue has
        at least two distinct URLs
    """
    settings = settings or get_settings()

    groups: Dict[str, List[RankedKeyword]] = defaultdict(list)
    for kw in active(keywords):
        if not kw.url:
            continue
        groups[normalize_keyword(kw.keyword)].append(kw)

    issues: List[CannibalizationIssue] = []

    for key, rankings in groups.items():
        # Best entry per URL
        by_url: Dict[str, CompetingUrl] = {}
        for kw in rankings:
            entry = CompetingUrl(
                url=kw.url,
                position=kw.rank,
                search_volume=kw.volume,
                visible_volume=visible_volume(kw.volume, kw.rank),
            )
            current = by_url.get(kw.url)
            if current is None or _url_sort_key(entry) < _url_sort_key(current):
                by_url[kw.url] = entry

        if len(by_url) < 2:
            continue

        competing = sorted(by_url.values(), key=_url_sort_key)
        best = competing[0]

        ranked = [c.position for c in competing if c.position is not None]
        spread = max(ranked) - min(ranked) if len(ranked) == len(competing) else None

        impact = sum(c.visible_volume for c in competing[1:])
        action = recommend_fix(
            competing,
            spread,
            max_spread=settings.cannibalization_max_spread,
            meaningful_share=settings.cannibalization_meaningful_share,
            dominance_share=settings.cannibalization_dominance_share,
        )
        keyword = min(kw.keyword for kw in rankings)

        issues.append(CannibalizationIssue(
            id=make_item_id("cannibalization", key),
            keyword=keyword,
            search_volume=max(c.search_volume for c in competing),
            competing_urls=competing,
            position_spread=spread,
            recommendation=action,
            impact_score=impact,
            reasoning=_cannibalization_reasoning(keyword, competing, action, impact),
            best_url=best.url,
            urls=[c.url for c in competing],
        ))

    issues.sort(key=lambda i: (-i.impact_score, -i.search_volume, i.keyword))

    logger.info(f"Cannibalization: {len(issues)} keywords with competing URLs")
    return issues
