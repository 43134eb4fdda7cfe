"""
Coverage Analysis

Category- and funnel-level views over the ranked keywords:

1. Content gaps - categories where the domain has fewer pages than the
   competitive baseline
2. Category SOV - visibility share and status per category
3. Funnel stages - keyword counts, volume and stage-scoped SOV per
   awareness / consideration / decision
4. Intent opportunities - keywords outside the top 3 ranked by the
   strategic value of their intent

Stage and category SOV go through the same visible_volume as the headline
SOV.
"""

import logging
import math
import re
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from searchshare.models import BrandContext, FunnelStage, RankedKeyword, active
from searchshare.utils.config import EngineSettings, get_settings
from .brand_context import matches_brand_context
from .classification import get_category, keyword_funnel_stage
from .helpers import (
    visible_volume,
    round_half_up,
    round_one,
    safe_share,
    make_item_id,
    format_number,
)

logger = logging.getLogger(__name__)


# Target position used to estimate traffic gain from new content
CONTENT_TARGET_POSITION = 5
# Target position used for funnel-stage opportunity clicks
FUNNEL_TARGET_POSITION = 3
FUNNEL_MIN_VOLUME = 100
TOP_N = 5


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_ORDER = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}
VALUE_ORDER = {"high": 0, "medium": 1, "low": 2}


class CategoryStatus(str, Enum):
    LEADING = "leading"
    COMPETITIVE = "competitive"
    TRAILING = "trailing"
    WEAK = "weak"


# ============================================================================
# RESULT TYPES
# ============================================================================

@dataclass
class WeakKeyword:
    """High-volume keyword ranking outside the top 10."""
    keyword: str
    position: Optional[int]
    search_volume: int
    url: Optional[str]


@dataclass
class ContentGap:
    """Category where the domain's page coverage trails the baseline."""
    id: str
    topic: str
    category: str
    keyword_count: int
    your_coverage: int
    avg_competitor_coverage: float
    coverage_gap: float  # percent, one decimal
    total_volume: int
    avg_position: Optional[float]
    priority: Priority
    primary_keyword: str
    top_missing_keywords: List[str] = field(default_factory=list)
    existing_urls: List[str] = field(default_factory=list)
    weak_keywords: List[WeakKeyword] = field(default_factory=list)
    suggested_content_types: List[str] = field(default_factory=list)
    estimated_traffic_gain: int = 0
    reasoning: str = ""
    is_recommended: bool = False
    recommended_reason: Optional[str] = None


@dataclass
class CategorySOV:
    """Visibility share within one category."""
    category: str
    keyword_count: int
    total_volume: int
    visible_volume: int
    sov: float
    has_data: bool
    avg_position: Optional[float]
    status: CategoryStatus
    top_keywords: List[str] = field(default_factory=list)


@dataclass
class FunnelKeyword:
    keyword: str
    search_volume: int
    position: Optional[int]
    intent: str
    url: Optional[str] = None
    potential_clicks: Optional[int] = None
    strategic_value: Optional[str] = None
    strategic_reasoning: Optional[str] = None


@dataclass
class IntentOpportunity:
    """Keyword outside the top 3 with its intent and strategic value."""
    keyword: str
    search_volume: int
    position: Optional[int]
    intent: str
    intent_probability: float
    funnel_stage: FunnelStage
    category: str
    url: Optional[str]
    strategic_value: str
    strategic_reasoning: str
    brand_relevance: Optional[str] = None



@dataclass
class FunnelStageAnalysis:
    """Aggregates for one funnel stage."""
    stage: FunnelStage
    stage_label: str
    description: str
    keyword_count: int
    total_volume: int
    avg_position: Optional[float]
    visible_volume: int
    sov: float
    has_data: bool
    top_keywords: List[FunnelKeyword] = field(default_factory=list)
    opportunities: List[FunnelKeyword] = field(default_factory=list)
    strategic_insights: List[str] = field(default_factory=list)


# ============================================================================
# SHARED
# ============================================================================

def _average_position(keywords: Sequence[RankedKeyword]) -> Optional[float]:
    ranks = [kw.rank for kw in keywords if kw.rank is not None]
    if not ranks:
        return None
    return round_one(sum(ranks) / len(ranks))


def _by_volume(keywords: Sequence[RankedKeyword]) -> List[RankedKeyword]:
    return sorted(keywords, key=lambda kw: (-kw.volume, kw.keyword, kw.url or ""))


def _group_by_category(
    keywords: Sequence[RankedKeyword],
    default_category: str,
) -> Dict[str, List[RankedKeyword]]:
    groups: Dict[str, List[RankedKeyword]] = defaultdict(list)
    for kw in active(keywords):
        groups[get_category(kw.keyword, kw.category, default_category)].append(kw)
    return groups


# ============================================================================
# CONTENT GAPS
# ============================================================================

def suggested_content_types(category: str) -> List[str]:
    """Content formats that usually work for a category."""
    cat = category.lower()
    if "tire" in cat or "reifen" in cat:
        return ["Tire size guide", "Seasonal comparison article", "Product finder tool",
                "Installation FAQ", "Dealer locator page"]
    if "beauty" in cat or "skin" in cat or "makeup" in cat:
        return ["How-to tutorial", "Product comparison", "Ingredient guide",
                "Routine builder", "Expert tips article"]
    if "running" in cat or "training" in cat or "sport" in cat:
        return ["Training guide", "Product review", "Comparison article",
                "Beginner's guide", "Expert interview"]
    if "tech" in cat or "phone" in cat or "laptop" in cat:
        return ["Buying guide", "Comparison table", "Setup tutorial",
                "Troubleshooting FAQ", "Feature spotlight"]
    if "automotive" in cat or "car" in cat:
        return ["Buying guide", "Maintenance tips", "Comparison article",
                "How-to guide", "Cost calculator"]
    return ["Comprehensive guide", "FAQ page", "How-to article",
            "Comparison content", "Expert roundup"]


def gap_priority(total_volume: int, coverage_gap: float, high_volume: int = 10000) -> Priority:
    if total_volume >= high_volume and coverage_gap >= 40:
        return Priority.HIGH
    if coverage_gap < 15:
        return Priority.LOW
    return Priority.MEDIUM


def _content_gap_reasoning(
    category: str,
    your_coverage: int,
    baseline: float,
    coverage_gap: float,
    avg_position: Optional[float],
    weak: List[RankedKeyword],
    keyword_count: int,
) -> str:
    reasons = [
        f'You have {your_coverage} page(s) for "{category}" against a baseline of '
        f"{baseline:g} ({coverage_gap:g}% coverage gap)"
    ]
    if avg_position is not None and avg_position > 12:
        reasons.append(f"Your average position is #{avg_position:.1f}, so most traffic goes to competitors")
    elif avg_position is not None and avg_position > 8:
        reasons.append(f"Your average position (#{avg_position:.1f}) puts you at the bottom of page 1 or page 2")

    weak_percent = round_half_up(len(weak) / keyword_count * 100) if keyword_count else 0
    if weak_percent > 50:
        reasons.append(f'{weak_percent}% of your "{category}" keywords rank outside the top 10')

    weak_volume = sum(kw.volume for kw in weak)
    if weak_volume > 10000:
        reasons.append(f"There are {format_number(weak_volume)} monthly searches in keywords where you underperform")

    reasons.append(f"Creating targeted content can help you capture more of this {category} traffic")
    return ". ".join(reasons) + "."


def analyze_content_gaps(
    keywords: Sequence[RankedKeyword],
    competitor_coverage: Optional[Dict[str, float]] = None,
    brand_context: Optional[BrandContext] = None,
    settings: Optional[EngineSettings] = None,
) -> List[ContentGap]:
    """
    Analyze content gaps by category.

    Args:
        keywords: Ranked keywords for the analyzed domain
        competitor_coverage: Optional average competitor page count per
            category; estimated from keyword count when missing
        brand_context: Optional brand profile for recommendation flags
        settings: Engine thresholds (defaults from environment)

    Returns:
        Content gaps sorted by priority, then total volume
    """
    settings = settings or get_settings()
    competitor_coverage = competitor_coverage or {}
    gaps: List[ContentGap] = []

    for category, members in _group_by_category(keywords, settings.default_category).items():
        if category == settings.default_category:
            continue
        if len(members) < settings.content_gap_min_keywords:
            continue

        urls = sorted({kw.url for kw in members if kw.url})
        your_coverage = len(urls)

        baseline = competitor_coverage.get(category)
        if baseline is None:
            baseline = math.ceil(len(members) / settings.keywords_per_page)
        baseline = float(baseline)

        coverage_gap = max(0.0, (baseline - your_coverage) / baseline * 100) if baseline > 0 else 0.0
        if coverage_gap <= 0:
            continue
        coverage_gap = round_one(coverage_gap)

        total_volume = sum(kw.volume for kw in members)
        avg_position = _average_position(members)

        weak = [
            kw for kw in _by_volume(members)
            if (kw.rank is None or kw.rank > 10) and kw.volume >= settings.content_gap_weak_min_volume
        ]
        traffic_gain = sum(
            max(0, visible_volume(kw.volume, CONTENT_TARGET_POSITION) - visible_volume(kw.volume, kw.rank))
            for kw in weak
        )
        primary = weak[0].keyword if weak else _by_volume(members)[0].keyword
        is_recommended, reason = matches_brand_context("", category, brand_context)

        gaps.append(ContentGap(
            id=make_item_id("content-gap", category),
            topic=category,
            category=category,
            keyword_count=len(members),
            your_coverage=your_coverage,
            avg_competitor_coverage=baseline,
            coverage_gap=coverage_gap,
            total_volume=total_volume,
            avg_position=avg_position,
            priority=gap_priority(total_volume, coverage_gap, settings.content_gap_high_volume),
            primary_keyword=primary,
            top_missing_keywords=[kw.keyword for kw in weak[:TOP_N]],
            existing_urls=urls[:TOP_N],
            weak_keywords=[
                WeakKeyword(keyword=kw.keyword, position=kw.rank, search_volume=kw.volume, url=kw.url)
                for kw in weak[:TOP_N]
            ],
            suggested_content_types=suggested_content_types(category),
            estimated_traffic_gain=traffic_gain,
            reasoning=_content_gap_reasoning(
                category, your_coverage, baseline, coverage_gap, avg_position, weak, len(members)
            ),
            is_recommended=is_recommended,
            recommended_reason=reason,
        ))

    gaps.sort(key=lambda g: (PRIORITY_ORDER[g.priority], -g.total_volume, g.category))

    logger.info(f"Content gaps: {len(gaps)} categories below coverage baseline")
    return gaps


# ============================================================================
# CATEGORY SOV
# ============================================================================

def category_status(sov: float, avg_position: Optional[float]) -> CategoryStatus:
    # Unranked categories only qualify on SOV
    avg = avg_position if avg_position is not None else math.inf
    if sov >= 25 and avg <= 5:
        return CategoryStatus.LEADING
    if sov >= 15 or avg <= 8:
        return CategoryStatus.COMPETITIVE
    if sov >= 8 or avg <= 12:
        return CategoryStatus.TRAILING
    return CategoryStatus.WEAK


def calculate_category_sov(
    keywords: Sequence[RankedKeyword],
    settings: Optional[EngineSettings] = None,
) -> List[CategorySOV]:
    """
    Calculate SOV breakdown by category.

    Returns:
        Categories sorted by total volume (most important first)
    """
    settings = settings or get_settings()
    categories: List[CategorySOV] = []

    for category, members in _group_by_category(keywords, settings.default_category).items():
        total_volume = sum(kw.volume for kw in members)
        visible = sum(visible_volume(kw.volume, kw.rank) for kw in members)
        sov = round_one(safe_share(visible, total_volume))
        avg_position = _average_position(members)

        categories.append(CategorySOV(
            category=category,
            keyword_count=len(members),
            total_volume=total_volume,
            visible_volume=visible,
            sov=sov,
            has_data=total_volume > 0,
            avg_position=avg_position,
            status=category_status(sov, avg_position),
            top_keywords=[kw.keyword for kw in _by_volume(members)[:TOP_N]],
        ))

    categories.sort(key=lambda c: (-c.total_volume, c.category))
    return categories


# ============================================================================
# FUNNEL STAGES
# ============================================================================

STAGE_INFO: Dict[FunnelStage, Tuple[str, str]] = {
    FunnelStage.AWARENESS: (
        "Awareness Stage",
        "Users are researching, learning, or discovering. Focus on brand visibility and educational content.",
    ),
    FunnelStage.CONSIDERATION: (
        "Consideration Stage",
        "Users are comparing options and evaluating. Focus on differentiation and value propositions.",
    ),
    FunnelStage.DECISION: (
        "Decision Stage",
        "Users are ready to buy or convert. Focus on conversion optimization and clear CTAs.",
    ),
}

WORKFORCE_PATTERN = re.compile(
    r"ausbildung|training|apprentice|intern|karriere|career|job|beruf|studium|student|university|lernen|learn|education",
    re.I,
)
COMPARISON_PATTERN = re.compile(
    r"vergleich|comparison|vs|versus|test|review|bewertung|beste|best|top|ranking|alternative|option",
    re.I,
)


def assess_strategic_value(
    kw: RankedKeyword,
    stage: FunnelStage,
    brand_context: Optional[BrandContext] = None,
) -> Tuple[str, str]:
    """
    Strategic value of a keyword given its stage and the brand profile.

    Returns:
        (value, reasoning) with value in high/medium/low
    """
    kw_lower = kw.keyword.lower()

    if stage is FunnelStage.DECISION:
        return "high", "High-intent keyword with purchase readiness"

    if stage is FunnelStage.AWARENESS and brand_context is not None:
        url = (kw.url or "").lower()
        if WORKFORCE_PATTERN.search(kw_lower) and any(p in url for p in ("ausbildung", "karriere", "career")):
            industry = brand_context.industry or "your industry"
            return "high", f"Strategic awareness: builds brand recognition with future professionals in {industry}"

        core_terms = [
            t.lower() for t in (*brand_context.seo_focus, *brand_context.product_categories,
                                *brand_context.key_strengths) if t
        ]
        if any(term in kw_lower for term in core_terms):
            topic = brand_context.vertical or brand_context.industry or "your core topics"
            return "medium", f"Awareness opportunity: educational content about {topic}"

    if stage is FunnelStage.CONSIDERATION:
        if COMPARISON_PATTERN.search(kw_lower):
            return "high", "Active comparison stage, users evaluating options"
        return "medium", "Commercial intent, users researching before purchase"

    if kw.volume >= 1000:
        return "medium", "High-volume awareness opportunity for brand visibility"
    return "low", "Informational content opportunity"


def _stage_insights(
    stage: FunnelStage,
    members: List[RankedKeyword],
    avg_position: Optional[float],
    brand_context: Optional[BrandContext],
) -> List[str]:
    total_volume = sum(kw.volume for kw in members)
    count = len(members)
    top3 = sum(1 for kw in members if kw.rank is not None and kw.rank <= 3)
    page1 = sum(1 for kw in members if kw.rank is not None and kw.rank <= 10)
    insights: List[str] = []

    if stage is FunnelStage.AWARENESS:
        insights.append(
            f"You have {count} awareness keywords with {format_number(total_volume)} total monthly searches"
        )
        if avg_position is None or avg_position > 10:
            insights.append("Average position outside page 1 suggests room for improved visibility in educational content")
        if brand_context is not None and brand_context.industry:
            insights.append(
                f"Focus on creating authoritative content about {brand_context.industry} topics to build brand trust"
            )
    elif stage is FunnelStage.CONSIDERATION:
        insights.append(f"{count} commercial keywords detected, users actively comparing options")
        if page1 < count * 0.5:
            insights.append("Less than 50% of consideration keywords are on page 1, prioritize comparison content")
        insights.append("Create comparison guides and \"best of\" content to capture users in the evaluation phase")
    else:
        insights.append(
            f"{count} high-intent transactional keywords with {format_number(total_volume)} monthly searches"
        )
        if top3 < count * 0.3:
            insights.append("Less than 30% in top 3 positions, optimize product/service pages for conversions")
        insights.append("Ensure landing pages have clear CTAs and streamlined purchase paths")

    return insights


def _funnel_keyword(kw: RankedKeyword) -> FunnelKeyword:
    return FunnelKeyword(
        keyword=kw.keyword,
        search_volume=kw.volume,
        position=kw.rank,
        intent=kw.main_intent or "informational",
        url=kw.url,
    )


def analyze_funnel_stages(
    keywords: Sequence[RankedKeyword],
    brand_context: Optional[BrandContext] = None,
) -> List[FunnelStageAnalysis]:
    """
    Analyze keywords by funnel stage.

    Stages come out in fixed order (awareness, consideration, decision);
    stages without keywords are omitted.
    """
    by_stage: Dict[FunnelStage, List[RankedKeyword]] = defaultdict(list)
    for kw in active(keywords):
        by_stage[keyword_funnel_stage(kw)].append(kw)

    analyses: List[FunnelStageAnalysis] = []

    for stage in (FunnelStage.AWARENESS, FunnelStage.CONSIDERATION, FunnelStage.DECISION):
        members = by_stage.get(stage)
        if not members:
            continue

        label, description = STAGE_INFO[stage]
        total_volume = sum(kw.volume for kw in members)
        visible = sum(visible_volume(kw.volume, kw.rank) for kw in members)
        avg_position = _average_position(members)
        ordered = _by_volume(members)

        opportunities = []
        for kw in ordered:
            if kw.rank is not None and kw.rank <= FUNNEL_TARGET_POSITION:
                continue
            if kw.volume < FUNNEL_MIN_VOLUME:
                continue
            value, reasoning = assess_strategic_value(kw, stage, brand_context)
            item = _funnel_keyword(kw)
            item.potential_clicks = visible_volume(kw.volume, FUNNEL_TARGET_POSITION)
            item.strategic_value = value
            item.strategic_reasoning = reasoning
            opportunities.append(item)
            if len(opportunities) == TOP_N:
                break

        analyses.append(FunnelStageAnalysis(
            stage=stage,
            stage_label=label,
            description=description,
            keyword_count=len(members),
            total_volume=total_volume,
            avg_position=avg_position,
            visible_volume=visible,
            sov=round_one(safe_share(visible, total_volume)),
            has_data=total_volume > 0,
            top_keywords=[_funnel_keyword(kw) for kw in ordered[:TOP_N]],
            opportunities=opportunities,
            strategic_insights=_stage_insights(stage, members, avg_position, brand_context),
        ))

    return analyses


# ============================================================================
# INTENT OPPORTUNITIES
# ============================================================================

def analyze_intent_opportunities(
    keywords: Sequence[RankedKeyword],
    brand_context: Optional[BrandContext] = None,
    settings: Optional[EngineSettings] = None,
    *,
    min_volume: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[IntentOpportunity]:
    """
    Keywords outside the top 3 ranked by strategic value of their intent.

    Unranked keywords are included. Funnel stage follows provider intent,
    the same way as analyze_funnel_stages().

    Returns:
        Opportunities sorted by strategic value (high first), then volume
    """
    settings = settings or get_settings()
    min_volume = settings.intent_opportunity_min_volume if min_volume is None else min_volume
    limit = settings.intent_opportunity_limit if limit is None else limit

    opportunities: List[IntentOpportunity] = []

    for kw in active(keywords):
        if kw.rank is not None and kw.rank <= FUNNEL_TARGET_POSITION:
            continue
        if kw.volume < min_volume:
            continue

        stage = keyword_funnel_stage(kw)
        value, reasoning = assess_strategic_value(kw, stage, brand_context)
        category = get_category(kw.keyword, kw.category, settings.default_category)
        _, relevance = matches_brand_context(kw.keyword, category, brand_context)

        opportunities.append(IntentOpportunity(
            keyword=kw.keyword,
            search_volume=kw.volume,
            position=kw.rank,
            intent=kw.main_intent or "informational",
            intent_probability=kw.search_intent.probability if kw.search_intent else 0.5,
            funnel_stage=stage,
            category=category,
            url=kw.url,
            strategic_value=value,
            strategic_reasoning=reasoning,
            brand_relevance=relevance,
        ))

    opportunities.sort(key=lambda o: (VALUE_ORDER[o.strategic_value], -o.search_volume, o.keyword, o.url or ""))

    logger.info(f"Intent opportunities: {len(opportunities)} found, returning {min(limit, len(opportunities))}")
    return opportunities[:limit]
