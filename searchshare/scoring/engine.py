"""
Metrics & Opportunity Engine

Runs the full analysis over one batch of keywords:

1. Share calculators (SOS, SOV, Growth Gap) on the unfiltered input
2. Brand relevance filter (only when a brand context is given)
3. Independent detectors: quick wins, hidden gems, cannibalization,
   content gaps, category SOV, funnel stages,
   intent opportunities, competitor strength
4. Action list synthesized from the detector outputs

analyze() runs the detectors one after another; analyze_async() runs them
as worker-thread tasks joined before synthesis. Both return the same result.
"""

import asyncio
import logging
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from searchshare.models import BrandContext, BrandKeyword, RankedKeyword
from searchshare.utils.config import EngineSettings, get_settings
from .action_list import ActionItem, generate_action_list
from .brand_context import filter_relevant_keywords
from .cannibalization import CannibalizationIssue, detect_cannibalization
from .competitors import CompetitorStrength, calculate_competitor_strength
from .coverage import (
    CategorySOV,
    CategoryStatus,
    ContentGap,
    FunnelStageAnalysis,
    IntentOpportunity,
    analyze_content_gaps,
    analyze_funnel_stages,
    analyze_intent_opportunities,
    calculate_category_sov,
)
from .hidden_gems import HiddenGem, find_hidden_gems
from .quick_wins import QuickWinOpportunity, find_quick_wins
from .share import (
    GrowthGapResult,
    ShareOfSearchResult,
    ShareOfVoiceResult,
    calculate_growth_gap,
    calculate_sos,
    calculate_sov,
)

logger = logging.getLogger(__name__)


def _dict_factory(items) -> Dict[str, Any]:
    return {key: value.value if isinstance(value, Enum) else value for key, value in items}


@dataclass
class AnalysisSummary:
    """Headline numbers for dashboards."""
    brand_keyword_count: int
    ranked_keyword_count: int
    analyzed_keyword_count: int
    total_quick_win_potential: int
    quick_win_count: int
    hidden_gem_count: int
    cannibalization_count: int
    content_gap_count: int
    strong_categories: int
    weak_categories: int
    top_priority_action: str
    funnel_breakdown: Dict[str, Dict[str, int]] = field(default_factory=dict)


@dataclass
class AnalysisResult:
    """Complete engine output for one invocation."""
    sos: ShareOfSearchResult
    sov: ShareOfVoiceResult
    gap: GrowthGapResult
    quick_wins: List[QuickWinOpportunity]
    hidden_gems: List[HiddenGem]
    cannibalization_issues: List[CannibalizationIssue]
    content_gaps: List[ContentGap]
    category_breakdown: List[CategorySOV]
    funnel_analysis: List[FunnelStageAnalysis]
    intent_opportunities: List[IntentOpportunity]
    competitor_strengths: List[CompetitorStrength]
    action_list: List[ActionItem]
    summary: AnalysisSummary

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary (enums as their values)."""
        return asdict(self, dict_factory=_dict_factory)


@dataclass
class _Detections:
    quick_wins: List[QuickWinOpportunity]
    hidden_gems: List[HiddenGem]
    cannibalization_issues: List[CannibalizationIssue]
    content_gaps: List[ContentGap]
    category_breakdown: List[CategorySOV]
    funnel_analysis: List[FunnelStageAnalysis]
    intent_opportunities: List[IntentOpportunity]
    competitor_strengths: List[CompetitorStrength]


def _prepare(
    ranked_keywords: Sequence[RankedKeyword],
    brand_context: Optional[BrandContext],
    settings: EngineSettings,
) -> tuple:
    ranked = tuple(ranked_keywords)
    if brand_context is not None and settings.filter_irrelevant_keywords:
        return tuple(filter_relevant_keywords(ranked, brand_context, settings.default_category))
    return ranked


def _summarize(
    brand_keywords: Sequence[BrandKeyword],
    ranked_keywords: Sequence[RankedKeyword],
    analyzed: Sequence[RankedKeyword],
    detections: _Detections,
    actions: List[ActionItem],
) -> AnalysisSummary:
    strong = {CategoryStatus.LEADING, CategoryStatus.COMPETITIVE}
    return AnalysisSummary(
        brand_keyword_count=len(brand_keywords),
        ranked_keyword_count=len(ranked_keywords),
        analyzed_keyword_count=len(analyzed),
        total_quick_win_potential=sum(q.click_uplift for q in detections.quick_wins),
        quick_win_count=len(detections.quick_wins),
        hidden_gem_count=len(detections.hidden_gems),
        cannibalization_count=len(detections.cannibalization_issues),
        content_gap_count=len(detections.content_gaps),
        strong_categories=sum(1 for c in detections.category_breakdown if c.status in strong),
        weak_categories=sum(1 for c in detections.category_breakdown if c.status not in strong),
        top_priority_action=actions[0].title if actions else "No actions identified",
        funnel_breakdown={
            stage.stage.value: {"count": stage.keyword_count, "volume": stage.total_volume}
            for stage in detections.funnel_analysis
        },
    )


def _assemble(
    brand_keywords: Sequence[BrandKeyword],
    ranked_keywords: Sequence[RankedKeyword],
    analyzed: Sequence[RankedKeyword],
    detections: _Detections,
    settings: EngineSettings,
) -> AnalysisResult:
    sos = calculate_sos(brand_keywords)
    sov = calculate_sov(ranked_keywords)
    gap = calculate_growth_gap(sos.share_of_search, sov.share_of_voice, settings.growth_gap_threshold)

    actions = generate_action_list(
        detections.quick_wins,
        detections.hidden_gems,
        detections.cannibalization_issues,
        detections.content_gaps,
    )
    summary = _summarize(brand_keywords, ranked_keywords, analyzed, detections, actions)

    logger.info(
        f"Analysis complete: SOS {sos.share_of_search}%, SOV {sov.share_of_voice}%, "
        f"gap {gap.gap} ({gap.interpretation.value}), {len(actions)} actions"
    )

    return AnalysisResult(
        sos=sos,
        sov=sov,
        gap=gap,
        quick_wins=detections.quick_wins,
        hidden_gems=detections.hidden_gems,
        cannibalization_issues=detections.cannibalization_issues,
        content_gaps=detections.content_gaps,
        category_breakdown=detections.category_breakdown,
        funnel_analysis=detections.funnel_analysis,
        intent_opportunities=detections.intent_opportunities,
        competitor_strengths=detections.competitor_strengths,
        action_list=actions,
        summary=summary,
    )


def analyze(
    brand_keywords: Sequence[BrandKeyword],
    ranked_keywords: Sequence[RankedKeyword],
    brand_context: Optional[BrandContext] = None,
    settings: Optional[EngineSettings] = None,
    competitor_coverage: Optional[Dict[str, float]] = None,
) -> AnalysisResult:
    """
    Run the complete analysis.

    Args:
        brand_keywords: Own and competitor brand-name keywords (for SOS)
        ranked_keywords: Ranking results for the analyzed domain
        brand_context: Optional brand profile for relevance and recommendations
        settings: Engine thresholds (defaults from environment)
        competitor_coverage: Optional competitor page count per category

    Returns:
        AnalysisResult
    """
    settings = settings or get_settings()
    brand = tuple(brand_keywords)
    ranked = tuple(ranked_keywords)
    analyzed = _prepare(ranked, brand_context, settings)

    logger.info(f"Analyzing {len(brand)} brand keywords, {len(analyzed)}/{len(ranked)} ranked keywords")

    detections = _Detections(
        quick_wins=find_quick_wins(analyzed, brand_context, settings),
        hidden_gems=find_hidden_gems(analyzed, brand_context, settings),
        cannibalization_issues=detect_cannibalization(analyzed, settings),
        content_gaps=analyze_content_gaps(analyzed, competitor_coverage, brand_context, settings),
        category_breakdown=calculate_category_sov(analyzed, settings),
        funnel_analysis=analyze_funnel_stages(analyzed, brand_context),
        intent_opportunities=analyze_intent_opportunities(analyzed, brand_context, settings),
        competitor_strengths=calculate_competitor_strength(brand, analyzed, brand_context, settings),
    )
    return _assemble(brand, ranked, analyzed, detections, settings)


async def analyze_async(
    brand_keywords: Sequence[BrandKeyword],
    ranked_keywords: Sequence[RankedKeyword],
    brand_context: Optional[BrandContext] = None,
    settings: Optional[EngineSettings] = None,
    competitor_coverage: Optional[Dict[str, float]] = None,
) -> AnalysisResult:
    """
    Run the complete analysis with detectors in parallel worker threads.

    Same arguments and result as analyze().
    """
    settings = settings or get_settings()
    brand = tuple(brand_keywords)
    ranked = tuple(ranked_keywords)
    analyzed = _prepare(ranked, brand_context, settings)

    logger.info(f"Analyzing {len(brand)} brand keywords, {len(analyzed)}/{len(ranked)} ranked keywords (parallel)")

    (
        quick_wins,
        hidden_gems,
        cannibalization_issues,
        content_gaps,
        category_breakdown,
        funnel_analysis,
        intent_opportunities,
        competitor_strengths,
    ) = await asyncio.gather(
        asyncio.to_thread(find_quick_wins, analyzed, brand_context, settings),
        asyncio.to_thread(find_hidden_gems, analyzed, brand_context, settings),
        asyncio.to_thread(detect_cannibalization, analyzed, settings),
        asyncio.to_thread(analyze_content_gaps, analyzed, competitor_coverage, brand_context, settings),
        asyncio.to_thread(calculate_category_sov, analyzed, settings),
        asyncio.to_thread(analyze_funnel_stages, analyzed, brand_context),
        asyncio.to_thread(analyze_intent_opportunities, analyzed, brand_context, settings),
        asyncio.to_thread(calculate_competitor_strength, brand, analyzed, brand_context, settings),
    )

    detections = _Detections(
        quick_wins=quick_wins,
        hidden_gems=hidden_gems,
        cannibalization_issues=cannibalization_issues,
        content_gaps=content_gaps,
        category_breakdown=category_breakdown,
        funnel_analysis=funnel_analysis,
        intent_opportunities=intent_opportunities,
        competitor_strengths=competitor_strengths,
    )
    return _assemble(brand, ranked, analyzed, detections, settings)
