"""
SearchShare Scoring Module

Deterministic metrics and opportunity detection:

- helpers: CTR curve and visible volume
- share: Share of Search, Share of Voice, Growth Gap
- classification: categories, search intent, funnel stages
- quick_wins / hidden_gems / cannibalization / coverage: detectors
- competitors: competitor strength and head-to-head counts
- action_list: prioritized, de-duplicated actions
- engine: full analysis (sync and parallel async)
"""

from .helpers import (
    CTR_CURVE,
    DEFAULT_CTR,
    get_ctr_for_position,
    visible_volume,
    get_intent_weight,
    make_item_id,
)
from .share import (
    GapInterpretation,
    ShareOfSearchResult,
    ShareOfVoiceResult,
    KeywordVisibility,
    GrowthGapResult,
    calculate_sos,
    calculate_sov,
    calculate_growth_gap,
)
from .classification import (
    CATEGORY_RULES,
    detect_category,
    get_category,
    classify_keyword_intent,
    keyword_intent,
    funnel_stage,
    keyword_funnel_stage,
)
from .brand_context import (
    matches_brand_context,
    is_relevant_to_brand,
    filter_relevant_keywords,
)
from .quick_wins import QuickWinOpportunity, find_quick_wins
from .hidden_gems import GemType, HiddenGem, find_hidden_gems
from .cannibalization import (
    CannibalizationAction,
    CannibalizationIssue,
    CompetingUrl,
    detect_cannibalization,
)
from .coverage import (
    Priority,
    CategoryStatus,
    ContentGap,
    WeakKeyword,
    CategorySOV,
    FunnelKeyword,
    FunnelStageAnalysis,
    IntentOpportunity,
    analyze_content_gaps,
    calculate_category_sov,
    analyze_funnel_stages,
    analyze_intent_opportunities,
)
from .competitors import HeadToHead, CompetitorStrength, calculate_competitor_strength
from .action_list import (
    ActionType,
    ActionSource,
    ActionItem,
    ScoreBreakdown,
    generate_action_list,
    attach_reasoning,
)
from .engine import AnalysisResult, AnalysisSummary, analyze, analyze_async

__all__ = [
    # Helpers
    "CTR_CURVE",
    "DEFAULT_CTR",
    "get_ctr_for_position",
    "visible_volume",
    "get_intent_weight",
    "make_item_id",
    # Share
    "GapInterpretation",
    "ShareOfSearchResult",
    "ShareOfVoiceResult",
    "KeywordVisibility",
    "GrowthGapResult",
    "calculate_sos",
    "calculate_sov",
    "calculate_growth_gap",
    # Classification
    "CATEGORY_RULES",
    "detect_category",
    "get_category",
    "classify_keyword_intent",
    "keyword_intent",
    "funnel_stage",
    "keyword_funnel_stage",
    # Brand context
    "matches_brand_context",
    "is_relevant_to_brand",
    "filter_relevant_keywords",
    # Detectors
    "QuickWinOpportunity",
    "find_quick_wins",
    "GemType",
    "HiddenGem",
    "find_hidden_gems",
    "CannibalizationAction",
    "CannibalizationIssue",
    "CompetingUrl",
    "detect_cannibalization",
    "Priority",
    "CategoryStatus",
    "ContentGap",
    "WeakKeyword",
    "CategorySOV",
    "FunnelKeyword",
    "FunnelStageAnalysis",
    "analyze_content_gaps",
    "calculate_category_sov",
    "analyze_funnel_stages",
    "IntentOpportunity",
    "analyze_intent_opportunities",
    "HeadToHead",
    "CompetitorStrength",
    "calculate_competitor_strength",
    # Action list
    "ActionType",
    "ActionSource",
    "ActionItem",
    "ScoreBreakdown",
    "generate_action_list",
    "attach_reasoning",
    # Engine
    "AnalysisResult",
    "AnalysisSummary",
    "analyze",
    "analyze_async",
]
