"""
Action List Synthesizer

Merges every detector's output into one ranked, de-duplicated list.

Formula:
    Priority = (
        Impact × 0.35 +
        (100 - Effort) × 0.25 +
        Strategic_Fit × 0.20 +
        Time_To_Result × 0.20
    )

Each component is 0-100:
- Impact: estimated uplift relative to the largest uplift in the batch
- Effort: low 20, medium 50, high 80 (inverted in the formula)
- Strategic fit: intent weight, +25 when the brand context recommends it
- Time to result: fixed per source (faster payoff scores higher)
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from searchshare.models import Effort, Impact, SearchIntent
from .cannibalization import CannibalizationAction, CannibalizationIssue
from .classification import classify_keyword_intent
from .coverage import ContentGap
from .helpers import get_intent_weight, make_item_id, normalize_keyword, round_one, format_number
from .hidden_gems import HiddenGem
from .quick_wins import QuickWinOpportunity

logger = logging.getLogger(__name__)


class ActionType(str, Enum):
    OPTIMIZE = "optimize"
    CREATE = "create"
    MONITOR = "monitor"
    INVESTIGATE = "investigate"


class ActionSource(str, Enum):
    QUICK_WIN = "quick_win"
    HIDDEN_GEM = "hidden_gem"
    CANNIBALIZATION = "cannibalization"
    CONTENT_GAP = "content_gap"


# Component weights
WEIGHTS = {
    "impact": 0.35,
    "effort": 0.25,
    "strategic_fit": 0.20,
    "time_to_result": 0.20,
}

EFFORT_SCORES: Dict[Effort, int] = {
    Effort.LOW: 20,
    Effort.MEDIUM: 50,
    Effort.HIGH: 80,
}

RECOMMENDED_BONUS = 25

QUICK_WIN_TIME: Dict[Effort, int] = {
    Effort.LOW: 90,
    Effort.MEDIUM: 70,
    Effort.HIGH: 50,
}
HIDDEN_GEM_RANKED_TIME = 60
HIDDEN_GEM_UNRANKED_TIME = 40
CANNIBALIZATION_TIME: Dict[CannibalizationAction, int] = {
    CannibalizationAction.REDIRECT: 80,
    CannibalizationAction.DIFFERENTIATE: 60,
    CannibalizationAction.CONSOLIDATE: 50,
}
CONTENT_GAP_TIME = 30


@dataclass
class ScoreBreakdown:
    """Priority components, each 0-100."""
    impact: float
    effort: int
    strategic_fit: int
    time_to_result: int


@dataclass
class ActionItem:
    """One prioritized recommendation."""
    id: str
    action_type: ActionType
    source: ActionSource
    source_id: str
    priority: float
    score_breakdown: ScoreBreakdown
    title: str
    description: str
    keyword: str
    category: Optional[str]
    url: Optional[str]
    impact: Impact
    effort: Effort
    estimated_uplift: int
    reasoning: str
    is_recommended: bool = False
    recommended_reason: Optional[str] = None
    search_intent: Optional[str] = None
    enriched_reasoning: Optional[str] = None


@dataclass
class _Candidate:
    """Source-specific fields before batch-relative scoring."""
    source: ActionSource
    source_id: str
    action_type: ActionType
    keyword: str
    category: Optional[str]
    url: Optional[str]
    effort: Effort
    uplift: int
    time_to_result: int
    title: str
    description: str
    reasoning: str
    is_recommended: bool
    recommended_reason: Optional[str]
    search_intent: Optional[str]


# ============================================================================
# SCORING
# ============================================================================

def impact_label(uplift: int) -> Impact:
    if uplift >= 500:
        return Impact.HIGH
    if uplift >= 200:
        return Impact.MEDIUM
    return Impact.LOW


def strategic_fit(intent: Optional[str], is_recommended: bool) -> int:
    score = get_intent_weight(intent)
    if is_recommended:
        score += RECOMMENDED_BONUS
    return min(100, score)


def calculate_priority(impact: float, effort: int, fit: int, time_to_result: int) -> float:
    raw = (
        impact * WEIGHTS["impact"] +
        (100 - effort) * WEIGHTS["effort"] +
        fit * WEIGHTS["strategic_fit"] +
        time_to_result * WEIGHTS["time_to_result"]
    )
    return round_one(raw)


# ============================================================================
# CANDIDATES PER SOURCE
# ============================================================================

def _quick_win_title(qw: QuickWinOpportunity) -> str:
    if qw.current_position - qw.target_position <= 3:
        return f'Push "{qw.keyword}" into top {qw.target_position}'
    if qw.current_position > 10:
        return f'Move "{qw.keyword}" to page 1'
    return f'Boost "{qw.keyword}" from #{qw.current_position} to #{qw.target_position}'


def _from_quick_win(qw: QuickWinOpportunity) -> _Candidate:
    return _Candidate(
        source=ActionSource.QUICK_WIN,
        source_id=qw.id,
        action_type=ActionType.OPTIMIZE,
        keyword=qw.keyword,
        category=qw.category,
        url=qw.url,
        effort=qw.effort,
        uplift=qw.click_uplift,
        time_to_result=QUICK_WIN_TIME[qw.effort],
        title=_quick_win_title(qw),
        description=(
            f"Improve from #{qw.current_position} to #{qw.target_position} "
            f"(+{format_number(qw.click_uplift)} clicks potential)"
        ),
        reasoning=qw.reasoning,
        is_recommended=qw.is_recommended,
        recommended_reason=qw.recommended_reason,
        search_intent=qw.search_intent,
    )


def _gem_effort(kd: int) -> Effort:
    if kd <= 20:
        return Effort.LOW
    if kd <= 35:
        return Effort.MEDIUM
    return Effort.HIGH


def _from_hidden_gem(gem: HiddenGem) -> _Candidate:
    ranked = gem.position is not None
    kd_label = "Est. KD" if gem.kd_is_estimated else "KD"
    return _Candidate(
        source=ActionSource.HIDDEN_GEM,
        source_id=gem.id,
        action_type=ActionType.MONITOR if ranked else ActionType.INVESTIGATE,
        keyword=gem.keyword,
        category=gem.category,
        url=gem.url,
        effort=_gem_effort(gem.keyword_difficulty),
        uplift=gem.click_uplift,
        time_to_result=HIDDEN_GEM_RANKED_TIME if ranked else HIDDEN_GEM_UNRANKED_TIME,
        title=f'Track "{gem.keyword}" (Hidden Gem)' if ranked else f'Target "{gem.keyword}" (Hidden Gem)',
        description=gem.reasoning,
        reasoning=(
            f"{kd_label}: {gem.keyword_difficulty}, Volume: {format_number(gem.search_volume)}, "
            f"Potential: {format_number(gem.potential_clicks)} clicks at #{gem.target_position}"
        ),
        is_recommended=gem.is_recommended,
        recommended_reason=gem.recommended_reason,
        search_intent=gem.search_intent,
    )


CANNIBALIZATION_EFFORT: Dict[CannibalizationAction, Effort] = {
    CannibalizationAction.REDIRECT: Effort.LOW,
    CannibalizationAction.DIFFERENTIATE: Effort.MEDIUM,
    CannibalizationAction.CONSOLIDATE: Effort.MEDIUM,
}


def _from_cannibalization(issue: CannibalizationIssue) -> _Candidate:
    verb = issue.recommendation.value.capitalize()
    return _Candidate(
        source=ActionSource.CANNIBALIZATION,
        source_id=issue.id,
        action_type=ActionType.INVESTIGATE,
        keyword=issue.keyword,
        category=None,
        url=issue.best_url,
        effort=CANNIBALIZATION_EFFORT[issue.recommendation],
        uplift=issue.impact_score,
        time_to_result=CANNIBALIZATION_TIME[issue.recommendation],
        title=f'{verb} pages for "{issue.keyword}"',
        description=f"{len(issue.competing_urls)} URLs competing, recommended fix: {issue.recommendation.value}",
        reasoning=issue.reasoning,
        is_recommended=False,
        recommended_reason=None,
        search_intent=None,
    )


def _content_gap_title(gap: ContentGap) -> str:
    intent = classify_keyword_intent(gap.primary_keyword)
    if intent is SearchIntent.TRANSACTIONAL:
        return f'Create conversion page for "{gap.primary_keyword}"'
    if intent is SearchIntent.COMMERCIAL:
        return f'Build comparison/guide for "{gap.primary_keyword}"'
    return f"Build content cluster for {gap.category}"


def _from_content_gap(gap: ContentGap) -> _Candidate:
    return _Candidate(
        source=ActionSource.CONTENT_GAP,
        source_id=gap.id,
        action_type=ActionType.CREATE,
        keyword=gap.primary_keyword,
        category=gap.category,
        url=None,
        effort=Effort.HIGH,
        uplift=gap.estimated_traffic_gain,
        time_to_result=CONTENT_GAP_TIME,
        title=_content_gap_title(gap),
        description=f"Expand {gap.category} coverage to capture {format_number(gap.total_volume)} monthly searches",
        reasoning=gap.reasoning,
        is_recommended=gap.is_recommended,
        recommended_reason=gap.recommended_reason,
        search_intent=None,
    )


# ============================================================================
# SYNTHESIS
# ============================================================================

def _sort_key(item: ActionItem) -> Tuple:
    return (-item.priority, -item.estimated_uplift, item.keyword, item.id)


def generate_action_list(
    quick_wins: Sequence[QuickWinOpportunity] = (),
    hidden_gems: Sequence[HiddenGem] = (),
    cannibalization_issues: Sequence[CannibalizationIssue] = (),
    content_gaps: Sequence[ContentGap] = (),
    limit: Optional[int] = None,
) -> List[ActionItem]:
    """
    Generate the prioritized action list.

    Args:
        quick_wins: Quick win opportunities
        hidden_gems: Hidden gems
        cannibalization_issues: Cannibalization issues
        content_gaps: Content gaps
        limit: Optional maximum number of actions

    Returns:
        Actions sorted by priority (highest first), at most one per
        (keyword, action type)
    """
    candidates: List[_Candidate] = [
        *(_from_quick_win(qw) for qw in quick_wins),
        *(_from_hidden_gem(g) for g in hidden_gems),
        *(_from_cannibalization(i) for i in cannibalization_issues),
        *(_from_content_gap(g) for g in content_gaps),
    ]
    if not candidates:
        return []

    max_uplift = max(c.uplift for c in candidates)

    best: Dict[Tuple[str, ActionType], ActionItem] = {}
    for c in candidates:
        impact = c.uplift / max_uplift * 100 if max_uplift > 0 else 0.0
        effort = EFFORT_SCORES[c.effort]
        fit = strategic_fit(c.search_intent, c.is_recommended)

        item = ActionItem(
            id=make_item_id("action", c.action_type.value, c.source.value, c.source_id),
            action_type=c.action_type,
            source=c.source,
            source_id=c.source_id,
            priority=calculate_priority(impact, effort, fit, c.time_to_result),
            score_breakdown=ScoreBreakdown(
                impact=round_one(impact),
                effort=effort,
                strategic_fit=fit,
                time_to_result=c.time_to_result,
            ),
            title=c.title,
            description=c.description,
            keyword=c.keyword,
            category=c.category,
            url=c.url,
            impact=impact_label(c.uplift),
            effort=c.effort,
            estimated_uplift=c.uplift,
            reasoning=c.reasoning,
            is_recommended=c.is_recommended,
            recommended_reason=c.recommended_reason,
            search_intent=c.search_intent,
        )

        key = (normalize_keyword(c.keyword), c.action_type)
        current = best.get(key)
        if current is None or _sort_key(item) < _sort_key(current):
            best[key] = item

    actions = sorted(best.values(), key=_sort_key)
    dropped = len(candidates) - len(actions)
    if dropped:
        logger.debug(f"Action list: merged {dropped} duplicate (keyword, action type) entries")

    if limit is not None:
        actions = actions[:limit]

    logger.info(f"Action list: {len(actions)} actions from {len(candidates)} candidates")
    return actions


def attach_reasoning(item: ActionItem, text: str) -> ActionItem:
    """Copy of the action carrying externally generated reasoning text."""
    return replace(item, enriched_reasoning=text)
