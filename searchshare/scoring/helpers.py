"""
Scoring Helper Functions and Constants

Contains the CTR curve, intent weights, rounding rules and the identity
function used across all scoring calculations.
"""

import hashlib
import math
from typing import Dict, Optional


# ============================================================================
# CTR CURVE (expected click-through rate by organic SERP position)
# ============================================================================

CTR_CURVE: Dict[int, float] = {
    1: 0.28,    # 28% CTR for position 1
    2: 0.15,
    3: 0.09,
    4: 0.06,
    5: 0.04,
    6: 0.03,
    7: 0.025,
    8: 0.02,
    9: 0.018,
    10: 0.015,  # bottom of page 1
    11: 0.012,
    12: 0.01,
    13: 0.009,
    14: 0.008,
    15: 0.007,
    16: 0.006,
    17: 0.005,
    18: 0.004,
    19: 0.003,
    20: 0.002,
}

# Tail CTR for positions beyond 20 and for unranked keywords
DEFAULT_CTR = 0.001


def get_ctr_for_position(position: Optional[int]) -> float:
    """
    Get expected CTR for a SERP position.

    Args:
        position: SERP position (None if not ranking)

    Returns:
        Expected CTR as decimal (0.0 - 1.0)
    """
    if position is None:
        return DEFAULT_CTR
    if position <= 0:
        return 0.0
    return CTR_CURVE.get(position, DEFAULT_CTR)


# ============================================================================
# ROUNDING
# ============================================================================

def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def round_one(value: float) -> float:
    """Round to one decimal place, half-up."""
    return math.floor(value * 10 + 0.5) / 10


def safe_share(part: float, total: float) -> float:
    """Percentage share with a zero denominator yielding 0."""
    if total <= 0:
        return 0.0
    return part / total * 100


# ============================================================================
# VISIBILITY
# ============================================================================

def visible_volume(volume: int, position: Optional[int]) -> int:
    """
    Estimated clicks a keyword generates at a given position.

    Every SOV-dependent number in the engine goes through here so the CTR
    model is applied one way only.

    Args:
        volume: Monthly search volume
        position: SERP position (None if not ranking)

    Returns:
        Visible volume, never greater than volume
    """
    if not volume or volume <= 0:
        return 0
    return round_half_up(volume * get_ctr_for_position(position))


# ============================================================================
# INTENT WEIGHTS
# ============================================================================

INTENT_WEIGHTS: Dict[str, int] = {
    "transactional": 100,   # Ready to buy
    "commercial": 75,       # Researching with intent to buy
    "informational": 50,    # Learning/researching
    "navigational": 25,     # Looking for specific site
}


def get_intent_weight(intent: Optional[str]) -> int:
    """
    Get business value weight for search intent.

    Args:
        intent: Intent string from the data provider

    Returns:
        Weight (25-100)
    """
    if not intent:
        return 50  # Default to informational
    return INTENT_WEIGHTS.get(str(intent).lower(), 50)


# ============================================================================
# IDENTITY
# ============================================================================

def normalize_keyword(keyword: str) -> str:
    return (keyword or "").strip().lower()


def make_item_id(kind: str, *parts: Optional[str]) -> str:
    """
    Deterministic identity for a derived entity.

    The same source keyword(s) and type always produce the same id, so a UI
    can track per-item state across re-renders.
    """
    key = "|".join("" if p is None else str(p) for p in parts)
    digest = hashlib.md5(key.encode("utf-8")).hexdigest()[:12]
    return f"{kind}-{digest}"


def format_number(value: int) -> str:
    """Thousands-separated number for reasoning strings."""
    return f"{value:,}"
