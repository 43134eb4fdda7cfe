"""
SearchShare - Data Models

Input records supplied by the data-fetch layer and the enums shared by every
scoring module. Inputs are frozen: the engine reads them, never mutates them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


# =============================================================================
# ENUMS
# =============================================================================


class SearchIntent(str, Enum):
    """Search intent classification."""
    INFORMATIONAL = "informational"
    NAVIGATIONAL = "navigational"
    COMMERCIAL = "commercial"
    TRANSACTIONAL = "transactional"


class FunnelStage(str, Enum):
    """Coarse buyer-journey bucket derived from search intent."""
    AWARENESS = "awareness"
    CONSIDERATION = "consideration"
    DECISION = "decision"


class Effort(str, Enum):
    """Relative effort needed to act on an opportunity."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Impact(str, Enum):
    """Relative impact label shown next to an action."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# =============================================================================
# COERCION HELPERS
# =============================================================================


def _pick(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key (provider payloads mix camelCase and snake_case)."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _to_int(value: Any, default: int = 0) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(float(value.strip()))
        except ValueError:
            return default
    return default


def _to_optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(float(value.strip()))
        except ValueError:
            return None
    return None


def _to_optional_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


TRUE_STRINGS = {"true", "1", "yes", "y", "on"}


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    if isinstance(value, (bool, int, float)):
        return bool(value)
    return False


def _to_text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return ""
    return str(value).strip()


def _to_str_list(value: Any) -> List[str]:
    """A single string becomes a one-item list; non-string items are dropped."""
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


# =============================================================================
# INPUT RECORDS
# =============================================================================


@dataclass(frozen=True)
class SearchIntentInfo:
    """Provider intent classification for a keyword."""
    main_intent: str
    probability: float = 0.5
    funnel_stage: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["SearchIntentInfo"]:
        if not data:
            return None
        main_intent = _pick(data, "main_intent", "mainIntent")
        if not main_intent:
            return None
        probability = _to_optional_float(_pick(data, "probability"))
        return cls(
            main_intent=str(main_intent).lower(),
            probability=probability if probability is not None else 0.5,
            funnel_stage=_pick(data, "funnel_stage", "funnelStage"),
        )


@dataclass(frozen=True)
class BrandKeyword:
    """A brand-name search term used for Share of Search."""
    keyword: str
    search_volume: int
    is_own_brand: bool
    is_discarded: bool = False

    @property
    def volume(self) -> int:
        """Search volume with negative or malformed values read as zero."""
        if not isinstance(self.search_volume, (int, float)) or isinstance(self.search_volume, bool):
            return 0
        return max(0, int(self.search_volume))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BrandKeyword":
        return cls(
            keyword=str(_pick(data, "keyword", default="")).strip(),
            search_volume=_to_int(_pick(data, "search_volume", "searchVolume", default=0)),
            is_own_brand=_to_bool(_pick(data, "is_own_brand", "isOwnBrand", default=False)),
            is_discarded=_to_bool(_pick(data, "is_discarded", "isDiscarded", default=False)),
        )


@dataclass(frozen=True)
class RankedKeyword:
    """One ranking result for the analyzed domain."""
    keyword: str
    search_volume: int
    position: Optional[int] = None
    url: Optional[str] = None
    category: Optional[str] = None
    keyword_difficulty: Optional[int] = None
    search_intent: Optional[SearchIntentInfo] = None
    trend: Optional[float] = None  # YoY volume change in percent
    is_discarded: bool = False

    @property
    def volume(self) -> int:
        """Search volume with negative or malformed values read as zero."""
        if not isinstance(self.search_volume, (int, float)) or isinstance(self.search_volume, bool):
            return 0
        return max(0, int(self.search_volume))

    @property
    def rank(self) -> Optional[int]:
        """SERP position, or None when unranked or malformed (position <= 0)."""
        if self.position is None or isinstance(self.position, bool):
            return None
        if not isinstance(self.position, (int, float)) or self.position < 1:
            return None
        return int(self.position)

    @property
    def difficulty(self) -> Optional[int]:
        """Keyword difficulty clamped to 0-100, None when the provider had none."""
        if self.keyword_difficulty is None or isinstance(self.keyword_difficulty, bool):
            return None
        if not isinstance(self.keyword_difficulty, (int, float)):
            return None
        return int(min(100, max(0, self.keyword_difficulty)))

    @property
    def main_intent(self) -> Optional[str]:
        if self.search_intent is None:
            return None
        return self.search_intent.main_intent

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RankedKeyword":
        url = _pick(data, "url")
        category = _pick(data, "category")
        return cls(
            keyword=str(_pick(data, "keyword", default="")).strip(),
            search_volume=_to_int(_pick(data, "search_volume", "searchVolume", default=0)),
            position=_to_optional_int(_pick(data, "position")),
            url=str(url).strip() if url else None,
            category=str(category) if category else None,
            keyword_difficulty=_to_optional_int(_pick(data, "keyword_difficulty", "keywordDifficulty")),
            search_intent=SearchIntentInfo.from_dict(_pick(data, "search_intent", "searchIntent")),
            trend=_to_optional_float(_pick(data, "trend")),
            is_discarded=_to_bool(_pick(data, "is_discarded", "isDiscarded", default=False)),
        )


@dataclass(frozen=True)
class BrandContext:
    """Caller-described business profile used for relevance and recommendations."""
    brand_name: str = ""
    industry: str = ""
    vertical: str = ""
    product_categories: List[str] = field(default_factory=list)
    key_strengths: List[str] = field(default_factory=list)
    seo_focus: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["BrandContext"]:
        if not data or not isinstance(data, dict):
            return None
        return cls(
            brand_name=_to_text(_pick(data, "brand_name", "brandName")),
            industry=_to_text(_pick(data, "industry")),
            vertical=_to_text(_pick(data, "vertical")),
            product_categories=_to_str_list(_pick(data, "product_categories", "productCategories")),
            key_strengths=_to_str_list(_pick(data, "key_strengths", "keyStrengths")),
            seo_focus=_to_str_list(_pick(data, "seo_focus", "seoFocus")),
        )


def active(keywords):
    """Soft-delete filter applied at the top of every aggregate."""
    return [kw for kw in keywords if not kw.is_discarded]


__all__ = [
    "SearchIntent",
    "FunnelStage",
    "Effort",
    "Impact",
    "SearchIntentInfo",
    "BrandKeyword",
    "RankedKeyword",
    "BrandContext",
    "active",
]
