"""
Brand Context Matching

Two separate questions asked of a keyword given the caller's business
profile:

1. Is it relevant at all? Off-topic keywords (jobs, news, login pages, ...)
   and keywords unrelated to the brand's terms are filtered out before the
   opportunity detectors run.
2. Is it recommended? Keywords matching SEO focus, product categories,
   strengths, industry or vertical get an is_recommended flag with the
   reason.
"""

import logging
import re
from typing import Dict, List, Optional, Sequence, Tuple

from searchshare.models import BrandContext, RankedKeyword
from .classification import get_category

logger = logging.getLogger(__name__)


IRRELEVANT_PATTERNS = [
    re.compile(r"\b(generation [xyz]|gen[- ]?[xyz]|millennial|boomer)\b", re.I),
    re.compile(r"\b(news|weather|stocks?|crypto|bitcoin)\b", re.I),
    re.compile(r"\b(how to|what is|who is|when is|why is)\b", re.I),
    re.compile(r"\b(free download|torrent|crack|hack)\b", re.I),
    re.compile(r"\b(jobs?|careers?|hiring|salary|interview)\b", re.I),
    re.compile(r"\b(login|sign in|password|account)\b", re.I),
]

INDUSTRY_TERMS: Dict[str, List[str]] = {
    "automotive": ["tire", "tyre", "reifen", "wheel", "car", "vehicle", "auto", "driving", "road",
                   "safety", "winter", "summer", "all-season", "suv", "truck", "performance",
                   "brake", "suspension"],
    "tires": ["tire", "tyre", "reifen", "wheel", "rim", "winter", "summer", "all-season", "snow",
              "performance", "size", "pressure", "rotation", "alignment", "balancing"],
    "beauty": ["skincare", "skin", "face", "cream", "serum", "anti-aging", "moisturizer", "cleanser",
               "makeup", "cosmetic", "beauty", "care", "treatment", "routine"],
    "cosmetics": ["makeup", "lipstick", "foundation", "mascara", "eyeshadow", "blush", "concealer",
                  "powder", "primer", "beauty", "cosmetic"],
    "sports": ["running", "training", "fitness", "workout", "gym", "sport", "athletic", "exercise",
               "performance", "gear", "equipment", "shoe", "apparel"],
    "footwear": ["shoe", "sneaker", "boot", "sandal", "footwear", "running", "walking", "hiking",
                 "casual", "sport"],
    "technology": ["tech", "software", "app", "device", "digital", "smart", "phone", "computer",
                   "laptop", "tablet"],
    "finance": ["bank", "loan", "credit", "investment", "savings", "mortgage", "insurance",
                "financial", "money", "account"],
    "retail": ["shop", "store", "buy", "price", "sale", "discount", "deal", "product", "order",
               "delivery"],
    "fashion": ["clothing", "apparel", "wear", "style", "fashion", "outfit", "dress", "shirt",
                "pants", "jacket"],
}


def is_generic_irrelevant(keyword: str) -> bool:
    """True for clearly off-topic keywords regardless of brand."""
    return any(p.search(keyword or "") for p in IRRELEVANT_PATTERNS)


def get_brand_industry_terms(context: BrandContext) -> List[str]:
    """Expanded vocabulary for the brand's industry, vertical and product categories."""
    terms: List[str] = []
    industry = (context.industry or "").lower()
    vertical = (context.vertical or "").lower()

    for key, values in INDUSTRY_TERMS.items():
        if (industry and (key in industry or industry in key)) or \
                (vertical and (key in vertical or vertical in key)):
            terms.extend(values)

    for cat in context.product_categories:
        cat_lower = cat.lower()
        if not cat_lower:
            continue
        for key, values in INDUSTRY_TERMS.items():
            if key in cat_lower or cat_lower in key:
                terms.extend(values)

    # Keep first-seen order, drop duplicates
    return list(dict.fromkeys(terms))


def _context_terms(context: BrandContext) -> List[str]:
    terms = [
        *context.seo_focus,
        *context.product_categories,
        *context.key_strengths,
        context.industry,
        context.vertical,
    ]
    return [t.lower() for t in terms if t]


def is_relevant_to_brand(
    keyword: str,
    category: Optional[str],
    context: Optional[BrandContext],
) -> bool:
    """
    Check if a keyword belongs to the brand's business.

    Without a context every keyword is relevant.
    """
    if context is None:
        return True
    if is_generic_irrelevant(keyword):
        return False

    kw_lower = (keyword or "").lower()
    cat_lower = (category or "").lower()
    checks = _context_terms(context)
    if not checks:
        return True

    words = kw_lower.split()
    first_word = words[0] if words else ""
    for term in checks:
        if term in kw_lower or term in cat_lower or (first_word and first_word in term):
            return True

    for term in get_brand_industry_terms(context):
        if term in kw_lower or term in cat_lower:
            return True

    return False


def filter_relevant_keywords(
    keywords: Sequence[RankedKeyword],
    context: Optional[BrandContext],
    default_category: str = "Other",
) -> List[RankedKeyword]:
    """Drop keywords unrelated to the brand before the detectors run."""
    if context is None:
        return list(keywords)

    kept = [
        kw for kw in keywords
        if is_relevant_to_brand(kw.keyword, get_category(kw.keyword, kw.category, default_category), context)
    ]
    if len(kept) < len(keywords):
        logger.info(f"Brand relevance filter dropped {len(keywords) - len(kept)} of {len(keywords)} keywords")
    return kept


def matches_brand_context(
    keyword: str,
    category: Optional[str],
    context: Optional[BrandContext],
) -> Tuple[bool, Optional[str]]:
    """
    Check whether a keyword or its category matches the brand profile.

    Checked in order: SEO focus, product categories, key strengths,
    industry, vertical.

    Returns:
        (matches, reason) - reason is None when nothing matched
    """
    if context is None:
        return False, None

    kw_lower = (keyword or "").lower()
    cat_lower = (category or "").lower()

    for focus in context.seo_focus:
        focus_lower = focus.lower()
        if focus_lower and (focus_lower in kw_lower or focus_lower in cat_lower):
            return True, f'Aligns with your SEO focus: "{focus}"'

    for product_category in context.product_categories:
        pc_lower = product_category.lower()
        if pc_lower and (pc_lower in kw_lower or pc_lower in cat_lower):
            return True, f'Matches your product category: "{product_category}"'

    for strength in context.key_strengths:
        strength_lower = strength.lower()
        if strength_lower and strength_lower in kw_lower:
            return True, f'Leverages your strength: "{strength}"'

    if context.industry:
        industry_lower = context.industry.lower()
        if industry_lower in cat_lower or industry_lower in kw_lower:
            return True, f"Core to your {context.industry} industry"

    if context.vertical:
        vertical_lower = context.vertical.lower()
        if vertical_lower in cat_lower or vertical_lower in kw_lower:
            return True, f"Fits your {context.vertical} vertical"

    return False, None
