"""
Keyword Classification

Category detection, search-intent heuristics and the intent to funnel-stage
mapping. Rule lists are ordered and evaluated top to bottom, first match
wins: reordering them changes results.
"""

import re
from typing import List, Optional, Pattern, Tuple, Union

from searchshare.models import FunnelStage, RankedKeyword, SearchIntent


# ============================================================================
# CATEGORY RULES
# ============================================================================

def _rule(category: str, pattern: str) -> Tuple[str, Pattern]:
    return category, re.compile(pattern, re.IGNORECASE)


CATEGORY_RULES: List[Tuple[str, Pattern]] = [
    # Automotive / Tires (specific before generic)
    _rule("Winter Tires", r"winter.?reifen|winter.?tire|winter.?tyre|schnee.?reifen|snow.?tire"),
    _rule("Summer Tires", r"sommer.?reifen|summer.?tire|summer.?tyre"),
    _rule("All-Season Tires", r"allwetter|ganzjahres|all.?season|4.?season"),
    _rule("SUV/Truck Tires", r"suv.?reifen|suv.?tire|truck.?tire|geländewagen|offroad"),
    _rule("Performance Tires", r"sport.?reifen|performance|uhp|ultra.?high|racing"),
    _rule("Tires", r"\breifen\b|\btires?\b|\btyres?\b|pneu|pneumatic"),
    _rule("Wheels & Rims", r"felge|rim\b|wheel\b|alufelge|alloy"),
    _rule("Tire Services", r"reifenwechsel|tire.?change|mounting|balancing|rotation"),
    _rule("Automotive", r"\bauto\b|\bcar\b|fahrzeug|vehicle|kfz|pkw"),

    # Beauty & Personal Care
    _rule("Anti-Aging", r"anti.?age|anti.?aging|anti.?falten|wrinkle|retinol|collagen"),
    _rule("Skincare", r"skincare|skin.?care|hautpflege|face.?cream|gesichtscreme|serum|moistur|cleanser"),
    _rule("Makeup", r"makeup|make-up|lipstick|mascara|foundation|eyeshadow|lippenstift|rouge|blush|concealer"),
    _rule("Hair Care", r"hair.?care|haarpflege|shampoo|conditioner|spülung|haarkur"),
    _rule("Body Care", r"body.?care|körperpflege|body.?lotion|duschgel|shower|bodywash"),
    _rule("Natural Cosmetics", r"natural.?cosmetic|natur.?kosmetik|bio.?cosmetic|organic.?beauty"),
    _rule("Fragrances", r"perfume|parfum|fragrance|duft|eau.?de|cologne"),
    _rule("Sun Care", r"sun.?care|sonnenschutz|sunscreen|spf|uv.?schutz|sonnencreme"),

    # Sports & Athletic
    _rule("Running", r"running|laufschuh|jogging|marathon|trail.?run"),
    _rule("Football/Soccer", r"football|fußball|soccer|fussball"),
    _rule("Training", r"training|workout|fitness|gym\b|exercise"),
    _rule("Sneakers", r"sneaker|sportschuh|trainer\b|athletic.?shoe"),
    _rule("Outdoor", r"outdoor|hiking|wandern|camping|trekking"),
    _rule("Cycling", r"cycling|fahrrad|bike|bicycle|radfahren"),

    # Fashion
    _rule("Apparel", r"\bshirt\b|hoodie|jacket|jacke|pants|hose|shorts|dress|kleid"),
    _rule("Footwear", r"\bshoes?\b|schuh|boots|stiefel|sandal"),
    _rule("Accessories", r"accessory|accessories|bag|tasche|wallet|belt|gürtel|hat|mütze"),

    # Technology
    _rule("Smartphones", r"smartphone|iphone|samsung.?galaxy|mobile.?phone|handy"),
    _rule("Laptops", r"laptop|notebook|macbook|computer"),
    _rule("Audio", r"headphone|kopfhörer|speaker|lautsprecher|earbuds|audio"),
    _rule("Smart Home", r"smart.?home|alexa|google.?home|iot|connected"),

    # Sustainability
    _rule("Eco-Friendly", r"eco.?friendly|öko|nachhaltig|sustainab|umweltfreundlich|green"),
    _rule("Vegan", r"\bvegan\b|tierversuchsfrei|cruelty.?free|plant.?based"),

    # Services
    _rule("Dealer Locator", r"händler|dealer|store.?locator|find.?a.?store|standort"),
    _rule("Contact", r"kontakt|contact|customer.?service|kundenservice|support"),
    _rule("Warranty", r"garantie|warranty|gewährleistung"),
]

DEFAULT_CATEGORY = "Uncategorized"


def detect_category(keyword: str, default: str = "Other") -> str:
    """
    Detect category from keyword text using the ordered pattern rules.

    Args:
        keyword: Keyword text
        default: Label returned when no rule matches

    Returns:
        Category name
    """
    kw = (keyword or "").lower()
    for category, pattern in CATEGORY_RULES:
        if pattern.search(kw):
            return category
    return default


def get_category(
    keyword: str,
    provider_category: Optional[str] = None,
    default: str = DEFAULT_CATEGORY,
) -> str:
    """
    Get category for a keyword, preferring the provider-supplied category.

    Total and side-effect free: always returns a string.
    """
    if provider_category and provider_category.strip():
        return provider_category
    return detect_category(keyword, default)


# ============================================================================
# INTENT HEURISTICS
# ============================================================================

INTENT_PATTERNS: List[Tuple[SearchIntent, List[Pattern]]] = [
    (SearchIntent.TRANSACTIONAL, [
        re.compile(r"\b(buy|purchase|order|shop|deal|discount|coupon|price|cheap|affordable|sale|offer)\b", re.I),
        re.compile(r"\b(near me|delivery|shipping|store|outlet)\b", re.I),
        re.compile(r"\b(online|subscribe|download|get|hire)\b", re.I),
    ]),
    (SearchIntent.COMMERCIAL, [
        re.compile(r"\b(best|top|review|compare|comparison|vs|versus|alternative)\b", re.I),
        re.compile(r"\b(recommended|rating|rated|guide|tips)\b", re.I),
        re.compile(r"\b(pros|cons|features|benefits|worth)\b", re.I),
    ]),
    (SearchIntent.NAVIGATIONAL, [
        re.compile(r"\b(login|signin|sign in|account|portal|dashboard)\b", re.I),
        re.compile(r"\b(contact|support|help|customer service)\b", re.I),
        re.compile(r"\b(official|website|site|app)\b", re.I),
    ]),
    (SearchIntent.INFORMATIONAL, [
        re.compile(r"\b(how|what|why|when|where|who|which|can|does|is|are)\b", re.I),
        re.compile(r"\b(tutorial|guide|learn|example|definition|meaning)\b", re.I),
        re.compile(r"\b(tips|ideas|ways|steps|process)\b", re.I),
    ]),
]

PRODUCT_PATTERN = re.compile(r"\b(product|service|solution|software|tool|system|platform)\b", re.I)


def classify_keyword_intent(keyword: str) -> SearchIntent:
    """Guess search intent from keyword modifiers when the provider has none."""
    kw = (keyword or "").lower()
    for intent, patterns in INTENT_PATTERNS:
        if any(p.search(kw) for p in patterns):
            return intent
    if PRODUCT_PATTERN.search(kw):
        return SearchIntent.COMMERCIAL
    return SearchIntent.INFORMATIONAL


# ============================================================================
# FUNNEL MAPPING
# ============================================================================

INTENT_TO_FUNNEL = {
    SearchIntent.INFORMATIONAL.value: FunnelStage.AWARENESS,
    SearchIntent.NAVIGATIONAL.value: FunnelStage.AWARENESS,
    SearchIntent.COMMERCIAL.value: FunnelStage.CONSIDERATION,
    SearchIntent.TRANSACTIONAL.value: FunnelStage.DECISION,
}


def funnel_stage(intent: Union[SearchIntent, str, None]) -> FunnelStage:
    """
    Map a search intent to its funnel stage.

    Unknown or missing intents map to awareness so no keyword drops out of
    the funnel aggregates.
    """
    if intent is None:
        return FunnelStage.AWARENESS
    value = intent.value if isinstance(intent, SearchIntent) else str(intent)
    return INTENT_TO_FUNNEL.get(value.strip().lower(), FunnelStage.AWARENESS)


def keyword_funnel_stage(kw: RankedKeyword) -> FunnelStage:
    """Funnel stage of a ranked keyword from its provider intent."""
    return funnel_stage(kw.main_intent)


def keyword_intent(kw: RankedKeyword) -> str:
    """Provider intent when present, heuristic intent otherwise."""
    if kw.main_intent:
        return kw.main_intent
    return classify_keyword_intent(kw.keyword).value
