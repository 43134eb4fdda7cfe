"""
Test Suite for Keyword Classification

Tests category detection, intent heuristics and funnel mapping.
"""

import pytest

from searchshare.models import FunnelStage, RankedKeyword, SearchIntent, SearchIntentInfo
from searchshare.scoring.classification import (
    CATEGORY_RULES,
    classify_keyword_intent,
    detect_category,
    funnel_stage,
    get_category,
    keyword_funnel_stage,
    keyword_intent,
)


class TestCategoryDetection:
    """Test ordered category rules."""

    def test_rule_table_size(self):
        assert len(CATEGORY_RULES) == 35

    @pytest.mark.parametrize("keyword,expected", [
        ("winterreifen", "Winter Tires"),
        ("reifen kaufen", "Tires"),
        ("running shoes", "Running"),
        ("naturkosmetik", "Natural Cosmetics"),
        ("bio shampoo", "Hair Care"),
        ("vegan lippenstift", "Makeup"),
        ("retinol serum", "Anti-Aging"),
    ])
    def test_detects_category(self, keyword, expected):
        assert detect_category(keyword) == expected

    def test_specific_rule_wins_over_generic(self):
        """Winter tires must not fall into the generic tire bucket."""
        assert detect_category("winter tires 205/55") == "Winter Tires"
        assert detect_category("tires 205/55") == "Tires"

    def test_case_insensitive(self):
        assert detect_category("WINTERREIFEN") == "Winter Tires"

    def test_no_match_returns_default(self):
        assert detect_category("blue widgets") == "Other"
        assert detect_category("blue widgets", default="Misc") == "Misc"
        assert detect_category("") == "Other"


class TestGetCategory:
    """Test provider category precedence."""

    def test_provider_category_wins(self):
        assert get_category("winterreifen", "Custom") == "Custom"

    def test_blank_provider_category_falls_through(self):
        assert get_category("winterreifen", "   ") == "Winter Tires"
        assert get_category("winterreifen", None) == "Winter Tires"

    def test_default_is_uncategorized(self):
        assert get_category("blue widgets") == "Uncategorized"
        assert get_category("blue widgets", None, "Other") == "Other"


class TestIntentHeuristics:
    """Test keyword intent classification."""

    @pytest.mark.parametrize("keyword,expected", [
        ("buy running shoes", SearchIntent.TRANSACTIONAL),
        ("shoes near me", SearchIntent.TRANSACTIONAL),
        ("best running shoes", SearchIntent.COMMERCIAL),
        ("nike vs adidas", SearchIntent.COMMERCIAL),
        ("nike login", SearchIntent.NAVIGATIONAL),
        ("how do tires work", SearchIntent.INFORMATIONAL),
        ("crm software", SearchIntent.COMMERCIAL),
        ("blue widgets", SearchIntent.INFORMATIONAL),
    ])
    def test_classifies_intent(self, keyword, expected):
        assert classify_keyword_intent(keyword) is expected

    def test_transactional_checked_before_commercial(self):
        assert classify_keyword_intent("best price running shoes") is SearchIntent.TRANSACTIONAL

    def test_provider_intent_preferred(self):
        kw = RankedKeyword("buy shoes", 100, search_intent=SearchIntentInfo("informational"))
        assert keyword_intent(kw) == "informational"

    def test_heuristic_used_without_provider_intent(self):
        assert keyword_intent(RankedKeyword("buy shoes", 100)) == "transactional"


class TestFunnelMapping:
    """Test intent to funnel-stage mapping."""

    @pytest.mark.parametrize("intent,expected", [
        ("informational", FunnelStage.AWARENESS),
        ("navigational", FunnelStage.AWARENESS),
        ("commercial", FunnelStage.CONSIDERATION),
        ("transactional", FunnelStage.DECISION),
        (SearchIntent.TRANSACTIONAL, FunnelStage.DECISION),
        (" Commercial ", FunnelStage.CONSIDERATION),
    ])
    def test_maps_intent(self, intent, expected):
        assert funnel_stage(intent) is expected

    def test_unknown_or_missing_is_awareness(self):
        assert funnel_stage(None) is FunnelStage.AWARENESS
        assert funnel_stage("local") is FunnelStage.AWARENESS

    def test_keyword_without_intent_is_awareness(self):
        """Funnel stage uses provider intent only."""
        assert keyword_funnel_stage(RankedKeyword("buy shoes", 100)) is FunnelStage.AWARENESS
        kw = RankedKeyword("shoes", 100, search_intent=SearchIntentInfo("transactional"))
        assert keyword_funnel_stage(kw) is FunnelStage.DECISION
