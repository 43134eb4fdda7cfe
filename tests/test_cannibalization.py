"""
Test Suite for Cannibalization Detection
"""

from searchshare.models import RankedKeyword
from searchshare.scoring.cannibalization import (
    CannibalizationAction,
    detect_cannibalization,
)
from searchshare.scoring.helpers import make_item_id


def _pair(first, second, volume=1000, second_volume=None, keyword="kw"):
    return [
        RankedKeyword(keyword, volume, position=first, url="/a"),
        RankedKeyword(keyword, second_volume or volume, position=second, url="/b"),
    ]


class TestRecommendations:
    """Test recommendation rules."""

    def test_large_spread_dominant_url_redirects(self, settings):
        issues = detect_cannibalization(_pair(4, 9), settings=settings)

        assert len(issues) == 1
        issue = issues[0]
        assert issue.recommendation is CannibalizationAction.REDIRECT
        assert issue.position_spread == 5
        assert issue.impact_score == 18
        assert issue.best_url == "/a"
        assert issue.urls == ["/a", "/b"]
        assert issue.reasoning == (
            '2 URLs rank for "kw" (#4, #9), ~18 clicks split away from the best page. '
            "/a dominates; 301-redirect the weaker pages to it."
        )

    def test_close_pair_with_real_visibility_differentiates(self, settings):
        issues = detect_cannibalization(_pair(3, 5), settings=settings)

        assert issues[0].recommendation is CannibalizationAction.DIFFERENTIATE
        assert issues[0].impact_score == 40

    def test_close_pair_with_weak_second_consolidates(self, settings):
        """Position 4 holds 60 clicks, under a quarter of #1's 280."""
        issues = detect_cannibalization(_pair(1, 4), settings=settings)
        assert issues[0].recommendation is CannibalizationAction.CONSOLIDATE

    def test_three_urls_consolidate(self, settings):
        rows = _pair(2, 3) + [RankedKeyword("kw", 1000, position=4, url="/c")]
        issues = detect_cannibalization(rows, settings=settings)

        assert len(issues[0].competing_urls) == 3
        assert issues[0].recommendation is CannibalizationAction.CONSOLIDATE
        assert issues[0].impact_score == 150

    def test_spread_without_dominance_consolidates(self, settings):
        issues = detect_cannibalization(_pair(8, 15, volume=1000, second_volume=5000), settings=settings)

        issue = issues[0]
        assert issue.recommendation is CannibalizationAction.CONSOLIDATE
        assert issue.search_volume == 5000
        assert issue.impact_score == 35

    def test_unranked_url_has_no_spread(self, settings):
        issues = detect_cannibalization(_pair(5, None), settings=settings)

        assert issues[0].position_spread is None
        assert issues[0].best_url == "/a"
        assert "unranked" in issues[0].reasoning


class TestGrouping:
    """Test keyword grouping and URL handling."""

    def test_keywords_grouped_case_insensitively(self, settings):
        rows = [
            RankedKeyword("shoes", 1000, position=4, url="/a"),
            RankedKeyword("Shoes", 1000, position=9, url="/b"),
        ]
        issues = detect_cannibalization(rows, settings=settings)

        assert len(issues) == 1
        assert issues[0].keyword == "Shoes"
        assert issues[0].id == make_item_id("cannibalization", "shoes")

    def test_rows_without_url_are_ignored(self, settings):
        rows = [
            RankedKeyword("kw", 1000, position=4, url="/a"),
            RankedKeyword("kw", 1000, position=9),
        ]
        assert detect_cannibalization(rows, settings=settings) == []

    def test_same_url_twice_is_not_cannibalization(self, settings):
        rows = [
            RankedKeyword("kw", 1000, position=4, url="/a"),
            RankedKeyword("kw", 1000, position=9, url="/a"),
        ]
        assert detect_cannibalization(rows, settings=settings) == []

    def test_discarded_row_removes_issue(self, settings):
        rows = [
            RankedKeyword("kw", 1000, position=4, url="/a"),
            RankedKeyword("kw", 1000, position=9, url="/b", is_discarded=True),
        ]
        assert detect_cannibalization(rows, settings=settings) == []

    def test_sorted_by_impact(self, settings):
        rows = _pair(4, 9, keyword="small") + _pair(3, 5, keyword="large")
        issues = detect_cannibalization(rows, settings=settings)
        assert [i.keyword for i in issues] == ["large", "small"]

    def test_sample_duplicate_keyword(self, settings, sample_ranked_keywords):
        issues = detect_cannibalization(sample_ranked_keywords, settings=settings)

        assert len(issues) == 1
        issue = issues[0]
        assert issue.keyword == "naturkosmetik"
        assert issue.best_url == "/naturkosmetik"
        assert issue.recommendation is CannibalizationAction.REDIRECT
        assert issue.impact_score == 266
        for entry in issues:
            assert len(set(entry.urls)) >= 2
