"""
Test Suite for Brand Context Matching

Tests relevance filtering and recommendation reasons.
"""

from searchshare.models import BrandContext, RankedKeyword
from searchshare.scoring.brand_context import (
    filter_relevant_keywords,
    get_brand_industry_terms,
    is_generic_irrelevant,
    is_relevant_to_brand,
    matches_brand_context,
)


class TestRecommendationReasons:
    """Test matches_brand_context order and wording."""

    def test_seo_focus_first(self, brand_context):
        matched, reason = matches_brand_context("naturkosmetik marken", "Natural Cosmetics", brand_context)
        assert matched is True
        assert reason == 'Aligns with your SEO focus: "naturkosmetik"'

    def test_product_category(self, brand_context):
        matched, reason = matches_brand_context("bio gesichtscreme", "Skincare", brand_context)
        assert matched is True
        assert reason == 'Matches your product category: "Skincare"'

    def test_key_strength(self, brand_context):
        matched, reason = matches_brand_context("vegan lip balm", "Other", brand_context)
        assert matched is True
        assert reason == 'Leverages your strength: "vegan"'

    def test_industry(self, brand_context):
        _, reason = matches_brand_context("beauty tips", "Other", brand_context)
        assert reason == "Core to your Beauty industry"

    def test_vertical(self, brand_context):
        _, reason = matches_brand_context("organic soap", "Natural Cosmetics", brand_context)
        assert reason == "Fits your Natural Cosmetics vertical"

    def test_no_match(self, brand_context):
        assert matches_brand_context("winterreifen", "Winter Tires", brand_context) == (False, None)

    def test_no_context(self):
        assert matches_brand_context("naturkosmetik", "Natural Cosmetics", None) == (False, None)

    def test_single_string_category_is_one_item(self):
        ctx = BrandContext.from_dict({"productCategories": "tires"})

        assert matches_brand_context("lipstick red", "Makeup", ctx) == (False, None)
        assert matches_brand_context("winter tires", None, ctx) == (
            True, 'Matches your product category: "tires"'
        )

    def test_numeric_industry_does_not_raise(self):
        ctx = BrandContext.from_dict({"industry": 5})

        assert matches_brand_context("running shoes", None, ctx) == (False, None)
        assert is_relevant_to_brand("running shoes", None, ctx) is False


class TestRelevance:
    """Test brand relevance filtering."""

    def test_generic_irrelevant_patterns(self):
        assert is_generic_irrelevant("lavera jobs")
        assert is_generic_irrelevant("weather berlin")
        assert is_generic_irrelevant("what is naturkosmetik")
        assert not is_generic_irrelevant("bio shampoo")

    def test_everything_relevant_without_context(self):
        assert is_relevant_to_brand("mortgage rates", "Other", None) is True

    def test_off_topic_keyword_is_irrelevant(self, brand_context):
        assert is_relevant_to_brand("mortgage rates", "Other", brand_context) is False

    def test_generic_irrelevant_beats_brand_terms(self, brand_context):
        assert is_relevant_to_brand("lavera jobs", "Other", brand_context) is False

    def test_industry_vocabulary_makes_relevant(self, brand_context):
        assert is_relevant_to_brand("bio shampoo", "Hair Care", brand_context) is True

    def test_filter_drops_irrelevant(self, sample_ranked_keywords, brand_context):
        kept = filter_relevant_keywords(sample_ranked_keywords, brand_context)
        keywords = {kw.keyword for kw in kept}

        assert "lavera jobs" not in keywords
        assert "naturkosmetik" in keywords
        assert len(kept) < len(sample_ranked_keywords)

    def test_filter_without_context_keeps_all(self, sample_ranked_keywords):
        assert filter_relevant_keywords(sample_ranked_keywords, None) == sample_ranked_keywords

    def test_filter_does_not_mutate_input(self, brand_context):
        rows = [RankedKeyword("lavera jobs", 300, position=9)]
        filter_relevant_keywords(rows, brand_context)
        assert len(rows) == 1


class TestIndustryTerms:
    """Test industry vocabulary expansion."""

    def test_automotive_terms(self):
        terms = get_brand_industry_terms(BrandContext(industry="Automotive"))
        assert "reifen" in terms
        assert len(terms) == len(set(terms))

    def test_vertical_and_product_categories_expand(self, brand_context):
        terms = get_brand_industry_terms(brand_context)
        assert "serum" in terms        # beauty industry
        assert "lipstick" in terms     # cosmetics vertical

    def test_empty_context_has_no_terms(self):
        assert get_brand_industry_terms(BrandContext()) == []
