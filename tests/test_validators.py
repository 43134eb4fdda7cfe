"""
Test Suite for Input Validation
"""

from searchshare.models import RankedKeyword
from searchshare.quality import InputValidator, ValidationResult
from searchshare.utils.config import EngineSettings


def _brand(keyword="nike", volume=1000, own=True):
    return {"keyword": keyword, "searchVolume": volume, "isOwnBrand": own}


def _ranked(keyword="kw", volume=1000, **extra):
    return {"keyword": keyword, "searchVolume": volume, **extra}


class TestValidationResult:
    """Test result constructors."""

    def test_success(self):
        result = ValidationResult.success()
        assert result.valid is True
        assert result.errors == []
        assert result.warnings == []

    def test_failure(self):
        result = ValidationResult.failure(["bad"], ["meh"])
        assert result.valid is False
        assert result.errors == ["bad"]
        assert result.warnings == ["meh"]


class TestBrandKeywordValidation:
    """Test brand keyword validation."""

    def test_valid_rows(self, settings):
        result = InputValidator(settings).validate_brand_keywords([_brand(), _brand("adidas", 1500, False)])

        assert result.valid is True
        assert result.warnings == []
        assert result.details == {"row_count": 2, "own_brand_count": 1}

    def test_not_a_list(self, settings):
        result = InputValidator(settings).validate_brand_keywords({"keyword": "nike"})
        assert result.valid is False
        assert result.errors == ["Brand keywords must be a list"]

    def test_empty_required(self, settings):
        result = InputValidator(settings).validate_brand_keywords([])
        assert result.errors == ["At least one brand keyword is required"]

    def test_empty_optional(self, settings):
        assert InputValidator(settings).validate_brand_keywords(None, required=False).valid is True

    def test_too_many_rows(self):
        settings = EngineSettings(_env_file=None, max_brand_keywords=2)
        result = InputValidator(settings).validate_brand_keywords([_brand(), _brand(), _brand()])

        assert result.valid is False
        assert "Maximum 2 brand keywords allowed (got 3)" in result.errors

    def test_invalid_rows(self, settings):
        result = InputValidator(settings).validate_brand_keywords(["nike", _brand(keyword="  ")])

        assert result.errors == [
            "Invalid brand keyword at index 0",
            "Invalid keyword text at brand index 1",
        ]

    def test_value_warnings(self, settings):
        result = InputValidator(settings).validate_brand_keywords([
            _brand(volume=-5, own=False),
            {"keyword": "adidas", "isOwnBrand": False},
        ])

        assert result.valid is True
        assert result.warnings == [
            "Brand keyword 0: negative search volume clamped to 0",
            "Brand keyword 1: missing search volume, treated as 0",
            "No own-brand keywords: Share of Search will be 0",
        ]

    def test_string_false_is_not_own_brand(self, settings):
        result = InputValidator(settings).validate_brand_keywords([_brand(own="false")])

        assert result.details["own_brand_count"] == 0
        assert result.warnings == ["No own-brand keywords: Share of Search will be 0"]


class TestRankedKeywordValidation:
    """Test ranked keyword validation."""

    def test_valid_rows(self, settings):
        result = InputValidator(settings).validate_ranked_keywords([
            _ranked(position=3),
            _ranked("other"),
        ])

        assert result.valid is True
        assert result.details == {"row_count": 2, "unranked_count": 1}

    def test_position_out_of_range(self, settings):
        result = InputValidator(settings).validate_ranked_keywords([
            _ranked(position=0),
            _ranked(position=-4),
        ])

        assert result.valid is True
        assert result.warnings == [
            "Ranked keyword 0: position 0 out of range, treated as unranked",
            "Ranked keyword 1: position -4 out of range, treated as unranked",
        ]
        assert result.details["unranked_count"] == 2

    def test_deep_position_stays_ranked(self, settings):
        result = InputValidator(settings).validate_ranked_keywords([_ranked(position=150)])

        assert result.warnings == []
        assert result.details["unranked_count"] == 0
        assert RankedKeyword.from_dict(_ranked(position=150)).rank == 150

    def test_difficulty_and_intent_warnings(self, settings):
        result = InputValidator(settings).validate_ranked_keywords([
            _ranked(keywordDifficulty=120, searchIntent={"mainIntent": "local"}),
        ])

        assert result.warnings == [
            "Ranked keyword 0: keyword difficulty 120 clamped to 0-100",
            "Ranked keyword 0: unknown intent 'local', mapped to awareness",
        ]

    def test_known_intent_no_warning(self, settings):
        result = InputValidator(settings).validate_ranked_keywords([
            _ranked(searchIntent={"mainIntent": "Transactional"}),
        ])
        assert result.warnings == []


class TestBrandContextValidation:
    """Test brand profile validation."""

    def test_absent_context(self, settings):
        assert InputValidator(settings).validate_brand_context(None).valid is True

    def test_well_formed_context(self, settings):
        result = InputValidator(settings).validate_brand_context({
            "brandName": "lavera",
            "industry": "Beauty",
            "productCategories": ["Skincare"],
        })

        assert result.valid is True
        assert result.warnings == []

    def test_not_an_object(self, settings):
        result = InputValidator(settings).validate_brand_context(["Beauty"])
        assert result.errors == ["Brand context must be an object"]

    def test_malformed_fields_are_warnings(self, settings):
        result = InputValidator(settings).validate_brand_context({
            "industry": 5,
            "productCategories": "tires",
            "seoFocus": ["winter", 3],
            "key_strengths": {"a": 1},
        })

        assert result.valid is True
        assert result.warnings == [
            "Brand context industry: expected text, got int",
            "Brand context productCategories: single value treated as a one-item list",
            "Brand context keyStrengths: expected a list, ignored",
            "Brand context seoFocus: non-text items ignored",
        ]


class TestPayloadValidation:
    """Test combined payload validation."""

    def test_collects_errors_from_both_lists(self, settings):
        result = InputValidator(settings).validate_payload([], None)

        assert result.valid is False
        assert result.errors == [
            "At least one brand keyword is required",
            "At least one ranked keyword is required",
        ]

    def test_brand_optional(self, settings):
        result = InputValidator(settings).validate_payload([], [_ranked(volume=-1)], require_brand=False)

        assert result.valid is True
        assert result.warnings == ["Ranked keyword 0: negative search volume clamped to 0"]
        assert result.details["ranked"]["row_count"] == 1
