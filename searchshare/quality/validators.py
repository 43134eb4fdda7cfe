"""
Input Validators

Validates keyword payloads before they reach the engine.

Structural problems (not a list, no rows, too many rows, empty keyword
text) are errors. Value problems the engine can absorb (negative volume,
position out of range, difficulty out of range, unknown intent) are
warnings: the engine clamps them.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from searchshare.models import BrandKeyword, SearchIntent
from searchshare.utils.config import EngineSettings, get_settings

logger = logging.getLogger(__name__)


KNOWN_INTENTS = {intent.value for intent in SearchIntent}

CONTEXT_TEXT_FIELDS = [
    ("brandName", ("brand_name", "brandName")),
    ("industry", ("industry",)),
    ("vertical", ("vertical",)),
]
CONTEXT_LIST_FIELDS = [
    ("productCategories", ("product_categories", "productCategories")),
    ("keyStrengths", ("key_strengths", "keyStrengths")),
    ("seoFocus", ("seo_focus", "seoFocus")),
]


@dataclass
class ValidationResult:
    """Result of validation."""
    valid: bool
    errors: List[str]
    warnings: List[str]
    details: Dict

    @classmethod
    def success(cls, warnings: Optional[List[str]] = None, details: Optional[Dict] = None):
        """Create successful validation result."""
        return cls(
            valid=True,
            errors=[],
            warnings=warnings or [],
            details=details or {}
        )

    @classmethod
    def failure(cls, errors: List[str], warnings: Optional[List[str]] = None, details: Optional[Dict] = None):
        """Create failed validation result."""
        return cls(
            valid=False,
            errors=errors,
            warnings=warnings or [],
            details=details or {}
        )


def _number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _first(data: Dict, keys) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


class InputValidator:
    """
    Validates brand and ranked keyword payloads.

    Accepts the provider's camelCase keys and snake_case keys alike.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self.settings = settings or get_settings()

    def validate_brand_keywords(self, rows: Any, required: bool = True) -> ValidationResult:
        """
        Validate brand keyword rows.

        Args:
            rows: List of brand keyword dicts
            required: Whether an empty list is an error

        Returns:
            ValidationResult with errors/warnings
        """
        rows = [] if rows is None else rows
        errors, warnings = self._validate_rows(
            rows, "brand", self.settings.max_brand_keywords, required
        )
        if errors:
            return ValidationResult.failure(errors, warnings, {"row_count": self._count(rows)})

        own = 0
        for i, row in enumerate(rows):
            volume = _number(row.get("search_volume", row.get("searchVolume")))
            if volume is None:
                warnings.append(f"Brand keyword {i}: missing search volume, treated as 0")
            elif volume < 0:
                warnings.append(f"Brand keyword {i}: negative search volume clamped to 0")
            if BrandKeyword.from_dict(row).is_own_brand:
                own += 1

        if rows and own == 0:
            warnings.append("No own-brand keywords: Share of Search will be 0")

        return ValidationResult.success(warnings, {"row_count": len(rows), "own_brand_count": own})

    def validate_ranked_keywords(self, rows: Any, required: bool = True) -> ValidationResult:
        """
        Validate ranked keyword rows.

        Args:
            rows: List of ranked keyword dicts
            required: Whether an empty list is an error

        Returns:
            ValidationResult with errors/warnings
        """
        rows = [] if rows is None else rows
        errors, warnings = self._validate_rows(
            rows, "ranked", self.settings.max_ranked_keywords, required
        )
        if errors:
            return ValidationResult.failure(errors, warnings, {"row_count": self._count(rows)})

        unranked = 0
        for i, row in enumerate(rows):
            volume = _number(row.get("search_volume", row.get("searchVolume")))
            if volume is None:
                warnings.append(f"Ranked keyword {i}: missing search volume, treated as 0")
            elif volume < 0:
                warnings.append(f"Ranked keyword {i}: negative search volume clamped to 0")

            position = _number(row.get("position"))
            if position is None:
                unranked += 1
            elif position < 1:
                unranked += 1
                warnings.append(f"Ranked keyword {i}: position {position:g} out of range, treated as unranked")

            kd = _number(row.get("keyword_difficulty", row.get("keywordDifficulty")))
            if kd is not None and (kd < 0 or kd > 100):
                warnings.append(f"Ranked keyword {i}: keyword difficulty {kd:g} clamped to 0-100")

            intent = row.get("search_intent", row.get("searchIntent"))
            if isinstance(intent, dict):
                main = intent.get("main_intent", intent.get("mainIntent"))
                if main and str(main).lower() not in KNOWN_INTENTS:
                    warnings.append(f"Ranked keyword {i}: unknown intent '{main}', mapped to awareness")

        return ValidationResult.success(warnings, {"row_count": len(rows), "unranked_count": unranked})

    def validate_brand_context(self, context: Any) -> ValidationResult:
        """
        Validate an optional brand profile.

        Malformed fields are coerced (a single string becomes a one-item
        list, non-string items are dropped) and reported as warnings.
        """
        if context is None:
            return ValidationResult.success()
        if not isinstance(context, dict):
            return ValidationResult.failure(["Brand context must be an object"])

        warnings: List[str] = []
        for label, keys in CONTEXT_TEXT_FIELDS:
            value = _first(context, keys)
            if value is not None and not isinstance(value, str):
                warnings.append(f"Brand context {label}: expected text, got {type(value).__name__}")

        for label, keys in CONTEXT_LIST_FIELDS:
            value = _first(context, keys)
            if value is None:
                continue
            if isinstance(value, str):
                warnings.append(f"Brand context {label}: single value treated as a one-item list")
            elif not isinstance(value, list):
                warnings.append(f"Brand context {label}: expected a list, ignored")
            elif any(not isinstance(item, str) for item in value):
                warnings.append(f"Brand context {label}: non-text items ignored")

        return ValidationResult.success(warnings)

    def validate_payload(
        self,
        brand_rows: Any,
        ranked_rows: Any,
        require_brand: bool = True,
        require_ranked: bool = True,
        brand_context: Any = None,
    ) -> ValidationResult:
        """Validate a full request payload."""
        brand = self.validate_brand_keywords(brand_rows, required=require_brand)
        ranked = self.validate_ranked_keywords(ranked_rows, required=require_ranked)
        context = self.validate_brand_context(brand_context)

        errors = brand.errors + ranked.errors + context.errors
        warnings = brand.warnings + ranked.warnings + context.warnings
        details = {"brand": brand.details, "ranked": ranked.details}

        if errors:
            logger.warning(f"Rejected payload: {len(errors)} errors ({errors[0]})")
            return ValidationResult.failure(errors, warnings, details)
        if warnings:
            logger.info(f"Payload accepted with {len(warnings)} warnings")
        return ValidationResult.success(warnings, details)

    @staticmethod
    def _count(rows: Any) -> int:
        return len(rows) if isinstance(rows, list) else 0

    @staticmethod
    def _validate_rows(rows: Any, label: str, max_rows: int, required: bool):
        errors: List[str] = []
        warnings: List[str] = []

        if not isinstance(rows, list):
            errors.append(f"{label.capitalize()} keywords must be a list")
            return errors, warnings
        if required and not rows:
            errors.append(f"At least one {label} keyword is required")
        if len(rows) > max_rows:
            errors.append(f"Maximum {max_rows} {label} keywords allowed (got {len(rows)})")

        for i, row in enumerate(rows):
            if not isinstance(row, dict):
                errors.append(f"Invalid {label} keyword at index {i}")
                continue
            keyword = row.get("keyword")
            if not isinstance(keyword, str) or not keyword.strip():
                errors.append(f"Invalid keyword text at {label} index {i}")

        return errors, warnings
