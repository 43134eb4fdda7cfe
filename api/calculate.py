"""
API Endpoint for Share Metrics

Thin FastAPI surface over the engine:
1. POST /api/calculate - Share of Search, Share of Voice, Growth Gap
2. POST /api/insights  - full analysis with detectors and action list
3. GET  /health        - liveness

Payload rows use the data provider's camelCase keys (searchVolume,
isOwnBrand, ...); snake_case keys are accepted too. Structural problems are
rejected with 422, value problems are clamped and returned as warnings.
"""

import logging
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import AliasChoices, BaseModel, Field

from searchshare import __version__
from searchshare.models import BrandContext, BrandKeyword, RankedKeyword
from searchshare.quality import InputValidator
from searchshare.scoring import (
    analyze_async,
    calculate_growth_gap,
    calculate_sos,
    calculate_sov,
)
from searchshare.utils.config import get_settings

settings = get_settings()

# Configure logging to stdout
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
    force=True,
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="SearchShare Metrics API",
    description="Share of Search, Share of Voice and SEO opportunity analysis",
    version=__version__,
)


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class CalculateRequest(BaseModel):
    """Keyword rows for the headline metrics."""
    brand_keywords: List[Any] = Field(
        default_factory=list,
        validation_alias=AliasChoices("brand_keywords", "brandKeywords"),
    )
    ranked_keywords: List[Any] = Field(
        default_factory=list,
        validation_alias=AliasChoices("ranked_keywords", "rankedKeywords"),
    )


class InsightsRequest(CalculateRequest):
    """Keyword rows plus optional brand profile for the full analysis."""
    brand_context: Optional[Dict[str, Any]] = Field(
        default=None,
        validation_alias=AliasChoices("brand_context", "brandContext"),
    )
    competitor_coverage: Optional[Dict[str, float]] = Field(
        default=None,
        validation_alias=AliasChoices("competitor_coverage", "competitorCoverage"),
    )


class CalculateResponse(BaseModel):
    """Headline metrics."""
    share_of_search: float
    share_of_voice: float
    growth_gap: float
    interpretation: str
    brand_volume: int
    total_brand_volume: int
    visible_volume: int
    total_market_volume: int
    has_brand_data: bool
    has_ranked_data: bool
    warnings: List[str] = []


# ============================================================================
# HELPERS
# ============================================================================

def _validate(
    brand_rows: List[Any],
    ranked_rows: List[Any],
    require_brand: bool,
    brand_context: Optional[Dict[str, Any]] = None,
) -> List[str]:
    """Run payload validation; raises 422 on structural errors."""
    result = InputValidator(settings).validate_payload(
        brand_rows,
        ranked_rows,
        require_brand=require_brand,
        require_ranked=True,
        brand_context=brand_context,
    )
    if not result.valid:
        raise HTTPException(
            status_code=422,
            detail={"errors": result.errors, "warnings": result.warnings},
        )
    return result.warnings


def _parse(brand_rows: List[Any], ranked_rows: List[Any]):
    brand = [BrandKeyword.from_dict(row) for row in brand_rows]
    ranked = [RankedKeyword.from_dict(row) for row in ranked_rows]
    return brand, ranked


# ============================================================================
# API ENDPOINTS
# ============================================================================

@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": __version__,
    }


@app.post("/api/calculate", response_model=CalculateResponse)
async def calculate(request: CalculateRequest):
    """
    Calculate SOS, SOV and Growth Gap.

    Both keyword lists are required.
    """
    warnings = _validate(request.brand_keywords, request.ranked_keywords, require_brand=True)
    brand, ranked = _parse(request.brand_keywords, request.ranked_keywords)

    sos = calculate_sos(brand)
    sov = calculate_sov(ranked)
    gap = calculate_growth_gap(sos.share_of_search, sov.share_of_voice, settings.growth_gap_threshold)

    logger.info(
        f"Calculated metrics for {len(brand)} brand / {len(ranked)} ranked keywords: "
        f"SOS {sos.share_of_search}%, SOV {sov.share_of_voice}%"
    )

    return CalculateResponse(
        share_of_search=sos.share_of_search,
        share_of_voice=sov.share_of_voice,
        growth_gap=gap.gap,
        interpretation=gap.interpretation.value,
        brand_volume=sos.brand_volume,
        total_brand_volume=sos.total_brand_volume,
        visible_volume=sov.visible_volume,
        total_market_volume=sov.total_market_volume,
        has_brand_data=sos.has_data,
        has_ranked_data=sov.has_data,
        warnings=warnings,
    )


@app.post("/api/insights")
async def insights(request: InsightsRequest):
    """
    Run the full analysis.

    Brand keywords are optional here; without them Share of Search is 0
    with has_data false.
    """
    warnings = _validate(
        request.brand_keywords,
        request.ranked_keywords,
        require_brand=False,
        brand_context=request.brand_context,
    )
    brand, ranked = _parse(request.brand_keywords, request.ranked_keywords)

    result = await analyze_async(
        brand,
        ranked,
        brand_context=BrandContext.from_dict(request.brand_context),
        settings=settings,
        competitor_coverage=request.competitor_coverage,
    )

    payload = result.to_dict()
    payload["warnings"] = warnings
    return payload


# ============================================================================
# MAIN
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.calculate:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
