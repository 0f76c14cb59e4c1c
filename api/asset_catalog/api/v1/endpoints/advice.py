"""Insurance chat and price estimation endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from asset_catalog.api.deps import get_advisor, get_household_id
from asset_catalog.schemas.chat import (
    ChatRequest,
    ChatResponse,
    PriceEstimateRequest,
    PriceEstimateResponse,
)
from asset_catalog.services.insurance_advisor import InsuranceAdvisor
from asset_catalog.services.price_estimation import PriceEstimationError, estimate_asset_price

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    household_id: str = Depends(get_household_id),
    advisor: InsuranceAdvisor = Depends(get_advisor),
):
    """Answer an insurance question about the supplied assets."""
    try:
        response = await advisor.advise(request.message, request.assets, request.language)
        return ChatResponse(response=response)
    except Exception as e:
        logger.error(f"Error in chat handler: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate advice: {str(e)}",
        )


@router.post("/estimate-price", response_model=PriceEstimateResponse)
def estimate_price(
    request: PriceEstimateRequest,
    household_id: str = Depends(get_household_id),
):
    """Estimate current market value from category and purchase date."""
    try:
        return estimate_asset_price(
            make=request.make,
            model=request.model,
            category=request.category,
            date_purchased=request.date_purchased,
        )
    except PriceEstimationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
