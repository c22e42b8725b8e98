"""
Market price API router.
"""
from fastapi import APIRouter, Query

from backend.api.models import MarketPriceResponse
from backend.core.market_data import get_service

router = APIRouter(prefix="/api/market-price", tags=["Market Price"])


@router.get("", response_model=MarketPriceResponse)
def get_market_price(crop: str = Query("", description="Crop label, e.g. Paddy")):
    """
    Price per kg for a crop: median of the most recent modal prices,
    or the fallback price when no usable market data exists.
    """
    return get_service().get_market_price(crop).to_dict()
