"""
Commodities API router.
"""
from fastapi import APIRouter, Query
from typing import Optional

from backend.api.models import ListResponse
from backend.api.routers.locations import missing_state_response, result_response
from backend.core.market_data import get_service
from nebula.price_match import LocationFilter

router = APIRouter(prefix="/api/commodities", tags=["Commodities"])


@router.get("", response_model=ListResponse, response_model_exclude_none=True)
def get_commodities(
    state: Optional[str] = Query(None),
    district: Optional[str] = Query(None),
    market: Optional[str] = Query(None)
):
    """Distinct commodities traded under the given location filters."""
    if not state or not state.strip():
        return missing_state_response()
    filters = LocationFilter(state=state, district=district, market=market)
    return result_response(get_service().get_commodities(filters))
