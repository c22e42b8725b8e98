"""
Market locations API router (state -> district -> market).
"""
from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from typing import Optional

from backend.api.models import ListResponse
from backend.core.market_data import get_service
from nebula.price_match import QueryResult

router = APIRouter(prefix="/api/locations", tags=["Locations"])


def missing_state_response() -> JSONResponse:
    """400 envelope for list queries called without a state."""
    return JSONResponse(status_code=400, content=QueryResult.failed("Missing state").to_dict())


def result_response(result: QueryResult):
    """Return a successful envelope as-is, a failed one with status 500."""
    if result.success:
        return result.to_dict()
    return JSONResponse(status_code=500, content=result.to_dict())


@router.get("/states", response_model=ListResponse, response_model_exclude_none=True)
def get_states():
    """Distinct states in the dataset."""
    return result_response(get_service().get_states())


@router.get("/districts", response_model=ListResponse, response_model_exclude_none=True)
def get_districts(state: Optional[str] = Query(None, description="State label")):
    """Distinct districts of a state."""
    if not state or not state.strip():
        return missing_state_response()
    return result_response(get_service().get_districts_by_state(state))


@router.get("/markets", response_model=ListResponse, response_model_exclude_none=True)
def get_markets(
    state: Optional[str] = Query(None, description="State label"),
    district: Optional[str] = Query(None, description="Optional district label")
):
    """Distinct markets of a state, optionally narrowed to a district."""
    if not state or not state.strip():
        return missing_state_response()
    return result_response(get_service().get_markets(state, district))
