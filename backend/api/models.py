"""
Pydantic response models for the API.
"""
from pydantic import BaseModel
from typing import Any, Dict, List, Optional


# ============== Catalog ==============

class ListResponse(BaseModel):
    """Result envelope for the location and commodity lists."""
    success: bool
    data: Optional[List[str]] = None
    error: Optional[str] = None


# ============== Market Price ==============

class MarketPriceResponse(BaseModel):
    price: float
    currency: str
    unit: str
    cropType: str
    source: str  # RESOLVED or FALLBACK
    reason: str
    sampleSize: int = 0
    matchedAs: str = ""


# ============== Dataset ==============

class DatasetStatusResponse(BaseModel):
    source: str
    available: bool
    error: Optional[str] = None
    record_count: int
    usable_record_count: int
    loaded_at: str


class ReloadResponse(BaseModel):
    success: bool
    reloaded: bool
    dataset: DatasetStatusResponse


class HealthResponse(BaseModel):
    status: str
    version: str
    dataset: DatasetStatusResponse
    scheduler: Dict[str, Any]
