"""
API Routers package.

Each module contains a FastAPI router for a specific domain.
"""

from .locations import router as locations_router
from .commodities import router as commodities_router
from .market_price import router as market_price_router
from .dataset import router as dataset_router

__all__ = [
    "locations_router",
    "commodities_router",
    "market_price_router",
    "dataset_router",
]
