import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.api.models import HealthResponse
from backend.api.routers import (
    locations_router, commodities_router, market_price_router, dataset_router
)
from backend.core.config import settings
from backend.core.market_data import get_store
from backend.core.worker import init_worker, stop_scheduler, get_scheduler_status
from nebula.price_match import __version__

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle - startup and shutdown."""
    # Startup
    try:
        init_worker()
    except Exception as e:
        logger.warning(f"Failed to start worker: {e}")

    yield  # Application runs here

    # Shutdown
    stop_scheduler()


app = FastAPI(title="Market Price Match", version=__version__, lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(locations_router)
app.include_router(commodities_router)
app.include_router(market_price_router)
app.include_router(dataset_router)


@app.get("/api/health", response_model=HealthResponse)
def health_check():
    return {
        "status": "ok",
        "version": __version__,
        "dataset": get_store().status(),
        "scheduler": get_scheduler_status(),
    }
