"""
Dataset status and reload API router.
"""
import logging

from fastapi import APIRouter, Depends

from backend.api.models import DatasetStatusResponse, ReloadResponse
from backend.api.security import require_api_key
from backend.core.market_data import get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dataset", tags=["Dataset"])


@router.get("/status", response_model=DatasetStatusResponse)
def get_dataset_status():
    """Current snapshot summary."""
    return get_store().status()


@router.post("/reload", response_model=ReloadResponse, dependencies=[Depends(require_api_key)])
def reload_dataset():
    """Rebuild the snapshot from the dataset file and swap it in."""
    store = get_store()
    previous = store.snapshot()
    current = store.reload()
    reloaded = current is not previous
    logger.info(f"Dataset reload requested: reloaded={reloaded}, records={current.record_count}")
    return {"success": current.ok, "reloaded": reloaded, "dataset": store.status()}
