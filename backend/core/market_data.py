"""
Process-wide market price service.

The service (and the RecordStore behind it) is built on first use from
Settings, so the dataset is read once per process and shared by every
router and the refresh worker.
"""
import logging
import threading
from pathlib import Path
from typing import Optional

from nebula.price_match import MarketPriceService, RecordStore, load_config

from .config import settings

logger = logging.getLogger(__name__)

_service: Optional[MarketPriceService] = None
_service_lock = threading.Lock()


def build_service(dataset_path: Optional[str] = None, config_path: Optional[str] = None) -> MarketPriceService:
    """Create a service for a dataset path and optional engine config path."""
    dataset_path = dataset_path or settings.DATASET_PATH
    config_path = config_path or settings.MARKET_CONFIG_PATH
    config = load_config(Path(config_path) if config_path else None)
    logger.info(f"Market price service using dataset {dataset_path}")
    return MarketPriceService(RecordStore(dataset_path), config)


def get_service() -> MarketPriceService:
    """Get the shared service, creating it on first call."""
    global _service

    if _service is None:
        with _service_lock:
            if _service is None:
                _service = build_service()
    return _service


def get_store() -> RecordStore:
    return get_service().store
