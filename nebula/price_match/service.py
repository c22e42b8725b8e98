"""
Market Price Service - Query interface used by the web layer and CLI.

Catalog queries return QueryResult envelopes; the price query always
returns a PriceResult. Nothing here raises to the caller: unexpected
errors are logged and turned into failed results.
"""

import logging
from typing import Optional

from .aggregator import fallback_result, resolve_price
from .catalog import list_commodities, list_districts, list_markets, list_states
from .config import Config, load_config
from .models import LocationFilter, PriceResult, QueryResult
from .store import RecordStore

logger = logging.getLogger(__name__)


class MarketPriceService:
    """Binds a RecordStore and Config into the public query operations."""

    def __init__(self, store: RecordStore, config: Optional[Config] = None):
        self.store = store
        self.config = config or load_config()

    def get_states(self) -> QueryResult:
        try:
            return QueryResult.ok(list_states(self.store.load()))
        except Exception:
            logger.exception("get_states failed")
            return QueryResult.failed("Failed to read local states")

    def get_districts_by_state(self, state: str) -> QueryResult:
        try:
            return QueryResult.ok(list_districts(self.store.load(), state))
        except Exception:
            logger.exception(f"get_districts_by_state failed for '{state}'")
            return QueryResult.failed("Failed to read local districts")

    def get_markets(self, state: str, district: Optional[str] = None) -> QueryResult:
        try:
            return QueryResult.ok(list_markets(self.store.load(), state, district))
        except Exception:
            logger.exception(f"get_markets failed for '{state}'/'{district}'")
            return QueryResult.failed("Failed to read local markets")

    def get_commodities(self, filters: Optional[LocationFilter] = None) -> QueryResult:
        try:
            return QueryResult.ok(list_commodities(self.store.load(), filters))
        except Exception:
            logger.exception(f"get_commodities failed for {filters}")
            return QueryResult.failed("Failed to read local commodities")

    def get_market_price(self, crop_type: str) -> PriceResult:
        logger.info(f"Market price requested for: {crop_type}")
        try:
            return resolve_price(crop_type, self.store.snapshot(), self.config)
        except Exception:
            logger.exception(f"get_market_price failed for '{crop_type}'; using fallback price")
            return fallback_result(crop_type or "", self.config, "internal_error")
