# Market Price Match: reference data resolution and price aggregation
# Siloed module - no imports from the web layer

from .models import PriceRecord, PriceResult, PriceSource, QueryResult, LocationFilter
from .text import normalize, loose_match, contains_match
from .config import load_config, resolve_commodity, Config, PriceSettings, SynonymResolver
from .record_loader import load_records, DatasetUnavailableError
from .store import RecordStore, RecordSnapshot
from .catalog import distinct_values, list_states, list_districts, list_markets, list_commodities
from .aggregator import resolve_price, median_price
from .service import MarketPriceService
from .report import format_catalog, format_prices, export_csv

__version__ = "1.0.0"

__all__ = [
    # Models
    "PriceRecord",
    "PriceResult",
    "PriceSource",
    "QueryResult",
    "LocationFilter",
    # Text
    "normalize",
    "loose_match",
    "contains_match",
    # Config
    "Config",
    "PriceSettings",
    "SynonymResolver",
    "load_config",
    "resolve_commodity",
    # Dataset
    "load_records",
    "DatasetUnavailableError",
    "RecordStore",
    "RecordSnapshot",
    # Catalog
    "distinct_values",
    "list_states",
    "list_districts",
    "list_markets",
    "list_commodities",
    # Aggregation
    "resolve_price",
    "median_price",
    "MarketPriceService",
    # Report
    "format_catalog",
    "format_prices",
    "export_csv",
]
