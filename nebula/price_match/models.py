"""
Data models for Market Price Match.

All structured data uses dataclasses for type hints, __eq__, and __repr__.
Money values use Decimal for precision; the public price is a float rounded
to 2 places.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from .text import normalize


class PriceSource(Enum):
    """
    Provenance of a resolved market price.

    RESOLVED: median of recent modal prices from the dataset
    FALLBACK: fixed default price (no match, no valid price, or no data)
    """
    RESOLVED = "RESOLVED"
    FALLBACK = "FALLBACK"


@dataclass(frozen=True)
class PriceRecord:
    """
    A single row of the reference price dataset.

    Text fields are stored as found (stripped); matching always goes
    through normalize(). Prices are per quintal.
    """
    state: str
    district: str
    market: str
    commodity: str
    arrival_date: str = ""                 # Raw dd/mm/yyyy string
    arrived_on: Optional[date] = None      # Parsed arrival_date, None if unparseable
    modal_price: Optional[Decimal] = None  # Finite and > 0, else None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None

    @property
    def is_usable(self) -> bool:
        """Rows without a recognizable state or commodity are stored but never matched."""
        return bool(normalize(self.state)) and bool(normalize(self.commodity))

    def recency_key(self) -> int:
        """Sort key for recency; 0 sorts after every real date."""
        return self.arrived_on.toordinal() if self.arrived_on else 0


@dataclass(frozen=True)
class LocationFilter:
    """Optional hierarchical filters applied conjunctively (state -> district -> market)."""
    state: Optional[str] = None
    district: Optional[str] = None
    market: Optional[str] = None

    def active(self) -> list[tuple[str, str]]:
        """(field, label) pairs for the filters that were supplied, in hierarchy order."""
        pairs = [("state", self.state), ("district", self.district), ("market", self.market)]
        return [(name, value) for name, value in pairs if value and value.strip()]


@dataclass
class PriceResult:
    """
    Output of price aggregation for a single crop label.

    The first four fields are the public market price shape; the rest
    make the resolved/fallback distinction explicit.
    """
    price: float
    currency: str
    unit: str
    crop_type: str                  # Label as supplied by the caller
    source: PriceSource = PriceSource.FALLBACK
    reason: str = ""                # resolved | no_match | no_valid_price | dataset_unavailable | internal_error
    sample_size: int = 0            # Number of modal prices the median was taken over
    matched_as: str = ""            # Canonical key used for matching

    @property
    def is_fallback(self) -> bool:
        return self.source == PriceSource.FALLBACK

    def to_dict(self) -> dict[str, Any]:
        return {
            "price": self.price,
            "currency": self.currency,
            "unit": self.unit,
            "cropType": self.crop_type,
            "source": self.source.value,
            "reason": self.reason,
            "sampleSize": self.sample_size,
            "matchedAs": self.matched_as,
        }


@dataclass
class QueryResult:
    """
    Result envelope for catalog queries.

    success=True carries data (possibly empty); success=False carries error.
    """
    success: bool
    data: list[str] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: list[str]) -> "QueryResult":
        return cls(success=True, data=data)

    @classmethod
    def failed(cls, error: str) -> "QueryResult":
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, "data": self.data}
        return {"success": False, "error": self.error}
