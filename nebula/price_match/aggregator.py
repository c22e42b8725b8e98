"""
Price Aggregator - Representative market price for a crop label.

Logic flow:
1. Normalize the label and map it through the synonym table
2. Keep records whose commodity equals or contains the key (or vice versa)
3. Order by arrival date, newest first; undated rows sort last
4. Take the most recent window (10 by default)
5. Median of the valid modal prices, per quintal -> per kg
6. Nothing usable -> fixed fallback price, never an error

| Dataset? | Matches? | Valid prices? | Result |
|----------|----------|---------------|--------|
| ✗        | -        | -             | FALLBACK (dataset_unavailable) |
| ✓        | ✗        | -             | FALLBACK (no_match) |
| ✓        | ✓        | ✗             | FALLBACK (no_valid_price) |
| ✓        | ✓        | ✓             | RESOLVED |
"""

import logging
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Optional, Sequence

from .config import Config, resolve_commodity
from .models import PriceRecord, PriceResult, PriceSource
from .store import RecordSnapshot
from .text import contains_match

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def median_price(prices: Sequence[Decimal]) -> Optional[Decimal]:
    """Median of prices; the mean of the two middle values for an even count."""
    if not prices:
        return None
    ordered = sorted(prices)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 0:
        return (ordered[mid - 1] + ordered[mid]) / 2
    return ordered[mid]


def per_kg_price(per_quintal: Decimal, quintal_kg: int) -> Decimal:
    """Convert a per-quintal price to per-kg, rounded half-up to 2 places."""
    with localcontext() as ctx:
        # Room for every integer digit plus the two decimals
        ctx.prec = max(ctx.prec, per_quintal.adjusted() + 4)
        return (per_quintal / quintal_kg).quantize(CENTS, rounding=ROUND_HALF_UP)


def find_matches(records: Sequence[PriceRecord], key: str) -> list[PriceRecord]:
    """Usable records whose commodity equals or contains the key, or is contained in it."""
    if not key:
        return []
    return [r for r in records if r.is_usable and contains_match(r.commodity, key)]


def recent_window(records: Sequence[PriceRecord], size: int) -> list[PriceRecord]:
    """Newest records first, at most size of them. Stable for equal dates."""
    ordered = sorted(records, key=lambda r: r.recency_key(), reverse=True)
    return ordered[:size]


def resolve_price(crop_label: str, snapshot: RecordSnapshot, config: Config) -> PriceResult:
    """
    Resolve a single representative price for a crop label.

    Args:
        crop_label: Crop name as supplied (e.g., "Paddy", "Wheat")
        snapshot: Dataset snapshot to aggregate over
        config: Synonyms and price settings

    Returns:
        PriceResult; always structurally valid
    """
    settings = config.settings
    crop_label = crop_label or ""
    mapped = resolve_commodity(crop_label, config)

    if not snapshot.ok:
        logger.warning(f"Dataset unavailable ({snapshot.error}); fallback price for '{crop_label}'")
        return fallback_result(crop_label, config, "dataset_unavailable", mapped)

    matches = find_matches(snapshot.records, mapped)
    if not matches:
        logger.info(f"No entries for '{crop_label}' (normalized='{mapped}')")
        return fallback_result(crop_label, config, "no_match", mapped)

    window = recent_window(matches, settings.recent_window)
    prices = [r.modal_price for r in window if r.modal_price is not None]
    median = median_price(prices)
    if median is None:
        logger.info(f"No valid modal prices among {len(window)} recent records for '{crop_label}'")
        return fallback_result(crop_label, config, "no_valid_price", mapped)

    per_kg = per_kg_price(median, settings.quintal_kg)
    logger.info(
        f"Resolved '{crop_label}' (matched='{mapped}', n={len(prices)}): "
        f"{per_kg} {settings.currency}/{settings.unit}"
    )
    return PriceResult(
        price=float(per_kg),
        currency=settings.currency,
        unit=settings.unit,
        crop_type=crop_label,
        source=PriceSource.RESOLVED,
        reason="resolved",
        sample_size=len(prices),
        matched_as=mapped,
    )


def fallback_result(crop_label: str, config: Config, reason: str, mapped: str = "") -> PriceResult:
    """The fixed default price, tagged with why no market price was used."""
    settings = config.settings
    return PriceResult(
        price=float(per_kg_price(settings.fallback_price, 1)),
        currency=settings.currency,
        unit=settings.unit,
        crop_type=crop_label,
        source=PriceSource.FALLBACK,
        reason=reason,
        sample_size=0,
        matched_as=mapped,
    )
