"""
Catalog Query - Distinct states, districts, markets and commodities.

Drives the cascading location pickers: each list is drawn from the
records whose upstream fields loose-match the caller's filters.
"""

from typing import Iterable, Optional

from .models import LocationFilter, PriceRecord
from .text import loose_match

CATALOG_FIELDS = ("state", "district", "market", "commodity")


def _sort_key(value: str) -> tuple[str, str]:
    # Case-insensitive first, exact value breaks ties
    return (value.casefold(), value)


def _passes(record: PriceRecord, filters: LocationFilter) -> bool:
    for field_name, label in filters.active():
        if not loose_match(getattr(record, field_name), label):
            return False
    return True


def distinct_values(
    records: Iterable[PriceRecord],
    field: str,
    filters: Optional[LocationFilter] = None,
) -> list[str]:
    """
    Distinct values of a field among records satisfying all supplied filters.

    Args:
        records: Snapshot records
        field: One of state, district, market, commodity
        filters: Optional state/district/market labels (loose-matched)

    Returns:
        Duplicate-free values (original casing) sorted ascending
    """
    if field not in CATALOG_FIELDS:
        raise ValueError(f"Unknown catalog field: {field}")

    filters = filters or LocationFilter()
    seen: set[str] = set()
    for record in records:
        if not record.is_usable:
            continue
        value = getattr(record, field).strip()
        if not value or value in seen:
            continue
        if _passes(record, filters):
            seen.add(value)

    return sorted(seen, key=_sort_key)


def list_states(records: Iterable[PriceRecord]) -> list[str]:
    return distinct_values(records, "state")


def list_districts(records: Iterable[PriceRecord], state: str) -> list[str]:
    return distinct_values(records, "district", LocationFilter(state=state))


def list_markets(records: Iterable[PriceRecord], state: str, district: Optional[str] = None) -> list[str]:
    return distinct_values(records, "market", LocationFilter(state=state, district=district))


def list_commodities(records: Iterable[PriceRecord], filters: Optional[LocationFilter] = None) -> list[str]:
    return distinct_values(records, "commodity", filters)
