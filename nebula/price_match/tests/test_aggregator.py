"""
Tests for price aggregation (median of recent modal prices).

Run with: pytest nebula/price_match/tests/test_aggregator.py -v
"""

from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from nebula.price_match.aggregator import (
    find_matches,
    median_price,
    per_kg_price,
    recent_window,
    resolve_price,
)
from nebula.price_match.config import load_config
from nebula.price_match.models import PriceRecord, PriceSource
from nebula.price_match.record_loader import load_records
from nebula.price_match.store import RecordSnapshot


FIXTURES_DIR = Path(__file__).parent / "fixtures"
SAMPLE_JSON = FIXTURES_DIR / "sample_prices.json"
CONFIG_PATH = Path(__file__).parent.parent / "market_config.json"


def _record(commodity: str, price, day: int | None = None, state: str = "Punjab") -> PriceRecord:
    return PriceRecord(
        state=state,
        district="Ludhiana",
        market="Khanna",
        commodity=commodity,
        arrival_date=f"{day:02d}/01/2024" if day else "",
        arrived_on=date(2024, 1, day) if day else None,
        modal_price=Decimal(str(price)) if price is not None else None,
    )


def _snapshot(records) -> RecordSnapshot:
    return RecordSnapshot(records=tuple(records))


@pytest.fixture
def config():
    return load_config(CONFIG_PATH)


@pytest.fixture
def sample():
    return RecordSnapshot(records=tuple(load_records(SAMPLE_JSON)), source=str(SAMPLE_JSON))


class TestMedianPrice:
    """Test median computation."""

    def test_odd(self):
        assert median_price([Decimal("2200"), Decimal("2000"), Decimal("2100")]) == Decimal("2100")

    def test_even(self):
        assert median_price([Decimal("2000"), Decimal("2200")]) == Decimal("2100")

    def test_single(self):
        assert median_price([Decimal("1500")]) == Decimal("1500")

    def test_empty(self):
        assert median_price([]) is None

    def test_outlier_resistant(self):
        prices = [Decimal(p) for p in ("2000", "2100", "2200", "2150", "99000")]
        assert median_price(prices) == Decimal("2150")


class TestPerKgPrice:
    """Test quintal -> kg conversion and rounding."""

    def test_half_up(self):
        assert per_kg_price(Decimal("1234.5"), 100) == Decimal("12.35")

    def test_beyond_default_precision(self):
        assert per_kg_price(Decimal("1e30"), 100) == Decimal("1e28")

    def test_many_significant_digits(self):
        price = Decimal("123456789012345678901234567890.55")
        assert per_kg_price(price, 100) == Decimal("1234567890123456789012345678.91")


class TestRecentWindow:
    """Test recency ordering and the window cutoff."""

    def test_newest_first(self):
        records = [_record("Wheat", 1, day=3), _record("Wheat", 2, day=9), _record("Wheat", 3, day=5)]
        assert [r.arrived_on.day for r in recent_window(records, 10)] == [9, 5, 3]

    def test_undated_sorts_last_but_is_kept(self):
        records = [_record("Wheat", 1), _record("Wheat", 2, day=1)]
        window = recent_window(records, 10)
        assert len(window) == 2
        assert window[-1].arrived_on is None

    def test_cutoff(self):
        records = [_record("Wheat", 100 + d, day=d) for d in range(1, 13)]
        window = recent_window(records, 10)
        assert len(window) == 10
        assert min(r.arrived_on.day for r in window) == 3


class TestFindMatches:
    """Test commodity matching for aggregation."""

    def test_equality_or_containment(self):
        records = [_record("Rice", 1), _record("Rice (Basmati)", 2), _record("Wheat", 3)]
        assert len(find_matches(records, "rice")) == 2

    def test_empty_key_matches_nothing(self):
        assert find_matches([_record("Rice", 1)], "") == []

    def test_unusable_rows_ignored(self):
        assert find_matches([_record("Rice", 1, state="")], "rice") == []


class TestResolvePrice:
    """Test end-to-end price resolution."""

    def test_odd_count_median(self, config):
        snapshot = _snapshot([_record("Rice", 2000, 1), _record("Rice", 2100, 2), _record("Rice", 2200, 3)])
        result = resolve_price("Rice", snapshot, config)
        assert result.price == 21.00
        assert result.currency == "INR"
        assert result.unit == "kg"
        assert result.crop_type == "Rice"
        assert result.source == PriceSource.RESOLVED
        assert result.sample_size == 3

    def test_even_count_median(self, config):
        snapshot = _snapshot([_record("Rice", 2000, 1), _record("Rice", 2200, 2)])
        assert resolve_price("Rice", snapshot, config).price == 21.00

    def test_rounds_to_two_places(self, config):
        snapshot = _snapshot([_record("Onion", 1234.5, 1)])
        assert resolve_price("Onion", snapshot, config).price == 12.35

    def test_huge_price_resolves(self, config):
        snapshot = _snapshot([_record("Rice", "1e30", 1)])
        result = resolve_price("Rice", snapshot, config)
        assert result.source == PriceSource.RESOLVED
        assert result.price == 1e28

    def test_synonym_paddy_to_rice(self, config, sample):
        result = resolve_price("Paddy", sample, config)
        assert result.matched_as == "rice"
        assert result.source == PriceSource.RESOLVED
        assert result.price == 21.00  # 2000, 2100, 2200
        assert result.crop_type == "Paddy"

    def test_synonym_chilli(self, config, sample):
        result = resolve_price("chilli", sample, config)
        assert result.matched_as == "dry chillies"
        assert result.price == 90.00

    def test_unparseable_date_not_excluded(self, config):
        snapshot = _snapshot([_record("Wheat", 2400)])
        result = resolve_price("Wheat", snapshot, config)
        assert result.price == 24.00
        assert result.sample_size == 1

    def test_window_uses_most_recent_ten(self, config):
        old = [_record("Wheat", 9000, day=d) for d in (1, 2)]
        recent = [_record("Wheat", 2000, day=d) for d in range(3, 13)]
        result = resolve_price("Wheat", _snapshot(old + recent), config)
        assert result.price == 20.00
        assert result.sample_size == 10

    def test_undated_records_pushed_out_by_window(self, config):
        undated = [_record("Wheat", 9000)]
        dated = [_record("Wheat", 2000, day=d) for d in range(1, 11)]
        result = resolve_price("Wheat", _snapshot(undated + dated), config)
        assert result.price == 20.00

    def test_invalid_prices_excluded_from_window(self, config):
        snapshot = _snapshot([_record("Wheat", None, 5), _record("Wheat", 2300, 4), _record("Wheat", 2500, 3)])
        result = resolve_price("Wheat", snapshot, config)
        assert result.price == 24.00
        assert result.sample_size == 2

    def test_no_match_falls_back(self, config, sample):
        result = resolve_price("Mango", sample, config)
        assert result.price == 16.60
        assert result.currency == "INR"
        assert result.unit == "kg"
        assert result.crop_type == "Mango"
        assert result.source == PriceSource.FALLBACK
        assert result.reason == "no_match"

    def test_no_valid_price_falls_back(self, config, sample):
        result = resolve_price("Cotton", sample, config)
        assert result.price == 16.60
        assert result.reason == "no_valid_price"

    def test_dataset_unavailable_falls_back(self, config):
        snapshot = RecordSnapshot(error="Dataset file not found")
        result = resolve_price("Wheat", snapshot, config)
        assert result.to_dict()["price"] == 16.60
        assert result.to_dict()["cropType"] == "Wheat"
        assert result.reason == "dataset_unavailable"

    def test_empty_label_falls_back(self, config, sample):
        result = resolve_price("", sample, config)
        assert result.is_fallback
        assert result.reason == "no_match"

    def test_unusable_row_never_matches(self, config, sample):
        # The only Banana row has no state
        assert resolve_price("Banana", sample, config).reason == "no_match"
