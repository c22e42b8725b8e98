"""
Configuration for Market Price Match.

Handles commodity synonym resolution and aggregation settings.
Config is declarative JSON - edit the file, not the code.
"""

import json
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

from .text import normalize

DEFAULT_CONFIG_PATH = Path(__file__).parent / "market_config.json"


@dataclass(frozen=True)
class PriceSettings:
    """Settings for the price aggregation."""
    recent_window: int = 10              # Most recent records considered
    fallback_price: Decimal = Decimal("16.60")
    currency: str = "INR"
    unit: str = "kg"
    quintal_kg: int = 100                # Dataset prices are per quintal


class SynonymResolver:
    """
    Maps colloquial commodity names to the canonical name used for matching.

    Owns an immutable normalized-alias -> canonical mapping built at
    construction. Lookup is exact; fuzzy matching happens later.
    """

    def __init__(self, aliases: Mapping[str, str]):
        table = {}
        for alias, canonical in aliases.items():
            key = normalize(alias)
            if key:
                table[key] = normalize(canonical) or canonical
        self._table = MappingProxyType(table)

    @classmethod
    def from_grouped(cls, grouped: Mapping[str, list[str]]) -> "SynonymResolver":
        """Build from canonical -> [aliases] (the config file layout)."""
        flat = {}
        for canonical, aliases in grouped.items():
            for alias in aliases:
                flat[alias] = canonical
        return cls(flat)

    @property
    def table(self) -> Mapping[str, str]:
        return self._table

    def resolve(self, normalized_commodity: str) -> str:
        """Return the canonical name for a normalized label, or the label unchanged."""
        return self._table.get(normalized_commodity, normalized_commodity)

    def __len__(self) -> int:
        return len(self._table)


@dataclass
class Config:
    """Full configuration for market price matching."""
    commodity_aliases: dict[str, list[str]] = field(default_factory=dict)
    settings: PriceSettings = field(default_factory=PriceSettings)

    # Built on load from commodity_aliases
    synonyms: SynonymResolver = field(init=False, repr=False)

    def __post_init__(self):
        self.synonyms = SynonymResolver.from_grouped(self.commodity_aliases)


def load_config(config_path: Optional[str | Path] = None) -> Config:
    """
    Load configuration from JSON file.

    Args:
        config_path: Path to market_config.json (default: the bundled file)

    Returns:
        Config with commodity aliases and price settings
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    settings_data = data.get("settings", {})
    defaults = PriceSettings()
    settings = PriceSettings(
        recent_window=int(settings_data.get("recent_window", defaults.recent_window)),
        fallback_price=Decimal(str(settings_data.get("fallback_price", defaults.fallback_price))),
        currency=settings_data.get("currency", defaults.currency),
        unit=settings_data.get("unit", defaults.unit),
        quintal_kg=int(settings_data.get("quintal_kg", defaults.quintal_kg)),
    )

    return Config(
        commodity_aliases=data.get("commodity_aliases", {}),
        settings=settings,
    )


def resolve_commodity(raw_name: str, config: Config) -> str:
    """
    Normalize a crop label and map it through the synonym table.

    Args:
        raw_name: Crop label as typed (e.g., "Paddy")
        config: Loaded configuration

    Returns:
        Canonical matching key (e.g., "rice"), or "" for an empty label
    """
    return config.synonyms.resolve(normalize(raw_name))
