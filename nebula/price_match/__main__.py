"""
CLI entry point for Market Price Match.

Usage:
    python -m nebula.price_match --dataset data/crop_price.json states
    python -m nebula.price_match districts --state Maharashtra
    python -m nebula.price_match markets --state Punjab --district Amritsar
    python -m nebula.price_match commodities --state Punjab --market Amritsar
    python -m nebula.price_match price Paddy Wheat --output-csv prices.csv
    python -m nebula.price_match sync --output data/crop_price.json --state Punjab
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from .config import load_config
from .datagov import DEFAULT_LIMIT, DEFAULT_RESOURCE_ID, fetch_datagov_records, write_dataset
from .models import LocationFilter
from .record_loader import DatasetUnavailableError
from .report import export_csv, format_catalog, format_prices, generate_report_filename
from .service import MarketPriceService
from .store import RecordStore

DEFAULT_DATASET = os.environ.get("PRICE_DATASET_PATH", "data/crop_price.json")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="price_match",
        description="Market Price Match - Resolve crop prices and market locations from a price dataset",
    )

    parser.add_argument(
        "--dataset",
        default=DEFAULT_DATASET,
        metavar="FILE",
        help="Price dataset (JSON or XLSX, default: %(default)s)",
    )
    parser.add_argument(
        "--config",
        default=None,
        metavar="FILE",
        help="Market config file (default: module's market_config.json)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log matching details",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("states", help="List states in the dataset")

    districts = sub.add_parser("districts", help="List districts of a state")
    districts.add_argument("--state", required=True)

    markets = sub.add_parser("markets", help="List markets of a state (and district)")
    markets.add_argument("--state", required=True)
    markets.add_argument("--district")

    commodities = sub.add_parser("commodities", help="List commodities under location filters")
    commodities.add_argument("--state")
    commodities.add_argument("--district")
    commodities.add_argument("--market")

    price = sub.add_parser("price", help="Resolve market price per kg for crops")
    price.add_argument("crops", nargs="+", metavar="CROP")
    price.add_argument(
        "--output-csv",
        nargs="?",
        const="",
        metavar="FILE",
        help="Output CSV file path (default name: market_prices_<date>.csv)",
    )
    price.add_argument("--json", action="store_true", help="Print results as JSON")

    sync = sub.add_parser("sync", help="Download the dataset from data.gov.in")
    sync.add_argument("--output", required=True, metavar="FILE", help="Dataset file to write")
    sync.add_argument("--state")
    sync.add_argument("--district")
    sync.add_argument("--commodity")
    sync.add_argument("--limit", type=int, default=DEFAULT_LIMIT)
    sync.add_argument(
        "--resource-id",
        default=os.environ.get("DATAGOV_RESOURCE_ID", DEFAULT_RESOURCE_ID),
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    if args.command == "sync":
        return _run_sync(args)

    config_path = Path(args.config) if args.config else None
    if config_path and not config_path.exists():
        print(f"Error: Config file not found: {config_path}", file=sys.stderr)
        return 1

    try:
        config = load_config(config_path)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    store = RecordStore(args.dataset)
    snapshot = store.snapshot()
    if not snapshot.ok:
        print(f"Warning: {snapshot.error}", file=sys.stderr)

    service = MarketPriceService(store, config)

    if args.command == "price":
        results = [service.get_market_price(crop) for crop in args.crops]
        if args.json:
            print(json.dumps([r.to_dict() for r in results], indent=2))
        else:
            print(format_prices(results))
        if args.output_csv is not None:
            output_path = Path(args.output_csv or generate_report_filename())
            with open(output_path, "w", newline="") as f:
                export_csv(results, output=f)
            print(f"\nCSV exported to: {output_path}")
        return 0

    if args.command == "states":
        title, result = "STATES", service.get_states()
    elif args.command == "districts":
        title, result = f"DISTRICTS IN {args.state}", service.get_districts_by_state(args.state)
    elif args.command == "markets":
        where = f"{args.state} / {args.district}" if args.district else args.state
        title, result = f"MARKETS IN {where}", service.get_markets(args.state, args.district)
    else:
        filters = LocationFilter(state=args.state, district=args.district, market=args.market)
        title, result = "COMMODITIES", service.get_commodities(filters)

    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1
    print(format_catalog(title, result.data))
    return 0


def _run_sync(args) -> int:
    filters = {"state": args.state, "district": args.district, "commodity": args.commodity}
    try:
        records = fetch_datagov_records(
            api_key=os.environ.get("DATAGOV_API_KEY", ""),
            resource_id=args.resource_id,
            filters=filters,
            limit=args.limit,
        )
        path = write_dataset(records, args.output)
    except DatasetUnavailableError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: Could not write dataset: {e}", file=sys.stderr)
        return 1

    print(f"Saved {len(records)} records to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
