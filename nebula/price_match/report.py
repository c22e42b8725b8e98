"""
Report Generator - Format results for human consumption.

Produces console output and CSV export for catalog lists and price results.
"""

import csv
import io
from datetime import datetime
from typing import TextIO

from .models import PriceResult, PriceSource


def format_catalog(title: str, values: list[str]) -> str:
    """
    Format a catalog list for console display.

    Args:
        title: Heading, e.g. "DISTRICTS IN Maharashtra"
        values: Sorted values to list

    Returns:
        Formatted string for console output
    """
    lines = [f"\n{title} ({len(values)})", "=" * 70]
    if not values:
        lines.append("  (none)")
    for value in values:
        lines.append(f"  {value}")
    return "\n".join(lines)


def format_prices(results: list[PriceResult]) -> str:
    """
    Format price results for console display.

    Resolved prices first, fallbacks after, each with the reason.
    """
    if not results:
        return "No crops to report.\n"

    lines = []
    lines.append(f"\n{'CROP':<20} {'PRICE':>10} {'UNIT':<10} {'SOURCE':<10} {'N':>3}  {'MATCHED AS':<20}")
    lines.append("-" * 70)

    ordered = sorted(results, key=lambda r: r.source != PriceSource.RESOLVED)
    for r in ordered:
        unit = f"{r.currency}/{r.unit}"
        lines.append(
            f"{r.crop_type[:20]:<20} {r.price:>10.2f} {unit:<10} {r.source.value:<10} "
            f"{r.sample_size:>3}  {r.matched_as[:20]:<20}"
        )

    fallbacks = [r for r in results if r.is_fallback]
    if fallbacks:
        lines.append("\nFALLBACK PRICES - No usable market data")
        lines.append("-" * 70)
        for r in fallbacks:
            lines.append(f"  {r.crop_type[:30]:<30} {r.reason}")

    lines.append("\n" + "=" * 70)
    lines.append("SUMMARY")
    lines.append(f"  Crops:      {len(results)}")
    lines.append(f"  Resolved:   {len(results) - len(fallbacks)}")
    lines.append(f"  Fallback:   {len(fallbacks)}")
    lines.append("=" * 70)

    return "\n".join(lines)


def export_csv(results: list[PriceResult], output: TextIO | None = None) -> str:
    """
    Export price results to CSV format.

    Args:
        results: Price results to export
        output: Optional file handle to write to

    Returns:
        CSV string (also writes to output if provided)
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer)

    writer.writerow([
        "crop_type",
        "price",
        "currency",
        "unit",
        "source",
        "reason",
        "sample_size",
        "matched_as",
    ])

    for r in results:
        writer.writerow([
            r.crop_type,
            f"{r.price:.2f}",
            r.currency,
            r.unit,
            r.source.value,
            r.reason,
            r.sample_size,
            r.matched_as,
        ])

    csv_content = buffer.getvalue()

    if output:
        output.write(csv_content)

    return csv_content


def generate_report_filename(prefix: str = "market_prices", extension: str = "csv") -> str:
    """
    Generate a filename for the report.

    Returns:
        Filename like "market_prices_2026-01-08.csv"
    """
    date_str = datetime.now().strftime("%Y-%m-%d")
    return f"{prefix}_{date_str}.{extension}"
