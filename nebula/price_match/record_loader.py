"""
Record Loader - Parse market price exports into PriceRecords.

The dataset is a list of Agmarknet-style rows (State, District, Market,
Commodity, Arrival_Date, Modal_x0020_Price, ...). JSON arrays and XLSX
exports are both accepted. Field names vary in case and spelling, so
every field is looked up through an alias list.
"""

import json
import logging
import math
import re
import zipfile
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Mapping, Optional

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from .models import PriceRecord

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d/%m/%Y"

# Checked in order, case-insensitively; first non-null value wins
FIELD_ALIASES = {
    "state": ["State"],
    "district": ["District"],
    "market": ["Market"],
    "commodity": ["Commodity"],
    "arrival_date": ["Arrival_Date", "Arrival Date", "ArrivalDate"],
    "modal_price": ["Modal_x0020_Price", "Modal Price", "ModalPrice", "modal_price"],
    "min_price": ["Min_x0020_Price", "Min Price", "MinPrice", "min_price"],
    "max_price": ["Max_x0020_Price", "Max Price", "MaxPrice", "max_price"],
}


class DatasetUnavailableError(Exception):
    """The dataset file is missing, unreadable, or not a sequence of records."""


def _decode_xml_value(value: str) -> str:
    """
    Decode XML-encoded values from Excel.

    Examples:
        Modal_x0020_Price -> Modal Price
        _x0031_17379 -> 117379
    """
    if not value or "_x" not in value:
        return value

    def replace_code(match):
        try:
            return chr(int(match.group(1), 16))
        except ValueError:
            return match.group(0)

    return re.sub(r'_x([0-9A-Fa-f]{4})_', replace_code, value)


def _get_field(row: Mapping[str, Any], field: str) -> Any:
    """Look up a logical field in a raw row using its alias list."""
    lowered = {str(k).lower(): v for k, v in row.items() if k is not None}
    for alias in FIELD_ALIASES[field]:
        for candidate in (alias, _decode_xml_value(alias)):
            value = row.get(candidate)
            if value is None:
                value = lowered.get(candidate.lower())
            if value is not None:
                return value
    return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return _decode_xml_value(value).strip()
    return str(value).strip()


def parse_modal_price(value: Any) -> Optional[Decimal]:
    """
    Parse a price cell to Decimal.

    Accepts numbers and numeric strings. Missing, non-numeric, non-finite
    and non-positive values give None; they are never coerced to zero.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, int):
        price = Decimal(value)
    elif isinstance(value, float):
        if not math.isfinite(value):
            return None
        price = Decimal(str(value))
    else:
        str_value = str(value).strip()
        if not str_value:
            return None
        try:
            price = Decimal(str_value)
        except InvalidOperation:
            return None

    if not price.is_finite() or price <= 0:
        return None
    # Prices are published as floats; anything beyond float range is not a price
    if not math.isfinite(float(price)):
        return None
    return price


def parse_arrival_date(value: Any) -> Optional[date]:
    """
    Parse an arrival date in dd/mm/yyyy form.

    Returns None for anything else; callers treat None as the oldest
    possible date instead of dropping the record.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = _text(value)
    if not text:
        return None
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError:
        return None


def parse_row(row: Mapping[str, Any]) -> PriceRecord:
    """Convert one raw dataset row into a PriceRecord."""
    arrival_raw = _get_field(row, "arrival_date")
    arrived_on = parse_arrival_date(arrival_raw)
    if isinstance(arrival_raw, (date, datetime)):
        arrival_text = arrived_on.strftime(DATE_FORMAT)
    else:
        arrival_text = _text(arrival_raw)

    return PriceRecord(
        state=_text(_get_field(row, "state")),
        district=_text(_get_field(row, "district")),
        market=_text(_get_field(row, "market")),
        commodity=_text(_get_field(row, "commodity")),
        arrival_date=arrival_text,
        arrived_on=arrived_on,
        modal_price=parse_modal_price(_get_field(row, "modal_price")),
        min_price=parse_modal_price(_get_field(row, "min_price")),
        max_price=parse_modal_price(_get_field(row, "max_price")),
    )


def parse_rows(rows: Any) -> list[PriceRecord]:
    """
    Convert a decoded dataset into PriceRecords.

    A top level that is not a list is treated as an empty dataset.
    Entries that are not objects are skipped.
    """
    if not isinstance(rows, list):
        logger.warning(f"Dataset top level is {type(rows).__name__}, not a list; treating as empty")
        return []

    records = []
    skipped = 0
    for row in rows:
        if not isinstance(row, Mapping):
            skipped += 1
            continue
        records.append(parse_row(row))

    if skipped:
        logger.warning(f"Skipped {skipped} non-object rows in dataset")
    return records


def load_records(file_path: str | Path) -> list[PriceRecord]:
    """
    Load price records from a JSON or XLSX dataset file.

    Args:
        file_path: Path to crop_price.json or an .xlsx export

    Returns:
        List of PriceRecord in file order

    Raises:
        DatasetUnavailableError: file missing, unreadable, or malformed
    """
    path = Path(file_path)
    if not path.exists():
        raise DatasetUnavailableError(f"Dataset file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        rows = _read_json(path)
        if not isinstance(rows, list):
            raise DatasetUnavailableError(f"Dataset is not a list of records: {path}")
        return parse_rows(rows)
    if suffix == ".xlsx":
        return parse_rows(_read_xlsx(path))
    raise DatasetUnavailableError(f"Unsupported dataset format: {suffix}")


def _read_json(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise DatasetUnavailableError(f"Could not read {path}: {e}") from e
    except (ValueError, RecursionError) as e:
        # JSONDecodeError, integer digit limit, or nesting too deep
        raise DatasetUnavailableError(f"Invalid JSON in {path}: {e}") from e


def _read_xlsx(path: Path) -> list[dict[str, Any]]:
    """Read the first worksheet; row 1 holds the headers."""
    try:
        workbook = load_workbook(path, read_only=True, data_only=True)
    except (OSError, InvalidFileException, zipfile.BadZipFile, KeyError, ValueError) as e:
        raise DatasetUnavailableError(f"Could not open workbook {path}: {e}") from e

    try:
        sheet = workbook.worksheets[0] if workbook.worksheets else None
        if sheet is None:
            raise DatasetUnavailableError(f"No worksheet found in {path}")

        rows = sheet.iter_rows(values_only=True)
        header_row = next(rows, None)
        if header_row is None:
            return []
        headers = [_decode_xml_value(str(h)).strip() if h is not None else None for h in header_row]

        data = []
        for values in rows:
            if values is None or all(v is None for v in values):
                continue
            data.append({
                header: value
                for header, value in zip(headers, values)
                if header
            })
        return data
    finally:
        workbook.close()
