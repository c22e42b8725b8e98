"""
data.gov.in sync - Download daily mandi prices into the local dataset.

The Agmarknet "current daily price" resource returns records with
lowercase keys (state, district, market, commodity, arrival_date,
modal_price, ...), which the record loader already understands. The
download is written atomically so a running RecordStore never reads a
half-written file.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

import requests

from .record_loader import DatasetUnavailableError

logger = logging.getLogger(__name__)

DATAGOV_BASE_URL = "https://api.data.gov.in/resource"
DEFAULT_RESOURCE_ID = "9ef84268-d588-465a-a308-a864a43d0070"
DEFAULT_LIMIT = 10000
REQUEST_TIMEOUT = 30


def fetch_datagov_records(
    api_key: str,
    resource_id: str = DEFAULT_RESOURCE_ID,
    filters: Optional[dict[str, Optional[str]]] = None,
    limit: int = DEFAULT_LIMIT,
    timeout: int = REQUEST_TIMEOUT,
) -> list[dict[str, Any]]:
    """
    Fetch price records from the data.gov.in resource API.

    Args:
        api_key: data.gov.in API key
        resource_id: Resource to query (default: Agmarknet daily prices)
        filters: Optional field filters, e.g. {"state": "Punjab"}; blanks are ignored
        limit: Maximum records to request
        timeout: Request timeout in seconds

    Returns:
        List of raw record dicts

    Raises:
        DatasetUnavailableError: missing key, HTTP failure, or unexpected payload
    """
    if not api_key:
        raise DatasetUnavailableError("DATAGOV_API_KEY is not configured")

    params = {"api-key": api_key, "format": "json", "limit": str(limit)}
    for key, value in (filters or {}).items():
        trimmed = value.strip() if isinstance(value, str) else value
        if trimmed:
            params[f"filters[{key}]"] = trimmed

    url = f"{DATAGOV_BASE_URL}/{resource_id}"
    try:
        response = requests.get(url, params=params, timeout=timeout)
    except requests.exceptions.RequestException as e:
        raise DatasetUnavailableError(f"data.gov.in request failed: {e}") from e

    if response.status_code != 200:
        raise DatasetUnavailableError(
            f"data.gov.in request failed ({response.status_code}): {response.text[:200]}"
        )

    try:
        payload = response.json()
    except ValueError as e:
        raise DatasetUnavailableError(f"data.gov.in returned invalid JSON: {e}") from e

    records = payload.get("records") if isinstance(payload, dict) else None
    if not isinstance(records, list):
        raise DatasetUnavailableError("data.gov.in response has no records list")

    logger.info(f"Fetched {len(records)} records from data.gov.in resource {resource_id}")
    return records


def write_dataset(records: list[dict[str, Any]], output_path: str | Path) -> Path:
    """
    Write records as the JSON dataset, replacing the file atomically.

    Args:
        records: Raw record dicts
        output_path: Destination (e.g., data/crop_price.json)

    Returns:
        The destination path
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(records, f, ensure_ascii=False, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    logger.info(f"Wrote {len(records)} records to {path}")
    return path
