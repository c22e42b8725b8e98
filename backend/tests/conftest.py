"""
Test configuration and fixtures for the market price backend test suite.

Provides:
- A temporary copy of the sample price dataset (isolated per test)
- A MarketPriceService bound to it, patched in as the shared service
- FastAPI TestClient fixture
"""
import shutil
from pathlib import Path
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from nebula.price_match import MarketPriceService, RecordStore, load_config


SAMPLE_JSON = (
    Path(__file__).resolve().parents[2] / "nebula" / "price_match" / "tests" / "fixtures" / "sample_prices.json"
)


# ---------------------------------------------------------------------------
# Dataset fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def dataset_path(tmp_path) -> Path:
    """Copy of the sample dataset that tests may rewrite."""
    path = tmp_path / "crop_price.json"
    shutil.copy(SAMPLE_JSON, path)
    return path


@pytest.fixture()
def service(dataset_path):
    """
    Patch the shared service so that every router and the worker
    read the temporary dataset.
    """
    svc = MarketPriceService(RecordStore(dataset_path), load_config())
    with patch("backend.core.market_data._service", svc):
        yield svc


@pytest.fixture()
def client(service):
    """
    Provide a FastAPI TestClient with the service patched.

    Skips the lifespan (worker init/shutdown) to avoid APScheduler side effects.
    """
    from backend.api.main import app

    # Disable lifespan so worker doesn't start during tests
    with patch("backend.api.main.init_worker"), \
         patch("backend.api.main.stop_scheduler"):
        with TestClient(app) as c:
            yield c
