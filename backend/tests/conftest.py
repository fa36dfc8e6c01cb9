from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.services.cache.redis_client import get_klines_cache
from app.services.data_ingestion.series_generator import generate_series

END_DATE = date(2024, 3, 31)


@pytest.fixture
def end_date():
    return END_DATE


@pytest.fixture
def btc_bars():
    return generate_series("BTC", 180, seed=1, end_date=END_DATE)


@pytest.fixture
def eth_bars():
    return generate_series("ETH", 180, seed=1, end_date=END_DATE)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_klines_cache():
    get_klines_cache().clear_memory()
    yield
    get_klines_cache().clear_memory()


@pytest.fixture
def raw_klines():
    # open time, open, high, low, close, volume, close time, ...
    return [
        [1706918400000, "43200.00", "43500.50", "42800.10", "43010.20", "1520.331", 1707004799999],
        [1707004800000, "43010.20", "43888.00", "42950.00", "43700.00", "1811.007", 1707091199999],
        [1707091200000, "43700.00", "43720.00", "42100.00", "42210.55", "2230.000", 1707177599999],
    ]
