"""
Pytest configuration and fixtures.
"""

import sys
from pathlib import Path

# Add the backend directory to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock

from api.main import app
from sources.ergast import ErgastClient, get_client


@pytest.fixture
def client():
    """Create a test client for the FastAPI app."""
    return TestClient(app)


@pytest.fixture
def fake_ergast():
    """Replace the upstream client used by the routers with a mock."""
    mock = AsyncMock(spec=ErgastClient)
    app.dependency_overrides[get_client] = lambda: mock
    yield mock
    app.dependency_overrides.pop(get_client, None)


@pytest.fixture
def mock_redis():
    """Create a mock Redis client."""
    mock = AsyncMock()
    mock.ping = AsyncMock(return_value=True)
    mock.get = AsyncMock(return_value=None)
    mock.set = AsyncMock(return_value=True)
    mock.info = AsyncMock(return_value={"used_memory_human": "1M"})
    mock.dbsize = AsyncMock(return_value=100)
    return mock


@pytest.fixture
def sample_drivers():
    """Upstream DriverTable entries."""
    return [
        {"driverId": "max_verstappen", "givenName": "Max", "familyName": "Verstappen"},
        {"driverId": "alonso", "givenName": "Fernando", "familyName": "Alonso"},
        {"driverId": "stroll", "givenName": "Lance", "familyName": "Stroll"},
    ]


@pytest.fixture
def sample_driver_names():
    """Driver id to display name lookup."""
    return {
        "max_verstappen": "Max Verstappen",
        "alonso": "Fernando Alonso",
        "stroll": "Lance Stroll",
    }


@pytest.fixture
def sample_pit_stops():
    """Re-shaped pit stop records for one race."""
    return [
        {"driverId": "alonso", "lap": 14, "stop": 1, "time": "15:32:10", "duration": "22.612"},
        {"driverId": "max_verstappen", "lap": 17, "stop": 1, "time": "15:36:48", "duration": "21.998"},
    ]


@pytest.fixture
def sample_laps():
    """Re-shaped lap records for one race."""
    return [
        {
            "lap": 1,
            "timings": [
                {"driverId": "max_verstappen", "time": "1:37.284"},
                {"driverId": "alonso", "time": "1:38.902"},
            ],
        },
        {
            "lap": 2,
            "timings": [
                {"driverId": "max_verstappen", "time": "1:32.045"},
                {"driverId": "alonso", "time": "1:33.117"},
            ],
        },
    ]


@pytest.fixture
def sample_comparison_raw():
    """Raw per-statistic comparison values for three drivers."""
    return {
        "position": [
            {"name": "Max Verstappen", "value": 1},
            {"name": "Fernando Alonso", "value": 4},
            {"name": "Lance Stroll", "value": 10},
        ],
        "points": [
            {"name": "Max Verstappen", "value": 575.0},
            {"name": "Fernando Alonso", "value": 206.0},
            {"name": "Lance Stroll", "value": 74.0},
        ],
        "fastestLap": [
            {"name": "Max Verstappen", "value": "91.20"},
            {"name": "Fernando Alonso", "value": "92.05"},
            {"name": "Lance Stroll", "value": "92.80"},
        ],
    }
