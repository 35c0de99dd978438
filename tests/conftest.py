# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests.
#
# FIXTURES:
# ---------
# - productivity_inputs / match_factor_inputs → valid raw form fields
# - storage   → JsonFileStorage in tmp_path
# - store     → PersistentStore over that storage
# - tracker   → EquipmentTracker with default config in tmp_path
# - clock     → manually advanced clock for Debouncer / Throttler
# - clean_env → no SMARTZPROD_* variables, path of a missing .env
#
# NOTES:
# ------
# - No network, no databases
# - Use tmp_path for every file
# ==============================================

import pytest

from smartzprod.config import AppConfig
from smartzprod.persistence.kv_storage import JsonFileStorage
from smartzprod.persistence.record_store import PersistentStore
from smartzprod.tracker import EquipmentTracker


@pytest.fixture
def productivity_inputs() -> dict:
    """Valid productivity form: 10 trips x 6.5 BCM over 5 hours."""
    return {
        "supervisor_name": "Budi Santoso",
        "supervisor_id": "NRP12345",
        "excavator_id": "EX01",
        "timestamp": "2026-01-15T08:30",
        "trip_count": "10",
        "meter_start": "100",
        "meter_end": "105",
        "bucket_capacity": "6.5",
    }


@pytest.fixture
def match_factor_inputs() -> dict:
    """Valid match factor form: 5 haulers, 3 min loader, 15 min hauler → 1.0."""
    return {
        "supervisor_name": "Budi Santoso",
        "supervisor_id": "NRP12345",
        "excavator_id": "EX01",
        "timestamp": "2026-01-15T09:00",
        "hauler_count": "5",
        "loader_cycle_time": "3",
        "hauler_cycle_time": "15",
    }


@pytest.fixture
def storage(tmp_path) -> JsonFileStorage:
    return JsonFileStorage(str(tmp_path / "data"))


@pytest.fixture
def store(storage) -> PersistentStore:
    return PersistentStore(storage)


@pytest.fixture
def tracker(tmp_path) -> EquipmentTracker:
    return EquipmentTracker(AppConfig(), storage_dir=str(tmp_path / "data"))


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


ENV_VARS = (
    "SMARTZPROD_MF_WARN_MIN", "SMARTZPROD_MF_WARN_MAX",
    "SMARTZPROD_MF_OPTIMAL_MIN", "SMARTZPROD_MF_OPTIMAL_MAX",
    "SMARTZPROD_DATA_DIR", "SMARTZPROD_BACKUP_PREFIX",
    "SMARTZPROD_DEBOUNCE_SECONDS", "SMARTZPROD_THROTTLE_SECONDS",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """
    Unset every SMARTZPROD_* variable for the test.

    Values that load_dotenv writes during the test are removed afterwards.
    Returns the path of a .env file that does not exist.
    """
    for name in ENV_VARS:
        monkeypatch.setenv(name, "unset")
        monkeypatch.delenv(name)
    return tmp_path / "missing.env"
