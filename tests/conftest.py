"""
Pytest configuration and shared fixtures for AgroWeather tests.
"""

import os
import sys
import tempfile
import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set test environment variables before importing app
_TMP_ROOT = tempfile.mkdtemp(prefix="agroweather-tests-")
os.environ.setdefault("FLASK_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATA_DIR", _TMP_ROOT)
os.environ.setdefault("STORAGE_DIR", os.path.join(_TMP_ROOT, "store"))
os.environ.setdefault("LOG_DIR", os.path.join(_TMP_ROOT, "logs"))
os.environ.pop("PUSH_TOKEN", None)
os.environ.pop("ALERT_WEBHOOK_URL", None)
os.environ.pop("OPENWEATHER_API_KEY", None)
os.environ.pop("SENTRY_DSN", None)


@pytest.fixture
def store(tmp_path):
    """A fresh diskcache-backed store, installed as the process-wide default."""
    import storage
    kv = storage.KeyValueStore(str(tmp_path / "store"))
    previous = storage._default_store
    storage.set_store(kv)
    yield kv
    storage.set_store(previous)
    kv.close()


@pytest.fixture
def all_enabled():
    return {
        'enabled': True,
        'extreme_heat': True,
        'freeze_warning': True,
        'high_wind': True,
        'heavy_rain': True,
        'frost': True,
        'humidity': True,
    }


@pytest.fixture
def sample_alert():
    return {
        'type': 'Extreme Heat',
        'title': '🌡️ Extreme Heat Warning',
        'message': 'Dangerous heat at 96°F in Fresno',
        'severity': 'high',
        'city': 'Fresno',
    }


class BrokenStore:
    """Store stand-in whose every operation fails."""

    def get_item(self, key):
        raise OSError("disk unavailable")

    def set_item(self, key, value):
        raise OSError("disk unavailable")

    def remove_item(self, key):
        raise OSError("disk unavailable")


@pytest.fixture
def broken_store():
    return BrokenStore()
