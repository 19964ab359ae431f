import pytest
from fastapi.testclient import TestClient

from crisis_alert.storage import BACKEND_DATABASE, BACKEND_MEMORY, get_storage, reset_storage, set_storage
from crisis_alert.utils.feature_flags import refresh_feature_flag_cache

# Environment that changes backend selection or behaviour between tests
_ISOLATED_ENV = [
    "STORAGE_BACKEND",
    "DEV_MODE",
    "APP_BASE_URL",
    "ALLOW_DEV_MODE",
    "DEV_MODE_ALLOWED_HOSTS",
    "MIN_PASSWORD_LENGTH",
    "SEED_MOCK_DATA",
    "FEATURE_ALERT_FANOUT_ENABLED",
    "FEATURE_ANALYTICS_ENABLED",
    "FEATURE_STATUS_NOTIFICATIONS_ENABLED",
]

CITIZEN_EMAIL = "citizen@example.com"
COORDINATOR_EMAIL = "coordinator@example.com"
AGENCY_EMAIL = "agency@example.com"


def auth_headers(email: str, name: str | None = None) -> dict:
    return {
        "x-auth-request-email": email,
        "x-auth-request-user": name or email.split("@")[0],
    }


@pytest.fixture(autouse=True)
def _isolated_storage(monkeypatch):
    """Fresh seeded in-memory storage and default flags for every test."""
    for name in _ISOLATED_ENV:
        monkeypatch.delenv(name, raising=False)
    refresh_feature_flag_cache()
    reset_storage()
    yield
    reset_storage()
    refresh_feature_flag_cache()


@pytest.fixture
def storage():
    return get_storage()


@pytest.fixture
def client():
    from crisis_alert.api.main import app

    return TestClient(app)


@pytest.fixture
def citizen_headers():
    return auth_headers(CITIZEN_EMAIL)


@pytest.fixture
def coordinator_headers():
    return auth_headers(COORDINATOR_EMAIL)


@pytest.fixture
def agency_headers():
    return auth_headers(AGENCY_EMAIL)


@pytest.fixture(params=[BACKEND_MEMORY, BACKEND_DATABASE])
def any_backend(request):
    """Run the test once per backend, each freshly seeded and installed as the shared storage."""
    if request.param == BACKEND_MEMORY:
        yield get_storage()
        return
    from crisis_alert.db.database import SQLITE_MEMORY_URL, build_engine
    from crisis_alert.storage.database import DatabaseStorage

    engine = build_engine(SQLITE_MEMORY_URL)
    set_storage(DatabaseStorage(engine=engine))
    yield get_storage()
    engine.dispose()
