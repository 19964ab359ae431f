import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from crisis_alert.api import deps
from crisis_alert.api.main import _cors_origins
from crisis_alert.db import schemas
from crisis_alert.services.allocation_service import AllocationConflict

_NO_HEADERS = dict(
    x_auth_request_user=None,
    x_auth_request_email=None,
    x_forwarded_user=None,
    x_forwarded_email=None,
)


def _context(**headers):
    return deps.get_optional_user_context(**{**_NO_HEADERS, **headers})


def test_impersonation_off_by_default():
    assert deps.coordinator_impersonation_enabled() is False
    assert _context() is None


def test_impersonation_allowed_on_localhost(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.setenv("APP_BASE_URL", "http://localhost:5173")
    assert deps.coordinator_impersonation_enabled() is True

    user, ctx = _context()
    assert user.email == deps.DEV_USER_EMAIL
    assert ctx["role"] == "coordinator"
    assert ctx["dev_mode"] is True


def test_impersonation_rejected_on_public_host(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.setenv("APP_BASE_URL", "https://crisis.example.org")
    with pytest.raises(RuntimeError):
        deps.coordinator_impersonation_enabled()
    with pytest.raises(HTTPException) as excinfo:
        _context()
    assert excinfo.value.status_code == 500


def test_impersonation_needs_explicit_opt_in_without_base_url(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    with pytest.raises(RuntimeError):
        deps.coordinator_impersonation_enabled()

    monkeypatch.setenv("ALLOW_DEV_MODE", "true")
    assert deps.coordinator_impersonation_enabled() is True


def test_allowed_hosts_extend_local_hosts(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.setenv("APP_BASE_URL", "staging.internal:8080")
    monkeypatch.setenv("DEV_MODE_ALLOWED_HOSTS", "Staging.Internal, other.host")
    assert deps.coordinator_impersonation_enabled() is True


def test_header_identity_wins_over_impersonation(monkeypatch):
    monkeypatch.setenv("DEV_MODE", "true")
    monkeypatch.setenv("APP_BASE_URL", "http://127.0.0.1")
    user, ctx = _context(x_auth_request_email="citizen@example.com")
    assert user.role == "citizen"
    assert ctx["dev_mode"] is False


def test_cors_origins_default_and_override(monkeypatch):
    monkeypatch.delenv("CORS_ORIGINS", raising=False)
    assert "http://localhost:5173" in _cors_origins()

    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example,")
    assert _cors_origins() == ["https://a.example", "https://b.example"]


def test_validation_error_maps_to_unprocessable():
    with pytest.raises(ValidationError) as excinfo:
        schemas.IncidentUpdate.model_validate({"title": None})
    err = deps.to_http_exception(excinfo.value)
    assert err.status_code == 422
    assert isinstance(err.detail, list)
    assert "title cannot be null" in err.detail[0]["msg"]


@pytest.mark.parametrize(
    "exc, code",
    [
        (AllocationConflict("only 1 available"), 409),
        (PermissionError("nope"), 403),
        (LookupError("Incident not found"), 404),
        (ValueError("bad input"), 400),
        (RuntimeError("Database constraint violated"), 500),
    ],
)
def test_service_errors_map_to_status_codes(exc, code):
    assert deps.to_http_exception(exc).status_code == code
