"""
API dependency helpers.

Provides the dependency-resolved user context for routes and the mapping from
service exceptions to HTTP errors.
"""
import logging
import os
from secrets import token_urlsafe
from typing import Any, Dict, Optional, Set, Tuple
from urllib.parse import urlparse

from fastapi import Header, HTTPException, status
from pydantic import ValidationError

from crisis_alert.api.auth import resolve_identity_from_headers
from crisis_alert.db import schemas
from crisis_alert.services.allocation_service import AllocationConflict
from crisis_alert.services.auth_service import AuthService
from crisis_alert.storage import get_storage
from crisis_alert.utils.passwords import hash_password
from crisis_alert.utils.roles import ROLE_COORDINATOR, get_role_permissions

logger = logging.getLogger(__name__)

# Seeded coordinator impersonated when DEV_MODE is active
DEV_USER_EMAIL = "coordinator@example.com"
DEV_USER_NAME = "Sarah Coordinator"
# Hosts where an unauthenticated request may act as the coordinator
DEV_MODE_LOCAL_HOSTS: Set[str] = {"localhost", "127.0.0.1", "::1"}


def _dev_user() -> schemas.User:
    storage = get_storage()
    record = storage.get_user_by_email(DEV_USER_EMAIL)
    if record is None:
        record = storage.create_user(
            schemas.UserCreate(
                username="coordinator1",
                email=DEV_USER_EMAIL,
                name=DEV_USER_NAME,
                role=ROLE_COORDINATOR,
                organization="City Emergency Services",
                password=hash_password(token_urlsafe(32)),
            )
        )
    return schemas.User.model_validate(record.model_dump(exclude={'password'}))


def _build_context(user: schemas.User, dev_mode: bool) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "role": user.role,
        "organization": user.organization,
        "permissions": get_role_permissions(user.role),
        "dev_mode": dev_mode,
    }


def dev_mode_requested() -> bool:
    return os.getenv("DEV_MODE", "false").lower() == "true"


def _impersonation_hosts() -> Set[str]:
    extra = os.getenv("DEV_MODE_ALLOWED_HOSTS", "")
    return DEV_MODE_LOCAL_HOSTS | {h.strip().lower() for h in extra.split(",") if h.strip()}


def coordinator_impersonation_enabled() -> bool:
    """
    Whether guests are served as the seeded coordinator.

    DEV_MODE only takes effect when APP_BASE_URL names a local (or
    DEV_MODE_ALLOWED_HOSTS) host, or, with no APP_BASE_URL at all, when
    ALLOW_DEV_MODE=true. Any other combination raises ``RuntimeError`` so a
    deployed dashboard never hands out coordinator rights to anonymous users.
    """
    if not dev_mode_requested():
        return False

    base_url = os.getenv("APP_BASE_URL", "").strip()
    if base_url:
        hostname = urlparse(base_url if "://" in base_url else f"http://{base_url}").hostname or ""
        allowed = _impersonation_hosts()
        if hostname.lower() not in allowed:
            raise RuntimeError(
                f"DEV_MODE=true is not permitted for APP_BASE_URL host '{hostname}'. Allowed hosts: {sorted(allowed)}"
            )
        return True
    if os.getenv("ALLOW_DEV_MODE", "false").lower() != "true":
        raise RuntimeError("DEV_MODE=true requires a localhost APP_BASE_URL or ALLOW_DEV_MODE=true")
    return True


def _dev_mode() -> bool:
    try:
        return coordinator_impersonation_enabled()
    except RuntimeError as exc:
        logger.error("DEV_MODE misconfiguration detected: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="DEV_MODE misconfigured")


# Contract:
# Returns (schemas.User, current_user_context_dict)
# Raises 401 if identity cannot be resolved.

def get_current_user_context(
    x_auth_request_user: Optional[str] = Header(default=None),
    x_auth_request_email: Optional[str] = Header(default=None),
    x_forwarded_user: Optional[str] = Header(default=None),
    x_forwarded_email: Optional[str] = Header(default=None),
) -> Tuple[schemas.User, Dict[str, Any]]:
    user_context = get_optional_user_context(
        x_auth_request_user=x_auth_request_user,
        x_auth_request_email=x_auth_request_email,
        x_forwarded_user=x_forwarded_user,
        x_forwarded_email=x_forwarded_email,
    )
    if user_context is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return user_context


def get_optional_user_context(
    x_auth_request_user: Optional[str] = Header(default=None),
    x_auth_request_email: Optional[str] = Header(default=None),
    x_forwarded_user: Optional[str] = Header(default=None),
    x_forwarded_email: Optional[str] = Header(default=None),
) -> Optional[Tuple[schemas.User, Dict[str, Any]]]:
    """Like ``get_current_user_context`` but returns ``None`` for guests."""
    name, email = resolve_identity_from_headers(
        x_auth_request_user=x_auth_request_user,
        x_auth_request_email=x_auth_request_email,
        x_forwarded_user=x_forwarded_user,
        x_forwarded_email=x_forwarded_email,
    )
    if email:
        user = AuthService().get_or_create_user(email=email, name=name)
        return user, _build_context(user, dev_mode=False)
    if _dev_mode():
        user = _dev_user()
        return user, _build_context(user, dev_mode=True)
    return None


def to_http_exception(exc: Exception) -> HTTPException:
    """Translate a service-layer exception into the matching HTTP error."""
    if isinstance(exc, ValidationError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.errors(include_url=False, include_context=False, include_input=False),
        )
    if isinstance(exc, AllocationConflict):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    if isinstance(exc, PermissionError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc) or "Forbidden")
    if isinstance(exc, LookupError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc) or "Not found")
    if isinstance(exc, ValueError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    logger.exception("unhandled_service_error: %s", exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


def require_permission(user: schemas.User, permission: str, detail: str = "Forbidden") -> None:
    if not get_role_permissions(user.role).get(permission, False):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
