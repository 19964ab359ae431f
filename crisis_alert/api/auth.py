"""
Authentication endpoints and identity resolution.

Login is the mock email/password flow; every other request is identified by
the oauth2-proxy headers (see ``crisis_alert.api.deps``).
"""
import logging
from typing import Optional, Tuple

from fastapi import APIRouter, HTTPException, status

from crisis_alert.db import schemas
from crisis_alert.services.auth_service import AuthenticationError, AuthService, UserExistsError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def _normalize_email(email: Optional[str]) -> Optional[str]:
    if not email:
        return None
    return email.strip().lower() or None


def resolve_identity_from_headers(
    x_auth_request_user: Optional[str],
    x_auth_request_email: Optional[str],
    x_forwarded_user: Optional[str],
    x_forwarded_email: Optional[str],
) -> Tuple[Optional[str], Optional[str]]:
    user = x_auth_request_user or x_forwarded_user
    email = _normalize_email(x_auth_request_email or x_forwarded_email)
    return user, email


@router.post("/auth/login", response_model=schemas.LoginResponse)
def login(payload: schemas.LoginRequest):
    """
    Mock login.

    - Unknown emails are registered with the requested role.
    - Known emails must match the stored password and role.
    """
    try:
        return AuthService().login(payload)
    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except UserExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/auth/register", response_model=schemas.User, status_code=status.HTTP_201_CREATED)
def register(payload: schemas.UserCreate):
    try:
        return AuthService().register(payload)
    except UserExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

