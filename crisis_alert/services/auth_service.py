"""
Mock authentication: email/password login with auto-registration.

There are no sessions or tokens. A successful login returns the user and the
dashboard route for their role; request identity on later calls comes from
the proxy headers handled in ``crisis_alert.api.deps``.
"""
from __future__ import annotations

import logging
from secrets import token_urlsafe
from typing import Optional, Tuple

from crisis_alert import audit
from crisis_alert.audit import AuditAction, AuditStatus
from crisis_alert.db import schemas
from crisis_alert.storage import Storage, get_storage
from crisis_alert.utils.passwords import hash_password, min_password_length, verify_password
from crisis_alert.utils.roles import dashboard_route, validate_role

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Credentials do not match the stored user."""


class UserExistsError(ValueError):
    """Username or email already registered."""


def _user_view(record: schemas.UserRecord) -> schemas.User:
    return schemas.User.model_validate(record.model_dump(exclude={'password'}))


class AuthService:
    def __init__(self, storage: Optional[Storage] = None):
        self.storage = storage or get_storage()

    @staticmethod
    def validate_credentials(email: str, password: str) -> None:
        if not email or not email.strip() or not password:
            raise ValueError("Email and password are required")
        minimum = min_password_length()
        if len(password) < minimum:
            raise ValueError(f"Password must be at least {minimum} characters")

    def register(self, user: schemas.UserCreate) -> schemas.User:
        self.validate_credentials(user.email, user.password)
        if self.storage.get_user_by_username(user.username) or self.storage.get_user_by_email(user.email):
            raise UserExistsError("Username or email already registered")
        to_store = user.model_copy(update={'password': hash_password(user.password)})
        try:
            record = self.storage.create_user(to_store)
        except ValueError as e:
            raise UserExistsError(str(e)) from e
        audit.log(
            action=AuditAction.USER_REGISTER,
            target_type="user",
            target_id=record.id,
            actor_user_id=record.id,
            metadata={"role": record.role},
        )
        return _user_view(record)

    def login(self, request: schemas.LoginRequest) -> schemas.LoginResponse:
        """
        Log in by email, registering unknown emails with the requested role.

        Raises:
            ValueError: missing or too-short credentials
            AuthenticationError: wrong password for an existing user
            PermissionError: existing user asked for a different role
        """
        email = request.email.strip().lower()
        self.validate_credentials(email, request.password)
        role = validate_role(request.role)

        existing = self.storage.get_user_by_email(email)
        if existing is not None:
            if not verify_password(request.password, existing.password):
                audit.log(
                    action=AuditAction.USER_LOGIN,
                    status=AuditStatus.FAILURE,
                    target_type="user",
                    target_id=existing.id,
                    metadata={"reason": "bad_password"},
                )
                raise AuthenticationError("Invalid email or password")
            if existing.role != role:
                raise PermissionError(f"This account is registered as '{existing.role}', not '{role}'")
            user, created = _user_view(existing), False
        else:
            user, created = self._auto_register(email, request.password, role)

        audit.log(
            action=AuditAction.USER_LOGIN,
            target_type="user",
            target_id=user.id,
            actor_user_id=user.id,
            metadata={"created": created},
        )
        return schemas.LoginResponse(user=user, dashboard=dashboard_route(user.role), created=created)

    def _auto_register(self, email: str, password: str, role: str) -> Tuple[schemas.User, bool]:
        logger.info("auth_auto_register: role=%s", role)
        user = self.register(
            schemas.UserCreate(
                username=email,
                email=email,
                name=email.split('@', 1)[0] or email,
                role=role,
                password=password,
            )
        )
        return user, True

    def get_or_create_user(self, email: str, name: Optional[str] = None) -> schemas.User:
        """Resolve a proxy-authenticated email, provisioning a citizen on first sight."""
        existing = self.storage.get_user_by_email(email)
        if existing is not None:
            return _user_view(existing)
        logger.info("auth_provision_citizen")
        # proxy users never log in with a password; store an unusable random hash
        try:
            record = self.storage.create_user(
                schemas.UserCreate(
                    username=email,
                    email=email,
                    name=name or email.split('@', 1)[0] or email,
                    role='citizen',
                    password=hash_password(token_urlsafe(32)),
                )
            )
        except ValueError:
            # lost a race with a concurrent request for the same email
            existing = self.storage.get_user_by_email(email)
            if existing is None:
                raise
            return _user_view(existing)
        return _user_view(record)
