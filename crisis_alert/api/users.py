"""
Users API endpoints.

Exposes the caller's profile and a coordinator-only directory used when
assigning incidents.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from crisis_alert import audit
from crisis_alert.api.deps import get_current_user_context, require_permission
from crisis_alert.audit import AuditAction
from crisis_alert.db import schemas
from crisis_alert.storage import get_storage
from crisis_alert.utils.roles import ALLOWED_ROLES, PERM_MANAGE_INCIDENTS, normalize_role

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[schemas.User])
def list_users(
    role: Optional[str] = None,
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    require_permission(user, PERM_MANAGE_INCIDENTS, detail="Only coordinators can list users")
    if role is not None:
        role = normalize_role(role)
        if role not in ALLOWED_ROLES:
            raise HTTPException(status_code=422, detail=f"Unknown role '{role}'")
    return [schemas.User.model_validate(u.model_dump(exclude={'password'})) for u in get_storage().get_users(role=role)]


@router.get("/me", response_model=schemas.User)
def get_me(user_context=Depends(get_current_user_context)):
    user, _ctx = user_context
    return user


@router.patch("/me", response_model=schemas.User)
def update_me(
    payload: schemas.ProfileUpdate,
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    changes = payload.model_dump(exclude_unset=True)
    if not changes:
        return user
    record = get_storage().update_user(user.id, schemas.UserUpdate(**changes))
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    audit.log(
        action=AuditAction.USER_UPDATE,
        target_type="user",
        target_id=user.id,
        actor_user_id=user.id,
        metadata={"fields": sorted(changes)},
    )
    return schemas.User.model_validate(record.model_dump(exclude={'password'}))
