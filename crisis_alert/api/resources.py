"""
Resource API endpoints.

Resource inventory is managed by coordinators; agencies see it read-only and
commit it to incidents through ``/allocations``.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from crisis_alert import audit
from crisis_alert.api.deps import get_current_user_context, require_permission
from crisis_alert.audit import AuditAction
from crisis_alert.db import schemas
from crisis_alert.storage import get_storage
from crisis_alert.utils.roles import PERM_MANAGE_RESOURCES

router = APIRouter(prefix="/resources", tags=["resources"])


def _check_counts(quantity: int, available: int) -> None:
    if available > quantity:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="available cannot exceed quantity",
        )


@router.get("", response_model=List[schemas.Resource])
def list_resources(
    organization: Optional[str] = None,
    status: Optional[str] = None,
):
    resources = get_storage().get_resources()
    if organization:
        resources = [r for r in resources if r.organization == organization]
    if status:
        resources = [r for r in resources if r.status == status]
    return resources


@router.get("/{resource_id}", response_model=schemas.Resource)
def get_resource(resource_id: str):
    resource = get_storage().get_resource(resource_id)
    if resource is None:
        raise HTTPException(status_code=404, detail="Resource not found")
    return resource


@router.post("", response_model=schemas.Resource, status_code=status.HTTP_201_CREATED)
def create_resource(
    payload: schemas.ResourceCreate,
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    require_permission(user, PERM_MANAGE_RESOURCES, detail="Only coordinators can manage resources")
    _check_counts(payload.quantity, payload.available)
    resource = get_storage().create_resource(payload)
    audit.log_resource(
        actor_user_id=user.id,
        resource_id=resource.id,
        action=AuditAction.RESOURCE_CREATE,
        metadata={"name": resource.name, "organization": resource.organization},
    )
    return resource


@router.patch("/{resource_id}", response_model=schemas.Resource)
def update_resource(
    resource_id: str,
    payload: schemas.ResourceUpdate,
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    require_permission(user, PERM_MANAGE_RESOURCES, detail="Only coordinators can manage resources")
    storage = get_storage()
    current = storage.get_resource(resource_id)
    if current is None:
        raise HTTPException(status_code=404, detail="Resource not found")
    changes = payload.model_dump(exclude_unset=True)
    _check_counts(changes.get('quantity', current.quantity), changes.get('available', current.available))

    resource = storage.update_resource(resource_id, payload)
    if resource is None:
        raise HTTPException(status_code=404, detail="Resource not found")
    audit.log_resource(
        actor_user_id=user.id,
        resource_id=resource_id,
        action=AuditAction.RESOURCE_UPDATE,
        metadata={"fields": sorted(changes)},
    )
    return resource


@router.delete("/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_resource(
    resource_id: str,
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    require_permission(user, PERM_MANAGE_RESOURCES, detail="Only coordinators can manage resources")
    storage = get_storage()
    outstanding = [
        a for a in storage.get_resource_allocations()
        if a.resource_id == resource_id and a.status == 'allocated'
    ]
    if outstanding:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Resource has {len(outstanding)} outstanding allocation(s)",
        )
    if not storage.delete_resource(resource_id):
        raise HTTPException(status_code=404, detail="Resource not found")
    audit.log_resource(actor_user_id=user.id, resource_id=resource_id, action=AuditAction.RESOURCE_DELETE)
