"""
Resource allocation API endpoints.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, status

from crisis_alert.api.deps import get_current_user_context, to_http_exception
from crisis_alert.db import schemas
from crisis_alert.services.allocation_service import AllocationService

router = APIRouter(prefix="/allocations", tags=["allocations"])


@router.get("", response_model=List[schemas.ResourceAllocation])
def list_allocations(
    incident_id: Optional[str] = None,
    resource_id: Optional[str] = None,
):
    return AllocationService().list_allocations(incident_id=incident_id, resource_id=resource_id)


@router.post("", response_model=schemas.ResourceAllocation, status_code=status.HTTP_201_CREATED)
def allocate_resource(
    payload: schemas.AllocationRequest,
    user_context=Depends(get_current_user_context),
):
    """
    Commit ``quantity`` units of a resource to an incident.

    Returns 409 when the resource does not have that many units available.
    """
    user, _ctx = user_context
    try:
        return AllocationService().allocate(user, payload)
    except (ValueError, PermissionError, LookupError) as e:
        raise to_http_exception(e)


@router.post("/{allocation_id}/return", response_model=schemas.ResourceAllocation)
def return_allocation(
    allocation_id: str,
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    try:
        return AllocationService().return_allocation(user, allocation_id)
    except (ValueError, PermissionError, LookupError) as e:
        raise to_http_exception(e)


@router.patch("/{allocation_id}", response_model=schemas.ResourceAllocation)
def update_allocation(
    allocation_id: str,
    payload: schemas.AllocationUpdate,
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    try:
        return AllocationService().update_allocation(user, allocation_id, payload)
    except (ValueError, PermissionError, LookupError) as e:
        raise to_http_exception(e)
