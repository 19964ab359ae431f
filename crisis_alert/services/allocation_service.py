"""
Resource allocation service.

Allocating commits part of a resource's ``available`` count to an incident;
returning gives it back. Both paths hold a process-wide lock so two requests
cannot oversubscribe the same resource.
"""
from __future__ import annotations

import logging
import threading
from typing import List, Optional

from crisis_alert import audit
from crisis_alert.audit import AuditAction, AuditStatus
from crisis_alert.db import schemas
from crisis_alert.db.models import now_utc
from crisis_alert.storage import Storage, get_storage
from crisis_alert.utils.roles import PERM_ALLOCATE_RESOURCES, PERM_MANAGE_RESOURCES, role_allows

logger = logging.getLogger(__name__)

_allocation_lock = threading.RLock()


class AllocationConflict(ValueError):
    """The requested quantity or state transition conflicts with current stock."""


class AllocationService:
    def __init__(self, storage: Optional[Storage] = None):
        self.storage = storage or get_storage()

    def list_allocations(
        self, incident_id: Optional[str] = None, resource_id: Optional[str] = None
    ) -> List[schemas.ResourceAllocation]:
        allocations = self.storage.get_resource_allocations()
        if incident_id:
            allocations = [a for a in allocations if a.incident_id == incident_id]
        if resource_id:
            allocations = [a for a in allocations if a.resource_id == resource_id]
        return allocations

    def get_allocation(self, allocation_id: str) -> schemas.ResourceAllocation:
        allocation = self.storage.get_resource_allocation(allocation_id)
        if allocation is None:
            raise LookupError("Allocation not found")
        return allocation

    def _check_resource_access(self, user: schemas.User, resource: schemas.Resource) -> None:
        if not role_allows(user.role, PERM_ALLOCATE_RESOURCES):
            raise PermissionError("Your role cannot allocate resources")
        # coordinators span organizations; everyone else is scoped to their own
        if not role_allows(user.role, PERM_MANAGE_RESOURCES) and resource.organization != user.organization:
            raise PermissionError("Resources can only be allocated by their own organization")

    def allocate(self, user: schemas.User, request: schemas.AllocationRequest) -> schemas.ResourceAllocation:
        if not role_allows(user.role, PERM_ALLOCATE_RESOURCES):
            raise PermissionError("Your role cannot allocate resources")
        if request.quantity < 1:
            raise AllocationConflict("Quantity must be at least 1")

        with _allocation_lock:
            resource = self.storage.get_resource(request.resource_id)
            if resource is None:
                raise LookupError("Resource not found")
            if self.storage.get_incident(request.incident_id) is None:
                raise LookupError("Incident not found")
            self._check_resource_access(user, resource)
            if resource.status == 'maintenance':
                raise AllocationConflict(f"Resource '{resource.name}' is under maintenance")
            if request.quantity > resource.available:
                audit.log_resource(
                    actor_user_id=user.id,
                    resource_id=resource.id,
                    action=AuditAction.RESOURCE_ALLOCATE,
                    status=AuditStatus.FAILURE,
                    metadata={"requested": request.quantity, "available": resource.available},
                )
                raise AllocationConflict(
                    f"Only {resource.available} of '{resource.name}' available, requested {request.quantity}"
                )

            allocation = self.storage.create_resource_allocation(
                schemas.ResourceAllocationCreate(
                    resource_id=resource.id,
                    incident_id=request.incident_id,
                    quantity=request.quantity,
                    allocated_by=user.id,
                    status='allocated',
                )
            )
            remaining = resource.available - request.quantity
            changes = {'available': remaining}
            if remaining == 0:
                changes['status'] = 'deployed'
            self.storage.update_resource(resource.id, schemas.ResourceUpdate(**changes))

        audit.log_resource(
            actor_user_id=user.id,
            resource_id=resource.id,
            action=AuditAction.RESOURCE_ALLOCATE,
            metadata={"allocation_id": allocation.id, "incident_id": request.incident_id, "quantity": request.quantity},
        )
        logger.info("resource_allocated: resource=%s remaining=%d", resource.id, remaining)
        return allocation

    def return_allocation(self, user: schemas.User, allocation_id: str) -> schemas.ResourceAllocation:
        with _allocation_lock:
            allocation = self.get_allocation(allocation_id)
            resource = self.storage.get_resource(allocation.resource_id)
            if resource is not None:
                self._check_resource_access(user, resource)
            elif not role_allows(user.role, PERM_ALLOCATE_RESOURCES):
                raise PermissionError("Your role cannot return resources")
            if allocation.status != 'allocated':
                raise AllocationConflict(f"Allocation is already {allocation.status}")

            updated = self.storage.update_resource_allocation(
                allocation_id,
                schemas.ResourceAllocationUpdate(status='returned', returned_at=now_utc()),
            )
            if resource is not None:
                changes = {'available': min(resource.quantity, resource.available + allocation.quantity)}
                if resource.status == 'deployed':
                    changes['status'] = 'available'
                self.storage.update_resource(resource.id, schemas.ResourceUpdate(**changes))
            else:
                logger.warning("allocation_return_orphaned: allocation=%s resource=%s", allocation_id, allocation.resource_id)

        audit.log_resource(
            actor_user_id=user.id,
            resource_id=allocation.resource_id,
            action=AuditAction.RESOURCE_RETURN,
            metadata={"allocation_id": allocation_id, "quantity": allocation.quantity},
        )
        return updated

    def update_allocation(
        self, user: schemas.User, allocation_id: str, update: schemas.AllocationUpdate
    ) -> schemas.ResourceAllocation:
        """
        Write off an outstanding allocation as ``lost``.

        Lost units stay out of ``available``. Returning goes through
        :meth:`return_allocation`, and settled allocations never reopen.
        """
        if not role_allows(user.role, PERM_ALLOCATE_RESOURCES):
            raise PermissionError("Your role cannot update allocations")
        with _allocation_lock:
            current = self.get_allocation(allocation_id)
            resource = self.storage.get_resource(current.resource_id)
            if resource is not None:
                self._check_resource_access(user, resource)
            if current.status != 'allocated':
                raise AllocationConflict(f"Allocation is already {current.status}")
            if update.status != 'lost':
                raise AllocationConflict(f"Cannot move an allocation from allocated to {update.status} here")
            updated = self.storage.update_resource_allocation(
                allocation_id, schemas.ResourceAllocationUpdate(status=update.status)
            )
        if updated is None:
            raise LookupError("Allocation not found")
        return updated
