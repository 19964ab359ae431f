"""
Incident service: reporting, triage, assignment and deletion.

Permission checks follow the role matrix in ``crisis_alert.utils.roles`` plus
the reporter rules for incidents that are still ``reported``.
"""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from crisis_alert import audit
from crisis_alert.audit import AuditAction
from crisis_alert.db import schemas
from crisis_alert.services.notification_service import NotificationService
from crisis_alert.storage import Storage, get_storage
from crisis_alert.utils.roles import (
    PERM_MANAGE_INCIDENTS,
    PERM_REPORT_INCIDENT,
    PERM_WORK_ASSIGNED_INCIDENTS,
    ROLE_AGENCY,
    role_allows,
)

logger = logging.getLogger(__name__)

# Fields a reporter may still change while the incident is untouched
REPORTER_EDITABLE_FIELDS = frozenset({'title', 'description', 'location', 'images'})
# Fields an assigned responder may change
RESPONDER_EDITABLE_FIELDS = frozenset({'status'})

ASSIGNABLE_STATUSES = frozenset({'reported', 'acknowledged', 'in-progress'})


def parse_status_filter(value: Optional[str]) -> Optional[List[str]]:
    """Split a comma-separated ``status`` query value; ``None`` when empty."""
    if not value:
        return None
    statuses = [s.strip() for s in value.split(',') if s.strip()]
    return statuses or None


def organization_members(storage: Storage, organization: Optional[str]) -> Tuple[List[str], List[str]]:
    """User ids (any role) and resource ids belonging to ``organization``."""
    if not organization:
        return [], []
    user_ids = [u.id for u in storage.get_users() if u.organization == organization]
    resource_ids = [r.id for r in storage.get_resources() if r.organization == organization]
    return user_ids, resource_ids


def incident_matches_agency(
    incident: schemas.Incident,
    user: schemas.User,
    org_user_ids: Iterable[str] = (),
    org_resource_ids: Iterable[str] = (),
) -> bool:
    """True when the incident is assigned to the user or to someone/something in their organization."""
    if not incident.assigned_to:
        return False
    if incident.assigned_to == user.id:
        return True
    if not user.organization:
        return False
    return incident.assigned_to in set(org_user_ids) or incident.assigned_to in set(org_resource_ids)


class IncidentService:
    """Service class for incident operations."""

    def __init__(self, storage: Optional[Storage] = None, notification_service: Optional[NotificationService] = None):
        self.storage = storage or get_storage()
        self.notification_service = notification_service or NotificationService(self.storage)

    def list_incidents(
        self,
        statuses: Optional[List[str]] = None,
        category: Optional[str] = None,
        reported_by: Optional[str] = None,
    ) -> List[schemas.Incident]:
        incidents = self.storage.get_incidents()
        if statuses:
            incidents = [i for i in incidents if i.status in statuses]
        if category:
            incidents = [i for i in incidents if i.category == category]
        if reported_by:
            incidents = [i for i in incidents if i.reported_by == reported_by]
        return incidents

    def get_incident(self, incident_id: str) -> schemas.Incident:
        incident = self.storage.get_incident(incident_id)
        if incident is None:
            raise LookupError("Incident not found")
        return incident

    def report_incident(self, user: schemas.User, report: schemas.IncidentReport) -> schemas.Incident:
        if not role_allows(user.role, PERM_REPORT_INCIDENT):
            raise PermissionError("Your role cannot report incidents")
        incident = self.storage.create_incident(
            schemas.IncidentCreate(
                **report.model_dump(),
                status='reported',
                reported_by=user.id,
                assigned_to=None,
            )
        )
        audit.log_incident(
            actor_user_id=user.id,
            incident_id=incident.id,
            action=AuditAction.INCIDENT_REPORT,
            metadata={"category": incident.category, "priority": incident.priority},
        )
        return incident

    def is_assigned_to(self, incident: schemas.Incident, user: schemas.User) -> bool:
        if incident.assigned_to == user.id:
            return True
        if user.role != ROLE_AGENCY or not user.organization:
            return False
        org_user_ids, org_resource_ids = organization_members(self.storage, user.organization)
        return incident_matches_agency(incident, user, org_user_ids, org_resource_ids)

    def _check_update_allowed(self, user: schemas.User, incident: schemas.Incident, fields: set) -> None:
        if role_allows(user.role, PERM_MANAGE_INCIDENTS):
            return
        if (
            role_allows(user.role, PERM_WORK_ASSIGNED_INCIDENTS)
            and self.is_assigned_to(incident, user)
            and fields <= RESPONDER_EDITABLE_FIELDS
        ):
            return
        if (
            incident.reported_by == user.id
            and incident.status == 'reported'
            and fields <= REPORTER_EDITABLE_FIELDS
        ):
            return
        raise PermissionError("You are not allowed to make this change to the incident")

    def update_incident(self, user: schemas.User, incident_id: str, update: schemas.IncidentUpdate) -> schemas.Incident:
        current = self.get_incident(incident_id)
        fields = set(update.model_dump(exclude_unset=True).keys())
        if not fields:
            return current
        self._check_update_allowed(user, current, fields)

        updated = self.storage.update_incident(incident_id, update)
        if updated is None:
            raise LookupError("Incident not found")
        audit.log_incident(
            actor_user_id=user.id,
            incident_id=incident_id,
            action=AuditAction.INCIDENT_UPDATE,
            metadata={"fields": sorted(fields)},
        )
        self.notification_service.notify_incident_status_change(updated, current.status, user.id)
        if updated.assigned_to and updated.assigned_to != current.assigned_to:
            self.notification_service.notify_incident_assigned(updated, user.id)
        return updated

    def assign_incident(self, user: schemas.User, incident_id: str, request: schemas.IncidentAssign) -> schemas.Incident:
        """
        Assign an incident and move it out of ``reported``.

        Agencies may only assign themselves; coordinators may assign any user
        or resource id (defaulting to themselves).
        """
        current = self.get_incident(incident_id)
        if current.status not in ASSIGNABLE_STATUSES:
            raise ValueError(f"Cannot assign an incident that is {current.status}")

        if role_allows(user.role, PERM_MANAGE_INCIDENTS):
            assignee = request.assigned_to or user.id
            if self.storage.get_user(assignee) is None and self.storage.get_resource(assignee) is None:
                raise LookupError(f"Assignee '{assignee}' not found")
        elif role_allows(user.role, PERM_WORK_ASSIGNED_INCIDENTS):
            if request.assigned_to not in (None, user.id):
                raise PermissionError("Agencies can only assign incidents to themselves")
            assignee = user.id
        else:
            raise PermissionError("Your role cannot assign incidents")

        changes = {'assigned_to': assignee}
        if current.status == 'reported':
            changes['status'] = 'acknowledged'
        updated = self.storage.update_incident(incident_id, schemas.IncidentUpdate(**changes))
        if updated is None:
            raise LookupError("Incident not found")

        audit.log_incident(
            actor_user_id=user.id,
            incident_id=incident_id,
            action=AuditAction.INCIDENT_ASSIGN,
            metadata={"assigned_to": assignee},
        )
        self.notification_service.notify_incident_status_change(updated, current.status, user.id)
        if assignee != current.assigned_to:
            self.notification_service.notify_incident_assigned(updated, user.id)
        return updated

    def delete_incident(self, user: schemas.User, incident_id: str) -> None:
        current = self.get_incident(incident_id)
        own_untouched = current.reported_by == user.id and current.status == 'reported'
        if not role_allows(user.role, PERM_MANAGE_INCIDENTS) and not own_untouched:
            raise PermissionError("You are not allowed to delete this incident")
        if not self.storage.delete_incident(incident_id):
            raise LookupError("Incident not found")
        audit.log_incident(actor_user_id=user.id, incident_id=incident_id, action=AuditAction.INCIDENT_DELETE)
