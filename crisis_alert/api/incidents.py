"""
Incident API endpoints.

Reads are open to guests; writes go through ``IncidentService`` which applies
the role matrix and reporter rules.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, status

from crisis_alert.api.deps import get_current_user_context, to_http_exception
from crisis_alert.db import schemas
from crisis_alert.services.incident_service import IncidentService, parse_status_filter

router = APIRouter(prefix="/incidents", tags=["incidents"])


@router.get("", response_model=List[schemas.Incident])
def list_incidents(
    status: Optional[str] = None,
    category: Optional[str] = None,
    reported_by: Optional[str] = None,
):
    """
    List incidents.

    - **status**: comma-separated statuses, e.g. ``reported,acknowledged``
    - **category** / **reported_by**: equality filters
    """
    return IncidentService().list_incidents(
        statuses=parse_status_filter(status),
        category=category,
        reported_by=reported_by,
    )


@router.get("/{incident_id}", response_model=schemas.Incident)
def get_incident(incident_id: str):
    try:
        return IncidentService().get_incident(incident_id)
    except LookupError as e:
        raise to_http_exception(e)


@router.post("", response_model=schemas.Incident, status_code=status.HTTP_201_CREATED)
def report_incident(
    payload: schemas.IncidentReport,
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    try:
        return IncidentService().report_incident(user, payload)
    except (ValueError, PermissionError) as e:
        raise to_http_exception(e)


@router.patch("/{incident_id}", response_model=schemas.Incident)
def update_incident(
    incident_id: str,
    payload: schemas.IncidentUpdate,
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    try:
        return IncidentService().update_incident(user, incident_id, payload)
    except (ValueError, PermissionError, LookupError) as e:
        raise to_http_exception(e)


@router.post("/{incident_id}/assign", response_model=schemas.Incident)
def assign_incident(
    incident_id: str,
    payload: Optional[schemas.IncidentAssign] = None,
    user_context=Depends(get_current_user_context),
):
    """Assign an incident; agencies assign themselves, coordinators may name an assignee."""
    user, _ctx = user_context
    try:
        return IncidentService().assign_incident(user, incident_id, payload or schemas.IncidentAssign())
    except (ValueError, PermissionError, LookupError) as e:
        raise to_http_exception(e)


@router.delete("/{incident_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_incident(
    incident_id: str,
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    try:
        IncidentService().delete_incident(user, incident_id)
    except (ValueError, PermissionError, LookupError) as e:
        raise to_http_exception(e)
