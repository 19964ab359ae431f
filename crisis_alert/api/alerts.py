"""
Alert API endpoints.

Broadcasting an alert fans out in-app notifications to the targeted roles and
users (see ``NotificationService.broadcast_alert``).
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from crisis_alert import audit
from crisis_alert.api.deps import get_current_user_context, require_permission
from crisis_alert.audit import AuditAction
from crisis_alert.db import schemas
from crisis_alert.services.dashboard_service import alert_is_active
from crisis_alert.services.notification_service import DEFAULT_ALERT_TARGETS, NotificationService
from crisis_alert.storage import get_storage
from crisis_alert.utils.roles import PERM_BROADCAST_ALERTS

router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.get("", response_model=List[schemas.Alert])
def list_alerts(active_only: bool = False):
    alerts = get_storage().get_alerts()
    if active_only:
        alerts = [a for a in alerts if alert_is_active(a)]
    return alerts


@router.get("/{alert_id}", response_model=schemas.Alert)
def get_alert(alert_id: str):
    alert = get_storage().get_alert(alert_id)
    if alert is None:
        raise HTTPException(status_code=404, detail="Alert not found")
    return alert


@router.post("", response_model=schemas.AlertBroadcastResponse, status_code=status.HTTP_201_CREATED)
def broadcast_alert(
    payload: schemas.AlertBroadcast,
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    require_permission(user, PERM_BROADCAST_ALERTS, detail="Only coordinators can broadcast alerts")
    storage = get_storage()
    if payload.incident_id and storage.get_incident(payload.incident_id) is None:
        raise HTTPException(status_code=404, detail="Incident not found")

    data = payload.model_dump()
    data['target_users'] = payload.target_users or list(DEFAULT_ALERT_TARGETS)
    alert = storage.create_alert(schemas.AlertCreate(**data, created_by=user.id))
    notified = NotificationService(storage).broadcast_alert(alert)
    audit.log(
        action=AuditAction.ALERT_BROADCAST,
        target_type="alert",
        target_id=alert.id,
        actor_user_id=user.id,
        metadata={"type": alert.type, "recipients": len(notified)},
    )
    return schemas.AlertBroadcastResponse(alert=alert, notified_user_ids=notified)


@router.patch("/{alert_id}", response_model=schemas.Alert)
def update_alert(
    alert_id: str,
    payload: schemas.AlertUpdate,
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    require_permission(user, PERM_BROADCAST_ALERTS, detail="Only coordinators can edit alerts")
    alert = get_storage().update_alert(alert_id, payload)
    if alert is None:
        raise HTTPException(status_code=404, detail="Alert not found")
    audit.log(
        action=AuditAction.ALERT_UPDATE,
        target_type="alert",
        target_id=alert_id,
        actor_user_id=user.id,
        metadata={"fields": sorted(payload.model_dump(exclude_unset=True))},
    )
    return alert
