"""
Notification service: in-app notifications for alerts and incident changes.

Centralizes recipient resolution so alert fan-out and incident hooks share the
same de-duplication rules.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from crisis_alert.db import schemas
from crisis_alert.storage import Storage, get_storage
from crisis_alert.utils.feature_flags import alert_fanout_enabled, status_notifications_enabled
from crisis_alert.utils.roles import ALLOWED_ROLES, ROLE_AGENCY, ROLE_CITIZEN, normalize_role

logger = logging.getLogger(__name__)

# Event type constants (single source of truth for notification.type)
EVENT_ALERT = 'alert'
EVENT_INCIDENT_STATUS = 'incident_status'
EVENT_INCIDENT_ASSIGNED = 'incident_assigned'

DEFAULT_ALERT_TARGETS = [ROLE_CITIZEN, ROLE_AGENCY]

STATUS_LABELS = {
    'reported': 'Reported',
    'acknowledged': 'Acknowledged',
    'in-progress': 'In Progress',
    'resolved': 'Resolved',
}


class NotificationService:
    """Service class for handling all notification operations."""

    def __init__(self, storage: Optional[Storage] = None):
        self.storage = storage or get_storage()

    # === Delivery ===

    def notify_user(
        self,
        user_id: str,
        event_type: str,
        title: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> schemas.Notification:
        return self.storage.create_notification(
            schemas.NotificationCreate(
                user_id=user_id,
                title=title,
                message=message,
                type=event_type,
                data=data,
            )
        )

    def resolve_recipients(self, targets: Iterable[str], exclude: Optional[str] = None) -> List[str]:
        """
        Expand role names and user ids into a de-duplicated list of user ids.

        Unknown targets are skipped. Order follows the targets, then user
        creation order within a role.
        """
        seen = set()
        recipients: List[str] = []

        def _add(user_id: str) -> None:
            if user_id != exclude and user_id not in seen:
                seen.add(user_id)
                recipients.append(user_id)

        for target in targets:
            role = normalize_role(target)
            if role in ALLOWED_ROLES:
                for user in self.storage.get_users(role=role):
                    _add(user.id)
            elif self.storage.get_user(target) is not None:
                _add(target)
            else:
                logger.debug("notification_target_unknown: %s", target)
        return recipients

    def broadcast_alert(self, alert: schemas.Alert) -> List[str]:
        """Create one ``alert`` notification per targeted user; returns their ids."""
        if not alert_fanout_enabled():
            logger.info("alert_fanout_disabled: alert=%s", alert.id)
            return []
        targets = alert.target_users or DEFAULT_ALERT_TARGETS
        recipients = self.resolve_recipients(targets, exclude=alert.created_by)
        data = {"alert_id": alert.id, "incident_id": alert.incident_id}
        for user_id in recipients:
            self.notify_user(user_id, EVENT_ALERT, alert.title, alert.message, data=dict(data))
        logger.info("alert_fanout: alert=%s recipients=%d", alert.id, len(recipients))
        return recipients

    def notify_incident_status_change(
        self,
        incident: schemas.Incident,
        previous_status: str,
        actor_user_id: Optional[str],
    ) -> List[str]:
        """Tell the reporter and the assignee (other than the actor) about a status change."""
        if not status_notifications_enabled() or incident.status == previous_status:
            return []
        label = STATUS_LABELS.get(incident.status, incident.status)
        candidates = [incident.reported_by]
        if incident.assigned_to:
            candidates.append(incident.assigned_to)
        recipients = self._existing_users(candidates, exclude=actor_user_id)
        for user_id in recipients:
            self.notify_user(
                user_id,
                EVENT_INCIDENT_STATUS,
                f"Incident {label}",
                f"'{incident.title}' is now {label.lower()}.",
                data={"incident_id": incident.id, "status": incident.status, "previous_status": previous_status},
            )
        return recipients

    def notify_incident_assigned(self, incident: schemas.Incident, actor_user_id: Optional[str]) -> List[str]:
        if not status_notifications_enabled() or not incident.assigned_to:
            return []
        recipients = self._existing_users([incident.assigned_to], exclude=actor_user_id)
        for user_id in recipients:
            self.notify_user(
                user_id,
                EVENT_INCIDENT_ASSIGNED,
                "Incident Assigned",
                f"You have been assigned to '{incident.title}'.",
                data={"incident_id": incident.id},
            )
        return recipients

    def _existing_users(self, candidates: Iterable[str], exclude: Optional[str]) -> List[str]:
        # assignees may be resource ids; only real users get notifications
        result: List[str] = []
        for user_id in candidates:
            if user_id and user_id != exclude and user_id not in result and self.storage.get_user(user_id):
                result.append(user_id)
        return result

    # === In-App Notification Management ===

    def get_user_notifications(self, user_id: str, unread_only: bool = False) -> schemas.NotificationListResponse:
        """Notifications for ``user_id``, most recent first."""
        notifications = self.storage.get_notifications(user_id)
        unread = [n for n in notifications if not n.read]
        return schemas.NotificationListResponse(
            notifications=unread if unread_only else notifications,
            unread_count=len(unread),
            total_count=len(notifications),
        )

    def mark_as_read(self, notification_id: str, user_id: str) -> None:
        """Mark a notification read; raises LookupError unless ``user_id`` owns it."""
        owned = any(n.id == notification_id for n in self.storage.get_notifications(user_id))
        if not owned or not self.storage.mark_notification_read(notification_id):
            raise LookupError("Notification not found")
