"""
Audit logging helpers and enums.

Audit records are structured log lines on the ``crisis_alert.audit`` logger
so they can be shipped or filtered separately from application logs.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Optional

audit_logger = logging.getLogger("crisis_alert.audit")


class AuditAction(str, Enum):
    # Auth
    USER_LOGIN = "user_login"
    USER_REGISTER = "user_register"
    USER_UPDATE = "user_update"
    # Incidents
    INCIDENT_REPORT = "incident_report"
    INCIDENT_UPDATE = "incident_update"
    INCIDENT_ASSIGN = "incident_assign"
    INCIDENT_DELETE = "incident_delete"
    # Resources
    RESOURCE_CREATE = "resource_create"
    RESOURCE_UPDATE = "resource_update"
    RESOURCE_DELETE = "resource_delete"
    RESOURCE_ALLOCATE = "resource_allocate"
    RESOURCE_RETURN = "resource_return"
    # Alerts
    ALERT_BROADCAST = "alert_broadcast"
    ALERT_UPDATE = "alert_update"
    # Analytics
    ANALYTICS_SNAPSHOT = "analytics_snapshot"


class AuditStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


def log(
    *,
    action: AuditAction | str,
    status: AuditStatus | str = AuditStatus.SUCCESS,
    target_type: str,
    target_id: Optional[str] = None,
    actor_user_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Central audit logging helper; returns the emitted record."""
    # Plain string values, not Enum reprs (avoid 'AuditAction.XYZ')
    action_value = action.value if isinstance(action, AuditAction) else str(action)
    status_value = status.value if isinstance(status, AuditStatus) else str(status)
    record = {
        "action_type": action_value,
        "status": status_value,
        "target_type": target_type,
        "target_id": target_id,
        "actor_user_id": actor_user_id,
        "metadata": metadata or {},
    }
    level = logging.INFO if status_value == AuditStatus.SUCCESS.value else logging.WARNING
    audit_logger.log(
        level,
        "audit action=%s status=%s target=%s:%s actor=%s metadata=%s",
        action_value, status_value, target_type, target_id, actor_user_id, record["metadata"],
    )
    return record


__all__ = ["AuditAction", "AuditStatus", "log"]


def log_incident(*, actor_user_id: Optional[str], incident_id: str, action: AuditAction, status: AuditStatus | str = AuditStatus.SUCCESS, metadata: Optional[Dict[str, Any]] = None):
    return log(
        action=action,
        status=status,
        target_type="incident",
        target_id=incident_id,
        actor_user_id=actor_user_id,
        metadata=metadata,
    )


def log_resource(*, actor_user_id: Optional[str], resource_id: str, action: AuditAction, status: AuditStatus | str = AuditStatus.SUCCESS, metadata: Optional[Dict[str, Any]] = None):
    return log(
        action=action,
        status=status,
        target_type="resource",
        target_id=resource_id,
        actor_user_id=actor_user_id,
        metadata=metadata,
    )

__all__.extend(["log_incident", "log_resource"])
