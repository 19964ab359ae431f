from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from crisis_alert.utils.roles import ALLOWED_ROLES, normalize_role

from .common import AlertType, Level, Location, PartialUpdate, UtcDatetime


def normalize_targets(targets: Optional[List[str]]) -> Optional[List[str]]:
    """Canonical role names (authority folds onto coordinator) and trimmed user ids, de-duplicated."""
    if targets is None:
        return None
    result: List[str] = []
    for target in targets:
        value = target.strip()
        role = normalize_role(value)
        value = role if role in ALLOWED_ROLES else value
        if value and value not in result:
            result.append(value)
    return result


class _TargetedAlert(BaseModel):
    @field_validator('target_users', mode='after', check_fields=False)
    @classmethod
    def _canonical_targets(cls, value):
        return normalize_targets(value)


class AlertBase(_TargetedAlert):
    title: str
    message: str
    type: AlertType
    priority: Level
    target_users: Optional[List[str]] = None
    incident_id: Optional[str] = None
    location: Optional[Location] = None
    created_by: str
    expires_at: Optional[UtcDatetime] = None


class AlertCreate(AlertBase):
    pass


class AlertBroadcast(_TargetedAlert):
    title: str
    message: str
    type: AlertType = 'warning'
    priority: Level = 'medium'
    target_users: Optional[List[str]] = None
    incident_id: Optional[str] = None
    location: Optional[Location] = None
    expires_at: Optional[UtcDatetime] = None


class AlertUpdate(PartialUpdate, _TargetedAlert):
    required_fields = frozenset({'title', 'message', 'type', 'priority'})

    title: Optional[str] = None
    message: Optional[str] = None
    type: Optional[AlertType] = None
    priority: Optional[Level] = None
    target_users: Optional[List[str]] = None
    incident_id: Optional[str] = None
    location: Optional[Location] = None
    expires_at: Optional[UtcDatetime] = None


class Alert(AlertBase):
    id: str
    created_at: Optional[UtcDatetime] = None
    model_config = ConfigDict(from_attributes=True)


class AlertBroadcastResponse(BaseModel):
    alert: Alert
    notified_user_ids: List[str]
