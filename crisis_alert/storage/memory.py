"""
In-memory storage backend.

Each collection is a dict keyed by id holding schema objects. Reads hand out
deep copies so callers can never mutate stored state, and a re-entrant lock
serializes writers coming from the FastAPI threadpool.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional, TypeVar

from pydantic import BaseModel

from crisis_alert.db import schemas
from crisis_alert.db.models import new_id, now_utc
from crisis_alert.storage import seed as seed_data
from crisis_alert.storage.base import Storage

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def _copy(item: Optional[T]) -> Optional[T]:
    return item.model_copy(deep=True) if item is not None else None


def _merge(current: T, updates: BaseModel, **extra: Any) -> T:
    """Shallow-merge the fields explicitly set on ``updates`` into ``current``."""
    data = current.model_dump()
    data.update(updates.model_dump(exclude_unset=True))
    data.update(extra)
    return type(current).model_validate(data)


class MemStorage(Storage):
    def __init__(self, seed: bool = True):
        self._lock = threading.RLock()
        self.users: Dict[str, schemas.UserRecord] = {}
        self.incidents: Dict[str, schemas.Incident] = {}
        self.resources: Dict[str, schemas.Resource] = {}
        self.resource_allocations: Dict[str, schemas.ResourceAllocation] = {}
        self.alerts: Dict[str, schemas.Alert] = {}
        self.notifications: Dict[str, schemas.Notification] = {}
        self.analytics: Dict[str, schemas.Analytics] = {}

        if seed:
            self._initialize_mock_data()

    def _initialize_mock_data(self) -> None:
        for user in seed_data.mock_users():
            self.users[user.id] = user
        for incident in seed_data.mock_incidents():
            self.incidents[incident.id] = incident
        for resource in seed_data.mock_resources():
            self.resources[resource.id] = resource
        logger.debug(
            "memstorage_seeded: users=%d incidents=%d resources=%d",
            len(self.users), len(self.incidents), len(self.resources),
        )

    # Users
    def get_user(self, user_id: str) -> Optional[schemas.UserRecord]:
        with self._lock:
            return _copy(self.users.get(user_id))

    def get_user_by_username(self, username: str) -> Optional[schemas.UserRecord]:
        with self._lock:
            return _copy(next((u for u in self.users.values() if u.username == username), None))

    def get_user_by_email(self, email: str) -> Optional[schemas.UserRecord]:
        with self._lock:
            return _copy(next((u for u in self.users.values() if u.email == email), None))

    def get_users(self, role: Optional[str] = None) -> List[schemas.UserRecord]:
        with self._lock:
            return [_copy(u) for u in self.users.values() if role is None or u.role == role]

    def _ensure_unique_user(self, username: Optional[str], email: Optional[str], exclude_id: Optional[str] = None) -> None:
        for u in self.users.values():
            if u.id == exclude_id:
                continue
            if username is not None and u.username == username:
                raise ValueError(f"Username '{username}' already exists")
            if email is not None and u.email == email:
                raise ValueError(f"Email '{email}' already exists")

    def create_user(self, user: schemas.UserCreate) -> schemas.UserRecord:
        with self._lock:
            self._ensure_unique_user(user.username, user.email)
            record = schemas.UserRecord(
                **user.model_dump(),
                id=new_id(),
                created_at=now_utc(),
            )
            self.users[record.id] = record
            return _copy(record)

    def update_user(self, user_id: str, user: schemas.UserUpdate) -> Optional[schemas.UserRecord]:
        with self._lock:
            current = self.users.get(user_id)
            if current is None:
                return None
            self._ensure_unique_user(None, user.email if "email" in user.model_fields_set else None, exclude_id=user_id)
            updated = _merge(current, user)
            self.users[user_id] = updated
            return _copy(updated)

    # Incidents
    def get_incidents(self) -> List[schemas.Incident]:
        with self._lock:
            return [_copy(i) for i in self.incidents.values()]

    def get_incident(self, incident_id: str) -> Optional[schemas.Incident]:
        with self._lock:
            return _copy(self.incidents.get(incident_id))

    def create_incident(self, incident: schemas.IncidentCreate) -> schemas.Incident:
        now = now_utc()
        record = schemas.Incident(
            **incident.model_dump(),
            id=new_id(),
            created_at=now,
            updated_at=now,
            resolved_at=None,
        )
        with self._lock:
            self.incidents[record.id] = record
        return _copy(record)

    def update_incident(self, incident_id: str, incident: schemas.IncidentUpdate) -> Optional[schemas.Incident]:
        with self._lock:
            current = self.incidents.get(incident_id)
            if current is None:
                return None
            now = now_utc()
            resolved_at = now if incident.status == 'resolved' else current.resolved_at
            updated = _merge(current, incident, updated_at=now, resolved_at=resolved_at)
            self.incidents[incident_id] = updated
            return _copy(updated)

    def delete_incident(self, incident_id: str) -> bool:
        with self._lock:
            return self.incidents.pop(incident_id, None) is not None

    # Resources
    def get_resources(self) -> List[schemas.Resource]:
        with self._lock:
            return [_copy(r) for r in self.resources.values()]

    def get_resource(self, resource_id: str) -> Optional[schemas.Resource]:
        with self._lock:
            return _copy(self.resources.get(resource_id))

    def create_resource(self, resource: schemas.ResourceCreate) -> schemas.Resource:
        now = now_utc()
        record = schemas.Resource(**resource.model_dump(), id=new_id(), created_at=now, updated_at=now)
        with self._lock:
            self.resources[record.id] = record
        return _copy(record)

    def update_resource(self, resource_id: str, resource: schemas.ResourceUpdate) -> Optional[schemas.Resource]:
        with self._lock:
            current = self.resources.get(resource_id)
            if current is None:
                return None
            updated = _merge(current, resource, updated_at=now_utc())
            self.resources[resource_id] = updated
            return _copy(updated)

    def delete_resource(self, resource_id: str) -> bool:
        with self._lock:
            return self.resources.pop(resource_id, None) is not None

    # Resource allocations
    def get_resource_allocations(self) -> List[schemas.ResourceAllocation]:
        with self._lock:
            return [_copy(a) for a in self.resource_allocations.values()]

    def get_resource_allocation(self, allocation_id: str) -> Optional[schemas.ResourceAllocation]:
        with self._lock:
            return _copy(self.resource_allocations.get(allocation_id))

    def create_resource_allocation(self, allocation: schemas.ResourceAllocationCreate) -> schemas.ResourceAllocation:
        record = schemas.ResourceAllocation(
            **allocation.model_dump(),
            id=new_id(),
            allocated_at=now_utc(),
            returned_at=None,
        )
        with self._lock:
            self.resource_allocations[record.id] = record
        return _copy(record)

    def update_resource_allocation(
        self, allocation_id: str, allocation: schemas.ResourceAllocationUpdate
    ) -> Optional[schemas.ResourceAllocation]:
        with self._lock:
            current = self.resource_allocations.get(allocation_id)
            if current is None:
                return None
            updated = _merge(current, allocation)
            self.resource_allocations[allocation_id] = updated
            return _copy(updated)

    # Alerts
    def get_alerts(self) -> List[schemas.Alert]:
        with self._lock:
            return [_copy(a) for a in self.alerts.values()]

    def get_alert(self, alert_id: str) -> Optional[schemas.Alert]:
        with self._lock:
            return _copy(self.alerts.get(alert_id))

    def create_alert(self, alert: schemas.AlertCreate) -> schemas.Alert:
        record = schemas.Alert(**alert.model_dump(), id=new_id(), created_at=now_utc())
        with self._lock:
            self.alerts[record.id] = record
        return _copy(record)

    def update_alert(self, alert_id: str, alert: schemas.AlertUpdate) -> Optional[schemas.Alert]:
        with self._lock:
            current = self.alerts.get(alert_id)
            if current is None:
                return None
            updated = _merge(current, alert)
            self.alerts[alert_id] = updated
            return _copy(updated)

    # Notifications
    def get_notifications(self, user_id: str) -> List[schemas.Notification]:
        with self._lock:
            items = [_copy(n) for n in self.notifications.values() if n.user_id == user_id]
        # newest first; later inserts win timestamp ties
        return sorted(reversed(items), key=lambda n: n.created_at, reverse=True)

    def create_notification(self, notification: schemas.NotificationCreate) -> schemas.Notification:
        record = schemas.Notification(**notification.model_dump(), id=new_id(), created_at=now_utc())
        with self._lock:
            self.notifications[record.id] = record
        return _copy(record)

    def mark_notification_read(self, notification_id: str) -> bool:
        with self._lock:
            current = self.notifications.get(notification_id)
            if current is None:
                return False
            self.notifications[notification_id] = current.model_copy(update={"read": True})
            return True

    # Analytics
    def get_analytics(self, analytics_type: Optional[str] = None, period: Optional[str] = None) -> List[schemas.Analytics]:
        with self._lock:
            entries = [_copy(a) for a in self.analytics.values()]
        if analytics_type:
            entries = [a for a in entries if a.type == analytics_type]
        if period:
            entries = [a for a in entries if a.period == period]
        return entries

    def create_analytics_entry(self, analytics_type: str, data: Dict[str, Any], period: str) -> schemas.Analytics:
        record = schemas.Analytics(
            id=new_id(),
            type=analytics_type,
            data=data,
            period=period,
            created_at=now_utc(),
        )
        with self._lock:
            self.analytics[record.id] = record
        return _copy(record)
