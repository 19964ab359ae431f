"""
Storage interface shared by the in-memory and database backends.

Every method is synchronous and returns pydantic schema objects. Lookups of
unknown ids return ``None`` (or ``False`` for deletes/flags) rather than
raising; duplicate usernames or emails raise ``ValueError``.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from crisis_alert.db import schemas


class Storage(ABC):
    """CRUD over the seven dashboard collections."""

    # Users
    @abstractmethod
    def get_user(self, user_id: str) -> Optional[schemas.UserRecord]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[schemas.UserRecord]: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[schemas.UserRecord]: ...

    @abstractmethod
    def get_users(self, role: Optional[str] = None) -> List[schemas.UserRecord]: ...

    @abstractmethod
    def create_user(self, user: schemas.UserCreate) -> schemas.UserRecord: ...

    @abstractmethod
    def update_user(self, user_id: str, user: schemas.UserUpdate) -> Optional[schemas.UserRecord]: ...

    # Incidents
    @abstractmethod
    def get_incidents(self) -> List[schemas.Incident]: ...

    @abstractmethod
    def get_incident(self, incident_id: str) -> Optional[schemas.Incident]: ...

    @abstractmethod
    def create_incident(self, incident: schemas.IncidentCreate) -> schemas.Incident: ...

    @abstractmethod
    def update_incident(self, incident_id: str, incident: schemas.IncidentUpdate) -> Optional[schemas.Incident]: ...

    @abstractmethod
    def delete_incident(self, incident_id: str) -> bool: ...

    # Resources
    @abstractmethod
    def get_resources(self) -> List[schemas.Resource]: ...

    @abstractmethod
    def get_resource(self, resource_id: str) -> Optional[schemas.Resource]: ...

    @abstractmethod
    def create_resource(self, resource: schemas.ResourceCreate) -> schemas.Resource: ...

    @abstractmethod
    def update_resource(self, resource_id: str, resource: schemas.ResourceUpdate) -> Optional[schemas.Resource]: ...

    @abstractmethod
    def delete_resource(self, resource_id: str) -> bool: ...

    # Resource allocations
    @abstractmethod
    def get_resource_allocations(self) -> List[schemas.ResourceAllocation]: ...

    @abstractmethod
    def get_resource_allocation(self, allocation_id: str) -> Optional[schemas.ResourceAllocation]: ...

    @abstractmethod
    def create_resource_allocation(self, allocation: schemas.ResourceAllocationCreate) -> schemas.ResourceAllocation: ...

    @abstractmethod
    def update_resource_allocation(
        self, allocation_id: str, allocation: schemas.ResourceAllocationUpdate
    ) -> Optional[schemas.ResourceAllocation]: ...

    # Alerts
    @abstractmethod
    def get_alerts(self) -> List[schemas.Alert]: ...

    @abstractmethod
    def get_alert(self, alert_id: str) -> Optional[schemas.Alert]: ...

    @abstractmethod
    def create_alert(self, alert: schemas.AlertCreate) -> schemas.Alert: ...

    @abstractmethod
    def update_alert(self, alert_id: str, alert: schemas.AlertUpdate) -> Optional[schemas.Alert]: ...

    # Notifications
    @abstractmethod
    def get_notifications(self, user_id: str) -> List[schemas.Notification]: ...

    @abstractmethod
    def create_notification(self, notification: schemas.NotificationCreate) -> schemas.Notification: ...

    @abstractmethod
    def mark_notification_read(self, notification_id: str) -> bool: ...

    # Analytics
    @abstractmethod
    def get_analytics(self, analytics_type: Optional[str] = None, period: Optional[str] = None) -> List[schemas.Analytics]: ...

    @abstractmethod
    def create_analytics_entry(self, analytics_type: str, data: Dict[str, Any], period: str) -> schemas.Analytics: ...
