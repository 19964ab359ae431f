"""
Domain-split Pydantic schemas with a single aggregator.
"""

from .common import (
    UtcDatetime,
    Role,
    IncidentStatus,
    Level,
    ResourceType,
    ResourceStatus,
    AllocationStatus,
    AlertType,
    AnalyticsType,
    AnalyticsPeriod,
    Location,
    PartialUpdate,
)
from .users import (
    UserBase,
    UserCreate,
    UserUpdate,
    ProfileUpdate,
    User,
    UserRecord,
    LoginRequest,
    LoginResponse,
)
from .incidents import (
    IncidentBase,
    IncidentCreate,
    IncidentReport,
    IncidentUpdate,
    IncidentAssign,
    Incident,
)
from .resources import (
    ResourceBase,
    ResourceCreate,
    ResourceUpdate,
    Resource,
    ResourceAllocationBase,
    ResourceAllocationCreate,
    ResourceAllocationUpdate,
    AllocationUpdate,
    ResourceAllocation,
    AllocationRequest,
)
from .alerts import (
    AlertBase,
    AlertCreate,
    AlertBroadcast,
    AlertUpdate,
    Alert,
    AlertBroadcastResponse,
)
from .notifications import (
    NotificationBase,
    NotificationCreate,
    Notification,
    NotificationListResponse,
)
from .analytics import AnalyticsCreate, Analytics, SnapshotRequest, SnapshotResponse
from .dashboards import (
    ChartDatum,
    CitizenDashboard,
    CoordinatorStats,
    CoordinatorDashboard,
    AgencyStats,
    AgencyDashboard,
)

__all__ = [
    # Common
    "UtcDatetime",
    "Role",
    "IncidentStatus",
    "Level",
    "ResourceType",
    "ResourceStatus",
    "AllocationStatus",
    "AlertType",
    "AnalyticsType",
    "AnalyticsPeriod",
    "Location",
    "PartialUpdate",
    # Users
    "UserBase",
    "UserCreate",
    "UserUpdate",
    "ProfileUpdate",
    "User",
    "UserRecord",
    "LoginRequest",
    "LoginResponse",
    # Incidents
    "IncidentBase",
    "IncidentCreate",
    "IncidentReport",
    "IncidentUpdate",
    "IncidentAssign",
    "Incident",
    # Resources
    "ResourceBase",
    "ResourceCreate",
    "ResourceUpdate",
    "Resource",
    "ResourceAllocationBase",
    "ResourceAllocationCreate",
    "ResourceAllocationUpdate",
    "AllocationUpdate",
    "ResourceAllocation",
    "AllocationRequest",
    # Alerts
    "AlertBase",
    "AlertCreate",
    "AlertBroadcast",
    "AlertUpdate",
    "Alert",
    "AlertBroadcastResponse",
    # Notifications
    "NotificationBase",
    "NotificationCreate",
    "Notification",
    "NotificationListResponse",
    # Analytics
    "AnalyticsCreate",
    "Analytics",
    "SnapshotRequest",
    "SnapshotResponse",
    # Dashboards
    "ChartDatum",
    "CitizenDashboard",
    "CoordinatorStats",
    "CoordinatorDashboard",
    "AgencyStats",
    "AgencyDashboard",
]
