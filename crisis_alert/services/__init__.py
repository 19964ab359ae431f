"""Business logic services package with public service helpers."""

from .allocation_service import AllocationConflict, AllocationService
from .analytics_service import AnalyticsService
from .auth_service import AuthenticationError, AuthService, UserExistsError
from .dashboard_service import DashboardService
from .incident_service import IncidentService
from .notification_service import NotificationService

__all__ = [
    "AllocationConflict",
    "AllocationService",
    "AnalyticsService",
    "AuthenticationError",
    "AuthService",
    "UserExistsError",
    "DashboardService",
    "IncidentService",
    "NotificationService",
]
