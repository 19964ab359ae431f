"""
Domain-split SQLAlchemy models.

Exposes `Base`, the timestamp/id helpers and every ORM class from one place.
"""

from .base import Base, JsonColumn, now_utc, new_id  # re-export

from .users import User
from .incidents import Incident
from .resources import Resource, ResourceAllocation
from .alerts import Alert
from .notifications import Notification
from .analytics import AnalyticsEntry

__all__ = [
    # base
    "Base",
    "JsonColumn",
    "now_utc",
    "new_id",
    # users
    "User",
    # incidents
    "Incident",
    # resources
    "Resource",
    "ResourceAllocation",
    # alerts/notifications
    "Alert",
    "Notification",
    # analytics
    "AnalyticsEntry",
]
