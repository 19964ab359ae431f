from typing import List, Optional

from pydantic import BaseModel, ConfigDict

from .common import IncidentStatus, Level, Location, PartialUpdate, UtcDatetime


class IncidentBase(BaseModel):
    title: str
    description: str
    category: str
    severity: Level
    priority: Level = 'medium'
    status: IncidentStatus = 'reported'
    location: Location
    reported_by: str
    assigned_to: Optional[str] = None
    images: Optional[List[str]] = None


class IncidentCreate(IncidentBase):
    pass


class IncidentReport(BaseModel):
    """Payload a user submits; the reporter and status are filled in server-side."""
    title: str
    description: str
    category: str = 'other'
    severity: Level = 'medium'
    priority: Level = 'medium'
    location: Location
    images: Optional[List[str]] = None


class IncidentUpdate(PartialUpdate):
    required_fields = frozenset({'title', 'description', 'category', 'severity', 'priority', 'status', 'location'})

    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    severity: Optional[Level] = None
    priority: Optional[Level] = None
    status: Optional[IncidentStatus] = None
    location: Optional[Location] = None
    assigned_to: Optional[str] = None
    images: Optional[List[str]] = None


class IncidentAssign(BaseModel):
    assigned_to: Optional[str] = None


class Incident(IncidentBase):
    id: str
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None
    resolved_at: Optional[UtcDatetime] = None
    model_config = ConfigDict(from_attributes=True)
