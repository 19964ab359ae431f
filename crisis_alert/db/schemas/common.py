"""Shared field types for the API schemas."""
from datetime import datetime, UTC
from typing import Annotated, ClassVar, FrozenSet, Literal, Optional

from pydantic import AfterValidator, BaseModel, model_validator


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops tzinfo on the way back; stored values are always UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]

Role = Literal['citizen', 'coordinator', 'agency']
IncidentStatus = Literal['reported', 'acknowledged', 'in-progress', 'resolved']
Level = Literal['low', 'medium', 'high', 'critical']
ResourceType = Literal['personnel', 'vehicle', 'equipment', 'supplies']
ResourceStatus = Literal['available', 'deployed', 'maintenance']
AllocationStatus = Literal['allocated', 'returned', 'lost']
AlertType = Literal['emergency', 'warning', 'info']
AnalyticsType = Literal['response_time', 'resource_utilization', 'incident_patterns']
AnalyticsPeriod = Literal['daily', 'weekly', 'monthly']


class Location(BaseModel):
    lat: float
    lng: float
    address: Optional[str] = None


class PartialUpdate(BaseModel):
    """
    Base for PATCH payloads.

    Omitted fields are left untouched. Fields named in ``required_fields``
    back NOT NULL columns, so an explicit ``null`` for them is rejected.
    """
    required_fields: ClassVar[FrozenSet[str]] = frozenset()

    @model_validator(mode='after')
    def _reject_explicit_nulls(self):
        nulled = sorted(f for f in self.model_fields_set & self.required_fields if getattr(self, f) is None)
        if nulled:
            raise ValueError(f"{', '.join(nulled)} cannot be null")
        return self
