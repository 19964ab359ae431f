from typing import List, Optional

from pydantic import BaseModel

from .alerts import Alert
from .incidents import Incident
from .resources import Resource


class ChartDatum(BaseModel):
    name: str
    value: int
    color: Optional[str] = None


class CitizenDashboard(BaseModel):
    my_incidents: List[Incident]
    active_incidents: int
    alert_count: int
    alerts: List[Alert]


class CoordinatorStats(BaseModel):
    total_incidents: int
    active_incidents: int
    resolved_incidents: int
    available_resources: int


class CoordinatorDashboard(BaseModel):
    incidents: List[Incident]
    stats: CoordinatorStats
    category_data: List[ChartDatum]
    status_data: List[ChartDatum]
    priority_data: List[ChartDatum]
    response_time_data: List[ChartDatum]
    resources: List[Resource]
    alerts: List[Alert]


class AgencyStats(BaseModel):
    assigned_incidents: int
    available_resources: int
    deployed_resources: int


class AgencyDashboard(BaseModel):
    organization: Optional[str]
    assigned_incidents: List[Incident]
    available_incidents: List[Incident]
    resources: List[Resource]
    stats: AgencyStats
