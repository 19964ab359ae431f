from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict

from .common import AnalyticsPeriod, AnalyticsType, UtcDatetime


class AnalyticsCreate(BaseModel):
    type: AnalyticsType
    data: Dict[str, Any]
    period: AnalyticsPeriod


class Analytics(AnalyticsCreate):
    id: str
    created_at: UtcDatetime
    model_config = ConfigDict(from_attributes=True)


class SnapshotRequest(BaseModel):
    period: AnalyticsPeriod = 'daily'


class SnapshotResponse(BaseModel):
    period: AnalyticsPeriod
    entries: List[Analytics]
