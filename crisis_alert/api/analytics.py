"""
Analytics API endpoints (coordinators only, behind FEATURE_ANALYTICS_ENABLED).
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status

from crisis_alert.api.deps import get_current_user_context, require_permission, to_http_exception
from crisis_alert.db import schemas
from crisis_alert.services.analytics_service import AnalyticsService
from crisis_alert.utils.feature_flags import analytics_enabled
from crisis_alert.utils.roles import PERM_VIEW_ANALYTICS

router = APIRouter(prefix="/analytics", tags=["analytics"])


def _ensure_enabled() -> None:
    if not analytics_enabled():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Analytics are disabled")


@router.get("", response_model=List[schemas.Analytics])
def list_analytics(
    type: Optional[schemas.AnalyticsType] = None,
    period: Optional[schemas.AnalyticsPeriod] = None,
    user_context=Depends(get_current_user_context),
):
    _ensure_enabled()
    user, _ctx = user_context
    require_permission(user, PERM_VIEW_ANALYTICS, detail="Only coordinators can view analytics")
    return AnalyticsService().list_analytics(analytics_type=type, period=period)


@router.post("/snapshot", response_model=schemas.SnapshotResponse, status_code=status.HTTP_201_CREATED)
def create_snapshot(
    payload: Optional[schemas.SnapshotRequest] = None,
    user_context=Depends(get_current_user_context),
):
    """Compute and store incident patterns, response times and resource utilization for a period."""
    _ensure_enabled()
    user, _ctx = user_context
    require_permission(user, PERM_VIEW_ANALYTICS, detail="Only coordinators can generate analytics")
    period = (payload or schemas.SnapshotRequest()).period
    try:
        return AnalyticsService().generate_snapshot(period, actor_user_id=user.id)
    except ValueError as e:
        raise to_http_exception(e)
