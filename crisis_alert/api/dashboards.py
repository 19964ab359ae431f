"""
Role-keyed dashboard endpoints.

Each view is restricted to its role; ``authority`` callers are stored as
coordinators and use the coordinator view.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from crisis_alert.api.deps import get_current_user_context
from crisis_alert.db import schemas
from crisis_alert.services.dashboard_service import DashboardService
from crisis_alert.services.incident_service import parse_status_filter
from crisis_alert.utils.roles import ROLE_AGENCY, ROLE_COORDINATOR

router = APIRouter(prefix="/dashboard", tags=["dashboards"])


def _require_role(user: schemas.User, role: str) -> None:
    if user.role != role:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"The {role} dashboard is not available to {user.role} accounts",
        )


@router.get("/citizen", response_model=schemas.CitizenDashboard)
def citizen_dashboard(user_context=Depends(get_current_user_context)):
    # every role can see its own reports
    user, _ctx = user_context
    return DashboardService().citizen(user)


@router.get("/coordinator", response_model=schemas.CoordinatorDashboard)
def coordinator_dashboard(
    status: Optional[str] = None,
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    _require_role(user, ROLE_COORDINATOR)
    return DashboardService().coordinator(parse_status_filter(status))


@router.get("/agency", response_model=schemas.AgencyDashboard)
def agency_dashboard(
    status: Optional[str] = None,
    user_context=Depends(get_current_user_context),
):
    user, _ctx = user_context
    _require_role(user, ROLE_AGENCY)
    return DashboardService().agency(user, parse_status_filter(status))
