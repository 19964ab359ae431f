"""
Role-based permission utilities.

A single matrix maps each user role to the dashboard capabilities it unlocks,
so routers and services can ask ``role_allows(role, permission)`` instead of
hard-coding role names.
"""

from typing import Dict, FrozenSet


# Central role constants to ensure consistency across the codebase
ROLE_CITIZEN = "citizen"
ROLE_COORDINATOR = "coordinator"
ROLE_AGENCY = "agency"
# Legacy name used by the first authority dashboard
ROLE_AUTHORITY_ALIAS = "authority"

PERM_REPORT_INCIDENT = "report_incident"
PERM_MANAGE_INCIDENTS = "manage_incidents"
PERM_WORK_ASSIGNED_INCIDENTS = "work_assigned_incidents"
PERM_MANAGE_RESOURCES = "manage_resources"
PERM_ALLOCATE_RESOURCES = "allocate_resources"
PERM_BROADCAST_ALERTS = "broadcast_alerts"
PERM_VIEW_ANALYTICS = "view_analytics"

ROLE_PERMISSIONS: Dict[str, Dict[str, bool]] = {
    ROLE_CITIZEN: {
        PERM_REPORT_INCIDENT: True,
        PERM_MANAGE_INCIDENTS: False,
        PERM_WORK_ASSIGNED_INCIDENTS: False,
        PERM_MANAGE_RESOURCES: False,
        PERM_ALLOCATE_RESOURCES: False,
        PERM_BROADCAST_ALERTS: False,
        PERM_VIEW_ANALYTICS: False,
    },
    ROLE_COORDINATOR: {
        PERM_REPORT_INCIDENT: True,
        PERM_MANAGE_INCIDENTS: True,
        PERM_WORK_ASSIGNED_INCIDENTS: True,
        PERM_MANAGE_RESOURCES: True,
        PERM_ALLOCATE_RESOURCES: True,
        PERM_BROADCAST_ALERTS: True,
        PERM_VIEW_ANALYTICS: True,
    },
    ROLE_AGENCY: {
        PERM_REPORT_INCIDENT: True,
        PERM_MANAGE_INCIDENTS: False,
        PERM_WORK_ASSIGNED_INCIDENTS: True,
        PERM_MANAGE_RESOURCES: False,
        PERM_ALLOCATE_RESOURCES: True,
        PERM_BROADCAST_ALERTS: False,
        PERM_VIEW_ANALYTICS: False,
    },
}

ALLOWED_ROLES = set(ROLE_PERMISSIONS.keys())

# Roles whose dashboards act on incidents beyond their own reports
RESPONDER_ROLES: FrozenSet[str] = frozenset({ROLE_COORDINATOR, ROLE_AGENCY})

DASHBOARD_ROUTES: Dict[str, str] = {
    ROLE_CITIZEN: "/citizen",
    ROLE_COORDINATOR: "/coordinator",
    ROLE_AGENCY: "/agency",
}


def normalize_role(role: str) -> str:
    """Lower-case ``role`` and fold the legacy authority alias onto coordinator."""
    value = (role or "").strip().lower()
    if value == ROLE_AUTHORITY_ALIAS:
        return ROLE_COORDINATOR
    return value


def validate_role(role: str) -> str:
    """
    Validate that a role is allowed and return its canonical name.

    Raises:
        ValueError: If role is not allowed
    """
    value = normalize_role(role)
    if value not in ALLOWED_ROLES:
        raise ValueError(f"Invalid role '{role}'. Allowed roles: {sorted(ALLOWED_ROLES)}")
    return value


def get_role_permissions(role: str) -> Dict[str, bool]:
    """Return a copy of the permission map for ``role`` (all False when unknown)."""
    base = ROLE_PERMISSIONS.get(normalize_role(role))
    if base is None:
        return {perm: False for perm in ROLE_PERMISSIONS[ROLE_CITIZEN]}
    return dict(base)


def role_allows(role: str, permission: str) -> bool:
    """Return True if the role grants ``permission``."""
    return bool(get_role_permissions(role).get(permission, False))


def dashboard_route(role: str) -> str:
    return DASHBOARD_ROUTES.get(normalize_role(role), DASHBOARD_ROUTES[ROLE_CITIZEN])
