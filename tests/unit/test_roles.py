import pytest

from crisis_alert.utils.roles import (
    PERM_ALLOCATE_RESOURCES,
    PERM_BROADCAST_ALERTS,
    PERM_MANAGE_INCIDENTS,
    PERM_REPORT_INCIDENT,
    PERM_VIEW_ANALYTICS,
    PERM_WORK_ASSIGNED_INCIDENTS,
    dashboard_route,
    get_role_permissions,
    normalize_role,
    role_allows,
    validate_role,
)


def test_every_role_can_report():
    for role in ("citizen", "coordinator", "agency"):
        assert role_allows(role, PERM_REPORT_INCIDENT)


@pytest.mark.parametrize(
    "role,permission,expected",
    [
        ("citizen", PERM_MANAGE_INCIDENTS, False),
        ("citizen", PERM_ALLOCATE_RESOURCES, False),
        ("agency", PERM_WORK_ASSIGNED_INCIDENTS, True),
        ("agency", PERM_ALLOCATE_RESOURCES, True),
        ("agency", PERM_BROADCAST_ALERTS, False),
        ("agency", PERM_VIEW_ANALYTICS, False),
        ("coordinator", PERM_BROADCAST_ALERTS, True),
        ("coordinator", PERM_VIEW_ANALYTICS, True),
    ],
)
def test_permission_matrix(role, permission, expected):
    assert role_allows(role, permission) is expected


def test_authority_alias_maps_to_coordinator():
    assert normalize_role(" Authority ") == "coordinator"
    assert validate_role("authority") == "coordinator"
    assert role_allows("authority", PERM_MANAGE_INCIDENTS)
    assert dashboard_route("authority") == "/coordinator"


def test_validate_role_rejects_unknown():
    with pytest.raises(ValueError):
        validate_role("admin")


def test_unknown_role_has_no_permissions():
    perms = get_role_permissions("admin")
    assert perms and not any(perms.values())
    assert role_allows("admin", "no_such_permission") is False


def test_permission_maps_are_copies():
    perms = get_role_permissions("citizen")
    perms[PERM_MANAGE_INCIDENTS] = True
    assert role_allows("citizen", PERM_MANAGE_INCIDENTS) is False


def test_dashboard_routes():
    assert dashboard_route("citizen") == "/citizen"
    assert dashboard_route("coordinator") == "/coordinator"
    assert dashboard_route("agency") == "/agency"
    assert dashboard_route("unknown") == "/citizen"
