import pytest

from crisis_alert.db import schemas
from crisis_alert.services.incident_service import (
    IncidentService,
    incident_matches_agency,
    parse_status_filter,
)
from crisis_alert.storage import MemStorage


def _user(storage, user_id):
    return schemas.User.model_validate(storage.get_user(user_id).model_dump(exclude={"password"}))


@pytest.fixture
def mem():
    return MemStorage()


@pytest.fixture
def service(mem):
    return IncidentService(storage=mem)


def _report(service, user, **overrides):
    data = {
        "title": "Overflowing bins",
        "description": "Bins on Elm St not collected for a week",
        "category": "waste",
        "severity": "low",
        "location": {"lat": 40.7, "lng": -74.0, "address": "Elm St"},
    }
    data.update(overrides)
    return service.report_incident(user, schemas.IncidentReport(**data))


def test_parse_status_filter():
    assert parse_status_filter(None) is None
    assert parse_status_filter("") is None
    assert parse_status_filter(" , ") is None
    assert parse_status_filter("reported, in-progress") == ["reported", "in-progress"]


def test_report_forces_reporter_and_status(service, mem):
    citizen = _user(mem, "1")
    incident = _report(service, citizen)
    assert incident.status == "reported"
    assert incident.reported_by == "1"
    assert incident.assigned_to is None
    assert mem.get_incident(incident.id) is not None


def test_list_filters(service, mem):
    _report(service, _user(mem, "3"), category="waste")
    assert {i.id for i in service.list_incidents(statuses=["reported"])} >= {"2"}
    assert all(i.category == "waste" for i in service.list_incidents(category="waste"))
    assert [i.id for i in service.list_incidents(reported_by="3")]
    assert service.list_incidents(statuses=["resolved"]) == []


def test_get_missing_incident_raises_lookup(service):
    with pytest.raises(LookupError):
        service.get_incident("missing")


def test_reporter_can_edit_description_while_reported(service, mem):
    citizen = _user(mem, "1")
    updated = service.update_incident(citizen, "2", schemas.IncidentUpdate(description="Water rising"))
    assert updated.description == "Water rising"


def test_reporter_cannot_change_status(service, mem):
    with pytest.raises(PermissionError):
        service.update_incident(_user(mem, "1"), "2", schemas.IncidentUpdate(status="resolved"))


def test_reporter_cannot_edit_after_triage(service, mem):
    # incident 1 is already in progress
    with pytest.raises(PermissionError):
        service.update_incident(_user(mem, "1"), "1", schemas.IncidentUpdate(title="Changed"))


def test_assigned_agency_may_only_change_status(service, mem):
    agency = _user(mem, "3")
    updated = service.update_incident(agency, "1", schemas.IncidentUpdate(status="resolved"))
    assert updated.status == "resolved"
    assert updated.resolved_at is not None

    with pytest.raises(PermissionError):
        service.update_incident(agency, "1", schemas.IncidentUpdate(priority="low"))


def test_unassigned_agency_cannot_update(service, mem):
    with pytest.raises(PermissionError):
        service.update_incident(_user(mem, "3"), "2", schemas.IncidentUpdate(status="in-progress"))


def test_coordinator_update_notifies_reporter_and_assignee(service, mem):
    coordinator = _user(mem, "2")
    service.update_incident(coordinator, "1", schemas.IncidentUpdate(status="resolved"))

    for user_id in ("1", "3"):
        notes = mem.get_notifications(user_id)
        assert len(notes) == 1
        assert notes[0].type == "incident_status"
        assert notes[0].data["previous_status"] == "in-progress"
    assert mem.get_notifications("2") == []


def test_empty_update_is_a_no_op(service, mem):
    current = mem.get_incident("2")
    assert service.update_incident(_user(mem, "1"), "2", schemas.IncidentUpdate()) == current


def test_agency_self_assign_acknowledges(service, mem):
    agency = _user(mem, "3")
    updated = service.assign_incident(agency, "2", schemas.IncidentAssign())
    assert updated.assigned_to == "3"
    assert updated.status == "acknowledged"
    # reporter hears about the status change
    assert [n.type for n in mem.get_notifications("1")] == ["incident_status"]


def test_agency_cannot_assign_someone_else(service, mem):
    with pytest.raises(PermissionError):
        service.assign_incident(_user(mem, "3"), "2", schemas.IncidentAssign(assigned_to="2"))


def test_citizen_cannot_assign(service, mem):
    with pytest.raises(PermissionError):
        service.assign_incident(_user(mem, "1"), "2", schemas.IncidentAssign())


def test_coordinator_reassign_notifies_new_assignee(service, mem):
    coordinator = _user(mem, "2")
    updated = service.assign_incident(coordinator, "2", schemas.IncidentAssign(assigned_to="1"))
    assert updated.assigned_to == "1"

    updated = service.assign_incident(coordinator, "2", schemas.IncidentAssign(assigned_to="3"))
    assert updated.assigned_to == "3"
    # already acknowledged, so the status stays put
    assert updated.status == "acknowledged"
    assert any(n.type == "incident_assigned" for n in mem.get_notifications("3"))


def test_coordinator_assign_defaults_to_self(service, mem):
    updated = service.assign_incident(_user(mem, "2"), "2", schemas.IncidentAssign())
    assert updated.assigned_to == "2"


def test_assign_unknown_assignee(service, mem):
    with pytest.raises(LookupError):
        service.assign_incident(_user(mem, "2"), "2", schemas.IncidentAssign(assigned_to="nobody"))


def test_assign_resolved_incident_rejected(service, mem):
    coordinator = _user(mem, "2")
    service.update_incident(coordinator, "2", schemas.IncidentUpdate(status="resolved"))
    with pytest.raises(ValueError):
        service.assign_incident(coordinator, "2", schemas.IncidentAssign())


def test_agency_org_matching(service, mem):
    agency = _user(mem, "3")
    incident = mem.get_incident("2").model_copy(update={"assigned_to": "1"})
    # resource "1" belongs to the Fire Department
    assert incident_matches_agency(incident, agency, org_resource_ids=["1"])
    assert not incident_matches_agency(incident, agency, org_user_ids=["3"])
    unassigned = incident.model_copy(update={"assigned_to": None})
    assert not incident_matches_agency(unassigned, agency, ["3"], ["1"])


def test_delete_rules(service, mem):
    citizen = _user(mem, "1")
    with pytest.raises(PermissionError):
        service.delete_incident(citizen, "1")
    with pytest.raises(PermissionError):
        service.delete_incident(_user(mem, "3"), "2")

    service.delete_incident(citizen, "2")
    assert mem.get_incident("2") is None

    service.delete_incident(_user(mem, "2"), "1")
    with pytest.raises(LookupError):
        service.delete_incident(_user(mem, "2"), "1")
