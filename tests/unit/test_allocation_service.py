import pytest

from crisis_alert.db import schemas
from crisis_alert.services.allocation_service import AllocationConflict, AllocationService
from crisis_alert.storage import MemStorage


def _user(storage, user_id):
    return schemas.User.model_validate(storage.get_user(user_id).model_dump(exclude={"password"}))


@pytest.fixture
def mem():
    return MemStorage()


@pytest.fixture
def service(mem):
    return AllocationService(storage=mem)


def test_allocate_decrements_available(service, mem):
    coordinator = _user(mem, "2")
    allocation = service.allocate(
        coordinator, schemas.AllocationRequest(resource_id="2", incident_id="1", quantity=2)
    )
    assert allocation.status == "allocated"
    assert allocation.allocated_by == "2"
    resource = mem.get_resource("2")
    assert resource.available == 3
    assert resource.status == "available"


def test_allocating_last_unit_marks_deployed(service, mem):
    service.allocate(_user(mem, "2"), schemas.AllocationRequest(resource_id="1", incident_id="1"))
    resource = mem.get_resource("1")
    assert resource.available == 0
    assert resource.status == "deployed"


def test_over_allocation_conflicts_and_leaves_stock(service, mem):
    with pytest.raises(AllocationConflict):
        service.allocate(
            _user(mem, "2"), schemas.AllocationRequest(resource_id="2", incident_id="1", quantity=6)
        )
    assert mem.get_resource("2").available == 5
    assert service.list_allocations() == []


def test_zero_quantity_conflicts(service, mem):
    with pytest.raises(AllocationConflict):
        service.allocate(
            _user(mem, "2"), schemas.AllocationRequest(resource_id="2", incident_id="1", quantity=0)
        )


def test_maintenance_resource_conflicts(service, mem):
    mem.update_resource("2", schemas.ResourceUpdate(status="maintenance"))
    with pytest.raises(AllocationConflict):
        service.allocate(_user(mem, "2"), schemas.AllocationRequest(resource_id="2", incident_id="1"))


def test_missing_resource_or_incident(service, mem):
    coordinator = _user(mem, "2")
    with pytest.raises(LookupError):
        service.allocate(coordinator, schemas.AllocationRequest(resource_id="nope", incident_id="1"))
    with pytest.raises(LookupError):
        service.allocate(coordinator, schemas.AllocationRequest(resource_id="2", incident_id="nope"))


def test_citizen_cannot_allocate(service, mem):
    with pytest.raises(PermissionError):
        service.allocate(_user(mem, "1"), schemas.AllocationRequest(resource_id="1", incident_id="1"))


def test_agency_scoped_to_own_organization(service, mem):
    agency = _user(mem, "3")
    allocation = service.allocate(agency, schemas.AllocationRequest(resource_id="1", incident_id="1"))
    assert allocation.resource_id == "1"
    with pytest.raises(PermissionError):
        service.allocate(agency, schemas.AllocationRequest(resource_id="2", incident_id="1"))


def test_return_restores_availability(service, mem):
    coordinator = _user(mem, "2")
    allocation = service.allocate(coordinator, schemas.AllocationRequest(resource_id="1", incident_id="1"))

    returned = service.return_allocation(coordinator, allocation.id)
    assert returned.status == "returned"
    assert returned.returned_at is not None
    resource = mem.get_resource("1")
    assert resource.available == 1
    assert resource.status == "available"

    with pytest.raises(AllocationConflict):
        service.return_allocation(coordinator, allocation.id)


def test_return_never_exceeds_quantity(service, mem):
    coordinator = _user(mem, "2")
    allocation = service.allocate(
        coordinator, schemas.AllocationRequest(resource_id="2", incident_id="1", quantity=2)
    )
    # stock was topped up out of band
    mem.update_resource("2", schemas.ResourceUpdate(available=5))
    service.return_allocation(coordinator, allocation.id)
    assert mem.get_resource("2").available == 5


def test_update_allocation_is_bookkeeping_only(service, mem):
    coordinator = _user(mem, "2")
    allocation = service.allocate(coordinator, schemas.AllocationRequest(resource_id="2", incident_id="1"))

    lost = service.update_allocation(coordinator, allocation.id, schemas.AllocationUpdate(status="lost"))
    assert lost.status == "lost"
    assert mem.get_resource("2").available == 4

    with pytest.raises(LookupError):
        service.update_allocation(coordinator, "missing", schemas.AllocationUpdate(status="lost"))


def test_settled_allocations_never_reopen(service, mem):
    coordinator = _user(mem, "2")
    allocation = service.allocate(
        coordinator, schemas.AllocationRequest(resource_id="2", incident_id="1", quantity=2)
    )
    service.return_allocation(coordinator, allocation.id)

    for status in ("allocated", "lost", "returned"):
        with pytest.raises(AllocationConflict):
            service.update_allocation(coordinator, allocation.id, schemas.AllocationUpdate(status=status))
    assert mem.get_resource_allocation(allocation.id).status == "returned"
    assert mem.get_resource("2").available == 5


def test_update_allocation_only_writes_off_outstanding_units(service, mem):
    coordinator = _user(mem, "2")
    allocation = service.allocate(
        coordinator, schemas.AllocationRequest(resource_id="2", incident_id="1", quantity=3)
    )
    for status in ("allocated", "returned"):
        with pytest.raises(AllocationConflict):
            service.update_allocation(coordinator, allocation.id, schemas.AllocationUpdate(status=status))

    service.update_allocation(coordinator, allocation.id, schemas.AllocationUpdate(status="lost"))
    with pytest.raises(AllocationConflict):
        service.return_allocation(coordinator, allocation.id)

    resource = mem.get_resource("2")
    outstanding = sum(
        a.quantity for a in service.list_allocations(resource_id="2") if a.status == "allocated"
    )
    assert resource.available == 2
    assert resource.available + outstanding <= resource.quantity


def test_list_allocations_filters(service, mem):
    coordinator = _user(mem, "2")
    service.allocate(coordinator, schemas.AllocationRequest(resource_id="2", incident_id="1"))
    service.allocate(coordinator, schemas.AllocationRequest(resource_id="2", incident_id="2"))
    assert len(service.list_allocations()) == 2
    assert len(service.list_allocations(incident_id="2")) == 1
    assert service.list_allocations(resource_id="1") == []
