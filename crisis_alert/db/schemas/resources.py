from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import AllocationStatus, Location, PartialUpdate, ResourceStatus, ResourceType, UtcDatetime


class ResourceBase(BaseModel):
    name: str
    type: ResourceType
    category: str
    quantity: int = Field(ge=0)
    available: int = Field(ge=0)
    location: Optional[Location] = None
    status: ResourceStatus = 'available'
    organization: str
    description: Optional[str] = None


class ResourceCreate(ResourceBase):
    pass


class ResourceUpdate(PartialUpdate):
    required_fields = frozenset({'name', 'type', 'category', 'quantity', 'available', 'status', 'organization'})

    name: Optional[str] = None
    type: Optional[ResourceType] = None
    category: Optional[str] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    available: Optional[int] = Field(default=None, ge=0)
    location: Optional[Location] = None
    status: Optional[ResourceStatus] = None
    organization: Optional[str] = None
    description: Optional[str] = None


class Resource(ResourceBase):
    id: str
    created_at: Optional[UtcDatetime] = None
    updated_at: Optional[UtcDatetime] = None
    model_config = ConfigDict(from_attributes=True)


class ResourceAllocationBase(BaseModel):
    resource_id: str
    incident_id: str
    quantity: int = Field(ge=1)
    allocated_by: str
    status: AllocationStatus = 'allocated'


class ResourceAllocationCreate(ResourceAllocationBase):
    pass


class AllocationRequest(BaseModel):
    resource_id: str
    incident_id: str
    quantity: int = 1


class ResourceAllocationUpdate(PartialUpdate):
    """Storage-level allocation change; the return path is the only writer of ``returned_at``."""
    required_fields = frozenset({'status'})

    status: Optional[AllocationStatus] = None
    returned_at: Optional[UtcDatetime] = None


class AllocationUpdate(BaseModel):
    """PATCH body for an allocation: a status change only, never quantities."""
    status: AllocationStatus


class ResourceAllocation(ResourceAllocationBase):
    id: str
    allocated_at: Optional[UtcDatetime] = None
    returned_at: Optional[UtcDatetime] = None
    model_config = ConfigDict(from_attributes=True)
