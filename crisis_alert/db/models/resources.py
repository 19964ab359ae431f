from sqlalchemy import Column, String, Text, DateTime, Integer, Index

from .base import Base, JsonColumn, now_utc, new_id


class Resource(Base):
    __tablename__ = 'resources'
    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(Text, nullable=False)
    # personnel, vehicle, equipment, supplies
    type = Column(String(20), nullable=False)
    category = Column(String(50), nullable=False)
    quantity = Column(Integer, nullable=False)
    available = Column(Integer, nullable=False)
    location = Column(JsonColumn, nullable=True)
    # available, deployed, maintenance
    status = Column(String(20), nullable=False, default='available')
    organization = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    __table_args__ = (
        Index('idx_resources_organization', 'organization'),
    )


class ResourceAllocation(Base):
    __tablename__ = 'resource_allocations'
    id = Column(String(36), primary_key=True, default=new_id)
    resource_id = Column(String(36), nullable=False)
    incident_id = Column(String(36), nullable=False)
    quantity = Column(Integer, nullable=False)
    allocated_by = Column(String(36), nullable=False)
    allocated_at = Column(DateTime(timezone=True), default=now_utc)
    returned_at = Column(DateTime(timezone=True), nullable=True)
    # allocated, returned, lost
    status = Column(String(20), nullable=False, default='allocated')

    __table_args__ = (
        Index('idx_resource_allocations_resource_id', 'resource_id'),
        Index('idx_resource_allocations_incident_id', 'incident_id'),
    )
