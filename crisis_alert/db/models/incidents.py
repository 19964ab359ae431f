from sqlalchemy import Column, String, Text, DateTime, Index

from .base import Base, JsonColumn, now_utc, new_id


class Incident(Base):
    __tablename__ = 'incidents'
    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    # fire, flood, medical, security, environmental, waste, other
    category = Column(String(50), nullable=False)
    severity = Column(String(20), nullable=False)
    priority = Column(String(20), nullable=False, default='medium')
    # reported -> acknowledged -> in-progress -> resolved
    status = Column(String(20), nullable=False, default='reported')
    # {"lat": float, "lng": float, "address": str | None}
    location = Column(JsonColumn, nullable=False)
    reported_by = Column(String(36), nullable=False)
    assigned_to = Column(String(36), nullable=True)
    images = Column(JsonColumn, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)
    resolved_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index('idx_incidents_status', 'status'),
        Index('idx_incidents_reported_by', 'reported_by'),
        Index('idx_incidents_assigned_to', 'assigned_to'),
    )
