from sqlalchemy import Column, String, Text, DateTime

from .base import Base, JsonColumn, now_utc, new_id


class Alert(Base):
    __tablename__ = 'alerts'
    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    # emergency, warning, info
    type = Column(String(20), nullable=False)
    priority = Column(String(20), nullable=False)
    # role names and/or user ids
    target_users = Column(JsonColumn, nullable=True)
    incident_id = Column(String(36), nullable=True)
    location = Column(JsonColumn, nullable=True)
    created_by = Column(String(36), nullable=False)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    expires_at = Column(DateTime(timezone=True), nullable=True)
