from sqlalchemy import Column, String, Text, DateTime, Boolean, Index

from .base import Base, JsonColumn, now_utc, new_id


class Notification(Base):
    __tablename__ = 'notifications'

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=False)
    title = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(50), nullable=False)
    read = Column(Boolean, default=False)
    # extra payload such as the incident or alert id
    data = Column(JsonColumn, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)

    __table_args__ = (
        Index('idx_notifications_user_id_created_at', 'user_id', 'created_at'),
    )
