from sqlalchemy import Column, String, DateTime, Index

from .base import Base, JsonColumn, now_utc, new_id


class AnalyticsEntry(Base):
    __tablename__ = 'analytics'
    id = Column(String(36), primary_key=True, default=new_id)
    # response_time, resource_utilization, incident_patterns
    type = Column(String(50), nullable=False)
    data = Column(JsonColumn, nullable=False)
    # daily, weekly, monthly
    period = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), default=now_utc)

    __table_args__ = (
        Index('idx_analytics_type_period', 'type', 'period'),
    )
