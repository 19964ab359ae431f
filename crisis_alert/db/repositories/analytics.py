"""
Analytics repository functions.
"""
from __future__ import annotations

from typing import Optional
from sqlalchemy.orm import Session

from crisis_alert.db import models, schemas


def create_analytics_entry(db: Session, entry: schemas.AnalyticsCreate):
    db_entry = models.AnalyticsEntry(**entry.model_dump())
    db.add(db_entry)
    db.commit()
    db.refresh(db_entry)
    return db_entry


def get_analytics(db: Session, analytics_type: Optional[str] = None, period: Optional[str] = None):
    q = db.query(models.AnalyticsEntry)
    if analytics_type:
        q = q.filter(models.AnalyticsEntry.type == analytics_type)
    if period:
        q = q.filter(models.AnalyticsEntry.period == period)
    return q.order_by(models.AnalyticsEntry.created_at).all()
