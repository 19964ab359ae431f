"""
Incident repository functions.

Status bookkeeping lives here: every update refreshes ``updated_at`` and a
transition to ``resolved`` stamps ``resolved_at``.
"""
from __future__ import annotations

from sqlalchemy.orm import Session

from crisis_alert.db import models, schemas


def create_incident(db: Session, incident: schemas.IncidentCreate):
    data = incident.model_dump()
    db_incident = models.Incident(**data)
    db.add(db_incident)
    db.commit()
    db.refresh(db_incident)
    return db_incident


def get_incident(db: Session, incident_id: str):
    return db.query(models.Incident).filter(models.Incident.id == incident_id).first()


def get_incidents(db: Session):
    return db.query(models.Incident).order_by(models.Incident.created_at).all()


def update_incident(db: Session, incident_id: str, incident: schemas.IncidentUpdate):
    db_incident = get_incident(db, incident_id)
    if db_incident:
        updates = incident.model_dump(exclude_unset=True)
        for key, value in updates.items():
            setattr(db_incident, key, value)
        now = models.now_utc()
        db_incident.updated_at = now
        if updates.get('status') == 'resolved':
            db_incident.resolved_at = now
        db.commit()
        db.refresh(db_incident)
    return db_incident


def delete_incident(db: Session, incident_id: str) -> bool:
    """Delete an incident with proper error handling."""
    try:
        db_incident = get_incident(db, incident_id)
        if not db_incident:
            return False
        db.delete(db_incident)
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        raise RuntimeError(f"Failed to delete incident {incident_id}: {str(e)}")
