"""
Alert and notification repository functions.
"""
from __future__ import annotations

from sqlalchemy import desc
from sqlalchemy.orm import Session

from crisis_alert.db import models, schemas


def create_alert(db: Session, alert: schemas.AlertCreate):
    db_alert = models.Alert(**alert.model_dump())
    db.add(db_alert)
    db.commit()
    db.refresh(db_alert)
    return db_alert


def get_alert(db: Session, alert_id: str):
    return db.query(models.Alert).filter(models.Alert.id == alert_id).first()


def get_alerts(db: Session):
    return db.query(models.Alert).order_by(models.Alert.created_at).all()


def update_alert(db: Session, alert_id: str, alert: schemas.AlertUpdate):
    db_alert = get_alert(db, alert_id)
    if db_alert:
        for key, value in alert.model_dump(exclude_unset=True).items():
            setattr(db_alert, key, value)
        db.commit()
        db.refresh(db_alert)
    return db_alert


# Notifications
def create_notification(db: Session, notification: schemas.NotificationCreate):
    db_notification = models.Notification(**notification.model_dump())
    db.add(db_notification)
    db.commit()
    db.refresh(db_notification)
    return db_notification


def get_notifications(db: Session, user_id: str):
    return (
        db.query(models.Notification)
        .filter(models.Notification.user_id == user_id)
        .order_by(desc(models.Notification.created_at))
        .all()
    )


def mark_notification_read(db: Session, notification_id: str) -> bool:
    notification = db.query(models.Notification).filter(models.Notification.id == notification_id).first()
    if not notification:
        return False
    if not notification.read:
        notification.read = True
        db.commit()
    return True
